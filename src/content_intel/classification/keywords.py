"""
Keyword tables for subject, topic and chapter classification.

Each table maps category names to keyword/phrase lists in a fixed
declaration order. Declaration order is the tie-break: when two
categories share the best score, the one declared first wins.

Tables are immutable and handed to the Classifier at construction;
a YAML file can replace any of the built-in tables.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from content_intel.core.exceptions import ConfigurationError
from content_intel.utils.logging import get_logger

logger = get_logger(__name__)

SUBJECT_FALLBACK = "General"
TOPIC_FALLBACK = "Miscellaneous"
CHAPTER_FALLBACK = "General"


@dataclass(frozen=True)
class KeywordCategory:
    """A category name with its ordered keywords."""

    name: str
    keywords: tuple[str, ...]


@dataclass(frozen=True)
class KeywordTable:
    """
    Ordered set of categories with a fallback value.

    Attributes:
        name: Table name ("subject", "topic" or "chapter")
        fallback: Value used when no category reaches the threshold
        categories: Categories in declaration order
    """

    name: str
    fallback: str
    categories: tuple[KeywordCategory, ...]

    @classmethod
    def from_mapping(
        cls,
        name: str,
        fallback: str,
        mapping: Mapping[str, Any],
    ) -> "KeywordTable":
        """
        Build a table from a ``{category: [keywords]}`` mapping.

        Mapping iteration order becomes declaration order.

        Raises:
            ConfigurationError: If a category has no keyword list
        """
        categories = []
        for category, keywords in mapping.items():
            if isinstance(keywords, str) or not isinstance(keywords, (list, tuple)):
                raise ConfigurationError(
                    f"Keywords for {name} category {category!r} must be a list",
                    details={"table": name, "category": category},
                )
            cleaned = tuple(
                str(keyword).strip().lower()
                for keyword in keywords
                if str(keyword).strip()
            )
            categories.append(KeywordCategory(name=str(category), keywords=cleaned))
        return cls(name=name, fallback=fallback, categories=tuple(categories))

    @property
    def category_names(self) -> tuple[str, ...]:
        return tuple(category.name for category in self.categories)

    @property
    def allowed_values(self) -> frozenset[str]:
        """Every value a classification can take for this table."""
        return frozenset(self.category_names) | {self.fallback}


@dataclass(frozen=True)
class KeywordTables:
    """The three classification tables."""

    subject: KeywordTable
    topic: KeywordTable
    chapter: KeywordTable


SUBJECT_KEYWORDS: dict[str, list[str]] = {
    "Web Development": [
        "html", "css", "javascript", "react", "vue", "angular", "node", "nodejs",
        "express", "frontend", "backend", "fullstack", "web", "dom", "api", "rest",
        "graphql", "webpack", "npm", "yarn", "typescript", "sass", "less", "bootstrap",
        "tailwind", "jquery", "ajax", "json", "xml", "http", "https", "cors", "cookie",
        "session", "jwt", "oauth", "responsive", "mobile-first", "pwa", "spa", "ssr",
        "nextjs", "next.js", "nuxt", "gatsby", "svelte", "ember", "backbone", "redux",
        "zustand", "mobx", "context api", "hooks", "component", "props", "state",
    ],
    "Artificial Intelligence": [
        "artificial intelligence", "ai", "machine learning", "ml", "deep learning",
        "neural network", "nlp", "natural language", "computer vision", "robotics",
        "chatbot", "gpt", "llm", "large language model", "transformer", "bert",
        "attention mechanism", "reinforcement learning", "supervised", "unsupervised",
        "classification", "regression", "clustering", "generative", "discriminative",
        "gan", "vae", "autoencoder", "embedding", "token", "prompt", "fine-tuning",
        "rag", "retrieval", "inference", "training", "model", "weights", "bias",
    ],
    "Machine Learning": [
        "machine learning", "ml", "sklearn", "scikit-learn", "tensorflow", "pytorch",
        "keras", "xgboost", "lightgbm", "random forest", "decision tree", "svm",
        "support vector", "naive bayes", "knn", "k-nearest", "linear regression",
        "logistic regression", "gradient descent", "backpropagation", "epoch",
        "batch", "loss function", "optimizer", "adam", "sgd", "overfitting",
        "underfitting", "regularization", "dropout", "cross-validation", "accuracy",
        "precision", "recall", "f1", "roc", "auc", "confusion matrix", "feature",
        "label", "dataset", "train", "test", "validation", "hyperparameter",
    ],
    "Deep Learning": [
        "deep learning", "neural network", "cnn", "convolutional", "rnn", "recurrent",
        "lstm", "gru", "transformer", "attention", "self-attention", "multi-head",
        "encoder", "decoder", "seq2seq", "resnet", "vgg", "inception", "mobilenet",
        "yolo", "object detection", "image classification", "segmentation", "unet",
        "batch normalization", "layer normalization", "activation", "relu", "sigmoid",
        "tanh", "softmax", "pooling", "convolution", "kernel", "filter", "stride",
        "padding", "dense", "fully connected", "flatten",
    ],
    "Data Structures & Algorithms": [
        "data structure", "algorithm", "dsa", "array", "linked list", "stack", "queue",
        "tree", "binary tree", "bst", "binary search", "heap", "priority queue",
        "graph", "hash", "hashmap", "hashtable", "set", "map", "sorting", "searching",
        "bfs", "dfs", "breadth first", "depth first", "dijkstra", "bellman", "floyd",
        "dynamic programming", "dp", "recursion", "memoization", "tabulation",
        "greedy", "backtracking", "divide and conquer", "merge sort", "quick sort",
        "bubble sort", "insertion sort", "selection sort", "heap sort", "radix sort",
        "time complexity", "space complexity", "big o", "o(n)", "o(log n)", "o(n^2)",
        "trie", "segment tree", "fenwick", "union find", "disjoint set", "topological",
    ],
    "Cybersecurity": [
        "security", "cybersecurity", "cyber security", "hacking", "ethical hacking",
        "penetration", "pentest", "vulnerability", "exploit", "malware", "virus",
        "trojan", "ransomware", "phishing", "social engineering", "encryption",
        "decryption", "cryptography", "ssl", "tls", "firewall", "ids", "ips",
        "intrusion", "authentication", "authorization", "owasp", "xss", "sql injection",
        "csrf", "ddos", "dos", "brute force", "password", "hash", "salt", "token",
        "certificate", "public key", "private key", "rsa", "aes", "sha", "md5",
        "vpn", "proxy", "tor", "anonymity", "forensics", "incident response",
    ],
    "Database": [
        "database", "sql", "mysql", "postgresql", "postgres", "mongodb", "nosql",
        "redis", "elasticsearch", "sqlite", "oracle", "mssql", "query", "table",
        "schema", "index", "primary key", "foreign key", "join", "inner join",
        "outer join", "left join", "right join", "union", "group by", "having",
        "where", "select", "insert", "update", "delete", "crud", "transaction",
        "acid", "normalization", "denormalization", "orm", "prisma", "sequelize",
        "mongoose", "typeorm", "migration", "seed", "backup", "replication",
    ],
    "Cloud Computing": [
        "cloud", "aws", "amazon web services", "azure", "google cloud", "gcp",
        "docker", "kubernetes", "k8s", "container", "microservices", "serverless",
        "lambda", "ec2", "s3", "rds", "dynamodb", "cloudfront", "cdn", "load balancer",
        "auto scaling", "vpc", "subnet", "cicd", "ci/cd", "devops", "terraform",
        "ansible", "jenkins", "github actions", "gitlab ci", "deployment", "hosting",
        "iaas", "paas", "saas", "virtual machine", "vm", "instance", "cluster",
    ],
    "Python": [
        "python", "pip", "conda", "jupyter", "notebook", "pandas", "numpy", "scipy",
        "matplotlib", "seaborn", "plotly", "flask", "django", "fastapi", "celery",
        "asyncio", "decorator", "generator", "iterator", "list comprehension",
        "dictionary", "tuple", "set", "lambda", "map", "filter", "reduce", "zip",
        "enumerate", "class", "inheritance", "polymorphism", "encapsulation",
        "virtual environment", "venv", "requirements", "pypi",
    ],
    "Java": [
        "java", "jvm", "jdk", "jre", "spring", "spring boot", "hibernate", "maven",
        "gradle", "servlet", "jsp", "jdbc", "jpa", "bean", "annotation", "interface",
        "abstract", "extends", "implements", "override", "overload", "exception",
        "try catch", "finally", "throw", "throws", "collection", "arraylist",
        "linkedlist", "hashmap", "treemap", "stream", "lambda", "optional", "generics",
    ],
    "Operating Systems": [
        "operating system", "os", "linux", "unix", "windows", "macos", "kernel",
        "process", "thread", "multithreading", "concurrency", "parallelism",
        "scheduling", "memory management", "virtual memory", "paging", "segmentation",
        "file system", "inode", "ext4", "ntfs", "fat32", "shell", "bash", "terminal",
        "command line", "cli", "system call", "interrupt", "deadlock", "mutex",
        "semaphore", "race condition", "synchronization",
    ],
    "Networking": [
        "network", "networking", "tcp", "udp", "ip", "ipv4", "ipv6", "osi model",
        "layer", "protocol", "router", "switch", "hub", "gateway", "dns", "dhcp",
        "nat", "port", "socket", "packet", "frame", "mac address", "arp", "icmp",
        "ping", "traceroute", "bandwidth", "latency", "throughput", "lan", "wan",
        "wifi", "ethernet", "fiber", "5g", "http", "https", "ftp", "ssh", "telnet",
    ],
}

TOPIC_KEYWORDS: dict[str, list[str]] = {
    # Web development
    "React": [
        "react", "jsx", "hooks", "usestate", "useeffect", "usecontext", "usereducer",
        "redux", "react router", "create react app", "next.js", "nextjs",
    ],
    "Vue": [
        "vue", "vuex", "vue router", "nuxt", "composition api", "options api",
        "v-model", "v-bind", "v-if", "v-for",
    ],
    "Angular": [
        "angular", "typescript", "rxjs", "observable", "ng", "ngmodule", "component",
        "directive", "pipe", "service",
    ],
    "Node.js": [
        "node", "nodejs", "express", "npm", "yarn", "package.json", "middleware",
        "event loop", "async await",
    ],
    "CSS": [
        "css", "flexbox", "grid", "sass", "scss", "less", "tailwind", "bootstrap",
        "animation", "transition", "media query",
    ],
    "HTML": [
        "html", "html5", "semantic", "accessibility", "a11y", "form", "input",
        "canvas", "svg", "video", "audio",
    ],
    # AI / ML
    "Neural Networks": [
        "neural network", "perceptron", "mlp", "feedforward", "backpropagation",
        "activation function", "weights", "bias",
    ],
    "CNN": [
        "cnn", "convolutional", "convolution", "pooling", "kernel", "filter",
        "feature map", "image classification",
    ],
    "RNN": [
        "rnn", "recurrent", "lstm", "gru", "sequence", "time series",
        "vanishing gradient",
    ],
    "Transformers": [
        "transformer", "attention", "self-attention", "bert", "gpt",
        "encoder decoder", "positional encoding",
    ],
    "NLP": [
        "nlp", "natural language", "tokenization", "embedding", "word2vec",
        "sentiment", "ner", "named entity",
    ],
    "Computer Vision": [
        "computer vision", "image processing", "object detection", "segmentation",
        "opencv", "yolo", "resnet",
    ],
    # Data structures & algorithms
    "Arrays": [
        "array", "subarray", "sliding window", "two pointer", "prefix sum", "kadane",
    ],
    "Linked Lists": [
        "linked list", "singly linked", "doubly linked", "circular", "node",
        "pointer", "reverse linked",
    ],
    "Trees": [
        "tree", "binary tree", "bst", "avl", "red black", "b-tree", "traversal",
        "inorder", "preorder", "postorder",
    ],
    "Graphs": [
        "graph", "vertex", "edge", "adjacency", "bfs", "dfs", "dijkstra",
        "bellman ford", "floyd warshall", "mst", "prim", "kruskal",
    ],
    "Dynamic Programming": [
        "dynamic programming", "dp", "memoization", "tabulation",
        "optimal substructure", "overlapping subproblems",
    ],
    "Sorting": [
        "sorting", "sort", "merge sort", "quick sort", "heap sort", "bubble sort",
        "insertion sort", "selection sort",
    ],
    "Searching": [
        "searching", "binary search", "linear search", "interpolation search",
        "exponential search",
    ],
    "Hashing": [
        "hash", "hashmap", "hashtable", "collision", "chaining", "open addressing",
        "hash function",
    ],
    # Python
    "Python Basics": [
        "python basics", "variables", "data types", "operators", "control flow",
        "loops", "functions",
    ],
    "Pandas": [
        "pandas", "dataframe", "series", "csv", "excel", "groupby", "merge", "pivot",
    ],
    "NumPy": [
        "numpy", "array", "ndarray", "vectorization", "broadcasting", "linear algebra",
    ],
    "Django": [
        "django", "orm", "views", "templates", "urls", "models", "admin",
        "rest framework",
    ],
    "Flask": ["flask", "route", "blueprint", "jinja", "werkzeug", "sqlalchemy"],
    # Databases
    "SQL": [
        "sql", "query", "select", "join", "where", "group by", "having", "order by",
        "subquery",
    ],
    "MongoDB": [
        "mongodb", "mongoose", "document", "collection", "aggregation", "pipeline",
        "nosql",
    ],
    "PostgreSQL": [
        "postgresql", "postgres", "psql", "jsonb", "array", "window function", "cte",
    ],
    # Security
    "Web Security": [
        "xss", "csrf", "sql injection", "owasp", "sanitization", "validation", "cors",
    ],
    "Cryptography": [
        "cryptography", "encryption", "decryption", "hash", "rsa", "aes", "sha",
        "certificate",
    ],
    "Network Security": [
        "firewall", "ids", "ips", "vpn", "ssl", "tls", "https", "penetration testing",
    ],
}

CHAPTER_KEYWORDS: dict[str, list[str]] = {
    "Introduction": [
        "introduction", "intro", "getting started", "what is", "overview", "basics",
        "beginner", "fundamentals", "first steps", "hello world", "setup",
        "installation",
    ],
    "Basics": [
        "basic", "basics", "fundamental", "core", "essential", "primary",
        "elementary", "simple", "easy", "starter",
    ],
    "Intermediate": [
        "intermediate", "moderate", "medium", "practical", "hands-on", "real-world",
        "application", "implementation",
    ],
    "Advanced": [
        "advanced", "complex", "expert", "professional", "in-depth", "deep dive",
        "mastery", "senior", "sophisticated",
    ],
    "Optimization": [
        "optimization", "optimize", "performance", "efficient", "efficiency",
        "speed", "fast", "memory", "best practices", "tips", "tricks",
    ],
    "Architecture": [
        "architecture", "design pattern", "pattern", "structure", "system design",
        "scalability", "microservices", "monolith",
    ],
    "Debugging": [
        "debug", "debugging", "troubleshoot", "error", "bug", "fix", "issue",
        "problem", "solution",
    ],
    "Testing": [
        "testing", "test", "unit test", "integration", "e2e", "end-to-end", "jest",
        "mocha", "pytest", "tdd", "bdd",
    ],
    "Deployment": [
        "deployment", "deploy", "production", "hosting", "server", "ci/cd",
        "pipeline", "release",
    ],
    "Security": [
        "security", "secure", "authentication", "authorization", "vulnerability",
        "protection",
    ],
}


def default_keyword_tables() -> KeywordTables:
    """Built-in subject, topic and chapter tables."""
    return KeywordTables(
        subject=KeywordTable.from_mapping(
            "subject", SUBJECT_FALLBACK, SUBJECT_KEYWORDS),
        topic=KeywordTable.from_mapping(
            "topic", TOPIC_FALLBACK, TOPIC_KEYWORDS),
        chapter=KeywordTable.from_mapping(
            "chapter", CHAPTER_FALLBACK, CHAPTER_KEYWORDS),
    )


def load_keyword_tables(path: Path | str) -> KeywordTables:
    """
    Load keyword tables from a YAML file.

    The file holds up to three mappings, ``subjects``, ``topics`` and
    ``chapters``, each ``{category: [keywords]}``. A table missing from
    the file keeps its built-in definition.

    Example file:
        subjects:
          Database: [sql, sqlite, index]
        topics:
          SQL: [select, join]

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the file is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Keyword file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in keyword file: {e}", details={"path": str(path)}
        ) from e

    if not isinstance(content, dict):
        raise ConfigurationError(
            "Keyword file must contain a mapping", details={"path": str(path)}
        )

    defaults = default_keyword_tables()
    tables = {}
    for key, table_name, fallback in (
        ("subjects", "subject", SUBJECT_FALLBACK),
        ("topics", "topic", TOPIC_FALLBACK),
        ("chapters", "chapter", CHAPTER_FALLBACK),
    ):
        mapping = content.get(key)
        if mapping is None:
            tables[table_name] = getattr(defaults, table_name)
            continue
        if not isinstance(mapping, dict):
            raise ConfigurationError(
                f"'{key}' must be a mapping of category to keywords",
                details={"path": str(path)},
            )
        tables[table_name] = KeywordTable.from_mapping(table_name, fallback, mapping)

    logger.info(f"Loaded keyword tables from {path}")
    return KeywordTables(**tables)
