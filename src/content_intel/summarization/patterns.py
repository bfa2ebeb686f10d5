"""
Trigger patterns used by the summarizer.
"""

import re

DEFINITION_PATTERNS: tuple[re.Pattern[str], ...] = (
    # copula + type/kind/method/...
    re.compile(
        r"\b(?:is|are)\s+(?:a|an|the)?\s*"
        r"(?:type|kind|form|method|process|way|technique|approach|concept|principle)",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:is|are)\s+defined\s+as\b", re.IGNORECASE),
    re.compile(r"\b(?:is|are)\s+known\s+as\b", re.IGNORECASE),
    re.compile(r"\b(?:means|refers?\s+to|represents?)\b", re.IGNORECASE),
    # relative-clause definition: "is a X that/which/where"
    re.compile(r"\b(?:is|are)\s+(?:a|an)\s+\w+\s+(?:that|which|where)\b", re.IGNORECASE),
    re.compile(r"\bcan\s+be\s+defined\s+as\b", re.IGNORECASE),
)

EXAMPLE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bfor\s+example\b", re.IGNORECASE),
    re.compile(r"\bsuch\s+as\b", re.IGNORECASE),
    re.compile(r"\bin\s+(?:the\s+)?real[\s-]?world\b", re.IGNORECASE),
    re.compile(r"\bused\s+in\b", re.IGNORECASE),
    re.compile(r"\bfor\s+instance\b", re.IGNORECASE),
    re.compile(r"\be\.g\.", re.IGNORECASE),
    re.compile(r"\blike\s+(?:the\s+)?\w+(?:\s+and\s+\w+)*", re.IGNORECASE),
    re.compile(r"\bin\s+practice\b", re.IGNORECASE),
    re.compile(r"\breal[\s-]?life\s+(?:example|application|use)", re.IGNORECASE),
)

IMPORTANCE_MARKER = re.compile(
    r"\b(?:important|key|main|primary|essential|significant|crucial)\b",
    re.IGNORECASE,
)

DISCOURSE_MARKER = re.compile(
    r"\b(?:first|second|third|finally|moreover|furthermore|however)\b",
    re.IGNORECASE,
)


def matches_any(patterns: tuple[re.Pattern[str], ...], sentence: str) -> bool:
    return any(pattern.search(sentence) for pattern in patterns)
