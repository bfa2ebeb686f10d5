"""
Sentence segmentation and word tokenization for the summarizer.
"""

import re

# Sentence-terminal punctuation followed by whitespace
_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")
_WHITESPACE = re.compile(r"\s+")
# Anything that is not a word character, whitespace or basic punctuation
_SYMBOLS = re.compile(r"[^\w\s.,!?;:'\-()]")
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([.,!?;:])")
_WORD = re.compile(r"\b[a-z]{4,}\b")

STOP_WORDS = frozenset({
    "the", "a", "an", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "shall", "can", "need", "dare",
    "ought", "used", "to", "of", "in", "for", "on", "with", "at", "by",
    "from", "as", "into", "through", "during", "before", "after", "above",
    "below", "between", "under", "again", "further", "then", "once", "here",
    "there", "when", "where", "why", "how", "all", "each", "few", "more",
    "most", "other", "some", "such", "no", "nor", "not", "only", "own",
    "same", "so", "than", "too", "very", "just", "and", "but", "if", "or",
    "because", "until", "while", "this", "that", "these", "those", "it",
    "its", "he", "she", "they", "them", "his", "her", "their", "what",
    "which", "who", "whom", "whose", "i", "you", "we", "our", "your", "my",
})


def split_sentences(text: str) -> list[str]:
    """Split a block of text into trimmed, non-empty sentences."""
    if not text:
        return []
    return [s.strip() for s in _SENTENCE_BREAK.split(text) if s.strip()]


def clean_sentence(sentence: str) -> str:
    """
    Normalize a sentence for display and scoring.

    Collapses whitespace, drops symbols other than basic punctuation and
    removes whitespace in front of punctuation marks.
    """
    if not sentence:
        return ""
    cleaned = _WHITESPACE.sub(" ", sentence)
    cleaned = _SYMBOLS.sub("", cleaned)
    cleaned = _SPACE_BEFORE_PUNCT.sub(r"\1", cleaned)
    return cleaned.strip()


def tokenize(text: str) -> list[str]:
    """Lowercase words of at least four letters, stop-words included."""
    return _WORD.findall(text.lower())


def content_words(text: str) -> list[str]:
    """Lowercase words of at least four letters, stop-words removed."""
    return [word for word in tokenize(text) if word not in STOP_WORDS]


def dedup_key(sentence: str, prefix_length: int = 50) -> str:
    """Key under which two sentences count as the same."""
    return sentence.lower()[:prefix_length]
