from __future__ import annotations

import re

_NON_WORD_RE = re.compile(r"[^\w]")
_CAPITALIZED_TERM_RE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")

STOPWORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to",
        "for", "of", "with", "by", "from", "as", "is", "was", "are", "were",
        "been", "be", "have", "has", "had", "do", "does", "did", "will", "would",
        "should", "could", "may", "might", "must", "can", "this", "that", "these", "those",
        "i", "you", "he", "she", "it", "we", "they", "what", "which", "who",
        "whom", "whose", "where", "when", "why", "how", "all", "each", "every", "both",
        "few", "more", "most", "other", "some", "such", "no", "nor", "not", "only",
        "own", "same", "so", "than", "too", "very", "just", "now",
    }
)


def extract_keywords(text: str) -> set[str]:
    """Candidate keywords from free text.

    Lowercased whitespace tokens with non-word characters stripped, minus
    stopwords and tokens of two characters or fewer, merged with runs of
    Capitalized Words found in the original text (e.g. ``"machine learning"``
    from ``"Machine Learning"``). No stemming.
    """
    keywords: set[str] = set()
    if not text:
        return keywords

    for word in text.lower().split():
        cleaned = _NON_WORD_RE.sub("", word)
        if len(cleaned) > 2 and cleaned not in STOPWORDS:
            keywords.add(cleaned)

    for term in _CAPITALIZED_TERM_RE.findall(text):
        cleaned = term.lower()
        if len(cleaned) > 2:
            keywords.add(cleaned)

    return keywords
