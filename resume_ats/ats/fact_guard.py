"""Post-hoc check that a rewritten resume names nothing the source did not.

Heuristic: it looks at entity-like tokens (``AWS``, ``PostgreSQL``, ``C++``,
``Node.js``) and at Capitalized words and runs (``Google``, ``Acme Corp``)
in the rewrite, and reports those with no trace in the source texts. A
Capitalized word that opens a line, bullet or sentence is read as ordinary
capitalization, so re-wording with new verbs is not reported.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

_MARKDOWN_RE = re.compile(r"[*_`>#|\[\]()]")
_TOKEN_RE = re.compile(r"[A-Za-z][A-Za-z0-9+#./-]*[A-Za-z0-9+#]")
_CAPITALIZED_RUN_RE = re.compile(r"\b[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)*\b")
_WORD_RE = re.compile(r"[a-z0-9+#]+")
_SENTENCE_BREAKS = (".", "!", "?", "-", "•")

# Headings, labels and dates the optimizer is allowed to introduce.
ALLOWED_TERMS = frozenset(
    {
        "professional summary",
        "summary",
        "work experience",
        "experience",
        "education",
        "skills",
        "technical skills",
        "technologies",
        "projects",
        "personal projects",
        "achievements",
        "awards",
        "languages",
        "certifications",
        "certifications & training",
        "additional",
        "other",
        "linkedin",
        "github",
        "website",
        "link",
        "email",
        "phone",
        "gpa",
        "present",
        "jan", "january", "feb", "february", "mar", "march", "apr", "april", "may", "jun", "june",
        "jul", "july", "aug", "august", "sep", "sept", "september", "oct", "october",
        "nov", "november", "dec", "december",
    }
)


def _is_entity_like(token: str) -> bool:
    if any(ch.isupper() for ch in token[1:]):
        return True
    if "+" in token or "#" in token:
        return True
    return "." in token.strip(".")


def _opens_sentence(line: str, start: int) -> bool:
    before = line[:start].rstrip()
    return not before or before.endswith(_SENTENCE_BREAKS)


def _normalize(text: str) -> str:
    return " ".join(_MARKDOWN_RE.sub(" ", text).lower().split())


def find_unsupported_terms(rewritten: str, sources: Iterable[str]) -> list[str]:
    source_text = _normalize(" ".join(sources))
    source_words = set(_WORD_RE.findall(source_text))
    text = _MARKDOWN_RE.sub(" ", rewritten or "")

    unsupported: dict[str, None] = {}
    for token in _TOKEN_RE.findall(text):
        lowered = token.lower().rstrip(".")
        if not _is_entity_like(token) or lowered in ALLOWED_TERMS:
            continue
        if lowered not in source_text:
            unsupported[token.rstrip(".")] = None

    for line in text.splitlines():
        for match in _CAPITALIZED_RUN_RE.finditer(line):
            words = match.group().split()
            if _opens_sentence(line, match.start()):
                words = words[1:]
            if not words:
                continue
            phrase = " ".join(words)
            lowered = phrase.lower()
            if lowered in ALLOWED_TERMS:
                continue
            if len(words) == 1:
                if lowered not in source_words:
                    unsupported[phrase] = None
            elif lowered not in source_text:
                unsupported[phrase] = None

    return list(unsupported)
