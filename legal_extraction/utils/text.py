"""
Text helpers shared by the extractors and the field mapper.
"""

import re
import unicodedata
from typing import List, Tuple

# Arabic-Indic and extended Arabic-Indic digits map one-to-one onto ASCII
_DIGITS = str.maketrans(
    '٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹',
    '01234567890123456789'
)

_ARABIC_LETTER = re.compile(r'[؀-ۿ]')
_LATIN_LETTER = re.compile(r'[A-Za-zÀ-ÿ]')
_WHITESPACE = re.compile(r'\s+')


def normalize_digits(text: str) -> str:
    """Replace Arabic-Indic digits with ASCII digits. Offsets are preserved."""
    return text.translate(_DIGITS) if text else text


def fold_text(text: str) -> str:
    """Lowercase and strip diacritics (French accents, Arabic harakat)."""
    if not text:
        return ""
    decomposed = unicodedata.normalize('NFKD', text)
    stripped = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower()


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE.sub(' ', text).strip() if text else ""


def detect_language(text: str) -> str:
    """
    Detect the dominant script of a legal text.

    Returns:
        'ar', 'fr', 'mixed' or 'unknown'
    """
    if not text:
        return 'unknown'

    arabic = len(_ARABIC_LETTER.findall(text))
    latin = len(_LATIN_LETTER.findall(text))
    total = arabic + latin
    if total == 0:
        return 'unknown'

    ratio = arabic / total
    if ratio >= 0.8:
        return 'ar'
    if ratio <= 0.2:
        return 'fr'
    return 'mixed'


def merge_spans(spans: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """Merge overlapping or touching (start, end) spans."""
    merged: List[Tuple[int, int]] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def remove_spans(text: str, spans: List[Tuple[int, int]]) -> str:
    """Return text with the given spans cut out."""
    parts = []
    cursor = 0
    for start, end in merge_spans(spans):
        parts.append(text[cursor:start])
        cursor = max(cursor, end)
    parts.append(text[cursor:])
    return ''.join(parts)
