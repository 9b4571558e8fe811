"""
Memory of reviewer corrections, reused by later mappings.
"""

import logging
from typing import Dict, Optional, Tuple

from .utils.text import fold_text, normalize_whitespace

logger = logging.getLogger(__name__)


class CorrectionMemory:
    """Corrected values keyed by field id and the original extracted value."""

    def __init__(self):
        self._corrections: Dict[Tuple[str, str], str] = {}

    @staticmethod
    def _key(field_id: str, original_value: str) -> Tuple[str, str]:
        return field_id, fold_text(normalize_whitespace(original_value or ""))

    def record(self, field_id: str, original_value: str, corrected_value: str) -> None:
        if not original_value or not corrected_value:
            return
        self._corrections[self._key(field_id, original_value)] = corrected_value
        logger.debug(f"Learned correction for {field_id}: {original_value!r} -> {corrected_value!r}")

    def lookup(self, field_id: str, original_value: str) -> Optional[str]:
        return self._corrections.get(self._key(field_id, original_value))

    def clear(self) -> None:
        self._corrections.clear()

    def __len__(self) -> int:
        return len(self._corrections)
