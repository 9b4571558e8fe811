"""
Date extraction for Hijri and Gregorian dates.

Algerian publications usually give both calendars, e.g.
"Décret du 19 Chaâbane 1444 correspondant au 12 mars 2023" in French or
"مؤرخ في 19 شعبان عام 1444 الموافق 12 مارس سنة 2023" in Arabic.
"""

from datetime import date
from typing import List, Optional

from .base import BaseExtractor
from ..models import LegalEntity, EntityType
from ..utils.hijri import hijri_to_gregorian
from ..utils.patterns import (
    DATE_PATTERNS, HIJRI_MONTHS, FRENCH_HIJRI_MONTHS, FRENCH_MONTHS, ARABIC_GREGORIAN_MONTHS
)
from ..utils.text import fold_text, normalize_whitespace


class DateExtractor(BaseExtractor):
    """
    Specialized extractor for date entities.
    Every entity carries its calendar and, when valid, an ISO date.
    """

    HIJRI_CONFIDENCE = 0.95
    NUMERIC_CONFIDENCE = 0.9
    WRITTEN_CONFIDENCE = 0.85
    INVALID_CONFIDENCE = 0.6

    def __init__(self):
        super().__init__(name="date")
        self.patterns = DATE_PATTERNS

    def extract(self, text: str) -> List[LegalEntity]:
        entities = []

        for match in self.patterns.HIJRI.finditer(text):
            day, month_name, year = match.groups()
            entities.append(self._hijri_entity(match, int(year), HIJRI_MONTHS[month_name], int(day), 'arabic'))

        for match in self.patterns.HIJRI_FRENCH.finditer(text):
            day, month_name, year = match.groups()
            month = FRENCH_HIJRI_MONTHS.get(normalize_whitespace(fold_text(month_name).replace('-', ' ')))
            if month:
                entities.append(self._hijri_entity(match, int(year), month, int(day), 'french'))

        for match in self.patterns.GREGORIAN_NUMERIC.finditer(text):
            day, month, year = match.groups()
            entities.append(self._gregorian_entity(
                match, int(year), int(month), int(day), self.NUMERIC_CONFIDENCE, 'numeric'
            ))

        for match in self.patterns.GREGORIAN_FRENCH.finditer(text):
            day, month_name, year = match.groups()
            month = FRENCH_MONTHS[month_name.lower()]
            entities.append(self._gregorian_entity(
                match, int(year), month, int(day), self.WRITTEN_CONFIDENCE, 'french'
            ))

        for match in self.patterns.GREGORIAN_ARABIC.finditer(text):
            day, month_name, year = match.groups()
            month = ARABIC_GREGORIAN_MONTHS[month_name]
            entities.append(self._gregorian_entity(
                match, int(year), month, int(day), self.WRITTEN_CONFIDENCE, 'arabic'
            ))

        return self.finish(entities)

    def _hijri_entity(self, match, year: int, month: int, day: int, style: str) -> LegalEntity:
        gregorian = hijri_to_gregorian(year, month, day)
        metadata = {'calendar': 'hijri', 'style': style}
        if gregorian:
            metadata['gregorian'] = gregorian.isoformat()
        return self.create_entity(EntityType.DATE, match, self.HIJRI_CONFIDENCE, metadata=metadata)

    def _gregorian_entity(self, match, year: int, month: int, day: int,
                          confidence: float, style: str) -> LegalEntity:
        parsed = self._safe_date(year, month, day)
        metadata = {'calendar': 'gregorian', 'style': style}
        if parsed:
            metadata['iso'] = parsed.isoformat()
        else:
            metadata['valid'] = False
            confidence = self.INVALID_CONFIDENCE
        return self.create_entity(EntityType.DATE, match, confidence, metadata=metadata)

    @staticmethod
    def _safe_date(year: int, month: int, day: int) -> Optional[date]:
        try:
            return date(year, month, day)
        except ValueError:
            return None
