"""
Regex extraction service for Algerian legal publications.

Runs the publication, date, institution and reference extractors over a
French or Arabic text and assembles a StructuredPublication from the
resulting entities.
"""

import logging
from typing import List, Optional, Tuple

from .extractors import (
    DateExtractor,
    InstitutionExtractor,
    PublicationExtractor,
    ReferenceExtractor,
)
from .models import EntityType, LegalEntity, PublicationLink, StructuredPublication
from .utils.text import detect_language, normalize_digits, remove_spans

logger = logging.getLogger(__name__)

UNKNOWN_TYPE = "Type inconnu"
UNKNOWN_EMITTER = "Émetteur inconnu"


class LegalRegexService:
    """Extract tagged entities and a structured view from a legal text."""

    def __init__(self):
        self.publication_extractor = PublicationExtractor()
        self.date_extractor = DateExtractor()
        self.institution_extractor = InstitutionExtractor()
        self.reference_extractor = ReferenceExtractor()
        self.logger = logging.getLogger(self.__class__.__name__)

    def segment_by_titles_and_metadata(self, text: str) -> List[LegalEntity]:
        """Publication titles, issuing powers and numbers."""
        return self.publication_extractor.extract(normalize_digits(text or ""))

    def extract_dates(self, text: str) -> List[LegalEntity]:
        """Hijri and Gregorian dates."""
        return self.date_extractor.extract(normalize_digits(text or ""))

    def extract_institutions_and_content(self, text: str) -> List[LegalEntity]:
        """Institution headers and articles."""
        return self.institution_extractor.extract(normalize_digits(text or ""))

    def extract_references_and_links(self, text: str) -> Tuple[List[LegalEntity], List[PublicationLink]]:
        """
        Visa references and links to other publications.

        Returns:
            Tuple of (reference entities, links)
        """
        text = normalize_digits(text or "")
        return self.reference_extractor.extract(text), self.reference_extractor.extract_links(text)

    def process_text(self, text: str) -> StructuredPublication:
        """
        Full extraction of a legal text.

        Args:
            text: Raw publication text

        Returns:
            StructuredPublication with entities in document order
        """
        raw_text = text or ""
        text = normalize_digits(raw_text)

        references, links = self.extract_references_and_links(text)
        entities = (
            self.segment_by_titles_and_metadata(text)
            + self.extract_dates(text)
            + self.extract_institutions_and_content(text)
            + references
        )
        entities.sort(key=lambda e: (e.start, -e.end))
        self._mark_cited(entities, self.reference_extractor.citation_spans(text))

        publication_entity = self._first(entities, EntityType.PUBLICATION_TYPE)
        power_entity = self._first(entities, EntityType.POWER_EMITTER)
        date_entity = self._first(entities, EntityType.DATE)
        hijri_entity = self._first(entities, EntityType.DATE, calendar='hijri')
        gregorian_entity = self._first(entities, EntityType.DATE, calendar='gregorian')
        institution_entity = self._first(entities, EntityType.INSTITUTION)

        number = ""
        if publication_entity:
            number = publication_entity.metadata.get('number', "")
        else:
            number_entity = self._first(entities, EntityType.NUMBER)
            if number_entity:
                number = number_entity.metadata.get('number', "")

        publication = StructuredPublication(
            type=publication_entity.value if publication_entity else UNKNOWN_TYPE,
            type_key=publication_entity.metadata.get('subtype') if publication_entity else None,
            power_emitter=power_entity.value if power_entity else UNKNOWN_EMITTER,
            number=number,
            date=date_entity.value if date_entity else "",
            hijri_date=hijri_entity.value if hijri_entity else "",
            gregorian_date=gregorian_entity.value if gregorian_entity else "",
            institution=institution_entity.metadata.get('institution_name', "") if institution_entity else "",
            references=[link.target_publication for link in links],
            content=self._main_content(text, entities),
            articles=[e.value for e in entities if e.type == EntityType.CONTENT],
            confidence=self.calculate_confidence(entities),
            entities=entities,
            links=links,
            language=detect_language(text),
            raw_text=text,
        )

        self.logger.info(
            f"Extracted {len(entities)} entities and {len(links)} links "
            f"({publication.type}, confidence {publication.confidence:.2f})"
        )
        return publication

    @staticmethod
    def calculate_confidence(entities: List[LegalEntity]) -> float:
        """Mean entity confidence, 0.0 for an empty list."""
        if not entities:
            return 0.0
        return sum(e.confidence for e in entities) / len(entities)

    @staticmethod
    def _mark_cited(entities: List[LegalEntity], spans: List[Tuple[int, int]]) -> None:
        for entity in entities:
            if entity.type == EntityType.REFERENCE:
                continue
            if any(start <= entity.start < end for start, end in spans):
                entity.metadata['cited'] = True

    @staticmethod
    def _first(entities: List[LegalEntity],
               entity_type: EntityType,
               calendar: Optional[str] = None) -> Optional[LegalEntity]:
        for entity in entities:
            if entity.type != entity_type or entity.cited:
                continue
            if calendar and entity.metadata.get('calendar') != calendar:
                continue
            return entity
        return None

    @staticmethod
    def _main_content(text: str, entities: List[LegalEntity]) -> str:
        """Text with every metadata span cut out."""
        spans = [(e.start, e.end) for e in entities if e.type != EntityType.CONTENT]
        return remove_spans(text, spans).strip()
