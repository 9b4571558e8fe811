"""
Publication type, issuing power and number extraction.
"""

from typing import List

from .base import BaseExtractor
from ..models import LegalEntity, EntityType
from ..utils.patterns import PUBLICATION_PATTERNS


class PublicationExtractor(BaseExtractor):
    """
    Segment a text by its titles and metadata.

    Finds "Décret exécutif n° 23-145"-style titles, the issuing power
    (présidentiel, ministériel, gouvernemental) and standalone numbers.
    """

    POWER_CONFIDENCE = 0.9

    def __init__(self):
        super().__init__(name="publication")
        self.patterns = PUBLICATION_PATTERNS

    def extract(self, text: str) -> List[LegalEntity]:
        entities = self.extract_publication_types(text)
        entities.extend(self.extract_power_emitters(text))
        entities.extend(self.extract_numbers(text, entities))
        return self.finish(entities)

    def extract_publication_types(self, text: str) -> List[LegalEntity]:
        entities = []
        for subtype, pattern in self.patterns.PUBLICATION_TYPES.items():
            for match in pattern.finditer(text):
                entities.append(self.create_entity(
                    EntityType.PUBLICATION_TYPE,
                    match,
                    confidence=self.calculate_confidence(match.group(0), subtype),
                    metadata={'subtype': subtype, 'number': match.group(1)}
                ))
        return entities

    def extract_power_emitters(self, text: str) -> List[LegalEntity]:
        entities = []
        for power, pattern in self.patterns.POWER_EMITTERS.items():
            for match in pattern.finditer(text):
                entities.append(self.create_entity(
                    EntityType.POWER_EMITTER,
                    match,
                    confidence=self.POWER_CONFIDENCE,
                    metadata={'power_type': power}
                ))
        return entities

    def extract_numbers(self, text: str, publications: List[LegalEntity]) -> List[LegalEntity]:
        """Numbers that are not already part of a publication title."""
        titles = [e for e in publications if e.type == EntityType.PUBLICATION_TYPE]
        entities = []
        for match in self.patterns.NUMBER.finditer(text):
            if any(t.overlaps(match.start(), match.end()) for t in titles):
                continue
            entities.append(self.create_entity(
                EntityType.NUMBER,
                match,
                confidence=self.calculate_confidence(match.group(0), 'number'),
                metadata={'number': match.group(1)}
            ))
        return entities

    @staticmethod
    def calculate_confidence(value: str, kind: str) -> float:
        """Base confidence plus a bonus for longer, more specific matches."""
        base_confidence = 0.8
        length_bonus = min(len(value) / 100, 0.2)
        type_bonus = 0.1 if kind == 'date' else 0.0
        return min(base_confidence + length_bonus + type_bonus, 1.0)
