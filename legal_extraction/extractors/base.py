"""
Base extractor class for all entity extraction strategies.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional
import logging
import re

from ..models import LegalEntity, EntityType


class BaseExtractor(ABC):
    """Base class for all regex entity extractors."""

    def __init__(self, name: str = "base"):
        """
        Initialize the extractor.

        Args:
            name: Name of the extraction strategy
        """
        self.name = name
        self.logger = logging.getLogger(self.__class__.__name__)
        self.stats = {
            'texts_processed': 0,
            'entities_extracted': 0,
        }

    @abstractmethod
    def extract(self, text: str) -> List[LegalEntity]:
        """
        Extract entities from a text.

        Args:
            text: Raw text, digits already normalized

        Returns:
            Entities in document order
        """
        pass

    def create_entity(self,
                      entity_type: EntityType,
                      match: re.Match,
                      confidence: float,
                      group: int = 0,
                      metadata: Optional[Dict[str, Any]] = None) -> LegalEntity:
        """
        Create an entity from a regex match.

        Args:
            entity_type: Type of the entity
            match: Regex match object
            confidence: Confidence score (0-1)
            group: Match group that delimits the span
            metadata: Extra information about the match

        Returns:
            LegalEntity object
        """
        meta = {'extractor': self.name}
        if metadata:
            meta.update(metadata)

        return LegalEntity(
            type=entity_type,
            value=match.group(group).strip(),
            confidence=max(0.0, min(1.0, confidence)),
            start=match.start(group),
            end=match.end(group),
            metadata=meta
        )

    def finish(self, entities: List[LegalEntity]) -> List[LegalEntity]:
        """Sort entities by position and update stats."""
        entities.sort(key=lambda e: (e.start, -e.end))
        self.stats['texts_processed'] += 1
        self.stats['entities_extracted'] += len(entities)
        self.logger.debug(f"{self.name}: {len(entities)} entities")
        return entities

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name})"
