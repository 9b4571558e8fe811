"""
Institution header and article extraction.
"""

from typing import List

from .base import BaseExtractor
from ..models import LegalEntity, EntityType
from ..utils.patterns import STRUCTURE_PATTERNS


class InstitutionExtractor(BaseExtractor):
    """Extract issuing institutions and the numbered articles of a text."""

    INSTITUTION_CONFIDENCE = 0.9
    ARTICLE_CONFIDENCE = 0.85

    def __init__(self):
        super().__init__(name="institution")
        self.patterns = STRUCTURE_PATTERNS

    def extract(self, text: str) -> List[LegalEntity]:
        entities = []

        for match in self.patterns.INSTITUTION.finditer(text):
            name = match.group(1).strip()
            entities.append(self.create_entity(
                EntityType.INSTITUTION,
                match,
                self.INSTITUTION_CONFIDENCE,
                group=1,
                metadata={'institution_name': name}
            ))

        for match in self.patterns.ARTICLE.finditer(text):
            entities.append(self.create_entity(
                EntityType.CONTENT,
                match,
                self.ARTICLE_CONFIDENCE,
                metadata={
                    'article_number': int(match.group(1)),
                    'content': match.group(2).strip(),
                }
            ))

        return self.finish(entities)
