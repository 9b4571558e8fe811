"""
Reference and inter-publication link extraction.

A legal text points at other publications in its visa clauses ("Vu la loi
n° 90-11 ...", "بمقتضى القانون رقم ...") and in its operative articles
("modifie", "abroge", "approuve", ...).
"""

from typing import List, Tuple

from .base import BaseExtractor
from ..models import LegalEntity, EntityType, LinkType, PublicationLink
from ..utils.patterns import STRUCTURE_PATTERNS, LINK_PATTERNS, PUBLICATION_PATTERNS

UNKNOWN_PUBLICATION = "Publication inconnue"

LINK_DESCRIPTIONS = {
    LinkType.VU: "Référence à {}",
    LinkType.ANNEXE: "Annexe: {}",
    LinkType.MODIFICATION: "Modification de {}",
    LinkType.ABROGATION: "Abrogation de {}",
    LinkType.APPROVAL: "Approbation de {}",
    LinkType.CONFORMITY: "Contrôle de conformité: {}",
    LinkType.EXTENSION: "Extension de {}",
}


class ReferenceExtractor(BaseExtractor):
    """Extract visa references as entities and every link type as PublicationLink."""

    REFERENCE_CONFIDENCE = 0.85
    VU_LINK_CONFIDENCE = 0.85
    LINK_CONFIDENCE = 0.8

    def __init__(self):
        super().__init__(name="reference")
        self.patterns = STRUCTURE_PATTERNS
        self.link_patterns = LINK_PATTERNS

    def extract(self, text: str) -> List[LegalEntity]:
        entities = []
        for match in self.patterns.REFERENCE.finditer(text):
            entities.append(self.create_entity(
                EntityType.REFERENCE,
                match,
                self.REFERENCE_CONFIDENCE,
                metadata={'target': match.group(1).strip()}
            ))
        return self.finish(entities)

    def citation_spans(self, text: str) -> List[Tuple[int, int]]:
        """Spans of the visa clauses; whatever lies inside is cited, not issued."""
        return [match.span() for match in self.patterns.REFERENCE.finditer(text)]

    def extract_links(self, text: str) -> List[PublicationLink]:
        """
        Extract links from the processed publication to other texts.

        Args:
            text: Raw text, digits already normalized

        Returns:
            Links ordered by link type, then by position
        """
        source = self.source_publication(text)
        links = []
        for key, pattern in self.link_patterns.LINKS.items():
            link_type = LinkType(key)
            confidence = self.VU_LINK_CONFIDENCE if link_type == LinkType.VU else self.LINK_CONFIDENCE
            for match in pattern.finditer(text):
                target = match.group(1).strip()
                if not target:
                    continue
                links.append(PublicationLink(
                    type=link_type,
                    source_publication=source,
                    target_publication=target,
                    description=LINK_DESCRIPTIONS[link_type].format(target),
                    confidence=confidence
                ))
        self.logger.debug(f"{len(links)} links from {source}")
        return links

    @staticmethod
    def source_publication(text: str) -> str:
        match = PUBLICATION_PATTERNS.CURRENT_PUBLICATION.search(text)
        return match.group(1) if match else UNKNOWN_PUBLICATION
