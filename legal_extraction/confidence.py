"""
Confidence scoring for entity-to-field mapping.

This module scores how well an extracted entity fits a form field, applies
the contextual bonuses that raise the confidence of a mapped value, and
aggregates field confidences into an overall mapping confidence.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .models import FormField, LegalEntity, MappedField, StructuredPublication
from .nomenclature import NomenclatureIndex, DEFAULT_NOMENCLATURE

logger = logging.getLogger(__name__)


class ConfidenceFactorType(Enum):
    """Contextual factors that raise a mapped value's confidence."""
    NOMENCLATURE_VALIDATION = "nomenclature_validation"
    DOCUMENT_TYPE_CONSISTENCY = "document_type_consistency"
    DOCUMENT_POSITION = "document_position"
    LEARNED_CORRECTION = "learned_correction"


@dataclass
class ConfidenceFactor:
    """Individual factor contributing to a confidence score."""
    factor_type: ConfidenceFactorType
    impact: float
    description: str


# Entity types that fit each field type when a field declares none
DEFAULT_TYPE_TABLE: Dict[str, List[str]] = {
    'date': ['date'],
    'number': ['number'],
    'text': ['publication_type', 'power_emitter', 'institution', 'content'],
}


class ConfidenceScorer:
    """
    Score entity/field fits and the final confidence of mapped values.

    All scores are floats in [0.0, 1.0].
    """

    TYPE_MATCH = 0.9
    TYPE_MISMATCH_DECLARED = 0.3
    TYPE_MISMATCH_DEFAULT = 0.5
    NOMENCLATURE_NONE = 0.5
    NOMENCLATURE_FOUND = 0.9
    NOMENCLATURE_MISSING = 0.3

    NOMENCLATURE_BONUS = 0.1
    CONSISTENCY_BONUS = 0.05
    POSITION_BONUS = 0.05
    LEADING_SHARE = 0.3

    def __init__(self,
                 config: Optional[Dict[str, Any]] = None,
                 nomenclature: Optional[NomenclatureIndex] = None):
        """Initialize the confidence scorer."""
        self.config = config or {}
        self.nomenclature = nomenclature or DEFAULT_NOMENCLATURE
        self.logger = logging.getLogger(self.__class__.__name__)

        # Confidence thresholds
        self.mapping_threshold = self.config.get('mapping_threshold', 0.7)
        self.high_confidence_threshold = self.config.get('high_confidence_threshold', 0.8)
        self.manual_review_threshold = self.config.get('manual_review_threshold', 0.6)

    def score_entity_for_field(self, entity: LegalEntity, form_field: FormField) -> float:
        """Average of entity confidence, type fit and nomenclature fit."""
        return (
            entity.confidence
            + self.type_match(entity, form_field)
            + self.nomenclature_match(entity, form_field)
        ) / 3

    def type_match(self, entity: LegalEntity, form_field: FormField) -> float:
        entity_type = entity.type.value
        if form_field.entity_types:
            if entity_type in form_field.entity_types:
                return self.TYPE_MATCH
            return self.TYPE_MISMATCH_DECLARED
        if entity_type in DEFAULT_TYPE_TABLE.get(form_field.type, []):
            return self.TYPE_MATCH
        return self.TYPE_MISMATCH_DEFAULT

    def nomenclature_match(self, entity: LegalEntity, form_field: FormField) -> float:
        if not form_field.algerian_nomenclature:
            return self.NOMENCLATURE_NONE
        if self.nomenclature.contains_any(entity.value, form_field.algerian_nomenclature):
            return self.NOMENCLATURE_FOUND
        return self.NOMENCLATURE_MISSING

    def is_mappable(self, score: float) -> bool:
        return score > self.mapping_threshold

    def dynamic_confidence(self,
                           mapped: MappedField,
                           publication: StructuredPublication) -> Tuple[float, List[ConfidenceFactor]]:
        """
        Raise a mapped field's confidence from its context.

        Args:
            mapped: Candidate mapping; `metadata['position']` is used when present
            publication: Publication the value was extracted from

        Returns:
            Tuple of (confidence capped at 1.0, applied factors)
        """
        factors: List[ConfidenceFactor] = []

        if self.nomenclature.validate(mapped.mapped_value):
            factors.append(ConfidenceFactor(
                ConfidenceFactorType.NOMENCLATURE_VALIDATION,
                self.NOMENCLATURE_BONUS,
                "Value matches the Algerian nomenclature"
            ))

        if publication.type_key and self.nomenclature.document_type_of(mapped.mapped_value) == publication.type_key:
            factors.append(ConfidenceFactor(
                ConfidenceFactorType.DOCUMENT_TYPE_CONSISTENCY,
                self.CONSISTENCY_BONUS,
                f"Value is consistent with a {publication.type_key}"
            ))

        position = mapped.metadata.get('position')
        text_length = len(publication.raw_text)
        if position and text_length and position['start'] < text_length * self.LEADING_SHARE:
            factors.append(ConfidenceFactor(
                ConfidenceFactorType.DOCUMENT_POSITION,
                self.POSITION_BONUS,
                "Value appears at the start of the document"
            ))

        confidence = min(mapped.confidence + sum(f.impact for f in factors), 1.0)
        return confidence, factors

    def overall_confidence(self, mapped_fields: List[MappedField]) -> float:
        """Mean mapped-field confidence, 0.0 when nothing is mapped."""
        if not mapped_fields:
            return 0.0
        return sum(f.confidence for f in mapped_fields) / len(mapped_fields)

    def confidence_level(self, confidence: float) -> str:
        if confidence >= self.high_confidence_threshold:
            return 'high'
        if confidence >= self.manual_review_threshold:
            return 'medium'
        return 'low'

    def requires_manual_review(self, confidence: float) -> bool:
        return confidence < self.manual_review_threshold
