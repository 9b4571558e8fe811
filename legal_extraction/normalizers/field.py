"""
Field normalizer for transforming extracted values into form values.
"""

import logging
import re
from datetime import date
from typing import List, Optional

from ..extractors.dates import DateExtractor
from ..models import FieldType, FormField, LegalEntity
from ..nomenclature import NomenclatureIndex, DEFAULT_NOMENCLATURE
from ..utils.text import normalize_digits, normalize_whitespace

logger = logging.getLogger(__name__)

NUMBER_RUN = re.compile(r'\d+(?:[-/]\d+)*')


class FieldNormalizer:
    """Transform and validate mapped field values."""

    def __init__(self, nomenclature: Optional[NomenclatureIndex] = None):
        """Initialize the normalizer."""
        self.nomenclature = nomenclature or DEFAULT_NOMENCLATURE
        self.date_extractor = DateExtractor()
        self.stats = {
            'fields_normalized': 0,
            'validation_errors': 0,
        }

    def transform_value_for_field(self,
                                  value: str,
                                  form_field: FormField,
                                  entity: Optional[LegalEntity] = None) -> str:
        """
        Transform a raw value into the representation a field expects.

        Args:
            value: Raw extracted value
            form_field: Target field specification
            entity: Source entity, when the value comes from one

        Returns:
            Transformed value
        """
        if not value:
            return ""

        value = normalize_digits(value)
        value = self._apply_field_patterns(value, form_field)
        field_type = FieldType(form_field.type)

        if field_type == FieldType.DATE:
            result = self._normalize_date(value, entity)
        elif field_type == FieldType.NUMBER:
            result = self._normalize_number(value)
        elif field_type == FieldType.SELECT:
            result = self._normalize_select(value, form_field)
        elif field_type == FieldType.TEXTAREA:
            result = value.strip()
        elif field_type == FieldType.TEXT:
            result = normalize_whitespace(value)
        else:
            result = value

        self.stats['fields_normalized'] += 1
        return result

    def validate(self, value: str, form_field: FormField) -> List[str]:
        """
        Validate a value against the field's validation rules.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        for rule in form_field.validation_rules:
            try:
                if not re.search(rule, value or ""):
                    errors.append(f"Field {form_field.id} doesn't match pattern: {rule}")
            except re.error as e:
                logger.warning(f"Invalid validation rule for {form_field.id}: {rule} ({e})")
                errors.append(f"Field {form_field.id} has an invalid validation rule: {rule}")
        self.stats['validation_errors'] += len(errors)
        return errors

    def _apply_field_patterns(self, value: str, form_field: FormField) -> str:
        """The first of the field's own patterns that matches wins."""
        for pattern in form_field.regex_patterns:
            try:
                match = re.search(pattern, value, re.IGNORECASE)
            except re.error as e:
                logger.warning(f"Invalid pattern for {form_field.id}: {pattern} ({e})")
                continue
            if match:
                return match.group(1) if match.groups() else match.group(0)
        return value

    def _normalize_date(self, value: str, entity: Optional[LegalEntity]) -> str:
        """Normalize a date to DD/MM/YYYY, converting Hijri dates."""
        iso = None
        if entity is not None:
            iso = entity.metadata.get('iso') or entity.metadata.get('gregorian')
        if not iso:
            for found in self.date_extractor.extract(value):
                iso = found.metadata.get('iso') or found.metadata.get('gregorian')
                if iso:
                    break
        if not iso:
            return normalize_whitespace(value)
        return date.fromisoformat(iso).strftime("%d/%m/%Y")

    def _normalize_number(self, value: str) -> str:
        match = NUMBER_RUN.search(value)
        return match.group(0) if match else normalize_whitespace(value)

    def _normalize_select(self, value: str, form_field: FormField) -> str:
        """Canonicalize to the field's own nomenclature option."""
        option = self.nomenclature.contains_any(value, form_field.algerian_nomenclature)
        return option if option else normalize_whitespace(value)
