"""
Intelligent mapping service for Algerian legal forms.

Maps a StructuredPublication onto a form structure in successive passes:
extracted entities first, then regex rules over the publication text, then
the Algerian nomenclature. Fields that stay empty get heuristic suggestions.
"""

import logging
import re
import time
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Set

from .confidence import ConfidenceFactorType, ConfidenceScorer
from .learning import CorrectionMemory
from .models import (
    FormField,
    FormStructure,
    MappedField,
    MappedSection,
    MappingResult,
    MappingSource,
    MappingStatus,
    StructuredPublication,
)
from .nomenclature import NomenclatureIndex, DEFAULT_NOMENCLATURE
from .normalizers import FieldNormalizer
from .registry import FormRegistry
from .utils.patterns import MAPPING_RULE_PATTERNS
from .utils.text import fold_text

logger = logging.getLogger(__name__)


class IntelligentMappingService:
    """
    Map extracted legal data onto form fields with confidence scores.

    Every mapped field carries its source (regex, nomenclature, manual) and
    a confidence in [0, 1]; suggestions for empty fields are kept apart.
    """

    NOMENCLATURE_CONFIDENCE = 0.85
    PATTERN_SUGGESTION_CONFIDENCE = 0.8
    NOMENCLATURE_SUGGESTION_CONFIDENCE = 0.7
    LEARNED_BONUS = 0.1

    def __init__(self,
                 config: Optional[Dict[str, Any]] = None,
                 registry: Optional[FormRegistry] = None,
                 correction_memory: Optional[CorrectionMemory] = None,
                 nomenclature: Optional[NomenclatureIndex] = None):
        """
        Initialize the mapping service.

        Args:
            config: Optional settings (mapping_threshold, form_specs_dir)
            registry: Form registry; built from config when omitted
            correction_memory: Learned reviewer corrections
            nomenclature: Nomenclature lookup
        """
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__name__)
        self.nomenclature = nomenclature or DEFAULT_NOMENCLATURE
        self.registry = registry or FormRegistry(self.config.get('form_specs_dir'))
        self.correction_memory = correction_memory if correction_memory is not None else CorrectionMemory()
        self.scorer = ConfidenceScorer(self.config, self.nomenclature)
        self.normalizer = FieldNormalizer(self.nomenclature)
        self.rules = MAPPING_RULE_PATTERNS

    def map_extracted_data_to_form(self,
                                   publication: StructuredPublication,
                                   form_type: str) -> MappingResult:
        """
        Map a structured publication onto a form.

        Args:
            publication: Output of the regex extraction
            form_type: Form identifier

        Returns:
            MappingResult with one MappedField per mapped form field

        Raises:
            ValueError: If the form type is not supported
        """
        start_time = time.time()

        structure = self.get_form_structure(form_type)
        if structure is None:
            raise ValueError(f"Unsupported form type: {form_type}")

        # Step 1: entities
        candidates = self._map_entities(publication, structure)
        filled = {c.field_id for c in candidates}

        # Step 2: regex rules, for fields the entities left empty
        rule_candidates = self._map_by_regex_rules(publication, structure, filled)
        candidates.extend(rule_candidates)
        filled.update(c.field_id for c in rule_candidates)

        # Step 3: nomenclature, for fields still empty
        candidates.extend(self._map_by_nomenclature(publication, structure, filled))

        for candidate in candidates:
            candidate.confidence, factors = self.scorer.dynamic_confidence(candidate, publication)
            if factors:
                candidate.metadata['confidence_factors'] = [f.factor_type.value for f in factors]

        mapped_fields = self._consolidate(candidates, structure)
        self._apply_learned_corrections(mapped_fields)

        mapped_ids = {f.field_id for f in mapped_fields}
        unmapped_fields = [f.id for f in structure.fields if f.id not in mapped_ids]
        suggestions = self._generate_suggestions(publication, structure, unmapped_fields)
        warnings = self._validate(structure, mapped_fields, unmapped_fields)

        result = MappingResult(
            form_id=structure.id,
            mapped_fields=mapped_fields,
            unmapped_fields=unmapped_fields,
            suggested_mappings=suggestions,
            overall_confidence=self.scorer.overall_confidence(mapped_fields),
            processing_time=time.time() - start_time,
            sections=self._build_sections(structure, mapped_fields),
            warnings=warnings,
            metadata={
                'document_type': publication.type or 'unknown',
                'entities_extracted': len(publication.entities),
                'fields_mapped': len(mapped_fields),
                'fields_unmapped': len(unmapped_fields),
            }
        )

        self.logger.info(
            f"Mapped {len(mapped_fields)}/{len(structure.fields)} fields of {structure.id} "
            f"(confidence {result.overall_confidence:.2f}, {len(suggestions)} suggestions)"
        )
        return result

    def map_to_algerian_nomenclature(self, text: str) -> Dict[str, Any]:
        """Nomenclature terms found in a text."""
        matches = self.nomenclature.find_terms(text or "")
        return {
            'mapped_terms': [m.to_dict() for m in matches],
            'nomenclature': 'algerian_legal',
            'confidence': 0.8 if matches else 0.0,
        }

    def get_available_form_types(self) -> List[str]:
        return self.registry.list_form_types()

    def get_form_structure(self, form_type: str) -> Optional[FormStructure]:
        return self.registry.get_form_structure(form_type)

    def _map_entities(self,
                      publication: StructuredPublication,
                      structure: FormStructure) -> List[MappedField]:
        """Score every issued entity against every field."""
        candidates = []
        for entity in publication.entities:
            if entity.cited:
                continue
            for form_field in structure.fields:
                score = self.scorer.score_entity_for_field(entity, form_field)
                if not self.scorer.is_mappable(score):
                    continue
                candidates.append(MappedField(
                    field_id=form_field.id,
                    field_name=form_field.name,
                    original_value=entity.value,
                    mapped_value=self.normalizer.transform_value_for_field(entity.value, form_field, entity),
                    confidence=score,
                    status=MappingStatus.MAPPED,
                    source=MappingSource.REGEX,
                    metadata={
                        'entity_type': entity.type.value,
                        'field_type': form_field.type,
                        'position': {'start': entity.start, 'end': entity.end},
                    }
                ))
        return candidates

    def _map_by_regex_rules(self,
                            publication: StructuredPublication,
                            structure: FormStructure,
                            filled: Set[str]) -> List[MappedField]:
        all_text = self._all_text(publication)
        mappings: Dict[str, MappedField] = {}

        for rule_name, rule in self.rules.RULES.items():
            for pattern in rule['patterns']:
                match = self._first_usable_match(pattern, all_text, rule_name)
                if not match:
                    continue
                for field_type in rule['field_types']:
                    form_field = self._find_field_by_name(structure, field_type)
                    if not form_field or form_field.id in filled or form_field.id in mappings:
                        continue
                    mappings[form_field.id] = MappedField(
                        field_id=form_field.id,
                        field_name=form_field.name,
                        original_value=match.group(0),
                        mapped_value=self.normalizer.transform_value_for_field(match.group(0), form_field),
                        confidence=rule['confidence'],
                        status=MappingStatus.MAPPED,
                        source=MappingSource.REGEX,
                        metadata={
                            'rule_name': rule_name,
                            'pattern': pattern.pattern,
                            'field_type': field_type,
                        }
                    )
        return list(mappings.values())

    def _map_by_nomenclature(self,
                             publication: StructuredPublication,
                             structure: FormStructure,
                             filled: Set[str]) -> List[MappedField]:
        mappings: Dict[str, MappedField] = {}

        for match in self.nomenclature.find_terms(self._all_text(publication)):
            form_field = self._find_field_by_nomenclature(
                structure, match.category, match.term, match.variation
            )
            if not form_field or form_field.id in filled or form_field.id in mappings:
                continue
            mappings[form_field.id] = MappedField(
                field_id=form_field.id,
                field_name=form_field.name,
                original_value=match.variation,
                mapped_value=self.normalizer.transform_value_for_field(match.variation, form_field),
                confidence=self.NOMENCLATURE_CONFIDENCE,
                status=MappingStatus.MAPPED,
                source=MappingSource.NOMENCLATURE,
                metadata=match.to_dict()
            )
        return list(mappings.values())

    def _generate_suggestions(self,
                              publication: StructuredPublication,
                              structure: FormStructure,
                              unmapped_fields: List[str]) -> List[MappedField]:
        """Heuristic values for fields no pass could fill."""
        all_text = self._all_text(publication)
        suggestions = []

        for field_id in unmapped_fields:
            form_field = structure.get_field_by_id(field_id)
            value, confidence, reasoning = None, 0.0, ""

            for kind in ('date', 'number'):
                if form_field.type != kind and kind not in form_field.entity_types:
                    continue
                for pattern in self.rules.SUGGESTION_PATTERNS[kind]:
                    match = self._first_usable_match(pattern, all_text, kind)
                    if match:
                        value = match.group(0)
                        confidence = self.PATTERN_SUGGESTION_CONFIDENCE
                        reasoning = f"{kind.capitalize()} pattern detected"
                        break
                if value:
                    break

            if not value and form_field.algerian_nomenclature:
                term = self.nomenclature.contains_any(all_text, form_field.algerian_nomenclature)
                if term:
                    value = term
                    confidence = self.NOMENCLATURE_SUGGESTION_CONFIDENCE
                    reasoning = f"Nomenclature match: {term}"

            if value:
                suggestions.append(MappedField(
                    field_id=form_field.id,
                    field_name=form_field.name,
                    original_value=value,
                    mapped_value=self.normalizer.transform_value_for_field(value, form_field),
                    confidence=confidence,
                    status=MappingStatus.SUGGESTED,
                    source=MappingSource.HEURISTIC,
                    metadata={'reasoning': reasoning}
                ))

        return suggestions

    def _consolidate(self,
                     candidates: List[MappedField],
                     structure: FormStructure) -> List[MappedField]:
        """One MappedField per form field, in form order."""
        by_field: Dict[str, List[MappedField]] = OrderedDict()
        for candidate in candidates:
            by_field.setdefault(candidate.field_id, []).append(candidate)

        consolidated = []
        for form_field in structure.fields:
            field_candidates = by_field.get(form_field.id)
            if not field_candidates:
                continue
            if form_field.multiple:
                consolidated.append(self._join_candidates(form_field, field_candidates))
            else:
                consolidated.append(min(
                    field_candidates,
                    key=lambda c: (-c.confidence, self._position(c))
                ))
        return consolidated

    def _join_candidates(self, form_field: FormField, candidates: List[MappedField]) -> MappedField:
        ordered = sorted(candidates, key=self._position)
        first = ordered[0]
        return MappedField(
            field_id=form_field.id,
            field_name=form_field.name,
            original_value="\n".join(c.original_value for c in ordered),
            mapped_value="\n".join(c.mapped_value for c in ordered),
            confidence=sum(c.confidence for c in ordered) / len(ordered),
            status=MappingStatus.MAPPED,
            source=first.source,
            metadata={
                'entity_type': first.metadata.get('entity_type'),
                'field_type': form_field.type,
                'position': first.metadata.get('position'),
                'values': len(ordered),
            }
        )

    def _apply_learned_corrections(self, mapped_fields: List[MappedField]) -> None:
        for mapped in mapped_fields:
            learned = self.correction_memory.lookup(mapped.field_id, mapped.original_value)
            if learned is None:
                continue
            mapped.mapped_value = learned
            mapped.confidence = min(mapped.confidence + self.LEARNED_BONUS, 1.0)
            mapped.metadata['learned'] = True
            mapped.metadata.setdefault('confidence_factors', []).append(
                ConfidenceFactorType.LEARNED_CORRECTION.value
            )
            self.logger.debug(f"Applied learned correction to {mapped.field_id}")

    def _validate(self,
                  structure: FormStructure,
                  mapped_fields: List[MappedField],
                  unmapped_fields: List[str]) -> List[str]:
        warnings = []
        for field_id in unmapped_fields:
            form_field = structure.get_field_by_id(field_id)
            if form_field.required:
                warnings.append(f"Required field not mapped: {field_id}")
        for mapped in mapped_fields:
            warnings.extend(self.normalizer.validate(mapped.mapped_value, structure.get_field_by_id(mapped.field_id)))
        return warnings

    @staticmethod
    def _build_sections(structure: FormStructure, mapped_fields: List[MappedField]) -> List[MappedSection]:
        sections: Dict[str, MappedSection] = OrderedDict()
        by_id = {f.field_id: f for f in mapped_fields}
        for form_field in structure.fields:
            section = sections.setdefault(form_field.section, MappedSection(section_id=form_field.section))
            if form_field.id in by_id:
                section.fields.append(by_id[form_field.id])
        return list(sections.values())

    def _first_usable_match(self, pattern: re.Pattern, text: str, kind: str) -> Optional[re.Match]:
        """First match of the pattern, skipping impossible calendar dates."""
        for match in pattern.finditer(text):
            if kind == 'date' and self._is_invalid_date(match.group(0)):
                self.logger.debug(f"Skipping invalid date: {match.group(0)}")
                continue
            return match
        return None

    def _is_invalid_date(self, value: str) -> bool:
        found = self.normalizer.date_extractor.extract(value)
        return bool(found) and all(e.metadata.get('valid') is False for e in found)

    @staticmethod
    def _position(mapped: MappedField) -> float:
        position = mapped.metadata.get('position')
        return position['start'] if position else float('inf')

    @staticmethod
    def _all_text(publication: StructuredPublication) -> str:
        parts = [
            publication.type,
            publication.power_emitter,
            publication.number,
            publication.date,
            publication.institution,
            publication.content,
        ] + publication.articles
        return "\n".join(p for p in parts if p)

    @staticmethod
    def _find_field_by_name(structure: FormStructure, field_type: str) -> Optional[FormField]:
        needle = field_type.lower()
        for form_field in structure.fields:
            if needle in form_field.id.lower() or needle in fold_text(form_field.name):
                return form_field
        return None

    @staticmethod
    def _find_field_by_nomenclature(structure: FormStructure,
                                    category: str,
                                    term: str,
                                    variation: str = "") -> Optional[FormField]:
        """
        Field for a nomenclature match: one listing the term itself, then
        the field named after the category, then one listing the category.
        """
        wanted = {fold_text(term), fold_text(variation)} - {""}
        for form_field in structure.fields:
            if any(fold_text(entry) in wanted for entry in form_field.algerian_nomenclature):
                return form_field
        for form_field in structure.fields:
            if form_field.id == category or fold_text(form_field.name) == category:
                return form_field
        for form_field in structure.fields:
            if any(fold_text(entry) == category for entry in form_field.algerian_nomenclature):
                return form_field
        return None
