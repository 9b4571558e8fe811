"""
Form registry for managing form structures.

Every legal publication type gets the default legal form. JSON files in the
form specs directory add new forms or override the default for a type; a
spec may name a base form in "extends" to inherit its fields.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import FieldType, FormField, FormStructure
from .utils.patterns import NUMBER_MARK

logger = logging.getLogger(__name__)

DEFAULT_FORM_TYPES = [
    'loi',
    'decret',
    'arrete',
    'ordonnance',
    'decision',
    'circulaire',
    'instruction',
    'avis',
    'proclamation',
]

FORM_CATEGORIES = ('legal', 'administrative', 'commercial', 'civil')


def default_fields() -> List[FormField]:
    """The five fields every legal publication form carries."""
    return [
        FormField(
            id='document_type',
            name='Type de document',
            type='select',
            required=True,
            algerian_nomenclature=['loi', 'décret', 'arrêté', 'ordonnance',
                                   'قانون', 'مرسوم', 'قرار', 'أمر'],
            entity_types=['publication_type'],
            mapping_priority=1,
        ),
        FormField(
            id='document_number',
            name='Numéro du document',
            type='text',
            required=True,
            regex_patterns=[rf'{NUMBER_MARK}\s*(\d+(?:[-/]\d+)*)'],
            entity_types=['number', 'publication_type'],
            mapping_priority=2,
        ),
        FormField(
            id='date_emission',
            name="Date d'émission",
            type='date',
            required=True,
            entity_types=['date'],
            mapping_priority=3,
        ),
        FormField(
            id='institution',
            name='Institution émettrice',
            type='text',
            required=True,
            algerian_nomenclature=['présidence', 'ministère', 'direction', 'wilaya',
                                   'الرئاسة', 'وزارة', 'المديرية', 'ولاية'],
            entity_types=['institution'],
            mapping_priority=4,
        ),
        FormField(
            id='content',
            name='Contenu',
            type='textarea',
            required=False,
            entity_types=['content'],
            multiple=True,
            mapping_priority=5,
            section='content',
        ),
    ]


class FormRegistry:
    """Registry for loading and managing form structures."""

    def __init__(self, specs_dir: Optional[Path] = None):
        """
        Initialize the registry.

        Args:
            specs_dir: Directory containing form spec JSON files
        """
        self.specs_dir = Path(specs_dir) if specs_dir else Path("templates/form_specs")
        self.structures: Dict[str, FormStructure] = {}
        self._load_all_specs()

    def _load_all_specs(self) -> None:
        """Load all form specs from the specs directory."""
        if not self.specs_dir.exists():
            logger.debug(f"Specs directory not found: {self.specs_dir}")
            return

        for spec_file in sorted(self.specs_dir.glob("*.json")):
            structure = self.load_spec_from_file(spec_file)
            if structure:
                self.structures[structure.id] = structure
                logger.info(f"Loaded form spec: {structure.id} ({len(structure.fields)} fields)")

    def load_spec_from_file(self, spec_path: Path) -> Optional[FormStructure]:
        """
        Load a form structure from a JSON file.

        Args:
            spec_path: Path to the spec JSON file

        Returns:
            FormStructure or None if loading failed
        """
        try:
            with open(spec_path, 'r', encoding='utf-8') as f:
                spec_data = json.load(f)
            return self.build_structure(spec_data)
        except (OSError, json.JSONDecodeError, ValueError, TypeError) as e:
            logger.error(f"Failed to load spec {spec_path.name}: {e}")
            return None

    def build_structure(self, spec_data: Dict[str, Any]) -> FormStructure:
        """
        Build a FormStructure from a spec dictionary.

        Raises:
            ValueError: If the spec is invalid
        """
        errors = self.validate_spec_data(spec_data)
        if errors:
            raise ValueError("; ".join(errors))

        fields: List[FormField] = []
        base = spec_data.get('extends')
        if base:
            base_structure = self.get_form_structure(base)
            if base_structure is None:
                raise ValueError(f"Unknown base form: {base}")
            fields = list(base_structure.fields)

        for field_data in spec_data['fields']:
            form_field = FormField(**field_data)
            fields = [f for f in fields if f.id != form_field.id] + [form_field]

        return FormStructure(
            id=spec_data['id'],
            name=spec_data.get('name', f"Formulaire {spec_data['id']}"),
            fields=sorted(fields, key=lambda f: f.mapping_priority),
            algerian_specific=spec_data.get('algerian_specific', True),
            category=spec_data.get('category', 'legal'),
            metadata=spec_data.get('metadata', {}),
        )

    def validate_spec_data(self, spec_data: Dict[str, Any]) -> List[str]:
        """
        Validate a raw form spec for completeness and correctness.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(spec_data, dict):
            return ["Spec must be a JSON object"]
        if not spec_data.get('id'):
            errors.append("Missing id")
        if not spec_data.get('fields'):
            errors.append("No fields defined")
        if spec_data.get('category', 'legal') not in FORM_CATEGORIES:
            errors.append(f"Unknown category: {spec_data.get('category')}")

        valid_types = {t.value for t in FieldType}
        field_ids = set()
        for field_data in spec_data.get('fields') or []:
            field_id = field_data.get('id')
            if not field_id:
                errors.append(f"Field missing id: {field_data.get('name')}")
            elif field_id in field_ids:
                errors.append(f"Duplicate field id: {field_id}")
            else:
                field_ids.add(field_id)

            if not field_data.get('name'):
                errors.append(f"Field {field_id} missing name")

            field_type = field_data.get('type', FieldType.TEXT.value)
            if field_type not in valid_types:
                errors.append(f"Field {field_id} has unknown type: {field_type}")

        return errors

    def validate_structure(self, structure: FormStructure) -> List[str]:
        """Validate an already built structure."""
        errors = []
        if not structure.id:
            errors.append("Missing id")
        if not structure.fields:
            errors.append("No fields defined")
        field_ids = set()
        for form_field in structure.fields:
            if form_field.id in field_ids:
                errors.append(f"Duplicate field id: {form_field.id}")
            field_ids.add(form_field.id)
        return errors

    def get_form_structure(self, form_type: str) -> Optional[FormStructure]:
        """
        Get a form structure by type.

        Args:
            form_type: Form identifier

        Returns:
            FormStructure or None if the type is unknown
        """
        if form_type in self.structures:
            return self.structures[form_type]
        if form_type in DEFAULT_FORM_TYPES:
            return FormStructure(
                id=form_type,
                name=f"Formulaire {form_type}",
                fields=default_fields(),
            )
        return None

    def list_form_types(self) -> List[str]:
        """List all available form types, defaults first."""
        extra = [form_id for form_id in self.structures if form_id not in DEFAULT_FORM_TYPES]
        return DEFAULT_FORM_TYPES + extra

    def reload(self) -> None:
        """Reload all specs from disk."""
        self.structures.clear()
        self._load_all_specs()
