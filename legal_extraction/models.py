"""
Data models for legal text extraction and form mapping.
"""

from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field
from enum import Enum


class EntityType(Enum):
    PUBLICATION_TYPE = "publication_type"
    POWER_EMITTER = "power_emitter"
    NUMBER = "number"
    DATE = "date"
    INSTITUTION = "institution"
    REFERENCE = "reference"
    CONTENT = "content"


class LinkType(Enum):
    ANNEXE = "annexe"
    MODIFICATION = "modification"
    ABROGATION = "abrogation"
    APPROVAL = "approval"
    CONFORMITY = "conformity"
    EXTENSION = "extension"
    VU = "vu"


class FieldType(Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"
    TEXTAREA = "textarea"
    FILE = "file"


class MappingStatus(Enum):
    MAPPED = "mapped"
    UNMAPPED = "unmapped"
    PENDING = "pending"
    SUGGESTED = "suggested"


class MappingSource(Enum):
    REGEX = "regex"
    NOMENCLATURE = "nomenclature"
    HEURISTIC = "heuristic"
    MANUAL = "manual"


@dataclass
class LegalEntity:
    """A tagged span of a legal text."""
    type: EntityType
    value: str
    confidence: float
    start: int
    end: int
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def cited(self) -> bool:
        """True when the span sits inside a 'Vu' clause of another text."""
        return bool(self.metadata.get('cited'))

    def overlaps(self, start: int, end: int) -> bool:
        return self.start < end and start < self.end

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'value': self.value,
            'confidence': self.confidence,
            'position': {'start': self.start, 'end': self.end},
            'metadata': dict(self.metadata),
        }


@dataclass
class PublicationLink:
    """A relation between the processed text and another publication."""
    type: LinkType
    source_publication: str
    target_publication: str
    description: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'source_publication': self.source_publication,
            'target_publication': self.target_publication,
            'description': self.description,
            'confidence': self.confidence,
        }


@dataclass
class StructuredPublication:
    """Structured view of a legal publication built from its entities."""
    type: str
    type_key: Optional[str]
    power_emitter: str
    number: str
    date: str
    institution: str
    content: str
    confidence: float
    hijri_date: str = ""
    gregorian_date: str = ""
    references: List[str] = field(default_factory=list)
    articles: List[str] = field(default_factory=list)
    entities: List[LegalEntity] = field(default_factory=list)
    links: List[PublicationLink] = field(default_factory=list)
    language: str = "unknown"
    raw_text: str = ""

    def get_entities(self, entity_type: EntityType, include_cited: bool = True) -> List[LegalEntity]:
        """Get entities of one type in document order."""
        return [
            e for e in self.entities
            if e.type == entity_type and (include_cited or not e.cited)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'type_key': self.type_key,
            'power_emitter': self.power_emitter,
            'number': self.number,
            'date': self.date,
            'hijri_date': self.hijri_date,
            'gregorian_date': self.gregorian_date,
            'institution': self.institution,
            'references': list(self.references),
            'content': self.content,
            'articles': list(self.articles),
            'confidence': self.confidence,
            'language': self.language,
            'entities': [e.to_dict() for e in self.entities],
            'links': [link.to_dict() for link in self.links],
        }


@dataclass
class FormField:
    """Specification of a single form field."""
    id: str
    name: str
    type: str = FieldType.TEXT.value
    required: bool = False
    algerian_nomenclature: List[str] = field(default_factory=list)
    regex_patterns: List[str] = field(default_factory=list)
    validation_rules: List[str] = field(default_factory=list)
    mapping_priority: int = 99
    entity_types: List[str] = field(default_factory=list)
    multiple: bool = False
    section: str = "general"

    def __post_init__(self):
        # Fail early on field types we cannot transform
        FieldType(self.type)


@dataclass
class FormStructure:
    """Complete specification of a form."""
    id: str
    name: str
    fields: List[FormField]
    algerian_specific: bool = True
    category: str = "legal"
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Convert field dicts to FormField objects
        self.fields = [FormField(**f) if isinstance(f, dict) else f for f in self.fields]

    def get_field_by_id(self, field_id: str) -> Optional[FormField]:
        """Get field spec by ID."""
        for form_field in self.fields:
            if form_field.id == field_id:
                return form_field
        return None

    @property
    def required_fields(self) -> List[FormField]:
        return [f for f in self.fields if f.required]


@dataclass
class MappedField:
    """A value assigned to a form field."""
    field_id: str
    field_name: str
    original_value: str
    mapped_value: str
    confidence: float
    status: MappingStatus = MappingStatus.MAPPED
    source: MappingSource = MappingSource.REGEX
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'field_id': self.field_id,
            'field_name': self.field_name,
            'original_value': self.original_value,
            'mapped_value': self.mapped_value,
            'confidence': self.confidence,
            'status': self.status.value,
            'source': self.source.value,
            'metadata': dict(self.metadata),
        }


@dataclass
class MappedSection:
    section_id: str
    fields: List[MappedField] = field(default_factory=list)


@dataclass
class MappingResult:
    """Result of mapping a publication onto a form."""
    form_id: str
    mapped_fields: List[MappedField]
    unmapped_fields: List[str]
    suggested_mappings: List[MappedField]
    overall_confidence: float
    processing_time: float
    sections: List[MappedSection] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_field(self, field_id: str) -> Optional[MappedField]:
        for mapped in self.mapped_fields:
            if mapped.field_id == field_id:
                return mapped
        return None

    def get_all_values(self) -> Dict[str, str]:
        """Get all mapped values as a flat dictionary."""
        return {f.field_id: f.mapped_value for f in self.mapped_fields}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'form_id': self.form_id,
            'mapped_fields': [f.to_dict() for f in self.mapped_fields],
            'unmapped_fields': list(self.unmapped_fields),
            'suggested_mappings': [f.to_dict() for f in self.suggested_mappings],
            'overall_confidence': self.overall_confidence,
            'processing_time': self.processing_time,
            'sections': [
                {'section_id': s.section_id, 'fields': [f.field_id for f in s.fields]}
                for s in self.sections
            ],
            'warnings': list(self.warnings),
            'metadata': dict(self.metadata),
        }
