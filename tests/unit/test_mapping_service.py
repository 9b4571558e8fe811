#!/usr/bin/env python3
"""
Tests for mapping extracted publications onto legal forms.
"""

import pytest

from legal_extraction.confidence import ConfidenceScorer
from legal_extraction.learning import CorrectionMemory
from legal_extraction.mapping_service import IntelligentMappingService
from legal_extraction.models import (
    EntityType,
    FormField,
    LegalEntity,
    MappedField,
    MappingSource,
    MappingStatus,
    StructuredPublication,
)
from legal_extraction.registry import FormRegistry


def test_french_decree_mapping(regex_service, mapping_service, french_decree):
    publication = regex_service.process_text(french_decree)
    result = mapping_service.map_extracted_data_to_form(publication, 'decret')

    assert result.form_id == 'decret'
    assert result.get_all_values() == {
        'document_type': "décret",
        'document_number': "23-145",
        'date_emission': "12/03/2023",
        'institution': "Ministère de la Justice",
        'content': (
            "Article 1 : Le présent décret a pour objet de fixer les modalités.\n"
            "Article 2 : Le présent décret sera publié au Journal officiel."
        ),
    }
    assert result.unmapped_fields == []
    assert result.suggested_mappings == []
    assert result.warnings == []
    assert result.overall_confidence == pytest.approx(0.9133, abs=1e-3)


def test_field_confidences(regex_service, mapping_service, french_decree):
    publication = regex_service.process_text(french_decree)
    result = mapping_service.map_extracted_data_to_form(publication, 'decret')

    assert result.get_field('document_type').confidence == pytest.approx(1.0)
    assert result.get_field('document_number').confidence == pytest.approx(0.85)
    assert result.get_field('date_emission').confidence == pytest.approx(0.8167, abs=1e-3)
    assert result.get_field('institution').confidence == pytest.approx(1.0)
    assert result.get_field('content').confidence == pytest.approx(0.9)
    for mapped in result.mapped_fields:
        assert mapped.source == MappingSource.REGEX
        assert mapped.status == MappingStatus.MAPPED


def test_cited_values_never_mapped(regex_service, mapping_service, french_decree):
    publication = regex_service.process_text(french_decree)
    result = mapping_service.map_extracted_data_to_form(publication, 'decret')

    values = " ".join(result.get_all_values().values())
    assert "90-11" not in values
    assert "21/04/1990" not in values


def test_arabic_decree_mapping(regex_service, mapping_service, arabic_decree):
    publication = regex_service.process_text(arabic_decree)
    result = mapping_service.map_extracted_data_to_form(publication, 'decret')

    values = result.get_all_values()
    assert values['document_type'] == "مرسوم"
    assert values['document_number'] == "23-145"
    assert values['date_emission'] == "11/03/2024"
    assert values['institution'] == "وزارة العدل"
    assert result.unmapped_fields == []


def test_low_confidence_text(regex_service, mapping_service, low_confidence_text):
    publication = regex_service.process_text(low_confidence_text)
    result = mapping_service.map_extracted_data_to_form(publication, 'decret')

    assert [f.field_id for f in result.mapped_fields] == ['content']
    assert result.get_field('content').confidence == pytest.approx(0.75)
    assert result.unmapped_fields == ['document_type', 'document_number', 'date_emission', 'institution']
    assert "Required field not mapped: document_type" in result.warnings
    assert result.metadata['fields_unmapped'] == 4
    assert result.metadata['document_type'] == "Type inconnu"


def test_sections(regex_service, mapping_service, french_decree):
    publication = regex_service.process_text(french_decree)
    result = mapping_service.map_extracted_data_to_form(publication, 'decret')

    sections = {s.section_id: [f.field_id for f in s.fields] for s in result.sections}
    assert sections == {
        'general': ['document_type', 'document_number', 'date_emission', 'institution'],
        'content': ['content'],
    }


def test_unsupported_form_type(regex_service, mapping_service, french_decree):
    publication = regex_service.process_text(french_decree)
    with pytest.raises(ValueError, match="Unsupported form type"):
        mapping_service.map_extracted_data_to_form(publication, 'passeport')


def test_regex_rules_fill_fields_without_entities(mapping_service):
    """Values stated only in the publication summary are found by the rules."""
    publication = StructuredPublication(
        type="Type inconnu",
        type_key=None,
        power_emitter="Émetteur inconnu",
        number="",
        date="",
        institution="",
        content="Service des archives, numéro 45 du 3/4/2021",
        confidence=0.0,
    )
    result = mapping_service.map_extracted_data_to_form(publication, 'decret')

    number = result.get_field('document_number')
    assert number.mapped_value == "numéro 45"
    assert number.confidence == pytest.approx(0.9)
    assert number.metadata['rule_name'] == 'number'
    assert result.get_field('date_emission').mapped_value == "03/04/2021"
    assert result.get_field('institution').mapped_value == "Service des archives, numéro 45 du 3/4/2021"


def test_impossible_date_is_not_mapped(regex_service, mapping_service):
    text = ("Ministère de la Justice\n"
            "Décret exécutif n° 23-145 du 31/02/2023 fixant les modalités d'application\n"
            "Article 1 : Le présent décret est publié.")
    publication = regex_service.process_text(text)
    assert publication.date == "31/02/2023"

    result = mapping_service.map_extracted_data_to_form(publication, 'decret')

    assert result.get_field('date_emission') is None
    assert 'date_emission' in result.unmapped_fields
    assert "Required field not mapped: date_emission" in result.warnings
    assert [s.field_id for s in result.suggested_mappings] == []
    assert result.get_field('document_number').mapped_value == "23-145"


def test_french_hijri_date_is_converted(regex_service, mapping_service):
    publication = regex_service.process_text(
        "Décret exécutif n° 23-145 du 19 Chaâbane 1444 correspondant au 12 mars 2023 fixant"
    )
    result = mapping_service.map_extracted_data_to_form(publication, 'decret')

    assert result.get_field('date_emission').mapped_value == "12/03/2023"
    assert result.get_field('date_emission').original_value == "19 Chaâbane 1444"


def test_wilaya_name_goes_to_wilaya_field(mapping_service):
    publication = StructuredPublication(
        type="Type inconnu",
        type_key=None,
        power_emitter="Émetteur inconnu",
        number="",
        date="",
        institution="",
        content="Fermeture d'un commerce à Oran",
        confidence=0.0,
    )

    wilaya_form = mapping_service.map_extracted_data_to_form(publication, 'arrete_wilaya')
    assert wilaya_form.get_field('wilaya').original_value == "Oran"
    assert wilaya_form.get_field('wilaya').source == MappingSource.NOMENCLATURE
    assert 'institution' in wilaya_form.unmapped_fields

    # Without a wilaya field, the institution field lists the category
    decree_form = mapping_service.map_extracted_data_to_form(publication, 'decret')
    assert decree_form.get_field('institution').original_value == "Oran"


def test_nomenclature_pass_and_suggestions():
    registry = FormRegistry(specs_dir=None)
    registry.structures['registre'] = registry.build_structure({
        'id': 'registre',
        'fields': [
            {'id': 'wilaya', 'name': 'Wilaya', 'algerian_nomenclature': ['wilaya']},
            {'id': 'reference', 'name': 'Référence', 'type': 'number', 'required': True},
            {'id': 'jour', 'name': 'Jour', 'type': 'date'},
        ],
    })
    service = IntelligentMappingService(registry=registry)
    publication = StructuredPublication(
        type="Type inconnu",
        type_key=None,
        power_emitter="Émetteur inconnu",
        number="",
        date="",
        institution="",
        content="Recueil de la wilaya de Tlemcen",
        confidence=0.0,
    )

    result = service.map_extracted_data_to_form(publication, 'registre')

    wilaya = result.get_field('wilaya')
    assert wilaya.source == MappingSource.NOMENCLATURE
    assert wilaya.original_value == 'Tlemcen'
    assert wilaya.metadata['category'] == 'wilaya'
    assert result.unmapped_fields == ['reference', 'jour']
    assert result.suggested_mappings == []
    assert result.warnings == ["Required field not mapped: reference"]


def test_suggestions_for_unmapped_fields():
    registry = FormRegistry(specs_dir=None)
    registry.structures['registre'] = registry.build_structure({
        'id': 'registre',
        'fields': [
            {'id': 'jour', 'name': 'Jour de signature', 'type': 'date', 'entity_types': ['date']},
            {'id': 'organe', 'name': 'Organe', 'algerian_nomenclature': ['recueil']},
        ],
    })
    service = IntelligentMappingService(config={'mapping_threshold': 0.99}, registry=registry)
    publication = StructuredPublication(
        type="Type inconnu",
        type_key=None,
        power_emitter="Émetteur inconnu",
        number="",
        date="",
        institution="",
        content="",
        confidence=0.0,
        articles=["Article 1 : Signé le 02/05/2022, publié au recueil."],
        raw_text="Article 1 : Signé le 02/05/2022, publié au recueil.",
    )

    result = service.map_extracted_data_to_form(publication, 'registre')

    suggestions = {s.field_id: s for s in result.suggested_mappings}
    assert suggestions['jour'].mapped_value == "02/05/2022"
    assert suggestions['jour'].confidence == 0.8
    assert suggestions['jour'].status == MappingStatus.SUGGESTED
    assert suggestions['jour'].source == MappingSource.HEURISTIC
    assert suggestions['organe'].mapped_value == "recueil"
    assert suggestions['organe'].confidence == 0.7
    assert result.get_field('jour') is None


def test_learned_correction_applied(regex_service, french_decree):
    memory = CorrectionMemory()
    memory.record('institution', "Ministère de la Justice", "Ministère de la Justice (MJ)")
    service = IntelligentMappingService(correction_memory=memory)

    result = service.map_extracted_data_to_form(regex_service.process_text(french_decree), 'decret')

    institution = result.get_field('institution')
    assert institution.mapped_value == "Ministère de la Justice (MJ)"
    assert institution.metadata['learned'] is True
    assert 'learned_correction' in institution.metadata['confidence_factors']


def test_map_to_algerian_nomenclature(mapping_service):
    found = mapping_service.map_to_algerian_nomenclature("Arrêté de la wilaya d'Oran")
    terms = {(t['category'], t['term']) for t in found['mapped_terms']}

    assert ('document_types', 'arrete') in terms
    assert ('wilaya', 'oran') in terms
    assert found['nomenclature'] == 'algerian_legal'
    assert found['confidence'] == 0.8
    assert mapping_service.map_to_algerian_nomenclature("")['confidence'] == 0.0


def test_available_form_types(mapping_service):
    form_types = mapping_service.get_available_form_types()
    assert form_types[:3] == ['loi', 'decret', 'arrete']
    assert 'arrete_wilaya' in form_types


def test_scorer_type_and_nomenclature_match():
    scorer = ConfidenceScorer()
    entity = LegalEntity(EntityType.DATE, "12/03/2023", 0.9, 0, 10)

    declared = FormField(id='d', name='Date', type='date', entity_types=['date'])
    undeclared = FormField(id='d', name='Date', type='date')
    other = FormField(id='t', name='Titre', type='select', algerian_nomenclature=['loi'])

    assert scorer.type_match(entity, declared) == 0.9
    assert scorer.type_match(entity, undeclared) == 0.9
    assert scorer.type_match(entity, other) == 0.5
    assert scorer.nomenclature_match(entity, declared) == 0.5
    assert scorer.nomenclature_match(entity, other) == 0.3
    assert scorer.score_entity_for_field(entity, declared) == pytest.approx(2.3 / 3)


def test_scorer_dynamic_confidence():
    scorer = ConfidenceScorer()
    publication = StructuredPublication(
        type="Loi n° 1", type_key='loi', power_emitter="", number="1", date="",
        institution="", content="", confidence=0.0, raw_text="x" * 100,
    )
    mapped = MappedField(
        field_id='document_type', field_name='Type', original_value="Loi n° 1",
        mapped_value="loi", confidence=0.7, metadata={'position': {'start': 10, 'end': 18}},
    )

    confidence, factors = scorer.dynamic_confidence(mapped, publication)

    assert confidence == pytest.approx(0.9)
    assert [f.factor_type.value for f in factors] == [
        'nomenclature_validation', 'document_type_consistency', 'document_position',
    ]

    mapped.confidence = 0.98
    assert scorer.dynamic_confidence(mapped, publication)[0] == 1.0


def test_scorer_levels():
    scorer = ConfidenceScorer({'high_confidence_threshold': 0.85})
    assert scorer.confidence_level(0.9) == 'high'
    assert scorer.confidence_level(0.7) == 'medium'
    assert scorer.confidence_level(0.5) == 'low'
    assert scorer.requires_manual_review(0.5)
    assert not scorer.is_mappable(0.7)
    assert scorer.overall_confidence([]) == 0.0
