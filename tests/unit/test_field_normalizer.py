#!/usr/bin/env python3
"""
Tests for field value transformation and validation.
"""

from legal_extraction.extractors import DateExtractor
from legal_extraction.models import FormField
from legal_extraction.normalizers import FieldNormalizer
from legal_extraction.registry import default_fields


def _field(field_id):
    return next(f for f in default_fields() if f.id == field_id)


def test_select_canonicalizes_to_field_option():
    normalizer = FieldNormalizer()
    document_type = _field('document_type')

    assert normalizer.transform_value_for_field("Décret exécutif n° 23-145", document_type) == "décret"
    assert normalizer.transform_value_for_field("مرسوم رئاسي رقم 20-01", document_type) == "مرسوم"
    assert normalizer.transform_value_for_field("Circulaire  n° 3", document_type) == "Circulaire n° 3"


def test_field_pattern_extracts_number():
    normalizer = FieldNormalizer()
    document_number = _field('document_number')

    assert normalizer.transform_value_for_field("Décret exécutif n° 23-145", document_number) == "23-145"
    assert normalizer.transform_value_for_field("رقم ١٢-٠٤", document_number) == "12-04"


def test_date_from_entity_metadata():
    normalizer = FieldNormalizer()
    entity = DateExtractor().extract("1 رمضان عام 1445")[0]

    assert normalizer.transform_value_for_field(entity.value, _field('date_emission'), entity) == "11/03/2024"


def test_date_without_entity():
    normalizer = FieldNormalizer()
    date_field = _field('date_emission')

    assert normalizer.transform_value_for_field("21 avril 1990", date_field) == "21/04/1990"
    assert normalizer.transform_value_for_field("1/2/2003", date_field) == "01/02/2003"
    assert normalizer.transform_value_for_field("sans date", date_field) == "sans date"


def test_number_type():
    normalizer = FieldNormalizer()
    number_field = FormField(id='page', name='Page', type='number')

    assert normalizer.transform_value_for_field("page 12 bis", number_field) == "12"
    assert normalizer.transform_value_for_field("aucune", number_field) == "aucune"


def test_text_and_textarea():
    normalizer = FieldNormalizer()

    assert normalizer.transform_value_for_field("  Ministère   de la  Justice ", _field('institution')) == \
        "Ministère de la Justice"
    assert normalizer.transform_value_for_field("  ligne 1\nligne 2  ", _field('content')) == "ligne 1\nligne 2"
    assert normalizer.transform_value_for_field("", _field('content')) == ""
    assert normalizer.stats['fields_normalized'] == 2


def test_validate_rules():
    normalizer = FieldNormalizer()
    form_field = FormField(id='numero', name='Numéro', validation_rules=[r'^\d+-\d+$'])

    assert normalizer.validate("23-145", form_field) == []
    errors = normalizer.validate("23/145", form_field)
    assert errors == [r"Field numero doesn't match pattern: ^\d+-\d+$"]
    assert normalizer.stats['validation_errors'] == 1


def test_invalid_rule_reported():
    normalizer = FieldNormalizer()
    form_field = FormField(id='numero', name='Numéro', validation_rules=['(unclosed'])

    errors = normalizer.validate("23-145", form_field)
    assert len(errors) == 1
    assert "invalid validation rule" in errors[0]
