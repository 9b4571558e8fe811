#!/usr/bin/env python3
"""
Tests for the Algerian nomenclature lookup.
"""

from legal_extraction.nomenclature import ALGERIAN_NOMENCLATURE, DEFAULT_NOMENCLATURE, NomenclatureIndex


def test_all_wilayas_present():
    assert len(ALGERIAN_NOMENCLATURE['wilaya']) == 58


def test_find_terms_folds_accents_and_case():
    matches = DEFAULT_NOMENCLATURE.find_terms("ARRETE MINISTERIEL portant organisation")
    found = {(m.category, m.term) for m in matches}

    assert ('document_types', 'arrete') in found
    assert ('power_emitters', 'ministeriel') in found


def test_find_terms_arabic():
    matches = DEFAULT_NOMENCLATURE.find_terms("مرسوم رئاسي صادر عن وزارة المالية", category='document_types')
    assert [(m.term, m.canonical) for m in matches] == [('decret', 'décret')]


def test_whole_words_only():
    """Short names never match inside longer words."""
    assert DEFAULT_NOMENCLATURE.find_terms("les emplois et la milice", category='document_types') == []
    assert DEFAULT_NOMENCLATURE.find_terms("la milice", category='wilaya') == []
    assert DEFAULT_NOMENCLATURE.find_terms("wilaya de Mila", category='wilaya')[0].term == 'mila'


def test_one_match_per_term():
    matches = DEFAULT_NOMENCLATURE.find_terms("loi, law, قانون", category='document_types')
    assert len(matches) == 1
    assert matches[0].variation == 'loi'


def test_contains_any():
    assert DEFAULT_NOMENCLATURE.contains_any("Ministère de la Justice", ['wilaya', 'ministère']) == 'ministère'
    assert DEFAULT_NOMENCLATURE.contains_any("Texte", ['wilaya']) is None


def test_validate_and_document_type():
    assert DEFAULT_NOMENCLATURE.validate("Wilaya d'Oran")
    assert not DEFAULT_NOMENCLATURE.validate("12/03/2023")
    assert not DEFAULT_NOMENCLATURE.validate("")
    assert DEFAULT_NOMENCLATURE.document_type_of("le décret modifiant la loi") == 'decret'
    assert DEFAULT_NOMENCLATURE.document_type_of("Ministère de la Justice") is None


def test_custom_nomenclature():
    index = NomenclatureIndex({'organes': {'apn': ['APN', 'المجلس الشعبي الوطني']}})
    matches = index.find_terms("Texte adopté par l'APN")

    assert len(matches) == 1
    assert matches[0].to_dict() == {
        'category': 'organes',
        'term': 'apn',
        'variation': 'APN',
        'canonical': 'APN',
    }
