#!/usr/bin/env python3
"""
Tests for Hijri/Gregorian date extraction and conversion.
"""

from datetime import date

from legal_extraction.extractors import DateExtractor
from legal_extraction.utils.hijri import hijri_to_gregorian
from legal_extraction.utils.text import detect_language, fold_text, normalize_digits, remove_spans


def test_hijri_conversion():
    assert hijri_to_gregorian(1445, 9, 1) == date(2024, 3, 11)
    assert hijri_to_gregorian(1445, 1, 1) == date(2023, 7, 19)


def test_hijri_out_of_range():
    assert hijri_to_gregorian(1445, 13, 1) is None
    assert hijri_to_gregorian(1445, 1, 31) is None
    assert hijri_to_gregorian(0, 1, 1) is None


def test_hijri_entity_carries_gregorian():
    entities = DateExtractor().extract("مؤرخ في 1 رمضان عام 1445")

    assert len(entities) == 1
    assert entities[0].value == "1 رمضان عام 1445"
    assert entities[0].confidence == 0.95
    assert entities[0].metadata['calendar'] == 'hijri'
    assert entities[0].metadata['gregorian'] == "2024-03-11"


def test_multiword_hijri_month():
    entities = DateExtractor().extract("12 ذي القعدة 1443")
    assert entities[0].value == "12 ذي القعدة 1443"


def test_french_hijri_dates():
    text = "Décret du 19 Chaâbane 1444 correspondant au 12 mars 2023"
    entities = DateExtractor().extract(text)

    assert [e.value for e in entities] == ["19 Chaâbane 1444", "12 mars 2023"]
    hijri, gregorian = entities
    assert hijri.metadata['calendar'] == 'hijri'
    assert hijri.metadata['style'] == 'french'
    assert hijri.metadata['gregorian'] == "2023-03-12"
    assert hijri.confidence == 0.95
    assert gregorian.metadata['iso'] == hijri.metadata['gregorian']


def test_french_hijri_spellings():
    entities = DateExtractor().extract(
        "le 1er Moharram 1445, le 2 DHOU EL KAADA 1444 et le 5 Joumada-El-Oula 1440"
    )

    assert [e.value for e in entities] == [
        "1er Moharram 1445", "2 DHOU EL KAADA 1444", "5 Joumada-El-Oula 1440",
    ]
    assert entities[0].metadata['gregorian'] == "2023-07-19"
    assert entities[1].metadata['gregorian'] == "2023-05-22"
    assert all(e.metadata['calendar'] == 'hijri' for e in entities)


def test_unknown_month_words_are_ignored():
    assert DateExtractor().extract("Article 3 portant création 2021") == []


def test_gregorian_styles():
    text = "du 12/03/2023, du 1er janvier 2020 et 5 جويلية سنة 1962"
    entities = DateExtractor().extract(text)

    assert [e.metadata['style'] for e in entities] == ['numeric', 'french', 'arabic']
    assert [e.metadata['iso'] for e in entities] == ["2023-03-12", "2020-01-01", "1962-07-05"]
    assert [e.confidence for e in entities] == [0.9, 0.85, 0.85]


def test_impossible_date_is_kept_with_low_confidence():
    entities = DateExtractor().extract("31/02/2023")

    assert len(entities) == 1
    assert entities[0].metadata['valid'] is False
    assert 'iso' not in entities[0].metadata
    assert entities[0].confidence == 0.6


def test_french_month_case_and_accents():
    entities = DateExtractor().extract("le 14 Février 2019 et le 3 aout 2001")
    assert [e.metadata['iso'] for e in entities] == ["2019-02-14", "2001-08-03"]


def test_no_dates():
    assert DateExtractor().extract("Article 12 : sans date") == []


def test_normalize_digits():
    assert normalize_digits("٢٠٢٤/٠٣/١١") == "2024/03/11"
    assert normalize_digits("۱۲") == "12"
    assert normalize_digits("") == ""


def test_fold_text():
    assert fold_text("Arrêté Ministériel") == "arrete ministeriel"
    assert fold_text(None) == ""


def test_detect_language():
    assert detect_language("Décret exécutif") == 'fr'
    assert detect_language("مرسوم تنفيذي") == 'ar'
    assert detect_language("Décret مرسوم") == 'mixed'
    assert detect_language("12/03/2023") == 'unknown'


def test_remove_spans_merges_overlaps():
    assert remove_spans("abcdefghij", [(2, 5), (4, 7), (8, 9)]) == "abhj"
