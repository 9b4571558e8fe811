"""
Pytest configuration for the legal extraction tests.
"""

import pytest
import sys
from pathlib import Path

# Add the project root to the Python path so tests can import modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from legal_extraction.config import Settings  # noqa: E402
from legal_extraction.mapping_service import IntelligentMappingService  # noqa: E402
from legal_extraction.pipeline import LegalDocumentPipeline  # noqa: E402
from legal_extraction.regex_service import LegalRegexService  # noqa: E402

SPECS_DIR = project_root / "templates" / "form_specs"

FRENCH_DECREE = "\n".join([
    "REPUBLIQUE ALGERIENNE DEMOCRATIQUE ET POPULAIRE",
    "Ministère de la Justice",
    "Décret exécutif n° 23-145 du 12/03/2023 fixant les modalités d'application",
    "Le Premier ministre,",
    "Vu la Constitution, notamment ses articles 112 et 141",
    "Vu la loi n° 90-11 du 21 avril 1990 relative aux relations de travail",
    "Décrète :",
    "Article 1 : Le présent décret a pour objet de fixer les modalités.",
    "Article 2 : Le présent décret sera publié au Journal officiel.",
])

ARABIC_DECREE = "\n".join([
    "الجمهورية الجزائرية الديمقراطية الشعبية",
    "وزارة العدل",
    "مرسوم تنفيذي رقم ٢٣-١٤٥ مؤرخ في 1 رمضان عام 1445 الموافق 11 مارس سنة 2024 يحدد كيفيات التطبيق",
    "بمقتضى القانون رقم 90-11 المتعلق بعلاقات العمل",
    "المادة 1 : يهدف هذا النص إلى تحديد كيفيات تسيير الأرشيف.",
    "المادة 2 : ينشر هذا النص في الجريدة الرسمية.",
])

LOW_CONFIDENCE_TEXT = "Texte sans métadonnées claires.\nArticle 3 : quelque chose."


@pytest.fixture
def french_decree():
    return FRENCH_DECREE


@pytest.fixture
def arabic_decree():
    return ARABIC_DECREE


@pytest.fixture
def low_confidence_text():
    return LOW_CONFIDENCE_TEXT


@pytest.fixture
def regex_service():
    return LegalRegexService()


@pytest.fixture
def mapping_service():
    return IntelligentMappingService(config={'form_specs_dir': SPECS_DIR})


@pytest.fixture
def settings(tmp_path):
    """Settings that keep every output inside the test's temp directory."""
    return Settings(form_specs_dir=SPECS_DIR, output_dir=tmp_path / "outputs")


@pytest.fixture
def pipeline(settings):
    return LegalDocumentPipeline(settings)
