"""
Synthetic Algerian legal texts for demos and tests.

Texts follow the layout of the Journal officiel: state header, issuing
institution, title with number and date, visa clauses and numbered articles.
Each generated text comes with the values a correct extraction should find.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from faker import Faker

from .hijri import hijri_to_gregorian
from .patterns import ARABIC_GREGORIAN_MONTHS, FRENCH_MONTHS, HIJRI_MONTHS

logger = logging.getLogger(__name__)

FRENCH_TITLES = {
    'loi': ('Loi', [''], 'Promulgue'),
    'decret': ('Décret', ['exécutif', 'présidentiel'], 'Décrète'),
    'arrete': ('Arrêté', ['interministériel', 'ministériel'], 'Arrête'),
    'ordonnance': ('Ordonnance', [''], 'Ordonne'),
}

ARABIC_TITLES = {
    'loi': ('قانون', ['']),
    'decret': ('مرسوم', ['تنفيذي', 'رئاسي']),
    'arrete': ('قرار', ['وزاري مشترك', 'وزاري']),
    'ordonnance': ('أمر', ['']),
}

FRENCH_INSTITUTIONS = [
    'Ministère de la Justice',
    'Ministère des Finances',
    "Ministère de l'Intérieur et des Collectivités locales",
    'Ministère du Travail, de l\'Emploi et de la Sécurité sociale',
    'Direction générale des Impôts',
    "Wilaya d'Oran",
]

ARABIC_INSTITUTIONS = [
    'وزارة العدل',
    'وزارة المالية',
    'وزارة الداخلية والجماعات المحلية',
    'وزارة العمل والتشغيل والضمان الاجتماعي',
    'المديرية العامة للضرائب',
    'ولاية وهران',
]

FRENCH_SUBJECTS = [
    "fixant les modalités d'application",
    "portant organisation de l'administration centrale",
    'relatif aux conditions d\'exercice',
    'fixant le statut particulier des fonctionnaires',
    'portant création d\'un établissement public',
]

ARABIC_SUBJECTS = [
    'يحدد كيفيات التطبيق',
    'يتضمن تنظيم الإدارة المركزية',
    'يتعلق بشروط الممارسة',
    'يتضمن إنشاء مؤسسة عمومية',
]

FRENCH_ARTICLES = [
    "Le présent texte a pour objet de fixer les modalités de {}.",
    "Les dispositions du présent texte s'appliquent à {}.",
    "Sont abrogées toutes dispositions contraires relatives à {}.",
    "Le présent texte sera publié au Journal officiel.",
]

ARABIC_ARTICLES = [
    'يهدف هذا النص إلى تحديد كيفيات {}.',
    'تطبق أحكام هذا النص على {}.',
    'ينشر هذا النص في الجريدة الرسمية.',
]

SIGNATORIES = ['Le Premier ministre', 'Le Président de la République', 'Le ministre de la Justice, garde des sceaux']

FRENCH_TOPICS = ['la gestion des archives', 'la formation continue', 'la commande publique',
                 "l'aménagement du territoire", 'la protection des données']
ARABIC_TOPICS = ['تسيير الأرشيف', 'التكوين المتواصل', 'الصفقات العمومية', 'تهيئة الإقليم']

# First spelling of each month, as printed
_FRENCH_MONTH_NAMES = {v: k for k, v in reversed(list(FRENCH_MONTHS.items()))}
_ARABIC_MONTH_NAMES = {v: k for k, v in reversed(list(ARABIC_GREGORIAN_MONTHS.items()))}
_HIJRI_MONTH_NAMES = {v: k for k, v in reversed(list(HIJRI_MONTHS.items()))}


@dataclass
class GeneratedLegalText:
    """A synthetic text and the values extraction should recover."""
    text: str
    language: str
    expected: Dict[str, Any] = field(default_factory=dict)


class SyntheticLegalTextGenerator:
    """Helper class for generating realistic Algerian legal texts."""

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize the generator.

        Args:
            seed: Random seed for reproducible generation
        """
        self.fake = Faker('fr_FR')
        if seed is not None:
            Faker.seed(seed)
            random.seed(seed)

    def generate_french_text(self,
                             publication_type: str = 'decret',
                             num_articles: int = 3,
                             with_references: bool = True) -> GeneratedLegalText:
        """Generate a French publication of the given type."""
        label, qualifiers, verb = FRENCH_TITLES[publication_type]
        qualifier = random.choice(qualifiers)
        number = self._generate_number()
        issued = self._generate_date()
        institution = random.choice(FRENCH_INSTITUTIONS)

        title = " ".join(p for p in [label, qualifier, f"n° {number}"] if p)
        lines = [
            "REPUBLIQUE ALGERIENNE DEMOCRATIQUE ET POPULAIRE",
            institution,
            f"{title} du {issued.strftime('%d/%m/%Y')} {random.choice(FRENCH_SUBJECTS)}",
            f"{random.choice(SIGNATORIES)},",
        ]
        if with_references:
            cited_date = self._generate_date(1990, 2015)
            lines.append("Vu la Constitution, notamment ses articles 112 et 141")
            lines.append(
                f"Vu la loi n° {self._generate_number(cited_date.year)} du {cited_date.day} "
                f"{_FRENCH_MONTH_NAMES[cited_date.month]} {cited_date.year} relative à "
                f"{random.choice(FRENCH_TOPICS)}"
            )
        lines.append(f"{verb} :")
        lines.extend(self._french_articles(num_articles))

        return GeneratedLegalText(
            text="\n".join(lines),
            language='fr',
            expected={
                'type_key': publication_type,
                'number': number,
                'date': issued.strftime('%d/%m/%Y'),
                'institution': institution,
                'articles': num_articles,
            }
        )

    def generate_arabic_text(self,
                             publication_type: str = 'decret',
                             num_articles: int = 3,
                             with_references: bool = True) -> GeneratedLegalText:
        """Generate an Arabic publication dated in both calendars."""
        label, qualifiers = ARABIC_TITLES[publication_type]
        qualifier = random.choice(qualifiers)
        hijri_year = random.randint(1440, 1446)
        hijri_month = random.randint(1, 12)
        hijri_day = random.randint(1, 28)
        issued = hijri_to_gregorian(hijri_year, hijri_month, hijri_day)
        number = self._generate_number(issued.year)
        institution = random.choice(ARABIC_INSTITUTIONS)

        title = " ".join(p for p in [label, qualifier, f"رقم {number}"] if p)
        lines = [
            "الجمهورية الجزائرية الديمقراطية الشعبية",
            institution,
            (f"{title} مؤرخ في {hijri_day} {_HIJRI_MONTH_NAMES[hijri_month]} عام {hijri_year} "
             f"الموافق {issued.day} {_ARABIC_MONTH_NAMES[issued.month]} سنة {issued.year} "
             f"{random.choice(ARABIC_SUBJECTS)}"),
        ]
        if with_references:
            lines.append("بمقتضى الدستور")
            lines.append(f"بمقتضى القانون رقم {self._generate_number(2000)} المتعلق بعلاقات العمل")
        lines.extend(
            f"المادة {i} : " + random.choice(ARABIC_ARTICLES).format(random.choice(ARABIC_TOPICS))
            for i in range(1, num_articles + 1)
        )

        return GeneratedLegalText(
            text="\n".join(lines),
            language='ar',
            expected={
                'type_key': publication_type,
                'number': number,
                'date': issued.strftime('%d/%m/%Y'),
                'institution': institution,
                'articles': num_articles,
            }
        )

    def generate_batch(self, count: int = 5, languages: Optional[List[str]] = None) -> List[GeneratedLegalText]:
        """Generate a mix of publication types and languages."""
        languages = languages or ['fr', 'ar']
        texts = []
        for _ in range(count):
            publication_type = random.choice(list(FRENCH_TITLES))
            if random.choice(languages) == 'ar':
                texts.append(self.generate_arabic_text(publication_type))
            else:
                texts.append(self.generate_french_text(publication_type))
        logger.debug(f"Generated {len(texts)} synthetic legal texts")
        return texts

    def _french_articles(self, count: int) -> List[str]:
        articles = []
        for i in range(1, count + 1):
            template = FRENCH_ARTICLES[-1] if i == count else random.choice(FRENCH_ARTICLES[:-1])
            articles.append(f"Article {i} : " + template.format(random.choice(FRENCH_TOPICS)))
        return articles

    def _generate_number(self, year: Optional[int] = None) -> str:
        year = year or random.randint(2015, 2024)
        return f"{year % 100:02d}-{random.randint(1, 450)}"

    def _generate_date(self, start_year: int = 2015, end_year: int = 2024) -> date:
        return self.fake.date_between_dates(date(start_year, 1, 1), date(end_year, 12, 31))
