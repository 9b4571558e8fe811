"""
Regex patterns for Algerian legal text extraction.

This module contains compiled regex patterns for the French and Arabic
wording used in the Journal officiel and in ministerial publications.
"""

import re
from typing import Dict, List, Pattern


# "n° 90-11", "nº 5", "no. 7", "رقم 23-145"
NUMBER_MARK = r'(?:(?<!\w)(?:n\s?°|nº|no\.?)|رقم)'

HIJRI_MONTHS: Dict[str, int] = {
    'محرم': 1,
    'صفر': 2,
    'ربيع الأول': 3,
    'ربيع الثاني': 4,
    'ربيع الآخر': 4,
    'جمادى الأولى': 5,
    'جمادى الآخرة': 6,
    'جمادى الثانية': 6,
    'رجب': 7,
    'شعبان': 8,
    'رمضان': 9,
    'شوال': 10,
    'ذو القعدة': 11,
    'ذي القعدة': 11,
    'ذو الحجة': 12,
    'ذي الحجة': 12,
}

# French transliterations used by the Journal officiel, keyed lowercase
# without accents ("Chaâbane" -> "chaabane")
FRENCH_HIJRI_MONTHS: Dict[str, int] = {
    'moharram': 1, 'mouharram': 1, 'muharram': 1,
    'safar': 2,
    'rabie el aouel': 3, 'rabia el aouel': 3, 'rabie el aoual': 3, 'rabie el awal': 3,
    'rabie ethani': 4, 'rabia ethani': 4, 'rabie el thani': 4, 'rabie el akhir': 4,
    'joumada el oula': 5, 'djoumada el oula': 5, 'joumada el aoula': 5, 'djoumada el aoula': 5,
    'joumada ethania': 6, 'djoumada ethania': 6, 'joumada el akhira': 6, 'djoumada el akhira': 6,
    'rajab': 7, 'radjab': 7,
    'chaabane': 8, 'chaaban': 8, 'chabane': 8,
    'ramadhan': 9, 'ramadan': 9,
    'chaoual': 10, 'chaouel': 10, 'chawwal': 10,
    'dhou el kaada': 11, 'dou el kaada': 11, 'dhou el qaada': 11, 'dhou el kiaada': 11,
    'dhou el hidja': 12, 'dou el hidja': 12, 'dhou el hijja': 12,
}

FRENCH_MONTHS: Dict[str, int] = {
    'janvier': 1,
    'février': 2, 'fevrier': 2,
    'mars': 3,
    'avril': 4,
    'mai': 5,
    'juin': 6,
    'juillet': 7,
    'août': 8, 'aout': 8,
    'septembre': 9,
    'octobre': 10,
    'novembre': 11,
    'décembre': 12, 'decembre': 12,
}

# Gregorian month names as written in Algerian Arabic publications
ARABIC_GREGORIAN_MONTHS: Dict[str, int] = {
    'جانفي': 1, 'يناير': 1,
    'فيفري': 2, 'فبراير': 2,
    'مارس': 3,
    'أفريل': 4, 'أبريل': 4,
    'ماي': 5, 'مايو': 5,
    'جوان': 6, 'يونيو': 6,
    'جويلية': 7, 'يوليو': 7,
    'أوت': 8, 'أغسطس': 8,
    'سبتمبر': 9,
    'أكتوبر': 10,
    'نوفمبر': 11,
    'ديسمبر': 12,
}


def _alternation(words) -> str:
    # Longest first so that multi-word names win over their prefixes
    return '|'.join(re.escape(w) for w in sorted(words, key=len, reverse=True))


class BasePatterns:
    """Base class for regex patterns."""

    def __init__(self):
        """Initialize patterns."""
        self._compile_patterns()

    def _compile_patterns(self):
        """Compile all regex patterns."""
        pass


class PublicationPatterns(BasePatterns):
    """Publication types, issuing powers and numbers."""

    TYPE_WORDS = {
        'loi': r'loi|قانون',
        'decret': r'd[ée]cret|مرسوم',
        'arrete': r'arr[êe]t[ée]|قرار',
        'ordonnance': r'ordonnance|أمر',
    }

    QUALIFIERS = (
        r'organique|ex[ée]cutif|pr[ée]sidentiel|l[ée]gislatif|'
        r'interminist[ée]riel|minist[ée]riel|conjoint|'
        r'رئاسي|تنفيذي|وزاري|مشترك|عضوي|تشريعي'
    )

    def _compile_patterns(self):
        """Compile publication patterns."""
        self.PUBLICATION_TYPES: Dict[str, Pattern] = {
            key: re.compile(
                rf'(?<!\w)(?:{words})(?:\s+(?:{self.QUALIFIERS}))*\s*{NUMBER_MARK}\s*(\d+(?:-\d+)*)',
                re.IGNORECASE
            )
            for key, words in self.TYPE_WORDS.items()
        }

        self.POWER_EMITTERS: Dict[str, Pattern] = {
            'presidentiel': re.compile(
                r'(?<!\w)(?:pr[ée]sidentiel(?:le)?|رئاسي)(?!\w)', re.IGNORECASE),
            'ministeriel': re.compile(
                r'(?<!\w)(?:(?:inter)?minist[ée]riel(?:le)?|وزاري)(?!\w)', re.IGNORECASE),
            'gouvernemental': re.compile(
                r'(?<!\w)(?:gouvernementale?|ex[ée]cutif|حكومي|تنفيذي)(?!\w)', re.IGNORECASE),
        }

        self.NUMBER = re.compile(rf'{NUMBER_MARK}\s*(\d+(?:[-/]\d+)*)', re.IGNORECASE)
        self.CURRENT_PUBLICATION = re.compile(rf'{NUMBER_MARK}\s*(\d+(?:-\d+)*)', re.IGNORECASE)


class DatePatterns(BasePatterns):
    """Hijri and Gregorian date patterns."""

    def _compile_patterns(self):
        """Compile date patterns."""
        self.HIJRI = re.compile(
            rf'(?<!\d)(\d{{1,2}})\s+({_alternation(HIJRI_MONTHS)})\s+(?:عام\s+|سنة\s+)?(\d{{4}})(?!\d)'
        )
        # Month words are looked up in FRENCH_HIJRI_MONTHS after folding
        self.HIJRI_FRENCH = re.compile(
            r'(?<!\d)(\d{1,2})(?:er)?[ \t]+([^\W\d_]+(?:[ \t-]+[^\W\d_]+){0,2})[ \t]+(\d{4})(?!\d)'
        )
        self.GREGORIAN_NUMERIC = re.compile(r'(?<!\d)(\d{1,2})/(\d{1,2})/(\d{4})(?!\d)')
        self.GREGORIAN_FRENCH = re.compile(
            rf'(?<!\d)(\d{{1,2}})(?:er)?\s+({_alternation(FRENCH_MONTHS)})\s+(\d{{4}})(?!\d)',
            re.IGNORECASE
        )
        self.GREGORIAN_ARABIC = re.compile(
            rf'(?<!\d)(\d{{1,2}})\s+({_alternation(ARABIC_GREGORIAN_MONTHS)})\s+(?:سنة\s+)?(\d{{4}})(?!\d)'
        )


class StructurePatterns(BasePatterns):
    """Institution headers, articles and 'Vu' references."""

    def _compile_patterns(self):
        """Compile structure patterns."""
        self.INSTITUTION = re.compile(
            r'^[ \t]*((?:Pr[ée]sidence|Minist[èe]re|Direction|Service|Wilaya|'
            r'الرئاسة|رئاسة|الوزارة|وزارة|المديرية|مديرية|المصلحة|مصلحة|ولاية)(?!\w)[^\n]*)',
            re.IGNORECASE | re.MULTILINE
        )
        self.ARTICLE = re.compile(
            r'(?<!\w)(?:Article|Art\.|المادة)[ \t]+(\d+)(?!\d)(?:er|ère)?[ \t]*[:.\-–]?[ \t]*([^\n]+)'
        )
        self.REFERENCE = re.compile(r'(?<!\w)(?:Vu|vu|بمقتضى|رؤية)\s+([^,;\n]+)')


class LinkPatterns(BasePatterns):
    """Relations between publications."""

    def _compile_patterns(self):
        """Compile link patterns."""
        self.LINKS: Dict[str, Pattern] = {
            'vu': re.compile(r'(?<!\w)(?:Vu|vu|بمقتضى|رؤية)\s+([^,;\n]+)'),
            'annexe': re.compile(r'(?<!\w)(?:annexe|ملحق)\s+([^\n]+)', re.IGNORECASE),
            'modification': re.compile(r'(?<!\w)(?:modifie|يعدل)\s+([^\n]+)', re.IGNORECASE),
            'abrogation': re.compile(r'(?<!\w)(?:abroge|يلغي)\s+([^\n]+)', re.IGNORECASE),
            'approval': re.compile(r'(?<!\w)(?:approuve|يوافق على)\s+([^\n]+)', re.IGNORECASE),
            'conformity': re.compile(r'(?<!\w)(?:conformité|مطابقة)\s+([^\n]+)', re.IGNORECASE),
            'extension': re.compile(r'(?<!\w)(?:étend|يمتد)\s+([^\n]+)', re.IGNORECASE),
        }


class MappingRulePatterns(BasePatterns):
    """Patterns used by the rule-based field mapper."""

    def _compile_patterns(self):
        """Compile mapping rule patterns."""
        self.RULES: Dict[str, Dict] = {
            'publication_type': {
                'patterns': [
                    re.compile(r'(?<!\w)loi(?!\w)', re.IGNORECASE),
                    re.compile(r'(?<!\w)d[ée]cret(?!\w)', re.IGNORECASE),
                    re.compile(r'(?<!\w)arr[êe]t[ée](?!\w)', re.IGNORECASE),
                    re.compile(r'(?<!\w)ordonnance(?!\w)', re.IGNORECASE),
                ],
                'field_types': ['document_type', 'type_publication'],
                'confidence': 0.95,
            },
            'number': {
                'patterns': [
                    re.compile(r'n\s?°\s*(\d+(?:-\d+)*)', re.IGNORECASE),
                    re.compile(r'num[ée]ro\s*(\d+(?:-\d+)*)', re.IGNORECASE),
                ],
                'field_types': ['document_number', 'numero'],
                'confidence': 0.9,
            },
            'date': {
                'patterns': [
                    re.compile(r'(\d{1,2}/\d{1,2}/\d{4})'),
                    re.compile(r'(\d{1,2}\s+\w+\s+\d{4})'),
                ],
                'field_types': ['date_publication', 'date_emission'],
                'confidence': 0.85,
            },
            'institution': {
                'patterns': [
                    re.compile(r'Pr[ée]sidence[^\n]*'),
                    re.compile(r'Minist[èe]re[^\n]*'),
                    re.compile(r'Direction[^\n]*'),
                    re.compile(r'Service[^\n]*'),
                ],
                'field_types': ['institution_emetteur', 'organisme', 'institution'],
                'confidence': 0.9,
            },
            'content': {
                'patterns': [
                    re.compile(r'Article\s+(\d+)'),
                    re.compile(r'المادة\s+(\d+)'),
                ],
                'field_types': ['contenu', 'articles', 'content'],
                'confidence': 0.8,
            },
        }

        # Per field type, used when suggesting values for unmapped fields
        self.SUGGESTION_PATTERNS: Dict[str, List[Pattern]] = {
            'date': [re.compile(r'(\d{1,2}/\d{1,2}/\d{4})')],
            'number': [re.compile(rf'{NUMBER_MARK}\s*(\d+(?:-\d+)*)', re.IGNORECASE)],
        }


# Shared compiled instances
PUBLICATION_PATTERNS = PublicationPatterns()
DATE_PATTERNS = DatePatterns()
STRUCTURE_PATTERNS = StructurePatterns()
LINK_PATTERNS = LinkPatterns()
MAPPING_RULE_PATTERNS = MappingRulePatterns()
