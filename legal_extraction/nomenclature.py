"""
Controlled vocabulary of Algerian legal and administrative terms.

Every term lists its French, Arabic and English variations. Matching is done
on folded text (lowercase, no diacritics) with word boundaries so that short
names such as "Mila" or "loi" do not fire inside longer words.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple

from .utils.text import fold_text


ALGERIAN_NOMENCLATURE: Dict[str, Dict[str, List[str]]] = {
    'document_types': {
        'loi': ['loi', 'قانون', 'law'],
        'decret': ['décret', 'مرسوم', 'decree'],
        'arrete': ['arrêté', 'قرار', 'order'],
        'ordonnance': ['ordonnance', 'أمر', 'ordinance'],
    },
    'institutions': {
        'presidence': ['présidence', 'الرئاسة', 'presidency'],
        'ministere': ['ministère', 'الوزارة', 'وزارة', 'ministry'],
        'direction': ['direction', 'المديرية', 'directorate'],
        'service': ['service', 'المصلحة'],
    },
    'power_emitters': {
        'presidentiel': ['présidentiel', 'رئاسي', 'presidential'],
        'ministeriel': ['ministériel', 'وزاري', 'ministerial'],
        'gouvernemental': ['gouvernemental', 'حكومي', 'governmental', 'exécutif', 'تنفيذي'],
    },
    'date_formats': {
        'hijri': ['محرم', 'صفر', 'ربيع الأول', 'ربيع الثاني', 'جمادى الأولى', 'جمادى الآخرة',
                  'رجب', 'شعبان', 'رمضان', 'شوال', 'ذو القعدة', 'ذو الحجة'],
        'gregorian': ['janvier', 'février', 'mars', 'avril', 'mai', 'juin', 'juillet',
                      'août', 'septembre', 'octobre', 'novembre', 'décembre'],
    },
    'wilaya': {
        'adrar': ['Adrar', 'أدرار'],
        'chlef': ['Chlef', 'الشلف'],
        'laghouat': ['Laghouat', 'الأغواط'],
        'oum_el_bouaghi': ['Oum El Bouaghi', 'أم البواقي'],
        'batna': ['Batna', 'باتنة'],
        'bejaia': ['Béjaïa', 'بجاية'],
        'biskra': ['Biskra', 'بسكرة'],
        'bechar': ['Béchar', 'بشار'],
        'blida': ['Blida', 'البليدة'],
        'bouira': ['Bouira', 'البويرة'],
        'tamanrasset': ['Tamanrasset', 'تمنراست'],
        'tebessa': ['Tébessa', 'تبسة'],
        'tlemcen': ['Tlemcen', 'تلمسان'],
        'tiaret': ['Tiaret', 'تيارت'],
        'tizi_ouzou': ['Tizi Ouzou', 'تيزي وزو'],
        'alger': ['Alger', 'الجزائر'],
        'djelfa': ['Djelfa', 'الجلفة'],
        'jijel': ['Jijel', 'جيجل'],
        'setif': ['Sétif', 'سطيف'],
        'saida': ['Saïda', 'سعيدة'],
        'skikda': ['Skikda', 'سكيكدة'],
        'sidi_bel_abbes': ['Sidi Bel Abbès', 'سيدي بلعباس'],
        'annaba': ['Annaba', 'عنابة'],
        'guelma': ['Guelma', 'قالمة'],
        'constantine': ['Constantine', 'قسنطينة'],
        'medea': ['Médéa', 'المدية'],
        'mostaganem': ['Mostaganem', 'مستغانم'],
        'msila': ["M'Sila", 'المسيلة'],
        'mascara': ['Mascara', 'معسكر'],
        'ouargla': ['Ouargla', 'ورقلة'],
        'oran': ['Oran', 'وهران'],
        'el_bayadh': ['El Bayadh', 'البيض'],
        'illizi': ['Illizi', 'إليزي'],
        'bordj_bou_arreridj': ['Bordj Bou Arréridj', 'برج بوعريريج'],
        'boumerdes': ['Boumerdès', 'بومرداس'],
        'el_tarf': ['El Tarf', 'الطارف'],
        'tindouf': ['Tindouf', 'تندوف'],
        'tissemsilt': ['Tissemsilt', 'تيسمسيلت'],
        'el_oued': ['El Oued', 'الوادي'],
        'khenchela': ['Khenchela', 'خنشلة'],
        'souk_ahras': ['Souk Ahras', 'سوق أهراس'],
        'tipaza': ['Tipaza', 'تيبازة'],
        'mila': ['Mila', 'ميلة'],
        'ain_defla': ['Aïn Defla', 'عين الدفلى'],
        'naama': ['Naâma', 'النعامة'],
        'ain_temouchent': ['Aïn Témouchent', 'عين تموشنت'],
        'ghardaia': ['Ghardaïa', 'غرداية'],
        'relizane': ['Relizane', 'غليزان'],
        'timimoun': ['Timimoun', 'تيميمون'],
        'bordj_badji_mokhtar': ['Bordj Badji Mokhtar', 'برج باجي مختار'],
        'ouled_djellal': ['Ouled Djellal', 'أولاد جلال'],
        'beni_abbes': ['Béni Abbès', 'بني عباس'],
        'in_salah': ['In Salah', 'عين صالح'],
        'in_guezzam': ['In Guezzam', 'عين قزام'],
        'touggourt': ['Touggourt', 'تقرت'],
        'djanet': ['Djanet', 'جانت'],
        'el_mghair': ["El M'Ghair", 'المغير'],
        'el_meniaa': ['El Meniaa', 'المنيعة'],
    },
}


@dataclass
class NomenclatureMatch:
    """A nomenclature term found in a text."""
    category: str
    term: str
    variation: str
    canonical: str
    position: int

    def to_dict(self) -> Dict[str, str]:
        return {
            'category': self.category,
            'term': self.term,
            'variation': self.variation,
            'canonical': self.canonical,
        }


def _term_pattern(variation: str) -> Pattern:
    return re.compile(rf'(?<!\w){re.escape(fold_text(variation))}(?!\w)')


class NomenclatureIndex:
    """Compiled lookup over the nomenclature tables."""

    def __init__(self, nomenclature: Optional[Dict[str, Dict[str, List[str]]]] = None):
        self.nomenclature = nomenclature or ALGERIAN_NOMENCLATURE
        self._patterns: List[Tuple[str, str, str, str, Pattern]] = []
        for category, terms in self.nomenclature.items():
            for term, variations in terms.items():
                for variation in variations:
                    self._patterns.append(
                        (category, term, variation, variations[0], _term_pattern(variation))
                    )

    def find_terms(self, text: str, category: Optional[str] = None) -> List[NomenclatureMatch]:
        """
        Find every nomenclature term in a text, first variation per term.

        Args:
            text: Text to scan
            category: Optional category to restrict the search to

        Returns:
            Matches ordered by category then term, as declared
        """
        folded = fold_text(text)
        matches: List[NomenclatureMatch] = []
        seen = set()
        for cat, term, variation, canonical, pattern in self._patterns:
            if category and cat != category:
                continue
            if (cat, term) in seen:
                continue
            found = pattern.search(folded)
            if found:
                seen.add((cat, term))
                matches.append(NomenclatureMatch(cat, term, variation, canonical, found.start()))
        return matches

    def contains_any(self, text: str, terms: List[str]) -> Optional[str]:
        """Return the first of `terms` found in `text` as a whole word, or None."""
        folded = fold_text(text)
        for term in terms:
            if _term_pattern(term).search(folded):
                return term
        return None

    def validate(self, value: str) -> bool:
        """True if the value mentions any nomenclature term."""
        return bool(value) and bool(self.find_terms(value))

    def document_type_of(self, value: str) -> Optional[str]:
        """Canonical document type key named by a value, if any."""
        matches = self.find_terms(value, category='document_types')
        return min(matches, key=lambda m: m.position).term if matches else None


DEFAULT_NOMENCLATURE = NomenclatureIndex()
