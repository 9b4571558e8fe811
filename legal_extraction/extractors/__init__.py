"""
Regex extractors for Algerian legal texts.
"""

from .base import BaseExtractor
from .dates import DateExtractor
from .institutions import InstitutionExtractor
from .publication import PublicationExtractor
from .references import ReferenceExtractor

__all__ = [
    'BaseExtractor',
    'DateExtractor',
    'InstitutionExtractor',
    'PublicationExtractor',
    'ReferenceExtractor',
]
