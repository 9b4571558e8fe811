"""
Field value normalization.
"""

from .field import FieldNormalizer

__all__ = ['FieldNormalizer']
