"""Runtime lookup: the translation resolver and its missing-key log.

Python 3.13+.
"""

from .missing import MissingTranslationLog
from .resolver import TranslationResolver

__all__ = [
    "MissingTranslationLog",
    "TranslationResolver",
]
