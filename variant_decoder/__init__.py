"""
VARDEC - VCF record decomposition and normalization.

Author: Kevin R. Roy
"""

__version__ = "0.1.0"
__author__ = "Kevin R. Roy"

from .config import DecoderConfig
from .core.assembler import VariantDecoder, create_variants
from .core.exceptions import (
    MalformedRecord,
    NonStandardSampleField,
    NotAVariant,
    VariantDecodeError,
)
from .core.models import DecodeResult, SourceEntry, VariantRecord, VariantType

__all__ = [
    "DecoderConfig",
    "VariantDecoder",
    "create_variants",
    "VariantRecord",
    "SourceEntry",
    "VariantType",
    "DecodeResult",
    "VariantDecodeError",
    "MalformedRecord",
    "NotAVariant",
    "NonStandardSampleField",
    "__version__",
]
