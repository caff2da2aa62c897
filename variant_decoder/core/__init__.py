"""
Core decoding modules for VARDEC.

Author: Kevin R. Roy
"""

from .assembler import (
    VariantDecoder,
    create_variants,
)
from .exceptions import (
    MalformedRecord,
    NonStandardSampleField,
    NotAVariant,
    VariantDecodeError,
)
from .genotype import (
    map_to_multiallelic_index,
    remap_genotype,
    split_genotype,
)
from .info import (
    build_attributes,
    redistribute_info,
)
from .models import (
    DecodeResult,
    NormalizedAllele,
    RawRecord,
    SkippedAllele,
    SourceEntry,
    VariantRecord,
    VariantType,
)
from .normalization import (
    normalize_allele,
    normalize_alternates,
    secondary_alternates,
)
from .samples import (
    parse_sample,
    parse_samples,
)
from .tokenizer import tokenize_line

__all__ = [
    # Models
    'RawRecord',
    'NormalizedAllele',
    'SourceEntry',
    'VariantRecord',
    'VariantType',
    'SkippedAllele',
    'DecodeResult',
    # Errors
    'VariantDecodeError',
    'MalformedRecord',
    'NotAVariant',
    'NonStandardSampleField',
    # Tokenizing
    'tokenize_line',
    # Normalization
    'normalize_allele',
    'normalize_alternates',
    'secondary_alternates',
    # Genotypes
    'map_to_multiallelic_index',
    'remap_genotype',
    'split_genotype',
    # Samples
    'parse_sample',
    'parse_samples',
    # INFO
    'redistribute_info',
    'build_attributes',
    # Assembly
    'VariantDecoder',
    'create_variants',
]
