"""
Error types raised while decoding VCF records.

Author: Kevin R. Roy
"""


class VariantDecodeError(ValueError):
    """Base class for all decoding errors."""


class MalformedRecord(VariantDecodeError):
    """The line cannot be tokenized (too few columns, bad POS or QUAL)."""


class NotAVariant(VariantDecodeError):
    """The line, or one of its alleles, describes a reference position."""


class NonStandardSampleField(VariantDecodeError):
    """A sample column does not follow the declared FORMAT."""
