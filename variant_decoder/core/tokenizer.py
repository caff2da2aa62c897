"""
VCF data line tokenization.

Splits a raw tab-delimited VCF data line into typed fields.

Author: Kevin R. Roy
"""

import re

from .exceptions import MalformedRecord, NotAVariant
from .models import RawRecord

# Missing-value marker used throughout the VCF columns
MISSING = '.'

# CHROM, POS, ID, REF, ALT, QUAL, FILTER, INFO
MIN_COLUMNS = 8

FORMAT_COLUMN = 8
FIRST_SAMPLE_COLUMN = 9

# Plain ASCII numbers only (no "_", padding, non-ASCII digits, nan or inf)
POSITION_PATTERN = re.compile(r'[+-]?[0-9]+')
QUALITY_PATTERN = re.compile(r'[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?')


def tokenize_line(line: str) -> RawRecord:
    """
    Parse one VCF data line into a RawRecord.

    Args:
        line: Tab-delimited data line (trailing newline allowed)

    Returns:
        RawRecord with typed fields

    Raises:
        MalformedRecord: Fewer than 8 columns, or non-numeric POS/QUAL
        NotAVariant: ALT column is '.' (reference-only position)
    """
    fields = line.rstrip('\r\n').split('\t')
    if len(fields) < MIN_COLUMNS:
        raise MalformedRecord(
            f"Not enough fields provided (min {MIN_COLUMNS}, got {len(fields)})"
        )

    chromosome = fields[0]

    if not POSITION_PATTERN.fullmatch(fields[1]):
        raise MalformedRecord(f"Position is not an integer: {fields[1]!r}")
    position = int(fields[1])

    # A '.' ID column is an empty set, not a set holding an empty string
    ids = frozenset() if fields[2] == MISSING else frozenset(fields[2].split(';'))

    reference = '' if fields[3] == MISSING else fields[3]

    if fields[4] == MISSING:
        raise NotAVariant(
            "Alternate allele is a '.'. This is not an actual variant but a "
            f"reference position: {chromosome}:{position}:{reference}>{fields[4]}"
        )
    alternates = tuple(fields[4].split(','))

    quality = None
    if fields[5] != MISSING:
        if not QUALITY_PATTERN.fullmatch(fields[5]):
            raise MalformedRecord(f"Quality is not a number: {fields[5]!r}")
        quality = float(fields[5])

    filter_ = '' if fields[6] == MISSING else fields[6]
    info = '' if fields[7] == MISSING else fields[7]

    if len(fields) <= FORMAT_COLUMN or fields[FORMAT_COLUMN] == MISSING:
        format_keys = ()
    else:
        format_keys = tuple(fields[FORMAT_COLUMN].split(':'))

    return RawRecord(
        chromosome=chromosome,
        position=position,
        ids=ids,
        reference=reference,
        alternates=alternates,
        quality=quality,
        filter=filter_,
        info=info,
        format=format_keys,
        samples=tuple(fields[FIRST_SAMPLE_COLUMN:]),
    )
