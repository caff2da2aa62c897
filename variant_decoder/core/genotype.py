"""
Genotype allele-index remapping for decomposed multiallelic records.

When a record with alternates A1, A2, ... is split into one record per
alternate, the alternate being built must be addressable as allele 1 in every
genotype. Lower-numbered alternates shift up by one to make room; higher ones
and the reference (0) are untouched.

Author: Kevin R. Roy
"""

import re
from typing import List, Optional, Tuple

from .exceptions import NonStandardSampleField

GENOTYPE_KEY = 'GT'
MISSING_ALLELE = '.'

# Keeps the separators so per-boundary phasing survives a rejoin
ALLELE_SEPARATOR_PATTERN = re.compile(r'([/|])')


def map_to_multiallelic_index(allele: int, allele_index: int) -> int:
    """
    Map a parsed allele code so that alternate ``allele_index`` becomes allele 1.

    With allele_index == 1 (the second alternate), A2 becomes A1 and A1
    becomes A2; A3 and above stay. With allele_index == 2, A3 becomes A1,
    A1 becomes A2 and A2 becomes A3. The reference (0) never changes.

    Args:
        allele: Allele code as written in the genotype (e.g. 2 for "0/2")
        allele_index: 0-based index of the alternate being built

    Returns:
        Allele code relative to the alternate being built
    """
    if allele > 0:
        if allele == allele_index + 1:
            return 1
        if allele < allele_index + 1:
            return allele + 1
    return allele


def split_genotype(genotype: str) -> Tuple[List[Optional[int]], List[str]]:
    """
    Split a genotype into allele codes and separators.

    Missing calls ('.') are returned as None.

    Returns:
        Tuple of (alleles, separators); len(separators) == len(alleles) - 1

    Raises:
        NonStandardSampleField: If a call is neither a non-negative integer nor '.'
    """
    parts = ALLELE_SEPARATOR_PATTERN.split(genotype)
    alleles = []
    for call in parts[0::2]:
        if call == MISSING_ALLELE:
            alleles.append(None)
        elif call.isascii() and call.isdigit():
            alleles.append(int(call))
        else:
            raise NonStandardSampleField(f"Malformed genotype call {call!r} in {genotype!r}")
    return alleles, parts[1::2]


def remap_genotype(genotype: str, allele_index: int) -> str:
    """Rewrite a genotype so that alternate ``allele_index`` is allele 1.

    The first alternate (allele_index 0) is returned unchanged.
    """
    if allele_index == 0:
        return genotype

    alleles, separators = split_genotype(genotype)

    calls = [
        MISSING_ALLELE if allele is None
        else str(map_to_multiallelic_index(allele, allele_index))
        for allele in alleles
    ]

    pieces = [calls[0]]
    for sep, call in zip(separators, calls[1:]):
        pieces.append(sep)
        pieces.append(call)
    return ''.join(pieces)


def is_genotype_key(key: str) -> bool:
    """True if a FORMAT key names the genotype field (case-insensitive)."""
    return key.upper() == GENOTYPE_KEY
