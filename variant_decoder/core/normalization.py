"""
Allele normalization for decomposed VCF records.

Start/end assignment tries to work as similarly as possible as Ensembl does:
http://www.ensembl.org/info/docs/tools/vep/vep_formats.html#vcf

Author: Kevin R. Roy
"""

from typing import Sequence, Tuple

from ..utils.sequence import common_prefix_length, trim_common_suffix
from .exceptions import NotAVariant
from .models import NormalizedAllele


def normalize_allele(
    position: int,
    reference: str,
    alternate: str,
    allele_index: int = 0,
) -> NormalizedAllele:
    """
    Calculate start, end, reference and alternate of a non-identical allele pair.

    Trailing bases shared by both alleles are removed first, then the end
    coordinate is measured, then the shared leading bases are removed.

    Args:
        position: Input starting position (1-based)
        reference: Input reference allele
        alternate: Input alternate allele
        allele_index: Position of the alternate in the ALT column

    Returns:
        NormalizedAllele with the trimmed representation

    Raises:
        NotAVariant: If reference and alternate are identical

    Examples:
        >>> normalize_allele(100, "A", "AGG")
        NormalizedAllele(start=101, end=102, reference='', alternate='GG', allele_index=0)
    """
    if reference == alternate:
        raise NotAVariant(
            f"Reference and alternate at {position} are identical: {alternate}"
        )

    reference, alternate = trim_common_suffix(reference, alternate)

    # end is inclusive and measured before the prefix is removed
    length = max(len(reference), len(alternate))
    end = position + length - 1

    p = common_prefix_length(reference, alternate)
    return NormalizedAllele(
        start=position + p,
        end=end,
        reference=reference[p:],
        alternate=alternate[p:],
        allele_index=allele_index,
    )


def normalize_alternates(
    position: int,
    reference: str,
    alternates: Sequence[str],
) -> Tuple[NormalizedAllele, ...]:
    """Normalize every alternate against the shared reference.

    The result is parallel to ``alternates``; the input is left untouched.
    A single identical reference/alternate pair rejects the whole line.
    """
    return tuple(
        normalize_allele(position, reference, alternate, allele_index=i)
        for i, alternate in enumerate(alternates)
    )


def secondary_alternates(allele_index: int, alternates: Sequence[str]) -> Tuple[str, ...]:
    """All alternates except the one at ``allele_index``, order preserved."""
    return tuple(alt for i, alt in enumerate(alternates) if i != allele_index)
