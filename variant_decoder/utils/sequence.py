"""
Allele string utilities.

Provides the small string operations used by allele normalization and
INFO aggregation.

Author: Kevin R. Roy
"""

from typing import Optional


def common_prefix_length(seq1: str, seq2: str) -> int:
    """Length of the shared leading run of two strings."""
    n = 0
    for a, b in zip(seq1, seq2):
        if a != b:
            break
        n += 1
    return n


def common_suffix_length(seq1: str, seq2: str) -> int:
    """Length of the shared trailing run of two strings."""
    return common_prefix_length(seq1[::-1], seq2[::-1])


def trim_common_suffix(seq1: str, seq2: str) -> tuple:
    """Remove the shared trailing run from both strings.

    Examples:
        >>> trim_common_suffix("ACT", "GGT")
        ('AC', 'GG')
        >>> trim_common_suffix("A", "GGA")
        ('', 'GG')
    """
    k = common_suffix_length(seq1, seq2)
    if k == 0:
        return seq1, seq2
    return seq1[:-k], seq2[:-k]


def is_numeric(value: Optional[str]) -> bool:
    """True for a non-empty string of ASCII digits.

    Signs, decimal points and whitespace are not numeric.
    """
    if not value:
        return False
    return all('0' <= c <= '9' for c in value)
