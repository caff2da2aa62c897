"""
Per-sample column decoding.

Author: Kevin R. Roy
"""

from typing import Dict, Sequence, Tuple

from .exceptions import NonStandardSampleField
from .genotype import is_genotype_key, remap_genotype


def parse_sample(format_keys: Sequence[str], raw_sample: str, allele_index: int) -> Dict[str, str]:
    """
    Decode one sample column into a key-sorted mapping.

    Samples may drop trailing fields (only GT is mandatory), so only the
    fields actually present are read.

    Args:
        format_keys: FORMAT keys of the record
        raw_sample: Sample column, e.g. "0/1:35:12"
        allele_index: Alternate being built (0 for the first alternate)

    Returns:
        Dict mapping FORMAT key to value, inserted in sorted-key order

    Raises:
        NonStandardSampleField: Sample has more fields than FORMAT keys, or
            its genotype cannot be remapped
    """
    sample_fields = raw_sample.split(':')
    if len(sample_fields) > len(format_keys):
        raise NonStandardSampleField(
            f"Sample {raw_sample!r} has {len(sample_fields)} fields but FORMAT "
            f"declares {len(format_keys)}"
        )

    values = {}
    for key, value in zip(format_keys, sample_fields):
        if is_genotype_key(key):
            value = remap_genotype(value, allele_index)
        values[key] = value

    return {key: values[key] for key in sorted(values)}


def parse_samples(
    format_keys: Sequence[str],
    raw_samples: Sequence[str],
    allele_index: int,
) -> Tuple[Dict[str, str], ...]:
    """Decode all sample columns of a record for one alternate."""
    return tuple(parse_sample(format_keys, raw, allele_index) for raw in raw_samples)
