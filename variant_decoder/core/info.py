"""
INFO field redistribution for decomposed records.

Per-allele INFO lists are reduced to the value of the alternate being built,
and sample-derived aggregates (NS, DP, MQ, MQ0) are recomputed from the
samples decoded for that alternate.

Author: Kevin R. Roy
"""

import logging
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence

from ..utils.sequence import is_numeric
from .models import RawRecord

logger = logging.getLogger(__name__)

# Keys holding one comma-separated value per alternate allele
PER_ALLELE_KEYS = {'ACC', 'AC', 'AF'}

# Keys recomputed from sample data
MAPPING_QUALITY_KEYS = {'MQ', 'MQ0'}

# QUAL magnitudes printed without an exponent
PLAIN_QUALITY_RANGE = (1e-3, 1e7)


def _split_info_entry(entry: str) -> List[str]:
    """Split KEY=VALUE on every '=', dropping trailing empty parts."""
    parts = entry.split('=')
    while parts and not parts[-1]:
        parts.pop()
    return parts


def format_quality(quality: float) -> str:
    """
    Render QUAL the way it is stored, e.g. 30.0, 0.001, 1.5E-5 or 1.0E20.

    Values outside [1e-3, 1e7) use a mantissa with at least one decimal and an
    unpadded exponent; shortest round-trip digits are kept either way.
    """
    magnitude = abs(quality)
    if magnitude == 0 or PLAIN_QUALITY_RANGE[0] <= magnitude < PLAIN_QUALITY_RANGE[1]:
        return str(quality)

    sign, digits, exponent = Decimal(repr(quality)).normalize().as_tuple()
    digits = ''.join(str(d) for d in digits)
    mantissa = f"{digits[0]}.{digits[1:] or '0'}"
    return f"{'-' if sign else ''}{mantissa}E{len(digits) - 1 + exponent}"


def _per_allele_value(value: str, allele_index: int) -> Optional[str]:
    values = value.split(',')
    if allele_index >= len(values):
        return None
    return values[allele_index]


def _total_depth(samples: Sequence[Mapping[str, str]]) -> int:
    return sum(int(s['DP']) for s in samples if is_numeric(s.get('DP')))


def _mapping_quality(samples: Sequence[Mapping[str, str]]) -> Dict[str, str]:
    """MQ as the sum of squared GQ, MQ0 as the count of samples with GQ 0."""
    mq = 0
    mq0 = 0
    for sample in samples:
        gq_value = sample.get('GQ')
        if not is_numeric(gq_value):
            continue
        gq = int(gq_value)
        mq += gq * gq
        if gq == 0:
            mq0 += 1
    return {'MQ': str(mq), 'MQ0': str(mq0)}


def redistribute_info(
    info: str,
    allele_index: int,
    samples: Sequence[Mapping[str, str]],
) -> Dict[str, str]:
    """
    Build the INFO attributes of one decomposed record.

    Args:
        info: Raw INFO column ('' when missing)
        allele_index: Alternate being built
        samples: Samples already decoded for this alternate

    Returns:
        Dict of attribute name to value

    Notes:
        Unrecognized keys are copied verbatim, so a multi-valued annotation
        under such a key is repeated in every decomposed record.
    """
    attributes = {}
    if not info:
        return attributes

    for entry in info.split(';'):
        if not entry:
            continue
        parts = _split_info_entry(entry)
        if not parts:
            continue
        if len(parts) != 2:
            # Flags, empty values ("NS=") and extra '=' ("CSQ=a=b") keep the key only
            attributes[parts[0]] = ''
            continue
        key, value = parts

        if key in PER_ALLELE_KEYS:
            allele_value = _per_allele_value(value, allele_index)
            if allele_value is None:
                logger.warning(
                    f"INFO {key}={value} has no value for alternate {allele_index}; "
                    f"omitting {key}"
                )
                continue
            attributes[key] = allele_value
        elif key == 'NS':
            attributes[key] = str(len(samples))
        elif key == 'DP':
            attributes[key] = str(_total_depth(samples))
        elif key in MAPPING_QUALITY_KEYS:
            if 'MQ' not in attributes or 'MQ0' not in attributes:
                attributes.update(_mapping_quality(samples))
        else:
            attributes[key] = value

    return attributes


def build_attributes(
    raw: RawRecord,
    allele_index: int,
    samples: Sequence[Mapping[str, str]],
    line: str,
) -> Dict[str, str]:
    """
    Assemble all source-entry attributes for one decomposed record.

    QUAL and FILTER are only stored when present; INFO entries follow and the
    original line is always kept under ``src``.
    """
    attributes = {}
    if raw.quality is not None:
        attributes['QUAL'] = format_quality(raw.quality)
    if raw.filter:
        attributes['FILTER'] = raw.filter
    attributes.update(redistribute_info(raw.info, allele_index, samples))
    attributes['src'] = line
    return attributes
