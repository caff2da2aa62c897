"""
Output generation for decoded variant records.

Author: Kevin R. Roy
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence
import pandas as pd
import logging

from ..core.models import VariantRecord

logger = logging.getLogger(__name__)

# Column order for the fixed part of the TSV output
BASE_COLUMNS = [
    'chromosome', 'start', 'end', 'reference', 'alternate', 'type', 'ids',
    'file_id', 'study_id', 'secondary_alternates', 'format',
]

# Attributes left out of the TSV (the raw line is in the input already)
TSV_EXCLUDED_ATTRIBUTES = {'src'}

MISSING = '.'


def format_sample(format_keys: Sequence[str], sample: Dict[str, str]) -> str:
    """Render a decoded sample back to a FORMAT-ordered, ':'-joined string."""
    return ':'.join(sample[key] for key in format_keys if key in sample)


def records_to_rows(
    records: Iterable[VariantRecord],
    sample_names: Optional[Sequence[str]] = None,
    include_attributes: bool = True,
) -> List[Dict[str, Any]]:
    """
    Flatten records into one row dict per record.

    Args:
        records: Decoded VariantRecords
        sample_names: Column names for samples (default: sample_1, sample_2, ...)
        include_attributes: Add one column per source-entry attribute

    Returns:
        List of row dictionaries
    """
    rows = []

    for r in records:
        source = r.source
        row = {
            'chromosome': r.chromosome,
            'start': r.start,
            'end': r.end,
            'reference': r.reference or MISSING,
            'alternate': r.alternate or MISSING,
            'type': r.variant_type.value,
            'ids': ';'.join(sorted(r.ids)) or MISSING,
            'file_id': source.file_id,
            'study_id': source.study_id,
            'secondary_alternates': ','.join(source.secondary_alternates) or MISSING,
            'format': ':'.join(source.format) or MISSING,
        }

        if include_attributes:
            for k, v in source.attributes.items():
                if k not in TSV_EXCLUDED_ATTRIBUTES:
                    row[k] = v

        for i, sample in enumerate(source.samples):
            name = sample_names[i] if sample_names and i < len(sample_names) else f"sample_{i + 1}"
            row[name] = format_sample(source.format, sample)

        rows.append(row)

    return rows


def write_records_tsv(
    records: Iterable[VariantRecord],
    output_path: Path,
    sample_names: Optional[Sequence[str]] = None,
    include_attributes: bool = True,
) -> Path:
    """
    Write records to TSV file.

    Args:
        records: Decoded VariantRecords
        output_path: Path for output TSV
        sample_names: Optional sample column names
        include_attributes: Include attribute columns

    Returns:
        Path to written file
    """
    rows = records_to_rows(records, sample_names, include_attributes)

    df = pd.DataFrame(rows)
    if df.empty:
        df = pd.DataFrame(columns=BASE_COLUMNS)
    df.to_csv(output_path, sep='\t', index=False, na_rep=MISSING)

    logger.info(f"Wrote {len(rows)} records to {output_path}")
    return Path(output_path)


def write_records_jsonl(records: Iterable[VariantRecord], output_path: Path) -> Path:
    """Write one JSON document per record."""
    n_written = 0
    with open(output_path, 'w') as f:
        for record in records:
            f.write(json.dumps(record.to_dict(), sort_keys=False))
            f.write('\n')
            n_written += 1

    logger.info(f"Wrote {n_written} records to {output_path}")
    return Path(output_path)
