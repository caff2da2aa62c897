"""
I/O modules for VARDEC.

Author: Kevin R. Roy
"""

from .output import (
    format_sample,
    records_to_rows,
    write_records_jsonl,
    write_records_tsv,
)
from .vcf_reader import (
    iter_vcf_lines,
    read_sample_names,
)

__all__ = [
    'iter_vcf_lines',
    'read_sample_names',
    'format_sample',
    'records_to_rows',
    'write_records_tsv',
    'write_records_jsonl',
]
