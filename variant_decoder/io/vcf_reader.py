"""
VCF line source.

Reads data lines from plain or gzipped VCF files for the decoder. The decoder
itself never touches files.

Author: Kevin R. Roy
"""

import gzip
import logging
from pathlib import Path
from typing import Iterator, List, Tuple

logger = logging.getLogger(__name__)

HEADER_PREFIX = '#'
COLUMN_HEADER_PREFIX = '#CHROM'
FIRST_SAMPLE_COLUMN = 9


def _open_vcf(path: Path):
    open_func = gzip.open if str(path).endswith('.gz') else open
    return open_func(path, 'rt')


def iter_vcf_lines(path: Path) -> Iterator[Tuple[int, str]]:
    """
    Stream data lines from a VCF file.

    Header lines (starting with '#') and blank lines are skipped.

    Args:
        path: Path to VCF file (may be gzipped)

    Yields:
        (line_number, line) tuples; line numbers are 1-based file lines and
        the trailing newline is removed

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"VCF file not found: {path}")

    with _open_vcf(path) as f:
        for line_number, line in enumerate(f, start=1):
            line = line.rstrip('\r\n')
            if not line or line.startswith(HEADER_PREFIX):
                continue
            yield line_number, line


def read_sample_names(path: Path) -> List[str]:
    """Return the sample names declared in the #CHROM header line.

    An empty list is returned for sites-only files or files without a
    column header.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"VCF file not found: {path}")

    with _open_vcf(path) as f:
        for line in f:
            if line.startswith(COLUMN_HEADER_PREFIX):
                return line.rstrip('\r\n').split('\t')[FIRST_SAMPLE_COLUMN:]
            if not line.startswith(HEADER_PREFIX):
                break

    logger.warning(f"No #CHROM header found in {path}")
    return []
