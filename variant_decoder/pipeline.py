"""
Batch decoding of VCF lines.

Feeds lines to the decoder, optionally across worker processes, and keeps a
summary of what was built, rejected and skipped. Each line is decoded
independently, so batches need no coordination.

Author: Kevin R. Roy
"""

from collections import deque
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from itertools import islice
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
import logging

from .config import DecoderConfig
from .core.assembler import VariantDecoder
from .core.exceptions import VariantDecodeError
from .core.models import VariantRecord
from .io.output import write_records_jsonl, write_records_tsv
from .io.vcf_reader import iter_vcf_lines, read_sample_names

logger = logging.getLogger(__name__)

# Batches queued per worker before the oldest result is collected
PENDING_BATCHES_PER_WORKER = 2


@dataclass
class LineOutcome:
    """Decoding outcome for a single line."""
    line_number: int
    records: List[VariantRecord] = field(default_factory=list)
    n_skipped_alleles: int = 0
    error_type: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class DecodeSummary:
    """
    Totals for a decoding run.

    Records are only kept when keep_records is set; streaming runs hand them
    straight to a writer instead.
    """
    records: List[VariantRecord] = field(default_factory=list)
    keep_records: bool = True
    n_lines: int = 0
    n_records: int = 0
    n_skipped_alleles: int = 0
    rejected_by_error: Dict[str, int] = field(default_factory=dict)

    @property
    def n_rejected_lines(self) -> int:
        return sum(self.rejected_by_error.values())

    def add(self, outcome: LineOutcome):
        """Fold one line outcome into the totals."""
        self.n_lines += 1
        self.n_skipped_alleles += outcome.n_skipped_alleles
        if outcome.error_type is not None:
            self.rejected_by_error[outcome.error_type] = (
                self.rejected_by_error.get(outcome.error_type, 0) + 1
            )
            logger.warning(
                f"Line {outcome.line_number} rejected ({outcome.error_type}): "
                f"{outcome.error_message}"
            )
        else:
            self.n_records += len(outcome.records)
            if self.keep_records:
                self.records.extend(outcome.records)

    def print_summary(self):
        """Print a short human-readable summary."""
        print(f"Lines decoded:     {self.n_lines}")
        print(f"Records built:     {self.n_records}")
        print(f"Alleles skipped:   {self.n_skipped_alleles}")
        print(f"Lines rejected:    {self.n_rejected_lines}")
        for error_type, count in sorted(self.rejected_by_error.items()):
            print(f"  {error_type}: {count}")


def decode_line(decoder: VariantDecoder, line_number: int, line: str) -> LineOutcome:
    """Decode one line, turning line-level errors into a LineOutcome."""
    try:
        result = decoder.decode(line)
    except VariantDecodeError as e:
        return LineOutcome(
            line_number=line_number,
            error_type=type(e).__name__,
            error_message=str(e),
        )
    return LineOutcome(
        line_number=line_number,
        records=list(result.records),
        n_skipped_alleles=len(result.skipped),
    )


def _decode_batch_worker(batch_data) -> Tuple[int, List[LineOutcome]]:
    """
    Worker function for parallel decoding.

    This is a module-level function (not a method) for efficient pickling
    when using ProcessPoolExecutor.

    Args:
        batch_data: Tuple of (lines, decoder, batch_idx)

    Returns:
        Tuple of (batch_idx, outcomes in input order)
    """
    lines, decoder, batch_idx = batch_data
    return batch_idx, [decode_line(decoder, n, line) for n, line in lines]


def _batched(lines: Iterable[Tuple[int, str]], batch_size: int) -> Iterator[List[Tuple[int, str]]]:
    iterator = iter(lines)
    while True:
        batch = list(islice(iterator, batch_size))
        if not batch:
            return
        yield batch


def iter_outcomes(
    lines: Iterable[Tuple[int, str]],
    decoder: VariantDecoder,
    threads: int = 1,
    batch_size: int = 1000,
) -> Iterator[LineOutcome]:
    """
    Decode numbered lines lazily, yielding one LineOutcome per line in input order.

    With more than one worker, input is read batch by batch and at most
    threads * PENDING_BATCHES_PER_WORKER batches are in flight at once.
    """
    if threads <= 1:
        for line_number, line in lines:
            yield decode_line(decoder, line_number, line)
        return

    logger.info(f"Decoding in batches of {batch_size} lines using {threads} workers...")
    max_pending = threads * PENDING_BATCHES_PER_WORKER

    with ProcessPoolExecutor(max_workers=threads) as executor:
        pending = deque()
        for batch_idx, batch in enumerate(_batched(lines, batch_size)):
            pending.append((batch_idx, executor.submit(_decode_batch_worker, (batch, decoder, batch_idx))))
            if len(pending) >= max_pending:
                yield from _collect_batch(*pending.popleft())
        while pending:
            yield from _collect_batch(*pending.popleft())


def _collect_batch(batch_idx: int, future) -> List[LineOutcome]:
    try:
        _, outcomes = future.result()
    except Exception as e:
        logger.error(f"Batch {batch_idx} failed: {e}")
        raise
    logger.debug(f"Completed batch {batch_idx + 1}")
    return outcomes


def decode_lines(
    lines: Iterable[Tuple[int, str]],
    file_id: str,
    study_id: str,
    threads: int = 1,
    batch_size: int = 1000,
) -> DecodeSummary:
    """
    Decode numbered lines into records.

    Args:
        lines: (line_number, line) tuples, e.g. from iter_vcf_lines()
        file_id: Identifier of the source file
        study_id: Identifier of the study
        threads: Number of worker processes (1 decodes in-process)
        batch_size: Lines per worker batch

    Returns:
        DecodeSummary with records in input order
    """
    decoder = VariantDecoder(file_id=file_id, study_id=study_id)
    summary = DecodeSummary()
    for outcome in iter_outcomes(lines, decoder, threads, batch_size):
        summary.add(outcome)
    return summary


def run_decode(config: DecoderConfig, input_path: Path, output_path: Path) -> DecodeSummary:
    """
    Decode a VCF file and write the records.

    Args:
        config: Decoding configuration (file/study ids, format, workers)
        input_path: VCF file (may be gzipped)
        output_path: Destination TSV or JSON lines file

    Returns:
        DecodeSummary of the run
    """
    errors = config.validate()
    if errors:
        raise ValueError("Invalid configuration: " + "; ".join(errors))

    logger.info(f"Decoding {input_path} (file_id={config.file_id}, study_id={config.study_id})")

    decoder = VariantDecoder(file_id=config.file_id, study_id=config.study_id)
    summary = DecodeSummary(keep_records=False)

    def stream_records() -> Iterator[VariantRecord]:
        outcomes = iter_outcomes(
            iter_vcf_lines(input_path), decoder, config.threads, config.batch_size
        )
        for outcome in outcomes:
            summary.add(outcome)
            yield from outcome.records

    if config.output_format == 'jsonl':
        write_records_jsonl(stream_records(), output_path)
    else:
        # TSV columns depend on every record's attributes, so rows are
        # collected before writing
        write_records_tsv(stream_records(), output_path, sample_names=read_sample_names(input_path))

    logger.info(
        f"Decoding summary: {summary.n_records} records, "
        f"{summary.n_skipped_alleles} alleles skipped, "
        f"rejected lines: {summary.rejected_by_error}"
    )

    return summary
