"""
Decomposition of VCF data lines into single-alternate variant records.

A new VariantRecord is built per alternate allele, so several records can be
created from a single line. Line-level errors (MalformedRecord, NotAVariant)
propagate to the caller; a sample that does not follow the FORMAT for one
alternate drops only that alternate's record.

Author: Kevin R. Roy
"""

import logging
from dataclasses import dataclass
from typing import List

from .exceptions import NonStandardSampleField
from .info import build_attributes
from .models import DecodeResult, SkippedAllele, SourceEntry, VariantRecord
from .normalization import normalize_alternates, secondary_alternates
from .samples import parse_samples
from .tokenizer import tokenize_line

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariantDecoder:
    """Decodes VCF lines into VariantRecords tagged with a file and study."""
    file_id: str
    study_id: str

    def decode(self, line: str) -> DecodeResult:
        """
        Decode one VCF data line.

        Args:
            line: Tab-delimited data line

        Returns:
            DecodeResult with one record per alternate whose samples decoded,
            and one SkippedAllele per alternate that was dropped

        Raises:
            MalformedRecord: The line cannot be tokenized
            NotAVariant: ALT is '.', or an alternate equals the reference
        """
        line = line.rstrip('\r\n')
        raw = tokenize_line(line)
        alleles = normalize_alternates(raw.position, raw.reference, raw.alternates)
        normalized_alternates = [allele.alternate for allele in alleles]

        records = []
        skipped = []
        for allele in alleles:
            try:
                samples = parse_samples(raw.format, raw.samples, allele.allele_index)
            except NonStandardSampleField as e:
                logger.error(
                    f"Variant {raw.chromosome}:{raw.position}:{raw.reference}>"
                    f"{allele.alternate} will not be saved: {e}"
                )
                skipped.append(SkippedAllele(
                    allele_index=allele.allele_index,
                    alternate=allele.alternate,
                    error=e,
                ))
                continue

            # INFO is built after the samples because NS/DP/MQ depend on them
            source = SourceEntry(
                file_id=self.file_id,
                study_id=self.study_id,
                format=raw.format,
                secondary_alternates=secondary_alternates(
                    allele.allele_index, normalized_alternates
                ),
                attributes=build_attributes(raw, allele.allele_index, samples, line),
                samples=samples,
            )
            records.append(VariantRecord(
                chromosome=raw.chromosome,
                start=allele.start,
                end=allele.end,
                reference=allele.reference,
                alternate=allele.alternate,
                ids=raw.ids,
                source=source,
            ))

        return DecodeResult(records=tuple(records), skipped=tuple(skipped))

    def create(self, line: str) -> List[VariantRecord]:
        """Decode one line and return only the records that were built."""
        return list(self.decode(line).records)


def create_variants(file_id: str, study_id: str, line: str) -> List[VariantRecord]:
    """
    Create the VariantRecords described by one VCF data line.

    Args:
        file_id: Identifier of the source file
        study_id: Identifier of the study the file belongs to
        line: Tab-delimited data line

    Returns:
        List of VariantRecord, at most one per alternate allele
    """
    return VariantDecoder(file_id, study_id).create(line)
