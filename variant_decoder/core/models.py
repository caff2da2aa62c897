"""
Data models for VARDEC variant decoding.

Author: Kevin R. Roy
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from .exceptions import NonStandardSampleField

# Alleles longer than this are reported as structural variants
SV_THRESHOLD = 50


class VariantType(Enum):
    """Variant type categories."""
    SNV = 'SNV'
    MNV = 'MNV'
    INDEL = 'INDEL'
    SV = 'SV'


@dataclass(frozen=True)
class RawRecord:
    """
    Typed fields of a single VCF data line.

    Attributes:
        chromosome: CHROM column
        position: POS column (1-based)
        ids: ID column split on ';' (empty when '.')
        reference: REF column ('' when '.')
        alternates: ALT column split on ','
        quality: QUAL column (None when '.')
        filter: FILTER column ('' when '.')
        info: INFO column ('' when '.')
        format: FORMAT column split on ':' (empty when absent or '.')
        samples: One raw string per sample column
    """
    chromosome: str
    position: int
    ids: FrozenSet[str]
    reference: str
    alternates: Tuple[str, ...]
    quality: Optional[float] = None
    filter: str = ""
    info: str = ""
    format: Tuple[str, ...] = ()
    samples: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NormalizedAllele:
    """Minimal representation of one alternate allele (1-based, inclusive)."""
    start: int
    end: int
    reference: str
    alternate: str
    allele_index: int = 0


@dataclass(frozen=True)
class SourceEntry:
    """
    Per-file data attached to a decoded variant.

    Attributes and samples are stored as read-only mappings, so a returned
    record cannot be changed in place. They are left out of the hash.
    """
    file_id: str
    study_id: str
    format: Tuple[str, ...] = ()
    secondary_alternates: Tuple[str, ...] = ()
    attributes: Mapping[str, str] = field(default_factory=dict, hash=False)
    samples: Tuple[Mapping[str, str], ...] = field(default=(), hash=False)

    def __post_init__(self):
        object.__setattr__(self, 'attributes', MappingProxyType(dict(self.attributes)))
        object.__setattr__(
            self, 'samples', tuple(MappingProxyType(dict(s)) for s in self.samples)
        )

    def __reduce__(self):
        # mappingproxy cannot be pickled; rebuild from plain dicts
        return (
            self.__class__,
            (
                self.file_id,
                self.study_id,
                self.format,
                self.secondary_alternates,
                dict(self.attributes),
                tuple(dict(s) for s in self.samples),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for output."""
        return {
            'file_id': self.file_id,
            'study_id': self.study_id,
            'format': list(self.format),
            'secondary_alternates': list(self.secondary_alternates),
            'attributes': dict(self.attributes),
            'samples': [dict(s) for s in self.samples],
        }


@dataclass(frozen=True)
class VariantRecord:
    """A single-alternate variant decoded from one VCF line."""
    chromosome: str
    start: int
    end: int
    reference: str
    alternate: str
    ids: FrozenSet[str]
    source: SourceEntry

    @property
    def length(self) -> int:
        """Length of the longer allele."""
        return max(len(self.reference), len(self.alternate))

    @property
    def variant_type(self) -> VariantType:
        """Classify as SNV, MNV, INDEL or SV from allele lengths and symbols."""
        if self.alternate.startswith('<') and self.alternate.endswith('>'):
            return VariantType.SV
        ref_len = len(self.reference)
        alt_len = len(self.alternate)
        if ref_len == alt_len:
            return VariantType.SNV if ref_len == 1 else VariantType.MNV
        if self.length > SV_THRESHOLD:
            return VariantType.SV
        return VariantType.INDEL

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a nested, storage-ready dictionary."""
        return {
            'chromosome': self.chromosome,
            'start': self.start,
            'end': self.end,
            'reference': self.reference,
            'alternate': self.alternate,
            'length': self.length,
            'type': self.variant_type.value,
            'ids': sorted(self.ids),
            'files': [self.source.to_dict()],
        }

    def __repr__(self) -> str:
        return (
            f"VariantRecord({self.chromosome}:{self.start}-{self.end} "
            f"{self.reference or '-'}>{self.alternate or '-'})"
        )


@dataclass(frozen=True)
class SkippedAllele:
    """An alternate allele whose record could not be built."""
    allele_index: int
    alternate: str
    error: NonStandardSampleField


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of decoding one line: built records plus skipped alleles."""
    records: Tuple[VariantRecord, ...] = ()
    skipped: Tuple[SkippedAllele, ...] = ()

    @property
    def n_attempted(self) -> int:
        return len(self.records) + len(self.skipped)
