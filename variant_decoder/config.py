"""
Configuration classes for VARDEC.

VARDEC: VCF record decomposition and normalization

Author: Kevin R. Roy
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List

import yaml

OUTPUT_FORMATS = ('tsv', 'jsonl')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class DecoderConfig:
    """Decoding run configuration."""
    file_id: str = ""
    study_id: str = ""

    # Output options
    output_format: str = 'tsv'  # 'tsv' or 'jsonl'

    # Processing options
    threads: int = 1
    batch_size: int = 1000  # lines per worker batch

    log_level: str = 'INFO'

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'DecoderConfig':
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in d.items() if k in known and v is not None}
        for key in ('file_id', 'study_id'):
            if key in values:
                values[key] = str(values[key])
        if 'output_format' in values:
            values['output_format'] = str(values['output_format']).lower()
        if 'log_level' in values:
            values['log_level'] = str(values['log_level']).upper()
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: Path) -> 'DecoderConfig':
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {path}")

        return cls.from_dict(data)

    def merged(self, **overrides) -> 'DecoderConfig':
        """Return a copy with the non-None overrides applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return DecoderConfig.from_dict(values)

    def validate(self) -> List[str]:
        """Validate configuration. Returns list of errors."""
        errors = []

        if not self.file_id:
            errors.append("file_id is required")
        if not self.study_id:
            errors.append("study_id is required")
        if self.output_format not in OUTPUT_FORMATS:
            errors.append(
                f"Unknown output format: {self.output_format} "
                f"(expected one of {', '.join(OUTPUT_FORMATS)})"
            )
        if self.threads < 1:
            errors.append(f"threads must be at least 1, got {self.threads}")
        if self.batch_size < 1:
            errors.append(f"batch_size must be at least 1, got {self.batch_size}")
        if self.log_level not in LOG_LEVELS:
            errors.append(f"Unknown log level: {self.log_level}")

        return errors
