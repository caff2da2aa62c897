"""
Command-line interface for VARDEC.

VARDEC: VCF record decomposition and normalization

Author: Kevin R. Roy
"""

import sys
from pathlib import Path

import click

from . import __version__
from .config import OUTPUT_FORMATS, DecoderConfig


@click.group()
@click.version_option(version=__version__)
def cli():
    """VARDEC: VCF record decomposition and normalization."""
    pass


@cli.command()
@click.argument('input_vcf', type=click.Path(exists=True))
@click.option('--file-id', '-f', type=str,
              help='Identifier of the source file attached to every record')
@click.option('--study-id', '-s', type=str,
              help='Identifier of the study attached to every record')
@click.option('--output', '-o', type=click.Path(), required=True,
              help='Output file')
@click.option('--format', 'output_format', type=click.Choice(OUTPUT_FORMATS),
              help='Output format (default: tsv)')
@click.option('--threads', '-t', type=int,
              help='Number of worker processes (default: 1)')
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True),
              help='YAML configuration file; command-line options take precedence')
def decode(input_vcf, file_id, study_id, output, output_format, threads, config_path):
    """
    Split every line of INPUT_VCF into normalized single-alternate records.

    \b
    Example:
      vardec decode calls.vcf.gz -f file1 -s study1 -o variants.tsv

    \b
    Example with a configuration file:
      vardec decode calls.vcf.gz -c decode.yaml -o variants.jsonl --format jsonl
    """
    import logging

    from .pipeline import run_decode

    try:
        config = DecoderConfig.from_yaml(Path(config_path)) if config_path else DecoderConfig()
    except (ValueError, OSError) as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    config = config.merged(
        file_id=file_id,
        study_id=study_id,
        output_format=output_format,
        threads=threads,
    )

    errors = config.validate()
    if errors:
        for error in errors:
            click.echo(f"Error: {error}", err=True)
        sys.exit(1)

    # Set up logging
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    summary = run_decode(config, Path(input_vcf), output_path)

    click.echo(f"\nDecoded {summary.n_lines} lines into {summary.n_records} records")
    if summary.n_skipped_alleles:
        click.echo(f"Skipped {summary.n_skipped_alleles} alleles with non-standard sample fields")
    if summary.n_rejected_lines:
        click.echo(f"Rejected {summary.n_rejected_lines} lines: {summary.rejected_by_error}")
    click.echo(f"Results written to: {output_path}")


@cli.command()
@click.argument('position', type=int)
@click.argument('reference', type=str)
@click.argument('alternate', type=str)
def normalize(position, reference, alternate):
    """
    Print the normalized start, end, reference and alternate of one allele.

    Use '.' or '-' for an empty allele.

    \b
    Example:
      vardec normalize 100 A AGG
    """
    from .core.exceptions import NotAVariant
    from .core.normalization import normalize_allele

    empty = ('.', '-')
    reference = '' if reference in empty else reference
    alternate = '' if alternate in empty else alternate

    try:
        allele = normalize_allele(position, reference, alternate)
    except NotAVariant as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"start\t{allele.start}")
    click.echo(f"end\t{allele.end}")
    click.echo(f"reference\t{allele.reference or '-'}")
    click.echo(f"alternate\t{allele.alternate or '-'}")


if __name__ == '__main__':
    cli()
