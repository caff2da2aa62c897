"""Tests for variant_decoder.pipeline and variant_decoder.io modules."""

import gzip
import itertools
import json

import pandas as pd
import pytest
from click.testing import CliRunner

from variant_decoder.cli import cli
from variant_decoder.config import DecoderConfig
from variant_decoder.core.assembler import VariantDecoder, create_variants
from variant_decoder.io.output import (
    format_sample,
    records_to_rows,
    write_records_jsonl,
    write_records_tsv,
)
from variant_decoder.io.vcf_reader import iter_vcf_lines, read_sample_names
from variant_decoder.pipeline import (
    PENDING_BATCHES_PER_WORKER,
    DecodeSummary,
    decode_line,
    decode_lines,
    iter_outcomes,
    run_decode,
)


VCF_CONTENT = (
    "##fileformat=VCFv4.2\n"
    "##INFO=<ID=AC,Number=A,Type=Integer,Description=\"Allele count\">\n"
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tNA001\tNA002\n"
    "20\t100\trs1\tA\tC,T\t30\tPASS\tAC=3,5;NS=9\tGT:DP\t0/1:10\t1/2:7\n"
    "20\t200\t.\tG\t.\t.\t.\t.\tGT\t0/0\t0/0\n"
    "20\t300\t.\tAT\tA\t.\t.\tDP=1\tGT:DP\t0/1:4\t1/1\n"
    "20\tbad\t.\tA\tT\t.\t.\t.\n"
    "20\t400\t.\tA\tC,T\t.\t.\t.\tGT\t0/1\t0/x\n"
)


@pytest.fixture
def vcf_path(tmp_path):
    path = tmp_path / "calls.vcf"
    path.write_text(VCF_CONTENT)
    return path


class TestVcfReader:
    """Test VCF line source."""

    def test_skips_header_lines(self, vcf_path):
        """Test only data lines are yielded, with file line numbers."""
        lines = list(iter_vcf_lines(vcf_path))
        assert [n for n, _ in lines] == [4, 5, 6, 7, 8]
        assert lines[0][1].startswith("20\t100")
        assert not lines[0][1].endswith("\n")

    def test_gzipped_file(self, tmp_path):
        """Test gzipped VCFs are read transparently."""
        path = tmp_path / "calls.vcf.gz"
        with gzip.open(path, 'wt') as f:
            f.write(VCF_CONTENT)
        assert len(list(iter_vcf_lines(path))) == 5

    def test_missing_file_raises(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            list(iter_vcf_lines(tmp_path / "missing.vcf"))

    def test_read_sample_names(self, vcf_path):
        """Test sample names from the #CHROM header."""
        assert read_sample_names(vcf_path) == ['NA001', 'NA002']

    def test_read_sample_names_without_header(self, tmp_path):
        """Test a headerless file has no sample names."""
        path = tmp_path / "bare.vcf"
        path.write_text("1\t5\t.\tA\tG\t.\t.\t.\n")
        assert read_sample_names(path) == []


class TestDecodeLines:
    """Test batch decoding."""

    def test_summary_counts(self, vcf_path):
        """Test records, rejected lines and skipped alleles are tallied."""
        summary = decode_lines(iter_vcf_lines(vcf_path), 'f', 's')

        assert summary.n_lines == 5
        # 2 from line 4, 1 from line 6, 1 from line 8
        assert summary.n_records == 4
        assert summary.n_skipped_alleles == 1
        assert summary.rejected_by_error == {'NotAVariant': 1, 'MalformedRecord': 1}
        assert summary.n_rejected_lines == 2

    def test_records_in_input_order(self, vcf_path):
        """Test records keep line and allele order."""
        summary = decode_lines(iter_vcf_lines(vcf_path), 'f', 's')
        assert [(r.start, r.alternate) for r in summary.records] == [
            (100, 'C'), (100, 'T'), (301, ''), (400, 'C'),
        ]

    def test_recomputed_info(self, vcf_path):
        """Test INFO aggregates are recomputed per record."""
        summary = decode_lines(iter_vcf_lines(vcf_path), 'f', 's')
        deletion = summary.records[2]
        assert deletion.source.attributes['DP'] == '4'
        assert summary.records[1].source.attributes['AC'] == '5'
        assert summary.records[1].source.attributes['NS'] == '2'

    def test_parallel_matches_sequential(self, vcf_path):
        """Test worker processes give the same records as in-process decoding."""
        lines = list(iter_vcf_lines(vcf_path))
        sequential = decode_lines(lines, 'f', 's')
        parallel = decode_lines(lines, 'f', 's', threads=2, batch_size=2)

        assert parallel.records == sequential.records
        assert parallel.rejected_by_error == sequential.rejected_by_error
        assert parallel.n_skipped_alleles == sequential.n_skipped_alleles

    @pytest.mark.parametrize("threads", [1, 2])
    def test_input_read_lazily(self, threads):
        """Test only a bounded number of lines is read ahead of the consumer."""
        n_read = 0

        def endless_lines():
            nonlocal n_read
            for n in itertools.count(1):
                n_read += 1
                yield n, f"1\t{n}\t.\tA\tG\t.\t.\t."

        decoder = VariantDecoder(file_id='f', study_id='s')
        outcomes = iter_outcomes(endless_lines(), decoder, threads=threads, batch_size=1)
        first = list(itertools.islice(outcomes, 3))
        outcomes.close()

        assert [o.line_number for o in first] == [1, 2, 3]
        assert n_read <= 3 + threads * PENDING_BATCHES_PER_WORKER

    def test_summary_without_kept_records(self, vcf_path):
        """Test counts are kept when records are streamed elsewhere."""
        decoder = VariantDecoder(file_id='f', study_id='s')
        summary = DecodeSummary(keep_records=False)
        for n, line in iter_vcf_lines(vcf_path):
            summary.add(decode_line(decoder, n, line))

        assert summary.records == []
        assert summary.n_records == 4
        assert summary.n_rejected_lines == 2


class TestOutput:
    """Test record writers."""

    LINE = "20\t100\trs1\tA\tC,T\t30\tPASS\tAC=3,5\tGT:DP\t0/1:10\t1/2"

    def test_format_sample(self):
        """Test samples render in FORMAT order."""
        assert format_sample(('GT', 'DP'), {'DP': '10', 'GT': '0/1'}) == '0/1:10'
        assert format_sample(('GT', 'DP'), {'GT': '0/1'}) == '0/1'

    def test_records_to_rows(self):
        """Test one flat row per record."""
        records = create_variants('f', 's', self.LINE)
        rows = records_to_rows(records, sample_names=['NA001', 'NA002'])

        assert len(rows) == 2
        assert rows[1]['alternate'] == 'T'
        assert rows[1]['secondary_alternates'] == 'C'
        assert rows[1]['AC'] == '5'
        assert rows[1]['NA002'] == '2/1'
        assert 'src' not in rows[0]

    def test_write_records_tsv(self, tmp_path):
        """Test TSV output is readable with pandas."""
        records = create_variants('f', 's', self.LINE)
        path = write_records_tsv(records, tmp_path / "out.tsv")

        df = pd.read_csv(path, sep='\t', dtype=str)
        assert list(df['alternate']) == ['C', 'T']
        assert list(df['sample_1']) == ['0/1:10', '0/2:10']
        assert list(df['ids']) == ['rs1', 'rs1']

    def test_write_empty_tsv(self, tmp_path):
        """Test an empty record list still writes a header."""
        path = write_records_tsv([], tmp_path / "empty.tsv")
        assert path.read_text().startswith("chromosome\tstart\tend")

    def test_write_records_jsonl(self, tmp_path):
        """Test one JSON document per record."""
        records = create_variants('f', 's', self.LINE)
        path = write_records_jsonl(records, tmp_path / "out.jsonl")

        docs = [json.loads(line) for line in path.read_text().splitlines()]
        assert [d['alternate'] for d in docs] == ['C', 'T']
        assert docs[1]['files'][0]['samples'][1] == {'GT': '2/1'}
        assert docs[0]['files'][0]['attributes']['src'] == self.LINE


class TestRunDecode:
    """Test end-to-end file decoding."""

    def test_tsv_run(self, vcf_path, tmp_path):
        """Test decoding a file to TSV with header sample names."""
        config = DecoderConfig(file_id='f', study_id='s')
        output = tmp_path / "out.tsv"

        summary = run_decode(config, vcf_path, output)

        df = pd.read_csv(output, sep='\t', dtype=str)
        assert len(df) == summary.n_records == 4
        assert 'NA001' in df.columns

    def test_invalid_config_raises(self, vcf_path, tmp_path):
        """Test decoding refuses an invalid configuration."""
        with pytest.raises(ValueError, match="file_id"):
            run_decode(DecoderConfig(), vcf_path, tmp_path / "out.tsv")

    def test_jsonl_run_streams_records(self, vcf_path, tmp_path):
        """Test records go to the writer without being kept in the summary."""
        config = DecoderConfig(file_id='f', study_id='s', output_format='jsonl', threads=2, batch_size=2)
        output = tmp_path / "out.jsonl"

        summary = run_decode(config, vcf_path, output)

        docs = [json.loads(line) for line in output.read_text().splitlines()]
        assert [(d['start'], d['alternate']) for d in docs] == [
            (100, 'C'), (100, 'T'), (301, ''), (400, 'C'),
        ]
        assert summary.n_records == 4
        assert summary.records == []
        assert summary.rejected_by_error == {'NotAVariant': 1, 'MalformedRecord': 1}


class TestCli:
    """Test the command-line interface."""

    def test_normalize(self):
        """Test normalizing one allele from the command line."""
        result = CliRunner().invoke(cli, ['normalize', '100', 'A', 'AGG'])
        assert result.exit_code == 0
        assert "start\t101" in result.output
        assert "end\t102" in result.output
        assert "reference\t-" in result.output
        assert "alternate\tGG" in result.output

    def test_normalize_identical_fails(self):
        """Test identical alleles exit with an error."""
        result = CliRunner().invoke(cli, ['normalize', '100', 'A', 'A'])
        assert result.exit_code == 1

    def test_decode_jsonl(self, vcf_path, tmp_path):
        """Test decoding a file to JSON lines."""
        output = tmp_path / "out.jsonl"
        result = CliRunner().invoke(cli, [
            'decode', str(vcf_path), '-f', 'f', '-s', 's', '-o', str(output), '--format', 'jsonl',
        ])
        assert result.exit_code == 0, result.output
        assert len(output.read_text().splitlines()) == 4
        assert "into 4 records" in result.output

    def test_decode_with_config(self, vcf_path, tmp_path):
        """Test identifiers taken from a YAML configuration."""
        config = tmp_path / "decode.yaml"
        config.write_text("file_id: f\nstudy_id: s\n")
        output = tmp_path / "out.tsv"

        result = CliRunner().invoke(cli, [
            'decode', str(vcf_path), '-c', str(config), '-o', str(output),
        ])
        assert result.exit_code == 0, result.output
        assert output.exists()

    def test_decode_requires_ids(self, vcf_path, tmp_path):
        """Test missing identifiers are reported."""
        result = CliRunner().invoke(cli, ['decode', str(vcf_path), '-o', str(tmp_path / "o.tsv")])
        assert result.exit_code == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
