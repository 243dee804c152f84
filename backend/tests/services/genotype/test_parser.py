"""
Unit tests for the raw genotype export parser and its command line entry point.
"""

import gzip
import json

import pytest
from app.services.genotype.__main__ import main
from app.services.genotype.parser import GenotypeParseError, parse_genotype_export


EXPORT = (
    "# This data file generated by 23andMe\n"
    "# rsid\tchromosome\tposition\tgenotype\n"
    "rs429358\t19\t45411941\tCT\n"
    "rs0000001\t1\t12345\tAA\n"
    "rs688\t19\t11227602\tAG\n"
    "rs5742904\t2\t21229160\tGG\n"
)


class TestParseGenotypeExport:
    """Test parse_genotype_export line handling."""

    def test_tab_separated(self):
        result = parse_genotype_export(EXPORT)

        assert result.genotypes == {"rs429358": "CT", "rs688": "AG", "rs5742904": "GG"}
        assert result.lines_read == 4
        assert result.lines_skipped == 0
        assert result.variants_retained == 3
        assert result.metrics["comment_lines"] == 2
        assert result.metrics["tracked_variants_found"] == 3

    def test_comma_separated(self):
        result = parse_genotype_export("rs688,19,11227602,GG\r\nrs7412,19,45412079,CT\r\n")

        assert result.genotypes == {"rs688": "GG", "rs7412": "CT"}

    def test_short_lines_skipped(self):
        """
        GIVEN a data line with fewer than four columns
        WHEN the export is parsed
        THEN the line is counted as skipped and contributes nothing
        """
        result = parse_genotype_export("rs688\t19\n\nrs7412\t19\t45412079\tCC\n")

        assert result.genotypes == {"rs7412": "CC"}
        assert result.lines_read == 2
        assert result.lines_skipped == 1
        assert result.metrics["malformed_lines"] == 1

    def test_later_row_wins(self):
        result = parse_genotype_export("rs688\t19\t1\tAA\nrs688\t19\t1\tGG\n")

        assert result.genotypes == {"rs688": "GG"}

    def test_custom_tracked_ids(self):
        result = parse_genotype_export(EXPORT, tracked_ids={"rs0000001"})

        assert result.genotypes == {"rs0000001": "AA"}
        assert result.metrics["tracked_variants_total"] == 1

    def test_comments_only_is_valid(self):
        result = parse_genotype_export("# header only\n")

        assert result.genotypes == {}
        assert result.metrics["parsing_success"] is True

    @pytest.mark.parametrize("content", ["", "\n\n", b""])
    def test_empty_file(self, content):
        with pytest.raises(GenotypeParseError):
            parse_genotype_export(content)

    def test_bytes(self):
        result = parse_genotype_export(EXPORT.encode("utf-8"))

        assert result.genotypes["rs429358"] == "CT"

    def test_gzip_bytes(self):
        result = parse_genotype_export(gzip.compress(EXPORT.encode("utf-8")))

        assert result.variants_retained == 3

    def test_corrupt_gzip(self):
        with pytest.raises(GenotypeParseError):
            parse_genotype_export(b"\x1f\x8bnot really gzip")

    def test_line_iterable(self):
        result = parse_genotype_export(["rs688\t19\t1\tAG\n"])

        assert result.genotypes == {"rs688": "AG"}

    def test_path(self, tmp_path):
        path = tmp_path / "genome.txt"
        path.write_text(EXPORT, encoding="utf-8")

        assert parse_genotype_export(path).variants_retained == 3

    def test_gzip_path(self, tmp_path):
        path = tmp_path / "genome.txt.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(EXPORT)

        assert parse_genotype_export(path).genotypes["rs688"] == "AG"


class TestCommandLine:

    @pytest.fixture
    def export_file(self, tmp_path):
        path = tmp_path / "genome.txt"
        path.write_text(EXPORT, encoding="utf-8")
        return path

    def test_help(self, capsys):
        assert main(["genotype"]) == 0
        assert "Usage" in capsys.readouterr().out

    def test_missing_file(self, tmp_path):
        assert main(["genotype", str(tmp_path / "missing.txt")]) == 2

    def test_report(self, export_file, capsys):
        assert main(["genotype", str(export_file), "--diet", "Keto"]) == 0

        out = capsys.readouterr().out
        payload = json.loads(out[out.index("{"):])
        assert payload["parse_metrics"]["tracked_variants_found"] == 3
        assert payload["report"]["active_diet"]["diet"] == "Keto"

    def test_unknown_diet(self, export_file):
        assert main(["genotype", str(export_file), "--diet", "Paleo"]) == 2

    def test_diet_without_value(self, export_file):
        assert main(["genotype", str(export_file), "--diet"]) == 2
