"""Tests for meta header parsing and lookup."""

from vcf_depth_qc import query_meta, read_vcf
from vcf_depth_qc.io.meta import parse_meta_line


class TestParseMetaLine:
    def test_structured_line_with_quoted_commas(self):
        entry = parse_meta_line('##FORMAT=<ID=AD,Number=R,Type=Integer,Description="Allelic depths, ref first">')
        assert entry.key == "FORMAT"
        assert entry.id == "AD"
        assert entry.number == "R"
        assert entry.type == "Integer"
        assert entry.description == "Allelic depths, ref first"

    def test_unstructured_line(self):
        entry = parse_meta_line("fileformat=VCFv4.2")
        assert entry.key == "fileformat"
        assert entry.id is None
        assert entry.description == "VCFv4.2"


class TestQueryMeta:
    def test_all_acronyms_with_columns(self, small_vcf):
        table = query_meta(read_vcf(str(small_vcf)))
        assert table["Acronym"].tolist() == ["DP", "AF", "GT", "GQ", "AD", "chr1"]
        columns = dict(zip(table["Acronym"], table["Columns"]))
        assert columns["DP"] == "INFO,FORMAT"
        assert columns["GQ"] == "FORMAT"
        assert columns["chr1"] == "contig"

    def test_exact_match_returns_every_definition(self, small_vcf):
        table = query_meta(read_vcf(str(small_vcf)), element="DP", exact=True)
        assert table["Key"].tolist() == ["INFO", "FORMAT"]
        assert table["Description"].tolist() == ["Total Depth", "Read Depth"]

    def test_prefix_match(self, small_vcf):
        table = query_meta(read_vcf(str(small_vcf)), element="G")
        assert table["ID"].tolist() == ["GT", "GQ"]

    def test_exact_does_not_prefix_match(self, small_vcf):
        table = query_meta(read_vcf(str(small_vcf)), element="G", exact=True)
        assert table.empty

    def test_no_match_is_empty_not_error(self, small_vcf):
        table = query_meta(read_vcf(str(small_vcf)), element="ZZ")
        assert table.empty
        assert list(table.columns) == ["Key", "ID", "Number", "Type", "Description"]
