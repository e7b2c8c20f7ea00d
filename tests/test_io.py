"""Tests for loading VCF files into a VariantSet."""

import gzip

import numpy as np
import pytest

from vcf_depth_qc import ParseError, count_data_rows, read_vcf


class TestReadVcf:
    """Test read_vcf on valid input."""

    def test_plain_and_gzip_load_identically(self, small_vcf, small_vcf_gz):
        plain = read_vcf(str(small_vcf))
        packed = read_vcf(str(small_vcf_gz))
        assert plain.samples == packed.samples == ["S1", "S2", "S3"]
        assert plain.fix.equals(packed.fix)
        assert plain.gt.equals(packed.gt)

    def test_compression_detected_without_gz_suffix(self, tmp_path, small_vcf, vcf_content):
        path = tmp_path / "compressed.vcf"
        path.write_bytes(gzip.compress(vcf_content.encode()))
        packed = read_vcf(str(path))
        assert packed.gt.equals(read_vcf(str(small_vcf)).gt)
        assert count_data_rows(str(path)) == 5

    def test_sections(self, small_vcf):
        vs = read_vcf(str(small_vcf))
        assert vs.n_variants == 5
        assert vs.n_samples == 3
        assert len(vs.meta) == 8
        assert vs.meta[0] == "fileformat=VCFv4.2"
        assert list(vs.gt.columns) == ["FORMAT", "S1", "S2", "S3"]
        assert vs.fix["POS"].tolist() == [100, 200, 300, 50, 75]
        assert np.isnan(vs.fix["QUAL"].iloc[1])
        assert vs.fix["QUAL"].iloc[3] == 99.0

    def test_dot_cells_are_missing(self, small_vcf):
        vs = read_vcf(str(small_vcf))
        assert vs.gt.loc[2, "S2"] is None
        # a partially missing cell is kept verbatim
        assert vs.gt.loc[1, "S2"] == "./.:.:."

    def test_variant_ids_fall_back_to_chrom_pos(self, small_vcf):
        vs = read_vcf(str(small_vcf))
        assert vs.variant_ids().tolist() == ["rs1", "chr1_200", "chr1_300", "rs4", "chr2_75"]

    def test_max_records(self, small_vcf):
        vs = read_vcf(str(small_vcf), max_records=2)
        assert vs.n_variants == 2

    def test_sample_subset(self, small_vcf):
        vs = read_vcf(str(small_vcf), samples=["S3", "S1"])
        assert vs.samples == ["S3", "S1"]
        assert vs.gt.loc[0, "S3"] == "1/1:8:20"

    def test_unknown_sample_subset(self, small_vcf):
        with pytest.raises(ValueError, match="S9"):
            read_vcf(str(small_vcf), samples=["S9"])

    def test_sites_only_vcf(self, tmp_path):
        path = tmp_path / "sites.vcf"
        path.write_text(
            "##fileformat=VCFv4.2\n"
            "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\n"
            "chr1\t10\t.\tA\tG\t5\tPASS\t.\n"
        )
        vs = read_vcf(str(path))
        assert vs.n_samples == 0
        assert vs.n_variants == 1
        assert vs.summarize().n_cells == 0


class TestSummary:
    """Test VariantSet.summarize and count_data_rows."""

    def test_counts(self, small_vcf):
        summary = read_vcf(str(small_vcf)).summarize()
        assert summary.n_samples == 3
        assert summary.n_variants == 5
        assert summary.chromosomes == ["chr1", "chr2"]
        # './.' and '.' cells
        assert summary.n_missing == 2
        assert summary.n_cells == 15
        assert summary.missing_fraction == pytest.approx(2 / 15)

    def test_regions(self, small_vcf):
        regions = read_vcf(str(small_vcf)).summarize().regions
        chr1 = regions[regions["CHROM"] == "chr1"].iloc[0]
        chr2 = regions[regions["CHROM"] == "chr2"].iloc[0]
        assert (chr1["Start"], chr1["End"], chr1["Variants"]) == (100, 300, 3)
        assert (chr2["Start"], chr2["End"], chr2["Variants"]) == (50, 75, 2)

    def test_text_report(self, small_vcf):
        text = str(read_vcf(str(small_vcf)).summarize())
        assert "3 samples" in text
        assert "5 variants" in text
        assert "chr1:100-300" in text

    def test_count_data_rows_matches_summary(self, small_vcf, small_vcf_gz):
        for path in (small_vcf, small_vcf_gz):
            assert count_data_rows(str(path)) == read_vcf(str(path)).summarize().n_variants

    def test_empty_body(self, tmp_path):
        path = tmp_path / "empty.vcf"
        path.write_text("##fileformat=VCFv4.2\n#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tA\n")
        vs = read_vcf(str(path))
        summary = vs.summarize()
        assert summary.n_variants == 0
        assert summary.chromosomes == []
        assert count_data_rows(str(path)) == 0


class TestParseErrors:
    """Malformed files raise ParseError with location context."""

    def test_row_field_count_mismatch(self, tmp_path, vcf_content):
        bad = vcf_content.rstrip("\n") + "\nchr2\t90\t.\tA\tG\t5\tPASS\t.\tGT\t0/1\t0/0\n"
        path = tmp_path / "bad.vcf"
        path.write_text(bad)
        with pytest.raises(ParseError) as info:
            read_vcf(str(path))
        assert info.value.line_no == len(bad.splitlines())
        assert info.value.path == str(path)
        assert "expected 12" in str(info.value)

    def test_data_before_header(self, tmp_path):
        path = tmp_path / "noheader.vcf"
        path.write_text("##fileformat=VCFv4.2\nchr1\t1\t.\tA\tG\t.\t.\t.\n")
        with pytest.raises(ParseError, match="before the #CHROM header"):
            read_vcf(str(path))

    def test_missing_header(self, tmp_path):
        path = tmp_path / "meta_only.vcf"
        path.write_text("##fileformat=VCFv4.2\n")
        with pytest.raises(ParseError, match="no #CHROM header"):
            read_vcf(str(path))

    def test_wrong_fixed_columns(self, tmp_path):
        path = tmp_path / "cols.vcf"
        path.write_text("#CHROM\tPOS\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tS1\n")
        with pytest.raises(ParseError, match="unexpected fixed columns"):
            read_vcf(str(path))

    def test_duplicated_samples(self, tmp_path):
        path = tmp_path / "dup.vcf"
        path.write_text("#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tS1\tS1\n")
        with pytest.raises(ParseError, match="duplicated sample"):
            read_vcf(str(path))

    def test_bad_position(self, tmp_path):
        path = tmp_path / "pos.vcf"
        path.write_text(
            "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tS1\n"
            "chr1\tabc\t.\tA\tG\t.\t.\t.\tGT\t0/1\n"
        )
        with pytest.raises(ParseError) as info:
            read_vcf(str(path))
        assert info.value.line_no == 2

    def test_corrupt_gzip(self, tmp_path):
        path = tmp_path / "corrupt.vcf.gz"
        path.write_bytes(b"\x1f\x8b\x00this is not gzip data")
        with pytest.raises(ParseError, match="cannot read file"):
            read_vcf(str(path))
        with pytest.raises(ParseError):
            count_data_rows(str(path))

    def test_corrupt_gzip_body(self, tmp_path, vcf_content):
        data = bytearray(gzip.compress(vcf_content.encode()))
        # keep the 10-byte gzip header, damage the deflate stream
        for i in range(10, min(40, len(data))):
            data[i] ^= 0xFF
        path = tmp_path / "damaged.vcf.gz"
        path.write_bytes(bytes(data))
        with pytest.raises(ParseError, match="cannot read file"):
            read_vcf(str(path))
        with pytest.raises(ParseError, match="cannot read file"):
            count_data_rows(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParseError):
            read_vcf(str(tmp_path / "absent.vcf"))


class TestSnapshots:
    """VariantSet operations return new snapshots."""

    def test_subset_rows_and_samples(self, small_vcf):
        vs = read_vcf(str(small_vcf))
        sub = vs.subset(rows=[True, False, True, False, False], samples=["S2"])
        assert sub.n_variants == 2
        assert sub.samples == ["S2"]
        assert sub.fix.index.tolist() == [0, 1]
        assert vs.n_variants == 5 and vs.n_samples == 3

    def test_subset_rejects_bad_mask(self, small_vcf):
        vs = read_vcf(str(small_vcf))
        with pytest.raises(ValueError):
            vs.subset(rows=[True, False])

    def test_with_genotypes_keeps_columns(self, small_vcf):
        vs = read_vcf(str(small_vcf))
        with pytest.raises(ValueError):
            vs.with_genotypes(vs.gt[["FORMAT", "S1"]])

    def test_gzip_written_with_module(self, tmp_path, vcf_content):
        path = tmp_path / "calls.vcf.bgz"
        with gzip.open(path, "wt") as fh:
            fh.write(vcf_content)
        assert read_vcf(str(path)).n_variants == 5
