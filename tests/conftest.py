"""Pytest fixtures for vcf_depth_qc tests."""

import gzip

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from vcf_depth_qc.io.vcf_reader import FIX_COLUMNS, VariantSet

META_LINES = [
    "##fileformat=VCFv4.2",
    '##INFO=<ID=DP,Number=1,Type=Integer,Description="Total Depth">',
    '##INFO=<ID=AF,Number=A,Type=Float,Description="Allele Frequency">',
    '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">',
    '##FORMAT=<ID=DP,Number=1,Type=Integer,Description="Read Depth">',
    '##FORMAT=<ID=GQ,Number=1,Type=Integer,Description="Genotype Quality">',
    '##FORMAT=<ID=AD,Number=R,Type=Integer,Description="Allelic depths, ref first">',
    "##contig=<ID=chr1,length=1000>",
]

HEADER = "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tS1\tS2\tS3"

ROWS = [
    # FORMAT order differs row to row on purpose
    "chr1\t100\trs1\tA\tT\t50\tPASS\tDP=30;AF=0.5\tGT:DP:GQ\t0/1:10:30\t0/0:12:40\t1/1:8:20",
    "chr1\t200\t.\tG\tC\t.\tPASS\tDP=20\tGT:GQ:DP\t0/0:35:15\t./.:.:.\t0/1:25:5",
    "chr1\t300\t.\tC\tA\t10\tq10\tAF=0.1;DB\tGT:AD:DP:GQ\t0/1:5,5:10:50\t.\t0/0:3,0:3:12",
    "chr2\t50\trs4\tT\tG\t99\tPASS\t.\tGT:GQ\t0/1:60\t0/0:70\t1/1:80",
    "chr2\t75\t.\tA\tAT\t20\tPASS\tDP=x\tGT:DP:GQ\t0|1:abc:10\t0/0:7:15\t0/1:9:99",
]


@pytest.fixture
def vcf_content():
    """Return content for a small three-sample VCF."""
    return "\n".join(META_LINES + [HEADER] + ROWS) + "\n"


@pytest.fixture
def small_vcf(tmp_path, vcf_content):
    """Write the small VCF as plain text."""
    path = tmp_path / "small.vcf"
    path.write_text(vcf_content)
    return path


@pytest.fixture
def small_vcf_gz(tmp_path, vcf_content):
    """Write the small VCF gzipped."""
    path = tmp_path / "small.vcf.gz"
    with gzip.open(path, "wt") as f:
        f.write(vcf_content)
    return path


def build_variant_set(depths, samples=None):
    """Build a VariantSet from a variant x sample list of depths.

    ``None`` depths become missing genotype cells; the rest become
    ``0/1:<dp>:30`` with FORMAT ``GT:DP:GQ``.
    """
    n_samples = len(depths[0]) if depths else 0
    samples = samples or [f"S{i + 1}" for i in range(n_samples)]
    fix = pd.DataFrame(
        [["chr1", 100 * (i + 1), f"v{i + 1}", "A", "G", 50.0, "PASS", "."] for i in range(len(depths))],
        columns=FIX_COLUMNS,
    )
    cells = [["GT:DP:GQ"] + [None if d is None else f"0/1:{d}:30" for d in row] for row in depths]
    gt = pd.DataFrame(cells, columns=["FORMAT"] + list(samples), dtype=object)
    return VariantSet(meta=["fileformat=VCFv4.2"], fix=fix, gt=gt, path="built.vcf")


@pytest.fixture
def make_variant_set():
    return build_variant_set
