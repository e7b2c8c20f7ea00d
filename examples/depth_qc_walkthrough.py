"""Walk through the depth QC workflow step by step.

Usage (adjust path):
    PYTHONPATH=.. python3 examples/depth_qc_walkthrough.py \
        --vcf calls.vcf.gz --outdir depth_qc_plots
"""
from __future__ import annotations

import argparse
from pathlib import Path

from vcf_depth_qc import count_data_rows, extract_gt, query_meta, read_vcf
from vcf_depth_qc.metrics import (
    filter_depth_outliers,
    filter_samples_by_missingness,
    filter_variants_by_missingness,
)
from vcf_depth_qc.plot import plot_depth_violin, plot_gq_violin


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--vcf", required=True, help="Input VCF(.gz)")
    ap.add_argument("--outdir", required=True, help="Output directory for plots")
    args = ap.parse_args()

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    vcf = read_vcf(args.vcf, verbose=True)
    print(vcf.summarize())
    print(f"Raw data rows: {count_data_rows(args.vcf):,}")
    print(query_meta(vcf, element="DP").to_string(index=False))

    # Depth and genotype quality before any filtering
    dp = extract_gt(vcf, "DP", as_numeric=True)
    plot_depth_violin(dp, output_path=str(outdir / "dp_raw.png"))
    plot_gq_violin(extract_gt(vcf, "GQ", as_numeric=True), output_path=str(outdir / "gq_raw.png"))

    # Mask depth outside each sample's 10-90% range or below 4 reads
    vcf = filter_depth_outliers(vcf, low=0.10, high=0.90, min_depth=4, verbose=True)

    # Samples with an unusually high amount of missing data
    dp = extract_gt(vcf, "DP", as_numeric=True)
    vcf = filter_samples_by_missingness(vcf, dp, threshold=0.55, verbose=True)

    # Re-extract: dropping samples changes each variant's missing fraction
    dp = extract_gt(vcf, "DP", as_numeric=True)
    vcf = filter_variants_by_missingness(vcf, dp, threshold=0.20, verbose=True)

    print(vcf.summarize())
    plot_depth_violin(extract_gt(vcf, "DP", as_numeric=True), output_path=str(outdir / "dp_filtered.png"))
    plot_gq_violin(extract_gt(vcf, "GQ", as_numeric=True), output_path=str(outdir / "gq_filtered.png"))
    print(f"Plots written to: {outdir}")


if __name__ == "__main__":
    main()
