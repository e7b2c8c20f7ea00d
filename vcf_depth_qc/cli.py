"""Command line interface for vcf_depth_qc.

Current subcommands:
	summary – print sample / variant / region / missing-data counts
	meta    – list meta acronyms or look up their definitions
	qc      – run the depth QC workflow and write tables and plots

Example:
	vcf-depth-qc qc --vcf input.vcf.gz --out outdir --max-sample-missing 0.5
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import QCConfig
from .io import count_data_rows, query_meta, read_vcf
from .metrics import compute_sample_metrics, extract_gt
from .plot import plot_depth_violin, plot_gq_violin, plot_missing_rate_per_sample
from .utils import log_error, log_info, log_warn
from .workflow import run_depth_qc


def cmd_summary(args: argparse.Namespace) -> int:
	vs = read_vcf(args.vcf, max_records=args.max_site)
	summary = vs.summarize()
	print(summary)
	if args.check_rows:
		raw = count_data_rows(args.vcf)
		if args.max_site:
			raw = min(raw, args.max_site)
		if raw != summary.n_variants:
			log_warn(f"Raw data row count {raw:,} differs from parsed variant count {summary.n_variants:,}")
			return 1
		log_info(f"Raw data row count matches parsed variant count ({raw:,})")
	return 0


def cmd_meta(args: argparse.Namespace) -> int:
	vs = read_vcf(args.vcf, max_records=1)
	table = query_meta(vs, element=args.element, exact=args.exact)
	if table.empty:
		print(f"No meta definitions match {args.element!r}")
		return 0
	print(table.to_string(index=False))
	return 0


def _load_config(args: argparse.Namespace) -> QCConfig:
	base = QCConfig.from_json(args.config) if args.config else QCConfig()
	return base.updated(
		depth_field=args.depth_field,
		quality_field=args.quality_field,
		low_quantile=args.low_quantile,
		high_quantile=args.high_quantile,
		min_depth=args.min_depth,
		max_sample_missing=args.max_sample_missing,
		max_variant_missing=args.max_variant_missing,
		depth_breaks=args.depth_breaks,
	)


def cmd_qc(args: argparse.Namespace) -> int:
	cfg = _load_config(args).validate()
	outdir = Path(args.out)
	outdir.mkdir(parents=True, exist_ok=True)

	vs = read_vcf(args.vcf, max_records=args.max_site, verbose=True)
	raw_depth = extract_gt(vs, element=cfg.depth_field, as_numeric=True)
	if raw_depth.isna().all().all():
		log_warn(f"No {cfg.depth_field} values found; every genotype will be treated as missing")
	plot_depth_violin(
		raw_depth,
		breaks=cfg.depth_breaks,
		title=f"{cfg.depth_field} per sample (before QC)",
		output_path=str(outdir / "depth_violin_raw.png"),
	)

	result = run_depth_qc(vs, cfg, verbose=True)

	sample_table = compute_sample_metrics(raw_depth)
	sample_table["Removed"] = sample_table["Sample"].isin(result.removed_samples)
	sample_table["MissingAfterMask"] = result.sample_missing.to_numpy()
	sample_table.to_csv(outdir / "sample_missingness.tsv", sep="\t", index=False)
	(outdir / "summary.txt").write_text(
		f"{result.before}\n\n{result.after}\n\n{result.report()}\n"
	)

	plot_missing_rate_per_sample(
		result.sample_missing,
		threshold=cfg.max_sample_missing,
		title="Missing depth per sample after outlier masking",
		output_path=str(outdir / "sample_missing_rate.png"),
	)
	plot_depth_violin(
		result.depth,
		breaks=cfg.depth_breaks,
		title=f"{cfg.depth_field} per sample (after QC)",
		output_path=str(outdir / "depth_violin_filtered.png"),
	)
	gq = extract_gt(result.variants, element=cfg.quality_field, as_numeric=True)
	if gq.notna().any().any():
		plot_gq_violin(
			gq,
			title=f"{cfg.quality_field} per sample (after QC)",
			output_path=str(outdir / "gq_violin_filtered.png"),
		)
	else:
		log_warn(f"No {cfg.quality_field} values after QC; skipping the quality plot")
	print(f"Depth QC tables and plots written to {outdir}")
	return 0


def build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="vcf-depth-qc", description="Exploratory depth QC for VCF genotypes")
	sub = p.add_subparsers(dest="command")

	sp = sub.add_parser("summary", help="Sample / variant / missing-data counts")
	sp.add_argument("--vcf", required=True, help="Input VCF or VCF.GZ file")
	sp.add_argument("--max-site", type=int, default=None, help="Limit number of variant sites parsed (debug)")
	sp.add_argument("--check-rows", action="store_true", help="Cross-check the parsed count against a raw row count")
	sp.set_defaults(func=cmd_summary)

	sp2 = sub.add_parser("meta", help="List meta acronyms or show their definitions")
	sp2.add_argument("--vcf", required=True, help="Input VCF or VCF.GZ file")
	sp2.add_argument("--element", default=None, help="Acronym (or prefix) to look up, e.g. DP")
	sp2.add_argument("--exact", action="store_true", help="Match the acronym exactly instead of by prefix")
	sp2.set_defaults(func=cmd_meta)

	sp3 = sub.add_parser("qc", help="Depth outlier masking + missingness filtering with plots")
	sp3.add_argument("--vcf", required=True, help="Input VCF or VCF.GZ file")
	sp3.add_argument("--out", required=True, help="Output directory for tables and plots")
	sp3.add_argument("--max-site", type=int, default=None, help="Limit number of variant sites parsed (debug)")
	sp3.add_argument("--config", default=None, help="JSON file with QC thresholds (flags below override it)")
	sp3.add_argument("--depth-field", default=None, help="FORMAT field used as depth (default DP)")
	sp3.add_argument("--quality-field", default=None, help="FORMAT field used for the quality plot (default GQ)")
	sp3.add_argument("--low-quantile", type=float, default=None, help="Per-sample lower depth quantile (default 0.10)")
	sp3.add_argument("--high-quantile", type=float, default=None, help="Per-sample upper depth quantile (default 0.90)")
	sp3.add_argument("--min-depth", type=float, default=None, help="Hard minimum depth (default 4)")
	sp3.add_argument("--max-sample-missing", type=float, default=None, help="Drop samples with missing fraction >= this (default 0.55)")
	sp3.add_argument("--max-variant-missing", type=float, default=None, help="Drop variants with missing fraction >= this (default 0.20)")
	sp3.add_argument("--depth-breaks", type=float, nargs="+", default=None, help="Labelled y ticks of the depth plots (default 1 10 100 800)")
	sp3.set_defaults(func=cmd_qc)
	return p


def main(argv=None) -> int:
	parser = build_parser()
	args = parser.parse_args(argv)
	if not hasattr(args, "func"):
		parser.print_help()
		return 1
	try:
		return args.func(args)
	except ValueError as e:  # includes ParseError
		log_error(str(e))
		return 1


if __name__ == "__main__":  # pragma: no cover
	sys.exit(main())
