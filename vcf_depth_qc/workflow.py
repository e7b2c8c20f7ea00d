"""The depth QC workflow as one call.

Stages, each taking a VariantSet snapshot and returning a new one:

1. mask per-sample depth outliers and clear those genotype cells
2. drop samples with too much missing depth
3. re-extract depth and drop variants with too much missing depth
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from .config import QCConfig
from .io.vcf_reader import VariantSet, VariantSummary
from .metrics.extract import extract_gt
from .metrics.genotype_metrics import filter_depth_outliers
from .metrics.sample_metrics import filter_samples_by_missingness, sample_missingness
from .metrics.site_metrics import filter_variants_by_missingness
from .utils import log_info

__all__ = ["QCResult", "run_depth_qc"]


@dataclass
class QCResult:
	"""Outcome of :func:`run_depth_qc`."""

	variants: VariantSet
	depth: pd.DataFrame
	sample_missing: pd.Series
	removed_samples: List[str]
	removed_variants: int
	before: VariantSummary
	after: VariantSummary
	config: QCConfig = field(default_factory=QCConfig)

	def report(self) -> str:
		lines = [
			"Depth QC report",
			f"   Samples: {self.before.n_samples:,} -> {self.after.n_samples:,}"
			f" (removed {len(self.removed_samples):,})",
			f"   Variants: {self.before.n_variants:,} -> {self.after.n_variants:,}"
			f" (removed {self.removed_variants:,})",
			f"   Missing genotype cells: {100 * self.before.missing_fraction:.1f}%"
			f" -> {100 * self.after.missing_fraction:.1f}%",
		]
		if self.removed_samples:
			lines.append(f"   Removed samples: {', '.join(self.removed_samples)}")
		return "\n".join(lines)


def run_depth_qc(vs: VariantSet, config: Optional[QCConfig] = None, verbose: bool = True) -> QCResult:
	"""Run outlier masking, sample filtering and variant filtering in order."""
	cfg = (config or QCConfig()).validate()
	before = vs.summarize()
	if verbose:
		log_info(f"Depth QC on {before.n_variants:,} variants x {before.n_samples:,} samples")

	masked = filter_depth_outliers(
		vs,
		element=cfg.depth_field,
		low=cfg.low_quantile,
		high=cfg.high_quantile,
		min_depth=cfg.min_depth,
		verbose=verbose,
	)
	depth = extract_gt(masked, element=cfg.depth_field, as_numeric=True)
	sample_missing = sample_missingness(depth)
	by_sample = filter_samples_by_missingness(masked, depth, cfg.max_sample_missing, verbose=verbose)
	kept = set(by_sample.samples)
	removed_samples = [s for s in masked.samples if s not in kept]

	# sample removal changes each variant's missing fraction
	depth = extract_gt(by_sample, element=cfg.depth_field, as_numeric=True)
	final = filter_variants_by_missingness(by_sample, depth, cfg.max_variant_missing, verbose=verbose)
	depth = extract_gt(final, element=cfg.depth_field, as_numeric=True)

	after = final.summarize()
	result = QCResult(
		variants=final,
		depth=depth,
		sample_missing=sample_missing,
		removed_samples=removed_samples,
		removed_variants=by_sample.n_variants - final.n_variants,
		before=before,
		after=after,
		config=cfg,
	)
	if verbose:
		print(result.report())
	return result
