"""Sample-level missingness and depth summaries.

Operates on an extracted variant x sample matrix (see ``extract_gt``).
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from ..io.vcf_reader import VariantSet
from ..utils import log_info

__all__ = [
	"sample_missingness",
	"compute_sample_metrics",
	"filter_samples_by_missingness",
]


def sample_missingness(matrix: pd.DataFrame) -> pd.Series:
	"""Fraction of missing cells per sample (column).

	A matrix without rows gives 0 for every sample.
	"""
	n_rows = len(matrix)
	if n_rows == 0:
		return pd.Series(0.0, index=matrix.columns, name="MissingRate")
	return (matrix.isna().sum(axis=0) / n_rows).rename("MissingRate")


def compute_sample_metrics(matrix: pd.DataFrame) -> pd.DataFrame:
	"""Per-sample summary of a numeric matrix.

	Columns returned:
		Sample, Observed, MissingRate, MeanValue, MedianValue
	"""
	numeric = matrix.astype(float)
	observed = numeric.notna().sum(axis=0)
	with np.errstate(all="ignore"):
		mean = numeric.mean(axis=0)
		median = numeric.median(axis=0)
	return pd.DataFrame({
		"Sample": [str(c) for c in matrix.columns],
		"Observed": observed.to_numpy(dtype=int),
		"MissingRate": sample_missingness(matrix).to_numpy(dtype=float),
		"MeanValue": mean.to_numpy(dtype=float),
		"MedianValue": median.to_numpy(dtype=float),
	})


def filter_samples_by_missingness(
	vs: VariantSet,
	matrix: pd.DataFrame,
	threshold: float = 0.55,
	verbose: bool = False,
) -> VariantSet:
	"""Drop samples whose missing fraction in ``matrix`` is >= ``threshold``.

	Samples strictly below the threshold are kept, in their original order.
	Returns a new VariantSet; the matrix must have been extracted from ``vs``.
	"""
	if [str(c) for c in matrix.columns] != vs.samples:
		raise ValueError("Matrix columns must match the VariantSet samples in order")
	miss = sample_missingness(matrix)
	keep = [str(s) for s, frac in miss.items() if frac < threshold]
	if verbose:
		removed = vs.n_samples - len(keep)
		log_info(
			f"Sample missingness < {threshold:g}: removed {removed:,} samples, {len(keep):,} remaining"
		)
	return vs.subset(samples=keep)
