"""Genotype-level depth filtering.

Masks depth outliers per sample and carries that mask back into the genotype
block of a :class:`VariantSet`. An outlier depth invalidates the whole
genotype record for that sample at that variant, so every sub-field of the
cell is cleared, not only DP.
"""
from __future__ import annotations

import pandas as pd

from ..io.vcf_reader import VariantSet
from ..utils import log_info
from .extract import extract_gt

__all__ = [
    "quantile_bounds",
    "mask_depth_outliers",
    "propagate_missing",
    "filter_depth_outliers",
]


def quantile_bounds(matrix: pd.DataFrame, low: float = 0.10, high: float = 0.90) -> pd.DataFrame:
    """Per-sample quantile bounds ignoring missing values.

    Returns a DataFrame with rows ``low`` and ``high`` and one column per
    sample. Samples without any value get NaN bounds.
    """
    if not 0.0 <= low <= high <= 1.0:
        raise ValueError(f"Expected 0 <= low <= high <= 1, got low={low}, high={high}")
    bounds = matrix.astype(float).quantile([low, high], axis=0, numeric_only=False)
    bounds.index = pd.Index(["low", "high"])
    return bounds.reindex(columns=matrix.columns)


def mask_depth_outliers(
    matrix: pd.DataFrame,
    low: float = 0.10,
    high: float = 0.90,
    min_depth: float = 4,
) -> pd.DataFrame:
    """Set depth outliers to NaN.

    A cell is masked when it lies below its sample's ``low`` quantile, above
    its ``high`` quantile, or below ``min_depth``. A sample whose values are
    all missing has NaN bounds and is left untouched by the quantile rule.

    Returns a new matrix; the input is not modified.
    """
    depth = matrix.astype(float)
    bounds = quantile_bounds(depth, low, high)
    below = depth.lt(bounds.loc["low"], axis=1)
    above = depth.gt(bounds.loc["high"], axis=1)
    shallow = depth < min_depth
    return depth.mask(below | above | shallow)


def propagate_missing(vs: VariantSet, matrix: pd.DataFrame) -> VariantSet:
    """Clear every genotype cell whose matrix value is missing.

    The matrix must come from ``vs`` (same shape and sample order). The whole
    cell is cleared, all sub-fields included. Returns a new VariantSet.
    """
    if matrix.shape != (vs.n_variants, vs.n_samples):
        raise ValueError(
            f"Matrix shape {matrix.shape} does not match {vs.n_variants} variants x {vs.n_samples} samples"
        )
    if [str(c) for c in matrix.columns] != vs.samples:
        raise ValueError("Matrix columns must match the VariantSet samples in order")
    cells = vs.gt.iloc[:, 1:].to_numpy(dtype=object).copy()
    cells[matrix.isna().to_numpy(dtype=bool)] = None
    gt = pd.concat(
        [vs.gt[["FORMAT"]], pd.DataFrame(cells, index=vs.gt.index, columns=vs.gt.columns[1:], dtype=object)],
        axis=1,
    )
    return vs.with_genotypes(gt)


def filter_depth_outliers(
    vs: VariantSet,
    element: str = "DP",
    low: float = 0.10,
    high: float = 0.90,
    min_depth: float = 4,
    verbose: bool = False,
) -> VariantSet:
    """Extract ``element``, mask depth outliers and clear the masked cells."""
    depth = extract_gt(vs, element=element, as_numeric=True)
    masked = mask_depth_outliers(depth, low=low, high=high, min_depth=min_depth)
    if verbose:
        newly = int((masked.isna() & depth.notna()).to_numpy().sum())
        present = int(depth.notna().to_numpy().sum())
        log_info(
            f"{element} outlier mask (q{low:g}-q{high:g}, floor {min_depth:g}): "
            f"masked {newly:,} of {present:,} observed genotypes"
        )
        undefined = [s for s in depth.columns if depth[s].isna().all()]
        if undefined:
            log_info(f"{len(undefined):,} samples have no {element} values; bounds undefined, left unmasked")
    return propagate_missing(vs, masked)
