"""Variant-level missingness filtering.

Always compute variant missingness on a matrix re-extracted *after* any
sample removal: dropping whole samples changes each variant's fraction.
"""
from __future__ import annotations

import pandas as pd

from ..io.vcf_reader import VariantSet
from ..utils import log_info

__all__ = ["variant_missingness", "filter_variants_by_missingness"]


def variant_missingness(matrix: pd.DataFrame) -> pd.Series:
    """Fraction of missing cells per variant (row); 0 when there are no samples."""
    n_cols = matrix.shape[1]
    if n_cols == 0:
        return pd.Series(0.0, index=matrix.index, name="MissingRate")
    return (matrix.isna().sum(axis=1) / n_cols).rename("MissingRate")


def filter_variants_by_missingness(
    vs: VariantSet,
    matrix: pd.DataFrame,
    threshold: float = 0.20,
    verbose: bool = False,
) -> VariantSet:
    """Drop variants whose missing fraction in ``matrix`` is >= ``threshold``.

    The matrix must have been extracted from ``vs`` (rows in the same order).
    Returns a new VariantSet.
    """
    if len(matrix) != vs.n_variants:
        raise ValueError(f"Matrix has {len(matrix)} rows but the VariantSet has {vs.n_variants} variants")
    keep = (variant_missingness(matrix) < threshold).to_numpy()
    if verbose:
        after = int(keep.sum())
        removed = vs.n_variants - after
        retention_rate = (after / vs.n_variants) * 100 if vs.n_variants > 0 else 0
        log_info(
            f"Variant missingness < {threshold:g}: removed {removed:,} variants, "
            f"{after:,} remaining ({retention_rate:.1f}% retained)"
        )
    return vs.subset(rows=keep)
