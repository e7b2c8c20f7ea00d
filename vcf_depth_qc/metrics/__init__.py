"""Metric computation subpackage."""

from .extract import extract_gt, extract_info, matrix_long_table  # noqa: F401
from .genotype_metrics import (  # noqa: F401
    quantile_bounds,
    mask_depth_outliers,
    propagate_missing,
    filter_depth_outliers,
)
from .sample_metrics import sample_missingness, compute_sample_metrics, filter_samples_by_missingness  # noqa: F401
from .site_metrics import variant_missingness, filter_variants_by_missingness  # noqa: F401

__all__ = [
    "extract_gt",
    "extract_info",
    "matrix_long_table",
    "quantile_bounds",
    "mask_depth_outliers",
    "propagate_missing",
    "filter_depth_outliers",
    "sample_missingness",
    "compute_sample_metrics",
    "filter_samples_by_missingness",
    "variant_missingness",
    "filter_variants_by_missingness",
]
