"""vcf_depth_qc – exploratory depth / missingness QC for VCF genotype calls.

Subpackages:
	io      – load a VCF into an immutable VariantSet, meta header lookup
	metrics – FORMAT field extraction, depth-outlier masking, missingness filters
	plot    – per-sample violin plots and missingness bars

The usual workflow::

	from vcf_depth_qc import read_vcf, run_depth_qc, QCConfig

	vs = read_vcf("calls.vcf.gz")
	print(vs.summarize())
	result = run_depth_qc(vs, QCConfig(max_sample_missing=0.5))
"""

from .config import QCConfig
from .exceptions import ParseError
from .io import VariantSet, read_vcf, count_data_rows, query_meta
from .metrics import extract_gt, matrix_long_table
from .workflow import QCResult, run_depth_qc

__version__ = "0.1.0"
__all__ = [
	"QCConfig",
	"ParseError",
	"VariantSet",
	"read_vcf",
	"count_data_rows",
	"query_meta",
	"extract_gt",
	"matrix_long_table",
	"QCResult",
	"run_depth_qc",
	"__version__",
]
