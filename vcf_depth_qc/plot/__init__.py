"""High-level plotting API for the vcf_depth_qc package.

	base         – shared style / save / log-axis helpers
	sample_plots – per-sample distributions (violins) and missingness bars

Import convenience: ``from vcf_depth_qc.plot import plot_depth_violin``.
"""

from .sample_plots import *  # noqa: F401,F403
from .sample_plots import __all__  # noqa: F401
