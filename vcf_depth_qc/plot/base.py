"""Base plotting utilities shared across QC plot modules.

Centralises style configuration and small helper wrappers around
seaborn/matplotlib. Plot functions return a matplotlib Figure when no
``output_path`` is given; otherwise the figure is saved, closed (to avoid
memory accumulation in batch runs) and ``None`` is returned.
"""

from __future__ import annotations

from typing import Optional, Sequence

import matplotlib.pyplot as plt
from matplotlib.ticker import FixedLocator, FuncFormatter, NullFormatter
import seaborn as sns

__all__ = [
	"set_plot_style",
	"save_figure",
	"apply_log_axis",
]


def set_plot_style() -> None:
	"""Apply a unified visual style."""
	sns.set_theme(style="whitegrid")
	plt.rcParams.update({
		"axes.titlesize": 13,
		"axes.labelsize": 11,
		"font.size": 10,
		"figure.dpi": 100,
	})


def save_figure(fig: plt.Figure, output_path: Optional[str]) -> Optional[plt.Figure]:
	"""Save figure if ``output_path`` provided else return it.

	Parameters
	----------
	fig : matplotlib.figure.Figure
		Figure to save or return.
	output_path : str | None
		Path to save. If None the figure is returned and *not* closed.
	"""
	if output_path:
		fig.savefig(output_path, bbox_inches="tight")
		plt.close(fig)
		return None
	return fig


def apply_log_axis(ax: plt.Axes, breaks: Optional[Sequence[float]] = None, base: float = 2) -> None:
	"""Log-scale the y axis with explicit labelled breakpoints.

	Breaks must be positive; minor ticks stay unlabelled.
	"""
	ax.set_yscale("log", base=base)
	if breaks:
		ticks = [float(b) for b in breaks]
		if any(b <= 0 for b in ticks):
			raise ValueError("Log axis breaks must be positive")
		ax.yaxis.set_major_locator(FixedLocator(ticks))
		ax.yaxis.set_major_formatter(FuncFormatter(lambda v, _pos: f"{v:g}"))
		ax.yaxis.set_minor_formatter(NullFormatter())
