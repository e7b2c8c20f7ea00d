"""Sample-level QC plotting functions.

Contains implementations for:
 - per-sample violin plots of a variant x sample matrix (depth, GQ, ...)
 - missing rate per sample (multi-panel bar)

All functions follow the convention of returning a ``matplotlib.figure.Figure``
when ``output_path`` is not provided; otherwise they save and return ``None``.
"""

from __future__ import annotations

from math import ceil
from typing import Dict, Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from ..metrics.extract import matrix_long_table
from .base import apply_log_axis, save_figure, set_plot_style

__all__ = [
	"plot_sample_violin",
	"plot_depth_violin",
	"plot_gq_violin",
	"plot_missing_rate_per_sample",
]

DEFAULT_DEPTH_BREAKS = (1, 10, 100, 800)


def plot_sample_violin(
	matrix: pd.DataFrame,
	*,
	log_scale: bool = False,
	breaks: Optional[Sequence[float]] = None,
	output_path: Optional[str] = None,
	title: str = "",
	ylabel: str = "Value",
	color: str = "#8888CC",
	figsize: Optional[Tuple[float, float]] = None,
	rotation: int = 45,
) -> Optional[plt.Figure]:
	"""One violin per sample along a categorical x axis.

	The matrix is reshaped with :func:`matrix_long_table`. With ``log_scale``
	non-positive values are dropped first (log of them is undefined) and the
	y axis is log2 with labelled ``breaks``. Samples without any value keep
	their slot on the axis and are simply left empty.
	"""
	long = matrix_long_table(matrix, drop_nonpositive=log_scale)
	order = [str(c) for c in matrix.columns]
	long["Sample"] = long["Sample"].astype(str)
	long["Value"] = long["Value"].astype(float)
	set_plot_style()
	if figsize is None:
		figsize = (max(8.0, min(24.0, 0.6 * len(order) + 2)), 5.0)
	fig, ax = plt.subplots(figsize=figsize)
	if log_scale:
		# scale first so densities are estimated in log space
		apply_log_axis(ax, breaks)
	if long.empty:
		ax.text(0.5, 0.5, "No values to plot", ha="center", va="center", transform=ax.transAxes)
	else:
		sns.violinplot(
			data=long,
			x="Sample",
			y="Value",
			order=order,
			ax=ax,
			inner="box",
			cut=0,
			color=color,
		)
		if log_scale:
			apply_log_axis(ax, breaks)
	ax.set_title(title)
	ax.set_xlabel("Sample")
	ax.set_ylabel(ylabel)
	for label in ax.get_xticklabels():
		label.set_rotation(rotation)
		label.set_ha("right")
	sns.despine(ax=ax)
	fig.tight_layout()
	return save_figure(fig, output_path)


def plot_depth_violin(
	depth: pd.DataFrame,
	*,
	output_path: Optional[str] = None,
	title: str = "Read depth (DP) per sample",
	breaks: Sequence[float] = DEFAULT_DEPTH_BREAKS,
) -> Optional[plt.Figure]:
	"""Depth violins on a log2 axis; zero depths are not drawn."""
	return plot_sample_violin(
		depth,
		log_scale=True,
		breaks=breaks,
		output_path=output_path,
		title=title,
		ylabel="Depth (DP)",
		color="#2E7D32",
	)


def plot_gq_violin(
	gq: pd.DataFrame,
	*,
	output_path: Optional[str] = None,
	title: str = "Genotype quality (GQ) per sample",
) -> Optional[plt.Figure]:
	"""GQ violins on a linear axis; GQ of zero is a valid value and is kept."""
	return plot_sample_violin(
		gq,
		log_scale=False,
		output_path=output_path,
		title=title,
		ylabel="GQ",
		color="#1565C0",
	)


def _dict_series_frame_to_df(
	data: Union[Dict[str, float], pd.Series, pd.DataFrame],
	value_col: str,
	sample_col: str = "Sample",
) -> pd.DataFrame:
	"""Normalise dict / Series / DataFrame input into a two-column DataFrame."""
	if isinstance(data, dict):
		return pd.DataFrame({sample_col: list(data.keys()), value_col: list(data.values())})
	if isinstance(data, pd.Series):
		return pd.DataFrame({sample_col: [str(s) for s in data.index], value_col: data.to_numpy()})
	if isinstance(data, pd.DataFrame):
		if {sample_col, value_col}.issubset(data.columns):
			return data[[sample_col, value_col]].copy()
		raise ValueError(f"DataFrame must contain columns: {sample_col}, {value_col}")
	raise TypeError("Input must be dict | Series | DataFrame")


def plot_missing_rate_per_sample(
	missing_rates: Union[Dict[str, float], pd.Series, pd.DataFrame],
	*,
	output_path: Optional[str] = None,
	title: str = "Missing rate per sample",
	threshold: Optional[float] = None,
	base_color: str = "#4477AA",
	samples_per_panel: int = 100,
	rotation: int = 45,
) -> Optional[plt.Figure]:
	"""Multi-panel bar chart of per-sample missing rate (fixed y 0..1).

	Samples are sorted by missing rate, highest first. ``threshold`` draws a
	dashed line at the sample-removal cutoff. The last panel is padded with
	blank slots so all panels share the same bar width.
	"""
	df = _dict_series_frame_to_df(missing_rates, "MissingRate")
	df = df.sort_values("MissingRate", ascending=False).reset_index(drop=True)
	set_plot_style()
	n = len(df)
	panels = ceil(n / samples_per_panel) if n else 1
	fig_width = max(10, min(18, samples_per_panel * 0.18))
	fig, axes = plt.subplots(panels, 1, figsize=(fig_width, panels * 5), squeeze=False)
	for pi in range(panels):
		sub = df.iloc[pi * samples_per_panel:(pi + 1) * samples_per_panel].copy()
		pad_needed = samples_per_panel - len(sub) if panels > 1 else 0
		if pad_needed > 0:
			sub = pd.concat([
				sub,
				pd.DataFrame({
					"Sample": [" " * (i + 1) for i in range(pad_needed)],
					"MissingRate": [0.0] * pad_needed,
				}),
			], ignore_index=True)
		ax = axes[pi, 0]
		if not sub.empty:
			sns.barplot(data=sub, x="Sample", y="MissingRate", ax=ax, color=base_color)
		if threshold is not None:
			ax.axhline(y=threshold, color="red", linestyle="--", linewidth=1.5, label=f"Threshold {threshold:g}")
			if pi == 0:
				ax.legend(loc="upper right")
		ax.set_ylim(0, 1)
		ax.set_yticks([0.0, 0.25, 0.5, 0.75, 1.0])
		ax.set_xlabel("Sample")
		ax.set_ylabel("Missing rate" if pi == 0 else "")
		if pi == 0:
			ax.set_title(title)
		for label in ax.get_xticklabels():
			label.set_rotation(rotation)
			label.set_ha("right")
		sns.despine(ax=ax)
	fig.tight_layout(h_pad=0.5)
	return save_figure(fig, output_path)
