"""Tunable thresholds for the depth QC workflow.

The defaults are the usual starting point for exploratory QC of short-read
genotype calls; none of them is universal, so every value can be overridden
from a JSON file or from the command line.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, asdict
from typing import Any, Dict, Tuple
import json

__all__ = ["QCConfig"]


@dataclass
class QCConfig:
	"""Thresholds used by :func:`vcf_depth_qc.workflow.run_depth_qc`.

	Attributes
	----------
	depth_field, quality_field : str
		FORMAT acronyms used for depth masking and the quality plot.
	low_quantile, high_quantile : float
		Per-sample quantile probabilities bounding acceptable depth.
	min_depth : float
		Hard depth floor applied after the quantile bounds.
	max_sample_missing : float
		Samples with a missing fraction at or above this are dropped.
	max_variant_missing : float
		Variants with a missing fraction at or above this are dropped.
	depth_breaks : tuple of float
		Labelled y-axis ticks for the log-scaled depth violin plot.
	"""

	depth_field: str = "DP"
	quality_field: str = "GQ"
	low_quantile: float = 0.10
	high_quantile: float = 0.90
	min_depth: float = 4
	max_sample_missing: float = 0.55
	max_variant_missing: float = 0.20
	depth_breaks: Tuple[float, ...] = field(default_factory=lambda: (1, 10, 100, 800))

	def validate(self) -> "QCConfig":
		if not 0.0 <= self.low_quantile <= 1.0 or not 0.0 <= self.high_quantile <= 1.0:
			raise ValueError("Quantile probabilities must lie in [0, 1]")
		if self.low_quantile > self.high_quantile:
			raise ValueError(
				f"low_quantile ({self.low_quantile}) must not exceed high_quantile ({self.high_quantile})"
			)
		if self.min_depth < 0:
			raise ValueError("min_depth must be >= 0")
		for name in ("max_sample_missing", "max_variant_missing"):
			value = getattr(self, name)
			if not 0.0 < value <= 1.0:
				raise ValueError(f"{name} must lie in (0, 1], got {value}")
		if not self.depth_field or not self.quality_field:
			raise ValueError("depth_field and quality_field must be non-empty")
		return self

	# -- (de)serialisation ----------------------------------------------------
	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "QCConfig":
		known = {f.name for f in fields(cls)}
		unknown = sorted(set(data) - known)
		if unknown:
			raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
		values = dict(data)
		if "depth_breaks" in values and values["depth_breaks"] is not None:
			values["depth_breaks"] = tuple(values["depth_breaks"])
		return cls(**values).validate()

	@classmethod
	def from_json(cls, path: str) -> "QCConfig":
		with open(path, "rt") as fh:
			data = json.load(fh)
		if not isinstance(data, dict):
			raise ValueError(f"Config file {path} must contain a JSON object")
		return cls.from_dict(data)

	def to_dict(self) -> Dict[str, Any]:
		out = asdict(self)
		out["depth_breaks"] = list(self.depth_breaks)
		return out

	def updated(self, **overrides: Any) -> "QCConfig":
		"""Return a copy with non-None ``overrides`` applied (CLI flags)."""
		data = self.to_dict()
		data.update({k: v for k, v in overrides.items() if v is not None})
		return QCConfig.from_dict(data)
