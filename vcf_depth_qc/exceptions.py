"""Exceptions raised by vcf_depth_qc."""

from __future__ import annotations

from typing import Optional


class ParseError(ValueError):
	"""A VCF file could not be read or does not follow the format.

	Carries the offending ``path`` and, where known, the 1-based ``line_no``.
	"""

	def __init__(self, path: Optional[str], message: str, line_no: Optional[int] = None):
		self.path = path
		self.line_no = line_no
		self.message = message
		where = str(path) if path is not None else "<unknown>"
		if line_no is not None:
			where = f"{where}:{line_no}"
		super().__init__(f"{where}: {message}")


__all__ = ["ParseError"]
