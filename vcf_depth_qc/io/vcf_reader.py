"""In-memory VCF reader for exploratory genotype QC.

The whole file is loaded into a :class:`VariantSet`: meta lines, a table of
the fixed per-variant columns and a genotype block holding the raw
colon-delimited sample strings. This avoids external dependencies (pysam /
cyvcf2) and is sufficient for files that fit in memory; region queries and
indexing are out of scope.

A VariantSet is never modified in place. Every operation that changes it
(subsetting, masking genotype cells) returns a new snapshot so that a matrix
extracted from an earlier snapshot can never silently alias a later one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple, Union
import gzip
import zlib

import numpy as np
import pandas as pd

from ..exceptions import ParseError
from ..utils import cell_is_missing, is_missing_token, log_info
from .meta import MetaEntry, parse_meta_line

__all__ = [
	"FIX_COLUMNS",
	"VariantSet",
	"VariantSummary",
	"SimpleVCFReader",
	"read_vcf",
	"count_data_rows",
]

FIX_COLUMNS = ["CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO"]
FORMAT_COLUMN = "FORMAT"


GZIP_MAGIC = b"\x1f\x8b"


def _open_text(path: str):  # type: ignore[return-type]
	# gzip and bgzip share the magic bytes; the file name is not trusted
	with open(path, "rb") as fh:
		magic = fh.read(2)
	if magic == GZIP_MAGIC:
		return gzip.open(path, "rt")
	return open(path, "rt")


@dataclass
class VariantSummary:
	"""Counts reported by :meth:`VariantSet.summarize`.

	Attributes
	----------
	n_samples, n_variants : int
		Shape of the genotype block (samples exclude the FORMAT column).
	chromosomes : list of str
		Chromosomes in order of first appearance.
	regions : pandas.DataFrame
		Columns CHROM, Start, End, Variants: the span covered per chromosome.
	n_missing, n_cells : int
		Missing genotype cells and the total number of genotype cells.
	"""

	n_samples: int
	n_variants: int
	chromosomes: List[str]
	regions: pd.DataFrame
	n_missing: int
	n_cells: int

	@property
	def missing_fraction(self) -> float:
		return self.n_missing / self.n_cells if self.n_cells else 0.0

	def __str__(self) -> str:
		lines = [
			"***** VariantSet summary *****",
			f"{self.n_samples:,} samples",
			f"{len(self.chromosomes):,} CHROMs",
			f"{self.n_variants:,} variants",
		]
		for rec in self.regions.itertuples(index=False):
			lines.append(f"   {rec.CHROM}:{rec.Start:,}-{rec.End:,} ({rec.Variants:,} variants)")
		lines.append(
			f"{self.n_missing:,} of {self.n_cells:,} genotype cells missing "
			f"({100 * self.missing_fraction:.1f} percent)"
		)
		lines.append("*****        *****        *****")
		return "\n".join(lines)


@dataclass(frozen=True, eq=False)
class VariantSet:
	"""Immutable snapshot of a loaded VCF.

	Attributes
	----------
	meta : list of str
		Meta lines without the leading ``##``, in file order.
	fix : pandas.DataFrame
		Fixed fields, one row per variant (columns ``FIX_COLUMNS``).
	gt : pandas.DataFrame
		Genotype block: a FORMAT column followed by one column per sample.
		Cells hold raw colon-delimited strings, or None when missing.
	path : str | None
		Source file, used in messages only.
	"""

	meta: List[str]
	fix: pd.DataFrame
	gt: pd.DataFrame
	path: Optional[str] = field(default=None)

	def __post_init__(self) -> None:
		if len(self.gt.columns) == 0 or self.gt.columns[0] != FORMAT_COLUMN:
			raise ValueError("Genotype block must start with a FORMAT column")
		if len(self.fix) != len(self.gt):
			raise ValueError(
				f"Fixed fields ({len(self.fix)} rows) and genotype block ({len(self.gt)} rows) disagree"
			)

	def __repr__(self) -> str:
		return f"VariantSet(path={self.path!r}, variants={self.n_variants}, samples={self.n_samples})"

	# -- shape ------------------------------------------------------------
	@property
	def samples(self) -> List[str]:
		return [str(c) for c in self.gt.columns[1:]]

	@property
	def n_samples(self) -> int:
		return len(self.gt.columns) - 1

	@property
	def n_variants(self) -> int:
		return len(self.fix)

	def variant_ids(self) -> pd.Index:
		"""Row labels: the ID column, or CHROM_POS where ID is '.'."""
		fallback = self.fix["CHROM"].astype(str) + "_" + self.fix["POS"].astype(str)
		ids = self.fix["ID"].where(~self.fix["ID"].isin([".", ""]) & self.fix["ID"].notna(), fallback)
		return pd.Index(ids.astype(str), name="Variant")

	def meta_entries(self) -> List[MetaEntry]:
		return [parse_meta_line(line) for line in self.meta]

	# -- derived snapshots -------------------------------------------------
	def subset(
		self,
		rows: Optional[Union[Sequence[bool], np.ndarray, pd.Series]] = None,
		samples: Optional[Sequence[str]] = None,
	) -> "VariantSet":
		"""Return a new VariantSet restricted to a row mask and/or samples."""
		fix = self.fix
		gt = self.gt
		if samples is not None:
			unknown = [s for s in samples if s not in gt.columns[1:]]
			if unknown:
				raise ValueError(f"Unknown samples: {', '.join(map(str, unknown))}")
			gt = gt[[FORMAT_COLUMN] + list(samples)]
		if rows is not None:
			mask = np.asarray(rows, dtype=bool)
			if mask.shape != (len(fix),):
				raise ValueError(f"Row mask length {mask.shape} does not match {len(fix)} variants")
			fix = fix.loc[mask]
			gt = gt.loc[mask]
		return VariantSet(
			meta=list(self.meta),
			fix=fix.reset_index(drop=True),
			gt=gt.reset_index(drop=True),
			path=self.path,
		)

	def with_genotypes(self, gt: pd.DataFrame) -> "VariantSet":
		"""Return a copy carrying a replacement genotype block."""
		if list(gt.columns) != list(self.gt.columns):
			raise ValueError("Replacement genotype block must keep the FORMAT and sample columns")
		return VariantSet(meta=list(self.meta), fix=self.fix.copy(), gt=gt.reset_index(drop=True), path=self.path)

	# -- reporting ----------------------------------------------------------
	def summarize(self) -> VariantSummary:
		"""Count samples, variants, covered regions and missing genotype cells."""
		if self.n_variants:
			grouped = self.fix.groupby("CHROM", sort=False)["POS"]
			regions = pd.DataFrame({
				"Start": grouped.min(),
				"End": grouped.max(),
				"Variants": grouped.size(),
			}).reset_index()
		else:
			regions = pd.DataFrame(columns=["CHROM", "Start", "End", "Variants"])
		n_missing = 0
		for fmt, cells in zip(self.gt[FORMAT_COLUMN], self.gt.iloc[:, 1:].itertuples(index=False, name=None)):
			keys = [] if is_missing_token(fmt) else str(fmt).split(":")
			gt_index = keys.index("GT") if "GT" in keys else None
			n_missing += sum(cell_is_missing(cell, gt_index) for cell in cells)
		return VariantSummary(
			n_samples=self.n_samples,
			n_variants=self.n_variants,
			chromosomes=[str(c) for c in regions["CHROM"]],
			regions=regions,
			n_missing=int(n_missing),
			n_cells=self.n_samples * self.n_variants,
		)


class SimpleVCFReader:
	"""Minimal streaming VCF reader with strict column checks.

	Parameters
	----------
	path : str
		Path to (optionally gzip / bgzip compressed) VCF file.
	max_records : int | None
		Optional limit for testing / faster prototyping.
	"""

	def __init__(self, path: str, max_records: Optional[int] = None):
		self.path = str(path)
		self.max_records = max_records
		self.meta: List[str] = []
		self.header: List[str] = []
		self.samples: List[str] = []

	def _check_header(self, cols: List[str], line_no: int) -> None:
		fixed = [cols[0].lstrip("#")] + cols[1:len(FIX_COLUMNS)]
		if fixed != FIX_COLUMNS:
			raise ParseError(
				self.path,
				f"unexpected fixed columns {fixed}, expected {FIX_COLUMNS}",
				line_no,
			)
		if len(cols) > len(FIX_COLUMNS) and cols[len(FIX_COLUMNS)] != FORMAT_COLUMN:
			raise ParseError(self.path, f"column 9 must be FORMAT, found {cols[len(FIX_COLUMNS)]!r}", line_no)
		samples = cols[len(FIX_COLUMNS) + 1:]
		seen = set()
		for s in samples:
			if s in seen:
				raise ParseError(self.path, f"duplicated sample name {s!r}", line_no)
			seen.add(s)

	def parse(self) -> Iterator[Tuple[int, List[str]]]:
		"""Yield ``(line_no, fields)`` for every data row.

		Raises ParseError on a missing / malformed header, rows whose field
		count disagrees with the header, or an unreadable file.
		"""
		self.meta = []
		self.header = []
		self.samples = []
		count = 0
		try:
			with _open_text(self.path) as fh:
				for line_no, line in enumerate(fh, start=1):
					line = line.rstrip("\r\n")
					if not line.strip():
						continue
					if line.startswith("##"):
						if self.header:
							raise ParseError(self.path, "meta line after the #CHROM header", line_no)
						self.meta.append(line[2:])
						continue
					if line.startswith("#"):
						if self.header:
							raise ParseError(self.path, "duplicated #CHROM header line", line_no)
						cols = line.split("\t")
						self._check_header(cols, line_no)
						self.header = cols
						self.samples = cols[len(FIX_COLUMNS) + 1:]
						continue
					if not self.header:
						raise ParseError(self.path, "data line before the #CHROM header", line_no)
					parts = line.split("\t")
					if len(parts) != len(self.header):
						raise ParseError(
							self.path,
							f"expected {len(self.header)} tab-separated fields, found {len(parts)}",
							line_no,
						)
					if not parts[1].isdigit():
						raise ParseError(self.path, f"POS must be a positive integer, found {parts[1]!r}", line_no)
					yield line_no, parts
					count += 1
					if self.max_records and count >= self.max_records:
						break
		except (OSError, EOFError, UnicodeDecodeError, zlib.error) as e:
			raise ParseError(self.path, f"cannot read file ({e})") from e
		if not self.header:
			raise ParseError(self.path, "no #CHROM header line found")


def read_vcf(
	path: str,
	max_records: Optional[int] = None,
	samples: Optional[Sequence[str]] = None,
	verbose: bool = False,
) -> VariantSet:
	"""Load a VCF file into a :class:`VariantSet`.

	Parameters
	----------
	path : str
		Plain or gzip / bgzip compressed VCF.
	max_records : int | None
		Stop after this many variants.
	samples : sequence of str | None
		Keep only these sample columns (in the given order).
	verbose : bool
		Log a short progress line when done.
	"""
	reader = SimpleVCFReader(path, max_records=max_records)
	fix_rows: List[List[str]] = []
	gt_rows: List[List[Optional[str]]] = []
	keep: Optional[List[int]] = None
	n_fix = len(FIX_COLUMNS)
	for _line_no, parts in reader.parse():
		if keep is None:
			keep = _sample_indices(reader.samples, samples)
		fix_rows.append(parts[:n_fix])
		fmt = parts[n_fix] if len(parts) > n_fix else None
		cells = parts[n_fix + 1:]
		gt_rows.append([fmt] + [None if cells[i] in (".", "") else cells[i] for i in keep])
	if keep is None:
		keep = _sample_indices(reader.samples, samples)
	sample_names = [reader.samples[i] for i in keep]

	fix = pd.DataFrame(fix_rows, columns=FIX_COLUMNS, dtype=object)
	fix["POS"] = pd.to_numeric(fix["POS"]).astype(np.int64)
	fix["QUAL"] = pd.to_numeric(fix["QUAL"], errors="coerce")
	gt = pd.DataFrame(gt_rows, columns=[FORMAT_COLUMN] + sample_names, dtype=object)
	vs = VariantSet(meta=list(reader.meta), fix=fix, gt=gt, path=str(path))
	if verbose:
		log_info(f"Loaded {vs.n_variants:,} variants x {vs.n_samples:,} samples from {path}")
	return vs


def _sample_indices(available: List[str], wanted: Optional[Sequence[str]]) -> List[int]:
	if wanted is None:
		return list(range(len(available)))
	lookup = {s: i for i, s in enumerate(available)}
	unknown = [s for s in wanted if s not in lookup]
	if unknown:
		raise ValueError(f"Samples not present in VCF: {', '.join(unknown)}")
	return [lookup[s] for s in wanted]


def count_data_rows(path: str) -> int:
	"""Count variant rows by scanning the raw file, without parsing them.

	Every non-empty line that does not start with '#' is one row. Useful to
	cross-check the variant count of :func:`read_vcf`.
	"""
	n = 0
	try:
		with _open_text(path) as fh:
			for line in fh:
				if line.startswith("#") or not line.strip():
					continue
				n += 1
	except (OSError, EOFError, UnicodeDecodeError, zlib.error) as e:
		raise ParseError(str(path), f"cannot read file ({e})") from e
	return n
