"""Meta header parsing and lookup.

Meta lines define the acronyms used in the INFO and FORMAT columns, e.g.::

	##FORMAT=<ID=DP,Number=1,Type=Integer,Description="Read depth">

The same acronym may be defined under several keys (DP usually appears in
both INFO and FORMAT), so a lookup can return more than one definition.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional

import pandas as pd

if TYPE_CHECKING:  # pragma: no cover
	from .vcf_reader import VariantSet

__all__ = ["MetaEntry", "parse_meta_line", "query_meta"]

QUERY_COLUMNS = ["Key", "ID", "Number", "Type", "Description"]


@dataclass
class MetaEntry:
	"""One parsed meta line.

	``id`` is None for unstructured lines such as ``fileformat=VCFv4.2``; their
	value is kept in ``description``.
	"""

	key: str
	id: Optional[str]
	number: Optional[str]
	type: Optional[str]
	description: Optional[str]
	raw: str


def _split_structured(body: str) -> Dict[str, str]:
	"""Split ``ID=DP,Number=1,Description="a, b"`` honouring double quotes."""
	out: Dict[str, str] = {}
	token = []
	in_quotes = False
	pieces = []
	for ch in body:
		if ch == '"':
			in_quotes = not in_quotes
			token.append(ch)
		elif ch == "," and not in_quotes:
			pieces.append("".join(token))
			token = []
		else:
			token.append(ch)
	if token:
		pieces.append("".join(token))
	for piece in pieces:
		if "=" in piece:
			k, v = piece.split("=", 1)
			v = v.strip()
			if len(v) >= 2 and v[0] == '"' and v[-1] == '"':
				v = v[1:-1]
			out[k.strip()] = v
		elif piece.strip():
			out[piece.strip()] = ""
	return out


def parse_meta_line(line: str) -> MetaEntry:
	"""Parse one meta line (with or without the leading ``##``)."""
	raw = line[2:] if line.startswith("##") else line
	if "=" not in raw:
		return MetaEntry(key=raw, id=None, number=None, type=None, description=None, raw=raw)
	key, value = raw.split("=", 1)
	if value.startswith("<") and value.endswith(">"):
		fields = _split_structured(value[1:-1])
		return MetaEntry(
			key=key,
			id=fields.get("ID"),
			number=fields.get("Number"),
			type=fields.get("Type"),
			description=fields.get("Description"),
			raw=raw,
		)
	return MetaEntry(key=key, id=None, number=None, type=None, description=value, raw=raw)


def query_meta(vs: "VariantSet", element: Optional[str] = None, exact: bool = False) -> pd.DataFrame:
	"""Look up acronym definitions in the meta header.

	Without ``element`` returns one row per distinct acronym (columns Acronym,
	Columns) where Columns lists the meta keys defining it, e.g. ``FORMAT,INFO``.
	With ``element`` returns the definitions whose ID equals it (``exact``) or
	starts with it; no match gives an empty table.
	"""
	entries = [e for e in vs.meta_entries() if e.id is not None]
	if element is None:
		keys_by_id: Dict[str, List[str]] = {}
		for e in entries:
			keys = keys_by_id.setdefault(e.id, [])
			if e.key not in keys:
				keys.append(e.key)
		return pd.DataFrame(
			{"Acronym": list(keys_by_id), "Columns": [",".join(v) for v in keys_by_id.values()]},
			columns=["Acronym", "Columns"],
		)
	if exact:
		hits = [e for e in entries if e.id == element]
	else:
		hits = [e for e in entries if e.id.startswith(element)]
	return pd.DataFrame(
		[[e.key, e.id, e.number, e.type, e.description] for e in hits],
		columns=QUERY_COLUMNS,
	)
