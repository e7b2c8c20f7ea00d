"""I/O subpackage.

Exposes the in-memory VCF loader and the meta header lookup.
"""

from .vcf_reader import VariantSet, VariantSummary, SimpleVCFReader, read_vcf, count_data_rows  # noqa: F401
from .meta import MetaEntry, parse_meta_line, query_meta  # noqa: F401

__all__ = [
	"VariantSet",
	"VariantSummary",
	"SimpleVCFReader",
	"read_vcf",
	"count_data_rows",
	"MetaEntry",
	"parse_meta_line",
	"query_meta",
]
