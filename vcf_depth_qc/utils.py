"""Small utility helpers used across the vcf_depth_qc package.

This module keeps a tiny surface area of pure-Python helpers that are easy to
unit-test: INFO / genotype token parsing and the console logging helpers.
"""
import re
import sys
from datetime import datetime
from typing import Dict, List, Optional

MISSING_TOKENS = frozenset(["", "."])

_GT_SPLIT = re.compile(r"([/|])")


def log_info(msg: str) -> None:
    """Print info log message."""
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] [INFO] {msg}")


def log_warn(msg: str) -> None:
    """Print warning log message."""
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] [WARN] {msg}")


def log_error(msg: str) -> None:
    """Print error log message to stderr (does not exit)."""
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] [ERROR] {msg}", file=sys.stderr)


def is_missing_token(value: Optional[object]) -> bool:
    """True for None, NaN, '' and '.'."""
    if value is None:
        return True
    if isinstance(value, float):
        return value != value
    return str(value) in MISSING_TOKENS


def parse_info_field(info: Optional[str]) -> Dict[str, str]:
    """Parse a VCF INFO column (key[=value];... ) into a dict.

    Values are returned as strings; keys without value map to empty string.
    An INFO field of '.' returns an empty dict.
    """
    out: Dict[str, str] = {}
    if not info or info == ".":
        return out
    for token in info.split(";"):
        if not token:
            continue
        if "=" in token:
            k, v = token.split("=", 1)
            out[k] = v
        else:
            out[token] = ""
    return out


def gt_is_missing(gt: Optional[str]) -> bool:
    """Check if a genotype is missing or half-missing.

    Treat '.', './.', '.|.', '0/.', './1', '0|.' etc. as missing.
    """
    if is_missing_token(gt):
        return True
    return "." in str(gt)


def cell_is_missing(cell: Optional[object], gt_index: Optional[int]) -> bool:
    """Return True when a raw genotype cell counts as missing data.

    A cell is missing when it is absent altogether, or when the FORMAT of its
    row declares GT (at ``gt_index``) and that genotype is missing.
    """
    if is_missing_token(cell):
        return True
    if gt_index is None:
        return False
    parts = str(cell).split(":")
    if gt_index >= len(parts):
        return True
    return gt_is_missing(parts[gt_index])


def gt_to_alleles(gt: Optional[str], alleles: List[str]) -> Optional[str]:
    """Render a GT string of allele indices as bases, keeping separators.

    Example: gt='0|1', alleles=['A', 'T'] -> 'A|T'. Missing or out-of-range
    allele indices are rendered as '.'. A fully missing GT returns None.
    """
    if is_missing_token(gt):
        return None
    out = []
    for token in _GT_SPLIT.split(str(gt)):
        if token in ("/", "|"):
            out.append(token)
        elif token.isdigit() and int(token) < len(alleles):
            out.append(alleles[int(token)])
        else:
            out.append(".")
    return "".join(out)


__all__ = [
    "MISSING_TOKENS",
    "log_info",
    "log_warn",
    "log_error",
    "is_missing_token",
    "parse_info_field",
    "gt_is_missing",
    "cell_is_missing",
    "gt_to_alleles",
]
