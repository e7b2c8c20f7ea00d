"""Field extraction from the genotype block.

Turns the raw colon-delimited sample strings of a :class:`VariantSet` into a
variant x sample matrix for one FORMAT acronym (DP, GQ, GT, ...), and reshapes
matrices into the long form used for plotting.
"""
from __future__ import annotations

from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from ..io.vcf_reader import VariantSet
from ..utils import gt_to_alleles, is_missing_token, parse_info_field

__all__ = ["format_position", "extract_gt", "extract_info", "matrix_long_table"]


def format_position(fmt: Optional[str], element: str) -> Optional[int]:
    """Zero-based position of ``element`` in a FORMAT string, or None."""
    if is_missing_token(fmt):
        return None
    keys = str(fmt).split(":")
    return keys.index(element) if element in keys else None


def _row_alleles(vs: VariantSet) -> List[List[str]]:
    out = []
    for ref, alt in zip(vs.fix["REF"], vs.fix["ALT"]):
        alts = [] if is_missing_token(alt) else str(alt).split(",")
        out.append([str(ref)] + alts)
    return out


def extract_gt(
    vs: VariantSet,
    element: str = "GT",
    as_numeric: bool = False,
    return_alleles: bool = False,
) -> pd.DataFrame:
    """Extract one FORMAT field into a variant x sample matrix.

    Each row's own FORMAT string decides where ``element`` sits; rows whose
    FORMAT lacks it are entirely missing. Missing cells, '.' values and
    positions past the end of a cell are None (NaN when ``as_numeric``).

    Parameters
    ----------
    vs : VariantSet
        Source snapshot; not modified.
    element : str
        FORMAT acronym to extract (e.g. 'DP', 'GQ', 'GT').
    as_numeric : bool
        Convert to float. Tokens that do not parse become NaN.
    return_alleles : bool
        For ``element='GT'`` only: render genotypes as bases ('A/T').

    Returns
    -------
    pd.DataFrame
        Indexed by :meth:`VariantSet.variant_ids`, one column per sample.
    """
    if return_alleles and (element != "GT" or as_numeric):
        raise ValueError("return_alleles is only valid for element='GT' without as_numeric")
    n, samples = vs.n_variants, vs.samples
    values = np.full((n, len(samples)), None, dtype=object)
    cells = vs.gt.iloc[:, 1:].to_numpy(dtype=object)
    alleles = _row_alleles(vs) if return_alleles else None
    # FORMAT strings repeat heavily; resolve each distinct one once per call
    positions: Dict[Optional[str], Optional[int]] = {}
    for i, fmt in enumerate(vs.gt["FORMAT"]):
        if fmt not in positions:
            positions[fmt] = format_position(fmt, element)
        pos = positions[fmt]
        if pos is None:
            continue
        for j, cell in enumerate(cells[i]):
            if is_missing_token(cell):
                continue
            parts = str(cell).split(":")
            if pos >= len(parts) or parts[pos] in ("", "."):
                continue
            val = parts[pos]
            if alleles is not None:
                val = gt_to_alleles(val, alleles[i])
            values[i, j] = val
    matrix = pd.DataFrame(values, index=vs.variant_ids(), columns=pd.Index(samples, name="Sample"), dtype=object)
    if as_numeric:
        matrix = matrix.apply(lambda col: pd.to_numeric(col, errors="coerce")).astype(float)
    return matrix


def extract_info(vs: VariantSet, element: str, as_numeric: bool = False) -> pd.Series:
    """Extract one INFO key per variant.

    Flags present without a value give an empty string; absent keys are None
    (NaN when ``as_numeric``).
    """
    values = [parse_info_field(info).get(element) for info in vs.fix["INFO"]]
    out = pd.Series(values, index=vs.variant_ids(), name=element, dtype=object)
    if as_numeric:
        out = pd.to_numeric(out, errors="coerce").astype(float)
    return out


def matrix_long_table(matrix: pd.DataFrame, drop_nonpositive: bool = False) -> pd.DataFrame:
    """Reshape a variant x sample matrix into (Variant, Sample, Value) rows.

    Missing cells are dropped. With ``drop_nonpositive`` values <= 0 are
    dropped as well, which a log-scaled axis requires; the matrix must then
    be numeric.
    """
    wide = matrix.copy()
    wide.index = pd.Index(wide.index, name="Variant")
    wide.columns = pd.Index(wide.columns, name="Sample")
    long = wide.reset_index().melt(id_vars="Variant", var_name="Sample", value_name="Value")
    long = long.dropna(subset=["Value"])
    if drop_nonpositive:
        if not all(pd.api.types.is_numeric_dtype(t) for t in matrix.dtypes):
            raise ValueError("drop_nonpositive requires a numeric matrix")
        long = long[long["Value"] > 0]
    return long.reset_index(drop=True)
