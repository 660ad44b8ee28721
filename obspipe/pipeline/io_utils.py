import os
from typing import Iterable, Optional

import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from .categorize import LookupTable
from .config import (
    ALLOWED_CATEGORIES,
    LABEL_COLUMN,
    LOOKUP_CATEGORY_COLUMN,
    LOOKUP_LABEL_COLUMN,
    UNKNOWN_CATEGORY,
    VALUE_COLUMN,
)
from .errors import PipelineIOError, SchemaError

_READ_ERRORS = (OSError, UnicodeDecodeError, pd.errors.EmptyDataError, pd.errors.ParserError)


def _read_csv(path, **kwargs) -> pd.DataFrame:
    try:
        return pd.read_csv(path, **kwargs)
    except _READ_ERRORS as e:
        raise PipelineIOError(path, "read", str(e)) from e


def _strip_columns(df: pd.DataFrame) -> pd.DataFrame:
    df.columns = [str(c).strip() for c in df.columns]
    return df


def _to_numeric(series: pd.Series, column: str) -> pd.Series:
    if is_bool_dtype(series):
        raise SchemaError(f"Column '{column}' must be numeric, got booleans")
    if is_numeric_dtype(series):
        return series
    coerced = pd.to_numeric(series.str.strip(), errors="coerce")
    mask_bad = coerced.isna() & series.notna() & (series.str.strip() != "")
    if mask_bad.any():
        sample = list(series[mask_bad].unique()[:5])
        raise SchemaError(f"Column '{column}' has non-numeric values: {sample}")
    return coerced


# pandas' default missing markers; applied to every column except the label
MISSING_MARKERS = [
    "", "#N/A", "#N/A N/A", "#NA", "-1.#IND", "-1.#QNAN", "-NaN", "-nan",
    "1.#IND", "1.#QNAN", "<NA>", "N/A", "NA", "NULL", "NaN", "None",
    "n/a", "nan", "null",
]


def load_csv(
    path,
    label_column: str = LABEL_COLUMN,
    value_column: str = VALUE_COLUMN,
) -> pd.DataFrame:
    header = _read_csv(path, nrows=0).columns
    raw_names = {str(c).strip(): c for c in header}

    if label_column not in raw_names:
        raise SchemaError(f"CSV must contain a '{label_column}' column")
    if value_column not in raw_names:
        raise SchemaError(f"CSV must contain a '{value_column}' column")

    # labels are free text: "NA" or "01" must reach the lookup as written,
    # only a blank label counts as missing
    raw_label = raw_names[label_column]
    na_values = {c: MISSING_MARKERS for c in header if c != raw_label}
    na_values[raw_label] = [""]
    df = _strip_columns(
        _read_csv(path, dtype={raw_label: str}, keep_default_na=False, na_values=na_values)
    )

    df[value_column] = _to_numeric(df[value_column], value_column)
    return df


def load_lookup(
    path,
    label_column: str = LOOKUP_LABEL_COLUMN,
    category_column: str = LOOKUP_CATEGORY_COLUMN,
    categories: Optional[Iterable[str]] = ALLOWED_CATEGORIES,
    unknown: str = UNKNOWN_CATEGORY,
) -> LookupTable:
    # labels such as "NA" are real labels here, not missing markers
    df = _read_csv(path, dtype=str, keep_default_na=False)
    return LookupTable.from_frame(
        df, label_column, category_column, categories=categories, unknown=unknown
    )


def write_output(df: pd.DataFrame, path) -> str:
    """Write CSV, or JSON lines when `path` ends in .jsonl."""
    path = os.fspath(path)
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        if path.lower().endswith(".jsonl"):
            df.to_json(path, orient="records", lines=True, force_ascii=False)
        else:
            df.to_csv(path, index=False)
    except OSError as e:
        raise PipelineIOError(path, "write", str(e)) from e
    return path
