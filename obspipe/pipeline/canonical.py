from typing import Callable, Dict, Mapping, Optional

import pandas as pd

from .categorize import LookupTable, apply_category_lookup, resolve_category
from .config import CATEGORY_COLUMN, LABEL_COLUMN, STRICT, VALUE_COLUMN
from .errors import SchemaError
from .units import CONVERSIONS, apply_unit_conversion, convert_value


def transform_records(
    df: pd.DataFrame,
    lookup: LookupTable,
    *,
    label_column: str = LABEL_COLUMN,
    value_column: str = VALUE_COLUMN,
    category_column: str = CATEGORY_COLUMN,
    output_column: Optional[str] = None,
    strict: bool = STRICT,
    conversions: Mapping[str, Callable] = CONVERSIONS,
) -> pd.DataFrame:
    """Categorize then convert a batch. Length, order and index are preserved."""
    if value_column not in df.columns:
        raise SchemaError(f"Records must contain a '{value_column}' column")

    out = apply_category_lookup(
        df,
        lookup,
        label_column=label_column,
        category_column=category_column,
        strict=strict,
    )
    out = apply_unit_conversion(
        out,
        category_column=category_column,
        value_column=value_column,
        output_column=output_column,
        conversions=conversions,
    )
    return out


def transform_record(
    record: Mapping,
    lookup: LookupTable,
    *,
    label_column: str = LABEL_COLUMN,
    value_column: str = VALUE_COLUMN,
    category_column: str = CATEGORY_COLUMN,
    output_column: Optional[str] = None,
    strict: bool = STRICT,
    conversions: Mapping[str, Callable] = CONVERSIONS,
) -> dict:
    """Single-record counterpart of `transform_records`. Returns a new dict."""
    for col in (label_column, value_column):
        if col not in record:
            raise SchemaError(f"Record must contain a '{col}' field")

    out = dict(record)
    category = resolve_category(record[label_column], lookup, strict=strict)
    out[category_column] = category
    out[output_column or value_column] = convert_value(category, record[value_column], conversions)
    return out


def category_counts(df: pd.DataFrame, category_column: str = CATEGORY_COLUMN) -> Dict[str, int]:
    counts = df[category_column].value_counts(dropna=False)
    return {str(k): int(v) for k, v in counts.items()}
