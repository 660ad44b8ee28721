import numbers
from types import MappingProxyType
from typing import Callable, Mapping, Optional

import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from .config import CATEGORY_COLUMN, VALUE_COLUMN
from .errors import SchemaError


def fahrenheit_to_celsius(value):
    return (value - 32) * 5 / 9


# category -> conversion; categories not listed (including the sentinel) are left as-is
CONVERSIONS: Mapping[str, Callable] = MappingProxyType({"US": fahrenheit_to_celsius})


def convert_value(category, value, conversions: Mapping[str, Callable] = CONVERSIONS):
    """Apply the conversion registered for `category`; missing values pass through."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return value
    if isinstance(value, bool) or not isinstance(value, numbers.Number):
        raise SchemaError(f"Measurement must be numeric, got {value!r}")
    convert = conversions.get(category)
    return value if convert is None else convert(value)


def apply_unit_conversion(
    df: pd.DataFrame,
    category_column: str = CATEGORY_COLUMN,
    value_column: str = VALUE_COLUMN,
    output_column: Optional[str] = None,
    conversions: Mapping[str, Callable] = CONVERSIONS,
) -> pd.DataFrame:
    """
    Vectorized `convert_value` over a batch.

    The converted measurement replaces `value_column` unless
    `output_column` names a separate column.
    """
    for col in (category_column, value_column):
        if col not in df.columns:
            raise SchemaError(f"Records must contain a '{col}' column")

    values = df[value_column]
    if is_bool_dtype(values) or not is_numeric_dtype(values):
        raise SchemaError(f"Column '{value_column}' must be numeric, got dtype {values.dtype}")

    df = df.copy()
    result = values.astype("float64")

    for category, convert in conversions.items():
        mask = (df[category_column] == category) & result.notna()
        if mask.any():
            result[mask] = convert(result[mask])

    df[output_column or value_column] = result
    return df
