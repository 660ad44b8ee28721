from collections.abc import Mapping
from types import MappingProxyType
from typing import Iterable, Optional, Tuple, Union

import pandas as pd

from .config import (
    ALLOWED_CATEGORIES,
    CATEGORY_COLUMN,
    LABEL_COLUMN,
    STRICT,
    UNKNOWN_CATEGORY,
)
from .errors import DataQualityError, SchemaError


def normalize_label(label) -> Optional[str]:
    """Trim a raw label; missing or blank labels become None."""
    if label is None or (not isinstance(label, str) and pd.isna(label)):
        return None
    text = str(label).strip()
    return text or None


class LookupTable(Mapping):
    """
    Read-only mapping from raw label to normalized category.

    Built once, then shared by reference between calls. Labels are
    trimmed on the way in and on lookup, so " beach " and "beach" hit
    the same entry.
    """

    def __init__(
        self,
        entries: Union[Mapping, Iterable[Tuple[str, str]]],
        categories: Optional[Iterable[str]] = ALLOWED_CATEGORIES,
        unknown: str = UNKNOWN_CATEGORY,
    ):
        allowed = frozenset(categories) if categories is not None else None
        if allowed is not None and unknown in allowed:
            raise SchemaError(f"Sentinel {unknown!r} cannot also be a valid category")

        pairs = entries.items() if isinstance(entries, Mapping) else entries
        table = {}
        for raw, category in pairs:
            label = normalize_label(raw)
            if label is None:
                raise SchemaError("Lookup labels must be non-empty text")
            if not isinstance(category, str) or not category.strip():
                raise SchemaError(f"Lookup category for {label!r} must be non-empty text")
            category = category.strip()
            if category == unknown:
                raise SchemaError(f"Lookup maps {label!r} to the sentinel {unknown!r}")
            if allowed is not None and category not in allowed:
                raise SchemaError(
                    f"Lookup maps {label!r} to {category!r}; expected one of {sorted(allowed)}"
                )
            # a label with two categories would duplicate rows in the join
            if table.get(label, category) != category:
                raise SchemaError(
                    f"Lookup label {label!r} maps to both {table[label]!r} and {category!r}"
                )
            table[label] = category

        self._table = MappingProxyType(table)
        self._categories = allowed
        self._unknown = unknown
        # join side of apply_category_lookup, built once and shared by every batch
        self._join_frame = pd.DataFrame(
            {
                "_label": pd.Series(list(table.keys()), dtype=object),
                "_category": pd.Series(list(table.values()), dtype=object),
            }
        )

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        label_column: str,
        category_column: str,
        categories: Optional[Iterable[str]] = ALLOWED_CATEGORIES,
        unknown: str = UNKNOWN_CATEGORY,
    ) -> "LookupTable":
        columns = [str(c).strip() for c in df.columns]
        if sorted(columns) != sorted([label_column, category_column]):
            raise SchemaError(
                f"Lookup table must have exactly the columns "
                f"'{label_column}' and '{category_column}', got {columns}"
            )
        df = df.set_axis(columns, axis=1)
        return cls(
            zip(df[label_column], df[category_column]),
            categories=categories,
            unknown=unknown,
        )

    @property
    def categories(self) -> Optional[frozenset]:
        return self._categories

    @property
    def unknown(self) -> str:
        return self._unknown

    def __getitem__(self, label) -> str:
        key = normalize_label(label)
        if key is None:
            raise KeyError(label)
        return self._table[key]

    def __iter__(self):
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"LookupTable({dict(self._table)!r})"

    @property
    def join_frame(self) -> pd.DataFrame:
        return self._join_frame

    def to_frame(self, label_column: str, category_column: str) -> pd.DataFrame:
        return self._join_frame.set_axis([label_column, category_column], axis=1)


def resolve_category(label, lookup: LookupTable, strict: bool = STRICT) -> str:
    """Category for a single raw label, or the unknown sentinel."""
    category = lookup.get(label)
    if category is not None:
        return category
    if strict:
        raise DataQualityError(["<missing>" if normalize_label(label) is None else label])
    return lookup.unknown


def apply_category_lookup(
    df: pd.DataFrame,
    lookup: LookupTable,
    label_column: str = LABEL_COLUMN,
    category_column: str = CATEGORY_COLUMN,
    strict: bool = STRICT,
) -> pd.DataFrame:
    """
    Left-join every record's label against the lookup table.

    Returns a new frame with `category_column` filled in. Rows are never
    dropped or duplicated; unmatched rows get the sentinel, or the whole
    batch is rejected with DataQualityError when `strict` is set.
    """
    if label_column not in df.columns:
        raise SchemaError(f"Records must contain a '{label_column}' column")

    df = df.copy()

    keys = df[label_column].map(normalize_label).astype(object).to_frame("_label")
    joined = keys.merge(
        lookup.join_frame,
        on="_label",
        how="left",
        validate="many_to_one",
    )
    category = pd.Series(joined["_category"].to_numpy(dtype=object), index=df.index)

    mask_unmatched = category.isna()
    if mask_unmatched.any() and strict:
        raw = df.loc[mask_unmatched, label_column]
        raise DataQualityError(["<missing>" if normalize_label(x) is None else x for x in raw])

    category[mask_unmatched] = lookup.unknown
    df[category_column] = category
    return df
