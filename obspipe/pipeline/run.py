from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, Mapping, Optional, Union

from pydantic import BaseModel, Field

from .canonical import category_counts, transform_records
from .categorize import LookupTable
from .config import (
    ALLOWED_CATEGORIES,
    CATEGORY_COLUMN,
    LABEL_COLUMN,
    OUTPUT_DIR,
    OUTPUT_SUFFIX,
    STRICT,
    UNKNOWN_CATEGORY,
    VALUE_COLUMN,
)
from .io_utils import load_csv, load_lookup, write_output
from .naming import output_name
from obspipe.setup_logging import setup_logging

logger = logging.getLogger(__name__)


class RunSummary(BaseModel):
    input_path: str
    output_path: str
    rows: int
    unknown_labels: int
    by_category: Dict[str, int] = Field(default_factory=dict)
    generated_at: datetime


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_lookup(
    lookup: Union[LookupTable, Mapping, str, os.PathLike],
    categories: Optional[Iterable[str]],
    unknown: str,
) -> LookupTable:
    if isinstance(lookup, LookupTable):
        return lookup
    if isinstance(lookup, Mapping):
        return LookupTable(lookup, categories=categories, unknown=unknown)
    return load_lookup(lookup, categories=categories, unknown=unknown)


def run_pipeline(
    input_path: Union[str, os.PathLike],
    lookup: Union[LookupTable, Mapping, str, os.PathLike],
    out_dir: Union[str, os.PathLike] = OUTPUT_DIR,
    *,
    label_column: str = LABEL_COLUMN,
    value_column: str = VALUE_COLUMN,
    category_column: str = CATEGORY_COLUMN,
    output_column: Optional[str] = None,
    strict: bool = STRICT,
    suffix: str = OUTPUT_SUFFIX,
    categories: Optional[Iterable[str]] = ALLOWED_CATEGORIES,
    unknown: str = UNKNOWN_CATEGORY,
    clock: Callable[[], datetime] = _utc_now,
) -> RunSummary:
    """
    Reads raw CSV -> lookup categorize -> unit conversion -> timestamped CSV.

    `lookup` may be a LookupTable, a plain dict, or a path to a two-column
    lookup CSV. `categories` and `unknown` apply when the table is built
    here; a prebuilt LookupTable keeps its own. `clock` is called once per
    run to stamp the output name. Errors from any step propagate unchanged.
    The first run attaches a stdout handler to the `obspipe` logger unless
    the host application already configured logging.
    """
    setup_logging()
    table = _as_lookup(lookup, categories, unknown)

    # 1) load raw
    raw_df = load_csv(input_path, label_column=label_column, value_column=value_column)
    logger.info("Loaded %d rows from %s", len(raw_df), input_path)

    # 2) categorize + convert
    out_df = transform_records(
        raw_df,
        table,
        label_column=label_column,
        value_column=value_column,
        category_column=category_column,
        output_column=output_column,
        strict=strict,
    )
    counts = category_counts(out_df, category_column)
    unknown = counts.get(table.unknown, 0)
    if unknown:
        logger.warning("%d row(s) in %s have labels missing from the lookup table", unknown, input_path)

    # 3) name + write
    generated_at = clock()
    out_path = os.path.join(
        os.fspath(out_dir), output_name(input_path, generated_at, suffix=suffix)
    )
    write_output(out_df, out_path)
    logger.info("Wrote %d rows to %s", len(out_df), out_path)

    return RunSummary(
        input_path=os.fspath(input_path),
        output_path=out_path,
        rows=len(out_df),
        unknown_labels=unknown,
        by_category=counts,
        generated_at=generated_at,
    )
