import os
from datetime import datetime, timezone, tzinfo
from typing import Optional

from .config import OUTPUT_SUFFIX

# numeric directives only: output names must not depend on the process locale
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M"


def format_timestamp(
    moment: datetime,
    fmt: str = TIMESTAMP_FORMAT,
    tz: tzinfo = timezone.utc,
) -> str:
    """Render `moment` in `tz`. Naive datetimes are taken to already be in `tz`."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=tz)
    else:
        moment = moment.astimezone(tz)
    return moment.strftime(fmt)


def add_name_suffix(name, suffix: str = OUTPUT_SUFFIX) -> str:
    """observations.csv -> observations_clean.csv (base name only)."""
    base = os.path.basename(os.fspath(name))
    if not base:
        raise ValueError(f"Cannot derive an output name from {name!r}")
    stem, ext = os.path.splitext(base)
    return f"{stem}{suffix}{ext}"


def output_name(
    input_name,
    now: Optional[datetime] = None,
    *,
    suffix: str = OUTPUT_SUFFIX,
    fmt: str = TIMESTAMP_FORMAT,
    tz: tzinfo = timezone.utc,
) -> str:
    """
    Output file name for `input_name`, stamped with `now`.

    When `now` is omitted the clock is read here, on every call.
    """
    if now is None:
        now = datetime.now(tz)
    return f"{format_timestamp(now, fmt, tz)}_{add_name_suffix(input_name, suffix)}"
