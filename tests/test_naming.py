from datetime import datetime, timedelta, timezone

import pytest

from obspipe.pipeline import naming
from obspipe.pipeline.naming import add_name_suffix, format_timestamp, output_name


def test_add_name_suffix():
    assert add_name_suffix("observations.csv") == "observations_clean.csv"
    assert add_name_suffix("data/raw/observations.csv") == "observations_clean.csv"
    assert add_name_suffix("archive.tar.gz", "_x") == "archive.tar_x.gz"
    assert add_name_suffix("README") == "README_clean"


def test_add_name_suffix_rejects_directory_only():
    with pytest.raises(ValueError):
        add_name_suffix("data/")


def test_output_name_with_injected_time():
    moment = datetime(2024, 1, 5, 13, 45, tzinfo=timezone.utc)
    assert output_name("observations.csv", moment) == "2024-01-05_13-45_observations_clean.csv"


def test_output_name_converts_to_target_timezone():
    plus_two = timezone(timedelta(hours=2))
    moment = datetime(2024, 1, 5, 1, 30, tzinfo=plus_two)
    assert output_name("obs.csv", moment) == "2024-01-04_23-30_obs_clean.csv"
    assert output_name("obs.csv", moment, tz=plus_two) == "2024-01-05_01-30_obs_clean.csv"


def test_naive_time_is_taken_as_target_timezone():
    assert format_timestamp(datetime(2024, 3, 1, 9, 5)) == "2024-03-01_09-05"


def test_custom_format_and_suffix():
    moment = datetime(2024, 1, 5, 13, 45, 7, tzinfo=timezone.utc)
    name = output_name("obs.csv", moment, suffix="-out", fmt="%Y%m%dT%H%M%S")
    assert name == "20240105T134507_obs-out.csv"


def test_distinct_times_give_distinct_names():
    first = datetime(2024, 1, 5, 13, 45, tzinfo=timezone.utc)
    second = first + timedelta(days=1, hours=2, minutes=3)
    a = output_name("obs.csv", first)
    b = output_name("obs.csv", second)
    assert a != b
    assert a.startswith("2024-01-05_13-45_")
    assert b.startswith("2024-01-06_15-48_")


class _FakeDatetime(datetime):
    moments = []

    @classmethod
    def now(cls, tz=None):
        return cls.moments.pop(0)


def test_clock_is_read_on_every_call(monkeypatch):
    # a name computed from a clock captured once would repeat here
    _FakeDatetime.moments = [
        datetime(2024, 1, 5, 13, 45, tzinfo=timezone.utc),
        datetime(2024, 1, 5, 14, 10, tzinfo=timezone.utc),
    ]
    monkeypatch.setattr(naming, "datetime", _FakeDatetime)

    first = output_name("obs.csv")
    second = output_name("obs.csv")

    assert first == "2024-01-05_13-45_obs_clean.csv"
    assert second == "2024-01-05_14-10_obs_clean.csv"


def test_default_now_is_current_time():
    before = datetime.now(timezone.utc).replace(second=0, microsecond=0)
    name = output_name("obs.csv")
    after = datetime.now(timezone.utc)
    stamp = datetime.strptime(name[:16], naming.TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    assert before <= stamp <= after
