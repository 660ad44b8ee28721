# tests/conftest.py
import pandas as pd
import pytest

from obspipe.pipeline.categorize import LookupTable


@pytest.fixture
def lookup():
    return LookupTable({"beach": "US", "seashore": "UK"})


@pytest.fixture
def raw_df():
    return pd.DataFrame(
        {
            "site": ["beach", "seashore"],
            "temperature": [212, 0],
        }
    )


@pytest.fixture
def messy_df():
    """Unknown label, missing label and missing measurement mixed in."""
    return pd.DataFrame(
        {
            "site": ["beach", "lake", None, "seashore", "beach"],
            "temperature": [32.0, 50.0, 70.0, float("nan"), float("nan")],
        },
        index=[10, 11, 12, 13, 14],
    )


@pytest.fixture
def observations_csv(tmp_path):
    path = tmp_path / "observations.csv"
    path.write_text("site,temperature\nbeach,212\nseashore,0\n")
    return path


@pytest.fixture
def lookup_csv(tmp_path):
    path = tmp_path / "sites.csv"
    path.write_text("site,country\nbeach,US\nseashore,UK\n")
    return path
