"""Tests for the Streamlit page and its data loading component."""

import sys
from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from ksigrid.core.config import KsiGridConfig
from ksigrid.core.errors import RecordSourceError
from ksigrid.data.records import Record

# Add app directory to path
app_dir = Path(__file__).parent.parent / "app"
if str(app_dir) not in sys.path:
    sys.path.insert(0, str(app_dir))

HOME_PAGE = str(app_dir / "Home.py")


@pytest.fixture
def cached_records():
    """Record loader with an empty cache."""
    from components.loading import cached_records

    cached_records.clear()
    yield cached_records
    cached_records.clear()


class TestCachedRecords:
    """Test the cached record loader."""

    def test_uses_configured_columns(self, tmp_path, cached_records):
        """Column names come from the settings passed in."""
        path = tmp_path / "casualties.csv"
        path.write_text("age,role,sev\n4,1,3\n7,3,1\n")
        config = KsiGridConfig(
            data_path=str(path), row_column="age", col_column="role", severity_column="sev",
        )

        records = cached_records(config.to_dict())

        assert records == [Record(4, 1, 3), Record(7, 3, 1)]

    def test_different_columns_not_served_from_cache(self, tmp_path, cached_records):
        """Changing a column name reloads with that column."""
        path = tmp_path / "casualties.csv"
        path.write_text("age,alt_age,role,sev\n4,9,1,3\n")
        base = KsiGridConfig(
            data_path=str(path), row_column="age", col_column="role", severity_column="sev",
        )
        alt = KsiGridConfig(
            data_path=str(path), row_column="alt_age", col_column="role", severity_column="sev",
        )

        assert cached_records(base.to_dict()) == [Record(4, 1, 3)]
        assert cached_records(alt.to_dict()) == [Record(9, 1, 3)]

    def test_missing_file(self, tmp_path, cached_records):
        """Missing file raises RecordSourceError."""
        config = KsiGridConfig(data_path=str(tmp_path / "absent.csv"))

        with pytest.raises(RecordSourceError):
            cached_records(config.to_dict())


class TestHomePage:
    """Test page-level error reporting."""

    def test_invalid_config_reported(self, tmp_path, monkeypatch):
        """A bad config file shows an error instead of a traceback."""
        (tmp_path / "ksigrid.yaml").write_text("not_a_setting: 1\n")
        monkeypatch.setenv("KSIGRID_CONFIG_DIR", str(tmp_path))

        at = AppTest.from_file(HOME_PAGE).run(timeout=30)

        assert not at.exception
        assert "Invalid configuration" in at.error[0].value
        assert "not_a_setting" in at.error[0].value

    def test_missing_data_reported(self, tmp_path, monkeypatch):
        """An unreadable data file shows a load error."""
        monkeypatch.setenv("KSIGRID_CONFIG_DIR", str(tmp_path))
        monkeypatch.setenv("KSIGRID_DATA_PATH", str(tmp_path / "absent.csv"))

        at = AppTest.from_file(HOME_PAGE).run(timeout=30)

        assert not at.exception
        assert "Could not load casualty data" in at.error[0].value
