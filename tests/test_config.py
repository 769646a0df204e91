"""Tests for pipeline configuration and label tables."""

import json

import pytest

from ksigrid.core.config import (
    KsiGridConfig,
    get_default_config_dir,
    load_config,
    resolve_config,
    save_config,
)
from ksigrid.core.entities import (
    AGE_BAND_LABELS,
    CASUALTY_CLASS_LABELS,
    MISSING_CODE,
    AgeBand,
    label_for,
)
from ksigrid.core.errors import ConfigError


class TestEntities:
    """Test coded entities and labels."""

    def test_age_band_labels_cover_all_bands(self):
        """Every age band has a label; missing code has none."""
        assert set(AGE_BAND_LABELS) == {int(b) for b in AgeBand}
        assert MISSING_CODE not in AGE_BAND_LABELS
        assert AGE_BAND_LABELS[11] == "Over 75"

    def test_class_labels(self):
        """Three casualty roles."""
        assert CASUALTY_CLASS_LABELS[1] == "Driver or rider"
        assert CASUALTY_CLASS_LABELS[3] == "Pedestrian"

    def test_label_for_unknown_code(self):
        """Unknown codes fall back to the code itself."""
        assert label_for(99, AGE_BAND_LABELS) == "99"


class TestConfigDefaults:
    """Test default configuration."""

    def test_default_values(self):
        """Defaults match the STATS19 casualty table."""
        config = KsiGridConfig()

        assert config.missing_row_code == -1
        assert config.allowed_col_codes == (1, 2, 3)
        assert config.flagged_severity_codes == (1, 2)
        assert config.exclude_missing_severity is False
        assert config.default_metric == "rate"
        assert config.default_domain_max == 1.0

    def test_list_inputs_normalised(self):
        """List inputs become tuples."""
        config = KsiGridConfig(allowed_col_codes=[3, 1], flagged_severity_codes=[1])

        assert config.allowed_col_codes == (3, 1)
        assert config.flagged_severity_codes == (1,)

    def test_string_label_keys_converted(self):
        """JSON-style string keys become int codes."""
        config = KsiGridConfig(col_labels={"1": "Driver", "2": "Passenger"})

        assert config.col_labels == {1: "Driver", 2: "Passenger"}

    def test_rejects_empty_allowed_codes(self):
        """Empty allowed set is rejected."""
        with pytest.raises(ValueError, match="allowed_col_codes"):
            KsiGridConfig(allowed_col_codes=[])

    def test_rejects_non_positive_default_domain(self):
        """default_domain_max must be positive."""
        with pytest.raises(ValueError, match="default_domain_max"):
            KsiGridConfig(default_domain_max=0)


class TestConfigFiles:
    """Test YAML/JSON loading and saving."""

    def test_yaml_round_trip(self, tmp_path):
        """Saved YAML config loads back equal."""
        config = KsiGridConfig(default_metric="count", exclude_missing_severity=True)
        path = tmp_path / "ksigrid.yaml"

        save_config(config, path)
        loaded = load_config(path)

        assert loaded == config

    def test_json_partial_config(self, tmp_path):
        """Keys absent from the file keep their defaults."""
        path = tmp_path / "site.json"
        path.write_text(json.dumps({"default_metric": "count"}))

        loaded = load_config(path)

        assert loaded.default_metric == "count"
        assert loaded.allowed_col_codes == (1, 2, 3)

    def test_missing_file(self, tmp_path):
        """Missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_unsupported_suffix(self, tmp_path):
        """Unsupported extension raises ValueError."""
        path = tmp_path / "config.toml"
        path.write_text("default_metric = 'count'")

        with pytest.raises(ValueError, match="Unsupported"):
            load_config(path)

    def test_unknown_key_rejected(self, tmp_path):
        """Typos in key names are reported."""
        path = tmp_path / "ksigrid.yaml"
        path.write_text("default_metrc: count\n")

        with pytest.raises(ConfigError, match="default_metrc"):
            load_config(path)

    def test_invalid_value_wrapped(self, tmp_path):
        """Validation errors surface as ConfigError."""
        path = tmp_path / "ksigrid.yaml"
        path.write_text("allowed_col_codes: []\n")

        with pytest.raises(ConfigError):
            load_config(path)


class TestResolveConfig:
    """Test config discovery."""

    def test_env_config_dir(self, tmp_path, monkeypatch):
        """KSIGRID_CONFIG_DIR takes precedence."""
        monkeypatch.setenv("KSIGRID_CONFIG_DIR", str(tmp_path))

        assert get_default_config_dir() == tmp_path

    def test_defaults_when_no_file(self, tmp_path, monkeypatch):
        """Without a config file, defaults are used."""
        monkeypatch.delenv("KSIGRID_DATA_PATH", raising=False)

        config = resolve_config(tmp_path)

        assert config == KsiGridConfig()

    def test_loads_file_and_data_path_override(self, tmp_path, monkeypatch):
        """File is loaded and KSIGRID_DATA_PATH overrides data_path."""
        save_config(KsiGridConfig(default_metric="count"), tmp_path / "ksigrid.yaml")
        monkeypatch.setenv("KSIGRID_DATA_PATH", "other.csv")

        config = resolve_config(tmp_path)

        assert config.default_metric == "count"
        assert config.data_path == "other.csv"
