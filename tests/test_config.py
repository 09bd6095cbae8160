from pathlib import Path

import pytest

from nbe2ivil.core.config import ConfigLoadError, load_config

FIXTURES = Path(__file__).parent / "fixtures"


def test_load_options_file():
    config = load_config(FIXTURES / "options.yaml")
    assert config == {
        "scanner": "Nessus",
        "scannerversion": "4.4",
        "timestamp": "20240101120000",
        "workspace": "ws1",
        "scan": "weekly",
    }


def test_values_coerced_to_str(tmp_path):
    path = tmp_path / "c.yaml"
    path.write_text("timestamp: 20240101120000\nscannerversion: 2.1\nscan:\n")
    config = load_config(path)
    assert config == {"timestamp": "20240101120000", "scannerversion": "2.1"}


def test_empty_file_gives_no_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == {}


def test_missing_file():
    with pytest.raises(ConfigLoadError, match="config file not found"):
        load_config(Path("/nonexistent/options.yaml"))


def test_top_level_must_be_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- scanner\n- Nessus\n")
    with pytest.raises(ConfigLoadError, match="expected a YAML mapping"):
        load_config(path)


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("scanner: [unclosed\n")
    with pytest.raises(ConfigLoadError, match="invalid YAML"):
        load_config(path)


def test_unknown_key_rejected():
    with pytest.raises(ConfigLoadError, match="unknown key 'verbose'"):
        load_config(FIXTURES / "unknown_key.yaml")


def test_all_errors_reported_together(tmp_path):
    path = tmp_path / "c.yaml"
    path.write_text("infile: scan.nbe\nworkspace: [a, b]\n")
    with pytest.raises(ConfigLoadError) as exc:
        load_config(path)
    message = str(exc.value)
    assert "unknown key 'infile'" in message
    assert "workspace: expected a scalar, got list" in message
