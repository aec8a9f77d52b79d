from __future__ import annotations

from pathlib import Path

from structschema.backend.config import BackendSettings

_ENV_KEYS = [
    "STRUCTSCHEMA_TIMESTAMP_UNIT",
    "STRUCTSCHEMA_TIMESTAMP_TIME_ZONE",
    "STRUCTSCHEMA_UNIQUE_FIELD_NAMES",
    "STRUCTSCHEMA_LOG_LEVEL",
]


def _write_toml(tmp: Path, name: str, content: str) -> Path:
    p = tmp / name
    p.write_text(content)
    return p


def _clear_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    s = BackendSettings.load()
    assert s == BackendSettings()
    assert s.timestamp_unit == "us"
    assert s.unique_field_names is False


def test_settings_precedence_env_over_toml(tmp_path: Path, monkeypatch) -> None:
    _write_toml(
        tmp_path,
        "structschema.toml",
        """
        [backend]
        timestamp_unit = "ms"
        unique_field_names = true
        log_level = "info"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    monkeypatch.setenv("STRUCTSCHEMA_TIMESTAMP_UNIT", "ns")
    monkeypatch.setenv("STRUCTSCHEMA_LOG_LEVEL", "debug")

    s = BackendSettings.load()

    assert s.timestamp_unit == "ns"  # env override
    assert s.log_level == "DEBUG"  # env override
    assert s.unique_field_names is True  # from TOML


def test_settings_from_pyproject_tool_table(tmp_path: Path, monkeypatch) -> None:
    _write_toml(
        tmp_path,
        "pyproject.toml",
        """
        [tool.structschema.backend]
        timestamp_time_zone = "UTC"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    s = BackendSettings.load()
    assert s.timestamp_time_zone == "UTC"


def test_settings_from_explicit_path_with_top_level_keys(tmp_path: Path, monkeypatch) -> None:
    p = _write_toml(tmp_path, "custom.toml", 'unique_field_names = "yes"\n')
    _clear_env(monkeypatch)
    s = BackendSettings.load(p)
    assert s.unique_field_names is True


def test_invalid_values_keep_previous(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    monkeypatch.setenv("STRUCTSCHEMA_TIMESTAMP_UNIT", "fortnight")
    monkeypatch.setenv("STRUCTSCHEMA_LOG_LEVEL", "loud")
    s = BackendSettings.load()
    assert s.timestamp_unit == "us"
    assert s.log_level == "WARNING"


def test_non_table_tool_entries_fall_back_to_defaults(tmp_path: Path, monkeypatch) -> None:
    _write_toml(tmp_path, "pyproject.toml", '[tool]\nstructschema = "x"\n')
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    assert BackendSettings.load() == BackendSettings()

    _write_toml(tmp_path, "pyproject.toml", '[tool.structschema]\nbackend = 3\n')
    assert BackendSettings.load() == BackendSettings()
