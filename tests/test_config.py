from __future__ import annotations

import json
import logging

import pytest

from rfl.core import ConfigError, JsonLineFormatter, RuntimeSettings, make_id, seeded_random


def test_settings_from_env_defaults(tmp_path):
    settings = RuntimeSettings.from_env(tmp_path, environ={})
    assert settings.api_url == "http://localhost:3000"
    assert settings.storage_key == "rfl90-lineups"
    assert settings.min_filled_slots == 7
    assert settings.default_formation == "2-3-1"
    assert settings.paths.storage_path == tmp_path / "data" / "local_storage.sqlite3"
    assert settings.paths.duckdb_path == tmp_path / "data" / "analytics.duckdb"


def test_settings_from_env_overrides(tmp_path):
    settings = RuntimeSettings.from_env(
        tmp_path,
        environ={
            "RFL_API_URL": "https://rfl.example/",
            "RFL_HTTP_TIMEOUT": "2.5",
            "RFL_MIN_FILLED_SLOTS": "5",
            "RFL_LOG_LEVEL": "debug",
        },
    )
    assert settings.api_url == "https://rfl.example"
    assert settings.http_timeout == 2.5
    assert settings.min_filled_slots == 5
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "environ",
    [
        {"RFL_API_URL": "ftp://rfl.example"},
        {"RFL_HTTP_TIMEOUT": "soon"},
        {"RFL_HTTP_TIMEOUT": "0"},
        {"RFL_MIN_FILLED_SLOTS": "0"},
        {"RFL_LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_settings_raise_config_error(tmp_path, environ):
    with pytest.raises(ConfigError):
        RuntimeSettings.from_env(tmp_path, environ=environ)


def test_with_overrides_skips_none_and_revalidates(tmp_path):
    base = RuntimeSettings(root=tmp_path)
    updated = base.with_overrides(seed=4, api_url=None)
    assert updated.seed == 4
    assert updated.api_url == base.api_url
    with pytest.raises(ConfigError):
        base.with_overrides(min_filled_slots=0)


def test_seeded_random_is_reproducible():
    a = seeded_random(10)
    b = seeded_random(10)
    assert [a.choice(range(100)) for _ in range(5)] == [b.choice(range(100)) for _ in range(5)]
    with pytest.raises(ValueError):
        seeded_random(1).choice([])


def test_json_formatter_carries_extra_fields():
    record = logging.LogRecord("rfl.test", logging.INFO, __file__, 1, "saved %s", ("XI",), None)
    record.lineup_id = "123"
    payload = json.loads(JsonLineFormatter().format(record))
    assert payload["message"] == "saved XI"
    assert payload["lineup_id"] == "123"
    assert payload["level"] == "INFO"


def test_make_id_prefix():
    assert make_id("req").startswith("req_")
