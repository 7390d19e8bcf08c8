from __future__ import annotations

from pathlib import Path

import pytest

from rclookup.config import RcConfig
from rclookup.exceptions import RcConfigError


def test_defaults() -> None:
    config = RcConfig()

    assert config.lookup_cost == 5
    assert config.page_size == 10
    assert config.time_zone == "Asia/Kolkata"


def test_from_env_reads_rc_variables(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("RC_API_TOKEN", "tok")
    monkeypatch.setenv("RC_BASE_URL", "https://rc.example")
    monkeypatch.setenv("RC_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("RC_LOOKUP_COST", "7")
    monkeypatch.setenv("RC_FETCH_TIMEOUT", "2.5")

    config = RcConfig.from_env(page_size=25)

    assert config.api_token == "tok"
    assert config.base_url == "https://rc.example"
    assert config.data_dir == tmp_path
    assert config.lookup_cost == 7
    assert config.fetch_timeout == 2.5
    assert config.page_size == 25


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RC_LOOKUP_COST", "not-a-number")

    config = RcConfig.from_env(lookup_cost=3)

    assert config.lookup_cost == 3


def test_bad_numeric_env_raises_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RC_PAGE_SIZE", "ten")

    with pytest.raises(RcConfigError):
        RcConfig.from_env()


@pytest.mark.parametrize("kwargs", [{"lookup_cost": 0}, {"lookup_cost": True}, {"page_size": 0}, {"fetch_timeout": -1}])
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(RcConfigError):
        RcConfig(**kwargs)  # type: ignore[arg-type]


def test_data_dir_string_is_coerced_to_path() -> None:
    assert RcConfig(data_dir="/tmp/rc").data_dir == Path("/tmp/rc")  # type: ignore[arg-type]
