from pathlib import Path

import pytest
from pydantic import ValidationError

from calc.calc_config import Settings, get_settings


def test_defaults() -> None:
    settings = Settings()
    assert settings.precision == 50
    assert settings.seed is None
    assert settings.log_level == "WARNING"
    assert settings.prompt == ">> "


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CALC_PRECISION", "80")
    monkeypatch.setenv("CALC_SEED", "3")
    monkeypatch.setenv("CALC_PROMPT", "calc> ")
    settings = Settings()
    assert settings.precision == 80
    assert settings.seed == 3
    assert settings.prompt == "calc> "


def test_dotenv_file(tmp_path: Path) -> None:
    # conftest runs every test inside tmp_path
    (tmp_path / ".env").write_text("CALC_PRECISION=21\n", encoding="utf-8")
    assert Settings().precision == 21


def test_log_level_is_normalized() -> None:
    assert Settings(log_level="debug").log_level == "DEBUG"


@pytest.mark.parametrize("field, value", [("precision", 0), ("precision", 10_001), ("log_level", "loud")])
def test_invalid_values(field: str, value: object) -> None:
    with pytest.raises(ValidationError):
        Settings(**{field: value})


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("CALC_PRECISION", "99")
    assert get_settings() is first
    get_settings.cache_clear()
    assert get_settings().precision == 99
