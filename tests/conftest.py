from collections.abc import Iterator
from pathlib import Path

import pytest

from calc.calc_config import get_settings
from calc.calc_numeric import NumericContext, default_context
from calc.calc_store import SymbolTable

CALC_ENV = ("CALC_PRECISION", "CALC_SEED", "CALC_LOG_LEVEL", "CALC_PROMPT")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    # No CALC_* variables or .env file from the developer's shell
    for name in CALC_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    default_context.cache_clear()
    yield
    get_settings.cache_clear()
    default_context.cache_clear()


@pytest.fixture
def store() -> SymbolTable:
    return SymbolTable()


@pytest.fixture
def numeric() -> NumericContext:
    return NumericContext(precision=50, seed=1234)
