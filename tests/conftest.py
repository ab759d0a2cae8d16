from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from sqlstub import MatchConfig, ParameterResultSetHandler
from sqlstub.utils.logging import set_correlation_id

here = Path(__file__).parent
root_path = here.parent

ENV_FLAGS = (
    "SQLSTUB_CASE_SENSITIVE",
    "SQLSTUB_EXACT_MATCH",
    "SQLSTUB_USE_REGULAR_EXPRESSIONS",
    "SQLSTUB_EXACT_MATCH_PARAMETER",
)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    for name in ENV_FLAGS:
        monkeypatch.delenv(name, raising=False)
    yield
    set_correlation_id(None)


@pytest.fixture
def match_config() -> MatchConfig:
    return MatchConfig()


@pytest.fixture
def handler(match_config: MatchConfig) -> ParameterResultSetHandler:
    return ParameterResultSetHandler(match_config)
