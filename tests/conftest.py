from __future__ import annotations

from typing import Any

import pytest

from graphql_bridge.config import Settings, get_settings
from graphql_bridge.runtime import Runtime, RuntimeMode, get_runtime


RUNTIME_ENV_VARS = (
    "RUNTIME_MODE",
    "AWS_LAMBDA_FUNCTION_NAME",
    "AWS_LAMBDA_RUNTIME_API",
    "API_BASE_PATH",
    "LOG_LEVEL",
)

SYS_INFO_QUERY = "{ sysInfo }"


class StaticExecutor:
    """Executor double returning a fixed result document."""

    def __init__(self, document: dict[str, Any]) -> None:
        self.document = document
        self.calls: list[tuple[str, dict[str, Any] | None, str | None]] = []

    async def execute(self, query, variables=None, operation_name=None):
        self.calls.append((query, variables, operation_name))
        return self.document


class ExplodingExecutor:
    async def execute(self, query, variables=None, operation_name=None):
        raise RuntimeError("resolver pool exhausted")


@pytest.fixture(autouse=True)
def clean_runtime_env(monkeypatch):
    for name in RUNTIME_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_runtime.cache_clear()
    yield
    get_settings.cache_clear()
    get_runtime.cache_clear()


def make_settings(**env: str) -> Settings:
    return Settings(_env_file=None, **env)


@pytest.fixture
def local_runtime() -> Runtime:
    return Runtime.for_mode(RuntimeMode.LOCAL_HTTP, make_settings())


@pytest.fixture
def function_runtime() -> Runtime:
    return Runtime.for_mode(RuntimeMode.FUNCTION_INVOCATION, make_settings())


def invocation_event(**overrides: Any) -> dict[str, Any]:
    event: dict[str, Any] = {
        "method": "GET",
        "rawPath": "/graphql",
        "rawQueryString": "query=%7B+sysInfo+%7D",
        "headers": {},
        "isBase64Encoded": False,
    }
    event.update(overrides)
    return event
