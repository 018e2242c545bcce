from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from pydantic import ValidationError

from graphql_bridge.adapters.base import RequestNormalizer, ResponseMaterializer
from graphql_bridge.adapters.function_invocation import (
    FunctionInvocationMaterializer,
    FunctionInvocationNormalizer,
)
from graphql_bridge.adapters.local_http import LocalHttpMaterializer, LocalHttpNormalizer
from graphql_bridge.config import Settings, get_settings
from graphql_bridge.errors import ProcessStartupFailure


logger = logging.getLogger(__name__)


class RuntimeMode(str, Enum):
    LOCAL_HTTP = "local_http"
    FUNCTION_INVOCATION = "function_invocation"


def detect_runtime_mode(settings: Settings) -> RuntimeMode:
    # An explicit override wins over the host's function signal.
    if settings.runtime_mode != "auto":
        return RuntimeMode(settings.runtime_mode)
    if settings.has_function_signal:
        return RuntimeMode.FUNCTION_INVOCATION
    return RuntimeMode.LOCAL_HTTP


@dataclass(frozen=True)
class Runtime:
    mode: RuntimeMode
    settings: Settings
    normalizer: RequestNormalizer
    materializer: ResponseMaterializer

    @classmethod
    def for_mode(cls, mode: RuntimeMode, settings: Settings) -> "Runtime":
        if mode is RuntimeMode.LOCAL_HTTP:
            return cls(mode, settings, LocalHttpNormalizer(settings), LocalHttpMaterializer(settings))
        if mode is RuntimeMode.FUNCTION_INVOCATION:
            return cls(
                mode,
                settings,
                FunctionInvocationNormalizer(settings),
                FunctionInvocationMaterializer(settings),
            )
        raise ProcessStartupFailure(f"No adapters are registered for runtime mode {mode!r}.")

    def require(self, mode: RuntimeMode) -> None:
        if self.mode is not mode:
            raise ProcessStartupFailure(
                f"This entry point needs runtime mode {mode.value!r} but the process "
                f"was started in {self.mode.value!r}."
            )


def configure_logging(settings: Settings) -> None:
    logging.getLogger("graphql_bridge").setLevel(settings.log_level.upper())


@lru_cache
def get_runtime() -> Runtime:
    try:
        settings = get_settings()
    except ValidationError as exc:
        raise ProcessStartupFailure(f"Invalid runtime configuration: {exc}") from exc

    configure_logging(settings)
    mode = detect_runtime_mode(settings)
    runtime = Runtime.for_mode(mode, settings)
    logger.info("Runtime mode selected: %s", mode.value)
    return runtime
