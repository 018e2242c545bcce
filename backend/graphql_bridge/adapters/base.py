from __future__ import annotations

from typing import Any, Protocol

from graphql_bridge.errors import MethodNotAllowed
from graphql_bridge.models import CanonicalRequest, CanonicalResponse, HttpMethod


class RequestNormalizer(Protocol):
    async def normalize(self, raw_event: Any) -> CanonicalRequest: ...


class ResponseMaterializer(Protocol):
    def materialize(self, response: CanonicalResponse) -> Any: ...


def coerce_method(method: str) -> HttpMethod:
    try:
        return HttpMethod(method.strip().upper())
    except ValueError as exc:
        raise MethodNotAllowed(f"Method {method!r} is not allowed; use GET or POST.") from exc
