from __future__ import annotations

from starlette.requests import Request
from starlette.responses import Response

from graphql_bridge.adapters.base import coerce_method
from graphql_bridge.config import Settings
from graphql_bridge.models import (
    CanonicalRequest,
    CanonicalResponse,
    normalize_headers,
    parse_query_string,
)


class LocalHttpNormalizer:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    async def normalize(self, raw_event: Request) -> CanonicalRequest:
        method = coerce_method(raw_event.method)
        body = await raw_event.body()
        return CanonicalRequest(
            method=method,
            path=raw_event.url.path,
            query_string=parse_query_string(raw_event.url.query),
            headers=normalize_headers(raw_event.headers),
            body=body or None,
        )


class LocalHttpMaterializer:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def materialize(self, response: CanonicalResponse) -> Response:
        return Response(
            content=response.body,
            status_code=response.status_code,
            headers=dict(response.headers),
        )
