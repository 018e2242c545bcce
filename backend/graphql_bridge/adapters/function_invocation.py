from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from graphql_bridge.adapters.base import coerce_method
from graphql_bridge.config import Settings
from graphql_bridge.errors import MalformedPayload
from graphql_bridge.models import (
    CanonicalRequest,
    CanonicalResponse,
    InvocationEvent,
    parse_query_string,
)


TEXT_CONTENT_TYPES = frozenset({"application/json", "application/graphql", "application/javascript"})


def _missing_fields(exc: ValidationError) -> list[str]:
    missing: list[str] = []
    for error in exc.errors():
        if error.get("type") == "missing" and error.get("loc"):
            missing.append(str(error["loc"][0]))
    return missing


def parse_invocation_event(raw_event: Any) -> InvocationEvent:
    if not isinstance(raw_event, Mapping):
        raise MalformedPayload("Invocation payload must be a JSON object.")

    try:
        return InvocationEvent.model_validate(dict(raw_event))
    except ValidationError as exc:
        missing = _missing_fields(exc)
        if missing:
            raise MalformedPayload(f"Invocation payload is missing required fields: {', '.join(missing)}.") from exc
        raise MalformedPayload(f"Invocation payload is invalid: {exc.errors()[0].get('msg', 'invalid value')}.") from exc


def is_text_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type.startswith("text/") or media_type.endswith("+json") or media_type in TEXT_CONTENT_TYPES


class FunctionInvocationNormalizer:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def _strip_base_path(self, raw_path: str) -> str:
        base_path = self.settings.api_base_path
        if base_path and (raw_path == base_path or raw_path.startswith(f"{base_path}/")):
            return raw_path[len(base_path):] or "/"
        return raw_path

    def _decode_body(self, event: InvocationEvent) -> bytes | None:
        if not event.body:
            return None
        if not event.is_base64_encoded:
            return event.body.encode("utf-8")
        try:
            return base64.b64decode(event.body, validate=True) or None
        except (binascii.Error, ValueError) as exc:
            raise MalformedPayload("Invocation body is flagged as base64 but could not be decoded.") from exc

    async def normalize(self, raw_event: Any) -> CanonicalRequest:
        event = parse_invocation_event(raw_event)
        return CanonicalRequest(
            method=coerce_method(event.method),
            path=self._strip_base_path(event.raw_path),
            query_string=parse_query_string(event.raw_query_string),
            headers=dict(event.headers),
            body=self._decode_body(event),
        )


class FunctionInvocationMaterializer:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def materialize(self, response: CanonicalResponse) -> dict[str, Any]:
        content_type = next(
            (value for name, value in response.headers.items() if name.lower() == "content-type"),
            "",
        )
        if is_text_content_type(content_type):
            body = response.body.decode("utf-8")
            is_base64_encoded = False
        else:
            body = base64.b64encode(response.body).decode("ascii")
            is_base64_encoded = True

        return {
            "statusCode": response.status_code,
            "headers": dict(response.headers),
            "body": body,
            "isBase64Encoded": is_base64_encoded,
        }
