from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import parse_qsl

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


JSON_CONTENT_TYPE = "application/json"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class CanonicalRequest:
    method: HttpMethod
    path: str
    query_string: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "").split(";", 1)[0].strip().lower()


@dataclass(frozen=True)
class CanonicalResponse:
    status_code: int
    headers: dict[str, str]
    body: bytes

    def __post_init__(self) -> None:
        if not 100 <= self.status_code <= 599:
            raise ValueError(f"Invalid HTTP status code: {self.status_code}")

    @classmethod
    def json(cls, status_code: int, payload: dict[str, Any]) -> "CanonicalResponse":
        body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        return cls(status_code=status_code, headers={"Content-Type": JSON_CONTENT_TYPE}, body=body)

    @classmethod
    def error(cls, status_code: int, message: str) -> "CanonicalResponse":
        return cls.json(status_code, {"errors": [{"message": message}]})


def parse_query_string(raw_query_string: str) -> dict[str, str]:
    # Repeated keys collapse to the last value, matching Starlette's QueryParams.
    return dict(parse_qsl(raw_query_string, keep_blank_values=True))


def normalize_headers(headers: Any) -> dict[str, str]:
    return {str(name).lower(): str(value) for name, value in headers.items()}


class InvocationEvent(BaseModel):
    """HTTP API (payload format 2.0) invocation event."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    method: str
    raw_path: str = Field(alias="rawPath")
    raw_query_string: str = Field(default="", alias="rawQueryString")
    headers: dict[str, str] = Field(default_factory=dict)
    body: str | None = None
    is_base64_encoded: bool = Field(default=False, alias="isBase64Encoded")

    @model_validator(mode="before")
    @classmethod
    def lift_request_context(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        request_context = data.get("requestContext")
        if not isinstance(request_context, dict):
            return data

        data = dict(data)
        http_context = request_context.get("http")
        if "method" not in data and isinstance(http_context, dict) and http_context.get("method"):
            data["method"] = http_context["method"]
        return data

    @field_validator("headers", mode="before")
    @classmethod
    def coerce_headers(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return normalize_headers(value)
        return value

    @field_validator("raw_query_string", mode="before")
    @classmethod
    def coerce_query_string(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("is_base64_encoded", mode="before")
    @classmethod
    def coerce_base64_flag(cls, value: Any) -> Any:
        return False if value is None else value


class GraphQLParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    query: str | None = None
    variables: dict[str, Any] | None = None
    operation_name: str | None = Field(default=None, alias="operationName")
