from __future__ import annotations

import json
import logging
import time
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from graphql_bridge.errors import (
    BridgeError,
    ExecutorFailure,
    InvalidGraphQLRequest,
    MethodNotAllowed,
    UnsupportedMediaType,
)
from graphql_bridge.models import CanonicalRequest, CanonicalResponse, GraphQLParams, HttpMethod
from graphql_bridge.runtime import Runtime
from graphql_bridge.services.executor import Executor


logger = logging.getLogger(__name__)

GRAPHQL_PATH = "/graphql"
HEALTH_PATH = "/health"
# Serverless platforms may keep the `/api` prefix in the path.
API_PREFIX = "/api"


def log_json(event: str, **fields: object) -> None:
    payload = {"event": event, **fields}
    logger.info(json.dumps(payload, separators=(",", ":"), default=str))


def route_path(path: str) -> str:
    if path == API_PREFIX or path.startswith(f"{API_PREFIX}/"):
        path = path[len(API_PREFIX):]
    return path.rstrip("/") or "/"


def _decode_json(raw: str | bytes, what: str) -> Any:
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidGraphQLRequest(f"{what} is not valid JSON.") from exc


def _build_params(fields: dict[str, Any]) -> GraphQLParams:
    try:
        return GraphQLParams.model_validate(fields)
    except ValidationError as exc:
        location = ".".join(str(part) for part in exc.errors()[0].get("loc", ()))
        raise InvalidGraphQLRequest(f"Invalid GraphQL request field: {location or 'body'}.") from exc


def _params_from_query_string(query_string: dict[str, str]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if "query" in query_string:
        fields["query"] = query_string["query"]
    if query_string.get("operationName"):
        fields["operationName"] = query_string["operationName"]
    if query_string.get("variables"):
        fields["variables"] = _decode_json(query_string["variables"], "variables")
    return fields


def extract_params(request: CanonicalRequest) -> GraphQLParams:
    if request.method is HttpMethod.GET:
        params = _build_params(_params_from_query_string(request.query_string))
    elif request.content_type == "application/json":
        document = _decode_json(request.body or b"", "Request body")
        if isinstance(document, list):
            raise InvalidGraphQLRequest("Batched GraphQL requests are not supported.")
        if not isinstance(document, dict):
            raise InvalidGraphQLRequest("Request body must be a JSON object.")
        params = _build_params(document)
    elif request.content_type == "application/graphql":
        fields = _params_from_query_string(request.query_string)
        try:
            fields["query"] = (request.body or b"").decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidGraphQLRequest("Request body is not valid UTF-8.") from exc
        params = _build_params(fields)
    else:
        raise UnsupportedMediaType(
            f"Unsupported content type {request.content_type or '(none)'!r}; "
            "use application/json or application/graphql."
        )

    if not params.query or not params.query.strip():
        raise InvalidGraphQLRequest("Must provide query string.")
    return params


class RequestPipeline:
    def __init__(self, executor: Executor, mode: str) -> None:
        self.executor = executor
        self.mode = mode

    async def _execute_graphql(self, request: CanonicalRequest) -> tuple[CanonicalResponse, str | None]:
        params = extract_params(request)
        try:
            document = await self.executor.execute(params.query, params.variables, params.operation_name)
        except ExecutorFailure:
            raise
        except Exception as exc:
            raise ExecutorFailure(f"GraphQL execution failed: {exc}") from exc

        try:
            response = CanonicalResponse.json(200, document)
        except (TypeError, ValueError) as exc:
            raise ExecutorFailure(f"GraphQL result is not JSON serializable: {exc}") from exc
        return response, params.operation_name

    async def dispatch(self, request: CanonicalRequest) -> tuple[CanonicalResponse, str | None]:
        path = route_path(request.path)
        if path == GRAPHQL_PATH:
            return await self._execute_graphql(request)
        if path == HEALTH_PATH:
            if request.method is not HttpMethod.GET:
                raise MethodNotAllowed("Health check only supports GET.")
            return CanonicalResponse.json(200, {"status": "ok", "mode": self.mode}), None
        return CanonicalResponse.error(404, "Not Found"), None

    async def handle(self, request: CanonicalRequest, request_id: str = "") -> CanonicalResponse:
        request_started = time.perf_counter()
        operation_name: str | None = None
        error: str | None = None

        try:
            response, operation_name = await self.dispatch(request)
        except ExecutorFailure as exc:
            logger.error("Executor failure for request %s", request_id, exc_info=exc)
            error = exc.message
            response = CanonicalResponse.error(exc.status_code, "GraphQL execution failed.")
        except BridgeError as exc:
            error = exc.message
            response = CanonicalResponse.error(exc.status_code, exc.message)

        total_ms = int((time.perf_counter() - request_started) * 1000)
        log_json(
            "graphql_request",
            request_id=request_id,
            mode=self.mode,
            method=request.method.value,
            path=request.path,
            operation_name=operation_name,
            status_code=response.status_code,
            total_ms=total_ms,
            error=error,
        )
        return response


class GraphQLBridge:
    """Normalize, execute and materialize one invocation for the bound runtime."""

    def __init__(self, runtime: Runtime, executor: Executor) -> None:
        self.runtime = runtime
        self.pipeline = RequestPipeline(executor, mode=runtime.mode.value)

    async def handle(self, raw_event: Any, request_id: str | None = None) -> Any:
        request_id = request_id or str(uuid4())
        try:
            request = await self.runtime.normalizer.normalize(raw_event)
        except BridgeError as exc:
            log_json(
                "graphql_request",
                request_id=request_id,
                mode=self.runtime.mode.value,
                status_code=exc.status_code,
                error=exc.message,
            )
            return self.runtime.materializer.materialize(CanonicalResponse.error(exc.status_code, exc.message))

        response = await self.pipeline.handle(request, request_id=request_id)
        return self.runtime.materializer.materialize(response)
