from __future__ import annotations

from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from graphql_bridge.pipeline import GraphQLBridge
from graphql_bridge.runtime import Runtime, RuntimeMode
from graphql_bridge.services.executor import Executor, create_executor


FALLBACK_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-Id"] = request_id
        return response


def create_app(runtime: Runtime, executor: Executor | None = None) -> FastAPI:
    runtime.require(RuntimeMode.LOCAL_HTTP)
    bridge = GraphQLBridge(runtime, executor or create_executor())

    app = FastAPI(title="GraphQL Bridge")
    app.state.bridge = bridge

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=runtime.settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    async def handle(request: Request) -> Response:
        request_id = getattr(request.state, "request_id", "")
        return await bridge.handle(request, request_id=request_id)

    app.add_api_route("/graphql", handle, methods=["GET", "POST"])
    # Keep a prefixed route for serverless platforms that preserve `/api` in the path.
    app.add_api_route("/api/graphql", handle, methods=["GET", "POST"], include_in_schema=False)
    app.add_api_route("/health", handle, methods=["GET"])
    app.add_api_route("/api/health", handle, methods=["GET"], include_in_schema=False)
    # Unknown paths and methods get the same error bodies as the function runtime.
    app.add_api_route("/{path:path}", handle, methods=FALLBACK_METHODS, include_in_schema=False)

    return app
