from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import Any

from graphql_bridge.pipeline import GraphQLBridge
from graphql_bridge.runtime import Runtime, RuntimeMode
from graphql_bridge.services.executor import Executor, create_executor


InvocationHandler = Callable[[Any, Any], dict[str, Any]]


def _invocation_request_id(event: Any, context: Any) -> str | None:
    request_id = getattr(context, "aws_request_id", None)
    if request_id:
        return str(request_id)
    if isinstance(event, Mapping):
        request_context = event.get("requestContext")
        if isinstance(request_context, Mapping) and request_context.get("requestId"):
            return str(request_context["requestId"])
    return None


def create_handler(runtime: Runtime, executor: Executor | None = None) -> InvocationHandler:
    runtime.require(RuntimeMode.FUNCTION_INVOCATION)
    bridge = GraphQLBridge(runtime, executor or create_executor())

    def handler(event: Any, context: Any = None) -> dict[str, Any]:
        """Entry point invoked by the function host once per event."""
        return asyncio.run(bridge.handle(event, request_id=_invocation_request_id(event, context)))

    return handler
