from __future__ import annotations

from typing import Any, Protocol

import strawberry

from graphql_bridge.errors import ExecutorFailure
from graphql_bridge.services.schema import schema as default_schema


class Executor(Protocol):
    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> dict[str, Any]: ...


class GraphQLExecutor:
    def __init__(self, schema: strawberry.Schema) -> None:
        self.schema = schema

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> dict[str, Any]:
        try:
            result = await self.schema.execute(
                query,
                variable_values=variables,
                operation_name=operation_name,
            )
        except Exception as exc:
            raise ExecutorFailure(f"GraphQL execution failed: {exc}") from exc

        document: dict[str, Any] = {"data": result.data}
        if result.errors:
            document["errors"] = [error.formatted for error in result.errors]
        if result.extensions:
            document["extensions"] = result.extensions
        return document


def create_executor() -> GraphQLExecutor:
    return GraphQLExecutor(default_schema)
