import asyncio

import pytest

from graphql_bridge.errors import ExecutorFailure
from graphql_bridge.services.executor import GraphQLExecutor, create_executor
from graphql_bridge.services.schema import describe_system


class BrokenSchema:
    async def execute(self, query, variable_values=None, operation_name=None):
        raise RuntimeError("schema unavailable")


def run(coro):
    return asyncio.run(coro)


def test_executes_sys_info():
    result = run(create_executor().execute("{ sysInfo }"))
    assert result == {"data": {"sysInfo": describe_system()}}


def test_syntax_error_is_returned_in_band():
    result = run(create_executor().execute("{ sysInfo"))

    assert result["data"] is None
    assert result["errors"][0]["message"].startswith("Syntax Error")


def test_validation_error_keeps_locations():
    result = run(create_executor().execute("{ sysInfo missing }"))

    assert result["data"] is None
    assert result["errors"][0]["locations"] == [{"line": 1, "column": 11}]


def test_schema_exception_becomes_executor_failure():
    with pytest.raises(ExecutorFailure, match="schema unavailable"):
        run(GraphQLExecutor(BrokenSchema()).execute("{ sysInfo }"))
