"""Both adapter pairs must hand the pipeline the same canonical request."""

import asyncio
import base64
import json

import pytest
from starlette.requests import Request

from graphql_bridge.adapters.function_invocation import (
    FunctionInvocationMaterializer,
    FunctionInvocationNormalizer,
)
from graphql_bridge.adapters.local_http import LocalHttpMaterializer, LocalHttpNormalizer
from graphql_bridge.pipeline import RequestPipeline

from conftest import StaticExecutor, invocation_event, make_settings


def starlette_request(method, path, query_string=b"", headers=(), body=b""):
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "server": ("testserver", 80),
        "root_path": "",
        "path": path,
        "raw_path": path.encode("ascii"),
        "query_string": query_string,
        "headers": [(name.encode("latin-1"), value.encode("latin-1")) for name, value in headers],
    }
    sent = False

    async def receive():
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


def normalize_both(local_request, event):
    settings = make_settings()
    local = asyncio.run(LocalHttpNormalizer(settings).normalize(local_request))
    remote = asyncio.run(FunctionInvocationNormalizer(settings).normalize(event))
    return local, remote


POST_BODY = json.dumps({"query": "query Info($x: Int) { sysInfo }", "variables": {"x": 1}})


@pytest.mark.parametrize(
    "local_request, event",
    [
        (
            lambda: starlette_request(
                "GET", "/graphql", b"query=%7B+sysInfo+%7D", headers=[("Accept", "application/json")]
            ),
            invocation_event(headers={"accept": "application/json"}),
        ),
        (
            lambda: starlette_request(
                "POST",
                "/graphql",
                headers=[("Content-Type", "application/json")],
                body=POST_BODY.encode("utf-8"),
            ),
            invocation_event(
                method="POST",
                rawQueryString="",
                headers={"Content-Type": "application/json"},
                body=base64.b64encode(POST_BODY.encode("utf-8")).decode("ascii"),
                isBase64Encoded=True,
            ),
        ),
        (
            lambda: starlette_request("POST", "/graphql", b"operationName=", body=POST_BODY.encode("utf-8")),
            invocation_event(method="POST", rawQueryString="operationName=", body=POST_BODY),
        ),
    ],
    ids=["get", "post-base64", "post-plain"],
)
def test_equivalent_inputs_normalize_identically(local_request, event):
    local, remote = normalize_both(local_request(), event)

    assert local == remote
    assert local.body == remote.body


def test_round_trip_preserves_data():
    document = {"data": {"sysInfo": "Linux", "counts": [3, 1, 2], "flag": False}}
    settings = make_settings()
    pipeline = RequestPipeline(StaticExecutor(document), mode="local_http")

    request = asyncio.run(FunctionInvocationNormalizer(settings).normalize(invocation_event()))
    canonical = asyncio.run(pipeline.handle(request))

    function_response = FunctionInvocationMaterializer(settings).materialize(canonical)
    local_response = LocalHttpMaterializer(settings).materialize(canonical)

    assert function_response["statusCode"] == 200
    assert json.loads(function_response["body"])["data"] == document["data"]
    assert local_response.status_code == 200
    assert json.loads(local_response.body)["data"] == document["data"]
