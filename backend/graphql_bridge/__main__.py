"""
Process entry point.

Selects the runtime mode once, then either serves the API over a local
HTTP listener or runs a single function invocation read from a file or
stdin (useful for exercising the function path without a function host).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

import uvicorn

from graphql_bridge.errors import ProcessStartupFailure
from graphql_bridge.function_handler import create_handler
from graphql_bridge.runtime import Runtime, RuntimeMode, get_runtime
from graphql_bridge.server import create_app


logger = logging.getLogger("graphql_bridge")


def _serve(runtime: Runtime) -> None:
    app = create_app(runtime)
    uvicorn.run(
        app,
        host=runtime.settings.host,
        port=runtime.settings.port,
        log_level=runtime.settings.log_level,
    )


def _invoke_once(runtime: Runtime, event_path: str | None, pretty: bool) -> None:
    handler = create_handler(runtime)
    if event_path:
        with open(event_path, encoding="utf-8") as event_file:
            raw_event = event_file.read()
    else:
        raw_event = sys.stdin.read()

    try:
        event = json.loads(raw_event)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invocation payload is not valid JSON: {exc}") from exc

    response = handler(event, None)
    print(json.dumps(response, indent=2 if pretty else None))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="graphql_bridge", description="Serve the GraphQL API.")
    parser.add_argument(
        "--event",
        "-e",
        help="Invocation payload file (function_invocation mode only; defaults to stdin)",
    )
    parser.add_argument("--pretty", "-p", action="store_true", help="Pretty print invocation output")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    try:
        runtime = get_runtime()
        if runtime.mode is RuntimeMode.LOCAL_HTTP:
            _serve(runtime)
        else:
            _invoke_once(runtime, args.event, args.pretty)
    except ProcessStartupFailure as exc:
        logger.critical("Startup failed: %s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
