from __future__ import annotations


class BridgeError(Exception):
    """Failure confined to a single invocation, reported as a JSON error body."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedPayload(BridgeError):
    status_code = 400


class InvalidGraphQLRequest(BridgeError):
    status_code = 400


class MethodNotAllowed(BridgeError):
    status_code = 405


class UnsupportedMediaType(BridgeError):
    status_code = 415


class ExecutorFailure(BridgeError):
    status_code = 500


class ProcessStartupFailure(RuntimeError):
    """Runtime mode or adapter wiring could not be established."""
