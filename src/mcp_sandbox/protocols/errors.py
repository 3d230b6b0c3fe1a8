"""Shared error types for the protocol layer."""

from __future__ import annotations


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""


class ProtocolFormatError(ProtocolError):
    """A request is missing a required field or has a malformed one."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class TransportError(ProtocolError):
    """Writing to, or closing, one push client failed."""

    def __init__(self, client_id: str, detail: str = "") -> None:
        self.client_id = client_id
        self.detail = detail
        super().__init__(f"Push client {client_id} failed" + (f": {detail}" if detail else ""))


class ServerStateError(ProtocolError):
    """An operation needs a bound executor but the server has none."""

    def __init__(self, operation: str, state: str) -> None:
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while server is {state}. Call bind() first.")
