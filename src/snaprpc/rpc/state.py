"""Connection state owned by a single transport."""
from __future__ import annotations


class ConnectionState:
    """
    Bound port (None while unbound) and the discovery retry counter.
    Only the owning transport mutates it; everyone else reads via properties.
    """

    def __init__(self) -> None:
        self._bound_port: int | None = None
        self._retry_count = 0

    @property
    def bound_port(self) -> int | None:
        return self._bound_port

    @property
    def retry_count(self) -> int:
        return self._retry_count

    @property
    def is_bound(self) -> bool:
        return self._bound_port is not None

    def bind(self, port: int) -> None:
        """Server confirmed live on port: bind and restart the retry cycle."""
        self._retry_count = 0
        self._bound_port = port

    def unbind(self) -> None:
        self._bound_port = None

    def record_failure(self) -> int:
        """Count a failed probe; returns the new counter."""
        self._retry_count += 1
        return self._retry_count

    def reset_retries(self) -> None:
        self._retry_count = 0

    def __repr__(self) -> str:
        return f"ConnectionState(bound_port={self._bound_port!r}, retry_count={self._retry_count})"
