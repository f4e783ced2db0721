"""Transport config: protocol constants as one object, optionally loaded from env."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any

DEFAULT_BASE_PORT = 7474


@dataclass(frozen=True)
class TransportConfig:
    """
    Where to look for the companion server and how long to wait for it.
    Pass to HttpTransport(config=...); the transport itself never reads the environment.
    """

    host: str = "localhost"
    base_port: int = DEFAULT_BASE_PORT
    range_size: int = 10
    probe_timeout: float = 0.25
    max_retries: int = 20
    request_timeout: float = 10.0

    def __post_init__(self) -> None:
        if not self.host:
            raise ValueError("host must not be empty")
        if self.range_size < 1:
            raise ValueError(f"range_size must be positive, got {self.range_size}")
        if not 1 <= self.base_port <= 65535 - (self.range_size - 1):
            raise ValueError(
                f"port range {self.base_port}..{self.base_port + self.range_size - 1} is outside 1..65535"
            )
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be positive, got {self.max_retries}")
        if not (self.probe_timeout > 0 and self.request_timeout > 0):
            raise ValueError("timeouts must be positive")

    @classmethod
    def load_from_env(cls, prefix: str = "SNAPRPC_", **defaults: Any) -> TransportConfig:
        """
        Build from os.environ: SNAPRPC_BASE_PORT=9000 -> base_port=9000.
        Keys not matching a field are ignored; values are coerced to the field type.
        """
        types = {f.name: f.type for f in fields(cls)}
        values: dict[str, Any] = dict(defaults)
        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue
            name = key[len(prefix):].lower()
            if name in types:
                values[name] = _coerce(name, value, types[name])
        return cls(**values)


def _coerce(name: str, raw: str, type_name: Any) -> Any:
    # Annotations are strings under `from __future__ import annotations`.
    converter = {"int": int, "float": float, "str": str}.get(str(type_name), str)
    try:
        return converter(raw.strip())
    except ValueError as e:
        raise ValueError(f"invalid value for {name}: {raw!r}") from e
