"""Port discovery: which port to probe on a given attempt."""
from __future__ import annotations

from typing import Iterator, Protocol, runtime_checkable


@runtime_checkable
class PortDiscovery(Protocol):
    """How to pick the candidate port for a discovery attempt."""

    def candidate(self, attempt: int) -> int:
        ...


def candidate_port(base_port: int, attempt: int, range_size: int = 10) -> int:
    """base_port + (attempt mod range_size)."""
    if attempt < 0:
        raise ValueError(f"attempt must be >= 0, got {attempt}")
    return base_port + (attempt % range_size)


class RangeDiscovery:
    """Cycle through range_size consecutive ports starting at base_port."""

    def __init__(self, base_port: int, range_size: int = 10) -> None:
        if range_size < 1:
            raise ValueError(f"range_size must be positive, got {range_size}")
        self.base_port = base_port
        self.range_size = range_size

    def candidate(self, attempt: int) -> int:
        return candidate_port(self.base_port, attempt, self.range_size)

    def ports(self, attempts: int) -> Iterator[int]:
        """Ports probed by the first `attempts` attempts, in order."""
        for attempt in range(attempts):
            yield self.candidate(attempt)

    def __contains__(self, port: object) -> bool:
        return isinstance(port, int) and self.base_port <= port < self.base_port + self.range_size

    def __repr__(self) -> str:
        return f"RangeDiscovery(base_port={self.base_port}, range_size={self.range_size})"
