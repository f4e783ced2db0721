from snaprpc.discovery.protocol import PortDiscovery, RangeDiscovery, candidate_port

__all__ = ["PortDiscovery", "RangeDiscovery", "candidate_port"]
