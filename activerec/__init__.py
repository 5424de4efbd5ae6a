"""Runtime core for an active-record style storage layer: clusters, connections, pinging, logging, metrics and tag parsing."""

__version__ = "0.1.0"