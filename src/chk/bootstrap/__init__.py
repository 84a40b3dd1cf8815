"""Application wiring."""

from .bootstrap import AppContainer, bootstrap, build_runner, build_snapshot_store

__all__ = ["AppContainer", "bootstrap", "build_runner", "build_snapshot_store"]
