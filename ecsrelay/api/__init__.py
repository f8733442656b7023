"""REST ingest layer for the ECS alert relay.

Exposes:
    create_app -- FastAPI application factory.
    build_app  -- Alias for create_app (used by ecsrelay.app bootstrap).
"""

from ecsrelay.api.app import create_app

build_app = create_app

__all__ = ["build_app", "create_app"]
