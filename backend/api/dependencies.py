"""
Dependency injection for the API service.
Provides the flow dispatcher and capability cache to route handlers.
"""
from __future__ import annotations

from flow.dispatcher import FlowDispatcher
from ingest.capability_cache import CapabilityCache

# Module-level singletons, initialized at startup
_dispatcher: FlowDispatcher | None = None
_capabilities: CapabilityCache | None = None


def init_dependencies(dispatcher: FlowDispatcher, capabilities: CapabilityCache) -> None:
    """Initialize module-level singletons. Called once at startup."""
    global _dispatcher, _capabilities
    _dispatcher = dispatcher
    _capabilities = capabilities


def get_dispatcher() -> FlowDispatcher:
    """FastAPI dependency: returns the shared FlowDispatcher."""
    if _dispatcher is None:
        raise RuntimeError("FlowDispatcher not initialized; call init_dependencies first")
    return _dispatcher


def get_capabilities() -> CapabilityCache:
    """FastAPI dependency: returns the shared CapabilityCache."""
    if _capabilities is None:
        raise RuntimeError("CapabilityCache not initialized; call init_dependencies first")
    return _capabilities
