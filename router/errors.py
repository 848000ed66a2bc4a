"""
Router Error Types — Structured exception hierarchy.

Lets the caller of the dispatch entry point tell a malformed payload
(reject at the transport) apart from a command that reached the router
but could not be routed or validated (answer with a failure message).
Nothing here is retried by the router.
"""

from typing import Any, Dict, List, Optional


class RouterError(Exception):
    """Base class for all routing errors."""
    pass


class InteractionParseError(RouterError):
    """Inbound payload is not a known interaction shape. Reject at the transport."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class OptionValidationError(RouterError):
    """Command options do not match the shape a route declared."""

    def __init__(
        self,
        message: str,
        path: str = "",
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


class RouteNotFoundError(RouterError):
    """No route is registered for the resolved name at some level."""

    def __init__(self, name: str, path: str = ""):
        where = f" under '{path}'" if path else ""
        super().__init__(f"Route not found: '{name}'{where}")
        self.name = name
        self.path = path


class RouteResponseError(RouterError):
    """A handler returned a response of the wrong kind for its table."""
    pass


class DuplicateRouteError(RouterError):
    """Two sibling routes share a name. Raised while building route tables."""

    def __init__(self, name: str):
        super().__init__(f"Duplicate route name among siblings: '{name}'")
        self.name = name


class ContextMisuseError(RouterError):
    """Request context read outside an active run. A programming error, not a data error."""
    pass


class RouteConfigError(RouterError):
    """A route was registered where it cannot be dispatched. Raised while building the router."""
    pass
