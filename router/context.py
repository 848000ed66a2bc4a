"""
InteractionContext — request-scoped values for handlers.

The router runs every handler of one request inside `carrier.run(...)`.
Handlers call `current_context()` to get the interaction that triggered
them plus whatever the caller resolved for that request (the current game,
for example) without the router threading it through every call.

Backed by contextvars: each asyncio task gets its own copy of the context,
so concurrent requests never see each other's values.
"""

import contextvars
import logging
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Iterator, Optional, TypeVar

from pydantic import BaseModel

from router.errors import ContextMisuseError

logger = logging.getLogger("InteractionContext")

T = TypeVar("T")


class RequestContext(BaseModel):
    """Per-request values: the interaction plus caller-supplied extras.

    Extras are plain attributes (`ctx.game`) thanks to extra="allow".
    """

    interaction: Any

    model_config = {"extra": "allow", "frozen": True, "arbitrary_types_allowed": True}

    def get(self, key: str, default: Any = None) -> Any:
        """Look up an extra by name, returning `default` if the caller did not supply it."""
        extras = self.model_extra or {}
        return extras.get(key, default)


class InteractionContext:
    """Carrier for one kind of request-scoped value.

    Args:
        name: Label for the underlying ContextVar and for logging.
    """

    def __init__(self, name: str = "request_context"):
        self.name = name
        self._var: contextvars.ContextVar = contextvars.ContextVar(name)

    async def run(self, value: Any, body: Callable[..., Awaitable[T]], *args: Any) -> T:
        """Await `body(*args)` with `value` as the current context.

        The value stays current across every await inside `body`. The
        previous value (if any) is restored afterwards, so nested runs
        shadow the outer one only for their own extent.
        """
        token = self._var.set(value)
        try:
            return await body(*args)
        finally:
            self._var.reset(token)

    @contextmanager
    def scope(self, value: Any) -> Iterator[Any]:
        """Synchronous form of run(): `with carrier.scope(ctx): ...`."""
        token = self._var.set(value)
        try:
            yield value
        finally:
            self._var.reset(token)

    def get_current(self) -> Any:
        """Return the current value. Raises ContextMisuseError outside a run."""
        try:
            return self._var.get()
        except LookupError:
            logger.error(f"[{self.name}] context read outside an active run")
            raise ContextMisuseError(
                f"No active '{self.name}': get_current() called outside run()"
            ) from None

    def get_optional(self) -> Optional[Any]:
        """Return the current value, or None outside a run."""
        return self._var.get(None)

    @property
    def active(self) -> bool:
        return self.get_optional() is not None


# Default carrier used by router_root() when none is passed in
request_context = InteractionContext("request_context")


def current_context() -> RequestContext:
    """Shortcut for handlers: the RequestContext of the request being dispatched."""
    return request_context.get_current()
