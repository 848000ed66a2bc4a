"""
Routes — named handlers arranged in a tree that mirrors a slash command.

A leaf route pairs a name with a handler and the argument shape it
expects. A branch route pairs a name with a RouteTable of child routes;
`gm` -> `assign` -> `character` is two branches and a leaf. Tables are
built once at start-up and are read-only afterwards.
"""

import inspect
import logging
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from pydantic import TypeAdapter, ValidationError

from models.options import ContainerOption, is_container
from router.errors import DuplicateRouteError, OptionValidationError, RouteNotFoundError

logger = logging.getLogger("Routes")

Handler = Callable[..., Union[Awaitable[Any], Any]]

# A branch with no declared schema expects exactly one subcommand or group
_single_container = TypeAdapter(Tuple[ContainerOption])


class RouteTable:
    """Read-only name -> Route lookup built from an ordered list of siblings.

    Raises DuplicateRouteError if two siblings share a name.
    """

    def __init__(self, routes: Iterable["Route"] = ()):
        table = {}
        for route in routes:
            if not isinstance(route, Route):
                raise TypeError(f"RouteTable expects Route objects, got {type(route).__name__}")
            if route.name in table:
                raise DuplicateRouteError(route.name)
            table[route.name] = route
        self._routes = MappingProxyType(table)

    def get(self, name: str) -> Optional["Route"]:
        return self._routes.get(name)

    def __getitem__(self, name: str) -> "Route":
        return self._routes[name]

    def __contains__(self, name: object) -> bool:
        return name in self._routes

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    @property
    def names(self) -> List[str]:
        return list(self._routes)

    def lookup(self, name: str, path: str = "") -> "Route":
        """Like get(), but raises RouteNotFoundError for a missing name."""
        route = self._routes.get(name)
        if route is None:
            logger.warning(f"No route for '{name}'" + (f" under '{path}'" if path else ""))
            raise RouteNotFoundError(name, path)
        return route


class Route:
    """One node of the route tree.

    Args:
        name: Path segment this route answers to (command, subcommand or
            group name, component custom_id, modal custom_id).
        schema: Type the incoming arguments are validated against with a
            pydantic TypeAdapter, or None for the default.
        handler: Callable invoked for a leaf route.
        children: Child routes for a branch route.
    """

    __slots__ = ("name", "schema", "handler", "table", "_adapter")

    def __init__(
        self,
        name: str,
        schema: Any = None,
        handler: Optional[Handler] = None,
        children: Optional[Sequence["Route"]] = None,
    ):
        if (handler is None) == (children is None):
            raise TypeError(f"Route '{name}' needs exactly one of handler or children")
        if handler is not None and not callable(handler):
            raise TypeError(f"Route '{name}' handler is not callable")

        self.name = name
        self.schema = schema
        self.handler = handler
        self.table = RouteTable(children) if children is not None else None

        if schema is not None:
            self._adapter = TypeAdapter(schema)
        elif self.table is not None:
            self._adapter = _single_container
        else:
            self._adapter = None

    @property
    def is_branch(self) -> bool:
        return self.table is not None

    def validate(self, args: Sequence[Any], path: str = "") -> Any:
        """Validate the argument list against this route's schema.

        Leaf routes without a schema receive their arguments unchanged.
        """
        if self._adapter is None:
            return list(args)
        try:
            return self._adapter.validate_python(args)
        except ValidationError as e:
            where = path or self.name
            raise OptionValidationError(
                f"Options for '{where}' do not match: {e.error_count()} error(s)",
                path=where,
                errors=e.errors(include_url=False),
            ) from e

    async def invoke(self, args: Sequence[Any], path: str = "") -> Any:
        """Validate `args` and run this route.

        A leaf calls its handler and returns the result. A branch takes the
        single container option, finds the child named after it and invokes
        that child with the container's own options.
        """
        path = f"{path} {self.name}".strip()
        validated = self.validate(args, path)

        if self.table is None:
            logger.debug(f"Invoking handler for '{path}'")
            return await _call(self.handler, validated)

        container = validated[0] if validated else None
        if not is_container(container):
            raise OptionValidationError(
                f"Branch '{path}' expects a subcommand or group as its first option",
                path=path,
            )
        child = self.table.lookup(container.name, path)
        return await child.invoke(container.options, path)

    def __repr__(self) -> str:
        kind = f"branch[{', '.join(self.table.names)}]" if self.table is not None else "leaf"
        return f"Route({self.name!r}, {kind})"


async def _call(handler: Handler, validated: Any) -> Any:
    if isinstance(validated, (list, tuple)):
        result = handler(*validated)
    else:
        result = handler(validated)
    if inspect.isawaitable(result):
        result = await result
    return result


def define_route(
    name: str,
    schema: Any,
    handler_or_children: Union[Handler, Sequence[Route]],
) -> Route:
    """Build a route for the static route tree.

    `handler_or_children` is either a handler (leaf route) or a list of
    child routes (branch route). For a leaf, `schema` describes the
    positional arguments, e.g. `Tuple[UserOption, StringOption]`; the
    validated value is spread into the handler if it is a list or tuple,
    passed as one argument otherwise. `schema=None` passes arguments
    through unchanged on a leaf and expects a single subcommand or group
    on a branch.
    """
    if callable(handler_or_children):
        return Route(name, schema, handler=handler_or_children)
    return Route(name, schema, children=list(handler_or_children))
