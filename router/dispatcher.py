"""
Router — dispatches one parsed Interaction to exactly one leaf handler.

Four route tables, one per interaction kind that carries a name:
application commands and autocomplete walk the option tree recursively;
message components and modal submits are a single lookup. Pings are
answered directly. Every handler runs inside the request context carrier,
so `current_context()` works anywhere below the dispatch call.

Usage:
    router = router_root(application_cmds=[define_route("tokens", None, show_tokens)])
    response = await router(interaction, get_context=lambda: {"game": game})
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, Union

from models.interactions import (
    ApplicationCommandInteraction,
    AutocompleteInteraction,
    MessageComponentInteraction,
    ModalSubmitInteraction,
    PingInteraction,
)
from models.responses import RESPONSE_TYPES, AutocompleteResponse, pong
from router.context import InteractionContext, RequestContext, request_context
from router.errors import RouteConfigError, RouteResponseError, RouterError
from router.routes import Route, RouteTable

logger = logging.getLogger("Router")

ContextBuilder = Callable[[], Union[Optional[Mapping[str, Any]], Awaitable[Optional[Mapping[str, Any]]]]]


class Router:
    """Dispatch entry point over the four route tables.

    Args:
        application_cmds: Routes for slash commands.
        component_cmds: Routes for buttons/selects, keyed by originating
            command name or custom_id.
        autocomplete_cmds: Routes answering autocomplete queries.
        modal_submit_cmds: Routes for modal submissions, keyed by custom_id.
        context: Carrier the request context is set on. Defaults to the
            module-level `request_context`.
    """

    def __init__(
        self,
        application_cmds: Sequence[Route] = (),
        component_cmds: Sequence[Route] = (),
        autocomplete_cmds: Sequence[Route] = (),
        modal_submit_cmds: Sequence[Route] = (),
        context: Optional[InteractionContext] = None,
    ):
        self.application = RouteTable(application_cmds)
        self.components = RouteTable(component_cmds)
        self.autocomplete = RouteTable(autocomplete_cmds)
        self.modals = RouteTable(modal_submit_cmds)
        _require_leaves("component", self.components)
        _require_leaves("modal", self.modals)
        self.context = context or request_context
        logger.info(
            f"Router ready: {len(self.application)} commands, "
            f"{len(self.components)} components, {len(self.autocomplete)} autocomplete, "
            f"{len(self.modals)} modals"
        )

    async def __call__(self, interaction: Any, get_context: Optional[ContextBuilder] = None) -> Any:
        return await self.dispatch(interaction, get_context)

    async def dispatch(self, interaction: Any, get_context: Optional[ContextBuilder] = None) -> Any:
        """Route one interaction and return the handler's response (or None).

        `get_context` is called once per request (pings excepted) and its
        mapping is merged into the RequestContext next to the interaction.
        Any RouterError raised along the way aborts the request and
        propagates to the caller unchanged.
        """
        if isinstance(interaction, PingInteraction):
            logger.debug("Ping -> pong")
            return pong()

        extras = await _build_extras(get_context)
        ctx = RequestContext(interaction=interaction, **extras)
        response = await self.context.run(ctx, self._route, interaction)
        if response is not None and not isinstance(response, RESPONSE_TYPES):
            raise RouteResponseError(
                f"Handler returned {type(response).__name__}, expected an interaction response or None"
            )
        return response

    async def _route(self, interaction: Any) -> Any:
        if isinstance(interaction, ApplicationCommandInteraction):
            data = interaction.data
            logger.debug(f"Command '{data.name}' in guild {interaction.guild_id}")
            route = self.application.lookup(data.name)
            return await route.invoke(data.options)

        if isinstance(interaction, MessageComponentInteraction):
            name = interaction.origin_name
            logger.debug(f"Component '{name}' (custom_id={interaction.data.custom_id})")
            route = self.components.lookup(name)
            return await route.invoke(interaction.data.values)

        if isinstance(interaction, AutocompleteInteraction):
            data = interaction.data
            logger.debug(f"Autocomplete for '{data.name}'")
            route = self.autocomplete.lookup(data.name)
            result = await route.invoke(data.options)
            if not isinstance(result, AutocompleteResponse):
                raise RouteResponseError(
                    f"Autocomplete handler for '{data.name}' returned "
                    f"{type(result).__name__}, expected AutocompleteResponse"
                )
            return result

        if isinstance(interaction, ModalSubmitInteraction):
            custom_id = interaction.data.custom_id
            logger.debug(f"Modal submit '{custom_id}'")
            route = self.modals.lookup(custom_id)
            return await route.invoke(interaction.values)

        raise RouterError(f"Unsupported interaction: {type(interaction).__name__}")


def _require_leaves(kind: str, table: RouteTable) -> None:
    # Components and modals are matched by a single name, never walked
    for name in table:
        if table[name].is_branch:
            raise RouteConfigError(f"{kind} route '{name}' must be a leaf, not a branch")


async def _build_extras(get_context: Optional[ContextBuilder]) -> Mapping[str, Any]:
    if get_context is None:
        return {}
    extras = get_context()
    if inspect.isawaitable(extras):
        extras = await extras
    if extras is None:
        return {}
    if not isinstance(extras, Mapping):
        raise TypeError(f"Context builder must return a mapping, got {type(extras).__name__}")
    if "interaction" in extras:
        raise ValueError("Context builder may not override 'interaction'")
    return extras


def router_root(
    application_cmds: Sequence[Route] = (),
    component_cmds: Sequence[Route] = (),
    autocomplete_cmds: Sequence[Route] = (),
    modal_submit_cmds: Sequence[Route] = (),
    context: Optional[InteractionContext] = None,
) -> Router:
    """Build the dispatch entry point from the four route tables."""
    return Router(
        application_cmds=application_cmds,
        component_cmds=component_cmds,
        autocomplete_cmds=autocomplete_cmds,
        modal_submit_cmds=modal_submit_cmds,
        context=context,
    )
