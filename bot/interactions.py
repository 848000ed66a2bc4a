"""
Interaction entry point — what the webhook transport calls per request.

The transport verifies the signature, then hands the decoded body to
InteractionHandler.handle(). Parsing failures propagate so the transport
can answer 400; routing and game failures are logged and answered with an
ephemeral message so the user sees something instead of "interaction failed".
"""

import logging
from typing import Any, Dict, Optional, Union

from models.interactions import (
    AutocompleteInteraction,
    parse_interaction,
    parse_interaction_json,
)
from models.responses import autocomplete, message, serialize_response
from router.dispatcher import Router
from router.errors import InteractionParseError, OptionValidationError, RouteNotFoundError, RouterError
from tools.game_store import GameStore, GameStoreError
from bot.game_routes import GameError

logger = logging.getLogger("Interactions")

GENERIC_FAILURE = "Something went wrong handling that command."


class InteractionHandler:
    """Parse, build request context, dispatch, serialize.

    Args:
        router: Router built by bot.game_routes.build_router().
        store: Store used to resolve the server's current game.
    """

    def __init__(self, router: Router, store: GameStore):
        self.router = router
        self.store = store

    async def handle(self, payload: Union[Dict[str, Any], str, bytes]) -> Optional[Dict[str, Any]]:
        """Handle one inbound interaction.

        Returns the JSON-ready response body, or None when the handler
        chose not to reply.

        Raises:
            InteractionParseError: payload is not a valid interaction.
        """
        if isinstance(payload, (str, bytes)):
            interaction = parse_interaction_json(payload)
        else:
            interaction = parse_interaction(payload)

        # Not called for pings; they carry no guild
        async def get_context():
            return {"game": await self.store.get_game(interaction.guild_id)}

        try:
            response = await self.router(interaction, get_context)
        except InteractionParseError:
            raise
        except (GameError, GameStoreError) as e:
            logger.info(f"Command refused: {e}")
            response = _failure(interaction, str(e))
        except RouteNotFoundError as e:
            logger.warning(f"Unrouted interaction: {e}")
            response = _failure(interaction, GENERIC_FAILURE)
        except OptionValidationError as e:
            logger.warning(f"Invalid options for '{e.path}': {e.errors}")
            response = _failure(interaction, GENERIC_FAILURE)
        except RouterError as e:
            logger.error(f"Dispatch failed: {e}")
            response = _failure(interaction, GENERIC_FAILURE)

        if response is None:
            return None
        return serialize_response(response)


def _failure(interaction: Any, text: str) -> Any:
    # Discord only accepts choices in reply to an autocomplete query
    if isinstance(interaction, AutocompleteInteraction):
        return autocomplete([])
    return message(text, ephemeral=True)
