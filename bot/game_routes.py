"""
Game routes — the token tracker's slash commands wired onto the router.

Route tree (mirrors bot/commands.py):
  /tokens
  /list characters | players
  /gm game init | info
  /gm assign character <user> <character>
  /gm assign tokens <character> <tokens>
  /gm create character <name>

Autocomplete answers the `character` option of /gm assign. The character
select and the "Create character" button on /list characters are
component routes; the button opens a modal handled by a modal route.

Handlers read the current game and interaction from the request context;
the entry point (bot/interactions.py) resolves the game before dispatch.
"""

import logging
from typing import List, Optional, Tuple

import discord
from pydantic import StrictStr

from models.game import Game, GameCharacter
from models.options import IntegerOption, StringOption, UserOption, find_focused
from models.responses import (
    action_row,
    autocomplete,
    button,
    message,
    modal,
    string_select,
    text_input,
)
from router.context import InteractionContext, RequestContext, request_context
from router.dispatcher import Router, router_root
from router.routes import define_route
from tools.game_store import GameStore

logger = logging.getLogger("GameRoutes")

CHARACTER_SELECT_ID = "character-tokens"
CREATE_CHARACTER_ID = "gm-create-character"
CHARACTER_NAME_INPUT_ID = "character-name"


class GameError(Exception):
    """A command could not be carried out for game reasons (no game, not the GM, ...)."""
    pass


def _plural_tokens(count: int) -> str:
    return f"{count} token" if count == 1 else f"{count} tokens"


def _token_line(character: GameCharacter) -> str:
    return f"- {character.display_name}: {character.tokens}"


def build_router(store: GameStore, context: Optional[InteractionContext] = None) -> Router:
    """Build the bot's router with every handler bound to `store`."""
    carrier = context or request_context

    # ------------------------------------------------------------------
    # Context helpers
    # ------------------------------------------------------------------

    def _ctx() -> RequestContext:
        return carrier.get_current()

    def _game() -> Game:
        game = _ctx().get("game")
        if game is None:
            raise GameError("No game in this server")
        return game

    def _member_id() -> Optional[str]:
        member = getattr(_ctx().interaction, "member", None)
        return member.user.id if member is not None else None

    def _require_gm() -> Game:
        game = _game()
        if not game.is_gm(_member_id()):
            raise GameError("Only the GM can do that")
        return game

    # ------------------------------------------------------------------
    # /tokens
    # ------------------------------------------------------------------

    async def show_tokens():
        game = _game()
        user_id = _member_id()

        if game.is_gm(user_id):
            characters = await store.list_characters(game.id)
            if not characters:
                return message("No characters in this game yet", ephemeral=True)
            return message("\n".join(_token_line(c) for c in characters), ephemeral=True)

        character = await store.character_for_user(game.id, user_id)
        if character is None:
            raise GameError("You don't have a character in this game")
        return message(
            f"{character.display_name} has {_plural_tokens(character.tokens)}!",
            ephemeral=True,
        )

    # ------------------------------------------------------------------
    # /list
    # ------------------------------------------------------------------

    async def list_characters():
        game = _game()
        characters = await store.list_characters(game.id)
        if not characters:
            return message("No characters in this game yet", ephemeral=True)

        rows = [
            action_row(
                string_select(
                    CHARACTER_SELECT_ID,
                    [(c.display_name, c.id) for c in characters[:25]],
                    placeholder="Show a character's tokens",
                )
            )
        ]
        if game.is_gm(_member_id()):
            rows.append(
                action_row(
                    button("Create character", CREATE_CHARACTER_ID,
                           style=discord.ButtonStyle.primary, emoji="\u2795")
                )
            )
        return message(
            "- " + "\n- ".join(c.display_name for c in characters),
            components=rows,
            ephemeral=True,
        )

    async def list_players():
        game = _game()
        players = await store.list_players(game.id)
        if not players:
            return message("No players in this game yet", ephemeral=True)
        return message("- " + "\n- ".join(f"<@{p.discord_id}>" for p in players), ephemeral=True)

    # ------------------------------------------------------------------
    # /gm game
    # ------------------------------------------------------------------

    async def init_game():
        interaction = _ctx().interaction
        gm_id = _member_id()
        await store.create_game(interaction.guild_id, gm_id)
        return message(f"Started a new game run by <@{gm_id}>", ephemeral=True)

    async def game_info():
        game = _ctx().get("game")
        if game is None:
            return message("No game running in this server", ephemeral=True)
        return message(f"This server has a game run by <@{game.gm_discord_id}>", ephemeral=True)

    # ------------------------------------------------------------------
    # /gm assign, /gm create
    # ------------------------------------------------------------------

    async def assign_character(user: UserOption, character: StringOption):
        game = _require_gm()
        await store.assign_character(game.id, user.value, character.value)
        assigned = await store.get_character(character.value)
        return message(f"Assigned {assigned.display_name} to <@{user.value}>", ephemeral=True)

    async def assign_tokens(character: StringOption, tokens: IntegerOption):
        game = _require_gm()
        existing = await store.get_character(character.value)
        if existing is None or existing.game_id != game.id:
            raise GameError("Character not found!")
        updated = await store.set_tokens(existing.id, tokens.value)
        return message(
            f"{updated.display_name} has {_plural_tokens(updated.tokens)}",
            ephemeral=True,
        )

    async def create_character(name: StringOption):
        game = _require_gm()
        character = await store.create_character(game.id, name.value)
        return message(f"Created new character: {character.display_name}", ephemeral=True)

    # ------------------------------------------------------------------
    # Autocomplete
    # ------------------------------------------------------------------

    async def complete_character(*options):
        focused = find_focused(list(options))
        if focused is None or focused.name != "character":
            return autocomplete([])
        interaction = _ctx().interaction
        matches = await store.search_characters(interaction.guild_id, str(focused.value))
        logger.debug(f"Autocomplete '{focused.value}' -> {len(matches)} match(es)")
        return autocomplete([(c.display_name, c.id) for c in matches])

    # ------------------------------------------------------------------
    # Components and modals
    # ------------------------------------------------------------------

    async def show_selected_tokens(character_id: str):
        game = _game()
        character = await store.get_character(character_id)
        if character is None or character.game_id != game.id:
            raise GameError("Character not found!")
        return message(
            f"{character.display_name} has {_plural_tokens(character.tokens)}",
            ephemeral=True,
        )

    async def open_create_character_modal():
        _require_gm()
        return modal(
            CREATE_CHARACTER_ID,
            "Create a character",
            [text_input(CHARACTER_NAME_INPUT_ID, "Character name", required=True, max_length=100)],
        )

    async def list_characters_component(*values: str):
        """Components on the /list characters reply: the select and the create button."""
        custom_id = _ctx().interaction.data.custom_id
        if custom_id == CHARACTER_SELECT_ID:
            if len(values) != 1:
                raise GameError("Select exactly one character")
            return await show_selected_tokens(values[0])
        if custom_id == CREATE_CHARACTER_ID:
            return await open_create_character_modal()
        raise GameError(f"Unknown component: {custom_id}")

    async def create_character_from_modal(name: str):
        game = _require_gm()
        character = await store.create_character(game.id, name)
        return message(f"Created new character: {character.display_name}", ephemeral=True)

    return router_root(
        application_cmds=[
            define_route("tokens", Tuple[()], show_tokens),
            define_route("list", None, [
                define_route("characters", Tuple[()], list_characters),
                define_route("players", Tuple[()], list_players),
            ]),
            define_route("gm", None, [
                define_route("game", None, [
                    define_route("init", Tuple[()], init_game),
                    define_route("info", Tuple[()], game_info),
                ]),
                define_route("assign", None, [
                    define_route("character", Tuple[UserOption, StringOption], assign_character),
                    define_route("tokens", Tuple[StringOption, IntegerOption], assign_tokens),
                ]),
                define_route("create", None, [
                    define_route("character", Tuple[StringOption], create_character),
                ]),
            ]),
        ],
        component_cmds=[
            define_route("list characters", List[StrictStr], list_characters_component),
            define_route(CHARACTER_SELECT_ID, Tuple[StrictStr], show_selected_tokens),
            define_route(CREATE_CHARACTER_ID, Tuple[()], open_create_character_modal),
        ],
        autocomplete_cmds=[
            define_route("gm", None, [
                define_route("assign", None, [
                    define_route("character", None, complete_character),
                    define_route("tokens", None, complete_character),
                ]),
            ]),
        ],
        modal_submit_cmds=[
            define_route(CREATE_CHARACTER_ID, Tuple[StrictStr], create_character_from_modal),
        ],
        context=carrier,
    )
