"""
End-to-end tests for the token tracker: raw payload -> InteractionHandler
-> router -> game routes -> serialized response.
"""

import asyncio

import pytest

from bot.game_routes import CHARACTER_SELECT_ID, CREATE_CHARACTER_ID, build_router
from bot.interactions import InteractionHandler

GUILD_ID = "900"
GM_ID = "100"
PLAYER_ID = "200"


@pytest.fixture
def handler(store, carrier):
    return InteractionHandler(build_router(store, context=carrier), store)


def _content(body):
    return body["data"]["content"]


def _setup_game(store, *names):
    """Create the guild's game plus characters; returns (game, [characters])."""
    async def run():
        game = await store.create_game(GUILD_ID, GM_ID)
        characters = [await store.create_character(game.id, n) for n in names]
        return game, characters
    return asyncio.run(run())


class TestGameCommands:

    def test_init_game(self, handler, store, payloads):
        body = asyncio.run(handler.handle(payloads.command("gm", [
            payloads.group("game", payloads.sub("init"))
        ])))
        assert _content(body) == f"Started a new game run by <@{GM_ID}>"
        assert body["data"]["flags"] == 64
        assert asyncio.run(store.get_game(GUILD_ID)).gm_discord_id == GM_ID

    def test_init_twice_refused(self, handler, store, payloads):
        _setup_game(store)
        body = asyncio.run(handler.handle(payloads.command("gm", [
            payloads.group("game", payloads.sub("init"))
        ])))
        assert _content(body) == "This server already has a game"

    def test_game_info(self, handler, store, payloads):
        info = payloads.command("gm", [payloads.group("game", payloads.sub("info"))])
        assert _content(asyncio.run(handler.handle(info))) == "No game running in this server"
        _setup_game(store)
        assert _content(asyncio.run(handler.handle(info))) == f"This server has a game run by <@{GM_ID}>"


class TestTokens:

    def test_no_game(self, handler, payloads):
        body = asyncio.run(handler.handle(payloads.command("tokens", [])))
        assert _content(body) == "No game in this server"

    def test_gm_sees_every_character(self, handler, store, payloads):
        game, (hadrian, thea) = _setup_game(store, "Hadrian", "Thea")
        asyncio.run(store.set_tokens(thea.id, 2))
        body = asyncio.run(handler.handle(payloads.command("tokens", [])))
        assert _content(body) == "- Hadrian: 0\n- Thea: 2"

    def test_player_sees_own_character(self, handler, store, payloads):
        game, (hadrian,) = _setup_game(store, "Hadrian")
        asyncio.run(store.assign_character(game.id, PLAYER_ID, hadrian.id))
        asyncio.run(store.set_tokens(hadrian.id, 1))
        body = asyncio.run(handler.handle(payloads.command("tokens", [], user_id=PLAYER_ID)))
        assert _content(body) == "Hadrian has 1 token!"

    def test_player_without_character(self, handler, store, payloads):
        _setup_game(store, "Hadrian")
        body = asyncio.run(handler.handle(payloads.command("tokens", [], user_id=PLAYER_ID)))
        assert _content(body) == "You don't have a character in this game"


class TestGmCommands:

    def test_assign_character(self, handler, store, payloads):
        game, (hadrian,) = _setup_game(store, "Hadrian")
        body = asyncio.run(handler.handle(payloads.command("gm", [
            payloads.group("assign", payloads.sub(
                "character",
                payloads.user("user", PLAYER_ID),
                payloads.string("character", hadrian.id),
            ))
        ])))
        assert _content(body) == f"Assigned Hadrian to <@{PLAYER_ID}>"
        assert asyncio.run(store.character_for_user(game.id, PLAYER_ID)).id == hadrian.id

    def test_assign_tokens(self, handler, store, payloads):
        game, (hadrian,) = _setup_game(store, "Hadrian")
        body = asyncio.run(handler.handle(payloads.command("gm", [
            payloads.group("assign", payloads.sub(
                "tokens",
                payloads.string("character", hadrian.id),
                payloads.integer("tokens", 4),
            ))
        ])))
        assert _content(body) == "Hadrian has 4 tokens"

    def test_assign_tokens_unknown_character(self, handler, store, payloads):
        _setup_game(store)
        body = asyncio.run(handler.handle(payloads.command("gm", [
            payloads.group("assign", payloads.sub(
                "tokens",
                payloads.string("character", "missing"),
                payloads.integer("tokens", 4),
            ))
        ])))
        assert _content(body) == "Character not found!"

    def test_only_gm_may_assign(self, handler, store, payloads):
        game, (hadrian,) = _setup_game(store, "Hadrian")
        body = asyncio.run(handler.handle(payloads.command("gm", [
            payloads.group("assign", payloads.sub(
                "tokens",
                payloads.string("character", hadrian.id),
                payloads.integer("tokens", 9),
            ))
        ], user_id=PLAYER_ID)))
        assert _content(body) == "Only the GM can do that"
        assert asyncio.run(store.get_character(hadrian.id)).tokens == 0

    def test_create_character(self, handler, store, payloads):
        game, _ = _setup_game(store)
        body = asyncio.run(handler.handle(payloads.command("gm", [
            payloads.group("create", payloads.sub("character", payloads.string("name", "hadrian")))
        ])))
        assert _content(body) == "Created new character: Hadrian"
        assert [c.name for c in asyncio.run(store.list_characters(game.id))] == ["hadrian"]


class TestList:

    def test_characters_for_gm_has_select_and_button(self, handler, store, payloads):
        _, (hadrian, thea) = _setup_game(store, "Hadrian", "Thea")
        body = asyncio.run(handler.handle(payloads.command("list", [payloads.sub("characters")])))
        assert _content(body) == "- Hadrian\n- Thea"
        select_row, button_row = body["data"]["components"]
        select = select_row["components"][0]
        assert select["custom_id"] == CHARACTER_SELECT_ID
        assert [o["value"] for o in select["options"]] == [hadrian.id, thea.id]
        assert button_row["components"][0]["custom_id"] == CREATE_CHARACTER_ID

    def test_characters_for_player_has_no_button(self, handler, store, payloads):
        _setup_game(store, "Hadrian")
        body = asyncio.run(handler.handle(
            payloads.command("list", [payloads.sub("characters")], user_id=PLAYER_ID)))
        assert len(body["data"]["components"]) == 1

    def test_players(self, handler, store, payloads):
        game, (hadrian,) = _setup_game(store, "Hadrian")
        list_players = payloads.command("list", [payloads.sub("players")])
        assert _content(asyncio.run(handler.handle(list_players))) == "No players in this game yet"
        asyncio.run(store.assign_character(game.id, PLAYER_ID, hadrian.id))
        assert _content(asyncio.run(handler.handle(list_players))) == f"- <@{PLAYER_ID}>"


class TestComponentsAndModals:

    def test_select_shows_tokens(self, handler, store, payloads):
        _, (hadrian,) = _setup_game(store, "Hadrian")
        body = asyncio.run(handler.handle(payloads.component(
            CHARACTER_SELECT_ID, values=[hadrian.id], origin="list characters")))
        assert _content(body) == "Hadrian has 0 tokens"

    def test_select_without_origin_routes_by_custom_id(self, handler, store, payloads):
        _, (hadrian,) = _setup_game(store, "Hadrian")
        body = asyncio.run(handler.handle(payloads.component(CHARACTER_SELECT_ID, values=[hadrian.id])))
        assert _content(body) == "Hadrian has 0 tokens"

    def test_create_button_opens_modal(self, handler, store, payloads):
        _setup_game(store)
        body = asyncio.run(handler.handle(payloads.component(CREATE_CHARACTER_ID, origin="list characters")))
        assert body["type"] == 9
        assert body["data"]["custom_id"] == CREATE_CHARACTER_ID

    def test_create_button_refused_for_player(self, handler, store, payloads):
        _setup_game(store)
        body = asyncio.run(handler.handle(
            payloads.component(CREATE_CHARACTER_ID, origin="list characters", user_id=PLAYER_ID)))
        assert _content(body) == "Only the GM can do that"

    def test_modal_creates_character(self, handler, store, payloads):
        game, _ = _setup_game(store)
        body = asyncio.run(handler.handle(payloads.modal_submit(CREATE_CHARACTER_ID, ["Thea"])))
        assert _content(body) == "Created new character: Thea"
        assert [c.name for c in asyncio.run(store.list_characters(game.id))] == ["thea"]


class TestCharacterAutocomplete:

    def test_suggests_matching_characters(self, handler, store, payloads):
        _, (hadrian, thea) = _setup_game(store, "Hadrian", "Thea")
        body = asyncio.run(handler.handle(payloads.autocomplete("gm", [
            payloads.group("assign", payloads.sub(
                "tokens", payloads.string("character", "HAD", focused=True)))
        ])))
        assert body == {"type": 8, "data": {"choices": [{"name": "Hadrian", "value": hadrian.id}]}}

    def test_other_focused_option_gets_no_choices(self, handler, store, payloads):
        _setup_game(store, "Hadrian")
        body = asyncio.run(handler.handle(payloads.autocomplete("gm", [
            payloads.group("assign", payloads.sub(
                "tokens",
                payloads.string("character", "x"),
                payloads.integer("tokens", 1, focused=True),
            ))
        ])))
        assert body["data"]["choices"] == []
