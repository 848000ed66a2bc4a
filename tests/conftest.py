"""
Shared pytest fixtures for the interaction router test suite.

Payload builders produce raw dicts shaped like the JSON Discord posts,
so tests exercise the same parsing path as production.
"""

import pytest

from router.context import InteractionContext
from tools.game_store import InMemoryGameStore


GUILD_ID = "900"
GM_ID = "100"
PLAYER_ID = "200"


# ---------------------------------------------------------------------------
# Raw payload builders
# ---------------------------------------------------------------------------

class Payloads:
    """Builders for raw option trees and interaction payloads."""

    # Options ---------------------------------------------------------------

    @staticmethod
    def string(name, value, focused=None):
        opt = {"type": 3, "name": name, "value": value}
        if focused is not None:
            opt["focused"] = focused
        return opt

    @staticmethod
    def integer(name, value, focused=None):
        opt = {"type": 4, "name": name, "value": value}
        if focused is not None:
            opt["focused"] = focused
        return opt

    @staticmethod
    def boolean(name, value):
        return {"type": 5, "name": name, "value": value}

    @staticmethod
    def user(name, value):
        return {"type": 6, "name": name, "value": value}

    @staticmethod
    def sub(name, *options):
        return {"type": 1, "name": name, "options": list(options)}

    @staticmethod
    def group(name, *subcommands):
        return {"type": 2, "name": name, "options": list(subcommands)}

    # Interactions ----------------------------------------------------------

    @staticmethod
    def ping():
        return {"type": 1, "id": "1", "application_id": "42", "token": "tok"}

    @staticmethod
    def member(user_id):
        return {"user": {"id": user_id, "username": f"user{user_id}"}}

    @classmethod
    def command(cls, name, options=None, user_id=GM_ID, guild_id=GUILD_ID):
        data = {"type": 1, "name": name}
        if options is not None:
            data["options"] = options
        return {
            "type": 2,
            "id": "2",
            "token": "tok",
            "guild_id": guild_id,
            "member": cls.member(user_id),
            "data": data,
        }

    @classmethod
    def autocomplete(cls, name, options, user_id=GM_ID, guild_id=GUILD_ID):
        return {
            "type": 4,
            "guild_id": guild_id,
            "member": cls.member(user_id),
            "data": {"type": 1, "name": name, "options": options},
        }

    @classmethod
    def component(cls, custom_id, values=None, origin=None, user_id=GM_ID, guild_id=GUILD_ID):
        message = {}
        if origin is not None:
            message["interaction"] = {"name": origin, "type": 2, "user": {"id": user_id, "username": "x"}}
        data = {"component_type": 3 if values is not None else 2, "custom_id": custom_id}
        if values is not None:
            data["values"] = values
        return {
            "type": 3,
            "guild_id": guild_id,
            "member": cls.member(user_id),
            "message": message,
            "data": data,
        }

    @classmethod
    def modal_submit(cls, custom_id, values, user_id=GM_ID, guild_id=GUILD_ID):
        rows = [
            {"type": 1, "components": [{"type": 4, "custom_id": f"field-{i}", "value": v}]}
            for i, v in enumerate(values)
        ]
        return {
            "type": 5,
            "guild_id": guild_id,
            "member": cls.member(user_id),
            "data": {"custom_id": custom_id, "components": rows},
        }


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def payloads():
    return Payloads


@pytest.fixture
def carrier():
    """A fresh context carrier, independent of the module-level default."""
    return InteractionContext("test_context")


@pytest.fixture
def store():
    return InMemoryGameStore()
