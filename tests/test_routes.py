"""
Tests for router/routes.py — Route, RouteTable and define_route().
"""

import asyncio
from typing import List, Tuple

import pytest
from pydantic import BaseModel

from models.options import IntegerOption, StringOption, validate_options
from router.errors import DuplicateRouteError, OptionValidationError, RouteNotFoundError
from router.routes import Route, RouteTable, define_route


async def _noop(*args):
    return args


class TestRouteTable:

    def test_lookup_by_name(self):
        table = RouteTable([define_route("a", None, _noop), define_route("b", None, _noop)])
        assert table.names == ["a", "b"]
        assert "a" in table
        assert table.lookup("b").name == "b"
        assert len(table) == 2

    def test_duplicate_siblings_fail_fast(self):
        with pytest.raises(DuplicateRouteError) as exc:
            RouteTable([define_route("create", None, _noop), define_route("create", None, _noop)])
        assert exc.value.name == "create"

    def test_duplicate_children_fail_at_branch_construction(self):
        with pytest.raises(DuplicateRouteError):
            define_route("gm", None, [
                define_route("create", None, _noop),
                define_route("create", None, _noop),
            ])

    def test_same_name_at_different_levels_is_fine(self):
        route = define_route("gm", None, [define_route("gm", None, _noop)])
        assert route.table.names == ["gm"]

    def test_missing_name(self):
        table = RouteTable([define_route("a", None, _noop)])
        with pytest.raises(RouteNotFoundError) as exc:
            table.lookup("zzz", "gm")
        assert exc.value.name == "zzz"
        assert exc.value.path == "gm"

    def test_table_is_read_only(self):
        table = RouteTable([define_route("a", None, _noop)])
        with pytest.raises(TypeError):
            table._routes["b"] = define_route("b", None, _noop)

    def test_rejects_non_routes(self):
        with pytest.raises(TypeError):
            RouteTable([("a", _noop)])


class TestDefineRoute:

    def test_leaf_and_branch(self):
        leaf = define_route("tokens", None, _noop)
        branch = define_route("list", None, [leaf])
        assert not leaf.is_branch
        assert branch.is_branch

    def test_needs_handler_or_children(self):
        with pytest.raises(TypeError):
            Route("x")
        with pytest.raises(TypeError):
            Route("x", handler=_noop, children=[])


class TestInvoke:

    def test_leaf_spreads_validated_tuple(self, payloads):
        seen = []

        async def handler(character, tokens):
            seen.append((character.value, tokens.value))

        route = define_route("tokens", Tuple[StringOption, IntegerOption], handler)
        opts = validate_options([payloads.string("character", "abc"), payloads.integer("tokens", 3)])
        asyncio.run(route.invoke(opts))
        assert seen == [("abc", 3)]

    def test_leaf_wrong_arity(self, payloads):
        route = define_route("tokens", Tuple[StringOption, IntegerOption], _noop)
        opts = validate_options([payloads.string("character", "abc")])
        with pytest.raises(OptionValidationError) as exc:
            asyncio.run(route.invoke(opts, "gm assign"))
        assert exc.value.path == "gm assign tokens"

    def test_leaf_wrong_type(self, payloads):
        route = define_route("tokens", Tuple[IntegerOption], _noop)
        opts = validate_options([payloads.string("tokens", "3")])
        with pytest.raises(OptionValidationError):
            asyncio.run(route.invoke(opts))

    def test_single_struct_passed_whole(self):
        class Args(BaseModel):
            name: str

        route = define_route("x", Args, _noop)
        result = asyncio.run(route.invoke({"name": "abc"}))
        assert result[0].name == "abc"

    def test_list_schema(self):
        route = define_route("x", List[str], _noop)
        assert asyncio.run(route.invoke(["a", "b"])) == ("a", "b")

    def test_no_schema_passes_through(self):
        assert asyncio.run(define_route("x", None, _noop).invoke([1, 2])) == (1, 2)

    def test_sync_handler_allowed(self):
        route = define_route("x", None, lambda: "done")
        assert asyncio.run(route.invoke([])) == "done"

    def test_branch_recurses_into_container(self, payloads):
        route = define_route("gm", None, [
            define_route("assign", None, [
                define_route("tokens", Tuple[StringOption, IntegerOption], _noop),
            ]),
        ])
        opts = validate_options([payloads.group("assign", payloads.sub(
            "tokens", payloads.string("character", "abc"), payloads.integer("tokens", 1)))])
        character, tokens = asyncio.run(route.invoke(opts))
        assert character.value == "abc"
        assert tokens.value == 1

    def test_branch_rejects_leaf_options(self, payloads):
        route = define_route("gm", None, [define_route("x", None, _noop)])
        with pytest.raises(OptionValidationError):
            asyncio.run(route.invoke(validate_options([payloads.string("s", "x")])))

    def test_branch_rejects_empty_options(self):
        route = define_route("gm", None, [define_route("x", None, _noop)])
        with pytest.raises(OptionValidationError):
            asyncio.run(route.invoke([]))

    def test_branch_unknown_child(self, payloads):
        route = define_route("gm", None, [define_route("x", None, _noop)])
        with pytest.raises(RouteNotFoundError) as exc:
            asyncio.run(route.invoke(validate_options([payloads.sub("y")])))
        assert exc.value.path == "gm"
