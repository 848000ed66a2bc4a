"""
Option schema — one canonical definition of a slash command's argument tree.

Discord sends command arguments as a tree: an optional subcommand group,
an optional subcommand, then flat value options. Every node carries an
integer `type` tag (see discord.AppCommandOptionType) and that tag alone
decides which model parses it. Models are frozen; an option tree is a
snapshot of one request and is never mutated.
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from router.errors import OptionValidationError


_FROZEN = {"frozen": True}


class TaggedModel(BaseModel):
    """Base for payload nodes discriminated by an integer `type` tag.

    The tag must be a real int: `true` or `1.0` select no variant.
    """

    @model_validator(mode="before")
    @classmethod
    def exact_int_tag(cls, data: Any) -> Any:
        if isinstance(data, dict):
            tag = data.get("type")
            if isinstance(tag, bool) or not isinstance(tag, int):
                raise ValueError(f"type tag must be an integer, got {tag!r}")
        return data


# ---------------------------------------------------------------------------
# Leaf value options
# ---------------------------------------------------------------------------

class StringOption(TaggedModel):
    """A string argument. `focused` is only ever set during autocomplete."""

    type: Literal[3]  # AppCommandOptionType.string
    name: str
    value: StrictStr
    focused: Optional[bool] = None

    model_config = _FROZEN


class IntegerOption(TaggedModel):
    """An integer argument. Strings and booleans are rejected, not coerced."""

    type: Literal[4]  # AppCommandOptionType.integer
    name: str
    value: StrictInt
    focused: Optional[bool] = None

    model_config = _FROZEN


class BooleanOption(TaggedModel):
    type: Literal[5]  # AppCommandOptionType.boolean
    name: str
    value: StrictBool

    model_config = _FROZEN


class UserOption(TaggedModel):
    """A user argument. `value` is the user's snowflake id as a string."""

    type: Literal[6]  # AppCommandOptionType.user
    name: str
    value: StrictStr

    model_config = _FROZEN


LeafOption = Annotated[
    Union[StringOption, IntegerOption, BooleanOption, UserOption],
    Field(discriminator="type"),
]

AutocompletableOption = Annotated[
    Union[StringOption, IntegerOption],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------

class Subcommand(TaggedModel):
    """A subcommand. Holds value options only."""

    type: Literal[1]  # AppCommandOptionType.subcommand
    name: str
    options: List[LeafOption] = []

    model_config = _FROZEN


class SubcommandGroup(TaggedModel):
    """A subcommand group. Holds at least one subcommand (or, on old payloads, a group)."""

    type: Literal[2]  # AppCommandOptionType.subcommand_group
    name: str
    options: List["ContainerOption"] = Field(min_length=1)

    model_config = _FROZEN


ContainerOption = Annotated[
    Union[Subcommand, SubcommandGroup],
    Field(discriminator="type"),
]

SubcommandGroup.model_rebuild()

CONTAINER_TYPES = (Subcommand, SubcommandGroup)
LEAF_TYPES = (StringOption, IntegerOption, BooleanOption, UserOption)

Option = Annotated[
    Union[Subcommand, SubcommandGroup, StringOption, IntegerOption, BooleanOption, UserOption],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Shape rules
# ---------------------------------------------------------------------------

def is_container(option: Any) -> bool:
    return isinstance(option, CONTAINER_TYPES)


def _check_level(options: List[Any], depth: int) -> None:
    containers = [o for o in options if is_container(o)]
    if not containers:
        return
    if len(options) != 1:
        names = ", ".join(o.name for o in options)
        raise ValueError(
            f"a subcommand or group must be the only option at its level, got: {names}"
        )
    container = containers[0]
    if isinstance(container, SubcommandGroup):
        # group -> subcommand -> values is the deepest tree Discord allows
        if depth > 0:
            raise ValueError(f"subcommand group '{container.name}' is nested too deep")
        _check_level(container.options, depth + 1)


def _check_shape(options: List[Any]) -> List[Any]:
    _check_level(options, 0)
    return options


OptionList = Annotated[List[Option], AfterValidator(_check_shape)]

_option_list_adapter = TypeAdapter(OptionList)


def validate_options(raw: Any) -> List[Any]:
    """Validate a raw option list (as sent by Discord) into option models.

    Either the whole tree validates or OptionValidationError is raised;
    nothing is partially accepted. `None` is treated as no options.
    """
    if raw is None:
        return []
    try:
        return _option_list_adapter.validate_python(raw)
    except ValidationError as e:
        raise OptionValidationError(
            f"Invalid command options: {e.error_count()} error(s)",
            errors=e.errors(include_url=False),
        ) from e


def find_focused(options: List[Any]) -> Optional[Any]:
    """Return the focused value option anywhere in the tree, or None."""
    for option in options:
        if is_container(option):
            found = find_focused(option.options)
            if found is not None:
                return found
        elif getattr(option, "focused", None):
            return option
    return None


def count_focused(options: List[Any]) -> int:
    total = 0
    for option in options:
        if is_container(option):
            total += count_focused(option.options)
        elif getattr(option, "focused", None):
            total += 1
    return total
