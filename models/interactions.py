"""
Interaction schema — the five inbound event shapes Discord posts to the bot.

Discrimination is done on the integer `type` field alone
(see discord.InteractionType). Each variant declares the fields that must
be present for that type; a payload missing one of them is rejected as a
whole. Unknown envelope keys (locale, app_permissions, ...) are ignored.
"""

import json
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, model_validator

from models.options import OptionList, TaggedModel, count_focused
from router.errors import InteractionParseError


_FROZEN = {"frozen": True}


class User(BaseModel):
    id: str
    username: str

    model_config = _FROZEN


class Member(BaseModel):
    user: User

    model_config = _FROZEN


class CommandData(BaseModel):
    """`data` of a command or autocomplete interaction."""

    name: str
    type: Optional[int] = None  # AppCommandType, 1 for chat input
    id: Optional[str] = None
    options: OptionList = []

    model_config = _FROZEN


class _Envelope(TaggedModel):
    id: Optional[str] = None
    application_id: Optional[str] = None
    token: Optional[str] = None

    model_config = _FROZEN


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

class PingInteraction(_Envelope):
    type: Literal[1]  # InteractionType.ping


class ApplicationCommandInteraction(_Envelope):
    type: Literal[2]  # InteractionType.application_command
    member: Member
    guild_id: str
    data: CommandData


class ComponentData(BaseModel):
    component_type: int
    custom_id: str
    values: List[str] = []

    model_config = _FROZEN


class MessageInteractionOrigin(BaseModel):
    """The command that produced the message a component belongs to."""

    name: str
    type: int
    user: Optional[User] = None

    model_config = _FROZEN


class ComponentMessage(BaseModel):
    interaction: Optional[MessageInteractionOrigin] = None

    model_config = _FROZEN


class MessageComponentInteraction(_Envelope):
    type: Literal[3]  # InteractionType.component
    member: Member
    guild_id: str
    message: ComponentMessage
    data: ComponentData

    @property
    def origin_name(self) -> str:
        """Name used for routing: the originating command if known, else the custom_id."""
        if self.message.interaction is not None:
            return self.message.interaction.name
        return self.data.custom_id


class AutocompleteInteraction(_Envelope):
    type: Literal[4]  # InteractionType.autocomplete
    guild_id: str
    member: Optional[Member] = None
    data: CommandData

    @model_validator(mode="after")
    def exactly_one_focused(self):
        focused = count_focused(self.data.options)
        if focused != 1:
            raise ValueError(f"autocomplete needs exactly one focused option, got {focused}")
        return self


class TextInputValue(TaggedModel):
    type: Literal[4]  # ComponentType.text_input
    custom_id: str
    value: str

    model_config = _FROZEN


class ModalRow(TaggedModel):
    type: Literal[1]  # ComponentType.action_row
    components: List[TextInputValue] = Field(min_length=1, max_length=1)

    model_config = _FROZEN


class ModalSubmitData(BaseModel):
    custom_id: str
    components: List[ModalRow] = Field(min_length=1, max_length=5)

    model_config = _FROZEN


class ModalSubmitInteraction(_Envelope):
    type: Literal[5]  # InteractionType.modal_submit
    member: Member
    guild_id: str
    data: ModalSubmitData

    @property
    def values(self) -> List[str]:
        """Submitted text values, one per row, in row order."""
        return [row.components[0].value for row in self.data.components]


Interaction = Annotated[
    Union[
        PingInteraction,
        ApplicationCommandInteraction,
        MessageComponentInteraction,
        AutocompleteInteraction,
        ModalSubmitInteraction,
    ],
    Field(discriminator="type"),
]

_interaction_adapter = TypeAdapter(Interaction)


def parse_interaction(raw: Any) -> Any:
    """Validate a decoded payload into one of the five Interaction models.

    Raises InteractionParseError if `type` is missing or unknown, or if a
    field required by that type is missing or of the wrong type.
    """
    try:
        return _interaction_adapter.validate_python(raw)
    except ValidationError as e:
        raise InteractionParseError(
            f"Malformed interaction payload: {e.error_count()} error(s)",
            errors=e.errors(include_url=False),
        ) from e


def parse_interaction_json(body: Union[str, bytes]) -> Any:
    """Same as parse_interaction, from the raw request body."""
    try:
        raw = json.loads(body)
    except (TypeError, ValueError) as e:
        raise InteractionParseError(f"Interaction body is not JSON: {e}") from e
    return parse_interaction(raw)
