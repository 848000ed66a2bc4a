"""
Interaction responses — the four reply shapes a handler may return.

Handlers build one of these and return it; the caller serializes it with
serialize_response() and sends it back as the HTTP body. Type tags follow
discord.InteractionResponseType and component tags follow
discord.ComponentType.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Sequence, Union

import discord
from pydantic import BaseModel, Field


EPHEMERAL = discord.MessageFlags(ephemeral=True).value


def _value(enum_or_int: Any) -> Any:
    return getattr(enum_or_int, "value", enum_or_int)


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------

class Emoji(BaseModel):
    name: str
    id: Optional[str] = None
    animated: Optional[bool] = None


class Button(BaseModel):
    type: Literal[2] = 2  # ComponentType.button
    style: int = Field(ge=1, le=5)  # ButtonStyle
    label: str
    emoji: Optional[Emoji] = None
    custom_id: Optional[str] = None
    disabled: Optional[bool] = None


class SelectOption(BaseModel):
    label: str
    value: str
    description: Optional[str] = None
    emoji: Optional[Emoji] = None
    default: Optional[bool] = None


class StringSelect(BaseModel):
    type: Literal[3] = 3  # ComponentType.string_select
    custom_id: str
    options: List[SelectOption] = Field(min_length=1, max_length=25)
    placeholder: Optional[str] = None
    min_values: Optional[int] = None
    max_values: Optional[int] = None
    disabled: Optional[bool] = None


class TextInput(BaseModel):
    type: Literal[4] = 4  # ComponentType.text_input
    custom_id: str
    style: int = Field(ge=1, le=2)  # TextStyle
    label: str
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    required: Optional[bool] = None
    value: Optional[str] = None
    placeholder: Optional[str] = None


MessageComponent = Annotated[
    Union[Button, StringSelect, TextInput],
    Field(discriminator="type"),
]


class ActionRow(BaseModel):
    type: Literal[1] = 1  # ComponentType.action_row
    components: List[MessageComponent] = Field(min_length=1, max_length=5)


class ModalRow(BaseModel):
    type: Literal[1] = 1
    components: List[TextInput] = Field(min_length=1, max_length=1)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class PongResponse(BaseModel):
    type: Literal[1] = 1  # InteractionResponseType.pong


class MessageData(BaseModel):
    content: Optional[str] = None
    components: Optional[List[ActionRow]] = None
    flags: Optional[int] = None


class MessageResponse(BaseModel):
    type: Literal[4] = 4  # InteractionResponseType.channel_message
    data: MessageData


class Choice(BaseModel):
    name: str
    value: str


class AutocompleteData(BaseModel):
    choices: List[Choice] = Field(max_length=25)


class AutocompleteResponse(BaseModel):
    type: Literal[8] = 8  # InteractionResponseType.autocomplete_result
    data: AutocompleteData


class ModalData(BaseModel):
    custom_id: str
    title: str
    components: List[ModalRow] = Field(min_length=1, max_length=5)


class ModalResponse(BaseModel):
    type: Literal[9] = 9  # InteractionResponseType.modal
    data: ModalData


InteractionResponse = Annotated[
    Union[PongResponse, MessageResponse, AutocompleteResponse, ModalResponse],
    Field(discriminator="type"),
]

RESPONSE_TYPES = (PongResponse, MessageResponse, AutocompleteResponse, ModalResponse)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def pong() -> PongResponse:
    return PongResponse(type=discord.InteractionResponseType.pong.value)


def message(
    content: Optional[str] = None,
    components: Optional[Sequence[ActionRow]] = None,
    ephemeral: bool = False,
) -> MessageResponse:
    """Build a channel message reply. Ephemeral replies are only shown to the invoker."""
    return MessageResponse(
        type=discord.InteractionResponseType.channel_message.value,
        data=MessageData(
            content=content,
            components=list(components) if components else None,
            flags=EPHEMERAL if ephemeral else None,
        ),
    )


def autocomplete(choices: Sequence[Any]) -> AutocompleteResponse:
    """Build an autocomplete result from (name, value) pairs or Choice models.

    Discord shows at most 25 choices; extra ones are dropped.
    """
    built = [c if isinstance(c, Choice) else Choice(name=c[0], value=c[1]) for c in choices]
    return AutocompleteResponse(
        type=discord.InteractionResponseType.autocomplete_result.value,
        data=AutocompleteData(choices=built[:25]),
    )


def modal(custom_id: str, title: str, inputs: Sequence[TextInput]) -> ModalResponse:
    """Build a modal with one text input per row."""
    return ModalResponse(
        type=discord.InteractionResponseType.modal.value,
        data=ModalData(
            custom_id=custom_id,
            title=title,
            components=[ModalRow(components=[i]) for i in inputs],
        ),
    )


def action_row(*components: Any) -> ActionRow:
    return ActionRow(type=discord.ComponentType.action_row.value, components=list(components))


def button(
    label: str,
    custom_id: str,
    style: Any = discord.ButtonStyle.secondary,
    emoji: Optional[str] = None,
    disabled: Optional[bool] = None,
) -> Button:
    return Button(
        type=discord.ComponentType.button.value,
        style=_value(style),
        label=label,
        custom_id=custom_id,
        emoji=Emoji(name=emoji) if emoji else None,
        disabled=disabled,
    )


def string_select(
    custom_id: str,
    options: Sequence[Any],
    placeholder: Optional[str] = None,
) -> StringSelect:
    """Build a select menu from (label, value) pairs or SelectOption models."""
    built = [o if isinstance(o, SelectOption) else SelectOption(label=o[0], value=o[1]) for o in options]
    return StringSelect(
        type=discord.ComponentType.string_select.value,
        custom_id=custom_id,
        options=built,
        placeholder=placeholder,
    )


def text_input(
    custom_id: str,
    label: str,
    style: Any = discord.TextStyle.short,
    required: Optional[bool] = None,
    placeholder: Optional[str] = None,
    max_length: Optional[int] = None,
) -> TextInput:
    return TextInput(
        type=discord.ComponentType.text_input.value,
        custom_id=custom_id,
        style=_value(style),
        label=label,
        required=required,
        placeholder=placeholder,
        max_length=max_length,
    )


def serialize_response(response: Any) -> Dict[str, Any]:
    """Dump a response model to the JSON-ready dict Discord expects."""
    return response.model_dump(exclude_none=True)
