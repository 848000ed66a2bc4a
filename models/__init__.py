"""
Pydantic v2 data models — the contract for everything crossing the Discord boundary.

Inbound payloads are parsed into these models before the router sees
them. If validation fails, nothing is dispatched.
"""

from models.options import (
    StringOption,
    IntegerOption,
    BooleanOption,
    UserOption,
    Subcommand,
    SubcommandGroup,
    LeafOption,
    ContainerOption,
    AutocompletableOption,
    Option,
    OptionList,
    validate_options,
    find_focused,
)
from models.interactions import (
    Member,
    User,
    CommandData,
    PingInteraction,
    ApplicationCommandInteraction,
    MessageComponentInteraction,
    AutocompleteInteraction,
    ModalSubmitInteraction,
    Interaction,
    parse_interaction,
    parse_interaction_json,
)
from models.responses import (
    PongResponse,
    MessageResponse,
    AutocompleteResponse,
    ModalResponse,
    InteractionResponse,
    serialize_response,
)
from models.game import Game, GameCharacter, Player

__all__ = [
    "StringOption",
    "IntegerOption",
    "BooleanOption",
    "UserOption",
    "Subcommand",
    "SubcommandGroup",
    "LeafOption",
    "ContainerOption",
    "AutocompletableOption",
    "Option",
    "OptionList",
    "validate_options",
    "find_focused",
    "Member",
    "User",
    "CommandData",
    "PingInteraction",
    "ApplicationCommandInteraction",
    "MessageComponentInteraction",
    "AutocompleteInteraction",
    "ModalSubmitInteraction",
    "Interaction",
    "parse_interaction",
    "parse_interaction_json",
    "PongResponse",
    "MessageResponse",
    "AutocompleteResponse",
    "ModalResponse",
    "InteractionResponse",
    "serialize_response",
    "Game",
    "GameCharacter",
    "Player",
]
