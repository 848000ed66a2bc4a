"""
Game records — the tracker's view of a server's game, characters and players.

These models gate every write to the game store. Names are stored
lower-cased so lookups from slash command input are case-insensitive.
"""

from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


def _new_id() -> str:
    return str(uuid4())


class Game(BaseModel):
    """One game per Discord server, run by a single GM."""

    id: str = Field(default_factory=_new_id)
    guild_id: str
    gm_discord_id: str

    def is_gm(self, discord_id: Optional[str]) -> bool:
        return discord_id is not None and discord_id == self.gm_discord_id


class GameCharacter(BaseModel):
    """Schema for a character in a game, with its token count."""

    id: str = Field(default_factory=_new_id)
    game_id: str
    name: str = Field(min_length=1, max_length=100)
    tokens: int = Field(default=0, ge=0)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v):
        v = v.strip().lower()
        if not v:
            raise ValueError("character name cannot be blank")
        return v

    @property
    def display_name(self) -> str:
        return self.name.title()


class Player(BaseModel):
    """A Discord user taking part in a game, optionally playing a character."""

    discord_id: str
    game_id: str
    character_id: Optional[str] = None
