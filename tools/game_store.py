"""
GameStore — async storage interface for games, characters and players.

The routes only talk to the GameStore protocol. InMemoryGameStore is the
reference implementation: plain dicts guarded by an asyncio.Lock, safe for
concurrent requests on one event loop. Every write passes through the
Pydantic models in models/game.py first.
Nothing here imports discord.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Protocol, Tuple

from pydantic import ValidationError

from models.game import Game, GameCharacter, Player

logger = logging.getLogger("GameStore")


class GameStore(Protocol):
    async def get_game(self, guild_id: str) -> Optional[Game]: ...

    async def create_game(self, guild_id: str, gm_discord_id: str) -> Game: ...

    async def list_characters(self, game_id: str) -> List[GameCharacter]: ...

    async def list_players(self, game_id: str) -> List[Player]: ...

    async def get_character(self, character_id: str) -> Optional[GameCharacter]: ...

    async def create_character(self, game_id: str, name: str) -> GameCharacter: ...

    async def assign_character(self, game_id: str, discord_id: str, character_id: str) -> Player: ...

    async def character_for_user(self, game_id: str, discord_id: str) -> Optional[GameCharacter]: ...

    async def set_tokens(self, character_id: str, tokens: int) -> GameCharacter: ...

    async def search_characters(self, guild_id: str, fragment: str) -> List[GameCharacter]: ...


class GameStoreError(Exception):
    """A write was rejected (duplicate game, unknown character, ...)."""
    pass


class InMemoryGameStore:
    """Dict-backed GameStore.

    Uses asyncio.Lock so handlers of concurrent requests can read and
    write without interleaving half-applied updates.
    """

    def __init__(self):
        self._games: Dict[str, Game] = {}  # guild_id → game
        self._characters: Dict[str, GameCharacter] = {}  # character_id → character
        self._players: Dict[Tuple[str, str], Player] = {}  # (game_id, discord_id) → player
        self._lock = asyncio.Lock()

    async def get_game(self, guild_id: str) -> Optional[Game]:
        async with self._lock:
            return self._games.get(guild_id)

    async def create_game(self, guild_id: str, gm_discord_id: str) -> Game:
        async with self._lock:
            if guild_id in self._games:
                raise GameStoreError("This server already has a game")
            game = Game(guild_id=guild_id, gm_discord_id=gm_discord_id)
            self._games[guild_id] = game
            logger.info(f"Game {game.id[:8]} created in guild {guild_id} (GM {gm_discord_id})")
            return game

    async def list_characters(self, game_id: str) -> List[GameCharacter]:
        async with self._lock:
            chars = [c for c in self._characters.values() if c.game_id == game_id]
        return sorted(chars, key=lambda c: c.name)

    async def list_players(self, game_id: str) -> List[Player]:
        async with self._lock:
            return [p for (gid, _), p in self._players.items() if gid == game_id]

    async def get_character(self, character_id: str) -> Optional[GameCharacter]:
        async with self._lock:
            return self._characters.get(character_id)

    async def create_character(self, game_id: str, name: str) -> GameCharacter:
        try:
            character = GameCharacter(game_id=game_id, name=name)
        except ValidationError as e:
            raise GameStoreError(f"Invalid character name: {name!r}") from e
        async with self._lock:
            if any(c.game_id == game_id and c.name == character.name for c in self._characters.values()):
                raise GameStoreError(f"A character named {character.display_name} already exists")
            self._characters[character.id] = character
        logger.info(f"Character '{character.name}' created in game {game_id[:8]}")
        return character

    async def assign_character(self, game_id: str, discord_id: str, character_id: str) -> Player:
        async with self._lock:
            character = self._characters.get(character_id)
            if character is None or character.game_id != game_id:
                raise GameStoreError("Character not found")
            player = Player(discord_id=discord_id, game_id=game_id, character_id=character_id)
            self._players[(game_id, discord_id)] = player
            logger.info(f"Assigned '{character.name}' to {discord_id}")
            return player

    async def character_for_user(self, game_id: str, discord_id: str) -> Optional[GameCharacter]:
        async with self._lock:
            player = self._players.get((game_id, discord_id))
            if player is None or player.character_id is None:
                return None
            return self._characters.get(player.character_id)

    async def set_tokens(self, character_id: str, tokens: int) -> GameCharacter:
        async with self._lock:
            character = self._characters.get(character_id)
            if character is None:
                raise GameStoreError("Character not found")
            try:
                updated = GameCharacter.model_validate({**character.model_dump(), "tokens": tokens})
            except ValidationError as e:
                raise GameStoreError(f"Invalid token count: {tokens}") from e
            self._characters[character_id] = updated
            return updated

    async def search_characters(self, guild_id: str, fragment: str) -> List[GameCharacter]:
        """Characters of the guild's game whose name contains `fragment` (case-insensitive)."""
        fragment = fragment.strip().lower()
        async with self._lock:
            game = self._games.get(guild_id)
            if game is None:
                return []
            matches = [
                c for c in self._characters.values()
                if c.game_id == game.id and fragment in c.name
            ]
        return sorted(matches, key=lambda c: c.name)
