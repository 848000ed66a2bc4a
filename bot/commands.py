"""
Slash command manifest — what Discord shows users when they type `/`.

Installed with `install-commands install` (tools/command_installer.py).
The route tree in bot/game_routes.py must mirror these names: every
command, group and subcommand here has a matching route.
"""

import discord

OPTION = discord.AppCommandOptionType
CHAT_INPUT = discord.AppCommandType.chat_input.value


def _character_option(description: str) -> dict:
    return {
        "name": "character",
        "description": description,
        "type": OPTION.string.value,
        "required": True,
        "autocomplete": True,
    }


TOKENS_COMMAND = {
    "name": "tokens",
    "description": "Show how many tokens the players have",
    "type": CHAT_INPUT,
}

LIST_COMMAND = {
    "name": "list",
    "description": "List resources",
    "type": CHAT_INPUT,
    "options": [
        {
            "name": "characters",
            "description": "List characters",
            "type": OPTION.subcommand.value,
        },
        {
            "name": "players",
            "description": "List players",
            "type": OPTION.subcommand.value,
        },
    ],
}

GM_COMMAND = {
    "name": "gm",
    "description": "Commands for the game master",
    "type": CHAT_INPUT,
    "options": [
        {
            "name": "game",
            "description": "Commands for the game",
            "type": OPTION.subcommand_group.value,
            "options": [
                {
                    "name": "init",
                    "description": "Start a new game for the discord server",
                    "type": OPTION.subcommand.value,
                },
                {
                    "name": "info",
                    "description": "Information about the game",
                    "type": OPTION.subcommand.value,
                },
            ],
        },
        {
            "name": "assign",
            "description": "Assign something to a player or character",
            "type": OPTION.subcommand_group.value,
            "options": [
                {
                    "name": "character",
                    "description": "Assign a character to a player",
                    "type": OPTION.subcommand.value,
                    "options": [
                        {
                            "name": "user",
                            "description": "(Required) User to assign a character to",
                            "type": OPTION.user.value,
                            "required": True,
                        },
                        _character_option("(Required) Character to assign to user"),
                    ],
                },
                {
                    "name": "tokens",
                    "description": "Set a character's tokens to a specified amount",
                    "type": OPTION.subcommand.value,
                    "options": [
                        _character_option("(Required) Character to assign tokens to"),
                        {
                            "name": "tokens",
                            "description": "(Required) Number of tokens to assign",
                            "type": OPTION.integer.value,
                            "required": True,
                            "min_value": 0,
                        },
                    ],
                },
            ],
        },
        {
            "name": "create",
            "description": "Create a resource",
            "type": OPTION.subcommand_group.value,
            "options": [
                {
                    "name": "character",
                    "description": "Create a new character",
                    "type": OPTION.subcommand.value,
                    "options": [
                        {
                            "name": "name",
                            "description": "(Required) Character name",
                            "type": OPTION.string.value,
                            "required": True,
                        },
                    ],
                },
            ],
        },
    ],
}

COMMANDS = [TOKENS_COMMAND, LIST_COMMAND, GM_COMMAND]
