"""
Command Installer — registers the bot's slash commands with Discord.

Usage:
    install-commands install --guild     # bulk overwrite the guild's commands
    install-commands list [--guild]      # show registered commands
    install-commands delete --id <ID>    # delete one global command

Reads DISCORD_TOKEN, DISCORD_APP_ID and DISCORD_SERVER_ID from the
environment (.env supported). Guild commands update instantly; global
commands can take up to an hour to propagate.
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import requests

from bot import config
from bot.commands import COMMANDS

logger = logging.getLogger("CommandInstaller")

USER_AGENT = "DiscordBot (https://github.com/cgaeta/cg-bob, 1.0.0)"


class CommandInstallError(Exception):
    """Discord rejected a command API request."""

    def __init__(self, status: int, body: Any):
        detail = json.dumps(body, indent=2) if not isinstance(body, str) else body
        super().__init__(f"Discord API returned {status}: {detail}")
        self.status = status
        self.body = body


class CommandInstaller:
    """Thin client for Discord's application command endpoints.

    Args:
        token: Bot token.
        app_id: Application id.
        guild_id: Server id for guild-scoped calls.
        api_base: Discord REST base URL.
        session: requests.Session to use (one is created if omitted).
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        token: str,
        app_id: str,
        guild_id: Optional[str] = None,
        api_base: str = "https://discord.com/api/v10",
        session: Optional[requests.Session] = None,
        timeout: int = 15,
    ):
        self.app_id = app_id
        self.guild_id = guild_id
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(self._headers(token))

    @staticmethod
    def _headers(token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bot {token}",
            "Content-Type": "application/json; charset=UTF-8",
            "User-Agent": USER_AGENT,
        }

    def _url(self, guild: bool) -> str:
        base = f"{self.api_base}/applications/{self.app_id}"
        if guild:
            if not self.guild_id:
                raise ValueError("guild_id is required for guild commands")
            return f"{base}/guilds/{self.guild_id}/commands"
        return f"{base}/commands"

    def _request(self, method: str, url: str, body: Any = None) -> Any:
        logger.debug(f"{method} {url}")
        resp = self.session.request(method, url, json=body, timeout=self.timeout)
        if not resp.ok:
            try:
                detail = resp.json()
            except ValueError:
                detail = resp.text
            raise CommandInstallError(resp.status_code, detail)
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    def install(self, commands: List[Dict[str, Any]], guild: bool = False) -> List[Dict[str, Any]]:
        """Bulk overwrite the registered commands with `commands`."""
        result = self._request("PUT", self._url(guild), commands)
        logger.info(f"Installed {len(commands)} command(s) ({'guild' if guild else 'global'})")
        return result

    def list(self, guild: bool = False) -> List[Dict[str, Any]]:
        return self._request("GET", self._url(guild))

    def delete(self, command_id: str, guild: bool = False) -> None:
        self._request("DELETE", f"{self._url(guild)}/{command_id}")
        logger.info(f"Deleted command {command_id}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Install, list or delete the bot's Discord slash commands.",
    )
    parser.add_argument("action", choices=["install", "list", "delete"])
    parser.add_argument(
        "--guild",
        action="store_true",
        help="Target the guild in DISCORD_SERVER_ID instead of global commands.",
    )
    parser.add_argument("--id", dest="command_id", help="Command id (for delete).")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config.setup_logging()

    if not config.DISCORD_TOKEN or not config.DISCORD_APP_ID:
        logger.error("DISCORD_TOKEN and DISCORD_APP_ID must be set")
        return 1
    if args.guild and not config.DISCORD_SERVER_ID:
        logger.error("--guild needs DISCORD_SERVER_ID")
        return 1
    if args.action == "delete" and not args.command_id:
        logger.error("delete needs --id")
        return 1

    installer = CommandInstaller(
        token=config.DISCORD_TOKEN,
        app_id=config.DISCORD_APP_ID,
        guild_id=config.DISCORD_SERVER_ID,
        api_base=config.DISCORD_API_BASE,
    )

    try:
        if args.action == "install":
            result = installer.install(COMMANDS, guild=args.guild)
        elif args.action == "list":
            result = installer.list(guild=args.guild)
        else:
            result = installer.delete(args.command_id, guild=args.guild)
    except (CommandInstallError, requests.RequestException) as e:
        logger.error(f"{args.action} failed: {e}")
        return 1

    if result is not None:
        print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
