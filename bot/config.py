"""
Bot configuration — environment settings and logging setup.

Values come from the process environment, with a local .env file loaded
first (python-dotenv). Nothing here talks to Discord.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN")
DISCORD_APP_ID = os.getenv("DISCORD_APP_ID")
DISCORD_SERVER_ID = os.getenv("DISCORD_SERVER_ID")
DISCORD_PUBLIC_KEY = os.getenv("DISCORD_PUBLIC_KEY")  # used by the webhook transport
DISCORD_API_BASE = os.getenv("DISCORD_API_BASE", "https://discord.com/api/v10")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE")  # e.g. logs/bot.log; stream only when unset

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure root logging once at start-up.

    Args:
        level: Level name; defaults to LOG_LEVEL.
        log_file: Optional path for a UTF-8 file handler; defaults to LOG_FILE.
            Its directory is created if missing.
    """
    level = (level or LOG_LEVEL).upper()
    log_file = log_file if log_file is not None else LOG_FILE

    handlers = [logging.StreamHandler()]
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
