"""
Configuration - Environment-driven settings and logging setup.

Variables:
    WILDCARD_ENV          development | production (default: development)
    WILDCARD_LOG_LEVEL    logging level name (default: INFO)
    ALLOWED_ORIGINS       comma-separated CORS origins (default: *)
    WILDCARD_HAND_SIZE    cards dealt to each seat on start (default: 7)
    WILDCARD_DECK_SEED    optional integer seed for deck shuffling
    WILDCARD_STORE_DIR    if set, sessions are stored as JSON files here
"""

from __future__ import annotations
import logging
import os

WILDCARD_ENV = os.getenv("WILDCARD_ENV", "development")
WILDCARD_LOG_LEVEL = os.getenv("WILDCARD_LOG_LEVEL", "INFO").upper()
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
HAND_SIZE = int(os.getenv("WILDCARD_HAND_SIZE", "7"))
WILDCARD_STORE_DIR = os.getenv("WILDCARD_STORE_DIR", None)

_seed = os.getenv("WILDCARD_DECK_SEED")
DECK_SEED = int(_seed) if _seed else None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None):
    """Install the root handler once; later calls only adjust the level."""
    logging.basicConfig(level=level or WILDCARD_LOG_LEVEL, format=LOG_FORMAT)
    logging.getLogger("wildcard").setLevel(level or WILDCARD_LOG_LEVEL)
