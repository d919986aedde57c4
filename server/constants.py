"""
Constants for the Wolf tracker.

Roster limits and storage keys come from config (which reads env vars).
See config.py and .env.example for details.

Wolf tee order:
    - Players tee off in a fixed base order on hole 1
    - Each following hole rotates the order left by one
    - The rotation cycles with a period equal to the player count
"""

from config import config


# =============================================================================
# Roster
# =============================================================================

MIN_PLAYERS: int = config.game_defaults.min_players
MAX_PLAYERS: int = config.game_defaults.max_players
DEFAULT_FIELDS: int = config.game_defaults.default_fields

DEFAULT_PLAYER_NAME = "Player"


# =============================================================================
# Storage
# =============================================================================

STATE_KEY: str = config.STATE_KEY
THEME_KEY: str = config.THEME_KEY

THEMES = ("light", "dark")
DEFAULT_THEME = "light"


# =============================================================================
# User-facing text
# =============================================================================

ROSTER_SIZE_NOTICE = f"Enter between {MIN_PLAYERS} and {MAX_PLAYERS} player names."
NEW_GAME_PROMPT = "Start a new game? This will clear players, hole, and scores."


# =============================================================================
# Screens
# =============================================================================

SCREEN_SETUP = "setup"
SCREEN_BOARD = "board"
