"""
Persisted game and theme slots.

The game slot holds one JSON document:

    {"players": [{"id": str, "name": str, "score": number}, ...],
     "currentHole": number,
     "baseOrder": [str, ...]}

Loading fails closed: anything malformed is treated as "no saved game".
Writes are best effort: the in-memory GameState stays authoritative for
the session when the backend fails.
"""

import json
import logging
import math
from typing import Any, Optional

from constants import DEFAULT_PLAYER_NAME, DEFAULT_THEME, MAX_PLAYERS, MIN_PLAYERS, THEMES
from game import GameState, Player, new_player_id
from stores.kv_store import KeyValueStore, StorageError

logger = logging.getLogger(__name__)


def _is_finite_number(value: Any) -> bool:
    """True for real int/float values that are finite. Booleans do not count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, int):
        return True
    return math.isfinite(value)


def _normalize_number(value):
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _scalar_text(value) -> Optional[str]:
    """Text for a truthy JSON scalar. Lists and objects give None."""
    if not value or isinstance(value, (list, dict)):
        return None
    return str(value)


def _coerce_player(raw: dict, seen_ids: set[str]) -> Player:
    player_id = _scalar_text(raw.get("id")) or new_player_id()
    if player_id in seen_ids:
        player_id = new_player_id()
    seen_ids.add(player_id)

    score = raw.get("score")
    return Player(
        id=player_id,
        name=_scalar_text(raw.get("name")) or DEFAULT_PLAYER_NAME,
        score=_normalize_number(score) if _is_finite_number(score) else 0,
    )


def parse_state(raw: Optional[str]) -> Optional[GameState]:
    """
    Parse and repair a persisted game slot.

    Args:
        raw: Slot contents, or None if the slot is empty.

    Returns:
        A valid GameState, or None if the data is missing or unusable.
    """
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except (ValueError, TypeError, RecursionError):
        logger.debug("Discarding saved game: invalid JSON")
        return None

    if not isinstance(data, dict):
        return None
    raw_players = data.get("players")
    if not isinstance(raw_players, list):
        return None
    if not MIN_PLAYERS <= len(raw_players) <= MAX_PLAYERS:
        logger.debug(f"Discarding saved game: {len(raw_players)} players")
        return None
    if not all(isinstance(p, dict) for p in raw_players):
        return None

    seen_ids: set[str] = set()
    players = [_coerce_player(p, seen_ids) for p in raw_players]

    hole = data.get("currentHole")
    if _is_finite_number(hole) and hole > 0 and (isinstance(hole, int) or hole.is_integer()):
        current_hole = int(hole)
    else:
        current_hole = 1

    ids = [p.id for p in players]
    base_order = data.get("baseOrder")
    valid_base = (
        isinstance(base_order, list)
        and all(isinstance(pid, str) for pid in base_order)
        and sorted(base_order) == sorted(ids)
    )
    if not valid_base:
        base_order = ids

    return GameState(players=players, current_hole=current_hole, base_order=list(base_order))


class GameStore:
    """The persisted game slot for one device."""

    def __init__(self, kv: KeyValueStore, key: str):
        """
        Args:
            kv: Backend holding the slot.
            key: Slot key (already namespaced for the device).
        """
        self.kv = kv
        self.key = key

    def load(self) -> Optional[GameState]:
        """Load the saved game, or None. Never raises."""
        try:
            raw = self.kv.get(self.key)
        except StorageError as e:
            logger.warning(f"Could not read saved game: {e}")
            return None
        return parse_state(raw)

    def save(self, state: GameState) -> None:
        """Persist the game. Backend failures are logged and ignored."""
        try:
            self.kv.set(self.key, json.dumps(state.to_dict()))
        except StorageError as e:
            logger.warning(f"Could not save game: {e}")

    def clear(self) -> None:
        """Remove the saved game. Backend failures are logged and ignored."""
        try:
            self.kv.delete(self.key)
        except StorageError as e:
            logger.warning(f"Could not clear saved game: {e}")


class ThemeStore:
    """The persisted display theme preference for one device."""

    def __init__(self, kv: KeyValueStore, key: str):
        self.kv = kv
        self.key = key

    def load(self) -> str:
        """Saved theme, or the default when absent or unrecognized."""
        try:
            theme = self.kv.get(self.key)
        except StorageError as e:
            logger.warning(f"Could not read theme: {e}")
            return DEFAULT_THEME
        return theme if theme in THEMES else DEFAULT_THEME

    def save(self, theme: str) -> None:
        try:
            self.kv.set(self.key, theme)
        except StorageError as e:
            logger.warning(f"Could not save theme: {e}")
