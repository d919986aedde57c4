"""
Game state for the Wolf scorekeeper.

This module holds the tracked state of a Wolf game (players, current hole,
base tee order) and the tee-order rotation rule.

Wolf Tee Order Summary:
    - The base order is fixed when the game starts (setup order)
    - Hole 1 tees off in the base order
    - Each later hole rotates the order left by one position
    - The order cycles back to the base order every N holes (N = players)

Example with base order [A, B, C, D]:
    hole 1: A B C D
    hole 2: B C D A
    hole 3: C D A B
    hole 5: A B C D
"""

import uuid
from dataclasses import dataclass, field
from typing import Optional


def new_player_id() -> str:
    """Generate a collision-resistant player identifier."""
    return uuid.uuid4().hex


def order_for_hole(hole_number: int, base_order: list[str]) -> list[str]:
    """
    Get the tee order for a hole.

    Rotates the base order left by (hole_number - 1) mod N. Python's modulo
    is non-negative for a positive divisor, so zero or negative hole numbers
    still map onto a valid rotation.

    Args:
        hole_number: Hole to compute the order for (1-based).
        base_order: Player ids in their fixed starting order.

    Returns:
        New list of player ids in tee order for the hole.
    """
    if not base_order:
        return []
    steps = (hole_number - 1) % len(base_order)
    return base_order[steps:] + base_order[:steps]


@dataclass
class Player:
    """
    A player on the score board.

    Attributes:
        id: Unique identifier, stable for the lifetime of the game.
        name: Display name.
        score: Cumulative score. Unbounded and may go negative.
    """

    id: str
    name: str
    score: int = 0

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "score": self.score}


@dataclass
class GameState:
    """
    The tracked state of one Wolf game.

    An empty state (no players) means no game is in progress.

    Attributes:
        players: Players in setup order.
        current_hole: Hole being played, never below 1.
        base_order: Player ids in the tee order fixed at game start.
    """

    players: list[Player] = field(default_factory=list)
    current_hole: int = 1
    base_order: list[str] = field(default_factory=list)

    @classmethod
    def start(cls, names: list[str]) -> "GameState":
        """
        Create a fresh game for the given player names.

        Args:
            names: Display names in setup order (already validated).

        Returns:
            New GameState on hole 1 with every score at 0.
        """
        players = [Player(id=new_player_id(), name=name) for name in names]
        return cls(
            players=players,
            current_hole=1,
            base_order=[p.id for p in players],
        )

    @property
    def is_active(self) -> bool:
        return bool(self.players)

    def get_player(self, player_id: str) -> Optional[Player]:
        """Find a player by id, or None if not on the board."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def players_by_id(self) -> dict[str, Player]:
        return {p.id: p for p in self.players}

    def tee_order(self) -> list[Player]:
        """Players in tee order for the current hole."""
        by_id = self.players_by_id()
        return [by_id[pid] for pid in order_for_hole(self.current_hole, self.base_order)]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def adjust_score(self, player_id: str, delta: int) -> Optional[Player]:
        """
        Add delta to a player's score. No clamping is applied.

        Returns:
            The updated Player, or None if the id is unknown.
        """
        player = self.get_player(player_id)
        if player is None:
            return None
        player.score += delta
        return player

    def next_hole(self) -> None:
        self.current_hole += 1

    def prev_hole(self) -> bool:
        """
        Step back one hole, stopping at hole 1.

        Returns:
            True if the hole changed.
        """
        if self.current_hole <= 1:
            return False
        self.current_hole -= 1
        return True

    def reset(self) -> None:
        """Empty the state (no game in progress)."""
        self.players = []
        self.base_order = []
        self.current_hole = 1

    def to_dict(self) -> dict:
        """Serialize to the persisted slot format."""
        return {
            "players": [p.to_dict() for p in self.players],
            "currentHole": self.current_hole,
            "baseOrder": list(self.base_order),
        }
