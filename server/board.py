"""
Setup/Board controller for the Wolf scorekeeper.

The controller owns the GameState for one device and drives two mutually
exclusive screens:

    SETUP  - 3 to 5 name fields, add/remove/clear, start
    BOARD  - one row per player in tee order, +/- score controls,
             hole navigation, new game

Rendering goes through a View, so the controller can be driven by the
WebSocket handlers in production and by a recording view in tests.
Every mutation persists through the GameStore.
"""

from typing import Optional

from constants import (
    DEFAULT_FIELDS,
    DEFAULT_THEME,
    MAX_PLAYERS,
    MIN_PLAYERS,
    NEW_GAME_PROMPT,
    ROSTER_SIZE_NOTICE,
    SCREEN_BOARD,
    SCREEN_SETUP,
)
from game import GameState
from logging_config import get_logger
from stores.game_store import GameStore, ThemeStore


class View:
    """
    Render interface for the controller.

    Implementations turn these calls into whatever the client understands.
    """

    def apply_theme(self, theme: str) -> None:
        raise NotImplementedError

    def show_screen(self, screen: str) -> None:
        raise NotImplementedError

    def render_setup(self, fields: list[str]) -> None:
        raise NotImplementedError

    def render_board(self, hole: int, can_prev: bool, rows: list[dict]) -> None:
        raise NotImplementedError

    def update_score(self, player_id: str, score: int) -> None:
        raise NotImplementedError

    def notify(self, message: str) -> None:
        """Show a blocking notice."""
        raise NotImplementedError

    def confirm(self, action: str, message: str) -> None:
        """Ask the user a yes/no question about action."""
        raise NotImplementedError


class MessageView(View):
    """View that queues client messages until they are drained."""

    def __init__(self):
        self.messages: list[dict] = []

    def drain(self) -> list[dict]:
        messages, self.messages = self.messages, []
        return messages

    def apply_theme(self, theme: str) -> None:
        self.messages.append({"type": "theme", "theme": theme})

    def show_screen(self, screen: str) -> None:
        self.messages.append({"type": "screen", "screen": screen})

    def render_setup(self, fields: list[str]) -> None:
        self.messages.append({
            "type": "setup",
            "fields": [
                {"label": f"Player {i + 1}", "value": value}
                for i, value in enumerate(fields)
            ],
            "can_add": len(fields) < MAX_PLAYERS,
            "can_remove": len(fields) > MIN_PLAYERS,
        })

    def render_board(self, hole: int, can_prev: bool, rows: list[dict]) -> None:
        self.messages.append({
            "type": "board",
            "hole": hole,
            "can_prev": can_prev,
            "rows": rows,
        })

    def update_score(self, player_id: str, score: int) -> None:
        self.messages.append({"type": "score", "player_id": player_id, "score": score})

    def notify(self, message: str) -> None:
        self.messages.append({"type": "notice", "message": message})

    def confirm(self, action: str, message: str) -> None:
        self.messages.append({"type": "confirm", "action": action, "message": message})


class BoardController:
    """
    Drives the setup and board screens for one device.

    Attributes:
        state: The game being tracked (empty while on the setup screen).
        screen: SCREEN_SETUP or SCREEN_BOARD.
        fields: Current setup name field values.
        theme: Applied display theme.
        confirm_pending: True while a new-game prompt awaits an answer.
    """

    def __init__(
        self,
        view: View,
        game_store: GameStore,
        theme_store: ThemeStore,
        device_id: Optional[str] = None,
    ):
        self.view = view
        self.game_store = game_store
        self.theme_store = theme_store
        self.state = GameState()
        self.screen = SCREEN_SETUP
        self.fields: list[str] = []
        self.theme = DEFAULT_THEME
        self.confirm_pending = False
        self.logger = get_logger(__name__).with_context(device_id=device_id)

    def boot(self) -> None:
        """Apply the saved theme and resume a saved game if there is one."""
        self._apply_theme(self.theme_store.load())

        saved = self.game_store.load()
        if saved:
            self.state = saved
            self.logger.info(
                f"Resumed game: {len(saved.players)} players on hole {saved.current_hole}"
            )
            self.render_board()
            self._show(SCREEN_BOARD)
        else:
            self._reset_fields()
            self._show(SCREEN_SETUP)

    # -------------------------------------------------------------------------
    # Setup screen
    # -------------------------------------------------------------------------

    def sync_fields(self, values: list[str]) -> None:
        """Take the client's current field values, keeping the field count."""
        for i, value in enumerate(values[:len(self.fields)]):
            self.fields[i] = value

    def add_field(self) -> None:
        if self.screen != SCREEN_SETUP or len(self.fields) >= MAX_PLAYERS:
            return
        self.fields.append("")
        self.render_setup()

    def remove_field(self) -> None:
        if self.screen != SCREEN_SETUP or len(self.fields) <= MIN_PLAYERS:
            return
        self.fields.pop()
        self.render_setup()

    def clear_fields(self) -> None:
        if self.screen != SCREEN_SETUP:
            return
        self._reset_fields()

    def start(self, names: Optional[list[str]] = None) -> bool:
        """
        Start a game from the entered names.

        Args:
            names: Names to use. Defaults to the current field values.

        Returns:
            True if the game started, False if the roster was rejected.
        """
        if self.screen != SCREEN_SETUP:
            return False
        if names is None:
            names = self.fields

        cleaned = [name.strip() for name in names if name.strip()]
        if not MIN_PLAYERS <= len(cleaned) <= MAX_PLAYERS:
            self.logger.debug(f"Rejected roster of {len(cleaned)} names")
            self.view.notify(ROSTER_SIZE_NOTICE)
            return False

        self.state = GameState.start(cleaned)
        self.game_store.save(self.state)
        self.logger.info(f"Game started with {len(cleaned)} players")
        self.render_board()
        self._show(SCREEN_BOARD)
        return True

    # -------------------------------------------------------------------------
    # Board screen
    # -------------------------------------------------------------------------

    def adjust_score(self, player_id: str, delta: int) -> None:
        """Apply a score change in place. The row order does not change."""
        if self.screen != SCREEN_BOARD:
            return
        player = self.state.adjust_score(player_id, delta)
        if player is None:
            self.logger.debug(f"Score change for unknown player {player_id}")
            return
        self.view.update_score(player.id, player.score)
        self.game_store.save(self.state)

    def next_hole(self) -> None:
        if self.screen != SCREEN_BOARD:
            return
        self.state.next_hole()
        self.render_board()
        self.game_store.save(self.state)

    def prev_hole(self) -> None:
        if self.screen != SCREEN_BOARD:
            return
        if self.state.prev_hole():
            self.render_board()
            self.game_store.save(self.state)

    def request_new_game(self) -> None:
        if self.screen != SCREEN_BOARD:
            return
        self.confirm_pending = True
        self.view.confirm("new_game", NEW_GAME_PROMPT)

    def confirm_new_game(self, accepted: bool) -> None:
        """
        Resolve a pending new-game prompt.

        Declining leaves everything as it was. Accepting clears the saved
        game and returns to a fresh setup screen.
        """
        if not self.confirm_pending:
            return
        self.confirm_pending = False
        if not accepted:
            return

        self.game_store.clear()
        self.state.reset()
        self.logger.info("Game cleared")
        self._reset_fields()
        self._show(SCREEN_SETUP)

    # -------------------------------------------------------------------------
    # Theme
    # -------------------------------------------------------------------------

    def toggle_theme(self) -> None:
        self._apply_theme("light" if self.theme == "dark" else "dark")

    def _apply_theme(self, theme: str) -> None:
        self.theme = theme
        self.view.apply_theme(theme)
        self.theme_store.save(theme)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render_setup(self) -> None:
        self.view.render_setup(list(self.fields))

    def render_board(self) -> None:
        rows = [p.to_dict() for p in self.state.tee_order()]
        self.view.render_board(
            hole=self.state.current_hole,
            can_prev=self.state.current_hole > 1,
            rows=rows,
        )

    def _reset_fields(self) -> None:
        self.fields = [""] * max(MIN_PLAYERS, DEFAULT_FIELDS)
        self.render_setup()

    def _show(self, screen: str) -> None:
        self.screen = screen
        self.view.show_screen(screen)
