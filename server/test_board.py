"""
Test suite for the Setup/Board controller.

Covers:
- Boot into setup (no saved game) or board (saved game)
- Setup field add/remove/clear limits
- Roster validation on start
- Score changes, hole navigation, persistence
- New game confirmation (declined and accepted)
- Theme toggle

Run with: pytest test_board.py -v
"""

import json

import pytest

from board import BoardController, MessageView
from constants import NEW_GAME_PROMPT, ROSTER_SIZE_NOTICE, SCREEN_BOARD, SCREEN_SETUP
from game import GameState, Player
from stores.game_store import GameStore, ThemeStore
from stores.kv_store import MemoryStore

STATE_KEY = "wolf-simple-v05:test"
THEME_KEY = "wolf-theme:test"


# =============================================================================
# Helpers
# =============================================================================

def make_controller(kv=None):
    """Create a booted controller over an in-memory store."""
    kv = kv or MemoryStore()
    view = MessageView()
    controller = BoardController(
        view=view,
        game_store=GameStore(kv, STATE_KEY),
        theme_store=ThemeStore(kv, THEME_KEY),
    )
    controller.boot()
    return controller, view, kv


def started(names=("Ann", "Bob", "Cat", "Dan")):
    controller, view, kv = make_controller()
    assert controller.start(list(names))
    view.drain()
    return controller, view, kv


def of_type(messages, msg_type):
    return [m for m in messages if m["type"] == msg_type]


def saved(kv):
    return json.loads(kv.get(STATE_KEY))


# =============================================================================
# Boot
# =============================================================================

class TestBoot:

    def test_fresh_boot_shows_setup_with_four_fields(self):
        controller, view, _ = make_controller()
        messages = view.drain()

        assert controller.screen == SCREEN_SETUP
        assert of_type(messages, "screen")[-1]["screen"] == SCREEN_SETUP
        setup = of_type(messages, "setup")[-1]
        assert [f["label"] for f in setup["fields"]] == [
            "Player 1", "Player 2", "Player 3", "Player 4",
        ]

    def test_boot_applies_light_theme_by_default(self):
        _, view, _ = make_controller()
        assert of_type(view.drain(), "theme")[0]["theme"] == "light"

    def test_boot_resumes_saved_game(self):
        kv = MemoryStore()
        state = GameState(
            players=[Player("a", "Ann", 3), Player("b", "Bob"), Player("c", "Cat", -1)],
            current_hole=2,
            base_order=["a", "b", "c"],
        )
        kv.set(STATE_KEY, json.dumps(state.to_dict()))

        controller, view, _ = make_controller(kv)
        messages = view.drain()

        assert controller.screen == SCREEN_BOARD
        assert controller.state == state
        board = of_type(messages, "board")[-1]
        assert [r["id"] for r in board["rows"]] == ["b", "c", "a"]
        assert board["hole"] == 2
        assert board["can_prev"] is True

    def test_boot_with_corrupt_slot_shows_setup(self):
        kv = MemoryStore()
        kv.set(STATE_KEY, "{not json")
        controller, _, _ = make_controller(kv)
        assert controller.screen == SCREEN_SETUP


# =============================================================================
# Setup
# =============================================================================

class TestSetupFields:

    def test_add_field_up_to_five(self):
        controller, view, _ = make_controller()
        for _ in range(3):
            controller.add_field()
        assert len(controller.fields) == 5
        assert of_type(view.drain(), "setup")[-1]["can_add"] is False

    def test_remove_field_down_to_three(self):
        controller, _, _ = make_controller()
        for _ in range(3):
            controller.remove_field()
        assert len(controller.fields) == 3

    def test_sync_keeps_values_across_add(self):
        controller, view, _ = make_controller()
        controller.sync_fields(["Ann", "Bob", "", ""])
        controller.add_field()
        setup = of_type(view.drain(), "setup")[-1]
        assert [f["value"] for f in setup["fields"]] == ["Ann", "Bob", "", "", ""]

    def test_sync_ignores_extra_values(self):
        controller, _, _ = make_controller()
        controller.sync_fields(["a", "b", "c", "d", "e", "f"])
        assert controller.fields == ["a", "b", "c", "d"]

    def test_clear_resets_to_four_empty_fields(self):
        controller, _, _ = make_controller()
        controller.add_field()
        controller.sync_fields(["a", "b", "c", "d", "e"])
        controller.clear_fields()
        assert controller.fields == ["", "", "", ""]


class TestStart:

    @pytest.mark.parametrize("count", [3, 4, 5])
    def test_valid_roster_starts_game(self, count):
        controller, view, kv = make_controller()
        names = [f"P{i}" for i in range(count)]

        assert controller.start(names) is True
        assert controller.screen == SCREEN_BOARD
        assert [p.name for p in controller.state.players] == names
        assert all(p.score == 0 for p in controller.state.players)
        assert controller.state.current_hole == 1
        assert saved(kv)["baseOrder"] == [p.id for p in controller.state.players]

    @pytest.mark.parametrize("count", [2, 6])
    def test_invalid_roster_is_rejected(self, count):
        controller, view, kv = make_controller()
        view.drain()

        assert controller.start([f"P{i}" for i in range(count)]) is False
        assert controller.screen == SCREEN_SETUP
        assert not controller.state.is_active
        assert kv.get(STATE_KEY) is None
        assert of_type(view.drain(), "notice") == [
            {"type": "notice", "message": ROSTER_SIZE_NOTICE},
        ]

    def test_names_are_trimmed_and_blanks_dropped(self):
        controller, _, _ = make_controller()
        assert controller.start(["  Ann ", "", "   ", "Bob", "Cat"])
        assert [p.name for p in controller.state.players] == ["Ann", "Bob", "Cat"]

    def test_blank_names_do_not_count(self):
        controller, _, _ = make_controller()
        assert controller.start(["Ann", "Bob", " ", ""]) is False

    def test_start_defaults_to_field_values(self):
        controller, _, _ = make_controller()
        controller.sync_fields(["Ann", "Bob", "Cat", ""])
        assert controller.start() is True
        assert len(controller.state.players) == 3


# =============================================================================
# Board
# =============================================================================

class TestScore:

    def test_score_change_updates_in_place(self):
        controller, view, kv = started()
        pid = controller.state.players[1].id

        controller.adjust_score(pid, 1)
        messages = view.drain()

        assert messages == [{"type": "score", "player_id": pid, "score": 1}]
        assert saved(kv)["players"][1]["score"] == 1

    def test_scores_are_not_clamped(self):
        controller, _, kv = started()
        pid = controller.state.players[0].id
        for delta in (-1, -1, -1, 1):
            controller.adjust_score(pid, delta)
        assert controller.state.get_player(pid).score == -2
        assert saved(kv)["players"][0]["score"] == -2

    def test_unknown_player_is_ignored(self):
        controller, view, _ = started()
        controller.adjust_score("missing", 1)
        assert view.drain() == []


class TestHoles:

    def test_next_hole_rerenders_in_rotated_order(self):
        controller, view, kv = started()
        ids = [p.id for p in controller.state.players]

        controller.next_hole()
        board = of_type(view.drain(), "board")[-1]

        assert board["hole"] == 2
        assert [r["id"] for r in board["rows"]] == ids[1:] + ids[:1]
        assert saved(kv)["currentHole"] == 2

    def test_prev_hole_at_one_is_noop(self):
        controller, view, kv = started()
        before = saved(kv)

        controller.prev_hole()

        assert controller.state.current_hole == 1
        assert view.drain() == []
        assert saved(kv) == before

    def test_prev_hole_disabled_flag(self):
        controller, view, _ = started()
        controller.next_hole()
        assert of_type(view.drain(), "board")[-1]["can_prev"] is True
        controller.prev_hole()
        assert of_type(view.drain(), "board")[-1]["can_prev"] is False

    def test_board_actions_ignored_on_setup(self):
        controller, view, kv = make_controller()
        view.drain()
        controller.next_hole()
        controller.request_new_game()
        assert view.drain() == []
        assert kv.get(STATE_KEY) is None


class TestNewGame:

    def test_request_prompts_for_confirmation(self):
        controller, view, _ = started()
        controller.request_new_game()
        assert view.drain() == [
            {"type": "confirm", "action": "new_game", "message": NEW_GAME_PROMPT},
        ]

    def test_declined_leaves_state_unchanged(self):
        controller, view, kv = started()
        pid = controller.state.players[0].id
        controller.adjust_score(pid, 1)
        controller.next_hole()
        before_state = GameState(
            players=[Player(p.id, p.name, p.score) for p in controller.state.players],
            current_hole=controller.state.current_hole,
            base_order=list(controller.state.base_order),
        )
        before_slot = saved(kv)

        controller.request_new_game()
        controller.confirm_new_game(False)

        assert controller.state == before_state
        assert controller.screen == SCREEN_BOARD
        assert saved(kv) == before_slot

    def test_accepted_clears_and_returns_to_setup(self):
        controller, view, kv = started()
        controller.next_hole()
        view.drain()

        controller.request_new_game()
        controller.confirm_new_game(True)
        messages = view.drain()

        assert controller.state == GameState()
        assert controller.screen == SCREEN_SETUP
        assert controller.fields == ["", "", "", ""]
        assert kv.get(STATE_KEY) is None
        assert of_type(messages, "screen")[-1]["screen"] == SCREEN_SETUP
        assert len(of_type(messages, "setup")[-1]["fields"]) == 4

    def test_confirmation_without_request_is_ignored(self):
        controller, _, kv = started()
        controller.confirm_new_game(True)
        assert controller.state.is_active
        assert kv.get(STATE_KEY) is not None

    def test_restart_after_new_game(self):
        controller, _, _ = started()
        controller.request_new_game()
        controller.confirm_new_game(True)
        assert controller.start(["X", "Y", "Z"]) is True
        assert controller.state.current_hole == 1


class TestTheme:

    def test_toggle_persists_and_applies(self):
        controller, view, kv = make_controller()
        view.drain()

        controller.toggle_theme()

        assert view.drain() == [{"type": "theme", "theme": "dark"}]
        assert kv.get(THEME_KEY) == "dark"

    def test_saved_theme_applied_on_boot(self):
        kv = MemoryStore()
        kv.set(THEME_KEY, "dark")
        controller, view, _ = make_controller(kv)
        assert controller.theme == "dark"
        assert of_type(view.drain(), "theme")[0]["theme"] == "dark"
