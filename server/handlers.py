"""WebSocket message handlers for the Wolf tracker.

Each handler corresponds to a single message type from the client.
Handlers are dispatched via the HANDLERS dict in main.py. They call into
the connection's BoardController; rendered view messages are sent back
with flush() once the handler returns.

Controller calls reach the storage backend (SQLite or Redis), so they run
in the threadpool to keep the event loop free for other connections.
"""

import logging
from dataclasses import dataclass

from fastapi import WebSocket
from fastapi.concurrency import run_in_threadpool

from board import BoardController, MessageView

logger = logging.getLogger(__name__)


@dataclass
class ConnectionContext:
    """State tracked per WebSocket connection."""

    websocket: WebSocket
    connection_id: str
    device_id: str
    view: MessageView
    controller: BoardController


async def flush(ctx: ConnectionContext) -> None:
    """Send every queued view message to the client."""
    for message in ctx.view.drain():
        await ctx.websocket.send_json(message)


async def send_error(ctx: ConnectionContext, message: str) -> None:
    await ctx.websocket.send_json({"type": "error", "message": message})


def _is_str_list(value) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


# ---------------------------------------------------------------------------
# Setup handlers
# ---------------------------------------------------------------------------

async def handle_sync_fields(data: dict, ctx: ConnectionContext, **kw) -> None:
    values = data.get("values", [])
    if not _is_str_list(values):
        await send_error(ctx, "Field values must be a list of strings")
        return
    await run_in_threadpool(ctx.controller.sync_fields, values)


async def handle_add_field(data: dict, ctx: ConnectionContext, **kw) -> None:
    values = data.get("values")
    if _is_str_list(values):
        await run_in_threadpool(ctx.controller.sync_fields, values)
    await run_in_threadpool(ctx.controller.add_field)


async def handle_remove_field(data: dict, ctx: ConnectionContext, **kw) -> None:
    values = data.get("values")
    if _is_str_list(values):
        await run_in_threadpool(ctx.controller.sync_fields, values)
    await run_in_threadpool(ctx.controller.remove_field)


async def handle_clear_fields(data: dict, ctx: ConnectionContext, **kw) -> None:
    await run_in_threadpool(ctx.controller.clear_fields)


async def handle_start(data: dict, ctx: ConnectionContext, **kw) -> None:
    names = data.get("names")
    if names is not None and not _is_str_list(names):
        await send_error(ctx, "Player names must be a list of strings")
        return
    await run_in_threadpool(ctx.controller.start, names)


# ---------------------------------------------------------------------------
# Board handlers
# ---------------------------------------------------------------------------

async def handle_adjust_score(data: dict, ctx: ConnectionContext, **kw) -> None:
    player_id = data.get("player_id")
    delta = data.get("delta")
    if not isinstance(player_id, str):
        await send_error(ctx, "Missing player_id")
        return
    if not isinstance(delta, int) or isinstance(delta, bool) or delta not in (1, -1):
        await send_error(ctx, "Score changes must be +1 or -1")
        return
    await run_in_threadpool(ctx.controller.adjust_score, player_id, delta)


async def handle_next_hole(data: dict, ctx: ConnectionContext, **kw) -> None:
    await run_in_threadpool(ctx.controller.next_hole)


async def handle_prev_hole(data: dict, ctx: ConnectionContext, **kw) -> None:
    await run_in_threadpool(ctx.controller.prev_hole)


async def handle_new_game(data: dict, ctx: ConnectionContext, **kw) -> None:
    await run_in_threadpool(ctx.controller.request_new_game)


async def handle_confirm_new_game(data: dict, ctx: ConnectionContext, **kw) -> None:
    accepted = data.get("accepted")
    if not isinstance(accepted, bool):
        await send_error(ctx, "accepted must be true or false")
        return
    await run_in_threadpool(ctx.controller.confirm_new_game, accepted)


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------

async def handle_toggle_theme(data: dict, ctx: ConnectionContext, **kw) -> None:
    await run_in_threadpool(ctx.controller.toggle_theme)


# ---------------------------------------------------------------------------
# Handler dispatch table
# ---------------------------------------------------------------------------

HANDLERS = {
    "sync_fields": handle_sync_fields,
    "add_field": handle_add_field,
    "remove_field": handle_remove_field,
    "clear_fields": handle_clear_fields,
    "start": handle_start,
    "adjust_score": handle_adjust_score,
    "next_hole": handle_next_hole,
    "prev_hole": handle_prev_hole,
    "new_game": handle_new_game,
    "confirm_new_game": handle_confirm_new_game,
    "toggle_theme": handle_toggle_theme,
}
