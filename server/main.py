"""FastAPI WebSocket server for the Wolf scorekeeper."""

import json
import logging
import os
import re
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from config import config
from board import BoardController, MessageView
from constants import STATE_KEY, THEME_KEY
from handlers import HANDLERS, ConnectionContext, flush
from logging_config import connection_id_var, device_id_var, setup_logging
from stores.game_store import GameStore, ThemeStore
from stores.kv_store import close_store, get_store

# Configure logging based on environment
setup_logging(
    level=config.LOG_LEVEL,
    environment=config.ENVIRONMENT,
)
logger = logging.getLogger(__name__)

DEVICE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
DEFAULT_DEVICE_ID = "local"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the storage backend for the lifetime of the app."""
    store = get_store(config.STORAGE_BACKEND, config.SQLITE_PATH, config.REDIS_URL)

    from routers.health import set_health_dependencies
    set_health_dependencies(store=store, backend_name=config.STORAGE_BACKEND)

    logger.info(f"Wolf server started (environment={config.ENVIRONMENT})")

    yield

    logger.info("Shutdown initiated...")
    close_store()
    logger.info("Shutdown complete")


app = FastAPI(
    title="Wolf Tracker",
    debug=config.DEBUG,
    version="0.5.3",
    lifespan=lifespan,
)


# =============================================================================
# Routers
# =============================================================================

from routers.health import router as health_router
app.include_router(health_router)


def device_slot(key: str, device_id: str) -> str:
    """Namespace a slot key for one device."""
    return f"{key}:{device_id}"


def build_context(websocket: WebSocket, device_id: str) -> ConnectionContext:
    """Wire a controller to the storage slots of a device."""
    kv = get_store(config.STORAGE_BACKEND, config.SQLITE_PATH, config.REDIS_URL)
    view = MessageView()
    controller = BoardController(
        view=view,
        game_store=GameStore(kv, device_slot(STATE_KEY, device_id)),
        theme_store=ThemeStore(kv, device_slot(THEME_KEY, device_id)),
        device_id=device_id,
    )
    return ConnectionContext(
        websocket=websocket,
        connection_id=str(uuid.uuid4()),
        device_id=device_id,
        view=view,
        controller=controller,
    )


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    await websocket.accept()

    device_id = websocket.query_params.get("device", DEFAULT_DEVICE_ID)
    if not DEVICE_ID_PATTERN.match(device_id):
        device_id = DEFAULT_DEVICE_ID

    ctx = build_context(websocket, device_id)
    connection_id_var.set(ctx.connection_id)
    device_id_var.set(device_id)
    logger.debug("WebSocket connected")

    await run_in_threadpool(ctx.controller.boot)
    await flush(ctx)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            text = message.get("text")
            if text is None:
                await websocket.send_json({"type": "error", "message": "Expected a text frame"})
                continue
            try:
                data = json.loads(text)
            except (ValueError, RecursionError):
                await websocket.send_json({"type": "error", "message": "Invalid JSON"})
                continue
            if not isinstance(data, dict):
                continue
            handler = HANDLERS.get(data.get("type"))
            if handler:
                await handler(data, ctx)
                await flush(ctx)
            else:
                logger.debug(f"Ignoring unknown message type: {data.get('type')}")
    except WebSocketDisconnect:
        logger.debug("WebSocket disconnected")


# Serve the widget if the client directory exists
client_path = os.path.join(os.path.dirname(__file__), "..", "client")
if os.path.exists(client_path):
    @app.get("/")
    async def serve_index():
        return FileResponse(os.path.join(client_path, "index.html"))

    # Mount static files for everything else (JS, CSS)
    app.mount("/", StaticFiles(directory=client_path), name="static")


def run():
    """Run the server using uvicorn."""
    import uvicorn

    logger.info(f"Starting Wolf server on {config.HOST}:{config.PORT}")
    logger.info(f"Debug mode: {config.DEBUG}")

    uvicorn.run(
        "main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.DEBUG,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
