import asyncio
import contextlib
from typing import Dict, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect, HTTPException, Path
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from . import config
from .config import logger
from .controller import GameController
from .models import GameStartRequest, GameSnapshot, ModeRequest, WsCommand

# In-memory game sessions, lost on restart:
sessions_db: Dict[int, GameController] = {}  # game_id: controller
game_id_counter = 1

app = FastAPI(
    title="Tic Tac Toe API",
    description="Game state service for the Tic Tac Toe frontend. Holds the board, mode and theme of each open game, "
                "plays the AI opponent, and pushes updates over websockets.",
    version="0.2.0",
    openapi_tags=[
        {"name": "game", "description": "Start/play Tic Tac Toe games"},
        {"name": "ws", "description": "Websockets for real-time updates"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


##---- Utility Functions ----##
def get_game(game_id: int) -> GameController:
    controller = sessions_db.get(game_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return controller


def dispatch_command(controller: GameController, command: WsCommand) -> None:
    """Apply a websocket command to a game. Rejected moves are silently ignored."""
    if command.type == "cell_clicked":
        if command.index is None:
            raise ValueError("cell_clicked requires an index")
        controller.cell_clicked(command.index)
    elif command.type == "set_mode":
        if command.mode is None:
            raise ValueError("set_mode requires a mode")
        controller.set_mode(command.mode)
    elif command.type == "restart":
        controller.restart()
    elif command.type == "toggle_theme":
        controller.toggle_theme()


@app.get("/", tags=["health"])
def health_check():
    """Health check route for backend"""
    return {"message": "Healthy"}


# PUBLIC_INTERFACE
@app.post("/games", response_model=GameSnapshot, tags=["game"], summary="Start new game")
async def start_game(request: Optional[GameStartRequest] = None):
    """Start a new Tic Tac Toe game, vs another local player or vs AI.

    Returns: snapshot of the new game, including its ID.
    """
    global game_id_counter
    request = request or GameStartRequest()
    gid = game_id_counter
    game_id_counter += 1
    controller = GameController(
        game_id=gid,
        mode=request.mode,
        theme=request.theme or config.DEFAULT_THEME,
        delay_ms=(config.AI_DELAY_MIN_MS, config.AI_DELAY_MAX_MS),
    )
    snapshot = controller.snapshot()
    sessions_db[gid] = controller
    logger.info("game %s: created (mode=%s)", gid, controller.mode)
    return snapshot


# PUBLIC_INTERFACE
@app.get("/games/{game_id}", response_model=GameSnapshot, tags=["game"], summary="Get current game state")
async def get_game_state(game_id: int):
    """Get board state and info for a game."""
    return get_game(game_id).snapshot()


# PUBLIC_INTERFACE
@app.post("/games/{game_id}/cells/{index}", response_model=GameSnapshot, tags=["game"], summary="Click a cell")
async def click_cell(game_id: int, index: int = Path(..., ge=0, le=8, description="Cell index (0-8), row by row.")):
    """Play the cell for the human whose turn it is.

    Occupied cells, finished games, and clicks during the AI's turn are ignored;
    the unchanged state is returned.
    """
    controller = get_game(game_id)
    controller.cell_clicked(index)
    return controller.snapshot()


# PUBLIC_INTERFACE
@app.post("/games/{game_id}/mode", response_model=GameSnapshot, tags=["game"], summary="Change game mode")
async def change_mode(game_id: int, request: ModeRequest):
    """Switch between pvp and ai. Always starts a fresh board."""
    controller = get_game(game_id)
    controller.set_mode(request.mode)
    return controller.snapshot()


# PUBLIC_INTERFACE
@app.post("/games/{game_id}/restart", response_model=GameSnapshot, tags=["game"], summary="Restart game")
async def restart_game(game_id: int):
    controller = get_game(game_id)
    controller.restart()
    return controller.snapshot()


# PUBLIC_INTERFACE
@app.post("/games/{game_id}/theme", response_model=GameSnapshot, tags=["game"], summary="Toggle light/dark theme")
async def toggle_theme(game_id: int):
    controller = get_game(game_id)
    controller.toggle_theme()
    return controller.snapshot()


# PUBLIC_INTERFACE
@app.delete("/games/{game_id}", tags=["game"], summary="Discard a game")
async def delete_game(game_id: int):
    """Forget a game and cancel its pending AI move, if any."""
    controller = get_game(game_id)
    controller.close()
    del sessions_db[game_id]
    logger.info("game %s: closed", game_id)
    return {"message": "Game deleted"}


async def _push_snapshots(websocket: WebSocket, queue: "asyncio.Queue[GameSnapshot]"):
    while True:
        snapshot = await queue.get()
        await websocket.send_json(snapshot.model_dump())


# PUBLIC_INTERFACE
@app.websocket("/ws/game/{game_id}")
async def websocket_game_updates(websocket: WebSocket, game_id: int):
    """
    WebSocket for game updates. Usage: connect to ws://host/ws/game/{game_id}.
    Sends the current state on connect and again after every change, including the AI's delayed moves.
    Accepts JSON commands, see /websocket_info.
    """
    await websocket.accept()
    controller = sessions_db.get(game_id)
    if controller is None:
        await websocket.send_json({"error": "Invalid game_id"})
        await websocket.close(code=1008)
        return

    queue: asyncio.Queue = asyncio.Queue()
    unsubscribe = controller.subscribe(lambda c: queue.put_nowait(c.snapshot()))
    queue.put_nowait(controller.snapshot())
    pusher = asyncio.create_task(_push_snapshots(websocket, queue))
    pusher.add_done_callback(lambda _: unsubscribe())
    try:
        while True:
            if websocket.application_state != WebSocketState.CONNECTED:
                break
            data = await websocket.receive_text()
            if sessions_db.get(game_id) is not controller:
                # Deleted while connected.
                await websocket.send_json({"error": "Invalid game_id"})
                await websocket.close(code=1008)
                break
            if data == "ping":
                await websocket.send_text("pong")
                continue
            try:
                dispatch_command(controller, WsCommand.model_validate_json(data))
            except (ValidationError, ValueError) as e:
                logger.warning("game %s: rejected websocket command %r: %s", game_id, data, e)
                await websocket.send_json({"error": str(e)})
    except WebSocketDisconnect:
        pass
    finally:
        unsubscribe()
        pusher.cancel()
        with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
            await pusher


# Misc: Docs route for websocket usage notes
@app.get("/websocket_info", tags=["ws"], summary="Get websocket usage instructions")
def websocket_info():
    """Instructions for real-time connection via websocket."""
    return {
        "usage":
            "Connect using WebSocket at ws://HOST/ws/game/{game_id} to receive game state updates in real-time. "
            "Send 'ping' for a pong, or a JSON command: "
            '{"type": "cell_clicked", "index": 0-8}, {"type": "set_mode", "mode": "pvp"|"ai"}, '
            '{"type": "restart"}, {"type": "toggle_theme"}.'
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())
