from pydantic import BaseModel, Field
from typing import List, Optional, Literal

GameMode = Literal["pvp", "ai"]
Theme = Literal["light", "dark"]


# PUBLIC_INTERFACE
class GameStartRequest(BaseModel):
    """Request model to start a new game."""
    mode: GameMode = Field("pvp", description="Player vs Player (pvp) or Player vs AI (ai).")
    theme: Optional[Theme] = Field(None, description="Initial theme; server default if omitted.")


# PUBLIC_INTERFACE
class ModeRequest(BaseModel):
    """Request model for switching the game mode. Always resets the board."""
    mode: GameMode = Field(..., description="Mode to switch to.")


# PUBLIC_INTERFACE
class GameSnapshot(BaseModel):
    """Read-only view of a game, returned after every command."""
    game_id: int = Field(..., description="Game session ID.")
    board: List[Optional[str]] = Field(..., description="9 cells, row by row; X, O, or None for each cell.")
    mode: GameMode
    theme: Theme
    next_turn: Optional[str] = Field(None, description="Mark to move next; None once the game is decided.")
    winner: Optional[str] = Field(None, description="X, O, draw, or None while undecided.")
    winning_line: Optional[List[int]] = None
    is_ai_turn: bool = False
    can_change_mode: bool = Field(True, description="False once a game is under way; advisory for the mode selector.")
    status: str


# PUBLIC_INTERFACE
class WsCommand(BaseModel):
    """A command sent by a client over the game websocket."""
    type: Literal["cell_clicked", "set_mode", "restart", "toggle_theme"]
    index: Optional[int] = Field(None, ge=0, le=8, description="Cell index for cell_clicked.")
    mode: Optional[GameMode] = Field(None, description="Target mode for set_mode.")
