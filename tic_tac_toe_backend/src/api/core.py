from typing import List, Optional, Sequence, Tuple

X = "X"
O = "O"
DRAW = "draw"

HUMAN_MARK = X
AI_MARK = O

# Rows, columns, diagonals. The order decides which line is reported first.
LINES: List[Tuple[int, int, int]] = [
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
]
CENTER = 4
CORNERS = (0, 2, 6, 8)

Cells = Sequence[Optional[str]]


def empty_board() -> List[Optional[str]]:
    return [None] * 9


# PUBLIC_INTERFACE
def winning_line(cells: Cells) -> Optional[Tuple[int, int, int]]:
    """Return the first line holding three equal marks, or None."""
    for a, b, c in LINES:
        if cells[a] and cells[a] == cells[b] == cells[c]:
            return a, b, c
    return None


# PUBLIC_INTERFACE
def calculate_winner(cells: Cells) -> Optional[str]:
    """Checks a 9-cell board. Returns 'X', 'O', 'draw', or None if undecided."""
    line = winning_line(cells)
    if line is not None:
        return cells[line[0]]
    if all(cells):
        return DRAW
    return None


def _completes_line(cells: Cells, index: int, mark: str) -> bool:
    trial = list(cells)
    trial[index] = mark
    return calculate_winner(trial) == mark


# PUBLIC_INTERFACE
def get_ai_move(cells: Cells, ai_mark: str = AI_MARK, human_mark: str = HUMAN_MARK) -> Optional[int]:
    """Heuristic AI: win, else block, else center, else corner, else first free cell.

    Only looks one move ahead, so it can be beaten. Returns None when the
    board is full.
    """
    free = [i for i, cell in enumerate(cells) if not cell]
    if not free:
        return None
    for mark in (ai_mark, human_mark):
        for i in free:
            if _completes_line(cells, i, mark):
                return i
    if not cells[CENTER]:
        return CENTER
    for i in CORNERS:
        if not cells[i]:
            return i
    return free[0]


# PUBLIC_INTERFACE
def status_text(mode: str, winner: Optional[str], next_mark: str, is_ai_turn: bool) -> str:
    """Human readable status line for the current game."""
    if winner == DRAW:
        return "It's a draw! 🤝"
    if winner in (X, O):
        if mode == "ai" and winner == AI_MARK:
            return "AI wins! 🤖"
        return f"{'Player 1' if winner == X else 'Player 2'} wins! 🎉"
    if mode == "ai":
        if is_ai_turn:
            return "AI is thinking... 🤖"
        return "AI's Turn (O)" if next_mark == AI_MARK else "Your Turn (X)"
    return "Player 1's Turn (X)" if next_mark == X else "Player 2's Turn (O)"
