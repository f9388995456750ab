import asyncio
import random
from typing import Any, Callable, List, Optional, Tuple

from .config import AI_DELAY_MAX_MS, AI_DELAY_MIN_MS, DEFAULT_THEME, logger
from .core import AI_MARK, HUMAN_MARK, O, X, calculate_winner, empty_board, get_ai_move, status_text, winning_line
from .models import GameSnapshot

# call_later(delay_seconds, callback, *args) -> handle with cancel()
Scheduler = Callable[..., Any]
Listener = Callable[["GameController"], None]


class GameController:
    """State of one game: board, turn, mode and theme.

    The outcome is never stored; `winner` recomputes it from the board. In AI
    mode the automated player's reply is delayed by a timer tied to an epoch
    counter. Every game transition bumps the epoch and cancels the pending
    timer, and a timer that fires with a stale epoch does nothing.
    """

    def __init__(
        self,
        game_id: int = 0,
        mode: str = "pvp",
        theme: str = DEFAULT_THEME,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        delay_ms: Optional[Tuple[int, int]] = None,
    ):
        self.game_id = game_id
        self.mode = mode
        self.theme = theme
        self.cells: List[Optional[str]] = empty_board()
        self.is_x_next = True
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._delay_ms = delay_ms or (AI_DELAY_MIN_MS, AI_DELAY_MAX_MS)
        self._epoch = 0
        self._pending: Optional[asyncio.TimerHandle] = None
        self._listeners: List[Listener] = []

    @property
    def winner(self) -> Optional[str]:
        return calculate_winner(self.cells)

    @property
    def next_mark(self) -> str:
        return X if self.is_x_next else O

    @property
    def is_ai_turn(self) -> bool:
        return self.mode == "ai" and self.winner is None and not self.is_x_next

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def has_pending_move(self) -> bool:
        return self._pending is not None

    # PUBLIC_INTERFACE
    def apply_move(self, index: int) -> bool:
        """Place the current mark at index. Returns False (and changes nothing) if rejected."""
        if self.winner or self.cells[index]:
            return False
        self.cells[index] = self.next_mark
        self.is_x_next = not self.is_x_next
        logger.debug("game %s: %s played %d", self.game_id, self.cells[index], index)
        self._transition()
        return True

    # PUBLIC_INTERFACE
    def cell_clicked(self, index: int) -> bool:
        """Handle a click from a human. In AI mode only X may move, and only on its turn."""
        if self.mode == "ai" and (not self.is_x_next or self.winner):
            return False
        return self.apply_move(index)

    # PUBLIC_INTERFACE
    def set_mode(self, mode: str) -> None:
        """Switch mode and start a fresh board, even if the mode is unchanged."""
        logger.info("game %s: mode set to %s", self.game_id, mode)
        self.mode = mode
        self._reset()

    # PUBLIC_INTERFACE
    def restart(self) -> None:
        logger.info("game %s: restarted", self.game_id)
        self._reset()

    # PUBLIC_INTERFACE
    def toggle_theme(self) -> None:
        # Not a game transition: epoch and any pending AI move are left alone.
        self.theme = "dark" if self.theme == "light" else "light"
        self._notify()

    # PUBLIC_INTERFACE
    def close(self) -> None:
        """Drop any pending AI move and stop notifying listeners."""
        self._epoch += 1
        self._cancel_pending()
        self._listeners.clear()

    # PUBLIC_INTERFACE
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener after every state change. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # PUBLIC_INTERFACE
    def snapshot(self) -> GameSnapshot:
        winner = self.winner
        line = winning_line(self.cells)
        return GameSnapshot(
            game_id=self.game_id,
            board=list(self.cells),
            mode=self.mode,
            theme=self.theme,
            next_turn=None if winner else self.next_mark,
            winner=winner,
            winning_line=list(line) if line else None,
            is_ai_turn=self.is_ai_turn,
            can_change_mode=winner is None and not any(self.cells),
            status=status_text(self.mode, winner, self.next_mark, self.is_ai_turn),
        )

    def _reset(self) -> None:
        self.cells = empty_board()
        self.is_x_next = True
        self._transition()

    def _transition(self) -> None:
        self._epoch += 1
        self._cancel_pending()
        if self.is_ai_turn:
            self._schedule_ai_move()
        self._notify()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _schedule_ai_move(self) -> None:
        low, high = self._delay_ms
        delay = (low + self._rng.random() * (high - low)) / 1000.0
        call_later = self._scheduler or asyncio.get_running_loop().call_later
        logger.debug("game %s: AI move in %.3fs (epoch %d)", self.game_id, delay, self._epoch)
        self._pending = call_later(delay, self._run_ai_move, self._epoch)

    def _run_ai_move(self, epoch: int) -> None:
        if epoch != self._epoch or not self.is_ai_turn:
            logger.debug("game %s: dropped stale AI move (epoch %d, now %d)", self.game_id, epoch, self._epoch)
            return
        self._pending = None
        index = get_ai_move(self.cells, AI_MARK, HUMAN_MARK)
        if index is not None:
            self.apply_move(index)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
