import itertools

from src.api.core import DRAW, LINES, calculate_winner, get_ai_move, status_text, winning_line

_ = None
X, O = "X", "O"


def board(*cells):
    assert len(cells) == 9
    return list(cells)


def test_row_column_and_diagonal_wins():
    assert calculate_winner(board(X, X, X, O, O, _, _, _, _)) == X
    assert calculate_winner(board(O, X, _, O, X, _, O, _, X)) == O
    assert calculate_winner(board(X, O, _, O, X, _, _, _, X)) == X
    assert calculate_winner(board(_, _, O, X, O, X, O, X, _)) == O


def test_draw_only_when_full_and_no_line():
    assert calculate_winner(board(X, O, X, X, O, O, O, X, X)) == DRAW
    assert calculate_winner(board(X, O, X, X, O, O, O, X, _)) is None


def test_full_board_with_line_is_a_win_not_a_draw():
    assert calculate_winner(board(X, X, X, O, O, X, X, O, O)) == X


def test_empty_board_is_undecided():
    assert calculate_winner([None] * 9) is None


def test_winner_only_when_a_line_is_complete():
    # Every board with exactly two marks is undecided.
    for i, j in itertools.combinations(range(9), 2):
        cells = [None] * 9
        cells[i] = cells[j] = X
        assert calculate_winner(cells) is None
    for line in LINES:
        cells = [None] * 9
        for i in line:
            cells[i] = O
        assert calculate_winner(cells) == O
        assert winning_line(cells) == line


def test_scripted_game_top_row():
    cells = [None] * 9
    for index, mark in [(0, X), (4, O), (1, X), (8, O), (2, X)]:
        cells[index] = mark
    assert calculate_winner(cells) == X
    assert winning_line(cells) == (0, 1, 2)


def test_ai_takes_win_before_block():
    assert get_ai_move(board(O, O, _, X, X, _, _, _, _), O, X) == 2


def test_ai_blocks_when_no_win():
    assert get_ai_move(board(X, X, _, O, _, _, _, _, _), O, X) == 2


def test_ai_picks_lowest_winning_index():
    # O can win at 2 (top row) and at 6 (left column).
    assert get_ai_move(board(O, O, _, O, X, X, _, X, _), O, X) == 2


def test_ai_prefers_center_on_empty_board():
    assert get_ai_move([None] * 9, O, X) == 4


def test_ai_takes_first_free_corner():
    assert get_ai_move(board(X, _, _, _, O, _, _, _, _), O, X) == 2


def test_ai_falls_back_to_first_free_cell():
    # Center and corners taken, no wins or blocks available.
    assert get_ai_move(board(X, O, X, _, X, _, O, X, O), O, X) == 3


def test_ai_returns_none_on_full_board():
    assert get_ai_move(board(X, O, X, X, O, O, O, X, X), O, X) is None


def test_ai_always_picks_an_empty_cell():
    for marks in itertools.product([None, X, O], repeat=4):
        cells = list(marks) + [X, O, None, None, X]
        move = get_ai_move(cells, O, X)
        assert cells[move] is None


def test_status_text():
    assert status_text("pvp", None, X, False) == "Player 1's Turn (X)"
    assert status_text("pvp", None, O, False) == "Player 2's Turn (O)"
    assert status_text("ai", None, X, False) == "Your Turn (X)"
    assert status_text("ai", None, O, True) == "AI is thinking... 🤖"
    assert status_text("ai", O, O, False) == "AI wins! 🤖"
    assert status_text("pvp", O, X, False) == "Player 2 wins! 🎉"
    assert status_text("ai", X, O, False) == "Player 1 wins! 🎉"
    assert status_text("ai", DRAW, X, False) == "It's a draw! 🤝"
