"""
Board constants and pure helpers for Connect Four.

The board is a plain list of rows (row 0 is the top), each cell either
None or a seat identity string. Nothing here does I/O or knows about
connections.
"""

ROWS = 6
COLS = 7
WIN_LENGTH = 4

# Probe directions as (row step, column step): →, ↓, ↘, ↙
DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))

ONGOING = "ongoing"
WIN = "win"
DRAW = "draw"


# ── Construction ──────────────────────────────────────────────────────

def create_empty_board():
    """Return a fresh 6x7 board with every cell empty."""
    return [[None for _ in range(COLS)] for _ in range(ROWS)]


# ── Queries ───────────────────────────────────────────────────────────

def is_column_playable(board, column):
    """
    True iff a piece can be dropped into this column.

    Fails closed: anything that is not an in-range integer column is
    simply unplayable, never an exception.
    """
    if isinstance(column, bool) or not isinstance(column, int):
        return False
    if column < 0 or column >= COLS:
        return False
    return board[0][column] is None


def playable_columns(board):
    return [c for c in range(COLS) if board[0][c] is None]


def is_full(board):
    return all(cell is not None for row in board for cell in row)


# ── Mutation ──────────────────────────────────────────────────────────

def drop(board, column, identity):
    """
    Drop a piece into the lowest empty cell of a column.

    Returns the row the piece landed in, or None if the column is full
    (the board is left untouched in that case).
    """
    for row in range(ROWS - 1, -1, -1):
        if board[row][column] is None:
            board[row][column] = identity
            return row
    return None


# ── Terminal Detection ───────────────────────────────────────────────

def _run_length(board, row, col, d_row, d_col):
    """Length of the same-identity run starting at (row, col), capped at WIN_LENGTH."""
    identity = board[row][col]
    count = 1
    for step in range(1, WIN_LENGTH):
        r = row + d_row * step
        c = col + d_col * step
        if 0 <= r < ROWS and 0 <= c < COLS and board[r][c] == identity:
            count += 1
        else:
            break
    return count


def evaluate_terminal(board):
    """
    Return (status, winner) for the board.

    - (WIN, identity) as soon as any four-in-a-row is found
    - (DRAW, None) if the board is full with no winning line
    - (ONGOING, None) otherwise
    """
    for row in range(ROWS):
        for col in range(COLS):
            identity = board[row][col]
            if identity is None:
                continue
            for d_row, d_col in DIRECTIONS:
                if _run_length(board, row, col, d_row, d_col) >= WIN_LENGTH:
                    return WIN, identity

    if is_full(board):
        return DRAW, None
    return ONGOING, None
