"""
Session state for a single Connect Four game.

A Session is the one authoritative record the server mutates: the board,
whose turn it is, the game status, who is seated, and who won. It is a
plain object held by the server (not a module global), so tests and
separate servers each get their own.
"""

from copy import deepcopy
from dataclasses import dataclass, field

from connect_four.board import create_empty_board, ONGOING, WIN, DRAW

# ── Seats & Statuses ─────────────────────────────────────────────────

PLAYER1 = "Player1"
PLAYER2 = "Player2"
SEATS = (PLAYER1, PLAYER2)
MAX_PLAYERS = len(SEATS)

WAITING = "waiting"
ABANDONED = "abandoned"
# ONGOING, WIN and DRAW are shared with the board evaluator
TERMINAL_STATUSES = (WIN, DRAW, ABANDONED)

__all__ = [
    "PLAYER1", "PLAYER2", "SEATS", "MAX_PLAYERS",
    "WAITING", "ONGOING", "WIN", "DRAW", "ABANDONED", "TERMINAL_STATUSES",
    "Participant", "Session", "other_seat",
]


def other_seat(identity):
    return PLAYER2 if identity == PLAYER1 else PLAYER1


@dataclass
class Participant:
    identity: str
    channel: object = None


@dataclass
class Session:
    board: list = field(default_factory=create_empty_board)
    turn_owner: str = PLAYER1
    status: str = WAITING
    participants: dict = field(default_factory=dict)   # channel -> Participant
    winner: str = None

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES

    @property
    def seated(self):
        """Identities currently held, in seat order."""
        held = {p.identity for p in self.participants.values()}
        return [seat for seat in SEATS if seat in held]

    def identity_of(self, channel):
        """Seat held by this channel, or None if it isn't seated."""
        participant = self.participants.get(channel)
        return participant.identity if participant else None

    def next_free_seat(self):
        held = set(self.seated)
        for seat in SEATS:
            if seat not in held:
                return seat
        return None

    def snapshot(self):
        """Copy of the wire-visible state; safe to hold across later mutation."""
        return {
            "board": deepcopy(self.board),
            "currentPlayer": self.turn_owner,
            "status": self.status,
            "winner": self.winner,
        }
