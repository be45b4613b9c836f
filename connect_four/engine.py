"""
Connect Four session lifecycle.

SessionEngine is the only thing that mutates a Session. It is a pure
state machine: no networking, no serialization. Every accepted event
returns an ActionResult telling the server whether to broadcast; every
rejected event raises before touching the session.

Status machine:
  waiting → ongoing → (win | draw | abandoned) → reset → ongoing | waiting
  any status with zero participants left → full reset → waiting
"""

from dataclasses import dataclass, field

from connect_four import board as rules
from connect_four.session import (
    Session, Participant, MAX_PLAYERS, PLAYER1,
    WAITING, ONGOING, WIN, DRAW, ABANDONED, other_seat,
)


@dataclass
class ActionResult:
    """Returned by every accepted event to tell the server what happened."""
    # Whether every participant should be sent the new state
    broadcast: bool = True
    log: list[str] = field(default_factory=list)


class IllegalCommand(ValueError):
    """A well-formed command that the current session state does not allow."""


class SessionFull(IllegalCommand):
    """A join attempted while both seats are taken or a game is underway."""


class SessionEngine:

    def __init__(self, session=None):
        self.session = session if session is not None else Session()

    # ── Queries ───────────────────────────────────────────────────────

    def valid_columns(self, channel):
        """Columns this channel may drop into right now (empty if not its turn)."""
        session = self.session
        if session.status != ONGOING:
            return []
        if session.identity_of(channel) != session.turn_owner:
            return []
        return rules.playable_columns(session.board)

    def waiting_for(self):
        if self.session.status != ONGOING:
            return []
        return [self.session.turn_owner]

    # ── Events ────────────────────────────────────────────────────────

    def join(self, channel):
        """Seat a newly connected channel. Returns (identity, ActionResult)."""
        session = self.session
        if channel in session.participants:
            raise IllegalCommand("Already seated in this game.")
        if len(session.participants) >= MAX_PLAYERS or session.status != WAITING:
            raise SessionFull("Game is full.")

        identity = session.next_free_seat()
        session.participants[channel] = Participant(identity=identity, channel=channel)
        log = [f"{identity} joined ({len(session.participants)}/{MAX_PLAYERS})"]

        if len(session.participants) == MAX_PLAYERS:
            session.status = ONGOING
            log.append(f"Game started, {session.turn_owner} to move")

        return identity, ActionResult(broadcast=True, log=log)

    def move(self, channel, column, actor):
        session = self.session
        identity = self._require_actor(channel, actor)

        if session.status != ONGOING:
            raise IllegalCommand("Game is not in progress.")
        if identity != session.turn_owner:
            raise IllegalCommand("Not your turn.")
        if not rules.is_column_playable(session.board, column):
            raise IllegalCommand("Invalid move.")

        row = rules.drop(session.board, column, identity)
        if row is None:
            raise RuntimeError(f"Column {column} was playable but drop found no empty cell")

        log = [f"{identity} dropped in column {column} (row {row})"]
        status, winner = rules.evaluate_terminal(session.board)
        if status == WIN:
            session.status = WIN
            session.winner = winner
            log.append(f"{winner} wins")
        elif status == DRAW:
            session.status = DRAW
            session.winner = None
            log.append("Board full, game drawn")
        else:
            session.turn_owner = other_seat(identity)

        return ActionResult(broadcast=True, log=log)

    def reset(self, channel, actor):
        """Start a new round after a finished game, keeping whoever is seated."""
        session = self.session
        identity = self._require_actor(channel, actor)

        if not session.is_terminal:
            raise IllegalCommand("Game can only be reset when it's over.")

        session.board = rules.create_empty_board()
        session.turn_owner = PLAYER1
        session.winner = None
        if len(session.participants) == MAX_PLAYERS:
            session.status = ONGOING
        else:
            session.status = WAITING

        return ActionResult(
            broadcast=True,
            log=[f"{identity} reset the game, now {session.status}"],
        )

    def disconnect(self, channel):
        session = self.session
        participant = session.participants.pop(channel, None)
        if participant is None:
            return ActionResult(broadcast=False, log=["Unseated channel disconnected"])

        remaining = list(session.participants.values())
        log = [f"{participant.identity} left, {len(remaining)} remaining"]
        broadcast = False

        if session.status == ONGOING:
            session.status = ABANDONED
            session.winner = remaining[0].identity if len(remaining) == 1 else None
            log.append(f"Game abandoned, winner: {session.winner}")
            broadcast = True

        if not remaining and session.status != WAITING:
            self.full_reset()
            log.append("All players gone, session reset")
            broadcast = False

        return ActionResult(broadcast=broadcast, log=log)

    def full_reset(self):
        """Throw the whole session record away and start over empty."""
        self.session = Session()

    # ── Helpers ───────────────────────────────────────────────────────

    def _require_actor(self, channel, actor):
        identity = self.session.identity_of(channel)
        if identity is None:
            raise IllegalCommand("You are not seated in this game.")
        if actor != identity:
            raise IllegalCommand(f"You can only act as {identity}.")
        return identity
