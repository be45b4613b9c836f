"""
Wire protocol for the Connect Four server.

Every message is a JSON object with a "type" field. This module turns
raw inbound text into command objects and builds the outbound message
dicts; it never touches a connection or mutates a session.
"""

import json
from dataclasses import dataclass

from connect_four.config import Config
from connect_four.session import TERMINAL_STATUSES

# ── Message Types ────────────────────────────────────────────────────

# Client → server
MOVE = "move"
RESET_GAME = "reset-game"
CHAT = "chat"

# Server → client
PLAYER_ASSIGNMENT = "player-assignment"
UPDATE = "update"
GAME_OVER = "game-over"
GAME_FULL = "game-full"
ERROR = "error"
CHAT_MESSAGE = "chat-message"


class ProtocolError(ValueError):
    """Inbound payload could not be parsed or validated."""


@dataclass
class MoveCommand:
    actor: str
    column: int


@dataclass
class ResetCommand:
    actor: str


@dataclass
class ChatCommand:
    actor: str
    text: str


# ── Decoding ─────────────────────────────────────────────────────────

def decode_message(raw, max_chat_length=Config.MAX_CHAT_LENGTH):
    """
    Parse one inbound payload into a command.

    Raises ProtocolError for anything that is not a JSON object with a
    known type and the fields that type needs. Whether the command is
    allowed right now is the engine's business, not ours.
    """
    try:
        msg = json.loads(raw)
    except (ValueError, TypeError, RecursionError):
        # deeply nested arrays exhaust the parser before it can fail cleanly
        raise ProtocolError("Invalid message format.")
    if not isinstance(msg, dict):
        raise ProtocolError("Invalid message format.")

    msg_type = msg.get("type")
    actor = msg.get("player")

    if msg_type == MOVE:
        column = msg.get("column")
        if isinstance(column, bool) or not isinstance(column, int):
            raise ProtocolError("Move requires an integer column.")
        return MoveCommand(actor=_require_actor(actor), column=column)

    if msg_type == RESET_GAME:
        return ResetCommand(actor=_require_actor(actor))

    if msg_type == CHAT:
        text = msg.get("text")
        if not isinstance(text, str) or not text.strip():
            raise ProtocolError("Invalid chat message.")
        text = text.strip()
        if len(text) > max_chat_length:
            raise ProtocolError(f"Chat message longer than {max_chat_length} characters.")
        return ChatCommand(actor=_require_actor(actor), text=text)

    raise ProtocolError(f"Unknown message type: {msg_type}")


def _require_actor(actor):
    if not isinstance(actor, str) or not actor:
        raise ProtocolError("Message is missing the player field.")
    return actor


# ── Encoding ─────────────────────────────────────────────────────────

def encode(message):
    return json.dumps(message)


def seat_assignment(identity, session):
    state = session.snapshot()
    return {
        "type": PLAYER_ASSIGNMENT,
        "playerId": identity,
        "board": state["board"],
        "currentPlayer": state["currentPlayer"],
        "status": state["status"],
    }


def state_message(session):
    """update while a game is waiting or running, game-over once it has ended."""
    message = session.snapshot()
    if message["status"] in TERMINAL_STATUSES:
        message["type"] = GAME_OVER
    else:
        message["type"] = UPDATE
    return message


def game_full():
    return {"type": GAME_FULL}


def error(message):
    return {"type": ERROR, "message": message}


def chat_relay(sender, text):
    return {"type": CHAT_MESSAGE, "sender": sender, "text": text}
