"""
Connect Four WebSocket server.

Hosts one game session. Each connection is seated on connect (or told
the game is full), its messages are decoded and routed to the session
engine, and every accepted change is broadcast to both players. Game
rules live in the engine; this module only moves messages around.
"""

import asyncio
import logging

import websockets

from connect_four import protocol
from connect_four.config import Config
from connect_four.engine import SessionEngine, IllegalCommand, SessionFull
from connect_four.log import setup_logging
from connect_four.protocol import ProtocolError, MoveCommand, ResetCommand, ChatCommand

logger = logging.getLogger(__name__)


class GameServer:
    """
    Owns one session engine and the channels seated in it.

    All session changes and the broadcasts that follow them happen under
    one lock, so a slow send can never interleave two events.
    """

    def __init__(self, session=None, config=Config):
        self.engine = SessionEngine(session)
        self.max_chat_length = config.MAX_CHAT_LENGTH
        self._lock = asyncio.Lock()

    @property
    def session(self):
        return self.engine.session

    # ── WebSocket Handler ────────────────────────────────────────────

    async def handle_connection(self, websocket):
        """Main handler for a single WebSocket connection."""
        identity = None
        try:
            identity = await self.connect(websocket)
            logger.info("Client connected as %s", identity or "rejected")

            async for raw in websocket:
                await self.handle_message(websocket, raw)
        except websockets.ConnectionClosed:
            pass
        except Exception:
            logger.exception("Unexpected error handling %s", identity or "unseated client")
        finally:
            await self.disconnect(websocket)

    # ── Lifecycle Events ─────────────────────────────────────────────

    async def connect(self, websocket):
        """Seat a new channel. Returns its identity, or None if the game is full."""
        async with self._lock:
            try:
                identity, result = self.engine.join(websocket)
            except SessionFull as e:
                logger.info("Join rejected: %s", e)
                await self._send(websocket, protocol.game_full())
                return None

            self._log(result)
            await self._send(websocket, protocol.seat_assignment(identity, self.session))
            if result.broadcast:
                await self._broadcast_state()
            return identity

    async def disconnect(self, websocket):
        async with self._lock:
            result = self.engine.disconnect(websocket)
            self._log(result)
            if result.broadcast:
                await self._broadcast_state()

    # ── Message Handlers ─────────────────────────────────────────────

    async def handle_message(self, websocket, raw):
        try:
            command = protocol.decode_message(raw, self.max_chat_length)
        except ProtocolError as e:
            logger.warning("Malformed message from %s: %s", self._who(websocket), e)
            await self._send(websocket, protocol.error(str(e)))
            return

        if isinstance(command, MoveCommand):
            await self._handle_move(websocket, command)
        elif isinstance(command, ResetCommand):
            await self._handle_reset(websocket, command)
        elif isinstance(command, ChatCommand):
            await self._handle_chat(websocket, command)

    async def _handle_move(self, websocket, command):
        async with self._lock:
            try:
                result = self.engine.move(websocket, command.column, command.actor)
            except IllegalCommand as e:
                await self._reject(websocket, e)
                return
            self._log(result)
            await self._broadcast_state()

    async def _handle_reset(self, websocket, command):
        async with self._lock:
            try:
                result = self.engine.reset(websocket, command.actor)
            except IllegalCommand as e:
                await self._reject(websocket, e)
                return
            self._log(result)
            await self._broadcast_state()

    async def _handle_chat(self, websocket, command):
        sender = self.session.identity_of(websocket)
        if sender is None:
            await self._reject(websocket, IllegalCommand("You are not seated in this game."))
            return
        if command.actor != sender:
            await self._reject(websocket, IllegalCommand(f"You can only act as {sender}."))
            return

        logger.info("Chat from %s: %r", sender, command.text)
        async with self._lock:
            await self._broadcast(protocol.chat_relay(sender, command.text))

    async def _reject(self, websocket, error):
        logger.warning("Rejected command from %s: %s", self._who(websocket), error)
        await self._send(websocket, protocol.error(str(error)))

    # ── Broadcasting ─────────────────────────────────────────────────

    async def _send(self, websocket, data):
        """
        Send one message. Returns False instead of raising if the channel
        is closed or erroring; one bad channel never stops a broadcast.
        """
        try:
            await websocket.send(protocol.encode(data))
        except Exception as e:
            logger.warning("Send of %s to %s failed: %r", data.get("type"), self._who(websocket), e)
            return False
        return True

    async def _broadcast(self, data):
        """
        Send the same message to every seated channel.

        A failure on one channel is logged and skipped; the others still
        get the message. Returns the identities that could not be reached.
        """
        failed = []
        for participant in list(self.session.participants.values()):
            if not await self._send(participant.channel, data):
                failed.append(participant.identity)
        return failed

    async def _broadcast_state(self):
        message = protocol.state_message(self.session)
        logger.debug(
            "Broadcasting %s to %d players, status %s",
            message["type"], len(self.session.participants), message["status"],
        )
        return await self._broadcast(message)

    def _who(self, websocket):
        return self.session.identity_of(websocket) or "unseated client"

    def _log(self, result):
        for line in result.log:
            logger.info(line)


# ── Server Entry Point ───────────────────────────────────────────────

async def run_server(host=None, port=None, config=Config):
    host = host or config.HOST
    port = port or config.PORT
    server = GameServer(config=config)

    logger.info("Connect Four server starting on ws://%s:%s", host, port)
    async with websockets.serve(server.handle_connection, host, port):
        logger.info("Server running. Ctrl+C to stop.")
        await asyncio.Future()  # run forever


def main():
    setup_logging(Config.LOG_LEVEL)
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
