"""
Tests for the peer-to-peer network layer.

Covers the message protocol, snapshot replication, and the PeerLink
handshake. Sockets are replaced by mock objects.

Run from project root: python -m pytest tests/test_network -v
Or run directly: python tests/test_network/test_network.py
"""

import asyncio
import json
import random
import sys
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from PyQt6.QtCore import QCoreApplication

from client.network import (
    ConnectionState, PeerLink, ReplicationAdapter, generate_room_code,
    snapshot_message, state_from_message
)
from engine import new_game
from shared.constants import ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH
from shared.enums import MessageType, MultiplayerRole
from shared.protocol import (
    ConnectRequest, ConnectResponse, ErrorMessage, Message,
    StateUpdateMessage, parse_message
)


app = QCoreApplication.instance() or QCoreApplication([])


def sample_state(seed: int = 1):
    return new_game(("Host", "Guest"), multiplayer_role=MultiplayerRole.HOST, rng=random.Random(seed))


class MockWebSocket:
    """Mock WebSocket for testing."""

    def __init__(self, incoming=(), hold_open: bool = False, gate: asyncio.Event | None = None):
        self.incoming = list(incoming)
        self.gate = gate
        self.sent: list[str] = []
        self.closed = False
        self._hold_open = hold_open
        self._close_event = asyncio.Event()

    async def recv(self) -> str:
        if self.gate is not None:
            await self.gate.wait()
        return self.incoming.pop(0)

    async def send(self, data: str) -> None:
        self.sent.append(data)

    async def close(self) -> None:
        self.closed = True
        self._close_event.set()

    def __aiter__(self):
        return self

    async def __anext__(self) -> str:
        if self.incoming:
            return self.incoming.pop(0)
        if self._hold_open:
            await self._close_event.wait()
        raise StopAsyncIteration


class FakeLink:
    """Stands in for PeerLink in replication tests."""

    def __init__(self, is_open: bool = True):
        self.is_open = is_open
        self.sent: list[Message] = []

    async def send(self, message) -> bool:
        self.sent.append(message)
        return True


# =============================================================================
# Protocol
# =============================================================================

class TestProtocol(unittest.TestCase):

    def test_message_json_round_trip(self):
        message = ErrorMessage.create("Room is full", "ROOM_FULL")
        restored = Message.from_json(message.to_json())

        self.assertEqual(restored.type, MessageType.ERROR)
        self.assertEqual(restored.data, {"message": "Room is full", "code": "ROOM_FULL"})

    def test_connect_request_fields(self):
        data = json.loads(ConnectRequest.create("ABCDE", "Guest").to_json())
        self.assertEqual(data, {
            "type": "CONNECT",
            "data": {"room_code": "ABCDE", "player_name": "Guest"},
        })

    def test_parse_state_update(self):
        state = sample_state()
        message = parse_message(snapshot_message(state).to_json())

        self.assertIsInstance(message, StateUpdateMessage)
        self.assertEqual(message.state["active_player_index"], 0)

    def test_state_update_puts_state_beside_type(self):
        state = sample_state()
        data = json.loads(snapshot_message(state).to_json())

        self.assertEqual(set(data), {"type", "state"})
        self.assertEqual(data["type"], "STATE_UPDATE")
        self.assertEqual(data["state"], state.to_dict())

    def test_parse_rejects_garbage(self):
        with self.assertRaises(ValueError):
            parse_message("not json")
        with self.assertRaises(ValueError):
            parse_message(json.dumps({"type": "TELEPORT"}))
        with self.assertRaises(KeyError):
            parse_message(json.dumps({"data": {}}))

    def test_room_codes(self):
        code = generate_room_code(random.Random(4))
        self.assertEqual(len(code), ROOM_CODE_LENGTH)
        self.assertTrue(all(ch in ROOM_CODE_ALPHABET for ch in code))
        self.assertEqual(code, generate_room_code(random.Random(4)))


# =============================================================================
# Replication
# =============================================================================

class TestReplication(unittest.TestCase):

    def test_snapshot_decodes_to_equal_state(self):
        state = sample_state()
        restored = state_from_message(snapshot_message(state).to_dict())
        self.assertEqual(restored, state)

    def test_top_level_and_nested_snapshots_decode(self):
        state = sample_state()

        top_level = {"type": "STATE_UPDATE", "state": state.to_dict()}
        nested = {"type": "STATE_UPDATE", "data": {"state": state.to_dict()}}

        self.assertEqual(state_from_message(top_level), state)
        self.assertEqual(state_from_message(nested), state)
        self.assertEqual(parse_message(json.dumps(top_level)).state, state.to_dict())

    def test_malformed_messages_are_ignored(self):
        state_dict = sample_state().to_dict()
        broken = dict(state_dict)
        del broken["players"]

        self.assertIsNone(state_from_message({"type": "CONNECT", "data": {}}))
        self.assertIsNone(state_from_message({"type": "STATE_UPDATE", "data": {}}))
        self.assertIsNone(state_from_message({"type": "NOPE"}))
        self.assertIsNone(state_from_message({"data": {"state": state_dict}}))
        self.assertIsNone(state_from_message({"type": "STATE_UPDATE", "data": {"state": broken}}))

    def test_publish_sends_in_order(self):
        first = sample_state(1)
        second = sample_state(2)
        link = FakeLink()

        async def run():
            adapter = ReplicationAdapter(link)
            self.assertTrue(adapter.publish(first))
            self.assertTrue(adapter.publish(second))
            await adapter.flush()
            return adapter

        adapter = asyncio.run(run())

        self.assertEqual(adapter.sent_count, 2)
        self.assertEqual(
            [state_from_message(m.to_dict()) for m in link.sent],
            [first, second],
        )

    def test_publish_on_closed_link(self):
        link = FakeLink(is_open=False)
        adapter = ReplicationAdapter(link)

        self.assertFalse(adapter.publish(sample_state()))
        self.assertEqual(link.sent, [])

    def test_stop_drops_pending_snapshots(self):
        link = FakeLink()

        async def run():
            adapter = ReplicationAdapter(link)
            adapter.publish(sample_state())
            adapter.stop()
            await asyncio.sleep(0)

        asyncio.run(run())
        self.assertEqual(link.sent, [])


# =============================================================================
# PeerLink
# =============================================================================

class TestPeerLink(unittest.TestCase):

    def setUp(self):
        self.link = PeerLink()
        self.states: list[ConnectionState] = []
        self.messages: list[dict] = []
        self.errors: list[str] = []
        self.link.connection_changed.connect(self.states.append)
        self.link.message_received.connect(self.messages.append)
        self.link.error_occurred.connect(self.errors.append)

    def mock_server(self):
        server = MagicMock()
        server.wait_closed = AsyncMock()
        return server

    def test_host_then_guest_with_right_code(self):
        server = self.mock_server()
        snapshot = snapshot_message(sample_state()).to_json()
        guest = MockWebSocket([ConnectRequest.create("abcde", "Guest").to_json(), snapshot])

        async def run():
            with patch("client.network.peer.websockets.serve", new=AsyncMock(return_value=server)):
                code = await self.link.host(room_code="abcde")
            await self.link._handle_guest(guest)
            await self.link.close()
            return code

        code = asyncio.run(run())

        self.assertEqual(code, "ABCDE")
        self.assertEqual(json.loads(guest.sent[0])["data"]["success"], True)
        self.assertEqual(self.messages[0]["type"], "STATE_UPDATE")
        self.assertEqual(
            self.states,
            [ConnectionState.WAITING, ConnectionState.CONNECTED, ConnectionState.DISCONNECTED],
        )
        server.close.assert_called_once()

    def test_guest_with_wrong_code_is_rejected(self):
        guest = MockWebSocket([ConnectRequest.create("ZZZZZ", "Guest").to_json()])

        async def run():
            with patch("client.network.peer.websockets.serve", new=AsyncMock(return_value=self.mock_server())):
                await self.link.host(room_code="ABCDE")
            await self.link._handle_guest(guest)

        asyncio.run(run())

        response = json.loads(guest.sent[0])
        self.assertFalse(response["data"]["success"])
        self.assertEqual(response["data"]["message"], "Wrong room code")
        self.assertTrue(guest.closed)
        self.assertEqual(self.link.state, ConnectionState.WAITING)

    def test_second_guest_gets_room_full(self):
        first = MockWebSocket(
            [ConnectRequest.create("ABCDE", "Guest").to_json()], hold_open=True
        )
        second = MockWebSocket()

        async def run():
            with patch("client.network.peer.websockets.serve", new=AsyncMock(return_value=self.mock_server())):
                await self.link.host(room_code="ABCDE")
            task = asyncio.create_task(self.link._handle_guest(first))
            while self.link.state != ConnectionState.CONNECTED:
                await asyncio.sleep(0.01)
            await self.link._handle_guest(second)
            await self.link.close()
            await task

        asyncio.run(run())

        self.assertEqual(json.loads(second.sent[0])["data"]["code"], "ROOM_FULL")
        self.assertTrue(second.closed)

    def test_guests_arriving_together_get_one_slot(self):
        async def run():
            gate = asyncio.Event()
            first = MockWebSocket(
                [ConnectRequest.create("ABCDE", "Guest").to_json()], hold_open=True, gate=gate
            )
            second = MockWebSocket(
                [ConnectRequest.create("ABCDE", "Guest").to_json()], hold_open=True, gate=gate
            )
            with patch("client.network.peer.websockets.serve", new=AsyncMock(return_value=self.mock_server())):
                await self.link.host(room_code="ABCDE")

            tasks = [
                asyncio.create_task(self.link._handle_guest(first)),
                asyncio.create_task(self.link._handle_guest(second)),
            ]
            while not second.closed:
                await asyncio.sleep(0.01)
            gate.set()
            while self.link.state != ConnectionState.CONNECTED:
                await asyncio.sleep(0.01)
            await self.link.close()
            await asyncio.gather(*tasks)
            return first, second

        first, second = asyncio.run(run())

        self.assertTrue(json.loads(first.sent[0])["data"]["success"])
        self.assertEqual(len(second.sent), 1)
        self.assertEqual(json.loads(second.sent[0])["data"]["code"], "ROOM_FULL")

    def test_join_accepted(self):
        host = MockWebSocket([ConnectResponse.create(True).to_json()], hold_open=True)

        async def run():
            with patch("client.network.peer.websockets.connect", new=AsyncMock(return_value=host)):
                joined = await self.link.join("abcde", "Guest", url="ws://example:8765")
            is_open = self.link.is_open
            await self.link.close()
            return joined, is_open

        joined, is_open = asyncio.run(run())

        self.assertTrue(joined)
        self.assertTrue(is_open)
        self.assertEqual(json.loads(host.sent[0])["data"]["room_code"], "ABCDE")
        self.assertEqual(json.loads(host.sent[-1])["type"], "DISCONNECT")
        self.assertEqual(self.states[:2], [ConnectionState.CONNECTING, ConnectionState.CONNECTED])
        self.assertEqual(self.link.state, ConnectionState.DISCONNECTED)

    def test_join_rejected(self):
        host = MockWebSocket([ConnectResponse.create(False, "Wrong room code").to_json()])

        async def run():
            with patch("client.network.peer.websockets.connect", new=AsyncMock(return_value=host)):
                return await self.link.join("ABCDE", "Guest")

        self.assertFalse(asyncio.run(run()))
        self.assertEqual(self.errors, ["Wrong room code"])
        self.assertEqual(self.link.state, ConnectionState.FAILED)
        self.assertTrue(host.closed)

    def test_join_unreachable_host(self):
        async def run():
            with patch("client.network.peer.websockets.connect", new=AsyncMock(side_effect=OSError("refused"))):
                return await self.link.join("ABCDE", "Guest")

        self.assertFalse(asyncio.run(run()))
        self.assertEqual(self.link.state, ConnectionState.FAILED)
        self.assertTrue(self.errors[0].startswith("Connection failed"))

    def test_send_without_connection(self):
        self.assertFalse(asyncio.run(self.link.send(ErrorMessage.create("x"))))


def run_tests():
    """Run all network tests."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    for test_class in (TestProtocol, TestReplication, TestPeerLink):
        suite.addTests(loader.loadTestsFromTestCase(test_class))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return result.wasSuccessful()


if __name__ == "__main__":
    sys.exit(0 if run_tests() else 1)
