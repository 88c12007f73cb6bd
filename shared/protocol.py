"""
Message protocol for peer-to-peer communication.

Every frame on the wire is one JSON object: {"type": <MessageType value>, "data": {...}}.
"""

from dataclasses import dataclass, field
from typing import Any
import json

from shared.enums import MessageType


@dataclass
class Message:
    """Base message structure for all peer communication."""
    type: MessageType
    data: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "data": self.data,
        }

    @classmethod
    def from_json(cls, json_str: str) -> "Message":
        raw = json.loads(json_str)
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict) -> "Message":
        """Missing or null data becomes an empty dict."""
        return cls(
            type=MessageType(raw["type"]),
            data=raw.get("data") or {},
        )


@dataclass
class ErrorMessage(Message):
    """Refusal sent before closing a socket (e.g. room full)."""
    type: MessageType = MessageType.ERROR

    @classmethod
    def create(cls, message: str, code: str = "ERROR") -> "ErrorMessage":
        return cls(data={"message": message, "code": code})


# =============================================================================
# Handshake
# =============================================================================

@dataclass
class ConnectRequest(Message):
    """Guest -> host: ask to join the room."""
    type: MessageType = MessageType.CONNECT

    @classmethod
    def create(cls, room_code: str, player_name: str) -> "ConnectRequest":
        return cls(data={
            "room_code": room_code,
            "player_name": player_name,
        })


@dataclass
class ConnectResponse(Message):
    """Host -> guest: handshake result."""
    type: MessageType = MessageType.CONNECT

    @classmethod
    def create(cls, success: bool, message: str = "") -> "ConnectResponse":
        return cls(data={"success": success, "message": message})


@dataclass
class DisconnectMessage(Message):
    """Either side: leaving the game."""
    type: MessageType = MessageType.DISCONNECT

    @classmethod
    def create(cls, reason: str = "") -> "DisconnectMessage":
        return cls(data={"reason": reason})


# =============================================================================
# Replication
# =============================================================================

@dataclass
class StateUpdateMessage(Message):
    """
    Full game state snapshot, sent after every local mutation.

    On the wire the snapshot sits beside the type: {"type": "STATE_UPDATE", "state": {...}}.
    A snapshot nested under "data" is still accepted when decoding.
    """
    type: MessageType = MessageType.STATE_UPDATE

    @classmethod
    def create(cls, state: dict) -> "StateUpdateMessage":
        return cls(data={"state": state})

    def to_dict(self) -> dict:
        return {"type": self.type.value, "state": self.state}

    @classmethod
    def from_dict(cls, raw: dict) -> "StateUpdateMessage":
        if MessageType(raw["type"]) != MessageType.STATE_UPDATE:
            raise ValueError(f"not a STATE_UPDATE: {raw['type']}")
        state = raw.get("state")
        nested = raw.get("data")
        if state is None and isinstance(nested, dict):
            state = nested.get("state")
        return cls(data={"state": state})

    @property
    def state(self) -> dict | None:
        return self.data.get("state")


# Parsing

def parse_message(json_str: str) -> Message:
    """
    Decode one frame, upgrading STATE_UPDATE frames to StateUpdateMessage.

    Raises ValueError (json.JSONDecodeError included) for malformed input
    and KeyError when the "type" field is missing.
    """
    raw = json.loads(json_str)
    message = Message.from_dict(raw)
    if message.type == MessageType.STATE_UPDATE:
        return StateUpdateMessage.from_dict(raw)
    return message
