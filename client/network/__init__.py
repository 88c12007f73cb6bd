"""
Peer-to-peer networking for two-device games.
"""

from .peer import ConnectionState, PeerLink, generate_room_code
from .replication import ReplicationAdapter, snapshot_message, state_from_message

__all__ = [
    "ConnectionState",
    "PeerLink",
    "generate_room_code",
    "ReplicationAdapter",
    "snapshot_message",
    "state_from_message",
]
