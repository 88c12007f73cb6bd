"""
Client configuration settings.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class ClientSettings:
    """Client configuration."""

    # Peer connection
    peer_host: str = "localhost"
    listen_host: str = "0.0.0.0"
    peer_port: int = 8765
    connect_timeout: float = 10.0
    host_start_delay: float = 1.0  # Host waits this long before dealing

    # Pacing
    draw_delay: float = 0.8  # Before the automatic draw at turn start
    ai_move_delay: float = 1.5  # Between applied AI moves

    # Logging
    log_level: str = "INFO"

    # Move-suggestion service (OpenAI-compatible API); empty URL = scripted AI
    llm_base_url: str = ""
    llm_model: str = "gemma3:4b"
    llm_api_key: str | None = None
    llm_timeout: float = 30.0

    # UI settings
    window_width: int = 1280
    window_height: int = 800

    @property
    def peer_url(self) -> str:
        return f"ws://{self.peer_host}:{self.peer_port}"

    @property
    def use_llm(self) -> bool:
        return bool(self.llm_base_url)


def load_settings() -> ClientSettings:
    """Load settings from environment variables."""
    return ClientSettings(
        peer_host=os.getenv("DEAL_PEER_HOST", "localhost"),
        listen_host=os.getenv("DEAL_LISTEN_HOST", "0.0.0.0"),
        peer_port=int(os.getenv("DEAL_PEER_PORT", "8765")),
        connect_timeout=float(os.getenv("DEAL_CONNECT_TIMEOUT", "10.0")),
        host_start_delay=float(os.getenv("DEAL_HOST_START_DELAY", "1.0")),
        draw_delay=float(os.getenv("DEAL_DRAW_DELAY", "0.8")),
        ai_move_delay=float(os.getenv("DEAL_AI_MOVE_DELAY", "1.5")),
        log_level=os.getenv("DEAL_LOG_LEVEL", "INFO").upper(),
        llm_base_url=os.getenv("DEAL_LLM_BASE_URL", ""),
        llm_model=os.getenv("DEAL_LLM_MODEL", "gemma3:4b"),
        llm_api_key=os.getenv("DEAL_LLM_API_KEY") or None,
        llm_timeout=float(os.getenv("DEAL_LLM_TIMEOUT", "30.0")),
        window_width=int(os.getenv("DEAL_WINDOW_WIDTH", "1280")),
        window_height=int(os.getenv("DEAL_WINDOW_HEIGHT", "800")),
    )


settings = load_settings()
