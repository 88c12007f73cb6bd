"""
Monopoly Deal client entry point.

Runs the Qt application with asyncio on top of the Qt event loop, so the
peer link, the AI turn runner and the UI share one thread.
"""

import sys
import asyncio
import logging

from PyQt6.QtWidgets import QApplication

import qasync

from client.gui import MainWindow
from client.config import settings


logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def main() -> int:
    """Console entry point (`monopoly-deal`)."""
    setup_logging()

    app = QApplication(sys.argv)
    app.setApplicationName("Monopoly Deal")

    loop = qasync.QEventLoop(app)
    asyncio.set_event_loop(loop)

    closing = asyncio.Event()
    app.aboutToQuit.connect(closing.set)

    window = MainWindow()
    window.show()
    logger.info("Client started")

    with loop:
        try:
            loop.run_until_complete(closing.wait())
        except KeyboardInterrupt:
            logger.info("Interrupted")

    return 0


if __name__ == "__main__":
    sys.exit(main())
