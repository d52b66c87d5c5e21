"""Scheduling API entry point.

Run with:
    uvicorn slotwise.main:app --reload

Or:
    python -m slotwise.main
"""

import logging
import os
from contextlib import asynccontextmanager

from slotwise.api.app import create_app
from slotwise.config import DATABASE_PATH, DISPATCH_WORKERS
from slotwise.notifications import BackgroundDispatcher, LoggingDispatcher
from slotwise.utils.logging import setup_logging

logger = logging.getLogger(__name__)

_dispatcher: BackgroundDispatcher | None = None


@asynccontextmanager
async def lifespan(app):
    """Move notification delivery off the request path, close the store on shutdown."""
    global _dispatcher

    manager = app.state.manager
    _dispatcher = BackgroundDispatcher(LoggingDispatcher(), max_workers=DISPATCH_WORKERS)
    manager.dispatcher = _dispatcher
    logger.info(f"✅ Store ready: {DATABASE_PATH}")

    yield

    # Cleanup
    if _dispatcher:
        _dispatcher.shutdown(wait=True)
        logger.info("✅ Notification workers stopped")
    manager.store.close()
    logger.info("✅ Database closed")


setup_logging()

# Create app with lifespan
app = create_app()
app.router.lifespan_context = lifespan


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "slotwise.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
