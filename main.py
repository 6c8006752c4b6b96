"""Feed Harvester entry point."""

from __future__ import annotations

import logging

import uvicorn

from api.app import create_app
from api.routers.harvest import set_manager
from config.settings import settings
from harvester.browser import PlaywrightAutomation
from harvester.manager import HarvestManager

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
log = logging.getLogger(__name__)

app = create_app()


@app.on_event("startup")
async def on_startup() -> None:
    log.info("Starting browser…")
    manager = HarvestManager(
        PlaywrightAutomation(), broadcast_fn=app.state.broadcaster.broadcast
    )
    await manager.start()
    app.state.manager = manager
    set_manager(manager)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    if hasattr(app.state, "manager"):
        await app.state.manager.stop()
        log.info("Browser stopped.")


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.HARVEST_PORT,
        reload=False,
    )
