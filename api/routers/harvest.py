from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response

from config.settings import settings
from core.errors import EmptyResult, HarvestError, NoActiveContext
from harvester.manager import HarvestInProgress

router = APIRouter(prefix="/api/harvest", tags=["harvest"])

# The manager reference is injected by main.py at startup
_manager = None


def set_manager(manager) -> None:
    global _manager
    _manager = manager


@router.post("/run")
async def trigger_harvest(
    count: int = Query(
        settings.HARVEST_DEFAULT_COUNT, ge=1, le=settings.HARVEST_MAX_COUNT
    ),
    search_term: str = "",
):
    if _manager is None:
        raise HTTPException(503, "Harvester not initialized")

    try:
        return await _manager.run(count, search_term=search_term)
    except HarvestInProgress as e:
        raise HTTPException(409, str(e))
    except NoActiveContext as e:
        raise HTTPException(503, str(e))
    except EmptyResult as e:
        raise HTTPException(404, str(e))
    except HarvestError as e:
        raise HTTPException(502, str(e))


@router.get("/latest")
async def latest_harvest(download: bool = False):
    if _manager is None or _manager.latest is None:
        raise HTTPException(404, "No harvest has completed yet")
    if download:
        return Response(
            content=_manager.latest_json(),
            media_type="application/json",
            headers={"Content-Disposition": 'attachment; filename="harvest.json"'},
        )
    return _manager.latest


@router.get("/status")
async def harvest_status():
    if _manager is None:
        return {"running": False, "last_run": None}
    return _manager.get_status()
