"""Worker routes poked by an external scheduler."""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/clean/database", response_class=PlainTextResponse, include_in_schema=False)
async def clean_database(request: Request):
    """Run the expiry sweep if its daily window is open.

    Safe to call as often as the scheduler likes; outside the window (or once
    the window has been swept) this is a no-op.
    """
    sweeper = request.app.state.sweeper
    now = request.app.state.clock()

    result = await sweeper.run_if_due(now)

    if result.ran:
        return PlainTextResponse(f"Removed {result.deleted} expired links")
    if result.window is not None:
        return PlainTextResponse(f"Skipped: cleanup for {result.window.isoformat()} already done")
    return PlainTextResponse("Skipped: not within the cleanup window")
