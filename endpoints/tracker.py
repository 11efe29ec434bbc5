from fastapi import APIRouter, Depends, HTTPException
from dependencies import get_gateway, require_client
from errors import GatewayError
from logic.auth import AuthUser
from logic.tracker import ProjectTracker

router = APIRouter(prefix="/tracker", tags=["Tracker"])

@router.get("/projects", status_code=200) #GET endpoint for the logged in client's own projects and their progress
async def tracked_projects(search: str | None = None, user: AuthUser = Depends(require_client), gateway=Depends(get_gateway)):
    tracker = ProjectTracker(gateway, user.id)
    try:
        await tracker.load()
    except GatewayError as e:
        raise HTTPException(status_code=502, detail=f"Failed to load projects: {e}")
    return tracker.summaries(search)
