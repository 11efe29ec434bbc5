from fastapi import APIRouter, Depends, HTTPException
from uuid import UUID
from database.models import ProjectUpdate
from dependencies import get_gateway, get_notifications, require_admin
from enums import ProjectStatusEnum
from errors import GatewayError, ProjectNotFoundError
from logic.admin import ProjectBoard

router = APIRouter(prefix="/projects", tags=["Projects"], dependencies=[Depends(require_admin)]) #admin only

def get_board(gateway=Depends(get_gateway), notifications=Depends(get_notifications)) -> ProjectBoard:
    return ProjectBoard(gateway, notifications)

@router.get("/", status_code=200) #GET endpoint for every project, optionally searched and filtered by status
async def list_projects(search: str | None = None, status: ProjectStatusEnum | None = None, board: ProjectBoard = Depends(get_board)):
    try:
        await board.load()
    except GatewayError as e:
        raise HTTPException(status_code=502, detail=f"Failed to load projects: {e}")
    return [project.model_dump(mode="json") for project in board.filter(search, status)]

@router.get("/stats", status_code=200)
async def project_stats(board: ProjectBoard = Depends(get_board)):
    try:
        await board.load()
    except GatewayError as e:
        raise HTTPException(status_code=502, detail=f"Failed to load projects: {e}")
    return board.stats()

@router.get("/{project_id}", status_code=200)
async def read_project(project_id: UUID, gateway=Depends(get_gateway)):
    try:
        project = await gateway.get(project_id)
    except ProjectNotFoundError:
        raise HTTPException(status_code=404, detail="Project not found")
    except GatewayError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return project.model_dump(mode="json")

@router.patch("/{project_id}/status", status_code=200) #PATCH endpoint for the admin status and notes update
async def update_project_status(project_id: UUID, project_update: ProjectUpdate, board: ProjectBoard = Depends(get_board)):
    try:
        project = await board.update_status(project_id, project_update.status, project_update.admin_notes)
    except ProjectNotFoundError:
        raise HTTPException(status_code=404, detail="Project not found")
    except GatewayError as e:
        raise HTTPException(status_code=502, detail=f"Failed to update project: {e}")
    return project.model_dump(mode="json")
