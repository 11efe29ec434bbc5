from __future__ import annotations
import logging
from datetime import datetime
from uuid import UUID
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select
from database.models import Project, ProjectCreate, ProjectRead, ProjectUpdate
from enums import ProjectStatusEnum
from errors import GatewayError, ProjectNotFoundError

logger = logging.getLogger(__name__)


class ProjectGateway:
    """CRUD access to dph_projects.

    Every call returns the authoritative stored record or raises GatewayError
    with a description of what went wrong. Session work runs in the threadpool
    so a slow query never holds up the event loop.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    async def create(self, project_data: ProjectCreate) -> ProjectRead:
        return await run_in_threadpool(self._create, project_data)

    async def update(self, project_id: UUID, updates: ProjectUpdate) -> ProjectRead:
        return await run_in_threadpool(self._update, project_id, updates)

    async def get(self, project_id: UUID) -> ProjectRead:
        return await run_in_threadpool(self._get, project_id)

    async def list(self, client_id: UUID | None = None, status: ProjectStatusEnum | None = None) -> list[ProjectRead]:
        return await run_in_threadpool(self._list, client_id, status)

    def _create(self, project_data: ProjectCreate) -> ProjectRead:
        project = Project(**project_data.model_dump()) #convert Pydantic ProjectCreate model into SQLModel Project object
        try:
            with Session(self.engine) as session:
                session.add(project)
                session.commit()
                session.refresh(project) #refresh to retrieve server generated id and timestamps
                return ProjectRead.model_validate(project)
        except SQLAlchemyError as e:
            logger.error("Project create failed: %s", e)
            raise GatewayError(f"Could not create project: {e}") from e

    def _update(self, project_id: UUID, updates: ProjectUpdate) -> ProjectRead:
        try:
            with Session(self.engine) as session:
                project = session.get(Project, project_id)
                if not project:
                    raise ProjectNotFoundError("Project not found")
                for field, value in updates.model_dump(exclude_unset=True).items(): #only what the caller sent, stored notes survive a status-only change
                    setattr(project, field, value)
                project.updated_at = datetime.now() #created_at is left alone
                session.add(project)
                session.commit()
                session.refresh(project)
                return ProjectRead.model_validate(project)
        except SQLAlchemyError as e:
            logger.error("Project %s update failed: %s", project_id, e)
            raise GatewayError(f"Could not update project: {e}") from e

    def _get(self, project_id: UUID) -> ProjectRead:
        try:
            with Session(self.engine) as session:
                project = session.get(Project, project_id)
                if not project:
                    raise ProjectNotFoundError("Project not found")
                return ProjectRead.model_validate(project)
        except SQLAlchemyError as e:
            raise GatewayError(f"Could not load project: {e}") from e

    def _list(self, client_id: UUID | None, status: ProjectStatusEnum | None) -> list[ProjectRead]:
        statement = select(Project)
        if client_id is not None:
            statement = statement.where(Project.client_id == client_id)
        if status is not None:
            statement = statement.where(Project.status == status)
        statement = statement.order_by(Project.created_at.desc()) #newest first
        try:
            with Session(self.engine) as session:
                return [ProjectRead.model_validate(project) for project in session.exec(statement).all()]
        except SQLAlchemyError as e:
            logger.error("Project list failed: %s", e)
            raise GatewayError(f"Could not load projects: {e}") from e
