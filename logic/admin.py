import logging
from datetime import datetime
from uuid import UUID
from database.models import ProjectRead, ProjectUpdate
from enums import NotificationEventEnum, ProjectStatusEnum
from errors import GatewayError

logger = logging.getLogger(__name__)


def matches_search(project: ProjectRead, search: str) -> bool:
    search = search.lower()
    return (
        search in project.company_name.lower()
        or search in project.contact_email.lower()
        or search in str(project.id).lower()
        or search in project.project_type.value.lower()
    )


class ProjectBoard:
    """Admin view of every submitted project."""

    def __init__(self, gateway, notifications):
        self.gateway = gateway
        self.notifications = notifications
        self.projects: list[ProjectRead] = []
        self.error: str | None = None

    async def load(self) -> list[ProjectRead]:
        try:
            self.projects = await self.gateway.list()
        except GatewayError as e:
            self.error = str(e)
            raise
        self.error = None
        logger.info("Loaded %d projects", len(self.projects))
        return self.projects

    async def update_status(self, project_id: UUID, status: ProjectStatusEnum, admin_notes: str | None = None) -> ProjectRead:
        changes = {"status": status}
        if admin_notes is not None: #leaving notes out keeps the stored ones
            changes["admin_notes"] = admin_notes
        try:
            updated_project = await self.gateway.update(project_id, ProjectUpdate(**changes))
        except GatewayError as e: #keep showing the prior status and notes
            logger.error("Status update for project %s failed: %s", project_id, e)
            self.error = str(e)
            raise
        self.error = None
        self.projects = [updated_project if project.id == updated_project.id else project for project in self.projects] #trust the gateway's record
        self.notifications.notify(
            NotificationEventEnum.status_change,
            updated_project.id,
            f"Project {updated_project.id} status has been updated to {updated_project.status.value}",
        )
        return updated_project

    def filter(self, search: str | None = None, status: ProjectStatusEnum | None = None) -> list[ProjectRead]:
        filtered_projects = self.projects
        if search:
            filtered_projects = [project for project in filtered_projects if matches_search(project, search)]
        if status is not None:
            filtered_projects = [project for project in filtered_projects if project.status == status]
        return filtered_projects

    def stats(self, now: datetime | None = None) -> dict:
        now = now or datetime.now()
        return {
            "total": len(self.projects),
            "submitted": sum(1 for project in self.projects if project.status == ProjectStatusEnum.submitted),
            "in_progress": sum(1 for project in self.projects if project.status == ProjectStatusEnum.in_progress),
            "completed": sum(1 for project in self.projects if project.status == ProjectStatusEnum.completed),
            "this_month": sum(
                1 for project in self.projects
                if project.created_at.month == now.month and project.created_at.year == now.year
            ),
        }
