from uuid import UUID
from constants import STATUS_PROGRESS
from database.models import ProjectRead
from enums import ProjectStatusEnum


def status_progress(status: ProjectStatusEnum) -> int:
    return STATUS_PROGRESS.get(ProjectStatusEnum(status), 0)


class ProjectTracker: #read only view of one client's projects
    def __init__(self, gateway, client_id: UUID):
        self.gateway = gateway
        self.client_id = client_id
        self.projects: list[ProjectRead] = []

    async def load(self) -> list[ProjectRead]:
        self.projects = await self.gateway.list(client_id=self.client_id)
        return self.projects

    def search(self, term: str | None = None) -> list[ProjectRead]:
        if not term:
            return self.projects
        term = term.lower()
        return [
            project for project in self.projects
            if term in project.company_name.lower() or term in project.contact_email.lower() or term in str(project.id)
        ]

    def summaries(self, term: str | None = None) -> list[dict]:
        return [
            {**project.model_dump(mode="json"), "progress": status_progress(project.status)}
            for project in self.search(term)
        ]
