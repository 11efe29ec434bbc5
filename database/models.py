from pydantic import BaseModel, ConfigDict
from datetime import datetime
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from enums import ProjectTypeEnum, ProjectStatusEnum #import enums to have access to fixed choices in models
import uuid

class Project(SQLModel, table=True): #durable record created once from a validated draft
    __tablename__ = "dph_projects"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True) #assigned by the gateway, never by the form
    company_name: str
    contact_email: str
    contact_phone: str | None = None
    project_type: ProjectTypeEnum
    description: str
    timeline: str
    budget_range: str
    status: ProjectStatusEnum = Field(default=ProjectStatusEnum.submitted)
    client_id: uuid.UUID | None = Field(default=None, foreign_key="dph_clients.id", index=True) #owning client, used by the tracker
    admin_notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.now) #submitted at, never changed after insert
    updated_at: datetime = Field(default_factory=datetime.now) #last updated, set on every mutation

class ProjectCreate(BaseModel): #record shape sent to the gateway on submit, id and timestamps excluded since they are server generated
    company_name: str
    contact_email: str
    contact_phone: str | None = None
    project_type: ProjectTypeEnum
    description: str
    timeline: str
    budget_range: str
    status: ProjectStatusEnum = ProjectStatusEnum.submitted
    client_id: uuid.UUID | None = None

class ProjectUpdate(BaseModel): #admin side update path, only status and notes may change
    status: ProjectStatusEnum
    admin_notes: str | None = None

class ProjectRead(BaseModel): #authoritative record returned by the gateway
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    company_name: str
    contact_email: str
    contact_phone: str | None
    project_type: ProjectTypeEnum
    description: str
    timeline: str
    budget_range: str
    status: ProjectStatusEnum
    client_id: uuid.UUID | None
    admin_notes: str | None
    created_at: datetime
    updated_at: datetime

class AdminUser(SQLModel, table=True):
    __tablename__ = "dph_admin_users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(index=True, unique=True)
    username: str
    password: str #plaintext demo credential, not a security design
    role: str = "admin"
    created_at: datetime = Field(default_factory=datetime.now)
    last_login: datetime | None = None

class ClientUser(SQLModel, table=True):
    __tablename__ = "dph_clients"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(index=True, unique=True)
    username: str
    full_name: str
    password: str
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
    last_login: datetime | None = None

class DraftRecord(SQLModel, table=True): #backs the draft store, one row per scope and key
    __tablename__ = "dph_drafts"

    scope: str = Field(primary_key=True) #browser id or client id the draft belongs to
    key: str = Field(primary_key=True)
    value: dict = Field(sa_column=Column(JSON, nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now)

class LoginRequest(BaseModel):
    email: str
    password: str
