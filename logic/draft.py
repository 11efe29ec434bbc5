from base64 import b64encode
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from enums import CurrencyEnum, FormStepEnum, ProjectTypeEnum
import uuid

class FileAttachment(BaseModel): #immutable once created, only built after the type and size checks pass
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    size_bytes: int
    mime_type: str
    content: str #base64 encoded payload, lives only in the draft
    uploaded_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_bytes(cls, name: str, mime_type: str, data: bytes) -> "FileAttachment":
        return cls(name=name, size_bytes=len(data), mime_type=mime_type, content=b64encode(data).decode("ascii"))

    def metadata(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "size_bytes": self.size_bytes,
            "mime_type": self.mime_type,
            "uploaded_at": self.uploaded_at,
        }

class FileRejection(BaseModel):
    name: str
    reason: str

class Draft(BaseModel): #in progress submission owned by one form session
    company_name: str = ""
    contact_email: str = ""
    contact_phone: str = "" #optional
    project_type: ProjectTypeEnum | None = None
    description: str = ""
    timeline: str = ""
    currency: CurrencyEnum = CurrencyEnum.PHP
    budget_range: str | None = None
    files: list[FileAttachment] = Field(default_factory=list)
    current_step: FormStepEnum = FormStepEnum.company_info
