"""Client portal form session.

One ProjectForm owns one Draft. It moves the draft through the four steps,
keeps the per-field errors and live hints for display, debounces auto-saves
and runs the guarded submission against the project gateway.
"""
import logging
from uuid import UUID
from pydantic import BaseModel
from config import settings
from constants import DISMISS_TASK, LIVE_VALIDATED_FIELDS, TRACKER_VIEW
from database.models import ProjectCreate, ProjectRead
from enums import CurrencyEnum, FormPhaseEnum, FormStepEnum, NotificationEventEnum, ProjectTypeEnum, SubmissionOutcomeEnum
from errors import FieldValidationError, GatewayError
from logic.autosave import DraftAutoSaver
from logic.draft import Draft, FileAttachment, FileRejection
from logic.scheduler import Scheduler
from logic.validation import ValidationResult, check_file, validate_field, validate_form, validate_step

logger = logging.getLogger(__name__)

TEXT_FIELDS = ["company_name", "contact_email", "contact_phone", "description", "timeline"]


class SubmissionConfirmation(BaseModel):
    project: ProjectRead
    files: list[dict] #metadata only, contents are never sent to the durable record


class SubmissionResult(BaseModel):
    outcome: SubmissionOutcomeEnum
    project: ProjectRead | None = None
    errors: dict[str, str] = {}
    error: str | None = None


class ProjectForm:
    def __init__(self, gateway, autosaver: DraftAutoSaver, scheduler: Scheduler, notifications, client_id: UUID | None = None, dismiss_delay: float | None = None):
        self.gateway = gateway
        self.autosaver = autosaver
        self.scheduler = scheduler
        self.notifications = notifications
        self.client_id = client_id
        self.dismiss_delay = settings.success_dismiss_seconds if dismiss_delay is None else dismiss_delay

        self.draft = Draft()
        self.errors: dict[str, str] = {}
        self.live_validation: dict[str, ValidationResult] = {}
        self.is_submitting = False
        self.submit_error: str | None = None
        self.phase = FormPhaseEnum.editing
        self.confirmation: SubmissionConfirmation | None = None
        self.next_view: str | None = None

    @property
    def current_step(self) -> FormStepEnum:
        return self.draft.current_step

    def mount(self) -> bool: #restore an auto-saved draft if there is one
        saved_draft = self.autosaver.load()
        if saved_draft is None:
            return False
        self.draft = saved_draft
        logger.info("Restored saved draft at step %s", saved_draft.current_step.value)
        return True

    def _changed(self):
        self.autosaver.schedule(self.draft)

    def _coerce(self, field: str, value):
        if field == "project_type":
            return self._coerce_project_type(value)
        if field == "budget_range":
            return value or None
        if field in TEXT_FIELDS:
            return "" if value is None else str(value)
        raise FieldValidationError(field, "Unknown form field")

    def _apply(self, field: str, value) -> ValidationResult | None:
        setattr(self.draft, field, value)
        self.errors.pop(field, None) #clear the error once the user edits the field
        live_result = None
        if field in LIVE_VALIDATED_FIELDS:
            live_result = validate_field(field, value)
            self.live_validation[field] = live_result
        return live_result

    def update_field(self, field: str, value) -> ValidationResult | None:
        live_result = self._apply(field, self._coerce(field, value))
        self._changed()
        return live_result

    def update_fields(self, values: dict) -> dict[str, ValidationResult]:
        """Apply several edits at once, all or nothing.

        Every value is checked before any of them touches the draft, so a
        rejected entry leaves the draft and its auto-save untouched.
        """
        coerced_values = {field: self._coerce(field, value) for field, value in values.items()}
        live_results = {}
        for field, value in coerced_values.items():
            live_result = self._apply(field, value)
            if live_result is not None:
                live_results[field] = live_result
        if coerced_values:
            self._changed()
        return live_results

    def _coerce_project_type(self, value) -> ProjectTypeEnum | None:
        if value in (None, ""):
            return None
        try:
            return ProjectTypeEnum(value)
        except ValueError:
            raise FieldValidationError("project_type", "Please select a project type")

    def set_currency(self, currency: CurrencyEnum):
        currency = CurrencyEnum(currency)
        if currency == self.draft.currency:
            return
        self.draft.currency = currency
        self.draft.budget_range = None #band labels differ between currencies
        self._changed()

    def add_files(self, uploads: list[tuple[str, str, bytes]]) -> tuple[list[FileAttachment], list[FileRejection]]:
        """Validate and attach (filename, mime type, data) uploads in order.

        Rejected files never enter the draft. Once the count limit is hit the
        remaining uploads are rejected as well.
        """
        accepted = []
        rejected = []
        for name, mime_type, data in uploads:
            reason = check_file(name, mime_type, len(data), len(self.draft.files) + len(accepted))
            if reason:
                rejected.append(FileRejection(name=name, reason=reason))
                continue
            accepted.append(FileAttachment.from_bytes(name, mime_type, data))
        if accepted:
            self.draft.files = [*self.draft.files, *accepted]
            self.errors.pop("files", None)
            logger.info("Attached %d file(s) to draft", len(accepted))
            self._changed()
        for rejection in rejected:
            logger.info("Rejected file %s: %s", rejection.name, rejection.reason)
        return accepted, rejected

    def remove_file(self, file_id: str) -> bool:
        remaining_files = [file for file in self.draft.files if file.id != file_id]
        if len(remaining_files) == len(self.draft.files):
            return False
        self.draft.files = remaining_files
        self._changed()
        return True

    def next_step(self) -> bool:
        step_errors = validate_step(self.current_step, self.draft)
        self.errors = step_errors
        if step_errors:
            return False
        self.draft.current_step = FormStepEnum(min(self.current_step + 1, FormStepEnum.files_review))
        self._changed()
        return True

    def prev_step(self):
        self.draft.current_step = FormStepEnum(max(self.current_step - 1, FormStepEnum.company_info)) #going back never validates
        self._changed()

    def build_record(self) -> ProjectCreate:
        return ProjectCreate(
            company_name=self.draft.company_name.strip(),
            contact_email=self.draft.contact_email.strip(),
            contact_phone=self.draft.contact_phone.strip() or None,
            project_type=self.draft.project_type,
            description=self.draft.description.strip(),
            timeline=self.draft.timeline.strip(),
            budget_range=self.draft.budget_range,
            client_id=self.client_id,
        )

    async def submit(self) -> SubmissionResult:
        if self.is_submitting:
            logger.debug("Submission already in flight, ignoring")
            return SubmissionResult(outcome=SubmissionOutcomeEnum.ignored)
        if self.current_step != FormStepEnum.files_review or self.phase != FormPhaseEnum.editing:
            return SubmissionResult(outcome=SubmissionOutcomeEnum.ignored)

        self.is_submitting = True
        self.submit_error = None
        try:
            form_errors = validate_form(self.draft) #checks every step, not only the last one
            if form_errors:
                self.errors = form_errors
                self.draft.current_step = FormStepEnum.company_info #show the earliest offending field
                self._changed()
                return SubmissionResult(outcome=SubmissionOutcomeEnum.invalid, errors=form_errors)

            try:
                project = await self.gateway.create(self.build_record())
            except GatewayError as e:
                logger.error("Project submission failed for %s: %s", self.draft.company_name, e)
                self.submit_error = str(e)
                self.draft.current_step = FormStepEnum.company_info
                self._changed()
                return SubmissionResult(outcome=SubmissionOutcomeEnum.failed, error=str(e))

            self.errors = {}
            self.notifications.notify(NotificationEventEnum.submission, project.id, f"New project submission from {project.company_name}")
            self.autosaver.clear()
            self.confirmation = SubmissionConfirmation(project=project, files=[file.metadata() for file in self.draft.files])
            self.phase = FormPhaseEnum.confirmed
            self.scheduler.schedule(DISMISS_TASK, self.dismiss_delay, self.dismiss_confirmation)
            logger.info("Project %s submitted by %s", project.id, project.company_name)
            return SubmissionResult(outcome=SubmissionOutcomeEnum.created, project=project)
        finally:
            self.is_submitting = False

    def dismiss_confirmation(self): #timer or explicit dismissal, whichever comes first
        if self.phase != FormPhaseEnum.confirmed:
            return
        self.scheduler.cancel(DISMISS_TASK)
        self.reset()
        self.next_view = TRACKER_VIEW

    def reset(self): #back to an empty draft on step 1, not an edit so nothing is auto-saved
        self.autosaver.cancel()
        self.draft = Draft()
        self.errors = {}
        self.live_validation = {}
        self.submit_error = None
        self.confirmation = None
        self.phase = FormPhaseEnum.editing

    def snapshot(self) -> dict:
        return {
            "draft": {
                **self.draft.model_dump(mode="json", exclude={"files"}),
                "files": [file.metadata() for file in self.draft.files],
            },
            "current_step": self.current_step.value,
            "errors": self.errors,
            "live_validation": {field: result.model_dump() for field, result in self.live_validation.items()},
            "is_submitting": self.is_submitting,
            "submit_error": self.submit_error,
            "phase": self.phase.value,
            "confirmation": self.confirmation.model_dump(mode="json") if self.confirmation else None,
            "next_view": self.next_view,
        }
