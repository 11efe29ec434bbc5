from fastapi import APIRouter, Cookie, Depends, File, HTTPException, Response, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel
from uuid import UUID, uuid4
from constants import BROWSER_ID_COOKIE
from dependencies import get_current_auth, get_draft_store_factory, get_form_sessions, get_gateway, get_notifications, get_scheduler_factory
from enums import CurrencyEnum, NotificationEventEnum, SubmissionOutcomeEnum, UserRoleEnum
from errors import FieldValidationError
from logic.auth import AuthResult
from logic.autosave import DraftAutoSaver
from logic.form import ProjectForm
from logic.sessions import FormSessionRegistry

router = APIRouter(prefix="/portal/forms", tags=["Portal"]) #one form session per browser tab, all endpoints start with /portal/forms

class CurrencyUpdate(BaseModel):
    currency: CurrencyEnum

def draft_scope(auth_result: AuthResult, browser_id: str | None) -> str | None: #a logged in client keeps drafts across browsers
    if auth_result.is_authenticated and auth_result.user.role == UserRoleEnum.client:
        return f"client:{auth_result.user.id}"
    if browser_id:
        return f"browser:{browser_id}"
    return None

def form_response(form_id: UUID, form: ProjectForm) -> dict:
    return {"form_id": form_id, **form.snapshot()}

async def get_form(
    form_id: UUID,
    auth_result: AuthResult = Depends(get_current_auth),
    browser_id: str | None = Cookie(default=None, alias=BROWSER_ID_COOKIE),
    form_sessions: FormSessionRegistry = Depends(get_form_sessions),
) -> ProjectForm:
    form = form_sessions.get(form_id, draft_scope(auth_result, browser_id))
    if form is None:
        raise HTTPException(status_code=404, detail="Form not found")
    return form

@router.post("/", status_code=201) #opens a form session and restores any auto-saved draft
async def open_form(
    response: Response,
    auth_result: AuthResult = Depends(get_current_auth),
    browser_id: str | None = Cookie(default=None, alias=BROWSER_ID_COOKIE),
    gateway=Depends(get_gateway),
    notifications=Depends(get_notifications),
    scheduler_factory=Depends(get_scheduler_factory),
    draft_store_factory=Depends(get_draft_store_factory),
    form_sessions: FormSessionRegistry = Depends(get_form_sessions),
):
    scope = draft_scope(auth_result, browser_id)
    if scope is None: #first visit from this browser
        browser_id = uuid4().hex
        response.set_cookie(BROWSER_ID_COOKIE, browser_id, httponly=True, samesite="lax")
        scope = draft_scope(auth_result, browser_id)

    scheduler = scheduler_factory()
    client_id = auth_result.user.id if scope.startswith("client:") else None
    form = ProjectForm(
        gateway=gateway,
        autosaver=DraftAutoSaver(draft_store_factory(scope), scheduler),
        scheduler=scheduler,
        notifications=notifications,
        client_id=client_id,
    )
    restored = await run_in_threadpool(form.mount) #reads the draft store
    form_id = form_sessions.add(form, scope)
    return {**form_response(form_id, form), "restored": restored}

@router.get("/{form_id}", status_code=200)
async def read_form(form_id: UUID, form: ProjectForm = Depends(get_form)):
    return form_response(form_id, form)

@router.delete("/{form_id}", status_code=204) #abandon the form, the auto-saved copy stays for next time
async def abandon_form(form_id: UUID, form: ProjectForm = Depends(get_form), form_sessions: FormSessionRegistry = Depends(get_form_sessions)):
    form_sessions.remove(form_id)

@router.patch("/{form_id}/fields", status_code=200)
async def update_form_fields(form_id: UUID, values: dict[str, str | None], form: ProjectForm = Depends(get_form)):
    try:
        form.update_fields(values)
    except FieldValidationError as e:
        raise HTTPException(status_code=422, detail={"field": e.field, "message": e.message})
    return form_response(form_id, form)

@router.put("/{form_id}/currency", status_code=200)
async def update_form_currency(form_id: UUID, currency_update: CurrencyUpdate, form: ProjectForm = Depends(get_form)):
    form.set_currency(currency_update.currency)
    return form_response(form_id, form)

@router.post("/{form_id}/files", status_code=201)
async def upload_form_files(
    form_id: UUID,
    files: list[UploadFile] = File(...),
    form: ProjectForm = Depends(get_form),
    notifications=Depends(get_notifications),
):
    uploads = [(file.filename, file.content_type, await file.read()) for file in files] #reads file contents (asynchronous)
    accepted, rejected = form.add_files(uploads)
    if not accepted:
        raise HTTPException(status_code=422, detail={"rejected": [rejection.model_dump() for rejection in rejected]})
    notifications.notify(NotificationEventEnum.file_upload, form_id, f"{len(accepted)} file(s) uploaded for project submission")
    return {
        **form_response(form_id, form),
        "accepted": [file.metadata() for file in accepted],
        "rejected": [rejection.model_dump() for rejection in rejected],
    }

@router.delete("/{form_id}/files/{file_id}", status_code=200)
async def remove_form_file(form_id: UUID, file_id: str, form: ProjectForm = Depends(get_form)):
    if not form.remove_file(file_id):
        raise HTTPException(status_code=404, detail="File not found")
    return form_response(form_id, form)

@router.post("/{form_id}/next", status_code=200)
async def next_form_step(form_id: UUID, form: ProjectForm = Depends(get_form)):
    if not form.next_step():
        raise HTTPException(status_code=422, detail={"errors": form.errors, "current_step": form.current_step.value})
    return form_response(form_id, form)

@router.post("/{form_id}/prev", status_code=200)
async def previous_form_step(form_id: UUID, form: ProjectForm = Depends(get_form)):
    form.prev_step()
    return form_response(form_id, form)

@router.post("/{form_id}/submit", status_code=201)
async def submit_form(form_id: UUID, form: ProjectForm = Depends(get_form)):
    result = await form.submit()
    if result.outcome == SubmissionOutcomeEnum.invalid:
        raise HTTPException(status_code=422, detail={"errors": result.errors, "current_step": form.current_step.value})
    if result.outcome == SubmissionOutcomeEnum.failed:
        raise HTTPException(status_code=502, detail=f"There was an error submitting your project. Please try again. ({result.error})")
    if result.outcome == SubmissionOutcomeEnum.ignored:
        raise HTTPException(status_code=409, detail="Submission already in progress or form is not on the review step")
    return {**form_response(form_id, form), "project": result.project.model_dump(mode="json")}

@router.post("/{form_id}/dismiss", status_code=200) #the dismissed form is returned one last time and dropped
async def dismiss_confirmation(form_id: UUID, form: ProjectForm = Depends(get_form), form_sessions: FormSessionRegistry = Depends(get_form_sessions)):
    form.dismiss_confirmation()
    if form.next_view is not None:
        form_sessions.remove(form_id)
    return form_response(form_id, form)
