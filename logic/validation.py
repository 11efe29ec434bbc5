"""Field validation for the client portal form.

Every function here is pure: it looks at values and returns a result, so the
rules can be exercised without a form session, a database or a request.
"""
import re
from pydantic import BaseModel
from constants import (
    ALLOWED_FILE_TYPES,
    BUDGET_RANGES,
    EMAIL_PATTERN,
    INVALID_EMAIL_TLDS,
    MAX_FILE_SIZE_BYTES,
    MAX_FILES,
    MIN_DESCRIPTION_LENGTH,
    PHONE_PATTERN,
    STEP_FIELDS,
    VALID_EMAIL_TLDS,
)
from enums import CurrencyEnum, FormStepEnum, ProjectTypeEnum
from logic.draft import Draft

class ValidationResult(BaseModel):
    is_valid: bool
    message: str = ""
    character_count: int | None = None #only set for the description field

def validate_email(email: str) -> bool:
    trimmed_email = email.strip().lower()
    if not re.match(EMAIL_PATTERN, trimmed_email): #basic shape first
        return False

    domain = trimmed_email.split("@")[1]
    tld = domain.split(".")[-1]
    if tld in INVALID_EMAIL_TLDS: #shape matches but the tld is a known typo
        return False

    return any(domain.endswith("." + valid_tld) for valid_tld in VALID_EMAIL_TLDS)

def validate_phone_number(phone: str) -> bool:
    cleaned_phone = re.sub(r"\s+", "", phone)
    return re.match(PHONE_PATTERN, cleaned_phone) is not None

def validate_field(field: str, value: str) -> ValidationResult:
    """Live (per keystroke) validation driving inline hints.

    Advisory only: moving between steps re-runs the step rules below.
    """
    value = value or ""
    if field == "contact_email":
        if not value.strip():
            return ValidationResult(is_valid=False, message="Email is required")
        if not validate_email(value):
            return ValidationResult(is_valid=False, message="Please enter a valid email (e.g., user@gmail.com)")
        return ValidationResult(is_valid=True, message="Valid email address")

    if field == "contact_phone":
        if not value.strip(): #phone is optional so an empty value is fine
            return ValidationResult(is_valid=True)
        if not validate_phone_number(value):
            return ValidationResult(is_valid=False, message="Please enter a valid PH mobile number (e.g., +63 976 125 1205)")
        return ValidationResult(is_valid=True, message="Valid Philippine mobile number")

    if field == "company_name":
        if not value.strip():
            return ValidationResult(is_valid=False, message="Company name is required")
        return ValidationResult(is_valid=True)

    if field == "description":
        character_count = len(value.strip())
        if character_count == 0:
            return ValidationResult(is_valid=False, message="Project description is required", character_count=0)
        if character_count < MIN_DESCRIPTION_LENGTH:
            return ValidationResult(
                is_valid=False,
                message=f"Please provide at least {MIN_DESCRIPTION_LENGTH} characters ({character_count}/{MIN_DESCRIPTION_LENGTH})",
                character_count=character_count,
            )
        return ValidationResult(is_valid=True, message=f"Good description ({character_count} characters)", character_count=character_count)

    return ValidationResult(is_valid=True)

def check_company_name(draft: Draft) -> str | None:
    if not draft.company_name.strip():
        return "Company name is required"

def check_contact_email(draft: Draft) -> str | None:
    if not draft.contact_email.strip():
        return "Contact email is required"
    if not validate_email(draft.contact_email):
        return "Please enter a valid email address"

def check_contact_phone(draft: Draft) -> str | None:
    if draft.contact_phone and draft.contact_phone.strip() and not validate_phone_number(draft.contact_phone):
        return "Please enter a valid Philippine mobile number (e.g., +63 976 125 1205, 0976 125 1205, or 976 125 1205)"

def check_project_type(draft: Draft) -> str | None:
    if draft.project_type not in list(ProjectTypeEnum):
        return "Please select a project type"

def check_description(draft: Draft) -> str | None:
    if not draft.description.strip():
        return "Project description is required"
    if len(draft.description.strip()) < MIN_DESCRIPTION_LENGTH:
        return f"Please provide at least {MIN_DESCRIPTION_LENGTH} characters for the project description"

def check_timeline(draft: Draft) -> str | None:
    if not draft.timeline.strip():
        return "Timeline is required"

def check_budget_range(draft: Draft) -> str | None:
    if not draft.budget_range or draft.budget_range not in budget_ranges(draft.currency):
        return "Please select a budget range"

FIELD_CHECKS = {
    "company_name": check_company_name,
    "contact_email": check_contact_email,
    "contact_phone": check_contact_phone,
    "project_type": check_project_type,
    "description": check_description,
    "timeline": check_timeline,
    "budget_range": check_budget_range,
}

def validate_step(step: FormStepEnum, draft: Draft) -> dict[str, str]: #returns field -> message for every failing field of the step
    step_errors = {}
    for field in STEP_FIELDS[FormStepEnum(step)]:
        message = FIELD_CHECKS[field](draft)
        if message:
            step_errors[field] = message
    return step_errors

def validate_form(draft: Draft) -> dict[str, str]: #every step at once, used by submit
    form_errors = {}
    for step in FormStepEnum:
        form_errors.update(validate_step(step, draft))
    return form_errors

def budget_ranges(currency: CurrencyEnum) -> list[str]:
    return BUDGET_RANGES[CurrencyEnum(currency)]

def is_valid_file_type(mime_type: str) -> bool:
    return mime_type in ALLOWED_FILE_TYPES

def is_valid_file_size(size_bytes: int) -> bool:
    return size_bytes <= MAX_FILE_SIZE_BYTES

def check_file(name: str, mime_type: str, size_bytes: int, existing_count: int) -> str | None:
    if existing_count >= MAX_FILES:
        return f"Maximum {MAX_FILES} files allowed"
    if not is_valid_file_type(mime_type):
        return "File type not supported. Please use PDF, DOC, DOCX, PNG, or JPG files."
    if not is_valid_file_size(size_bytes):
        return f"File size too large. Maximum {format_file_size(MAX_FILE_SIZE_BYTES)} allowed."

def format_file_size(size_bytes: int) -> str:
    if size_bytes == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    unit_index = 0
    size = float(size_bytes)
    while size >= 1024 and unit_index < len(units) - 1:
        size /= 1024
        unit_index += 1
    return f"{round(size, 2):g} {units[unit_index]}"
