from enum import Enum

#enums set the fixed options a field can take, like a drop-down menu. Each enum used by models and form logic is defined here first

class ProjectTypeEnum(str, Enum): #kinds of project a client can request
    website_development = "Website Development"
    data_integration = "Data Integration"
    sustainability_dashboard = "Sustainability Dashboard"
    custom_solution = "Custom Solution"

class ProjectStatusEnum(str, Enum): #admin driven, any status may follow any other
    submitted = "Submitted"
    under_review = "Under Review"
    in_progress = "In Progress"
    pending_client_feedback = "Pending Client Feedback"
    completed = "Completed"

class CurrencyEnum(str, Enum):
    PHP = "PHP"
    USD = "USD"

class FormStepEnum(int, Enum): #steps of the client portal form in order
    company_info = 1
    project_details = 2
    timeline_budget = 3
    files_review = 4

class FormPhaseEnum(str, Enum):
    editing = "editing"
    confirmed = "confirmed" #success confirmation shown after a submission

class SubmissionOutcomeEnum(str, Enum):
    created = "created"
    invalid = "invalid" #full draft validation failed
    failed = "failed" #gateway rejected the create call
    ignored = "ignored" #another submission in flight or not on the last step

class NotificationEventEnum(str, Enum):
    submission = "submission"
    status_change = "status_change"
    file_upload = "file_upload"

class UserRoleEnum(str, Enum):
    admin = "admin"
    client = "client"
