from enums import CurrencyEnum, FormStepEnum, ProjectStatusEnum, NotificationEventEnum

STEP_FIELDS = { #fields collected (and validated) on each form step
    FormStepEnum.company_info: ["company_name", "contact_email", "contact_phone"],
    FormStepEnum.project_details: ["project_type", "description"],
    FormStepEnum.timeline_budget: ["timeline", "budget_range"],
    FormStepEnum.files_review: [],
}

LIVE_VALIDATED_FIELDS = ["contact_email", "contact_phone", "company_name", "description"]

MIN_DESCRIPTION_LENGTH = 50

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

PHONE_PATTERN = r"^(?:\+63|0)?9\d{9}$" #PH mobile: optional +63 or 0 prefix then 10 digits starting with 9

INVALID_EMAIL_TLDS = [ #common typos of real top level domains
    "cum",
    "con",
    "coom",
    "cmo",
    "cim",
    "cpm",
    "ocm",
    "vom",
    "cm",
    "co",
    "c",
    "om",
    "comm",
    "coml",
    "nit",
    "nte",
    "ner",
    "ne",
    "orgm",
    "ogr",
    "or",
    "phm",
    "phl",
]

VALID_EMAIL_TLDS = [
    "com",
    "net",
    "org",
    "edu",
    "gov",
    "mil",
    "int",
    "ph",
    "co.uk",
    "co.ph",
    "gov.ph",
    "org.ph",
    "net.ph",
    "edu.ph",
    "io",
    "ly",
    "me",
    "tv",
    "cc",
    "ws",
    "biz",
    "info",
    "name",
    "tech",
    "app",
]

BUDGET_RANGES = { #labels are not comparable across currencies so switching currency clears the chosen range
    CurrencyEnum.PHP: [
        "Under ₱50,000",
        "₱50,000 - ₱150,000",
        "₱150,000 - ₱300,000",
        "₱300,000 - ₱500,000",
        "Over ₱500,000",
    ],
    CurrencyEnum.USD: [
        "Under $900",
        "$900 - $2,700",
        "$2,700 - $5,400",
        "$5,400 - $9,000",
        "Over $9,000",
    ],
}

ALLOWED_FILE_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/png",
    "image/jpeg",
    "image/jpg",
}

MAX_FILE_SIZE_BYTES = 5 * 1024 * 1024 #5 MiB

MAX_FILES = 5

STATUS_PROGRESS = { #percentage shown on the client tracker
    ProjectStatusEnum.submitted: 20,
    ProjectStatusEnum.under_review: 40,
    ProjectStatusEnum.in_progress: 60,
    ProjectStatusEnum.pending_client_feedback: 80,
    ProjectStatusEnum.completed: 100,
}

NOTIFICATION_MESSAGES = { #default message per event, formatted with the project id
    NotificationEventEnum.submission: "New project submission received for project {project_id}",
    NotificationEventEnum.status_change: "Project {project_id} status has been updated",
    NotificationEventEnum.file_upload: "New file uploaded for project {project_id}",
}

AUTOSAVE_TASK = "autosave"
DISMISS_TASK = "dismiss_confirmation"

TRACKER_VIEW = "tracker"

DEMO_ADMIN_USERS = [
    {
        "email": "admin@drinkph-demo.com",
        "username": "drinkph_admin",
        "password": "DrinkPH2025!",
        "role": "admin",
    }
]

DEMO_CLIENT_USERS = [
    {
        "email": "client1@drinkph-demo.com",
        "username": "client_demo1",
        "password": "ClientDemo2025!",
        "full_name": "Demo Client One",
    },
    {
        "email": "client2@drinkph-demo.com",
        "username": "client_demo2",
        "password": "ClientDemo2025!",
        "full_name": "Demo Client Two",
    },
]

BROWSER_ID_COOKIE = "dph_browser_id"
