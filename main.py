import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from config import configure_logging, settings
from database.database import create_database_tables, seed_demo_users
from endpoints import auth, portal, projects, tracker
from errors import GatewayError, ProjectNotFoundError

configure_logging()
logger = logging.getLogger(__name__)

create_database_tables() #call function to create database tables
if settings.seed_demo_users:
    seed_demo_users()

app = FastAPI( #creates new FastAPI app instance
    title="DPH Client Portal", #title shown in docs
    description="Project requests, admin review and client tracking for sustainability projects",
)

app.include_router(auth.router) #include routers from endpoints
app.include_router(portal.router)
app.include_router(projects.router)
app.include_router(tracker.router)

async def gateway_error_handler(request: Request, exc: GatewayError):
    status_code = 404 if isinstance(exc, ProjectNotFoundError) else 502
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})

async def unexpected_error_handler(request: Request, exc: Exception): #last line of defense, the client can retry or start over
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Something went wrong", "actions": ["try_again", "go_home"]},
    )

def install_error_handlers(target: FastAPI):
    target.add_exception_handler(GatewayError, gateway_error_handler)
    target.add_exception_handler(Exception, unexpected_error_handler)

install_error_handlers(app)

@app.get("/")
def hello_portal():
    return {"Hello": "DPH Client Portal"}
