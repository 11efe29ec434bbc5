import logging
from sqlmodel import SQLModel, Session, create_engine, select
from config import settings
from constants import DEMO_ADMIN_USERS, DEMO_CLIENT_USERS
from database.models import AdminUser, ClientUser

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {} #sessions are opened from FastAPI's worker threads
engine = create_engine(settings.database_url, connect_args=connect_args) #SQLAlchemy Engine allows for database interaction

def create_database_tables(bind=engine):
    SQLModel.metadata.create_all(bind) #creates SQLModel defined tables (that dont already exist) and adds to database

def seed_demo_users(bind=engine):
    with Session(bind) as session:
        for admin in DEMO_ADMIN_USERS:
            if not session.exec(select(AdminUser).where(AdminUser.email == admin["email"])).first():
                session.add(AdminUser(**admin))
                logger.info("Seeded demo admin %s", admin["email"])
        for client in DEMO_CLIENT_USERS:
            if not session.exec(select(ClientUser).where(ClientUser.email == client["email"])).first():
                session.add(ClientUser(**client))
                logger.info("Seeded demo client %s", client["email"])
        session.commit()
