from sqlmodel import SQLModel, create_engine, Session
from config.settings import DATABASE_URL

# ---------------------------------------------------------------------
# Database Engine Configuration
# ---------------------------------------------------------------------
if DATABASE_URL.startswith("sqlite"):
    # Sync routes run in a threadpool, so connections cross threads
    engine = create_engine(
        DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        DATABASE_URL,
        echo=False,           # Set to True for SQL query debugging
        pool_size=10,
        max_overflow=5,
        pool_recycle=300,     # Recycle connections every 5 min
        pool_pre_ping=True,
        pool_timeout=60,
    )


# ---------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------
def create_db_and_tables():
    """Create the customer, user, NPI and submission tables if missing."""
    import database.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


# ---------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------
def get_session():
    """FastAPI dependency yielding one session per request."""
    with Session(engine) as session:
        yield session


def get_db_session() -> Session:
    """Session for the startup seed, used as a context manager."""
    return Session(engine)
