from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from backend.core import config


def build_engine(database_url: str):
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args)


engine = build_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_issue_schema_checked = False


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    # Models register themselves on Base.metadata on import.
    from backend.models import issue, user  # noqa: F401

    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    ensure_issue_schema(bind)


def ensure_issue_schema(bind=None) -> None:
    global _issue_schema_checked

    if _issue_schema_checked:
        return

    with _schema_lock:
        if _issue_schema_checked:
            return

        bind = bind or engine
        inspector = inspect(bind)

        if 'issues' not in inspector.get_table_names():
            _issue_schema_checked = True
            return

        with bind.begin() as connection:
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_issues_owner_created ON issues(created_by, created_at)')
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_issues_category_status ON issues(category, status)')
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_issue_remarks_issue_added ON issue_remarks(issue_id, added_at)')
            )

        _issue_schema_checked = True
