from sqlalchemy import create_engine
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import settings


def _normalize_database_url(url: str) -> str:
    # Some providers hand out postgres://, SQLAlchemy wants postgresql://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


DATABASE_URL = _normalize_database_url(settings.database_url)

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def upsert(db: Session, model, values: dict, index_elements: list, update_fields: list):
    """
    Insert a row or, when it collides with the unique key made of
    `index_elements`, overwrite `update_fields` in the existing row.

    Runs as a single INSERT ... ON CONFLICT DO UPDATE statement so two
    concurrent callers can never leave duplicate rows behind.
    """
    dialect = db.get_bind().dialect.name

    if dialect == "postgresql":
        stmt = postgresql.insert(model).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(model).values(**values)
    else:
        # No native upsert: lock the row (if any) and branch
        query = db.query(model).filter_by(**{k: values[k] for k in index_elements})
        existing = query.with_for_update().first()
        if existing:
            for field in update_fields:
                setattr(existing, field, values[field])
        else:
            db.add(model(**values))
        db.flush()
        return

    stmt = stmt.on_conflict_do_update(
        index_elements=index_elements,
        set_={field: stmt.excluded[field] for field in update_fields},
    )
    db.execute(stmt)
