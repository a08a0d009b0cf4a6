import os
from dotenv import load_dotenv
from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker


load_dotenv()
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./alumniconnect.db")

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_profile_schema_checked = False


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_profile_schema() -> None:
    global _profile_schema_checked

    if _profile_schema_checked:
        return

    with _schema_lock:
        if _profile_schema_checked:
            return

        inspector = inspect(engine)

        if 'profiles' not in inspector.get_table_names():
            _profile_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('profiles')}
        migration_steps = [
            ('full_name', 'ALTER TABLE profiles ADD COLUMN full_name VARCHAR'),
            ('department', 'ALTER TABLE profiles ADD COLUMN department VARCHAR'),
        ]

        with engine.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_profiles_role ON profiles(role)')
            )

        _profile_schema_checked = True
