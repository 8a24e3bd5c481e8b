import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

os.environ.setdefault("TESTING", "true")
os.environ.setdefault("LOG_DIR", "")

import pytest
from datetime import date, time
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient
from app.core.config import settings
from app.core.database import Base
from app.core.security import create_access_token
from app.models.notification import Notification
from app.models.schedule import UserSchedule
from app.utils import deps as deps_utils
import main

test_db_url = settings.TEST_DATABASE_URL or "sqlite:///./test.db"

USER_ID = 101
OTHER_USER_ID = 202

@pytest.fixture(scope="session")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(test_db_url)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()
    if test_db_url == "sqlite:///./test.db" and os.path.exists("./test.db"):
        os.remove("./test.db")

@pytest.fixture(scope="session")
def session_factory(database_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=database_engine)

@pytest.fixture(scope="function")
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
        db.close()

@pytest.fixture(scope="function")
def client(db_session):
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()

@pytest.fixture
def user_id():
    return USER_ID

@pytest.fixture
def other_user_id():
    return OTHER_USER_ID

@pytest.fixture
def auth_headers():
    token = create_access_token({"user_id": USER_ID})
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def other_auth_headers():
    token = create_access_token({"user_id": OTHER_USER_ID})
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def schedule_factory(db_session):
    """Insert a UserSchedules row directly, bypassing service validation."""
    def _schedule_factory(
        user_id=USER_ID,
        scheduled_date=date(2024, 6, 1),
        scheduled_time=time(7, 0, 0),
        activity_type="Exercise",
        activity_details="Morning Run",
        is_completed=False,
    ):
        row = UserSchedule(
            user_id=user_id,
            scheduled_date=scheduled_date,
            scheduled_time=scheduled_time,
            activity_type=activity_type,
            activity_details=activity_details,
            is_completed=is_completed,
        )
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row
    return _schedule_factory

@pytest.fixture
def notification_factory(db_session):
    def _notification_factory(user_id=USER_ID, message="Reminder: Meal at 12:00:00", send_time=None, type="Reminder", is_read=False):
        from datetime import datetime
        row = Notification(
            user_id=user_id,
            message=message,
            send_time=send_time or datetime(2024, 6, 1, 12, 0, 0),
            type=type,
            is_read=is_read,
        )
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row
    return _notification_factory
