import os

# 앱 모듈을 임포트하기 전에 테스트용 SQLite 로 교체
os.environ["DB_URL_OVERRIDE"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base, get_db
from main import app
from seed import add_student
from services.document_store import DocumentStore


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store(db):
    return DocumentStore(db)


@pytest.fixture
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def school(store):
    store.create("classes", {"id": "jss_1a", "name": "JSS 1A", "grade": 7, "section": "A", "level": "Junior Secondary"})
    store.create("classes", {"id": "jss_1b", "name": "JSS 1B", "grade": 7, "section": "B", "level": "Junior Secondary"})
    store.create("subjects", {"id": "mathematics", "name": "Mathematics", "code": "MTH", "is_core": True})
    store.create("subjects", {"id": "english", "name": "English Language", "code": "ENG", "is_core": True})
    store.create("subjects", {"id": "basic_science", "name": "Basic Science", "code": "BSC"})

    ada = add_student(store, "stu_0001", "Ada", "Okafor", subjects=["mathematics", "english", "basic_science"])
    tunde = add_student(store, "stu_0002", "Tunde", "Adeyemi", subjects=["mathematics", "english"])
    return {"ada": ada, "tunde": tunde}
