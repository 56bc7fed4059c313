"""Shared fixtures: a throwaway SQLite database per test and a photo dir in tmp_path."""

import os
import sys
import tempfile

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before vms.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "vms-test-logs"))
os.environ.setdefault("PHOTO_DIR", os.path.join(tempfile.gettempdir(), "vms-test-photos"))

import pytest
from sqlalchemy.orm import sessionmaker

from vms.database import build_engine, create_tables
from vms.services.approval_workflow import ApprovalWorkflow
from vms.services.photo_service import PhotoStore
from vms.services.visitor_directory import VisitorDirectory


@pytest.fixture
def engine(tmp_path):
    eng = build_engine(f"sqlite:///{tmp_path / 'vms_test.db'}", lock_timeout=5)
    create_tables(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def photo_store(tmp_path):
    return PhotoStore(root=str(tmp_path / "photos"), max_bytes=1024)


@pytest.fixture
def directory(db):
    return VisitorDirectory(db)


@pytest.fixture
def workflow(db, directory, photo_store):
    return ApprovalWorkflow(db, directory=directory, photos=photo_store)


@pytest.fixture
def client(session_factory, photo_store):
    from fastapi.testclient import TestClient
    from vms.database import get_db
    from vms.dependencies import get_photo_store
    from vms.main import app

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_photo_store] = lambda: photo_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
