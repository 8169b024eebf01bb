import os
import tempfile
from datetime import timedelta
from typing import List, Tuple

import pytest

# Must be set before verifyhub.core.config is imported
_UPLOAD_DIR = tempfile.mkdtemp(prefix="verifyhub-uploads-")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", _UPLOAD_DIR)
os.environ.setdefault("EMAIL_BACKEND", "console")
os.environ.setdefault("DEBUG", "false")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from verifyhub.core.database import Base, get_db
from verifyhub.core.exceptions import StorageError
from verifyhub.core.timeutils import utcnow
from verifyhub.main import app
from verifyhub.models import Candidate, EmploymentVerification
from verifyhub.notifications.mailer import Mailer, get_mailer
from verifyhub.storage.service import FileStorage, UploadedFile, get_storage
from verifyhub.verifications.status import VerificationStatus


class FakeMailer(Mailer):
    """Collects outgoing verification requests"""

    def __init__(self):
        self.sent: List[Tuple[str, str]] = []

    def send_verification_request(self, to_email: str, form_url: str) -> None:
        self.sent.append((to_email, form_url))


class InMemoryStorage(FileStorage):
    """Keeps stored files in a dict; can be told to fail on the n-th save"""

    def __init__(self):
        self.files = {}
        self.deleted: List[str] = []
        self.fail_on_save = None
        self._saves = 0

    def save(self, upload: UploadedFile, folder: str) -> str:
        self._saves += 1
        if self.fail_on_save is not None and self._saves >= self.fail_on_save:
            raise StorageError(details={"folder": folder})
        url = f"memory://{folder}/{self._saves}-{upload.filename}"
        self.files[url] = upload.content
        return url

    def delete(self, url: str) -> None:
        self.deleted.append(url)
        self.files.pop(url, None)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def mailer():
    return FakeMailer()


@pytest.fixture()
def storage():
    return InMemoryStorage()


@pytest.fixture()
def client(session_factory, mailer, storage):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_candidate(db_session):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Candidate {counter['n']}",
            "email": f"candidate{counter['n']}@example.com",
            "phone": f"98765{counter['n']:05d}",
            "city": "Pune",
            "joining_designation": "Backend Engineer",
        }
        data.update(overrides)
        candidate = Candidate(**data)
        db_session.add(candidate)
        db_session.commit()
        db_session.refresh(candidate)
        return candidate

    return _make


@pytest.fixture()
def make_verification(db_session):
    """Create a verification and walk it through the lifecycle to the wanted status"""
    counter = {"n": 0}

    def _make(candidate, status=VerificationStatus.PENDING, created_at=None, completed_at=None, **overrides):
        counter["n"] += 1
        now = utcnow()
        created = created_at or now
        data = {
            "candidate_id": candidate.id,
            "previous_company_name": f"Company {counter['n']}",
            "previous_company_email": f"hr{counter['n']}@example.com",
            "designation": "Engineer",
            "verification_token": f"token-{counter['n']}",
            "token_expires_at": now + timedelta(days=7),
            "status": VerificationStatus.PENDING,
            "created_at": created,
            "updated_at": created,
        }
        data.update(overrides)
        verification = EmploymentVerification(**data)

        if status != VerificationStatus.PENDING:
            if status != VerificationStatus.FAILED:
                verification.transition_to(VerificationStatus.IN_PROGRESS)
            if status != VerificationStatus.IN_PROGRESS:
                verification.transition_to(status, completed_at or now)

        db_session.add(verification)
        db_session.commit()
        db_session.refresh(verification)
        return verification

    return _make
