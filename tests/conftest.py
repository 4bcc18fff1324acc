import os

os.environ.setdefault("INTAKE_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("INTAKE_ENABLE_GMAIL", "false")
os.environ.setdefault("INTAKE_DRIVE_FOLDER_ID", "folder-general")
os.environ.setdefault("INTAKE_DRIVE_COMPLAINTS_FOLDER_ID", "folder-quejas")
os.environ.setdefault("INTAKE_NOTIFY_TO", "rrhh@example.com")
os.environ.setdefault("INTAKE_NOTIFY_CC", "gerencia@example.com")

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from formintake.models import Base
from formintake.services.intake import IntakeConfig, IntakePipeline
from formintake.services.records import SubmissionStore

from tests.fakes import FakeNotifier, FakeStorageGateway


@pytest.fixture()
async def async_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(async_engine):
    return async_sessionmaker(bind=async_engine, expire_on_commit=False, autoflush=False)


@pytest.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture()
def storage():
    return FakeStorageGateway()


@pytest.fixture()
def notifier():
    return FakeNotifier()


@pytest.fixture()
def intake_config():
    return IntakeConfig(
        general_folder_id="folder-general",
        complaints_folder_id="folder-quejas",
        notify_to=("rrhh@example.com",),
        notify_cc=("gerencia@example.com",),
    )


@pytest.fixture()
def store(db_session):
    return SubmissionStore(db_session)


@pytest.fixture()
def pipeline(intake_config, storage, store, notifier):
    return IntakePipeline(intake_config, storage=storage, store=store, notifier=notifier)
