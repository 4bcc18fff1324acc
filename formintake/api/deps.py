from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from formintake.core.config import settings
from formintake.db.session import get_session
from formintake.services.drive import DriveGateway, ObjectStorageGateway
from formintake.services.email import GmailNotifier, Notifier
from formintake.services.intake import IntakeConfig, IntakePipeline
from formintake.services.records import SubmissionStore


async def get_db_session() -> AsyncSession:
    async for session in get_session():
        yield session


@lru_cache
def get_intake_config() -> IntakeConfig:
    return IntakeConfig.from_settings(settings)


@lru_cache
def get_storage_gateway() -> ObjectStorageGateway:
    return DriveGateway(settings)


@lru_cache
def get_notifier() -> Notifier:
    return GmailNotifier(settings)


async def get_submission_store(session: AsyncSession = Depends(get_db_session)) -> SubmissionStore:
    return SubmissionStore(session)


async def get_intake_pipeline(
    config: IntakeConfig = Depends(get_intake_config),
    storage: ObjectStorageGateway = Depends(get_storage_gateway),
    store: SubmissionStore = Depends(get_submission_store),
    notifier: Notifier = Depends(get_notifier),
) -> IntakePipeline:
    return IntakePipeline(config, storage=storage, store=store, notifier=notifier)
