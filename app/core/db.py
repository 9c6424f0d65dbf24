import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from .config import settings
from .base import Base
from .errors import StoreError

log = logging.getLogger(__name__)

engine = create_async_engine(settings.POSTGRES_DSN, pool_pre_ping=True)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def get_session():
    async with SessionLocal() as session:
        yield session

async def commit_or_raise(session: AsyncSession) -> None:
    """Commit the unit of work; on failure roll back so nothing is half-written."""
    try:
        await session.commit()
    except SQLAlchemyError as e:
        log.error("commit failed, rolling back: %s", e)
        await session.rollback()
        raise StoreError("The change could not be saved, please retry.") from e

async def init_models():
    if settings.DB_MANAGE != "create_all":
        log.info("DB_MANAGE=%s, leaving the schema untouched", settings.DB_MANAGE)
        return
    # register tables on the metadata
    from app.modules.bookings import models as _bookings  # noqa: F401
    from app.modules.reports import models as _reports  # noqa: F401
    from app.modules.accounting import models as _accounting  # noqa: F401
    from app.modules.staff import models as _staff  # noqa: F401
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
