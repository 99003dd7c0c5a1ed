from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from axii.core.config import settings


class Base(DeclarativeBase):
    pass


def _connect_args(url: str) -> dict:
    # aiosqlite abre a conexão em outra thread
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_async_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    echo=settings.SQL_ECHO,
)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_models(drop: bool = False) -> None:
    """Cria as tabelas que ainda não existem; com drop=True recria tudo do zero."""
    async with engine.begin() as conn:
        if drop:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    async with async_session() as session:
        yield session
