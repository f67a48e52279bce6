from sqlmodel import Session, SQLModel, create_engine, text

from linedash.core.config import settings

engine_kwargs: dict = {"echo": False}

# Pool settings only apply to server databases; SQLite uses its own pool
if not settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
    engine_kwargs.update(
        {
            "pool_pre_ping": settings.DATABASE_POOL_PRE_PING,
            "pool_recycle": settings.DATABASE_POOL_RECYCLE,
            "pool_size": settings.DATABASE_POOL_SIZE,
            "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        }
    )
    if settings.ENVIRONMENT != "local":
        engine_kwargs["connect_args"] = {
            "connect_timeout": 10,
            "application_name": settings.PROJECT_NAME,
        }

engine = create_engine(settings.SQLALCHEMY_DATABASE_URI, **engine_kwargs)


# make sure all SQLModel models are imported (linedash.models) before
# initializing DB, otherwise relationships may fail to resolve


def init_db() -> None:
    import linedash.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def ping(session: Session) -> bool:
    session.connection().execute(text("SELECT 1"))
    return True
