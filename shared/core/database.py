from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from shared.core.config import AUTH_DATABASE_URL, HOTEL_DATABASE_URL

# Separate bases
AuthBase = declarative_base()
Base = declarative_base()

POOL_SIZE = 2
MAX_OVERFLOW = 2


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live on one connection
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_size": POOL_SIZE,          # max idle connections
        "max_overflow": MAX_OVERFLOW,    # max temporary extra connections
        "pool_timeout": 30,              # wait time before failing
    }


# Auth DB
auth_engine = create_engine(AUTH_DATABASE_URL, **_engine_options(AUTH_DATABASE_URL))
AuthSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=auth_engine)

# Hotel DB
hotel_engine = create_engine(HOTEL_DATABASE_URL, **_engine_options(HOTEL_DATABASE_URL))
HotelSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=hotel_engine)


# Dependency


def get_auth_db():
    db = AuthSessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_hotel_db():
    db = HotelSessionLocal()
    try:
        yield db
    finally:
        db.close()
