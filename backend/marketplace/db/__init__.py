import importlib
import logging
import os

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from marketplace.config import settings

log = logging.getLogger("marketplace.db")

Base = declarative_base()

# every module that declares tables; imported before create_all so metadata is complete
MODEL_MODULES = [
    "marketplace.models.user",
    "marketplace.models.store",
    "marketplace.models.product",
    "marketplace.models.address",
    "marketplace.models.cart",
    "marketplace.models.cart_item",
    "marketplace.models.order",
    "marketplace.models.order_event",
]


def make_engine(url: str):
    """
    Build an engine for `url`.

    pysqlite opens its own transactions lazily and breaks SAVEPOINT handling,
    so for SQLite we take over BEGIN ourselves. Nested checkout/cart-clear
    transactions then roll back as a unit.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, future=True, echo=False)

    eng = create_engine(
        url,
        future=True,
        echo=False,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(eng, "connect")
    def _sqlite_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cur = dbapi_connection.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()

    @event.listens_for(eng, "begin")
    def _sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return eng


engine = make_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def import_models():
    for mod in MODEL_MODULES:
        importlib.import_module(mod)


def init_db(reset: bool = False, bind=None):
    """
    Create all tables on `bind` (the module engine by default).

    With reset=True, or RESET_DB=1/true/yes in the environment, tables are
    dropped first.
    """
    bind = bind if bind is not None else engine
    import_models()

    if reset or os.environ.get("RESET_DB", "false").lower() in ("1", "true", "yes"):
        log.info("Resetting database schema")
        Base.metadata.drop_all(bind=bind)

    Base.metadata.create_all(bind=bind)
    log.info("Database initialized")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
