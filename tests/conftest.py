import os

# must be set before favzone.config is imported
os.environ["DB_DSN"] = "sqlite://"
os.environ.pop("API_KEY", None)
os.environ.pop("DIFY_API_KEY", None)

import pytest
import structlog
from sqlmodel import SQLModel, Session

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)

from favzone.db.base import engine, init_db


@pytest.fixture(autouse=True)
def _fresh_db():
    init_db()
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s
