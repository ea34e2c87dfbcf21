import os
import tempfile

# Isolated data dir BEFORE importing settings (office_expenses.main builds a
# module-level app from the cached settings)
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="office_expenses_test_"))

import pytest
from fastapi.testclient import TestClient

from office_expenses.core.config import Settings
from office_expenses.db.dal import Database
from office_expenses.db.migrate import apply_migrations
from office_expenses.main import create_app


@pytest.fixture
def settings(tmp_path) -> Settings:
    s = Settings(data_dir=tmp_path, db_filename="test.sqlite3", debug=False)
    s.init_post_load()
    return s


@pytest.fixture
def client(settings) -> TestClient:
    return TestClient(create_app(settings_override=settings))


@pytest.fixture
def db(settings) -> Database:
    apply_migrations(settings.db_path)
    return Database(settings.db_path)

