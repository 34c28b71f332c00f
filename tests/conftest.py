import os
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'shopfront_media' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SUPABASE_DISABLED", "1")
# module-level app in shopfront_media.main builds its own upload root on import
os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="shopfront-uploads-"))


@pytest.fixture()
def uploads_dir(tmp_path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
def app_config(uploads_dir):
    from shopfront_media.config import load_config

    return load_config(uploads_dir=uploads_dir)


@pytest.fixture()
def client(app_config) -> TestClient:
    # lazy import after env configured
    from shopfront_media.main import create_app

    return TestClient(create_app(app_config))


@pytest.fixture()
def auth_header() -> dict[str, str]:
    # any token is accepted in disabled mode
    return {"Authorization": "Bearer test-token"}
