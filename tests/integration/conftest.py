from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("OTEL_SERVICE_NAME", "tableside-test")
os.environ.setdefault("OTEL_EXPORTER_OTLP_ENDPOINT", "")

from tableside.api.main import create_app
from tableside.infrastructure.runtime import Runtime, build_runtime
from tableside.tools.seed import load_restaurants


@pytest.fixture
def runtime(monkeypatch) -> Runtime:
    # Every test gets the demo restaurant in its initial state.
    monkeypatch.delenv("SEED_DATA_PATH", raising=False)
    return build_runtime(load_restaurants())


@pytest.fixture
def client(runtime: Runtime) -> Iterator[TestClient]:
    with TestClient(create_app(runtime)) as test_client:
        yield test_client
