"""Fixtures for API tests: the real app with stub-backed dependencies."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from resale_gate.api.dependencies.listing_admission import (
    get_admission_config,
    get_listing_admission_service,
)
from resale_gate.api.main import app
from resale_gate.config.admission_config import TEST_ADMISSION_CONFIG


@pytest.fixture
def client(admission_service) -> Iterator[TestClient]:
    app.dependency_overrides[get_listing_admission_service] = lambda: admission_service
    app.dependency_overrides[get_admission_config] = lambda: TEST_ADMISSION_CONFIG
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seller_headers(seller_id) -> dict[str, str]:
    return {"X-Seller-Id": str(seller_id)}
