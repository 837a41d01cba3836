from __future__ import annotations

from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from src.workforce_system.workforce_system.container import Container, build_container
from src.workforce_system.workforce_system.storage.kv import InMemoryKeyValueStore

ADMIN_PASSWORD = "admin123"


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 1, 9, 0, 0)


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def container(store) -> Container:
    return build_container(store=store, admin_password_hash=generate_password_hash(ADMIN_PASSWORD))


@pytest.fixture
def employee(container):
    return container.employee_service.create_employee(
        name="John Smith",
        email="john@erosecurity.com",
        phone="+1-555-0101",
        position="Security Officer",
        pin="12345",
    )


@pytest.fixture
def location(container):
    return container.location_service.create_location(
        name="Downtown Office Complex",
        address="123 Business Ave, Downtown",
        latitude=40.7128,
        longitude=-74.006,
    )
