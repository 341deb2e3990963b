"""Shared fixtures: a fresh in-memory front desk seeded with the default rooms."""
import pytest

from frontdesk.config import Settings
from frontdesk.service import FrontDesk
from frontdesk.transforms import default_state


@pytest.fixture
def settings() -> Settings:
    return Settings(points_per_discount=10, state_path=None)


@pytest.fixture
def desk(settings: Settings) -> FrontDesk:
    return FrontDesk(state=default_state(settings.points_per_discount), settings=settings)


@pytest.fixture
def client_id(desk: FrontDesk) -> str:
    return desk.add_client("Ana Souza", phone="555-0101").get_or_else(None).id
