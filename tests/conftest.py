from __future__ import annotations

import pytest

from apientities.domain import EntityManager
from tests.support.entities import ALL_REPOSITORIES, FakeRequester


@pytest.fixture
def requester() -> FakeRequester:
    return FakeRequester()


@pytest.fixture
def manager(requester: FakeRequester) -> EntityManager:
    return EntityManager(requester, ALL_REPOSITORIES)
