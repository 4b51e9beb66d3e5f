from __future__ import annotations

import pytest

from .helpers.fakes import FakeAuthority, FakeRedis
from .helpers.harness import build_manager


@pytest.fixture
def authority():
    return FakeAuthority()


@pytest.fixture
def redis_fake():
    return FakeRedis()


@pytest.fixture
def manager(authority, redis_fake):
    return build_manager(authority, redis_fake)
