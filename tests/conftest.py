from typing import Callable

import pytest
from prometheus_client import CollectorRegistry

from mention_service.config.settings import Settings
from mention_service.main import create_app
from mention_service.utils.metrics import MetricsCollector
from tests.fakes import FIXED_MILLIS, FakeRedis, GraphApiStub, build_settings


@pytest.fixture
def settings() -> Settings:
    return build_settings()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def metrics() -> MetricsCollector:
    return MetricsCollector(registry=CollectorRegistry())


@pytest.fixture
def graph_api() -> GraphApiStub:
    return GraphApiStub()


@pytest.fixture
def make_app(fake_redis, graph_api, metrics) -> Callable:
    """Build an application wired to in-memory collaborators."""

    def _make(redis_client=None, **setting_overrides):
        return create_app(
            settings=build_settings(**setting_overrides),
            redis_client=redis_client or fake_redis,
            graph_client=graph_api.client(),
            clock=lambda: FIXED_MILLIS,
            metrics=metrics
        )

    return _make
