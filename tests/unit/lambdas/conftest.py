from unittest.mock import MagicMock

import pytest

from urlshortener.lambdas.dependencies import Services
from urlshortener.services import DeadlineRunner, LinkService, StatsService, TaskDispatcher
from urlshortener.utils.config import AppSettings


@pytest.fixture
def context():
    class _Context:
        function_name = 'urlshortener'

    return _Context()


@pytest.fixture
def link_service():
    return MagicMock(spec=LinkService)


@pytest.fixture
def stats_service():
    return MagicMock(spec=StatsService)


@pytest.fixture
def app_services(link_service, stats_service):
    return Services(
        settings=AppSettings(stats_table_name='StatsTable'),
        dispatcher=MagicMock(spec=TaskDispatcher),
        runner=MagicMock(spec=DeadlineRunner),
        links=link_service,
        stats=stats_service,
    )


@pytest.fixture
def patch_services(monkeypatch, app_services):
    """Point a handler module's `services()` at the mocked services."""

    def _patch(app_module, services=None):
        monkeypatch.setattr(app_module, 'services', lambda: services or app_services)

    return _patch
