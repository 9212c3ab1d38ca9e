"""Pytest configuration and fixtures."""
import httpx
import pytest

from resource_hub.config import Settings
from resource_hub.core.notifications import Notifier
from resource_hub.services.gateway import ResourceGateway
from resource_hub.services.resources.service import ResourceManager

from tests.fake_remote import FakeResourceStore, create_fake_remote
from tests.resource_helpers import FakeGateway, SAMPLE_FILES, SAMPLE_TREE


@pytest.fixture
def settings():
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        resource_api_url="http://testserver",
        access_token="test-token",
        organization_uuid="org-1",
        event_uuid="evt-1",
        max_tree_depth=32,
    )


@pytest.fixture
def remote():
    """Server-side state of the fake resource API."""
    return FakeResourceStore(event_uuid="evt-1")


@pytest.fixture
def gateway(settings, remote):
    """Real gateway talking HTTP to the in-memory fake API."""
    transport = httpx.ASGITransport(app=create_fake_remote(remote))
    return ResourceGateway(settings, transport=transport)


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def manager(settings, gateway, notifier):
    """ResourceManager wired to the fake HTTP API."""
    return ResourceManager(event_id="evt-1", gateway=gateway, notifier=notifier, settings=settings)


@pytest.fixture
def fake_gateway():
    """In-process gateway preloaded with SAMPLE_TREE and SAMPLE_FILES."""
    return FakeGateway(SAMPLE_TREE, SAMPLE_FILES)


@pytest.fixture
def fake_manager(settings, fake_gateway, notifier):
    """ResourceManager wired to the in-process fake gateway."""
    return ResourceManager(event_id="evt-1", gateway=fake_gateway, notifier=notifier, settings=settings)
