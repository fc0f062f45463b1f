import httpx
import pytest

from keel import KubeClient
from keel.config import ClusterConfig, KeelConfig, WatchConfig
from tests.unit.fake_server import BASE_URL, FakeApiServer


@pytest.fixture
def keel_config():
    """Config pointing at the fake server; nothing is discovered from the environment."""
    return KeelConfig(
        cluster=ClusterConfig(server=BASE_URL, namespace="keel-test"),
        watch=WatchConfig(connect_timeout=2.0, queue_size=10),
    )


@pytest.fixture
def fake_server():
    return FakeApiServer()


@pytest.fixture
async def http_client(fake_server):
    client = httpx.AsyncClient(base_url=BASE_URL, transport=fake_server.transport())
    yield client
    await client.aclose()


@pytest.fixture
def kube_client(http_client, keel_config):
    """Create KubeClient instance backed by the fake server."""
    return KubeClient(http_client=http_client, config=keel_config, qps=1000.0)
