import logging
from unittest.mock import patch

import pytest
import yaml

from keel.client.transport import build_http_client
from keel.config import ClusterConfig, HttpConfig, KeelConfig, WatchConfig
from keel.logger import init_logger

KUBECONFIG = {
    "apiVersion": "v1",
    "kind": "Config",
    "clusters": [{"name": "dev", "cluster": {"server": "https://dev.example:6443"}}],
    "users": [{"name": "dev-user", "user": {"token": "dev-token"}}],
    "contexts": [{"name": "dev", "context": {"cluster": "dev", "user": "dev-user", "namespace": "team-a"}}],
    "current-context": "dev",
}


def test_from_env_with_yaml(tmp_path):
    config_file = tmp_path / "keel.yml"
    config_file.write_text(
        yaml.safe_dump(
            {
                "cluster": {"server": "https://kube.local:6443", "namespace": "apps", "token": "abc"},
                "http": {"qps": 20, "request_timeout": 5},
                "watch": {"connect_timeout": 3, "queue_size": 50},
            }
        )
    )

    config = KeelConfig.from_env(str(config_file))

    assert config.cluster.server == "https://kube.local:6443"
    assert config.cluster.namespace == "apps"
    assert config.cluster.token == "abc"
    assert config.http.qps == 20
    assert config.http.request_timeout == 5
    assert config.watch.queue_size == 50


def test_from_env_missing_file(tmp_path):
    with pytest.raises(Exception, match="not found"):
        KeelConfig.from_env(str(tmp_path / "absent.yml"))


def test_from_env_uses_server_from_environment(monkeypatch):
    monkeypatch.delenv("KEEL_CONFIG", raising=False)
    monkeypatch.setenv("KEEL_SERVER", "https://from-env:6443")
    monkeypatch.setenv("KEEL_NAMESPACE", "env-ns")

    config = KeelConfig.from_env()

    assert config.cluster.server == "https://from-env:6443"
    assert config.cluster.namespace == "env-ns"


def test_discover_falls_back_to_in_cluster(monkeypatch):
    monkeypatch.delenv("KEEL_SERVER", raising=False)
    in_cluster = ClusterConfig(server="https://10.0.0.1:443", namespace="pod-ns")

    with patch.object(ClusterConfig, "from_kubeconfig", side_effect=Exception("no kubeconfig")), patch.object(
        ClusterConfig, "in_cluster", return_value=in_cluster
    ) as mock_in_cluster:
        discovered = ClusterConfig.discover()

    mock_in_cluster.assert_called_once()
    assert discovered is in_cluster


def test_kubeconfig_in_yaml(tmp_path):
    kubeconfig = tmp_path / "kubeconfig"
    kubeconfig.write_text(yaml.safe_dump(KUBECONFIG))
    config_file = tmp_path / "keel.yml"
    config_file.write_text(yaml.safe_dump({"cluster": {"kubeconfig": str(kubeconfig), "context": "dev"}}))

    config = KeelConfig.from_env(str(config_file))

    assert config.cluster.server == "https://dev.example:6443"
    assert config.cluster.namespace == "team-a"
    assert config.cluster.headers == {"Authorization": "Bearer dev-token"}


@pytest.mark.parametrize(
    "kwargs",
    [{"http": HttpConfig(qps=0)}, {"watch": WatchConfig(queue_size=0)}],
)
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        KeelConfig(cluster=ClusterConfig(server="https://kube.local"), **kwargs)


def test_build_http_client():
    cluster = ClusterConfig(
        server="https://kube.local:6443", namespace="apps", token="abc", headers={"X-Tenant": "blue"}, verify_ssl=False
    )

    client = build_http_client(cluster, HttpConfig(request_timeout=7))

    assert str(client.base_url) == "https://kube.local:6443"
    assert client.headers["Authorization"] == "Bearer abc"
    assert client.headers["X-Tenant"] == "blue"
    assert client.headers["Accept"] == "application/json"
    assert client.timeout.read == 7


class TestLogger:
    def test_stream_handler_by_default(self, monkeypatch):
        monkeypatch.delenv("KEEL_LOGGING_PATH", raising=False)
        monkeypatch.setenv("KEEL_LOGGING_LEVEL", "debug")

        logger = init_logger("keel.tests.stream")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert init_logger("keel.tests.stream").handlers == logger.handlers

    def test_file_handler(self, monkeypatch, tmp_path):
        monkeypatch.setenv("KEEL_LOGGING_PATH", str(tmp_path / "logs"))

        logger = init_logger("keel.tests.file", file_name="watch.log")
        logger.info("watch started")
        logger.handlers[0].flush()

        assert "watch started" in (tmp_path / "logs" / "watch.log").read_text()
