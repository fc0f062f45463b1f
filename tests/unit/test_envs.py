import os

from keel import env_vars


def test_default_envs():
    log_dir = "/data/log"
    env_vars.KEEL_LOGGING_PATH = log_dir
    assert log_dir == env_vars.KEEL_LOGGING_PATH
    del env_vars.KEEL_LOGGING_PATH


def test_namespace_default(monkeypatch):
    monkeypatch.delenv("KEEL_NAMESPACE", raising=False)
    assert env_vars.KEEL_NAMESPACE == "default"


def test_numeric_envs_are_parsed(monkeypatch):
    monkeypatch.setenv("KEEL_QPS", "12.5")
    monkeypatch.setenv("KEEL_WATCH_QUEUE_SIZE", "7")
    assert env_vars.KEEL_QPS == 12.5
    assert env_vars.KEEL_WATCH_QUEUE_SIZE == 7


def test_kubeconfig_falls_back_to_standard_variable(monkeypatch):
    monkeypatch.delenv("KEEL_KUBECONFIG", raising=False)
    monkeypatch.setenv("KUBECONFIG", "/tmp/kubeconfig")
    assert env_vars.KEEL_KUBECONFIG == "/tmp/kubeconfig"


def test_is_set(monkeypatch):
    monkeypatch.delenv("KEEL_CONTEXT", raising=False)
    assert env_vars.is_set("KEEL_CONTEXT") is False
    monkeypatch.setenv("KEEL_CONTEXT", "kind-keel")
    assert env_vars.is_set("KEEL_CONTEXT") is True
    assert "KEEL_CONTEXT" in os.environ
