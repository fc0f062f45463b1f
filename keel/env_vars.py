import os
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    KEEL_LOGGING_PATH: str | None = None
    KEEL_LOGGING_FILE_NAME: str = "keel.log"
    KEEL_LOGGING_LEVEL: str = "INFO"
    KEEL_CONFIG: str | None = None
    KEEL_KUBECONFIG: str | None = None
    KEEL_CONTEXT: str | None = None
    KEEL_SERVER: str | None = None
    KEEL_NAMESPACE: str = "default"
    KEEL_REQUEST_TIMEOUT_SECONDS: float = 30.0
    KEEL_QPS: float = 5.0

    # Watch
    KEEL_WATCH_CONNECT_TIMEOUT_SECONDS: float = 10.0
    KEEL_WATCH_QUEUE_SIZE: int = 100


environment_variables: dict[str, Callable[[], Any]] = {
    "KEEL_LOGGING_PATH": lambda: os.getenv("KEEL_LOGGING_PATH"),
    "KEEL_LOGGING_FILE_NAME": lambda: os.getenv("KEEL_LOGGING_FILE_NAME", "keel.log"),
    "KEEL_LOGGING_LEVEL": lambda: os.getenv("KEEL_LOGGING_LEVEL", "INFO"),
    "KEEL_CONFIG": lambda: os.getenv("KEEL_CONFIG"),
    "KEEL_KUBECONFIG": lambda: os.getenv("KEEL_KUBECONFIG") or os.getenv("KUBECONFIG"),
    "KEEL_CONTEXT": lambda: os.getenv("KEEL_CONTEXT"),
    "KEEL_SERVER": lambda: os.getenv("KEEL_SERVER"),
    "KEEL_NAMESPACE": lambda: os.getenv("KEEL_NAMESPACE", "default"),
    "KEEL_REQUEST_TIMEOUT_SECONDS": lambda: float(os.getenv("KEEL_REQUEST_TIMEOUT_SECONDS", "30")),
    "KEEL_QPS": lambda: float(os.getenv("KEEL_QPS", "5")),
    "KEEL_WATCH_CONNECT_TIMEOUT_SECONDS": lambda: float(os.getenv("KEEL_WATCH_CONNECT_TIMEOUT_SECONDS", "10")),
    "KEEL_WATCH_QUEUE_SIZE": lambda: int(os.getenv("KEEL_WATCH_QUEUE_SIZE", "100")),
}


def __getattr__(name: str):
    if name in environment_variables:
        return environment_variables[name]()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def is_set(name: str):
    """Check if an environment variable is explicitly set."""
    if name in environment_variables:
        return name in os.environ
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
