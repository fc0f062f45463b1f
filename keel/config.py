from dataclasses import dataclass, field
from pathlib import Path

import yaml

from keel import env_vars
from keel.logger import init_logger

logger = init_logger(__name__)

IN_CLUSTER_SERVER = "https://kubernetes.default.svc"
SERVICE_ACCOUNT_NAMESPACE = Path("/var/run/secrets/kubernetes.io/serviceaccount/namespace")


@dataclass
class ClusterConfig:
    """Where the API server is and how to authenticate to it.

    Credentials are discovered by the ``kubernetes`` package; this layer only
    carries the results over to the HTTP transport.
    """

    server: str = field(default_factory=lambda: env_vars.KEEL_SERVER or IN_CLUSTER_SERVER)
    namespace: str = field(default_factory=lambda: env_vars.KEEL_NAMESPACE)
    verify_ssl: bool = True
    ca_cert: str | None = None
    client_cert: str | None = None
    client_key: str | None = None
    token: str | None = None
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_kubeconfig(cls, path: str | None = None, context: str | None = None, namespace: str | None = None):
        from kubernetes import client as k8s_client
        from kubernetes import config as k8s_config

        path = path or env_vars.KEEL_KUBECONFIG
        context = context or env_vars.KEEL_CONTEXT
        configuration = k8s_client.Configuration()
        k8s_config.load_kube_config(config_file=path, context=context, client_configuration=configuration)

        if namespace is None:
            contexts, active = k8s_config.list_kube_config_contexts(config_file=path)
            selected = next((c for c in contexts if c["name"] == context), active) if context else active
            namespace = (selected or {}).get("context", {}).get("namespace") or env_vars.KEEL_NAMESPACE

        logger.info(f"Loaded kubeconfig {path or '~/.kube/config'} (context={context or 'current'}) for {configuration.host}")
        return cls._from_configuration(configuration, namespace)

    @classmethod
    def in_cluster(cls):
        from kubernetes import client as k8s_client
        from kubernetes import config as k8s_config

        configuration = k8s_client.Configuration()
        k8s_config.load_incluster_config(client_configuration=configuration)
        namespace = env_vars.KEEL_NAMESPACE
        if not env_vars.is_set("KEEL_NAMESPACE") and SERVICE_ACCOUNT_NAMESPACE.exists():
            namespace = SERVICE_ACCOUNT_NAMESPACE.read_text().strip()
        return cls._from_configuration(configuration, namespace)

    @classmethod
    def discover(cls):
        """Explicit server from the environment, else kubeconfig, else in-cluster service account."""
        if env_vars.KEEL_SERVER:
            return cls()
        try:
            return cls.from_kubeconfig()
        except Exception as e:
            logger.info(f"No usable kubeconfig ({e}), falling back to in-cluster configuration")
        return cls.in_cluster()

    @classmethod
    def _from_configuration(cls, configuration, namespace: str):
        headers = {}
        authorization = (configuration.api_key or {}).get("authorization")
        if authorization:
            prefix = (configuration.api_key_prefix or {}).get("authorization")
            headers["Authorization"] = f"{prefix} {authorization}" if prefix else authorization
        return cls(
            server=configuration.host,
            namespace=namespace,
            verify_ssl=configuration.verify_ssl,
            ca_cert=configuration.ssl_ca_cert,
            client_cert=configuration.cert_file,
            client_key=configuration.key_file,
            headers=headers,
        )


@dataclass
class HttpConfig:
    request_timeout: float = field(default_factory=lambda: env_vars.KEEL_REQUEST_TIMEOUT_SECONDS)
    qps: float = field(default_factory=lambda: env_vars.KEEL_QPS)
    max_connections: int = 100
    max_keepalive_connections: int = 20


@dataclass
class WatchConfig:
    connect_timeout: float = field(default_factory=lambda: env_vars.KEEL_WATCH_CONNECT_TIMEOUT_SECONDS)
    queue_size: int = field(default_factory=lambda: env_vars.KEEL_WATCH_QUEUE_SIZE)


@dataclass
class KeelConfig:
    cluster: ClusterConfig = field(default_factory=ClusterConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)

    @classmethod
    def from_env(cls, config_path: str | None = None):
        if not config_path:
            config_path = env_vars.KEEL_CONFIG

        if not config_path:
            return cls(cluster=ClusterConfig.discover())

        config_file = Path(config_path)

        if not config_file.exists():
            raise Exception(f"config file {config_file} not found")

        config: dict
        with open(config_file) as f:
            config = yaml.safe_load(f) or {}

        # Convert nested dictionaries to dataclass objects
        kwargs = {}
        if "cluster" in config:
            cluster = dict(config["cluster"] or {})
            if "kubeconfig" in cluster or "context" in cluster:
                kwargs["cluster"] = ClusterConfig.from_kubeconfig(
                    path=cluster.get("kubeconfig"),
                    context=cluster.get("context"),
                    namespace=cluster.get("namespace"),
                )
            else:
                kwargs["cluster"] = ClusterConfig(**cluster)
        else:
            kwargs["cluster"] = ClusterConfig.discover()
        if "http" in config:
            kwargs["http"] = HttpConfig(**config["http"])
        if "watch" in config:
            kwargs["watch"] = WatchConfig(**config["watch"])

        return cls(**kwargs)

    def __post_init__(self) -> None:
        if self.http.qps <= 0:
            raise ValueError(f"http.qps must be positive, got {self.http.qps}")
        if self.watch.queue_size < 1:
            raise ValueError(f"watch.queue_size must be at least 1, got {self.watch.queue_size}")
        logger.debug(f"init KeelConfig: server={self.cluster.server} namespace={self.cluster.namespace}")
