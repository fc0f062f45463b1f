"""Builds the pooled httpx client shared by every call a ``KubeClient`` makes."""

import ssl

import httpx

from keel.config import ClusterConfig, HttpConfig


def _ssl_context(cluster: ClusterConfig) -> ssl.SSLContext | bool:
    if not cluster.verify_ssl and not cluster.client_cert:
        return False
    context = ssl.create_default_context(cafile=cluster.ca_cert) if cluster.ca_cert else ssl.create_default_context()
    if not cluster.verify_ssl:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    if cluster.client_cert:
        context.load_cert_chain(cluster.client_cert, cluster.client_key)
    return context


def build_http_client(cluster: ClusterConfig, http: HttpConfig) -> httpx.AsyncClient:
    headers = {"Accept": "application/json", **cluster.headers}
    if cluster.token:
        headers["Authorization"] = f"Bearer {cluster.token}"
    verify = _ssl_context(cluster) if cluster.server.startswith("https") else True
    return httpx.AsyncClient(
        base_url=cluster.server,
        headers=headers,
        verify=verify,
        timeout=http.request_timeout,
        limits=httpx.Limits(
            max_connections=http.max_connections,
            max_keepalive_connections=http.max_keepalive_connections,
        ),
    )
