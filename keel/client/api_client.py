"""Typed API client for registered resource types.

This module provides the generic resource operations on top of an httpx
connection pool:
- Rate limiting using aiolimiter (configurable QPS)
- Path construction and JSON marshalling driven by the type's registered identity
- Consistent error handling through the error classifier
- Status and scale sub-resource calls, gated on the identity's declared facets
- Watch streams

Every call is independent: the only state shared between calls is the
immutable registry, the connection pool and the rate limiter.
"""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
from aiolimiter import AsyncLimiter

from keel._codes import codes
from keel.client.transport import build_http_client
from keel.client.watch import WatchStream
from keel.codec import EnvelopeCodec, load_document
from keel.config import KeelConfig
from keel.definition.identity import ResourceIdentity, SubresourceName
from keel.definition.registry import ResourceBinding, binding
from keel.exceptions import DecodeError, TransportError, classify
from keel.logger import init_logger
from keel.models.meta import DeleteOptions
from keel.models.resource import ListResource, ObjectResource
from keel.models.scale import Scale
from keel.selector import to_query

logger = init_logger(__name__)

T = TypeVar("T", bound=ObjectResource)

SCALE_CODEC = EnvelopeCodec(Scale, ResourceIdentity(api_group="autoscaling", version="v1", kind="Scale"))


class KubeClient:
    """Typed client for resource-oriented APIs.

    Centralizes API server access with:
    - Rate limiting via aiolimiter to prevent API server overload
    - A shared httpx connection pool (owned by this client unless one is passed in)
    - Typed errors for every non-2xx response and every transport failure
    - No retries: conflicts and failures are surfaced to the caller
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        config: KeelConfig | None = None,
        namespace: str | None = None,
        qps: float | None = None,
        rate_limiter: AsyncLimiter | None = None,
    ):
        """Initialize the client.

        Args:
            http_client: Shared httpx client; built from ``config`` when omitted
            config: Client configuration (default: loaded from the environment,
                or plain defaults when ``http_client`` is given)
            namespace: Default namespace for namespaced types
            qps: Queries per second limit (default: ``config.http.qps``)
            rate_limiter: Limiter to share with other clients
        """
        if config is None:
            config = KeelConfig() if http_client is not None else KeelConfig.from_env()
        self._config = config
        self._owns_http_client = http_client is None
        self._http_client = http_client or build_http_client(config.cluster, config.http)
        self._namespace = namespace or config.cluster.namespace

        # Rate limiting
        self._rate_limiter = rate_limiter or AsyncLimiter(max_rate=qps or config.http.qps, time_period=1.0)

        logger.info(f"Started KubeClient for {self._http_client.base_url} in namespace {self._namespace}")

    @property
    def namespace(self) -> str:
        return self._namespace

    def using_namespace(self, namespace: str) -> KubeClient:
        """Return a client bound to another default namespace, sharing this client's pool and limiter."""
        return KubeClient(
            http_client=self._http_client,
            config=self._config,
            namespace=namespace,
            rate_limiter=self._rate_limiter,
        )

    async def close(self):
        """Close the connection pool if this client created it."""
        if self._owns_http_client and not self._http_client.is_closed:
            await self._http_client.aclose()

    async def __aenter__(self) -> KubeClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _namespace_for(self, identity: ResourceIdentity, namespace: str | None) -> str | None:
        if not identity.namespaced:
            return None
        return namespace or self._namespace

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: bytes | None = None,
        name: str | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        headers = {"Content-Type": "application/json"} if body is not None else None
        logger.debug(f"{method} {path} params={params}")
        try:
            async with self._rate_limiter:
                response = await self._http_client.request(
                    method,
                    path,
                    params=params,
                    content=body,
                    headers=headers,
                    timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
                )
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} failed: {e!r}")
            raise TransportError(f"{method} {path} failed: {e!r}") from e

        if not codes.is_success(response.status_code):
            error = classify(response.status_code, response.content, name=name)
            logger.debug(f"{method} {path} -> {response.status_code} {error.reason}: {error}")
            raise error
        if not response.content:
            return {}
        try:
            return load_document(response.content)
        except DecodeError as e:
            logger.warning(f"{method} {path} returned a malformed body: {e}")
            raise TransportError(f"{method} {path} returned a malformed body: {e}") from e

    async def get(self, resource_type: type[T], name: str, namespace: str | None = None, timeout: float | None = None) -> T:
        """Get a resource by name.

        Raises:
            NotFoundError: If the resource does not exist
        """
        found = binding(resource_type)
        path = found.identity.path(self._namespace_for(found.identity, namespace), name)
        return found.codec.decode(await self._request("GET", path, name=name, timeout=timeout))

    async def list(
        self,
        resource_type: type[T],
        namespace: str | None = None,
        label_selector=None,
        all_namespaces: bool = False,
        limit: int | None = None,
        continue_token: str | None = None,
        timeout: float | None = None,
    ) -> ListResource[T]:
        """List resources of a type.

        Args:
            resource_type: Registered type, or ``ListResource[T]`` of one
            namespace: Namespace to list (default: the client's namespace)
            label_selector: ``LabelSelector``, sequence of requirements or selector string
            all_namespaces: List across every namespace (namespaced types only)
            limit: Page size
            continue_token: Token from a previous page's ``continue_token``

        Returns:
            The list, whose ``resource_version`` can start a watch
        """
        found = binding(resource_type)
        namespace = None if all_namespaces else self._namespace_for(found.identity, namespace)
        params: dict[str, Any] = {}
        selector = to_query(label_selector)
        if selector:
            params["labelSelector"] = selector
        if limit is not None:
            params["limit"] = limit
        if continue_token:
            params["continue"] = continue_token
        content = await self._request("GET", found.identity.path(namespace), params=params or None, timeout=timeout)
        return found.codec.decode_list(content)

    async def create(self, obj: T, namespace: str | None = None, timeout: float | None = None) -> T:
        """Create a resource and return the server's copy of it."""
        found = binding(type(obj))
        if not obj.metadata.name and not obj.metadata.generate_name:
            raise ValueError(f"Cannot create {found.identity.kind} without metadata.name")
        path = found.identity.path(self._namespace_for(found.identity, namespace or obj.namespace))
        content = await self._request("POST", path, body=found.codec.encode_json(obj), name=obj.name, timeout=timeout)
        return found.codec.decode(content)

    async def update(self, obj: T, namespace: str | None = None, timeout: float | None = None) -> T:
        """Replace a resource.

        The object's resourceVersion is sent as-is; a stale one makes the server
        answer 409, raised as ``ConflictError``. ``status`` is never sent.
        """
        found = binding(type(obj))
        path = self._object_path(found, obj, namespace)
        content = await self._request("PUT", path, body=found.codec.encode_json(obj), name=obj.name, timeout=timeout)
        return found.codec.decode(content)

    async def delete(
        self,
        resource_type: type[T],
        name: str,
        namespace: str | None = None,
        options: DeleteOptions | None = None,
        timeout: float | None = None,
    ) -> None:
        found = binding(resource_type)
        path = found.identity.path(self._namespace_for(found.identity, namespace), name)
        body = options.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8") if options else None
        await self._request("DELETE", path, body=body, name=name, timeout=timeout)

    async def update_status(self, obj: T, namespace: str | None = None, timeout: float | None = None) -> T:
        """Write the object's status through the status sub-resource.

        Raises:
            SubresourceDisabledError: If the type does not declare a status sub-resource
        """
        found = binding(type(obj))
        found.identity.require(SubresourceName.STATUS)
        path = self._object_path(found, obj, namespace, SubresourceName.STATUS)
        body = found.codec.encode_json(obj, include_status=True)
        content = await self._request("PUT", path, body=body, name=obj.name, timeout=timeout)
        return found.codec.decode(content)

    async def get_scale(
        self, resource_type: type[T], name: str, namespace: str | None = None, timeout: float | None = None
    ) -> Scale:
        found = binding(resource_type)
        found.identity.require(SubresourceName.SCALE)
        path = found.identity.path(self._namespace_for(found.identity, namespace), name, SubresourceName.SCALE)
        return SCALE_CODEC.decode(await self._request("GET", path, name=name, timeout=timeout))

    async def update_scale(
        self,
        resource_type: type[T],
        name: str,
        scale: Scale,
        namespace: str | None = None,
        timeout: float | None = None,
    ) -> Scale:
        found = binding(resource_type)
        found.identity.require(SubresourceName.SCALE)
        namespace = self._namespace_for(found.identity, namespace)
        if scale.name is None:
            scale = scale.with_name(name)
        if namespace and scale.namespace is None:
            scale = scale.with_namespace(namespace)
        path = found.identity.path(namespace, name, SubresourceName.SCALE)
        content = await self._request("PUT", path, body=SCALE_CODEC.encode_json(scale, include_status=True), name=name, timeout=timeout)
        return SCALE_CODEC.decode(content)

    def watch(
        self,
        resource_type: type[T],
        namespace: str | None = None,
        resource_version: str | None = None,
        label_selector=None,
        name: str | None = None,
        timeout_seconds: int | None = None,
        all_namespaces: bool = False,
    ) -> WatchStream[T]:
        """Create a watch stream; it connects on first iteration (or ``start()`` / ``async with``).

        Args:
            resource_type: Registered type to watch
            namespace: Namespace to watch (default: the client's namespace)
            resource_version: Cursor to start after, usually a list's ``resource_version``
                or a previous stream's ``last_resource_version``
            label_selector: Restrict events to matching objects
            name: Restrict events to the single named object
            timeout_seconds: Ask the server to end the stream after this long
            all_namespaces: Watch every namespace (namespaced types only)
        """
        found = binding(resource_type)
        namespace = None if all_namespaces else self._namespace_for(found.identity, namespace)
        params: dict[str, Any] = {"watch": "true"}
        if resource_version:
            params["resourceVersion"] = resource_version
        selector = to_query(label_selector)
        if selector:
            params["labelSelector"] = selector
        if name:
            params["fieldSelector"] = f"metadata.name={name}"
        if timeout_seconds is not None:
            params["timeoutSeconds"] = timeout_seconds
        return WatchStream(
            self._http_client,
            found.identity.path(namespace),
            params,
            found.codec,
            connect_timeout=self._config.watch.connect_timeout,
            queue_size=self._config.watch.queue_size,
            rate_limiter=self._rate_limiter,
        )

    def _object_path(
        self, found: ResourceBinding, obj: ObjectResource, namespace: str | None, subresource: SubresourceName | None = None
    ) -> str:
        if not obj.name:
            raise ValueError(f"{found.identity.kind} has no metadata.name")
        return found.identity.path(self._namespace_for(found.identity, namespace or obj.namespace), obj.name, subresource)
