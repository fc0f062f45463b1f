"""Resource identity: where a type lives on the API server and which facets it has."""

from dataclasses import astuple, dataclass, field, replace
from enum import Enum

from keel.exceptions import SubresourceDisabledError


class Scope(str, Enum):
    CLUSTER = "Cluster"
    NAMESPACED = "Namespaced"


class SubresourceName(str, Enum):
    STATUS = "status"
    SCALE = "scale"


def _check_path(path: str, root: str, what: str):
    if not path or not path.startswith(f".{root}.") or len(path) <= len(root) + 2:
        raise ValueError(f"{what} must reference a field under .{root}, got {path!r}")


@dataclass(frozen=True)
class ScaleSubresource:
    """JSON paths the server uses to map ``/scale`` onto a custom resource."""

    spec_replicas_path: str
    status_replicas_path: str
    label_selector_path: str | None = None

    def __post_init__(self):
        _check_path(self.spec_replicas_path, "spec", "spec_replicas_path")
        _check_path(self.status_replicas_path, "status", "status_replicas_path")
        if self.label_selector_path is not None and not (
            self.label_selector_path.startswith(".spec.") or self.label_selector_path.startswith(".status.")
        ):
            raise ValueError(f"label_selector_path must reference .spec or .status, got {self.label_selector_path!r}")


@dataclass(frozen=True)
class Subresources:
    status_enabled: bool = False
    scale: ScaleSubresource | None = None

    def with_status_subresource(self) -> "Subresources":
        return replace(self, status_enabled=True)

    def with_scale_subresource(self, scale: ScaleSubresource) -> "Subresources":
        return replace(self, scale=scale)


@dataclass(frozen=True)
class ResourceIdentity:
    """Group/version/kind, naming and scope of a resource type.

    Identities compare and hash on ``(api_group, version, kind)`` only. The empty
    group is the legacy core group, served under ``/api`` instead of ``/apis``.
    ``plural`` and ``singular`` default to the lower-cased kind (plus ``s``).
    """

    api_group: str
    version: str
    kind: str
    plural: str = field(default="", compare=False)
    singular: str = field(default="", compare=False)
    short_names: tuple[str, ...] = field(default=(), compare=False)
    scope: Scope = field(default=Scope.NAMESPACED, compare=False)
    subresources: Subresources | None = field(default=None, compare=False)

    def __post_init__(self):
        if not self.kind:
            raise ValueError("kind must not be empty")
        if not self.version:
            raise ValueError("version must not be empty")
        if not self.plural:
            object.__setattr__(self, "plural", self.kind.lower() + "s")
        if not self.singular:
            object.__setattr__(self, "singular", self.kind.lower())
        object.__setattr__(self, "short_names", tuple(self.short_names))
        object.__setattr__(self, "scope", Scope(self.scope))

    @property
    def api_version(self) -> str:
        return f"{self.api_group}/{self.version}" if self.api_group else self.version

    @property
    def namespaced(self) -> bool:
        return self.scope == Scope.NAMESPACED

    @property
    def status_enabled(self) -> bool:
        return bool(self.subresources and self.subresources.status_enabled)

    @property
    def scale(self) -> ScaleSubresource | None:
        return self.subresources.scale if self.subresources else None

    def same_as(self, other: "ResourceIdentity") -> bool:
        """Field-by-field comparison, unlike ``==`` which only looks at group/version/kind."""
        return astuple(self) == astuple(other)

    def require(self, subresource: SubresourceName):
        if subresource == SubresourceName.STATUS and not self.status_enabled:
            raise SubresourceDisabledError(self.kind, subresource.value)
        if subresource == SubresourceName.SCALE and self.scale is None:
            raise SubresourceDisabledError(self.kind, subresource.value)

    def path(self, namespace: str | None = None, name: str | None = None, subresource: str | None = None) -> str:
        """Build the request path for this resource.

        Namespaced types without a namespace address the collection across all
        namespaces; cluster-scoped types ignore ``namespace``.
        """
        if subresource and not name:
            raise ValueError(f"subresource {subresource!r} requires a resource name")

        segments = [f"/apis/{self.api_group}/{self.version}" if self.api_group else f"/api/{self.version}"]
        if self.namespaced and namespace:
            segments.append(f"namespaces/{namespace}")
        segments.append(self.plural)
        if name:
            segments.append(name)
        if subresource:
            segments.append(str(subresource.value if isinstance(subresource, SubresourceName) else subresource))
        return "/".join(segments)
