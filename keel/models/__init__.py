from keel.models.meta import (
    DeleteOptions,
    KubeModel,
    ListMeta,
    ObjectMeta,
    OwnerReference,
    Status,
    StatusCause,
    StatusDetails,
)
from keel.models.resource import CustomResource, ListResource, ObjectResource
from keel.models.scale import Scale, ScaleSpec, ScaleStatus
from keel.models.watch import EventType, WatchEvent

__all__ = [
    "CustomResource",
    "DeleteOptions",
    "EventType",
    "KubeModel",
    "ListMeta",
    "ListResource",
    "ObjectMeta",
    "ObjectResource",
    "OwnerReference",
    "Scale",
    "ScaleSpec",
    "ScaleStatus",
    "Status",
    "StatusCause",
    "StatusDetails",
    "WatchEvent",
]
