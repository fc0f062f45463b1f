from ._codes import codes
from .exceptions import (
    ApiError,
    BindingConflictError,
    ConflictError,
    DecodeError,
    GoneError,
    InvalidSelectorError,
    KeelException,
    MissingBindingError,
    NotFoundError,
    StreamFailure,
    SubresourceDisabledError,
    TransportError,
    ValidationError,
    classify,
    raise_for_status,
)
from .models import (
    CustomResource,
    DeleteOptions,
    EventType,
    ListResource,
    ObjectMeta,
    ObjectResource,
    Scale,
    WatchEvent,
)
from .selector import LabelSelector
from .definition import (
    ResourceIdentity,
    ScaleSubresource,
    Scope,
    Subresources,
    register,
    resolve,
    resource,
)
from .codec import EnvelopeCodec
from .definition.crd import CustomResourceDefinition, synthesize
from .client import KubeClient, WatchState, WatchStream

__all__ = [
    "codes",
    "ApiError",
    "BindingConflictError",
    "ConflictError",
    "DecodeError",
    "GoneError",
    "InvalidSelectorError",
    "KeelException",
    "MissingBindingError",
    "NotFoundError",
    "StreamFailure",
    "SubresourceDisabledError",
    "TransportError",
    "ValidationError",
    "classify",
    "raise_for_status",
    "CustomResource",
    "DeleteOptions",
    "EventType",
    "ListResource",
    "ObjectMeta",
    "ObjectResource",
    "Scale",
    "WatchEvent",
    "LabelSelector",
    "ResourceIdentity",
    "ScaleSubresource",
    "Scope",
    "Subresources",
    "register",
    "resolve",
    "resource",
    "EnvelopeCodec",
    "CustomResourceDefinition",
    "synthesize",
    "KubeClient",
    "WatchState",
    "WatchStream",
]
