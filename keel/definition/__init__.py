from keel.definition.identity import ResourceIdentity, ScaleSubresource, Scope, SubresourceName, Subresources
from keel.definition.registry import ResourceBinding, binding, is_registered, register, resolve, resource

__all__ = [
    "ResourceBinding",
    "ResourceIdentity",
    "ScaleSubresource",
    "Scope",
    "SubresourceName",
    "Subresources",
    "binding",
    "is_registered",
    "register",
    "resolve",
    "resource",
]
