"""Process-wide registry binding Python types to their resource identity and codec.

The registry is append-only: bindings are added at import/definition time and
never removed. Writers take a lock; readers do a plain dict lookup.
"""

import threading
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from keel.definition.identity import ResourceIdentity, Scope, Subresources
from keel.exceptions import BindingConflictError, MissingBindingError
from keel.logger import init_logger
from keel.models.resource import ListResource

logger = init_logger(__name__)


@dataclass(frozen=True)
class ResourceBinding:
    identity: ResourceIdentity
    codec: Any


_bindings: dict[type, ResourceBinding] = {}
_lock = threading.Lock()


def _item_type(resource_type: type) -> type:
    """Map ``ListResource[T]`` (or a subclass of it) to ``T``."""
    if isinstance(resource_type, type) and issubclass(resource_type, ListResource):
        metadata = getattr(resource_type, "__pydantic_generic_metadata__", None) or {}
        args = metadata.get("args") or ()
        if not args:
            for base in resource_type.__mro__[1:]:
                base_meta = getattr(base, "__pydantic_generic_metadata__", None) or {}
                if base_meta.get("args"):
                    args = base_meta["args"]
                    break
        if args and isinstance(args[0], type):
            return args[0]
    return resource_type


def register(resource_type: type, identity: ResourceIdentity, codec=None) -> ResourceBinding:
    """Bind ``resource_type`` to ``identity``.

    Registering the same identity twice is a no-op. Rebinding a type to a
    different identity raises ``BindingConflictError``.
    """
    from keel.codec import EnvelopeCodec

    with _lock:
        existing = _bindings.get(resource_type)
        if existing is not None:
            if existing.identity.same_as(identity) and (codec is None or codec is existing.codec):
                return existing
            raise BindingConflictError(resource_type, existing.identity, identity)
        binding = ResourceBinding(identity=identity, codec=codec or EnvelopeCodec(resource_type, identity))
        _bindings[resource_type] = binding
    logger.debug(f"Registered {resource_type.__qualname__} as {identity.api_version}/{identity.kind}")
    return binding


def binding(resource_type: type) -> ResourceBinding:
    found = _bindings.get(_item_type(resource_type))
    if found is None:
        raise MissingBindingError(resource_type)
    return found


def resolve(resource_type: type) -> ResourceIdentity:
    return binding(resource_type).identity


def is_registered(resource_type: type) -> bool:
    return _item_type(resource_type) in _bindings


def resource(
    group: str,
    version: str,
    kind: str | None = None,
    plural: str = "",
    singular: str = "",
    short_names: Sequence[str] = (),
    scope: Scope = Scope.NAMESPACED,
    subresources: Subresources | None = None,
) -> Callable[[type], type]:
    """Class decorator registering a resource type; ``kind`` defaults to the class name."""

    def decorator(cls: type) -> type:
        identity = ResourceIdentity(
            api_group=group,
            version=version,
            kind=kind or cls.__name__,
            plural=plural,
            singular=singular,
            short_names=tuple(short_names),
            scope=scope,
            subresources=subresources,
        )
        register(cls, identity)
        return cls

    return decorator
