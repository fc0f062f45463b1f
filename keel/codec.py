"""Envelope codec: JSON documents <-> resource models.

A document is the fixed envelope (``kind``, ``apiVersion``, ``metadata``) merged
with the type's payload fields (``spec``, ``status`` or any other top-level
field the model declares). ``status`` is only written when explicitly asked
for, because status changes go through the status sub-resource.
"""

import json
from typing import Any, Generic, TypeVar

from pydantic import ValidationError as PydanticValidationError

from keel.definition.identity import ResourceIdentity
from keel.exceptions import DecodeError
from keel.models.meta import ListMeta
from keel.models.resource import ListResource, ObjectResource

T = TypeVar("T", bound=ObjectResource)

ENVELOPE_FIELDS = {"kind", "api_version", "metadata"}


def load_document(document: Any) -> dict[str, Any]:
    if isinstance(document, (bytes, bytearray)):
        try:
            document = document.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Document is not valid UTF-8: {e}") from e
    if isinstance(document, str):
        try:
            document = json.loads(document)
        except ValueError as e:
            raise DecodeError(f"Malformed JSON document: {e}") from e
    if not isinstance(document, dict):
        raise DecodeError(f"Expected a JSON object, got {type(document).__name__}")
    return document


class EnvelopeCodec(Generic[T]):
    """Encodes and decodes one resource model type.

    Custom codecs for types that are not pydantic models can subclass this and
    override ``encode`` and ``decode``; list decoding reuses ``decode`` per item.
    """

    def __init__(self, resource_type: type[T], identity: ResourceIdentity):
        self.resource_type = resource_type
        self.identity = identity

    def encode(self, obj: T, include_status: bool = False) -> dict[str, Any]:
        document: dict[str, Any] = {
            "kind": obj.kind or self.identity.kind,
            "apiVersion": obj.api_version or self.identity.api_version,
            "metadata": obj.metadata.to_dict(),
        }
        payload = obj.model_dump(mode="json", by_alias=True, exclude_none=True, exclude=ENVELOPE_FIELDS)
        if not include_status:
            payload.pop("status", None)
        document.update(payload)
        return document

    def encode_json(self, obj: T, include_status: bool = False) -> bytes:
        return json.dumps(self.encode(obj, include_status=include_status)).encode("utf-8")

    def decode(self, document: Any) -> T:
        data = load_document(document)
        try:
            return self.resource_type.model_validate(data)
        except PydanticValidationError as e:
            raise DecodeError.from_validation_error(self.resource_type.__name__, e) from e

    def decode_list(self, document: Any) -> ListResource[T]:
        data = load_document(document)
        items = data.get("items") or []
        if not isinstance(items, list):
            raise DecodeError(f"Expected 'items' to be a list in {self.identity.kind}List")
        try:
            metadata = ListMeta.model_validate(data.get("metadata") or {})
        except PydanticValidationError as e:
            raise DecodeError.from_validation_error(f"{self.identity.kind}List", e) from e
        return ListResource[self.resource_type](
            api_version=data.get("apiVersion"),
            kind=data.get("kind"),
            metadata=metadata,
            items=[self.decode(item) for item in items],
        )
