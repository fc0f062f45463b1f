"""Object envelope models.

``ObjectResource`` is the generic envelope (kind, apiVersion, metadata). Types
that carry a payload subclass it and add their own fields, or parametrize
``CustomResource`` with a spec and status model:

    class Spec(BaseModel):
        desired_replicas: int = Field(alias="desiredReplicas")

    class Status(BaseModel):
        actual_replicas: int = Field(alias="actualReplicas")

    class TestResource(CustomResource[Spec, Status]):
        pass
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field, model_validator

from keel.models.meta import KubeModel, ListMeta, ObjectMeta

SpecT = TypeVar("SpecT")
StatusT = TypeVar("StatusT")


class ObjectResource(KubeModel):
    kind: str | None = None
    api_version: str | None = Field(default=None, alias="apiVersion")
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)

    @property
    def name(self) -> str | None:
        return self.metadata.name

    @property
    def namespace(self) -> str | None:
        return self.metadata.namespace

    @property
    def resource_version(self) -> str | None:
        return self.metadata.resource_version

    def _with_meta(self, **changes):
        return self.model_copy(update={"metadata": self.metadata.model_copy(update=changes)})

    def with_name(self, name: str):
        return self._with_meta(name=name)

    def with_namespace(self, namespace: str):
        return self._with_meta(namespace=namespace)

    def with_resource_version(self, resource_version: str | None):
        return self._with_meta(resource_version=resource_version)

    def with_labels(self, **labels: str):
        return self._with_meta(labels={**self.metadata.labels, **labels})

    def with_annotations(self, **annotations: str):
        return self._with_meta(annotations={**self.metadata.annotations, **annotations})


def _constructible_without_args(tp) -> bool:
    if isinstance(tp, type) and issubclass(tp, BaseModel):
        return not any(f.is_required() for f in tp.model_fields.values())
    return False


T = TypeVar("T", bound=ObjectResource)


class CustomResource(ObjectResource, Generic[SpecT, StatusT]):
    """Envelope whose payload is a ``spec`` and an optional ``status``.

    ``status`` is only populated by the server once the status sub-resource has
    been written. A missing ``spec`` decodes to the spec model's defaults when
    every spec field has one, otherwise decoding fails.
    """

    spec: SpecT
    status: StatusT | None = None

    @model_validator(mode="before")
    @classmethod
    def _default_spec(cls, data):
        if isinstance(data, dict) and data.get("spec") is None:
            field = cls.model_fields.get("spec")
            if field is not None and _constructible_without_args(field.annotation):
                data = {**data, "spec": {}}
        return data

    def with_spec(self, spec: SpecT):
        return self.model_copy(update={"spec": spec})

    def with_status(self, status: StatusT | None):
        return self.model_copy(update={"status": status})


class ListResource(KubeModel, Generic[T]):
    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: list[T] = Field(default_factory=list)

    @property
    def resource_version(self) -> str | None:
        """Watch cursor for "all changes after this snapshot"."""
        return self.metadata.resource_version

    @property
    def continue_token(self) -> str | None:
        return self.metadata.continue_token
