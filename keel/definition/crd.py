"""CustomResourceDefinition type and the synthesizer that builds one from an identity.

``synthesize`` performs no I/O. The resulting object is created on the server
with an ordinary ``KubeClient.create`` call.
"""

from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from keel.definition.identity import ResourceIdentity, Scope
from keel.definition.registry import binding, register
from keel.models.meta import KubeModel
from keel.models.resource import CustomResource


class CRDNames(KubeModel):
    plural: str
    singular: str | None = None
    kind: str
    short_names: list[str] | None = Field(default=None, alias="shortNames")
    list_kind: str | None = Field(default=None, alias="listKind")


class CRDScale(KubeModel):
    spec_replicas_path: str = Field(alias="specReplicasPath")
    status_replicas_path: str = Field(alias="statusReplicasPath")
    label_selector_path: str | None = Field(default=None, alias="labelSelectorPath")


class CRDSubresources(KubeModel):
    status: dict[str, Any] | None = None
    scale: CRDScale | None = None


class CRDVersion(KubeModel):
    name: str
    served: bool = True
    storage: bool = True
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")
    subresources: CRDSubresources | None = None


class CRDSpec(KubeModel):
    group: str
    names: CRDNames
    scope: Scope = Scope.NAMESPACED
    versions: list[CRDVersion] = Field(default_factory=list)


class CRDStatus(BaseModel):
    model_config = ConfigDict(extra="allow")


class CustomResourceDefinition(CustomResource[CRDSpec, CRDStatus]):
    def to_yaml(self) -> str:
        document = {
            "apiVersion": self.api_version or CRD_IDENTITY.api_version,
            "kind": self.kind or CRD_IDENTITY.kind,
            "metadata": self.metadata.to_dict(),
            **self.model_dump(
                mode="json", by_alias=True, exclude_none=True, exclude={"kind", "api_version", "metadata", "status"}
            ),
        }
        return yaml.safe_dump(document, sort_keys=False)


CRD_IDENTITY = ResourceIdentity(
    api_group="apiextensions.k8s.io",
    version="v1",
    kind="CustomResourceDefinition",
    plural="customresourcedefinitions",
    singular="customresourcedefinition",
    short_names=("crd", "crds"),
    scope=Scope.CLUSTER,
)

register(CustomResourceDefinition, CRD_IDENTITY)

PERMISSIVE_SCHEMA = {"openAPIV3Schema": {"type": "object", "x-kubernetes-preserve-unknown-fields": True}}


def synthesize(identity: ResourceIdentity | type) -> CustomResourceDefinition:
    """Build the registration manifest for a custom resource identity (or a registered type)."""
    if not isinstance(identity, ResourceIdentity):
        identity = binding(identity).identity
    if not identity.api_group:
        raise ValueError(f"{identity.kind} is in the core group and cannot be defined as a custom resource")

    subresources = None
    if identity.subresources and (identity.status_enabled or identity.scale):
        scale = identity.scale
        subresources = CRDSubresources(
            status={} if identity.status_enabled else None,
            scale=CRDScale(
                spec_replicas_path=scale.spec_replicas_path,
                status_replicas_path=scale.status_replicas_path,
                label_selector_path=scale.label_selector_path,
            )
            if scale
            else None,
        )

    spec = CRDSpec(
        group=identity.api_group,
        names=CRDNames(
            plural=identity.plural,
            singular=identity.singular,
            kind=identity.kind,
            short_names=list(identity.short_names) or None,
        ),
        scope=identity.scope,
        versions=[
            CRDVersion(
                name=identity.version,
                schema_=PERMISSIVE_SCHEMA,
                subresources=subresources,
            )
        ],
    )
    return CustomResourceDefinition(
        kind=CRD_IDENTITY.kind,
        api_version=CRD_IDENTITY.api_version,
        spec=spec,
    ).with_name(f"{identity.plural}.{identity.api_group}")
