"""Generic object metadata and server status payloads.

These models carry the envelope-level data shared by every resource type. Field
names follow the server's camelCase wire names through aliases; Python code
uses the snake_case attribute names.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class KubeModel(BaseModel):
    """Base for all wire models: accepts either alias or attribute names, ignores unknown fields."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class OwnerReference(KubeModel):
    api_version: str = Field(alias="apiVersion")
    kind: str
    name: str
    uid: str
    controller: bool | None = None
    block_owner_deletion: bool | None = Field(default=None, alias="blockOwnerDeletion")


class ObjectMeta(KubeModel):
    name: str | None = None
    generate_name: str | None = Field(default=None, alias="generateName")
    namespace: str | None = None
    uid: str | None = None
    resource_version: str | None = Field(default=None, alias="resourceVersion")
    """Opaque cursor assigned by the server. Compare for equality only."""

    generation: int | None = None
    creation_timestamp: datetime | None = Field(default=None, alias="creationTimestamp")
    deletion_timestamp: datetime | None = Field(default=None, alias="deletionTimestamp")
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    owner_references: list[OwnerReference] = Field(default_factory=list, alias="ownerReferences")
    finalizers: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude_defaults=True)


class ListMeta(KubeModel):
    resource_version: str | None = Field(default=None, alias="resourceVersion")
    continue_token: str | None = Field(default=None, alias="continue")
    remaining_item_count: int | None = Field(default=None, alias="remainingItemCount")


class StatusCause(KubeModel):
    reason: str | None = None
    message: str | None = None
    field: str | None = None


class StatusDetails(KubeModel):
    name: str | None = None
    group: str | None = None
    kind: str | None = None
    uid: str | None = None
    causes: list[StatusCause] = Field(default_factory=list)
    retry_after_seconds: int | None = Field(default=None, alias="retryAfterSeconds")


class Status(KubeModel):
    """Failure (or success) report returned by the server in place of an object."""

    kind: str | None = "Status"
    api_version: str | None = Field(default="v1", alias="apiVersion")
    status: str | None = None
    message: str | None = None
    reason: str | None = None
    details: StatusDetails | None = None
    code: int | None = None


class DeleteOptions(KubeModel):
    kind: str = "DeleteOptions"
    api_version: str = Field(default="v1", alias="apiVersion")
    propagation_policy: str | None = Field(default=None, alias="propagationPolicy")
    """One of ``Orphan``, ``Background`` or ``Foreground``."""

    grace_period_seconds: int | None = Field(default=None, alias="gracePeriodSeconds")
    dry_run: list[str] | None = Field(default=None, alias="dryRun")
