"""Resource types shared by the unit tests."""

from pydantic import BaseModel, ConfigDict, Field

from keel import CustomResource, ObjectResource, ResourceIdentity, register, resource
from keel.definition import ScaleSubresource, Scope, Subresources


class CounterSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    desired_replicas: int = Field(alias="desiredReplicas")


class CounterStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    actual_replicas: int = Field(alias="actualReplicas")


COUNTER_IDENTITY = ResourceIdentity(
    api_group="test.keel.io",
    version="v1alpha1",
    kind="Counter",
    short_names=("ctr", "ctrs"),
    subresources=Subresources()
    .with_status_subresource()
    .with_scale_subresource(ScaleSubresource(".spec.desiredReplicas", ".status.actualReplicas")),
)


class Counter(CustomResource[CounterSpec, CounterStatus]):
    pass


register(Counter, COUNTER_IDENTITY)


class Native(BaseModel):
    replicas: int | None = None
    auth: str | None = None


class Nats(BaseModel):
    native: Native = Field(default_factory=Native)


class EventBusSpec(BaseModel):
    nats: Nats = Field(default_factory=Nats)


@resource(group="argoproj.io", version="v1alpha1", plural="eventbus", singular="eventbus", short_names=["eb"])
class EventBus(CustomResource[EventBusSpec, dict]):
    pass


@resource(group="", version="v1", plural="configmaps")
class ConfigMap(ObjectResource):
    data: dict[str, str] = Field(default_factory=dict)


@resource(group="", version="v1", scope=Scope.CLUSTER)
class Namespace(ObjectResource):
    pass


def new_counter(name: str, replicas: int = 1) -> Counter:
    return Counter(spec=CounterSpec(desired_replicas=replicas)).with_name(name)
