from pydantic import Field

from keel.models.meta import KubeModel
from keel.models.resource import ObjectResource


class ScaleSpec(KubeModel):
    replicas: int | None = None


class ScaleStatus(KubeModel):
    replicas: int = 0
    selector: str | None = None


class Scale(ObjectResource):
    """Payload of the ``/scale`` sub-resource."""

    kind: str | None = "Scale"
    api_version: str | None = Field(default="autoscaling/v1", alias="apiVersion")
    spec: ScaleSpec = Field(default_factory=ScaleSpec)
    status: ScaleStatus | None = None

    def with_spec_replicas(self, replicas: int) -> "Scale":
        return self.model_copy(update={"spec": ScaleSpec(replicas=replicas)})
