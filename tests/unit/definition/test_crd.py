import json

import httpx
import pytest
import yaml

from keel import CustomResourceDefinition, ResourceIdentity, Scope, resolve, synthesize
from keel.definition.crd import CRD_IDENTITY
from tests.unit.fake_server import make_client
from tests.unit.resources import COUNTER_IDENTITY, ConfigMap, Counter, EventBus


class TestSynthesize:
    def test_counter_definition(self):
        crd = synthesize(COUNTER_IDENTITY)

        assert crd.name == "counters.test.keel.io"
        assert crd.kind == "CustomResourceDefinition"
        assert crd.api_version == "apiextensions.k8s.io/v1"
        assert crd.spec.group == "test.keel.io"
        assert crd.spec.scope == Scope.NAMESPACED
        assert crd.spec.names.kind == "Counter"
        assert crd.spec.names.plural == "counters"
        assert crd.spec.names.short_names == ["ctr", "ctrs"]

        (version,) = crd.spec.versions
        assert version.name == "v1alpha1"
        assert version.served and version.storage
        assert version.subresources.status == {}
        assert version.subresources.scale.spec_replicas_path == ".spec.desiredReplicas"
        assert version.subresources.scale.status_replicas_path == ".status.actualReplicas"

    def test_registered_type_is_accepted(self):
        assert synthesize(Counter).name == synthesize(COUNTER_IDENTITY).name

    def test_no_subresources(self):
        crd = synthesize(EventBus)

        assert crd.name == "eventbus.argoproj.io"
        assert crd.spec.versions[0].subresources is None

    def test_cluster_scope(self):
        identity = ResourceIdentity(api_group="test.keel.io", version="v1", kind="Tenant", scope=Scope.CLUSTER)

        assert synthesize(identity).spec.scope == Scope.CLUSTER

    def test_core_group_rejected(self):
        with pytest.raises(ValueError):
            synthesize(ConfigMap)

    def test_definition_type_is_registered(self):
        assert resolve(CustomResourceDefinition) is CRD_IDENTITY
        assert CRD_IDENTITY.path(name="x") == "/apis/apiextensions.k8s.io/v1/customresourcedefinitions/x"


class TestToYaml:
    def test_manifest(self):
        manifest = yaml.safe_load(synthesize(COUNTER_IDENTITY).to_yaml())

        assert manifest["apiVersion"] == "apiextensions.k8s.io/v1"
        assert manifest["kind"] == "CustomResourceDefinition"
        assert manifest["metadata"] == {"name": "counters.test.keel.io"}
        assert "status" not in manifest

        spec = manifest["spec"]
        assert spec["scope"] == "Namespaced"
        assert spec["names"]["shortNames"] == ["ctr", "ctrs"]
        version = spec["versions"][0]
        assert version["schema"]["openAPIV3Schema"]["x-kubernetes-preserve-unknown-fields"] is True
        assert version["subresources"] == {
            "status": {},
            "scale": {"specReplicasPath": ".spec.desiredReplicas", "statusReplicasPath": ".status.actualReplicas"},
        }


@pytest.mark.asyncio
async def test_create_definition_through_client(keel_config):
    """A synthesized definition is created with a plain create call at the cluster-scoped path."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = json.loads(request.content)
        body["metadata"]["resourceVersion"] = "1"
        return httpx.Response(201, json=body)

    client = make_client(handler, keel_config)
    created = await client.create(synthesize(COUNTER_IDENTITY))

    assert seen[0].method == "POST"
    assert seen[0].url.path == "/apis/apiextensions.k8s.io/v1/customresourcedefinitions"
    assert created.resource_version == "1"
    assert created.spec.versions[0].subresources.scale is not None
    await client.close()
