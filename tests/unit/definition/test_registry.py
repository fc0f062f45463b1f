import pytest

from keel import (
    BindingConflictError,
    EnvelopeCodec,
    ListResource,
    MissingBindingError,
    ObjectResource,
    ResourceIdentity,
    register,
    resolve,
    resource,
)
from keel.definition import binding, is_registered
from tests.unit.resources import COUNTER_IDENTITY, ConfigMap, Counter


class TestRegistry:
    def test_resolve_registered_type(self):
        assert resolve(Counter) is COUNTER_IDENTITY
        assert isinstance(binding(Counter).codec, EnvelopeCodec)

    def test_resolve_unregistered_type_fails(self):
        class Unbound(ObjectResource):
            pass

        with pytest.raises(MissingBindingError) as exc_info:
            resolve(Unbound)
        assert exc_info.value.resource_type is Unbound
        assert is_registered(Unbound) is False

    def test_list_type_resolves_through_item_type(self):
        class CounterList(ListResource[Counter]):
            pass

        assert resolve(ListResource[Counter]) is COUNTER_IDENTITY
        assert resolve(CounterList) is COUNTER_IDENTITY

    def test_reregistering_identical_identity_is_noop(self):
        first = binding(Counter)
        again = register(
            Counter,
            ResourceIdentity(
                api_group=COUNTER_IDENTITY.api_group,
                version=COUNTER_IDENTITY.version,
                kind=COUNTER_IDENTITY.kind,
                short_names=COUNTER_IDENTITY.short_names,
                subresources=COUNTER_IDENTITY.subresources,
            ),
        )

        assert again is first

    def test_rebinding_to_different_identity_fails_fast(self):
        with pytest.raises(BindingConflictError):
            register(Counter, ResourceIdentity(api_group="other.io", version="v1", kind="Counter"))

        assert resolve(Counter) is COUNTER_IDENTITY

    def test_rebinding_with_same_gvk_but_different_names_fails(self):
        with pytest.raises(BindingConflictError):
            register(ConfigMap, ResourceIdentity(api_group="", version="v1", kind="ConfigMap", plural="cms"))

    def test_decorator_uses_class_name_as_kind(self):
        @resource(group="decor.keel.io", version="v1", short_names=["dw"])
        class DecoratedWidget(ObjectResource):
            pass

        identity = resolve(DecoratedWidget)
        assert identity.kind == "DecoratedWidget"
        assert identity.plural == "decoratedwidgets"
        assert identity.short_names == ("dw",)
