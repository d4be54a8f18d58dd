"""Tests for named capabilities and pipeline specs."""

import pytest

from rosterpipe.criteria import register_builtins, selective_service
from rosterpipe.pipeline import discard, identity
from rosterpipe.pipeline.registry import (
    CapabilityRegistry,
    PipelineSpec,
    create_pipeline_spec,
    get_registry,
    resolve_capability,
    selector,
    sink,
    transform,
)


@pytest.fixture(autouse=True)
def cleanup():
    """Reset the global registry to the built-ins between tests."""
    yield
    get_registry().clear()
    register_builtins()


@pytest.fixture
def registry():
    """Create an isolated registry with one capability per role."""
    reg = CapabilityRegistry()
    reg.register("selector", "even", lambda n: n % 2 == 0)
    reg.register("transform", "square", lambda n: n * n)
    return reg


class TestCapabilityRegistry:
    """Test an isolated registry."""

    def test_get_registered(self, registry):
        assert registry.get("selector", "even")(4) is True
        assert ("transform", "square") in registry
        assert ("sink", "square") not in registry

    def test_unknown_name_lists_known(self, registry):
        with pytest.raises(KeyError, match="known: even"):
            registry.get("selector", "odd")

    def test_unknown_role(self, registry):
        with pytest.raises(ValueError, match="Unknown capability role"):
            registry.register("mapper", "x", identity)

    def test_names_and_clear(self, registry):
        registry.register("selector", "all", lambda n: True)
        assert registry.names("selector") == ["all", "even"]

        registry.clear()
        assert registry.names("selector") == []


class TestDecorators:
    """Test decorators register into the global registry."""

    def test_decorators_register_and_return_function(self):
        @selector("test_registry_positive")
        def positive(n):
            return n > 0

        @transform()
        def test_registry_negate(n):
            return -n

        @sink("test_registry_ignore")
        def ignore(value):
            return None

        reg = get_registry()
        assert positive(1) is True
        assert reg.get("selector", "test_registry_positive") is positive
        assert reg.get("transform", "test_registry_negate") is test_registry_negate
        assert reg.get("sink", "test_registry_ignore") is ignore

    def test_builtin_criteria_registered(self):
        """Test the roster capabilities are registered under their names."""
        reg = get_registry()
        assert "selective_service" in reg.names("selector")
        assert {"email", "name", "age"} <= set(reg.names("transform"))
        assert {"print_person", "print_value"} <= set(reg.names("sink"))

    def test_register_builtins_after_clear(self):
        reg = get_registry()
        reg.clear()
        assert "selective_service" not in reg.names("selector")

        register_builtins()

        assert reg.get("selector", "selective_service") is selective_service
        assert {"print_person", "print_value"} <= set(reg.names("sink"))

    def test_register_builtins_into_registry(self):
        reg = CapabilityRegistry()

        register_builtins(reg)

        assert reg.names("transform") == ["age", "email", "name"]
        assert ("selector", "selective_service") in reg


class TestPipelineSpec:
    """Test name-based identity and running a spec."""

    def test_defaults(self):
        spec = PipelineSpec(name="all", selector=lambda n: True)
        assert spec.transform is identity
        assert spec.sink is discard

    def test_equality_by_name(self):
        a = PipelineSpec(name="p", selector=lambda n: True)
        b = PipelineSpec(name="p", selector=lambda n: False)
        assert a == b
        assert len({a, b}) == 1

    def test_run(self):
        out = []
        spec = PipelineSpec(name="odd", selector=lambda n: n % 2, transform=str, sink=out.append)

        spec.run(range(5))

        assert out == ["1", "3"]


class TestCreatePipelineSpec:
    """Test building specs from names, callables and objects."""

    def test_resolves_names(self, registry):
        out = []
        spec = create_pipeline_spec(
            "squares",
            selector="even",
            transform="square",
            sink=out.append,
            registry=registry,
        )

        spec.run(range(5))

        assert out == [0, 4, 16]

    def test_resolves_single_method_objects(self):
        class Big:
            def test(self, n):
                return n > 10

        spec = create_pipeline_spec("big", selector=Big())
        assert spec.selector(11) is True
        assert spec.sink is discard

    def test_unknown_name(self, registry):
        with pytest.raises(KeyError):
            create_pipeline_spec("x", selector="missing", registry=registry)

    def test_resolve_capability_rejects_wrong_shape(self):
        with pytest.raises(TypeError, match="sink"):
            resolve_capability("sink", 3)
