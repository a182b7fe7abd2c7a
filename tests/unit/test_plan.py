"""Tests for execution plan resolution."""

from hdata_conformance.plan import ExecutionPlan
from hdata_conformance.registry import Registry
from hdata_conformance.testing.stubs import StubUnit, stub_unit


def chain() -> tuple[StubUnit, StubUnit, StubUnit]:
    """T1 <- T2 <- T3, with T2 asking T1 to retain its response."""
    t1 = stub_unit("1.0.1")
    t2 = stub_unit("1.0.2", depends_on=["1.0.1"])
    t2.request_property("1.0.1", "retain", True)
    t3 = stub_unit("1.0.3", depends_on=["1.0.2"])
    return t1, t2, t3


def assert_topological(plan: ExecutionPlan) -> None:
    ids = plan.ids
    assert len(ids) == len(set(ids))
    for index, unit in enumerate(plan.units):
        for dep in unit.dependencies:
            assert ids.index(dep.id) < index


class TestOrdering:
    """Tests for the order of the resolved plan."""

    def test_independent_units_keep_submission_order(self) -> None:
        """Units without dependencies are appended as submitted."""
        units = [stub_unit("1.0.2"), stub_unit("1.0.1")]
        registry = Registry(units)

        plan = ExecutionPlan.resolve(registry, units)

        assert plan.ids == ["1.0.2", "1.0.1"]

    def test_forward_order(self) -> None:
        """A chain submitted prerequisites first is kept in order."""
        t1, t2, t3 = chain()
        registry = Registry([t1, t2, t3])

        plan = ExecutionPlan.resolve(registry, [t1, t2, t3])

        assert list(plan) == [t1, t2, t3]

    def test_reverse_order(self) -> None:
        """A chain submitted dependents first resolves to the same order."""
        t1, t2, t3 = chain()
        registry = Registry([t1, t2, t3])

        plan = ExecutionPlan.resolve(registry, [t3, t2, t1])

        assert list(plan) == [t1, t2, t3]

    def test_prerequisites_pulled_in_transitively(self) -> None:
        """Requesting only the last unit of a chain adds its prerequisites."""
        t1, t2, t3 = chain()
        registry = Registry([t1, t2, t3])

        plan = ExecutionPlan.resolve(registry, [t3])

        assert list(plan) == [t1, t2, t3]

    def test_diamond(self) -> None:
        """A shared prerequisite appears once, before both of its dependents."""
        a = stub_unit("A")
        b = stub_unit("B", depends_on=["A"])
        c = stub_unit("C", depends_on=["A"])
        d = stub_unit("D", depends_on=["B", "C"])
        registry = Registry([a, b, c, d])

        plan = ExecutionPlan.resolve(registry, [d])

        assert plan.ids == ["A", "B", "C", "D"]
        assert_topological(plan)

    def test_multiple_dependencies_any_submission_order(self) -> None:
        """A unit with several prerequisites is placed after all of them."""
        t1 = stub_unit("1.0.1")
        t2 = stub_unit("1.0.2", depends_on=["1.0.1"])
        t3 = stub_unit("1.0.3", depends_on=["1.0.2"])
        t4 = stub_unit("1.0.4", depends_on=["1.0.2", "1.0.3"])
        registry = Registry([t1, t2, t3, t4])

        forward = ExecutionPlan.resolve(registry, [t1, t2, t3, t4])

        assert list(forward) == [t1, t2, t3, t4]
        assert_topological(forward)

    def test_multiple_dependencies_reverse_submission(self) -> None:
        """Reverse submission of a multi-dependency graph is still ordered."""
        t1 = stub_unit("1.0.1")
        t2 = stub_unit("1.0.2", depends_on=["1.0.1"])
        t3 = stub_unit("1.0.3", depends_on=["1.0.2"])
        t4 = stub_unit("1.0.4", depends_on=["1.0.3", "1.0.2"])
        registry = Registry([t1, t2, t3, t4])

        plan = ExecutionPlan.resolve(registry, [t4, t3, t2, t1])

        assert list(plan) == [t1, t2, t3, t4]

    def test_requested_twice_is_resolved_once(self) -> None:
        """Duplicates in the request collapse into one entry."""
        t1, t2, _ = chain()
        registry = Registry([t1, t2])

        plan = ExecutionPlan.resolve(registry, [t2, t1, t2])

        assert list(plan) == [t1, t2]


class TestWiring:
    """Tests for dependency back-references and deferred properties."""

    def test_wires_resolved_dependencies(self) -> None:
        """Each unit references exactly its resolved prerequisites."""
        t1, t2, t3 = chain()
        registry = Registry([t1, t2, t3])

        ExecutionPlan.resolve(registry, [t1, t2, t3])

        assert t1.dependencies == []
        assert t2.dependencies == [t1]
        assert t3.dependencies == [t2]
        assert t2.get_dependency("1.0.1") is t1
        assert t2.get_dependency("1.0.3") is None

    def test_applies_deferred_property(self) -> None:
        """A requested property is set on the prerequisite."""
        t1, t2, _ = chain()
        registry = Registry([t1, t2])

        ExecutionPlan.resolve(registry, [t2])

        assert t1.options.retain is True
        assert t2.options.retain is False

    def test_applies_properties_on_each_dependency(self) -> None:
        """Properties on several prerequisites are applied by target id."""
        t1 = stub_unit("1.0.1")
        t2 = stub_unit("1.0.2")
        t3 = stub_unit("1.0.3", depends_on=["1.0.1", "1.0.2"])
        t3.request_property("1.0.1", "keep_state", True)
        t3.request_property("1.0.2", "retain", True)
        registry = Registry([t1, t2, t3])

        plan = ExecutionPlan.resolve(registry, [t3])

        assert list(plan) == [t1, t2, t3]
        assert t1.options.keep_state is True
        assert t1.options.retain is False
        assert t2.options.retain is True
        assert t2.options.keep_state is False

    def test_shared_prerequisite_side_effects_applied_once(self) -> None:
        """A prerequisite of several dependents is resolved only once."""
        a = stub_unit("A")
        b = stub_unit("B", depends_on=["A"])
        b.request_property("A", "retain", True)
        c = stub_unit("C", depends_on=["A"])
        c.request_property("A", "keep_state", True)
        registry = Registry([a, b, c])

        plan = ExecutionPlan.resolve(registry, [b, c, a])

        assert plan.ids == ["A", "B", "C"]
        assert a.options.retain is True
        assert a.options.keep_state is True


class TestRejection:
    """Tests for units that cannot be placed in the plan."""

    def test_self_dependency_skipped(self) -> None:
        """A unit depending on itself is skipped without recursing."""
        unit = stub_unit("1.0.9", depends_on=["1.0.9"])
        registry = Registry()

        plan = ExecutionPlan.resolve(registry, [unit])

        assert len(plan) == 0
        assert unit.status == "skipped"
        assert unit.reason is not None
        assert "cannot depend on itself" in unit.reason

    def test_missing_dependency_skipped(self) -> None:
        """A unit whose prerequisite is not registered is skipped."""
        t1 = stub_unit("1.0.1")
        t8 = stub_unit("1.0.8", depends_on=["1.0.7"])
        registry = Registry([t1, t8])

        plan = ExecutionPlan.resolve(registry, [t8, t1])

        assert list(plan) == [t1]
        assert t8.status == "skipped"
        assert t8.reason == "Dependency test 1.0.7 not loaded"
        assert t1.status is None

    def test_failed_dependency_propagates(self) -> None:
        """A dependent of a rejected unit is rejected too, naming it."""
        t8 = stub_unit("1.0.8", depends_on=["1.0.7"])
        t10 = stub_unit("1.0.10", depends_on=["1.0.8"])
        registry = Registry([t8, t10])

        plan = ExecutionPlan.resolve(registry, [t10])

        assert len(plan) == 0
        assert t8.status == "skipped"
        assert t10.status == "skipped"
        assert t10.reason == "Failed to add dependency test 1.0.8"

    def test_unknown_property_key_skips_requesting_unit(self) -> None:
        """A property the target does not accept skips the requester only."""
        t1 = stub_unit("1.0.1")
        t5 = stub_unit("1.0.5", depends_on=["1.0.1"])
        t5.request_property("1.0.1", "nonexistent", True)
        registry = Registry([t1, t5])

        plan = ExecutionPlan.resolve(registry, [t5, t1])

        assert list(plan) == [t1]
        assert t5.status == "skipped"
        assert t5.reason is not None
        assert "Failed to set property on dependent test 1.0.1" in t5.reason
        assert t1.status is None

    def test_bad_property_value_skips_requesting_unit(self) -> None:
        """A value of the wrong type is rejected by the target's options."""
        t1 = stub_unit("1.0.1")
        t5 = stub_unit("1.0.5", depends_on=["1.0.1"])
        t5.request_property("1.0.1", "retain", "yes")
        registry = Registry([t1, t5])

        plan = ExecutionPlan.resolve(registry, [t5])

        assert list(plan) == [t1]
        assert t5.status == "skipped"
        assert t1.options.retain is False

    def test_property_on_non_dependency_skipped(self) -> None:
        """A property aimed at an undeclared dependency leaves the target alone."""
        t1 = stub_unit("1.0.1")
        t2 = stub_unit("1.0.2")
        t6 = stub_unit("1.0.6", depends_on=["1.0.1"])
        t6.request_property("1.0.2", "retain", True)
        registry = Registry([t1, t2, t6])

        plan = ExecutionPlan.resolve(registry, [t6, t1, t2])

        assert list(plan) == [t1, t2]
        assert t6.status == "skipped"
        assert t6.reason == "Cannot set property retain on non-dependent test 1.0.2"
        assert t2.options.retain is False
        assert t2.status is None
        assert t6.dependencies == []

    def test_cycle_rejected(self) -> None:
        """Units forming a cycle are skipped instead of recursing forever."""
        a = stub_unit("A", depends_on=["B"])
        b = stub_unit("B", depends_on=["A"])
        c = stub_unit("C")
        registry = Registry([a, b, c])

        plan = ExecutionPlan.resolve(registry, [a, c])

        assert list(plan) == [c]
        assert a.status == "skipped"
        assert b.status == "skipped"
        assert b.reason == "Dependency cycle between test B and A"

    def test_rejection_does_not_affect_siblings(self) -> None:
        """Siblings of a rejected unit are still resolved."""
        t1, t2, t3 = chain()
        t8 = stub_unit("1.0.8", depends_on=["1.0.7"])
        registry = Registry([t1, t2, t3, t8])

        plan = ExecutionPlan.resolve(registry, [t1, t8, t2, t3])

        assert list(plan) == [t1, t2, t3]
        assert t8.status == "skipped"

    def test_rejected_property_leaves_every_target_unmodified(self) -> None:
        """Valid requests are not applied when another request of the unit fails."""
        t1 = stub_unit("1.0.1")
        t2 = stub_unit("1.0.2")
        t3 = stub_unit("1.0.3", depends_on=["1.0.1", "1.0.2"])
        t3.request_property("1.0.1", "retain", True)
        t3.request_property("1.0.2", "bogus", True)
        registry = Registry([t1, t2, t3])

        plan = ExecutionPlan.resolve(registry, [t3])

        assert plan.ids == ["1.0.1", "1.0.2"]
        assert t3.status == "skipped"
        assert t1.options.retain is False
        assert t2.options.retain is False

    def test_rejected_second_property_on_same_target(self) -> None:
        """Several requests on one target are validated together."""
        t1 = stub_unit("1.0.1")
        t2 = stub_unit("1.0.2", depends_on=["1.0.1"])
        t2.request_property("1.0.1", "keep_state", True)
        t2.request_property("1.0.1", "retain", 1)
        registry = Registry([t1, t2])

        ExecutionPlan.resolve(registry, [t2])

        assert t2.status == "skipped"
        assert t1.options.keep_state is False
        assert t1.options.retain is False

    def test_rejected_units_exposed(self) -> None:
        """Prerequisites rejected on the way are listed too."""
        t8 = stub_unit("1.0.8", depends_on=["1.0.7"])
        t10 = stub_unit("1.0.10", depends_on=["1.0.8"])
        t1 = stub_unit("1.0.1")
        registry = Registry([t1, t8, t10])

        plan = ExecutionPlan.resolve(registry, [t10, t1])

        assert list(plan) == [t1]
        assert list(plan.rejected) == [t8, t10]
