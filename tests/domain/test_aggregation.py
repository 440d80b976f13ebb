from __future__ import annotations

from itertools import permutations

from nodedns.domain.aggregation import address_sources, aggregate_addresses, collect_addresses
from nodedns.domain.model import AddressType, NodeSnapshot, SelectionPolicy
from tests.helpers.nodes import make_node


def test_aggregate_collects_external_addresses_of_ready_nodes() -> None:
    nodes = [
        make_node("a", external=["5.6.7.8"], internal=["10.0.0.1"]),
        make_node("b", external=["1.2.3.4"], internal=["10.0.0.2"]),
    ]

    assert aggregate_addresses(nodes, SelectionPolicy()) == ("1.2.3.4", "5.6.7.8")


def test_aggregate_is_independent_of_node_order() -> None:
    nodes = [
        make_node("a", external=["9.9.9.9", "1.1.1.1"]),
        make_node("b", external=["5.5.5.5"]),
        make_node("c", external=["1.1.1.1"]),
    ]

    results = {aggregate_addresses(order, SelectionPolicy()) for order in permutations(nodes)}

    assert results == {("1.1.1.1", "5.5.5.5", "9.9.9.9")}


def test_aggregate_deduplicates_and_sorts_lexicographically() -> None:
    nodes = [
        make_node("a", external=["10.0.0.9", "10.0.0.10"]),
        make_node("b", external=["10.0.0.9"]),
    ]

    assert aggregate_addresses(nodes, SelectionPolicy()) == ("10.0.0.10", "10.0.0.9")


def test_nodes_that_are_not_ready_contribute_nothing() -> None:
    nodes = [
        make_node("ready", external=["1.2.3.4"]),
        make_node("not-ready", ready=False, external=["5.6.7.8"], internal=["10.0.0.1"]),
        NodeSnapshot(name="no-condition"),
    ]

    policy = SelectionPolicy(use_internal=True)

    assert aggregate_addresses(nodes, policy) == ("1.2.3.4",)


def test_internal_addresses_are_ignored_when_any_external_address_exists() -> None:
    nodes = [
        make_node("a", external=["1.2.3.4"], internal=["10.0.0.1"]),
        make_node("b", internal=["10.0.0.2"]),
    ]

    policy = SelectionPolicy(use_internal=True)

    assert aggregate_addresses(nodes, policy) == ("1.2.3.4",)


def test_internal_addresses_are_used_when_no_external_address_exists() -> None:
    nodes = [
        make_node("a", internal=["10.0.0.2"]),
        make_node("b", internal=["10.0.0.1"]),
        make_node("c", ready=False, external=["1.2.3.4"]),
    ]

    policy = SelectionPolicy(use_internal=True)

    assert aggregate_addresses(nodes, policy) == ("10.0.0.1", "10.0.0.2")


def test_skip_external_without_internal_yields_nothing() -> None:
    nodes = [make_node("a", external=["1.2.3.4"], internal=["10.0.0.1"])]

    policy = SelectionPolicy(skip_external=True)

    assert aggregate_addresses(nodes, policy) == ()


def test_skip_external_with_internal_uses_internal_addresses_only() -> None:
    nodes = [make_node("a", external=["1.2.3.4"], internal=["10.0.0.1"])]

    policy = SelectionPolicy(skip_external=True, use_internal=True)

    assert aggregate_addresses(nodes, policy) == ("10.0.0.1",)


def test_empty_node_set_yields_empty_address_set() -> None:
    assert aggregate_addresses([], SelectionPolicy(use_internal=True)) == ()


def test_address_sources_are_ordered_by_priority() -> None:
    assert address_sources(SelectionPolicy()) == (AddressType.EXTERNAL_IP,)
    assert address_sources(SelectionPolicy(use_internal=True)) == (
        AddressType.EXTERNAL_IP,
        AddressType.INTERNAL_IP,
    )
    assert address_sources(SelectionPolicy(skip_external=True, use_internal=True)) == (
        AddressType.INTERNAL_IP,
    )
    assert address_sources(SelectionPolicy(skip_external=True)) == ()


def test_collect_addresses_keeps_every_address_of_a_node() -> None:
    node = make_node("a", external=["1.1.1.1", "2.2.2.2"])

    assert collect_addresses([node], AddressType.EXTERNAL_IP) == ["1.1.1.1", "2.2.2.2"]
