import gc
import weakref

from promkit.builder import build_counter
from promkit.collector import collect_metrics
from promkit.registry import Registry


def _registry_with_counter(name):
    registry = Registry()
    build_counter().name(name).register(registry).add({}).increment()
    return registry


def test_empty_input():
    assert collect_metrics([]) == []


def test_collects_in_order():
    first = _registry_with_counter("first_total")
    second = _registry_with_counter("second_total")
    families = collect_metrics([first, second])
    assert [f.name for f in families] == ["first_total", "second_total"]


def test_accepts_weak_references():
    registry = _registry_with_counter("first_total")
    families = collect_metrics([weakref.ref(registry)])
    assert [f.name for f in families] == ["first_total"]
    assert families[0].metrics[0].value == 1.0


def test_skips_expired_references():
    kept = _registry_with_counter("first_total")
    disappearing = _registry_with_counter("second_total")
    refs = [weakref.ref(kept), weakref.ref(disappearing)]
    del disappearing
    gc.collect()
    families = collect_metrics(refs)
    assert [f.name for f in families] == ["first_total"]


def test_empty_registry_contributes_nothing():
    empty = Registry()
    build_counter().name("unused_total").register(empty)
    filled = _registry_with_counter("used_total")
    assert [f.name for f in collect_metrics([empty, filled])] == ["used_total"]


def test_result_matches_individual_collects():
    first = _registry_with_counter("a_total")
    second = _registry_with_counter("b_total")
    assert collect_metrics([first, second]) == first.collect() + second.collect()