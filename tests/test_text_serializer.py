import io

import pytest

from promkit.builder import build_counter, build_gauge, build_histogram, build_info, build_summary
from promkit.model import Bucket, ClientMetric, HistogramData, LabelPair, MetricFamily
from promkit.names import MetricType
from promkit.registry import Registry
from promkit.text_serializer import Serializer, TextSerializer


def _render(registry):
    return TextSerializer().serialize(registry.collect())


def _lines(text):
    return text.splitlines()


def test_counter_full_output():
    registry = Registry()
    family = build_counter().name("example_total").help("Help text").register(registry)
    family.add({"a": "b"}).increment(2)
    assert _render(registry) == (
        "# HELP example_total Help text\n"
        "# TYPE example_total counter\n"
        'example_total{a="b"} 2\n'
    )


def test_no_help_line_when_help_empty():
    registry = Registry()
    build_gauge().name("g").register(registry).add({}).set(3)
    lines = _lines(_render(registry))
    assert not any(line.startswith("# HELP") for line in lines)
    assert lines == ["# TYPE g gauge", "g 3"]


@pytest.mark.parametrize(
    "value, text",
    [(float("nan"), "Nan"), (float("inf"), "+Inf"), (float("-inf"), "-Inf")],
)
def test_special_values(value, text):
    registry = Registry()
    build_gauge().name("g").register(registry).add({}).set(value)
    assert _lines(_render(registry))[-1] == "g " + text


def test_label_value_escaping():
    registry = Registry()
    family = build_counter().name("c").register(registry)
    family.add({"l": 'a"b\\c\nd'})
    text = _render(registry)
    assert 'c{l="a\\"b\\\\c\\nd"} 0\n' in text


def test_histogram_lines():
    registry = Registry()
    family = build_histogram().name("h").register(registry)
    histogram = family.add({}, [1, 2])
    for value in (0.5, 1.5, 3):
        histogram.observe(value)
    lines = _lines(_render(registry))
    assert lines[0] == "# TYPE h histogram"
    assert "h_count 3" in lines
    assert "h_sum 5" in lines
    assert 'h_bucket{le="1"} 1' in lines
    assert 'h_bucket{le="2"} 2' in lines
    assert [line for line in lines if 'le="+Inf"' in line] == ['h_bucket{le="+Inf"} 3']


def test_histogram_without_infinite_bucket_gets_one():
    metric = ClientMetric(
        histogram=HistogramData(
            sample_count=4, sample_sum=1.0, buckets=[Bucket(2, 1.0)]
        )
    )
    family = MetricFamily("h", "", MetricType.HISTOGRAM, [metric])
    lines = _lines(TextSerializer().serialize([family]))
    assert lines[-1] == 'h_bucket{le="+Inf"} 4'


def test_summary_quantile_labels():
    registry = Registry()
    family = build_summary().name("s").register(registry)
    summary = family.add({"k": "v"}, [(0.5, 0.05)])
    summary.observe(7)
    lines = _lines(_render(registry))
    assert lines[0] == "# TYPE s summary"
    assert 's_count{k="v"} 1' in lines
    assert 's_sum{k="v"} 7' in lines
    assert 's{k="v",quantile="0.5"} 7' in lines


def test_info_is_exposed_as_gauge():
    registry = Registry()
    build_info().name("versions").register(registry).add({"prometheus": "1.0"})
    lines = _lines(_render(registry))
    assert lines == ["# TYPE versions gauge", 'versions_info{prometheus="1.0"} 1']


def test_untyped_and_timestamp():
    metric = ClientMetric(labels=[LabelPair("x", "y")], value=1.5, timestamp_ms=1000)
    family = MetricFamily("u", "", MetricType.UNTYPED, [metric])
    lines = _lines(TextSerializer().serialize([family]))
    assert lines == ["# TYPE u untyped", 'u{x="y"} 1.5 1000']


def test_write_matches_serialize():
    registry = Registry()
    build_counter().name("c_total").help("h").register(registry).add({}).increment()
    collected = registry.collect()
    out = io.StringIO()
    TextSerializer().write(out, collected)
    assert out.getvalue() == TextSerializer().serialize(collected)


def test_empty_input_renders_nothing():
    assert TextSerializer().serialize([]) == ""


def test_serializer_is_abstract():
    with pytest.raises(TypeError):
        Serializer()