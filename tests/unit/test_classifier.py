"""
Unit tests for the test-worthiness classifier.
"""
import pytest

from unitforge.core.classifier import needs_test
from unitforge.support.models import Component, ComponentKind


def make_component(kind, complexity=1, lines=1):
    return Component(
        name="thing",
        kind=kind,
        start_line=1,
        end_line=lines,
        source_text="\n".join(["x"] * lines),
        complexity=complexity,
    )


@pytest.mark.parametrize("kind", [ComponentKind.FUNCTION, ComponentKind.CLASS])
def test_functions_and_classes_always_need_tests(kind):
    assert needs_test(make_component(kind, complexity=1, lines=1))


def test_method_above_complexity_threshold():
    assert needs_test(make_component(ComponentKind.METHOD, complexity=3, lines=4))


def test_simple_short_method_skipped():
    assert not needs_test(make_component(ComponentKind.METHOD, complexity=2, lines=10))


def test_long_method_needs_test():
    assert needs_test(make_component(ComponentKind.METHOD, complexity=1, lines=16))


def test_fifteen_lines_is_not_long():
    assert not needs_test(make_component(ComponentKind.METHOD, complexity=1, lines=15))


def test_short_interface_skipped():
    assert not needs_test(make_component(ComponentKind.INTERFACE, lines=5))


def test_long_interface_needs_test():
    assert needs_test(make_component(ComponentKind.INTERFACE, lines=20))


def test_complexity_does_not_count_for_interfaces():
    assert not needs_test(make_component(ComponentKind.INTERFACE, complexity=9, lines=3))


def test_empty_source_other_kind():
    component = make_component(ComponentKind.OTHER)
    component.source_text = ""
    assert component.line_count == 0
    assert not needs_test(component)
