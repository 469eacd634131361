"""
Test-worthiness policy for extracted components.
"""
from unitforge.support.models import Component, ComponentKind

ALWAYS_TESTED_KINDS = frozenset({ComponentKind.FUNCTION, ComponentKind.CLASS})
METHOD_COMPLEXITY_THRESHOLD = 2
LINE_COUNT_THRESHOLD = 15


def needs_test(component: Component) -> bool:
    """
    Decide whether a component deserves a generated test.

    First match wins: functions and classes always; methods with
    complexity above 2; anything longer than 15 lines.
    """
    if component.kind in ALWAYS_TESTED_KINDS:
        return True

    if (
        component.kind is ComponentKind.METHOD
        and component.complexity > METHOD_COMPLEXITY_THRESHOLD
    ):
        return True

    return component.line_count > LINE_COUNT_THRESHOLD
