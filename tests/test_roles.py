"""Tests for the role catalog."""

from line_rehearser.models import ScriptLine
from line_rehearser.roles import list_roles, role_line_counts


def test_roles_in_first_appearance_order(scene):
    assert list_roles(scene) == ["TOM", "JANE", "SAM"]


def test_roles_are_distinct():
    script = [ScriptLine("B", "one", 0), ScriptLine("A", "two", 1), ScriptLine("B", "three", 2)]
    assert list_roles(script) == ["B", "A"]


def test_roles_empty_script():
    assert list_roles([]) == []


def test_role_line_counts(scene):
    assert role_line_counts(scene) == {"TOM": 2, "JANE": 2, "SAM": 1}
