from timekeeper.models import DEFAULT_PHASE_LABEL, GroupNode, PhaseNode
from timekeeper.services.sequence import parse_pattern


def test_flat_phases():
    nodes = parse_pattern("25m work, 5m rest")

    assert [type(n) for n in nodes] == [PhaseNode, PhaseNode]
    assert nodes[0].seconds == 1500
    assert nodes[0].label == "work"
    assert nodes[1].duration_text == "5m"


def test_group_multiplier():
    nodes = parse_pattern("(25m work, 5m rest)x4")

    assert len(nodes) == 1
    group = nodes[0]
    assert isinstance(group, GroupNode)
    assert group.multiply == 4
    assert [item.label for item in group.items] == ["work", "rest"]


def test_nested_groups():
    nodes = parse_pattern("((10m a, 2m b)x2, 5m c)x2")

    outer = nodes[0]
    assert outer.multiply == 2
    inner = outer.items[0]
    assert isinstance(inner, GroupNode)
    assert inner.multiply == 2


def test_missing_label_uses_default():
    nodes = parse_pattern("10m")

    assert nodes[0].label == DEFAULT_PHASE_LABEL


def test_commas_are_optional():
    nodes = parse_pattern("10m a 5m b")

    assert [n.label for n in nodes] == ["a", "b"]


def test_unclosed_group_closes_at_end():
    nodes = parse_pattern("(10m a, 5m b")

    assert isinstance(nodes[0], GroupNode)
    assert nodes[0].multiply == 1
    assert len(nodes[0].items) == 2


def test_stray_close_paren_is_skipped():
    nodes = parse_pattern("10m a) 5m b")

    assert [n.label for n in nodes] == ["a", "b"]


def test_stray_label_and_multiplier_are_dropped():
    nodes = parse_pattern("work x3 10m a")

    assert len(nodes) == 1
    assert nodes[0].label == "a"


def test_empty_input():
    assert parse_pattern("") == []
