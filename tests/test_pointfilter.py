import pytest

from lasrkit.pointfilter import (
    KeepAbove,
    KeepBetween,
    KeepIn,
    KeepInside,
    KeepOut,
    PointFilter,
    parse_condition,
)
from lasrkit.schema import AttributeAccessor, AttributeSchema, AttributeType, Point


def make_schema():
    schema = AttributeSchema()
    schema.new_attribute("Flags", AttributeType.UINT8)
    schema.new_attribute("X", AttributeType.INT32, 0.01)
    schema.new_attribute("Y", AttributeType.INT32, 0.01)
    schema.new_attribute("Z", AttributeType.INT32, 0.01)
    schema.new_attribute("Intensity", AttributeType.UINT16)
    return schema


def make_point(x=0.0, y=0.0, z=0.0, intensity=0):
    point = Point(make_schema())
    point.x = x
    point.y = y
    point.z = z
    AttributeAccessor("Intensity").write(point, intensity)
    return point


def test_greater_than():
    condition = parse_condition("Z > 5")
    assert isinstance(condition, KeepAbove)
    assert condition.filter(make_point(z=3)) is True
    assert condition.filter(make_point(z=5)) is True
    assert condition.filter(make_point(z=7)) is False


@pytest.mark.parametrize(
    "expression, z, dropped",
    [
        ("Z < 5", 5, True),
        ("Z < 5", 4, False),
        ("Z <= 5", 5, False),
        ("Z <= 5", 6, True),
        ("Z >= 5", 5, False),
        ("Z >= 5", 4, True),
        ("Z == 5", 5, False),
        ("Z == 5", 4, True),
        ("Z != 5", 5, True),
        ("Z != 5", 4, False),
    ],
)
def test_comparison_operators(expression, z, dropped):
    assert parse_condition(expression).filter(make_point(z=z)) is dropped


def test_in_and_out():
    keep_in = parse_condition("Intensity %in% 1 2 3")
    keep_out = parse_condition("Intensity %out% 1 2 3")
    assert isinstance(keep_in, KeepIn)
    assert isinstance(keep_out, KeepOut)
    assert keep_in.filter(make_point(intensity=2)) is False
    assert keep_in.filter(make_point(intensity=4)) is True
    assert keep_out.filter(make_point(intensity=2)) is True
    assert keep_out.filter(make_point(intensity=4)) is False


def test_alias_is_mapped():
    condition = parse_condition("i > 10")
    assert condition.name == "Intensity"
    assert condition.filter(make_point(intensity=20)) is False
    assert condition.filter(make_point(intensity=5)) is True


def test_between_is_half_open_and_swaps_bounds():
    condition = parse_condition("Z %between% 10 2")
    assert isinstance(condition, KeepBetween)
    assert (condition.below, condition.above) == (2, 10)
    assert condition.filter(make_point(z=2)) is False
    assert condition.filter(make_point(z=10)) is True
    assert condition.filter(make_point(z=1)) is True


def test_between_needs_two_values():
    with pytest.raises(ValueError):
        parse_condition("Z %between% 1")


@pytest.mark.parametrize("expression", ["", "-keep_first"])
def test_empty_or_flag_expression_gives_none(expression):
    assert parse_condition(expression) is None


def test_missing_operator():
    with pytest.raises(ValueError):
        parse_condition("Z 5")


def test_malformed_value():
    with pytest.raises(ValueError):
        parse_condition("Z > abc")


def test_missing_attribute_reads_default():
    condition = parse_condition("Unknown > 1")
    assert condition.filter(make_point()) is True


def test_keep_inside_box_and_circle():
    box = KeepInside(0, 0, 10, 10)
    circle = KeepInside(0, 0, 10, 10, circle=True)
    assert box.filter(make_point(1, 1)) is False
    assert circle.filter(make_point(1, 1)) is True
    assert circle.filter(make_point(5, 5)) is False
    assert box.filter(make_point(11, 5)) is True


def test_point_filter_combines_conditions():
    point_filter = PointFilter()
    point_filter.add_expression("Z > 1")
    point_filter.add_expression("Intensity < 100")
    point_filter.add_condition(None)
    assert len(point_filter) == 2
    assert point_filter.filter(make_point(z=5, intensity=50)) is False
    assert point_filter.filter(make_point(z=0, intensity=50)) is True
    assert point_filter.filter(make_point(z=5, intensity=150)) is True


def test_empty_filter_keeps_everything():
    assert PointFilter().filter(make_point(z=-100)) is False


def test_add_clip():
    point_filter = PointFilter()
    point_filter.add_clip(0, 0, 10, 10)
    assert point_filter.filter(make_point(5, 5)) is False
    assert point_filter.filter(make_point(-1, 5)) is True


def test_reset_resolves_again_against_new_schema():
    point_filter = PointFilter()
    point_filter.add_expression("Intensity > 10")
    assert point_filter.filter(make_point(intensity=20)) is False

    other = AttributeSchema()
    other.new_attribute("Flags", AttributeType.UINT8)
    other.new_attribute("X", AttributeType.INT32)
    other.new_attribute("Y", AttributeType.INT32)
    other.new_attribute("Z", AttributeType.INT32)
    other.new_attribute("Pad", AttributeType.UINT8)
    other.new_attribute("Intensity", AttributeType.UINT16)
    point = Point(other)
    AttributeAccessor("Intensity").write(point, 30)

    point_filter.reset()
    assert point_filter.conditions[0].exists() is False
    assert point_filter.filter(point) is False
    assert point_filter.conditions[0].exists() is True