"""Point filters: conditions on attributes that decide which points to drop."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable

from .schema import AttributeAccessor, Point, map_attribute

_NUMBER = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)

# Searched in this order: the first one found in the expression wins.
_OPERATORS = ("%between%", "%in%", "%out%", "==", "!=", ">=", "<=", ">", "<")


def _to_double(text: str) -> float:
    """Parse the number at the start of ``text``; raise ValueError when there is none."""
    match = _NUMBER.match(text)
    if match is None:
        raise ValueError(f"Invalid number: '{text}'")
    return float(match.group(0))


def _split_values(text: str) -> list[float]:
    return [_to_double(token.strip(" \t")) for token in text.split(" ")]


class Condition(AttributeAccessor, ABC):
    """A test on one point; :meth:`filter` returns True when the point must be dropped."""

    @abstractmethod
    def filter(self, point: Point) -> bool:
        """Return True if ``point`` is filtered out."""


class _Threshold(Condition):
    def __init__(self, attribute_name: str, threshold: float) -> None:
        super().__init__(attribute_name)
        self.threshold = threshold


class KeepBelow(_Threshold):
    """Keep points whose attribute is strictly below the threshold."""

    def filter(self, point: Point) -> bool:
        return self.read(point) >= self.threshold


class KeepBelowEqual(_Threshold):
    """Keep points whose attribute is below or equal to the threshold."""

    def filter(self, point: Point) -> bool:
        return self.read(point) > self.threshold


class KeepAbove(_Threshold):
    """Keep points whose attribute is strictly above the threshold."""

    def filter(self, point: Point) -> bool:
        return self.read(point) <= self.threshold


class KeepAboveEqual(_Threshold):
    """Keep points whose attribute is above or equal to the threshold."""

    def filter(self, point: Point) -> bool:
        return self.read(point) < self.threshold


class KeepBetween(Condition):
    """Keep points whose attribute lies in [low, high); the bounds may come in any order."""

    def __init__(self, attribute_name: str, below: float, above: float) -> None:
        super().__init__(attribute_name)
        self.below, self.above = (above, below) if below > above else (below, above)

    def filter(self, point: Point) -> bool:
        value = self.read(point)
        return value < self.below or value >= self.above


class KeepEqual(Condition):
    """Keep points whose attribute equals the value."""

    def __init__(self, attribute_name: str, value: float) -> None:
        super().__init__(attribute_name)
        self.value = value

    def filter(self, point: Point) -> bool:
        return self.read(point) != self.value


class KeepDifferent(Condition):
    """Keep points whose attribute differs from the value."""

    def __init__(self, attribute_name: str, value: float) -> None:
        super().__init__(attribute_name)
        self.value = value

    def filter(self, point: Point) -> bool:
        return self.read(point) == self.value


class KeepIn(Condition):
    """Keep points whose attribute is one of the values."""

    def __init__(self, attribute_name: str, values: Iterable[float]) -> None:
        super().__init__(attribute_name)
        self.values = list(values)

    def filter(self, point: Point) -> bool:
        return self.read(point) not in self.values


class KeepOut(Condition):
    """Keep points whose attribute is none of the values."""

    def __init__(self, attribute_name: str, values: Iterable[float]) -> None:
        super().__init__(attribute_name)
        self.values = list(values)

    def filter(self, point: Point) -> bool:
        return self.read(point) in self.values


class KeepInside(Condition):
    """Keep points inside a bounding box, or inside the circle inscribed in it."""

    def __init__(
        self, xmin: float, ymin: float, xmax: float, ymax: float, circle: bool = False
    ) -> None:
        super().__init__("")
        self.xmin = xmin
        self.ymin = ymin
        self.xmax = xmax
        self.ymax = ymax
        self.circle = circle

    def filter(self, point: Point) -> bool:
        return point.outside_clip(self.xmin, self.ymin, self.xmax, self.ymax, self.circle)


def parse_condition(text: str) -> Condition | None:
    """Build a condition from an expression such as ``"Classification %in% 2 9"``.

    An empty expression, or one starting with '-', yields None. A missing
    operator or a malformed value raises ValueError.
    """
    if not text or text[0] == "-":
        return None

    position, operator = next(
        ((text.find(op), op) for op in _OPERATORS if op in text), (-1, "")
    )
    if not operator:
        raise ValueError("Invalid condition: no operator found")

    lhs = map_attribute(text[:position].strip(" \t"))
    rhs = text[position + len(operator):].strip(" \t")

    if operator == "==":
        return KeepEqual(lhs, _to_double(rhs))
    if operator == "!=":
        return KeepDifferent(lhs, _to_double(rhs))
    if operator == ">":
        return KeepAbove(lhs, _to_double(rhs))
    if operator == "<":
        return KeepBelow(lhs, _to_double(rhs))
    if operator == ">=":
        return KeepAboveEqual(lhs, _to_double(rhs))
    if operator == "<=":
        return KeepBelowEqual(lhs, _to_double(rhs))
    if operator == "%in%":
        return KeepIn(lhs, _split_values(rhs))
    if operator == "%out%":
        return KeepOut(lhs, _split_values(rhs))
    tokens = rhs.split(" ")
    if len(tokens) != 2:
        raise ValueError("Invalid condition: %between% must have two values")
    low, high = (_to_double(token.strip(" \t")) for token in tokens)
    return KeepBetween(lhs, low, high)


class PointFilter:
    """A set of conditions; a point is filtered out as soon as one condition drops it."""

    def __init__(self) -> None:
        self.conditions: list[Condition] = []

    def __len__(self) -> int:
        return len(self.conditions)

    def filter(self, point: Point) -> bool:
        """Return True if any condition drops ``point``."""
        return any(condition.filter(point) for condition in self.conditions)

    def add_condition(self, condition: Condition | None) -> None:
        """Add a condition; None is ignored."""
        if condition is not None:
            self.conditions.append(condition)

    def add_expression(self, text: str) -> None:
        """Parse an expression and add the resulting condition."""
        self.add_condition(parse_condition(text))

    def add_clip(
        self, xmin: float, ymin: float, xmax: float, ymax: float, circle: bool = False
    ) -> None:
        self.add_condition(KeepInside(xmin, ymin, xmax, ymax, circle))

    def reset(self) -> None:
        """Let every condition resolve its attribute again on the next point."""
        for condition in self.conditions:
            condition.reset()