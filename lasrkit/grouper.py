"""Group consecutive point indices by an integer key."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass
class Interval:
    """An inclusive range of point indices."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start + 1


class Grouper:
    """Records, for each key, the runs of point indices that were inserted with it."""

    def __init__(self) -> None:
        self.npoints = 0
        self.groups: dict[int, list[Interval]] = {}

    def _add(self, key: int, index: int) -> None:
        ranges = self.groups.setdefault(key, [])
        if ranges and ranges[-1].end == index - 1:
            ranges[-1].end = index
        else:
            ranges.append(Interval(index, index))

    def insert(self, key: int) -> None:
        """Register the next point under ``key``."""
        self._add(key, self.npoints)
        self.npoints += 1

    def insert_many(self, keys: Iterable[int]) -> None:
        """Register the next point under every key of ``keys``."""
        index = self.npoints
        for key in keys:
            self._add(key, index)
        self.npoints += 1

    def largest_group_size(self) -> int:
        """Return the number of points in the most populated group."""
        return max((sum(len(interval) for interval in ranges) for ranges in self.groups.values()), default=0)

    def clear(self) -> None:
        self.groups.clear()
        self.npoints = 0