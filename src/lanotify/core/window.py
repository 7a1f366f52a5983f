from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from itertools import islice


class SampleWindow:
    """Bounded history of "seen this round" samples, newest first.

    Once ``capacity`` samples are stored every push evicts the oldest one.
    """

    def __init__(self, capacity: int, samples: Iterable[bool] = ()) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._samples: deque[bool] = deque(maxlen=capacity)
        # ``samples`` is newest first, like the window itself
        for sample in reversed(list(samples)):
            self.push(sample)

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, sample: bool) -> None:
        # appendleft on a full deque drops the element at the right end
        self._samples.appendleft(bool(sample))

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[bool]:
        return iter(self._samples)

    def __repr__(self) -> str:
        return f"SampleWindow(capacity={self._capacity}, samples={list(self._samples)!r})"

    def is_full(self) -> bool:
        return len(self._samples) == self._capacity

    def base_rate(self) -> float:
        if not self._samples:
            raise ValueError("base rate of an empty window is undefined")
        return sum(self._samples) / len(self._samples)

    def recent_rate(self, k: int) -> float:
        if not 0 < k <= len(self._samples):
            raise ValueError(f"recent window {k} outside 1..{len(self._samples)}")
        return sum(islice(self._samples, k)) / k

    def index_of_last_true(self) -> int:
        """Rounds since the device was last seen, ``capacity`` if never."""
        for index, sample in enumerate(self._samples):
            if sample:
                return index
        return self._capacity

    def render(self) -> str:
        return "".join("O" if sample else "-" for sample in reversed(self._samples))
