"""
Block Timeline - Discrete, addressable blocks of schedulable time.

Quantizes [schedule_start, horizon_end) into fixed-size blocks and tracks
which occupant, if any, holds each block.

Invariants:
- len(timeline) == ceil((horizon_end - schedule_start) / block_size)
- Block i starts at schedule_start + i * block_size
- Every block holds exactly one occupant: EMPTY, BUSY or a task id
- An interval of k whole blocks spans exactly k indices
"""

from collections.abc import Hashable, Iterator
from datetime import datetime, timedelta

from .errors import InvalidIntervalError, OutOfRangeError

# Occupancy markers
EMPTY = 0
BUSY = -1

RESERVED_OCCUPANTS = (EMPTY, BUSY)


def _as_delta(block_size: int | timedelta) -> timedelta:
    if isinstance(block_size, timedelta):
        delta = block_size
    else:
        delta = timedelta(minutes=block_size)
    if delta <= timedelta(0):
        raise ValueError(f"Block size must be positive, got {block_size}")
    if delta % timedelta(minutes=1):
        raise ValueError(f"Block size must be a whole number of minutes, got {block_size}")
    return delta


def blocks_in_interval(start: datetime, end: datetime, block_size: int | timedelta) -> int:
    """
    Number of blocks needed to cover [start, end), rounded up.

    Raises:
        InvalidIntervalError: If end does not come after start
    """
    if end <= start:
        raise InvalidIntervalError(start, end)
    delta = _as_delta(block_size)
    return -(-(end - start) // delta)


def is_task_occupant(occupant: Hashable) -> bool:
    """True when the occupant is a real task id rather than a marker."""
    return occupant not in RESERVED_OCCUPANTS


class BlockTimeline:
    """
    Ordered sequence of blocks spanning [schedule_start, horizon_end).

    Responsibilities:
    - Map between block indices and clock times
    - Record occupancy per block
    - Translate intervals into block spans
    """

    def __init__(
        self,
        schedule_start: datetime,
        horizon_end: datetime,
        block_size: int | timedelta = 30,
    ):
        self.schedule_start = schedule_start
        self.horizon_end = horizon_end
        self.block_delta = _as_delta(block_size)
        count = blocks_in_interval(schedule_start, horizon_end, self.block_delta)
        self._blocks: list[Hashable] = [EMPTY] * count

    @classmethod
    def create(
        cls, schedule_start: datetime, horizon_end: datetime, block_size: int | timedelta = 30
    ) -> "BlockTimeline":
        return cls(schedule_start, horizon_end, block_size)

    @property
    def block_size(self) -> int:
        """Block size in minutes."""
        return int(self.block_delta.total_seconds() // 60)

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[tuple[int, Hashable]]:
        return iter(enumerate(self._blocks))

    def __repr__(self) -> str:
        return (
            f"BlockTimeline(start={self.schedule_start.isoformat()}, "
            f"blocks={len(self)}, block_size={self.block_size})"
        )

    # -------------------------------------------------------------------------
    # Index <-> time
    # -------------------------------------------------------------------------

    def index_for_time(self, t: datetime) -> int:
        """Index of the block containing t (may fall outside the timeline)."""
        return (t - self.schedule_start) // self.block_delta

    def time_for_index(self, i: int) -> datetime:
        """Start time of block i."""
        return self.schedule_start + i * self.block_delta

    def span_for_interval(self, start: datetime, end: datetime) -> tuple[int, int] | None:
        """
        Inclusive index range of the blocks overlapped by [start, end).

        The range is clipped to the timeline. Returns None when the interval
        lies entirely outside it.

        Raises:
            InvalidIntervalError: If end does not come after start
        """
        if end <= start:
            raise InvalidIntervalError(start, end)

        first = self.index_for_time(start)
        last = -(-(end - self.schedule_start) // self.block_delta) - 1

        if last < 0 or first >= len(self._blocks):
            return None
        return max(first, 0), min(last, len(self._blocks) - 1)

    # -------------------------------------------------------------------------
    # Occupancy
    # -------------------------------------------------------------------------

    def _check_index(self, i: int) -> None:
        if not 0 <= i < len(self._blocks):
            raise OutOfRangeError(f"Block index {i} outside timeline of {len(self._blocks)} blocks")

    def occupy(self, start_index: int, end_index: int, occupant: Hashable) -> None:
        """
        Write occupant into every block in the inclusive range [start_index, end_index].

        Raises:
            OutOfRangeError: If either index is outside the timeline or the range is reversed
        """
        self._check_index(start_index)
        self._check_index(end_index)
        if end_index < start_index:
            raise OutOfRangeError(f"Reversed block range [{start_index}, {end_index}]")

        for i in range(start_index, end_index + 1):
            self._blocks[i] = occupant

    def occupant_at(self, i: int) -> Hashable:
        self._check_index(i)
        return self._blocks[i]

    def is_free(self, i: int) -> bool:
        return self.occupant_at(i) == EMPTY

    def free_indices(self) -> list[int]:
        return [i for i, occupant in enumerate(self._blocks) if occupant == EMPTY]

    def counts(self) -> dict[str, int]:
        """Block counts by occupancy state."""
        busy = sum(1 for o in self._blocks if o == BUSY)
        empty = sum(1 for o in self._blocks if o == EMPTY)
        return {
            "total": len(self._blocks),
            "busy": busy,
            "empty": empty,
            "assigned": len(self._blocks) - busy - empty,
        }
