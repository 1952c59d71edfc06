"""Sparse grid of cell statuses.

The Grid maps positions to statuses and remembers the bounding extent seen
while parsing. It is built once, never resized, and statuses are replaced
(never deleted) as resolution progresses.
"""

from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from .cells import Status, PendingStatus, STATE_NAMES
from .position import Position


GridSnapshot = Mapping[Position, Status]
"""Read-only view of a grid's statuses at one point in time."""


@dataclass
class Grid:
    """Coordinate-indexed collection of statuses plus its extent.

    Positions that never appeared in the source are simply absent; they are
    not errors.

    Example:
        grid = parse_grid("1;2\\n[0, 1]", delimiter=";")
        grid.width, grid.height           # (2, 2)
        grid.get(Position.at(1, 0))       # PendingStatus(...)
        grid.get(Position.at(1, 1))       # None (absent)
    """

    cells: Dict[Position, Status] = field(default_factory=dict)
    width: int = 0
    height: int = 0

    def get(self, position: Position) -> Optional[Status]:
        """Status at position, or None if the position is absent."""
        return self.cells.get(position)

    def set(self, position: Position, status: Status) -> None:
        """Replace the status of an existing position.

        Raises:
            KeyError: If position is not part of the grid (grids never grow)
        """
        if position not in self.cells:
            raise KeyError(f"Position {position} is not part of the grid")
        self.cells[position] = status

    def snapshot(self) -> GridSnapshot:
        """Structural copy of the current statuses, read-only.

        Statuses are immutable, so copying the mapping is enough to decouple
        reads against the snapshot from later writes to the grid.
        """
        return MappingProxyType(dict(self.cells))

    def positions(self) -> List[Position]:
        """All present positions, row-major."""
        return sorted(self.cells, key=lambda p: (p.row, p.column))

    def pending_positions(self) -> List[Position]:
        """Positions whose status is still Pending, row-major."""
        return [p for p in self.positions() if isinstance(self.cells[p], PendingStatus)]

    def counts(self) -> Dict[str, int]:
        """Number of statuses per state name (every state is always listed)."""
        counter = Counter(status.state for status in self.cells.values())
        return {name: counter.get(name, 0) for name in STATE_NAMES}

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, position: object) -> bool:
        return position in self.cells

    def __iter__(self) -> Iterator[Position]:
        return iter(self.positions())
