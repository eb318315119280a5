"""Device coordinate table and grid bucket index.

The pairwise rules compare a device with every other device in the same
``(system, device_type)`` bucket. :class:`DeviceTable` keeps positions in
numpy arrays so each comparison is one vectorized distance computation, and
:class:`GridIndex` narrows a bucket to the cells around a point for large
layouts.

Both structures only return candidate indices in ascending input order, so the
"first match by iteration order" and "earliest of equal minima" policies of the
rules give the same answer with or without the grid.
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from .models import Device, DeviceKind, SystemType

# Bucket key; device_type None means "any type in this system".
BucketKey = tuple[SystemType, Optional[DeviceKind]]

_EMPTY = np.empty(0, dtype=np.intp)


class DeviceTable:
    """Read-only columnar view of a layout's devices.

    Attributes:
        ids: Device ids, object array in input order.
        xs, ys: Device coordinates in inches.
    """

    def __init__(self, devices: Sequence[Device]):
        n = len(devices)
        self.ids: NDArray[np.object_] = np.array([d.id for d in devices], dtype=object)
        self.xs: NDArray[np.float64] = np.fromiter((d.x for d in devices), dtype=np.float64, count=n)
        self.ys: NDArray[np.float64] = np.fromiter((d.y for d in devices), dtype=np.float64, count=n)
        for arr in (self.ids, self.xs, self.ys):
            arr.flags.writeable = False

        buckets: dict[BucketKey, list[int]] = defaultdict(list)
        self._positions: dict[str, int] = {}
        for i, device in enumerate(devices):
            buckets[(device.system, None)].append(i)
            buckets[(device.system, device.device_type)].append(i)
            self._positions.setdefault(device.id, i)
        self._buckets = {key: np.asarray(idx, dtype=np.intp) for key, idx in buckets.items()}

    def __len__(self) -> int:
        return len(self.xs)

    def bucket(self, system: SystemType, device_type: Optional[DeviceKind] = None) -> NDArray[np.intp]:
        """Indices of devices in a system (optionally of one type), ascending."""
        return self._buckets.get((system, device_type), _EMPTY)

    def index_of(self, device_id: str) -> Optional[int]:
        """Input position of the first device with ``device_id``."""
        return self._positions.get(device_id)

    def distances(self, indices: NDArray[np.intp], x: float, y: float) -> NDArray[np.float64]:
        """Euclidean distances from ``(x, y)`` to the devices at ``indices``."""
        return np.hypot(self.xs[indices] - x, self.ys[indices] - y)


class GridIndex:
    """Uniform grid over device positions, one cell map per bucket.

    Cells are ``cell_size`` inches square and keyed by truncated coordinates
    ``(int(x // cell_size), int(y // cell_size))``. Devices at NaN or infinite
    positions have no cell; they are kept aside and returned by every lookup
    so candidate sets stay a superset of what a full bucket scan would match.
    """

    def __init__(self, devices: Sequence[Device], cell_size: float = 120.0):
        if not cell_size > 0 or not math.isfinite(cell_size):
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.cell_size = cell_size
        self._cells: dict[BucketKey, dict[tuple[int, int], list[int]]] = defaultdict(
            lambda: defaultdict(list)
        )
        self._unplaced: dict[BucketKey, list[int]] = defaultdict(list)
        self._members: dict[BucketKey, list[int]] = defaultdict(list)
        for i, device in enumerate(devices):
            keys = ((device.system, None), (device.system, device.device_type))
            for key in keys:
                self._members[key].append(i)
            if not (math.isfinite(device.x) and math.isfinite(device.y)):
                for key in keys:
                    self._unplaced[key].append(i)
                continue
            cell = self._cell_of(device.x, device.y)
            for key in keys:
                self._cells[key][cell].append(i)

    def _cell_of(self, x: float, y: float) -> tuple[int, int]:
        return (int(x // self.cell_size), int(y // self.cell_size))

    def candidates(
        self,
        system: SystemType,
        device_type: Optional[DeviceKind],
        x: float,
        y: float,
        radius: float,
    ) -> NDArray[np.intp]:
        """Indices of bucket devices whose cell intersects the square around ``(x, y)``.

        Every device within ``radius`` of the point is included; some farther
        ones may be too. Result is sorted ascending.
        """
        key = (system, device_type)
        members = self._members.get(key)
        if not members:
            return _EMPTY

        lo_x, lo_y, hi_x, hi_y = x - radius, y - radius, x + radius, y + radius
        if not all(math.isfinite(v) for v in (lo_x, lo_y, hi_x, hi_y)):
            # No bounded search square: fall back to the whole bucket
            return np.asarray(members, dtype=np.intp)

        min_cx, min_cy = self._cell_of(lo_x, lo_y)
        max_cx, max_cy = self._cell_of(hi_x, hi_y)

        cells = self._cells.get(key, {})
        found: list[int] = list(self._unplaced.get(key, ()))

        # Wide searches on sparse buckets: walk occupied cells instead
        span = (max_cx - min_cx + 1) * (max_cy - min_cy + 1)
        if span > len(cells):
            for (cx, cy), occupants in cells.items():
                if min_cx <= cx <= max_cx and min_cy <= cy <= max_cy:
                    found.extend(occupants)
        else:
            for cx in range(min_cx, max_cx + 1):
                for cy in range(min_cy, max_cy + 1):
                    occupants = cells.get((cx, cy))
                    if occupants:
                        found.extend(occupants)

        if not found:
            return _EMPTY
        return np.unique(np.asarray(found, dtype=np.intp))
