"""Fixed-capacity registry of running children.

The table maps a slot, the stable identity of the i-th configured child,
to the pid of its current process. It is the single source of truth for
what is running. It is not synchronized; the supervisor's control task is
its only user.
"""

from typing import final


@final
class ProcessTable:
    """Maps slots ``0..capacity-1`` to live process ids."""

    __slots__ = ("_pids",)

    def __init__(self, capacity: int) -> None:
        """Initialize an empty table.

        Args:
            capacity: Number of slots.

        Raises:
            ValueError: If capacity is not positive.
        """
        if capacity < 1:
            msg = f"capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self._pids: list[int | None] = [None] * capacity

    @property
    def capacity(self) -> int:
        """Return the number of slots."""
        return len(self._pids)

    def _check_slot(self, slot: int) -> None:
        if not 0 <= slot < len(self._pids):
            msg = f"slot {slot} out of range 0..{len(self._pids) - 1}"
            raise IndexError(msg)

    def set(self, slot: int, pid: int) -> None:
        """Record that ``slot`` is now backed by process ``pid``.

        Any previous pid is overwritten; the caller must have reaped it.
        """
        self._check_slot(slot)
        self._pids[slot] = pid

    def clear(self, slot: int) -> None:
        """Mark ``slot`` as empty."""
        self._check_slot(slot)
        self._pids[slot] = None

    def get(self, slot: int) -> int | None:
        """Return the pid backing ``slot``, or None if it is empty."""
        self._check_slot(slot)
        return self._pids[slot]

    def find_slot_by_pid(self, pid: int) -> int | None:
        """Return the slot backed by ``pid``, or None if no slot is."""
        for slot, slot_pid in enumerate(self._pids):
            if slot_pid == pid:
                return slot
        return None

    def all_occupied_slots(self) -> list[int]:
        """Return the occupied slots in ascending order."""
        return [slot for slot, pid in enumerate(self._pids) if pid is not None]

    def is_empty(self) -> bool:
        """Check whether no slot is occupied."""
        return all(pid is None for pid in self._pids)

    def __len__(self) -> int:
        return sum(1 for pid in self._pids if pid is not None)
