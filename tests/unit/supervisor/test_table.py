"""Unit tests for the process table."""

import pytest

from minit.supervisor import ProcessTable


class TestProcessTable:
    def test_new_table_is_empty(self) -> None:
        table = ProcessTable(4)

        assert table.capacity == 4
        assert len(table) == 0
        assert table.is_empty()
        assert table.all_occupied_slots() == []
        assert all(table.get(slot) is None for slot in range(4))

    @pytest.mark.parametrize("capacity", [0, -3])
    def test_rejects_non_positive_capacity(self, capacity: int) -> None:
        with pytest.raises(ValueError, match="capacity must be positive"):
            _ = ProcessTable(capacity)

    def test_set_records_pid(self) -> None:
        table = ProcessTable(4)

        table.set(2, 1234)

        assert table.get(2) == 1234
        assert len(table) == 1
        assert not table.is_empty()

    def test_set_overwrites_previous_pid(self) -> None:
        table = ProcessTable(4)
        table.set(0, 100)

        table.set(0, 200)

        assert table.get(0) == 200
        assert table.find_slot_by_pid(100) is None

    def test_clear_empties_slot(self) -> None:
        table = ProcessTable(4)
        table.set(1, 42)

        table.clear(1)

        assert table.get(1) is None
        assert table.is_empty()

    def test_clear_on_empty_slot_is_harmless(self) -> None:
        table = ProcessTable(2)

        table.clear(0)

        assert table.is_empty()

    def test_find_slot_by_pid(self) -> None:
        table = ProcessTable(8)
        table.set(0, 10)
        table.set(5, 50)

        assert table.find_slot_by_pid(10) == 0
        assert table.find_slot_by_pid(50) == 5
        assert table.find_slot_by_pid(99) is None

    def test_all_occupied_slots_are_ascending(self) -> None:
        table = ProcessTable(8)
        for slot, pid in ((6, 60), (1, 10), (3, 30)):
            table.set(slot, pid)

        assert table.all_occupied_slots() == [1, 3, 6]

    @pytest.mark.parametrize("slot", [-1, 4, 100])
    def test_out_of_range_slot_raises(self, slot: int) -> None:
        table = ProcessTable(4)

        with pytest.raises(IndexError, match="out of range"):
            table.set(slot, 1)
        with pytest.raises(IndexError):
            table.clear(slot)
        with pytest.raises(IndexError):
            _ = table.get(slot)
