"""Tests for ListMemory."""

import pytest

from thinkmem.core.errors import (
    InvalidOperationError,
    MemoryAlreadyExistsError,
    ValidationError,
)
from thinkmem.memory.base import ListRole, MemoryType
from thinkmem.memory.list_memory import ListMemory
from thinkmem.memory.raw_memory import RawMemory


def assert_index_consistent(memory: ListMemory) -> None:
    """The name index matches the positional list exactly."""
    names = memory.names()
    assert len(names) == len(set(names))
    for position, name in enumerate(names):
        assert memory.get_by_name(name) is memory.get_at(position)
        assert memory.index_of(name) == position


@pytest.fixture
def array() -> ListMemory:
    memory = ListMemory("todo", "things to do")
    for name in ("a", "b", "c"):
        memory.append(name, f"data {name}")
    return memory


class TestArray:
    def test_append_and_get(self, array):
        assert array.type is MemoryType.LIST
        assert len(array) == 3
        assert array.get_at(0).name == "a"
        assert array.get_at(2).data == "data c"
        assert array.get_at(1).description == "Element 1"
        assert array.metadata() == {"length": 3, "role": "array"}

    def test_duplicate_name_rejected(self, array):
        with pytest.raises(MemoryAlreadyExistsError):
            array.append("b")
        with pytest.raises(MemoryAlreadyExistsError):
            array.insert_at(0, "c")
        assert len(array) == 3
        assert_index_consistent(array)

    def test_insert_at(self, array):
        array.insert_at(1, "x")
        array.insert_at(4, "end")
        assert array.names() == ["a", "x", "b", "c", "end"]
        assert_index_consistent(array)

    def test_insert_at_out_of_range(self, array):
        with pytest.raises(ValidationError):
            array.insert_at(5, "x")
        with pytest.raises(ValidationError):
            array.insert_at(-1, "x")

    def test_remove_at(self, array):
        removed = array.remove_at(1)
        assert removed.name == "b"
        assert array.names() == ["a", "c"]
        assert array.get_by_name("b") is None
        assert_index_consistent(array)

    def test_get_at_out_of_range(self, array):
        with pytest.raises(ValidationError):
            array.get_at(3)

    def test_remove_by_name(self, array):
        assert array.remove_by_name("missing") is None
        index, removed = array.remove_by_name("c")
        assert index == 2
        assert removed.name == "c"
        assert_index_consistent(array)

    def test_set_at_keeps_index_in_sync(self, array):
        array.set_at(0, RawMemory("z", "renamed", "zz"))
        assert array.get_by_name("a") is None
        assert array.get_by_name("z").data == "zz"
        assert_index_consistent(array)
        with pytest.raises(MemoryAlreadyExistsError):
            array.set_at(0, RawMemory("b"))

    def test_clear(self, array):
        array.clear()
        assert array.is_empty()
        assert array.get_by_name("a") is None

    def test_search_name_and_description(self):
        memory = ListMemory("l")
        memory.append("groceries", description="milk and eggs")
        memory.append("work", description="Quarterly REPORT")
        memory.append("gym")
        assert [i for i, _ in memory.search("report")] == [1]
        assert [e.name for _, e in memory.search("^g")] == ["groceries", "gym"]
        assert len(memory.search(None)) == 3

    def test_search_invalid_regex(self, array):
        with pytest.raises(ValidationError):
            array.search("(")

    def test_items_are_read_only_view(self, array):
        items = array.items
        assert isinstance(items, tuple)
        assert [i.name for i in items] == ["a", "b", "c"]


class TestDeque:
    def test_deque_scenario(self):
        deque = ListMemory("q", role=ListRole.DEQUE)
        deque.push_front("x", "front data")
        deque.push_back("y", "back data")
        assert deque.peek_front().name == "x"
        assert deque.peek_back().name == "y"
        assert deque.peek_front().description == "Front element"
        assert deque.pop_back().name == "y"
        assert deque.pop_front().name == "x"
        assert deque.is_empty()
        assert deque.peek_front() is None

    def test_pop_empty_raises(self):
        deque = ListMemory("q", role=ListRole.DEQUE)
        with pytest.raises(InvalidOperationError):
            deque.pop_front()
        with pytest.raises(InvalidOperationError):
            deque.pop_back()

    def test_stack_ops_rejected_on_deque(self):
        deque = ListMemory("q", role=ListRole.DEQUE)
        with pytest.raises(InvalidOperationError) as exc_info:
            deque.push_top("x")
        assert "stack" in exc_info.value.message
        assert len(deque) == 0


class TestStack:
    def test_lifo(self):
        stack = ListMemory("s", role=ListRole.STACK)
        stack.push_top("one")
        stack.push_top("two")
        assert stack.peek_top().name == "two"
        assert stack.peek_top().description == "Top element"
        assert stack.pop_top().name == "two"
        assert stack.pop_top().name == "one"
        assert stack.peek_top() is None
        with pytest.raises(InvalidOperationError):
            stack.pop_top()

    def test_deque_ops_rejected_on_stack(self):
        stack = ListMemory("s", role=ListRole.STACK)
        with pytest.raises(InvalidOperationError):
            stack.push_front("x")
        with pytest.raises(InvalidOperationError):
            stack.peek_back()

    def test_duplicate_push_rejected(self):
        stack = ListMemory("s", role=ListRole.STACK)
        stack.push_top("one")
        with pytest.raises(MemoryAlreadyExistsError):
            stack.push_top("one")
        assert len(stack) == 1


class TestSerialization:
    def test_round_trip(self, array):
        array.get_at(0).add_summary(0, 0, "summary a")
        record = array.to_dict()
        assert record["type"] == "list"
        assert record["role"] == "array"
        assert [r["name"] for r in record["list"]] == ["a", "b", "c"]

        restored = ListMemory.from_dict(record)
        assert restored.name == "todo"
        assert restored.description == "things to do"
        assert restored.role is ListRole.ARRAY
        assert restored.names() == array.names()
        assert restored.get_at(0).summaries[0].text == "summary a"
        assert_index_consistent(restored)

    def test_from_dict_rejects_duplicate_names(self):
        record = {
            "name": "l",
            "type": "list",
            "role": "stack",
            "list": [
                {"name": "x", "type": "raw", "data": ""},
                {"name": "x", "type": "raw", "data": ""},
            ],
        }
        with pytest.raises(MemoryAlreadyExistsError):
            ListMemory.from_dict(record)

    def test_copy_is_detached(self, array):
        clone = array.copy()
        clone.remove_at(0)
        clone.get_at(0).write("changed")
        assert len(array) == 3
        assert array.get_at(1).data == "data b"
