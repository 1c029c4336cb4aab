import pytest
from graphserial.errors import DanglingReferenceError, UnsupportedValueError
from graphserial.identity import IdentityTracker, ReconstructionTable


class TestIdentityTracker:
	def test_indices_are_sequential_from_zero(self):
		tracker = IdentityTracker()
		a, b = object(), object()
		assert tracker.mark_or_get_index(a) == (True, 0)
		assert tracker.mark_or_get_index(b) == (True, 1)
		assert len(tracker) == 2

	def test_repeat_sighting_returns_previous_index(self):
		tracker = IdentityTracker()
		a = object()
		tracker.mark_or_get_index(a)
		tracker.mark_or_get_index(object())
		assert tracker.mark_or_get_index(a) == (False, 0)

	def test_equal_but_distinct_objects_get_distinct_indices(self):
		tracker = IdentityTracker()
		first, second = [1], [1]
		assert tracker.mark_or_get_index(first) == (True, 0)
		assert tracker.mark_or_get_index(second) == (True, 1)

	def test_visiting_rejects_reentry(self):
		tracker = IdentityTracker()
		container: list[object] = []
		with tracker.visiting(container):
			with pytest.raises(UnsupportedValueError, match="Cyclic list"):
				with tracker.visiting(container):
					pass

	def test_visiting_allows_sequential_reuse(self):
		tracker = IdentityTracker()
		shared: list[object] = []
		with tracker.visiting(shared):
			pass
		with tracker.visiting(shared):
			pass


class TestReconstructionTable:
	def test_reserve_register_resolve(self):
		table = ReconstructionTable()
		index = table.reserve_index()
		obj = object()
		table.register(index, obj)
		assert index == 0
		assert table.resolve(0) is obj

	def test_resolve_out_of_range(self):
		table = ReconstructionTable()
		with pytest.raises(DanglingReferenceError) as info:
			table.resolve(3)
		assert info.value.index == 3

	def test_resolve_negative_index(self):
		table = ReconstructionTable()
		table.register(table.reserve_index(), object())
		with pytest.raises(DanglingReferenceError):
			table.resolve(-1)

	def test_resolve_reserved_but_unregistered(self):
		table = ReconstructionTable()
		table.reserve_index()
		with pytest.raises(DanglingReferenceError):
			table.resolve(0)

	def test_register_unreserved_index(self):
		table = ReconstructionTable()
		with pytest.raises(DanglingReferenceError):
			table.register(0, object())

	def test_registered_none_is_resolvable(self):
		table = ReconstructionTable()
		table.register(table.reserve_index(), None)
		assert table.resolve(0) is None
