from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from graphserial.errors import DanglingReferenceError, UnsupportedValueError


class IdentityTracker:
	"""Encode-side identity table.

	Maps ``id(obj)`` to the traversal-order index of tracked objects. Every
	tracked object is also kept alive here until the call ends, otherwise a
	temporary produced during extraction could be collected and its ``id``
	handed to a different object.
	"""

	__slots__: tuple[str, ...] = ("_indices", "_keepalive", "_path")

	_indices: dict[int, int]
	_keepalive: list[Any]
	_path: set[int]

	def __init__(self) -> None:
		self._indices = {}
		self._keepalive = []
		self._path = set()

	def mark_or_get_index(self, obj: Any) -> tuple[bool, int]:
		obj_id = id(obj)
		index = self._indices.get(obj_id)
		if index is not None:
			return False, index
		index = len(self._keepalive)
		self._indices[obj_id] = index
		self._keepalive.append(obj)
		return True, index

	@contextmanager
	def visiting(self, container: Any) -> Iterator[None]:
		"""Guard a copied container against containing itself.

		Plain containers are copied rather than tracked, so a list that holds
		itself would recurse forever. Shared containers that are not on the
		current path are fine and simply get copied again.
		"""
		obj_id = id(container)
		if obj_id in self._path:
			raise UnsupportedValueError(
				f"Cyclic {type(container).__name__} is not supported in Serializer. "
				"Hold the shared part in an object to preserve the reference.",
				value_type=type(container),
			)
		self._path.add(obj_id)
		try:
			yield
		finally:
			self._path.discard(obj_id)

	def __len__(self) -> int:
		return len(self._keepalive)


class ReconstructionTable:
	"""Decode-side counterpart: index -> reconstructed object."""

	__slots__: tuple[str, ...] = ("_objects",)

	_objects: list[Any]

	def __init__(self) -> None:
		self._objects = []

	def reserve_index(self) -> int:
		self._objects.append(_UNSET)
		return len(self._objects) - 1

	def register(self, index: int, obj: Any) -> None:
		if not 0 <= index < len(self._objects):
			raise DanglingReferenceError(index)
		self._objects[index] = obj

	def resolve(self, index: int) -> Any:
		if not 0 <= index < len(self._objects):
			raise DanglingReferenceError(index)
		obj = self._objects[index]
		if obj is _UNSET:
			raise DanglingReferenceError(index)
		return obj

	def __len__(self) -> int:
		return len(self._objects)


_UNSET: Any = object()

__all__ = ["IdentityTracker", "ReconstructionTable"]
