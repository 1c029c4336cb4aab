from __future__ import annotations

import collections
import io
import mmap
import socket
import threading
import types
from collections.abc import AsyncIterator, Iterator
from enum import Enum
from typing import TYPE_CHECKING, Any

from graphserial.errors import UnsupportedValueError
from graphserial.nodes import Node, ScalarKind

if TYPE_CHECKING:
	from graphserial.adapters import AdapterRegistry


class Category(Enum):
	SCALAR = "scalar"
	SEQUENCE = "sequence"
	MAPPING = "mapping"
	ITERABLE = "iterable"
	COMPOSITE = "composite"
	ADAPTER = "adapter"
	NODE = "node"
	UNSUPPORTED = "unsupported"


_SCALAR_TYPES: frozenset[type[Any]] = frozenset({bool, int, float, str})

# Containers whose subclasses and non-list/dict variants are encoded as
# iterable composites: type name plus iterated items
ITERABLE_TYPES: tuple[type[Any], ...] = (
	list,
	dict,
	tuple,
	set,
	frozenset,
	collections.deque,
)

_LAZY_TYPES: tuple[type[Any], ...] = (
	range,
	types.GeneratorType,
	types.CoroutineType,
	types.AsyncGeneratorType,
	Iterator,
	AsyncIterator,
)

_RESOURCE_TYPES: tuple[type[Any], ...] = (
	io.IOBase,
	socket.socket,
	mmap.mmap,
	type(threading.Lock()),
	type(threading.RLock()),
)


def unsupported_reason(value: Any) -> str | None:
	"""Why ``value`` can never be serialized, or None when it can."""
	if isinstance(value, _RESOURCE_TYPES):
		return f"Resource {type(value).__name__} is not supported in Serializer"
	if isinstance(value, _LAZY_TYPES):
		return (
			f"{type(value).__name__} is not supported in Serializer. "
			"Loop through it and serialize the output."
		)
	if isinstance(value, (type, types.ModuleType)) or callable(value):
		return f"Callable {type(value).__name__} is not supported in Serializer"
	return None


_HEAPTYPE = 1 << 9


def _opaque_builtin(value: Any) -> bool:
	# C-level types whose state is invisible to attribute access
	cls = type(value)
	if cls is object:
		return False
	if cls.__module__ == "builtins":
		return True
	if cls.__flags__ & _HEAPTYPE:
		return False
	try:
		object.__getattribute__(value, "__dict__")
	except AttributeError:
		return True
	return False


def classify(value: Any, adapters: AdapterRegistry | None = None) -> Category:
	"""Decide how ``value`` is encoded.

	Exact scalars, IR nodes and plain ``list``/``dict`` are settled first since
	they can never be unsupported. After that the order is: unsupported values,
	well-known adapter types, iterable composites, scalar subclasses, then
	composites.
	"""
	if value is None or type(value) in _SCALAR_TYPES:
		return Category.SCALAR
	if isinstance(value, Node):
		return Category.NODE
	if type(value) is list:
		return Category.SEQUENCE
	if type(value) is dict:
		return Category.MAPPING
	if unsupported_reason(value) is not None:
		return Category.UNSUPPORTED
	if adapters is not None and adapters.find(type(value)) is not None:
		return Category.ADAPTER
	if isinstance(value, ITERABLE_TYPES):
		return Category.ITERABLE
	if isinstance(value, (bool, int, float, str)):
		return Category.SCALAR
	if _opaque_builtin(value):
		return Category.UNSUPPORTED
	return Category.COMPOSITE


def guard_supported(value: Any) -> None:
	reason = unsupported_reason(value)
	if reason is None and _opaque_builtin(value):
		reason = (
			f"Built-in {type(value).__module__}.{type(value).__qualname__} is not supported "
			"in Serializer. Register an adapter for it."
		)
	if reason is not None:
		raise UnsupportedValueError(reason, value_type=type(value))


def scalar_kind(value: Any) -> ScalarKind:
	# bool before int, bool is an int subclass
	if value is None:
		return "null"
	if isinstance(value, bool):
		return "boolean"
	if isinstance(value, int):
		return "integer"
	if isinstance(value, float):
		return "float"
	if isinstance(value, str):
		return "string"
	raise UnsupportedValueError(
		f"{type(value).__name__} is not a scalar", value_type=type(value)
	)


__all__ = [
	"ITERABLE_TYPES",
	"Category",
	"classify",
	"guard_supported",
	"scalar_kind",
	"unsupported_reason",
]
