"""IR node model.

The IR is a closed tagged variant. Every value graph is converted into a tree
of these nodes before it reaches a wire strategy, and every strategy hands one
back when decoding:

- ``Scalar``        : typed primitive, ``kind`` keeps ``1`` and ``1.0`` apart
- ``Sequence``      : integer-indexed container (``list``)
- ``Mapping``       : keyed container, key order is significant
- ``Composite``     : a named object's persisted state
- ``BackReference`` : an object already encoded earlier in the traversal
"""

from __future__ import annotations

from abc import ABC
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Literal, TypeAlias

ScalarKind: TypeAlias = Literal["integer", "float", "boolean", "string", "null"]
ScalarLiteral: TypeAlias = bool | int | float | str | None
MappingKey: TypeAlias = bool | int | float | str | None


class Node(ABC):
	"""Base class for all IR nodes."""

	__slots__: tuple[str, ...] = ()

	def children(self) -> Iterator[Node]:
		return iter(())


@dataclass(slots=True)
class Scalar(Node):
	"""Primitive value with its normalised kind."""

	kind: ScalarKind
	literal: ScalarLiteral


@dataclass(slots=True)
class Sequence(Node):
	entries: list[Node] = field(default_factory=list)

	def children(self) -> Iterator[Node]:
		return iter(self.entries)


@dataclass(slots=True)
class Mapping(Node):
	entries: list[tuple[MappingKey, Node]] = field(default_factory=list)

	def children(self) -> Iterator[Node]:
		return (child for _, child in self.entries)


@dataclass(slots=True)
class Composite(Node):
	"""A named object's persisted state.

	``items`` is only set for iterable composites (tuples, sets, container
	subclasses) and holds their iterated contents as a ``Sequence`` or
	``Mapping``.
	"""

	type_name: str
	fields: list[tuple[str, Node]] = field(default_factory=list)
	items: Node | None = None

	def children(self) -> Iterator[Node]:
		for _, child in self.fields:
			yield child
		if self.items is not None:
			yield self.items


@dataclass(slots=True)
class BackReference(Node):
	"""Refers to the ``index``-th tracked object of the current traversal."""

	index: int


def walk(node: Node) -> Iterator[Node]:
	"""Yield ``node`` and all of its descendants, depth first."""
	stack = [node]
	while stack:
		current = stack.pop()
		yield current
		stack.extend(reversed(list(current.children())))


__all__ = [
	"BackReference",
	"Composite",
	"Mapping",
	"MappingKey",
	"Node",
	"Scalar",
	"ScalarKind",
	"ScalarLiteral",
	"Sequence",
	"walk",
]
