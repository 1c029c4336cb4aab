"""Sample domain classes shared by the test suite.

Kept in an importable module so type names like ``models.Node`` resolve
through autoloading.
"""

from __future__ import annotations

import collections
from dataclasses import dataclass, field
from typing import Any, ClassVar, NamedTuple


class Node:
	def __init__(self, name: str, parent: Node | None = None) -> None:
		self.name = name
		self.parent = parent
		self.children: list[Node] = []


class Pair:
	def __init__(self, left: Any, right: Any) -> None:
		self.left = left
		self.right = right


class Exploding:
	"""Constructor must never run during reconstruction."""

	constructed: ClassVar[int] = 0

	def __init__(self, value: int) -> None:
		type(self).constructed += 1
		self.value = value


class Account:
	def __init__(self, owner: str, balance: int) -> None:
		self.owner = owner
		self.__balance = balance
		self._cache: dict[str, Any] = {"warm": True}

	@property
	def balance(self) -> int:
		return self.__balance

	def __persist__(self) -> list[str]:
		return ["owner", "_Account__balance"]

	def __restore__(self) -> None:
		self._cache = {"warm": False}


class Guarded:
	"""Refuses attribute writes through normal assignment."""

	def __init__(self, secret: str) -> None:
		object.__setattr__(self, "secret", secret)

	def __setattr__(self, name: str, value: Any) -> None:
		raise AttributeError("read-only")


class Slotted:
	__slots__ = ("x", "y")

	def __init__(self, x: int, y: int | None = None) -> None:
		self.x = x
		if y is not None:
			self.y = y


class SlottedChild(Slotted):
	__slots__ = ("z",)

	def __init__(self, x: int, y: int, z: int) -> None:
		super().__init__(x, y)
		self.z = z


class Declared:
	title: str
	count: int

	def __init__(self, title: str, count: int) -> None:
		self.title = title
		self.count = count


@dataclass(frozen=True)
class Frozen:
	a: int
	b: str = "b"


@dataclass
class Inventory:
	items: list[Any] = field(default_factory=list)
	tags: set[str] = field(default_factory=set)


class Tagged(list):
	def __init__(self, *args: Any, label: str = "") -> None:
		super().__init__(*args)
		self.label = label


class Point(NamedTuple):
	x: int
	y: int


class Counter(collections.Counter):
	pass


class Needy:
	"""``__new__`` requires an argument, so it cannot be bare-allocated."""

	def __new__(cls, token: str) -> Needy:
		instance = super().__new__(cls)
		instance.token = token
		return instance

	token: str


class Caller:
	def __call__(self) -> None:
		return None
