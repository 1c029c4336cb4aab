"""Privileged field access for composite objects.

Python has no access control, but ordinary attribute access still runs
properties, descriptors, frozen-dataclass guards and custom ``__getattr__`` /
``__setattr__`` hooks. The accessor goes underneath all of that and talks to
the instance ``__dict__`` and slot descriptors directly, so the state that is
read on encode is exactly the state that is written back on decode.

Types can customise what is persisted:

- ``__persist__(self) -> Iterable[str]`` selects the field names to persist.
- ``__restore__(self) -> None`` runs after all fields have been assigned.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import logging
from typing import Any

from graphserial.errors import UnknownFieldError, UnsupportedValueError
from graphserial.registry import qualified_name

logger = logging.getLogger(__name__)

PERSIST_HOOK = "__persist__"
RESTORE_HOOK = "__restore__"

_MISSING: Any = object()


def _mangle(owner: type[Any], name: str) -> str:
	if name.startswith("__") and not name.endswith("__"):
		return f"_{owner.__name__.lstrip('_')}{name}"
	return name


@functools.lru_cache(maxsize=None)
def slot_names(cls: type[Any]) -> tuple[str, ...]:
	"""Slots declared across the MRO, base classes first."""
	names: list[str] = []
	for owner in reversed(cls.__mro__):
		slots = owner.__dict__.get("__slots__", ())
		if isinstance(slots, str):
			slots = (slots,)
		for slot in slots:
			if slot in ("__dict__", "__weakref__"):
				continue
			mangled = _mangle(owner, slot)
			if mangled not in names:
				names.append(mangled)
	return tuple(names)


@functools.lru_cache(maxsize=None)
def declared_fields(cls: type[Any]) -> tuple[str, ...]:
	"""Fields declared by the type's structure.

	Dataclass fields first, then slots, then remaining instance annotations.
	"""
	names: list[str] = []
	if dataclasses.is_dataclass(cls):
		names.extend(f.name for f in dataclasses.fields(cls))
	for slot in slot_names(cls):
		if slot not in names:
			names.append(slot)
	for owner in reversed(cls.__mro__):
		annotations = inspect.get_annotations(owner)
		for name, annotation in annotations.items():
			if "ClassVar" in str(annotation):
				continue
			mangled = _mangle(owner, name)
			if mangled not in names:
				names.append(mangled)
	return tuple(names)


def _instance_dict(obj: Any) -> dict[str, Any] | None:
	try:
		return object.__getattribute__(obj, "__dict__")
	except AttributeError:
		return None


class PropertyAccessor:
	"""Reads and writes composite fields irrespective of attribute hooks."""

	__slots__: tuple[str, ...] = ("strict",)

	strict: bool

	def __init__(self, *, strict: bool = False) -> None:
		self.strict = strict

	# -------------------------------------------------------------------------
	# Reading
	# -------------------------------------------------------------------------

	def field_names(self, obj: Any) -> list[str]:
		hook = getattr(type(obj), PERSIST_HOOK, None)
		if hook is not None:
			return [str(name) for name in hook(obj)]

		names = list(declared_fields(type(obj)))
		state = _instance_dict(obj)
		if state is not None:
			seen = set(names)
			for name in state:
				if name not in seen:
					seen.add(name)
					names.append(name)
		return names

	def read(self, obj: Any, name: str, default: Any = _MISSING) -> Any:
		state = _instance_dict(obj)
		if state is not None and name in state:
			return state[name]
		if name in slot_names(type(obj)):
			try:
				return object.__getattribute__(obj, name)
			except AttributeError:
				pass
		if default is _MISSING:
			raise UnsupportedValueError(
				f"{qualified_name(type(obj))} has no field {name!r} to serialize",
				value_type=type(obj),
			)
		return default

	def extract(self, obj: Any) -> list[tuple[str, Any]]:
		"""Ordered ``(name, value)`` pairs of the object's persisted state."""
		if getattr(type(obj), PERSIST_HOOK, None) is not None:
			return [(name, self.read(obj, name)) for name in self.field_names(obj)]

		fields: list[tuple[str, Any]] = []
		for name in self.field_names(obj):
			value = self.read(obj, name, _MISSING_FIELD)
			# Unset slots and annotation-only names have nothing to persist
			if value is not _MISSING_FIELD:
				fields.append((name, value))
		return fields

	# -------------------------------------------------------------------------
	# Writing
	# -------------------------------------------------------------------------

	def assign(self, obj: Any, name: str, value: Any) -> None:
		cls = type(obj)
		if name in slot_names(cls):
			object.__setattr__(obj, name, value)
			return

		state = _instance_dict(obj)
		if state is None:
			raise UnknownFieldError(
				qualified_name(cls), name, "instances have no __dict__"
			)
		if name not in state and name not in declared_fields(cls):
			if self.strict:
				raise UnknownFieldError(qualified_name(cls), name, "field is not declared")
			logger.debug("Attaching undeclared field %r to %s", name, qualified_name(cls))
		state[name] = value

	def call_restore_hook(self, obj: Any) -> None:
		hook = getattr(type(obj), RESTORE_HOOK, None)
		if hook is not None:
			hook(obj)


_MISSING_FIELD: Any = object()

__all__ = [
	"PERSIST_HOOK",
	"RESTORE_HOOK",
	"PropertyAccessor",
	"declared_fields",
	"slot_names",
]
