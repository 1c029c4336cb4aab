from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from typing import Any, TypeVar, overload

from graphserial.errors import TypeAlreadyRegisteredError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)

Factory = Callable[[type[Any]], Any]


def qualified_name(cls: type[Any]) -> str:
	"""``module.QualName`` for a class, e.g. ``datetime.datetime``."""
	return f"{cls.__module__}.{cls.__qualname__}"


def locate(name: str) -> type[Any] | None:
	"""Import the longest module prefix of ``name`` and walk the rest as attributes."""
	if not name or "<locals>" in name:
		return None
	parts = name.split(".")
	for split in range(len(parts) - 1, 0, -1):
		module_name = ".".join(parts[:split])
		try:
			target: Any = importlib.import_module(module_name)
		except ImportError:
			continue
		for attr in parts[split:]:
			target = getattr(target, attr, None)
			if target is None:
				return None
		return target if isinstance(target, type) else None
	return None


class TypeRegistry:
	"""Maps type names to classes and their bare-allocation factories.

	Registration is optional while ``autoload`` is enabled, but it is the only
	way to decode classes defined inside functions, to give a class a stable
	wire name that survives refactors, or to supply a custom factory for types
	whose ``__new__`` needs arguments.
	"""

	__slots__: tuple[str, ...] = ("_by_name", "_names", "_factories")

	_by_name: dict[str, type[Any]]
	_names: dict[type[Any], str]
	_factories: dict[type[Any], Factory]

	def __init__(self) -> None:
		self._by_name = {}
		self._names = {}
		self._factories = {}

	@overload
	def register(self, cls: T, *, name: str | None = None, factory: Factory | None = None) -> T: ...
	@overload
	def register(
		self, cls: None = None, *, name: str | None = None, factory: Factory | None = None
	) -> Callable[[T], T]: ...
	def register(
		self,
		cls: T | None = None,
		*,
		name: str | None = None,
		factory: Factory | None = None,
	) -> T | Callable[[T], T]:
		"""Register ``cls``. Usable directly or as a class decorator."""

		def decorator(target: T) -> T:
			type_name = name or qualified_name(target)
			existing = self._by_name.get(type_name)
			if existing is not None and existing is not target:
				raise TypeAlreadyRegisteredError(
					f"Type name {type_name!r} is already registered for {qualified_name(existing)}"
				)
			self._by_name[type_name] = target
			self._names[target] = type_name
			if factory is not None:
				self._factories[target] = factory
			return target

		if cls is None:
			return decorator
		return decorator(cls)

	def unregister(self, cls: type[Any]) -> None:
		type_name = self._names.pop(cls, None)
		if type_name is not None:
			self._by_name.pop(type_name, None)
		self._factories.pop(cls, None)

	def name_of(self, cls: type[Any]) -> str:
		return self._names.get(cls) or qualified_name(cls)

	def factory_for(self, cls: type[Any]) -> Factory | None:
		return self._factories.get(cls)

	def resolve(self, type_name: str, *, autoload: bool = True) -> type[Any] | None:
		cls = self._by_name.get(type_name)
		if cls is not None:
			return cls
		if not autoload:
			return None
		cls = locate(type_name)
		if cls is not None:
			logger.debug("Autoloaded type %s", type_name)
		return cls

	def __contains__(self, cls: object) -> bool:
		return cls in self._names

	def __len__(self) -> int:
		return len(self._by_name)

	def clear(self) -> None:
		self._by_name.clear()
		self._names.clear()
		self._factories.clear()


# Process-wide registry used when a Serializer is built without its own
TYPE_REGISTRY = TypeRegistry()


def register_type(
	cls: type[Any] | None = None,
	*,
	name: str | None = None,
	factory: Factory | None = None,
) -> Any:
	"""Register a class on the process-wide registry."""
	return TYPE_REGISTRY.register(cls, name=name, factory=factory)


__all__ = [
	"TYPE_REGISTRY",
	"Factory",
	"TypeRegistry",
	"locate",
	"qualified_name",
	"register_type",
]
