from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class SerializerConfig:
	"""
	Configuration shared by every call made through a ``Serializer``.

	Attributes:
	    autoload (bool): Resolve unregistered type names by importing them.
	    strict_fields (bool): Reject incoming fields the type does not declare.
	    max_depth (int | None): Maximum nesting depth accepted while encoding.
	    call_restore_hook (bool): Invoke ``__restore__`` after fields are set.
	"""

	autoload: bool = True
	"""Import ``module.QualName`` on decode when the name is not registered.

	A payload can then make the decoder import any module on ``sys.path``.
	Turn this off and register the expected types when decoding untrusted input.
	"""

	strict_fields: bool = False
	"""When False, undeclared fields are attached to the instance ``__dict__``."""

	max_depth: int | None = None
	"""Nesting limit for encoding. None means bounded only by the interpreter."""

	call_restore_hook: bool = True

	def __post_init__(self) -> None:
		if self.max_depth is not None and self.max_depth < 1:
			raise ValueError("SerializerConfig.max_depth must be a positive integer")


DEFAULT_CONFIG = SerializerConfig()

__all__ = ["DEFAULT_CONFIG", "SerializerConfig"]
