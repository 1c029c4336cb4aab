from __future__ import annotations

from typing import Any


class SerializerError(Exception):
	"""Base class for every error raised by graphserial."""


# =============================================================================
# Encoding
# =============================================================================
class EncodeError(SerializerError):
	"""A value graph could not be converted into IR."""


class UnsupportedValueError(EncodeError):
	"""Raised on closures, lazy ranges and live resource handles.

	These values cannot be reconstructed meaningfully, so the whole
	``serialize`` call is aborted before any output is produced.
	"""

	value_type: type[Any] | None

	def __init__(self, message: str, *, value_type: type[Any] | None = None) -> None:
		super().__init__(message)
		self.value_type = value_type


class DepthLimitError(EncodeError):
	"""The value graph is nested deeper than the configured ``max_depth``."""

	depth: int

	def __init__(self, depth: int) -> None:
		super().__init__(f"Value graph exceeds the maximum depth of {depth}")
		self.depth = depth


# =============================================================================
# Decoding
# =============================================================================
class DecodeError(SerializerError):
	"""A payload could not be turned back into values."""


class MalformedIRError(DecodeError):
	"""IR shape invariants are violated (missing tags, wrong literal types)."""


class UnknownFieldError(MalformedIRError):
	"""A field name cannot be assigned on the reconstructed object."""

	type_name: str
	field: str

	def __init__(self, type_name: str, field: str, reason: str | None = None) -> None:
		message = f"Cannot assign field {field!r} on {type_name}"
		if reason:
			message = f"{message}: {reason}"
		super().__init__(message)
		self.type_name = type_name
		self.field = field


class UnknownTypeError(DecodeError):
	"""A ``Composite`` names a type that cannot be resolved."""

	type_name: str

	def __init__(self, type_name: str) -> None:
		super().__init__(f"Unable to find class {type_name}")
		self.type_name = type_name


class DanglingReferenceError(DecodeError):
	"""A back-reference points at an index that was never materialised."""

	index: int

	def __init__(self, index: int) -> None:
		super().__init__(f"Dangling back-reference to object #{index}")
		self.index = index


# =============================================================================
# Registries
# =============================================================================
class TypeAlreadyRegisteredError(SerializerError):
	"""A type name is already bound to a different class."""


__all__ = [
	"DanglingReferenceError",
	"DecodeError",
	"DepthLimitError",
	"EncodeError",
	"MalformedIRError",
	"SerializerError",
	"TypeAlreadyRegisteredError",
	"UnknownFieldError",
	"UnknownTypeError",
	"UnsupportedValueError",
]
