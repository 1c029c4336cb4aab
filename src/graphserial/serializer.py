"""
Public entry points.

A ``Serializer`` pairs the value <-> IR engine with a wire strategy::

    serializer = JsonSerializer()
    text = serializer.serialize(order)
    copy = serializer.unserialize(text)

The serializer itself only holds configuration and registries. Every call
builds a fresh ``IRCodec`` with its own identity tables, so a single instance
can be shared between threads as long as each value graph is not mutated
while it is being serialized.
"""

from __future__ import annotations

import logging
from typing import Any

from graphserial.accessor import PropertyAccessor
from graphserial.adapters import AdapterRegistry, default_adapters
from graphserial.codec import IRCodec
from graphserial.config import DEFAULT_CONFIG, SerializerConfig
from graphserial.nodes import Node, walk
from graphserial.reconstruct import ObjectReconstructor
from graphserial.registry import TYPE_REGISTRY, TypeRegistry
from graphserial.strategies import JsonStrategy, NullStrategy, Strategy, YamlStrategy

logger = logging.getLogger(__name__)


class Serializer:
	__slots__: tuple[str, ...] = (
		"_strategy",
		"config",
		"registry",
		"adapters",
		"accessor",
		"reconstructor",
	)

	_strategy: Strategy
	config: SerializerConfig
	registry: TypeRegistry
	adapters: AdapterRegistry
	accessor: PropertyAccessor
	reconstructor: ObjectReconstructor

	def __init__(
		self,
		strategy: Strategy,
		*,
		config: SerializerConfig | None = None,
		registry: TypeRegistry | None = None,
		adapters: AdapterRegistry | None = None,
	) -> None:
		self._strategy = strategy
		self.config = config or DEFAULT_CONFIG
		self.registry = registry if registry is not None else TYPE_REGISTRY
		self.adapters = adapters if adapters is not None else default_adapters()
		self.accessor = PropertyAccessor(strict=self.config.strict_fields)
		self.reconstructor = ObjectReconstructor(
			self.registry,
			self.accessor,
			self.adapters,
			autoload=self.config.autoload,
			call_restore_hook=self.config.call_restore_hook,
		)

	@property
	def strategy(self) -> Strategy:
		"""The wire strategy, e.g. to tweak its options before serializing."""
		return self._strategy

	def codec(self) -> IRCodec:
		"""A fresh codec with empty identity tables."""
		return IRCodec(
			self.registry,
			self.adapters,
			self.accessor,
			self.reconstructor,
			self.config,
		)

	def to_ir(self, value: Any) -> Node:
		codec = self.codec()
		node = codec.to_ir(value)
		if logger.isEnabledFor(logging.DEBUG):
			logger.debug(
				"Encoded %s into %d IR nodes (%d tracked objects)",
				type(value).__name__,
				sum(1 for _ in walk(node)),
				len(codec.tracker),
			)
		return node

	def from_ir(self, node: Node) -> Any:
		codec = self.codec()
		value = codec.from_ir(node)
		logger.debug(
			"Decoded %s (%d objects restored)", type(value).__name__, len(codec.table)
		)
		return value

	def serialize(self, value: Any) -> Any:
		# The whole graph is converted before the strategy sees anything, so
		# an unsupported value never produces partial output
		return self._strategy.encode(self.to_ir(value))

	def unserialize(self, payload: Any) -> Any:
		if isinstance(payload, Node):
			return self.from_ir(payload)
		return self.from_ir(self._strategy.decode(payload))


class JsonSerializer(Serializer):
	__slots__: tuple[str, ...] = ()

	def __init__(self, *, indent: int | None = None, **kwargs: Any) -> None:
		super().__init__(JsonStrategy(indent=indent), **kwargs)


class YamlSerializer(Serializer):
	__slots__: tuple[str, ...] = ()

	def __init__(self, **kwargs: Any) -> None:
		super().__init__(YamlStrategy(), **kwargs)


class DeepCopySerializer(Serializer):
	"""Round-trips through the IR only, yielding an independent deep copy."""

	__slots__: tuple[str, ...] = ()

	def __init__(self, **kwargs: Any) -> None:
		super().__init__(NullStrategy(), **kwargs)

	def copy(self, value: Any) -> Any:
		return self.unserialize(self.serialize(value))


_json = JsonSerializer()
_deep_copy = DeepCopySerializer()


def serialize(value: Any) -> str:
	"""Serialize ``value`` to JSON with the default configuration."""
	return _json.serialize(value)


def unserialize(text: str) -> Any:
	return _json.unserialize(text)


def deep_copy(value: Any) -> Any:
	return _deep_copy.copy(value)


__all__ = [
	"DeepCopySerializer",
	"JsonSerializer",
	"Serializer",
	"YamlSerializer",
	"deep_copy",
	"serialize",
	"unserialize",
]
