"""Wire strategies.

A strategy turns an IR tree into a payload and back. The core only ever calls
``encode(node)`` and ``decode(payload)``; nothing outside this module knows
the textual grammar.

The JSON and YAML strategies share one tagged tree::

    {"@scalar": "integer", "@value": 42}
    {"@map": "list", "@value": [<node>, ...]}
    {"@map": "dict", "@value": {"key": <node>, ...}}
    {"@map": "pairs", "@value": [[<scalar node>, <node>], ...]}
    {"@type": "pkg.Class", "field": <node>, ..., "@items": <node>}
    {"@type": "@3"}

``pairs`` is used when a mapping has keys that are not all strings, so that
``{1: ...}`` and ``{"1": ...}`` stay distinct. Field names starting with ``@``
are escaped by doubling the ``@``.
"""

from __future__ import annotations

import json
import math
from abc import ABC, abstractmethod
from typing import Any, Protocol

import yaml

from graphserial.classify import scalar_kind
from graphserial.codec import scalar_value
from graphserial.errors import DecodeError, MalformedIRError
from graphserial.nodes import (
	BackReference,
	Composite,
	Mapping,
	Node,
	Scalar,
	Sequence,
)

TYPE_KEY = "@type"
SCALAR_TYPE = "@scalar"
SCALAR_VALUE = "@value"
MAP_TYPE = "@map"
ITEMS_KEY = "@items"

Tree = dict[str, Any]


class Strategy(Protocol):
	def encode(self, node: Node) -> Any: ...
	def decode(self, payload: Any) -> Node: ...


class NullStrategy:
	"""Hands the IR through untouched in both directions."""

	def encode(self, node: Node) -> Node:
		return node

	def decode(self, payload: Any) -> Node:
		if not isinstance(payload, Node):
			raise DecodeError(f"NullStrategy expects an IR node, got {type(payload).__name__}")
		return payload


# =============================================================================
# Tagged tree
# =============================================================================
def to_tree(node: Node) -> Tree:
	if isinstance(node, Scalar):
		return {SCALAR_TYPE: node.kind, SCALAR_VALUE: _wire_literal(node)}

	if isinstance(node, Sequence):
		return {MAP_TYPE: "list", SCALAR_VALUE: [to_tree(entry) for entry in node.entries]}

	if isinstance(node, Mapping):
		if all(type(key) is str for key, _ in node.entries):
			return {
				MAP_TYPE: "dict",
				SCALAR_VALUE: {key: to_tree(entry) for key, entry in node.entries},
			}
		return {
			MAP_TYPE: "pairs",
			SCALAR_VALUE: [
				[_key_tree(key), to_tree(entry)] for key, entry in node.entries
			],
		}

	if isinstance(node, BackReference):
		return {TYPE_KEY: f"@{node.index}"}

	if isinstance(node, Composite):
		tree: Tree = {TYPE_KEY: node.type_name}
		for name, child in node.fields:
			tree[_escape(name)] = to_tree(child)
		if node.items is not None:
			tree[ITEMS_KEY] = to_tree(node.items)
		return tree

	raise MalformedIRError(f"Unknown IR node {type(node).__name__}")


def from_tree(tree: Any) -> Node:
	if not isinstance(tree, dict):
		raise MalformedIRError(f"Expected a tagged object, got {type(tree).__name__}")

	if SCALAR_TYPE in tree:
		kind = tree[SCALAR_TYPE]
		if not isinstance(kind, str):
			raise MalformedIRError("Scalar tag must be a string")
		if SCALAR_VALUE not in tree:
			raise MalformedIRError(f"Scalar of kind {kind!r} is missing its literal")
		literal = tree[SCALAR_VALUE]
		if isinstance(literal, (list, dict)):
			raise MalformedIRError(f"Scalar of kind {kind!r} holds a container")
		return Scalar(kind, literal)  # pyright: ignore[reportArgumentType]

	if MAP_TYPE in tree:
		return _container_from_tree(tree)

	if TYPE_KEY in tree:
		type_name = tree[TYPE_KEY]
		if not isinstance(type_name, str) or not type_name:
			raise MalformedIRError("Composite type tag must be a non-empty string")
		if type_name.startswith("@"):
			try:
				return BackReference(int(type_name[1:]))
			except ValueError:
				raise MalformedIRError(f"Invalid back-reference {type_name!r}") from None
		fields = [
			(_unescape(key), from_tree(child))
			for key, child in tree.items()
			if key not in (TYPE_KEY, ITEMS_KEY)
		]
		items = from_tree(tree[ITEMS_KEY]) if ITEMS_KEY in tree else None
		return Composite(type_name, fields, items)

	raise MalformedIRError(f"Untagged object with keys {sorted(map(str, tree))}")


def _container_from_tree(tree: Tree) -> Node:
	shape = tree[MAP_TYPE]
	if SCALAR_VALUE not in tree:
		raise MalformedIRError(f"Container {shape!r} is missing its entries")
	entries = tree[SCALAR_VALUE]

	if shape == "list" and isinstance(entries, list):
		return Sequence([from_tree(entry) for entry in entries])

	if shape == "dict" and isinstance(entries, dict):
		if not all(isinstance(key, str) for key in entries):
			raise MalformedIRError("Keys of a dict container must be strings")
		return Mapping([(key, from_tree(entry)) for key, entry in entries.items()])

	if shape == "pairs" and isinstance(entries, list):
		pairs: list[tuple[Any, Node]] = []
		for pair in entries:
			if not isinstance(pair, list) or len(pair) != 2:
				raise MalformedIRError("Mapping pairs must be [key, value] lists")
			key = from_tree(pair[0])
			if not isinstance(key, Scalar):
				raise MalformedIRError("Mapping keys must be scalars")
			pairs.append((scalar_value(key), from_tree(pair[1])))
		return Mapping(pairs)

	raise MalformedIRError(f"Invalid container {shape!r}")


def _wire_literal(node: Scalar) -> Any:
	literal = node.literal
	if isinstance(literal, float) and not math.isfinite(literal):
		return repr(literal)
	return literal


def _key_tree(key: Any) -> Tree:
	return to_tree(Scalar(scalar_kind(key), key))


def _escape(name: str) -> str:
	return f"@{name}" if name.startswith("@") else name


def _unescape(name: str) -> str:
	if name.startswith("@@"):
		return name[1:]
	if name.startswith("@"):
		raise MalformedIRError(f"Unknown tag {name!r}")
	return name


class TaggedTreeStrategy(ABC):
	"""Base for text strategies built on the tagged tree."""

	def encode(self, node: Node) -> str:
		return self.dumps(to_tree(node))

	def decode(self, payload: Any) -> Node:
		return from_tree(self.loads(payload))

	@abstractmethod
	def dumps(self, tree: Tree) -> str: ...

	@abstractmethod
	def loads(self, text: Any) -> Any: ...


# =============================================================================
# JSON / YAML
# =============================================================================
class JsonStrategy(TaggedTreeStrategy):
	indent: int | None

	def __init__(self, indent: int | None = None) -> None:
		self.indent = indent

	def dumps(self, tree: Tree) -> str:
		return json.dumps(tree, indent=self.indent, ensure_ascii=False, allow_nan=False)

	def loads(self, text: Any) -> Any:
		try:
			return json.loads(text)
		except (TypeError, ValueError) as exc:
			raise DecodeError(f"Invalid JSON payload: {exc}") from exc


class YamlStrategy(TaggedTreeStrategy):
	def dumps(self, tree: Tree) -> str:
		return yaml.safe_dump(tree, sort_keys=False, allow_unicode=True)

	def loads(self, text: Any) -> Any:
		if not isinstance(text, (str, bytes)):
			raise DecodeError(f"YAML payload must be text, got {type(text).__name__}")
		try:
			return yaml.safe_load(text)
		except yaml.YAMLError as exc:
			raise DecodeError(f"Invalid YAML payload: {exc}") from exc


__all__ = [
	"JsonStrategy",
	"NullStrategy",
	"Strategy",
	"TaggedTreeStrategy",
	"YamlStrategy",
	"from_tree",
	"to_tree",
]
