import array
import collections
import datetime as dt
import io
import itertools
import re
import threading
import types
import zoneinfo
from decimal import Decimal

import pytest
from graphserial.adapters import DateTimeAdapter, default_adapters
from graphserial.classify import Category, classify, guard_supported, scalar_kind
from graphserial.errors import UnsupportedValueError
from graphserial.nodes import Scalar

from models import Frozen, Node, Point, Tagged


@pytest.fixture
def adapters():
	return default_adapters()


@pytest.mark.parametrize(
	("value", "kind"),
	[
		(None, "null"),
		(True, "boolean"),
		(0, "integer"),
		(2.0, "float"),
		("x", "string"),
	],
)
def test_scalar_kinds(value, kind):
	assert classify(value) is Category.SCALAR
	assert scalar_kind(value) == kind


def test_bool_is_not_an_integer():
	assert scalar_kind(False) == "boolean"


def test_plain_containers():
	assert classify([1, 2]) is Category.SEQUENCE
	assert classify({"a": 1}) is Category.MAPPING


def test_ir_nodes_pass_through():
	assert classify(Scalar("integer", 1)) is Category.NODE


@pytest.mark.parametrize(
	"value",
	[(1, 2), {1, 2}, frozenset({1}), collections.deque([1]), Tagged([1]), Point(1, 2)],
)
def test_typed_containers_are_iterable_composites(value):
	assert classify(value) is Category.ITERABLE


def test_dict_subclass_is_iterable_composite():
	assert classify(collections.OrderedDict(a=1)) is Category.ITERABLE


def test_objects_are_composites():
	assert classify(Node("root")) is Category.COMPOSITE
	assert classify(Frozen(1)) is Category.COMPOSITE
	assert classify(object()) is Category.COMPOSITE


def test_well_known_types_route_to_adapters(adapters):
	assert classify(dt.datetime(2024, 1, 1), adapters) is Category.ADAPTER
	assert classify(Decimal("1.5"), adapters) is Category.ADAPTER
	assert classify(b"raw", adapters) is Category.ADAPTER


def test_without_adapters_bytes_are_unsupported():
	assert classify(b"raw") is Category.UNSUPPORTED


def _generator():
	yield 1


@pytest.mark.parametrize(
	"value",
	[
		lambda: None,
		print,
		Node,
		itertools,
		_generator(),
		iter([1]),
		itertools.count(),
		range(10),
		io.StringIO("x"),
		threading.Lock(),
		1j,
		array.array("i", [1, 2, 3]),
		re.compile("a+"),
	],
	ids=[
		"lambda",
		"builtin",
		"class",
		"module",
		"generator",
		"iterator",
		"count",
		"range",
		"file",
		"lock",
		"complex",
		"array",
		"pattern",
	],
)
def test_unsupported_values(value):
	assert classify(value) is Category.UNSUPPORTED
	with pytest.raises(UnsupportedValueError):
		guard_supported(value)


def test_unsupported_error_carries_value_type():
	with pytest.raises(UnsupportedValueError) as info:
		guard_supported(range(3))
	assert info.value.value_type is range
	assert "Loop through it" in str(info.value)


def test_extension_type_error_names_the_type():
	with pytest.raises(UnsupportedValueError, match="array.array"):
		guard_supported(array.array("b"))


def test_extension_type_with_instance_dict_is_composite():
	assert classify(types.SimpleNamespace(a=1)) is Category.COMPOSITE


def test_zoneinfo_routes_to_adapter(adapters):
	assert isinstance(adapters.find(zoneinfo.ZoneInfo), DateTimeAdapter)
