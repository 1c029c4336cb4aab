import datetime as dt
import enum
import uuid
import zoneinfo
from decimal import Decimal
from typing import Any

import pytest
from graphserial import Serializer
from graphserial.adapters import AdapterRegistry, TypeAdapter, default_adapters
from graphserial.errors import MalformedIRError
from graphserial.nodes import Composite, Scalar
from graphserial.strategies import NullStrategy

from models import Pair


class Color(enum.Enum):
	RED = "red"
	GREEN = "green"


class Priority(enum.IntEnum):
	LOW = 1
	HIGH = 2


@pytest.mark.parametrize(
	"value",
	[
		dt.datetime(2024, 5, 17, 12, 30, 5, 123456),
		dt.datetime(2024, 5, 17, 12, 30, tzinfo=dt.timezone.utc),
		dt.datetime(2024, 5, 17, 12, 30, tzinfo=dt.timezone(dt.timedelta(hours=-3))),
		dt.date(1999, 12, 31),
		dt.time(23, 59, 58, 1),
		dt.timedelta(days=-1, seconds=5, microseconds=7),
		dt.timezone(dt.timedelta(hours=2)),
		dt.timezone(dt.timedelta(hours=2), "CEST"),
		Decimal("1.50"),
		uuid.UUID("12345678-1234-5678-1234-567812345678"),
		b"\x00\xffraw",
		bytearray(b"mutable"),
		Color.GREEN,
		Priority.HIGH,
	],
)
def test_roundtrip(json_serializer, value):
	parsed = json_serializer.unserialize(json_serializer.serialize(value))
	assert type(parsed) is type(value)
	assert parsed == value


def test_zoneinfo_is_kept(json_serializer):
	try:
		zone = zoneinfo.ZoneInfo("Europe/Paris")
	except zoneinfo.ZoneInfoNotFoundError:
		pytest.skip("tz database not available")
	value = dt.datetime(2024, 10, 27, 2, 30, fold=1, tzinfo=zone)
	parsed = json_serializer.unserialize(json_serializer.serialize(value))
	assert parsed.tzinfo == zone
	assert parsed.fold == 1
	assert parsed == value


def test_standalone_zoneinfo(json_serializer):
	try:
		zone = zoneinfo.ZoneInfo("America/New_York")
	except zoneinfo.ZoneInfoNotFoundError:
		pytest.skip("tz database not available")
	text = json_serializer.serialize({"zone": zone})
	assert '"key": {"@scalar": "string", "@value": "America/New_York"}' in text
	assert json_serializer.unserialize(text)["zone"] is zone


def test_datetime_node_shape(ir_serializer: Serializer):
	node = ir_serializer.to_ir(dt.date(2024, 1, 2))
	assert node == Composite("datetime.date", [("iso", Scalar("string", "2024-01-02"))])


def test_enum_members_stay_singletons(copier):
	assert copier.copy(Color.RED) is Color.RED
	assert copier.copy([Priority.LOW, Priority.LOW]) == [Priority.LOW, Priority.LOW]


def test_shared_datetime_keeps_identity(copier):
	stamp = dt.datetime(2024, 1, 1, 9, 0)
	parsed = copier.copy(Pair(stamp, stamp))
	assert parsed.left == stamp
	assert parsed.left is parsed.right


def test_adapter_values_nested_in_objects(json_serializer):
	parsed = json_serializer.unserialize(
		json_serializer.serialize(Pair(Decimal("3.14"), {"at": dt.date(2020, 2, 29)}))
	)
	assert parsed.left == Decimal("3.14")
	assert parsed.right == {"at": dt.date(2020, 2, 29)}


@pytest.mark.parametrize(
	"node",
	[
		Composite("datetime.date", [("iso", Scalar("string", "not a date"))]),
		Composite("datetime.date", []),
		Composite("decimal.Decimal", [("value", Scalar("string", "abc"))]),
		Composite("uuid.UUID", [("hex", Scalar("string", "xyz"))]),
		Composite("builtins.bytes", [("base64", Scalar("string", "!!!"))]),
		Composite("test_adapters.Color", [("name", Scalar("string", "BLUE"))]),
		Composite("zoneinfo.ZoneInfo", [("key", Scalar("string", "No/Such_Zone"))]),
	],
)
def test_invalid_adapter_payloads(ir_serializer: Serializer, node):
	with pytest.raises(MalformedIRError):
		ir_serializer.from_ir(node)


# =============================================================================
# Custom adapters
# =============================================================================


class Money:
	def __init__(self, cents: int, currency: str) -> None:
		self.cents = cents
		self.currency = currency


class MoneyAdapter(TypeAdapter):
	types = (Money,)

	def dump(self, value: Any):
		return [("amount", f"{value.cents / 100:.2f} {value.currency}")]

	def load(self, cls: type[Any], values: dict[str, Any]) -> Any:
		amount, currency = values["amount"].split(" ")
		money = cls.__new__(cls)
		money.cents = round(float(amount) * 100)
		money.currency = currency
		return money


def test_custom_adapter(registry):
	adapters = default_adapters()
	adapters.add(MoneyAdapter(), first=True)
	serializer = Serializer(NullStrategy(), registry=registry, adapters=adapters)

	node = serializer.to_ir(Money(1250, "EUR"))
	assert node == Composite("test_adapters.Money", [("amount", Scalar("string", "12.50 EUR"))])

	parsed = serializer.from_ir(node)
	assert isinstance(parsed, Money)
	assert (parsed.cents, parsed.currency) == (1250, "EUR")


def test_registry_lookup():
	adapters = AdapterRegistry()
	assert adapters.find(dt.datetime) is None
	adapters.add(MoneyAdapter())
	assert isinstance(adapters.find(Money), MoneyAdapter)
	assert adapters.for_name("test_adapters.Money") is not None
	assert adapters.type_named("test_adapters.Money") is Money
	assert len(adapters) == 1
