import pytest
from graphserial import (
	DeepCopySerializer,
	JsonSerializer,
	Serializer,
	TypeRegistry,
	YamlSerializer,
)
from graphserial.strategies import NullStrategy


@pytest.fixture
def registry() -> TypeRegistry:
	return TypeRegistry()


@pytest.fixture
def json_serializer(registry: TypeRegistry) -> JsonSerializer:
	return JsonSerializer(registry=registry)


@pytest.fixture
def yaml_serializer(registry: TypeRegistry) -> YamlSerializer:
	return YamlSerializer(registry=registry)


@pytest.fixture
def ir_serializer(registry: TypeRegistry) -> Serializer:
	"""Serializer whose payload is the IR itself."""
	return Serializer(NullStrategy(), registry=registry)


@pytest.fixture
def copier(registry: TypeRegistry) -> DeepCopySerializer:
	return DeepCopySerializer(registry=registry)
