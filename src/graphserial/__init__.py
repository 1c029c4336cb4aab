"""Type-preserving serialization of arbitrary object graphs."""

# Adapters
from graphserial.adapters import Adapter as Adapter
from graphserial.adapters import AdapterRegistry as AdapterRegistry
from graphserial.adapters import BytesAdapter as BytesAdapter
from graphserial.adapters import DateTimeAdapter as DateTimeAdapter
from graphserial.adapters import DecimalAdapter as DecimalAdapter
from graphserial.adapters import EnumAdapter as EnumAdapter
from graphserial.adapters import TypeAdapter as TypeAdapter
from graphserial.adapters import UUIDAdapter as UUIDAdapter
from graphserial.adapters import default_adapters as default_adapters

# Engine
from graphserial.codec import IRCodec as IRCodec
from graphserial.config import SerializerConfig as SerializerConfig

# Errors
from graphserial.errors import DanglingReferenceError as DanglingReferenceError
from graphserial.errors import DecodeError as DecodeError
from graphserial.errors import DepthLimitError as DepthLimitError
from graphserial.errors import EncodeError as EncodeError
from graphserial.errors import MalformedIRError as MalformedIRError
from graphserial.errors import SerializerError as SerializerError
from graphserial.errors import TypeAlreadyRegisteredError as TypeAlreadyRegisteredError
from graphserial.errors import UnknownFieldError as UnknownFieldError
from graphserial.errors import UnknownTypeError as UnknownTypeError
from graphserial.errors import UnsupportedValueError as UnsupportedValueError

# IR nodes
from graphserial.nodes import BackReference as BackReference
from graphserial.nodes import Composite as Composite
from graphserial.nodes import Mapping as Mapping
from graphserial.nodes import Node as Node
from graphserial.nodes import Scalar as Scalar
from graphserial.nodes import Sequence as Sequence

# Type registry
from graphserial.registry import TYPE_REGISTRY as TYPE_REGISTRY
from graphserial.registry import TypeRegistry as TypeRegistry
from graphserial.registry import register_type as register_type

# Serializers
from graphserial.serializer import DeepCopySerializer as DeepCopySerializer
from graphserial.serializer import JsonSerializer as JsonSerializer
from graphserial.serializer import Serializer as Serializer
from graphserial.serializer import YamlSerializer as YamlSerializer
from graphserial.serializer import deep_copy as deep_copy
from graphserial.serializer import serialize as serialize
from graphserial.serializer import unserialize as unserialize

# Strategies
from graphserial.strategies import JsonStrategy as JsonStrategy
from graphserial.strategies import NullStrategy as NullStrategy
from graphserial.strategies import Strategy as Strategy
from graphserial.strategies import YamlStrategy as YamlStrategy
