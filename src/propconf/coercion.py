"""
String coercion for configuration values.

The declarative source only ever yields strings. This module is the single
place that turns such a string into a value of a mutator's parameter type:

- builtin scalars (str, bool, int, float, complex)
- Enum members, looked up by exact name
- any type with a registered string factory (Decimal and Path by default)
- any type exposing a static ``value_of``/``valueOf(str)`` factory

Everything else is not convertible from a string and yields None.
"""

import decimal
import inspect
import logging
import pathlib
import types
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Union, get_args, get_origin

from propconf.errors import ConversionError, qualified_name
from propconf.status import Context, ContextAwareBase

logger = logging.getLogger(__name__)

DEFAULT_FACTORY_METHOD_NAMES: Tuple[str, ...] = ("value_of", "valueOf")

# Builtins parsed directly from a string; bool is covered through int
_SCALAR_TYPES: Tuple[type, ...] = (str, int, float, complex)

# Type -> callable building an instance from a single string
_string_factories: Dict[type, Callable[[str], Any]] = {
    decimal.Decimal: decimal.Decimal,
    pathlib.Path: pathlib.Path,
}


class TypeCategory(Enum):
    """How a parameter type is fed from a string."""
    BASIC = "basic"
    ENUM = "enum"
    STRING_BUILDABLE = "string_buildable"
    COMPLEX = "complex"

    @property
    def is_basic(self) -> bool:
        return self is not TypeCategory.COMPLEX


def register_string_factory(target_type: type, factory: Callable[[str], Any]) -> None:
    """Register a callable that builds ``target_type`` from one string."""
    _string_factories[target_type] = factory


def unregister_string_factory(target_type: type) -> None:
    _string_factories.pop(target_type, None)


def get_string_factory(target_type: type) -> Optional[Callable[[str], Any]]:
    """Registered factory for target_type or its nearest registered base."""
    for klass in target_type.__mro__:
        if klass in _string_factories:
            return _string_factories[klass]
    return None


def unwrap_optional(param_type: Any) -> Any:
    """Optional[X] and X | None unwrap to X; anything else is returned as is."""
    origin = get_origin(param_type)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(param_type) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return param_type


def is_any_type(param_type: Any) -> bool:
    """True for annotations that accept anything (Any, object, missing)."""
    return param_type is Any or param_type is object or param_type is inspect.Parameter.empty


def find_factory_method(target_type: type,
                        method_names: Tuple[str, ...] = DEFAULT_FACTORY_METHOD_NAMES
                        ) -> Optional[Callable[[str], Any]]:
    """Return the bound static/class string factory of target_type, if any."""
    for method_name in method_names:
        try:
            raw = inspect.getattr_static(target_type, method_name)
        except AttributeError:
            continue
        if isinstance(raw, (staticmethod, classmethod)):
            return getattr(target_type, method_name)
    return None


def is_buildable_from_string(target_type: Any,
                             method_names: Tuple[str, ...] = DEFAULT_FACTORY_METHOD_NAMES) -> bool:
    if not isinstance(target_type, type):
        return False
    return (get_string_factory(target_type) is not None
            or find_factory_method(target_type, method_names) is not None)


def type_category(param_type: Any,
                  method_names: Tuple[str, ...] = DEFAULT_FACTORY_METHOD_NAMES) -> TypeCategory:
    """Classify a parameter type by how it can be produced from a string."""
    param_type = unwrap_optional(param_type)
    if is_any_type(param_type):
        return TypeCategory.BASIC
    if not isinstance(param_type, type):
        # Subscripted generics classify by their origin (List[str] -> list)
        origin = get_origin(param_type)
        if not isinstance(origin, type):
            return TypeCategory.COMPLEX
        param_type = origin
    if issubclass(param_type, Enum):
        return TypeCategory.ENUM
    if issubclass(param_type, _SCALAR_TYPES):
        return TypeCategory.BASIC
    if is_buildable_from_string(param_type, method_names):
        return TypeCategory.STRING_BUILDABLE
    return TypeCategory.COMPLEX


class StringConverter(ContextAwareBase):
    """Converts configuration strings into typed values.

    Enum lookup failures are reported into the context and yield None.
    Malformed numbers and failing factories raise ConversionError.
    """

    def __init__(self, context: Optional[Context] = None,
                 factory_method_names: Tuple[str, ...] = DEFAULT_FACTORY_METHOD_NAMES):
        super().__init__(context)
        self.factory_method_names = factory_method_names

    def convert(self, value: Optional[str], target_type: Any) -> Any:
        """
        Convert value to target_type.

        Args:
            value: Raw string from the configuration source
            target_type: Declared parameter type of the mutator

        Returns:
            The converted value, or None when target_type cannot be built
            from a string or the string is not a valid member/boolean

        Raises:
            ConversionError: Malformed numeric input or a failing factory
        """
        if value is None:
            return None
        target_type = unwrap_optional(target_type)
        if is_any_type(target_type):
            return value
        if not isinstance(target_type, type):
            return None

        trimmed = value.strip()
        if issubclass(target_type, Enum):
            return self._convert_enum(value, target_type)
        if issubclass(target_type, bool):
            if trimmed.lower() == "true":
                return True
            if trimmed.lower() == "false":
                return False
            return None
        if target_type is str:
            return value
        if issubclass(target_type, str):
            try:
                return target_type(value)
            except (ValueError, TypeError) as e:
                raise ConversionError(value, target_type, str(e)) from e
        if issubclass(target_type, (int, float, complex)):
            try:
                return target_type(trimmed)
            except (ValueError, TypeError) as e:
                raise ConversionError(value, target_type, str(e)) from e

        factory = get_string_factory(target_type) or find_factory_method(
            target_type, self.factory_method_names)
        if factory is not None:
            return self._build_from_string(factory, value, target_type)
        return None

    def _convert_enum(self, value: str, enum_type: type) -> Any:
        try:
            return enum_type[value]
        except KeyError as e:
            self.add_error(f"Failed to convert value [{value}] to enum [{qualified_name(enum_type)}]", e)
            return None

    def _build_from_string(self, factory: Callable[[str], Any], value: str, target_type: type) -> Any:
        try:
            result = factory(value)
        except Exception as e:
            raise ConversionError(
                value, target_type,
                f"Failed to build [{qualified_name(target_type)}] from value [{value}]: {e}"
            ) from e
        logger.debug(f"Built {qualified_name(target_type)} from {value!r}")
        return result
