"""
Capability discovery: which properties of a type can be set, and how.

A type's mutation capabilities are derived purely from its runtime shape:

- Methods named ``set_<name>`` / ``set<Name>`` are scalar mutators
- ``property`` objects are scalar mutators (read-only without a setter)
- Dataclass fields are scalar mutators (read-only when frozen)
- Methods named ``add_<name>`` / ``add<Name>`` are collection adders

Scalar properties are keyed by decapitalized name, adders by capitalized
name. When a name has several mutators, an explicit setter method wins over
a property, and a property wins over a dataclass field.
"""

import dataclasses
import inspect
import logging
import re
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from propconf.config import SetterConfig
from propconf.default_classes import DEFAULT_CLASS_METADATA_KEY, DefaultHint, get_hint

logger = logging.getLogger(__name__)

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def decapitalize(name: str) -> str:
    """Lower-case the first letter unless the first two letters are upper case.

    >>> decapitalize("Name"), decapitalize("URL"), decapitalize("name")
    ('name', 'URL', 'name')
    """
    if not name:
        return name
    if len(name) > 1 and name[0].isupper() and name[1].isupper():
        return name
    return name[0].lower() + name[1:]


def capitalize_first_letter(name: str) -> str:
    return name[:1].upper() + name[1:]


def camel_to_snake(name: str) -> str:
    """Convert CamelCase/camelCase to snake_case."""
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', name)
    return re.sub('([a-z0-9])([A-Z])', r'\1_\2', s1).lower()


class MutatorKind(Enum):
    METHOD = "method"
    PROPERTY = "property"
    FIELD = "field"


@dataclass(frozen=True)
class MutatorDescriptor:
    """One way of mutating a target: a method, a property setter or a field.

    ``parameters`` are the value parameters, i.e. without ``self``.
    """
    name: str
    kind: MutatorKind
    function: Optional[Callable] = None
    parameters: Tuple[inspect.Parameter, ...] = ()
    parameter_types: Tuple[Any, ...] = ()
    default_class: Optional[DefaultHint] = None

    @property
    def arity(self) -> int:
        return len(self.parameters)

    @property
    def parameter_type(self) -> Any:
        """Declared type of the single value parameter, None unless arity is 1."""
        if self.arity != 1:
            return None
        return self.parameter_types[0]

    def invoke(self, target: Any, value: Any) -> Any:
        if self.kind is MutatorKind.FIELD:
            setattr(target, self.name, value)
            return None
        return self.function(target, value)

    def __str__(self) -> str:
        return f"{self.kind.value} {self.name}"


@dataclass(frozen=True)
class PropertyDescriptor:
    """A named scalar property; ``write`` is None when it cannot be set."""
    name: str
    write: Optional[MutatorDescriptor] = None
    kind: MutatorKind = MutatorKind.METHOD

    @property
    def writable(self) -> bool:
        return self.write is not None


@dataclass
class Capabilities:
    """Scalar properties and adders discovered on one type."""
    properties: Dict[str, PropertyDescriptor] = field(default_factory=dict)
    adders: Dict[str, MutatorDescriptor] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> 'Capabilities':
        return cls()

    def find_property(self, name: str, snake_case_fallback: bool = True) -> Optional[PropertyDescriptor]:
        for key in candidate_names(name, snake_case_fallback):
            descriptor = self.properties.get(key)
            if descriptor is not None:
                return descriptor
        return None

    def find_adder(self, name: str, snake_case_fallback: bool = True) -> Optional[MutatorDescriptor]:
        for key in candidate_names(name, snake_case_fallback):
            adder = self.adders.get(capitalize_first_letter(key))
            if adder is not None:
                return adder
        return None


def candidate_names(name: str, snake_case_fallback: bool = True) -> Iterator[str]:
    """Normalized spellings under which ``name`` may be registered."""
    primary = decapitalize(name)
    yield primary
    if snake_case_fallback:
        snake = camel_to_snake(name)
        if snake != primary:
            yield snake


def strip_prefix(attr_name: str, prefixes: Tuple[str, ...]) -> Optional[str]:
    """Property name encoded in attr_name after one of prefixes, or None.

    A prefix without a trailing underscore only matches camelCase names.
    """
    for prefix in prefixes:
        if not attr_name.startswith(prefix) or len(attr_name) == len(prefix):
            continue
        rest = attr_name[len(prefix):]
        if prefix.endswith("_"):
            if not rest.startswith("_"):
                return rest
        elif rest[0].isupper():
            return rest
    return None


def _resolved_hints(obj: Any) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except Exception as e:
        # Unresolvable forward references fall back to the raw annotations
        logger.debug(f"Could not resolve type hints of {obj!r}: {e}")
        return {}


def describe_function(attr_name: str, func: Callable, kind: MutatorKind) -> MutatorDescriptor:
    """Describe an unbound function whose first parameter is the target."""
    signature = inspect.signature(func)
    parameters = tuple(
        p for p in list(signature.parameters.values())[1:] if p.kind not in _VARIADIC
    )
    hints = _resolved_hints(func)
    parameter_types = tuple(
        hints.get(p.name, Any if p.annotation is inspect.Parameter.empty else p.annotation)
        for p in parameters
    )
    return MutatorDescriptor(
        name=attr_name,
        kind=kind,
        function=func,
        parameters=parameters,
        parameter_types=parameter_types,
        default_class=get_hint(func),
    )


def _describe_fields(target_type: type) -> Dict[str, PropertyDescriptor]:
    frozen = target_type.__dataclass_params__.frozen
    hints = _resolved_hints(target_type)
    result = {}
    for f in dataclasses.fields(target_type):
        if f.name.startswith("_"):
            continue
        write = None
        if not frozen:
            write = MutatorDescriptor(
                name=f.name,
                kind=MutatorKind.FIELD,
                parameters=(inspect.Parameter(f.name, inspect.Parameter.POSITIONAL_OR_KEYWORD),),
                parameter_types=(hints.get(f.name, f.type),),
                default_class=f.metadata.get(DEFAULT_CLASS_METADATA_KEY),
            )
        result[decapitalize(f.name)] = PropertyDescriptor(f.name, write, MutatorKind.FIELD)
    return result


def introspect(target_type: type, config: Optional[SetterConfig] = None) -> Capabilities:
    """
    Discover the scalar mutators and adders of target_type.

    Args:
        target_type: Runtime type of the object to configure
        config: Naming conventions; the built-in defaults when omitted

    Returns:
        Capabilities keyed by normalized property name

    Raises:
        Exception: Whatever the underlying introspection raises; the caller
            reports it and continues with empty capabilities
    """
    config = config or SetterConfig()
    fields_found: Dict[str, PropertyDescriptor] = {}
    properties_found: Dict[str, PropertyDescriptor] = {}
    methods_found: Dict[str, PropertyDescriptor] = {}
    adders: Dict[str, MutatorDescriptor] = {}

    if config.include_dataclass_fields and dataclasses.is_dataclass(target_type):
        fields_found = _describe_fields(target_type)

    for attr_name in sorted(dir(target_type)):
        if attr_name.startswith("_"):
            continue
        try:
            raw = inspect.getattr_static(target_type, attr_name)
        except AttributeError:
            # Listed by a custom __dir__ but not actually present
            continue

        if isinstance(raw, property):
            if not config.include_properties:
                continue
            write = describe_function(attr_name, raw.fset, MutatorKind.PROPERTY) if raw.fset else None
            properties_found[decapitalize(attr_name)] = PropertyDescriptor(
                attr_name, write, MutatorKind.PROPERTY)
            continue

        # Static and class methods cannot mutate an instance
        if not inspect.isfunction(raw):
            continue

        setter_name = strip_prefix(attr_name, config.setter_prefixes)
        if setter_name is not None:
            key = decapitalize(setter_name)
            methods_found[key] = PropertyDescriptor(key, describe_function(attr_name, raw, MutatorKind.METHOD))

        adder_name = strip_prefix(attr_name, config.adder_prefixes)
        if adder_name is not None:
            adders[capitalize_first_letter(adder_name)] = describe_function(
                attr_name, raw, MutatorKind.METHOD)

    capabilities = Capabilities(
        properties={**fields_found, **properties_found, **methods_found},
        adders=adders,
    )
    logger.debug(f"Introspected {target_type.__qualname__}: "
                 f"properties={sorted(capabilities.properties)}, adders={sorted(capabilities.adders)}")
    return capabilities
