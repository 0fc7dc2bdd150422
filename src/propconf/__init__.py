"""
Reflective property configuration for arbitrary Python objects.

Given a target object and a stream of (name, string) or (name, object) pairs
from a declarative configuration tree, propconf discovers the target's
setters and adders from its runtime shape, classifies each property, coerces
strings into the declared parameter types and performs the mutation, while
reporting problems instead of aborting the configuration pass.

Key Features:
- Capability discovery from set_/add_ methods, properties and dataclass fields
- String coercion for builtins, enums and string-buildable types
- Aggregation classification (basic/complex, singular/collection)
- Default-class hints for abstract parameter types
- Status reporting into a shared Context, mirrored to logging

Quick Start:
    >>> from propconf import Context, PropertySetter
    >>>
    >>> class Person:
    ...     def set_name(self, name: str): self.name = name
    ...     def set_age(self, age: int): self.age = age
    >>>
    >>> person = Person()
    >>> setter = PropertySetter(person, Context("demo"))
    >>> _ = setter.set_property("name", "Joe")
    >>> setter.set_property("age", "32")
    <BindOutcome.SUCCESS: 'success'>
    >>> person.age
    32

Modules:
    - property_setter: PropertySetter, the public binding surface
    - introspection: capability discovery and name normalization
    - coercion: string-to-type conversion
    - aggregation: AggregationType and classification rules
    - default_classes: default implementation hints
    - status: Context, StatusManager and the ContextAwareBase mixin
    - config: SetterConfig and the process-wide default
    - errors: BindOutcome and the exceptions of the strict path
"""

# Binder
from propconf.property_setter import (
    PropertySetter,
    is_assignable,
    is_unequivocally_instantiable,
)

# Classification
from propconf.aggregation import AggregationType, as_collection, raw_aggregation_type

# Introspection
from propconf.introspection import (
    Capabilities,
    MutatorDescriptor,
    MutatorKind,
    PropertyDescriptor,
    camel_to_snake,
    capitalize_first_letter,
    decapitalize,
    introspect,
)

# Coercion
from propconf.coercion import (
    StringConverter,
    TypeCategory,
    is_buildable_from_string,
    register_string_factory,
    type_category,
    unregister_string_factory,
)

# Default-class hints
from propconf.default_classes import (
    clear_default_class_registry,
    default_class,
    register_default_class,
    unregister_default_class,
)

# Status reporting
from propconf.status import Context, ContextAwareBase, Level, Status, StatusManager

# Configuration
from propconf.config import SetterConfig, get_default_config, reset_default_config, set_default_config

# Errors
from propconf.errors import BindOutcome, ConversionError, PropertySetterError

__all__ = [
    # Binder
    'PropertySetter',
    'is_assignable',
    'is_unequivocally_instantiable',
    # Classification
    'AggregationType',
    'as_collection',
    'raw_aggregation_type',
    # Introspection
    'Capabilities',
    'MutatorDescriptor',
    'MutatorKind',
    'PropertyDescriptor',
    'camel_to_snake',
    'capitalize_first_letter',
    'decapitalize',
    'introspect',
    # Coercion
    'StringConverter',
    'TypeCategory',
    'is_buildable_from_string',
    'register_string_factory',
    'type_category',
    'unregister_string_factory',
    # Default-class hints
    'clear_default_class_registry',
    'default_class',
    'register_default_class',
    'unregister_default_class',
    # Status reporting
    'Context',
    'ContextAwareBase',
    'Level',
    'Status',
    'StatusManager',
    # Configuration
    'SetterConfig',
    'get_default_config',
    'reset_default_config',
    'set_default_config',
    # Errors
    'BindOutcome',
    'ConversionError',
    'PropertySetterError',
]

__version__ = '1.0.0'
__description__ = 'Reflective property configuration for arbitrary Python objects'
