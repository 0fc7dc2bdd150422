"""
PropertySetter: reflective property binding for one target object.

The configuration interpreter creates one PropertySetter per target and calls
it for every property found in the configuration document:

    setter = PropertySetter(appender, context)
    setter.set_property("name", "Joe")            # set_name("Joe")
    setter.set_property("age", "32")              # set_age(32)

    kind = setter.compute_aggregation_type("layout")
    if kind is AggregationType.AS_COMPLEX_PROPERTY:
        layout_cls = (setter.find_unequivocally_instantiable_class("layout", kind)
                      or setter.get_default_class("layout", kind))
        setter.set_complex_property("layout", layout_cls())

Failures are reported into the context as warnings/errors and tagged with a
BindOutcome; they never abort the configuration pass. set_property_strict()
is the one path that raises, for callers that handle failures themselves.

Thread safety: Not thread-safe. Use one PropertySetter per target per thread.
"""

import inspect
import logging
import sys
from typing import Any, List, Optional, get_origin

from propconf.aggregation import AggregationType, as_collection, raw_aggregation_type
from propconf.coercion import StringConverter, is_any_type, unwrap_optional
from propconf.config import SetterConfig, get_default_config
from propconf.default_classes import DefaultHint, hint_name, lookup_registered_default_class
from propconf.errors import BindOutcome, ConversionError, PropertySetterError, qualified_name
from propconf.introspection import (
    Capabilities,
    MutatorDescriptor,
    PropertyDescriptor,
    camel_to_snake,
    candidate_names,
    capitalize_first_letter,
    decapitalize,
    introspect,
)
from propconf.status import Context, ContextAwareBase

logger = logging.getLogger(__name__)


def is_assignable(param_type: Any, value: Any) -> bool:
    """Whether value may be passed for a parameter declared as param_type.

    Any, object, missing and non-class annotations accept everything,
    Optional[X] checks X and subscripted generics check their origin.
    """
    param_type = unwrap_optional(param_type)
    if is_any_type(param_type):
        return True
    if not isinstance(param_type, type):
        origin = get_origin(param_type)
        if not isinstance(origin, type):
            return True
        param_type = origin
    # Protocols without @runtime_checkable cannot be checked at runtime
    if getattr(param_type, '_is_protocol', False) and not getattr(param_type, '_is_runtime_protocol', False):
        return True
    return isinstance(value, param_type)


def is_unequivocally_instantiable(cls: type) -> bool:
    """A concrete class that can be constructed without arguments."""
    if inspect.isabstract(cls) or getattr(cls, '_is_protocol', False):
        return False
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return False
    return all(
        p.default is not inspect.Parameter.empty
        or p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for p in signature.parameters.values()
    )


def _describe_origin(t: type) -> str:
    module = sys.modules.get(t.__module__)
    location = getattr(module, '__file__', None) or "<no file>"
    return f"module {t.__module__} at {location}, id 0x{id(t):x}"


class PropertySetter(ContextAwareBase):
    """Sets named properties on one target object from configuration values.

    Capabilities of the target's type are discovered lazily on first use and
    cached for the lifetime of this instance.
    """

    def __init__(self, target: Any, context: Optional[Context] = None,
                 config: Optional[SetterConfig] = None):
        super().__init__(context)
        self._target = target
        self._target_type = type(target)
        self.config = config or get_default_config()
        self._converter = StringConverter(context, self.config.factory_method_names)
        self._capabilities: Optional[Capabilities] = None

    @ContextAwareBase.context.setter
    def context(self, context: Optional[Context]) -> None:
        self._context = context
        self._converter.context = context

    @property
    def target(self) -> Any:
        return self._target

    @property
    def target_type(self) -> type:
        return self._target_type

    @property
    def target_type_name(self) -> str:
        return qualified_name(self._target_type)

    def __repr__(self) -> str:
        return f"PropertySetter(target_type={self.target_type_name})"

    # ========== CAPABILITY LOOKUP ==========

    @property
    def capabilities(self) -> Capabilities:
        if self._capabilities is None:
            self._capabilities = self._introspect()
        return self._capabilities

    def _introspect(self) -> Capabilities:
        try:
            return introspect(self._target_type, self.config)
        except Exception as e:
            self.add_error(f"Failed to introspect {self.target_type_name}: {e}", e)
            return Capabilities.empty()

    def get_property_descriptor(self, name: str) -> Optional[PropertyDescriptor]:
        return self.capabilities.find_property(name, self.config.snake_case_fallback)

    def find_setter(self, name: str) -> Optional[MutatorDescriptor]:
        descriptor = self.get_property_descriptor(name)
        return descriptor.write if descriptor is not None else None

    def find_adder(self, name: str) -> Optional[MutatorDescriptor]:
        return self.capabilities.find_adder(name, self.config.snake_case_fallback)

    def convert_arg(self, value: Optional[str], target_type: Any) -> Any:
        """Convert a configuration string to target_type (see StringConverter)."""
        return self._converter.convert(value, target_type)

    # ========== SCALAR PROPERTIES ==========

    def set_property(self, name: str, value: Optional[str]) -> BindOutcome:
        """
        Set a basic property from its string value.

        Nothing happens when value is None. A missing property or a failure
        to convert or assign the value is reported as a warning.

        Args:
            name: Property name as written in the configuration
            value: Raw string value

        Returns:
            BindOutcome describing what happened
        """
        if value is None:
            return BindOutcome.SKIPPED

        name = decapitalize(name)
        descriptor = self.get_property_descriptor(name)
        if descriptor is None:
            self.add_warn(f"No such property [{name}] in {self.target_type_name}.")
            return BindOutcome.NOT_FOUND

        try:
            self.set_property_strict(descriptor, name, value)
        except PropertySetterError as e:
            self.add_warn(f'Failed to set property [{name}] to value "{value}". ', e)
            return e.outcome
        return BindOutcome.SUCCESS

    def set_property_strict(self, descriptor: PropertyDescriptor, name: str, value: Optional[str]) -> None:
        """
        Set a basic property described by descriptor, raising on failure.

        Raises:
            PropertySetterError: No write mutator, wrong arity or a failing
                invocation (outcome tells which)
            ConversionError: value cannot be converted to the parameter type
        """
        setter = descriptor.write
        if setter is None:
            raise PropertySetterError(f"No setter for property [{name}].", BindOutcome.NOT_WRITABLE)
        if setter.arity != 1:
            raise PropertySetterError(
                f"#params for setter {setter.name} != 1 (found {setter.arity}).", BindOutcome.ARITY_MISMATCH)

        param_type = setter.parameter_type
        arg = self._converter.convert(value, param_type)
        if arg is None:
            raise ConversionError(value, param_type)

        try:
            setter.invoke(self._target, arg)
        except Exception as e:
            raise PropertySetterError(
                f"Invocation of {setter} on {self.target_type_name} failed: {e}",
                BindOutcome.INVOCATION_FAILURE,
            ) from e
        logger.debug(f"Set {self.target_type_name}.{name} = {arg!r}")

    # ========== CLASSIFICATION ==========

    def compute_aggregation_type(self, name: str) -> AggregationType:
        """Classify a property; an adder takes precedence over a setter."""
        method_names = self.config.factory_method_names
        adder = self.find_adder(name)
        if adder is not None:
            return as_collection(raw_aggregation_type(adder, method_names))
        return raw_aggregation_type(self.find_setter(name), method_names)

    def _relevant_mutator(self, name: str, aggregation_type: AggregationType) -> Optional[MutatorDescriptor]:
        if aggregation_type is AggregationType.AS_COMPLEX_PROPERTY_COLLECTION:
            return self.find_adder(name)
        if aggregation_type is AggregationType.AS_COMPLEX_PROPERTY:
            return self.find_setter(name)
        raise ValueError(f"{aggregation_type} not allowed here")

    def get_default_class(self, name: str, aggregation_type: AggregationType) -> Optional[DefaultHint]:
        """
        Default implementation hint for a complex property.

        The side table is consulted first, then the hint attached to the
        setter (AS_COMPLEX_PROPERTY) or adder (AS_COMPLEX_PROPERTY_COLLECTION).

        Raises:
            ValueError: aggregation_type is not one of the two complex kinds
        """
        mutator = self._relevant_mutator(name, aggregation_type)
        for key in candidate_names(name, self.config.snake_case_fallback):
            registered = lookup_registered_default_class(self._target_type, key)
            if registered is not None:
                return registered
        if mutator is None:
            return None
        return mutator.default_class

    def get_default_class_name(self, name: str, aggregation_type: AggregationType) -> Optional[str]:
        """Fully qualified name of the default class hint, or None."""
        return hint_name(self.get_default_class(name, aggregation_type))

    def find_unequivocally_instantiable_class(self, name: str,
                                              aggregation_type: AggregationType) -> Optional[type]:
        """Declared parameter class when it can be built without arguments."""
        mutator = self._relevant_mutator(name, aggregation_type)
        if mutator is None or mutator.arity != 1:
            return None
        cls = unwrap_optional(mutator.parameter_type)
        if isinstance(cls, type) and is_unequivocally_instantiable(cls):
            return cls
        return None

    # ========== COMPLEX PROPERTIES AND COLLECTIONS ==========

    def set_complex_property(self, name: str, complex_property: Any) -> BindOutcome:
        """Assign an already built nested object through the property's setter."""
        descriptor = self.get_property_descriptor(name)
        if descriptor is None:
            self.add_warn(f"Could not find property [{name}] in {self.target_type_name}.")
            return BindOutcome.NOT_FOUND

        setter = descriptor.write
        if setter is None:
            self.add_warn(f"No setter method for property [{name}] in {self.target_type_name}.")
            return BindOutcome.NOT_WRITABLE

        outcome = self._sanity_check(name, setter, complex_property)
        if outcome is not BindOutcome.SUCCESS:
            return outcome
        return self._invoke(setter, complex_property)

    def add_complex_property(self, name: str, complex_property: Any) -> BindOutcome:
        """Append an already built nested object through the property's adder."""
        adder = self.find_adder(name)
        if adder is None:
            expected = " or ".join(f"[{n}]" for n in self._expected_adder_names(name))
            self.add_error(f"Could not find method {expected} in class [{self.target_type_name}].")
            return BindOutcome.NOT_FOUND

        outcome = self._sanity_check(name, adder, complex_property)
        if outcome is not BindOutcome.SUCCESS:
            return outcome
        return self._invoke(adder, complex_property)

    def add_basic_property(self, name: str, value: Optional[str]) -> BindOutcome:
        """
        Append a string value through the property's adder.

        The value is converted to the adder's parameter type to validate it.
        Unless the config enables convert_adder_values, the adder then
        receives the original string.
        """
        if value is None:
            return BindOutcome.SKIPPED

        adder = self.find_adder(name)
        if adder is None:
            self.add_error(f"No adder for property [{capitalize_first_letter(name)}].")
            return BindOutcome.NOT_FOUND
        if adder.arity != 1:
            self._report_wrong_arity(name)
            return BindOutcome.ARITY_MISMATCH

        param_type = adder.parameter_type
        try:
            arg = self._converter.convert(value, param_type)
        except ConversionError as e:
            self.add_error(f"Conversion to type [{qualified_name(param_type)}] failed. ", e)
            return BindOutcome.CONVERSION_FAILURE
        if arg is None:
            self.add_error(f"Conversion to type [{qualified_name(param_type)}] failed.")
            return BindOutcome.CONVERSION_FAILURE

        return self._invoke(adder, arg if self.config.convert_adder_values else value)

    def _expected_adder_names(self, name: str) -> List[str]:
        names = []
        for prefix in self.config.adder_prefixes:
            if prefix.endswith("_"):
                names.append(prefix + camel_to_snake(decapitalize(name)))
            else:
                names.append(prefix + capitalize_first_letter(name))
        return names

    def _report_wrong_arity(self, name: str) -> None:
        self.add_error(f"Wrong number of parameters in setter method for property [{name}] "
                       f"in {self.target_type_name}")

    def _sanity_check(self, name: str, mutator: MutatorDescriptor, value: Any) -> BindOutcome:
        if mutator.arity != 1:
            self._report_wrong_arity(name)
            return BindOutcome.ARITY_MISMATCH

        expected = unwrap_optional(mutator.parameter_type)
        if not is_assignable(expected, value):
            expected_cls = expected if isinstance(expected, type) else get_origin(expected)
            value_cls = type(value)
            expected_name = qualified_name(expected_cls)
            value_name = qualified_name(value_cls)
            message = (
                f'A "{value_name}" object is not assignable to a "{expected_name}" variable. '
                f'The class "{expected_name}" was defined in [{_describe_origin(expected_cls)}] '
                f'whereas object of type "{value_name}" was defined in [{_describe_origin(value_cls)}].'
            )
            if expected_name == value_name:
                message += " Both classes share a name but are distinct objects."
            self.add_error(message)
            return BindOutcome.ASSIGNABILITY_MISMATCH
        return BindOutcome.SUCCESS

    def _invoke(self, mutator: MutatorDescriptor, value: Any) -> BindOutcome:
        try:
            mutator.invoke(self._target, value)
        except Exception as e:
            self.add_error(
                f"Could not invoke {mutator} in class {self.target_type_name} "
                f"with parameter of type {qualified_name(type(value))}", e)
            return BindOutcome.INVOCATION_FAILURE
        return BindOutcome.SUCCESS
