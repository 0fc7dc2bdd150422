"""
Tests for default-class hints and instantiability checks.

Tests cover:
- @default_class on setters, adders and property setters
- default_class in dataclass field metadata
- The explicit side table and its precedence
- The contract violation for non-complex aggregation types
- find_unequivocally_instantiable_class()
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

import pytest

from propconf import (
    AggregationType,
    PropertySetter,
    default_class,
    is_unequivocally_instantiable,
    register_default_class,
    unregister_default_class,
)


class HandlerInterface(ABC):
    @abstractmethod
    def handle(self, record): ...


class DefaultHandler(HandlerInterface):
    def handle(self, record):
        return record


class FileHandler(HandlerInterface):
    def __init__(self, path: str):
        self.path = path

    def handle(self, record):
        return record


class Service:
    def __init__(self):
        self.handler = None
        self.listeners = []
        self._fallback = None

    @default_class(DefaultHandler)
    def set_handler(self, handler: HandlerInterface) -> None:
        self.handler = handler

    @default_class("myapp.listeners.ConsoleListener")
    def add_listener(self, listener: HandlerInterface) -> None:
        self.listeners.append(listener)

    def set_plain(self, handler: HandlerInterface) -> None:
        pass

    def set_concrete(self, handler: DefaultHandler) -> None:
        pass

    def set_needs_args(self, handler: FileHandler) -> None:
        pass

    def set_name(self, name: str) -> None:
        pass

    @property
    def fallback(self) -> Optional[HandlerInterface]:
        return self._fallback

    @fallback.setter
    @default_class(DefaultHandler)
    def fallback(self, handler: Optional[HandlerInterface]) -> None:
        self._fallback = handler


@pytest.fixture
def setter(context):
    return PropertySetter(Service(), context)


class TestDefaultClassHints:
    """Test hint lookup on the relevant mutator."""

    def test_handler_scenario(self, setter):
        name = setter.get_default_class_name("handler", AggregationType.AS_COMPLEX_PROPERTY)

        assert name == f"{__name__}.DefaultHandler"
        assert name.rsplit(".", 1)[-1] == "DefaultHandler"

    def test_returns_type(self, setter):
        assert setter.get_default_class("handler", AggregationType.AS_COMPLEX_PROPERTY) is DefaultHandler

    def test_collection_uses_adder(self, setter):
        name = setter.get_default_class_name("listener", AggregationType.AS_COMPLEX_PROPERTY_COLLECTION)

        assert name == "myapp.listeners.ConsoleListener"

    def test_property_setter_hint(self, setter):
        assert setter.get_default_class("fallback", AggregationType.AS_COMPLEX_PROPERTY) is DefaultHandler

    def test_no_hint(self, setter):
        assert setter.get_default_class_name("plain", AggregationType.AS_COMPLEX_PROPERTY) is None

    def test_missing_property(self, setter):
        assert setter.get_default_class_name("nothing", AggregationType.AS_COMPLEX_PROPERTY) is None

    def test_dataclass_field_metadata(self, context):
        @dataclass
        class Holder:
            handler: Optional[HandlerInterface] = field(
                default=None, metadata={"default_class": DefaultHandler})

        setter = PropertySetter(Holder(), context)

        assert setter.get_default_class("handler", AggregationType.AS_COMPLEX_PROPERTY) is DefaultHandler

    @pytest.mark.parametrize("aggregation_type", [
        AggregationType.NOT_FOUND,
        AggregationType.AS_BASIC_PROPERTY,
        AggregationType.AS_BASIC_PROPERTY_COLLECTION,
    ])
    def test_non_complex_aggregation_is_contract_violation(self, setter, aggregation_type):
        with pytest.raises(ValueError, match="not allowed here"):
            setter.get_default_class_name("name", aggregation_type)


class TestSideTable:
    """Explicit (target type, property) registrations."""

    def test_registered_hint_wins(self, setter):
        register_default_class(Service, "handler", FileHandler)

        assert setter.get_default_class("handler", AggregationType.AS_COMPLEX_PROPERTY) is FileHandler

    def test_registration_applies_to_subclasses(self, context):
        class SpecialService(Service):
            pass

        register_default_class(Service, "plain", DefaultHandler)
        setter = PropertySetter(SpecialService(), context)

        assert setter.get_default_class("plain", AggregationType.AS_COMPLEX_PROPERTY) is DefaultHandler

    def test_unregister(self, setter):
        register_default_class(Service, "plain", DefaultHandler)
        unregister_default_class(Service, "plain")

        assert setter.get_default_class("plain", AggregationType.AS_COMPLEX_PROPERTY) is None

    def test_string_hint_returned_as_given(self, setter):
        register_default_class(Service, "plain", "myapp.handlers.NullHandler")

        assert setter.get_default_class_name("plain", AggregationType.AS_COMPLEX_PROPERTY) == \
            "myapp.handlers.NullHandler"

    def test_module_not_shadowed_by_decorator(self):
        """The registry module stays importable next to the re-exported decorator."""
        import types

        import propconf
        import propconf.default_classes as default_classes_module

        assert isinstance(default_classes_module, types.ModuleType)
        assert isinstance(default_classes_module._default_class_registry, dict)
        assert propconf.default_class is default_classes_module.default_class

        default_classes_module.clear_default_class_registry()
        assert default_classes_module._default_class_registry == {}


class TestInstantiableClass:
    """Test find_unequivocally_instantiable_class()."""

    def test_abstract_parameter(self, setter):
        assert setter.find_unequivocally_instantiable_class(
            "handler", AggregationType.AS_COMPLEX_PROPERTY) is None

    def test_concrete_parameter(self, setter):
        assert setter.find_unequivocally_instantiable_class(
            "concrete", AggregationType.AS_COMPLEX_PROPERTY) is DefaultHandler

    def test_parameter_needing_arguments(self, setter):
        assert setter.find_unequivocally_instantiable_class(
            "needs_args", AggregationType.AS_COMPLEX_PROPERTY) is None

    def test_contract_violation(self, setter):
        with pytest.raises(ValueError):
            setter.find_unequivocally_instantiable_class("name", AggregationType.AS_BASIC_PROPERTY)

    def test_helper(self):
        class NoInit:
            pass

        assert is_unequivocally_instantiable(NoInit)
        assert is_unequivocally_instantiable(DefaultHandler)
        assert not is_unequivocally_instantiable(HandlerInterface)
        assert not is_unequivocally_instantiable(FileHandler)
