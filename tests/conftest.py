"""Pytest configuration and shared fixtures."""
import pytest
from enum import Enum
from typing import List

from propconf import Context, Level
import propconf.coercion as coercion_module
import propconf.config as config_module
import propconf.default_classes as default_class_module


class Color(Enum):
    """Enum used as a basic property type."""
    RED = "red"
    GREEN = "green"


class Person:
    """Target with one setter per basic type, in both naming styles."""

    def __init__(self):
        self.name = None
        self.age = 0
        self.male = False
        self.weight = 0.0
        self.color = None
        self.nicknames: List[str] = []

    def set_name(self, name: str) -> None:
        self.name = name

    def setAge(self, age: int) -> None:
        if age < 0:
            raise ValueError("age must not be negative")
        self.age = age

    def set_male(self, male: bool) -> None:
        self.male = male

    def set_weight(self, weight: float) -> None:
        self.weight = weight

    def set_color(self, color: Color) -> None:
        self.color = color

    def add_nickname(self, nickname: str) -> None:
        self.nicknames.append(nickname)


@pytest.fixture(autouse=True)
def reset_module_state():
    """Restore process-wide registries and the default config after each test."""
    original_config = config_module._default_config
    original_factories = dict(coercion_module._string_factories)
    original_defaults = dict(default_class_module._default_class_registry)

    yield

    config_module._default_config = original_config
    coercion_module._string_factories.clear()
    coercion_module._string_factories.update(original_factories)
    default_class_module._default_class_registry.clear()
    default_class_module._default_class_registry.update(original_defaults)


@pytest.fixture
def context():
    """Provide a fresh reporting context."""
    return Context("test")


@pytest.fixture
def person():
    """Provide an unconfigured Person target."""
    return Person()


@pytest.fixture
def messages(context):
    """Return a function listing reported messages, optionally of one level."""
    def _messages(level=None):
        return [
            s.message for s in context.status_manager.get_copy_of_status_list()
            if level is None or s.level == level
        ]
    return _messages


@pytest.fixture
def warnings_of(messages):
    return lambda: messages(Level.WARN)


@pytest.fixture
def errors_of(messages):
    return lambda: messages(Level.ERROR)
