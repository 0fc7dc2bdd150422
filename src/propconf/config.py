"""
Engine configuration: naming conventions and behavioural knobs.

A process-wide default is used by every PropertySetter created without an
explicit config. Tests and applications replace it with set_default_config().
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class SetterConfig:
    """Naming conventions and knobs for capability discovery and binding.

    Attributes:
        setter_prefixes: Method prefixes marking a scalar mutator. A prefix
            without a trailing underscore only matches camelCase names
            (``setName`` but not ``settle``).
        adder_prefixes: Method prefixes marking a collection adder.
        factory_method_names: Names of the static string factory convention.
        include_properties: Treat ``property`` objects as scalar mutators.
        include_dataclass_fields: Treat dataclass fields as scalar mutators.
        snake_case_fallback: Retry a camelCase name in snake_case when it
            does not match directly.
        convert_adder_values: Pass the coerced value to basic adders instead
            of the raw string.
    """
    setter_prefixes: Tuple[str, ...] = ("set_", "set")
    adder_prefixes: Tuple[str, ...] = ("add_", "add")
    factory_method_names: Tuple[str, ...] = ("value_of", "valueOf")
    include_properties: bool = True
    include_dataclass_fields: bool = True
    snake_case_fallback: bool = True
    convert_adder_values: bool = False


_default_config: SetterConfig = SetterConfig()


def set_default_config(config: SetterConfig) -> None:
    """Set the config used by setters created without one."""
    global _default_config
    _default_config = config


def get_default_config() -> SetterConfig:
    return _default_config


def reset_default_config() -> None:
    """Restore the built-in defaults."""
    set_default_config(SetterConfig())
