"""
Default-class hints for complex properties.

When a mutator's declared parameter type cannot be instantiated (an ABC or a
protocol) and the configuration source names no concrete type, the
configuration interpreter asks for a fallback. Hints come from three places,
checked in order:

1. the explicit side table (register_default_class)
2. a @default_class decorator on the setter/adder or property setter
3. ``default_class`` in a dataclass field's metadata

Usage:
    class Appender:
        @default_class(PatternLayout)
        def set_layout(self, layout: Layout) -> None:
            ...

    register_default_class(Appender, "encoder", "myapp.encoders.LineEncoder")
"""

from typing import Any, Dict, Optional, Tuple, Type, Union

DEFAULT_CLASS_ATTR = "__default_class__"
DEFAULT_CLASS_METADATA_KEY = "default_class"

DefaultHint = Union[type, str]

# (target type, property name) -> concrete type or dotted name
_default_class_registry: Dict[Tuple[Type, str], DefaultHint] = {}


def default_class(hint: DefaultHint):
    """Decorator attaching a default implementation hint to a mutator."""
    def decorator(func):
        setattr(func, DEFAULT_CLASS_ATTR, hint)
        return func
    return decorator


def get_hint(func: Any) -> Optional[DefaultHint]:
    """Read the hint attached to a function, if any."""
    return getattr(func, DEFAULT_CLASS_ATTR, None)


def register_default_class(target_type: Type, property_name: str, hint: DefaultHint) -> None:
    """Declare a fallback concrete type for ``target_type.property_name``."""
    _default_class_registry[(target_type, property_name)] = hint


def unregister_default_class(target_type: Type, property_name: str) -> None:
    _default_class_registry.pop((target_type, property_name), None)


def lookup_registered_default_class(target_type: Type, property_name: str) -> Optional[DefaultHint]:
    """Side-table lookup honouring inheritance (nearest class in the MRO wins)."""
    for klass in target_type.__mro__:
        hint = _default_class_registry.get((klass, property_name))
        if hint is not None:
            return hint
    return None


def clear_default_class_registry() -> None:
    """Clear the side table (for testing)."""
    _default_class_registry.clear()


def hint_name(hint: Optional[DefaultHint]) -> Optional[str]:
    """Fully qualified name of a hint; dotted-name hints are returned as given."""
    if hint is None:
        return None
    if isinstance(hint, str):
        return hint
    return f"{hint.__module__}.{hint.__qualname__}"
