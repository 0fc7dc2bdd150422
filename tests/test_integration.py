"""Integration tests for propconf.

Drives PropertySetter the way a declarative configuration interpreter does:
walk a nested document, classify every key, build children for complex
properties and hand each value to the matching entry point.
"""
import importlib
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from propconf import AggregationType, Context, Level, PropertySetter, default_class


class Layout(ABC):
    @abstractmethod
    def format(self, message: str) -> str: ...


class PatternLayout(Layout):
    def __init__(self):
        self.pattern = "%msg"

    def set_pattern(self, pattern: str) -> None:
        self.pattern = pattern

    def format(self, message: str) -> str:
        return self.pattern.replace("%msg", message)


class Filter:
    def __init__(self):
        self.level = 0

    def set_level(self, level: int) -> None:
        self.level = level


class FileAppender:
    def __init__(self):
        self.file = None
        self.append = False
        self.buffer_size = 0
        self.layout = None
        self.filters: List[Filter] = []
        self.tags: List[str] = []

    def set_file(self, file: str) -> None:
        self.file = file

    def set_append(self, append: bool) -> None:
        self.append = append

    def set_buffer_size(self, size: int) -> None:
        self.buffer_size = size

    @default_class(PatternLayout)
    def set_layout(self, layout: Layout) -> None:
        self.layout = layout

    def add_filter(self, flt: Filter) -> None:
        self.filters.append(flt)

    def add_tag(self, tag: str) -> None:
        self.tags.append(tag)


def _load(dotted_name: str) -> type:
    module_name, _, class_name = dotted_name.rpartition(".")
    return getattr(importlib.import_module(module_name), class_name)


def configure(target: Any, document: Dict[str, Any], context: Context) -> Any:
    """Minimal interpreter: strings are basic values, dicts nested objects."""
    setter = PropertySetter(target, context)
    for name, value in document.items():
        values = value if isinstance(value, list) else [value]
        kind = setter.compute_aggregation_type(name)
        for item in values:
            if kind is AggregationType.AS_BASIC_PROPERTY:
                setter.set_property(name, item)
            elif kind is AggregationType.AS_BASIC_PROPERTY_COLLECTION:
                setter.add_basic_property(name, item)
            elif kind.is_complex:
                item = dict(item)
                cls = item.pop("class", None)
                if cls is None:
                    cls = (setter.find_unequivocally_instantiable_class(name, kind)
                           or setter.get_default_class_name(name, kind))
                child_cls = _load(cls) if isinstance(cls, str) else cls
                child = configure(child_cls(), item, context)
                if kind is AggregationType.AS_COMPLEX_PROPERTY:
                    setter.set_complex_property(name, child)
                else:
                    setter.add_complex_property(name, child)
            else:
                setter.set_property(name, item)
    return target


def test_configures_object_tree():
    context = Context("integration")
    document = {
        "file": "/var/log/app.log",
        "append": "true",
        "bufferSize": "8192",
        "layout": {"pattern": "[%msg]"},
        "filter": [{"level": "10"}, {"level": "30"}],
        "tag": ["web", "prod"],
    }

    appender = configure(FileAppender(), document, context)

    assert appender.file == "/var/log/app.log"
    assert appender.append is True
    assert appender.buffer_size == 8192
    assert isinstance(appender.layout, PatternLayout)
    assert appender.layout.format("hi") == "[hi]"
    assert [f.level for f in appender.filters] == [10, 30]
    assert appender.tags == ["web", "prod"]
    assert context.status_manager.count() == 0


def test_bad_properties_do_not_abort_the_pass():
    context = Context("integration")
    document = {
        "file": "/tmp/a.log",
        "bufferSize": "large",
        "colour": "red",
        "append": "true",
    }

    appender = configure(FileAppender(), document, context)

    assert appender.file == "/tmp/a.log"
    assert appender.append is True
    assert appender.buffer_size == 0
    assert context.status_manager.count(Level.WARN) == 2
    assert context.status_manager.get_level() is Level.WARN


def test_explicit_class_overrides_default():
    context = Context("integration")
    document = {"layout": {"class": f"{__name__}.PatternLayout", "pattern": "%msg!"}}

    appender = configure(FileAppender(), document, context)

    assert appender.layout.format("x") == "x!"
