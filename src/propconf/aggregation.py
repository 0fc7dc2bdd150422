"""Aggregation classification of configurable properties."""

from enum import Enum
from typing import Optional, Tuple

from propconf.coercion import DEFAULT_FACTORY_METHOD_NAMES, type_category
from propconf.introspection import MutatorDescriptor


class AggregationType(Enum):
    """How a named property aggregates its value(s) on the target."""
    NOT_FOUND = "not_found"
    AS_BASIC_PROPERTY = "as_basic_property"
    AS_BASIC_PROPERTY_COLLECTION = "as_basic_property_collection"
    AS_COMPLEX_PROPERTY = "as_complex_property"
    AS_COMPLEX_PROPERTY_COLLECTION = "as_complex_property_collection"

    @property
    def is_complex(self) -> bool:
        return self in (AggregationType.AS_COMPLEX_PROPERTY, AggregationType.AS_COMPLEX_PROPERTY_COLLECTION)

    @property
    def is_collection(self) -> bool:
        return self in (AggregationType.AS_BASIC_PROPERTY_COLLECTION,
                        AggregationType.AS_COMPLEX_PROPERTY_COLLECTION)


_COLLECTION_OF = {
    AggregationType.NOT_FOUND: AggregationType.NOT_FOUND,
    AggregationType.AS_BASIC_PROPERTY: AggregationType.AS_BASIC_PROPERTY_COLLECTION,
    AggregationType.AS_COMPLEX_PROPERTY: AggregationType.AS_COMPLEX_PROPERTY_COLLECTION,
}


def raw_aggregation_type(mutator: Optional[MutatorDescriptor],
                         method_names: Tuple[str, ...] = DEFAULT_FACTORY_METHOD_NAMES) -> AggregationType:
    """Singular aggregation type implied by a mutator's parameter type.

    A missing mutator or one not taking exactly one value is NOT_FOUND.
    """
    if mutator is None or mutator.arity != 1:
        return AggregationType.NOT_FOUND
    if type_category(mutator.parameter_type, method_names).is_basic:
        return AggregationType.AS_BASIC_PROPERTY
    return AggregationType.AS_COMPLEX_PROPERTY


def as_collection(aggregation_type: AggregationType) -> AggregationType:
    """Map a singular aggregation type to its collection counterpart."""
    try:
        return _COLLECTION_OF[aggregation_type]
    except KeyError:
        raise ValueError(f"{aggregation_type} is already a collection type") from None
