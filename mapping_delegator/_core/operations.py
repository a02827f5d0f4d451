from __future__ import annotations

import types
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, Final, TypeAlias

from .variant import KeyTransformer


class OperationKind(str, Enum):
    CLOSED = 'CLOSED'
    LOOKUP = 'LOOKUP'
    MUTATING = 'MUTATING'
    SAFE = 'SAFE'

    def __repr__(self, /) -> str:
        return f'{type(self).__qualname__}.{self.name}'


ClosedOperation: TypeAlias = Callable[..., dict[Any, Any]]


def _compact(
    mapping: Mapping[Any, Any], _transform_key: KeyTransformer, /
) -> dict[Any, Any]:
    return {key: value for key, value in mapping.items() if value is not None}


def _except(
    mapping: Mapping[Any, Any], transform_key: KeyTransformer, /, *keys: Any
) -> dict[Any, Any]:
    excluded_keys = {transform_key(key) for key in keys}
    return {
        key: value
        for key, value in mapping.items()
        if key not in excluded_keys
    }


def _merge(
    mapping: Mapping[Any, Any],
    transform_key: KeyTransformer,
    /,
    *others: Mapping[Any, Any],
    **items: Any,
) -> dict[Any, Any]:
    result = dict(mapping)
    for other in (*others, items):
        result.update((transform_key(key), other[key]) for key in other)
    return result


def _reject(
    mapping: Mapping[Any, Any],
    _transform_key: KeyTransformer,
    predicate: Callable[[Any, Any], bool],
    /,
) -> dict[Any, Any]:
    return {
        key: value
        for key, value in mapping.items()
        if not predicate(key, value)
    }


def _select(
    mapping: Mapping[Any, Any],
    _transform_key: KeyTransformer,
    predicate: Callable[[Any, Any], bool],
    /,
) -> dict[Any, Any]:
    return {
        key: value for key, value in mapping.items() if predicate(key, value)
    }


def _slice(
    mapping: Mapping[Any, Any], transform_key: KeyTransformer, /, *keys: Any
) -> dict[Any, Any]:
    return {
        transformed_key: mapping[transformed_key]
        for key in keys
        if (transformed_key := transform_key(key)) in mapping
    }


def _transform_values(
    mapping: Mapping[Any, Any],
    _transform_key: KeyTransformer,
    function: Callable[[Any], Any],
    /,
) -> dict[Any, Any]:
    return {key: function(value) for key, value in mapping.items()}


CLOSED_OPERATIONS: Final[Mapping[str, ClosedOperation]] = (
    types.MappingProxyType(
        {
            'compact': _compact,
            'except_': _except,
            'merge': _merge,
            'reject': _reject,
            'select': _select,
            'slice': _slice,
            'transform_values': _transform_values,
        }
    )
)
LOOKUP_OPERATIONS: Final[frozenset[str]] = frozenset({'get'})
MUTATING_METHODS: Final[frozenset[str]] = frozenset(
    {
        '__delitem__',
        '__ior__',
        '__setitem__',
        'clear',
        'pop',
        'popitem',
        'setdefault',
        'update',
    }
)
SAFE_OPERATIONS: Final[frozenset[str]] = frozenset(
    {'copy', 'fromkeys', 'items', 'keys', 'values'}
)
assert all(
    hasattr(dict, name)
    for name in LOOKUP_OPERATIONS | MUTATING_METHODS | SAFE_OPERATIONS
)
assert not any(hasattr(dict, name) for name in CLOSED_OPERATIONS)

_OPERATION_KINDS: Final[Mapping[str, OperationKind]] = types.MappingProxyType(
    {
        **dict.fromkeys(CLOSED_OPERATIONS, OperationKind.CLOSED),
        **dict.fromkeys(LOOKUP_OPERATIONS, OperationKind.LOOKUP),
        **dict.fromkeys(MUTATING_METHODS, OperationKind.MUTATING),
        **dict.fromkeys(SAFE_OPERATIONS, OperationKind.SAFE),
    }
)


def classify_operation(name: str, /) -> OperationKind | None:
    return _OPERATION_KINDS.get(name)
