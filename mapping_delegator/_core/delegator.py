from __future__ import annotations

import functools
import logging
import types
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping
from typing import Any, ClassVar, Final, NoReturn

from typing_extensions import Self

from .errors import (
    AbstractInstantiationError,
    MethodNotSupportedError,
    MissingRequiredAttributeError,
    UnknownAttributeError,
)
from .operations import (
    CLOSED_OPERATIONS,
    LOOKUP_OPERATIONS,
    SAFE_OPERATIONS,
    ClosedOperation,
    OperationKind,
    classify_operation,
)
from .unset import UNSET, Unset
from .variant import (
    DefaultPolicy,
    KEY_TRANSFORMATION_EXCEPTIONS,
    KeyTransformer,
    Variant,
    declare_variant,
    resolve_default_policy,
    resolve_key_transformer,
    resolve_required_attributes,
)

_LOGGER: Final = logging.getLogger(__name__)


class MappingDelegator:
    """
    Immutable wrapper over a mapping which checks required keys.

    >>> class Person(MappingDelegator, required=('name', 'age'),
    ...              transform_key=str):
    ...     pass
    >>> person = Person({'name': 'Jake', 'age': 5, 'toy': 'Teddy Bear'})
    >>> person.toy
    'Teddy Bear'
    >>> person.except_('toy')
    Person({'name': 'Jake', 'age': 5})
    >>> person.except_('age')
    {'name': 'Jake', 'toy': 'Teddy Bear'}

    Keys take precedence over forwarded ``dict`` methods of the same name,
    so prefer ``to_dict`` over ``dict(instance)``.
    Instances are hashable only if all their values are.
    """

    @classmethod
    def default_policy(cls, /) -> DefaultPolicy | None:
        variant = cls.__variant
        return None if variant is None else resolve_default_policy(variant)

    @classmethod
    def key_transformer(cls, /) -> KeyTransformer | None:
        variant = cls.__variant
        return None if variant is None else resolve_key_transformer(variant)

    @classmethod
    def matches(cls, candidate: Any, /) -> bool:
        keys = (
            candidate._mapping.keys
            if isinstance(candidate, MappingDelegator)
            else getattr(candidate, 'keys', None)
        )
        if not callable(keys):
            return False
        required_attributes = cls.required_attributes()
        return {cls._transform_key(key) for key in keys()} == {
            cls._transform_key(attribute)
            for attribute in (
                () if required_attributes is None else required_attributes
            )
        }

    @classmethod
    def present_all(cls, records: Iterable[Mapping[Any, Any]], /) -> list[Self]:
        return [cls(record) for record in records]

    @classmethod
    def required_attributes(cls, /) -> tuple[Any, ...] | None:
        variant = cls.__variant
        return (
            None if variant is None else resolve_required_attributes(variant)
        )

    def to_dict(self, /) -> dict[Any, Any]:
        return dict(self._mapping)

    __variant: ClassVar[Variant | None] = None

    _mapping: dict[Any, Any]

    __slots__ = ('_mapping',)

    def __init_subclass__(
        cls,
        /,
        *,
        default: Any | Unset = UNSET,
        default_factory: Callable[..., Any] | Unset = UNSET,
        required: Iterable[Any] | Unset = UNSET,
        transform_key: KeyTransformer | Unset = UNSET,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        delegator_bases = [
            base for base in cls.__bases__ if issubclass(base, MappingDelegator)
        ]
        if len(delegator_bases) > 1:
            raise TypeError(
                f'{cls.__qualname__} should inherit from '
                'a single mapping delegator class, but got '
                f'{", ".join(base.__qualname__ for base in delegator_bases)}.'
            )
        (base,) = delegator_bases
        cls.__variant = declare_variant(
            cls.__qualname__,
            base.__variant,
            default=default,
            default_factory=default_factory,
            required=required,
            transform_key=transform_key,
        )

    def __new__(cls, mapping: Mapping[Any, Any], /) -> Self:
        if cls.__variant is None:
            raise AbstractInstantiationError(cls.__qualname__)
        key_transformer = cls.key_transformer()
        internal: dict[Any, Any]
        if key_transformer is not None:
            internal = {
                key_transformer(key): value
                for key, value in (
                    mapping._mapping
                    if isinstance(mapping, MappingDelegator)
                    else mapping
                ).items()
            }
        elif isinstance(mapping, MappingDelegator):
            internal = mapping._mapping
        else:
            internal = dict(mapping)
        return cls._from_internal(internal)

    def __contains__(self, key: Any, /) -> bool:
        return type(self)._transform_key(key) in self._mapping

    def __delattr__(self, name: str, /) -> NoReturn:
        raise MethodNotSupportedError(type(self).__qualname__, '__delattr__')

    def __delitem__(self, /, *_args: Any) -> NoReturn:
        raise MethodNotSupportedError(type(self).__qualname__, '__delitem__')

    def __dir__(self, /) -> Iterable[str]:
        return sorted(
            {
                *super().__dir__(),
                *CLOSED_OPERATIONS,
                *LOOKUP_OPERATIONS,
                *SAFE_OPERATIONS,
                *[
                    key
                    for key in self._mapping
                    if isinstance(key, str) and key.isidentifier()
                ],
            }
        )

    def __eq__(self, other: Any, /) -> Any:
        return (
            type(self) is type(other) and self._mapping == other._mapping
            if isinstance(other, MappingDelegator)
            else NotImplemented
        )

    def __getattr__(self, name: str, /) -> Any:
        cls = type(self)
        if name == '_mapping':
            raise AttributeError(name)
        if not _is_dunder(name):
            try:
                key = cls._transform_key(name)
            except KEY_TRANSFORMATION_EXCEPTIONS:
                pass
            else:
                if key in self._mapping:
                    return self._mapping[key]
        kind = classify_operation(name)
        if kind is OperationKind.MUTATING:
            raise MethodNotSupportedError(cls.__qualname__, name)
        if kind is OperationKind.CLOSED:
            return functools.partial(
                self._apply_closed_operation, CLOSED_OPERATIONS[name]
            )
        if kind is OperationKind.LOOKUP:
            return self._lookup
        if kind is OperationKind.SAFE:
            return getattr(self._mapping, name)
        assert kind is None, kind
        raise UnknownAttributeError(cls.__qualname__, name)

    def __getitem__(self, key: Any, /) -> Any:
        return self._lookup(key)

    def __hash__(self, /) -> int:
        return hash(frozenset(self._mapping.items()))

    def __iter__(self, /) -> Iterator[Any]:
        return iter(self._mapping)

    def __len__(self, /) -> int:
        return len(self._mapping)

    def __or__(self, other: Any, /) -> Any:
        if not isinstance(other, Mapping):
            return NotImplemented
        return self._apply_closed_operation(CLOSED_OPERATIONS['merge'], other)

    def __reduce__(self, /) -> tuple[Any, ...]:
        return type(self)._from_internal, (self._mapping,)

    def __repr__(self, /) -> str:
        return f'{type(self).__qualname__}({self._mapping!r})'

    def __reversed__(self, /) -> Iterator[Any]:
        return reversed(self._mapping)

    def __ror__(self, other: Any, /) -> Any:
        if not isinstance(other, Mapping):
            return NotImplemented
        return {
            **(
                other._mapping if isinstance(other, MappingDelegator) else other
            ),
            **self._mapping,
        }

    def __setattr__(self, name: str, value: Any, /) -> NoReturn:
        raise MethodNotSupportedError(type(self).__qualname__, '__setattr__')

    def __setitem__(self, /, *_args: Any) -> NoReturn:
        raise MethodNotSupportedError(type(self).__qualname__, '__setitem__')

    def _apply_closed_operation(
        self, operation: ClosedOperation, /, *args: Any, **kwargs: Any
    ) -> Self | dict[Any, Any]:
        cls = type(self)
        result = operation(self._mapping, cls._transform_key, *args, **kwargs)
        if (
            missing_attribute := cls._find_missing_attribute(result)
        ) is not UNSET:
            _LOGGER.debug(
                '%s result lacks required attribute %r of %s, '
                'returning plain dictionary.',
                operation.__name__.strip('_'),
                missing_attribute,
                cls.__qualname__,
            )
            return result
        return cls._wrap(result)

    @classmethod
    def _find_missing_attribute(
        cls, mapping: Mapping[Any, Any], /
    ) -> Any | Unset:
        required_attributes = cls.required_attributes()
        if required_attributes is not None:
            for attribute in required_attributes:
                if cls._transform_key(attribute) not in mapping:
                    return attribute
        return UNSET

    @classmethod
    def _from_internal(cls, mapping: dict[Any, Any], /) -> Self:
        if (
            missing_attribute := cls._find_missing_attribute(mapping)
        ) is not UNSET:
            _LOGGER.debug(
                'Rejected %s construction from keys %r: '
                'missing required attribute %r.',
                cls.__qualname__,
                list(mapping),
                missing_attribute,
            )
            raise MissingRequiredAttributeError(
                cls.__qualname__, missing_attribute
            )
        return cls._wrap(mapping)

    def _lookup(self, key: Any, default: Any | Unset = UNSET, /) -> Any:
        transformed_key = type(self)._transform_key(key)
        try:
            return self._mapping[transformed_key]
        except KeyError:
            if default is not UNSET:
                return default
            policy = type(self).default_policy()
            return (
                None
                if policy is None
                else policy.resolve(
                    transformed_key, types.MappingProxyType(self._mapping)
                )
            )

    @classmethod
    def _transform_key(cls, key: Any, /) -> Hashable:
        key_transformer = cls.key_transformer()
        return key if key_transformer is None else key_transformer(key)

    @classmethod
    def _wrap(cls, mapping: dict[Any, Any], /) -> Self:
        self = super().__new__(cls)
        object.__setattr__(self, '_mapping', mapping)
        return self


Mapping.register(MappingDelegator)


def _is_dunder(name: str, /) -> bool:
    return len(name) > 4 and name.startswith('__') and name.endswith('__')
