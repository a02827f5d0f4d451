from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping
from typing import Any, ClassVar, Final, TypeAlias

from typing_extensions import Self

from .unset import UNSET, Unset

KeyTransformer: TypeAlias = Callable[[Any], Hashable]
KEY_TRANSFORMATION_EXCEPTIONS: Final[tuple[type[Exception], ...]] = (
    AttributeError,
    LookupError,
    TypeError,
    ValueError,
)

_LOGGER: Final = logging.getLogger(__name__)


class ConstantDefault:
    @property
    def value(self, /) -> Any:
        return self._value

    def resolve(self, _key: Any, _mapping: Mapping[Any, Any], /) -> Any:
        return self._value

    _value: Any

    __slots__ = ('_value',)

    def __new__(cls, value: Any, /) -> Self:
        self = super().__new__(cls)
        self._value = value
        return self

    def __repr__(self, /) -> str:
        return f'{type(self).__qualname__}({self._value!r})'


class ComputedDefault:
    MAX_ARITY: ClassVar = 2

    @property
    def arity(self, /) -> int:
        return self._arity

    @property
    def function(self, /) -> Callable[..., Any]:
        return self._function

    def resolve(self, key: Any, mapping: Mapping[Any, Any], /) -> Any:
        if self._arity == 0:
            return self._function()
        if self._arity == 1:
            return self._function(key)
        return self._function(key, mapping)

    _arity: int
    _function: Callable[..., Any]

    __slots__ = ('_arity', '_function')

    def __new__(cls, function: Callable[..., Any], /) -> Self:
        if not callable(function):
            raise TypeError(
                f'Default factory should be callable, but got {function!r}.'
            )
        self = super().__new__(cls)
        self._arity, self._function = (
            min(_to_required_positionals_count(function), cls.MAX_ARITY),
            function,
        )
        return self

    def __repr__(self, /) -> str:
        return f'{type(self).__qualname__}({self._function!r})'


DefaultPolicy: TypeAlias = ConstantDefault | ComputedDefault


def _to_required_positionals_count(function: Callable[..., Any], /) -> int:
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return 0
    return sum(
        1
        for parameter in signature.parameters.values()
        if (
            parameter.kind
            in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD)
            and parameter.default is parameter.empty
        )
    )


class Variant:
    @property
    def default_policy(self, /) -> DefaultPolicy | Unset:
        return self._default_policy

    @property
    def key_transformer(self, /) -> KeyTransformer | Unset:
        return self._key_transformer

    @property
    def name(self, /) -> str:
        return self._name

    @property
    def own_required_attributes(self, /) -> tuple[Any, ...] | Unset:
        return self._own_required_attributes

    @property
    def parent(self, /) -> Variant | None:
        return self._parent

    def lineage(self, /) -> Iterator[Variant]:
        candidate: Variant | None = self
        while candidate is not None:
            yield candidate
            candidate = candidate._parent  # noqa: SLF001

    _default_policy: DefaultPolicy | Unset
    _key_transformer: KeyTransformer | Unset
    _name: str
    _own_required_attributes: tuple[Any, ...] | Unset
    _parent: Variant | None

    __slots__ = (
        '_default_policy',
        '_key_transformer',
        '_name',
        '_own_required_attributes',
        '_parent',
    )

    def __new__(
        cls,
        name: str,
        parent: Variant | None,
        /,
        *,
        default_policy: DefaultPolicy | Unset,
        key_transformer: KeyTransformer | Unset,
        own_required_attributes: tuple[Any, ...] | Unset,
    ) -> Self:
        assert parent is None or isinstance(parent, Variant), parent
        self = super().__new__(cls)
        (
            self._default_policy,
            self._key_transformer,
            self._name,
            self._own_required_attributes,
            self._parent,
        ) = (
            default_policy,
            key_transformer,
            name,
            own_required_attributes,
            parent,
        )
        return self

    def __repr__(self, /) -> str:
        return (
            f'{type(self).__qualname__}('
            f'{self._name!r}, '
            f'{self._parent!r}, '
            f'default_policy={self._default_policy!r}, '
            f'key_transformer={self._key_transformer!r}, '
            f'own_required_attributes={self._own_required_attributes!r}'
            ')'
        )


def declare_variant(
    name: str,
    parent: Variant | None,
    /,
    *,
    default: Any | Unset,
    default_factory: Callable[..., Any] | Unset,
    required: Iterable[Any] | Unset,
    transform_key: KeyTransformer | Unset,
) -> Variant:
    if default is not UNSET and default_factory is not UNSET:
        raise TypeError(
            f'{name} should declare either `default` or `default_factory`, '
            'but not both.'
        )
    if transform_key is not UNSET and not callable(transform_key):
        raise TypeError(
            f'Key transformer of {name} should be callable, '
            f'but got {transform_key!r}.'
        )
    if isinstance(required, (str, bytes)):
        raise TypeError(
            f'Required attributes of {name} should be a collection of keys, '
            f'but got a single {type(required).__qualname__} {required!r}.'
        )
    default_policy: DefaultPolicy | Unset = (
        ComputedDefault(default_factory)
        if default_factory is not UNSET
        else (ConstantDefault(default) if default is not UNSET else UNSET)
    )
    result = Variant(
        name,
        parent,
        default_policy=default_policy,
        key_transformer=transform_key,
        own_required_attributes=(
            tuple(required) if required is not UNSET else UNSET
        ),
    )
    _LOGGER.debug(
        'Declared variant %s: required attributes %r, '
        'default policy %r, key transformer %r.',
        name,
        resolve_required_attributes(result),
        resolve_default_policy(result),
        resolve_key_transformer(result),
    )
    return result


def resolve_default_policy(variant: Variant, /) -> DefaultPolicy | None:
    for candidate in variant.lineage():
        if (result := candidate.default_policy) is not UNSET:
            return result
    return None


def resolve_key_transformer(variant: Variant, /) -> KeyTransformer | None:
    for candidate in variant.lineage():
        if (result := candidate.key_transformer) is not UNSET:
            return result
    return None


def resolve_required_attributes(variant: Variant, /) -> tuple[Any, ...] | None:
    inherited = (
        None
        if variant.parent is None
        else resolve_required_attributes(variant.parent)
    )
    own = variant.own_required_attributes
    if own is UNSET:
        return inherited
    return (*(() if inherited is None else inherited), *own)
