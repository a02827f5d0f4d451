from __future__ import annotations

from typing import Any


class MappingDelegatorError(Exception):
    pass


class AbstractInstantiationError(MappingDelegatorError, TypeError):
    def __init__(self, class_name: str, /) -> None:
        super().__init__(
            f'{class_name} is abstract and should not be instantiated, '
            'subclass it instead.'
        )


class MissingRequiredAttributeError(MappingDelegatorError, ValueError):
    attribute: Any
    variant_name: str

    def __init__(self, variant_name: str, attribute: Any, /) -> None:
        super().__init__(
            f'{attribute!r} is required by {variant_name}, but is missing.'
        )
        self.attribute, self.variant_name = attribute, variant_name


class MethodNotSupportedError(MappingDelegatorError, AttributeError):
    def __init__(self, variant_name: str, name: str, /) -> None:
        super().__init__(
            f'{variant_name} is immutable and does not support {name!r}.'
        )


class UnknownAttributeError(MappingDelegatorError, AttributeError):
    def __init__(self, variant_name: str, name: str, /) -> None:
        super().__init__(
            f'{variant_name} object has neither a key '
            f'nor a mapping operation named {name!r}.'
        )
