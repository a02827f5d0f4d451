"""Validated, immutable delegating wrappers over mappings."""

from __future__ import annotations

from ._core.delegator import MappingDelegator
from ._core.errors import (
    AbstractInstantiationError,
    MappingDelegatorError,
    MethodNotSupportedError,
    MissingRequiredAttributeError,
    UnknownAttributeError,
)
from ._core.operations import (
    CLOSED_OPERATIONS,
    MUTATING_METHODS,
    SAFE_OPERATIONS,
    OperationKind,
    classify_operation,
)
from ._core.variant import ComputedDefault, ConstantDefault, DefaultPolicy

__all__ = [
    'AbstractInstantiationError',
    'CLOSED_OPERATIONS',
    'ComputedDefault',
    'ConstantDefault',
    'DefaultPolicy',
    'MUTATING_METHODS',
    'MappingDelegator',
    'MappingDelegatorError',
    'MethodNotSupportedError',
    'MissingRequiredAttributeError',
    'OperationKind',
    'SAFE_OPERATIONS',
    'UnknownAttributeError',
    'classify_operation',
]

__version__ = '0.1.0'
