from __future__ import annotations

import enum
from typing import Final, Literal


class Unset(enum.Enum):
    _VALUE = enum.auto()

    def __repr__(self, /) -> str:
        return 'UNSET'


UNSET: Final[Literal[Unset._VALUE]] = Unset._VALUE  # noqa: SLF001
