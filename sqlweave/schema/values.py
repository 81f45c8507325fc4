"""Tagged classification of values interpolated into a Statement.

Every value handed to :meth:`~sqlweave.schema.statement.Statement.append`
falls into exactly one :class:`FragmentKind`.  Statements are recognised
structurally (a ``fragment_kind`` marker plus list-typed ``fragments`` and
``parameters``) rather than with ``isinstance``, so a Statement created by a
second, independently imported copy of this package still composes.

Usage::

    from sqlweave.schema.values import FragmentKind, classify

    assert classify(42) is FragmentKind.SCALAR
    assert classify(None) is FragmentKind.SCALAR  # SQL NULL
    assert classify(OMITTED) is FragmentKind.ABSENT
"""

from __future__ import annotations

import datetime
import uuid
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any, Union

from sqlweave.errors import CompositionError

#: Python types bound as a single positional parameter.
SCALAR_TYPES: tuple[type, ...] = (
    str,
    int,
    float,
    Decimal,
    bytes,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
)

#: A value that can be sent to the driver as one bound parameter.
Scalar = Union[
    str, int, float, Decimal, bytes, datetime.date, datetime.time,
    datetime.timedelta, uuid.UUID, None,
]

#: Characters that open and close a quoted identifier in literal SQL text.
IDENTIFIER_QUOTES = '"`'


class FragmentKind(str, Enum):
    """The interpolation variants understood by the composition engine."""

    STATEMENT = "statement"
    SCALAR = "scalar"
    ARRAY = "array"
    OBJECT = "object"
    ABSENT = "absent"


class _Omitted:
    """Marker for an interpolation that should vanish from the statement."""

    fragment_kind = FragmentKind.ABSENT.value

    def __repr__(self) -> str:
        return "OMITTED"

    def __bool__(self) -> bool:
        return False


#: Interpolate this to leave an optional clause out entirely.
OMITTED = _Omitted()


def is_statement(value: Any) -> bool:
    """Return whether ``value`` carries an ordered fragment/parameter list."""
    return (
        getattr(value, "fragment_kind", None) == FragmentKind.STATEMENT.value
        and isinstance(getattr(value, "fragments", None), list)
        and isinstance(getattr(value, "parameters", None), list)
    )


def classify(value: Any) -> FragmentKind:
    """Return the :class:`FragmentKind` of an interpolated value.

    Args:
        value: Anything passed to ``Statement.append``.

    Returns:
        The matching kind, checked in composition priority order.

    Raises:
        CompositionError: If the value's type cannot be interpolated.
    """
    if is_statement(value):
        return FragmentKind.STATEMENT
    if value is None or isinstance(value, SCALAR_TYPES):
        return FragmentKind.SCALAR
    if getattr(value, "fragment_kind", None) == FragmentKind.ABSENT.value:
        return FragmentKind.ABSENT
    if isinstance(value, (list, tuple)):
        return FragmentKind.ARRAY
    if isinstance(value, Mapping):
        return FragmentKind.OBJECT
    raise CompositionError(
        f"Cannot interpolate a value of type {type(value).__name__}"
    )
