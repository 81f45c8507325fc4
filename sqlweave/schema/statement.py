"""The Statement composition engine.

A :class:`Statement` is literal SQL text interleaved with parameter slots::

    fragments:  ['SELECT * FROM "', '" WHERE id = ', '']
    parameters: ['users',            7]

``len(fragments) == len(parameters) + 1`` always holds; parameter *i* sits
between ``fragments[i]`` and ``fragments[i + 1]``.

What an interpolated value turns into depends on the literal text right
before it:

=================================  =========================================
Written as                         Produces
=================================  =========================================
``sql(["id = ", ""], 7)``          bound parameter ``id = $1``
``sql(['FROM "', '"'], "users")``  escaped identifier ``FROM "users"``
``sql(['"', '"'], ["a", "b"])``    identifier list ``"a", "b"``
``sql(["IN (", ")"], [1, 2])``     value list ``IN ($1, $2)``
``sql(["INTO t (", ")"], row)``    ``INTO t ("a", "b") VALUES ($1, $2)``
``sql(["SET ", ""], row)``         ``SET "a" = $1, "b" = $2``
=================================  =========================================

Whether a slot becomes an identifier is decided later, by the dialect
resolver (see :mod:`sqlweave.compile.base`); this module only records the
fragment/parameter layout.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sqlweave.errors import CompositionError
from sqlweave.schema.values import (
    IDENTIFIER_QUOTES,
    FragmentKind,
    Scalar,
    classify,
    is_statement,
)


class Statement:
    """An ordered, mutable composition of SQL text and bound parameters.

    Args:
        strings: Literal text segments, or a single string.
        values: Interpolated values; exactly one fewer than ``strings``.

    Raises:
        CompositionError: If the segment/value counts do not line up or a
            value cannot be interpolated where it appears.
    """

    fragment_kind = FragmentKind.STATEMENT.value

    def __init__(
        self,
        strings: Sequence[str] | str = ("",),
        values: Sequence[Any] = (),
    ) -> None:
        if isinstance(strings, str):
            strings = (strings,)
        if not strings:
            raise CompositionError("A statement needs at least one literal segment.")
        if len(values) != len(strings) - 1:
            raise CompositionError(
                f"Expected {len(strings) - 1} interpolated value(s) for "
                f"{len(strings)} literal segment(s), got {len(values)}."
            )
        self.fragments: list[str] = [strings[0]]
        self.parameters: list[Scalar] = []
        for value, literal in zip(values, strings[1:]):
            self.append(value).append_raw(literal)

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def append_raw(self, text: str) -> Statement:
        """Concatenate literal SQL onto the last fragment."""
        self.fragments[-1] += text
        return self

    def append(self, value: Any) -> Statement:
        """Append an interpolated value; see the module docstring for the rules."""
        kind = classify(value)
        if kind is FragmentKind.STATEMENT:
            self._append_statement(value)
        elif kind is FragmentKind.SCALAR:
            self.parameters.append(value)
            self.fragments.append("")
        elif kind is FragmentKind.ARRAY:
            self._append_array(value)
        elif kind is FragmentKind.OBJECT:
            self._append_mapping(value)
        return self

    def _append_statement(self, other: Any) -> None:
        fragments = list(other.fragments)
        parameters = list(other.parameters)
        if not fragments:
            return
        self.append_raw(fragments[0])
        self.fragments.extend(fragments[1:])
        self.parameters.extend(parameters)

    def _append_array(self, items: Sequence[Any]) -> None:
        if not items or is_statement(items[0]):
            for item in items:
                self.append(item)
            return

        last = self.fragments[-1]
        if last and last[-1] in IDENTIFIER_QUOTES:
            # "a", "b"
            separator = f"{last[-1]}, {last[-1]}"
        else:
            # 1, 2
            separator = ", "
        for i, item in enumerate(items):
            if i:
                self.append_raw(separator)
            self.append(item)

    def _append_mapping(self, row: Mapping[str, Any]) -> None:
        last = self.fragments[-1]
        # OMITTED values drop their column entirely.
        row = {k: v for k, v in row.items() if classify(v) is not FragmentKind.ABSENT}
        if not row:
            raise CompositionError("Cannot interpolate an empty mapping.", trailing=last)

        if last.endswith("("):
            # ("a", "b") VALUES (1, 2)
            self.append_raw('"')
            for i, column in enumerate(row):
                if i:
                    self.append_raw('", "')
                self.append(column)
            self.append_raw('") VALUES (')
            for i, value in enumerate(row.values()):
                if i:
                    self.append_raw(", ")
                self.append(value)
        elif last.upper().endswith(" SET "):
            # "a" = 1, "b" = 2
            self.append_raw('"')
            for i, (column, value) in enumerate(row.items()):
                if i:
                    self.append_raw(', "')
                self.append(column).append_raw('" = ').append(value)
        else:
            raise CompositionError(
                f"Mappings can only appear in (obj) or after SET; unrecognized: {last}[obj]",
                trailing=last,
            )

    @classmethod
    def join(cls, parts: Iterable[Any], separator: str = ", ") -> Statement:
        """Compose ``parts`` in order with literal ``separator`` between them.

        Example::

            where = Statement.join(
                [sql(['"a" = ', ""], 1), sql(['"b" = ', ""], 2)], " AND "
            )
        """
        result = cls()
        for i, part in enumerate(parts):
            if i:
                result.append_raw(separator)
            result.append(part)
        return result

    # ------------------------------------------------------------------
    # Python protocol helpers
    # ------------------------------------------------------------------

    def copy(self) -> Statement:
        """Return an independent Statement with the same content."""
        return Statement().append(self)

    def __add__(self, other: Any) -> Statement:
        return self.copy().append(other)

    def __iadd__(self, other: Any) -> Statement:
        return self.append(other)

    def __bool__(self) -> bool:
        return bool(self.parameters) or bool("".join(self.fragments).strip())

    def __eq__(self, other: object) -> bool:
        if not is_statement(other):
            return NotImplemented
        return self.fragments == other.fragments and self.parameters == other.parameters

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Statement(fragments={self.fragments!r}, parameters={self.parameters!r})"


def sql(strings: Sequence[str] | str, *values: Any) -> Statement:
    """Build a :class:`Statement` from literal segments and interpolated values.

    The segments play the role of a template's literal parts::

        sql(['SELECT * FROM "', '" WHERE id = ', ""], "users", 7)
        sql("SELECT 1")  # no interpolations

    Args:
        strings: Literal text segments, or a single string.
        *values: One value per gap between segments.

    Returns:
        A new Statement.
    """
    return Statement(strings, values)
