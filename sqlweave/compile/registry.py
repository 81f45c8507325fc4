"""Resolver and connection registries (Open/Closed Principle).

Each :class:`~sqlweave.schema.config.Dialect` member maps to exactly one
resolver class and one connection class.  Supporting a new backend means
adding one enum member and registering its two implementations; nothing
that consumes a connection branches on the dialect.

``ResolverFactory``
    Central registry for :class:`~sqlweave.compile.base.SQLResolver`
    implementations.

``ConnectionFactory``
    Central registry for :class:`~sqlweave.db.base.Connection`
    implementations, used by :func:`sqlweave.db.connect`.

Usage::

    from sqlweave.compile.registry import ResolverFactory

    @ResolverFactory.register(Dialect.MYSQL)
    class MySQLResolver(SQLResolver):
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, ClassVar, TypeVar

from sqlweave.compile.base import SQLResolver
from sqlweave.errors import ConfigurationError
from sqlweave.schema.config import Dialect

if TYPE_CHECKING:
    from sqlweave.db.base import Connection

T = TypeVar("T")


def _to_dialect(name: Dialect | str) -> Dialect:
    try:
        return Dialect(name)
    except ValueError:
        supported = sorted(d.value for d in Dialect)
        raise ConfigurationError(
            f"Unsupported dialect: '{name}'. Supported dialects: {supported}."
        ) from None


class _DialectRegistry:
    """Shared lookup logic for the per-dialect registries below."""

    _entries: ClassVar[dict[Dialect, type]]
    _kind: ClassVar[str] = "implementation"

    @classmethod
    def register(cls, name: Dialect | str) -> Callable[[type[T]], type[T]]:
        """Decorator that registers a class under ``name``.

        Args:
            name: The dialect (e.g. ``Dialect.POSTGRES`` or ``"postgres"``).

        Returns:
            A decorator that registers and returns the class.
        """

        def decorator(impl_cls: type[T]) -> type[T]:
            cls._entries[_to_dialect(name)] = impl_cls
            return impl_cls

        return decorator

    @classmethod
    def register_class(cls, name: Dialect | str, impl_cls: type) -> None:
        """Register a class without using the decorator form."""
        cls._entries[_to_dialect(name)] = impl_cls

    @classmethod
    def lookup(cls, name: Dialect | str) -> type:
        """Return the class registered for ``name``.

        Raises:
            ConfigurationError: If ``name`` is not a dialect or nothing is
                registered for it.
        """
        dialect = _to_dialect(name)
        impl_cls = cls._entries.get(dialect)
        if impl_cls is None:
            registered = sorted(d.value for d in cls._entries)
            raise ConfigurationError(
                f"No {cls._kind} registered for dialect '{dialect.value}'. "
                f"Registered dialects: {registered}."
            )
        return impl_cls

    @classmethod
    def registered_dialects(cls) -> list[str]:
        """Return the sorted list of registered dialect names."""
        return sorted(d.value for d in cls._entries)


class ResolverFactory(_DialectRegistry):
    """Registry mapping dialects to :class:`SQLResolver` classes.

    Example::

        resolver = ResolverFactory.create(Dialect.POSTGRES)
        resolver.resolve(sql(["SELECT ", ""], 1)).sql  # 'SELECT $1'
    """

    _entries: ClassVar[dict[Dialect, type]] = {}
    _kind = "resolver"

    @classmethod
    def create(cls, name: Dialect | str) -> SQLResolver:
        """Instantiate the resolver registered for ``name``."""
        return cls.lookup(name)()


class ConnectionFactory(_DialectRegistry):
    """Registry mapping dialects to :class:`~sqlweave.db.base.Connection` classes."""

    _entries: ClassVar[dict[Dialect, type]] = {}
    _kind = "connection class"

    @classmethod
    def get(cls, name: Dialect | str) -> type[Connection]:
        """Return the connection class registered for ``name``."""
        return cls.lookup(name)
