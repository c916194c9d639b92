"""Lazily resolved, cached element lookups.

An ``ElementResolver`` binds a base element to a query function. The first
``resolve()`` runs the query and caches the result; later calls reuse it
until ``invalidate()``. Concurrent callers share one in-flight query.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from queryengine.handle import ElementHandle
from queryengine.logger import get_logger
from queryengine.models import By, ElementQueryOptions

if TYPE_CHECKING:
    from queryengine.component import Component

log = get_logger(__name__)

T = TypeVar("T")
C = TypeVar("C", bound="Component")

QueryFn = Callable[[ElementHandle], Awaitable[T]]
Validator = Callable[[T], Awaitable[bool]]

MAX_PRESENCE_PROBES = 16


async def elements_present(value: Any, max_concurrency: int = MAX_PRESENCE_PROBES) -> bool:
    """Return True if every element in ``value`` is still present.

    ``value`` may be an element handle, a component, or a list/tuple of
    either. Collections are probed concurrently, at most ``max_concurrency``
    at a time, and the check stops at the first missing member.
    """
    from queryengine.component import Component

    if isinstance(value, ElementHandle):
        return await value.is_present()
    if isinstance(value, Component):
        return await value.base_element.is_present()
    if isinstance(value, (list, tuple)):
        return await _all_present(value, max_concurrency)
    raise TypeError(f"Cannot check presence of {type(value).__name__}")


async def _all_present(items: list[Any] | tuple[Any, ...], max_concurrency: int) -> bool:
    if not items:
        return True

    semaphore = asyncio.Semaphore(max_concurrency)

    async def probe(item: Any) -> bool:
        async with semaphore:
            return await elements_present(item, max_concurrency)

    tasks = [asyncio.ensure_future(probe(item)) for item in items]
    try:
        for next_done in asyncio.as_completed(tasks):
            if not await next_done:
                return False
        return True
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


def _clone(value: T) -> T:
    if isinstance(value, list):
        return list(value)  # type: ignore[return-value]
    return value


class ElementResolver(Generic[T]):
    """Caches the result of a query run against a base element.

    ``resolve()`` shares one in-flight query between concurrent callers and
    caches only successful results. ``invalidate()`` simply drops the cache
    slot; a query already in flight still completes for its own callers.
    """

    def __init__(
        self,
        base_element: ElementHandle,
        query_fn: QueryFn[T],
        validator: Validator[T] | None = None,
    ) -> None:
        self.base_element = base_element
        self._query_fn = query_fn
        self._validator: Validator[T] = validator or elements_present
        self._slot: asyncio.Future[T] | None = None
        self._waiters: dict[asyncio.Future[T], int] = {}

    # --- Constructors ---

    @classmethod
    def new_custom(
        cls,
        base_element: ElementHandle,
        query_fn: QueryFn[T],
        validator: Validator[T] | None = None,
    ) -> ElementResolver[T]:
        """Resolver around an arbitrary query function."""
        return cls(base_element, query_fn, validator)

    @classmethod
    def new_single(cls, base_element: ElementHandle, by: By) -> ElementResolver[ElementHandle]:
        """Resolver that requires exactly one matching element."""
        return cls.new_single_opts(base_element, by, ElementQueryOptions())

    @classmethod
    def new_single_opts(
        cls, base_element: ElementHandle, by: By, options: ElementQueryOptions
    ) -> ElementResolver[ElementHandle]:
        async def query(elem: ElementHandle) -> ElementHandle:
            return await elem.query(by).options(options).single()

        return ElementResolver(base_element, query)

    @classmethod
    def new_first(cls, base_element: ElementHandle, by: By) -> ElementResolver[ElementHandle]:
        """Resolver for the first matching element."""
        return cls.new_first_opts(base_element, by, ElementQueryOptions())

    @classmethod
    def new_first_opts(
        cls, base_element: ElementHandle, by: By, options: ElementQueryOptions
    ) -> ElementResolver[ElementHandle]:
        async def query(elem: ElementHandle) -> ElementHandle:
            return await elem.query(by).options(options).first()

        return ElementResolver(base_element, query)

    @classmethod
    def new_allow_empty(
        cls, base_element: ElementHandle, by: By
    ) -> ElementResolver[list[ElementHandle]]:
        """Resolver for all matching elements. Resolves to [] if none match."""
        return cls.new_allow_empty_opts(base_element, by, ElementQueryOptions())

    @classmethod
    def new_allow_empty_opts(
        cls, base_element: ElementHandle, by: By, options: ElementQueryOptions
    ) -> ElementResolver[list[ElementHandle]]:
        async def query(elem: ElementHandle) -> list[ElementHandle]:
            return await elem.query(by).options(options).all()

        return ElementResolver(base_element, query)

    @classmethod
    def new_not_empty(
        cls, base_element: ElementHandle, by: By
    ) -> ElementResolver[list[ElementHandle]]:
        """Resolver for one or more elements.

        ``resolve()`` raises NoSuchElementError if nothing matches.
        """
        return cls.new_not_empty_opts(base_element, by, ElementQueryOptions())

    @classmethod
    def new_not_empty_opts(
        cls, base_element: ElementHandle, by: By, options: ElementQueryOptions
    ) -> ElementResolver[list[ElementHandle]]:
        async def query(elem: ElementHandle) -> list[ElementHandle]:
            return await elem.query(by).options(options).all_required()

        return ElementResolver(base_element, query)

    @classmethod
    def new_component(
        cls,
        base_element: ElementHandle,
        by: By,
        component_cls: type[C],
        options: ElementQueryOptions | None = None,
    ) -> ElementResolver[C]:
        """Resolver wrapping the single matching element in ``component_cls``."""
        opts = options or ElementQueryOptions()

        async def query(elem: ElementHandle) -> C:
            found = await elem.query(by).options(opts).single()
            return component_cls(found)

        return ElementResolver(base_element, query)

    @classmethod
    def new_components(
        cls,
        base_element: ElementHandle,
        by: By,
        component_cls: type[C],
        options: ElementQueryOptions | None = None,
        allow_empty: bool = False,
    ) -> ElementResolver[list[C]]:
        """Resolver wrapping every matching element in ``component_cls``."""
        opts = options or ElementQueryOptions()

        async def query(elem: ElementHandle) -> list[C]:
            q = elem.query(by).options(opts)
            found = await (q.all() if allow_empty else q.all_required())
            return [component_cls(e) for e in found]

        return ElementResolver(base_element, query)

    # --- Operations ---

    @property
    def is_cached(self) -> bool:
        """True if a successful result is cached."""
        slot = self._slot
        return (
            slot is not None
            and slot.done()
            and not slot.cancelled()
            and slot.exception() is None
        )

    def invalidate(self) -> None:
        """Drop any cached result. The next resolve() runs the query again."""
        if self._slot is not None:
            log.debug("resolver_invalidated", base=repr(self.base_element))
        self._slot = None

    async def resolve(self) -> T:
        """Return the cached result, running the query if there is none.

        Errors from the query propagate and are not cached.
        """
        fut = self._slot
        if fut is None or (fut.done() and not self.is_cached):
            fut = self._start_query()

        if fut.done():
            return _clone(fut.result())

        self._waiters[fut] = self._waiters.get(fut, 0) + 1
        try:
            value = await asyncio.shield(fut)
        finally:
            self._release(fut)
        return _clone(value)

    async def resolve_force(self) -> T:
        """Invalidate, then resolve."""
        self.invalidate()
        return await self.resolve()

    async def validate(self) -> T | None:
        """Return the cached result if every element in it is still present.

        Returns None if nothing is cached or the cached result is stale. The
        cache itself is left untouched.
        """
        fut = self._slot
        if fut is None or not self.is_cached:
            return None
        value = fut.result()
        if await self._validator(value):
            return _clone(value)
        log.debug("resolver_cache_stale", base=repr(self.base_element))
        return None

    async def resolve_present(self) -> T:
        """Return the cached result if still present, otherwise query again."""
        value = await self.validate()
        if value is not None:
            return value
        return await self.resolve_force()

    # --- Internals ---

    def _start_query(self) -> asyncio.Future[T]:
        fut: asyncio.Future[T] = asyncio.ensure_future(self._query_fn(self.base_element))
        fut.add_done_callback(self._on_done)
        self._slot = fut
        log.debug("resolver_query_started", base=repr(self.base_element))
        return fut

    def _on_done(self, fut: asyncio.Future[T]) -> None:
        self._waiters.pop(fut, None)
        if fut.cancelled() or fut.exception() is not None:
            # Never cache a failure, but leave a newer slot alone.
            if self._slot is fut:
                self._slot = None

    def _release(self, fut: asyncio.Future[T]) -> None:
        remaining = self._waiters.get(fut)
        if remaining is None:
            return
        if remaining > 1:
            self._waiters[fut] = remaining - 1
            return
        del self._waiters[fut]
        if not fut.done():
            log.debug("resolver_query_cancelled", base=repr(self.base_element))
            fut.cancel()

    def __repr__(self) -> str:
        return f"ElementResolver(base={self.base_element!r}, cached={self.is_cached})"
