"""Explicit waits on a single, already resolved element."""

from __future__ import annotations

from collections.abc import Iterable

from queryengine import conditions
from queryengine.conditions import ElementPredicate, NamedNeedles
from queryengine.exceptions import TimeoutError
from queryengine.handle import ElementHandle
from queryengine.logger import get_logger
from queryengine.needle import NeedleLike
from queryengine.poller import ElementPoller, TimeoutWithInterval

log = get_logger(__name__)


class ElementWaiter:
    """Poll one element until every condition holds.

    Unlike a query, running out of time is an error::

        await elem.wait_until().error("button never enabled").enabled()
    """

    def __init__(self, element: ElementHandle, poller: ElementPoller) -> None:
        self._element = element
        self._poller = poller
        self._message = ""
        self._ignore_errors = True

    def with_poller(self, poller: ElementPoller) -> ElementWaiter:
        self._poller = poller
        return self

    def wait(self, timeout: float, interval: float) -> ElementWaiter:
        return self.with_poller(TimeoutWithInterval(timeout, interval))

    def error(self, message: str) -> ElementWaiter:
        """Message carried by the TimeoutError if the wait runs out."""
        self._message = message
        return self

    def ignore_errors(self, ignore: bool = True) -> ElementWaiter:
        self._ignore_errors = ignore
        return self

    async def _run_poller(self, predicates: list[ElementPredicate]) -> bool:
        ticker = self._poller.start()
        while True:
            for predicate in predicates:
                if not await predicate(self._element):
                    break
            else:
                return True

            if not await ticker.tick():
                return False

    async def conditions(self, predicates: Iterable[ElementPredicate]) -> None:
        """Wait until all predicates return True for the element.

        Raises:
            TimeoutError: If the poller ran out first.
        """
        if not await self._run_poller(list(predicates)):
            log.debug("wait_timed_out", message=self._message or None)
            raise TimeoutError(self._message)

    async def condition(self, predicate: ElementPredicate) -> None:
        await self.conditions([predicate])

    async def stale(self) -> None:
        """Wait until the element no longer refers to a live node."""
        await self.condition(conditions.element_is_stale(self._ignore_errors))

    async def displayed(self) -> None:
        await self.condition(conditions.element_is_displayed(self._ignore_errors))

    async def not_displayed(self) -> None:
        await self.condition(conditions.element_is_not_displayed(self._ignore_errors))

    async def selected(self) -> None:
        await self.condition(conditions.element_is_selected(self._ignore_errors))

    async def not_selected(self) -> None:
        await self.condition(conditions.element_is_not_selected(self._ignore_errors))

    async def enabled(self) -> None:
        await self.condition(conditions.element_is_enabled(self._ignore_errors))

    async def not_enabled(self) -> None:
        await self.condition(conditions.element_is_not_enabled(self._ignore_errors))

    async def clickable(self) -> None:
        await self.condition(conditions.element_is_clickable(self._ignore_errors))

    async def not_clickable(self) -> None:
        await self.condition(conditions.element_is_not_clickable(self._ignore_errors))

    async def has_text(self, text: NeedleLike) -> None:
        await self.condition(conditions.element_has_text(text, self._ignore_errors))

    async def lacks_text(self, text: NeedleLike) -> None:
        await self.condition(conditions.element_lacks_text(text, self._ignore_errors))

    async def has_value(self, value: NeedleLike) -> None:
        await self.condition(conditions.element_has_value(value, self._ignore_errors))

    async def lacks_value(self, value: NeedleLike) -> None:
        await self.condition(conditions.element_lacks_value(value, self._ignore_errors))

    async def has_id(self, id: NeedleLike) -> None:
        await self.condition(conditions.element_has_id(id, self._ignore_errors))

    async def lacks_id(self, id: NeedleLike) -> None:
        await self.condition(conditions.element_lacks_id(id, self._ignore_errors))

    async def has_class(self, class_name: NeedleLike) -> None:
        await self.condition(conditions.element_has_class(class_name, self._ignore_errors))

    async def lacks_class(self, class_name: NeedleLike) -> None:
        await self.condition(conditions.element_lacks_class(class_name, self._ignore_errors))

    async def has_tag(self, tag_name: NeedleLike) -> None:
        await self.condition(conditions.element_has_tag(tag_name, self._ignore_errors))

    async def lacks_tag(self, tag_name: NeedleLike) -> None:
        await self.condition(conditions.element_lacks_tag(tag_name, self._ignore_errors))

    async def has_attribute(self, attribute_name: str, value: NeedleLike) -> None:
        await self.condition(
            conditions.element_has_attribute(attribute_name, value, self._ignore_errors)
        )

    async def lacks_attribute(self, attribute_name: str, value: NeedleLike) -> None:
        await self.condition(
            conditions.element_lacks_attribute(attribute_name, value, self._ignore_errors)
        )

    async def has_attributes(self, desired_attributes: NamedNeedles) -> None:
        await self.condition(
            conditions.element_has_attributes(desired_attributes, self._ignore_errors)
        )

    async def lacks_attributes(self, desired_attributes: NamedNeedles) -> None:
        await self.condition(
            conditions.element_lacks_attributes(desired_attributes, self._ignore_errors)
        )

    async def has_property(self, property_name: str, value: NeedleLike) -> None:
        await self.condition(
            conditions.element_has_property(property_name, value, self._ignore_errors)
        )

    async def lacks_property(self, property_name: str, value: NeedleLike) -> None:
        await self.condition(
            conditions.element_lacks_property(property_name, value, self._ignore_errors)
        )

    async def has_properties(self, desired_properties: NamedNeedles) -> None:
        await self.condition(
            conditions.element_has_properties(desired_properties, self._ignore_errors)
        )

    async def lacks_properties(self, desired_properties: NamedNeedles) -> None:
        await self.condition(
            conditions.element_lacks_properties(desired_properties, self._ignore_errors)
        )

    async def has_css_property(self, css_property_name: str, value: NeedleLike) -> None:
        await self.condition(
            conditions.element_has_css_property(css_property_name, value, self._ignore_errors)
        )

    async def lacks_css_property(self, css_property_name: str, value: NeedleLike) -> None:
        await self.condition(
            conditions.element_lacks_css_property(css_property_name, value, self._ignore_errors)
        )

    async def has_css_properties(self, desired_css_properties: NamedNeedles) -> None:
        await self.condition(
            conditions.element_has_css_properties(desired_css_properties, self._ignore_errors)
        )

    async def lacks_css_properties(self, desired_css_properties: NamedNeedles) -> None:
        await self.condition(
            conditions.element_lacks_css_properties(
                desired_css_properties, self._ignore_errors
            )
        )
