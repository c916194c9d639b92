"""Element query engine.

An ``ElementQuery`` holds one or more selector branches, each a locator
plus ordered filters. On every poll attempt the branches are tried in
order and the first branch whose (filtered) result satisfies the call wins
that attempt; later branches are not evaluated. A locator that finds
nothing counts as an empty result, while any other error aborts the query.

Example::

    button = await (
        driver.query(By.css("thiswont.match"))
        .with_text("testing")
        .or_(By.id("button1"))
        .with_class(StringMatch("pure-button").word())
        .and_enabled()
        .first()
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field

from queryengine import conditions
from queryengine.conditions import ElementPredicate, NamedNeedles
from queryengine.exceptions import NoSuchElementError
from queryengine.handle import ElementHandle, ElementSource
from queryengine.logger import get_logger
from queryengine.models import By, ElementQueryOptions
from queryengine.needle import NeedleLike
from queryengine.poller import DEFAULT_POLLER, ElementPoller, NoWait, TimeoutWithInterval

log = get_logger(__name__)


async def filter_elements(
    elements: list[ElementHandle], filters: list[ElementPredicate]
) -> list[ElementHandle]:
    """Apply filters in order, stopping as soon as nothing is left."""
    for predicate in filters:
        elements = [elem for elem in elements if await predicate(elem)]
        if not elements:
            break
    return elements


@dataclass
class ElementSelector:
    """One OR-branch of a query: a locator plus its filters."""

    by: By
    filters: list[ElementPredicate] = field(default_factory=list)

    def add_filter(self, predicate: ElementPredicate) -> None:
        self.filters.append(predicate)

    async def run_filters(self, elements: list[ElementHandle]) -> list[ElementHandle]:
        return await filter_elements(elements, self.filters)


class ElementQuery:
    """Builder for polling element lookups."""

    def __init__(
        self,
        source: ElementSource,
        *locators: By,
        poller: ElementPoller | None = None,
    ) -> None:
        self._source = source
        self._selectors = [ElementSelector(by) for by in locators]
        self._poller = poller or DEFAULT_POLLER
        self._ignore_errors = True
        self._description = ""

    @property
    def selectors(self) -> list[ElementSelector]:
        return self._selectors

    @property
    def poller(self) -> ElementPoller:
        return self._poller

    # --- Configuration ---

    def desc(self, description: str) -> ElementQuery:
        """Name the query; the name appears in NoSuchElementError messages."""
        self._description = description
        return self

    def ignore_errors(self, ignore: bool = True) -> ElementQuery:
        """Set error handling for filters added after this call."""
        self._ignore_errors = ignore
        return self

    def options(self, options: ElementQueryOptions) -> ElementQuery:
        """Apply any fields set on ``options``."""
        if options.poller is not None:
            self._poller = options.poller
        if options.ignore_errors is not None:
            self._ignore_errors = options.ignore_errors
        if options.description is not None:
            self._description = options.description
        return self

    def with_poller(self, poller: ElementPoller) -> ElementQuery:
        self._poller = poller
        return self

    def wait(self, timeout: float, interval: float) -> ElementQuery:
        """Poll every ``interval`` seconds for up to ``timeout`` seconds."""
        return self.with_poller(TimeoutWithInterval(timeout, interval))

    def nowait(self) -> ElementQuery:
        """Make a single attempt."""
        return self.with_poller(NoWait())

    def or_(self, by: By) -> ElementQuery:
        """Add another branch. Filters added afterwards apply to this branch."""
        self._selectors.append(ElementSelector(by))
        return self

    # --- Terminal calls ---

    async def exists(self) -> bool:
        satisfied, _ = await self._run_poller()
        return satisfied

    async def not_exists(self) -> bool:
        satisfied, _ = await self._run_poller(inverted=True)
        return satisfied

    async def first_opt(self) -> ElementHandle | None:
        _, elements = await self._run_poller()
        return elements[0] if elements else None

    async def first(self) -> ElementHandle:
        """Return the first match.

        Raises:
            NoSuchElementError: If nothing matched before the poller ran out.
        """
        _, elements = await self._run_poller()
        if not elements:
            raise self._no_such_element()
        return elements[0]

    async def single(self) -> ElementHandle:
        """Return the only match.

        Raises:
            NoSuchElementError: If the winning branch matched zero or several elements.
        """
        _, elements = await self._run_poller()
        if len(elements) != 1:
            raise self._no_such_element()
        return elements[0]

    async def all(self) -> list[ElementHandle]:
        """Return every element from the winning branch, possibly none."""
        _, elements = await self._run_poller()
        return elements

    async def all_required(self) -> list[ElementHandle]:
        _, elements = await self._run_poller()
        if not elements:
            raise self._no_such_element()
        return elements

    # --- Polling ---

    def _no_such_element(self) -> NoSuchElementError:
        return NoSuchElementError.for_selectors(
            [str(s.by) for s in self._selectors], self._description
        )

    async def _run_poller(
        self, inverted: bool = False
    ) -> tuple[bool, list[ElementHandle]]:
        """Poll until a branch satisfies the call or the poller runs out.

        Returns whether a branch was satisfied, with the elements from the last
        branch evaluated. In inverted mode a branch is satisfied when it comes
        back empty. Callers decide whether exhaustion is an error.
        """
        if not self._selectors:
            raise self._no_such_element()

        ticker = self._poller.start()
        while True:
            for selector in self._selectors:
                elements = await self._fetch(selector.by)
                if elements:
                    elements = await selector.run_filters(elements)

                if bool(elements) != inverted:
                    log.debug(
                        "query_matched",
                        selector=str(selector.by),
                        count=len(elements),
                        inverted=inverted,
                    )
                    return True, elements

            if not await ticker.tick():
                log.debug(
                    "query_exhausted",
                    selectors=[str(s.by) for s in self._selectors],
                    description=self._description or None,
                )
                return False, elements

    async def _fetch(self, by: By) -> list[ElementHandle]:
        try:
            return await self._source.find_all(by)
        except NoSuchElementError:
            return []

    # --- Filters ---

    def with_filter(self, predicate: ElementPredicate) -> ElementQuery:
        """Add a filter to the most recently added branch."""
        if self._selectors:
            self._selectors[-1].add_filter(predicate)
        return self

    def and_enabled(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_enabled(self._ignore_errors))

    def and_not_enabled(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_not_enabled(self._ignore_errors))

    def and_selected(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_selected(self._ignore_errors))

    def and_not_selected(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_not_selected(self._ignore_errors))

    def and_displayed(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_displayed(self._ignore_errors))

    def and_not_displayed(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_not_displayed(self._ignore_errors))

    def and_clickable(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_clickable(self._ignore_errors))

    def and_not_clickable(self) -> ElementQuery:
        return self.with_filter(conditions.element_is_not_clickable(self._ignore_errors))

    def with_text(self, text: NeedleLike) -> ElementQuery:
        return self.with_filter(conditions.element_has_text(text, self._ignore_errors))

    def without_text(self, text: NeedleLike) -> ElementQuery:
        return self.with_filter(conditions.element_lacks_text(text, self._ignore_errors))

    def with_id(self, id: NeedleLike) -> ElementQuery:
        return self.with_filter(conditions.element_has_id(id, self._ignore_errors))

    def without_id(self, id: NeedleLike) -> ElementQuery:
        return self.with_filter(conditions.element_lacks_id(id, self._ignore_errors))

    def with_class(self, class_name: NeedleLike) -> ElementQuery:
        return self.with_filter(conditions.element_has_class(class_name, self._ignore_errors))

    def without_class(self, class_name: NeedleLike) -> ElementQuery:
        return self.with_filter(conditions.element_lacks_class(class_name, self._ignore_errors))

    def with_tag(self, tag_name: NeedleLike) -> ElementQuery:
        return self.with_filter(conditions.element_has_tag(tag_name, self._ignore_errors))

    def without_tag(self, tag_name: NeedleLike) -> ElementQuery:
        return self.with_filter(conditions.element_lacks_tag(tag_name, self._ignore_errors))

    def with_value(self, value: NeedleLike) -> ElementQuery:
        return self.with_filter(conditions.element_has_value(value, self._ignore_errors))

    def without_value(self, value: NeedleLike) -> ElementQuery:
        return self.with_filter(conditions.element_lacks_value(value, self._ignore_errors))

    def with_attribute(self, attribute_name: str, value: NeedleLike) -> ElementQuery:
        return self.with_filter(
            conditions.element_has_attribute(attribute_name, value, self._ignore_errors)
        )

    def without_attribute(self, attribute_name: str, value: NeedleLike) -> ElementQuery:
        return self.with_filter(
            conditions.element_lacks_attribute(attribute_name, value, self._ignore_errors)
        )

    def with_attributes(self, desired_attributes: NamedNeedles) -> ElementQuery:
        return self.with_filter(
            conditions.element_has_attributes(desired_attributes, self._ignore_errors)
        )

    def without_attributes(self, desired_attributes: NamedNeedles) -> ElementQuery:
        return self.with_filter(
            conditions.element_lacks_attributes(desired_attributes, self._ignore_errors)
        )

    def with_property(self, property_name: str, value: NeedleLike) -> ElementQuery:
        return self.with_filter(
            conditions.element_has_property(property_name, value, self._ignore_errors)
        )

    def without_property(self, property_name: str, value: NeedleLike) -> ElementQuery:
        return self.with_filter(
            conditions.element_lacks_property(property_name, value, self._ignore_errors)
        )

    def with_properties(self, desired_properties: NamedNeedles) -> ElementQuery:
        return self.with_filter(
            conditions.element_has_properties(desired_properties, self._ignore_errors)
        )

    def without_properties(self, desired_properties: NamedNeedles) -> ElementQuery:
        return self.with_filter(
            conditions.element_lacks_properties(desired_properties, self._ignore_errors)
        )

    def with_css_property(self, css_property_name: str, value: NeedleLike) -> ElementQuery:
        return self.with_filter(
            conditions.element_has_css_property(css_property_name, value, self._ignore_errors)
        )

    def without_css_property(self, css_property_name: str, value: NeedleLike) -> ElementQuery:
        return self.with_filter(
            conditions.element_lacks_css_property(css_property_name, value, self._ignore_errors)
        )

    def with_css_properties(self, desired_css_properties: NamedNeedles) -> ElementQuery:
        return self.with_filter(
            conditions.element_has_css_properties(desired_css_properties, self._ignore_errors)
        )

    def without_css_properties(self, desired_css_properties: NamedNeedles) -> ElementQuery:
        return self.with_filter(
            conditions.element_lacks_css_properties(
                desired_css_properties, self._ignore_errors
            )
        )
