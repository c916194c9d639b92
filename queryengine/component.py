"""Component wrappers: page-object style classes built on resolvers.

A component wraps one base element and declares its children as resolvers
in ``__init__``::

    class Editor(Component):
        def __init__(self, base_element):
            super().__init__(base_element)
            self.textarea = self.single(By.tag("textarea"))

        async def write_text(self, text):
            elem = await self.textarea.resolve()
            await elem.send_keys(text)

    class PlaygroundPage(Component):
        def __init__(self, base_element):
            super().__init__(base_element)
            self.editor = self.component(By.xpath(".//div[@id='editor']"), Editor)
            self.buttons = self.all(By.tag("button"))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from queryengine.models import By, ElementQueryOptions
from queryengine.resolver import ElementResolver

if TYPE_CHECKING:
    from queryengine.handle import ElementHandle
    from queryengine.query import ElementQuery
    from queryengine.waiter import ElementWaiter

C = TypeVar("C", bound="Component")


class Component:
    """Base class for wrappers around a single base element."""

    def __init__(self, base_element: ElementHandle) -> None:
        self.base_element = base_element

    @classmethod
    def from_element(cls: type[C], element: ElementHandle) -> C:
        return cls(element)

    def single(
        self, by: By, options: ElementQueryOptions | None = None
    ) -> ElementResolver[ElementHandle]:
        return ElementResolver.new_single_opts(
            self.base_element, by, options or ElementQueryOptions()
        )

    def first(
        self, by: By, options: ElementQueryOptions | None = None
    ) -> ElementResolver[ElementHandle]:
        return ElementResolver.new_first_opts(
            self.base_element, by, options or ElementQueryOptions()
        )

    def all(
        self, by: By, options: ElementQueryOptions | None = None
    ) -> ElementResolver[list[ElementHandle]]:
        return ElementResolver.new_allow_empty_opts(
            self.base_element, by, options or ElementQueryOptions()
        )

    def not_empty(
        self, by: By, options: ElementQueryOptions | None = None
    ) -> ElementResolver[list[ElementHandle]]:
        return ElementResolver.new_not_empty_opts(
            self.base_element, by, options or ElementQueryOptions()
        )

    def component(
        self, by: By, component_cls: type[C], options: ElementQueryOptions | None = None
    ) -> ElementResolver[C]:
        return ElementResolver.new_component(self.base_element, by, component_cls, options)

    def components(
        self,
        by: By,
        component_cls: type[C],
        options: ElementQueryOptions | None = None,
        allow_empty: bool = False,
    ) -> ElementResolver[list[C]]:
        return ElementResolver.new_components(
            self.base_element, by, component_cls, options, allow_empty
        )

    def query(self, by: By, *alternatives: By) -> ElementQuery:
        """Query relative to the base element."""
        return self.base_element.query(by, *alternatives)

    def wait_until(self) -> ElementWaiter:
        """Explicit wait on the base element."""
        return self.base_element.wait_until()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.base_element!r})"
