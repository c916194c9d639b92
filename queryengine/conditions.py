"""Element predicates shared by query filters and explicit waits.

Every constructor returns an ``ElementPredicate``: an async callable taking
an element handle and returning a bool. With ``ignore_errors=True`` a probe
that raises a WebDriverError counts as "not matched yet"; otherwise the
error propagates and aborts the surrounding poll.

For optional values (attribute, property, id, class, value) an absent value
never matches, so the ``lacks`` variant reports True.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Union

from queryengine.exceptions import WebDriverError
from queryengine.handle import ElementHandle
from queryengine.needle import Needle, NeedleLike, as_needle

ElementPredicate = Callable[[ElementHandle], Awaitable[bool]]
NamedNeedles = Union[Mapping[str, NeedleLike], Iterable[tuple[str, NeedleLike]]]


async def handle_errors(probe: Awaitable[bool], ignore_errors: bool) -> bool:
    """Await a probe, turning a WebDriverError into False if ignoring errors."""
    try:
        return await probe
    except WebDriverError:
        if ignore_errors:
            return False
        raise


async def negate(probe: Awaitable[bool], ignore_errors: bool) -> bool:
    """Like handle_errors, but negates a successful result."""
    try:
        return not await probe
    except WebDriverError:
        if ignore_errors:
            return False
        raise


def _pairs(desired: NamedNeedles) -> list[tuple[str, Needle]]:
    items = desired.items() if isinstance(desired, Mapping) else desired
    return [(name, as_needle(value)) for name, value in items]


async def _match(probe: Awaitable[str | None], needle: Needle, lacks: bool) -> bool:
    value = await probe
    if value is None:
        return lacks
    return needle.is_match(value) != lacks


# --- State ---


def element_is_enabled(ignore_errors: bool = True) -> ElementPredicate:
    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(elem.is_enabled(), ignore_errors)

    return predicate


def element_is_not_enabled(ignore_errors: bool = True) -> ElementPredicate:
    async def predicate(elem: ElementHandle) -> bool:
        return await negate(elem.is_enabled(), ignore_errors)

    return predicate


def element_is_selected(ignore_errors: bool = True) -> ElementPredicate:
    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(elem.is_selected(), ignore_errors)

    return predicate


def element_is_not_selected(ignore_errors: bool = True) -> ElementPredicate:
    async def predicate(elem: ElementHandle) -> bool:
        return await negate(elem.is_selected(), ignore_errors)

    return predicate


def element_is_displayed(ignore_errors: bool = True) -> ElementPredicate:
    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(elem.is_displayed(), ignore_errors)

    return predicate


def element_is_not_displayed(ignore_errors: bool = True) -> ElementPredicate:
    async def predicate(elem: ElementHandle) -> bool:
        return await negate(elem.is_displayed(), ignore_errors)

    return predicate


def element_is_clickable(ignore_errors: bool = True) -> ElementPredicate:
    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(elem.is_clickable(), ignore_errors)

    return predicate


def element_is_not_clickable(ignore_errors: bool = True) -> ElementPredicate:
    async def predicate(elem: ElementHandle) -> bool:
        return await negate(elem.is_clickable(), ignore_errors)

    return predicate


def element_is_present(ignore_errors: bool = True) -> ElementPredicate:
    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(elem.is_present(), ignore_errors)

    return predicate


def element_is_stale(ignore_errors: bool = True) -> ElementPredicate:
    async def predicate(elem: ElementHandle) -> bool:
        return await negate(elem.is_present(), ignore_errors)

    return predicate


# --- Text and value ---


def element_has_text(text: NeedleLike, ignore_errors: bool = True) -> ElementPredicate:
    needle = as_needle(text)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(_match(elem.text(), needle, False), ignore_errors)

    return predicate


def element_lacks_text(text: NeedleLike, ignore_errors: bool = True) -> ElementPredicate:
    needle = as_needle(text)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(_match(elem.text(), needle, True), ignore_errors)

    return predicate


def element_has_value(value: NeedleLike, ignore_errors: bool = True) -> ElementPredicate:
    needle = as_needle(value)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(_match(elem.value(), needle, False), ignore_errors)

    return predicate


def element_lacks_value(value: NeedleLike, ignore_errors: bool = True) -> ElementPredicate:
    needle = as_needle(value)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(_match(elem.value(), needle, True), ignore_errors)

    return predicate


# --- Identity ---


def element_has_id(id: NeedleLike, ignore_errors: bool = True) -> ElementPredicate:
    needle = as_needle(id)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(_match(elem.id(), needle, False), ignore_errors)

    return predicate


def element_lacks_id(id: NeedleLike, ignore_errors: bool = True) -> ElementPredicate:
    needle = as_needle(id)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(_match(elem.id(), needle, True), ignore_errors)

    return predicate


def element_has_class(class_name: NeedleLike, ignore_errors: bool = True) -> ElementPredicate:
    """Match the element's class attribute.

    A plain string must equal the whole class list; use
    ``StringMatch(name).word()`` to match one class among several.
    """
    needle = as_needle(class_name)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(_match(elem.class_name(), needle, False), ignore_errors)

    return predicate


def element_lacks_class(class_name: NeedleLike, ignore_errors: bool = True) -> ElementPredicate:
    needle = as_needle(class_name)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(_match(elem.class_name(), needle, True), ignore_errors)

    return predicate


def element_has_tag(tag_name: NeedleLike, ignore_errors: bool = True) -> ElementPredicate:
    needle = as_needle(tag_name)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(_match(elem.tag_name(), needle, False), ignore_errors)

    return predicate


def element_lacks_tag(tag_name: NeedleLike, ignore_errors: bool = True) -> ElementPredicate:
    needle = as_needle(tag_name)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(_match(elem.tag_name(), needle, True), ignore_errors)

    return predicate


# --- Attributes ---


def element_has_attribute(
    attribute_name: str, value: NeedleLike, ignore_errors: bool = True
) -> ElementPredicate:
    needle = as_needle(value)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(
            _match(elem.get_attribute(attribute_name), needle, False), ignore_errors
        )

    return predicate


def element_lacks_attribute(
    attribute_name: str, value: NeedleLike, ignore_errors: bool = True
) -> ElementPredicate:
    needle = as_needle(value)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(
            _match(elem.get_attribute(attribute_name), needle, True), ignore_errors
        )

    return predicate


def element_has_attributes(
    desired_attributes: NamedNeedles, ignore_errors: bool = True
) -> ElementPredicate:
    pairs = _pairs(desired_attributes)

    async def check(elem: ElementHandle) -> bool:
        for name, needle in pairs:
            if not await _match(elem.get_attribute(name), needle, False):
                return False
        return True

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(check(elem), ignore_errors)

    return predicate


def element_lacks_attributes(
    desired_attributes: NamedNeedles, ignore_errors: bool = True
) -> ElementPredicate:
    pairs = _pairs(desired_attributes)

    async def check(elem: ElementHandle) -> bool:
        for name, needle in pairs:
            if not await _match(elem.get_attribute(name), needle, True):
                return False
        return True

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(check(elem), ignore_errors)

    return predicate


# --- DOM properties ---


def element_has_property(
    property_name: str, value: NeedleLike, ignore_errors: bool = True
) -> ElementPredicate:
    needle = as_needle(value)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(
            _match(elem.get_property(property_name), needle, False), ignore_errors
        )

    return predicate


def element_lacks_property(
    property_name: str, value: NeedleLike, ignore_errors: bool = True
) -> ElementPredicate:
    needle = as_needle(value)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(
            _match(elem.get_property(property_name), needle, True), ignore_errors
        )

    return predicate


def element_has_properties(
    desired_properties: NamedNeedles, ignore_errors: bool = True
) -> ElementPredicate:
    pairs = _pairs(desired_properties)

    async def check(elem: ElementHandle) -> bool:
        for name, needle in pairs:
            if not await _match(elem.get_property(name), needle, False):
                return False
        return True

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(check(elem), ignore_errors)

    return predicate


def element_lacks_properties(
    desired_properties: NamedNeedles, ignore_errors: bool = True
) -> ElementPredicate:
    pairs = _pairs(desired_properties)

    async def check(elem: ElementHandle) -> bool:
        for name, needle in pairs:
            if not await _match(elem.get_property(name), needle, True):
                return False
        return True

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(check(elem), ignore_errors)

    return predicate


# --- CSS properties ---


def element_has_css_property(
    css_property_name: str, value: NeedleLike, ignore_errors: bool = True
) -> ElementPredicate:
    needle = as_needle(value)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(
            _match(elem.get_css_property(css_property_name), needle, False), ignore_errors
        )

    return predicate


def element_lacks_css_property(
    css_property_name: str, value: NeedleLike, ignore_errors: bool = True
) -> ElementPredicate:
    needle = as_needle(value)

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(
            _match(elem.get_css_property(css_property_name), needle, True), ignore_errors
        )

    return predicate


def element_has_css_properties(
    desired_css_properties: NamedNeedles, ignore_errors: bool = True
) -> ElementPredicate:
    pairs = _pairs(desired_css_properties)

    async def check(elem: ElementHandle) -> bool:
        for name, needle in pairs:
            if not await _match(elem.get_css_property(name), needle, False):
                return False
        return True

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(check(elem), ignore_errors)

    return predicate


def element_lacks_css_properties(
    desired_css_properties: NamedNeedles, ignore_errors: bool = True
) -> ElementPredicate:
    pairs = _pairs(desired_css_properties)

    async def check(elem: ElementHandle) -> bool:
        for name, needle in pairs:
            if not await _match(elem.get_css_property(name), needle, True):
                return False
        return True

    async def predicate(elem: ElementHandle) -> bool:
        return await handle_errors(check(elem), ignore_errors)

    return predicate
