"""Helper for ``<select>`` elements."""

from __future__ import annotations

from queryengine.exceptions import NoSuchElementError
from queryengine.models import By, css_string
from wireclient.element import WebElement


def escape_string(value: str) -> str:
    """Quote a string for use as an XPath literal."""
    if '"' in value and "'" in value:
        parts = [f'"{part}"' for part in value.split('"')]
        return "concat(" + ", '\"', ".join(parts) + ")"
    if '"' in value:
        return f"'{value}'"
    return f'"{value}"'


def longest_token(value: str) -> str:
    """Return the longest space-separated word (the first one on ties)."""
    longest = ""
    for item in value.split(" "):
        if len(item) > len(longest):
            longest = item
    return longest


async def _set_selected(option: WebElement, select: bool) -> None:
    if await option.is_selected() != select:
        await option.click()


class SelectElement:
    """Select and deselect options of a ``<select>`` element.

    Build with ``await SelectElement.create(elem)``.
    """

    def __init__(self, element: WebElement, multiple: bool = False) -> None:
        self.element = element
        self.multiple = multiple

    @classmethod
    async def create(cls, element: WebElement) -> SelectElement:
        multiple = await element.get_attribute("multiple")
        return cls(element, multiple is not None and multiple != "false")

    async def options(self) -> list[WebElement]:
        return await self.element.find_all(By.tag("option"))

    async def all_selected_options(self) -> list[WebElement]:
        return [option for option in await self.options() if await option.is_selected()]

    async def first_selected_option(self) -> WebElement:
        for option in await self.options():
            if await option.is_selected():
                return option
        raise NoSuchElementError("No options are selected")

    # --- Selection ---

    async def select_all(self) -> None:
        self._require_multiple("select all options")
        await self._set_all(True)

    async def select_by_value(self, value: str) -> None:
        await self._set_by_value(value, True)

    async def select_by_index(self, index: int) -> None:
        await self._set_by_index(index, True)

    async def select_by_visible_text(self, text: str) -> None:
        await self._set_by_visible_text(text, True)

    async def deselect_all(self) -> None:
        self._require_multiple("deselect all options")
        await self._set_all(False)

    async def deselect_by_value(self, value: str) -> None:
        self._require_multiple("deselect options")
        await self._set_by_value(value, False)

    async def deselect_by_index(self, index: int) -> None:
        self._require_multiple("deselect options")
        await self._set_by_index(index, False)

    async def deselect_by_visible_text(self, text: str) -> None:
        self._require_multiple("deselect options")
        await self._set_by_visible_text(text, False)

    # --- Internals ---

    def _require_multiple(self, action: str) -> None:
        if not self.multiple:
            raise NotImplementedError(f"You may only {action} of a multi-select")

    async def _find_options(self, by: By) -> list[WebElement]:
        try:
            return await self.element.find_all(by)
        except NoSuchElementError:
            return []

    async def _set_all(self, select: bool) -> None:
        for option in await self.options():
            await _set_selected(option, select)

    async def _set_by_value(self, value: str, select: bool) -> None:
        options = await self._find_options(By.css(f"option[value={css_string(value)}]"))
        for option in options:
            await _set_selected(option, select)
            if not self.multiple:
                break

    async def _set_by_index(self, index: int, select: bool) -> None:
        for option in await self.options():
            if await option.get_attribute("index") == str(index):
                await _set_selected(option, select)
                return
        raise NoSuchElementError(f"Could not locate element with index {index}")

    async def _set_by_visible_text(self, text: str, select: bool) -> None:
        """Match on normalized visible text.

        If nothing matches exactly and the text has spaces, fall back to the
        options containing its longest word and compare their full text.
        Every match is changed on a multi-select; otherwise the first wins.
        """
        options = await self._find_options(
            By.xpath(f".//option[normalize-space(.) = {escape_string(text)}]")
        )

        matched = False
        for option in options:
            await _set_selected(option, select)
            if not self.multiple:
                return
            matched = True

        if not options and " " in text:
            token = longest_token(text)
            if token:
                candidates = await self._find_options(
                    By.xpath(f".//option[contains(., {escape_string(token)})]")
                )
            else:
                candidates = await self.options()

            for candidate in candidates:
                if await candidate.text() == text:
                    await _set_selected(candidate, select)
                    if not self.multiple:
                        return
                    matched = True

        if not matched:
            raise NoSuchElementError(f"Could not locate element with visible text: {text}")
