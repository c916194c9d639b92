"""Tests for locator and option models."""

import pytest
from pydantic import ValidationError

from queryengine.models import By, ElementQueryOptions
from queryengine.poller import NoWait
from wireclient.models import ElementRect, ErrorPayload, SessionInfo


class TestBy:
    @pytest.mark.parametrize(
        "by, expected",
        [
            (By.id("x"), "Id(x)"),
            (By.css("y"), "CSS(y)"),
            (By.xpath("//a"), "XPath(//a)"),
            (By.name("q"), "Name(q)"),
            (By.tag("li"), "Tag(li)"),
            (By.class_name("btn"), "Class(btn)"),
            (By.link_text("Home"), "Link Text(Home)"),
            (By.partial_link_text("Ho"), "Partial Link Text(Ho)"),
        ],
    )
    def test_str(self, by, expected) -> None:
        assert str(by) == expected

    def test_w3c_selector(self) -> None:
        assert By.id("submit").w3c_selector() == ("css selector", '[id="submit"]')
        assert By.name("q").w3c_selector() == ("css selector", '[name="q"]')
        assert By.class_name("btn").w3c_selector() == ("css selector", ".btn")
        assert By.tag("li").w3c_selector() == ("css selector", "li")
        assert By.css("a.b").w3c_selector() == ("css selector", "a.b")
        assert By.xpath("//a").w3c_selector() == ("xpath", "//a")
        assert By.link_text("Home").w3c_selector() == ("link text", "Home")

    def test_id_quotes_are_escaped(self) -> None:
        assert By.id('a"b').w3c_selector() == ("css selector", '[id="a\\"b"]')

    def test_frozen_and_hashable(self) -> None:
        by = By.id("x")
        with pytest.raises(ValidationError):
            by.value = "y"
        assert {by: 1}[By.id("x")] == 1

    def test_rejects_unknown_strategy(self) -> None:
        with pytest.raises(ValidationError):
            By(strategy="sizzle", value="x")


class TestElementQueryOptions:
    def test_defaults_are_unset(self) -> None:
        options = ElementQueryOptions()
        assert options.poller is None
        assert options.ignore_errors is None
        assert options.description is None

    def test_accepts_poller(self) -> None:
        assert ElementQueryOptions(poller=NoWait()).poller == NoWait()

    def test_rejects_non_poller(self) -> None:
        with pytest.raises(ValidationError):
            ElementQueryOptions(poller="fast")


class TestWireModels:
    def test_session_info_alias(self) -> None:
        info = SessionInfo.model_validate({"sessionId": "abc", "capabilities": {"a": 1}})
        assert info.session_id == "abc"
        assert info.capabilities == {"a": 1}

    def test_element_rect(self) -> None:
        rect = ElementRect.model_validate({"x": 1, "y": 2.5, "width": 3, "height": 4})
        assert rect.y == 2.5

    def test_error_payload_defaults(self) -> None:
        payload = ErrorPayload.model_validate({"error": "timeout"})
        assert payload.message == ""
        assert payload.stacktrace is None
