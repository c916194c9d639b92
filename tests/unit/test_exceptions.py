"""Tests for the exception hierarchy."""

import pytest

from queryengine import exceptions
from queryengine.exceptions import (
    ERROR_CODES,
    NoSuchElementError,
    RemoteError,
    StaleElementReferenceError,
    TimeoutError,
    UnknownResponseError,
    WebDriverError,
)
from wireclient.exceptions import ConnectionError, RequestTimeoutError, SessionError, WireClientError


class TestNoSuchElementError:
    def test_for_selectors(self) -> None:
        err = NoSuchElementError.for_selectors(["Id(x)", "CSS(y)"])
        assert str(err) == "Element(s) not found using selectors: [Id(x),CSS(y)]"
        assert err.selectors == ["Id(x)", "CSS(y)"]
        assert err.description == ""
        assert err.error == "no such element"

    def test_for_selectors_with_description(self) -> None:
        err = NoSuchElementError.for_selectors(["Tag(li)"], "menu items")
        assert str(err) == "'menu items' element(s) not found using selectors: [Tag(li)]"

    def test_is_remote_error(self) -> None:
        assert isinstance(NoSuchElementError("x"), RemoteError)


class TestRemoteError:
    def test_fields(self) -> None:
        err = StaleElementReferenceError(
            "gone", error="stale element reference", status=404, stacktrace="at x", data={"a": 1}
        )
        assert err.message == "gone"
        assert err.status == 404
        assert err.stacktrace == "at x"
        assert err.data == {"a": 1}


class TestErrorCodes:
    @pytest.mark.parametrize("code, exc_cls", sorted(ERROR_CODES.items()))
    def test_every_code_maps_to_remote_error(self, code, exc_cls) -> None:
        assert issubclass(exc_cls, RemoteError)
        assert exc_cls.__module__ == exceptions.__name__


class TestOtherErrors:
    def test_timeout_default_message(self) -> None:
        assert str(TimeoutError()) == "Timed out waiting for condition"
        assert str(TimeoutError("spinner stuck")) == "spinner stuck"

    def test_unknown_response_truncates_body(self) -> None:
        err = UnknownResponseError(502, "x" * 500)
        assert err.status == 502
        assert len(str(err)) < 250

    def test_client_errors_share_base(self) -> None:
        for exc in (ConnectionError("http://x"), RequestTimeoutError(), SessionError("no session")):
            assert isinstance(exc, WireClientError)
            assert isinstance(exc, WebDriverError)

    def test_connection_error_message(self) -> None:
        assert str(ConnectionError("http://x", "refused")) == "Cannot connect to http://x: refused"
