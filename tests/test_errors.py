"""Tests for perch.errors: exception hierarchy and error messages."""

from perch.errors import (
    ConfigurationError,
    NavigationError,
    PerchError,
    SynchronizerNotRunning,
    UnknownRouteError,
)


class TestHierarchy:
    def test_configuration_error_is_perch_error(self) -> None:
        assert issubclass(ConfigurationError, PerchError)

    def test_not_running_is_perch_error(self) -> None:
        assert issubclass(SynchronizerNotRunning, PerchError)

    def test_unknown_route_is_navigation_error(self) -> None:
        assert issubclass(UnknownRouteError, NavigationError)
        assert issubclass(NavigationError, PerchError)


class TestUnknownRouteError:
    def test_target_kept(self) -> None:
        err = UnknownRouteError("posts.missing")
        assert err.target == "posts.missing"

    def test_message(self) -> None:
        assert str(UnknownRouteError("/nowhere")) == "No route matches '/nowhere'"
