"""Tests for gf.core.result module."""

import pytest

from gf.core.result import Err, Ok, Result, is_err, is_ok
from gf.flow.errors import FlowError, tool_error
from gf.git.repository import GitError


class TestOk:
    """Tests for Ok type."""

    def test_ok_is_ok(self) -> None:
        result = Ok("1.2.0")
        assert result.is_ok() is True
        assert result.is_err() is False

    def test_ok_unwrap(self) -> None:
        """Ok.unwrap() and unwrap_or() return the value."""
        result = Ok("1.2.0")
        assert result.unwrap() == "1.2.0"
        assert result.unwrap_or("0.0.0") == "1.2.0"

    def test_ok_unwrap_err_raises(self) -> None:
        with pytest.raises(ValueError, match="called unwrap_err on Ok"):
            Ok("develop").unwrap_err()

    def test_ok_map(self) -> None:
        result = Ok("develop\n")
        assert result.map(str.strip) == Ok("develop")

    def test_ok_map_err_is_identity(self) -> None:
        result: Result[str, GitError] = Ok("develop")
        assert result.map_err(tool_error) == Ok("develop")

    def test_ok_flat_map(self) -> None:
        result: Result[str, str] = Ok("")
        flat = result.flat_map(lambda v: Err("blank") if not v else Ok(v))
        assert flat == Err("blank")

    def test_ok_frozen(self) -> None:
        result = Ok(42)
        with pytest.raises(AttributeError):
            result.value = 0  # type: ignore[misc]

    def test_ok_repr(self) -> None:
        assert repr(Ok("1.2.0")) == "Ok('1.2.0')"


class TestErr:
    """Tests for Err type."""

    def test_err_unwrap_raises(self) -> None:
        """Err.unwrap() raises ValueError."""
        with pytest.raises(ValueError, match="called unwrap on Err"):
            Err("tests failed").unwrap()

    def test_err_unwrap_or(self) -> None:
        result: Result[str, str] = Err("no version")
        assert result.unwrap_or("1.0") == "1.0"

    def test_err_unwrap_err(self) -> None:
        assert Err("dirty tree").unwrap_err() == "dirty tree"

    def test_err_map_is_identity(self) -> None:
        result: Result[str, str] = Err("error")
        assert result.map(str.upper) == Err("error")
        assert result.flat_map(lambda v: Ok(v)) == Err("error")

    def test_err_map_err_converts_gateway_error(self) -> None:
        """A git failure becomes an external tool flow error."""
        result: Result[None, GitError] = Err(GitError("git fetch --quiet origin", "timeout"))

        converted = result.map_err(tool_error)

        assert converted == Err(
            FlowError(
                kind="external_tool",
                message="timeout",
                hint="command: git fetch --quiet origin",
            )
        )

    def test_err_equality(self) -> None:
        assert Err("a") == Err("a")
        assert Err("a") != Err("b")
        assert Err(42) != Ok(42)


class TestTypeGuards:
    """Tests for is_ok() and is_err() type guards."""

    def test_guards(self) -> None:
        ok: Result[int, str] = Ok(1)
        err: Result[int, str] = Err("e")
        assert is_ok(ok) is True
        assert is_ok(err) is False
        assert is_err(err) is True
        assert is_err(ok) is False


class TestPatternMatching:
    """Tests for pattern matching with match statement."""

    def test_match(self) -> None:
        results: list[Result[str, str]] = [Ok("1.2.0"), Err("blank")]
        seen: list[str] = []
        for result in results:
            match result:
                case Ok(value):
                    seen.append(f"ok {value}")
                case Err(error):
                    seen.append(f"err {error}")
        assert seen == ["ok 1.2.0", "err blank"]
