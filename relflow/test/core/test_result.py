"""Tests for relflow.core.result."""

from __future__ import annotations

import pytest

from relflow.core.result import Err, Ok, Result, is_err, is_ok


class TestOk:
    def test_accessors(self) -> None:
        r: Result[int, str] = Ok(3)
        assert r.is_ok() is True
        assert r.is_err() is False
        assert r.unwrap() == 3
        assert r.unwrap_or(0) == 3

    def test_map_applies_function(self) -> None:
        assert Ok(2).map(lambda v: v * 10) == Ok(20)

    def test_map_err_is_noop(self) -> None:
        assert Ok(2).map_err(lambda e: f"wrapped {e}") == Ok(2)

    def test_unwrap_err_raises(self) -> None:
        with pytest.raises(ValueError, match="unwrap_err on Ok"):
            Ok(1).unwrap_err()


class TestErr:
    def test_accessors(self) -> None:
        r: Result[int, str] = Err("boom")
        assert r.is_err() is True
        assert r.is_ok() is False
        assert r.unwrap_or(7) == 7
        assert r.unwrap_err() == "boom"

    def test_unwrap_raises(self) -> None:
        with pytest.raises(ValueError):
            Err("boom").unwrap()

    def test_map_is_noop(self) -> None:
        assert Err("boom").map(lambda v: v + 1) == Err("boom")

    def test_map_err_wraps(self) -> None:
        assert Err("boom").map_err(lambda e: f"During X: {e}") == Err("During X: boom")


class TestTypeGuards:
    def test_is_ok_and_is_err(self) -> None:
        assert is_ok(Ok(1))
        assert not is_ok(Err(1))
        assert is_err(Err(1))
        assert not is_err(Ok(1))

    def test_pattern_matching(self) -> None:
        """Results destructure in match statements."""
        match Err("x"):
            case Ok(value):
                pytest.fail(f"unexpected Ok({value})")
            case Err(error):
                assert error == "x"
