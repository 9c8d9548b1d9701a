import pytest

from .common import ContextExpr, ErrorWithContext, Report

from errify import std
from errify.errors import ContextError

import traceback as tb


@pytest.mark.parametrize("typ", [ValueError, ContextError, str, Report, int])
def test_chained_claims_everything(typ):
    "Test that the chain convention is a blanket binding."

    assert std.chained(typ=typ, ctx=None) is std.chain_context


@pytest.mark.parametrize("typ", [ValueError, ContextError, str, Report, int])
def test_noted_claims_everything(typ):
    "Test that the notes convention is a blanket binding."

    assert std.noted(typ=typ, ctx=None) is std.note_context


def test_chain_context_exception():
    "Test that chaining an exception layers a ContextError on top of it."

    original = ZeroDivisionError("division by zero")

    actual = std.chain_context(original, "failed to divide 10 by 0")

    assert str(actual) == "failed to divide 10 by 0"
    assert actual.__cause__ is original
    assert actual.root_cause() is original


def test_chain_context_value():
    "Test that chaining a plain value keeps it as the source."

    actual = std.chain_context("division by zero", ContextExpr(2))

    assert str(actual) == "ContextExpr(2)"
    assert actual.source == "division by zero"


def test_chain_context_nested():
    "Test that chaining twice builds a chain, outermost first."

    inner = std.chain_context(ValueError("bad"), "inner")
    outer = std.chain_context(inner, "outer")

    assert [str(layer) for layer in outer.chain()] == ["outer", "inner", "bad"]


def test_note_context_exception():
    "Test that noting keeps the exception's identity and type."

    original = KeyError("missing")

    actual = std.note_context(original, ContextExpr(1))

    assert actual is original
    assert original.__notes__ == ["ContextExpr(1)"]
    assert "ContextExpr(1)" in "".join(tb.format_exception_only(type(actual), actual))


def test_note_context_stacks():
    "Test that the outermost context is the last note."

    original = KeyError("missing")

    std.note_context(original, "inner")
    std.note_context(original, "outer")

    assert original.__notes__ == ["inner", "outer"]


def test_note_context_value():
    "Test that values that can't carry notes are layered instead."

    actual = std.note_context(Report("boom"), "context")

    assert isinstance(actual, ContextError)
    assert actual.source.message == "boom"


def test_call_wrap_err():
    "Test that call_wrap_err defers to the failure's own method."

    actual = std.call_wrap_err(ErrorWithContext("1"), "cx")

    assert actual.cx == "cx"


def test_wrap_err_method_rule():
    "Test that the wrap_err rule only claims types with the method."

    assert std.wrap_err_method(typ=ErrorWithContext, ctx=None) is std.call_wrap_err
    assert std.wrap_err_method(typ=ValueError, ctx=None) is None
    assert std.wrap_err_method(typ="not a type", ctx=None) is None


def test_registered_without_registry():
    "Test that the registered rule ignores contexts without a registry."

    assert std.registered(typ=Report, ctx=object()) is None
