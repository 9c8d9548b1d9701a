import pytest

from errify import errors as err

import traceback as tb


def test_context_error_message():
    "Test that a ContextError renders as its context only."

    subj = err.ContextError("failed to divide 10 by 0", ZeroDivisionError("division by zero"))

    actual = "".join(tb.format_exception_only(type(subj), subj))

    assert actual == "errify.errors.ContextError: failed to divide 10 by 0\n"


def test_context_error_cause():
    "Test that an exception source is also the cause."

    source = ValueError("message")
    subj = err.ContextError("context", source)

    assert subj.source is source
    assert subj.__cause__ is source


def test_context_error_plain_source():
    "Test that a source that isn't an exception is kept but not set as the cause."

    subj = err.ContextError("context", "division by zero")

    assert subj.source == "division by zero"
    assert subj.__cause__ is None
    assert subj.root_cause() == "division by zero"


def test_context_error_chain():
    "Test that chain walks ContextErrors and then exception causes."

    root = KeyError("root")
    middle = ValueError("middle")
    middle.__cause__ = root
    inner = err.ContextError("inner", middle)
    outer = err.ContextError("outer", inner)

    assert list(outer.chain()) == [outer, inner, middle, root]
    assert outer.root_cause() is root


def test_context_error_chain_cycle():
    "Test that chain stops on a cyclic cause."

    first = ValueError("first")
    subj = err.ContextError("context", first)
    first.__cause__ = subj

    assert list(subj.chain()) == [subj, first]


def test_context_error_report():
    "Test that report lists the causes under the outermost context."

    subj = err.ContextError(
        "failed to load", err.ContextError("failed to parse", ValueError("bad digit"))
    )

    assert subj.report() == (
        "failed to load\n\nCaused by:\n    0: failed to parse\n    1: bad digit"
    )


def test_context_error_report_alone():
    "Test that report of a ContextError without a source is just the context."

    assert err.ContextError("lonely").report() == "lonely"


def test_context_error_repr():
    "Test the repr of a ContextError."

    subj = err.ContextError(42, "oops")

    assert repr(subj) == "ContextError('42', source='oops')"


@pytest.mark.parametrize(
    "cls,bases",
    [
        (err.TemplateError, (err.ErrifyError, ValueError)),
        (err.ApplicabilityError, (err.ErrifyError, TypeError)),
        (err.AmbiguousBinding, (err.ErrifyError, TypeError)),
        (err.MissingBinding, (err.ErrifyError, TypeError)),
    ],
)
def test_diagnostic_bases(cls, bases):
    "Test that diagnostics can be caught as the builtin errors they resemble."

    assert issubclass(cls, bases)
