from .bindings import WrapErr, _unregistered
from .errors import ContextError
from .helpers import issub_safe

"""
These are the standard rules to find the WrapErr binding of a failure type.

All rules take a failure type and a context, which is generally a BindingSet. A rule
returns a binding, ``binding(error, context) -> error``, or None.
"""


def call_wrap_err(error, context):
    return error.wrap_err(context)


def chain_context(error, context):
    return ContextError(context, error)


def note_context(error, context):
    if isinstance(error, BaseException):
        error.add_note(str(context))
        return error
    # Only exceptions carry notes.
    return ContextError(context, error)


def wrap_err_method(typ, ctx):
    "Rule for failure types implementing the WrapErr interface."
    if issub_safe(typ, WrapErr):
        return call_wrap_err


def registered(typ, ctx):
    "Rule for failure types with a binding registered on the BindingSet."
    try:
        binding = ctx.registry.dispatch(typ)
    except AttributeError:
        return None
    if binding is not _unregistered:
        return binding


def chained(typ, ctx):
    """
    Convention that layers the context on top of the failure.

    The failure becomes the ``source`` of a new ContextError whose message is the
    context; exceptions are also its ``__cause__``. Any value that renders with ``str()``
    and ``repr()`` can be wrapped, so an ``Err("division by zero")`` works as well as a
    raised exception.

    Callers catch ContextError and walk ``chain()`` or ``root_cause()`` to reach the
    original failure.
    """
    return chain_context


def noted(typ, ctx):
    """
    Convention that records the context as a note on the failure (PEP 678).

    Exceptions keep their type and identity, so existing ``except`` clauses still match,
    and the traceback lists each context beneath the message, innermost first. Values
    that aren't exceptions can't carry notes and are layered as by ``chained``.
    """
    return note_context
