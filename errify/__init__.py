"""
The errify library adds context to a function's failures without touching its success
path or its signature.

    @errify.context("failed to divide {a} by {b}")
    def divide(a, b):
        if b == 0:
            return errify.Err("division by zero")
        return errify.Ok(a // b)

A failure is either a raised exception or a returned ``Err``. Either way, the context is
rendered only when the failure happens and merged into it by the WrapErr binding for its
type, keeping the original failure as the cause.
"""

from .bindings import BindingSet, WrapErr, set_trace  # noqa
from .cache import SimpleCache, ThreadLocalCache  # noqa
from .errors import (  # noqa
    AmbiguousBinding,
    ApplicabilityError,
    ContextError,
    ErrifyError,
    MissingBinding,
    RenderError,
    TemplateError,
)
from .result import Err, Ok, Result, is_err, is_ok  # noqa
from .std import chained, noted, registered, wrap_err_method
from .template import parse_provider, parse_template
from .transform import describe, transform


def std_bindings(chain=chained, notes=None, extras=(), custom=BindingSet, cache=None):
    """
    Constructs a BindingSet with the standard rules. The arguments select the built-in
    conventions, which work like feature flags.

    For example, to record contexts as exception notes rather than chaining
    ContextErrors, call ``std_bindings(chain=None, notes=noted)``. Enabling both
    conventions is ambiguous and raises AmbiguousBinding; disabling both leaves only
    ``wrap_err`` methods, registered bindings and ``extras``.
    """
    conventions = tuple(rule for rule in (chain, notes) if rule is not None)
    return custom(
        wrap_err_method, registered, *extras, conventions=conventions, cache=cache
    )


class Errify:
    """
    A pair of decorators bound to one BindingSet.

    The module-level ``context`` and ``with_context`` use a default instance with the
    chain convention; build your own to pick another configuration::

        noting = Errify(std_bindings(chain=None, notes=noted))

        @noting.context("loading {path}")
        def load(path):
            ...
    """

    def __init__(self, bindings=None):
        self.bindings = std_bindings() if bindings is None else bindings

    def context(self, template, *args, **named):
        """
        Decorate a function so its failures carry a context rendered from ``template``.

        ``template`` is a format string whose placeholders are filled from ``args``
        (positional captures), ``named`` (named captures) and the function's parameters.
        Callable captures are called only on failure, with the call's arguments their
        parameters name. Anything other than a string is used as the context value itself.
        """
        if not isinstance(template, str):
            parsed = parse_template(template, args, named)
            return lambda func: transform(describe(func), parsed, self.bindings)

        def decorator(func):
            descriptor = describe(func)
            parsed = parse_template(template, args, named, params=descriptor.params)
            return transform(descriptor, parsed, self.bindings)

        return decorator

    def with_context(self, provider):
        """
        Decorate a function so its failures carry the context returned by ``provider``.

        The provider is called only when the function fails; if it takes parameters it
        gets the same arguments as the failed call.
        """
        parsed = parse_provider(provider)

        def decorator(func):
            return transform(describe(func), parsed, self.bindings)

        return decorator

    def register(self, typ, binding=None):
        return self.bindings.register(typ, binding)


_default = Errify()
context = _default.context
with_context = _default.with_context
register = _default.register
