from .bindings import trace
from .errors import ApplicabilityError, RenderError
from .helpers import failure_type, return_hint
from .result import Err

import attr
import functools
import inspect


@attr.s(frozen=True, slots=True)
class FunctionDescriptor:
    """
    What the transformer needs to know about the decorated function.

    ``signature`` is the one callers see, following ``__wrapped__``; ``call_signature``
    is what the function itself accepts. They differ when an inner decorator injects
    arguments.

    ``kind`` is ``staticmethod`` or ``classmethod`` when the decorator was applied on top
    of one of them, so the replacement can be rewrapped the same way.
    """

    func = attr.ib()
    signature = attr.ib()
    call_signature = attr.ib()
    is_async = attr.ib()
    kind = attr.ib(default=None)
    return_hint = attr.ib(default=None)

    @property
    def name(self):
        return getattr(self.func, "__qualname__", None) or repr(self.func)

    @property
    def params(self):
        return tuple(self.signature.parameters)

    def accepts(self, args, kwargs):
        "Whether a call with these arguments gets past the function's own signature."
        try:
            self.call_signature.bind(*args, **kwargs)
        except TypeError:
            return False
        return True


def describe(obj):
    "Build a FunctionDescriptor, rejecting objects that don't have a single result."
    kind = None
    func = obj
    if isinstance(obj, (staticmethod, classmethod)):
        kind = type(obj)
        func = obj.__func__
    if inspect.isclass(func) or not callable(func):
        raise ApplicabilityError(
            "Error context can only be added to functions, not {!r}".format(obj)
        )
    if inspect.isgeneratorfunction(func) or inspect.isasyncgenfunction(func):
        raise ApplicabilityError(
            "{} is a generator function; it has no single result to add context "
            "to".format(getattr(func, "__qualname__", func))
        )
    try:
        signature = inspect.signature(func)
        call_signature = inspect.signature(func, follow_wrapped=False)
    except (TypeError, ValueError) as exc:
        raise ApplicabilityError("Can't read the signature of {!r}".format(func)) from exc
    return FunctionDescriptor(
        func=func,
        signature=signature,
        call_signature=call_signature,
        is_async=inspect.iscoroutinefunction(func),
        kind=kind,
        return_hint=return_hint(func),
    )


class FailureScope:
    "The view of a failed call that contexts are rendered from. Only built on failure."

    __slots__ = ("descriptor", "args", "kwargs", "arguments")

    def __init__(self, descriptor, args, kwargs, arguments):
        self.descriptor = descriptor
        self.args = args
        self.kwargs = kwargs
        self.arguments = arguments

    @classmethod
    def bind(cls, descriptor, args, kwargs):
        """
        Bind the call's arguments to the parameter names templates refer to.

        If the arguments don't fit the signature callers see, an inner decorator must
        have injected some. Then whatever does fit is bound, and failing that the
        function's own signature is used.
        """
        signature = descriptor.signature
        for bind in (signature.bind, signature.bind_partial, descriptor.call_signature.bind):
            try:
                bound = bind(*args, **kwargs)
            except TypeError:
                continue
            bound.apply_defaults()
            return cls(descriptor, args, kwargs, bound.arguments)
        return cls(descriptor, args, kwargs, dict(kwargs))


class Failure:
    "The failure branch of a transformed function."

    __slots__ = ("descriptor", "template", "bindings")

    def __init__(self, descriptor, template, bindings):
        self.descriptor = descriptor
        self.template = template
        self.bindings = bindings

    def render(self, failure, args, kwargs):
        scope = FailureScope.bind(self.descriptor, args, kwargs)
        try:
            return self.template.render(scope)
        except Exception as exc:
            raise RenderError(
                "Couldn't render the context for a failure of {}: {}".format(
                    self.descriptor.name, exc
                ),
                failure,
            ) from exc

    def raised(self, exc, args, kwargs):
        """
        Return the exception to raise in place of ``exc``.

        If the arguments don't fit the function's own signature, the body never ran and
        ``exc`` is the call's TypeError; it's returned as is.
        """
        if not self.descriptor.accepts(args, kwargs):
            return exc
        wrapped = self.bindings.wrap(exc, self.render(exc, args, kwargs))
        if not isinstance(wrapped, BaseException):
            raise ApplicabilityError(
                "The WrapErr binding for {} returned {!r}, which can't be raised".format(
                    type(exc).__name__, wrapped
                )
            ) from exc
        return wrapped

    def returned(self, result, args, kwargs):
        "Return the value to return in place of ``result``."
        if not isinstance(result, Err):
            return result
        context = self.render(result.error, args, kwargs)
        return Err(self.bindings.wrap(result.error, context))


def transform(descriptor, template, bindings):
    """
    Emit the replacement for a decorated function.

    The replacement calls the original first. A returned value that isn't an ``Err`` is
    passed back untouched and no context is rendered. A raised exception or a returned
    ``Err`` gets the rendered context merged in through the WrapErr binding for its type.
    Only ``Exception`` is intercepted, so ``KeyboardInterrupt``, ``SystemExit`` and task
    cancellation pass straight through.

    If the context can't be rendered, RenderError is raised instead, carrying the
    original failure as ``failure``.

    Coroutine functions get a coroutine function that awaits the original exactly once.
    """
    func = descriptor.func
    failure = Failure(descriptor, template, bindings)

    payload = failure_type(descriptor.return_hint)
    if payload is not None:
        bindings.lookup(payload)
    else:
        trace("transform({}): failure types resolved on first failure", descriptor.name)

    if descriptor.is_async:

        @functools.wraps(func)
        async def errify_wrapper(*args, **kwargs):
            try:
                result = await func(*args, **kwargs)
            except Exception as exc:
                wrapped = failure.raised(exc, args, kwargs)
                if wrapped is exc:
                    raise
                raise wrapped from exc
            return failure.returned(result, args, kwargs)

    else:

        @functools.wraps(func)
        def errify_wrapper(*args, **kwargs):
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                wrapped = failure.raised(exc, args, kwargs)
                if wrapped is exc:
                    raise
                raise wrapped from exc
            return failure.returned(result, args, kwargs)

    if descriptor.kind is not None:
        return descriptor.kind(errify_wrapper)
    return errify_wrapper
