from .cache import SimpleCache
from .errors import AmbiguousBinding, MissingBinding
from .helpers import issub_safe

from abc import ABC, abstractmethod
from functools import singledispatch
import logging

logger = logging.getLogger(__name__)
TRACE = 5


def trace(fmt, *args, _logger=logger, _TRACE=TRACE):
    "Trace a log message. Avoids issues with applications setting `style`."
    if _logger.isEnabledFor(_TRACE):
        _logger.log(_TRACE, fmt.format(*args))


def set_trace(enabled=True):
    logger.setLevel(TRACE if enabled else logging.WARNING)


class WrapErr(ABC):
    """
    The interface a failure type implements to control how context is merged into it.

    ``wrap_err`` takes the context value (anything that renders with ``str()``) and
    returns the failure to propagate in place of ``self``; usually a copy of ``self``
    that remembers the context. Subclassing is optional: any class with a ``wrap_err``
    method is treated as implementing the interface.
    """

    __slots__ = ()

    @abstractmethod
    def wrap_err(self, context):
        raise NotImplementedError

    @classmethod
    def __subclasshook__(cls, C):
        if cls is WrapErr:
            for base in C.__mro__:
                if "wrap_err" in base.__dict__:
                    return callable(base.__dict__["wrap_err"])
        return NotImplemented


def _unregistered(error, context):
    "Placeholder for types with no registered binding; never called."
    raise MissingBinding("No WrapErr binding registered for {!r}".format(type(error)))


def _rule_name(rule):
    return getattr(rule, "__name__", repr(rule))


class BindingSet:
    """
    Resolves the WrapErr binding for a failure type.

    A rule is called as ``rule(typ=..., ctx=binding_set)`` and returns a binding, a
    callable ``binding(error, context) -> error``, or None if the type isn't its concern.

    ``rules`` are exact bindings supplied for particular types. ``conventions`` are the
    built-in blanket bindings and are only consulted when no exact rule claims a type.
    Two rules of the same tier claiming one type is an error rather than a silent
    preference.
    """

    def __init__(self, *rules, conventions=(), cache=None):
        self.rules = rules
        self.conventions = tuple(conventions)
        self.cache = cache or SimpleCache()
        self.registry = singledispatch(_unregistered)
        for probe in (Exception, object):
            self._claim(probe, self.conventions)

    def register(self, typ, binding=None):
        """
        Register a binding for a failure type you can't add a ``wrap_err`` method to.

        Use it directly, ``bindings.register(SomeError, func)``, or as a decorator::

            @bindings.register(SomeError)
            def wrap_some_error(error, context):
                ...
        """
        if binding is None:
            return lambda binding: self.register(typ, binding)
        if typ in self.registry.registry and typ is not object:
            raise AmbiguousBinding(
                "A WrapErr binding for {!r} is already registered".format(typ)
            )
        if issub_safe(typ, WrapErr):
            raise AmbiguousBinding(
                "{!r} implements wrap_err; registering another binding for it is "
                "ambiguous".format(typ)
            )
        self.registry.register(typ, binding)
        self.cache.clear()
        trace("register({!r}): {}", typ, _rule_name(binding))
        return binding

    def lookup(self, typ):
        trace("lookup({!r}): start", typ)
        binding = self.cache.get(typ)
        if binding is not None:
            trace("lookup({!r}): cached", typ)
            return binding

        binding = self._claim(typ, self.rules)
        if binding is None:
            binding = self._claim(typ, self.conventions)
            if binding is None:
                trace("lookup({!r}): fallback", typ)
                binding = self.fallback(typ)
        trace("lookup({!r}): computed", typ)
        return self.cache.complete(typ, binding)

    def _claim(self, typ, rules):
        claims = []
        for rule in rules:
            binding = rule(typ=typ, ctx=self)
            if binding is not None:
                claims.append((rule, binding))
        if len(claims) > 1:
            raise AmbiguousBinding(
                "WrapErr bindings for {!r} are ambiguous: {}".format(
                    typ, ", ".join(_rule_name(rule) for rule, _ in claims)
                )
            )
        return claims[0][1] if claims else None

    def fallback(self, typ):
        raise MissingBinding(
            "No WrapErr binding for {!r}; implement wrap_err on it, register a binding, "
            "or enable a built-in convention".format(typ)
        )

    def wrap(self, error, context):
        "Merge a context value into a failure using the binding for its type."
        return self.lookup(type(error))(error, context)
