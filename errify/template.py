"""
Parsing and rendering of context templates.

A template is a ``str.format`` string followed by the captured values it interpolates:

    @context("failed to divide {a} by {b}")
    @context("literal {arg} = {}", lambda arg: arg)
    @context("loading {path}: {} items", lambda items: len(items), path=lambda self: self.root)

Positional captures fill ``{}`` (or ``{0}``) placeholders in order; named captures fill
``{name}``. A named placeholder may also refer to a parameter of the decorated function
directly.

A callable capture is only called when the function fails. Its parameters are matched
by name against the decorated function's parameters and it gets the values of that
call; one taking ``**kwargs`` gets them all. Anything else, strings included, is used as
is.

Everything is checked when the function is decorated; a template that can't be
rendered raises TemplateError before the function is ever called.
"""

from .errors import TemplateError

import attr
import inspect
import re
from string import Formatter

_FIELD_HEAD = re.compile(r"[^.\[]*")
_CONVERSIONS = (None, "r", "s", "a")


@attr.s(frozen=True, slots=True)
class Capture:
    """
    A captured value. ``parameters`` is None for a constant, otherwise the names of the
    call's arguments to pass to the callable ``source``.
    """

    name = attr.ib()
    source = attr.ib()
    parameters = attr.ib(default=None, repr=False)
    all_arguments = attr.ib(default=False, repr=False)

    @classmethod
    def of(cls, source, name=None, params=()):
        "Record a capture, matching a callable's parameters to the function's."
        if not callable(source):
            return cls(name=name, source=source)
        try:
            signature = inspect.signature(source)
        except (TypeError, ValueError):
            return cls(name=name, source=source, parameters=())

        parameters = []
        all_arguments = False
        for param in signature.parameters.values():
            if param.kind is param.VAR_POSITIONAL:
                continue
            elif param.kind is param.VAR_KEYWORD:
                all_arguments = True
            elif param.name in params and param.kind is not param.POSITIONAL_ONLY:
                parameters.append(param.name)
            elif param.default is param.empty:
                raise TemplateError(
                    "Captured function {!r} takes {!r}, which isn't a parameter of the "
                    "decorated function".format(source, param.name)
                )
        return cls(
            name=name,
            source=source,
            parameters=tuple(parameters),
            all_arguments=all_arguments,
        )

    def evaluate(self, scope):
        if self.parameters is None:
            return self.source
        if self.all_arguments:
            return self.source(**scope.arguments)
        arguments = scope.arguments
        return self.source(
            **{name: arguments[name] for name in self.parameters if name in arguments}
        )


@attr.s(frozen=True, slots=True)
class ContextTemplate:
    """
    A validated format string and the captures that fill it.

    ``render`` is the only place captures are evaluated, and it's only called on the
    failure branch.
    """

    fmt = attr.ib()
    positional = attr.ib(converter=tuple, default=())
    named = attr.ib(converter=tuple, default=())

    def render(self, scope):
        args = [capture.evaluate(scope) for capture in self.positional]
        kwargs = dict(scope.arguments)
        for capture in self.named:
            kwargs[capture.name] = capture.evaluate(scope)
        return self.fmt.format(*args, **kwargs)


@attr.s(frozen=True, slots=True)
class ContextValue:
    "A context given as a value rather than a template. Rendered with ``str()`` later."

    value = attr.ib()

    def render(self, scope):
        return self.value


@attr.s(frozen=True, slots=True)
class ContextProvider:
    """
    A context built by a function when the failure happens.

    If the provider takes parameters it gets the same arguments as the decorated call.
    """

    provider = attr.ib()
    pass_arguments = attr.ib(default=False)

    def render(self, scope):
        if self.pass_arguments:
            return self.provider(*scope.args, **scope.kwargs)
        return self.provider()


def _fields(fmt):
    "Yield (field_name, conversion) for each replacement field, including nested ones."
    try:
        parsed = list(Formatter().parse(fmt))
    except ValueError as exc:
        raise TemplateError("Malformed template {!r}: {}".format(fmt, exc)) from exc
    for _literal, field_name, format_spec, conversion in parsed:
        if field_name is None:
            continue
        yield field_name, conversion
        if format_spec:
            yield from _fields(format_spec)


def parse_template(template, args=(), named=None, params=()):
    """
    Validate a template against its captures and the decorated function's parameter
    names, producing a ContextTemplate.

    A template that isn't a string is a context value and can't take captures.
    """
    named = named or {}
    if not isinstance(template, str):
        if inspect.isroutine(template):
            raise TemplateError(
                "context() takes a template, not {!r}; use with_context() for a context "
                "built by a function".format(template)
            )
        if args or named:
            raise TemplateError(
                "Captured arguments need a format string template, not {!r}".format(
                    template
                )
            )
        return ContextValue(template)

    positional = [Capture.of(source, params=params) for source in args]
    captures = {
        name: Capture.of(source, name=name, params=params)
        for name, source in named.items()
    }

    auto = 0
    manual = False
    indexes = set()
    names = set()
    for field_name, conversion in _fields(template):
        if conversion not in _CONVERSIONS:
            raise TemplateError(
                "Unknown conversion {!r} in template {!r}".format(conversion, template)
            )
        head = _FIELD_HEAD.match(field_name).group()
        if not head:
            indexes.add(auto)
            auto += 1
        elif head.isdigit():
            manual = True
            indexes.add(int(head))
        else:
            names.add(head)
        if auto and manual:
            raise TemplateError(
                "Template {!r} mixes automatic and manual field numbering".format(template)
            )

    for index in sorted(indexes):
        if index >= len(positional):
            raise TemplateError(
                "Template {!r} refers to positional argument {} but {} {} captured".format(
                    template,
                    index,
                    len(positional),
                    "was" if len(positional) == 1 else "were",
                )
            )
    unused = [
        capture.source for index, capture in enumerate(positional) if index not in indexes
    ]
    if unused:
        raise TemplateError(
            "Captured arguments never used by template {!r}: {}".format(
                template, ", ".join(map(repr, unused))
            )
        )

    for name in sorted(names):
        if name not in captures and name not in params:
            raise TemplateError(
                "Template {!r} refers to {{{}}}, which is neither a captured argument nor "
                "a parameter".format(template, name)
            )
    unused = sorted(set(captures) - names)
    if unused:
        raise TemplateError(
            "Named arguments never used by template {!r}: {}".format(
                template, ", ".join(unused)
            )
        )

    return ContextTemplate(
        fmt=template, positional=positional, named=tuple(captures.values())
    )


def parse_provider(provider):
    "Validate a function that builds the context when the decorated function fails."
    if not callable(provider):
        raise TemplateError(
            "with_context() takes a callable, not {!r}; use context() for a template or "
            "value".format(provider)
        )
    try:
        signature = inspect.signature(provider)
    except (TypeError, ValueError):
        # Builtins without a signature are called with no arguments.
        return ContextProvider(provider)
    return ContextProvider(provider, pass_arguments=bool(signature.parameters))
