class ErrifyError(Exception):
    "Base class of errify's own diagnostics."


class TemplateError(ErrifyError, ValueError):
    """
    The context template is malformed, or its placeholders don't match the captured
    values.
    """


class ApplicabilityError(ErrifyError, TypeError):
    """
    The decorated object has no single success / failure outcome, e.g. it's a generator
    function or a class.
    """


class AmbiguousBinding(ErrifyError, TypeError):
    "More than one WrapErr binding claims the same failure type."


class MissingBinding(ErrifyError, TypeError):
    "No WrapErr binding knows how to merge a context into a failure type."


class RenderError(ErrifyError):
    """
    The context couldn't be rendered when the decorated function failed, e.g. a captured
    function raised or a format spec didn't fit the value it got.

    ``failure`` is the original failure: the raised exception or the payload of the
    returned ``Err``. The error raised while rendering is the ``__cause__``.
    """

    def __init__(self, message, failure):
        super().__init__(message)
        self.failure = failure


class ContextError(Exception):
    """
    An outer layer of context around a failure.

    The ``source`` is the failure the context was added to. It can be any value that
    renders with ``str()`` and ``repr()``; if it's an exception it is also set as the
    ``__cause__`` so tracebacks show the whole chain.

    >>> err = ContextError("failed to divide 10 by 0", ZeroDivisionError("division by zero"))
    >>> str(err)
    'failed to divide 10 by 0'
    >>> err.root_cause()
    ZeroDivisionError('division by zero')
    """

    def __init__(self, context, source=None):
        super().__init__(context)
        self.context = context
        self.source = source
        if isinstance(source, BaseException):
            self.__cause__ = source

    def __str__(self):
        return str(self.context)

    def __repr__(self):
        return "{}({!r}, source={!r})".format(
            type(self).__name__, str(self.context), self.source
        )

    def chain(self):
        """
        Iterate through the layers, outermost first, ending with the original failure.

        Exception causes past the last ContextError are followed as well.
        """
        layer = self
        seen = set()
        while layer is not None and id(layer) not in seen:
            seen.add(id(layer))
            yield layer
            if isinstance(layer, ContextError):
                layer = layer.source
            elif isinstance(layer, BaseException):
                layer = layer.__cause__
            else:
                layer = None

    def root_cause(self):
        for layer in self.chain():
            pass
        return layer

    def report(self):
        """
        Render the whole chain, like::

            failed to divide 10 by 0

            Caused by:
                0: division by zero
        """
        layers = list(self.chain())
        lines = [str(layers[0])]
        if len(layers) > 1:
            lines.extend(("", "Caused by:"))
            for index, layer in enumerate(layers[1:]):
                lines.append("    {}: {}".format(index, layer))
        return "\n".join(lines)
