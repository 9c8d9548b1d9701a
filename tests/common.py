class ContextExpr:
    "A context value that only renders; it isn't a string and isn't an exception."

    def __init__(self, num):
        self.num = num

    def __str__(self):
        return "ContextExpr({})".format(self.num)

    def __repr__(self):
        return "ContextExpr({!r})".format(self.num)


class ErrorWithContext(Exception):
    "A failure type that takes care of its own context."

    def __init__(self, msg, cx=None):
        super().__init__(msg)
        self.msg = str(msg)
        self.cx = cx

    def __str__(self):
        return self.msg if self.cx is None else self.cx

    def wrap_err(self, context):
        return ErrorWithContext(self.msg, cx=str(context))


class Report:
    "A failure payload with nothing but ``str`` and ``repr``; it isn't an exception."

    def __init__(self, message, contexts=()):
        self.message = message
        self.contexts = tuple(contexts)

    def __str__(self):
        return self.contexts[-1] if self.contexts else self.message

    def __repr__(self):
        return "Report({!r}, contexts={!r})".format(self.message, self.contexts)


def wrap_report(error, context):
    return Report(error.message, error.contexts + (str(context),))


class Calls:
    "Counts calls to a side-effecting capture."

    def __init__(self, value="called"):
        self.count = 0
        self.value = value

    def __call__(self):
        self.count += 1
        return self.value


def drive(coro):
    """
    Run a coroutine to completion without an event loop, counting how many times it
    suspends. Returns ``(suspensions, result, exception)``.
    """
    suspensions = 0
    while True:
        try:
            coro.send(None)
        except StopIteration as stop:
            return suspensions, stop.value, None
        except Exception as exc:
            return suspensions, None, exc
        suspensions += 1
