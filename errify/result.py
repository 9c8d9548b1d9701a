"""
A two-variant result container for functions that return their failures.

    def divide(a, b):
        if b == 0:
            return Err("division by zero")
        return Ok(a // b)

Decorated functions treat a returned ``Err`` as the failure branch, exactly like a
raised exception.
"""

import attr
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@attr.s(frozen=True, slots=True, repr=False)
class Ok(Generic[T]):
    value = attr.ib()

    def is_ok(self):
        return True

    def is_err(self):
        return False

    def unwrap(self):
        return self.value

    def unwrap_or(self, default):
        return self.value

    def unwrap_err(self):
        raise ValueError("called unwrap_err on Ok: {!r}".format(self.value))

    def map(self, func):
        return Ok(func(self.value))

    def map_err(self, func):
        return self

    def __repr__(self):
        return "Ok({!r})".format(self.value)


@attr.s(frozen=True, slots=True, repr=False)
class Err(Generic[E]):
    error = attr.ib()

    def is_ok(self):
        return False

    def is_err(self):
        return True

    def unwrap(self):
        "Raise the error if it's an exception, otherwise a ValueError describing it."
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError("called unwrap on Err: {}".format(self.error))

    def unwrap_or(self, default):
        return default

    def unwrap_err(self):
        return self.error

    def map(self, func):
        return self

    def map_err(self, func):
        return Err(func(self.error))

    def __repr__(self):
        return "Err({!r})".format(self.error)


Result = Union[Ok[T], Err[E]]


def is_ok(result):
    return isinstance(result, Ok)


def is_err(result):
    return isinstance(result, Err)
