import logging
import types
import typing as t

from .result import Err

logger = logging.getLogger(__name__)
NoneType = type(None)
_UNIONS = (t.Union, types.UnionType)


def get_origin(typ):
    """
    Get the constructor origin of a generic type. For example, ``Err[str]`` is
    constructed with ``Err``. Regular types are their own origin.
    """
    return t.get_origin(typ) or typ


def get_args(typ):
    return t.get_args(typ)


def has_origin(typ, origin, num_args=None):
    """
    Determines if a concrete class (a generic class with arguments) matches an origin
    and has a specified number of arguments.

    This does a direct match rather than a subclass check.
    """
    t_origin = t.get_origin(typ)
    if not isinstance(origin, tuple):
        origin = (origin,)
    return t_origin in origin and (num_args is None or len(get_args(typ)) == num_args)


def issub_safe(sub, sup):
    """
    Safe version of issubclass that only compares regular types.

    Generic aliases, type vars and other typing constructs are never subclasses.
    """
    if not isinstance(sub, type):
        return False
    try:
        return issubclass(sub, sup)
    except TypeError:
        return False


def return_hint(func):
    """
    Resolve the return annotation of a function, or None if it has none.

    Forward references that can't be resolved yet, e.g. a class defined later in the
    module, are left for the first failure to sort out.
    """
    if "return" not in getattr(func, "__annotations__", {}):
        return None
    try:
        return t.get_type_hints(func).get("return")
    except (NameError, TypeError) as exc:
        logger.debug("Couldn't resolve return annotation of %r: %s", func, exc)
        return None


def failure_type(hint):
    """
    Find the concrete failure payload type named by a return annotation.

    ``Result[int, str]`` and ``Err[str]`` both give ``str``. Returns None when the
    annotation doesn't pin down a single regular class.
    """
    if hint is None:
        return None
    if get_origin(hint) in _UNIONS:
        candidates = [failure_type(arg) for arg in get_args(hint) if arg is not NoneType]
        candidates = [typ for typ in candidates if typ is not None]
        return candidates[0] if len(candidates) == 1 else None
    if has_origin(hint, Err, num_args=1):
        (payload,) = get_args(hint)
        return payload if isinstance(payload, type) else None
    return None
