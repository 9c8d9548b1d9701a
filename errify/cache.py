from warnings import warn
import threading


class UnhashableType(UserWarning):
    pass


class SimpleCache:
    "Remembers the binding resolved for each failure type."

    def __init__(self):
        self.cache = {}

    def get(self, typ):
        result = self._lookup(typ)
        return result if result is not NotImplemented else None

    def _lookup(self, typ):
        """
        Handle unhashable types by warning about them.
        """
        try:
            return self.cache.get(typ)
        except TypeError:
            warn(
                "Type {} is unhashable; its WrapErr binding can't be cached".format(typ),
                category=UnhashableType,
            )
            return NotImplemented

    def complete(self, typ, binding):
        """
        Store the binding resolved for a type. The first resolution wins, so concurrent
        lookups of the same type agree on the result.
        """
        present = self._lookup(typ)
        if present is NotImplemented:
            return binding  # Unhashable.
        elif present is None:
            self.cache[typ] = binding
            return binding
        return present

    def clear(self):
        self.cache.clear()


class ThreadLocalCache(SimpleCache):
    """
    Avoids threads conflicting while looking up bindings by keeping the cache in thread
    local storage.

    You can also prevent this by resolving bindings during module loading, which happens
    anyway for functions whose return annotation names the failure type.
    """

    def __init__(self):
        self._local = threading.local()

    @property
    def cache(self):
        local = self._local
        try:
            return local.cache
        except AttributeError:
            _cache = local.cache = {}
            return _cache

    def clear(self):
        # Drops every thread's cache, not just the calling thread's.
        self._local = threading.local()
