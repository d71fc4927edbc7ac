""" cache.py
"""
import threading

from .constants import KeyType

__all__ = ['KeyCache']


class KeyCache(object):
    def __init__(self):
        """
        KeyCache objects hold the complete public and secret key listings of one :py:obj:`~gpg.GPG` instance.

        All access is serialized, so a GPG instance can be shared between threads.
        """
        super(KeyCache, self).__init__()
        self._lock = threading.RLock()
        self._slots = {}

    def __contains__(self, key_type):
        with self._lock:
            return key_type in self._slots

    def get(self, key_type, build):
        """
        Return the cached listing for ``key_type``, calling ``build()`` to create and store it on a miss.

        Nothing is stored if ``build`` raises.
        """
        if not isinstance(key_type, KeyType):
            raise TypeError("expected a KeyType, got {:s}".format(type(key_type).__name__))

        with self._lock:
            if key_type not in self._slots:
                self._slots[key_type] = build()
            return self._slots[key_type]

    def clear(self):
        with self._lock:
            self._slots.clear()
