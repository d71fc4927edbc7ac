""" test the key listing cache and the operation decorator that clears it
"""
import pytest

import threading
import time

from gpgwrap.cache import KeyCache
from gpgwrap.constants import KeyType
from gpgwrap.decorators import GPGOperation
from gpgwrap.keys import KeyList


class TestKeyCache(object):
    def test_miss_then_hit(self):
        cache = KeyCache()
        built = []

        def build():
            built.append(KeyList())
            return built[-1]

        first = cache.get(KeyType.Public, build)
        second = cache.get(KeyType.Public, build)

        assert first is second
        assert len(built) == 1
        assert KeyType.Public in cache
        assert KeyType.Secret not in cache

    def test_slots_are_separate(self):
        cache = KeyCache()
        pub = cache.get(KeyType.Public, KeyList)
        sec = cache.get(KeyType.Secret, KeyList)

        assert pub is not sec
        assert cache.get(KeyType.Secret, KeyList) is sec

    def test_clear(self):
        cache = KeyCache()
        first = cache.get(KeyType.Public, KeyList)
        cache.get(KeyType.Secret, KeyList)

        cache.clear()

        assert KeyType.Public not in cache
        assert KeyType.Secret not in cache
        assert cache.get(KeyType.Public, KeyList) is not first

    def test_failed_build(self):
        cache = KeyCache()

        def build():
            raise RuntimeError("gpg went away")

        with pytest.raises(RuntimeError):
            cache.get(KeyType.Public, build)

        assert KeyType.Public not in cache

    @pytest.mark.parametrize('key_type', ['public', None, 0])
    def test_bad_key_type(self, key_type):
        with pytest.raises(TypeError):
            KeyCache().get(key_type, KeyList)

    def test_threads(self):
        cache = KeyCache()
        calls = []
        results = []

        def build():
            calls.append(1)
            time.sleep(0.1)
            return KeyList()

        def worker():
            results.append(cache.get(KeyType.Public, build))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert len(results) == 8
        assert all(r is results[0] for r in results)


class TestGPGOperation(object):
    class Owner(object):
        def __init__(self):
            self._cache = KeyCache()

        @GPGOperation('refresh', invalidates_cache=True)
        def refresh(self, fail=False):
            """refresh the keyring"""
            if fail:
                raise RuntimeError("gpg went away")
            return 'refreshed'

        @GPGOperation('peek')
        def peek(self):
            return 'peeked'

    def test_wraps(self):
        assert self.Owner.refresh.__name__ == 'refresh'
        assert self.Owner.refresh.__doc__ == 'refresh the keyring'
        assert set(vars(self.Owner.refresh)) == {'__wrapped__'}

    def test_invalidates(self):
        owner = self.Owner()
        owner._cache.get(KeyType.Public, KeyList)

        assert owner.refresh() == 'refreshed'
        assert KeyType.Public not in owner._cache

    def test_failure_keeps_cache(self):
        owner = self.Owner()
        owner._cache.get(KeyType.Public, KeyList)

        with pytest.raises(RuntimeError):
            owner.refresh(fail=True)

        assert KeyType.Public in owner._cache

    def test_no_invalidation(self):
        owner = self.Owner()
        owner._cache.get(KeyType.Secret, KeyList)

        assert owner.peek() == 'peeked'
        assert KeyType.Secret in owner._cache
