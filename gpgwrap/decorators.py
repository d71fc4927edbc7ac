""" decorators.py
"""
import functools
import logging

__all__ = ['GPGOperation']


class GPGOperation(object):
    def __init__(self, name, invalidates_cache=False):
        """
        Mark a :py:obj:`~gpg.GPG` method as a gpg operation.

        :param name: The name used for the operation in logs and errors.
        :param invalidates_cache: Clear the instance's key cache after the operation succeeded.
        """
        super(GPGOperation, self).__init__()
        self.name = name
        self.invalidates_cache = invalidates_cache

    def __call__(self, action):
        @functools.wraps(action)
        def _action(gpg, *args, **kwargs):
            logging.debug("gpg.{:s}: starting".format(self.name))
            result = action(gpg, *args, **kwargs)

            if self.invalidates_cache:
                logging.debug("gpg.{:s}: clearing key cache".format(self.name))
                gpg._cache.clear()

            return result

        return _action
