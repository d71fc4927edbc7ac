""" errors.py
"""

__all__ = ('GPGError',
           'GPGInvocationError',
           'GPGCancelledError',
           'GPGKeyNotFoundError',)


class GPGError(Exception):
    """Raised as a general error in GPGWrap"""
    pass


class GPGInvocationError(GPGError):
    """Raised when the gpg binary could not be started or exited with a nonzero status"""
    def __init__(self, operation, command=(), returncode=None, stderr=''):
        self.operation = operation
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr

        if returncode is None:
            msg = "gpg.{:s}: failed to run command '{:s}'".format(operation, ' '.join(self.command))
        else:
            msg = "gpg.{:s}: command '{:s}' exited with status {:d}".format(operation, ' '.join(self.command), returncode)

        if stderr:
            msg += ": {:s}".format(stderr.strip())

        super(GPGInvocationError, self).__init__(msg)


class GPGCancelledError(GPGError):
    """Raised when a gpg invocation was cancelled or timed out before it finished"""
    def __init__(self, operation):
        self.operation = operation
        super(GPGCancelledError, self).__init__("gpg.{:s}: cancelled".format(operation))


class GPGKeyNotFoundError(GPGError):
    """Raised when a requested key does not exist in the keyring"""
    pass
