""" explicitly test error scenarios
"""
import pytest

from gpgwrap.errors import GPGCancelledError
from gpgwrap.errors import GPGError
from gpgwrap.errors import GPGInvocationError
from gpgwrap.errors import GPGKeyNotFoundError


class TestErrors(object):
    @pytest.mark.parametrize('exc_type', [GPGInvocationError, GPGCancelledError, GPGKeyNotFoundError])
    def test_hierarchy(self, exc_type):
        assert issubclass(exc_type, GPGError)
        assert issubclass(exc_type, Exception)

    def test_invocation_not_started(self):
        e = GPGInvocationError('decrypt', ('/usr/bin/gpg', '--decrypt', 'secret.gpg'))

        assert e.operation == 'decrypt'
        assert e.command == ['/usr/bin/gpg', '--decrypt', 'secret.gpg']
        assert e.returncode is None
        assert str(e) == "gpg.decrypt: failed to run command '/usr/bin/gpg --decrypt secret.gpg'"

    def test_invocation_exit_status(self):
        e = GPGInvocationError('import_public_key', ('gpg', '--import'), 2,
                               'gpg: no valid OpenPGP data found.\n')

        assert e.returncode == 2
        assert e.stderr == 'gpg: no valid OpenPGP data found.\n'
        assert str(e) == "gpg.import_public_key: command 'gpg --import' exited with status 2: " \
                         "gpg: no valid OpenPGP data found."

    def test_invocation_no_stderr(self):
        e = GPGInvocationError('version', ('gpg', '--version'), 1)
        assert str(e) == "gpg.version: command 'gpg --version' exited with status 1"

    def test_cancelled(self):
        e = GPGCancelledError('list_public_keys')

        assert e.operation == 'list_public_keys'
        assert str(e) == "gpg.list_public_keys: cancelled"

    def test_catch_as_base(self):
        with pytest.raises(GPGError):
            raise GPGKeyNotFoundError("Key not found: 0x62AF4031C82E0039")
