""" gpg.py

this is where the gpg binary gets run
"""
import logging
import os
import shutil
import subprocess
import time

from typing import NamedTuple, Tuple

from packaging.version import InvalidVersion
from packaging.version import Version

from .cache import KeyCache

from .colons import parse_colons

from .constants import KeyType

from .decorators import GPGOperation

from .errors import GPGCancelledError
from .errors import GPGError
from .errors import GPGInvocationError
from .errors import GPGKeyNotFoundError

from .keys import KeyList

from .packets import list_recipients

__all__ = ['Config',
           'Invocation',
           'GPG']

#: Default arguments for non-interactive use. ``--batch`` is left out on purpose, it would disable the
#: passphrase prompts of gpg-agent.
DEFAULT_ARGS = ("--quiet", "--yes", "--compress-algo=none", "--no-encrypt-to", "--no-auto-check-trustdb")

#: Binaries tried, in order, after the one configured.
BINARIES = ("gpg2", "gpg1", "gpg")

#: What gpg prints when a secret key listing fails only because there are no secret keys:
#: ``secret key not available`` is gpg 1.x, ``No secret key`` is gpg 2.x.
NO_SECRET_KEY = ("secret key not available", "No secret key")

FILE_MODE = 0o600
DIR_MODE = 0o700

# how often a running gpg is checked for cancellation
POLL_INTERVAL = 0.05


class Config(NamedTuple):
    #: the gpg binary to prefer; looked up on ``$PATH`` if it is not a path
    binary: str = ""
    #: arguments passed to every encrypt, decrypt, export and import; empty means :py:obj:`DEFAULT_ARGS`
    args: Tuple[str, ...] = DEFAULT_ARGS
    #: encrypt with ``--trust-model=always``
    always_trust: bool = False


class Invocation(NamedTuple):
    """the outcome of one gpg run"""
    command: Tuple[str, ...]
    stdout: bytes
    stderr: bytes
    returncode: int

    @property
    def output(self) -> str:
        return (self.stdout + self.stderr).decode('utf-8', 'replace')

    def check(self, operation):
        if self.returncode != 0:
            raise GPGInvocationError(operation, self.command, self.returncode, self.stderr.decode('utf-8', 'replace'))
        return self


def _makedirs(path):
    parent = os.path.dirname(path)
    if parent:
        try:
            os.makedirs(parent, DIR_MODE, exist_ok=True)

        except OSError as e:
            raise GPGError("failed to create dir '{:s}'".format(parent)) from e


class GPG(object):
    """
    A wrapper around the gpg command line tool.

    Every operation runs gpg once, blocking until it exits. Each of them takes the keyword arguments ``timeout``
    (seconds) and ``cancel`` (a :py:obj:`threading.Event`); when the timeout expires or the event is set, gpg is killed
    and :py:exc:`~errors.GPGCancelledError` is raised.
    """

    @property
    def binary(self):
        """the gpg binary that gets run"""
        return self._binary

    @property
    def args(self):
        return list(self._args)

    @property
    def always_trust(self):
        return self._config.always_trust

    def __init__(self, config=None):
        super(GPG, self).__init__()
        if config is None:
            config = Config()

        # files gpg creates (encrypted files, exported keys) must not be readable by group or others;
        # the umask is inherited by gpg
        os.umask(0o077)

        self._config = config
        self._args = list(config.args) if config.args else list(DEFAULT_ARGS)
        self._cache = KeyCache()

        self._binary = "gpg"
        for b in (config.binary,) + BINARIES:
            if not b:
                continue
            path = shutil.which(b)
            if path is not None:
                self._binary = path
                break

    def __repr__(self):
        return "<GPG [{:s}] at 0x{:02X}>".format(self._binary, id(self))

    def _run(self, operation, args, stdin=None, env=None, stderr=subprocess.PIPE, timeout=None, cancel=None):
        command = (self._binary,) + tuple(args)
        logging.debug("gpg.{:s}: {:s}".format(operation, ' '.join(command)))

        try:
            proc = subprocess.Popen(command,
                                    stdin=subprocess.DEVNULL if stdin is None else subprocess.PIPE,
                                    stdout=subprocess.PIPE,
                                    stderr=stderr,
                                    env=env)

        except OSError as e:
            raise GPGInvocationError(operation, command) from e

        deadline = None if timeout is None else time.monotonic() + timeout
        pending = stdin

        with proc:
            while True:
                wait = POLL_INTERVAL if cancel is not None else None
                if deadline is not None:
                    remaining = max(deadline - time.monotonic(), 0)
                    wait = remaining if wait is None else min(wait, remaining)

                try:
                    out, err = proc.communicate(pending, timeout=wait)
                    break

                except subprocess.TimeoutExpired:
                    # input has been handed over by the first call
                    pending = None
                    expired = deadline is not None and time.monotonic() >= deadline
                    if expired or (cancel is not None and cancel.is_set()):
                        proc.kill()
                        proc.communicate()
                        logging.debug("gpg.{:s}: killed pid {:d}".format(operation, proc.pid))
                        raise GPGCancelledError(operation)

        return Invocation(command, out or b'', err or b'', proc.returncode)

    def _list_keys(self, operation, key_type, search, timeout=None, cancel=None):
        args = ["--with-colons", "--with-fingerprint", "--fixed-list-mode", key_type.listing] + list(search)
        result = self._run(operation, args, timeout=timeout, cancel=cancel)

        if result.returncode != 0:
            if key_type is KeyType.Secret and any(m in result.output for m in NO_SECRET_KEY):
                return KeyList()
            result.check(operation)

        return parse_colons(result.stdout.decode('utf-8', 'replace'), key_type)

    @GPGOperation('list_public_keys')
    def list_public_keys(self, timeout=None, cancel=None):
        """
        List all public keys. The listing is cached until :py:meth:`import_public_key` succeeds.

        :rtype: :py:obj:`~keys.KeyList`
        """
        def build():
            return self._list_keys('list_public_keys', KeyType.Public, (), timeout=timeout, cancel=cancel)

        return self._cache.get(KeyType.Public, build)

    @GPGOperation('find_public_keys')
    def find_public_keys(self, *search, timeout=None, cancel=None):
        """List the public keys matching any of ``search``. Never cached."""
        return self._list_keys('find_public_keys', KeyType.Public, search, timeout=timeout, cancel=cancel)

    @GPGOperation('list_private_keys')
    def list_private_keys(self, timeout=None, cancel=None):
        """
        List all secret keys. The listing is cached until :py:meth:`import_public_key` succeeds.

        A keyring without any secret keys gives an empty list, not an error.
        """
        def build():
            return self._list_keys('list_private_keys', KeyType.Secret, (), timeout=timeout, cancel=cancel)

        return self._cache.get(KeyType.Secret, build)

    @GPGOperation('find_private_keys')
    def find_private_keys(self, *search, timeout=None, cancel=None):
        """List the secret keys matching any of ``search``. Never cached."""
        return self._list_keys('find_private_keys', KeyType.Secret, search, timeout=timeout, cancel=cancel)

    @GPGOperation('get_recipients')
    def get_recipients(self, path, timeout=None, cancel=None):
        """
        Return the key IDs the file at ``path`` is encrypted to, without decrypting it.

        :raises: :py:exc:`~errors.GPGInvocationError` if gpg could not inspect the file. An empty list means the file
                 was inspected and has no public key recipients.
        """
        args = ["--batch", "--list-only", "--list-packets", "--no-default-keyring", "--secret-keyring", os.devnull,
                path]
        env = dict(os.environ, LANGUAGE="C")
        result = self._run('get_recipients', args, env=env, stderr=subprocess.STDOUT, timeout=timeout, cancel=cancel)
        if result.returncode != 0:
            # stderr is merged into stdout here
            raise GPGInvocationError('get_recipients', result.command, result.returncode, result.output)

        return list_recipients(result.stdout.decode('utf-8', 'replace'))

    @GPGOperation('encrypt')
    def encrypt(self, path, content, recipients, timeout=None, cancel=None):
        """
        Encrypt ``content`` to ``recipients`` and write the result to ``path``, creating missing directories.

        If the wrapper was configured with ``always_trust``, the trust model is set to always, so keys that are not
        validated by the web of trust can be used.
        """
        _makedirs(path)

        args = self._args + ["--encrypt", "--output", path]
        if self.always_trust:
            # only ever when explicitly configured
            args.append("--trust-model=always")
        for r in recipients:
            args += ["--recipient", r]

        self._run('encrypt', args, stdin=content, timeout=timeout, cancel=cancel).check('encrypt')

    @GPGOperation('decrypt')
    def decrypt(self, path, timeout=None, cancel=None):
        """Decrypt the file at ``path`` and return the plaintext."""
        args = self._args + ["--decrypt", path]
        return self._run('decrypt', args, timeout=timeout, cancel=cancel).check('decrypt').stdout

    @GPGOperation('export_public_key')
    def export_public_key(self, key_id, filename, timeout=None, cancel=None):
        """
        Write the ASCII armored public key ``key_id`` to ``filename``.

        :raises: :py:exc:`~errors.GPGKeyNotFoundError` if gpg exported nothing.
        """
        args = self._args + ["--armor", "--export", key_id]
        out = self._run('export_public_key', args, timeout=timeout, cancel=cancel).check('export_public_key').stdout

        if len(out) < 1:
            raise GPGKeyNotFoundError("Key not found: {:s}".format(key_id))

        _makedirs(filename)
        try:
            fd = os.open(filename, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
            with os.fdopen(fd, 'wb') as f:
                f.write(out)

        except OSError as e:
            raise GPGError("failed to write file '{:s}'".format(filename)) from e

    @GPGOperation('import_public_key', invalidates_cache=True)
    def import_public_key(self, filename, timeout=None, cancel=None):
        """Import the key(s) in ``filename``. Clears the cached public and secret key listings."""
        try:
            with open(filename, 'rb') as f:
                buf = f.read()

        except OSError as e:
            raise GPGError("failed to read file '{:s}'".format(filename)) from e

        args = self._args + ["--import"]
        self._run('import_public_key', args, stdin=buf, timeout=timeout, cancel=cancel).check('import_public_key')

    @GPGOperation('version')
    def version(self, timeout=None, cancel=None):
        """
        Return the version of the gpg binary, ``Version("0")`` if it cannot be determined.

        :rtype: :py:obj:`packaging.version.Version`
        """
        v = Version("0")
        try:
            result = self._run('version', ["--version"], timeout=timeout, cancel=cancel).check('version')

        except GPGInvocationError:
            return v

        for line in result.stdout.decode('utf-8', 'replace').splitlines():
            line = line.strip()
            if line.startswith("gpg "):
                try:
                    return Version(line.split()[-1])

                except InvalidVersion:
                    continue

        return v
