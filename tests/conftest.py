"""GPGWrap conftest"""
import pytest

import os
import shutil
import sys

# set the CWD and add to sys.path if we need to
os.chdir(os.path.join(os.path.abspath(os.path.dirname(__file__)), os.pardir))

if os.getcwd() not in sys.path:
    sys.path.insert(0, os.getcwd())
else:
    sys.path.insert(0, sys.path.pop(sys.path.index(os.getcwd())))

if os.path.join(os.getcwd(), 'tests') not in sys.path:
    sys.path.insert(1, os.path.join(os.getcwd(), 'tests'))


def _read(f, mode='r'):
    with open(f, mode) as ff:
        return ff.read()


class FakeGPG(object):
    """
    A stand-in for the gpg binary: a shell script that records its arguments and stdin, and replays canned output
    for the arguments it has been told to respond to.
    """
    script = ('#!/bin/sh\n'
              'printf \'%s\\n\' "$*" >> "{dir}/calls"\n'
              'for arg in "$@"; do\n'
              '    name="${{arg#--}}"\n'
              '    if [ -f "{dir}/$name.sh" ]; then\n'
              '        . "{dir}/$name.sh"\n'
              '    fi\n'
              'done\n'
              'exit 0\n')

    def __init__(self, directory):
        self.dir = str(directory)
        self.binary = os.path.join(self.dir, 'gpg')
        with open(self.binary, 'w') as f:
            f.write(self.script.format(dir=self.dir))
        os.chmod(self.binary, 0o700)

    def respond(self, flag, stdout=b'', stderr=b'', returncode=0, delay=None):
        """make the fake answer any invocation that carries ``flag``"""
        name = flag[2:] if flag.startswith('--') else flag
        path = os.path.join(self.dir, name)

        with open(path + '.out', 'wb') as f:
            f.write(stdout)
        with open(path + '.err', 'wb') as f:
            f.write(stderr)

        body = 'cat > "{p}.in"\ncat "{p}.out"\ncat "{p}.err" >&2\n'.format(p=path)
        if delay is not None:
            body += 'exec sleep {:d}\n'.format(delay)
        body += 'exit {:d}\n'.format(returncode)

        with open(path + '.sh', 'w') as f:
            f.write(body)

    def stdin(self, flag):
        """what the last invocation carrying ``flag`` read from stdin"""
        return _read(os.path.join(self.dir, flag[2:] + '.in'), 'rb')

    def calls(self, flag=None):
        """the argument lists of all invocations so far, optionally only those carrying ``flag``"""
        path = os.path.join(self.dir, 'calls')
        if not os.path.exists(path):
            return []

        calls = [line.split() for line in _read(path).splitlines()]
        if flag is not None:
            calls = [c for c in calls if flag in c]
        return calls


@pytest.fixture
def fakegpg(tmp_path):
    fake_dir = tmp_path / 'fakegpg'
    fake_dir.mkdir()
    return FakeGPG(fake_dir)


@pytest.fixture(scope='session')
def pubring():
    return _read('tests/testdata/pubring.colons')


@pytest.fixture(scope='session')
def secring():
    return _read('tests/testdata/secring.colons')


@pytest.fixture(scope='session')
def packets():
    return _read('tests/testdata/message.packets')


@pytest.fixture(scope='session')
def symmetric_packets():
    return _read('tests/testdata/symmetric.packets')


# pytest hooks

# pytest_configure
# called after command line options have been parsed and all plugins and initial conftest files been loaded.
def pytest_configure(config):
    print("== GPGWrap Test Suite ==")

    # display the working directory and the gpg that would be used outside of the tests
    print("Working Directory: " + os.getcwd())
    print("Using GnuPG   " + str(shutil.which('gpg2') or shutil.which('gpg') or 'none (not needed)'))
    print("")
