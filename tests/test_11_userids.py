# coding=utf-8
""" verify that User ID parsing aligns with expected behavior
"""

from typing import Dict, Tuple

import pytest

from gpgwrap import UID

uids: Dict[str, Tuple[str, str, str]] = {
    'Jane Doe (work) <jane@example.com>': ('Jane Doe', 'work', 'jane@example.com'),
    'Jane Doe <jane@example.com>': ('Jane Doe', '', 'jane@example.com'),
    'garbled-uid-no-brackets': ('garbled-uid-no-brackets', '', ''),
    'Alice Lovelace (j. random hacker) <alice@example.org>': ('Alice Lovelace', 'j. random hacker', 'alice@example.org'),
    '  Alice Lovelace   <alice@example.org>  ': ('Alice Lovelace', '', 'alice@example.org'),
    'Jürgen Müller (Büro) <juergen@example.de>': ('Jürgen Müller', 'Büro', 'juergen@example.de'),
    '<alice@example.org>': ('<alice@example.org>', '', ''),
    'alice@example.org': ('alice@example.org', '', ''),
    'Alice Lovelace': ('Alice Lovelace', '', ''),
    'Alice (no email)': ('Alice (no email)', '', ''),
    'Alice <alice@example.org> trailing': ('Alice <alice@example.org> trailing', '', ''),
    '': ('', '', ''),
}


class TestUserIDs(object):
    @pytest.mark.parametrize('uid', uids.keys())
    def test_uid_name(self, uid: str):
        assert UID.new(uid).name == uids[uid][0]

    @pytest.mark.parametrize('uid', uids.keys())
    def test_uid_comment(self, uid: str):
        assert UID.new(uid).comment == uids[uid][1]

    @pytest.mark.parametrize('uid', uids.keys())
    def test_uid_email(self, uid: str):
        assert UID.new(uid).email == uids[uid][2]
