""" keys.py

the key inventory built from gpg key listings
"""
import collections.abc as collections_abc
import re

from datetime import datetime, timezone

from .constants import KeyFlags
from .constants import KeyType
from .constants import PubKeyAlgorithm
from .constants import Validity

from .types import Fingerprint
from .types import KeyID

__all__ = ['UID',
           'Key',
           'KeyList']


class UID(object):
    # tried in order; a User ID matching neither is kept whole as the name
    _patterns = [
        re.compile(r'^(?P<name>[^(<]+?)\s+\((?P<comment>[^)]+)\)\s+<(?P<email>[^>]+)>$'),
        re.compile(r'^(?P<name>[^(<]+?)\s+<(?P<email>[^>]+)>$'),
    ]

    @classmethod
    def new(cls, userid, validity=Validity.Unknown, created=None, expires_at=None):
        """
        Create a new User ID from the raw User ID string of a ``uid`` record.

        :param userid: The User ID string, e.g. ``Jane Doe (work) <jane@example.com>``.
        :type userid: ``str``
        :param validity: The validity gpg reported for this User ID.
        :type validity: :py:obj:`~constants.Validity`
        """
        uid = UID()
        uid.userid = userid
        uid.validity = validity
        uid.created = created
        uid.expires_at = expires_at
        uid.name, uid.comment, uid.email = cls._splitstring(userid)
        return uid

    @classmethod
    def _splitstring(cls, userid):
        '''returns name, comment, email from a User ID string'''
        text = userid.strip()
        for pattern in cls._patterns:
            m = pattern.match(text)
            if m is not None:
                parts = m.groupdict()
                return parts['name'], parts.get('comment') or "", parts['email']

        return userid, "", ""

    def __init__(self):
        """
        UID objects represent one user identity bound to a key.

        Create them with :py:meth:`UID.new`.
        """
        super(UID, self).__init__()
        self.userid = ""
        self.name = ""
        self.comment = ""
        self.email = ""
        self.validity = Validity.Unknown
        self.created = None
        self.expires_at = None

    def __eq__(self, other):
        if not isinstance(other, UID):
            return NotImplemented
        return (self.userid, self.validity, self.created, self.expires_at) == \
               (other.userid, other.validity, other.created, other.expires_at)

    def __repr__(self):
        return "<UID [{:s}][{:s}] at 0x{:02X}>".format(self.userid, self.validity.name, id(self))

    def __format__(self, format_spec):
        comment = "" if self.comment == "" else " ({:s})".format(self.comment)
        email = "" if self.email == "" else " <{:s}>".format(self.email)
        return "{:s}{:s}{:s}".format(self.name, comment, email)


class Key(object):
    """
    One primary key or sub-key, as reported by a key listing.

    Sub-keys have the same shape as primary keys, never carry User IDs, and are only reachable through
    :py:attr:`Key.subkeys` of the primary key that owns them.
    """

    @property
    def keyid(self):
        """The long key ID: the one gpg reported, or the one derived from the fingerprint."""
        if self._keyid is not None:
            return self._keyid
        if self.fingerprint is not None:
            return self.fingerprint.keyid
        return None

    @keyid.setter
    def keyid(self, value):
        self._keyid = KeyID(value) if value else None

    @property
    def is_public(self):
        return self.key_type is KeyType.Public

    @property
    def is_primary(self):
        return self.parent is None

    @property
    def is_expired(self):
        """``True`` if this key has an expiration date in the past."""
        if self.expires_at is None:
            return False
        return self.expires_at <= datetime.now(timezone.utc)

    @property
    def is_useable(self):
        """``True`` if this key is not expired and gpg considers it at least marginally valid."""
        return not self.is_expired and self.validity.is_useable

    @property
    def userid(self):
        """The first User ID of this key, or ``None``."""
        if self.parent is not None:
            return self.parent.userid
        return next(iter(self.userids), None)

    def __init__(self, key_type=KeyType.Public):
        super(Key, self).__init__()
        self.key_type = key_type
        self.key_length = 0
        self.key_algorithm = PubKeyAlgorithm.Unknown
        self.fingerprint = None
        self._keyid = None
        self.created = None
        self.expires_at = None
        self.validity = Validity.Unknown
        self.ownertrust = Validity.Unknown
        self.capabilities = KeyFlags(0)
        self.curve = ""
        self.userids = []
        self.subkeys = []
        self.parent = None

    def add_uid(self, uid):
        self.userids.append(uid)

    def add_subkey(self, key):
        key.key_type = self.key_type
        key.parent = self
        self.subkeys.append(key)

    def _fields(self):
        return (self.key_type, self.fingerprint, self.keyid, self.key_length, self.key_algorithm, self.created,
                self.expires_at, self.validity, self.ownertrust, self.capabilities, self.curve)

    def __eq__(self, other):
        if not isinstance(other, Key):
            return NotImplemented
        return self._fields() == other._fields() and \
            self.userids == other.userids and \
            self.subkeys == other.subkeys

    def __repr__(self):
        if self.keyid is not None:
            return "<Key [{:s}][0x{:s}] at 0x{:02X}>".format(self.key_algorithm.name, self.keyid, id(self))
        return "<Key [{:s}] at 0x{:02X}>".format(self.key_algorithm.name, id(self))

    def __format__(self, format_spec):
        uid = self.userid
        return "0x{:s} - {:s}".format(self.keyid or "", format(uid) if uid is not None else "")

    def __str__(self):
        tag = {(True, True): 'pub', (True, False): 'sub', (False, True): 'sec', (False, False): 'ssb'}
        def date(d):
            return d.strftime('%Y-%m-%d') if d is not None else ''

        line = "{:s}   {:d}{:s}/0x{:s} {:s}".format(tag[(self.is_public, self.is_primary)], self.key_length,
                                                   self.key_algorithm.name, self.keyid or "", date(self.created))
        if self.expires_at is not None:
            line += " [expires: {:s}]".format(date(self.expires_at))

        out = [line]
        if self.fingerprint is not None:
            out.append("      Key fingerprint = {:s}".format(self.fingerprint.__pretty__()))

        for uid in self.userids:
            out.append("uid                  [{:s}] {}".format(uid.validity.name, format(uid)))

        for subkey in self.subkeys:
            out.append(str(subkey))

        return '\n'.join(out)


class KeyList(collections_abc.Sequence):
    def __init__(self, keys=()):
        """
        KeyList objects are ordered collections of primary keys, the result of one key listing.

        No two keys in a KeyList share a fingerprint.
        """
        super(KeyList, self).__init__()
        self._keys = []
        self._fingerprints = set()
        for key in keys:
            self.append(key)

    def __getitem__(self, index):
        return self._keys[index]

    def __len__(self):
        return len(self._keys)

    def __contains__(self, item):
        if isinstance(item, Key):
            return any(item is key for key in self._keys)

        try:
            self.find_key(item)

        except KeyError:
            return False

        return True

    def __eq__(self, other):
        if not isinstance(other, KeyList):
            return NotImplemented
        return self._keys == other._keys

    def __repr__(self):
        return "<KeyList [{:d} keys] at 0x{:02X}>".format(len(self), id(self))

    def append(self, key):
        """
        Add a primary key to the end of this list.

        :returns: ``False`` if a key with the same fingerprint is already present and ``key`` was not added.
        """
        if key.fingerprint is not None:
            if key.fingerprint in self._fingerprints:
                return False
            self._fingerprints.add(key.fingerprint)

        self._keys.append(key)
        return True

    def find_key(self, search):
        """
        Find the primary key matching ``search``.

        :param search: A fingerprint, long key ID or short key ID, with or without spaces or a leading ``0x``.
                       Fingerprints of sub-keys match the primary key that owns them.
        :raises: :py:exc:`KeyError` if no key matches.
        """
        for key in self._keys:
            for k in [key] + key.subkeys:
                if k.fingerprint is not None and k.fingerprint == search:
                    return key
                if k.keyid is not None and k.keyid == search:
                    return key

        raise KeyError(search)

    def recipients(self):
        """the sorted fingerprints of all keys in this list"""
        return sorted(str(key.fingerprint) for key in self._keys)

    def useable_keys(self):
        return KeyList(key for key in self._keys if key.is_useable)

    def unusable_keys(self):
        return KeyList(key for key in self._keys if not key.is_useable)
