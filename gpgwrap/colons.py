""" colons.py

Parsing of the machine readable key listings gpg prints with ``--with-colons --fixed-list-mode``.

Parsing happens in two steps: :py:func:`tokenize` turns lines into typed records, and :py:func:`parse_colons` folds
those records into a :py:obj:`~keys.KeyList`. Neither step ever fails because of a single bad line; such lines are
skipped and the rest of the listing is still read.
"""
import logging
import re
import warnings

from datetime import datetime, timezone
from typing import Iterable, Iterator, NamedTuple, Optional, Union

from .constants import KeyFlags
from .constants import KeyType
from .constants import PubKeyAlgorithm
from .constants import RecordType
from .constants import Validity

from .keys import Key
from .keys import KeyList
from .keys import UID

from .types import Fingerprint
from .types import KeyID

__all__ = ['KeyRecord',
           'FingerprintRecord',
           'IdentityRecord',
           'MalformedRecord',
           'parse_timestamp',
           'tokenize',
           'parse_colons', ]

# every record type we read has at least this many fields
MIN_FIELDS = 10

_escape = re.compile(r'\\x([0-9a-fA-F]{2})')


class KeyRecord(NamedTuple):
    """a ``pub``, ``sec``, ``sub`` or ``ssb`` record"""
    tag: RecordType
    validity: Validity
    key_length: int
    key_algorithm: PubKeyAlgorithm
    keyid: Optional[KeyID]
    created: Optional[datetime]
    expires_at: Optional[datetime]
    ownertrust: Validity
    capabilities: KeyFlags
    curve: str


class FingerprintRecord(NamedTuple):
    """a ``fpr`` record"""
    fingerprint: Fingerprint


class IdentityRecord(NamedTuple):
    """a ``uid`` record"""
    userid: str
    validity: Validity
    created: Optional[datetime]
    expires_at: Optional[datetime]


class MalformedRecord(NamedTuple):
    """a ``pub``, ``sec``, ``sub`` or ``ssb`` record too short to read; ends the key it would have opened"""
    tag: RecordType


_Record = Union[KeyRecord, FingerprintRecord, IdentityRecord, MalformedRecord]


def parse_timestamp(field: str) -> Optional[datetime]:
    """
    Read a creation or expiration date field.

    gpg prints seconds since the epoch, or ISO 8601 (``20170101T120000``) with ``--fixed-list-mode`` on some
    versions. Anything else, including an empty field, gives ``None``.
    """
    field = field.strip()
    try:
        if field.isdigit():
            return datetime.fromtimestamp(int(field), timezone.utc)
        if 'T' in field:
            return datetime.strptime(field, '%Y%m%dT%H%M%S').replace(tzinfo=timezone.utc)

    except (ValueError, OverflowError, OSError):
        pass

    return None


def _unescape(field: str) -> str:
    # colons and control characters in user ids are printed as \xNN
    return _escape.sub(lambda m: chr(int(m.group(1), 16)), field)


def _key_record(tag: RecordType, fields: list) -> KeyRecord:
    try:
        key_length = int(fields[2])

    except ValueError:
        key_length = 0

    try:
        keyid = KeyID(fields[4]) if fields[4] else None

    except ValueError:
        keyid = None

    return KeyRecord(tag=tag,
                     validity=Validity(fields[1]),
                     key_length=key_length,
                     key_algorithm=PubKeyAlgorithm.parse(fields[3]),
                     keyid=keyid,
                     created=parse_timestamp(fields[5]),
                     expires_at=parse_timestamp(fields[6]),
                     ownertrust=Validity(fields[8]),
                     capabilities=KeyFlags.parse(fields[11]) if len(fields) > 11 else KeyFlags(0),
                     curve=fields[16] if len(fields) > 16 else "")


def tokenize(lines: Iterable[str]) -> Iterator[_Record]:
    """
    Turn the lines of a colon listing into records.

    Lines with a record type other than ``pub``, ``sec``, ``sub``, ``ssb``, ``fpr`` and ``uid`` are ignored.
    Lines that are too short to be a record, and ``fpr`` records that do not carry a valid fingerprint, are logged and
    skipped; a skipped key record still gives a :py:obj:`MalformedRecord`, so the lines that follow it are not taken
    for part of the key before it. This never raises on account of a line's content.
    """
    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue

        fields = line.split(':')
        tag = RecordType(fields[0])
        if tag is RecordType.Unknown:
            continue

        if len(fields) < MIN_FIELDS:
            logging.debug("skipping malformed {:s} record on line {:d}: {:s}".format(tag.value, lineno, line))
            if tag.is_primary or tag.is_subkey:
                yield MalformedRecord(tag)
            continue

        if tag.is_primary or tag.is_subkey:
            yield _key_record(tag, fields)

        elif tag is RecordType.Fingerprint:
            try:
                yield FingerprintRecord(Fingerprint(fields[9]))

            except ValueError:
                logging.debug("skipping fpr record with invalid fingerprint on line {:d}: {:s}".format(lineno, line))

        elif tag is RecordType.UserID:
            yield IdentityRecord(userid=_unescape(fields[9]),
                                 validity=Validity(fields[1]),
                                 created=parse_timestamp(fields[5]),
                                 expires_at=parse_timestamp(fields[6]))


def _new_key(record: KeyRecord, key_type: KeyType) -> Key:
    key = Key(key_type)
    key.validity = record.validity
    key.key_length = record.key_length
    key.key_algorithm = record.key_algorithm
    key.keyid = record.keyid
    key.created = record.created
    key.expires_at = record.expires_at
    key.ownertrust = record.ownertrust
    key.capabilities = record.capabilities
    key.curve = record.curve
    return key


def parse_colons(text: str, key_type: KeyType = KeyType.Public) -> KeyList:
    """
    Build a :py:obj:`~keys.KeyList` from the output of ``gpg --with-colons --fixed-list-mode --list-*-keys``.

    :param text: The listing.
    :param key_type: Which listing produced ``text``. Both ``pub`` and ``sec`` records open a primary key in either
                     listing, since some gpg versions print ``pub`` records in secret key listings.
    """
    keys = KeyList()
    primary = None
    current = None
    # the last primary record was unreadable; its sub-keys are dropped with it
    skipping = False

    def close(key):
        if key is None:
            return

        if key.fingerprint is None:
            logging.debug("discarding key 0x{:s} without a fingerprint".format(key.keyid or ""))

        elif not keys.append(key):
            warnings.warn("Discarded duplicate key: {:s}".format(key.fingerprint), stacklevel=3)

    for record in tokenize(text.splitlines()):
        if isinstance(record, MalformedRecord):
            # whatever follows belongs to the unreadable record, not to the key before it
            if record.tag.is_primary:
                close(primary)
                primary = None
                skipping = True
            current = None

        elif isinstance(record, KeyRecord):
            if record.tag.is_primary:
                close(primary)
                primary = current = _new_key(record, key_type)
                skipping = False
                continue

            if primary is None:
                if not skipping:
                    warnings.warn("Discarded {:s} record without a primary key".format(record.tag.value),
                                  stacklevel=2)
                continue

            current = _new_key(record, key_type)
            primary.add_subkey(current)

        elif isinstance(record, FingerprintRecord):
            if current is not None:
                current.fingerprint = record.fingerprint

        elif isinstance(record, IdentityRecord):
            if primary is not None:
                primary.add_uid(UID.new(record.userid, record.validity, record.created, record.expires_at))

    close(primary)
    return keys
