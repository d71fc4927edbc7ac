""" types.py
"""
from __future__ import annotations

import binascii
import re

from typing import Optional, Union

__all__ = ['KeyID',
           'Fingerprint', ]


def _normalize(text: str) -> str:
    # gpg accepts key specifiers with spaces, in lower case and with a leading 0x
    text = text.replace(' ', '').upper()
    if text.startswith('0X'):
        text = text[2:]
    return text


class KeyID(str):
    '''
    This class represents an 8-octet key ID, as printed in field 5 of a key record and in the keyid field of a
    ``:pubkey enc packet:`` line.
    '''
    def __new__(cls, content: Union[str, bytes, bytearray]) -> "KeyID":
        if isinstance(content, str):
            content = _normalize(content)
            if not re.match(r'^[0-9A-F]{16}$', content):
                raise ValueError(f'Initializing a KeyID from a string requires it to be 16 hex digits, not "{content}"')
            return str.__new__(cls, content)
        elif isinstance(content, (bytes, bytearray)):
            if len(content) != 8:
                raise ValueError(f'Initializing a KeyID from a bytes or bytearray requires exactly 8 bytes, not {content!r}')
            return str.__new__(cls, binascii.b2a_hex(content).decode('latin1').upper())
        else:
            raise TypeError(f'cannot initialize a KeyID from {type(content)}')

    @property
    def shortid(self) -> str:
        return self[-8:]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, KeyID):
            return str(self) == str(other)
        if isinstance(other, Fingerprint):
            return str(self) == str(other.keyid)
        if isinstance(other, str):
            return str(self) == _normalize(other)
        if isinstance(other, bytes):
            return bytes(self) == other
        return False

    def __ne__(self, other: object) -> bool:
        return not (self == other)

    def __int__(self) -> int:
        return int.from_bytes(bytes(self), byteorder='big', signed=False)

    def __hash__(self) -> int:
        return hash(str(self))

    def __bytes__(self) -> bytes:
        return binascii.a2b_hex(self)

    def __repr__(self) -> str:
        return f"KeyID({self})"


class Fingerprint(str):
    """
    A subclass of ``str``. Can be compared using == and != to ``str`` and other :py:obj:`Fingerprint` instances.

    Comparing against a string matches the full fingerprint, the long key ID or (for v4 keys) the short key ID,
    ignoring spaces, case and a leading ``0x``. v3 fingerprints (32 hex digits, from gpg 1.x) carry no key ID.
    """
    _versions = {32: 3, 40: 4, 64: 5}

    @property
    def version(self) -> int:
        return self._version

    @property
    def keyid(self) -> Optional[KeyID]:
        # v5 key IDs are the leftmost 64 bits of the fingerprint, v4 key IDs the rightmost
        if self._version == 3:
            return None
        if self._version == 5:
            return KeyID(self[:16])
        return KeyID(self[-16:])

    @property
    def shortid(self) -> Optional[str]:
        if self._version != 4:
            return None
        return self[-8:]

    def __new__(cls, content: Union[str, bytes, bytearray]) -> "Fingerprint":
        if isinstance(content, Fingerprint):
            return content

        if isinstance(content, (bytes, bytearray)):
            if len(content) not in (16, 20, 32):
                raise ValueError(f'binary Fingerprint must be 16, 20 or 32 bytes, not {len(content)}')
            return Fingerprint(binascii.b2a_hex(content).decode('latin-1').upper())

        # validate input before continuing: this should be a string of 32 (v3), 40 (v4) or 64 (v5) hex digits
        content = _normalize(content)
        if not re.match(r'^(?:[0-9A-F]{32}|[0-9A-F]{40}|[0-9A-F]{64})$', content):
            raise ValueError('Fingerprint must be a string of 32, 40 or 64 hex digits')
        ret = str.__new__(cls, content)
        ret._version = cls._versions[len(content)]
        return ret

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Fingerprint):
            return str(self) == str(other)
        if isinstance(other, KeyID):
            return self.keyid == other

        if isinstance(other, (str, bytes, bytearray)):
            if isinstance(other, (bytes, bytearray)):  # pragma: no cover
                other = other.decode('latin-1')

            other = _normalize(other)
            return any([str(self) == other,
                        self.keyid == other,
                        self.shortid is not None and self.shortid == other])

        return False  # pragma: no cover

    def __ne__(self, other: object) -> bool:
        return not (self == other)

    def __hash__(self) -> int:
        return hash(str(self))

    def __bytes__(self) -> bytes:
        return binascii.a2b_hex(self.encode("latin-1"))

    def __pretty__(self) -> str:
        # groups of four, with a double space between the two halves
        groups = [self[i:i + 4] for i in range(0, len(self), 4)]
        half = len(groups) // 2
        return '  '.join(' '.join(g) for g in (groups[:half], groups[half:]))

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}v{self._version}({self.__pretty__()})'
