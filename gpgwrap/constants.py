""" constants.py
"""
from __future__ import annotations

from enum import Enum
from enum import IntEnum
from enum import IntFlag

__all__ = [
    'KeyType',
    'RecordType',
    'PubKeyAlgorithm',
    'Validity',
    'KeyFlags',
]


class KeyType(Enum):
    """Which key listing a key was reported by."""
    Public = 'public'
    Secret = 'secret'

    @property
    def listing(self) -> str:
        # the gpg command that lists this kind of key
        return '--list-{:s}-keys'.format(self.value)


class RecordType(Enum):
    """Record type tags of ``--with-colons`` output, see doc/DETAILS in GnuPG."""
    Unknown = ''
    PublicKey = 'pub'
    SecretKey = 'sec'
    PublicSubKey = 'sub'
    SecretSubKey = 'ssb'
    Fingerprint = 'fpr'
    UserID = 'uid'

    @classmethod
    def _missing_(cls, val: object) -> RecordType:
        return cls.Unknown

    @property
    def is_primary(self) -> bool:
        return self in {RecordType.PublicKey, RecordType.SecretKey}

    @property
    def is_subkey(self) -> bool:
        return self in {RecordType.PublicSubKey, RecordType.SecretSubKey}


class PubKeyAlgorithm(IntEnum):
    """Public key algorithms, numbered as in field 4 of a key record."""
    Unknown = -1
    Invalid = 0x00
    #: Signifies that a key is an RSA key.
    RSAEncryptOrSign = 0x01
    RSAEncrypt = 0x02  # deprecated
    RSASign = 0x03     # deprecated
    #: Signifies that a key is an ElGamal key.
    ElGamal = 0x10
    #: Signifies that a key is a DSA key.
    DSA = 0x11
    #: Signifies that a key is an ECDH key.
    ECDH = 0x12
    #: Signifies that a key is an ECDSA key.
    ECDSA = 0x13
    FormerlyElGamalEncryptOrSign = 0x14  # deprecated - do not generate
    DiffieHellman = 0x15  # X9.42
    EdDSA = 0x16  # https://tools.ietf.org/html/draft-koch-eddsa-for-openpgp-04

    @classmethod
    def _missing_(cls, val: object) -> PubKeyAlgorithm:
        if not isinstance(val, int):
            raise TypeError(f"cannot look up PubKeyAlgorithm by non-int {type(val)}")
        return cls.Unknown

    @classmethod
    def parse(cls, field: str) -> PubKeyAlgorithm:
        """Look up the algorithm named by a colon record field, ``Unknown`` if the field is not a number."""
        try:
            return cls(int(field))

        except ValueError:
            return cls.Unknown

    @property
    def can_encrypt(self) -> bool:  # pragma: no cover
        return self in {PubKeyAlgorithm.RSAEncryptOrSign, PubKeyAlgorithm.ElGamal, PubKeyAlgorithm.ECDH}

    @property
    def can_sign(self) -> bool:
        return self in {PubKeyAlgorithm.RSAEncryptOrSign, PubKeyAlgorithm.DSA, PubKeyAlgorithm.ECDSA, PubKeyAlgorithm.EdDSA}

    @property
    def deprecated(self) -> bool:
        return self in {PubKeyAlgorithm.RSAEncrypt,
                        PubKeyAlgorithm.RSASign,
                        PubKeyAlgorithm.FormerlyElGamalEncryptOrSign}


class Validity(Enum):
    """
    Validity and ownertrust letters of a key or user id record.

    gpg prints ``o``, ``q`` and ``-`` (and sometimes nothing) for states it cannot tell apart in a useful way;
    all of them are read as :py:obj:`Validity.Unknown`.
    """
    Unknown = '-'
    Invalid = 'i'
    Disabled = 'd'
    Revoked = 'r'
    Expired = 'e'
    Never = 'n'
    Marginal = 'm'
    Fully = 'f'
    Ultimate = 'u'
    #: the private part of this key is well known (e.g. a test key)
    WellKnownPrivateKey = 'w'

    @classmethod
    def _missing_(cls, val: object) -> Validity:
        return cls.Unknown

    @property
    def is_useable(self) -> bool:
        return self in {Validity.Marginal, Validity.Fully, Validity.Ultimate}


class KeyFlags(IntFlag):
    """Flags that determine a key's capabilities."""
    #: Signifies that a key may be used to certify keys and user ids.
    Certify = 0x01
    #: Signifies that a key may be used to sign messages and documents.
    Sign = 0x02
    #: Signifies that a key may be used to encrypt messages.
    EncryptCommunications = 0x04
    #: Signifies that a key may be used to encrypt storage.
    EncryptStorage = 0x08
    #: Signifies that a key may be used for authentication.
    Authentication = 0x20

    @classmethod
    def parse(cls, field: str) -> KeyFlags:
        """
        Read the capabilities field of a key record.

        Lower case letters are the usage of the key itself, upper case letters on a primary key summarize the
        usable capabilities of the whole key. Both are folded into the same flags; unknown letters are ignored.
        """
        letters = {'c': cls.Certify,
                   's': cls.Sign,
                   'e': cls.EncryptCommunications | cls.EncryptStorage,
                   'a': cls.Authentication}

        flags = cls(0)
        for c in field.lower():
            flags |= letters.get(c, cls(0))
        return flags
