""" GPGWrap :: typed key listings and recipients from the gpg command line tool
"""

from .gpg import Config
from .gpg import GPG
from .keys import Key
from .keys import KeyList
from .keys import UID

__all__ = ['constants',
           'errors',
           'Config',
           'GPG',
           'Key',
           'KeyList',
           'UID', ]
