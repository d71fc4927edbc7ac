"""_author.py

Canonical location for authorship information
__version__ is a PEP-440 compliant version string,
normalized through packaging.version.Version
"""

from packaging.version import Version

__all__ = ['__author__',
           '__copyright__',
           '__license__',
           '__version__']

__author__ = "GPGWrap Developers"
__copyright__ = "Copyright (c) 2017-2026 GPGWrap Developers"
__license__ = "BSD"
__version__ = str(Version("0.3.0"))
