"""
A volatile, in-memory FUSE file system.

..  :copyright: (c) 2016 by Jelte Fennema.
    :license: MIT, see License for more details.
"""

from .utils import mount
from .operations import Operations
from .dispatcher import Filesystem, Stat
from .errors import (ScratchFSError, NotFound, AlreadyExists,
                     ResourceExhausted, OutOfMemory, InvalidArgument,
                     NotADirectory, RegistryCorruption)
