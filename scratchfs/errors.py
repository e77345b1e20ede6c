"""
This module implements the errors raised by the filesystem core.

..  :copyright: (c) 2016 by Jelte Fennema.
    :license: MIT, see License for more details.
"""
import errno


class ScratchFSError(Exception):
    """Base class of all recoverable errors raised by the core.

    The ``errno`` attribute holds the error code that is reported to the
    kernel when the error reaches the llfuse bridge.
    """

    errno = errno.EIO
    reason = 'input/output error'

    def __init__(self, path, reason=None):
        if reason is not None:
            self.reason = reason
        self.path = path
        super().__init__('%s: %s' % (path, self.reason))


class NotFound(ScratchFSError):
    errno = errno.ENOENT
    reason = 'no such file or directory'


class AlreadyExists(ScratchFSError):
    errno = errno.EEXIST
    reason = 'already exists'


class ResourceExhausted(ScratchFSError):
    errno = errno.ENOSPC
    reason = 'capacity exhausted'


class OutOfMemory(ScratchFSError):
    errno = errno.ENOMEM
    reason = 'out of memory'


class InvalidArgument(ScratchFSError):
    errno = errno.EINVAL
    reason = 'invalid argument'


class NotADirectory(ScratchFSError):
    errno = errno.ENOTDIR
    reason = 'not a directory'


class RegistryCorruption(Exception):
    """The namespace and the content store disagree.

    This is never translated into an error code: the mount has to be torn
    down instead of operating on the broken state.
    """
