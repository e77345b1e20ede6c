"""
This module implements error translation and mounting for llfuse.

..  :copyright: (c) 2016 by Jelte Fennema.
    :license: MIT, see License for more details.
"""
import llfuse
from llfuse import FUSEError

from contextlib import contextmanager
import errno
import logging
import traceback
import os

from .errors import RegistryCorruption, ScratchFSError


@contextmanager
def _convert_error_to_fuse_error(action, thing):
    try:
        yield
    except (FUSEError, RegistryCorruption):
        # Anything but a FUSEError stops the llfuse main loop, which is what
        # should happen with a corrupted registry.
        raise
    except ScratchFSError as e:
        logging.debug('Failed %s %s: %s', action, thing, e)
        raise FUSEError(e.errno)
    except Exception as e:
        logging.error('Something went wrong when %s %s: %s', action, thing, e)
        if logging.getLogger().isEnabledFor(logging.DEBUG):
            # DEBUG logging, print stacktrace
            traceback.print_exc()
        raise FUSEError(errno.EIO)


def mount(operations, mountpoint, options=None, *,
          override_default_options=False, workers=30):
    """Mount a file system.

    Args
    ----
    operations: `~.Operations`
        The operations handler for the file system.
    mountpoint: str
        The directory on which the file system should be mounted.
    options: set
        A set of options that should be used when mounting.
    override_default_options: bool
        If this is set to `True` only the supplied options will be used.
        Otherwise the options will be added to the defaults. The defaults are
        the defaults supplied by `llfuse.default_options` plus the name of the
        file system.
    workers: int
        The amount of worker threads that should be spawned to handle the file
        operations.
    """

    operations.mountpoint = os.path.abspath(mountpoint)

    defaults = set(llfuse.default_options)
    defaults.add('fsname=scratchfs')

    if options is None:
        options = defaults
    elif not override_default_options:
        options = set(options) | defaults

    logging.info('Mounting on %s', operations.mountpoint)
    llfuse.init(operations, mountpoint, options)

    try:
        llfuse.main(workers=workers)
    except RegistryCorruption:
        logging.critical('Aborting, the filesystem state is corrupted')
        raise
    finally:
        llfuse.close()
