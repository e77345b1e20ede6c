"""
This module implements the class that deals with operations from llfuse.

..  :copyright: (c) 2016 by Jelte Fennema.
    :license: MIT, see License for more details.
"""

from llfuse import Operations as LlfuseOperations
from llfuse import ROOT_INODE, EntryAttributes, FUSEError

import logging
import errno
import os
import stat

from .dispatcher import Filesystem
from .utils import _convert_error_to_fuse_error

# Shows possibly occuring segfaults since llfuse uses the Cython
import faulthandler
faulthandler.enable()


class Operations(LlfuseOperations):
    """The class that forwards llfuse requests to a `~.Filesystem`.

    llfuse addresses entries by inode, the filesystem by path. Every method
    translates the inode to a path first and then calls the matching verb.

    Most methods have a ``fh`` or ``inode`` argument. Currently these are the
    same.
    """

    def __init__(self, filesystem=None, *args, **kwargs):
        """
        Args
        ----
        filesystem: `~.Filesystem`
            The filesystem that is exposed. A new empty one with the default
            limits is created when it is `None`.
        """

        super().__init__(*args, **kwargs)

        if filesystem is None:
            filesystem = Filesystem()

        self.fs = filesystem

    def _path(self, inode):
        with _convert_error_to_fuse_error('resolving', 'inode %s' % inode):
            return self.fs.path_of(inode)

    def _child_path(self, parent_inode, name):
        parent = self._path(parent_inode)
        name = os.fsdecode(name)
        if parent == '/':
            return '/' + name
        return parent + '/' + name

    def _attributes(self, st):
        attr = EntryAttributes()
        attr.st_ino = st.inode
        attr.st_mode = st.mode
        attr.st_nlink = st.nlink
        attr.st_size = st.size
        attr.st_uid = st.uid
        attr.st_gid = st.gid
        attr.st_atime_ns = int(st.atime * 10**9)
        attr.st_mtime_ns = int(st.mtime * 10**9)
        attr.st_ctime_ns = int(st.ctime * 10**9)
        attr.st_blksize = 512
        attr.st_blocks = (st.size + 511) // 512
        return attr

    def _stat(self, path):
        with _convert_error_to_fuse_error('getting attributes of', path):
            return self._attributes(self.fs.stat(path))

    def getattr(self, inode, ctx=None):
        """Return the attributes of the entry with this inode."""
        logging.debug('getattr %s', inode)
        return self._stat(self._path(inode))

    def lookup(self, parent_inode, name, ctx=None):
        """Look up a name in a directory.

        Only the root has children, so any other lookup besides ``.`` and
        ``..`` fails.
        """
        logging.debug('lookup %s %s', parent_inode, name)

        if name == b'.':
            return self.getattr(parent_inode)
        if name == b'..':
            return self.getattr(ROOT_INODE)

        if parent_inode != ROOT_INODE:
            self._path(parent_inode)
            raise FUSEError(errno.ENOENT)

        return self._stat(self._child_path(parent_inode, name))

    def access(self, inode, mode, ctx=None):
        """Let everybody access everything."""
        logging.debug('access %s', inode)
        return True

    def opendir(self, inode, ctx=None):
        """Return a filehandler equal to the requested inode."""
        logging.debug('opendir %s', inode)
        self._path(inode)
        return inode

    def readdir(self, fh, offset):
        """List a directory.

        Entries are yielded as ``(name, attributes, next_offset)``, where the
        offset is the position in the listing.
        """
        logging.debug('readdir %s %s', fh, offset)
        path = self._path(fh)

        with _convert_error_to_fuse_error('listing', path):
            names = self.fs.list(path)

        for position, name in enumerate(names):
            if position < offset:
                continue
            if name == '.':
                attr = self.getattr(fh)
            elif name == '..':
                attr = self.getattr(ROOT_INODE)
            else:
                attr = self._stat('/' + name)
            yield (os.fsencode(name), attr, position + 1)

    def open(self, inode, flags, ctx=None):
        """Return a filehandler equal to the inode."""
        logging.debug('open %s %s', inode, flags)
        self._path(inode)
        return inode

    def mkdir(self, parent_inode, name, mode, ctx):
        """Create a directory, the mode is ignored."""
        logging.debug('mkdir %s %s', parent_inode, name)
        path = self._child_path(parent_inode, name)
        with _convert_error_to_fuse_error('creating directory', path):
            return self._attributes(self.fs.make_directory(path))

    def create(self, parent_inode, name, mode, flags, ctx=None):
        """Create and open a file, the mode is ignored."""
        logging.debug('create %s %s', parent_inode, name)
        path = self._child_path(parent_inode, name)
        with _convert_error_to_fuse_error('creating', path):
            attr = self._attributes(self.fs.create_file(path))
        return (attr.st_ino, attr)

    def mknod(self, parent_inode, name, mode, rdev, ctx):
        """Create a file, for callers that do not use `create`."""
        logging.debug('mknod %s %s', parent_inode, name)
        path = self._child_path(parent_inode, name)
        with _convert_error_to_fuse_error('creating', path):
            return self._attributes(self.fs.mknod(path))

    def read(self, fh, offset, length):
        """Read bytes from the content of the file."""
        logging.debug('read %s %s %s', fh, offset, length)
        path = self._path(fh)
        with _convert_error_to_fuse_error('reading', path):
            return self.fs.read_file(path, offset, length)

    def write(self, fh, offset, buf):
        """Write bytes to the file, growing it when needed."""
        logging.debug('write %s %s %s', fh, offset, len(buf))
        path = self._path(fh)
        with _convert_error_to_fuse_error('writing', path):
            return self.fs.write_file(path, offset, buf)

    def setattr(self, inode, attr, fields, fh, ctx=None):
        """Change attributes of an entry.

        It currently only supports changing the size of a file.
        """
        logging.debug('setattr %s %s', inode, attr.st_size)
        path = self._path(inode)
        if fields.update_size:
            if stat.S_ISDIR(self.getattr(inode).st_mode):
                raise FUSEError(errno.EISDIR)
            with _convert_error_to_fuse_error('truncating', path):
                return self._attributes(
                    self.fs.truncate_file(path, attr.st_size))

        return self._stat(path)

    def destroy(self):
        """Drop all data when the filesystem is unmounted."""
        logging.debug('destroy')
        self.fs.close()
