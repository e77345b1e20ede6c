"""
This module implements the filesystem verbs on top of the registry and the
content store.

..  :copyright: (c) 2016 by Jelte Fennema.
    :license: MIT, see License for more details.
"""
from collections import namedtuple
import logging
import os
import stat
import threading
import time

from .content import (ContentStore, DEFAULT_MAX_BUFFERS,
                      DEFAULT_MAX_FILE_SIZE)
from .errors import (AlreadyExists, InvalidArgument, NotADirectory, NotFound,
                     RegistryCorruption)
from .registry import (DEFAULT_MAX_ENTRIES, ROOT_INODE, DirectoryEntry,
                       NamespaceRegistry)

#: The longest name an entry can have, in encoded bytes.
NAME_MAX = 255

# mode = drwxr-xr-x
DIRECTORY_MODE = stat.S_IFDIR | stat.S_IRWXU | \
    stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH

# mode = -rw-r--r--
FILE_MODE = stat.S_IFREG | stat.S_IRUSR | stat.S_IWUSR | \
    stat.S_IRGRP | stat.S_IROTH


class Stat(namedtuple('Stat', 'inode mode nlink size uid gid '
                              'atime mtime ctime')):
    """The attributes of an entry, as returned by `Filesystem.stat`."""

    __slots__ = ()

    @property
    def is_directory(self):
        return stat.S_ISDIR(self.mode)

    @property
    def is_file(self):
        return stat.S_ISREG(self.mode)

    def __repr__(self):
        return '<Stat(%r, %s, size=%r)>' % (self.inode,
                                            stat.filemode(self.mode),
                                            self.size)


class Filesystem:
    """A volatile, flat filesystem.

    It consists of an implicit root directory containing directories and
    files. Directories never contain anything themselves. Paths are always
    absolute: either ``'/'`` or ``'/<name>'``.

    All methods take a single lock, so one instance can safely be used from
    the worker threads of llfuse.
    """

    def __init__(self, *, max_entries=DEFAULT_MAX_ENTRIES,
                 max_buffers=DEFAULT_MAX_BUFFERS,
                 max_file_size=DEFAULT_MAX_FILE_SIZE):
        """
        Args
        ----
        max_entries: int
            The maximum amount of directories, and separately of files.
        max_buffers: int
            The maximum amount of file content buffers. There is one per file,
            so this should not be lower than ``max_entries``.
        max_file_size: int
            The maximum size of a single file in bytes.
        """
        self.registry = NamespaceRegistry(max_entries=max_entries)
        self.content = ContentStore(max_buffers=max_buffers,
                                    max_file_size=max_file_size)
        self.mounted_at = time.time()

        self._lock = threading.RLock()

    def _name(self, path):
        """Validate ``path`` and return its name, ``''`` for the root."""
        if not isinstance(path, str) or not path:
            raise InvalidArgument(repr(path), 'empty path')
        if not path.startswith('/'):
            raise InvalidArgument(path, 'path is not absolute')

        name = path[1:]
        if '/' in name:
            raise InvalidArgument(path, 'nested paths are not supported')
        if name in ('.', '..') or '\0' in name:
            raise InvalidArgument(path, 'illegal name')
        if len(os.fsencode(name)) > NAME_MAX:
            raise InvalidArgument(path, 'name is too long')
        return name

    def _file_index(self, path):
        index = self.registry.resolve_file_index(path)
        if index not in self.content:
            logging.critical('File %s points to missing content buffer %s',
                             path, index)
            raise RegistryCorruption('%s has no content buffer' % path)
        return index

    def _stat_entry(self, entry):
        if entry is None:
            inode, mode, size = ROOT_INODE, DIRECTORY_MODE, 0
            created = modified = self.mounted_at
            nlink = 2
        elif isinstance(entry, DirectoryEntry):
            inode, mode, size = entry.inode, DIRECTORY_MODE, 0
            created, modified = entry.created, entry.modified
            nlink = 2
        else:
            inode, mode = entry.inode, FILE_MODE
            size = self.content.size(self._file_index(entry.path))
            created, modified = entry.created, entry.modified
            nlink = 1

        return Stat(inode=inode, mode=mode, nlink=nlink, size=size,
                    uid=os.getuid(), gid=os.getgid(),
                    atime=modified, mtime=modified, ctime=created)

    def stat(self, path):
        """Return the `Stat` of the entry at ``path``."""
        with self._lock:
            name = self._name(path)
            if not name:
                return self._stat_entry(None)
            if self.registry.is_directory(name):
                return self._stat_entry(self.registry.get_directory(name))
            return self._stat_entry(self.registry.get_file(path))

    def list(self, path):
        """Return the names in the directory at ``path``.

        Only the root has children; other directories just contain ``.`` and
        ``..``.
        """
        with self._lock:
            name = self._name(path)
            if not name:
                return (['.', '..'] + self.registry.directory_names() +
                        self.registry.file_names())
            if self.registry.is_directory(name):
                return ['.', '..']
            if self.registry.is_file(name):
                raise NotADirectory(path)
            raise NotFound(path)

    def create_file(self, path):
        """Create an empty file at ``path`` and return its `Stat`.

        Raises `~.AlreadyExists` when the name is already in use.
        """
        with self._lock:
            name = self._name(path)
            if not name:
                raise AlreadyExists(path)

            self.registry.check_file_available(name)
            index = self.content.create_buffer()
            try:
                entry = self.registry.add_file(name, index)
            except Exception:
                self.content.discard(index)
                raise
            return self._stat_entry(entry)

    def mknod(self, path):
        """Create a file through the legacy node creation verb.

        This behaves exactly like `create_file`.
        """
        return self.create_file(path)

    def make_directory(self, path):
        """Create a directory at ``path`` and return its `Stat`."""
        with self._lock:
            name = self._name(path)
            if not name:
                raise AlreadyExists(path)
            return self._stat_entry(self.registry.add_directory(name))

    def read_file(self, path, offset, length):
        """Read at most ``length`` bytes from ``offset`` of a file."""
        with self._lock:
            self._name(path)
            return self.content.read(self._file_index(path), offset, length)

    def write_file(self, path, offset, data):
        """Write ``data`` at ``offset`` of a file, growing it when needed."""
        with self._lock:
            self._name(path)
            written = self.content.write(self._file_index(path), offset,
                                         data)
            self.registry.get_file(path).update_modified()
            return written

    def truncate_file(self, path, length):
        """Change the size of a file and return its new `Stat`."""
        with self._lock:
            self._name(path)
            self.content.truncate(self._file_index(path), length)
            entry = self.registry.get_file(path)
            entry.update_modified()
            return self._stat_entry(entry)

    def path_of(self, inode):
        """Return the path of the entry with the given inode number."""
        if inode == ROOT_INODE:
            return '/'
        with self._lock:
            return self.registry.by_inode(inode).path

    def close(self):
        """Drop every entry and all file content."""
        with self._lock:
            logging.info('Dropping %d entries', len(self.registry))
            self.registry.clear()
            self.content.clear()
