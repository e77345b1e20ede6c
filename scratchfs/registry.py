"""
This module implements the classes that keep track of the names in the
filesystem.

..  :copyright: (c) 2016 by Jelte Fennema.
    :license: MIT, see License for more details.
"""
import itertools
import logging
import time

from .errors import AlreadyExists, NotFound, ResourceExhausted

#: The inode number of the root directory. It matches ``llfuse.ROOT_INODE``.
ROOT_INODE = 1

#: The amount of entries of each kind a registry holds by default.
DEFAULT_MAX_ENTRIES = 256


def _strip(path):
    if path.startswith('/'):
        return path[1:]
    return path


class BaseEntry:
    """The base class of the entries stored in the registry."""

    def __init__(self, name, inode):
        logging.info('Creating a %s called: %s',
                     self.__class__.__name__.lower(),
                     name)

        self.name = name
        self.inode = inode
        self.created = time.time()
        self.modified = self.created

    def __repr__(self):
        return '<%s(%r, %r)>' % (self.__class__.__name__, self.name,
                                 self.inode)

    @property
    def path(self):
        """The full path of this entry from the mount directory."""
        return '/' + self.name

    def update_modified(self):
        """Update the modified time to the current time."""
        self.modified = time.time()


class DirectoryEntry(BaseEntry):
    """A directory directly below the root."""


class FileEntry(BaseEntry):
    """A file directly below the root.

    Its content lives in a `~.ContentStore`, ``index`` is the handle to it.
    """

    def __init__(self, name, inode, index):
        super().__init__(name, inode)
        self.index = index


class NamespaceRegistry:
    """The set of known directory and file names.

    Names are single path segments. Every name is unique across both kinds,
    so a directory and a file can never shadow each other.
    """

    def __init__(self, *, max_entries=DEFAULT_MAX_ENTRIES):
        """
        Args
        ----
        max_entries: int
            The maximum amount of directories, and separately of files, that
            can be registered. Adding more raises `~.ResourceExhausted`.
        """
        self.max_entries = max_entries

        self._directories = {}
        self._files = {}
        self._inodes = {}
        self._inode_numbers = itertools.count(ROOT_INODE + 1)

    def __len__(self):
        return len(self._directories) + len(self._files)

    def _check_available(self, name, table, kind):
        if name in self._directories or name in self._files:
            raise AlreadyExists('/' + name)
        if len(table) >= self.max_entries:
            raise ResourceExhausted(
                '/' + name,
                'no more than %d %s allowed' % (self.max_entries, kind))

    def check_file_available(self, name):
        """Raise when no file called ``name`` can be added."""
        self._check_available(name, self._files, 'files')

    def add_directory(self, name):
        """Register a directory called ``name`` and return its entry."""
        self._check_available(name, self._directories, 'directories')

        entry = DirectoryEntry(name, next(self._inode_numbers))
        self._directories[name] = entry
        self._inodes[entry.inode] = entry
        return entry

    def add_file(self, name, index):
        """Register a file called ``name`` backed by content ``index``."""
        self.check_file_available(name)

        entry = FileEntry(name, next(self._inode_numbers), index)
        self._files[name] = entry
        self._inodes[entry.inode] = entry
        return entry

    def is_directory(self, path):
        return _strip(path) in self._directories

    def is_file(self, path):
        return _strip(path) in self._files

    def get_directory(self, path):
        try:
            return self._directories[_strip(path)]
        except KeyError:
            raise NotFound(path)

    def get_file(self, path):
        try:
            return self._files[_strip(path)]
        except KeyError:
            raise NotFound(path)

    def resolve_file_index(self, path):
        """Return the content index of the file at ``path``."""
        return self.get_file(path).index

    def by_inode(self, inode):
        try:
            return self._inodes[inode]
        except KeyError:
            raise NotFound('inode %s' % inode)

    def directory_names(self):
        """The names of all directories in registration order."""
        return list(self._directories)

    def file_names(self):
        """The names of all files in registration order."""
        return list(self._files)

    def clear(self):
        """Forget every entry."""
        self._directories.clear()
        self._files.clear()
        self._inodes.clear()
