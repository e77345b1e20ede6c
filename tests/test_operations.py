"""Tests for the llfuse bridge, called directly without mounting."""

import errno
import stat
from types import SimpleNamespace

import pytest
from llfuse import ROOT_INODE, EntryAttributes, FUSEError

from scratchfs import Filesystem, Operations
from scratchfs.errors import NotFound, RegistryCorruption
from scratchfs.utils import _convert_error_to_fuse_error


@pytest.fixture
def fs():
    return Filesystem()


@pytest.fixture
def ops(fs):
    return Operations(fs)


def create(ops, name):
    fh, attr = ops.create(ROOT_INODE, name, 0o644, 0)
    return attr


def test_root_attributes(ops):
    attr = ops.getattr(ROOT_INODE)

    assert stat.S_ISDIR(attr.st_mode)
    assert attr.st_ino == ROOT_INODE
    assert attr.st_nlink == 2


def test_unknown_inode(ops):
    with pytest.raises(FUSEError) as excinfo:
        ops.getattr(999)
    assert excinfo.value.errno == errno.ENOENT


def test_create_write_read(ops):
    attr = create(ops, b'notes.txt')
    inode = attr.st_ino

    assert stat.S_ISREG(attr.st_mode)
    assert attr.st_size == 0

    fh = ops.open(inode, 0)
    assert ops.write(fh, 0, b'hello') == 5
    assert ops.read(fh, 0, 100) == b'hello'
    assert ops.getattr(inode).st_size == 5


def test_create_existing(ops):
    create(ops, b'notes.txt')

    with pytest.raises(FUSEError) as excinfo:
        create(ops, b'notes.txt')
    assert excinfo.value.errno == errno.EEXIST


def test_mknod(ops):
    attr = ops.mknod(ROOT_INODE, b'node', stat.S_IFREG | 0o644, 0, None)

    assert stat.S_ISREG(attr.st_mode)
    assert ops.lookup(ROOT_INODE, b'node').st_ino == attr.st_ino


def test_mkdir(ops):
    attr = ops.mkdir(ROOT_INODE, b'docs', 0o755, None)

    assert stat.S_ISDIR(attr.st_mode)
    with pytest.raises(FUSEError) as excinfo:
        ops.mkdir(ROOT_INODE, b'docs', 0o755, None)
    assert excinfo.value.errno == errno.EEXIST


def test_nested_creation_is_rejected(ops):
    docs = ops.mkdir(ROOT_INODE, b'docs', 0o755, None)

    with pytest.raises(FUSEError) as excinfo:
        ops.create(docs.st_ino, b'notes.txt', 0o644, 0)
    assert excinfo.value.errno == errno.EINVAL


def test_lookup(ops):
    docs = ops.mkdir(ROOT_INODE, b'docs', 0o755, None)

    assert ops.lookup(ROOT_INODE, b'docs').st_ino == docs.st_ino
    assert ops.lookup(ROOT_INODE, b'.').st_ino == ROOT_INODE
    assert ops.lookup(docs.st_ino, b'..').st_ino == ROOT_INODE

    with pytest.raises(FUSEError) as excinfo:
        ops.lookup(ROOT_INODE, b'missing')
    assert excinfo.value.errno == errno.ENOENT

    with pytest.raises(FUSEError) as excinfo:
        ops.lookup(docs.st_ino, b'anything')
    assert excinfo.value.errno == errno.ENOENT


def test_readdir(ops):
    ops.mkdir(ROOT_INODE, b'docs', 0o755, None)
    create(ops, b'notes.txt')

    fh = ops.opendir(ROOT_INODE)
    entries = list(ops.readdir(fh, 0))

    assert [name for name, attr, offset in entries] == [
        b'.', b'..', b'docs', b'notes.txt']
    assert [offset for name, attr, offset in entries] == [1, 2, 3, 4]

    resumed = list(ops.readdir(fh, 2))
    assert [name for name, attr, offset in resumed] == [b'docs', b'notes.txt']


def test_readdir_of_file(ops):
    attr = create(ops, b'notes.txt')

    with pytest.raises(FUSEError) as excinfo:
        list(ops.readdir(attr.st_ino, 0))
    assert excinfo.value.errno == errno.ENOTDIR


def test_setattr_truncates(ops):
    inode = create(ops, b'notes.txt').st_ino
    ops.write(inode, 0, b'hello')

    attr = EntryAttributes()
    attr.st_size = 2
    result = ops.setattr(inode, attr, SimpleNamespace(update_size=True),
                         None)

    assert result.st_size == 2
    assert ops.read(inode, 0, 10) == b'he'


def test_setattr_without_size(ops):
    inode = create(ops, b'notes.txt').st_ino
    ops.write(inode, 0, b'hello')

    result = ops.setattr(inode, EntryAttributes(),
                         SimpleNamespace(update_size=False), None)
    assert result.st_size == 5


def test_write_past_limit():
    ops = Operations(Filesystem(max_file_size=4))
    inode = create(ops, b'small').st_ino

    with pytest.raises(FUSEError) as excinfo:
        ops.write(inode, 0, b'12345')
    assert excinfo.value.errno == errno.ENOSPC


def test_destroy_drops_everything(ops, fs):
    create(ops, b'notes.txt')
    ops.destroy()

    assert fs.list('/') == ['.', '..']


def test_convert_error():
    with pytest.raises(FUSEError) as excinfo:
        with _convert_error_to_fuse_error('reading', '/missing'):
            raise NotFound('/missing')
    assert excinfo.value.errno == errno.ENOENT

    with pytest.raises(FUSEError) as excinfo:
        with _convert_error_to_fuse_error('reading', '/broken'):
            raise ValueError('broken')
    assert excinfo.value.errno == errno.EIO


def test_corruption_is_not_converted():
    with pytest.raises(RegistryCorruption):
        with _convert_error_to_fuse_error('reading', '/notes.txt'):
            raise RegistryCorruption('/notes.txt')


def test_setattr_on_directory(ops):
    docs = ops.mkdir(ROOT_INODE, b'docs', 0o755, None)

    attr = EntryAttributes()
    attr.st_size = 0
    for inode in (ROOT_INODE, docs.st_ino):
        with pytest.raises(FUSEError) as excinfo:
            ops.setattr(inode, attr, SimpleNamespace(update_size=True), None)
        assert excinfo.value.errno == errno.EISDIR
