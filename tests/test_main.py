"""Tests for the command line front end."""

import logging

from scratchfs.__main__ import init_logging, main, parse_args
from scratchfs.content import DEFAULT_MAX_FILE_SIZE
from scratchfs.registry import DEFAULT_MAX_ENTRIES


def test_defaults():
    args = parse_args(['/mnt/scratch'])

    assert args.mountpoint == '/mnt/scratch'
    assert args.debug is False
    assert args.debug_fuse is False
    assert args.workers == 30
    assert args.max_entries == DEFAULT_MAX_ENTRIES
    assert args.max_file_size == DEFAULT_MAX_FILE_SIZE


def test_limits():
    args = parse_args(['/mnt/scratch', '--max-entries', '10',
                       '--max-file-size', '1024', '--workers', '2'])

    assert args.max_entries == 10
    assert args.max_file_size == 1024
    assert args.workers == 2


def test_missing_mountpoint(tmp_path):
    assert main([str(tmp_path / 'missing')]) == 1


def test_logging_is_configured_once():
    root_logger = logging.getLogger()
    init_logging()
    count = len(root_logger.handlers)

    init_logging()
    init_logging(debug=True)
    assert len(root_logger.handlers) == count
    root_logger.setLevel(logging.WARNING)
