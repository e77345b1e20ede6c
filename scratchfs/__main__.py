"""
Mount an empty scratch filesystem from the command line.

..  :copyright: (c) 2016 by Jelte Fennema.
    :license: MIT, see License for more details.
"""
from argparse import ArgumentParser
import faulthandler
import logging
import os
import sys

from .content import DEFAULT_MAX_FILE_SIZE
from .dispatcher import Filesystem
from .operations import Operations
from .registry import DEFAULT_MAX_ENTRIES
from .utils import mount


def parse_args(args=None):
    parser = ArgumentParser(prog='scratchfs',
                            description='Mount a volatile in-memory '
                                        'filesystem.')
    parser.add_argument('mountpoint',
                        help='Directory to mount the filesystem on')
    parser.add_argument('--debug', action='store_true', default=False,
                        help='Enable debugging output')
    parser.add_argument('--debug-fuse', action='store_true', default=False,
                        help='Enable FUSE debugging output')
    parser.add_argument('--workers', type=int, default=30,
                        help='Amount of worker threads (default: %(default)s)')
    parser.add_argument('--max-entries', type=int,
                        default=DEFAULT_MAX_ENTRIES,
                        help='Maximum amount of directories and of files '
                             '(default: %(default)s)')
    parser.add_argument('--max-file-size', type=int,
                        default=DEFAULT_MAX_FILE_SIZE,
                        help='Maximum size of a file in bytes '
                             '(default: %(default)s)')
    return parser.parse_args(args)


def init_logging(debug=False):
    formatter = logging.Formatter('%(asctime)s.%(msecs)03d %(threadName)s: '
                                  '%(levelname)s %(message)s',
                                  datefmt='%Y-%m-%d %H:%M:%S')
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        root_logger.addHandler(handler)

    if debug:
        faulthandler.enable()
        root_logger.setLevel(logging.DEBUG)
    else:
        root_logger.setLevel(logging.INFO)


def main(args=None):
    args = parse_args(args)
    init_logging(args.debug)

    if not os.path.isdir(args.mountpoint):
        logging.error('Mount point %s is not a directory', args.mountpoint)
        return 1

    filesystem = Filesystem(max_entries=args.max_entries,
                            max_buffers=args.max_entries,
                            max_file_size=args.max_file_size)

    options = set()
    if args.debug_fuse:
        options.add('debug')

    mount(Operations(filesystem), args.mountpoint, options,
          workers=args.workers)
    return 0


if __name__ == '__main__':
    sys.exit(main())
