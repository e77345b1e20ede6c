"""
This module implements the store that owns the byte content of every file.

..  :copyright: (c) 2016 by Jelte Fennema.
    :license: MIT, see License for more details.
"""
import itertools
import logging

from .errors import (InvalidArgument, OutOfMemory, RegistryCorruption,
                     ResourceExhausted)

#: The amount of buffers a store holds by default.
DEFAULT_MAX_BUFFERS = 256

#: The size a single buffer may grow to by default.
DEFAULT_MAX_FILE_SIZE = 64 * 1024 * 1024

#: The byte used to fill the gap left by a write past the end of a buffer.
FILL_BYTE = b'\0'


class ContentStore:
    """Growable byte buffers addressed by a stable index.

    An index is handed out by `create_buffer` and stays valid until the
    buffer is discarded. Indexes are never reused.
    """

    def __init__(self, *, max_buffers=DEFAULT_MAX_BUFFERS,
                 max_file_size=DEFAULT_MAX_FILE_SIZE):
        """
        Args
        ----
        max_buffers: int
            The maximum amount of buffers that can exist at the same time.
            Creating more raises `~.ResourceExhausted`.
        max_file_size: int
            The maximum length of a single buffer in bytes. Writes or
            truncations past it raise `~.ResourceExhausted`.
        """
        self.max_buffers = max_buffers
        self.max_file_size = max_file_size

        self._buffers = {}
        self._indexes = itertools.count()

    def __len__(self):
        return len(self._buffers)

    def __contains__(self, index):
        return index in self._buffers

    def _buffer(self, index):
        try:
            return self._buffers[index]
        except KeyError:
            logging.critical('Content buffer %s does not exist', index)
            raise RegistryCorruption('unknown content buffer %r' % index)

    def create_buffer(self):
        """Create a new empty buffer and return its index."""
        if len(self._buffers) >= self.max_buffers:
            raise ResourceExhausted(
                'content store',
                'no more than %d buffers allowed' % self.max_buffers)

        index = next(self._indexes)
        self._buffers[index] = bytearray()
        logging.debug('Created content buffer %s', index)
        return index

    def discard(self, index):
        """Release the buffer with the given index."""
        self._buffer(index)
        del self._buffers[index]
        logging.debug('Discarded content buffer %s', index)

    def size(self, index):
        """The current length of the buffer in bytes."""
        return len(self._buffer(index))

    def read(self, index, offset, length):
        """Read at most ``length`` bytes starting at ``offset``.

        Reading at or past the end is not an error, it just returns fewer
        bytes, possibly none at all.
        """
        if offset < 0 or length < 0:
            raise InvalidArgument(
                'buffer %s' % index,
                'negative offset or length (%d, %d)' % (offset, length))

        buf = self._buffer(index)
        return bytes(buf[offset:offset + length])

    def write(self, index, offset, data):
        """Write ``data`` at ``offset`` and return the amount written.

        A buffer that is too short is grown first. When ``offset`` lies past
        the end the gap is filled with `FILL_BYTE`.
        """
        if offset < 0:
            raise InvalidArgument('buffer %s' % index,
                                  'negative offset %d' % offset)

        buf = self._buffer(index)
        end = offset + len(data)
        self._check_size(index, end)

        old_length = len(buf)
        try:
            if offset > old_length:
                buf.extend(FILL_BYTE * (offset - old_length))
            buf[offset:end] = data
        except MemoryError:
            del buf[old_length:]
            raise OutOfMemory('buffer %s' % index,
                              'could not grow to %d bytes' % end)

        return len(data)

    def truncate(self, index, length):
        """Cut the buffer to ``length`` bytes or extend it with `FILL_BYTE`."""
        if length < 0:
            raise InvalidArgument('buffer %s' % index,
                                  'negative length %d' % length)

        buf = self._buffer(index)
        self._check_size(index, length)

        old_length = len(buf)
        if length <= old_length:
            del buf[length:]
            return

        try:
            buf.extend(FILL_BYTE * (length - old_length))
        except MemoryError:
            del buf[old_length:]
            raise OutOfMemory('buffer %s' % index,
                              'could not grow to %d bytes' % length)

    def clear(self):
        """Release every buffer."""
        self._buffers.clear()

    def _check_size(self, index, length):
        if length > self.max_file_size:
            raise ResourceExhausted(
                'buffer %s' % index,
                'size %d exceeds the limit of %d bytes' % (
                    length, self.max_file_size))
