#-------------------------------------------------------------------------
# Copyright (c) Microsoft.  All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#--------------------------------------------------------------------------
from .._constants import FILE_RANGE_ALIGNMENT
from .models import Range


def _align_start(offset, alignment):
    '''Largest multiple of alignment that is <= offset.'''
    return offset - offset % alignment


def _align_end(offset, alignment):
    '''Smallest value of the form k*alignment - 1 that is >= offset.'''
    return (offset // alignment + 1) * alignment - 1


def _get_unit_span(offset, length, alignment=FILE_RANGE_ALIGNMENT):
    '''
    Indices of the storage units touched by length bytes written at offset.
    '''
    return range(offset // alignment, (offset + length - 1) // alignment + 1)


def normalize_ranges(ranges, alignment=FILE_RANGE_ALIGNMENT):
    '''
    Rounds written ranges outward to the storage alignment and merges the
    ranges whose rounded intervals overlap or touch.

    A region [s, e] is reported from the largest multiple of alignment that
    is <= s to the smallest k*alignment - 1 that is >= e. Two regions are
    reported separately only if at least one whole unit between them was
    never written, so 512 bytes at offset 0 and 512 bytes at offset 1512 are
    reported as [0, 511] and [1024, 2047], while 512 bytes at offsets 0 and
    1000 collapse into [0, 1535].

    :param ranges:
        The written ranges, in any order. Either :class:`~filestorage.file.models.Range`
        objects or (start, end) tuples with an inclusive end.
    :param int alignment:
        Size of the storage unit in bytes.
    :return: Disjoint, non-adjacent ranges sorted by start.
    :rtype: list(:class:`~filestorage.file.models.Range`)
    '''
    if alignment <= 0:
        raise ValueError('alignment must be positive, got {0}'.format(alignment))

    aligned = []
    for byte_range in ranges:
        if isinstance(byte_range, Range):
            start, end = byte_range.start, byte_range.end
        else:
            start, end = byte_range
        if start < 0 or end < start:
            raise ValueError('invalid range [{0}, {1}]'.format(start, end))
        aligned.append((_align_start(start, alignment), _align_end(end, alignment)))
    aligned.sort()

    merged = []
    for start, end in aligned:
        if merged and start <= merged[-1][1] + 1:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])

    return [Range(start, end) for start, end in merged]
