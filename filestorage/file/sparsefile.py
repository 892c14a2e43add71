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
import logging

from azure.common import AzureHttpError

from .._constants import (
    FILE_MAX_RANGE_SIZE,
    FILE_RANGE_ALIGNMENT,
)
from .._error import (
    _dont_fail_not_exist,
    _validate_file_size,
    _validate_not_none,
    _validate_range_in_bounds,
    _validate_type_bytes,
)
from ._ranges import normalize_ranges

logger = logging.getLogger(__name__)


class SparseFile(object):

    '''
    A fixed size file in a share that only stores the ranges written to it.

    The address space of the file is [0, max_size). Bytes that were never
    written read back as zero and take no storage. Writes may start and end
    at any offset, but the service keeps data in units of alignment bytes, so
    list_ranges reports the written regions rounded outward to those units.

    Creating a SparseFile does not send any request. Use create to allocate
    the file, or wrap an existing file and let the first call fetch its size.

    :ivar FileService file_service:
        The service used to send the requests.
    :ivar str share_name:
        Name of the share holding the file.
    :ivar str directory_name:
        The path to the directory holding the file, or None for the root of
        the share.
    :ivar str file_name:
        Name of the file.
    :ivar int alignment:
        Size of the storage unit ranges are rounded to.
    '''

    def __init__(self, file_service, share_name, directory_name, file_name,
                 alignment=FILE_RANGE_ALIGNMENT):
        _validate_not_none('file_service', file_service)
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)

        self.file_service = file_service
        self.share_name = share_name
        self.directory_name = directory_name
        self.file_name = file_name
        self.alignment = alignment
        self._max_size = None

    def __repr__(self):
        return 'SparseFile({!r}, {!r}, {!r})'.format(
            self.share_name, self.directory_name, self.file_name)

    @property
    def max_size(self):
        '''
        The size of the address space of the file, fixed at creation. Fetched
        from the service the first time it is needed if the file was not
        created through this object.
        '''
        if self._max_size is None:
            file = self.file_service.get_file_properties(
                self.share_name, self.directory_name, self.file_name)
            self._max_size = file.properties.content_length
        return self._max_size

    def create(self, max_size, content_settings=None, metadata=None):
        '''
        Allocates the file. No data is stored until a range is written.

        :param int max_size:
            Size of the address space of the file in bytes. Must be positive.
        :param ContentSettings content_settings:
            ContentSettings object used to set file properties.
        :param dict metadata:
            Name-value pairs associated with the file as metadata.
        :raises InvalidSizeError: if max_size is not positive.
        '''
        _validate_file_size(max_size)

        self.file_service.create_file(
            self.share_name, self.directory_name, self.file_name, max_size,
            content_settings=content_settings, metadata=metadata)
        self._max_size = max_size
        logger.info('Created sparse file %s with %s bytes of address space', self, max_size)

    def write_range(self, offset, data):
        '''
        Writes data at offset. Writes over already written bytes replace
        them. Data larger than the maximum range size is sent in several
        requests.

        :param int offset:
            Offset of the first byte to write.
        :param bytes data:
            The bytes to write. Must not be empty.
        :raises RangeOutOfBoundsError:
            if the data does not fit in [0, max_size).
        '''
        _validate_not_none('data', data)
        _validate_type_bytes('data', data)
        _validate_range_in_bounds(offset, len(data), self.max_size)

        for start in range(0, len(data), FILE_MAX_RANGE_SIZE):
            chunk = data[start:start + FILE_MAX_RANGE_SIZE]
            self.file_service.update_range(
                self.share_name, self.directory_name, self.file_name, chunk,
                offset + start, offset + start + len(chunk) - 1)

        logger.debug('Wrote %s bytes at offset %s of %s', len(data), offset, self)

    def read_range(self, offset, length):
        '''
        Reads length bytes starting at offset. Bytes that were never written
        are returned as zero.

        :param int offset:
            Offset of the first byte to read.
        :param int length:
            Number of bytes to read.
        :return: Exactly length bytes.
        :rtype: bytes
        :raises RangeOutOfBoundsError:
            if the range does not fit in [0, max_size).
        :raises ResourceNotFoundError: if the file does not exist.
        '''
        _validate_range_in_bounds(offset, length, self.max_size)

        file = self.file_service.get_file_to_bytes(
            self.share_name, self.directory_name, self.file_name,
            start_range=offset, end_range=offset + length - 1)
        return file.content

    def clear_range(self, offset, length):
        '''
        Releases the storage of length bytes starting at offset. The bytes
        read back as zero afterwards.
        '''
        _validate_range_in_bounds(offset, length, self.max_size)

        self.file_service.clear_range(
            self.share_name, self.directory_name, self.file_name,
            offset, offset + length - 1)

    def list_ranges(self):
        '''
        Lists the regions of the file that hold written data.

        Every region is rounded outward to the storage alignment: it starts at
        a multiple of alignment and ends one byte before a multiple of
        alignment. Regions whose rounded intervals touch or overlap are merged.

        :return: Disjoint ranges sorted by start offset, with inclusive ends.
        :rtype: list(:class:`~filestorage.file.models.Range`)
        :raises ResourceNotFoundError: if the file does not exist.
        '''
        ranges = self.file_service.list_ranges(
            self.share_name, self.directory_name, self.file_name)
        return normalize_ranges(ranges, self.alignment)

    def exists(self):
        '''
        Returns True if the file exists.
        '''
        return self.file_service.exists(
            self.share_name, self.directory_name, self.file_name)

    def delete_if_exists(self):
        '''
        Deletes the file together with all of its ranges.

        :return: True if a file was deleted, False if there was no file.
        :rtype: bool
        '''
        self._max_size = None
        try:
            self.file_service.delete_file(
                self.share_name, self.directory_name, self.file_name)
        except AzureHttpError as ex:
            _dont_fail_not_exist(ex)
            logger.info('Sparse file %s did not exist', self)
            return False

        logger.info('Deleted sparse file %s', self)
        return True

    def url(self, sas_token=None):
        '''
        Creates the url of the file, optionally carrying a shared access
        signature.
        '''
        return self.file_service.make_file_url(
            self.share_name, self.directory_name, self.file_name,
            sas_token=sas_token)
