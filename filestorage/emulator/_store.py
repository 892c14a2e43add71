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
import itertools
import threading
import uuid
from time import time

from .._constants import FILE_RANGE_ALIGNMENT
from ..file._ranges import _get_unit_span
from ..models import CopyStatus

_ETAG_COUNTER = itertools.count(0x8D4A1B2C3D4E5F0)


class _ServiceError(Exception):

    '''
    An error response of the emulated service.

    :ivar int status: the http status code of the response
    :ivar str code: the value of the x-ms-error-code header
    '''

    def __init__(self, status, code, message=None):
        self.status = status
        self.code = code
        Exception.__init__(self, message or code)


class _Resource(object):
    def __init__(self, metadata=None):
        self.metadata = dict(metadata or {})
        self.touch()

    def touch(self):
        self.last_modified = time()
        self.etag = '"0x{:X}"'.format(next(_ETAG_COUNTER))


class _CopyState(object):

    '''
    State of the last copy into a file or blob. While the copy is pending
    the source content is kept in content and the destination is empty.
    '''

    def __init__(self, source, content, polls_remaining):
        self.id = str(uuid.uuid4())
        self.source = source
        self.status = CopyStatus.PENDING
        self.progress = '0/{}'.format(len(content))
        self.completion_time = None
        self.status_description = None
        self.content = content
        self.polls_remaining = polls_remaining

    def finish(self, status, description=None):
        total = len(self.content)
        self.status = status
        self.progress = '{0}/{1}'.format(total if status == CopyStatus.SUCCESS else 0, total)
        self.completion_time = time()
        self.status_description = description
        self.content = None


class _File(_Resource):

    '''
    A file stored as a map from unit index to a unit of alignment bytes.
    Units that were never written are absent and read back as zero. A unit
    stays stored until a clear covers all of it, whatever its content.
    '''

    def __init__(self, content_length, content_settings=None, metadata=None,
                 alignment=FILE_RANGE_ALIGNMENT):
        super(_File, self).__init__(metadata)
        self.content_length = content_length
        self.content_settings = dict(content_settings or {})
        self.alignment = alignment
        self.pages = {}
        self.copy = None

    def write(self, offset, data):
        unit = self.alignment
        for index in _get_unit_span(offset, len(data), unit):
            page = self.pages.setdefault(index, bytearray(unit))
            page_start = index * unit
            lo = max(offset, page_start)
            hi = min(offset + len(data), page_start + unit)
            page[lo - page_start:hi - page_start] = data[lo - offset:hi - offset]
        self.touch()

    def read(self, offset, length):
        unit = self.alignment
        result = bytearray(length)
        for index in _get_unit_span(offset, length, unit):
            page = self.pages.get(index)
            if page is None:
                continue
            page_start = index * unit
            lo = max(offset, page_start)
            hi = min(offset + length, page_start + unit)
            result[lo - offset:hi - offset] = page[lo - page_start:hi - page_start]
        return bytes(result)

    def clear(self, offset, length):
        unit = self.alignment
        for index in _get_unit_span(offset, length, unit):
            page = self.pages.get(index)
            if page is None:
                continue
            page_start = index * unit
            lo = max(offset, page_start)
            hi = min(offset + length, page_start + unit)
            if hi - lo == unit:
                del self.pages[index]
            else:
                page[lo - page_start:hi - page_start] = bytes(hi - lo)
        self.touch()

    def resize(self, content_length):
        if content_length < self.content_length:
            self.clear(content_length, self.content_length - content_length)
        self.content_length = content_length
        self.touch()

    def set_content(self, data):
        '''Replaces the content, every unit of data counting as written.'''
        unit = self.alignment
        self.pages = {}
        self.content_length = len(data)
        for start in range(0, len(data), unit):
            self.write(start, data[start:start + unit])
        self.touch()

    def ranges(self, offset=None, end=None):
        '''
        Runs of consecutive stored units as (start, end) byte offsets with
        inclusive ends, optionally limited to the units touching [offset, end].
        '''
        unit = self.alignment
        indexes = sorted(self.pages)
        if offset is not None:
            last = (end if end is not None else self.content_length - 1) // unit
            indexes = [i for i in indexes if offset // unit <= i <= last]

        runs = []
        for index in indexes:
            if runs and runs[-1][1] == index - 1:
                runs[-1][1] = index
            else:
                runs.append([index, index])
        return [(first * unit, (last + 1) * unit - 1) for first, last in runs]


class _Directory(_Resource):
    def __init__(self, metadata=None):
        super(_Directory, self).__init__(metadata)
        self.directories = {}
        self.files = {}

    def is_empty(self):
        return not (self.directories or self.files)

    def entries(self):
        '''Files and subdirectories as sorted (name, resource) pairs.'''
        return sorted(list(self.directories.items()) + list(self.files.items()),
                      key=lambda entry: entry[0])


class _Share(_Resource):
    def __init__(self, metadata=None, quota=None):
        super(_Share, self).__init__(metadata)
        self.quota = quota or 5120
        self.root = _Directory()


class _Blob(_Resource):
    def __init__(self, content=b'', content_settings=None, metadata=None):
        super(_Blob, self).__init__(metadata)
        self.content = content
        self.content_settings = dict(content_settings or {})
        self.copy = None

    @property
    def content_length(self):
        return len(self.content)

    def read(self, offset, length):
        return self.content[offset:offset + length]

    def set_content(self, data):
        self.content = data
        self.touch()


class _Container(_Resource):
    def __init__(self, metadata=None):
        super(_Container, self).__init__(metadata)
        self.blobs = {}


class StorageEmulatorStore(object):

    '''
    The in-memory state of an emulated storage account: file shares and
    blob containers.

    Every request holds lock while it runs, so a request never observes a
    partially applied write.

    :ivar int copy_polls_until_complete:
        Number of property reads of a copy destination that report the copy
        as pending before it completes. With 0 a copy completes as soon as it
        is started.
    '''

    def __init__(self, copy_polls_until_complete=0, alignment=FILE_RANGE_ALIGNMENT):
        self.shares = {}
        self.containers = {}
        self.copy_polls_until_complete = copy_polls_until_complete
        self.alignment = alignment
        self.lock = threading.RLock()

    # Shares and directories

    def get_share(self, share_name):
        share = self.shares.get(share_name)
        if share is None:
            raise _ServiceError(404, 'ShareNotFound',
                                'The specified share does not exist.')
        return share

    def get_directory(self, share_name, directory_parts, code='ResourceNotFound'):
        '''Resolves a directory path, an empty path being the share root.'''
        directory = self.get_share(share_name).root
        for part in directory_parts:
            directory = directory.directories.get(part)
            if directory is None:
                raise _ServiceError(404, code,
                                    'The specified resource does not exist.')
        return directory

    def get_parent(self, share_name, parts):
        return self.get_directory(share_name, parts[:-1], code='ParentNotFound')

    def get_file(self, share_name, parts):
        parent = self.get_parent(share_name, parts)
        file = parent.files.get(parts[-1])
        if file is None:
            raise _ServiceError(404, 'ResourceNotFound',
                                'The specified resource does not exist.')
        return file

    def new_file(self, content_length, content_settings=None, metadata=None):
        return _File(content_length, content_settings, metadata, self.alignment)

    # Containers and blobs

    def get_container(self, container_name):
        container = self.containers.get(container_name)
        if container is None:
            raise _ServiceError(404, 'ContainerNotFound',
                                'The specified container does not exist.')
        return container

    def get_blob(self, container_name, blob_name):
        blob = self.get_container(container_name).blobs.get(blob_name)
        if blob is None:
            raise _ServiceError(404, 'BlobNotFound',
                                'The specified blob does not exist.')
        return blob

    # Copies

    def start_copy(self, destination, source_url, content):
        '''
        Starts copying content into destination. The destination is empty
        until the copy completes.
        '''
        destination.copy = _CopyState(source_url, content, self.copy_polls_until_complete)
        destination.set_content(b'')
        if destination.copy.polls_remaining <= 0:
            self._complete_copy(destination)
        return destination.copy

    def poll_copy(self, destination):
        '''Counts a property read of destination towards its pending copy.'''
        copy = destination.copy
        if copy is None or copy.status != CopyStatus.PENDING:
            return
        copy.polls_remaining -= 1
        if copy.polls_remaining <= 0:
            self._complete_copy(destination)

    def abort_copy(self, destination, copy_id):
        copy = destination.copy
        if copy is None or copy.status != CopyStatus.PENDING:
            raise _ServiceError(409, 'NoPendingCopyOperation',
                                'There is currently no pending copy operation.')
        if copy.id != copy_id:
            raise _ServiceError(409, 'CopyIdMismatch',
                                'The specified copy ID did not match the copy ID for the pending copy operation.')
        copy.finish(CopyStatus.ABORTED, 'Copy was aborted by the client.')
        destination.set_content(b'')

    def _complete_copy(self, destination):
        content = destination.copy.content
        destination.set_content(content)
        destination.copy.finish(CopyStatus.SUCCESS)
