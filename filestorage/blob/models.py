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
from .._common_conversion import _str_or_none
from ..models import CopyStatus


class Container(object):

    ''' Blob container class. '''

    def __init__(self, name=None, props=None, metadata=None):
        self.name = name
        self.properties = props or ContainerProperties()
        self.metadata = metadata


class ContainerProperties(object):

    ''' Blob container's properties class. '''

    def __init__(self):
        self.last_modified = None
        self.etag = None


class Blob(object):

    ''' Blob class'''

    def __init__(self, name=None, content=None, props=None, metadata=None):
        self.name = name
        self.content = content
        self.properties = props or BlobProperties()
        self.metadata = metadata


class BlobProperties(object):

    ''' Blob Properties '''

    def __init__(self):
        self.blob_type = None
        self.last_modified = None
        self.etag = None
        self.content_length = None
        self.content_range = None
        self.copy = CopyProperties()
        self.content_settings = ContentSettings()


class ContentSettings(object):

    '''ContentSettings object used for Blob services.'''

    def __init__(
        self, content_type=None, content_encoding=None,
        content_language=None, content_disposition=None,
        cache_control=None, content_md5=None):

        self.content_type = content_type
        self.content_encoding = content_encoding
        self.content_language = content_language
        self.content_disposition = content_disposition
        self.cache_control = cache_control
        self.content_md5 = content_md5

    def to_headers(self):
        return {
            'x-ms-blob-cache-control': _str_or_none(self.cache_control),
            'x-ms-blob-content-type': _str_or_none(self.content_type),
            'x-ms-blob-content-disposition': _str_or_none(self.content_disposition),
            'x-ms-blob-content-md5': _str_or_none(self.content_md5),
            'x-ms-blob-content-encoding': _str_or_none(self.content_encoding),
            'x-ms-blob-content-language': _str_or_none(self.content_language),
        }


class CopyProperties(object):
    '''
    Blob Copy Properties. The status is one of the values of
    :class:`~filestorage.models.CopyStatus`.
    '''

    def __init__(self):
        self.id = None
        self.source = None
        self.status = None
        self.progress = None
        self.completion_time = None
        self.status_description = None


class _BlobTypes(object):
    '''Blob type options.'''

    BlockBlob = 'BlockBlob'
    '''Block blob type.'''


class BlobPermissions(object):

    '''
    BlobPermissions class to be used with
    :func:`~filestorage.blob.blobservice.BlobService.generate_blob_shared_access_signature` method.

    :param bool read:
        Read the content, properties, metadata and block list. Use the blob as 
        the source of a copy operation.
    :param bool add:
        Add a block to an append blob.
    :param bool create:
        Write a new blob, snapshot a blob, or copy a blob to a new blob.
    :param bool write: 
        Create or write content, properties, metadata, or block list. Use the
        blob as the destination of a copy operation within the same account.
    :param bool delete: 
        Delete the blob.
    :param str _str: 
        A string representing the permissions.
    '''
    def __init__(self, read=False, add=False, create=False, write=False,
                 delete=False, _str=None):
        if not _str:
            _str = ''
        self.read = read or ('r' in _str)
        self.add = add or ('a' in _str)
        self.create = create or ('c' in _str)
        self.write = write or ('w' in _str)
        self.delete = delete or ('d' in _str)

    def __or__(self, other):
        return BlobPermissions(_str=str(self) + str(other))

    def __add__(self, other):
        return BlobPermissions(_str=str(self) + str(other))

    def __str__(self):
        return (('r' if self.read else '') +
                ('a' if self.add else '') +
                ('c' if self.create else '') +
                ('w' if self.write else '') +
                ('d' if self.delete else ''))

''' Read the content, properties, metadata and block list. Use the blob as the source of a copy operation. '''
BlobPermissions.READ = BlobPermissions(read=True)

'''Add a block to an append blob. '''
BlobPermissions.ADD = BlobPermissions(add=True)

''' Write a new blob, snapshot a blob, or copy a blob to a new blob. '''
BlobPermissions.CREATE = BlobPermissions(create=True)

''' 
Create or write content, properties, metadata, or block list. Use the blob
as the destination of a copy operation within the same account.
'''
BlobPermissions.WRITE = BlobPermissions(write=True)

''' Delete the blob. '''
BlobPermissions.DELETE = BlobPermissions(delete=True)
