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


class Share(object):

    ''' File share class. '''

    def __init__(self, name=None, props=None, metadata=None):
        self.name = name
        self.properties = props or ShareProperties()
        self.metadata = metadata


class ShareProperties(object):

    ''' File share's properties class. '''

    def __init__(self):
        self.last_modified = None
        self.etag = None
        self.quota = None


class Directory(object):

    '''
    Directory class. Returned by get_directory_properties and, together with
    File, as an entry of list_directories_and_files.
    '''

    def __init__(self, name=None, props=None, metadata=None):
        self.name = name
        self.properties = props or DirectoryProperties()
        self.metadata = metadata

    def __repr__(self):
        return 'Directory({!r})'.format(self.name)


class DirectoryProperties(object):

    ''' Directory's properties class. '''

    def __init__(self):
        self.last_modified = None
        self.etag = None


class File(object):

    '''
    File class. Returned by get_file_properties and the get_file_to_*
    methods and, together with Directory, as an entry of
    list_directories_and_files.
    '''

    def __init__(self, name=None, content=None, props=None, metadata=None):
        self.name = name
        self.content = content
        self.properties = props or FileProperties()
        self.metadata = metadata

    def __repr__(self):
        return 'File({!r})'.format(self.name)


class FileProperties(object):

    ''' File Properties '''

    def __init__(self):
        self.last_modified = None
        self.etag = None
        self.content_length = None
        self.content_range = None
        self.content_settings = ContentSettings()
        self.copy = CopyProperties()


class ContentSettings(object):

    '''ContentSettings object used for File services.'''

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
            'x-ms-cache-control': _str_or_none(self.cache_control),
            'x-ms-content-type': _str_or_none(self.content_type),
            'x-ms-content-disposition': _str_or_none(self.content_disposition),
            'x-ms-content-md5': _str_or_none(self.content_md5),
            'x-ms-content-encoding': _str_or_none(self.content_encoding),
            'x-ms-content-language': _str_or_none(self.content_language),
        }


class CopyProperties(object):

    '''
    File Copy Properties.

    :ivar str id:
        String identifier for the last attempted Copy File operation where this file
        was the destination file. This header does not appear if this file has never
        been the destination in a Copy File operation, or if this file has been
        modified after a concluded Copy File operation.
    :ivar str source:
        URL up to 2 KB in length that specifies the source file used in the last attempted
        Copy File operation where this file was the destination file.
    :ivar str status:
        State of the copy operation identified by Copy ID, with these values:
            pending: Copy is in progress.
            success: Copy completed successfully.
            aborted: Copy was ended by Abort Copy File.
            failed: Copy failed.
    :ivar str progress:
        Contains the number of bytes copied and the total bytes in the source in the last
        attempted Copy File operation where this file was the destination file. Can show
        between 0 and Content-Length bytes copied.
    :ivar datetime completion_time:
        Conclusion time of the last attempted Copy File operation where this file was the
        destination file.
    :ivar str status_description:
        Only appears when status is failed. Describes cause of fatal or non-fatal copy
        operation failure.
    '''

    def __init__(self):
        self.id = None
        self.source = None
        self.status = None
        self.progress = None
        self.completion_time = None
        self.status_description = None


class Range(object):

    '''
    File Range.

    :ivar int start:
        Byte index for start of file range.
    :ivar int end:
        Byte index for end of file range, inclusive.
    '''

    def __init__(self, start=None, end=None):
        self.start = start
        self.end = end

    def __eq__(self, other):
        if not isinstance(other, Range):
            return NotImplemented
        return (self.start, self.end) == (other.start, other.end)

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __repr__(self):
        return 'Range(start={}, end={})'.format(self.start, self.end)


class FilePermissions(object):

    '''
    FilePermissions class to be used with 
    :func:`~filestorage.file.fileservice.FileService.generate_file_shared_access_signature` method.

    :param bool read:
        Read the content, properties, metadata. Use the file as the source of a copy 
        operation.
    :param bool create:
        Create a new file or copy a file to a new file.
    :param bool write: 
        Create or write content, properties, metadata. Resize the file. Use the file 
        as the destination of a copy operation within the same account.
    :param bool delete: 
        Delete the file.
    :param str _str: 
        A string representing the permissions.
    '''

    def __init__(self, read=False, create=False, write=False, delete=False,
                 _str=None):
        if not _str:
            _str = ''
        self.read = read or ('r' in _str)
        self.create = create or ('c' in _str)
        self.write = write or ('w' in _str)
        self.delete = delete or ('d' in _str)

    def __or__(self, other):
        return FilePermissions(_str=str(self) + str(other))

    def __add__(self, other):
        return FilePermissions(_str=str(self) + str(other))

    def __str__(self):
        return (('r' if self.read else '') +
                ('c' if self.create else '') +
                ('w' if self.write else '') +
                ('d' if self.delete else ''))


FilePermissions.READ = FilePermissions(read=True)
FilePermissions.CREATE = FilePermissions(create=True)
FilePermissions.WRITE = FilePermissions(write=True)
FilePermissions.DELETE = FilePermissions(delete=True)
