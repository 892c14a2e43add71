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
import os
from io import BytesIO

from azure.common import AzureHttpError

from .._common_conversion import (
    _int_or_none,
    _str,
    _str_or_none,
)
from .._constants import (
    DEFAULT_PROTOCOL,
    FILE_MAX_RANGE_SIZE,
    SERVICE_HOST_BASE,
)
from .._deserialization import _parse_properties
from .._error import (
    _dont_fail_not_exist,
    _dont_fail_on_exist,
    _validate_not_none,
    _validate_type_bytes,
    _ERROR_VALUE_NEGATIVE,
)
from .._http import HTTPRequest
from .._serialization import (
    _add_metadata_headers,
    _get_request_body_bytes_only,
    _validate_and_format_range_headers,
)
from ..connection import _ServiceParameters
from ..models import ListGenerator
from ..sharedaccesssignature import SharedAccessSignature
from ..storageclient import _StorageClient
from ._deserialization import (
    _convert_xml_to_directories_and_files,
    _convert_xml_to_ranges,
    _parse_directory,
    _parse_file,
    _parse_share,
)
from ._serialization import _get_path
from .models import (
    Directory,
    FileProperties,
)

logger = logging.getLogger(__name__)


class FileService(_StorageClient):

    '''
    This is the main class managing File resources.

    The File service stores shares, directories and files. A file has a fixed
    maximum size chosen at creation time and is written and read in ranges,
    so it may be sparse: bytes that were never written read back as zero.

    :ivar int MAX_RANGE_SIZE:
        The largest number of bytes written by a single update_range call.
        create_file_from_* methods split their content into ranges of at most
        this size.
    '''

    MAX_RANGE_SIZE = FILE_MAX_RANGE_SIZE

    def __init__(self, account_name=None, account_key=None, sas_token=None,
                 protocol=DEFAULT_PROTOCOL, endpoint_suffix=SERVICE_HOST_BASE,
                 custom_domain=None, request_session=None, connection_string=None):
        '''
        :param str account_name:
            The storage account name. This is used to authenticate requests 
            signed with an account key and to construct the storage endpoint. It 
            is required unless a connection string is given.
        :param str account_key:
            The storage account key. This is used for shared key authentication. 
        :param str sas_token:
             A shared access signature token to use to authenticate requests 
             instead of the account key. If account key and sas token are both 
             specified, account key will be used to sign.
        :param str protocol:
            The protocol to use for requests. Defaults to https.
        :param str endpoint_suffix:
            The host base component of the url, minus the account name. Defaults 
            to Azure (core.windows.net). Override this to use the China cloud 
            (core.chinacloudapi.cn).
        :param str custom_domain:
            The custom domain to use, for example 'https://files.example.com'.
        :param requests.Session request_session:
            The session object to use for http requests.
        :param str connection_string:
            If specified, this will override all other parameters besides 
            request session. See
            http://azure.microsoft.com/en-us/documentation/articles/storage-configure-connection-string/
            for the connection string format.
        '''
        service_params = _ServiceParameters.get_service_parameters(
            'file',
            account_name=account_name,
            account_key=account_key,
            sas_token=sas_token,
            protocol=protocol,
            endpoint_suffix=endpoint_suffix,
            custom_domain=custom_domain,
            request_session=request_session,
            connection_string=connection_string)

        super(FileService, self).__init__(service_params)

    def make_file_url(self, share_name, directory_name, file_name,
                      protocol=None, sas_token=None):
        '''
        Creates the url to access a file.

        share_name:
            Name of share.
        directory_name:
            The path to the directory.
        file_name:
            Name of file.
        protocol:
            Protocol to use: 'http' or 'https'. If not specified, uses the
            protocol specified when FileService was initialized.
        sas_token:
            Shared access signature token created with
            generate_file_shared_access_signature.
        '''
        url = '{}://{}{}'.format(
            protocol or self.protocol,
            self.primary_endpoint,
            _get_path(share_name, directory_name, file_name),
        )

        if sas_token:
            url += '?' + sas_token

        return url

    def generate_file_shared_access_signature(self, share_name,
                                              directory_name=None,
                                              file_name=None,
                                              permission=None,
                                              expiry=None,
                                              start=None,
                                              id=None,
                                              ip=None,
                                              protocol=None,
                                              cache_control=None,
                                              content_disposition=None,
                                              content_encoding=None,
                                              content_language=None,
                                              content_type=None):
        '''
        Generates a shared access signature for the file.
        Use the returned signature with the sas_token parameter of FileService
        or make_file_url.

        :param str share_name:
            Name of share.
        :param str directory_name:
            Name of directory. SAS tokens cannot be created for directories, so 
            this parameter should only be present if file_name is provided.
        :param str file_name:
            Name of file.
        :param FilePermissions permission:
            The permissions associated with the shared access signature. The 
            user is restricted to operations allowed by the permissions.
            Permissions must be ordered read, create, write, delete.
        :param expiry:
            The time at which the shared access signature becomes invalid. 
            Azure will always convert values to UTC. If a date is passed in 
            without timezone info, it is assumed to be UTC.
        :type expiry: date or str
        :param start:
            The time at which the shared access signature becomes valid. If 
            omitted, start time for this call is assumed to be the time when the 
            storage service receives the request.
        :type start: date or str
        :param str id:
            A unique value up to 64 characters in length that correlates to a 
            stored access policy.
        :param str ip:
            Specifies an IP address or a range of IP addresses from which to accept requests.
        :param str protocol:
            Specifies the protocol permitted for a request made. Possible values are
            both HTTPS and HTTP (https,http) or HTTPS only (https).
        :param str cache_control:
            Response header value for Cache-Control when resource is accessed
            using this shared access signature.
        :param str content_disposition:
            Response header value for Content-Disposition when resource is accessed
            using this shared access signature.
        :param str content_encoding:
            Response header value for Content-Encoding when resource is accessed
            using this shared access signature.
        :param str content_language:
            Response header value for Content-Language when resource is accessed
            using this shared access signature.
        :param str content_type:
            Response header value for Content-Type when resource is accessed
            using this shared access signature.
        :return: A Shared Access Signature (sas) token.
        :rtype: str
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        _validate_not_none('self.account_name', self.account_name)
        _validate_not_none('self.account_key', self.account_key)

        sas = SharedAccessSignature(self.account_name, self.account_key)
        return sas.generate_file(
            share_name,
            directory_name,
            file_name,
            permission,
            expiry,
            start=start,
            id=id,
            ip=ip,
            protocol=protocol,
            cache_control=cache_control,
            content_disposition=content_disposition,
            content_encoding=content_encoding,
            content_language=content_language,
            content_type=content_type,
        )

    def create_share(self, share_name, metadata=None, quota=None,
                     fail_on_exist=False, timeout=None):
        '''
        Creates a new share under the specified account. If the share
        with the same name already exists, the operation fails on the
        service. By default, the exception is swallowed by the client.
        To expose the exception, specify True for fail_on_exist.

        share_name:
            Name of share to create.
        metadata:
            A dict with name_value pairs to associate with the
            share as metadata. Example:{'Category':'test'}
        quota:
            Specifies the maximum size of the share, in gigabytes. Must be 
            greater than 0, and less than or equal to 5TB (5120).
        fail_on_exist:
            Specify whether to throw an exception when the share exists.
            False by default.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: True if share is created, False if share already exists.
        :rtype: bool
        '''
        _validate_not_none('share_name', share_name)
        request = HTTPRequest()
        request.method = 'PUT'
        request.host = self._get_host()
        request.path = _get_path(share_name)
        request.query = {
            'restype': 'share',
            'timeout': _int_or_none(timeout),
        }
        request.headers = {
            'x-ms-share-quota': _str_or_none(quota),
        }
        _add_metadata_headers(metadata, request)

        if not fail_on_exist:
            try:
                self._perform_request(request)
                return True
            except AzureHttpError as ex:
                _dont_fail_on_exist(ex)
                return False
        else:
            self._perform_request(request)
            return True

    def get_share_properties(self, share_name, timeout=None):
        '''
        Returns all user-defined metadata and system properties for the
        specified share.

        share_name:
            Name of existing share.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: A Share that exposes properties and metadata.
        :rtype: :class:`~filestorage.file.models.Share`
        '''
        _validate_not_none('share_name', share_name)
        request = HTTPRequest()
        request.method = 'GET'
        request.host = self._get_host()
        request.path = _get_path(share_name)
        request.query = {
            'restype': 'share',
            'timeout': _int_or_none(timeout),
        }

        response = self._perform_request(request)
        return _parse_share(share_name, response)

    def delete_share(self, share_name, fail_not_exist=False, timeout=None,
                     delete_snapshots=None):
        '''
        Marks the specified share for deletion. If the share
        does not exist, the operation fails on the service. By 
        default, the exception is swallowed by the client.
        To expose the exception, specify True for fail_not_exist.

        share_name:
            Name of share to delete.
        fail_not_exist:
            Specify whether to throw an exception when the share doesn't
            exist. False by default.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        delete_snapshots:
            Pass 'include' to delete the share's snapshots together with it.
        :return: True if share is deleted, False share doesn't exist.
        :rtype: bool
        '''
        _validate_not_none('share_name', share_name)
        request = HTTPRequest()
        request.method = 'DELETE'
        request.host = self._get_host()
        request.path = _get_path(share_name)
        request.query = {
            'restype': 'share',
            'timeout': _int_or_none(timeout),
        }
        request.headers = {
            'x-ms-delete-snapshots': _str_or_none(delete_snapshots),
        }

        if not fail_not_exist:
            try:
                self._perform_request(request)
                return True
            except AzureHttpError as ex:
                _dont_fail_not_exist(ex)
                return False
        else:
            self._perform_request(request)
            return True

    def create_directory(self, share_name, directory_name, metadata=None,
                         fail_on_exist=False, timeout=None):
        '''
        Creates a new directory under the specified share or parent directory. 
        If the directory with the same name already exists, the operation fails
        on the service. By default, the exception is swallowed by the client.
        To expose the exception, specify True for fail_on_exist.

        share_name:
            Name of existing share.
        directory_name:
            Name of directory to create, including the path to the parent 
            directory.
        metadata:
            A dict with name_value pairs to associate with the
            directory as metadata.
        fail_on_exist:
            specify whether to throw an exception when the directory exists.
            False by default.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: True if directory is created, False if directory already exists.
        :rtype: bool
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('directory_name', directory_name)
        request = HTTPRequest()
        request.method = 'PUT'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name)
        request.query = {
            'restype': 'directory',
            'timeout': _int_or_none(timeout),
        }
        _add_metadata_headers(metadata, request)

        if not fail_on_exist:
            try:
                self._perform_request(request)
                return True
            except AzureHttpError as ex:
                _dont_fail_on_exist(ex)
                return False
        else:
            self._perform_request(request)
            return True

    def delete_directory(self, share_name, directory_name,
                         fail_not_exist=False, recursive=False, timeout=None):
        '''
        Deletes the specified directory. Unless recursive is set the directory
        must be empty before it can be deleted, and attempting to delete a
        directory that is not empty raises DirectoryNotEmptyError.

        If the directory does not exist, the operation fails on the
        service. By default, the exception is swallowed by the client.
        To expose the exception, specify True for fail_not_exist.

        share_name:
            Name of existing share.
        directory_name:
            Name of directory to delete, including the path to the parent 
            directory.
        fail_not_exist:
            Specify whether to throw an exception when the directory doesn't
            exist.
        recursive:
            Delete the files and subdirectories of the directory first.
        :param int timeout:
            The timeout parameter is expressed in seconds. With recursive set
            this method makes one call per entry and the timeout applies to
            each call individually.
        :return: True if directory is deleted, False otherwise.
        :rtype: bool
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('directory_name', directory_name)

        if not fail_not_exist:
            try:
                self._delete_directory(share_name, directory_name, recursive, timeout)
                return True
            except AzureHttpError as ex:
                _dont_fail_not_exist(ex)
                return False
        else:
            self._delete_directory(share_name, directory_name, recursive, timeout)
            return True

    def _delete_directory(self, share_name, directory_name, recursive, timeout):
        if recursive:
            for entry in self.list_directories_and_files(share_name, directory_name,
                                                         timeout=timeout):
                entry_path = directory_name + '/' + entry.name
                if isinstance(entry, Directory):
                    self._delete_directory(share_name, entry_path, True, timeout)
                else:
                    self.delete_file(share_name, directory_name, entry.name, timeout=timeout)
                logger.debug('Deleted %s/%s', share_name, entry_path)

        request = HTTPRequest()
        request.method = 'DELETE'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name)
        request.query = {
            'restype': 'directory',
            'timeout': _int_or_none(timeout),
        }

        self._perform_request(request)

    def get_directory_properties(self, share_name, directory_name, timeout=None):
        '''
        Returns all user-defined metadata and system properties for the
        specified directory.

        share_name:
            Name of existing share.
        directory_name:
           The path to an existing directory.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: properties for the specified directory within a directory object.
        :rtype: :class:`~filestorage.file.models.Directory`
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('directory_name', directory_name)
        request = HTTPRequest()
        request.method = 'GET'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name)
        request.query = {
            'restype': 'directory',
            'timeout': _int_or_none(timeout),
        }

        response = self._perform_request(request)
        return _parse_directory(directory_name, response)

    def list_directories_and_files(self, share_name, directory_name=None,
                                   prefix=None, num_results=None, marker=None,
                                   timeout=None):
        '''
        Returns a generator to list the directories and files under the specified share.
        The generator will lazily follow the continuation tokens returned by
        the service and stop when all directories and files have been returned or
        num_results is reached. Only a single level of the directory hierarchy is
        listed.

        If num_results is specified and the share has more than that number of 
        files and directories, the generator will have a populated next_marker field 
        once it finishes. This marker can be used to create a new generator if more 
        results are desired.

        :param str share_name:
            Name of existing share.
        :param str directory_name:
            The path to the directory.
        :param str prefix:
            Only return the entries whose name begins with the prefix.
        :param int num_results:
            Specifies the maximum number of files to return,
            including all directory elements. If the request does not specify
            num_results or specifies a value greater than 5,000, the server will
            return up to 5,000 items. Setting num_results to a value less than
            or equal to zero results in error response code 400 (Bad Request).
        :param str marker:
            An opaque continuation token. This value can be retrieved from the 
            next_marker field of a previous generator object if num_results was 
            specified and that generator has finished enumerating results. If 
            specified, this generator will begin returning results from the point 
            where the previous generator stopped.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: Entries that are either :class:`~filestorage.file.models.File`
            or :class:`~filestorage.file.models.Directory`.
        :rtype: :class:`~filestorage.models.ListGenerator`
        '''
        args = (share_name, directory_name)
        kwargs = {'prefix': prefix, 'marker': marker, 'max_results': num_results,
                  'timeout': timeout}
        resp = self._list_directories_and_files(*args, **kwargs)

        return ListGenerator(resp, self._list_directories_and_files, args, kwargs)

    def _list_directories_and_files(self, share_name, directory_name=None,
                                    prefix=None, marker=None, max_results=None,
                                    timeout=None):
        '''
        Returns a list of the directories and files under the specified share.

        :param str share_name:
            Name of existing share.
        :param str directory_name:
            The path to the directory.
        :param str prefix:
            Only return the entries whose name begins with the prefix.
        :param str marker:
            A string value that identifies the portion of the list
            to be returned with the next list operation. The operation returns
            a next_marker value within the response body if the list returned was
            not complete. The marker value may then be used in a subsequent
            call to request the next set of list items. The marker value is
            opaque to the client.
        :param int max_results:
            Specifies the maximum number of files to return,
            including all directory elements.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        '''
        _validate_not_none('share_name', share_name)
        request = HTTPRequest()
        request.method = 'GET'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name)
        request.query = {
            'restype': 'directory',
            'comp': 'list',
            'prefix': _str_or_none(prefix),
            'marker': _str_or_none(marker),
            'maxresults': _int_or_none(max_results),
            'timeout': _int_or_none(timeout),
        }

        response = self._perform_request(request)
        return _convert_xml_to_directories_and_files(response)

    def get_file_properties(self, share_name, directory_name, file_name, timeout=None):
        '''
        Returns all user-defined metadata, standard HTTP properties, and
        system properties for the file. Returns an instance of File with
        properties and metadata.

        share_name:
            Name of existing share.
        directory_name:
            The path to the directory.
        file_name:
            Name of existing file.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: a file object including properties and metadata.
        :rtype: :class:`~filestorage.file.models.File`
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        request = HTTPRequest()
        request.method = 'HEAD'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name, file_name)
        request.query = {'timeout': _int_or_none(timeout)}

        response = self._perform_request(request)
        return _parse_file(file_name, response)

    def exists(self, share_name, directory_name=None, file_name=None, timeout=None):
        '''
        Returns a boolean indicating whether the share exists if only share name is
        given. If directory_name is specificed a boolean will be returned indicating
        if the directory exists. If file is specified as well, file existence will be
        checked instead.

        share_name:
            Name of a share.
        directory_name:
            The path to a directory.
        file_name:
            Name of a file.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: A boolean indicating whether the resource exists.
        :rtype: bool
        '''
        _validate_not_none('share_name', share_name)
        try:
            if file_name is not None:
                self.get_file_properties(share_name, directory_name, file_name, timeout=timeout)
            elif directory_name is not None:
                self.get_directory_properties(share_name, directory_name, timeout=timeout)
            else:
                self.get_share_properties(share_name, timeout=timeout)
            return True
        except AzureHttpError as ex:
            _dont_fail_not_exist(ex)
            return False

    def resize_file(self, share_name, directory_name,
                    file_name, content_length, timeout=None):
        '''
        Resizes a file to the specified size. If the specified byte
        value is less than the current size of the file, then all
        ranges above the specified byte value are cleared.

        share_name:
            Name of existing share.
        directory_name:
            The path to the directory.
        file_name:
            Name of existing file.
        content_length:
            The length to resize the file to.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        _validate_not_none('content_length', content_length)
        request = HTTPRequest()
        request.method = 'PUT'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name, file_name)
        request.query = {
            'comp': 'properties',
            'timeout': _int_or_none(timeout),
        }
        request.headers = {
            'x-ms-content-length': _str_or_none(content_length),
        }

        self._perform_request(request)

    def copy_file(self, share_name, directory_name, file_name, copy_source,
                  metadata=None, timeout=None):
        '''
        Copies a file asynchronously. This operation returns a copy operation 
        properties object, including a copy ID you can use to check or abort the 
        copy operation. The File service copies files on a best-effort basis.

        If the destination file exists, it will be overwritten. The destination 
        file cannot be modified while a copy operation is in progress.

        share_name:
            Name of the destination share. The share must exist.
        directory_name:
            Name of the destination directory. The directory must exist.
        file_name:
            Name of the destination file. If the destination file exists, it will 
            be overwritten. Otherwise, it will be created.
        copy_source:
            A URL of up to 2 KB in length that specifies an Azure file or blob. 
            The value should be URL-encoded as it would appear in a request URI. 
            A source file must carry a shared access signature granting read
            access, even within the same account. Example:
            https://myaccount.file.core.windows.net/myshare/mydir/myfile?sv=...
        metadata:
            Optional. Dict containing name and value pairs.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: Copy operation properties such as status, source, and ID.
        :rtype: :class:`~filestorage.file.models.CopyProperties`
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        _validate_not_none('copy_source', copy_source)

        request = HTTPRequest()
        request.method = 'PUT'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name, file_name)
        request.query = {'timeout': _int_or_none(timeout)}
        request.headers = {
            'x-ms-copy-source': _str_or_none(copy_source),
        }
        _add_metadata_headers(metadata, request)

        response = self._perform_request(request)
        props = _parse_properties(response, FileProperties)
        return props.copy

    def abort_copy_file(self, share_name, directory_name, file_name, copy_id, timeout=None):
        '''
        Aborts a pending copy_file operation, and leaves a destination file
        with zero length and full metadata. Raises CopyAlreadyCompletedError
        if the copy is no longer pending.

        share_name:
            Name of destination share.
        directory_name:
            The path to the directory.
        file_name:
            Name of destination file.
        copy_id:
            Copy identifier provided in the copy.id of the original
            copy_file operation.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        _validate_not_none('copy_id', copy_id)
        request = HTTPRequest()
        request.method = 'PUT'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name, file_name)
        request.query = {
            'comp': 'copy',
            'copyid': _str(copy_id),
            'timeout': _int_or_none(timeout),
        }
        request.headers = {
            'x-ms-copy-action': 'abort',
        }

        self._perform_request(request)

    def delete_file(self, share_name, directory_name, file_name, timeout=None):
        '''
        Marks the specified file for deletion. The file is later
        deleted during garbage collection.

        share_name:
            Name of existing share.
        directory_name:
            The path to the directory.
        file_name:
            Name of existing file.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        request = HTTPRequest()
        request.method = 'DELETE'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name, file_name)
        request.query = {'timeout': _int_or_none(timeout)}

        self._perform_request(request)

    def create_file(self, share_name, directory_name, file_name,
                    content_length, content_settings=None, metadata=None,
                    timeout=None):
        '''
        Creates a new file. No content is stored until ranges are written
        with update_range; every byte of a new file reads back as zero.

        See create_file_from_* for high level functions that handle the
        creation and upload of files.

        share_name:
            Name of existing share.
        directory_name:
            The path to the directory.
        file_name:
            Name of file to create or update.
        content_length:
            Length of the file in bytes.
        content_settings:
            ContentSettings object used to set file properties.
        metadata:
            A dict containing name, value for metadata.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        _validate_not_none('content_length', content_length)
        request = HTTPRequest()
        request.method = 'PUT'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name, file_name)
        request.query = {'timeout': _int_or_none(timeout)}
        request.headers = {
            'x-ms-content-length': _str_or_none(content_length),
            'x-ms-type': 'file',
        }
        _add_metadata_headers(metadata, request)
        if content_settings is not None:
            request.headers.update(content_settings.to_headers())

        self._perform_request(request)

    def create_file_from_path(self, share_name, directory_name, file_name,
                              local_file_path, content_settings=None,
                              metadata=None, progress_callback=None, timeout=None):
        '''
        Creates a new azure file from a local file path, or updates the content of an
        existing file, with automatic chunking and progress notifications.

        share_name:
            Name of existing share.
        directory_name:
            The path to the directory.
        file_name:
            Name of file to create or update.
        local_file_path:
            Path of the local file to upload as the file content.
        content_settings:
            ContentSettings object used to set file properties.
        metadata:
            Dict containing name and value pairs.
        progress_callback:
            Callback for progress with signature function(current, total) where
            current is the number of bytes transfered so far and total is the
            size of the file.
        :param int timeout:
            The timeout parameter is expressed in seconds. This method may make 
            multiple calls to the Azure service and the timeout will apply to 
            each call individually.
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        _validate_not_none('local_file_path', local_file_path)

        count = os.path.getsize(local_file_path)
        with open(local_file_path, 'rb') as stream:
            self._create_file_from_stream(
                share_name, directory_name, file_name, stream, count,
                content_settings, metadata, progress_callback, timeout)

    def create_file_from_bytes(
        self, share_name, directory_name, file_name, file,
        index=0, count=None, content_settings=None, metadata=None,
        progress_callback=None, timeout=None):
        '''
        Creates a new file from an array of bytes, or updates the content
        of an existing file, with automatic chunking and progress
        notifications.

        share_name:
            Name of existing share.
        directory_name:
            The path to the directory.
        file_name:
            Name of file to create or update.
        file:
            Content of file as an array of bytes.
        index:
            Start index in the array of bytes.
        count:
            Number of bytes to upload. Set to None or negative value to upload
            all bytes starting from index.
        content_settings:
            ContentSettings object used to set file properties.
        metadata:
            A dict containing name, value for metadata.
        progress_callback:
            Callback for progress with signature function(current, total) where
            current is the number of bytes transfered so far and total is the
            size of the file.
        :param int timeout:
            The timeout parameter is expressed in seconds. This method may make 
            multiple calls to the Azure service and the timeout will apply to 
            each call individually.
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        _validate_not_none('file', file)
        _validate_type_bytes('file', file)

        if index < 0:
            raise TypeError(_ERROR_VALUE_NEGATIVE.format('index'))

        if count is None or count < 0:
            count = len(file) - index

        stream = BytesIO(file)
        stream.seek(index)

        self._create_file_from_stream(
            share_name, directory_name, file_name, stream, count,
            content_settings, metadata, progress_callback, timeout)

    def _create_file_from_stream(self, share_name, directory_name, file_name,
                                 stream, count, content_settings, metadata,
                                 progress_callback, timeout):
        self.create_file(
            share_name,
            directory_name,
            file_name,
            count,
            content_settings,
            metadata,
            timeout
        )

        uploaded = 0
        if progress_callback:
            progress_callback(uploaded, count)

        while uploaded < count:
            chunk = stream.read(min(self.MAX_RANGE_SIZE, count - uploaded))
            if not chunk:
                break

            self.update_range(
                share_name,
                directory_name,
                file_name,
                chunk,
                uploaded,
                uploaded + len(chunk) - 1,
                timeout=timeout,
            )
            uploaded += len(chunk)

            if progress_callback:
                progress_callback(uploaded, count)

        logger.debug('Uploaded %s bytes to %s', uploaded,
                     _get_path(share_name, directory_name, file_name))

    def _get_file(self, share_name, directory_name, file_name,
                  start_range=None, end_range=None, timeout=None):
        '''
        Downloads a file's content, metadata, and properties. You can specify a
        range if you don't need to download the file in its entirety. If no range
        is specified, the full file will be downloaded.

        share_name:
            Name of existing share.
        directory_name:
            The path to the directory.
        file_name:
            Name of existing file.
        start_range:
            Start of byte range to use for downloading a section of the file.
            If no end_range is given, all bytes after the start_range will be downloaded.
        end_range:
            End of byte range to use for downloading a section of the file.
            If end_range is given, start_range must be provided.
            This range will return bytes from the offset start up to offset end. 
        :param int timeout:
            The timeout parameter is expressed in seconds.
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        request = HTTPRequest()
        request.method = 'GET'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name, file_name)
        request.query = {'timeout': _int_or_none(timeout)}
        _validate_and_format_range_headers(
            request,
            start_range,
            end_range,
            start_range_required=False,
            end_range_required=False)

        response = self._perform_request(request)
        return _parse_file(file_name, response)

    def get_file_to_path(self, share_name, directory_name, file_name, file_path,
                         open_mode='wb', start_range=None, end_range=None,
                         timeout=None):
        '''
        Downloads a file to a file path. Returns an instance of File with
        properties and metadata.

        share_name:
            Name of existing share.
        directory_name:
            The path to the directory.
        file_name:
            Name of existing file.
        file_path:
            Path of file to write to.
        open_mode:
            Mode to use when opening the file.
        start_range:
            Start of byte range to use for downloading a section of the file.
            If no end_range is given, all bytes after the start_range will be downloaded.
        end_range:
            End of byte range to use for downloading a section of the file.
            If end_range is given, start_range must be provided.
            This range will return bytes from the offset start up to offset end. 
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: A File with properties and metadata.
        :rtype: :class:`~filestorage.file.models.File`
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        _validate_not_none('file_path', file_path)
        _validate_not_none('open_mode', open_mode)

        file = self._get_file(share_name, directory_name, file_name,
                              start_range, end_range, timeout)

        with open(file_path, open_mode) as stream:
            stream.write(file.content)

        file.content = None
        return file

    def get_file_to_bytes(self, share_name, directory_name, file_name,
                          start_range=None, end_range=None, timeout=None):
        '''
        Downloads a file as an array of bytes. Returns an instance of File
        with properties, metadata, and content. Bytes of the file that were
        never written are returned as zero.

        share_name:
            Name of existing share.
        directory_name:
            The path to the directory.
        file_name:
            Name of existing file.
        start_range:
            Start of byte range to use for downloading a section of the file.
            If no end_range is given, all bytes after the start_range will be downloaded.
        end_range:
            End of byte range to use for downloading a section of the file.
            If end_range is given, start_range must be provided.
            This range will return bytes from the offset start up to offset end. 
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: A File with properties, content, and metadata.
        :rtype: :class:`~filestorage.file.models.File`
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)

        file = self._get_file(share_name, directory_name, file_name,
                              start_range, end_range, timeout)
        if file.content is None:
            file.content = b''
        return file

    def update_range(self, share_name, directory_name, file_name, data,
                     start_range, end_range, content_md5=None, timeout=None):
        '''
        Writes the bytes specified by the request body into the specified range.
         
        share_name:
            Name of existing share.
        directory_name:
            The path to the directory.
        file_name:
            Name of existing file.
        data:
            Content of the range.
        start_range:
            Start of byte range to use for updating a section of the file.
            The range can be up to 4 MB in size.
        end_range:
            End of byte range to use for updating a section of the file.
            The range can be up to 4 MB in size.
        content_md5:
            An MD5 hash of the range content. This hash is used to
            verify the integrity of the range during transport. When this header
            is specified, the storage service compares the hash of the content
            that has arrived with the header value that was sent. If the two
            hashes do not match, the operation will fail with error code 400
            (Bad Request).
        :param int timeout:
            The timeout parameter is expressed in seconds.
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        _validate_not_none('data', data)
        request = HTTPRequest()
        request.method = 'PUT'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name, file_name)
        request.query = {
            'comp': 'range',
            'timeout': _int_or_none(timeout),
        }
        request.headers = {
            'Content-MD5': _str_or_none(content_md5),
            'x-ms-write': 'update',
        }
        _validate_and_format_range_headers(
            request, start_range, end_range)
        request.body = _get_request_body_bytes_only('data', data)

        self._perform_request(request)

    def clear_range(self, share_name, directory_name, file_name, start_range,
                    end_range, timeout=None):
        '''
        Clears the specified range and releases the space used in storage for 
        that range.
         
        share_name:
            Name of existing share.
        directory_name:
            The path to the directory.
        file_name:
            Name of existing file.
        start_range:
            Start of byte range to use for clearing a section of the file.
        end_range:
            End of byte range to use for clearing a section of the file.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        request = HTTPRequest()
        request.method = 'PUT'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name, file_name)
        request.query = {
            'comp': 'range',
            'timeout': _int_or_none(timeout),
        }
        request.headers = {
            'Content-Length': '0',
            'x-ms-write': 'clear',
        }
        _validate_and_format_range_headers(
            request, start_range, end_range)

        self._perform_request(request)

    def list_ranges(self, share_name, directory_name, file_name,
                    start_range=None, end_range=None, timeout=None):
        '''
        Retrieves the valid ranges for a file, as reported by the service.
        Use :func:`~filestorage.file._ranges.normalize_ranges` to round them
        to the storage alignment.

        share_name:
            Name of existing share.
        directory_name:
            The path to the directory.
        file_name:
            Name of existing file.
        start_range:
            Specifies the start offset of bytes over which to list ranges.
        end_range:
            Specifies the end offset of bytes over which to list ranges.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :returns: a list of valid ranges
        :rtype: a list of :class:`~filestorage.file.models.Range`
        '''
        _validate_not_none('share_name', share_name)
        _validate_not_none('file_name', file_name)
        request = HTTPRequest()
        request.method = 'GET'
        request.host = self._get_host()
        request.path = _get_path(share_name, directory_name, file_name)
        request.query = {
            'comp': 'rangelist',
            'timeout': _int_or_none(timeout),
        }
        if start_range is not None:
            _validate_and_format_range_headers(
                request,
                start_range,
                end_range,
                start_range_required=False,
                end_range_required=False)

        response = self._perform_request(request)
        return _convert_xml_to_ranges(response)
