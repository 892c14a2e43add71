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

from .._common_conversion import (
    _int_or_none,
    _str,
    _str_or_none,
)
from .._constants import (
    DEFAULT_PROTOCOL,
    SERVICE_HOST_BASE,
)
from .._deserialization import _parse_properties
from .._error import (
    _dont_fail_not_exist,
    _dont_fail_on_exist,
    _validate_not_none,
    _validate_type_bytes,
)
from .._http import HTTPRequest
from .._serialization import (
    _add_metadata_headers,
    _get_request_body_bytes_only,
    _validate_and_format_range_headers,
)
from ..connection import _ServiceParameters
from ..sharedaccesssignature import SharedAccessSignature
from ..storageclient import _StorageClient
from ._deserialization import (
    _parse_blob,
    _parse_container,
)
from ._serialization import _get_path
from .models import (
    BlobProperties,
    _BlobTypes,
)

logger = logging.getLogger(__name__)


class BlobService(_StorageClient):

    '''
    Manages containers and block blobs. It is used as the destination of
    copies started from files, and to poll and abort those copies.
    '''

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
            to Azure (core.windows.net).
        :param str custom_domain:
            The custom domain to use, for example 'https://blobs.example.com'.
        :param requests.Session request_session:
            The session object to use for http requests.
        :param str connection_string:
            If specified, this will override all other parameters besides 
            request session.
        '''
        service_params = _ServiceParameters.get_service_parameters(
            'blob',
            account_name=account_name,
            account_key=account_key,
            sas_token=sas_token,
            protocol=protocol,
            endpoint_suffix=endpoint_suffix,
            custom_domain=custom_domain,
            request_session=request_session,
            connection_string=connection_string)

        super(BlobService, self).__init__(service_params)

    def make_blob_url(self, container_name, blob_name, protocol=None, sas_token=None):
        '''
        Creates the url to access a blob.

        container_name:
            Name of container.
        blob_name:
            Name of blob.
        protocol:
            Protocol to use: 'http' or 'https'. If not specified, uses the
            protocol specified when BlobService was initialized.
        sas_token:
            Shared access signature token created with
            generate_blob_shared_access_signature.
        '''
        url = '{}://{}/{}/{}'.format(
            protocol or self.protocol,
            self.primary_endpoint,
            container_name,
            blob_name,
        )

        if sas_token:
            url += '?' + sas_token

        return url

    def generate_blob_shared_access_signature(self, container_name, blob_name,
                                              permission=None, expiry=None,
                                              start=None, id=None, ip=None,
                                              protocol=None):
        '''
        Generates a shared access signature for the blob.
        Use the returned signature with the sas_token parameter of any BlobService.

        :param str container_name:
            Name of container.
        :param str blob_name:
            Name of blob.
        :param BlobPermissions permission:
            The permissions associated with the shared access signature. The 
            user is restricted to operations allowed by the permissions.
        :param expiry:
            The time at which the shared access signature becomes invalid.
        :type expiry: date or str
        :param start:
            The time at which the shared access signature becomes valid.
        :type start: date or str
        :param str id:
            A unique value up to 64 characters in length that correlates to a 
            stored access policy.
        :param str ip:
            Specifies an IP address or a range of IP addresses from which to accept requests.
        :param str protocol:
            Specifies the protocol permitted for a request made.
        :return: A Shared Access Signature (sas) token.
        :rtype: str
        '''
        _validate_not_none('container_name', container_name)
        _validate_not_none('blob_name', blob_name)
        _validate_not_none('self.account_name', self.account_name)
        _validate_not_none('self.account_key', self.account_key)

        sas = SharedAccessSignature(self.account_name, self.account_key)
        return sas.generate_blob(
            container_name,
            blob_name,
            permission,
            expiry,
            start=start,
            id=id,
            ip=ip,
            protocol=protocol,
        )

    def create_container(self, container_name, metadata=None,
                         fail_on_exist=False, timeout=None):
        '''
        Creates a new container under the specified account. If the container
        with the same name already exists, the operation fails on the
        service. By default, the exception is swallowed by the client.

        container_name:
            Name of container to create.
        metadata:
            A dict with name_value pairs to associate with the
            container as metadata. Example:{'Category':'test'}
        fail_on_exist:
            specify whether to throw an exception when the container exists.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: True if container is created, False if container already exists.
        :rtype: bool
        '''
        _validate_not_none('container_name', container_name)
        request = HTTPRequest()
        request.method = 'PUT'
        request.host = self._get_host()
        request.path = _get_path(container_name)
        request.query = {
            'restype': 'container',
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

    def get_container_properties(self, container_name, timeout=None):
        '''
        Returns all user-defined metadata and system properties for the
        specified container.

        container_name:
            Name of existing container.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: properties for the specified container within a container object.
        :rtype: :class:`~filestorage.blob.models.Container`
        '''
        _validate_not_none('container_name', container_name)
        request = HTTPRequest()
        request.method = 'GET'
        request.host = self._get_host()
        request.path = _get_path(container_name)
        request.query = {
            'restype': 'container',
            'timeout': _int_or_none(timeout),
        }

        response = self._perform_request(request)
        return _parse_container(container_name, response)

    def delete_container(self, container_name, fail_not_exist=False, timeout=None):
        '''
        Marks the specified container for deletion. The container and any
        blobs contained within it are later deleted during garbage collection.

        container_name:
            Name of container to delete.
        fail_not_exist:
            Specify whether to throw an exception when the container doesn't
            exist.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: True if container is deleted, False container doesn't exist.
        :rtype: bool
        '''
        _validate_not_none('container_name', container_name)
        request = HTTPRequest()
        request.method = 'DELETE'
        request.host = self._get_host()
        request.path = _get_path(container_name)
        request.query = {
            'restype': 'container',
            'timeout': _int_or_none(timeout),
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

    def create_blob_from_bytes(self, container_name, blob_name, blob,
                               content_settings=None, metadata=None, timeout=None):
        '''
        Creates a new block blob from an array of bytes, or replaces the
        content of an existing blob, in a single request.

        container_name:
            Name of existing container.
        blob_name:
            Name of blob to create or update.
        blob:
            Content of blob as an array of bytes.
        content_settings:
            ContentSettings object used to set blob properties.
        metadata:
            Name-value pairs associated with the blob as metadata.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        '''
        _validate_not_none('container_name', container_name)
        _validate_not_none('blob_name', blob_name)
        _validate_not_none('blob', blob)
        _validate_type_bytes('blob', blob)
        request = HTTPRequest()
        request.method = 'PUT'
        request.host = self._get_host()
        request.path = _get_path(container_name, blob_name)
        request.query = {'timeout': _int_or_none(timeout)}
        request.headers = {
            'x-ms-blob-type': _BlobTypes.BlockBlob,
        }
        _add_metadata_headers(metadata, request)
        if content_settings is not None:
            request.headers.update(content_settings.to_headers())
        request.body = _get_request_body_bytes_only('blob', blob)

        self._perform_request(request)

    def get_blob_properties(self, container_name, blob_name, timeout=None):
        '''
        Returns a Blob with its properties and metadata. BlobProperties
        contains standard HTTP properties and system properties for the blob,
        including the state of the last copy into it.

        container_name:
            Name of existing container.
        blob_name:
            Name of existing blob.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: a blob object including properties and metadata.
        :rtype: :class:`~filestorage.blob.models.Blob`
        '''
        _validate_not_none('container_name', container_name)
        _validate_not_none('blob_name', blob_name)
        request = HTTPRequest()
        request.method = 'HEAD'
        request.host = self._get_host()
        request.path = _get_path(container_name, blob_name)
        request.query = {'timeout': _int_or_none(timeout)}

        response = self._perform_request(request)
        return _parse_blob(blob_name, response)

    def exists(self, container_name, blob_name=None, timeout=None):
        '''
        Returns a boolean indicating whether the container exists (if blob_name 
        is None), or otherwise a boolean indicating whether the blob exists.

        container_name:
            Name of a container.
        blob_name:
            Name of a blob. If None, the container will be checked for existence.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: A boolean indicating whether the resource exists.
        :rtype: bool
        '''
        _validate_not_none('container_name', container_name)
        try:
            if blob_name is None:
                self.get_container_properties(container_name, timeout=timeout)
            else:
                self.get_blob_properties(container_name, blob_name, timeout=timeout)
            return True
        except AzureHttpError as ex:
            _dont_fail_not_exist(ex)
            return False

    def get_blob_to_bytes(self, container_name, blob_name, start_range=None,
                          end_range=None, timeout=None):
        '''
        Downloads a blob as an array of bytes. Returns an instance of Blob
        with properties, metadata, and content.

        container_name:
            Name of existing container.
        blob_name:
            Name of existing blob.
        start_range:
            Start of byte range to use for downloading a section of the blob.
            If no end_range is given, all bytes after the start_range will be downloaded.
        end_range:
            End of byte range to use for downloading a section of the blob.
            If end_range is given, start_range must be provided.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: A Blob with properties, content, and metadata.
        :rtype: :class:`~filestorage.blob.models.Blob`
        '''
        _validate_not_none('container_name', container_name)
        _validate_not_none('blob_name', blob_name)
        request = HTTPRequest()
        request.method = 'GET'
        request.host = self._get_host()
        request.path = _get_path(container_name, blob_name)
        request.query = {'timeout': _int_or_none(timeout)}
        _validate_and_format_range_headers(
            request,
            start_range,
            end_range,
            start_range_required=False,
            end_range_required=False)

        response = self._perform_request(request)
        blob = _parse_blob(blob_name, response)
        if blob.content is None:
            blob.content = b''
        return blob

    def copy_blob(self, container_name, blob_name, copy_source,
                  metadata=None, timeout=None):
        '''
        Copies a blob or a file asynchronously. This operation returns a copy
        operation properties object, including a copy ID you can use to check
        or abort the copy operation. The Blob service copies on a best-effort
        basis.

        Poll get_blob_properties(...).properties.copy.status to follow the
        copy, and call abort_copy_blob while it is still pending to cancel it.

        container_name:
            Name of the destination container. The container must exist.
        blob_name:
            Name of the destination blob. If the destination blob exists, it will 
            be overwritten. Otherwise, it will be created.
        copy_source:
            A URL of up to 2 KB in length that specifies a blob or a file.
            A source file must carry a shared access signature granting read
            access, even within the same account. Examples:
            https://myaccount.blob.core.windows.net/mycontainer/myblob
            https://myaccount.file.core.windows.net/myshare/mydir/myfile?sv=...
        metadata:
            Dict containing name and value pairs.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        :return: Copy operation properties such as status, source, and ID.
        :rtype: :class:`~filestorage.blob.models.CopyProperties`
        '''
        _validate_not_none('container_name', container_name)
        _validate_not_none('blob_name', blob_name)
        _validate_not_none('copy_source', copy_source)

        request = HTTPRequest()
        request.method = 'PUT'
        request.host = self._get_host()
        request.path = _get_path(container_name, blob_name)
        request.query = {'timeout': _int_or_none(timeout)}
        request.headers = {
            'x-ms-copy-source': _str_or_none(copy_source),
        }
        _add_metadata_headers(metadata, request)

        response = self._perform_request(request)
        props = _parse_properties(response, BlobProperties)
        logger.info('Started copy %s of %s into %s/%s (%s)', props.copy.id,
                    copy_source.split('?')[0], container_name, blob_name,
                    props.copy.status)
        return props.copy

    def abort_copy_blob(self, container_name, blob_name, copy_id, timeout=None):
        '''
        Aborts a pending copy_blob operation, and leaves a destination blob
        with zero length and full metadata. Raises CopyAlreadyCompletedError
        if the copy is no longer pending.

        container_name:
            Name of destination container.
        blob_name:
            Name of destination blob.
        copy_id:
            Copy identifier provided in the copy.id of the original
            copy_blob operation.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        '''
        _validate_not_none('container_name', container_name)
        _validate_not_none('blob_name', blob_name)
        _validate_not_none('copy_id', copy_id)
        request = HTTPRequest()
        request.method = 'PUT'
        request.host = self._get_host()
        request.path = _get_path(container_name, blob_name)
        request.query = {
            'comp': 'copy',
            'copyid': _str(copy_id),
            'timeout': _int_or_none(timeout),
        }
        request.headers = {
            'x-ms-copy-action': 'abort',
        }

        self._perform_request(request)

    def delete_blob(self, container_name, blob_name, timeout=None):
        '''
        Marks the specified blob for deletion. The blob is later
        deleted during garbage collection.

        container_name:
            Name of existing container.
        blob_name:
            Name of existing blob.
        :param int timeout:
            The timeout parameter is expressed in seconds.
        '''
        _validate_not_none('container_name', container_name)
        _validate_not_none('blob_name', blob_name)
        request = HTTPRequest()
        request.method = 'DELETE'
        request.host = self._get_host()
        request.path = _get_path(container_name, blob_name)
        request.query = {'timeout': _int_or_none(timeout)}

        self._perform_request(request)
