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

# Note that we import BlobService/FileService on demand so that importing
# filestorage does not import the blob and file packages.

from ._constants import (
    DEFAULT_PROTOCOL,
    SERVICE_HOST_BASE,
)
from ._error import _validate_not_none
from .connection import _ServiceParameters
from .sharedaccesssignature import SharedAccessSignature


class CloudStorageAccount(object):

    """
    Provides a factory for creating the file and blob services with a common 
    account name and account key or sas token.  Users can either use the 
    factory or can construct the appropriate service directly.

    A connection string is parsed when the account is created, so a
    malformed one raises ConnectionConfigurationError here rather than on
    the first request.
    """

    def __init__(self, account_name=None, account_key=None, sas_token=None,
                 protocol=DEFAULT_PROTOCOL, endpoint_suffix=SERVICE_HOST_BASE,
                 connection_string=None, request_session=None):
        '''
        :param str account_name:
            The storage account name.
        :param str account_key:
            The storage account key, base64 encoded.
        :param str sas_token:
            A shared access signature token to use instead of the account key.
        :param str protocol:
            The protocol to use for requests. Defaults to https.
        :param str endpoint_suffix:
            The host base component of the url, minus the account name.
        :param str connection_string:
            If specified, this will override all other parameters besides 
            request session.
        :param requests.Session request_session:
            The session object the services use for http requests.
        '''
        if connection_string:
            # Validates the whole string, including the credentials
            params = _ServiceParameters.get_service_parameters(
                'file', connection_string=connection_string)
            account_name = params.account_name
            account_key = params.account_key
            sas_token = params.sas_token
            protocol = params.protocol

        self.account_name = account_name
        self.account_key = account_key
        self.sas_token = sas_token
        self.protocol = protocol
        self.endpoint_suffix = endpoint_suffix
        self.connection_string = connection_string
        self.request_session = request_session

    def create_file_service(self):
        from .file.fileservice import FileService
        return FileService(self.account_name, self.account_key,
                           sas_token=self.sas_token,
                           protocol=self.protocol,
                           endpoint_suffix=self.endpoint_suffix,
                           request_session=self.request_session,
                           connection_string=self.connection_string)

    def create_blob_service(self):
        from .blob.blobservice import BlobService
        return BlobService(self.account_name, self.account_key,
                           sas_token=self.sas_token,
                           protocol=self.protocol,
                           endpoint_suffix=self.endpoint_suffix,
                           request_session=self.request_session,
                           connection_string=self.connection_string)

    def create_shared_access_signature(self):
        '''
        Returns a SharedAccessSignature factory for the account. Requires the
        account key.

        :rtype: :class:`~filestorage.sharedaccesssignature.SharedAccessSignature`
        '''
        _validate_not_none('self.account_name', self.account_name)
        _validate_not_none('self.account_key', self.account_key)

        return SharedAccessSignature(self.account_name, self.account_key)
