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
import unittest

from filestorage import (
    CloudStorageAccount,
    ConnectionConfigurationError,
    SharedAccessSignature,
)
from filestorage.blob import BlobService
from filestorage.file import FileService
from tests.testcase import StorageTestCase


# ------------------------------------------------------------------------------


class StorageAccountTest(StorageTestCase):
    def setUp(self):
        super(StorageAccountTest, self).setUp()
        self.account_name = self.fake_settings.STORAGE_ACCOUNT_NAME
        self.account_key = self.fake_settings.STORAGE_ACCOUNT_KEY
        self.sas_token = 'sv=2016-05-31&se=2030-04-30T02%3A23%3A26Z&sr=f&sp=r&sig=Z%2FRHIX5Xcg0Mq2rqI3OlWTjEg2tYkboXr1P9ZUXDtkk%3D'
        self.account = CloudStorageAccount(self.account_name, self.account_key)

    # --Helpers-----------------------------------------------------------------
    def validate_service(self, service, type):
        self.assertIsNotNone(service)
        self.assertIsInstance(service, type)
        self.assertEqual(service.account_name, self.account_name)
        self.assertEqual(service.account_key, self.account_key)

    def _get_connection_string(self, **overrides):
        settings = {
            'DefaultEndpointsProtocol': 'https',
            'AccountName': self.account_name,
            'AccountKey': self.account_key,
        }
        settings.update(overrides)
        return ';'.join('{}={}'.format(k, v) for k, v in settings.items() if v is not None)

    # --Test cases --------------------------------------------------------
    def test_create_file_service(self):
        # Arrange

        # Act
        service = self.account.create_file_service()

        # Assert
        self.validate_service(service, FileService)
        self.assertEqual(service.primary_endpoint,
                         self.account_name + '.file.core.windows.net')

    def test_create_blob_service(self):
        # Arrange

        # Act
        service = self.account.create_blob_service()

        # Assert
        self.validate_service(service, BlobService)
        self.assertEqual(service.primary_endpoint,
                         self.account_name + '.blob.core.windows.net')

    def test_create_service_with_request_session(self):
        # Arrange
        session = self._get_emulator_session()
        account = CloudStorageAccount(self.account_name, self.account_key,
                                      request_session=session)

        # Act
        service = account.create_file_service()

        # Assert
        self.assertIs(service.request_session, session)

    def test_create_service_no_key(self):
        # Arrange
        bad_account = CloudStorageAccount('', '')

        # Act
        with self.assertRaises(ConnectionConfigurationError):
            bad_account.create_file_service()

    def test_create_service_no_credentials(self):
        # Arrange
        bad_account = CloudStorageAccount(self.account_name)

        # Act
        with self.assertRaises(ValueError):
            bad_account.create_blob_service()

    def test_create_account_sas_token(self):
        # Arrange
        account = CloudStorageAccount(self.account_name, sas_token=self.sas_token)

        # Act
        service = account.create_file_service()

        # Assert
        self.assertEqual(service.account_name, self.account_name)
        self.assertIsNone(service.account_key)
        self.assertEqual(service.sas_token, self.sas_token)

    def test_create_shared_access_signature(self):
        # Arrange

        # Act
        sas = self.account.create_shared_access_signature()

        # Assert
        self.assertIsInstance(sas, SharedAccessSignature)
        self.assertEqual(sas.account_name, self.account_name)

    def test_create_shared_access_signature_without_key(self):
        # Arrange
        account = CloudStorageAccount(self.account_name, sas_token=self.sas_token)

        # Act
        with self.assertRaises(ValueError):
            account.create_shared_access_signature()

    # --Test cases for connection strings ----------------------------------------
    def test_account_from_connection_string(self):
        # Arrange
        connection_string = self._get_connection_string()

        # Act
        account = CloudStorageAccount(connection_string=connection_string)
        service = account.create_file_service()

        # Assert
        self.assertEqual(account.account_name, self.account_name)
        self.assertEqual(account.account_key, self.account_key)
        self.validate_service(service, FileService)
        self.assertEqual(service.protocol, 'https')

    def test_connection_string_with_endpoint_suffix(self):
        # Arrange
        connection_string = self._get_connection_string(
            DefaultEndpointsProtocol='http', EndpointSuffix='core.chinacloudapi.cn')

        # Act
        service = FileService(connection_string=connection_string)

        # Assert
        self.assertEqual(service.primary_endpoint,
                         self.account_name + '.file.core.chinacloudapi.cn')
        self.assertEqual(service.protocol, 'http')

    def test_connection_string_with_custom_endpoints(self):
        # Arrange
        connection_string = self._get_connection_string(
            FileEndpoint='https://files.contoso.com/',
            BlobEndpoint='https://blobs.contoso.com/')

        # Act
        file_service = FileService(connection_string=connection_string)
        blob_service = BlobService(connection_string=connection_string)

        # Assert
        self.assertEqual(file_service.primary_endpoint, 'files.contoso.com')
        self.assertEqual(blob_service.primary_endpoint, 'blobs.contoso.com')

    def test_connection_string_with_sas(self):
        # Arrange
        connection_string = self._get_connection_string(
            AccountKey=None, SharedAccessSignature=self.sas_token)

        # Act
        service = FileService(connection_string=connection_string)

        # Assert
        self.assertIsNone(service.account_key)
        self.assertEqual(service.sas_token, self.sas_token)

    def test_malformed_connection_strings(self):
        # Arrange
        connection_strings = [
            'this is not a connection string',
            'AccountName=;AccountKey=' + self.account_key,
            'AccountName={};UnknownSetting=1'.format(self.account_name),
            'AccountName={};AccountKey'.format(self.account_name),
            'AccountName={}'.format(self.account_name),
        ]

        # Act
        for connection_string in connection_strings:
            with self.assertRaises(ConnectionConfigurationError):
                CloudStorageAccount(connection_string=connection_string)

    def test_malformed_connection_string_is_value_error(self):
        # Arrange

        # Act
        with self.assertRaises(ValueError):
            FileService(connection_string='AccountName')


# ------------------------------------------------------------------------------
if __name__ == '__main__':
    unittest.main()
