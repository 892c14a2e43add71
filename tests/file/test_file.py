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
import os
import shutil
import tempfile
import unittest
from datetime import (
    datetime,
    timedelta,
)

from azure.common import AzureHttpError

from filestorage import (
    CopyAlreadyCompletedError,
    CopyStatus,
    RangeOutOfBoundsError,
    ResourceNotFoundError,
)
from filestorage.file import (
    ContentSettings,
    FilePermissions,
    FileService,
    Range,
)
from tests.testcase import StorageTestCase


# ------------------------------------------------------------------------------


class StorageFileTest(StorageTestCase):
    def setUp(self):
        super(StorageFileTest, self).setUp()

        self.fs = self._create_storage_service(FileService, self.settings)
        self.share_name = self.get_resource_name('utshare')
        self.directory_name = 'dir1'
        self.fs.create_share(self.share_name)
        self.fs.create_directory(self.share_name, self.directory_name)

        self.temp_folder = tempfile.mkdtemp()

    def tearDown(self):
        self.fs.delete_share(self.share_name)
        shutil.rmtree(self.temp_folder, ignore_errors=True)
        return super(StorageFileTest, self).tearDown()

    # --Helpers-----------------------------------------------------------------
    def _create_file(self, file_name='file1', data=b'hello world'):
        self.fs.create_file_from_bytes(self.share_name, self.directory_name, file_name, data)
        return file_name

    def _get_file_sas_url(self, file_name, permission=FilePermissions.READ,
                          expiry_delta=timedelta(hours=1)):
        sas_token = self.fs.generate_file_shared_access_signature(
            self.share_name, self.directory_name, file_name,
            permission=permission,
            expiry=datetime.utcnow() + expiry_delta,
        )
        return self.fs.make_file_url(self.share_name, self.directory_name, file_name,
                                     sas_token=sas_token)

    # --Test cases for files ----------------------------------------------------
    def test_create_file(self):
        # Arrange

        # Act
        self.fs.create_file(self.share_name, self.directory_name, 'file1', 1024)

        # Assert
        self.assertTrue(self.fs.exists(self.share_name, self.directory_name, 'file1'))
        file = self.fs.get_file_properties(self.share_name, self.directory_name, 'file1')
        self.assertEqual(file.properties.content_length, 1024)

    def test_create_file_in_share_root(self):
        # Arrange

        # Act
        self.fs.create_file(self.share_name, None, 'file1', 1024)

        # Assert
        self.assertTrue(self.fs.exists(self.share_name, None, 'file1'))

    def test_create_file_with_properties_and_metadata(self):
        # Arrange
        settings = ContentSettings(content_type='text/plain', content_language='fr')
        metadata = {'hello': 'world', 'number': '42'}

        # Act
        self.fs.create_file(self.share_name, self.directory_name, 'file1', 512,
                            content_settings=settings, metadata=metadata)

        # Assert
        file = self.fs.get_file_properties(self.share_name, self.directory_name, 'file1')
        self.assertEqual(file.properties.content_settings.content_type, 'text/plain')
        self.assertEqual(file.properties.content_settings.content_language, 'fr')
        self.assertDictEqual(file.metadata, metadata)

    def test_create_file_in_missing_directory(self):
        # Arrange

        # Act
        with self.assertRaises(ResourceNotFoundError):
            self.fs.create_file(self.share_name, 'missing', 'file1', 512)

    def test_file_not_exists(self):
        # Arrange

        # Act
        exists = self.fs.exists(self.share_name, self.directory_name, 'missing')

        # Assert
        self.assertFalse(exists)

    def test_get_file_properties_with_non_existing_file(self):
        # Arrange

        # Act
        with self.assertRaises(ResourceNotFoundError):
            self.fs.get_file_properties(self.share_name, self.directory_name, 'missing')

    def test_resize_file(self):
        # Arrange
        self._create_file(data=b'a' * 1024)

        # Act
        self.fs.resize_file(self.share_name, self.directory_name, 'file1', 512)

        # Assert
        file = self.fs.get_file_to_bytes(self.share_name, self.directory_name, 'file1')
        self.assertEqual(file.properties.content_length, 512)
        self.assertEqual(file.content, b'a' * 512)

    def test_delete_file(self):
        # Arrange
        self._create_file()

        # Act
        self.fs.delete_file(self.share_name, self.directory_name, 'file1')

        # Assert
        self.assertFalse(self.fs.exists(self.share_name, self.directory_name, 'file1'))

    def test_delete_file_with_non_existing_file(self):
        # Arrange

        # Act
        with self.assertRaises(ResourceNotFoundError):
            self.fs.delete_file(self.share_name, self.directory_name, 'missing')

    # --Test cases for upload and download ---------------------------------------
    def test_create_file_from_bytes_with_progress(self):
        # Arrange
        data = self.get_random_bytes(2500)
        progress = []

        def callback(current, total):
            progress.append((current, total))

        self.fs.MAX_RANGE_SIZE = 1024

        # Act
        self.fs.create_file_from_bytes(self.share_name, self.directory_name, 'file1', data,
                                       progress_callback=callback)

        # Assert
        file = self.fs.get_file_to_bytes(self.share_name, self.directory_name, 'file1')
        self.assertEqual(file.content, data)
        self.assertEqual(progress, [(0, 2500), (1024, 2500), (2048, 2500), (2500, 2500)])

    def test_create_file_from_bytes_with_index_and_count(self):
        # Arrange
        data = b'0123456789'

        # Act
        self.fs.create_file_from_bytes(self.share_name, self.directory_name, 'file1', data,
                                       index=2, count=5)

        # Assert
        file = self.fs.get_file_to_bytes(self.share_name, self.directory_name, 'file1')
        self.assertEqual(file.content, b'23456')

    def test_create_file_from_bytes_with_text(self):
        # Arrange

        # Act
        with self.assertRaises(TypeError):
            self.fs.create_file_from_bytes(self.share_name, self.directory_name, 'file1', u'text')

    def test_create_file_from_path_and_get_file_to_path(self):
        # Arrange
        data = self.get_random_bytes(4000)
        source_path = os.path.join(self.temp_folder, 'HelloWorld.png')
        target_path = os.path.join(self.temp_folder, 'downloaded.png')
        with open(source_path, 'wb') as stream:
            stream.write(data)

        # Act
        self.fs.create_file_from_path(self.share_name, self.directory_name, 'HelloWorld.png',
                                      source_path)
        file = self.fs.get_file_to_path(self.share_name, self.directory_name, 'HelloWorld.png',
                                        target_path)

        # Assert
        self.assertIsNone(file.content)
        self.assertEqual(file.properties.content_length, 4000)
        with open(target_path, 'rb') as stream:
            self.assertEqual(stream.read(), data)

    def test_get_file_to_bytes_with_range(self):
        # Arrange
        self._create_file(data=b'0123456789')

        # Act
        file = self.fs.get_file_to_bytes(self.share_name, self.directory_name, 'file1',
                                         start_range=3, end_range=6)

        # Assert
        self.assertEqual(file.content, b'3456')
        self.assertEqual(file.properties.content_range, 'bytes 3-6/10')

    def test_get_file_to_bytes_with_open_range(self):
        # Arrange
        self._create_file(data=b'0123456789')

        # Act
        file = self.fs.get_file_to_bytes(self.share_name, self.directory_name, 'file1',
                                         start_range=7)

        # Assert
        self.assertEqual(file.content, b'789')

    def test_get_file_to_bytes_with_range_past_end(self):
        # Arrange
        self._create_file(data=b'0123456789')

        # Act
        with self.assertRaises(RangeOutOfBoundsError):
            self.fs.get_file_to_bytes(self.share_name, self.directory_name, 'file1',
                                      start_range=10, end_range=20)

    def test_get_empty_file_to_bytes(self):
        # Arrange
        self.fs.create_file(self.share_name, self.directory_name, 'file1', 0)

        # Act
        file = self.fs.get_file_to_bytes(self.share_name, self.directory_name, 'file1')

        # Assert
        self.assertEqual(file.content, b'')

    # --Test cases for ranges ---------------------------------------------------
    def test_update_range_and_list_ranges(self):
        # Arrange
        self.fs.create_file(self.share_name, self.directory_name, 'file1', 4096)

        # Act
        self.fs.update_range(self.share_name, self.directory_name, 'file1',
                             b'a' * 512, 0, 511)
        self.fs.update_range(self.share_name, self.directory_name, 'file1',
                             b'b' * 512, 2048, 2559)
        ranges = self.fs.list_ranges(self.share_name, self.directory_name, 'file1')

        # Assert
        self.assertEqual(ranges, [Range(0, 511), Range(2048, 2559)])

    def test_list_ranges_in_window(self):
        # Arrange
        self.fs.create_file(self.share_name, self.directory_name, 'file1', 4096)
        self.fs.update_range(self.share_name, self.directory_name, 'file1',
                             b'a' * 512, 0, 511)
        self.fs.update_range(self.share_name, self.directory_name, 'file1',
                             b'b' * 512, 2048, 2559)

        # Act
        ranges = self.fs.list_ranges(self.share_name, self.directory_name, 'file1',
                                     start_range=1024, end_range=4095)

        # Assert
        self.assertEqual(ranges, [Range(2048, 2559)])

    def test_clear_range(self):
        # Arrange
        self.fs.create_file(self.share_name, self.directory_name, 'file1', 2048)
        self.fs.update_range(self.share_name, self.directory_name, 'file1',
                             b'a' * 2048, 0, 2047)

        # Act
        self.fs.clear_range(self.share_name, self.directory_name, 'file1', 512, 1535)

        # Assert
        ranges = self.fs.list_ranges(self.share_name, self.directory_name, 'file1')
        self.assertEqual(ranges, [Range(0, 511), Range(1536, 2047)])

    def test_list_ranges_with_non_existing_file(self):
        # Arrange

        # Act
        with self.assertRaises(ResourceNotFoundError):
            self.fs.list_ranges(self.share_name, self.directory_name, 'missing')

    # --Test cases for copy -----------------------------------------------------
    def test_copy_file_with_sas_source(self):
        # Arrange
        self._create_file(data=b'copy me')
        source_url = self._get_file_sas_url('file1')

        # Act
        copy = self.fs.copy_file(self.share_name, self.directory_name, 'file2', source_url)

        # Assert
        self.assertIsNotNone(copy.id)
        self.assertEqual(copy.status, CopyStatus.SUCCESS)
        file = self.fs.get_file_to_bytes(self.share_name, self.directory_name, 'file2')
        self.assertEqual(file.content, b'copy me')
        self.assertEqual(file.properties.copy.id, copy.id)
        self.assertEqual(file.properties.copy.status, CopyStatus.SUCCESS)

    def test_copy_file_without_sas_source(self):
        # Arrange
        self._create_file()
        source_url = self.fs.make_file_url(self.share_name, self.directory_name, 'file1')

        # Act
        with self.assertRaises(ResourceNotFoundError) as context:
            self.fs.copy_file(self.share_name, self.directory_name, 'file2', source_url)

        # Assert
        self.assertEqual(context.exception.error_code, 'CannotVerifyCopySource')

    def test_copy_file_with_expired_sas_source(self):
        # Arrange
        self._create_file()
        source_url = self._get_file_sas_url('file1', expiry_delta=timedelta(hours=-1))

        # Act
        with self.assertRaises(ResourceNotFoundError):
            self.fs.copy_file(self.share_name, self.directory_name, 'file2', source_url)

    def test_abort_copy_file(self):
        # Arrange
        self.set_copy_polls(2)
        self._create_file(data=b'copy me')
        source_url = self._get_file_sas_url('file1')
        copy = self.fs.copy_file(self.share_name, self.directory_name, 'file2', source_url)
        pending = self.fs.get_file_properties(self.share_name, self.directory_name, 'file2')

        # Act
        self.fs.abort_copy_file(self.share_name, self.directory_name, 'file2', copy.id)

        # Assert
        self.assertEqual(copy.status, CopyStatus.PENDING)
        self.assertEqual(pending.properties.copy.status, CopyStatus.PENDING)
        file = self.fs.get_file_properties(self.share_name, self.directory_name, 'file2')
        self.assertEqual(file.properties.copy.status, CopyStatus.ABORTED)
        self.assertEqual(file.properties.content_length, 0)

    def test_abort_copy_file_after_completion(self):
        # Arrange
        self._create_file()
        source_url = self._get_file_sas_url('file1')
        copy = self.fs.copy_file(self.share_name, self.directory_name, 'file2', source_url)

        # Act
        with self.assertRaises(CopyAlreadyCompletedError) as context:
            self.fs.abort_copy_file(self.share_name, self.directory_name, 'file2', copy.id)

        # Assert
        self.assertIsInstance(context.exception, AzureHttpError)
        self.assertEqual(context.exception.status_code, 409)

    # --Test cases for shared access signatures ----------------------------------
    def test_read_file_with_sas(self):
        # Arrange
        self._create_file(data=b'secret')
        sas_token = self.fs.generate_file_shared_access_signature(
            self.share_name, self.directory_name, 'file1',
            permission=FilePermissions.READ,
            expiry=datetime.utcnow() + timedelta(hours=1),
        )
        service = self._create_storage_service_with_sas(FileService, sas_token)

        # Act
        file = service.get_file_to_bytes(self.share_name, self.directory_name, 'file1')

        # Assert
        self.assertEqual(file.content, b'secret')

    def test_delete_file_with_read_only_sas(self):
        # Arrange
        self._create_file()
        sas_token = self.fs.generate_file_shared_access_signature(
            self.share_name, self.directory_name, 'file1',
            permission=FilePermissions.READ,
            expiry=datetime.utcnow() + timedelta(hours=1),
        )
        service = self._create_storage_service_with_sas(FileService, sas_token)

        # Act
        with self.assertRaises(AzureHttpError) as context:
            service.delete_file(self.share_name, self.directory_name, 'file1')

        # Assert
        self.assertEqual(context.exception.status_code, 403)
        self.assertTrue(self.fs.exists(self.share_name, self.directory_name, 'file1'))


# ------------------------------------------------------------------------------
if __name__ == '__main__':
    unittest.main()
