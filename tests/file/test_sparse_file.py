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
from unittest import mock

from filestorage import (
    FILE_RANGE_ALIGNMENT,
    InvalidSizeError,
    RangeOutOfBoundsError,
    ResourceNotFoundError,
)
from filestorage.file import (
    FileService,
    Range,
    SparseFile,
)
from tests.testcase import StorageTestCase

TEST_FILE_SIZE = 65536


# ------------------------------------------------------------------------------


class StorageSparseFileTest(StorageTestCase):
    def setUp(self):
        super(StorageSparseFileTest, self).setUp()

        self.fs = self._create_storage_service(FileService, self.settings)
        self.share_name = self.get_resource_name('utshare')
        self.directory_name = 'dir1'
        self.fs.create_share(self.share_name)
        self.fs.create_directory(self.share_name, self.directory_name)

    def tearDown(self):
        self.fs.delete_share(self.share_name)
        return super(StorageSparseFileTest, self).tearDown()

    # --Helpers-----------------------------------------------------------------
    def _get_sparse_file(self, file_name='rangeops.txt'):
        return SparseFile(self.fs, self.share_name, self.directory_name, file_name)

    def _create_sparse_file(self, file_name='rangeops.txt', max_size=TEST_FILE_SIZE):
        sparse_file = self._get_sparse_file(file_name)
        sparse_file.create(max_size)
        return sparse_file

    # --Test cases for create ---------------------------------------------------
    def test_create_sparse_file(self):
        # Arrange
        sparse_file = self._get_sparse_file()

        # Act
        sparse_file.create(TEST_FILE_SIZE)

        # Assert
        props = self.fs.get_file_properties(self.share_name, self.directory_name, 'rangeops.txt')
        self.assertEqual(props.properties.content_length, TEST_FILE_SIZE)
        self.assertEqual(sparse_file.max_size, TEST_FILE_SIZE)
        self.assertEqual(sparse_file.list_ranges(), [])

    def test_create_sparse_file_with_non_positive_size(self):
        # Arrange
        sparse_file = self._get_sparse_file()

        # Act
        for max_size in (0, -1, -TEST_FILE_SIZE):
            with self.assertRaises(InvalidSizeError):
                sparse_file.create(max_size)

        # Assert
        self.assertFalse(sparse_file.exists())

    def test_create_sparse_file_size_error_is_value_error(self):
        # Arrange
        sparse_file = self._get_sparse_file()

        # Act
        with self.assertRaises(ValueError):
            sparse_file.create(0)

    def test_constructing_handle_sends_no_request(self):
        # Arrange
        fs = mock.Mock(spec=FileService)

        # Act
        sparse_file = SparseFile(fs, self.share_name, self.directory_name, 'rangeops.txt')

        # Assert
        self.assertEqual(fs.method_calls, [])
        self.assertEqual(sparse_file.alignment, FILE_RANGE_ALIGNMENT)

    def test_max_size_is_fetched_once_for_existing_file(self):
        # Arrange
        self._create_sparse_file()
        sparse_file = self._get_sparse_file()

        # Act
        with mock.patch.object(self.fs, 'get_file_properties',
                               wraps=self.fs.get_file_properties) as get_properties:
            first = sparse_file.max_size
            second = sparse_file.max_size

        # Assert
        self.assertEqual(first, TEST_FILE_SIZE)
        self.assertEqual(second, TEST_FILE_SIZE)
        self.assertEqual(get_properties.call_count, 1)

    # --Test cases for write and read -------------------------------------------
    def test_write_and_read_range(self):
        # Arrange
        sparse_file = self._create_sparse_file()
        data = self.get_random_bytes(512)

        # Act
        sparse_file.write_range(0, data)

        # Assert
        self.assertEqual(sparse_file.read_range(0, 512), data)

    def test_write_and_read_unaligned_range(self):
        # Arrange
        sparse_file = self._create_sparse_file()
        data = self.get_random_bytes(300)

        # Act
        sparse_file.write_range(700, data)

        # Assert
        self.assertEqual(sparse_file.read_range(700, 300), data)
        self.assertEqual(sparse_file.read_range(650, 400),
                         b'\x00' * 50 + data + b'\x00' * 50)

    def test_read_never_written_bytes_returns_zero(self):
        # Arrange
        sparse_file = self._create_sparse_file()
        sparse_file.write_range(0, b'a' * 512)

        # Act
        data = sparse_file.read_range(512, 2048)

        # Assert
        self.assertEqual(data, b'\x00' * 2048)

    def test_read_range_at_end_of_file(self):
        # Arrange
        sparse_file = self._create_sparse_file(max_size=1000)
        sparse_file.write_range(990, b'z' * 10)

        # Act
        data = sparse_file.read_range(980, 20)

        # Assert
        self.assertEqual(data, b'\x00' * 10 + b'z' * 10)

    def test_overlapping_writes_overwrite(self):
        # Arrange
        sparse_file = self._create_sparse_file()
        sparse_file.write_range(0, b'a' * 1024)

        # Act
        sparse_file.write_range(500, b'b' * 100)

        # Assert
        self.assertEqual(sparse_file.read_range(0, 1024),
                         b'a' * 500 + b'b' * 100 + b'a' * 424)
        self.assertEqual(sparse_file.list_ranges(), [Range(0, 1023)])

    def test_write_range_larger_than_max_range_size(self):
        # Arrange
        sparse_file = self._create_sparse_file()
        data = self.get_random_bytes(3000)

        # Act
        with mock.patch('filestorage.file.sparsefile.FILE_MAX_RANGE_SIZE', 1024), \
                mock.patch.object(self.fs, 'update_range',
                                  wraps=self.fs.update_range) as update_range:
            sparse_file.write_range(100, data)

        # Assert
        self.assertEqual(update_range.call_count, 3)
        self.assertEqual(sparse_file.read_range(100, 3000), data)

    def test_write_range_out_of_bounds(self):
        # Arrange
        sparse_file = self._create_sparse_file(max_size=2048)

        # Act
        with self.assertRaises(RangeOutOfBoundsError):
            sparse_file.write_range(2000, b'a' * 100)
        with self.assertRaises(RangeOutOfBoundsError):
            sparse_file.write_range(-1, b'a')

        # Assert
        self.assertEqual(sparse_file.list_ranges(), [])

    def test_write_range_up_to_max_size(self):
        # Arrange
        sparse_file = self._create_sparse_file(max_size=2048)

        # Act
        sparse_file.write_range(2000, b'a' * 48)

        # Assert
        self.assertEqual(sparse_file.list_ranges(), [Range(1536, 2047)])

    def test_write_range_out_of_bounds_fetches_size(self):
        # Arrange
        self._create_sparse_file(max_size=1024)
        sparse_file = self._get_sparse_file()

        # Act
        with self.assertRaises(RangeOutOfBoundsError):
            sparse_file.write_range(1000, b'a' * 100)

        # Assert
        self.assertEqual(sparse_file.max_size, 1024)

    def test_service_rejects_range_out_of_bounds(self):
        # Arrange
        self._create_sparse_file(max_size=1024)

        # Act
        with self.assertRaises(RangeOutOfBoundsError) as context:
            self.fs.update_range(self.share_name, self.directory_name, 'rangeops.txt',
                                 b'a' * 100, 1000, 1099)

        # Assert
        self.assertEqual(context.exception.status_code, 416)

    def test_write_empty_range(self):
        # Arrange
        sparse_file = self._create_sparse_file()

        # Act
        with self.assertRaises(ValueError):
            sparse_file.write_range(0, b'')

    def test_write_range_with_text(self):
        # Arrange
        sparse_file = self._create_sparse_file()

        # Act
        with self.assertRaises(TypeError):
            sparse_file.write_range(0, u'text')

    def test_read_range_out_of_bounds(self):
        # Arrange
        sparse_file = self._create_sparse_file(max_size=1024)

        # Act
        with self.assertRaises(RangeOutOfBoundsError):
            sparse_file.read_range(1000, 25)

    # --Test cases for list_ranges ----------------------------------------------
    def test_list_ranges_of_two_separate_writes(self):
        # Arrange
        sparse_file = self._create_sparse_file()

        # Act
        sparse_file.write_range(0, b'a' * 512)
        sparse_file.write_range(512 + 1000, b'b' * 512)
        ranges = sparse_file.list_ranges()

        # Assert
        self.assertEqual(ranges, [Range(0, 511), Range(1024, 2047)])

    def test_list_ranges_rounds_to_alignment(self):
        # Arrange
        sparse_file = self._create_sparse_file()

        # Act
        sparse_file.write_range(2000, b'a' * 1001)
        ranges = sparse_file.list_ranges()

        # Assert
        self.assertEqual(ranges, [Range(1536, 3071)])
        for file_range in ranges:
            self.assertEqual(file_range.start % FILE_RANGE_ALIGNMENT, 0)
            self.assertEqual((file_range.end + 1) % FILE_RANGE_ALIGNMENT, 0)

    def test_list_ranges_merges_touching_writes(self):
        # Arrange
        sparse_file = self._create_sparse_file()

        # Act
        sparse_file.write_range(0, b'a' * 100)
        sparse_file.write_range(600, b'b' * 100)
        ranges = sparse_file.list_ranges()

        # Assert
        self.assertEqual(ranges, [Range(0, 1023)])

    def test_list_ranges_keeps_writes_one_unit_apart(self):
        # Arrange
        sparse_file = self._create_sparse_file()

        # Act
        sparse_file.write_range(0, b'a' * 512)
        sparse_file.write_range(1024, b'b' * 512)
        ranges = sparse_file.list_ranges()

        # Assert
        self.assertEqual(ranges, [Range(0, 511), Range(1024, 1535)])

    def test_list_ranges_after_clear_range(self):
        # Arrange
        sparse_file = self._create_sparse_file()
        sparse_file.write_range(0, b'a' * 1024)

        # Act
        sparse_file.clear_range(0, 512)

        # Assert
        self.assertEqual(sparse_file.list_ranges(), [Range(512, 1023)])
        self.assertEqual(sparse_file.read_range(0, 1024), b'\x00' * 512 + b'a' * 512)

    def test_list_ranges_after_partial_clear_of_zero_write(self):
        # Arrange
        sparse_file = self._create_sparse_file()
        sparse_file.write_range(0, b'\x00' * 512)

        # Act
        sparse_file.clear_range(0, 1)

        # Assert
        self.assertEqual(sparse_file.list_ranges(), [Range(0, 511)])
        self.assertEqual(sparse_file.read_range(0, 512), b'\x00' * 512)

    def test_list_ranges_after_partial_clear(self):
        # Arrange
        sparse_file = self._create_sparse_file()
        sparse_file.write_range(0, b'a' * 512)

        # Act
        sparse_file.clear_range(0, 511)

        # Assert
        self.assertEqual(sparse_file.list_ranges(), [Range(0, 511)])
        self.assertEqual(sparse_file.read_range(510, 2), b'\x00a')

    # --Test cases for delete ---------------------------------------------------
    def test_delete_if_exists(self):
        # Arrange
        sparse_file = self._create_sparse_file()
        sparse_file.write_range(0, b'a' * 512)

        # Act
        deleted = sparse_file.delete_if_exists()

        # Assert
        self.assertTrue(deleted)
        self.assertFalse(sparse_file.exists())

    def test_delete_if_exists_with_missing_file(self):
        # Arrange
        sparse_file = self._get_sparse_file()

        # Act
        deleted = sparse_file.delete_if_exists()

        # Assert
        self.assertFalse(deleted)

    def test_deleted_file_behaves_as_never_created(self):
        # Arrange
        sparse_file = self._create_sparse_file()
        sparse_file.write_range(0, b'a' * 512)
        sparse_file.delete_if_exists()

        # Act
        with self.assertRaises(ResourceNotFoundError):
            sparse_file.list_ranges()
        with self.assertRaises(ResourceNotFoundError):
            sparse_file.read_range(0, 512)

        # Assert
        self.assertFalse(sparse_file.delete_if_exists())

    def test_recreate_after_delete_has_no_ranges(self):
        # Arrange
        sparse_file = self._create_sparse_file()
        sparse_file.write_range(0, b'a' * 512)
        sparse_file.delete_if_exists()

        # Act
        sparse_file.create(1024)

        # Assert
        self.assertEqual(sparse_file.list_ranges(), [])
        self.assertEqual(sparse_file.read_range(0, 512), b'\x00' * 512)

    # --Test cases for url ------------------------------------------------------
    def test_url(self):
        # Arrange
        sparse_file = self._get_sparse_file()

        # Act
        url = sparse_file.url()
        url_with_sas = sparse_file.url(sas_token='sv=2016-05-31&sig=abc')

        # Assert
        self.assertTrue(url.endswith('/{}/dir1/rangeops.txt'.format(self.share_name)))
        self.assertEqual(url_with_sas, url + '?sv=2016-05-31&sig=abc')


# ------------------------------------------------------------------------------
if __name__ == '__main__':
    unittest.main()
