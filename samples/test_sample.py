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

from filestorage import (
    CloudStorageAccount,
    ConnectionConfigurationError,
    CopyStatus,
)
from filestorage.emulator import create_emulator_session
from filestorage.file import Range
from samples import config
from samples.file import FileStorageWalkthrough
from samples.file.walkthrough import create_account


class SampleTest(unittest.TestCase):
    def setUp(self):
        super(SampleTest, self).setUp()

        # Runs against the local emulator unless a connection string is configured
        self.account = create_account(config.STORAGE_CONNECTION_STRING)
        self.local_folder = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.local_folder, ignore_errors=True)
        return super(SampleTest, self).tearDown()

    def test_file_storage_walkthrough(self):
        walkthrough = FileStorageWalkthrough(self.account, local_folder=self.local_folder)
        walkthrough.run_all_samples()

        self.assertEqual(walkthrough.ranges, [Range(0, 511), Range(1024, 2047)])
        self.assertFalse(os.path.exists(walkthrough.download_folder))
        file_service = self.account.create_file_service()
        self.assertFalse(file_service.exists(walkthrough.share_name))

    def test_file_storage_walkthrough_with_local_file(self):
        with open(os.path.join(self.local_folder, config.TEST_FILE), 'wb') as stream:
            stream.write(b'\x89PNG' + b'\x00' * 2048)

        walkthrough = FileStorageWalkthrough(self.account, local_folder=self.local_folder)
        walkthrough.run_all_samples()

        self.assertEqual(len(walkthrough.ranges), 2)

    @unittest.skipIf(config.STORAGE_CONNECTION_STRING, 'Copy timing is only known on the emulator')
    def test_file_storage_walkthrough_aborts_pending_copy(self):
        walkthrough = FileStorageWalkthrough(self.account, local_folder=self.local_folder)
        walkthrough.run_all_samples()

        self.assertEqual(walkthrough.copy_status, CopyStatus.ABORTED)

    @unittest.skipIf(config.STORAGE_CONNECTION_STRING, 'Copy timing is only known on the emulator')
    def test_file_storage_walkthrough_with_completed_copy(self):
        account = CloudStorageAccount(
            self.account.account_name, self.account.account_key,
            request_session=create_emulator_session(copy_polls_until_complete=0))

        walkthrough = FileStorageWalkthrough(account, local_folder=self.local_folder)
        walkthrough.run_all_samples()

        self.assertEqual(walkthrough.copy_status, CopyStatus.SUCCESS)

    def test_create_account_with_malformed_connection_string(self):
        with self.assertRaises(ConnectionConfigurationError):
            create_account('AccountName=devstoreaccount1;AccountKey')


if __name__ == '__main__':
    unittest.main()
