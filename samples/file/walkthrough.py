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
import shutil
import tempfile
import uuid
from datetime import datetime

from azure.common import AzureException

from filestorage import (
    CloudStorageAccount,
    ConnectionConfigurationError,
    CopyStatus,
    DEV_ACCOUNT_KEY,
    DEV_ACCOUNT_NAME,
)
from filestorage.emulator import create_emulator_session
from filestorage.file import (
    Directory,
    FilePermissions,
    SparseFile,
)
from samples import config

logger = logging.getLogger(__name__)


def create_account(connection_string=None):
    '''
    Creates the account the walkthrough runs against. Without a connection
    string the requests are served by the in-process storage emulator.
    '''
    if connection_string:
        try:
            return CloudStorageAccount(connection_string=connection_string)
        except ConnectionConfigurationError:
            logger.error('The storage settings are not valid. Check the AccountName '
                         'and AccountKey of STORAGE_CONNECTION_STRING and run the sample again.')
            raise

    logger.info('No connection string configured, using the local storage emulator')
    session = create_emulator_session(copy_polls_until_complete=config.EMULATOR_COPY_POLLS)
    return CloudStorageAccount(DEV_ACCOUNT_NAME, DEV_ACCOUNT_KEY, request_session=session)


class FileStorageWalkthrough():

    '''
    Creates a share and a directory, uploads and downloads a file, lists the
    share, copies the file to a blob and aborts the copy, writes two ranges
    to a sparse file and lists them, then removes everything it created.
    '''

    directory_name = 'testfolder'
    range_file_name = 'rangeops.txt'
    range_file_size = 65536
    range_length = 512

    def __init__(self, account, local_folder=config.LOCAL_FOLDER,
                 test_file=config.TEST_FILE, sas_expiry=config.SAS_EXPIRY):
        self.account = account
        self.local_folder = local_folder
        self.test_file = test_file
        self.sas_expiry = sas_expiry

        # Filled in by run_all_samples
        self.share_name = None
        self.download_folder = None
        self.copy_status = None
        self.ranges = []

    def run_all_samples(self):
        self.file_service = self.account.create_file_service()
        self.blob_service = self.account.create_blob_service()

        # The container used as the copy target gets the name of the share
        self.share_name = 'demotest-' + str(uuid.uuid4())[:12]
        self.download_folder = os.path.join(tempfile.gettempdir(), self.share_name)

        self.create_share_and_directory()
        self.upload_file()
        self.list_share()
        self.download_file()
        self.copy_file_to_blob_and_abort()
        self.delete_file()
        self.write_and_list_ranges()
        self.clean_up()

    def create_share_and_directory(self):
        logger.info('Creating share %s', self.share_name)
        try:
            self.file_service.create_share(self.share_name)
        except AzureException:
            logger.error('Could not create the share. Make sure the file endpoint of the '
                         'storage account is enabled and the settings are correct, then run '
                         'the sample again.')
            raise

        logger.info('Creating directory %s', self.directory_name)
        self.file_service.create_directory(self.share_name, self.directory_name)

    def upload_file(self):
        source_file = os.path.join(self.local_folder, self.test_file)
        logger.info('Uploading %s to the share', source_file)
        if os.path.isfile(source_file):
            self.file_service.create_file_from_path(
                self.share_name, self.directory_name, self.test_file, source_file)
        else:
            logger.info('%s not found, uploading generated content instead', source_file)
            self.file_service.create_file_from_bytes(
                self.share_name, self.directory_name, self.test_file,
                b'Hello World from the file storage walkthrough.\n' * 1024)

    def list_share(self):
        logger.info('Listing the root directory of the share')
        self._log_entries(self.file_service.list_directories_and_files(self.share_name))

        logger.info('Listing directory %s', self.directory_name)
        self._log_entries(self.file_service.list_directories_and_files(
            self.share_name, self.directory_name))

    def _log_entries(self, entries):
        for entry in entries:
            kind = 'directory' if isinstance(entry, Directory) else 'file'
            logger.info('    - %s (%s)', entry.name, kind)

    def download_file(self):
        logger.info('Downloading %s to %s', self.test_file, self.download_folder)
        if not os.path.isdir(self.download_folder):
            os.makedirs(self.download_folder)

        self.file_service.get_file_to_path(
            self.share_name, self.directory_name, self.test_file,
            os.path.join(self.download_folder, self.test_file))

    def copy_file_to_blob_and_abort(self):
        # Upload again so the copy starts from fresh content
        self.upload_file()

        logger.info('Copying %s to container %s', self.test_file, self.share_name)
        self.blob_service.create_container(self.share_name)

        # The copy source must carry a signature even within the same account
        sas_token = self.file_service.generate_file_shared_access_signature(
            self.share_name, self.directory_name, self.test_file,
            permission=FilePermissions.READ,
            expiry=datetime.utcnow() + self.sas_expiry,
        )
        source_url = self.file_service.make_file_url(
            self.share_name, self.directory_name, self.test_file, sas_token=sas_token)

        copy = self.blob_service.copy_blob(self.share_name, self.test_file, source_url)
        logger.info('    Started copy, copy id = %s', copy.id)

        # Abort targets the destination blob
        blob = self.blob_service.get_blob_properties(self.share_name, self.test_file)
        copy_state = blob.properties.copy
        logger.info('    copy id = %s, status = %s', copy_state.id, copy_state.status)

        if copy_state.status == CopyStatus.PENDING:
            self.blob_service.abort_copy_blob(self.share_name, self.test_file, copy.id)
            logger.info('    Copy aborted')
            self.copy_status = CopyStatus.ABORTED
        else:
            logger.info('    Copy was not aborted, it already completed')
            self.copy_status = copy_state.status

    def delete_file(self):
        logger.info('Deleting %s from the share', self.test_file)
        self.file_service.delete_file(self.share_name, self.directory_name, self.test_file)

    def write_and_list_ranges(self):
        sparse_file = SparseFile(self.file_service, self.share_name,
                                 self.directory_name, self.range_file_name)

        if not sparse_file.exists():
            logger.info('Creating %s with room for %s bytes',
                        self.range_file_name, self.range_file_size)
            sparse_file.create(self.range_file_size)

        offset = 0
        logger.info('Writing the first range at offset %s', offset)
        sparse_file.write_range(offset, b'a' * self.range_length)
        self._download_for_inspection('__testrange.txt')

        # Leave a gap so the two ranges are listed separately
        offset += self.range_length + 1000
        logger.info('Writing the second range at offset %s', offset)
        sparse_file.write_range(offset, b'b' * self.range_length)
        self._download_for_inspection('__testrange2.txt')

        self.ranges = sparse_file.list_ranges()
        for file_range in self.ranges:
            logger.info('    --> range start = %s, end = %s', file_range.start, file_range.end)

    def _download_for_inspection(self, local_name):
        local_path = os.path.join(self.download_folder, local_name)
        logger.info('Downloading %s to %s', self.range_file_name, local_path)
        self.file_service.get_file_to_path(
            self.share_name, self.directory_name, self.range_file_name, local_path)

    def clean_up(self):
        logger.info('Removing the files, directory, share, blob and container')

        sparse_file = SparseFile(self.file_service, self.share_name,
                                 self.directory_name, self.range_file_name)
        sparse_file.delete_if_exists()

        if self.file_service.delete_directory(self.share_name, self.directory_name):
            logger.info('    Directory deleted')
        else:
            logger.info('    Directory was not deleted, it may not exist')

        self.file_service.delete_share(self.share_name)
        logger.info('    Share deleted')

        shutil.rmtree(self.download_folder, ignore_errors=True)
        logger.info('    Download folder deleted')

        if self.blob_service.exists(self.share_name, self.test_file):
            self.blob_service.delete_blob(self.share_name, self.test_file)
        self.blob_service.delete_container(self.share_name)
        logger.info('    Blob and container deleted')


if __name__ == '__main__':
    logging.basicConfig(format='%(asctime)s %(name)-20s %(levelname)-5s %(message)s',
                        level=logging.INFO)
    FileStorageWalkthrough(create_account(config.STORAGE_CONNECTION_STRING)).run_all_samples()
