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
from datetime import timedelta

# Connection string of the storage account to run the samples against, in the
# form DefaultEndpointsProtocol=https;AccountName=...;AccountKey=...
# When not set the samples run against the in-process storage emulator.
STORAGE_CONNECTION_STRING = os.environ.get('STORAGE_CONNECTION_STRING')

# Lifetime of the signed url used as the copy source
SAS_EXPIRY = timedelta(hours=int(os.environ.get('SAS_EXPIRY_HOURS', '24')))

# Folder holding the file to upload
LOCAL_FOLDER = os.environ.get('LOCAL_FOLDER', '.')
TEST_FILE = 'HelloWorld.png'

# Property reads that see an emulated copy as pending, so that the copy can
# still be aborted after its status is fetched once.
EMULATOR_COPY_POLLS = 2
