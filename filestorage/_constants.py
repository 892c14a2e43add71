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
import platform
from datetime import timedelta

__author__ = 'Microsoft Corp. <ptvshelp@microsoft.com>'
__version__ = '0.1.0'

# x-ms-version for storage service.
X_MS_VERSION = '2016-05-31'

# UserAgent string sample: 'filestorage/0.1.0 (Python CPython 3.11.4; Linux 6.1)'
_USER_AGENT_STRING = 'filestorage/{} (Python {} {}; {} {})'.format(
    __version__, platform.python_implementation(), platform.python_version(),
    platform.system(), platform.release())

# Live ServiceClient URLs
SERVICE_HOST_BASE = 'core.windows.net'
DEFAULT_PROTOCOL = 'https'

# Socket timeout in seconds
_SOCKET_TIMEOUT = 20

# Files are stored and reported by the service in 512 byte units. Ranges
# returned from list_ranges always start and end on these boundaries.
FILE_RANGE_ALIGNMENT = 512

# Maximum size of a single range write
FILE_MAX_RANGE_SIZE = 4 * 1024 * 1024

# Validity window of the signed urls issued by the samples
DEFAULT_SAS_EXPIRY = timedelta(hours=24)

# Well known account of the local storage emulator
DEV_ACCOUNT_NAME = 'devstoreaccount1'
DEV_ACCOUNT_KEY = 'Eby8vdM02xNOcqFlqUwJPLlmEtlCDXJ1OUzFT50uSRZ6IFsuFq2UVErCz4I6tq/K1SZFPTOtr/KBHBeksoGMGw=='
