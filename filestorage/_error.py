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
from azure.common import (
    AzureException,
    AzureHttpError,
    AzureConflictHttpError,
    AzureMissingResourceHttpError,
)

from xml.etree import ElementTree as ETree

_ERROR_STORAGE_MISSING_INFO = \
    'You need to provide an account name and either an account_key or sas_token when creating a storage service.'
_ERROR_CONNECTION_STRING_MALFORMED = \
    'Connection string is malformed. Expected semicolon separated Key=Value pairs, got segment: {0}'
_ERROR_CONNECTION_STRING_KEY = \
    'Connection string contains an unknown setting: {0}'
_ERROR_ACCOUNT_KEY_NOT_BASE64 = 'The account key is not valid base64 data.'
_ERROR_VALUE_NONE = '{0} should not be None.'
_ERROR_VALUE_NEGATIVE = '{0} should not be negative.'
_ERROR_VALUE_SHOULD_BE_BYTES = '{0} should be of type bytes.'
_ERROR_INVALID_FILE_SIZE = 'The maximum file size must be greater than 0, got {0}.'
_ERROR_RANGE_OUT_OF_BOUNDS = \
    'The range [{0}, {1}] is outside of the file address space [0, {2}).'
_ERROR_EMPTY_RANGE = 'A range must contain at least one byte.'


class InvalidSizeError(AzureException, ValueError):
    '''
    Raised when a file is created with a maximum size that is not positive.
    '''


class ConnectionConfigurationError(AzureException, ValueError):
    '''
    Raised when the account settings (a connection string, account name,
    account key or sas token) cannot be used to construct a service.
    '''


class RangeOutOfBoundsError(AzureHttpError, ValueError):
    '''
    Raised when a range does not fit in the address space of the file.
    '''


class ResourceNotFoundError(AzureMissingResourceHttpError):
    '''
    Raised when a share, directory, file, container or blob that is required
    to exist does not.
    '''


class DirectoryNotEmptyError(AzureConflictHttpError):
    '''
    Raised when deleting a directory that still holds files or
    subdirectories.
    '''


class CopyAlreadyCompletedError(AzureConflictHttpError):
    '''
    Raised when aborting a copy that is no longer pending.
    '''


# Service error codes that map to a more specific exception than the
# status code alone would give.
_ERROR_CODE_TO_EXCEPTION = {
    'DirectoryNotEmpty': DirectoryNotEmptyError,
    'NoPendingCopyOperation': CopyAlreadyCompletedError,
    'InvalidRange': RangeOutOfBoundsError,
}


def _dont_fail_on_exist(error):
    ''' don't throw exception if the resource exists.
    This is called by create_* APIs with fail_on_exist=False'''
    if isinstance(error, AzureConflictHttpError):
        return False
    else:
        raise error


def _dont_fail_not_exist(error):
    ''' don't throw exception if the resource doesn't exist.
    This is called by create_* APIs with fail_on_exist=False'''
    if isinstance(error, AzureMissingResourceHttpError):
        return False
    else:
        raise error


def _get_error_code(http_error):
    for name, value in http_error.respheader.items():
        if name.lower() == 'x-ms-error-code':
            return value

    if http_error.respbody:
        try:
            root = ETree.fromstring(http_error.respbody)
        except ETree.ParseError:
            return None
        code = root.find('Code')
        if code is not None:
            return code.text

    return None


def _storage_error_handler(http_error):
    ''' Simple error handler for storage service. '''
    error_code = _get_error_code(http_error)

    message = str(http_error)
    if error_code:
        message += ' ErrorCode: ' + error_code
    if http_error.respbody:
        message += '\n' + http_error.respbody.decode('utf-8-sig')

    error_class = _ERROR_CODE_TO_EXCEPTION.get(error_code)
    if error_class is None and http_error.status == 404:
        error_class = ResourceNotFoundError

    if error_class is None:
        error = AzureHttpError(message, http_error.status)
    else:
        error = error_class(message, http_error.status)
    error.error_code = error_code
    raise error


def _validate_type_bytes(param_name, param):
    if not isinstance(param, bytes):
        raise TypeError(_ERROR_VALUE_SHOULD_BE_BYTES.format(param_name))


def _validate_not_none(param_name, param):
    if param is None:
        raise ValueError(_ERROR_VALUE_NONE.format(param_name))


def _validate_file_size(max_size):
    if max_size is None or max_size <= 0:
        raise InvalidSizeError(_ERROR_INVALID_FILE_SIZE.format(max_size))


def _validate_range_in_bounds(offset, length, max_size):
    if length <= 0:
        raise ValueError(_ERROR_EMPTY_RANGE)
    if offset < 0 or offset + length > max_size:
        raise RangeOutOfBoundsError(
            _ERROR_RANGE_OUT_OF_BOUNDS.format(offset, offset + length - 1, max_size),
            416)
