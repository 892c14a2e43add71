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
from urllib.parse import urlparse

from ._constants import (
    SERVICE_HOST_BASE,
    DEFAULT_PROTOCOL,
)
from ._error import (
    _ERROR_STORAGE_MISSING_INFO,
    _ERROR_CONNECTION_STRING_MALFORMED,
    _ERROR_CONNECTION_STRING_KEY,
    ConnectionConfigurationError,
)

_CONNECTION_ENDPOINTS = {
    'blob': 'BlobEndpoint',
    'file': 'FileEndpoint',
}

_CONNECTION_STRING_KEYS = (
    'DefaultEndpointsProtocol',
    'AccountName',
    'AccountKey',
    'SharedAccessSignature',
    'EndpointSuffix',
    'BlobEndpoint',
    'FileEndpoint',
)


class _ServiceParameters(object):
    def __init__(self, service, account_name=None, account_key=None, sas_token=None,
                 protocol=DEFAULT_PROTOCOL, endpoint_suffix=SERVICE_HOST_BASE,
                 custom_domain=None):

        self.account_name = account_name
        self.account_key = account_key
        self.sas_token = sas_token
        self.protocol = protocol or DEFAULT_PROTOCOL

        if custom_domain:
            parsed_url = urlparse(custom_domain)
            self.primary_endpoint = parsed_url.netloc + parsed_url.path.rstrip('/')
            self.protocol = parsed_url.scheme or self.protocol
        else:
            if not self.account_name:
                raise ConnectionConfigurationError(_ERROR_STORAGE_MISSING_INFO)
            self.primary_endpoint = '{}.{}.{}'.format(
                self.account_name, service, endpoint_suffix or SERVICE_HOST_BASE)

    @staticmethod
    def get_service_parameters(service, account_name=None, account_key=None, sas_token=None,
                               protocol=None, endpoint_suffix=None, custom_domain=None,
                               request_session=None, connection_string=None):
        if connection_string:
            params = _ServiceParameters._from_connection_string(connection_string, service)
        elif account_name:
            params = _ServiceParameters(service,
                                        account_name=account_name,
                                        account_key=account_key,
                                        sas_token=sas_token,
                                        protocol=protocol,
                                        endpoint_suffix=endpoint_suffix,
                                        custom_domain=custom_domain)
        else:
            raise ConnectionConfigurationError(_ERROR_STORAGE_MISSING_INFO)

        params.request_session = request_session
        return params

    @staticmethod
    def _parse_connection_string(connection_string):
        # Split into key=value pairs removing empties, then split the pairs into a dict
        config = {}
        for segment in connection_string.split(';'):
            segment = segment.strip()
            if not segment:
                continue
            key, sep, value = segment.partition('=')
            if not sep or not key or not value:
                raise ConnectionConfigurationError(_ERROR_CONNECTION_STRING_MALFORMED.format(segment))
            if key not in _CONNECTION_STRING_KEYS:
                raise ConnectionConfigurationError(_ERROR_CONNECTION_STRING_KEY.format(key))
            config[key] = value

        return config

    @staticmethod
    def _from_connection_string(connection_string, service):
        config = _ServiceParameters._parse_connection_string(connection_string)

        # Authentication
        account_name = config.get('AccountName')
        account_key = config.get('AccountKey')
        sas_token = config.get('SharedAccessSignature')

        if not (account_key or sas_token):
            raise ConnectionConfigurationError(_ERROR_STORAGE_MISSING_INFO)

        return _ServiceParameters(service,
                                  account_name=account_name,
                                  account_key=account_key,
                                  sas_token=sas_token,
                                  protocol=config.get('DefaultEndpointsProtocol'),
                                  endpoint_suffix=config.get('EndpointSuffix'),
                                  custom_domain=config.get(_CONNECTION_ENDPOINTS[service]))
