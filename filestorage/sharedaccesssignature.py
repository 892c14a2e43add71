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
from ._common_conversion import _sign_string
from ._constants import X_MS_VERSION
from ._serialization import (
    url_quote,
    _to_utc_string,
)


class ResourceType(object):
    RESOURCE_BLOB = 'b'
    RESOURCE_CONTAINER = 'c'
    RESOURCE_FILE = 'f'
    RESOURCE_SHARE = 's'


class QueryStringConstants(object):
    SIGNED_SIGNATURE = 'sig'
    SIGNED_PERMISSION = 'sp'
    SIGNED_START = 'st'
    SIGNED_EXPIRY = 'se'
    SIGNED_RESOURCE = 'sr'
    SIGNED_IDENTIFIER = 'si'
    SIGNED_IP = 'sip'
    SIGNED_PROTOCOL = 'spr'
    SIGNED_VERSION = 'sv'
    SIGNED_CACHE_CONTROL = 'rscc'
    SIGNED_CONTENT_DISPOSITION = 'rscd'
    SIGNED_CONTENT_ENCODING = 'rsce'
    SIGNED_CONTENT_LANGUAGE = 'rscl'
    SIGNED_CONTENT_TYPE = 'rsct'


class SharedAccessSignature(object):

    '''
    Provides a factory for creating file and blob shares access
    signature tokens with a common account name and account key.  Users can either
    use the factory or can construct the appropriate service and use the
    generate_*_shared_access_signature method directly.
    '''

    def __init__(self, account_name, account_key):
        '''
        :param str account_name:
            The storage account name used to generate the shared access signatures.
        :param str account_key:
            The access key to generate the shares access signatures.
        '''
        self.account_name = account_name
        self.account_key = account_key

    def generate_file(self, share_name, directory_name=None, file_name=None,
                      permission=None, expiry=None, start=None, id=None,
                      ip=None, protocol=None, cache_control=None,
                      content_disposition=None, content_encoding=None,
                      content_language=None, content_type=None):
        '''
        Generates a shared access signature for the file.
        Use the returned signature with the sas_token parameter of FileService,
        or append it to the url of the file (for example as the source of a
        copy operation).

        :param str share_name:
            Name of share.
        :param str directory_name:
            Name of directory. SAS tokens cannot be created for directories, so 
            this parameter should only be present if file_name is provided.
        :param str file_name:
            Name of file.
        :param FilePermissions permission:
            The permissions associated with the shared access signature. The 
            user is restricted to operations allowed by the permissions.
            Permissions must be ordered read, create, write, delete, list.
            Required unless an id is given referencing a stored access policy 
            which contains this field.
        :param expiry:
            The time at which the shared access signature becomes invalid. 
            Azure will always convert values to UTC. If a date is passed in 
            without timezone info, it is assumed to be UTC.
        :type expiry: datetime or str
        :param start:
            The time at which the shared access signature becomes valid. If 
            omitted, start time for this call is assumed to be the time when the 
            storage service receives the request.
        :type start: datetime or str
        :param str id:
            A unique value up to 64 characters in length that correlates to a 
            stored access policy.
        :param str ip:
            Specifies an IP address or a range of IP addresses from which to accept requests.
        :param str protocol:
            Specifies the protocol permitted for a request made. Possible values are
            both HTTPS and HTTP (https,http) or HTTPS only (https).
        :param str cache_control:
            Response header value for Cache-Control when resource is accessed
            using this shared access signature.
        :param str content_disposition:
            Response header value for Content-Disposition when resource is accessed
            using this shared access signature.
        :param str content_encoding:
            Response header value for Content-Encoding when resource is accessed
            using this shared access signature.
        :param str content_language:
            Response header value for Content-Language when resource is accessed
            using this shared access signature.
        :param str content_type:
            Response header value for Content-Type when resource is accessed
            using this shared access signature.
        :return: A query string, without the leading '?'.
        :rtype: str
        '''
        resource_path = share_name
        if directory_name is not None:
            resource_path += '/' + directory_name
        if file_name is not None:
            resource_path += '/' + file_name

        return self.generate_signed_query_string(
            'file', resource_path, ResourceType.RESOURCE_FILE,
            permission=permission, expiry=expiry, start=start, id=id,
            ip=ip, protocol=protocol, cache_control=cache_control,
            content_disposition=content_disposition,
            content_encoding=content_encoding,
            content_language=content_language, content_type=content_type)

    def generate_share(self, share_name, permission=None, expiry=None,
                       start=None, id=None, ip=None, protocol=None):
        '''
        Generates a shared access signature for the share.
        See generate_file for a description of the parameters.
        '''
        return self.generate_signed_query_string(
            'file', share_name, ResourceType.RESOURCE_SHARE,
            permission=permission, expiry=expiry, start=start, id=id,
            ip=ip, protocol=protocol)

    def generate_blob(self, container_name, blob_name, permission=None,
                      expiry=None, start=None, id=None, ip=None, protocol=None):
        '''
        Generates a shared access signature for the blob.
        See generate_file for a description of the parameters.
        '''
        resource_path = container_name + '/' + blob_name
        return self.generate_signed_query_string(
            'blob', resource_path, ResourceType.RESOURCE_BLOB,
            permission=permission, expiry=expiry, start=start, id=id,
            ip=ip, protocol=protocol)

    def generate_container(self, container_name, permission=None, expiry=None,
                           start=None, id=None, ip=None, protocol=None):
        '''
        Generates a shared access signature for the container.
        See generate_file for a description of the parameters.
        '''
        return self.generate_signed_query_string(
            'blob', container_name, ResourceType.RESOURCE_CONTAINER,
            permission=permission, expiry=expiry, start=start, id=id,
            ip=ip, protocol=protocol)

    def generate_signed_query_string(self, service, path, resource_type,
                                     permission=None, expiry=None, start=None,
                                     id=None, ip=None, protocol=None,
                                     cache_control=None, content_disposition=None,
                                     content_encoding=None, content_language=None,
                                     content_type=None):
        '''
        Generates the query string for path, resource type and shared access
        parameters.
        '''
        query_dict = self._generate_signed_query_dict(
            service,
            path,
            resource_type,
            permission,
            expiry,
            start,
            id,
            ip,
            protocol,
            cache_control,
            content_disposition,
            content_encoding,
            content_language,
            content_type,
        )
        return '&'.join(['{0}={1}'.format(n, url_quote(v, safe='')) for n, v in query_dict.items()
                         if v is not None])

    def _generate_signed_query_dict(self, service, path, resource_type,
                                    permission=None, expiry=None, start=None,
                                    id=None, ip=None, protocol=None,
                                    cache_control=None, content_disposition=None,
                                    content_encoding=None, content_language=None,
                                    content_type=None):
        query_dict = {}

        def add_query(name, val):
            if val:
                query_dict[name] = val

        start = _to_utc_string(start)
        expiry = _to_utc_string(expiry)
        if permission is not None:
            permission = str(permission)

        add_query(QueryStringConstants.SIGNED_START, start)
        add_query(QueryStringConstants.SIGNED_EXPIRY, expiry)
        add_query(QueryStringConstants.SIGNED_PERMISSION, permission)
        add_query(QueryStringConstants.SIGNED_IDENTIFIER, id)
        add_query(QueryStringConstants.SIGNED_IP, ip)
        add_query(QueryStringConstants.SIGNED_PROTOCOL, protocol)
        add_query(QueryStringConstants.SIGNED_VERSION, X_MS_VERSION)
        add_query(QueryStringConstants.SIGNED_RESOURCE, resource_type)
        add_query(QueryStringConstants.SIGNED_CACHE_CONTROL, cache_control)
        add_query(QueryStringConstants.SIGNED_CONTENT_DISPOSITION, content_disposition)
        add_query(QueryStringConstants.SIGNED_CONTENT_ENCODING, content_encoding)
        add_query(QueryStringConstants.SIGNED_CONTENT_LANGUAGE, content_language)
        add_query(QueryStringConstants.SIGNED_CONTENT_TYPE, content_type)

        query_dict[QueryStringConstants.SIGNED_SIGNATURE] = self._generate_signature(
            service, path, resource_type, permission, expiry, start, id, ip, protocol,
            cache_control, content_disposition, content_encoding, content_language,
            content_type)

        return query_dict

    def _generate_signature(self, service, path, resource_type, permission=None,
                            expiry=None, start=None, id=None, ip=None, protocol=None,
                            cache_control=None, content_disposition=None,
                            content_encoding=None, content_language=None,
                            content_type=None, version=X_MS_VERSION):
        ''' Generates signature for a given path and shared access policy. '''

        def get_value_to_append(value):
            return_value = value or ''
            return return_value + '\n'

        if path[0] != '/':
            path = '/' + path

        canonicalized_resource = '/' + service + '/' + self.account_name + path

        # Form the string to sign from shared_access_policy and canonicalized
        # resource. The order of values is important.
        string_to_sign = \
            (get_value_to_append(permission) +
             get_value_to_append(start) +
             get_value_to_append(expiry) +
             get_value_to_append(canonicalized_resource) +
             get_value_to_append(id) +
             get_value_to_append(ip) +
             get_value_to_append(protocol) +
             get_value_to_append(version))

        if resource_type:
            string_to_sign += \
                (get_value_to_append(cache_control) +
                 get_value_to_append(content_disposition) +
                 get_value_to_append(content_encoding) +
                 get_value_to_append(content_language) +
                 get_value_to_append(content_type))

        if string_to_sign[-1] == '\n':
            string_to_sign = string_to_sign[:-1]

        return _sign_string(self.account_key, string_to_sign)
