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
import hmac
import logging
import uuid
from datetime import datetime
from http.client import responses
from io import BytesIO
from time import time
from urllib.parse import (
    parse_qsl,
    unquote,
    urlparse,
)
from wsgiref.handlers import format_date_time
from xml.etree import ElementTree as ETree

import requests
from dateutil import parser
from dateutil.tz import tzutc
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from .._constants import (
    DEV_ACCOUNT_KEY,
    DEV_ACCOUNT_NAME,
    FILE_MAX_RANGE_SIZE,
    X_MS_VERSION,
)
from ..auth import _StorageSharedKeyAuthentication
from ..sharedaccesssignature import (
    ResourceType,
    SharedAccessSignature,
)
from ._store import (
    StorageEmulatorStore,
    _Blob,
    _Container,
    _Directory,
    _Share,
    _ServiceError,
)

logger = logging.getLogger(__name__)

_CONTENT_SETTINGS = {
    'cache-control': 'Cache-Control',
    'content-type': 'Content-Type',
    'content-encoding': 'Content-Encoding',
    'content-language': 'Content-Language',
    'content-disposition': 'Content-Disposition',
    'content-md5': 'Content-MD5',
}

# Permission a shared access signature needs for each method
_SAS_PERMISSIONS = {
    'GET': 'r',
    'HEAD': 'r',
    'PUT': 'wc',
    'DELETE': 'd',
}


class _SignedRequest(object):
    '''The parts of a received request covered by a shared key signature.'''

    def __init__(self, method, path, query, headers):
        self.method = method
        self.path = path
        self.query = query
        self.headers = headers


def _parse_metadata_headers(headers):
    return {name[10:]: value for name, value in headers.items()
            if name.startswith('x-ms-meta-')}


def _parse_content_settings(headers, prefix):
    return {name: headers[prefix + key] for key, name in _CONTENT_SETTINGS.items()
            if prefix + key in headers}


def _parse_range_header(headers, required=False):
    '''
    Returns the (start, end) of the x-ms-range or range header. end is None
    for an open range such as bytes=512-.
    '''
    value = headers.get('x-ms-range') or headers.get('range')
    if value is None:
        if required:
            raise _ServiceError(400, 'MissingRequiredHeader',
                                'An HTTP header that is mandatory for this request is not specified.')
        return None

    unit, _, span = value.partition('=')
    start, _, end = span.partition('-')
    try:
        start = int(start)
        end = int(end) if end else None
    except ValueError:
        raise _ServiceError(400, 'InvalidHeaderValue',
                            'The range header {} is malformed.'.format(value))
    if unit != 'bytes' or start < 0 or (end is not None and end < start):
        raise _ServiceError(416, 'InvalidRange',
                            'The range specified is invalid for the current size of the resource.')
    return start, end


def _check_read_range(byte_range, content_length):
    '''Clips a requested download range to the content.'''
    start, end = byte_range
    if start >= content_length:
        raise _ServiceError(416, 'InvalidRange',
                            'The range specified is invalid for the current size of the resource.')
    if end is None or end >= content_length:
        end = content_length - 1
    return start, end


def _parse_signed_time(value):
    # Signed times without a time zone, such as a bare date, are UTC.
    parsed = parser.parse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tzutc())
    return parsed


def _resource_headers(resource):
    headers = {
        'Last-Modified': format_date_time(resource.last_modified),
        'ETag': resource.etag,
    }
    for name, value in resource.metadata.items():
        headers['x-ms-meta-' + name] = value
    return headers


def _copy_headers(copy):
    if copy is None:
        return {}

    headers = {
        'x-ms-copy-id': copy.id,
        'x-ms-copy-source': copy.source,
        'x-ms-copy-status': copy.status,
        'x-ms-copy-progress': copy.progress,
    }
    if copy.completion_time is not None:
        headers['x-ms-copy-completion-time'] = format_date_time(copy.completion_time)
    if copy.status_description:
        headers['x-ms-copy-status-description'] = copy.status_description
    return headers


def _to_xml(root):
    return ETree.tostring(root, encoding='utf-8', xml_declaration=True)


class LocalStorageAdapter(BaseAdapter):

    '''
    A requests transport adapter that serves the File and Blob REST APIs of
    one storage account from memory.

    Mount it on a requests.Session (see create_emulator_session) and pass the
    session as request_session to FileService, BlobService or
    CloudStorageAccount. Requests are routed by host name, which must have
    the form <account>.<file|blob>.<suffix>, and must be signed with the
    account key or carry a valid shared access signature.

    Files keep only the units of alignment bytes that were written, so
    listing ranges reports the written regions rounded to those units.
    Copies of files require the source url to carry a read shared access
    signature.
    '''

    def __init__(self, account_name=DEV_ACCOUNT_NAME, account_key=DEV_ACCOUNT_KEY,
                 store=None, copy_polls_until_complete=0):
        '''
        :param str account_name:
            Name of the emulated account.
        :param str account_key:
            Base64 key of the emulated account.
        :param StorageEmulatorStore store:
            The state to serve. A new empty store is created if not given.
        :param int copy_polls_until_complete:
            Used when creating a new store. Number of property reads of a copy
            destination that report the copy as pending.
        '''
        super(LocalStorageAdapter, self).__init__()
        self.account_name = account_name
        self.account_key = account_key
        self.store = store or StorageEmulatorStore(copy_polls_until_complete)
        self._shared_key = _StorageSharedKeyAuthentication(account_name, account_key)
        self._sas = SharedAccessSignature(account_name, account_key)

    def send(self, request, stream=False, timeout=None, verify=True, cert=None,
             proxies=None):
        url = urlparse(request.url)
        query = dict(parse_qsl(url.query, keep_blank_values=True))
        headers = {name.lower(): value for name, value in request.headers.items()}
        body = request.body or b''
        if isinstance(body, str):
            body = body.encode('utf-8')

        with self.store.lock:
            try:
                service = self._get_service(url.hostname)
                self._authenticate(service, request.method, url.path, query, headers)
                parts = self._get_path_parts(url.path)
                if service == 'file':
                    status, response_headers, response_body = self._file_request(
                        request.method, parts, query, headers, body)
                else:
                    status, response_headers, response_body = self._blob_request(
                        request.method, parts, query, headers, body)
            except _ServiceError as ex:
                status, response_headers, response_body = self._error_response(
                    request.method, ex)

        logger.debug('%s %s -> %s', request.method, url.path, status)
        return self._build_response(request, status, response_headers, response_body)

    def close(self):
        pass

    # Request parsing and authentication

    def _get_service(self, hostname):
        labels = (hostname or '').split('.')
        if len(labels) < 2 or labels[0] != self.account_name:
            raise _ServiceError(403, 'AuthenticationFailed',
                                'The account {} is not served here.'.format(labels[0]))
        if labels[1] not in ('file', 'blob'):
            raise _ServiceError(400, 'InvalidUri',
                                'The requested URI does not represent any resource on the server.')
        return labels[1]

    @staticmethod
    def _get_path_parts(path):
        return [part for part in unquote(path).split('/') if part]

    def _authenticate(self, service, method, path, query, headers):
        authorization = headers.get('authorization')
        if authorization:
            scheme, _, credentials = authorization.partition(' ')
            account, _, signature = credentials.partition(':')
            if scheme == 'SharedKey' and account == self.account_name:
                expected = self._shared_key.get_signature(
                    _SignedRequest(method, path, query, headers))
                if hmac.compare_digest(expected, signature):
                    return
            raise _ServiceError(403, 'AuthenticationFailed',
                                'The MAC signature found in the HTTP request is not valid.')

        if 'sig' in query:
            self._check_shared_access_signature(service, method, path, query)
            return

        raise _ServiceError(403, 'AuthenticationFailed',
                            'Server failed to authenticate the request.')

    def _check_shared_access_signature(self, service, method, path, query):
        parts = self._get_path_parts(path)
        resource_type = query.get('sr')
        if resource_type in (ResourceType.RESOURCE_FILE, ResourceType.RESOURCE_BLOB):
            signed_path = '/' + '/'.join(parts)
        elif resource_type in (ResourceType.RESOURCE_SHARE, ResourceType.RESOURCE_CONTAINER):
            signed_path = '/' + (parts[0] if parts else '')
        else:
            raise _ServiceError(403, 'AuthenticationFailed',
                                'The signed resource {} is not supported.'.format(resource_type))

        expected = self._sas._generate_signature(
            service, signed_path, resource_type,
            permission=query.get('sp'),
            expiry=query.get('se'),
            start=query.get('st'),
            id=query.get('si'),
            ip=query.get('sip'),
            protocol=query.get('spr'),
            cache_control=query.get('rscc'),
            content_disposition=query.get('rscd'),
            content_encoding=query.get('rsce'),
            content_language=query.get('rscl'),
            content_type=query.get('rsct'),
            version=query.get('sv'),
        )
        if not hmac.compare_digest(expected, query['sig']):
            raise _ServiceError(403, 'AuthenticationFailed',
                                'Signature did not match.')

        now = datetime.now(tzutc())
        if 'se' not in query or _parse_signed_time(query['se']) < now:
            raise _ServiceError(403, 'AuthenticationFailed',
                                'Signed expiry time must be after signed start time and the current time.')
        if 'st' in query and _parse_signed_time(query['st']) > now:
            raise _ServiceError(403, 'AuthenticationFailed',
                                'Signed start time is in the future.')

        permission = query.get('sp', '')
        if not any(p in permission for p in _SAS_PERMISSIONS.get(method, '')):
            raise _ServiceError(403, 'AuthorizationPermissionMismatch',
                                'This request is not authorized to perform this operation using this permission.')

    def _read_copy_source(self, source_url):
        '''
        Returns the content of the file or blob at source_url. A file source
        must carry a read shared access signature.
        '''
        url = urlparse(source_url)
        query = dict(parse_qsl(url.query, keep_blank_values=True))
        try:
            service = self._get_service(url.hostname)
            parts = self._get_path_parts(url.path)
            if len(parts) < 2:
                raise _ServiceError(400, 'InvalidUri', 'The copy source is not a file or blob.')
            if service == 'file' or 'sig' in query:
                if 'sig' not in query:
                    raise _ServiceError(403, 'AuthenticationFailed',
                                        'A file copy source must carry a shared access signature.')
                self._check_shared_access_signature(service, 'GET', url.path, query)

            if service == 'file':
                source = self.store.get_file(parts[0], parts[1:])
                return source.read(0, source.content_length)
            return self.store.get_blob(parts[0], '/'.join(parts[1:])).content
        except _ServiceError as ex:
            raise _ServiceError(404, 'CannotVerifyCopySource', str(ex)) from ex

    # File service

    def _file_request(self, method, parts, query, headers, body):
        if not parts:
            raise _ServiceError(400, 'InvalidUri',
                                'The requested URI does not represent any resource on the server.')

        restype = query.get('restype')
        if restype == 'share':
            return self._share_request(method, parts[0], headers)
        if restype == 'directory':
            if query.get('comp') == 'list':
                return self._list_directory(parts[0], parts[1:], query)
            return self._directory_request(method, parts[0], parts[1:], headers)
        if len(parts) < 2:
            raise _ServiceError(400, 'InvalidUri', 'A file must be inside a share.')
        return self._file_resource_request(method, parts[0], parts[1:], query, headers, body)

    def _share_request(self, method, share_name, headers):
        store = self.store
        if method == 'PUT':
            if share_name in store.shares:
                raise _ServiceError(409, 'ShareAlreadyExists',
                                    'The specified share already exists.')
            quota = headers.get('x-ms-share-quota')
            share = _Share(_parse_metadata_headers(headers), int(quota) if quota else None)
            store.shares[share_name] = share
            return 201, _resource_headers(share), b''

        share = store.get_share(share_name)
        if method in ('GET', 'HEAD'):
            response_headers = _resource_headers(share)
            response_headers['x-ms-share-quota'] = str(share.quota)
            return 200, response_headers, b''
        if method == 'DELETE':
            del store.shares[share_name]
            return 202, {}, b''
        raise _ServiceError(405, 'UnsupportedHttpVerb', method)

    def _directory_request(self, method, share_name, path, headers):
        store = self.store
        if method in ('GET', 'HEAD'):
            directory = store.get_directory(share_name, path)
            return 200, _resource_headers(directory), b''

        if not path:
            raise _ServiceError(400, 'InvalidUri', 'The root directory of a share is implicit.')
        parent = store.get_parent(share_name, path)
        name = path[-1]

        if method == 'PUT':
            if name in parent.directories or name in parent.files:
                raise _ServiceError(409, 'ResourceAlreadyExists',
                                    'The specified resource already exists.')
            directory = _Directory(_parse_metadata_headers(headers))
            parent.directories[name] = directory
            parent.touch()
            return 201, _resource_headers(directory), b''
        if method == 'DELETE':
            directory = parent.directories.get(name)
            if directory is None:
                raise _ServiceError(404, 'ResourceNotFound',
                                    'The specified resource does not exist.')
            if not directory.is_empty():
                raise _ServiceError(409, 'DirectoryNotEmpty',
                                    'The specified directory is not empty.')
            del parent.directories[name]
            parent.touch()
            return 202, {}, b''
        raise _ServiceError(405, 'UnsupportedHttpVerb', method)

    def _list_directory(self, share_name, path, query):
        directory = self.store.get_directory(share_name, path)
        prefix = query.get('prefix') or ''
        marker = query.get('marker') or ''
        max_results = int(query.get('maxresults') or 5000)
        if max_results <= 0:
            raise _ServiceError(400, 'OutOfRangeQueryParameterValue',
                                'maxresults must be greater than zero.')

        entries = [(name, entry) for name, entry in directory.entries()
                   if name.startswith(prefix) and name >= marker]
        page, rest = entries[:max_results], entries[max_results:]

        root = ETree.Element('EnumerationResults', {
            'ServiceEndpoint': 'https://{}.file.core.windows.net/'.format(self.account_name),
            'ShareName': share_name,
            'DirectoryPath': '/'.join(path),
        })
        ETree.SubElement(root, 'Marker').text = marker or None
        ETree.SubElement(root, 'Prefix').text = prefix or None
        ETree.SubElement(root, 'MaxResults').text = query.get('maxresults')
        entries_element = ETree.SubElement(root, 'Entries')
        for name, entry in page:
            if isinstance(entry, _Directory):
                ETree.SubElement(ETree.SubElement(entries_element, 'Directory'), 'Name').text = name
            else:
                file_element = ETree.SubElement(entries_element, 'File')
                ETree.SubElement(file_element, 'Name').text = name
                properties = ETree.SubElement(file_element, 'Properties')
                ETree.SubElement(properties, 'Content-Length').text = str(entry.content_length)
        ETree.SubElement(root, 'NextMarker').text = rest[0][0] if rest else None

        return 200, {'Content-Type': 'application/xml'}, _to_xml(root)

    def _file_headers(self, file):
        headers = _resource_headers(file)
        headers['Content-Length'] = str(file.content_length)
        headers['x-ms-type'] = 'File'
        headers.update(file.content_settings)
        headers.update(_copy_headers(file.copy))
        return headers

    def _file_resource_request(self, method, share_name, path, query, headers, body):
        store = self.store
        comp = query.get('comp')

        if method == 'PUT':
            if comp == 'range':
                return self._put_range(store.get_file(share_name, path), headers, body)
            if comp == 'properties':
                file = store.get_file(share_name, path)
                content_length = headers.get('x-ms-content-length')
                if content_length is not None:
                    file.resize(int(content_length))
                file.content_settings.update(_parse_content_settings(headers, 'x-ms-'))
                return 200, _resource_headers(file), b''
            if comp == 'copy':
                file = store.get_file(share_name, path)
                store.abort_copy(file, query.get('copyid'))
                return 204, {}, b''

            parent = store.get_parent(share_name, path)
            name = path[-1]
            if name in parent.directories:
                raise _ServiceError(409, 'ResourceTypeMismatch',
                                    'The specified resource is a directory.')

            copy_source = headers.get('x-ms-copy-source')
            if copy_source is not None:
                content = self._read_copy_source(copy_source)
                file = store.new_file(0, metadata=_parse_metadata_headers(headers))
                parent.files[name] = file
                copy = store.start_copy(file, copy_source, content)
                return 202, {'x-ms-copy-id': copy.id, 'x-ms-copy-status': copy.status}, b''

            if headers.get('x-ms-type') != 'file':
                raise _ServiceError(400, 'InvalidHeaderValue', 'x-ms-type must be file.')
            content_length = headers.get('x-ms-content-length')
            if content_length is None:
                raise _ServiceError(400, 'MissingRequiredHeader',
                                    'x-ms-content-length is required.')
            if int(content_length) < 0:
                raise _ServiceError(400, 'OutOfRangeInput',
                                    'x-ms-content-length must not be negative.')
            file = store.new_file(int(content_length),
                                  _parse_content_settings(headers, 'x-ms-'),
                                  _parse_metadata_headers(headers))
            parent.files[name] = file
            parent.touch()
            return 201, _resource_headers(file), b''

        if method == 'GET' and comp == 'rangelist':
            file = store.get_file(share_name, path)
            byte_range = _parse_range_header(headers)
            if byte_range is None:
                ranges = file.ranges()
            else:
                ranges = file.ranges(*byte_range)
            root = ETree.Element('Ranges')
            for start, end in ranges:
                range_element = ETree.SubElement(root, 'Range')
                ETree.SubElement(range_element, 'Start').text = str(start)
                ETree.SubElement(range_element, 'End').text = str(end)
            response_headers = _resource_headers(file)
            response_headers['x-ms-content-length'] = str(file.content_length)
            return 200, response_headers, _to_xml(root)

        if method in ('GET', 'HEAD'):
            file = store.get_file(share_name, path)
            store.poll_copy(file)
            response_headers = self._file_headers(file)
            if method == 'HEAD':
                return 200, response_headers, b''
            return self._download(file, headers, response_headers)

        if method == 'DELETE':
            parent = store.get_parent(share_name, path)
            if parent.files.pop(path[-1], None) is None:
                raise _ServiceError(404, 'ResourceNotFound',
                                    'The specified resource does not exist.')
            parent.touch()
            return 202, {}, b''

        raise _ServiceError(405, 'UnsupportedHttpVerb', method)

    def _put_range(self, file, headers, body):
        start, end = _parse_range_header(headers, required=True)
        if end is None or end >= file.content_length:
            raise _ServiceError(416, 'InvalidRange',
                                'The range specified is invalid for the current size of the resource.')

        write = headers.get('x-ms-write')
        if write == 'update':
            if len(body) > FILE_MAX_RANGE_SIZE:
                raise _ServiceError(413, 'RequestBodyTooLarge',
                                    'The request body is too large.')
            if len(body) != end - start + 1:
                raise _ServiceError(400, 'InvalidHeaderValue',
                                    'The range does not match the length of the body.')
            file.write(start, body)
        elif write == 'clear':
            file.clear(start, end - start + 1)
        else:
            raise _ServiceError(400, 'InvalidHeaderValue', 'x-ms-write must be update or clear.')
        return 201, _resource_headers(file), b''

    @staticmethod
    def _download(resource, headers, response_headers):
        byte_range = _parse_range_header(headers)
        if byte_range is None:
            return 200, response_headers, resource.read(0, resource.content_length)

        start, end = _check_read_range(byte_range, resource.content_length)
        response_headers['Content-Length'] = str(end - start + 1)
        response_headers['Content-Range'] = 'bytes {0}-{1}/{2}'.format(
            start, end, resource.content_length)
        return 206, response_headers, resource.read(start, end - start + 1)

    # Blob service

    def _blob_request(self, method, parts, query, headers, body):
        if not parts:
            raise _ServiceError(400, 'InvalidUri',
                                'The requested URI does not represent any resource on the server.')

        if query.get('restype') == 'container':
            return self._container_request(method, parts[0], headers)
        if len(parts) < 2:
            raise _ServiceError(400, 'InvalidUri', 'A blob must be inside a container.')
        return self._blob_resource_request(method, parts[0], '/'.join(parts[1:]),
                                           query, headers, body)

    def _container_request(self, method, container_name, headers):
        store = self.store
        if method == 'PUT':
            if container_name in store.containers:
                raise _ServiceError(409, 'ContainerAlreadyExists',
                                    'The specified container already exists.')
            container = _Container(_parse_metadata_headers(headers))
            store.containers[container_name] = container
            return 201, _resource_headers(container), b''

        container = store.get_container(container_name)
        if method in ('GET', 'HEAD'):
            return 200, _resource_headers(container), b''
        if method == 'DELETE':
            del store.containers[container_name]
            return 202, {}, b''
        raise _ServiceError(405, 'UnsupportedHttpVerb', method)

    def _blob_resource_request(self, method, container_name, blob_name, query, headers, body):
        store = self.store

        if method == 'PUT':
            if query.get('comp') == 'copy':
                blob = store.get_blob(container_name, blob_name)
                store.abort_copy(blob, query.get('copyid'))
                return 204, {}, b''

            container = store.get_container(container_name)
            copy_source = headers.get('x-ms-copy-source')
            if copy_source is not None:
                content = self._read_copy_source(copy_source)
                blob = _Blob(metadata=_parse_metadata_headers(headers))
                container.blobs[blob_name] = blob
                copy = store.start_copy(blob, copy_source, content)
                return 202, {'x-ms-copy-id': copy.id, 'x-ms-copy-status': copy.status}, b''

            if headers.get('x-ms-blob-type') != 'BlockBlob':
                raise _ServiceError(400, 'InvalidHeaderValue',
                                    'Only block blobs are supported.')
            blob = _Blob(body, _parse_content_settings(headers, 'x-ms-blob-'),
                         _parse_metadata_headers(headers))
            container.blobs[blob_name] = blob
            return 201, _resource_headers(blob), b''

        if method in ('GET', 'HEAD'):
            blob = store.get_blob(container_name, blob_name)
            store.poll_copy(blob)
            response_headers = _resource_headers(blob)
            response_headers['Content-Length'] = str(blob.content_length)
            response_headers['x-ms-blob-type'] = 'BlockBlob'
            response_headers.update(blob.content_settings)
            response_headers.update(_copy_headers(blob.copy))
            if method == 'HEAD':
                return 200, response_headers, b''
            return self._download(blob, headers, response_headers)

        if method == 'DELETE':
            store.get_blob(container_name, blob_name)
            del store.containers[container_name].blobs[blob_name]
            return 202, {}, b''

        raise _ServiceError(405, 'UnsupportedHttpVerb', method)

    # Responses

    @staticmethod
    def _error_response(method, error):
        headers = {'x-ms-error-code': error.code}
        if method == 'HEAD':
            return error.status, headers, b''

        root = ETree.Element('Error')
        ETree.SubElement(root, 'Code').text = error.code
        ETree.SubElement(root, 'Message').text = str(error)
        headers['Content-Type'] = 'application/xml'
        return error.status, headers, _to_xml(root)

    def _build_response(self, request, status, headers, body):
        headers = dict(headers)
        headers.setdefault('Content-Length', str(len(body)))
        headers['x-ms-request-id'] = str(uuid.uuid4())
        headers['x-ms-version'] = X_MS_VERSION
        headers['Date'] = format_date_time(time())

        response = requests.Response()
        response.status_code = status
        response.reason = responses.get(status, '')
        response.headers = CaseInsensitiveDict(headers)
        response.raw = BytesIO(body)
        response._content = body
        response.encoding = 'utf-8'
        response.url = request.url
        response.request = request
        response.connection = self
        return response


def create_emulator_session(adapter=None, **kwargs):
    '''
    Creates a requests.Session whose http and https requests are served by
    a LocalStorageAdapter.

    :param LocalStorageAdapter adapter:
        The adapter to mount. If not given one is created from kwargs.
    :return: The session, to be passed as request_session to the services.
    :rtype: requests.Session
    '''
    adapter = adapter or LocalStorageAdapter(**kwargs)
    session = requests.Session()
    session.mount('https://', adapter)
    session.mount('http://', adapter)
    return session
