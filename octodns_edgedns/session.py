#
#
#

import logging

from requests import RequestException, Session

from octodns import __VERSION__ as octodns_version

from . import __version__ as package_version
from .exceptions import EdgeDnsTransportError


class EdgeDnsSession(object):
    """Executes and decodes requests against an Edge DNS API host.

    Request signing is delegated to ``auth``, any ``requests`` auth object
    (e.g. ``akamai.edgegrid.EdgeGridAuth``).
    """

    def __init__(self, host, headers=None, auth=None, timeout=30):
        self.log = logging.getLogger('EdgeDnsSession')
        host = host.rstrip('/')
        if '://' not in host:
            host = f'https://{host}'
        self.base_url = host
        self.timeout = timeout

        session = Session()
        session.headers.update(
            {
                'Accept': 'application/json',
                'User-Agent': f'octodns/{octodns_version} octodns-edgedns/{package_version}',
            }
        )
        if headers:
            session.headers.update(headers)
        if auth is not None:
            session.auth = auth
        self._session = session

    def execute(self, method, path, body=None, params=None):
        """Run one request.

        Returns:
            Tuple of (status code, decoded body); the body is None when the
            response is empty

        Raises:
            EdgeDnsTransportError: No response was obtained or its body could
                not be decoded
        """
        url = f'{self.base_url}{path}'
        self.log.debug('execute: method=%s, path=%s', method, path)
        try:
            response = self._session.request(
                method, url, params=params, json=body, timeout=self.timeout
            )
        except RequestException as e:
            raise EdgeDnsTransportError(e) from e

        if not response.content:
            return response.status_code, None
        try:
            decoded = response.json()
        except ValueError as e:
            raise EdgeDnsTransportError(e) from e
        return response.status_code, decoded
