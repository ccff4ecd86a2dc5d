#
# Tests for the requests backed session
#

from unittest import TestCase
from unittest.mock import Mock

from requests import ConnectionError as RequestsConnectionError

from octodns_edgedns.clients import SessionCollaborator
from octodns_edgedns.exceptions import EdgeDnsTransportError
from octodns_edgedns.session import EdgeDnsSession


def _response(status, content=b'', json=None):
    response = Mock()
    response.status_code = status
    response.content = content
    response.json = Mock(return_value=json)
    return response


class TestEdgeDnsSession(TestCase):
    def test_base_url_and_headers(self):
        session = EdgeDnsSession(
            'akab-host.luna.akamaiapis.net/', headers={'X-Extra': 'yes'}
        )
        self.assertEqual(
            'https://akab-host.luna.akamaiapis.net', session.base_url
        )
        headers = session._session.headers
        self.assertEqual('yes', headers['X-Extra'])
        self.assertIn('octodns-edgedns/', headers['User-Agent'])
        self.assertEqual('application/json', headers['Accept'])

    def test_conforms_to_protocol(self):
        self.assertIsInstance(EdgeDnsSession('host'), SessionCollaborator)

    def test_explicit_scheme_kept(self):
        session = EdgeDnsSession('http://localhost:8080')
        self.assertEqual('http://localhost:8080', session.base_url)

    def test_auth_is_installed(self):
        auth = Mock()
        session = EdgeDnsSession('host', auth=auth)
        self.assertIs(auth, session._session.auth)

    def test_execute_decodes_json(self):
        session = EdgeDnsSession('host', timeout=5)
        session._session.request = Mock(
            return_value=_response(201, b'{"name": "a"}', {'name': 'a'})
        )
        status, body = session.execute(
            'POST', '/config-dns/v2/zones', {'zone': 'a'}, {'contractId': 'C'}
        )
        self.assertEqual(201, status)
        self.assertEqual({'name': 'a'}, body)
        session._session.request.assert_called_once_with(
            'POST',
            'https://host/config-dns/v2/zones',
            params={'contractId': 'C'},
            json={'zone': 'a'},
            timeout=5,
        )

    def test_execute_empty_body(self):
        session = EdgeDnsSession('host')
        session._session.request = Mock(return_value=_response(204))
        self.assertEqual((204, None), session.execute('DELETE', '/x'))

    def test_execute_transport_failure(self):
        session = EdgeDnsSession('host')
        cause = RequestsConnectionError('boom')
        session._session.request = Mock(side_effect=cause)
        with self.assertRaises(EdgeDnsTransportError) as ctx:
            session.execute('GET', '/x')
        self.assertIs(cause, ctx.exception.cause)
        self.assertIs(cause, ctx.exception.__cause__)

    def test_execute_undecodable_body(self):
        session = EdgeDnsSession('host')
        response = _response(502, b'<html>')
        response.json = Mock(side_effect=ValueError('not json'))
        session._session.request = Mock(return_value=response)
        with self.assertRaises(EdgeDnsTransportError):
            session.execute('GET', '/x')
