#
#
#

from typing import Any, NamedTuple, Optional

from .exceptions import (
    EdgeDnsClientNotFound,
    EdgeDnsClientUnauthorized,
    EdgeDnsRemoteError,
)
from .gate import Operation

# Each operation has exactly one success code; anything else, other 2xx
# included, is an error.
EXPECTED_STATUS = {
    Operation.CREATE: 201,
    Operation.UPDATE: 200,
    Operation.DELETE: 204,
    Operation.READ: 200,
}


class Outcome(NamedTuple):
    operation: Operation
    status: int
    body: Any = None
    error: Optional[EdgeDnsRemoteError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> 'Outcome':
        if self.error is not None:
            raise self.error
        return self


def _problem_message(status, body):
    # Edge DNS reports failures as RFC 7807 problem documents
    if isinstance(body, dict):
        title = body.get('title')
        detail = body.get('detail')
        if title and detail:
            return f'{title}: {detail} (status {status})'
        if title or detail:
            return f'{title or detail} (status {status})'
    return None


def remote_error(status, body=None):
    message = _problem_message(status, body)
    if status == 401:
        return EdgeDnsClientUnauthorized(body, message)
    if status == 404:
        return EdgeDnsClientNotFound(body, message)
    return EdgeDnsRemoteError(status, body, message)


def classify(operation: Operation, status: int, body: Any = None) -> Outcome:
    if status == EXPECTED_STATUS[operation]:
        return Outcome(operation, status, body)
    return Outcome(operation, status, body, remote_error(status, body))
