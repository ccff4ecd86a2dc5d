#
#
#

from octodns.provider import ProviderException


class EdgeDnsClientException(ProviderException):
    pass


class EdgeDnsValidationError(EdgeDnsClientException):
    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(
            f'Record content not valid: missing {", ".join(self.fields)}'
        )


class EdgeDnsRemoteError(EdgeDnsClientException):
    def __init__(self, status, body=None, message=None):
        self.status = status
        self.body = body
        if message is None:
            message = f'Unexpected status {status}'
        super().__init__(message)


class EdgeDnsClientUnauthorized(EdgeDnsRemoteError):
    def __init__(self, body=None, message=None):
        super().__init__(401, body, message or 'Unauthorized')


class EdgeDnsClientNotFound(EdgeDnsRemoteError):
    def __init__(self, body=None, message=None):
        super().__init__(404, body, message or 'Not Found')


class EdgeDnsTransportError(EdgeDnsClientException):
    def __init__(self, cause):
        self.cause = cause
        super().__init__(f'Request failed: {cause}')
