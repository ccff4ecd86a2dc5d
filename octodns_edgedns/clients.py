#
#
#

"""Protocol definitions for the collaborators of EdgeDnsClient.

Structural typing (PEP 544) lets tests and callers supply their own session
without inheriting from EdgeDnsSession.
"""

from typing import Any, Dict, Optional, Protocol, Tuple, runtime_checkable


@runtime_checkable
class SessionCollaborator(Protocol):
    """Signs, executes and decodes a single HTTP request."""

    def execute(
        self,
        method: str,
        path: str,
        body: Optional[Dict] = None,
        params: Optional[Dict] = None,
    ) -> Tuple[int, Any]:
        """Execute a request against the API host.

        Args:
            method: HTTP method
            path: Path below the API host, e.g. ``/config-dns/v2/zones``
            body: JSON body, if any
            params: Query parameters, if any

        Returns:
            Tuple of (status code, decoded body)

        Raises:
            EdgeDnsTransportError: When no response could be obtained
        """
        ...
