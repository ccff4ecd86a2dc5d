#
#
#

"""Record sets as exchanged with the config-dns v2 API."""

import ipaddress
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional

from .exceptions import EdgeDnsValidationError
from .gate import Operation

BASE_PATH = '/config-dns/v2'

_METHODS = {
    Operation.CREATE: 'POST',
    Operation.UPDATE: 'PUT',
    Operation.DELETE: 'DELETE',
    Operation.READ: 'GET',
}


@dataclass
class RecordBody:
    name: str = ''
    type: str = ''
    ttl: int = 0
    rdata: List[str] = field(default_factory=list)
    # No longer used by the v2 API, kept for record_to_map
    active: bool = False

    @classmethod
    def from_json(cls, data: Dict) -> 'RecordBody':
        return cls(
            name=data.get('name', ''),
            type=data.get('type', ''),
            ttl=data.get('ttl', 0),
            rdata=list(data.get('rdata') or []),
            active=data.get('active', False),
        )

    def to_json(self) -> Dict:
        return {
            'name': self.name,
            'type': self.type,
            'ttl': self.ttl,
            'rdata': list(self.rdata),
        }

    def validate(self) -> None:
        error = validate_record(self)
        if error is not None:
            raise error


def validate_record(record: RecordBody) -> Optional[EdgeDnsValidationError]:
    """Check the fields required by every mutating call.

    Returns:
        An ``EdgeDnsValidationError`` naming every missing field, or None
    """
    missing = []
    if not record.name:
        missing.append('name')
    if not record.type:
        missing.append('type')
    ttl = record.ttl
    if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
        missing.append('ttl')
    if not record.rdata:
        missing.append('rdata')
    if missing:
        return EdgeDnsValidationError(missing)
    return None


class RecordRequest(NamedTuple):
    method: str
    path: str
    body: Optional[Dict] = None


def record_path(zone: str, name: str, _type: str) -> str:
    return f'{BASE_PATH}/zones/{zone}/names/{name}/types/{_type}'


def build_request(
    operation: Operation, zone: str, record: RecordBody
) -> RecordRequest:
    path = record_path(zone, record.name, record.type)
    body = None
    if operation in (Operation.CREATE, Operation.UPDATE):
        body = record.to_json()
    return RecordRequest(_METHODS[operation], path, body)


def record_to_map(record: RecordBody) -> Optional[Dict]:
    if validate_record(record) is not None:
        return None
    return {
        'name': record.name,
        'ttl': record.ttl,
        'recordtype': record.type,
        'active': record.active,
        'target': list(record.rdata),
    }


def new_record_body(params: RecordBody) -> RecordBody:
    return RecordBody(name=params.name)


def full_ipv6(ip) -> str:
    """Return ``ip`` in fully expanded form, e.g. ``2001:0db8:0000:...``."""
    return ipaddress.IPv6Address(ip).exploded


def _pad_value(value):
    value = value.replace('m', '')
    try:
        return f'{float(value):.2f}'
    except ValueError:
        return value


def pad_coordinates(loc: str) -> str:
    """Normalize LOC rdata so distances carry two decimals and a unit.

    ``52 22 23.000 N 4 53 32.000 E -2 0 0 0`` becomes
    ``52 22 23.000 N 4 53 32.000 E -2.00m 0.00m 0.00m 0.00m``. Returns an
    empty string when the value does not have all twelve fields.
    """
    parts = loc.split(' ')
    if len(parts) < 12:
        return ''
    coordinates = parts[:8]
    distances = [f'{_pad_value(p)}m' for p in parts[8:12]]
    return ' '.join(coordinates + distances)


def process_rdata(rdata: List[str], _type: str) -> List[str]:
    _type = _type.upper()
    if _type == 'AAAA':
        return [full_ipv6(v) for v in rdata]
    if _type == 'LOC':
        return [pad_coordinates(v) for v in rdata]
    return list(rdata)
