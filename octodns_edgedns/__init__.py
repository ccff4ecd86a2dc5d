#
#
#

import logging
import shlex
from collections import defaultdict

from octodns.provider.base import BaseProvider
from octodns.record import Record

from .exceptions import (
    EdgeDnsClientException,
    EdgeDnsClientNotFound,
    EdgeDnsClientUnauthorized,
    EdgeDnsRemoteError,
    EdgeDnsTransportError,
    EdgeDnsValidationError,
)

__version__ = __VERSION__ = '0.1.0'

# Imported after __version__, the session reads it for its User-Agent
from .edgedns_client import EdgeDnsClient  # noqa: E402
from .gate import MutationRequest, Operation, WriteGate  # noqa: E402
from .records import RecordBody  # noqa: E402

__all__ = [
    'EdgeDnsClient',
    'EdgeDnsClientException',
    'EdgeDnsClientNotFound',
    'EdgeDnsClientUnauthorized',
    'EdgeDnsProvider',
    'EdgeDnsRemoteError',
    'EdgeDnsTransportError',
    'EdgeDnsValidationError',
    'MutationRequest',
    'Operation',
    'RecordBody',
    'WriteGate',
]


class EdgeDnsProvider(BaseProvider):
    SUPPORTS_GEO = False
    SUPPORTS_DYNAMIC = False
    SUPPORTS_ROOT_NS = True
    SUPPORTS = set(
        ('A', 'AAAA', 'CAA', 'CNAME', 'MX', 'NS', 'PTR', 'SRV', 'TXT')
    )

    def __init__(
        self,
        id,
        host,
        *args,
        headers=None,
        auth=None,
        contract_id=None,
        group_id=None,
        serialize_writes=True,
        per_zone_lock=False,
        timeout=30,
        **kwargs,
    ):
        self.log = logging.getLogger(f'EdgeDnsProvider[{id}]')
        self.log.debug(
            '__init__: id=%s, host=%s, contract_id=%s, group_id=%s, '
            'serialize_writes=%s, per_zone_lock=%s',
            id,
            host,
            contract_id,
            group_id,
            serialize_writes,
            per_zone_lock,
        )
        super().__init__(id, *args, **kwargs)

        self._client = EdgeDnsClient(
            host,
            headers=headers,
            auth=auth,
            timeout=timeout,
            per_zone_lock=per_zone_lock,
        )
        self.contract_id = contract_id
        self.group_id = group_id
        self.serialize_writes = serialize_writes

    def _append_dot(self, value):
        if value == '@' or value[-1] == '.':
            return value
        return f'{value}.'

    def _fqdn(self, zone, name):
        zone_name = zone.name[:-1]
        return f'{name}.{zone_name}' if name else zone_name

    def _relative(self, zone, fqdn):
        zone_name = zone.name[:-1]
        fqdn = fqdn.rstrip('.')
        if fqdn == zone_name:
            return ''
        suffix = f'.{zone_name}'
        if fqdn.endswith(suffix):
            return fqdn[: -len(suffix)]
        return fqdn

    def _data_for_multiple(self, _type, record):
        return {'ttl': record.ttl, 'type': _type, 'values': list(record.rdata)}

    _data_for_A = _data_for_multiple
    _data_for_AAAA = _data_for_multiple

    def _data_for_CAA(self, _type, record):
        values = []
        for raw in record.rdata:
            try:
                flags, tag, value = shlex.split(raw)[:3]
                values.append({'flags': int(flags), 'tag': tag, 'value': value})
            except ValueError as e:
                self.log.warning(
                    '_data_for_CAA: failed to parse CAA record %r: %s, '
                    'using fallback values (flags=0, tag=issue)',
                    raw,
                    e,
                )
                values.append({'flags': 0, 'tag': 'issue', 'value': raw})
        return {'ttl': record.ttl, 'type': _type, 'values': values}

    def _data_for_single(self, _type, record):
        return {
            'ttl': record.ttl,
            'type': _type,
            'value': self._append_dot(record.rdata[0]),
        }

    _data_for_CNAME = _data_for_single
    _data_for_PTR = _data_for_single

    def _data_for_MX(self, _type, record):
        values = []
        for raw in record.rdata:
            preference, exchange = raw.strip().split(' ')[:2]
            values.append(
                {
                    'preference': int(preference),
                    'exchange': self._append_dot(exchange),
                }
            )
        return {'ttl': record.ttl, 'type': _type, 'values': values}

    def _data_for_NS(self, _type, record):
        return {
            'ttl': record.ttl,
            'type': _type,
            'values': [self._append_dot(v) for v in record.rdata],
        }

    def _data_for_SRV(self, _type, record):
        values = []
        for raw in record.rdata:
            priority, weight, port, target = raw.strip().split(' ')[:4]
            values.append(
                {
                    'port': int(port),
                    'priority': int(priority),
                    'target': self._append_dot(target),
                    'weight': int(weight),
                }
            )
        return {'ttl': record.ttl, 'type': _type, 'values': values}

    def _data_for_TXT(self, _type, record):
        values = []
        for raw in record.rdata:
            value = raw.strip()
            # long values come back as several quoted chunks
            if len(value) > 1 and value[0] == '"' and value[-1] == '"':
                value = value[1:-1].replace('" "', '').replace('\\"', '"')
            values.append(value.replace(';', '\\;'))
        return {'ttl': record.ttl, 'type': _type, 'values': values}

    def list_zones(self):
        self.log.debug('list_zones:')
        domains = []
        for z in self._client.list_zones():
            name = z.get('zone') if isinstance(z, dict) else None
            if name:
                domains.append(f'{name}.')
        return sorted(domains)

    def zone_records(self, zone):
        try:
            return self._client.list_records(zone.name[:-1])
        except EdgeDnsClientNotFound:
            return None

    def populate(self, zone, target=False, lenient=False):
        self.log.debug(
            'populate: name=%s, target=%s, lenient=%s',
            zone.name,
            target,
            lenient,
        )

        records = self.zone_records(zone)
        exists = records is not None

        values = defaultdict(dict)
        for record in records or []:
            _type = record.type
            if _type not in self.SUPPORTS:
                self.log.warning(
                    'populate: skipping unsupported %s record', _type
                )
                continue
            values[self._relative(zone, record.name)][_type] = record

        before = len(zone.records)
        for name, types in values.items():
            for _type, record in types.items():
                data_for = getattr(self, f'_data_for_{_type}')
                zone.add_record(
                    Record.new(
                        zone,
                        name,
                        data_for(_type, record),
                        source=self,
                        lenient=lenient,
                    ),
                    lenient=lenient,
                )

        self.log.info(
            'populate:   found %s records, exists=%s',
            len(zone.records) - before,
            exists,
        )
        return exists

    def _rdata_for_multiple(self, record):
        return list(record.values)

    _rdata_for_A = _rdata_for_multiple
    _rdata_for_AAAA = _rdata_for_multiple
    _rdata_for_NS = _rdata_for_multiple

    def _rdata_for_CAA(self, record):
        return [f'{v.flags} {v.tag} "{v.value}"' for v in record.values]

    def _rdata_for_single(self, record):
        return [record.value]

    _rdata_for_CNAME = _rdata_for_single
    _rdata_for_PTR = _rdata_for_single

    def _rdata_for_MX(self, record):
        return [f'{v.preference} {v.exchange}' for v in record.values]

    def _rdata_for_SRV(self, record):
        return [
            f'{v.priority} {v.weight} {v.port} {v.target}'
            for v in record.values
        ]

    def _rdata_for_TXT(self, record):
        return [v.replace('\\;', ';') for v in record.chunked_values]

    def _record_body(self, record):
        rdata_for = getattr(self, f'_rdata_for_{record._type}')
        return RecordBody(
            name=self._fqdn(record.zone, record.name),
            type=record._type,
            ttl=record.ttl,
            rdata=rdata_for(record),
        )

    def _apply_Create(self, zone_name, change):
        self._client.create_record(
            zone_name,
            self._record_body(change.new),
            serialize=self.serialize_writes,
        )

    def _apply_Update(self, zone_name, change):
        self._client.update_record(
            zone_name,
            self._record_body(change.new),
            serialize=self.serialize_writes,
        )

    def _apply_Delete(self, zone_name, change):
        self._client.delete_record(
            zone_name,
            self._record_body(change.existing),
            serialize=self.serialize_writes,
        )

    def _apply(self, plan):
        desired = plan.desired
        changes = plan.changes
        self.log.debug(
            '_apply: zone=%s, len(changes)=%d', desired.name, len(changes)
        )

        zone_name = desired.name[:-1]
        if not plan.exists:
            if not self.contract_id:
                raise EdgeDnsClientException(
                    f'Zone {zone_name} does not exist and no contract_id is '
                    'configured to create it'
                )
            self.log.debug('_apply:   no matching zone, creating zone')
            self._client.zone_create(
                zone_name,
                self.contract_id,
                self.group_id,
                serialize=self.serialize_writes,
            )

        for change in changes:
            class_name = change.__class__.__name__
            getattr(self, f'_apply_{class_name}')(zone_name, change)
