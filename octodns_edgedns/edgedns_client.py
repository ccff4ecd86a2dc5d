#
#
#

import logging

from .classifier import classify
from .gate import MutationRequest, Operation, WriteGate
from .records import (
    BASE_PATH,
    RecordBody,
    build_request,
    process_rdata,
    record_path,
)


class EdgeDnsClient(object):
    """Record set CRUD against the config-dns v2 API.

    Writes to a zone are serialized through ``gate`` so the zone's SOA serial
    is never incremented by two requests at once. Pass ``serialize=False``
    to a write when ordering is already guaranteed by the caller, e.g. a
    single-writer batch job. Reads are never serialized.
    """

    def __init__(
        self,
        host=None,
        headers=None,
        auth=None,
        timeout=30,
        gate=None,
        per_zone_lock=False,
        session=None,
    ):
        self.log = logging.getLogger('EdgeDnsClient')
        if session is None:
            if host is None:
                raise ValueError('EdgeDnsClient requires a host or a session')
            from .session import EdgeDnsSession

            session = EdgeDnsSession(
                host, headers=headers, auth=auth, timeout=timeout
            )
        self._session = session
        self.gate = gate if gate is not None else WriteGate(per_zone_lock)

    def _mutate(self, operation, zone, record, serialize):
        record.validate()

        request = MutationRequest(zone, operation, record, serialize)
        method, path, body = build_request(operation, zone, record)
        with self.gate.hold(request):
            status, decoded = self._session.execute(method, path, body)
            outcome = classify(operation, status, decoded)
        if not outcome.success:
            self.log.warning(
                '%s_record: zone=%s, name=%s, type=%s failed with status %d',
                operation.value,
                zone,
                record.name,
                record.type,
                status,
            )
        return outcome.raise_for_error()

    def create_record(self, zone, record, serialize=True):
        self.log.debug(
            'create_record: zone=%s, name=%s, type=%s, serialize=%s',
            zone,
            record.name,
            record.type,
            serialize,
        )
        return self._mutate(Operation.CREATE, zone, record, serialize)

    def update_record(self, zone, record, serialize=True):
        self.log.debug(
            'update_record: zone=%s, name=%s, type=%s, serialize=%s',
            zone,
            record.name,
            record.type,
            serialize,
        )
        return self._mutate(Operation.UPDATE, zone, record, serialize)

    def delete_record(self, zone, record, serialize=True):
        self.log.debug(
            'delete_record: zone=%s, name=%s, type=%s, serialize=%s',
            zone,
            record.name,
            record.type,
            serialize,
        )
        return self._mutate(Operation.DELETE, zone, record, serialize)

    def _read(self, path, params=None):
        status, decoded = self._session.execute('GET', path, params=params)
        return classify(Operation.READ, status, decoded).raise_for_error().body

    def get_record(self, zone, name, _type):
        self.log.debug(
            'get_record: zone=%s, name=%s, type=%s', zone, name, _type
        )
        data = self._read(record_path(zone, name, _type))
        return RecordBody.from_json(data or {})

    def list_records(self, zone, name=None, types=None):
        self.log.debug(
            'list_records: zone=%s, name=%s, types=%s', zone, name, types
        )
        params = {'showAll': 'true'}
        if name:
            params['search'] = name
        if types:
            params['types'] = ','.join(types)
        data = self._read(f'{BASE_PATH}/zones/{zone}/recordsets', params)
        records = [
            RecordBody.from_json(r) for r in (data or {}).get('recordsets', [])
        ]
        if name:
            # search is a substring match on the service side
            records = [r for r in records if r.name == name]
        return records

    def get_rdata(self, zone, name, _type):
        record = self.get_record(zone, name, _type)
        return process_rdata(record.rdata, _type)

    def list_zones(self):
        self.log.debug('list_zones:')
        data = self._read(f'{BASE_PATH}/zones', {'showAll': 'true'})
        return (data or {}).get('zones', [])

    def zone_create(self, zone, contract_id, group_id=None, serialize=True):
        self.log.debug(
            'zone_create: zone=%s, contract_id=%s, group_id=%s',
            zone,
            contract_id,
            group_id,
        )
        params = {'contractId': contract_id}
        if group_id:
            params['gid'] = group_id
        body = {'zone': zone, 'type': 'primary'}

        request = MutationRequest(zone, Operation.CREATE, body, serialize)
        with self.gate.hold(request):
            status, decoded = self._session.execute(
                'POST', f'{BASE_PATH}/zones', body, params
            )
            outcome = classify(Operation.CREATE, status, decoded)
        return outcome.raise_for_error()
