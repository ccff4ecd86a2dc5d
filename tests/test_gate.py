#
# Tests for the write gate serializing zone mutations
#

import threading
from unittest import TestCase
from unittest.mock import patch

from octodns_edgedns.gate import MutationRequest, Operation, WriteGate


def _request(scope='example.com', serialize=True):
    return MutationRequest(scope, Operation.CREATE, None, serialize)


class TestWriteGate(TestCase):
    def test_acquire_and_release(self):
        gate = WriteGate()
        request = _request()
        self.assertFalse(gate.locked())
        self.assertTrue(gate.acquire(request))
        self.assertTrue(gate.locked())
        gate.release(request)
        self.assertFalse(gate.locked())

    def test_opt_out_never_locks(self):
        gate = WriteGate()
        request = _request(serialize=False)
        self.assertFalse(gate.acquire(request))
        self.assertFalse(gate.locked())
        with gate.hold(request) as acquired:
            self.assertFalse(acquired)
            self.assertFalse(gate.locked())

    def test_release_without_holding_is_noop(self):
        gate = WriteGate()
        gate.release(_request())
        self.assertFalse(gate.locked())

    def test_release_from_other_thread_is_noop(self):
        gate = WriteGate()
        request = _request()
        gate.acquire(request)
        t = threading.Thread(target=gate.release, args=(request,))
        t.start()
        t.join(5)
        self.assertTrue(gate.locked())
        gate.release(request)
        self.assertFalse(gate.locked())

    def test_not_reentrant(self):
        gate = WriteGate()
        request = _request()
        with gate.hold(request):
            with self.assertRaises(RuntimeError):
                gate.acquire(request)
        self.assertFalse(gate.locked())

    def test_hold_releases_on_exception(self):
        gate = WriteGate()
        with self.assertRaises(KeyboardInterrupt):
            with gate.hold(_request()):
                raise KeyboardInterrupt()
        self.assertFalse(gate.locked())

    def test_interrupt_while_recording_owner_releases(self):
        gate = WriteGate()
        interrupted = patch.object(
            gate, '_set_owner', side_effect=KeyboardInterrupt()
        )
        with interrupted, self.assertRaises(KeyboardInterrupt):
            with gate.hold(_request()):
                pass
        self.assertFalse(gate.locked())
        with gate.hold(_request()) as acquired:
            self.assertTrue(acquired)
        self.assertFalse(gate.locked())

    def test_reads_are_rejected(self):
        gate = WriteGate()
        request = MutationRequest('example.com', Operation.READ)
        with self.assertRaises(ValueError):
            gate.acquire(request)
        self.assertFalse(gate.locked())

    def test_global_gate_blocks_other_zones(self):
        gate = WriteGate()
        gate.acquire(_request('a.com'))
        self.assertTrue(gate.locked('b.com'))

        entered = threading.Event()

        def other():
            with gate.hold(_request('b.com')):
                entered.set()

        t = threading.Thread(target=other)
        t.start()
        self.assertFalse(entered.wait(0.2))
        gate.release(_request('a.com'))
        self.assertTrue(entered.wait(5))
        t.join(5)

    def test_per_zone_gate_allows_other_zones(self):
        gate = WriteGate(per_zone=True)
        gate.acquire(_request('a.com'))
        self.assertTrue(gate.locked('a.com'))
        self.assertFalse(gate.locked('b.com'))

        entered = threading.Event()

        def other():
            with gate.hold(_request('b.com')):
                entered.set()

        t = threading.Thread(target=other)
        t.start()
        self.assertTrue(entered.wait(5))
        t.join(5)
        gate.release(_request('a.com'))
        self.assertFalse(gate.locked('a.com'))

    def test_operation_mutating(self):
        self.assertTrue(Operation.CREATE.mutating)
        self.assertTrue(Operation.UPDATE.mutating)
        self.assertTrue(Operation.DELETE.mutating)
        self.assertFalse(Operation.READ.mutating)
