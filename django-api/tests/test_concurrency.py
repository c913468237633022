"""Concurrency properties of event registration.

Threads hit a shared memory store; the deterministic cases inject a
competing commit between a transaction's read and its commit.
Run with: pytest tests/test_concurrency.py -v
"""

import threading

import pytest

from sanctuary.container import build_services
from sanctuary.domain.errors import CapacityExceededError, ConflictError
from sanctuary.repositories import EventRegistrationRepository
from sanctuary.services import Identity, call_with_retry
from sanctuary.stores import DocumentRef, MemoryDocumentStore, collections


class InterferingStore(MemoryDocumentStore):
    """Runs ``interfere`` once, just before the next commit."""

    interfere = None

    def _commit(self, tx):
        interfere, self.interfere = self.interfere, None
        if interfere is not None:
            interfere()
        return super()._commit(tx)


def register_concurrently(services, event_id, count):
    barrier = threading.Barrier(count)
    outcomes = []
    lock = threading.Lock()

    def worker(n):
        barrier.wait()
        try:
            services.events.register_for_event(Identity(uid=f"user-{n}"), event_id)
            outcome = "ok"
        except (CapacityExceededError, ConflictError) as exc:
            outcome = type(exc)
        with lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return outcomes


class TestConcurrentRegistration:
    def test_registrations_never_exceed_capacity(self, services, store, admin, event_input):
        event_id = services.events.create_event(admin, event_input(capacity=5))
        outcomes = register_concurrently(services, event_id, 20)

        successes = outcomes.count("ok")
        registrations = EventRegistrationRepository(store).list_for_event(event_id)
        assert len(outcomes) == 20
        assert 1 <= successes <= 5
        assert services.events.get_event(event_id).registrations == successes
        assert len(registrations) == successes

    def test_last_seat_goes_to_exactly_one_caller(self, services, admin, event_input):
        event_id = services.events.create_event(admin, event_input(capacity=1))
        outcomes = register_concurrently(services, event_id, 2)

        assert outcomes.count("ok") == 1
        assert [o for o in outcomes if o != "ok"][0] in (CapacityExceededError, ConflictError)
        assert services.events.get_event(event_id).registrations == 1


class TestInterleaving:
    @pytest.fixture
    def store(self):
        return InterferingStore()

    def test_losing_transaction_sees_the_winner(self, services, store, admin, member, event_input):
        """The winner takes the last seat while the loser is between read and commit."""
        event_id = services.events.create_event(admin, event_input(capacity=1))
        store.interfere = lambda: services.events.register_for_event(Identity(uid="winner"), event_id)

        with pytest.raises(CapacityExceededError):
            services.events.register_for_event(member, event_id)

        [registration] = EventRegistrationRepository(store).list_for_event(event_id)
        assert registration.user_id == "winner"
        assert services.events.get_event(event_id).registrations == 1

    def test_retrying_a_conflict_registers_once(self, make_admin, admin, member, event_input):
        store = InterferingStore(max_attempts=1)
        make_admin(store, admin.uid)
        services = build_services(store)
        event_id = services.events.create_event(admin, event_input(capacity=3))

        def bump():
            store.run_transaction(lambda tx: tx.update(DocumentRef(collections.EVENTS, event_id), {"featured": True}))

        store.interfere = bump
        with pytest.raises(ConflictError):
            services.events.register_for_event(member, event_id)
        assert services.events.get_event(event_id).registrations == 0

        store.interfere = bump
        call_with_retry(services.events.register_for_event, member, event_id, sleep=lambda delay: None)

        registrations = EventRegistrationRepository(store).list_for_event(event_id)
        assert len(registrations) == 1
        assert services.events.get_event(event_id).registrations == 1
