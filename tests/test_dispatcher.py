"""
Tests for request fan-out to eligible oracles.
"""

import asyncio
import logging
import random

import pytest
from conftest import FakeLedger, make_accounts

from oracle_server.oracles.dispatcher import Dispatcher
from oracle_server.oracles.pool import IdentityPool
from oracle_server.oracles.registrar import Registrar
from oracle_server.oracles.responder import Responder
from oracle_server.schemas.oracle import StatusRequest

REQUEST = StatusRequest(target_index=7, airline="0xA1", flight="ND1309", timestamp=1700000000)


class RecordingResponder(Responder):
    """Responder that records invocations instead of touching a ledger."""

    def __init__(self, fail_for=()):
        super().__init__(ledger=None)
        self.calls = []
        self.fail_for = set(fail_for)

    async def respond(self, identity, request):
        self.calls.append((identity.address, request))
        if identity.address in self.fail_for:
            raise RuntimeError("boom")
        return None


def registered_pool(ledger, seed=3):
    pool = IdentityPool()
    asyncio.run(Registrar(ledger, pool, random.Random(seed)).register_all(ledger.accounts))
    return pool


@pytest.fixture
def scenario_ledger():
    """21 oracles of which exactly three (accounts 0, 5 and 10) hold index 7."""
    accounts = make_accounts(21)
    indexes = {address: (0, 1, 2) for address in accounts}
    indexes[accounts[0]] = (7, 3, 4)
    indexes[accounts[5]] = (5, 7, 9)
    indexes[accounts[10]] = (1, 8, 7)
    return FakeLedger(accounts=accounts, indexes=indexes)


class TestDispatcher:
    """Test cases for Dispatcher.dispatch."""

    def test_scenario_three_matching_oracles(self, scenario_ledger):
        """Test that exactly the 3 holders of index 7 submit their fixed status."""
        pool = registered_pool(scenario_ledger)
        dispatcher = Dispatcher(pool, Responder(scenario_ledger))

        async def run():
            tasks = dispatcher.dispatch(REQUEST)
            return await asyncio.gather(*tasks)

        outcomes = asyncio.run(run())

        holders = {o.address: o for o in pool.all() if 7 in o.indexes}
        assert len(holders) == 3
        assert len(scenario_ledger.responses) == 3
        assert all(outcome.submitted for outcome in outcomes)
        for response in scenario_ledger.responses:
            assert response["from"] in holders
            assert response["status"] == int(holders[response["from"]].status_code)
            assert response["index"] == 7
            assert response["airline"] == "0xA1"
            assert response["flight"] == "ND1309"
            assert response["timestamp"] == 1700000000

    def test_no_matching_oracles_is_a_noop(self, scenario_ledger):
        """Test that an unheld index produces zero Responder invocations."""
        pool = registered_pool(scenario_ledger)
        responder = RecordingResponder()
        dispatcher = Dispatcher(pool, responder)
        request = StatusRequest(target_index=6, airline="0xA1", flight="ND1309", timestamp=1)

        async def run():
            tasks = dispatcher.dispatch(request)
            await dispatcher.drain()
            return tasks

        assert asyncio.run(run()) == []
        assert responder.calls == []

    def test_sibling_failure_does_not_block_others(self, scenario_ledger):
        """Test that one rejected oracle does not stop the other responses."""
        pool = registered_pool(scenario_ledger)
        accounts = scenario_ledger.accounts
        scenario_ledger.reject_response[accounts[5]] = "execution reverted: Oracle closed"
        dispatcher = Dispatcher(pool, Responder(scenario_ledger))

        async def run():
            return await asyncio.gather(*dispatcher.dispatch(REQUEST))

        outcomes = asyncio.run(run())

        states = {o.address: o.state for o in outcomes}
        assert states == {
            accounts[0]: "submitted",
            accounts[5]: "rejected",
            accounts[10]: "submitted",
        }
        assert {r["from"] for r in scenario_ledger.responses} == {accounts[0], accounts[10]}

    def test_unexpected_responder_crash_is_isolated_and_logged(self, scenario_ledger, caplog):
        """Test that an exception escaping one task is logged and siblings still run."""
        pool = registered_pool(scenario_ledger)
        accounts = scenario_ledger.accounts
        responder = RecordingResponder(fail_for=[accounts[0]])
        dispatcher = Dispatcher(pool, responder)

        async def run():
            dispatcher.dispatch(REQUEST)
            await dispatcher.drain()

        with caplog.at_level(logging.ERROR):
            asyncio.run(run())

        assert [address for address, _ in responder.calls] == [
            accounts[0],
            accounts[5],
            accounts[10],
        ]
        assert "failed unexpectedly" in caplog.text
        assert dispatcher.inflight == 0

    def test_dispatch_returns_before_responses_finish(self, scenario_ledger):
        """Test that dispatch does not wait on the responder tasks."""
        pool = registered_pool(scenario_ledger)
        for address in scenario_ledger.accounts:
            scenario_ledger.response_delay[address] = 0.05
        dispatcher = Dispatcher(pool, Responder(scenario_ledger))

        async def run():
            tasks = dispatcher.dispatch(REQUEST)
            pending = [t for t in tasks if not t.done()]
            inflight = dispatcher.inflight
            await dispatcher.drain()
            return len(pending), inflight

        pending, inflight = asyncio.run(run())
        assert pending == 3
        assert inflight == 3
        assert len(scenario_ledger.responses) == 3
        assert dispatcher.inflight == 0

    def test_repeated_requests_are_not_deduplicated(self, scenario_ledger):
        """Test that the same request dispatched twice is answered twice."""
        pool = registered_pool(scenario_ledger)
        dispatcher = Dispatcher(pool, Responder(scenario_ledger))

        async def run():
            dispatcher.dispatch(REQUEST)
            dispatcher.dispatch(REQUEST)
            await dispatcher.drain()

        asyncio.run(run())
        assert len(scenario_ledger.responses) == 6
