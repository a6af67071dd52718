import threading
from types import SimpleNamespace

import pytest
from contract_doubles import MINTER, FakeEvent

from nft_deployment import mint
from nft_deployment.mint import (
    FulfillmentCancelled,
    InsufficientPayment,
    MintTimeout,
    RequestLedger,
    check_payment,
    event_poller,
    wait_for,
)

OTHER_MINTER = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


def test_check_payment():
    check_payment(value=10**16, mint_fee=10**16)
    check_payment(value=10**17, mint_fee=10**16)
    with pytest.raises(InsufficientPayment, match="at least 10000000000000000 wei"):
        check_payment(value=10**16 - 1, mint_fee=10**16)


def test_request_ledger():
    ledger = RequestLedger()
    ledger.record(1, MINTER)
    ledger.record(2, OTHER_MINTER)

    assert len(ledger) == 2
    assert 1 in ledger
    assert ledger.requester_of(2) == OTHER_MINTER

    assert ledger.fulfill(1) == MINTER
    assert 1 not in ledger
    assert len(ledger) == 1


def test_request_ledger_fulfills_once():
    ledger = RequestLedger()
    ledger.record(7, MINTER)
    ledger.fulfill(7)
    with pytest.raises(RequestLedger.UnknownRequest):
        ledger.fulfill(7)


def test_request_ledger_unknown_request():
    ledger = RequestLedger()
    with pytest.raises(RequestLedger.UnknownRequest, match="42"):
        ledger.requester_of(42)
    with pytest.raises(KeyError):
        ledger.fulfill(42)


def test_request_ledger_duplicate_request():
    ledger = RequestLedger()
    ledger.record(1, MINTER)
    with pytest.raises(ValueError, match="already pending"):
        ledger.record(1, OTHER_MINTER)
    assert ledger.requester_of(1) == MINTER


def test_wait_for_result():
    attempts = iter([None, None, "minted"])
    assert wait_for(lambda: next(attempts), timeout=5, interval=0.01) == "minted"


def test_wait_for_timeout():
    cancel = threading.Event()
    with pytest.raises(MintTimeout, match="0.2 seconds"):
        wait_for(lambda: None, timeout=0.2, interval=0.01, cancel=cancel)
    # the poller is told to stop
    assert cancel.is_set()


def test_wait_for_cancelled():
    cancel = threading.Event()
    timer = threading.Timer(0.1, cancel.set)
    timer.start()
    try:
        with pytest.raises(FulfillmentCancelled):
            wait_for(lambda: None, timeout=5, interval=0.01, cancel=cancel)
    finally:
        timer.cancel()


def test_wait_for_propagates_poll_errors():
    def poll():
        raise RuntimeError("provider went away")

    with pytest.raises(RuntimeError, match="provider went away"):
        wait_for(poll, timeout=5, interval=0.01)


@pytest.fixture
def fake_chain(monkeypatch):
    fake = SimpleNamespace(blocks=SimpleNamespace(height=10))
    monkeypatch.setattr(mint, "chain", fake)
    return fake


def test_event_poller(fake_chain):
    logs = [
        SimpleNamespace(block_number=9, minter=MINTER, tokenId=0),
        SimpleNamespace(block_number=11, minter=OTHER_MINTER, tokenId=1),
        SimpleNamespace(block_number=12, minter=MINTER, tokenId=2),
    ]
    event = FakeEvent(logs)
    poll = event_poller(event, start_block=10, predicate=lambda log: log.minter == MINTER)

    assert poll() is None
    assert event.queries == [(10, 11)]

    fake_chain.blocks.height = 10
    assert poll() is None
    # nothing new to scan
    assert len(event.queries) == 1

    fake_chain.blocks.height = 12
    assert poll().tokenId == 2
    assert event.queries[-1] == (11, 13)


def test_event_poller_without_predicate(fake_chain):
    fake_chain.blocks.height = 5
    event = FakeEvent([SimpleNamespace(block_number=5, tokenId=3)])
    poll = event_poller(event, start_block=5)
    assert poll().tokenId == 3


def test_wait_for_event(fake_chain):
    event = FakeEvent([])
    poll = event_poller(event, start_block=10)

    def mine():
        event.logs.append(SimpleNamespace(block_number=11, tokenId=0))
        fake_chain.blocks.height = 11

    timer = threading.Timer(0.05, mine)
    timer.start()
    try:
        log = wait_for(poll, timeout=5, interval=0.01)
    finally:
        timer.cancel()
    assert log.tokenId == 0
