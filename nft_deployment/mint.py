import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, Dict, Optional, TypeVar

from ape import chain
from eth_typing import ChecksumAddress

from nft_deployment.constants import FULFILLMENT_POLL_INTERVAL, FULFILLMENT_TIMEOUT

T = TypeVar("T")


class InsufficientPayment(ValueError):
    """Raised when the value sent with a mint request is below the mint fee."""


class MintTimeout(TimeoutError):
    """Raised when a fulfillment is not observed before the deadline."""


class FulfillmentCancelled(Exception):
    """Raised when a fulfillment wait is cancelled before it completes."""


def check_payment(value: int, mint_fee: int) -> None:
    if value < mint_fee:
        raise InsufficientPayment(
            f"Mint requires at least {mint_fee} wei, {value} wei was offered."
        )


class RequestLedger:
    """
    Tracks pending randomness requests: request id -> requester.
    Entries are added when a request is observed and removed only on fulfillment.
    """

    class UnknownRequest(KeyError):
        """Raised when a request id was never recorded or is already fulfilled."""

    def __init__(self):
        self._requests: Dict[int, ChecksumAddress] = dict()

    def __contains__(self, request_id: int) -> bool:
        return request_id in self._requests

    def __len__(self) -> int:
        return len(self._requests)

    def record(self, request_id: int, requester: ChecksumAddress) -> None:
        if request_id in self._requests:
            raise ValueError(f"Request {request_id} is already pending.")
        self._requests[request_id] = requester

    def requester_of(self, request_id: int) -> ChecksumAddress:
        try:
            return self._requests[request_id]
        except KeyError:
            raise self.UnknownRequest(f"No pending request with id {request_id}")

    def fulfill(self, request_id: int) -> ChecksumAddress:
        """Removes a fulfilled request, returning its requester."""
        requester = self.requester_of(request_id)
        del self._requests[request_id]
        return requester


def _poll_until(
    poll: Callable[[], Optional[T]], interval: float, cancel: threading.Event
) -> Optional[T]:
    while not cancel.is_set():
        result = poll()
        if result is not None:
            return result
        cancel.wait(interval)
    return None


def wait_for(
    poll: Callable[[], Optional[T]],
    timeout: float = FULFILLMENT_TIMEOUT,
    interval: float = FULFILLMENT_POLL_INTERVAL,
    cancel: Optional[threading.Event] = None,
) -> T:
    """
    Calls poll until it returns something other than None.

    The wait runs as a future with an explicit deadline; on expiry the cancellation
    token is set, which stops the poller, and MintTimeout is raised.
    Setting the token from elsewhere ends the wait with FulfillmentCancelled.
    """
    cancel = cancel or threading.Event()
    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(_poll_until, poll, interval, cancel)
    try:
        result = future.result(timeout=timeout)
    except FutureTimeoutError:
        cancel.set()
        raise MintTimeout(f"No fulfillment observed within {timeout} seconds.")
    finally:
        executor.shutdown(wait=False)

    if result is None:
        raise FulfillmentCancelled("Fulfillment wait was cancelled.")
    return result


def event_poller(contract_event, start_block: int, predicate: Callable = None) -> Callable:
    """
    Returns a poll function yielding the first log of contract_event, emitted
    at or after start_block, that satisfies predicate.
    """
    next_block = start_block

    def poll():
        nonlocal next_block
        height = chain.blocks.height
        if height < next_block:
            return None
        for log in contract_event.range(next_block, height + 1):
            if predicate is None or predicate(log):
                return log
        next_block = height + 1
        return None

    return poll
