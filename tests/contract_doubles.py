"""In-memory stand-ins for the ape contract objects the scripts talk to."""

from types import SimpleNamespace

MINTER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
NFT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
VRF_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"
PRICE_FEED_ADDRESS = "0x9fE46736679d2D9a65F0992F2272dE9f3c7fa6e0"


def abi_input(name, type_):
    return SimpleNamespace(name=name, type=type_)


class FakeMethod:
    """A contract transaction handler that records how it was called."""

    def __init__(self, contract, name, inputs=(), receipt=None):
        self.contract = contract
        self.name = name
        self.abis = [SimpleNamespace(name=name, inputs=list(inputs))]
        self.receipt = receipt
        self.calls = list()

    def __str__(self):
        return self.name

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        return self.receipt


class FakeEvent:
    """A contract event serving logs by block number."""

    def __init__(self, logs=()):
        self.logs = list(logs)
        self.queries = list()

    def range(self, start_block, stop_block):
        self.queries.append((start_block, stop_block))
        return [log for log in self.logs if start_block <= log.block_number < stop_block]


class FakeContract:
    def __init__(self, name, address):
        self.contract_type = SimpleNamespace(name=name)
        self.address = address

    def add_method(self, name, *inputs, receipt=None) -> FakeMethod:
        method = FakeMethod(self, name, inputs, receipt)
        setattr(self, name, method)
        return method


class DeployingAccount:
    """An account whose deployments return pre-built contracts by name."""

    def __init__(self, *instances, address=MINTER):
        self.address = address
        self.instances = {i.contract_type.name: i for i in instances}
        self.deployments = list()

    def deploy(self, container, *args):
        name = container.contract_type.name
        self.deployments.append((name, args))
        return self.instances[name]


def receipt_with(event, *logs):
    """A receipt whose events.filter(event) returns the given logs."""

    def filter_events(contract_event):
        return list(logs) if contract_event is event else list()

    return SimpleNamespace(events=SimpleNamespace(filter=filter_events))


def containers(*instances):
    """Replacement for get_contract_container, resolving names to the given contracts."""
    by_name = {i.contract_type.name: i for i in instances}

    def get_contract_container(name):
        instance = by_name[name]
        return SimpleNamespace(contract_type=instance.contract_type, at=lambda address: instance)

    return get_contract_container
