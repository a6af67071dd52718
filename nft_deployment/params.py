from collections import OrderedDict
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence

from ape import networks
from ape.api import AccountAPI, ReceiptAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer, ContractInstance, ContractTransactionHandler
from eth_typing import ChecksumAddress
from ethpm_types import MethodABI
from web3.auto import w3

from nft_deployment.confirm import _confirm_resolution, _continue, _preview
from nft_deployment.constants import (
    BASE_FEE,
    DECIMALS,
    GAS_PRICE_LINK,
    INITIAL_PRICE,
    PRICE_FEED_MOCK,
    VRF_COORDINATOR_MOCK,
    WEI_PER_UNIT_LINK,
    Breed,
)
from nft_deployment.networks import (
    NetworkConfig,
    NetworkConfigError,
    NetworkProfile,
    get_active_profile,
    is_local_network,
)
from nft_deployment.registry import registry_from_ape_deployments
from nft_deployment.utils import (
    check_plugins,
    get_contract_container,
    get_registry_filepath,
    verify_contracts,
)

# Constructor argument order expected by the NFT contracts
RANDOM_IPFS_NFT_PARAMETERS = (
    "vrfCoordinatorV2Plus",
    "keyHash",
    "subscriptionId",
    "callbackGasLimit",
    "dogTokenUris",
    "mintFee",
)
DYNAMIC_SVG_NFT_PARAMETERS = ("priceFeedAddress", "lowSvg", "highSvg")

VRF_SUBSCRIPTION_FUNDING = WEI_PER_UNIT_LINK * 10


class VrfStandIn(NamedTuple):
    """A locally deployed VRF coordinator and the subscription created on it."""

    address: ChecksumAddress
    subscription_id: Optional[int] = None


#
# Constructor parameter resolution
#


def resolve_random_ipfs_nft_parameters(
    profile: NetworkProfile,
    development: bool,
    token_uris: Sequence[str],
    deploy_mock: Callable[[], VrfStandIn],
) -> OrderedDict:
    """
    Resolves the RandomIpfsNft constructor parameters for a network.
    On development networks the VRF coordinator is replaced by a freshly deployed mock.
    """
    profile.require("key_hash", "subscription_id", "callback_gas_limit", "mint_fee")
    if len(token_uris) != len(Breed):
        raise NetworkConfigError(
            f"RandomIpfsNft needs {len(Breed)} token URIs (one per breed), got {len(token_uris)}."
        )

    subscription_id = profile.subscription_id
    if development:
        print("(i) Development network detected. Deploying VRF coordinator mock...")
        stand_in = deploy_mock()
        coordinator = stand_in.address
        if stand_in.subscription_id is not None:
            subscription_id = stand_in.subscription_id
    else:
        profile.require("vrf_coordinator")
        coordinator = profile.vrf_coordinator

    values = (
        coordinator,
        profile.key_hash,
        subscription_id,
        profile.callback_gas_limit,
        list(token_uris),
        profile.mint_fee,
    )
    return OrderedDict(zip(RANDOM_IPFS_NFT_PARAMETERS, values))


def resolve_dynamic_svg_nft_parameters(
    profile: NetworkProfile,
    development: bool,
    low_svg: str,
    high_svg: str,
    deploy_mock: Callable[[], ChecksumAddress],
) -> OrderedDict:
    """
    Resolves the DynamicSvgNft constructor parameters for a network.
    On development networks the price feed is replaced by a freshly deployed mock aggregator.
    """
    if development:
        print("(i) Development network detected. Deploying price feed mock...")
        price_feed = deploy_mock()
    else:
        profile.require("eth_usd_price_feed")
        price_feed = profile.eth_usd_price_feed

    values = (price_feed, low_svg, high_svg)
    return OrderedDict(zip(DYNAMIC_SVG_NFT_PARAMETERS, values))


#
# Validation
#


class InvalidConstructorParameters(ValueError):
    """Raised when resolved constructor parameters do not fit the constructor ABI."""


def _encodable(abi_inputs: Sequence[Any], values: Sequence[Any]) -> bool:
    return all(w3.is_encodable(i.type, v) for i, v in zip(abi_inputs, values))


def _validate_method_args(method_abis: List[MethodABI], args: Sequence[Any]) -> Dict[str, Any]:
    """Returns the arguments keyed by name for the first overload that accepts them."""
    if not method_abis:
        raise ValueError("No method abis provided for validation of args")
    for abi in method_abis:
        if len(abi.inputs) == len(args) and _encodable(abi.inputs, args):
            return {abi_input.name: arg for abi_input, arg in zip(abi.inputs, args)}
    raise ValueError(
        f"No overload of '{method_abis[0].name}' accepts {len(args)} arg(s) of the given type(s)"
    )


def _validate_constructor_abi_inputs(
    contract_name: str, abi_inputs: List[Any], resolved_parameters: OrderedDict
) -> None:
    if len(resolved_parameters) != len(abi_inputs):
        raise InvalidConstructorParameters(
            f"Constructor parameters length mismatch - {contract_name} ABI requires "
            f"{len(abi_inputs)}, got {len(resolved_parameters)}."
        )
    pairs = zip(abi_inputs, resolved_parameters.items())
    for position, (abi_input, (name, value)) in enumerate(pairs):
        if not _encodable([abi_input], [value]):
            raise InvalidConstructorParameters(
                f"{contract_name} constructor param '{name}' (position {position}) "
                f"is not encodable as '{abi_input.type}': {value!r}"
            )


#
# Accounts
#


def _describe_call(method: ContractTransactionHandler, named_args: Dict[str, Any], value: int):
    contract = method.contract
    lines = [f"\nTransacting {contract.contract_type.name}[{contract.address[:10]}].{method}"]
    if named_args:
        lines.append("with arguments:")
        lines.extend(f"\t{name}={_preview(arg)}" for name, arg in named_args.items())
    else:
        lines.append("with no arguments")
    if value:
        lines.append(f"\tvalue={value} wei")
    return "\n".join(lines)


class Transactor:
    """
    An ape account that prints, confirms and sends contract transactions.
    """

    def __init__(self, account: Optional[AccountAPI] = None, autosign: bool = False):
        self._account = account if account is not None else select_account()
        self._autosign = autosign
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        if hasattr(self._account, "set_autosign"):
            # test accounts sign without prompting
            self._account.set_autosign(autosign)

    def get_account(self) -> AccountAPI:
        return self._account

    def transact(self, method: ContractTransactionHandler, *args, value: int = 0) -> ReceiptAPI:
        named_args = _validate_method_args(method_abis=method.abis, args=args)
        print(_describe_call(method, named_args, value))
        if not self._autosign:
            _continue()

        kwargs = dict(sender=self._account, required_confirmations=1)
        if value:
            kwargs.update(value=value)
        return method(*args, **kwargs)


class Deployer(Transactor):
    """
    A transactor bound to the connected network's profile. Deploys the NFT
    contracts, stands in mocks on development networks and records every
    deployment in the registry.
    """

    def __init__(
        self,
        network_config: NetworkConfig,
        verify: bool,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
    ):
        super().__init__(account, autosign)
        self.network_config = network_config
        self.profile = get_active_profile(network_config)
        self.development = is_local_network()
        self.verify = verify and not self.development
        check_plugins(verify=self.verify)

        self.registry_filepath = get_registry_filepath()
        self.mocks: List[ContractInstance] = list()
        self._vrf_coordinator_mock = None

        self._print_deployment_info()
        if not self._autosign:
            _continue()

    def deploy(
        self, container: ContractContainer, parameters: Optional[OrderedDict] = None
    ) -> ContractInstance:
        parameters = parameters if parameters is not None else OrderedDict()
        _validate_constructor_abi_inputs(
            contract_name=container.contract_type.name,
            abi_inputs=container.constructor.abi.inputs,
            resolved_parameters=parameters,
        )
        return self._deploy_contract(container, parameters)

    def _deploy_contract(
        self, container: ContractContainer, resolved_params: OrderedDict
    ) -> ContractInstance:
        if not self._autosign:
            _confirm_resolution(resolved_params, container.contract_type.name)
        return self.get_account().deploy(container, *resolved_params.values())

    def _deploy_mock(self, contract_name: str, params: OrderedDict) -> ContractInstance:
        mock = self._deploy_contract(get_contract_container(contract_name), params)
        self.mocks.append(mock)
        print(f"✓ {contract_name} deployed at {mock.address}")
        return mock

    def deploy_price_feed_mock(self) -> ChecksumAddress:
        params = OrderedDict(
            decimals=self.profile.decimals or DECIMALS,
            initialAnswer=self.profile.initial_answer or INITIAL_PRICE,
        )
        return self._deploy_mock(PRICE_FEED_MOCK, params).address

    def deploy_vrf_coordinator_mock(self) -> VrfStandIn:
        """Deploys a VRF coordinator mock, then creates and funds a subscription on it."""
        params = OrderedDict(
            baseFee=BASE_FEE, gasPrice=GAS_PRICE_LINK, weiPerUnitLink=WEI_PER_UNIT_LINK
        )
        mock = self._deploy_mock(VRF_COORDINATOR_MOCK, params)

        receipt = self.transact(mock.createSubscription)
        subscription_id = receipt.events.filter(mock.SubscriptionCreated)[0].subId
        self.transact(mock.fundSubscription, subscription_id, VRF_SUBSCRIPTION_FUNDING)
        print(f"✓ Created and funded VRF subscription {subscription_id}")

        self._vrf_coordinator_mock = mock
        return VrfStandIn(address=mock.address, subscription_id=subscription_id)

    def add_vrf_consumer(self, consumer: ContractInstance, subscription_id: int) -> None:
        if self._vrf_coordinator_mock is None:
            raise ValueError("No VRF coordinator mock was deployed in this session.")
        self.transact(self._vrf_coordinator_mock.addConsumer, subscription_id, consumer.address)

    def finalize(self, deployments: List[ContractInstance]) -> None:
        """Records the deployments in the registry, then verifies them if requested."""
        registry_from_ape_deployments(
            deployments=deployments, output_filepath=self.registry_filepath
        )
        if self.verify:
            verify_contracts(contracts=deployments)

    def _print_deployment_info(self):
        network = networks.provider.network
        print(
            f"Account: {self.get_account().address}",
            f"Profile: {self.profile.name}",
            f"Development: {self.development}",
            f"Registry: {self.registry_filepath}",
            f"Verify: {self.verify}",
            f"Network: {network.ecosystem.name}:{network.name} (chain id {network.chain_id})",
            f"Gas Price: {networks.provider.gas_price}",
            sep="\n",
        )
