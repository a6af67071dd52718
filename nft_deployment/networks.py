from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, NamedTuple, Optional

import yaml
from ape import networks
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from nft_deployment.constants import DEVELOPMENT_NETWORKS, LOCALHOST_CHAIN_ID, NETWORKS_FILEPATH

ChainId = int

ADDRESS_FIELDS = ("vrf_coordinator", "eth_usd_price_feed")
INTEGER_FIELDS = (
    "subscription_id",
    "callback_gas_limit",
    "mint_fee",
    "decimals",
    "initial_answer",
)


class NetworkConfigError(ValueError):
    """Raised when a network is unknown or is missing a required parameter."""


class NetworkProfile(NamedTuple):
    """Deployment parameters for a single chain."""

    chain_id: ChainId
    name: str
    vrf_coordinator: Optional[ChecksumAddress] = None
    key_hash: Optional[str] = None
    subscription_id: Optional[int] = None
    callback_gas_limit: Optional[int] = None
    mint_fee: Optional[int] = None
    eth_usd_price_feed: Optional[ChecksumAddress] = None
    decimals: Optional[int] = None
    initial_answer: Optional[int] = None

    @property
    def is_development(self) -> bool:
        return is_development_network(self.name)

    def require(self, *fields: str) -> None:
        """Raises NetworkConfigError if any of the given fields is not configured."""
        missing = [field for field in fields if getattr(self, field) is None]
        if missing:
            raise NetworkConfigError(
                f"Missing {', '.join(missing)} for network '{self.name}' "
                f"(chain_id {self.chain_id}) in network configuration."
            )

    @classmethod
    def from_dict(cls, chain_id: ChainId, data: Dict[str, Any]) -> "NetworkProfile":
        unknown = set(data) - set(cls._fields)
        if unknown:
            raise NetworkConfigError(
                f"Unknown network parameter(s) {', '.join(sorted(unknown))} "
                f"for chain_id {chain_id}."
            )
        if not data.get("name"):
            raise NetworkConfigError(f"name is not set for chain_id {chain_id}.")

        values = dict(data)
        values.pop("chain_id", None)  # the table key is authoritative
        for field in ADDRESS_FIELDS:
            if values.get(field) is not None:
                values[field] = to_checksum_address(values[field])
        for field in INTEGER_FIELDS:
            if values.get(field) is not None:
                values[field] = int(values[field])
        return cls(chain_id=int(chain_id), **values)


class NetworkConfig(Mapping):
    """
    Read-only table of network profiles keyed by chain id.
    Loaded once and handed to every consumer that needs per-network parameters.
    """

    def __init__(self, profiles: Mapping[ChainId, NetworkProfile]):
        self._profiles = MappingProxyType(dict(profiles))

    def __getitem__(self, chain_id: ChainId) -> NetworkProfile:
        return self._profiles[chain_id]

    def __iter__(self) -> Iterator[ChainId]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def get_profile(self, chain_id: ChainId) -> NetworkProfile:
        try:
            return self._profiles[int(chain_id)]
        except KeyError:
            raise NetworkConfigError(f"Network configuration not found for chain_id {chain_id}")

    def by_name(self, name: str) -> NetworkProfile:
        for profile in self._profiles.values():
            if profile.name == name:
                return profile
        raise NetworkConfigError(f"Network configuration not found for network '{name}'")

    @classmethod
    def from_dict(cls, config: Dict) -> "NetworkConfig":
        networks_config = config.get("networks")
        if not networks_config:
            raise NetworkConfigError("Network configuration missing 'networks' field.")
        profiles = {
            int(chain_id): NetworkProfile.from_dict(chain_id, data or dict())
            for chain_id, data in networks_config.items()
        }
        return cls(profiles)

    @classmethod
    def from_yaml(cls, filepath: Path = NETWORKS_FILEPATH) -> "NetworkConfig":
        with open(filepath, "r") as file:
            return cls.from_dict(yaml.safe_load(file))


def is_development_network(network_name: str) -> bool:
    return network_name in DEVELOPMENT_NETWORKS


def is_local_network() -> bool:
    """Returns True if ape is connected to a development network."""
    return is_development_network(networks.provider.network.name)


def get_active_profile(config: NetworkConfig) -> NetworkProfile:
    """
    Returns the profile of the network ape is connected to.
    Development networks without a configured chain id fall back to the localhost profile.
    """
    network = networks.provider.network
    try:
        return config.get_profile(network.chain_id)
    except NetworkConfigError:
        if not is_development_network(network.name):
            raise
        return config.get_profile(LOCALHOST_CHAIN_ID)
