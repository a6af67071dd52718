import json
from unittest import mock

import pytest

from nft_deployment.networks import NetworkConfig

SEPOLIA_PRICE_FEED = "0x694AA1769357215DE4FAC081bf1f309aDC325306"
SEPOLIA_VRF_COORDINATOR = "0x9DdfaCa8183c41ad55329BdeeD9F6A8d53168B1B"

NETWORKS = {
    "networks": {
        11155111: {
            "name": "sepolia",
            "vrf_coordinator": SEPOLIA_VRF_COORDINATOR,
            "key_hash": "0x787d74caea10b2b357790d5b5247c2f63d1d91572a9846f780606e4d953677ae",
            "subscription_id": "87493399841768530621857160339541952434275371257915447427041707750846371254941",
            "callback_gas_limit": "500000",
            "mint_fee": "10000000000000000",
            "eth_usd_price_feed": SEPOLIA_PRICE_FEED,
        },
        31337: {
            "name": "localhost",
            "key_hash": "0x6c3699283bda56ad74f6b855546325b68d482e983852a7e34c2d6a8c3f0a5e2a",
            "subscription_id": "1",
            "callback_gas_limit": "500000",
            "mint_fee": "10000000000000000",
            "decimals": 8,
            "initial_answer": 2000_00000000,
        },
        1: {
            "name": "mainnet",
            "eth_usd_price_feed": "0x5f4ec3df9cbd43714fe2740f5e3616155c5b8419",
        },
    }
}

TOKEN_URIS = ["ipfs://QmPugHash", "ipfs://QmShibaHash", "ipfs://QmStBernardHash"]


# Fixtures
@pytest.fixture(scope="session")
def network_config():
    return NetworkConfig.from_dict(NETWORKS)


@pytest.fixture
def sepolia(network_config):
    return network_config.get_profile(11155111)


@pytest.fixture
def localhost(network_config):
    return network_config.get_profile(31337)


@pytest.fixture
def mainnet(network_config):
    return network_config.get_profile(1)


@pytest.fixture
def images_dir(tmp_path):
    directory = tmp_path / "randomNft"
    directory.mkdir()
    for name in ("pug", "shiba-inu", "st-bernard"):
        (directory / f"{name}.png").write_bytes(b"\x89PNG" + name.encode())
    return directory


@pytest.fixture
def token_uris_file(tmp_path):
    filepath = tmp_path / "token-uris.json"
    filepath.write_text(json.dumps(TOKEN_URIS, indent=2))
    return filepath


@pytest.fixture
def pin_response():
    def _pin_response(ipfs_hash):
        response = mock.Mock()
        response.json.return_value = {
            "IpfsHash": ipfs_hash,
            "PinSize": 1234,
            "Timestamp": "2024-01-01T00:00:00.000Z",
        }
        return response

    return _pin_response
