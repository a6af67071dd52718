from enum import IntEnum
from pathlib import Path

from web3 import Web3

import nft_deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(nft_deployment.__file__).parent
PROJECT_ROOT = DEPLOYMENT_DIR.parent
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"
NETWORKS_FILEPATH = DEPLOYMENT_DIR / "networks.yml"
IMAGES_DIR = PROJECT_ROOT / "images"
RANDOM_NFT_IMAGES_DIR = IMAGES_DIR / "randomNft"
DYNAMIC_NFT_IMAGES_DIR = IMAGES_DIR / "dynamicNft"
LOW_SVG_FILEPATH = DYNAMIC_NFT_IMAGES_DIR / "frown.svg"
HIGH_SVG_FILEPATH = DYNAMIC_NFT_IMAGES_DIR / "happy.svg"
TOKEN_URIS_FILEPATH = ARTIFACTS_DIR / "token-uris.json"
REGISTRY_FILENAME = "nft-registry.json"

#
# Networks
#

LOCALHOST_CHAIN_ID = 31337

# "local" is ape's name for its ephemeral test network
DEVELOPMENT_NETWORKS = ("hardhat", "localhost", "local")

#
# Mocks
#

# VRFCoordinatorV2_5Mock
BASE_FEE = Web3.to_wei(0.1, "ether")  # 0.1 LINK
GAS_PRICE_LINK = 1_000_000_000  # 0.000000001 LINK per gas
WEI_PER_UNIT_LINK = Web3.to_wei(1, "ether")

# MockV3Aggregator
DECIMALS = 8
INITIAL_PRICE = 2000_00000000  # 2000 USD with 8 decimals

#
# Contracts
#

BASIC_NFT = "BasicNft"
DYNAMIC_SVG_NFT = "DynamicSvgNft"
RANDOM_IPFS_NFT = "RandomIpfsNft"
VRF_COORDINATOR_MOCK = "VRFCoordinatorV2_5Mock"
PRICE_FEED_MOCK = "MockV3Aggregator"

#
# Environment
#

BASIC_NFT_ADDRESS_ENVVAR = "BASIC_NFT_ADDRESS"
DYNAMIC_SVG_NFT_ADDRESS_ENVVAR = "DYNAMIC_SVG_NFT_ADDRESS"
RANDOM_IPFS_NFT_ADDRESS_ENVVAR = "RANDOM_IPFS_NFT_ADDRESS"
PINATA_API_KEY_ENVVAR = "PINATA_API_KEY"
PINATA_API_SECRET_ENVVAR = "PINATA_API_SECRET"

#
# Pinata
#

PINATA_API_URL = "https://api.pinata.cloud"
IPFS_SCHEME = "ipfs://"

#
# Breeds
#

MAX_CHANCE_VALUE = 100
CHANCE_TABLE = (10, 30, MAX_CHANCE_VALUE)


class Breed(IntEnum):
    PUG = 0
    SHIBA_INU = 1
    ST_BERNARD = 2


#
# Minting
#

FULFILLMENT_TIMEOUT = 5 * 60  # seconds
FULFILLMENT_POLL_INTERVAL = 2  # seconds
DEFAULT_HIGH_VALUE = 2000_00000000
