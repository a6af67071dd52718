import importlib
import json
import os
from pathlib import Path
from typing import List

from ape import networks, project
from ape.contracts import ContractContainer, ContractInstance

from nft_deployment.constants import ARTIFACTS_DIR, REGISTRY_FILENAME
from nft_deployment.networks import is_local_network

SVG_ROOT_TAG = "<svg"


class ContractNotFound(ValueError):
    """Raised when a contract is in neither the project nor its dependencies."""


def _load_json(filepath: Path):
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def read_svg(filepath: Path) -> str:
    """Reads an SVG document to be passed verbatim to a contract constructor."""
    if not filepath.exists():
        raise FileNotFoundError(f"SVG not found at {filepath}")
    with open(filepath, "r", encoding="utf-8") as file:
        svg = file.read().strip()
    if not svg.startswith(SVG_ROOT_TAG):
        raise ValueError(f"{filepath} is not an SVG document.")
    return svg


def get_registry_filepath(artifacts_dir: Path = ARTIFACTS_DIR) -> Path:
    return artifacts_dir / REGISTRY_FILENAME


def _require_plugin(module: str, plugin: str):
    try:
        return importlib.import_module(module)
    except ImportError:
        raise ImportError(f"Please install the {plugin} plugin to use this script.")


def check_explorer_api_key() -> None:
    """Checks that the block explorer API key of the connected ecosystem is set."""
    etherscan_utils = _require_plugin("ape_etherscan.utils", "ape-etherscan")
    ecosystem_name = networks.provider.network.ecosystem.name
    envvar = etherscan_utils.API_KEY_ENV_KEY_MAP.get(ecosystem_name)
    if not envvar:
        raise ValueError(f"Contract verification is not supported on {ecosystem_name}.")
    if not os.environ.get(envvar):
        raise ValueError(f"{envvar} is not set.")


def check_infura_api_key() -> None:
    """Checks that one of the Infura API key variables is set."""
    provider = _require_plugin("ape_infura.provider", "ape-infura")
    envvars = provider._ENVIRONMENT_VARIABLE_NAMES
    if not any(os.environ.get(envvar) for envvar in envvars):
        raise ValueError(f"No Infura API key found in environment variables: {', '.join(envvars)}")


def check_plugins(verify: bool = False) -> None:
    """
    Checks the plugins a live deployment relies on: ape-infura when it is the
    provider, ape-etherscan when the deployment is to be verified.
    Development networks need neither.
    """
    if is_local_network():
        return
    print("Checking plugins...")
    if networks.provider.name == "infura":
        check_infura_api_key()
    if verify:
        check_explorer_api_key()


def verify_contracts(contracts: List[ContractInstance]) -> None:
    explorer = networks.provider.network.explorer
    if explorer is None:
        raise ValueError(f"No block explorer available for {networks.provider.network.name}.")
    for instance in contracts:
        print(f"(i) Verifying {instance.contract_type.name} at {instance.address}...")
        explorer.publish_contract(instance.address)
        print(f"✓ {instance.contract_type.name} verified")


def _find_in_dependencies(contract_name: str) -> ContractContainer:
    for dependency_name, versions in project.dependencies.items():
        matches = [
            getattr(version, contract_name)
            for version in versions.values()
            if hasattr(version, contract_name)
        ]
        if len(matches) > 1:
            raise ContractNotFound(
                f"{contract_name} is ambiguous across {dependency_name} versions."
            )
        if matches:
            return matches[0]
    raise ContractNotFound(f"No contract found with name '{contract_name}'.")


def get_contract_container(contract_name: str) -> ContractContainer:
    """
    Returns the container of an NFT contract or one of its mocks.
    The chainlink mocks may only be available through a project dependency.
    """
    try:
        return getattr(project, contract_name)
    except AttributeError:
        return _find_in_dependencies(contract_name)
