import json
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from ape.contracts import ContractInstance
from eth_typing import ABI, ChecksumAddress
from eth_utils import to_checksum_address

from nft_deployment.utils import _load_json

ChainId = int
ContractName = str

STANDARD_REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


class RegistryEntry(NamedTuple):
    """A deployed NFT or mock contract, as recorded in the registry."""

    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    abi: ABI
    tx_hash: str
    block_number: int
    deployer: str

    @property
    def key(self) -> Tuple[ChainId, ContractName]:
        return self.chain_id, self.name

    @classmethod
    def from_json(cls, chain_id: str, name: ContractName, data: Dict[str, Any]) -> "RegistryEntry":
        return cls(chain_id=int(chain_id), name=name, **data)

    def to_json(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            # stable order so redeployments diff cleanly
            "abi": sorted(self.abi, key=lambda d: (d["type"], d.get("name", ""))),
            "tx_hash": self.tx_hash,
            "block_number": int(self.block_number),
            "deployer": self.deployer,
        }


def _get_entry(contract_instance: ContractInstance) -> RegistryEntry:
    receipt = contract_instance.receipt
    contract_type = contract_instance.contract_type
    abi = [item.model_dump(mode="json", by_alias=True) for item in contract_type.abi]
    return RegistryEntry(
        chain_id=receipt.chain_id,
        name=contract_type.name,
        address=to_checksum_address(contract_instance.address),
        abi=abi,
        tx_hash=str(receipt.txn_hash),
        block_number=receipt.block_number,
        deployer=receipt.transaction.sender,
    )


def read_registry(filepath: Path) -> List[RegistryEntry]:
    data = _load_json(filepath)
    return [
        RegistryEntry.from_json(chain_id, name, artifacts)
        for chain_id, contracts in data.items()
        for name, artifacts in contracts.items()
    ]


def write_registry(entries: List[RegistryEntry], filepath: Path) -> Path:
    """
    Merges entries into the registry file. An entry replaces the one already
    recorded for the same chain id and contract name; all others are kept.
    """
    if not entries:
        print("No entries provided.")
        return filepath

    merged = dict()
    if filepath.exists():
        print(f"Updating existing registry at {filepath}.")
        merged = {entry.key: entry for entry in read_registry(filepath)}
    else:
        print(f"Creating new registry at {filepath}.")

    for entry in entries:
        replaced = merged.get(entry.key)
        if replaced:
            print(f"Replacing {entry.name} on chain id {entry.chain_id} ({replaced.address}).")
        merged[entry.key] = entry

    data = defaultdict(dict)
    for chain_id, name in sorted(merged, key=lambda key: (str(key[0]), key[1])):
        data[str(chain_id)][name] = merged[(chain_id, name)].to_json()

    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as file:
        json.dump(data, file, **STANDARD_REGISTRY_JSON_FORMAT)
    return filepath


def get_registry_address(
    filepath: Path, chain_id: ChainId, name: ContractName
) -> Optional[ChecksumAddress]:
    """Returns the registered address of a contract, or None if it is not registered."""
    if not filepath.exists():
        return None
    for entry in read_registry(filepath):
        if entry.key == (chain_id, name):
            return to_checksum_address(entry.address)
    return None


def registry_from_ape_deployments(
    deployments: List[ContractInstance], output_filepath: Path
) -> Path:
    """Adds ape deployments to the registry."""
    entries = [_get_entry(contract_instance=instance) for instance in deployments]
    output_filepath = write_registry(entries=entries, filepath=output_filepath)
    print(f"(i) Registry written to {output_filepath}!")
    return output_filepath
