#!/usr/bin/python3

import click
from ape import chain
from ape.cli import ConnectedProviderCommand, account_option, network_option
from dotenv import load_dotenv

from nft_deployment.constants import (
    RANDOM_IPFS_NFT,
    RANDOM_IPFS_NFT_ADDRESS_ENVVAR,
    VRF_COORDINATOR_MOCK,
    Breed,
)
from nft_deployment.mint import (
    InsufficientPayment,
    MintTimeout,
    RequestLedger,
    check_payment,
    event_poller,
    wait_for,
)
from nft_deployment.networks import is_local_network
from nft_deployment.options import address_option, auto_option, timeout_option
from nft_deployment.params import Transactor
from nft_deployment.registry import get_registry_address
from nft_deployment.types import WeiAmount
from nft_deployment.utils import get_contract_container, get_registry_filepath

load_dotenv()


@click.command(cls=ConnectedProviderCommand, name="mint-random-ipfs-nft")
@account_option()
@network_option()
@address_option(RANDOM_IPFS_NFT_ADDRESS_ENVVAR)
@auto_option
@timeout_option
@click.option(
    "--value",
    help="Amount to send with the request (e.g. 0.01ether); defaults to the contract's mint fee.",
    type=WeiAmount(),
)
def cli(account, network, address, auto, timeout, value):
    """
    Requests a RandomIpfsNft and waits for the VRF fulfillment to mint it.

    On development networks the request is fulfilled through the
    VRFCoordinatorV2_5Mock recorded in the registry.
    """
    click.echo(f"Connected to {network.name} network.")
    if not address:
        raise click.ClickException(f"{RANDOM_IPFS_NFT_ADDRESS_ENVVAR} is not set.")

    random_ipfs_nft = get_contract_container(RANDOM_IPFS_NFT).at(address)
    mint_fee = random_ipfs_nft.getMintFee()
    value = mint_fee if value is None else value
    try:
        check_payment(value=value, mint_fee=mint_fee)
    except InsufficientPayment as e:
        raise click.ClickException(str(e))

    ledger = RequestLedger()
    start_block = chain.blocks.height
    transactor = Transactor(account=account, autosign=auto)
    receipt = transactor.transact(random_ipfs_nft.requestNft, value=value)
    requested = receipt.events.filter(random_ipfs_nft.NftRequested)[0]
    ledger.record(requested.requestId, requested.requester)
    click.echo(f"(i) Requested NFT with request id {requested.requestId}")

    if is_local_network():
        mock_address = get_registry_address(
            filepath=get_registry_filepath(),
            chain_id=chain.chain_id,
            name=VRF_COORDINATOR_MOCK,
        )
        if not mock_address:
            raise click.ClickException(f"No {VRF_COORDINATOR_MOCK} registered for this chain.")
        vrf_coordinator = get_contract_container(VRF_COORDINATOR_MOCK).at(mock_address)
        transactor.transact(
            vrf_coordinator.fulfillRandomWords, requested.requestId, random_ipfs_nft.address
        )

    requester = ledger.requester_of(requested.requestId)
    click.echo(f"Waiting up to {timeout} seconds for the VRF response...")
    try:
        minted = wait_for(
            event_poller(
                random_ipfs_nft.NftMinted,
                start_block=start_block,
                predicate=lambda log: log.minter == requester,
            ),
            timeout=timeout,
        )
    except MintTimeout as e:
        raise click.ClickException(f"Timeout waiting for VRF response: {e}")
    ledger.fulfill(requested.requestId)

    click.echo("\n✓ NFT Minted!")
    click.echo(f"Token ID: {minted.tokenId}")
    click.echo(f"Breed: {Breed(minted.breed).name}")
    click.echo(f"Token URI: {random_ipfs_nft.tokenURI(minted.tokenId)}")


if __name__ == "__main__":
    cli()
