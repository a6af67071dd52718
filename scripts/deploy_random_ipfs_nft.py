#!/usr/bin/python3

from pathlib import Path

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from nft_deployment.constants import RANDOM_IPFS_NFT, TOKEN_URIS_FILEPATH
from nft_deployment.ipfs import read_token_uris
from nft_deployment.networks import NetworkConfig, NetworkConfigError
from nft_deployment.options import auto_option, verify_option
from nft_deployment.params import Deployer, resolve_random_ipfs_nft_parameters
from nft_deployment.utils import get_contract_container


@click.command(cls=ConnectedProviderCommand, name="deploy-random-ipfs-nft")
@account_option()
@network_option()
@verify_option
@auto_option
@click.option(
    "--token-uris",
    help="JSON file of token URIs written by upload_to_pinata.",
    type=click.Path(dir_okay=False),
    default=str(TOKEN_URIS_FILEPATH),
    show_default=True,
)
def cli(account, network, verify, auto, token_uris):
    """
    Deploys RandomIpfsNft with the token URIs produced by upload_to_pinata.

    On development networks a VRFCoordinatorV2_5Mock is deployed, a subscription
    is created and funded on it, and the NFT is added as its consumer.

    ape run upload_to_pinata
    ape run deploy_random_ipfs_nft --network ethereum:sepolia:infura --verify
    """
    click.echo(f"Connected to {network.name} network.")
    network_config = NetworkConfig.from_yaml()
    try:
        dog_token_uris = read_token_uris(Path(token_uris))
    except FileNotFoundError as e:
        raise click.ClickException(str(e))

    deployer = Deployer(
        network_config=network_config, verify=verify, account=account, autosign=auto
    )
    try:
        parameters = resolve_random_ipfs_nft_parameters(
            profile=deployer.profile,
            development=deployer.development,
            token_uris=dog_token_uris,
            deploy_mock=deployer.deploy_vrf_coordinator_mock,
        )
    except NetworkConfigError as e:
        raise click.ClickException(str(e))

    random_ipfs_nft = deployer.deploy(get_contract_container(RANDOM_IPFS_NFT), parameters)
    click.echo(f"✓ {RANDOM_IPFS_NFT} deployed at {random_ipfs_nft.address}")

    if deployer.development:
        deployer.add_vrf_consumer(random_ipfs_nft, parameters["subscriptionId"])
    else:
        click.echo(
            f"(i) Add {random_ipfs_nft.address} as a consumer of VRF subscription "
            f"{parameters['subscriptionId']} before minting."
        )

    deployer.finalize(deployments=[random_ipfs_nft, *deployer.mocks])


if __name__ == "__main__":
    cli()
