#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from nft_deployment.constants import BASIC_NFT
from nft_deployment.networks import NetworkConfig
from nft_deployment.options import auto_option, verify_option
from nft_deployment.params import Deployer
from nft_deployment.utils import get_contract_container


@click.command(cls=ConnectedProviderCommand, name="deploy-basic-nft")
@account_option()
@network_option()
@verify_option
@auto_option
def cli(account, network, verify, auto):
    """
    Deploys BasicNft; it takes no constructor parameters.

    ape run deploy_basic_nft --network ethereum:sepolia:infura --verify
    """
    click.echo(f"Connected to {network.name} network.")
    network_config = NetworkConfig.from_yaml()
    deployer = Deployer(
        network_config=network_config, verify=verify, account=account, autosign=auto
    )

    basic_nft = deployer.deploy(get_contract_container(BASIC_NFT))
    click.echo(f"✓ {BASIC_NFT} deployed at {basic_nft.address}")

    deployer.finalize(deployments=[basic_nft])


if __name__ == "__main__":
    cli()
