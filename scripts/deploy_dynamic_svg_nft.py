#!/usr/bin/python3

from pathlib import Path

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from nft_deployment.constants import DYNAMIC_SVG_NFT, HIGH_SVG_FILEPATH, LOW_SVG_FILEPATH
from nft_deployment.networks import NetworkConfig, NetworkConfigError
from nft_deployment.options import auto_option, verify_option
from nft_deployment.params import Deployer, resolve_dynamic_svg_nft_parameters
from nft_deployment.utils import get_contract_container, read_svg


@click.command(cls=ConnectedProviderCommand, name="deploy-dynamic-svg-nft")
@account_option()
@network_option()
@verify_option
@auto_option
@click.option(
    "--low-svg",
    help="SVG shown while the price is below a token's threshold.",
    type=click.Path(exists=True, dir_okay=False),
    default=str(LOW_SVG_FILEPATH),
    show_default=True,
)
@click.option(
    "--high-svg",
    help="SVG shown once the price reaches a token's threshold.",
    type=click.Path(exists=True, dir_okay=False),
    default=str(HIGH_SVG_FILEPATH),
    show_default=True,
)
def cli(account, network, verify, auto, low_svg, high_svg):
    """
    Deploys DynamicSvgNft against the ETH/USD price feed of the connected network.
    Development networks get a MockV3Aggregator instead.

    ape run deploy_dynamic_svg_nft --network ethereum:local:test
    ape run deploy_dynamic_svg_nft --network ethereum:sepolia:infura --verify
    """
    click.echo(f"Connected to {network.name} network.")
    network_config = NetworkConfig.from_yaml()
    try:
        low_svg = read_svg(Path(low_svg))
        high_svg = read_svg(Path(high_svg))
    except ValueError as e:
        raise click.ClickException(str(e))

    deployer = Deployer(
        network_config=network_config, verify=verify, account=account, autosign=auto
    )
    try:
        parameters = resolve_dynamic_svg_nft_parameters(
            profile=deployer.profile,
            development=deployer.development,
            low_svg=low_svg,
            high_svg=high_svg,
            deploy_mock=deployer.deploy_price_feed_mock,
        )
    except NetworkConfigError as e:
        raise click.ClickException(str(e))

    dynamic_svg_nft = deployer.deploy(get_contract_container(DYNAMIC_SVG_NFT), parameters)
    click.echo(f"✓ {DYNAMIC_SVG_NFT} deployed at {dynamic_svg_nft.address}")

    deployer.finalize(deployments=[dynamic_svg_nft, *deployer.mocks])


if __name__ == "__main__":
    cli()
