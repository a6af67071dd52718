#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option
from dotenv import load_dotenv

from nft_deployment.constants import (
    DEFAULT_HIGH_VALUE,
    DYNAMIC_SVG_NFT,
    DYNAMIC_SVG_NFT_ADDRESS_ENVVAR,
    PRICE_FEED_MOCK,
)
from nft_deployment.options import address_option, auto_option
from nft_deployment.params import Transactor
from nft_deployment.selection import decode_token_uri, select_variant
from nft_deployment.utils import get_contract_container

load_dotenv()


@click.command(cls=ConnectedProviderCommand, name="mint-dynamic-svg-nft")
@account_option()
@network_option()
@address_option(DYNAMIC_SVG_NFT_ADDRESS_ENVVAR)
@auto_option
@click.option(
    "--high-value",
    help="Price (with the feed's decimals) at which the token shows its high image.",
    type=int,
    default=DEFAULT_HIGH_VALUE,
    show_default=True,
)
def cli(account, network, address, auto, high_value):
    """Mints a DynamicSvgNft with a price threshold and prints its token URI."""
    click.echo(f"Connected to {network.name} network.")
    if not address:
        raise click.ClickException(f"{DYNAMIC_SVG_NFT_ADDRESS_ENVVAR} is not set.")

    dynamic_svg_nft = get_contract_container(DYNAMIC_SVG_NFT).at(address)
    token_id = dynamic_svg_nft.getTokenCounter()

    transactor = Transactor(account=account, autosign=auto)
    transactor.transact(dynamic_svg_nft.mintNft, high_value)

    token_uri = dynamic_svg_nft.tokenURI(token_id)
    click.echo(f"Dynamic SVG NFT index {token_id} tokenURI: {token_uri}")

    # AggregatorV3Interface; the mock exposes the same ABI as a live feed
    price_feed = get_contract_container(PRICE_FEED_MOCK).at(dynamic_svg_nft.getPriceFeed())
    price = price_feed.latestRoundData()[1]
    variant = select_variant(observed=price, threshold=high_value)
    metadata = decode_token_uri(token_uri)
    click.echo(
        f"Price {price} against threshold {high_value}: expecting the {variant.value} image."
    )
    if metadata["image"] == dynamic_svg_nft.getHighSVG():
        click.echo("(i) Token shows the high image.")
    else:
        click.echo("(i) Token shows the low image.")


if __name__ == "__main__":
    cli()
