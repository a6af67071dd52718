#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option
from dotenv import load_dotenv

from nft_deployment.constants import BASIC_NFT, BASIC_NFT_ADDRESS_ENVVAR
from nft_deployment.options import address_option, auto_option
from nft_deployment.params import Transactor
from nft_deployment.utils import get_contract_container

load_dotenv()


@click.command(cls=ConnectedProviderCommand, name="mint-basic-nft")
@account_option()
@network_option()
@address_option(BASIC_NFT_ADDRESS_ENVVAR)
@auto_option
def cli(account, network, address, auto):
    """Mints a BasicNft and prints its token URI."""
    click.echo(f"Connected to {network.name} network.")
    if not address:
        raise click.ClickException(f"{BASIC_NFT_ADDRESS_ENVVAR} is not set.")

    basic_nft = get_contract_container(BASIC_NFT).at(address)
    token_id = basic_nft.getTokenCounter()

    transactor = Transactor(account=account, autosign=auto)
    transactor.transact(basic_nft.mintNft)

    click.echo(f"Basic NFT index {token_id} tokenURI: {basic_nft.tokenURI(token_id)}")


if __name__ == "__main__":
    cli()
