#!/usr/bin/python3

from pathlib import Path

import click
from dotenv import load_dotenv

from nft_deployment.constants import TOKEN_URIS_FILEPATH, Breed
from nft_deployment.ipfs import PinataClient, handle_token_uris, write_token_uris
from nft_deployment.options import images_dir_option, strict_option


@click.command(name="upload-to-pinata")
@images_dir_option
@strict_option
@click.option(
    "--allow-partial",
    help="Keep the token URIs of a partial upload instead of failing (not deployable).",
    is_flag=True,
)
@click.option(
    "--output",
    "-o",
    help="File to write the token URIs to.",
    type=click.Path(dir_okay=False),
    default=str(TOKEN_URIS_FILEPATH),
    show_default=True,
)
def cli(images_dir, strict, allow_partial, output):
    """
    Uploads the RandomIpfsNft images and their metadata to Pinata and
    saves the resulting token URIs for the RandomIpfsNft deployment.

    Requires PINATA_API_KEY and PINATA_API_SECRET (a .env file is read).

    ape run upload_to_pinata --images-dir images/randomNft
    """
    load_dotenv()
    try:
        client = PinataClient.from_env()
        client.test_authentication()
    except PinataClient.AuthenticationError as e:
        raise click.ClickException(str(e))
    click.echo("✓ Pinata authentication successful!")

    try:
        token_uris = handle_token_uris(
            client=client,
            images_dir=Path(images_dir),
            strict=strict,
            expected=None if allow_partial else len(Breed),
        )
    except PinataClient.UploadError as e:
        raise click.ClickException(str(e))

    write_token_uris(token_uris, filepath=Path(output))


if __name__ == "__main__":
    cli()
