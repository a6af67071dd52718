import click

from nft_deployment.constants import FULFILLMENT_TIMEOUT, RANDOM_NFT_IMAGES_DIR
from nft_deployment.types import ContractAddress, MinInt

auto_option = click.option(
    "--auto",
    help="Automatically sign transactions.",
    is_flag=True,
)

verify_option = click.option(
    "--verify/--no-verify",
    help="Verify the deployed contracts on the block explorer.",
    default=False,
)

strict_option = click.option(
    "--strict",
    help="Abort if any image fails to upload.",
    is_flag=True,
)

images_dir_option = click.option(
    "--images-dir",
    "-i",
    help="Directory of images to upload.",
    type=click.Path(exists=True, file_okay=False),
    default=str(RANDOM_NFT_IMAGES_DIR),
    show_default=True,
)

timeout_option = click.option(
    "--timeout",
    "-t",
    help="Seconds to wait for the VRF fulfillment.",
    type=MinInt(1),
    default=FULFILLMENT_TIMEOUT,
    show_default=True,
)


def address_option(envvar: str):
    return click.option(
        "--address",
        "-a",
        help=f"Address of the deployed contract (defaults to ${envvar}).",
        type=ContractAddress(),
        envvar=envvar,
        required=False,
    )
