import base64
import json
from enum import Enum
from typing import Any, Dict, Sequence, TypeVar, Union

from nft_deployment.constants import CHANCE_TABLE, MAX_CHANCE_VALUE, Breed

SVG_IMAGE_URI_PREFIX = "data:image/svg+xml;base64,"
JSON_TOKEN_URI_PREFIX = "data:application/json;base64,"

V = TypeVar("V")


class RangeOutOfBounds(ValueError):
    """Raised when a value does not fall within any bucket of a chance table."""


class Variant(Enum):
    LOW = "low"
    HIGH = "high"


def validate_chance_table(chance_table: Sequence[int]) -> None:
    """Checks that thresholds are strictly increasing and end at MAX_CHANCE_VALUE."""
    if not chance_table:
        raise ValueError("Chance table is empty.")
    previous = 0
    for threshold in chance_table:
        if threshold <= previous:
            raise ValueError(f"Chance table {list(chance_table)} is not strictly increasing.")
        previous = threshold
    if chance_table[-1] != MAX_CHANCE_VALUE:
        raise ValueError(
            f"Chance table {list(chance_table)} must end at exactly {MAX_CHANCE_VALUE}."
        )


def modded_rng(random_word: int) -> int:
    """Reduces a VRF random word to the [0, MAX_CHANCE_VALUE) range."""
    return random_word % MAX_CHANCE_VALUE


def get_breed_from_modded_rng(
    value: int, chance_table: Sequence[int] = CHANCE_TABLE
) -> Union[Breed, int]:
    """
    Returns the index of the first cumulative threshold greater than the given value.

    With the breed chance table the index is returned as a Breed:
    0-9 is a PUG, 10-29 a SHIBA_INU and 30-99 a ST_BERNARD.
    """
    validate_chance_table(chance_table)
    if value < 0:
        raise RangeOutOfBounds(f"{value} is below the chance table range.")
    for index, threshold in enumerate(chance_table):
        if value < threshold:
            if tuple(chance_table) == CHANCE_TABLE:
                return Breed(index)
            return index
    raise RangeOutOfBounds(f"{value} is not below the last threshold ({chance_table[-1]}).")


def select_variant(observed: int, threshold: int) -> Variant:
    """Returns HIGH when the observed value reaches the threshold (inclusive), LOW otherwise."""
    if observed >= threshold:
        return Variant.HIGH
    return Variant.LOW


def choose_variant(observed: int, threshold: int, low: V, high: V) -> V:
    if select_variant(observed, threshold) is Variant.HIGH:
        return high
    return low


def svg_to_image_uri(svg: str) -> str:
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"{SVG_IMAGE_URI_PREFIX}{encoded}"


def image_uri_to_svg(image_uri: str) -> str:
    if not image_uri.startswith(SVG_IMAGE_URI_PREFIX):
        raise ValueError(f"Not an SVG image URI: {image_uri[:40]}...")
    return base64.b64decode(image_uri[len(SVG_IMAGE_URI_PREFIX) :]).decode("utf-8")


def build_dynamic_token_uri(name: str, image_uri: str) -> str:
    """Builds the base64 JSON token URI served by the dynamic SVG NFT."""
    metadata = {
        "name": name,
        "description": "An NFT that changes based on the Chainlink Feed",
        "attributes": [{"trait_type": "coolness", "value": 100}],
        "image": image_uri,
    }
    encoded = base64.b64encode(json.dumps(metadata).encode("utf-8")).decode("ascii")
    return f"{JSON_TOKEN_URI_PREFIX}{encoded}"


def decode_token_uri(token_uri: str) -> Dict[str, Any]:
    if not token_uri.startswith(JSON_TOKEN_URI_PREFIX):
        raise ValueError(f"Not a base64 JSON token URI: {token_uri[:40]}...")
    payload = base64.b64decode(token_uri[len(JSON_TOKEN_URI_PREFIX) :])
    return json.loads(payload)
