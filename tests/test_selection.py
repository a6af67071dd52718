import pytest

from nft_deployment.constants import CHANCE_TABLE, Breed
from nft_deployment.selection import (
    RangeOutOfBounds,
    Variant,
    build_dynamic_token_uri,
    choose_variant,
    decode_token_uri,
    get_breed_from_modded_rng,
    image_uri_to_svg,
    modded_rng,
    select_variant,
    svg_to_image_uri,
    validate_chance_table,
)

PRICE = 2000_00000000
LOW_SVG = '<svg xmlns="http://www.w3.org/2000/svg"><text>:(</text></svg>'
HIGH_SVG = '<svg xmlns="http://www.w3.org/2000/svg"><text>:)</text></svg>'


def test_chance_table():
    assert CHANCE_TABLE == (10, 30, 100)


@pytest.mark.parametrize(
    "values, expected",
    [
        (range(0, 10), Breed.PUG),
        (range(10, 30), Breed.SHIBA_INU),
        (range(30, 100), Breed.ST_BERNARD),
    ],
)
def test_breed_buckets(values, expected):
    for value in values:
        assert get_breed_from_modded_rng(value) == expected


def test_breed_scenarios():
    assert get_breed_from_modded_rng(5) == 0
    assert get_breed_from_modded_rng(25) == 1
    assert get_breed_from_modded_rng(75) == 2
    assert get_breed_from_modded_rng(99) == Breed.ST_BERNARD


def test_breed_boundaries():
    assert get_breed_from_modded_rng(9) == Breed.PUG
    assert get_breed_from_modded_rng(10) == Breed.SHIBA_INU
    assert get_breed_from_modded_rng(29) == Breed.SHIBA_INU
    assert get_breed_from_modded_rng(30) == Breed.ST_BERNARD


def test_alternative_chance_table():
    table = [10, 40, 100]
    assert get_breed_from_modded_rng(5, table) == 0
    assert get_breed_from_modded_rng(10, table) == 1
    assert get_breed_from_modded_rng(25, table) == 1
    assert get_breed_from_modded_rng(39, table) == 1
    assert get_breed_from_modded_rng(40, table) == 2
    assert get_breed_from_modded_rng(75, table) == 2


def test_other_table_shapes_return_plain_index():
    result = get_breed_from_modded_rng(60, [50, 100])
    assert result == 1
    assert not isinstance(result, Breed)


def test_only_the_breed_table_yields_breeds():
    # same shape as the breed table, different buckets
    result = get_breed_from_modded_rng(25, [10, 40, 100])
    assert result == 1
    assert not isinstance(result, Breed)

    assert isinstance(get_breed_from_modded_rng(25, [10, 30, 100]), Breed)


def test_breed_selection_is_deterministic():
    results = {get_breed_from_modded_rng(42) for _ in range(10)}
    assert results == {Breed.ST_BERNARD}


@pytest.mark.parametrize("value", [100, 150, -1])
def test_out_of_bounds(value):
    with pytest.raises(RangeOutOfBounds):
        get_breed_from_modded_rng(value)


@pytest.mark.parametrize("table", [[], [10, 30], [30, 10, 100], [10, 10, 100], [0, 100]])
def test_invalid_chance_tables(table):
    with pytest.raises(ValueError):
        validate_chance_table(table)


def test_modded_rng():
    assert modded_rng(0) == 0
    assert modded_rng(105) == 5
    assert modded_rng(2**256 - 1) == (2**256 - 1) % 100
    assert get_breed_from_modded_rng(modded_rng(1234567)) == Breed.ST_BERNARD


def test_select_variant():
    assert select_variant(observed=PRICE, threshold=PRICE) is Variant.HIGH
    assert select_variant(observed=PRICE - 1, threshold=PRICE) is Variant.LOW
    assert select_variant(observed=PRICE + 1, threshold=PRICE) is Variant.HIGH


def test_select_variant_scenarios():
    threshold = 2000_00000000
    assert select_variant(2000_00000000, threshold) is Variant.HIGH
    assert select_variant(1500_00000000, threshold) is Variant.LOW
    assert select_variant(2500_00000000, threshold) is Variant.HIGH


def test_select_variant_negative_threshold():
    assert select_variant(observed=0, threshold=-1000_00000000) is Variant.HIGH


def test_choose_variant_returns_given_values():
    low, high = object(), object()
    assert choose_variant(PRICE, 3000_00000000, low, high) is low
    assert choose_variant(PRICE, 1500_00000000, low, high) is high


def test_svg_image_uri():
    image_uri = svg_to_image_uri("<svg>test</svg>")
    assert image_uri.startswith("data:image/svg+xml;base64,")
    assert image_uri_to_svg(image_uri) == "<svg>test</svg>"

    with pytest.raises(ValueError):
        image_uri_to_svg("ipfs://QmPugHash")


def test_dynamic_token_uri():
    low_uri, high_uri = svg_to_image_uri(LOW_SVG), svg_to_image_uri(HIGH_SVG)
    image = choose_variant(PRICE, 3000_00000000, low_uri, high_uri)

    token_uri = build_dynamic_token_uri("Dynamic SVG NFT", image)
    assert token_uri.startswith("data:application/json;base64,")

    metadata = decode_token_uri(token_uri)
    assert metadata["name"] == "Dynamic SVG NFT"
    assert "description" in metadata
    assert metadata["attributes"] == [{"trait_type": "coolness", "value": 100}]
    assert metadata["image"] == low_uri
    assert image_uri_to_svg(metadata["image"]) == LOW_SVG


def test_decode_rejects_other_uris():
    with pytest.raises(ValueError):
        decode_token_uri("ipfs://QmPugHash")
