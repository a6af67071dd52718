from decimal import Decimal, InvalidOperation

import click
from ape.utils import ZERO_ADDRESS
from eth_utils import to_checksum_address
from web3 import Web3

# "gwei" before "wei" so the longer suffix wins
WEI_UNITS = ("ether", "gwei", "wei")


class MinInt(click.ParamType):
    name = "minint"

    def __init__(self, min_value):
        self.min_value = min_value

    def convert(self, value, param, ctx):
        try:
            ivalue = int(value)
        except ValueError:
            self.fail(f"{value} is not a valid integer", param, ctx)
        if ivalue < self.min_value:
            self.fail(
                f"{value} is less than the minimum allowed value of {self.min_value}", param, ctx
            )
        return ivalue


class ContractAddress(click.ParamType):
    """A checksummed, non-zero address of a deployed contract."""

    name = "contract_address"

    def convert(self, value, param, ctx):
        try:
            address = to_checksum_address(value)
        except ValueError:
            self.fail(f"{value} is not a valid ethereum address", param, ctx)
        if address == ZERO_ADDRESS:
            self.fail("the zero address is not a deployed contract", param, ctx)
        return address


class WeiAmount(click.ParamType):
    """An amount in wei, optionally written with a unit suffix (e.g. 0.01ether, 10gwei)."""

    name = "wei"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            amount = value
        else:
            text = str(value).strip().lower()
            unit = next((u for u in WEI_UNITS if text.endswith(u)), "wei")
            number = text[: -len(unit)] if text.endswith(unit) else text
            try:
                amount = Web3.to_wei(Decimal(number.strip()), unit)
            except (InvalidOperation, ValueError):
                self.fail(f"{value} is not a valid amount", param, ctx)
        if amount < 0:
            self.fail(f"{value} is negative", param, ctx)
        return amount
