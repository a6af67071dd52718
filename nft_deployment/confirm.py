from collections import OrderedDict

from ape.utils import ZERO_ADDRESS

PREVIEW_LENGTH = 64


def _abort() -> None:
    print("Aborting deployment!")
    exit(-1)


def _ask(question: str) -> None:
    """Aborts unless the operator answers anything but N."""
    answer = input(f"{question} Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _continue() -> None:
    _ask("Continue")


def _preview(value) -> str:
    # SVG documents are passed verbatim as constructor arguments
    text = str(value)
    if len(text) <= PREVIEW_LENGTH:
        return text
    return f"{text[:PREVIEW_LENGTH]}... ({len(text)} chars)"


def _confirm_resolution(resolved_params: OrderedDict, contract_name: str) -> None:
    """Shows the resolved constructor parameters of a contract and asks to deploy it."""
    if not resolved_params:
        print(f"\n(i) No constructor parameters for {contract_name}")
    else:
        print(f"\nConstructor parameters for {contract_name}")
        for name, resolved_value in resolved_params.items():
            print(f"\t{name}={_preview(resolved_value)}")

    _ask(f"Deploy {contract_name}")
    if ZERO_ADDRESS in resolved_params.values():
        _ask("Zero Address detected for deployment parameter; Continue?")
