import json
import os
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

import requests

from nft_deployment.constants import (
    IPFS_SCHEME,
    PINATA_API_KEY_ENVVAR,
    PINATA_API_SECRET_ENVVAR,
    PINATA_API_URL,
    TOKEN_URIS_FILEPATH,
    Breed,
)

REQUEST_TIMEOUT = 60  # seconds


class PinResponse(NamedTuple):
    ipfs_hash: str
    pin_size: int
    timestamp: str

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "PinResponse":
        return cls(
            ipfs_hash=data["IpfsHash"],
            pin_size=int(data.get("PinSize", 0)),
            timestamp=data.get("Timestamp", ""),
        )

    @property
    def uri(self) -> str:
        return f"{IPFS_SCHEME}{self.ipfs_hash}"


class UploadedImage(NamedTuple):
    name: str
    response: PinResponse


class PinataClient:
    """Minimal client for the Pinata pinning API."""

    class AuthenticationError(Exception):
        """Raised when Pinata rejects the API credentials."""

    class UploadError(Exception):
        """Raised when a file or JSON document could not be pinned."""

    def __init__(
        self, api_key: str, api_secret: str, api_url: str = PINATA_API_URL, session=None
    ):
        if not api_key or not api_secret:
            raise self.AuthenticationError(
                f"{PINATA_API_KEY_ENVVAR} and {PINATA_API_SECRET_ENVVAR} must both be set."
            )
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(
            {"pinata_api_key": api_key, "pinata_secret_api_key": api_secret}
        )

    @classmethod
    def from_env(cls, **kwargs) -> "PinataClient":
        return cls(
            api_key=os.environ.get(PINATA_API_KEY_ENVVAR),
            api_secret=os.environ.get(PINATA_API_SECRET_ENVVAR),
            **kwargs,
        )

    def test_authentication(self) -> Dict[str, Any]:
        url = f"{self.api_url}/data/testAuthentication"
        try:
            response = self.session.get(url, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise self.AuthenticationError(f"Pinata authentication failed: {e}") from e
        return response.json()

    def pin_file_to_ipfs(self, filepath: Path, name: Optional[str] = None) -> PinResponse:
        url = f"{self.api_url}/pinning/pinFileToIPFS"
        metadata = {"name": name or filepath.stem}
        try:
            with open(filepath, "rb") as file:
                response = self.session.post(
                    url,
                    files={"file": (filepath.name, file)},
                    data={"pinataMetadata": json.dumps(metadata)},
                    timeout=REQUEST_TIMEOUT,
                )
            response.raise_for_status()
        except (OSError, requests.RequestException) as e:
            raise self.UploadError(f"Failed to pin {filepath.name}: {e}") from e
        return PinResponse.from_json(response.json())

    def pin_json_to_ipfs(self, content: Dict[str, Any], name: str) -> PinResponse:
        url = f"{self.api_url}/pinning/pinJSONToIPFS"
        payload = {"pinataContent": content, "pinataMetadata": {"name": name}}
        try:
            response = self.session.post(url, json=payload, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise self.UploadError(f"Failed to pin metadata {name}: {e}") from e
        return PinResponse.from_json(response.json())


def build_token_uri_metadata(name: str, image_cid: str) -> Dict[str, Any]:
    return {
        "name": name,
        "description": f"An adorable {name} pup!",
        "image": f"{IPFS_SCHEME}{image_cid}",
        "attributes": [{"trait_type": "Cuteness", "value": 100}],
    }


def store_images(client: PinataClient, images_dir: Path) -> List[UploadedImage]:
    """
    Pins every file in images_dir, one at a time and in name order.
    A file that fails to upload is reported and skipped.
    """
    images_dir = Path(images_dir).resolve()
    if not images_dir.is_dir():
        raise FileNotFoundError(f"Images directory not found at {images_dir}")

    files = sorted(path for path in images_dir.iterdir() if path.is_file())
    print(f"Uploading {len(files)} images to Pinata...")

    uploaded = list()
    for filepath in files:
        print(f"Working on {filepath.name}...")
        try:
            response = client.pin_file_to_ipfs(filepath, name=filepath.stem)
        except PinataClient.UploadError as e:
            print(f"✗ Error uploading {filepath.name}: {e}")
            continue
        uploaded.append(UploadedImage(name=filepath.stem, response=response))
        print(f"✓ Uploaded {filepath.name}: {response.ipfs_hash}")

    print(f"(i) {len(uploaded)}/{len(files)} images uploaded.")
    return uploaded


def store_token_uri_metadata(client: PinataClient, metadata: Dict[str, Any]) -> PinResponse:
    print(f"Uploading metadata for {metadata['name']} to Pinata...")
    try:
        response = client.pin_json_to_ipfs(metadata, name=metadata["name"])
    except PinataClient.UploadError as e:
        print(f"✗ Error uploading metadata: {e}")
        raise
    print(f"✓ Metadata uploaded: {response.ipfs_hash}")
    return response


def handle_token_uris(
    client: PinataClient,
    images_dir: Path,
    strict: bool = False,
    expected: Optional[int] = len(Breed),
) -> List[str]:
    """
    Uploads images and their metadata, returning the metadata token URIs in image name order.

    A failed image is skipped unless strict is set, but the uploaded images must still
    number exactly `expected` (one per breed) before any metadata is pinned.
    Pass expected=None to accept a partial list. Nothing uploaded is always an error.
    """
    images = store_images(client, images_dir)
    total = len([path for path in Path(images_dir).iterdir() if path.is_file()])
    if not images:
        raise PinataClient.UploadError(f"No images were uploaded from {images_dir}.")
    if strict and len(images) != total:
        raise PinataClient.UploadError(
            f"Only {len(images)} of {total} images were uploaded; aborting (strict mode)."
        )
    if expected is not None and len(images) != expected:
        raise PinataClient.UploadError(
            f"{len(images)} images were uploaded from {images_dir}; "
            f"exactly {expected} are needed, one per breed."
        )

    token_uris = list()
    for image in images:
        metadata = build_token_uri_metadata(name=image.name, image_cid=image.response.ipfs_hash)
        response = store_token_uri_metadata(client, metadata)
        token_uris.append(response.uri)

    print("\n=== Token URIs ===")
    for token_uri in token_uris:
        print(token_uri)
    print("==================\n")
    return token_uris


def write_token_uris(token_uris: List[str], filepath: Path = TOKEN_URIS_FILEPATH) -> Path:
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as file:
        json.dump(token_uris, file, indent=2)
    print(f"✓ Token URIs saved to {filepath}")
    return filepath


def read_token_uris(filepath: Path = TOKEN_URIS_FILEPATH) -> List[str]:
    if not filepath.exists():
        raise FileNotFoundError(
            f"{filepath} not found! Please run 'ape run upload_to_pinata' first."
        )
    with open(filepath, "r") as file:
        token_uris = json.load(file)
    if not isinstance(token_uris, list) or not all(isinstance(u, str) for u in token_uris):
        raise ValueError(f"{filepath} must contain a JSON array of token URI strings.")
    print(f"✓ Loaded {len(token_uris)} token URIs from {filepath}")
    return token_uris
