from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from minter.config import settings
from minter.main import app
from minter.models.pinning import PinOptions, PinResult
from minter.routes.mint import get_pinning_service
from minter.services.pinata import PinataAuthError


class FakePinning:
    """In-memory stand-in for Pinata that content-addresses by call order."""

    def __init__(self) -> None:
        self.auth_error: Exception | None = None
        self.file_result: PinResult | None = None
        self.json_result: PinResult | None = None
        self.pin_error: Exception | None = None
        self.json_error: Exception | None = None
        self.auth_calls = 0
        self.file_calls: list[dict[str, Any]] = []
        self.json_calls: list[dict[str, Any]] = []
        self.pinned: dict[str, Any] = {}

    async def authenticate(self) -> None:
        self.auth_calls += 1
        if self.auth_error is not None:
            raise self.auth_error

    async def pin_file(self, path: Path, filename: str, options: PinOptions) -> PinResult:
        data = path.read_bytes()
        self.file_calls.append({"path": path, "filename": filename, "options": options, "data": data})
        if self.pin_error is not None:
            raise self.pin_error
        if self.file_result is not None:
            return self.file_result
        ipfs_hash = f"QmImage{len(self.pinned)}"
        self.pinned[ipfs_hash] = data
        return PinResult(IpfsHash=ipfs_hash, PinSize=len(data))

    async def pin_json(self, content: dict[str, Any], options: PinOptions) -> PinResult:
        self.json_calls.append({"content": content, "options": options})
        if self.json_error is not None:
            raise self.json_error
        if self.json_result is not None:
            return self.json_result
        ipfs_hash = f"QmMeta{len(self.pinned)}"
        self.pinned[ipfs_hash] = content
        return PinResult(IpfsHash=ipfs_hash, PinSize=len(str(content)))


@pytest.fixture()
def upload_dir(tmp_path, monkeypatch) -> Path:
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(path))
    return path


@pytest.fixture()
def pinning() -> FakePinning:
    return FakePinning()


@pytest.fixture()
def client(pinning, upload_dir):
    app.dependency_overrides[get_pinning_service] = lambda: pinning
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_rejected(pinning) -> FakePinning:
    pinning.auth_error = PinataAuthError("Invalid API key provided")
    return pinning
