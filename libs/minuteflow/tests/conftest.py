from __future__ import annotations

import base64
import json
import struct
from collections.abc import Callable
from typing import Any

import httpx
import numpy as np
import pytest
import pytest_asyncio

from minuteflow.config import APIConfig, AudioConfig, PollingConfig, Settings


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        log_dir=str(tmp_path / "logs"),
        api=APIConfig(base_url="https://staging.test"),
        poll=PollingConfig(interval_s=0.01, max_attempts=100),
        audio=AudioConfig(segment_seconds=1.0, target_sample_rate=16000),
    )


def _float_wav(samples: np.ndarray, sample_rate: int) -> bytes:
    arr = np.asarray(samples, dtype="<f4")
    if arr.ndim == 1:
        arr = arr[:, None]
    channels = int(arr.shape[1])
    payload = arr.tobytes()
    block_align = channels * 4
    fmt = struct.pack("<HHIIHH", 3, channels, sample_rate, sample_rate * block_align, block_align, 32)
    return (
        b"RIFF"
        + struct.pack("<I", 4 + 8 + len(fmt) + 8 + len(payload))
        + b"WAVE"
        + b"fmt "
        + struct.pack("<I", len(fmt))
        + fmt
        + b"data"
        + struct.pack("<I", len(payload))
        + payload
    )


@pytest.fixture()
def make_wav() -> Callable[..., bytes]:
    """Float32 WAV bytes of `seconds` of a quiet tone, or of the given mono `samples`."""

    def _make(
        seconds: float,
        sample_rate: int = 44100,
        channels: int = 2,
        samples: np.ndarray | None = None,
    ) -> bytes:
        if samples is None:
            frames = int(round(seconds * sample_rate))
            t = np.arange(frames, dtype=np.float64) / sample_rate
            tone = 0.25 * np.sin(2 * np.pi * 440.0 * t)
        else:
            tone = np.asarray(samples, dtype=np.float64)
        samples = np.repeat(tone[:, None], channels, axis=1)
        return _float_wav(samples, sample_rate)

    return _make


class FakeBackend:
    """In-memory stand-in for the staging, start and status endpoints."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, dict[str, Any]]] = []
        self.chunks: dict[str, list[bytes]] = {}
        self.status_responses: list[dict[str, Any] | httpx.Response | Exception] = []
        self.fail_labels: dict[str, int] = {}
        self.start_status = 200

    @property
    def starts(self) -> list[dict[str, Any]]:
        return [p for path, p in self.requests if path.endswith("gemini-background")]

    @property
    def uploads(self) -> list[dict[str, Any]]:
        return [p for _path, p in self.requests if p.get("action") == "upload_chunk"]

    @property
    def polls(self) -> list[dict[str, Any]]:
        return [p for _path, p in self.requests if p.get("action") == "check_status"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append((request.url.path, payload))

        if request.url.path.endswith("gemini-background"):
            return httpx.Response(self.start_status, json={"accepted": True})

        action = payload.get("action")
        if action == "upload_chunk":
            label = str(payload["segmentIndex"])
            if label in self.fail_labels:
                return httpx.Response(self.fail_labels[label], json={"error": "rejected"})
            self.chunks.setdefault(label, []).append(base64.b64decode(payload["data"]))
            return httpx.Response(200, json={"success": True})

        if action == "check_status":
            if not self.status_responses:
                return httpx.Response(200, json={"status": "PROCESSING"})
            item = self.status_responses.pop(0)
            if isinstance(item, Exception):
                raise item
            if isinstance(item, httpx.Response):
                return item
            return httpx.Response(200, json=item)

        return httpx.Response(400, text="Invalid Action")


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest_asyncio.fixture()
async def http_client(backend: FakeBackend):
    async with httpx.AsyncClient(transport=httpx.MockTransport(backend.handler)) as client:
        yield client
