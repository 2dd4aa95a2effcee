"""Blocking subprocess helper for ffmpeg.

Audio decoding already runs inside `asyncio.to_thread()`, so a plain
`subprocess.run()` is all the pipeline needs.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def stderr_text(self, limit: int = 2000) -> str:
        text = self.stderr.decode(errors="ignore").strip()
        if len(text) <= limit:
            return text
        return text[-limit:]


def run_subprocess_sync(
    args: Sequence[str],
    *,
    input_bytes: bytes | None = None,
    timeout_s: float | None = None,
) -> RunResult:
    cp = subprocess.run(
        list(args),
        input=input_bytes,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        check=False,
        timeout=timeout_s,
    )
    return RunResult(
        returncode=int(cp.returncode),
        stdout=cp.stdout or b"",
        stderr=cp.stderr or b"",
    )
