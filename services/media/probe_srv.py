import asyncio
import json
import logging
import os
from shutil import which
from typing import Optional

logger = logging.getLogger(__name__)

PROBE_TIMEOUT_SECONDS = 30


async def probe_video_duration(input_path: str, timeout: float = PROBE_TIMEOUT_SECONDS) -> Optional[float]:
    """
    Container duration in seconds via ffprobe's JSON output.
    None when ffprobe is absent or the file cannot be read; the caller stores 0.
    """
    if which("ffprobe") is None or not os.path.isfile(input_path):
        return None
    proc = await asyncio.create_subprocess_exec(
        "ffprobe", "-v", "error", "-print_format", "json", "-show_format", input_path,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        out, err = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        logger.warning("ffprobe timed out after %ss on %s", timeout, input_path)
        return None
    if proc.returncode != 0:
        logger.warning("ffprobe failed on %s: %s", input_path, err.decode("utf-8", errors="ignore").strip())
        return None
    try:
        seconds = float(json.loads(out)["format"]["duration"])
    except (ValueError, KeyError, TypeError):
        return None
    return max(0.0, round(seconds, 3))
