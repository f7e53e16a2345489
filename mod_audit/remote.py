"""Fetch remote mod containers into the local download cache.

``mod-lint`` accepts either a local path or an ``http(s)://`` URL. URLs are
downloaded once and reused from the cache on later runs.
"""

import hashlib
import logging
import sys
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path

from mod_audit.container import ContainerError
from mod_audit.core.config import get_cache_dir

logger = logging.getLogger("mod-audit")

_DOWNLOAD_TIMEOUT = 60  # seconds


def is_remote_reference(reference: str) -> bool:
    return urllib.parse.urlparse(reference).scheme in ("http", "https")


def _cache_name(url: str) -> str:
    """Stable cache filename: short URL hash + the URL's own basename."""
    digest = hashlib.sha256(url.encode()).hexdigest()[:12]
    basename = Path(urllib.parse.urlparse(url).path).name or "container"
    return f"{digest}-{basename}"


def fetch_container(url: str, cache_dir: Path | None = None) -> Path:
    """Download url into the cache and return the local path.

    Raises:
        ContainerError: the download failed.
    """
    cache_dir = Path(cache_dir or get_cache_dir()) / "containers"
    cached = cache_dir / _cache_name(url)
    if cached.exists():
        logger.debug("using cached container %s", cached)
        return cached

    cache_dir.mkdir(parents=True, exist_ok=True)
    partial = cached.with_name(cached.name + ".part")

    try:
        print(f"Downloading {url}...", file=sys.stderr)
        req = urllib.request.Request(url)
        with urllib.request.urlopen(req, timeout=_DOWNLOAD_TIMEOUT) as resp:
            with open(partial, "wb") as f:
                while True:
                    chunk = resp.read(1 << 20)
                    if not chunk:
                        break
                    f.write(chunk)
    except (urllib.error.URLError, OSError) as e:
        partial.unlink(missing_ok=True)
        raise ContainerError(f"Could not download {url}: {e}") from e

    partial.replace(cached)
    return cached
