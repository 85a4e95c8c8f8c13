"""
URL provider: download a JDK archive into the cache and unpack it.

Config keys:
    url:     http(s) or file URL of a ``.tar.gz`` / ``.tgz`` / ``.zip`` JDK.
    sha256:  Optional expected digest, bare or as a ``"<hex>  <file>"`` line.
    folder:  Optional cache entry name (default: archive name sans suffix).

The archive is downloaded and unpacked inside a temporary folder under
the cache root; the JDK is renamed to ``<cache>/<folder>`` only after the
checksum and the ``jmods`` check pass.
"""

from __future__ import annotations

import fnmatch
import hashlib
import logging
import shutil
import ssl
import stat
import tarfile
import tempfile
import urllib.error
import urllib.parse
import urllib.request
import zipfile
from pathlib import Path

import click

from jlink_wrapper import __version__
from jlink_wrapper.core.errors import (
    JlinkIOError,
    OfflineUnavailableError,
    ParseError,
    ProviderFailure,
)
from jlink_wrapper.core.services.providers.base import JdkProvider, has_jmods
from jlink_wrapper.core.services.text_utils import extract_file_hash, render_progress

logger = logging.getLogger(__name__)

_ARCHIVE_SUFFIXES = (".tar.gz", ".tgz", ".zip")
_CHUNK = 64 * 1024
_BAR_WIDTH = 40
_TIMEOUT = 60


def folder_name_for(url: str) -> str:
    """Cache entry name derived from the archive file name."""
    name = Path(urllib.parse.urlparse(url).path).name
    for suffix in _ARCHIVE_SUFFIXES:
        if name.lower().endswith(suffix):
            return name[: -len(suffix)]
    return name


def find_jdk_root(extracted: Path) -> Path | None:
    """Locate the JDK home inside an unpacked archive.

    Descends through a single top-level folder and the macOS
    ``Contents/Home`` layout.
    """
    current = extracted
    for _ in range(4):
        if has_jmods(current):
            return current
        mac_home = current / "Contents" / "Home"
        if has_jmods(mac_home):
            return mac_home
        children = [p for p in current.iterdir() if not p.name.startswith(".")]
        if len(children) != 1 or not children[0].is_dir():
            return None
        current = children[0]
    return None


def _expected_digest(raw: str) -> str:
    raw = raw.strip().removeprefix("sha256:")
    try:
        return extract_file_hash(raw).lower()
    except ParseError:
        # A bare digest has no file name after it.
        if raw and all(c in "0123456789abcdefABCDEF" for c in raw):
            return raw.lower()
        raise ProviderFailure(f"Can't parse sha256 value: '{raw}'") from None


def _extract_archive(archive: Path, dest: Path, name: str) -> None:
    lower = name.lower()
    if lower.endswith((".tar.gz", ".tgz")):
        with tarfile.open(archive, "r:gz") as tf:
            tf.extractall(dest, filter="data")
    elif lower.endswith(".zip"):
        with zipfile.ZipFile(archive, "r") as zf:
            for info in zf.infolist():
                extracted = Path(zf.extract(info, dest))
                mode = (info.external_attr >> 16) & 0o777
                if mode and not info.is_dir():
                    extracted.chmod(mode | stat.S_IRUSR)
    else:
        raise ProviderFailure(f"Unsupported archive type: {name}")


class UrlJdkProvider(JdkProvider):
    """Fetch a JDK archive by URL and cache the unpacked JDK."""

    name = "URL"

    def prepare_jdk_folder(self, config: dict[str, str]) -> Path:
        url = config.get("url", "").strip()
        if not url:
            raise ProviderFailure("URL provider needs 'url' in provider config")

        archive_name = Path(urllib.parse.urlparse(url).path).name
        if not archive_name.lower().endswith(_ARCHIVE_SUFFIXES):
            raise ProviderFailure(f"Unsupported archive type: {archive_name or url}")

        folder = config.get("folder", "").strip() or folder_name_for(url)
        target = self.context.cache_root / folder

        if has_jmods(target):
            logger.info("Found cached JDK: %s", target)
            return target
        if target.exists():
            raise JlinkIOError(
                f"Cache entry exists but has no jmods folder, remove it: {target}", target
            )

        if self.context.offline:
            raise OfflineUnavailableError(
                f"JDK '{folder}' is not in the cache {self.context.cache_root} "
                "and offline mode is active",
                target,
            )

        expected = _expected_digest(config["sha256"]) if config.get("sha256") else None

        work_dir = Path(tempfile.mkdtemp(prefix=f".{folder}-", dir=self.context.cache_root))
        try:
            archive = work_dir / archive_name
            actual = self._download(url, archive)

            if expected is not None and actual != expected:
                raise ProviderFailure(
                    f"Checksum mismatch for {archive_name}: expected {expected}, got {actual}"
                )

            unpacked = work_dir / "unpacked"
            unpacked.mkdir()
            try:
                _extract_archive(archive, unpacked, archive_name)
            except (tarfile.TarError, zipfile.BadZipFile) as e:
                raise ProviderFailure(f"Can't unpack {archive_name}: {e}") from e
            except OSError as e:
                raise JlinkIOError(f"Can't unpack {archive_name}: {e}", archive) from e

            jdk_root = find_jdk_root(unpacked)
            if jdk_root is None:
                raise ProviderFailure(f"Archive {archive_name} doesn't contain a JDK with jmods")

            try:
                jdk_root.rename(target)
            except OSError as e:
                # Another build may have filled the same entry meanwhile.
                if has_jmods(target):
                    logger.info("JDK was cached concurrently: %s", target)
                    return target
                raise JlinkIOError(f"Can't move JDK into the cache: {target}", target) from e
        finally:
            shutil.rmtree(work_dir, ignore_errors=True)

        logger.info("JDK cached: %s", target)
        return target

    # ── Download ────────────────────────────────────────────────

    def _opener(self, url: str) -> urllib.request.OpenerDirector:
        handlers: list[urllib.request.BaseHandler] = []

        if self.context.disable_ssl_check:
            logger.warning("SSL certificate check is disabled")
            ctx = ssl.create_default_context()
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
            handlers.append(urllib.request.HTTPSHandler(context=ctx))

        proxy = self.context.proxy
        if proxy is not None:
            host = urllib.parse.urlparse(url).hostname or ""
            if any(fnmatch.fnmatch(host, p) for p in proxy.non_proxy_patterns()):
                logger.debug("Host %s bypasses the proxy", host)
                handlers.append(urllib.request.ProxyHandler({}))
            else:
                proxy_url = proxy.url()
                handlers.append(urllib.request.ProxyHandler({"http": proxy_url, "https": proxy_url}))

        return urllib.request.build_opener(*handlers)

    def _download(self, url: str, dest: Path) -> str:
        """Stream ``url`` into ``dest``; returns the sha256 hex digest."""
        logger.info("Downloading %s", url)
        hasher = hashlib.sha256()
        request = urllib.request.Request(url, headers={"User-Agent": f"jlink-wrapper/{__version__}"})

        try:
            with self._opener(url).open(request, timeout=_TIMEOUT) as resp, open(dest, "wb") as f:
                total = int(resp.headers.get("Content-Length") or 0) if resp.headers else 0
                done = 0
                last = -1
                while True:
                    chunk = resp.read(_CHUNK)
                    if not chunk:
                        break
                    f.write(chunk)
                    hasher.update(chunk)
                    done += len(chunk)
                    if total > 0:
                        last = render_progress(f"Downloading {dest.name} ", done, total, _BAR_WIDTH, last)
        except (urllib.error.URLError, OSError) as e:
            raise JlinkIOError(f"Download failed: {url}: {e}", url) from e

        if last >= 0:
            click.echo()
        logger.debug("Downloaded %d bytes to %s", done, dest)
        return hasher.hexdigest()
