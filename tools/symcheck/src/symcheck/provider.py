from __future__ import annotations

import io
import lzma
import posixpath
import tarfile
from pathlib import Path

import requests

from ._core_base import FetchError
from .config import DEFAULT_ARCHIVE_URL, DEFAULT_TIMEOUT, format_archive_url, validate_config_payload


def normalize_member_path(value: str) -> str:
    return posixpath.normpath(value.replace("\\", "/"))


def extract_member(archive: bytes, library: str, label: str) -> bytes:
    """Return the contents of the member of an xz tarball matching library."""
    wanted = normalize_member_path(library)
    try:
        with tarfile.open(fileobj=io.BytesIO(archive), mode="r:xz") as tar:
            for member in tar:
                if normalize_member_path(member.name) != wanted:
                    continue
                handle = tar.extractfile(member)
                if handle is None:
                    raise FetchError(f"read testdata for {label!r}: {member.name!r} is not a regular file")
                with handle:
                    return handle.read()
    except (tarfile.TarError, lzma.LZMAError, EOFError, OSError) as exc:
        raise FetchError(f"read testdata for {label!r}: {exc}") from exc
    raise FetchError(f"read testdata for {label!r}: file {library!r} not found")


class BinaryProvider:
    """Source of per-release binaries.

    fetch() returns the raw binary, or None when no data exists for the
    release. Any other problem raises FetchError.
    """

    def fetch(self, release: str, library: str) -> bytes | None:
        raise NotImplementedError

    def describe(self, release: str) -> str:
        return release

    def close(self) -> None:
        pass

    def __enter__(self) -> "BinaryProvider":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class HttpArchiveProvider(BinaryProvider):
    def __init__(
        self,
        url_template: str = DEFAULT_ARCHIVE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        validate_config_payload({"archive_url": url_template, "timeout": timeout})
        self.url_template = url_template
        self.timeout = timeout
        self.session = session or requests.Session()

    def describe(self, release: str) -> str:
        return format_archive_url(self.url_template, release)

    def close(self) -> None:
        self.session.close()

    def fetch(self, release: str, library: str) -> bytes | None:
        url = self.describe(release)
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(f"get testdata for {release!r}: {exc}") from exc

        with resp:
            if resp.status_code == 404:
                return None
            if resp.status_code != 200:
                raise FetchError(f"get testdata for {release!r}: response status {resp.status_code} {resp.reason}")
            return extract_member(resp.content, library, release)


class DirectoryArchiveProvider(BinaryProvider):
    """Reads <release>.tar.xz archives from a local directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def describe(self, release: str) -> str:
        return str(self.directory / f"{release}.tar.xz")

    def fetch(self, release: str, library: str) -> bytes | None:
        path = self.directory / f"{release}.tar.xz"
        if not path.is_file():
            return None
        try:
            archive = path.read_bytes()
        except OSError as exc:
            raise FetchError(f"read testdata for {release!r}: {exc}") from exc
        return extract_member(archive, library, release)
