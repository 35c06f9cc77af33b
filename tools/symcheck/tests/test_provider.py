from __future__ import annotations

import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import requests

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))
from elf_fixtures import build_archive  # noqa: E402
from symcheck._core_base import ConfigError, FetchError  # noqa: E402
from symcheck.provider import DirectoryArchiveProvider, HttpArchiveProvider, extract_member  # noqa: E402

LIBRARY = "libnickel.so.1.0.0"


def make_response(status_code: int, content: bytes = b"", reason: str = "") -> mock.MagicMock:
    resp = mock.MagicMock()
    resp.status_code = status_code
    resp.content = content
    resp.reason = reason
    return resp


class ExtractMemberTests(unittest.TestCase):
    def test_matches_normalized_member_path(self) -> None:
        archive = build_archive({"./other.so": b"x", "./" + LIBRARY: b"payload"})
        self.assertEqual(extract_member(archive, LIBRARY, "1.0.0"), b"payload")

    def test_missing_member_is_fatal(self) -> None:
        archive = build_archive({"other.so": b"x"})
        with self.assertRaises(FetchError) as ctx:
            extract_member(archive, LIBRARY, "1.0.0")
        self.assertIn("not found", str(ctx.exception))

    def test_corrupt_archive_is_fatal(self) -> None:
        with self.assertRaises(FetchError):
            extract_member(b"definitely not xz", LIBRARY, "1.0.0")


class HttpArchiveProviderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session = mock.MagicMock()
        self.provider = HttpArchiveProvider(
            url_template="https://example.invalid/{version}.tar.xz",
            timeout=5,
            session=self.session,
        )

    def test_fetches_versioned_archive(self) -> None:
        self.session.get.return_value = make_response(200, build_archive({LIBRARY: b"elf"}))
        self.assertEqual(self.provider.fetch("4.6.9960", LIBRARY), b"elf")
        self.session.get.assert_called_once_with("https://example.invalid/4.6.9960.tar.xz", timeout=5)

    def test_not_found_is_not_available(self) -> None:
        self.session.get.return_value = make_response(404, reason="Not Found")
        self.assertIsNone(self.provider.fetch("4.6.9960", LIBRARY))

    def test_other_status_is_fatal(self) -> None:
        self.session.get.return_value = make_response(500, reason="Internal Server Error")
        with self.assertRaises(FetchError) as ctx:
            self.provider.fetch("4.6.9960", LIBRARY)
        self.assertIn("500", str(ctx.exception))

    def test_transport_error_is_fatal(self) -> None:
        self.session.get.side_effect = requests.ConnectionError("boom")
        with self.assertRaises(FetchError):
            self.provider.fetch("4.6.9960", LIBRARY)

    def test_invalid_template_and_timeout_are_config_errors(self) -> None:
        with self.assertRaises(ConfigError):
            HttpArchiveProvider(url_template="https://example.invalid/{version}/{arch}.tar.xz", session=self.session)
        with self.assertRaises(ConfigError):
            HttpArchiveProvider(url_template="https://example.invalid/{version}.tar.xz", timeout=0, session=self.session)
        self.session.get.assert_not_called()

    def test_context_manager_closes_session(self) -> None:
        with self.provider as provider:
            self.assertIs(provider, self.provider)
        self.session.close.assert_called_once_with()


class DirectoryArchiveProviderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.directory = Path(self.temp_dir.name)
        self.provider = DirectoryArchiveProvider(self.directory)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_reads_local_archive(self) -> None:
        (self.directory / "1.0.0.tar.xz").write_bytes(build_archive({LIBRARY: b"elf"}))
        self.assertEqual(self.provider.fetch("1.0.0", LIBRARY), b"elf")

    def test_missing_archive_is_not_available(self) -> None:
        self.assertIsNone(self.provider.fetch("2.0.0", LIBRARY))


if __name__ == "__main__":
    unittest.main()
