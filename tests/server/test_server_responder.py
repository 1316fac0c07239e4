import tempfile
import unittest
from pathlib import Path

from asset_server.config import StaticServerConfig, build_content_types
from asset_server.responder import StaticAssetHandler, build_response
from asset_server.static_files import Rejected

_TEXT = {"Content-Type": "text/plain; charset=utf-8"}


class BuildResponseTests(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self._temp_dir.cleanup)
        self.root = Path(self._temp_dir.name).resolve()

    def test_rejected_resolution_is_bad_request(self) -> None:
        response = build_response(Rejected())

        self.assertEqual(400, response.status_code)
        self.assertEqual(_TEXT, dict(response.headers))
        self.assertEqual(b"Bad request", response.body)

    def test_existing_file_returns_exact_bytes(self) -> None:
        payload = bytes(range(256))
        image = self.root / "logo.PNG"
        image.write_bytes(payload)

        response = build_response(image)

        self.assertEqual(200, response.status_code)
        self.assertEqual({"Content-Type": "image/png"}, dict(response.headers))
        self.assertEqual(payload, response.body)

    def test_empty_file_is_still_served(self) -> None:
        empty = self.root / "empty.css"
        empty.write_bytes(b"")

        response = build_response(empty)

        self.assertEqual(200, response.status_code)
        self.assertEqual(b"", response.body)

    def test_missing_file_is_not_found_without_path_leak(self) -> None:
        missing = self.root / "private" / "missing.html"

        response = build_response(missing)

        self.assertEqual(404, response.status_code)
        self.assertEqual(_TEXT, dict(response.headers))
        self.assertEqual(b"Not found", response.body)
        self.assertNotIn(str(self.root).encode(), response.body)
        self.assertNotIn(b"missing", response.body)

    def test_directory_is_not_found(self) -> None:
        (self.root / "assets").mkdir()
        self.assertEqual(404, build_response(self.root / "assets").status_code)

    def test_read_errors_all_collapse_to_not_found(self) -> None:
        errors = (
            PermissionError("denied"),
            IsADirectoryError("dir"),
            OSError("io"),
            ValueError("embedded null byte"),
            RuntimeError("reader crashed"),
        )
        for error in errors:
            def read(path: Path, error=error) -> bytes:
                raise error

            with self.subTest(error=type(error).__name__):
                response = build_response(self.root / "a.html", read=read)
                self.assertEqual(404, response.status_code)
                self.assertEqual(b"Not found", response.body)

    def test_unknown_extension_defaults_to_octet_stream(self) -> None:
        blob = self.root / "data.bin"
        blob.write_bytes(b"\x00\x01")

        response = build_response(blob)

        self.assertEqual("application/octet-stream", response.headers["Content-Type"])

    def test_extra_content_types_apply(self) -> None:
        notes = self.root / "notes.txt"
        notes.write_text("hi", encoding="utf-8")

        response = build_response(
            notes,
            content_types=build_content_types({".txt": "text/plain; charset=utf-8"}),
        )

        self.assertEqual("text/plain; charset=utf-8", response.headers["Content-Type"])


class StaticAssetHandlerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self._temp_dir.cleanup)
        self.root = Path(self._temp_dir.name).resolve()
        (self.root / "index.html").write_text("<h1>home</h1>", encoding="utf-8")
        (self.root / "style.css").write_text("body{}", encoding="utf-8")
        self.handler = StaticAssetHandler(StaticServerConfig(root_dir=self.root))

    def test_root_serves_index_document(self) -> None:
        response = self.handler.handle("/")

        self.assertEqual(200, response.status_code)
        self.assertEqual("text/html; charset=utf-8", response.headers["Content-Type"])
        self.assertEqual(b"<h1>home</h1>", response.body)

    def test_query_string_is_ignored(self) -> None:
        response = self.handler.handle("/style.css?v=2#frag")

        self.assertEqual(200, response.status_code)
        self.assertEqual(b"body{}", response.body)

    def test_traversal_is_bad_request(self) -> None:
        response = self.handler.handle("/../../etc/passwd")

        self.assertEqual(400, response.status_code)
        self.assertEqual(b"Bad request", response.body)

    def test_missing_and_rejected_never_succeed(self) -> None:
        for raw in ("/nope.js", "/../x", "/a/../../b"):
            with self.subTest(raw=raw):
                response = self.handler.handle(raw)
                self.assertNotEqual(200, response.status_code)
                self.assertNotIn(str(self.root).encode(), response.body)

    def test_trailing_slash_on_file_is_not_found(self) -> None:
        for raw in ("/style.css/", "/style.css/?v=2", "/index.html/"):
            with self.subTest(raw=raw):
                response = self.handler.handle(raw)
                self.assertEqual(404, response.status_code)
                self.assertEqual(b"Not found", response.body)

    def test_trailing_slash_outside_root_is_still_bad_request(self) -> None:
        self.assertEqual(400, self.handler.handle("/../outside/").status_code)

    def test_repeated_requests_are_identical(self) -> None:
        for raw in ("/", "/style.css", "/missing", "/../x"):
            with self.subTest(raw=raw):
                self.assertEqual(self.handler.handle(raw), self.handler.handle(raw))

    def test_uses_injected_reader(self) -> None:
        seen: list[Path] = []

        def read(path: Path) -> bytes:
            seen.append(path)
            return b"stub"

        handler = StaticAssetHandler(StaticServerConfig(root_dir=self.root), read=read)
        response = handler.handle("/virtual.json")

        self.assertEqual([self.root / "virtual.json"], seen)
        self.assertEqual(b"stub", response.body)
        self.assertEqual("application/json; charset=utf-8", response.headers["Content-Type"])


if __name__ == "__main__":
    unittest.main()
