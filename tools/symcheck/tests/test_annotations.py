from __future__ import annotations

import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))
from symcheck._core_base import AnnotationError, SourceLocation, SourceReadError  # noqa: E402
from symcheck.annotations import SymbolCheck, parse_annotation, scan_file, scan_tree  # noqa: E402

MARKER = "//libnickel"
LIBRARY = "libnickel.so.1.0.0"
EXTENSIONS = (".c", ".cc", ".cpp", ".h")


class ParseAnnotationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.location = SourceLocation(path="src/menu.cc", line=12, column=5)

    def test_parses_fields(self) -> None:
        check = parse_annotation("  4.6 * _ZN1AC1Ev _ZN1AC2Ev ", self.location, LIBRARY, MARKER)
        self.assertEqual(check.start_version, "4.6")
        self.assertEqual(check.end_version, "*")
        self.assertEqual(check.symbols, ("_ZN1AC1Ev", "_ZN1AC2Ev"))
        self.assertEqual(check.library, LIBRARY)
        self.assertEqual(check.location, self.location)

    def test_too_few_fields_is_fatal(self) -> None:
        with self.assertRaises(AnnotationError) as ctx:
            parse_annotation("4.6 *", self.location, LIBRARY, MARKER)
        self.assertEqual(ctx.exception.location, self.location)
        self.assertIn("line 12, col 5", str(ctx.exception))
        self.assertIn("src/menu.cc", str(ctx.exception))

    def test_wildcard_start_is_fatal(self) -> None:
        with self.assertRaises(AnnotationError):
            parse_annotation("* * sym", self.location, LIBRARY, MARKER)

    def test_symbols_must_not_be_empty(self) -> None:
        with self.assertRaises(AnnotationError):
            SymbolCheck(location=self.location, library=LIBRARY, start_version="1", end_version="2", symbols=())

    def test_format_symbols(self) -> None:
        check = parse_annotation("1 2 a b", self.location, LIBRARY, MARKER)
        self.assertEqual(check.format_symbols(), "[a b]")


class ScanTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def _write(self, relative: str, content: str) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def test_scan_file_reports_line_and_column(self) -> None:
        path = self._write(
            "action.cc",
            "#include <x.h>\n"
            "    //libnickel 4.6 * _ZN1AC1Ev\n"
            "void f(); //libnickel 4.13.12638 4.20.14622 a b\r\n",
        )
        checks = scan_file(path, MARKER, LIBRARY)
        self.assertEqual(len(checks), 2)
        self.assertEqual(checks[0].location, SourceLocation(str(path), 2, 5))
        self.assertEqual(checks[1].location, SourceLocation(str(path), 3, 11))
        self.assertEqual(checks[1].symbols, ("a", "b"))

    def test_scan_tree_walks_in_lexical_order_and_filters_extensions(self) -> None:
        self._write("b.c", "//libnickel 1 2 from_b\n")
        self._write("a/z.h", "//libnickel 1 2 from_a_z\n")
        self._write("a.cpp", "//libnickel 1 2 from_a_cpp\n")
        self._write("notes.txt", "//libnickel 1 2 ignored\n")
        self._write("c.go", "//libnickel oops\n")

        checks = scan_tree(self.root, MARKER, LIBRARY, EXTENSIONS)
        self.assertEqual([check.symbols[0] for check in checks], ["from_a_z", "from_a_cpp", "from_b"])

    def test_marker_needs_no_comment_context(self) -> None:
        self._write("x.c", 'const char *s = "//libnickel 1.0 * sym";\n')
        checks = scan_tree(self.root, MARKER, LIBRARY, EXTENSIONS)
        self.assertEqual(checks[0].symbols, ('sym";',))

    def test_malformed_annotation_aborts_scan(self) -> None:
        self._write("a.c", "//libnickel 1 2 ok\n")
        self._write("b.c", "\n//libnickel 1.0\n")
        with self.assertRaises(AnnotationError) as ctx:
            scan_tree(self.root, MARKER, LIBRARY, EXTENSIONS)
        self.assertEqual(ctx.exception.location.line, 2)
        self.assertEqual(ctx.exception.location.column, 1)

    def test_missing_root_is_fatal(self) -> None:
        with self.assertRaises(SourceReadError):
            scan_tree(self.root / "missing", MARKER, LIBRARY, EXTENSIONS)


if __name__ == "__main__":
    unittest.main()
