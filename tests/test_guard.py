import sys
import unittest
from pathlib import Path

from configguard import ConfigGuard, Document, Schema, SchemaRule, SchemaType
from configguard.errors import (
    ConfigNotFoundError,
    InternalError,
    ParseError,
    UnsupportedFormatError,
)
from tests._util import schema_from, tmp_dir, write


SCHEMA = """
    type: object
    keys:
      name: {type: string, required: true}
      port: {type: integer, min: 1}
"""


class ConfigGuardTests(unittest.TestCase):
    def setUp(self):
        self.guard = ConfigGuard(schema_from(SCHEMA))

    def test_check(self):
        self.assertTrue(self.guard.check({"name": "web"}).valid)
        self.assertFalse(self.guard.check({"port": 0}).valid)

    def test_strict(self):
        strict = ConfigGuard(schema_from(SCHEMA), strict=True)
        self.assertTrue(self.guard.check({"name": "w", "x": 1}).valid)
        self.assertFalse(strict.check({"name": "w", "x": 1}).valid)

    def test_check_file_annotates_lines(self):
        with tmp_dir() as d:
            outcome = self.guard.check_file(write(d, "c.yaml", "name: web\nport: 0\n"))
        self.assertEqual(outcome.status, "invalid")
        self.assertEqual(outcome.result.errors[0].line, 2)

    def test_annotation_can_be_disabled(self):
        guard = ConfigGuard(schema_from(SCHEMA), annotate_lines=False)
        with tmp_dir() as d:
            outcome = guard.check_file(write(d, "c.yaml", "name: web\nport: 0\n"))
        self.assertIsNone(outcome.result.errors[0].line)

    def test_check_file_captures_input_errors(self):
        with tmp_dir() as d:
            bad = self.guard.check_file(write(d, "c.yaml", "name: [\n"))
            other = self.guard.check_file(write(d, "c.ini", "name=web\n"))
        missing = self.guard.check_file("/nonexistent/c.yaml")
        self.assertIsInstance(bad.error, ParseError)
        self.assertIsInstance(other.error, UnsupportedFormatError)
        self.assertIsInstance(missing.error, ConfigNotFoundError)
        self.assertEqual(bad.status, "error")
        self.assertFalse(bad.valid)
        self.assertEqual(bad.to_dict()["exit_code"], 4)

    def test_load(self):
        with tmp_dir() as d:
            guard = ConfigGuard.load(write(d, "s.yaml", "type: string\n"), strict=True)
        self.assertIsInstance(guard.schema, Schema)
        self.assertTrue(guard.strict)


class BatchTests(unittest.TestCase):
    def setUp(self):
        self.guard = ConfigGuard(schema_from(SCHEMA))

    def test_check_files(self):
        with tmp_dir() as d:
            summary = self.guard.check_files([
                write(d, "a.yaml", "name: a\n"),
                write(d, "b.json", '{"port": 3}'),
            ])
        self.assertFalse(summary.valid)
        self.assertEqual(summary.totals(), {"processed": 2, "valid": 1, "invalid": 1, "skipped": 0})

    def test_check_directory(self):
        with tmp_dir() as d:
            write(d, "b.yml", "name: b\n")
            write(d, "a.json", '{"name": "a"}')
            write(d, "notes.md", "# notes\n")
            (d / "nested").mkdir()
            write(d / "nested", "c.yaml", "port: x\n")
            summary = self.guard.check_directory(d)
        self.assertTrue(summary.valid)
        self.assertEqual([o.path.name for o in summary.outcomes], ["a.json", "b.yml"])
        self.assertEqual([p.name for p in summary.skipped], ["notes.md"])
        self.assertEqual(summary.directories[d]["processed"], 2)

    def test_missing_directory_raises(self):
        with self.assertRaises(ConfigNotFoundError):
            self.guard.check_directory("/nonexistent/dir")

    def test_deeply_nested_document_does_not_abort_batch(self):
        with tmp_dir() as d:
            good = write(d, "good.json", '{"name": "a"}')
            deep = d / "deep.json"
            deep.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
            summary = self.guard.check_files([good, deep])
        self.assertEqual([o.status for o in summary.outcomes], ["valid", "error"])
        self.assertIsInstance(summary.outcomes[1].error, ParseError)

    def test_too_deep_to_validate_is_an_error_outcome(self):
        depth = sys.getrecursionlimit() * 3 // 4
        rule, value = SchemaRule(SchemaType.ANY), "leaf"
        for _ in range(depth):
            rule, value = SchemaRule(SchemaType.LIST, items=rule), [value]
        guard = ConfigGuard(Schema(rule))
        with self.assertRaisesRegex(InternalError, "nested too deeply"):
            guard.check_document(Document(value))

    def test_check_directories_records_failures(self):
        with tmp_dir() as d:
            write(d, "a.yaml", "name: a\n")
            summary = self.guard.check_directories([d, "/nonexistent/dir"])
        self.assertEqual(len(summary.outcomes), 1)
        self.assertIn(Path("/nonexistent/dir"), summary.failed_directories)
        self.assertFalse(summary.valid)


if __name__ == "__main__":
    unittest.main()
