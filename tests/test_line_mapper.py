import textwrap
import unittest

from configguard import Document, validate
from configguard.line_mapper import annotate, annotate_result, last_key, map_lines
from configguard.validator import ValidationError, ValidationResult
from tests._util import schema_from


YAML_DOC = textwrap.dedent("""\
    # deployment
    ---
    apiVersion: v1
    metadata:
      name: web
      "quoted key": 1
    spec:
      containers:
        - name: app
          image: nginx
      ports: [{port: 80, protocol: TCP}]
      note: "a, b: c"
""")

JSON_DOC = textwrap.dedent("""\
    {
      "apiVersion": "v1",
      "metadata": {"name": "web", "esc\\"aped": 1},
      "spec": {
        "replicas": 2
      }
    }
""")


class MapLinesTests(unittest.TestCase):
    def test_yaml_keys(self):
        lines = map_lines(YAML_DOC, "yaml")
        self.assertEqual(lines["apiVersion"], 3)
        self.assertEqual(lines["metadata"], 4)
        self.assertEqual(lines["quoted key"], 6)
        self.assertEqual(lines["image"], 10)
        self.assertEqual(lines["note"], 12)

    def test_first_occurrence_wins(self):
        self.assertEqual(map_lines(YAML_DOC, "yaml")["name"], 5)

    def test_list_dash_keys(self):
        lines = map_lines("items:\n  - - deep: 1\n", "yaml")
        self.assertEqual(lines["deep"], 2)

    def test_flow_mapping_keys(self):
        lines = map_lines(YAML_DOC, "yaml")
        self.assertEqual(lines["port"], 11)
        self.assertEqual(lines["protocol"], 11)

    def test_comments_and_markers_are_ignored(self):
        lines = map_lines("# key: 1\n---\nreal: 2\n", "yaml")
        self.assertEqual(lines, {"real": 3})

    def test_json_keys(self):
        lines = map_lines(JSON_DOC, "json")
        self.assertEqual(lines["apiVersion"], 2)
        self.assertEqual(lines["name"], 3)
        self.assertEqual(lines['esc"aped'], 3)
        self.assertEqual(lines["replicas"], 5)


class LastKeyTests(unittest.TestCase):
    def test_last_key(self):
        self.assertEqual(last_key(".spec.replicas"), "replicas")
        self.assertEqual(last_key(".spec.ports[2]"), "ports")
        self.assertEqual(last_key(".matrix[0][1]"), "matrix")
        self.assertEqual(last_key(".spec.containers[0].image"), "image")

    def test_paths_without_keys(self):
        self.assertIsNone(last_key(""))
        self.assertIsNone(last_key("[3]"))


class AnnotateTests(unittest.TestCase):
    def test_lines_are_attached(self):
        errors = [
            ValidationError(".spec.replicas", "Value too small", "At least 0", "-1"),
            ValidationError(".missing", "Required key missing", "Key to be present", "Key is absent"),
            ValidationError("", "Type mismatch", "object", "list"),
        ]
        out = annotate(errors, JSON_DOC, "json")
        self.assertEqual([e.line for e in out], [5, None, None])
        self.assertIsNone(errors[0].line)

    def test_annotate_validation_result(self):
        schema = schema_from("""
            type: object
            keys:
              spec:
                type: object
                keys:
                  containers:
                    type: list
                    items:
                      type: object
                      keys: {image: {type: integer}}
        """)
        doc = Document.from_str(YAML_DOC, "yaml")
        result = annotate_result(validate(doc.data, schema), doc.text, doc.format)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].path, ".spec.containers[0].image")
        self.assertEqual(result.errors[0].line, 10)

    def test_valid_result_and_missing_text_are_untouched(self):
        ok = ValidationResult.ok()
        self.assertIs(annotate_result(ok, YAML_DOC, "yaml"), ok)
        bad = ValidationResult.invalid([ValidationError(".apiVersion", "m", "e", "a")])
        self.assertIs(annotate_result(bad, None, "yaml"), bad)


if __name__ == "__main__":
    unittest.main()
