import unittest

from configguard import loader
from configguard.errors import ConfigNotFoundError, SchemaError
from tests._util import EXAMPLE_SCHEMA, tmp_dir, write


class LoaderTests(unittest.TestCase):
    def test_load_schema_from_file(self):
        with tmp_dir() as d:
            p = write(d, "schema.yaml", """
                type: object
                keys:
                  name: {type: string}
            """)
            raw = loader.load_schema(p)
        self.assertEqual(raw, {"type": "object", "keys": {"name": {"type": "string"}}})

    def test_json_extension_is_parsed_as_json(self):
        with tmp_dir() as d:
            p = write(d, "schema.json", '{"type": "list", "items": {"type": "integer"}}')
            raw = loader.load_schema(p)
        self.assertEqual(raw["items"], {"type": "integer"})

    def test_other_extensions_are_parsed_as_yaml(self):
        with tmp_dir() as d:
            raw = loader.load_schema(write(d, "schema.txt", "type: string\n"))
        self.assertEqual(raw, {"type": "string"})

    def test_load_schema_from_package_resource(self):
        raw = loader.load_schema("deployment.yaml")
        self.assertEqual(raw["type"], "object")
        self.assertIn("apiVersion", raw["keys"])

    def test_bundled_schema_matches_example(self):
        self.assertEqual(loader.load_schema("deployment.yaml"), loader.load_schema(EXAMPLE_SCHEMA))

    def test_missing_schema(self):
        with self.assertRaises(ConfigNotFoundError):
            loader.load_schema("no-such-schema.yaml")

    def test_read_schema_text_rejects_scalars(self):
        with self.assertRaisesRegex(SchemaError, "must be a mapping"):
            loader.read_schema_text("just a string\n", source="inline")

    def test_read_schema_text_reports_source(self):
        with self.assertRaisesRegex(SchemaError, "from inline"):
            loader.read_schema_text("{", "json", source="inline")


if __name__ == "__main__":
    unittest.main()
