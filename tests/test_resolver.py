import os
import unittest

from yaml_schema_validator.exceptions import NoSchemaError
from yaml_schema_validator.resolver import resolve_schema_reference


class ResolveSchemaReferenceTests(unittest.TestCase):
    def test_relative_pointer_joined_to_source_directory(self):
        ref = resolve_schema_reference({"$schema": "schema.json"}, "configs/app.yaml")
        self.assertEqual(ref, os.path.join("configs", "schema.json"))

    def test_absolute_pointer_kept(self):
        ref = resolve_schema_reference({"$schema": "/etc/schemas/app.json"}, "configs/app.yaml")
        self.assertEqual(ref, "/etc/schemas/app.json")

    def test_url_returned_verbatim(self):
        for url in ("http://example.com/s.json", "https://example.com/s.yaml"):
            with self.subTest(url=url):
                self.assertEqual(resolve_schema_reference({"$schema": url}, "configs/app.yaml"), url)

    def test_source_without_directory(self):
        self.assertEqual(resolve_schema_reference({"$schema": "s.json"}, "stdin"), "s.json")

    def test_override_wins_over_pointer(self):
        ref = resolve_schema_reference(
            {"$schema": "embedded.json"}, "configs/app.yaml",
            override=True, override_ref="override.json",
        )
        self.assertEqual(ref, "override.json")

    def test_override_applies_without_pointer(self):
        ref = resolve_schema_reference({"a": 1}, "app.yaml", override=True, override_ref="https://x/s.json")
        self.assertEqual(ref, "https://x/s.json")

    def test_override_ref_ignored_when_disabled(self):
        ref = resolve_schema_reference({"$schema": "embedded.json"}, "app.yaml", override_ref="override.json")
        self.assertEqual(ref, "embedded.json")

    def test_missing_or_empty_pointer_raises(self):
        for doc in ({}, {"$schema": ""}, {"$schema": "   "}, {"$schema": 5}, ["not", "a", "mapping"], "scalar"):
            with self.subTest(doc=doc):
                with self.assertRaisesRegex(NoSchemaError, "^No schema found"):
                    resolve_schema_reference(doc, "app.yaml")
