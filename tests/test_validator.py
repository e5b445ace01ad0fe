import io
import json
import unittest
from unittest import mock

from yaml_schema_validator import engine
from yaml_schema_validator.fetcher import SchemaFetcher
from yaml_schema_validator.loader import SchemaCache
from yaml_schema_validator.validator import SchemaValidator

from tests._util import CountingFetcher, SAMPLE_SCHEMA_J, data, fake_response, fake_session


class ValidatePathTests(unittest.TestCase):
    def setUp(self):
        self.validator = SchemaValidator()

    def test_valid_yaml_with_embedded_schema(self):
        results = self.validator.validate_path(data("valid.yaml"))
        self.assertEqual(list(results), [data("valid.yaml")])
        outcome = results[data("valid.yaml")]
        self.assertTrue(outcome.valid)
        self.assertIsNone(outcome.errors)
        self.assertIsNone(outcome.details)

    def test_valid_json_with_embedded_schema(self):
        outcome = self.validator.validate_path(data("valid.json"))[data("valid.json")]
        self.assertTrue(outcome.valid)

    def test_override_with_yaml_schema(self):
        validator = SchemaValidator(schema=data("sample-schema.yaml"), schema_override=True)
        outcome = validator.validate_path(data("validNoSchema.yaml"))[data("validNoSchema.yaml")]
        self.assertTrue(outcome.valid)

    def test_override_beats_embedded_pointer(self):
        validator = SchemaValidator(schema=data("does-not-exist.json"), schema_override=True)
        outcome = validator.validate_path(data("valid.yaml"))[data("valid.yaml")]
        self.assertFalse(outcome.valid)
        self.assertIn("NoSuchFile", outcome.errors["error"])

    def test_type_mismatch_has_details(self):
        outcome = self.validator.validate_path(data("invalid.yaml"))[data("invalid.yaml")]
        self.assertFalse(outcome.valid)
        self.assertIsNone(outcome.errors)
        self.assertEqual(len(outcome.details), 1)
        detail = outcome.details[0]
        self.assertTrue(detail.instance_location.startswith("$.sample"))
        self.assertEqual(detail.schema_location, "urn:example:sample#/properties/sample/properties/boolean-sample/type")
        self.assertIn("type", detail.errors)
        self.assertIn("is not of type 'boolean'", detail.errors["type"])

    def test_missing_required_reported_at_root(self):
        outcome = self.validator.validate_source(
            str(SAMPLE_SCHEMA_J.parent / "inline.yaml"), "$schema: sample-schema.json\nversion: 2\n"
        )[str(SAMPLE_SCHEMA_J.parent / "inline.yaml")]
        self.assertFalse(outcome.valid)
        self.assertEqual(outcome.details[0].instance_location, "$")
        self.assertIn("required", outcome.details[0].errors)

    def test_no_schema(self):
        outcome = self.validator.validate_path(data("validNoSchema.yaml"))[data("validNoSchema.yaml")]
        self.assertFalse(outcome.valid)
        self.assertIn("no schema", outcome.errors["error"].lower())

    def test_missing_schema_file(self):
        outcome = self.validator.validate_path(data("missingSchema.yaml"))[data("missingSchema.yaml")]
        self.assertFalse(outcome.valid)
        self.assertIn("NoSuchFile", outcome.errors["error"])

    def test_missing_input_file(self):
        results = self.validator.validate_path(data("missingfile.yaml"))
        self.assertIn("NoSuchFile", results[data("missingfile.yaml")].errors["error"])

    def test_malformed_source(self):
        outcome = self.validator.validate_path(data("badformat.yaml"))[data("badformat.yaml")]
        self.assertFalse(outcome.valid)
        self.assertIn("MarkedYAMLError", outcome.errors["error"])

    def test_unparseable_schema(self):
        outcome = self.validator.validate_path(data("brokenSchemaRef.yaml"))[data("brokenSchemaRef.yaml")]
        self.assertFalse(outcome.valid)
        self.assertIn("Error parsing schema", outcome.errors["error"])

    def test_separator_only_source(self):
        results = self.validator.validate_path(data("separators.yaml"))
        self.assertEqual(results[data("separators.yaml")].errors, {"error": "no nodes found"})


class MultiDocumentTests(unittest.TestCase):
    def test_three_valid_documents(self):
        name = data("multi3valid.yaml")
        results = SchemaValidator().validate_path(name)
        self.assertEqual(list(results), [f"{name}-1", f"{name}-2", f"{name}-3"])
        self.assertEqual([o.valid for o in results.values()], [True, True, True])

    def test_second_document_invalid(self):
        name = data("multi3invalid.yaml")
        results = SchemaValidator().validate_path(name)
        self.assertEqual(list(results), [f"{name}-1", f"{name}-2", f"{name}-3"])
        self.assertEqual([o.valid for o in results.values()], [True, False, True])

    def test_schema_compiled_once_for_all_documents(self):
        fetcher = CountingFetcher({"s.json": '{"type": "object", "required": ["a"]}'})
        validator = SchemaValidator(cache=SchemaCache(fetcher))
        text = "$schema: s.json\na: 1\n---\n$schema: s.json\nb: 2\n---\n$schema: s.json\na: 3\n"
        results = validator.validate_source("doc.yaml", text)
        self.assertEqual([o.valid for o in results.values()], [True, False, True])
        self.assertEqual(fetcher.calls, {"s.json": 1})


class RemoteSchemaTests(unittest.TestCase):
    def _validator(self, *responses):
        session = fake_session(*responses)
        return SchemaValidator(cache=SchemaCache(SchemaFetcher(session=session))), session

    def test_remote_schema(self):
        schema = json.dumps({"type": "object", "properties": {"port": {"type": "integer"}}})
        validator, session = self._validator(fake_response(200, schema))
        results = validator.validate_source("cfg.yaml", "$schema: https://example.com/s.json\nport: 80\n")
        self.assertTrue(results["cfg.yaml"].valid)
        session.get.assert_called_once()

    def test_remote_404(self):
        validator, _ = self._validator(fake_response(404))
        outcome = validator.validate_source("cfg.yaml", "$schema: https://example.com/missing.json\n")["cfg.yaml"]
        self.assertFalse(outcome.valid)
        self.assertIn("404", outcome.errors["error"])


class FailureIsolationTests(unittest.TestCase):
    def test_unexpected_exception_becomes_outcome(self):
        validator = SchemaValidator(schema=data("sample-schema.json"), schema_override=True)
        with mock.patch.object(engine, "evaluate", side_effect=RuntimeError("boom")):
            with self.assertLogs("yaml_schema_validator.validator", level="ERROR"):
                results = validator.validate_source("a.yaml", "name: x\n---\nname: y\n")
        self.assertEqual(len(results), 2)
        for outcome in results.values():
            self.assertFalse(outcome.valid)
            self.assertEqual(outcome.errors["error"], "RuntimeError: boom")

    def test_one_bad_document_does_not_stop_others(self):
        text = "$schema: sample-schema.json\nname: ok\n---\nname: no-pointer\n"
        name = data("inline.yaml")
        results = SchemaValidator().validate_source(name, text)
        self.assertEqual([o.valid for o in results.values()], [True, False])


class StreamTests(unittest.TestCase):
    def test_stdin_style_stream(self):
        validator = SchemaValidator(schema=data("sample-schema.json"), schema_override=True)
        results = validator.validate_stream(io.StringIO('name: "test"\nversion: 1.0\n'))
        self.assertIn("stdin", results)
        self.assertTrue(results["stdin"].valid)

    def test_dash_reads_stdin(self):
        validator = SchemaValidator(schema=data("sample-schema.json"), schema_override=True)
        with mock.patch("sys.stdin", io.StringIO("name: piped\n")):
            results = validator.validate_path("-")
        self.assertTrue(results["stdin"].valid)


class ValidateFilesTests(unittest.TestCase):
    def test_report_aggregates_in_order(self):
        paths = [data("valid.yaml"), data("multi3invalid.yaml"), data("valid.json")]
        report = SchemaValidator().validate_files(paths)
        name = data("multi3invalid.yaml")
        self.assertEqual(
            list(report.files),
            [data("valid.yaml"), f"{name}-1", f"{name}-2", f"{name}-3", data("valid.json")],
        )
        self.assertFalse(report.valid)

    def test_threaded_batch_matches_sequential(self):
        paths = [data("valid.yaml"), data("invalid.yaml"), data("multi3valid.yaml"), data("valid.json")]
        sequential = SchemaValidator().validate_files(paths)
        threaded = SchemaValidator(workers=4).validate_files(paths)
        self.assertEqual(list(sequential.files), list(threaded.files))
        self.assertEqual(sequential.to_dict(), threaded.to_dict())

    def test_repeated_path_validated_once(self):
        with self.assertLogs("yaml_schema_validator.validator", level="WARNING") as logs:
            report = SchemaValidator().validate_files([data("valid.yaml"), data("invalid.yaml"), data("valid.yaml")])
        self.assertEqual(list(report.files), [data("valid.yaml"), data("invalid.yaml")])
        self.assertTrue(any("Skipping duplicate input" in line for line in logs.output))

    def test_all_valid(self):
        report = SchemaValidator().validate_files([data("valid.yaml"), data("multi3valid.yaml")])
        self.assertTrue(report.valid)
