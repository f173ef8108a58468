"""test_layer.py — Unit tests for cristin_shared layer modules.

Run from the repository root:
    python3 -m pytest backend/lambda/shared_layer -v
"""

from __future__ import annotations

import json
import unittest
from unittest.mock import MagicMock, patch

from botocore.exceptions import ClientError

from cristin_shared.aws_clients import _get_ssm
from cristin_shared.config import ProjectsConfig, load_config
from cristin_shared.errors import (
    ERROR_MESSAGE_INVALID_PATH_PARAMETER_FOR_ID,
    ERROR_MESSAGE_LANGUAGE_INVALID,
    ERROR_MESSAGE_NUMBER_OF_RESULTS_VALUE_INVALID,
    ERROR_MESSAGE_PAGE_VALUE_INVALID,
    ERROR_MESSAGE_TITLE_MISSING_OR_HAS_ILLEGAL_CHARACTERS,
    ConfigurationError,
    UrlConstructionError,
    ValidationError,
)
from cristin_shared.http_utils import (
    APPLICATION_PROBLEM_JSON,
    _path_method,
    _preflight,
    _problem,
    _response,
)
from cristin_shared.models import SearchRequest
from cristin_shared.urls import (
    build_get_url,
    build_public_project_url,
    build_public_search_url,
    build_query_url,
)
from cristin_shared.validation import validate_lookup, validate_search

CRISTIN_BASE = "https://api.cristin.no/v2"
PUBLIC_BASE = "https://api.dev.nva.aws.unit.no/project"


class SearchValidationTests(unittest.TestCase):
    def assertRejected(self, params, message):
        with self.assertRaises(ValidationError) as ctx:
            validate_search(params)
        self.assertEqual(ctx.exception.message, message)
        self.assertEqual(ctx.exception.status_code, 400)

    def test_defaults_applied_when_only_title_given(self):
        request = validate_search({"title": "reindeer"})
        self.assertEqual(request, SearchRequest(title="reindeer", language="nb", page=1, results_per_page=5))

    def test_accepts_letters_digits_whitespace_dash_comma_period(self):
        request = validate_search({"title": "Reinsdyr på Svalbard, 2020-2024. fase 2"})
        self.assertEqual(request.title, "Reinsdyr på Svalbard, 2020-2024. fase 2")

    def test_accepts_non_latin_letters_and_decimal_digits(self):
        for title in ("Ελληνικά", "١٢٣ project"):
            with self.subTest(title=title):
                self.assertEqual(validate_search({"title": title}).title, title)

    def test_missing_title_rejected(self):
        self.assertRejected({"language": "nb"}, ERROR_MESSAGE_TITLE_MISSING_OR_HAS_ILLEGAL_CHARACTERS)

    def test_empty_title_rejected(self):
        self.assertRejected({"title": ""}, ERROR_MESSAGE_TITLE_MISSING_OR_HAS_ILLEGAL_CHARACTERS)

    def test_title_with_any_illegal_character_rejected(self):
        for title in (
            "abc123- ,-?", "reindeer!", "a/b", "<script>", "50%", "x_y", "'quoted'",
            "half \u00bd", "x\u00b2", "\u216b",
        ):
            with self.subTest(title=title):
                self.assertRejected({"title": title}, ERROR_MESSAGE_TITLE_MISSING_OR_HAS_ILLEGAL_CHARACTERS)

    def test_no_parameters_at_all_rejected(self):
        self.assertRejected(None, ERROR_MESSAGE_TITLE_MISSING_OR_HAS_ILLEGAL_CHARACTERS)

    def test_supported_languages_accepted(self):
        for language in ("nb", "en"):
            with self.subTest(language=language):
                self.assertEqual(validate_search({"title": "x", "language": language}).language, language)

    def test_invalid_language_is_an_error_not_a_fallback(self):
        for language in ("ru", "", "NB", "nn"):
            with self.subTest(language=language):
                self.assertRejected({"title": "x", "language": language}, ERROR_MESSAGE_LANGUAGE_INVALID)

    def test_page_parsed(self):
        self.assertEqual(validate_search({"title": "x", "page": "2"}).page, 2)

    def test_invalid_page_rejected(self):
        for page in ("0", "-1", "abc123- ,-?", "1.5", ""):
            with self.subTest(page=page):
                self.assertRejected({"title": "x", "page": page}, ERROR_MESSAGE_PAGE_VALUE_INVALID)

    def test_results_and_per_page_alias(self):
        self.assertEqual(validate_search({"title": "x", "results": "10"}).results_per_page, 10)
        self.assertEqual(validate_search({"title": "x", "per_page": "7"}).results_per_page, 7)
        self.assertEqual(
            validate_search({"title": "x", "results": "3", "per_page": "7"}).results_per_page, 3
        )

    def test_invalid_results_rejected(self):
        for results in ("0", "ten", "abc123- ,-?"):
            with self.subTest(results=results):
                self.assertRejected(
                    {"title": "x", "results": results}, ERROR_MESSAGE_NUMBER_OF_RESULTS_VALUE_INVALID
                )


class LookupValidationTests(unittest.TestCase):
    def test_numeric_id_accepted(self):
        request = validate_lookup({"id": "9999"}, {"language": "en"})
        self.assertEqual(request.id, 9999)
        self.assertEqual(request.language, "en")

    def test_language_defaults_to_nb(self):
        self.assertEqual(validate_lookup({"id": "1"}).language, "nb")

    def test_non_positive_or_non_numeric_id_rejected(self):
        for raw in ("Not an ID", "0", "-5", "12a", ""):
            with self.subTest(id=raw):
                with self.assertRaises(ValidationError) as ctx:
                    validate_lookup({"id": raw})
                self.assertEqual(ctx.exception.message, ERROR_MESSAGE_INVALID_PATH_PARAMETER_FOR_ID)

    def test_missing_id_rejected(self):
        with self.assertRaises(ValidationError):
            validate_lookup(None)

    def test_invalid_language_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_lookup({"id": "1"}, {"language": "ru"})
        self.assertEqual(ctx.exception.message, ERROR_MESSAGE_LANGUAGE_INVALID)


class UrlBuilderTests(unittest.TestCase):
    def test_query_url_has_fixed_parameter_order(self):
        url = build_query_url(CRISTIN_BASE, "reindeer", "nb", 1, 5)
        self.assertEqual(url, "https://api.cristin.no/v2/projects/?lang=nb&page=1&per_page=5&title=reindeer")

    def test_query_url_is_deterministic(self):
        first = build_query_url(CRISTIN_BASE, "reindeer, herd", "en", 3, 10)
        second = build_query_url(CRISTIN_BASE, "reindeer, herd", "en", 3, 10)
        self.assertEqual(first, second)

    def test_query_url_encodes_title(self):
        url = build_query_url(CRISTIN_BASE, "reindeer husbandry, på", "nb", 2, 5)
        self.assertTrue(url.endswith("page=2&per_page=5&title=reindeer%20husbandry%2C%20p%C3%A5"))

    def test_trailing_slash_on_base_tolerated(self):
        self.assertEqual(
            build_query_url(CRISTIN_BASE + "/", "x", "nb", 1, 5),
            build_query_url(CRISTIN_BASE, "x", "nb", 1, 5),
        )

    def test_get_url(self):
        self.assertEqual(build_get_url(CRISTIN_BASE, 9999, "en"), "https://api.cristin.no/v2/projects/9999?lang=en")

    def test_invalid_base_raises_url_construction_error(self):
        for base in ("", "api.cristin.no/v2", "ftp://api.cristin.no"):
            with self.subTest(base=base):
                with self.assertRaises(UrlConstructionError):
                    build_query_url(base, "x", "nb", 1, 5)

    def test_unencodable_title_raises_url_construction_error(self):
        with self.assertRaises(UrlConstructionError):
            build_query_url(CRISTIN_BASE, "bad\ud800", "nb", 1, 5)

    def test_public_urls(self):
        request = SearchRequest(title="reindeer", language="nb", page=2, results_per_page=5)
        self.assertEqual(
            build_public_search_url(PUBLIC_BASE, request),
            "https://api.dev.nva.aws.unit.no/project/?language=nb&page=2&results=5&title=reindeer",
        )
        self.assertIn("page=3", build_public_search_url(PUBLIC_BASE, request, 3))
        self.assertEqual(build_public_project_url(PUBLIC_BASE, "538786"), PUBLIC_BASE + "/538786")


class HttpUtilsTests(unittest.TestCase):
    def test_response_format(self):
        resp = _response(200, {"key": "vål"}, "*")
        self.assertEqual(resp["statusCode"], 200)
        self.assertEqual(resp["headers"]["Content-Type"], "application/json")
        self.assertEqual(resp["headers"]["Access-Control-Allow-Origin"], "*")
        self.assertEqual(json.loads(resp["body"])["key"], "vål")

    def test_problem_format(self):
        resp = _problem(502, "upstream down", "https://example.org")
        self.assertEqual(resp["statusCode"], 502)
        self.assertEqual(resp["headers"]["Content-Type"], APPLICATION_PROBLEM_JSON)
        self.assertEqual(resp["headers"]["Access-Control-Allow-Origin"], "https://example.org")
        body = json.loads(resp["body"])
        self.assertEqual(body["status"], 502)
        self.assertEqual(body["title"], "Bad Gateway")
        self.assertEqual(body["detail"], "upstream down")
        self.assertEqual(body["code"], "UPSTREAM_ERROR")

    def test_problem_code_override(self):
        body = json.loads(_problem(400, "bad", "*", code="CUSTOM")["body"])
        self.assertEqual(body["code"], "CUSTOM")

    def test_preflight(self):
        resp = _preflight("*")
        self.assertEqual(resp["statusCode"], 204)
        self.assertIn("GET", resp["headers"]["Access-Control-Allow-Methods"])

    def test_path_method_v2_and_v1(self):
        self.assertEqual(
            _path_method({"requestContext": {"http": {"method": "get", "path": "/project/1"}}}),
            ("GET", "/project/1"),
        )
        self.assertEqual(_path_method({"httpMethod": "OPTIONS", "path": "/project/"}), ("OPTIONS", "/project/"))

    def test_path_method_tolerates_malformed_request_context(self):
        self.assertEqual(
            _path_method({"requestContext": "not-a-dict", "httpMethod": "GET", "path": "/project/"}),
            ("GET", "/project/"),
        )
        self.assertEqual(_path_method({"requestContext": {"http": ["GET"]}}), ("GET", "/"))


class ConfigTests(unittest.TestCase):
    def test_defaults(self):
        self.assertEqual(load_config({}), ProjectsConfig())

    def test_environment_overrides(self):
        cfg = load_config({
            "ALLOWED_ORIGIN": "https://nva.unit.no",
            "CRISTIN_API_URL": "https://api.cristin-test.uio.no/v2/",
            "PUBLIC_API_URL": "https://api.nva.unit.no/project/",
            "UPSTREAM_TIMEOUT_SECONDS": "2.5",
            "ENRICHMENT_MAX_WORKERS": "3",
        })
        self.assertEqual(cfg.allowed_origin, "https://nva.unit.no")
        self.assertEqual(cfg.cristin_api_url, "https://api.cristin-test.uio.no/v2")
        self.assertEqual(cfg.public_api_url, "https://api.nva.unit.no/project")
        self.assertEqual(cfg.upstream_timeout_seconds, 2.5)
        self.assertEqual(cfg.enrichment_max_workers, 3)

    def test_invalid_numbers_raise(self):
        for env in ({"UPSTREAM_TIMEOUT_SECONDS": "soon"}, {"ENRICHMENT_MAX_WORKERS": "0"}):
            with self.subTest(env=env):
                with self.assertRaises(ConfigurationError):
                    load_config(env)

    @patch("cristin_shared.config._get_ssm")
    def test_cristin_url_from_ssm_parameter(self, mock_get_ssm):
        mock_get_ssm.return_value.get_parameter.return_value = {
            "Parameter": {"Value": "https://api.cristin-test.uio.no/v2/"}
        }
        cfg = load_config({"CRISTIN_API_URL_PARAMETER": "/cristin/api-url"})
        self.assertEqual(cfg.cristin_api_url, "https://api.cristin-test.uio.no/v2")
        mock_get_ssm.return_value.get_parameter.assert_called_once_with(
            Name="/cristin/api-url", WithDecryption=True
        )

    @patch("cristin_shared.config._get_ssm")
    def test_ssm_failure_raises_configuration_error(self, mock_get_ssm):
        mock_get_ssm.return_value.get_parameter.side_effect = ClientError(
            {"Error": {"Code": "ParameterNotFound", "Message": "missing"}}, "GetParameter"
        )
        with self.assertRaises(ConfigurationError) as ctx:
            load_config({"CRISTIN_API_URL_PARAMETER": "/cristin/api-url"})
        self.assertIn("ParameterNotFound", str(ctx.exception))


class AwsClientTests(unittest.TestCase):
    @patch("cristin_shared.aws_clients.boto3")
    def test_get_ssm_singleton(self, mock_boto3):
        import cristin_shared.aws_clients as clients

        clients._ssm = None  # Reset singleton
        mock_boto3.client.return_value = MagicMock()

        result1 = _get_ssm()
        result2 = _get_ssm()

        self.assertIs(result1, result2)
        mock_boto3.client.assert_called_once()

        clients._ssm = None  # Clean up


if __name__ == "__main__":
    unittest.main()
