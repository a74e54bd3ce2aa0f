"""
Tests for the version check
===========================

All HTTP calls are mocked.
"""

import os
import time
from unittest.mock import MagicMock, patch

import pytest
import requests

from rtx.version import (
    CACHE_FILENAME,
    LATEST_VERSION_URL,
    check_for_new_version,
    fetch_latest_version,
    get_latest_version,
    is_newer,
)


def mock_response(text: str, status_error: Exception = None) -> MagicMock:
    response = MagicMock()
    response.text = text
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    return response


class TestIsNewer:
    @pytest.mark.parametrize(
        "latest,current,expected",
        [
            ("1.36.0", "1.35.8", True),
            ("v2.0.0", "1.35.8", True),
            ("1.35.8", "1.35.8", False),
            ("1.35.10", "1.35.9", True),
            ("1.9", "1.10", False),
            ("garbage", "1.0.0", False),
        ],
    )
    def test_comparisons(self, latest, current, expected):
        assert is_newer(latest, current) is expected


class TestFetchLatestVersion:
    @patch("rtx.version.requests.get")
    def test_success(self, mock_get):
        mock_get.return_value = mock_response("v1.40.0\n")

        assert fetch_latest_version(timeout=2) == "1.40.0"
        mock_get.assert_called_once_with(LATEST_VERSION_URL, timeout=2)

    @patch("rtx.version.requests.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.Timeout("timed out")

        assert fetch_latest_version() is None

    @patch("rtx.version.requests.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("offline")

        assert fetch_latest_version() is None

    @patch("rtx.version.requests.get")
    def test_http_error(self, mock_get):
        mock_get.return_value = mock_response("", requests.HTTPError("503"))

        assert fetch_latest_version() is None

    @patch("rtx.version.requests.get")
    def test_unexpected_content(self, mock_get):
        mock_get.return_value = mock_response("<html>maintenance</html>")

        assert fetch_latest_version() is None

    @patch("rtx.version.requests.get")
    def test_page_containing_digits(self, mock_get):
        mock_get.return_value = mock_response("<html><body>Hotel WiFi login (c) 2024</body></html>")

        assert fetch_latest_version() is None
        assert check_for_new_version(current="1.35.8") is None


class TestGetLatestVersion:
    @patch("rtx.version.requests.get")
    def test_writes_cache(self, mock_get, tmp_path):
        mock_get.return_value = mock_response("1.40.0")

        assert get_latest_version(cache_dir=tmp_path / "cache") == "1.40.0"
        assert (tmp_path / "cache" / CACHE_FILENAME).read_text().strip() == "1.40.0"

    @patch("rtx.version.requests.get")
    def test_fresh_cache_skips_request(self, mock_get, tmp_path):
        (tmp_path / CACHE_FILENAME).write_text("1.39.0\n")

        assert get_latest_version(cache_dir=tmp_path) == "1.39.0"
        mock_get.assert_not_called()

    @patch("rtx.version.requests.get")
    def test_invalid_cache_refetches(self, mock_get, tmp_path):
        (tmp_path / CACHE_FILENAME).write_text("<html>2024</html>\n")
        mock_get.return_value = mock_response("1.41.0")

        assert get_latest_version(cache_dir=tmp_path) == "1.41.0"

    @patch("rtx.version.requests.get")
    def test_stale_cache_refetches(self, mock_get, tmp_path):
        cache_file = tmp_path / CACHE_FILENAME
        cache_file.write_text("1.39.0\n")
        old = time.time() - 2 * 24 * 60 * 60
        os.utime(cache_file, (old, old))
        mock_get.return_value = mock_response("1.41.0")

        assert get_latest_version(cache_dir=tmp_path) == "1.41.0"
        assert cache_file.read_text().strip() == "1.41.0"

    @patch("rtx.version.requests.get")
    def test_failure_not_cached(self, mock_get, tmp_path):
        mock_get.side_effect = requests.ConnectionError("offline")

        assert get_latest_version(cache_dir=tmp_path) is None
        assert not (tmp_path / CACHE_FILENAME).exists()


class TestCheckForNewVersion:
    @patch("rtx.version.requests.get")
    def test_newer_available(self, mock_get):
        mock_get.return_value = mock_response("2.0.0")

        assert check_for_new_version(current="1.0.0") == "2.0.0"

    @patch("rtx.version.requests.get")
    def test_up_to_date(self, mock_get):
        mock_get.return_value = mock_response("1.0.0")

        assert check_for_new_version(current="1.0.0") is None

    @patch("rtx.version.requests.get")
    def test_hidden(self, mock_get):
        assert check_for_new_version(hide_update_warning=True, current="1.0.0") is None
        mock_get.assert_not_called()

    @patch("rtx.version.requests.get")
    def test_network_failure(self, mock_get):
        mock_get.side_effect = requests.Timeout("timed out")

        assert check_for_new_version(current="1.0.0") is None
