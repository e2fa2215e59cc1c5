"""Tests for upstream HTTP access."""

from unittest.mock import Mock, patch

import pytest
import requests

from avalanchewatch.errors import SourceUnavailableError
from avalanchewatch.sources import fetch_document

URL = "https://example.test/doc.xml"


class TestFetchDocument:
    @patch("avalanchewatch.sources.http.requests.get")
    def test_success(self, mock_get):
        mock_response = Mock()
        mock_response.raise_for_status = Mock()
        mock_get.return_value = mock_response

        response = fetch_document(URL, timeout=10, user_agent="UA")

        assert response is mock_response
        mock_get.assert_called_once_with(
            URL, params=None, timeout=10, headers={"User-Agent": "UA"}
        )

    @patch("avalanchewatch.sources.http.requests.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.Timeout("slow")

        with pytest.raises(SourceUnavailableError, match="Timed out after 10s"):
            fetch_document(URL, timeout=10)

    @patch("avalanchewatch.sources.http.requests.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(SourceUnavailableError) as exc_info:
            fetch_document(URL)

        assert exc_info.value.source == URL

    @patch("avalanchewatch.sources.http.requests.get")
    def test_http_error_status(self, mock_get):
        mock_response = Mock()
        mock_response.raise_for_status = Mock(side_effect=requests.HTTPError("503 Server Error"))
        mock_get.return_value = mock_response

        with pytest.raises(SourceUnavailableError, match="503"):
            fetch_document(URL)
