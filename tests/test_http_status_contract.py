# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
from unittest.mock import Mock, patch

from hughttp.networking.client import HttpClient
from hughttp.networking.config import HttpClientConfig


def _mock_response(
    *,
    text: str = "",
    status: int = 200,
    url: str = "http://example.com",
    reason: str = "OK",
    content_type: str = "application/json",
    encoding: str | None = None,
):
    response = Mock()
    response.iter_content.return_value = [text.encode("utf-8")] if text else []
    response.headers = {"Content-Type": content_type}
    response.encoding = encoding
    response.status_code = status
    response.url = url
    response.reason = reason
    response.elapsed.total_seconds.return_value = 0.1
    return response


def test_get_404_is_returned_not_raised():
    client = HttpClient(HttpClientConfig(timeout_seconds=5.0))

    with patch("requests.Session.get") as mock_get:
        mock_get.return_value = _mock_response(
            text="not found",
            status=404,
            reason="Not Found",
        )
        response = client.to("http://example.com/missing").get()

    assert response.status == 404
    assert response.body == "not found"
    assert not response.ok


def test_get_500_is_returned_not_raised():
    client = HttpClient(HttpClientConfig(timeout_seconds=5.0))

    with patch("requests.Session.get") as mock_get:
        mock_get.return_value = _mock_response(
            text="server error",
            status=500,
            reason="Internal Server Error",
        )
        response = client.to("http://example.com/error").get()

    assert response.status == 500
    assert response.body == "server error"


def test_redirects_are_followed_by_default():
    client = HttpClient(HttpClientConfig(timeout_seconds=5.0))

    with patch("requests.Session.get") as mock_get:
        mock_get.return_value = _mock_response(text="moved here")
        response = client.to("http://example.com/redirect").get()

    assert response.status == 200
    mock_get.assert_called_once_with(
        "http://example.com/redirect",
        headers={},
        timeout=5.0,
        allow_redirects=True,
        stream=True,
        verify=True,
    )

