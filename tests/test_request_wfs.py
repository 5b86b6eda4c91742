from unittest.mock import Mock

import pytest
import requests

from wfsprobe.core.errors import TransportError, UnexpectedStatusError
from wfsprobe.core.handler.request_wfs import TransportConfig, WFSRequestHandler


def _handler(status_code=200, content=b"", error=None, config=None):
    session = Mock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = Mock(status_code=status_code, content=content)
    return WFSRequestHandler("http://geo.example/", config or TransportConfig(timeout=7), session=session), session


def test_session_is_built_from_config():
    handler = WFSRequestHandler(
        "https://geo.example",
        TransportConfig(verify_tls=False, proxy="http://127.0.0.1:8080", user_agent="probe/1.0"),
    )
    assert handler.session.verify is False
    assert handler.session.proxies["https"] == "http://127.0.0.1:8080"
    assert handler.session.proxies["http"] == "http://127.0.0.1:8080"
    assert handler.session.headers["User-Agent"] == "probe/1.0"
    handler.close()

    default = WFSRequestHandler("https://geo.example")
    assert default.session.verify is True
    default.close()


def test_get_capabilities_url_and_timeout():
    handler, session = _handler(content=b"<WFS_Capabilities/>")

    assert handler.get_capabilities() == b"<WFS_Capabilities/>"
    session.get.assert_called_once_with(
        "http://geo.example/geoserver/ows?service=WFS&version=1.0.0&request=GetCapabilities",
        timeout=7,
    )


def test_get_features_url():
    handler, session = _handler(content=b'{"id": 1}')

    response = handler.get_features("topp:states", 25)

    assert response.text == '{"id": 1}'
    url = session.get.call_args.args[0]
    assert url == (
        "http://geo.example/geoserver/ows?service=WFS&version=1.0.0&request=GetFeature"
        "&typeName=topp:states&sortOrder=ASC&outputFormat=application/json&maxFeatures=25"
    )


def test_probe_keeps_encoded_filter_and_status():
    handler, session = _handler(status_code=400, content=b"bad")

    response = handler.probe("topp:states", "strStartsWith%28name%2C%27x%27%27%27%29")

    assert response.status_code == 400
    assert not response.ok
    assert session.get.call_args.args[0].endswith(
        "&typeName=topp:states&CQL_FILTER=strStartsWith%28name%2C%27x%27%27%27%29"
    )
    assert "service=wfs&" in session.get.call_args.args[0]


def test_non_success_status_raises():
    handler, _ = _handler(status_code=404)
    with pytest.raises(UnexpectedStatusError) as excinfo:
        handler.get_features("topp:states", 10)
    assert excinfo.value.status_code == 404


@pytest.mark.parametrize("error", [
    requests.ConnectionError("refused"),
    requests.Timeout("slow"),
    requests.exceptions.SSLError("bad cert"),
])
def test_requests_errors_become_transport_errors(error):
    handler, _ = _handler(error=error)
    with pytest.raises(TransportError):
        handler.get_capabilities()


def test_type_name_is_encoded():
    assert WFSRequestHandler.encode_type_name("ws:my layer&x") == "ws:my+layer%26x"


if __name__ == "__main__":
    pytest.main([__file__])
