from unittest.mock import Mock

import pytest

from conftest import make_response
from wfsprobe.core.controller.controller import Controller
from wfsprobe.core.errors import DecodeError, TransportError, UnexpectedStatusError
from wfsprobe.core.util.storage import CollectionStore


def _requester(capabilities_xml, features=None, probes=None):
    requester = Mock()
    requester.host = "geo.example"
    requester.get_capabilities.return_value = capabilities_xml.encode("utf-8")
    requester.get_features.side_effect = features
    requester.probe.side_effect = probes
    return requester


def test_feature_type_independence(capabilities_xml, leak_response, quiet_response, tmp_path):
    def get_features(type_name, max_features):
        if type_name == "topp:states":
            raise UnexpectedStatusError(500)
        return make_response(b'{"id": "roads.1"}\n{"id": "roads.2"}\n')

    def probe(type_name, encoded_filter):
        if type_name == "tiger:roads":
            raise TransportError("connection reset")
        return leak_response if encoded_filter.startswith("strEndsWith") else quiet_response

    requester = _requester(capabilities_xml, get_features, probe)
    controller = Controller("http://geo.example", requester=requester,
                            store=CollectionStore(str(tmp_path)))

    report = controller.run()

    assert [f.type_name for f in report.features] == ["topp:states", "tiger:roads", "topp:states"]
    states, roads, _ = report.features

    # 수집 실패 후에도 같은 feature type의 probe는 실행됨
    assert states.fetch is None
    assert "500" in states.fetch_error
    assert states.extraction.fragment == "PostgreSQL 14.2 on x86_64"
    assert states.extraction.candidate.name == "strEndsWith"

    assert len(roads.fetch.records) == 2
    assert roads.extraction is None
    assert len(roads.attempts) == 3
    assert report.extractions[0].fragment == "PostgreSQL 14.2 on x86_64"
    requester.get_features.assert_any_call("tiger:roads", 10)


def test_malformed_collection_does_not_stop_run(capabilities_xml, quiet_response, tmp_path):
    requester = _requester(
        capabilities_xml,
        features=[make_response(b"garbage\n"), make_response(b'{"a": 1}'), make_response(b"")],
        probes=[quiet_response] * 9,
    )
    report = Controller("geo.example", requester=requester,
                        store=CollectionStore(str(tmp_path)), max_features=3).run()

    assert "MalformedRecordError" in report.features[0].fetch_error
    assert report.features[1].fetch.records == [{"a": 1}]
    assert report.features[2].fetch.records == []
    assert report.extractions == []
    assert requester.probe.call_count == 9


def test_empty_names_are_skipped(quiet_response, tmp_path):
    xml = (
        "<WFS_Capabilities><FeatureTypeList>"
        "<FeatureType><Title>unnamed</Title></FeatureType>"
        "<FeatureType><Name>a</Name></FeatureType>"
        "</FeatureTypeList></WFS_Capabilities>"
    )
    requester = _requester(xml, features=[make_response(b"")], probes=[quiet_response] * 3)

    report = Controller("http://geo.example", requester=requester,
                        store=CollectionStore(str(tmp_path))).run()

    assert report.features[0].skipped
    assert report.features[1].type_name == "a"
    assert not report.features[1].skipped
    requester.get_features.assert_called_once_with("a", 10)


def test_capabilities_failure_is_fatal(capabilities_xml):
    requester = _requester(capabilities_xml)
    requester.get_capabilities.side_effect = TransportError("no route to host")
    with pytest.raises(TransportError):
        Controller("http://geo.example", requester=requester).run()

    requester = _requester(capabilities_xml)
    requester.get_capabilities.return_value = b"<html><body>not xml"
    with pytest.raises(DecodeError):
        Controller("http://geo.example", requester=requester).run()
    requester.get_features.assert_not_called()


def test_max_duration_skips_remaining(capabilities_xml, quiet_response, tmp_path):
    requester = _requester(capabilities_xml, features=[make_response(b"")] * 3,
                           probes=[quiet_response] * 9)
    controller = Controller("http://geo.example", requester=requester,
                            store=CollectionStore(str(tmp_path)), max_duration=-1)

    report = controller.run()

    assert all(f.skipped for f in report.features)
    assert report.features[0].skip_reason == "max duration exceeded"
    requester.probe.assert_not_called()


@pytest.mark.parametrize("target, max_features", [
    ("http://", 10),
    ("", 10),
    ("http://geo.example", 0),
])
def test_invalid_configuration(target, max_features):
    with pytest.raises(ValueError):
        Controller(target, max_features=max_features, requester=Mock())


if __name__ == "__main__":
    pytest.main([__file__])
