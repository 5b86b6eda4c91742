import xml.etree.ElementTree as ET
from typing import Iterator, Optional, Union

from wfsprobe.core.errors import DecodeError
from wfsprobe.core.models import (
    BoundingBox,
    CapabilitiesDocument,
    FeatureType,
    ServiceException,
    ServiceMetadata,
)


def _local(tag: str) -> str:
    """'{namespace}Name' -> 'Name'"""
    return tag.rsplit('}', 1)[-1] if isinstance(tag, str) else ""


def _child(element: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    if element is None:
        return None
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def _children(element: Optional[ET.Element], name: str):
    if element is None:
        return []
    return [child for child in element if _local(child.tag) == name]


def _text(element: Optional[ET.Element], name: str) -> str:
    child = _child(element, name)
    if child is None:
        return ""
    return "".join(child.itertext()).strip()


def _attr(element: Optional[ET.Element], name: str) -> str:
    if element is None:
        return ""
    for key, value in element.attrib.items():
        if _local(key) == name:
            return value
    return ""


def _decode_service(root: ET.Element) -> ServiceMetadata:
    service = _child(root, "Service")
    return ServiceMetadata(
        name=_text(service, "Name"),
        title=_text(service, "Title"),
        abstract=_text(service, "Abstract"),
        keywords=_text(service, "Keywords"),
        online_resource=_text(service, "OnlineResource"),
        fees=_text(service, "Fees"),
        access_constraints=_text(service, "AccessConstraints"),
    )


def _decode_feature_type(element: ET.Element) -> FeatureType:
    bbox = _child(element, "LatLongBoundingBox")
    return FeatureType(
        name=_text(element, "Name"),
        title=_text(element, "Title"),
        abstract=_text(element, "Abstract"),
        keywords=_text(element, "Keywords"),
        srs=_text(element, "SRS"),
        bounding_box=BoundingBox(
            minx=_attr(bbox, "minx"),
            miny=_attr(bbox, "miny"),
            maxx=_attr(bbox, "maxx"),
            maxy=_attr(bbox, "maxy"),
        ),
    )


def _decode_service_exception(root: ET.Element) -> Optional[ServiceException]:
    element = root if _local(root.tag) == "ServiceException" else _child(root, "ServiceException")
    if element is None:
        return None
    return ServiceException(
        text="".join(element.itertext()),
        code=_attr(element, "code"),
        locator=_attr(element, "locator"),
    )


def _request_resource(root: ET.Element, method: str) -> str:
    # Capability/Request/GetCapabilities/DCPType/HTTP/Get@onlineResource
    request = _child(_child(root, "Capability"), "Request")
    if request is None:
        return ""
    for element in request.iter():
        if _local(element.tag) == method:
            resource = _attr(element, "onlineResource")
            if resource:
                return resource
    return ""


def decode_capabilities(body: Union[bytes, str]) -> CapabilitiesDocument:
    """
    GetCapabilities 응답(또는 ServiceExceptionReport)을 CapabilitiesDocument로 변환
    - 태그는 namespace를 무시하고 local name으로 매칭
    - 없는 필드는 빈 값으로 채움
    - well-formed XML이 아니면 DecodeError
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise DecodeError(f"invalid capabilities XML: {e}") from e

    return CapabilitiesDocument(
        version=_attr(root, "version"),
        schema_location=_attr(root, "schemaLocation"),
        service=_decode_service(root),
        get_resource=_request_resource(root, "Get"),
        post_resource=_request_resource(root, "Post"),
        feature_types=tuple(
            _decode_feature_type(element)
            for element in _children(_child(root, "FeatureTypeList"), "FeatureType")
        ),
        service_exception=_decode_service_exception(root),
    )


class FeatureEnumerator:
    """Catalog 순서대로 feature type 이름을 반환 (여러 번 순회 가능)"""

    def __init__(self, document: CapabilitiesDocument):
        self.document = document

    def __iter__(self) -> Iterator[str]:
        for feature_type in self.document.feature_types:
            yield feature_type.name

    def __len__(self) -> int:
        return len(self.document.feature_types)
