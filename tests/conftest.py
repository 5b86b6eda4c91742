import os
import sys

import pytest

# 프로젝트 루트 디렉토리를 파이썬 경로에 추가
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.append(project_root)

from wfsprobe.core.handler.request_wfs import WFSResponse

CAPABILITIES_XML = """<?xml version="1.0" encoding="UTF-8"?>
<WFS_Capabilities version="1.0.0" xmlns="http://www.opengis.net/wfs"
    xmlns:topp="http://www.openplans.org/topp"
    xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
    xmlns:ogc="http://www.opengis.net/ogc"
    xsi:schemaLocation="http://www.opengis.net/wfs http://geo.example/geoserver/schemas/wfs/1.0.0/WFS-capabilities.xsd">
  <Service>
    <Name>WFS</Name>
    <Title>GeoServer Web Feature Service</Title>
    <Abstract>This is the reference implementation of WFS 1.0.0</Abstract>
    <Keywords>WFS, WMS, GEOSERVER</Keywords>
    <OnlineResource>http://geo.example/geoserver/wfs</OnlineResource>
    <Fees>NONE</Fees>
    <AccessConstraints>NONE</AccessConstraints>
  </Service>
  <Capability>
    <Request>
      <GetCapabilities>
        <DCPType><HTTP><Get onlineResource="http://geo.example/geoserver/wfs?request=GetCapabilities"/></HTTP></DCPType>
        <DCPType><HTTP><Post onlineResource="http://geo.example/geoserver/wfs"/></HTTP></DCPType>
      </GetCapabilities>
    </Request>
  </Capability>
  <FeatureTypeList>
    <Operations><Query/></Operations>
    <FeatureType>
      <Name>topp:states</Name>
      <Title>USA Population</Title>
      <Abstract>This is some census data on the states.</Abstract>
      <Keywords>census, united, boundaries, state, states</Keywords>
      <SRS>EPSG:4326</SRS>
      <LatLongBoundingBox minx="-124.731" miny="24.956" maxx="-66.97" maxy="49.372"/>
    </FeatureType>
    <FeatureType>
      <Name>tiger:roads</Name>
      <Title>Manhattan (NY) roads</Title>
      <SRS>EPSG:4326</SRS>
    </FeatureType>
    <FeatureType>
      <Name>topp:states</Name>
    </FeatureType>
  </FeatureTypeList>
</WFS_Capabilities>
"""

MARKER_PREFIX = "ERROR: invalid input syntax for integer: "

# PSQLException 메시지 줄. 96번째 문자부터 따옴표로 감싼 version() 값
ERROR_LINE = (
    "java.lang.RuntimeException: java.io.IOException: org.postgresql.util.PSQLException: "
)
ERROR_LINE = ERROR_LINE[:96 - len(MARKER_PREFIX)].ljust(96 - len(MARKER_PREFIX), " ")
ERROR_LINE += MARKER_PREFIX + '"PostgreSQL 14.2 on x86_64"'


def exception_body(text: str) -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<ServiceExceptionReport version="1.2.0" xmlns="http://www.opengis.net/ogc">\n'
        '<ServiceException>\n'
        f'{text}\n'
        '</ServiceException></ServiceExceptionReport>\n'
    ).encode("utf-8")


def make_response(body: bytes = b"", status_code: int = 200) -> WFSResponse:
    return WFSResponse(
        url="http://geo.example/geoserver/ows",
        status_code=status_code,
        body=body,
        response_time=0.01,
    )


@pytest.fixture
def capabilities_xml() -> str:
    return CAPABILITIES_XML


@pytest.fixture
def leak_response() -> WFSResponse:
    text = "\n".join([
        "java.lang.RuntimeException: java.io.IOException",
        ERROR_LINE,
        "  Position: 123",
    ])
    return make_response(exception_body(text))


@pytest.fixture
def quiet_response() -> WFSResponse:
    return make_response(exception_body("Illegal property name: nome"))
