import time
from dataclasses import dataclass
from typing import Dict, Optional

import requests
import urllib3

from wfsprobe.core.errors import TransportError, UnexpectedStatusError
from wfsprobe.core.logging.log import Logger
from wfsprobe.core.util.util import Util

OWS_PATH = "/geoserver/ows"


@dataclass
class TransportConfig:
    verify_tls: bool = True
    proxy: Optional[str] = None
    timeout: float = 30.0
    user_agent: Optional[str] = None

    def proxies(self) -> Dict[str, str]:
        if not self.proxy:
            return {}
        return {"http": self.proxy, "https": self.proxy}


@dataclass
class WFSResponse:
    url: str
    status_code: int
    body: bytes
    response_time: float

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class WFSRequestHandler:
    """
    GeoServer OWS 엔드포인트에 대한 HTTP 요청
    - TLS 검증/프록시/타임아웃은 TransportConfig로만 설정 (공유 클라이언트 변경 없음)
    - requests 예외는 TransportError로 변환
    - 쿼리 문자열은 이미 인코딩된 상태로 전달됨 (CQL_FILTER 재인코딩 방지)
    """

    def __init__(self, base_url: str, config: Optional[TransportConfig] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.config = config or TransportConfig()
        self.logger = Logger()
        self.session = session or self._build_session()

    def _build_session(self) -> requests.Session:
        session = requests.Session()
        session.verify = self.config.verify_tls
        session.proxies.update(self.config.proxies())
        session.headers.update(self.get_headers())
        if not self.config.verify_tls:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            self.logger.warning("TLS certificate verification disabled")
        return session

    def get_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.config.user_agent or Util.get_random_user_agent(),
            "Accept": "*/*",
        }

    @property
    def host(self) -> str:
        return Util.host_of(self.base_url)

    def build_url(self, query: str) -> str:
        return f"{self.base_url}{OWS_PATH}?{query}"

    def send(self, query: str) -> WFSResponse:
        """GET 요청 하나. 상태 코드는 검사하지 않음"""
        url = self.build_url(query)
        self.logger.debug(f"GET {url}")
        start_time = time.time()
        try:
            resp = self.session.get(url, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        return WFSResponse(
            url=url,
            status_code=resp.status_code,
            body=resp.content,
            response_time=time.time() - start_time,
        )

    def send_checked(self, query: str) -> WFSResponse:
        response = self.send(query)
        if not response.ok:
            raise UnexpectedStatusError(response.status_code, response.url)
        return response

    def get_capabilities(self) -> bytes:
        query = "service=WFS&version=1.0.0&request=GetCapabilities"
        return self.send_checked(query).body

    def get_features(self, type_name: str, max_features: int) -> WFSResponse:
        query = (
            "service=WFS&version=1.0.0&request=GetFeature"
            f"&typeName={self.encode_type_name(type_name)}"
            "&sortOrder=ASC&outputFormat=application/json"
            f"&maxFeatures={max_features}"
        )
        return self.send_checked(query)

    def probe(self, type_name: str, encoded_filter: str) -> WFSResponse:
        query = (
            "service=wfs&version=1.0.0&request=GetFeature"
            f"&typeName={self.encode_type_name(type_name)}"
            f"&CQL_FILTER={encoded_filter}"
        )
        return self.send(query)

    @staticmethod
    def encode_type_name(type_name: str) -> str:
        # workspace:layer 형태는 그대로 유지
        return Util.encode_query_value(type_name).replace("%3A", ":")

    def close(self) -> None:
        self.session.close()
