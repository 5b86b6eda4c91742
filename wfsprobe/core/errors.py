from typing import Optional


class WFSProbeError(Exception):
    """wfsprobe 예외의 기본 클래스"""


class DecodeError(WFSProbeError):
    """Capabilities / ServiceException XML을 해석할 수 없음"""


class MalformedRecordError(WFSProbeError):
    """feature collection의 한 줄이 JSON 객체가 아님"""

    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.line_number = line_number


class UnexpectedStatusError(WFSProbeError):
    """2xx가 아닌 HTTP 상태 코드"""

    def __init__(self, status_code: int, url: str = ""):
        super().__init__(f"unexpected status code: {status_code}")
        self.status_code = status_code
        self.url = url


class TransportError(WFSProbeError):
    """연결/DNS/TLS/타임아웃 오류"""
