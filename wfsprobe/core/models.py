from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Any


class CQLCategory(Enum):
    """CQL 술어 함수 분류"""
    STRING = "string"
    SPATIAL = "spatial"
    TEMPORAL = "temporal"


class ProbeState(Enum):
    """feature type 하나에 대한 injection probe 상태"""
    PENDING = "pending"
    TRYING = "trying"
    EXTRACTED = "extracted"
    EXHAUSTED = "exhausted"


class AttemptOutcome(Enum):
    TRANSPORT_ERROR = "transport_error"
    UNEXPECTED_STATUS = "unexpected_status"
    DECODE_ERROR = "decode_error"
    NO_MATCH = "no_match"
    TRUNCATED = "truncated"
    EXTRACTED = "extracted"


@dataclass(frozen=True)
class ServiceMetadata:
    name: str = ""
    title: str = ""
    abstract: str = ""
    keywords: str = ""
    online_resource: str = ""
    fees: str = ""
    access_constraints: str = ""


@dataclass(frozen=True)
class BoundingBox:
    minx: str = ""
    miny: str = ""
    maxx: str = ""
    maxy: str = ""


@dataclass(frozen=True)
class FeatureType:
    """조회 가능한 레이어(테이블) 하나"""
    name: str = ""
    title: str = ""
    abstract: str = ""
    keywords: str = ""
    srs: str = ""
    bounding_box: BoundingBox = field(default_factory=BoundingBox)


@dataclass(frozen=True)
class ServiceException:
    """서버가 그대로 전달한 DB 드라이버 오류 메시지"""
    text: str = ""
    code: str = ""
    locator: str = ""


@dataclass(frozen=True)
class CapabilitiesDocument:
    version: str = ""
    schema_location: str = ""
    service: ServiceMetadata = field(default_factory=ServiceMetadata)
    get_resource: str = ""
    post_resource: str = ""
    feature_types: Tuple[FeatureType, ...] = ()
    service_exception: Optional[ServiceException] = None


@dataclass(frozen=True)
class CQLCandidate:
    name: str
    category: CQLCategory = CQLCategory.STRING
    enabled: bool = False


@dataclass(frozen=True)
class ExtractionResult:
    fragment: str
    candidate: CQLCandidate
    error_line: str = ""


@dataclass
class CandidateAttempt:
    candidate: CQLCandidate
    outcome: AttemptOutcome
    detail: str = ""


@dataclass
class FetchResult:
    type_name: str
    records: List[Dict[str, Any]]
    output_path: Optional[str] = None


@dataclass
class FeatureTypeReport:
    type_name: str
    fetch: Optional[FetchResult] = None
    fetch_error: Optional[str] = None
    extraction: Optional[ExtractionResult] = None
    attempts: List[CandidateAttempt] = field(default_factory=list)
    probe_error: Optional[str] = None
    skipped: bool = False
    skip_reason: str = ""


@dataclass
class ProbeReport:
    target: str
    capabilities: Optional[CapabilitiesDocument] = None
    features: List[FeatureTypeReport] = field(default_factory=list)

    @property
    def extractions(self) -> List[ExtractionResult]:
        return [f.extraction for f in self.features if f.extraction]
