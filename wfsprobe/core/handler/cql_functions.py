from typing import List, Tuple

from wfsprobe.core.models import CQLCandidate, CQLCategory

_STRING = CQLCategory.STRING
_SPATIAL = CQLCategory.SPATIAL
_TEMPORAL = CQLCategory.TEMPORAL

# 알려진 CQL 술어 함수. 순서 = 시도 우선순위, enabled=True만 실제 payload로 사용
KNOWN_CQL_FUNCTIONS: Tuple[CQLCandidate, ...] = (
    CQLCandidate("strEquals", _STRING),
    CQLCandidate("strNotEquals", _STRING),
    CQLCandidate("strGreaterThan", _STRING),
    CQLCandidate("strGreaterThanOrEquals", _STRING),
    CQLCandidate("strLessThan", _STRING),
    CQLCandidate("strLessThanOrEquals", _STRING),
    CQLCandidate("strLike", _STRING),
    CQLCandidate("strILike", _STRING),
    CQLCandidate("strIsNull", _STRING),
    CQLCandidate("strIsNotNull", _STRING),
    CQLCandidate("strIsEmpty", _STRING),
    CQLCandidate("strIsNotEmpty", _STRING),
    CQLCandidate("strStartsWith", _STRING, enabled=True),
    CQLCandidate("strEndsWith", _STRING, enabled=True),
    CQLCandidate("strContains", _STRING, enabled=True),
    CQLCandidate("strDoesNotContain", _STRING),
    CQLCandidate("strPropertyIsNull", _STRING),
    CQLCandidate("strPropertyIsNotNull", _STRING),
    CQLCandidate("strPropertyIsEmpty", _STRING),
    CQLCandidate("strPropertyIsNotEmpty", _STRING),
    CQLCandidate("bbox", _SPATIAL),
    CQLCandidate("equals", _SPATIAL),
    CQLCandidate("disjoint", _SPATIAL),
    CQLCandidate("touches", _SPATIAL),
    CQLCandidate("within", _SPATIAL),
    CQLCandidate("overlaps", _SPATIAL),
    CQLCandidate("crosses", _SPATIAL),
    CQLCandidate("intersects", _SPATIAL),
    CQLCandidate("contains", _SPATIAL),
    CQLCandidate("dWithin", _SPATIAL),
    CQLCandidate("beyond", _SPATIAL),
    CQLCandidate("containsProperly", _SPATIAL),
    CQLCandidate("coveredBy", _SPATIAL),
    CQLCandidate("covers", _SPATIAL),
    CQLCandidate("overlapsProperly", _SPATIAL),
    CQLCandidate("relate", _SPATIAL),
    CQLCandidate("before", _TEMPORAL),
    CQLCandidate("after", _TEMPORAL),
    CQLCandidate("during", _TEMPORAL),
    CQLCandidate("tequals", _TEMPORAL),
    CQLCandidate("toverlaps", _TEMPORAL),
    CQLCandidate("tmeets", _TEMPORAL),
    CQLCandidate("tmetby", _TEMPORAL),
    CQLCandidate("tbefore", _TEMPORAL),
    CQLCandidate("tafter", _TEMPORAL),
    CQLCandidate("tduring", _TEMPORAL),
    CQLCandidate("tcovers", _TEMPORAL),
    CQLCandidate("tcoveredby", _TEMPORAL),
    CQLCandidate("tintersects", _TEMPORAL),
    CQLCandidate("tnear", _TEMPORAL),
    CQLCandidate("tnotnear", _TEMPORAL),
    CQLCandidate("tnotoverlaps", _TEMPORAL),
    CQLCandidate("tnottoverlaps", _TEMPORAL),
    CQLCandidate("tnotwithin", _TEMPORAL),
    CQLCandidate("tprecedes", _TEMPORAL),
    CQLCandidate("tprecededBy", _TEMPORAL),
    CQLCandidate("tsucceeds", _TEMPORAL),
    CQLCandidate("tsucceededBy", _TEMPORAL),
)


def enabled_candidates() -> List[CQLCandidate]:
    return [candidate for candidate in KNOWN_CQL_FUNCTIONS if candidate.enabled]


def find_candidate(name: str) -> CQLCandidate:
    for candidate in KNOWN_CQL_FUNCTIONS:
        if candidate.name == name:
            return candidate
    raise KeyError(f"unknown CQL function: {name}")
