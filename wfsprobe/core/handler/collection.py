import json
from typing import Any, Dict, List, Optional

from wfsprobe.core.errors import MalformedRecordError, TransportError, UnexpectedStatusError
from wfsprobe.core.handler.request_wfs import WFSRequestHandler
from wfsprobe.core.logging.log import Logger
from wfsprobe.core.models import FetchResult
from wfsprobe.core.util.storage import CollectionStore


def normalize_ndjson(text: str) -> List[Dict[str, Any]]:
    """한 줄에 JSON 객체 하나. 빈 줄은 무시, 하나라도 실패하면 전체 실패"""
    records: List[Dict[str, Any]] = []
    for line_number, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            raise MalformedRecordError(
                f"line {line_number}: {e.msg}", line_number
            ) from e
        if not isinstance(record, dict):
            raise MalformedRecordError(
                f"line {line_number}: expected a JSON object, got {type(record).__name__}",
                line_number,
            )
        records.append(record)
    return records


class CollectionFetcher:
    def __init__(self, requester: WFSRequestHandler,
                 store: Optional[CollectionStore] = None):
        self.requester = requester
        self.store = store
        self.logger = Logger()

    def fetch(self, type_name: str, max_features: int) -> FetchResult:
        """
        feature type 하나의 샘플을 받아 JSON 배열로 정규화하고 저장
        Args:
            type_name: typeName 파라미터
            max_features: maxFeatures 파라미터 (양의 정수)
        Raises:
            ValueError, UnexpectedStatusError, TransportError, MalformedRecordError
        """
        if not type_name:
            raise ValueError("type_name must not be empty")
        if isinstance(max_features, bool) or not isinstance(max_features, int) or max_features <= 0:
            raise ValueError(f"max_features must be a positive integer, got {max_features!r}")

        try:
            response = self.requester.get_features(type_name, max_features)
        except (TransportError, UnexpectedStatusError) as e:
            self.logger.error(f"Feature request failed - {type_name}: {e}")
            raise

        try:
            records = normalize_ndjson(response.text)
        except MalformedRecordError as e:
            self.logger.error(f"Malformed feature collection - {type_name}: {e}")
            raise

        output_path = None
        if self.store is not None:
            output_path = self.store.save(self.requester.host, type_name, records)

        self.logger.info(f"Fetched {len(records)} records from {type_name}")
        return FetchResult(type_name=type_name, records=records, output_path=output_path)
