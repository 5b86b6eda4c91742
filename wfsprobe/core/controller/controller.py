import time
from typing import Optional, Pattern, Sequence

from wfsprobe.core.errors import DecodeError, UnexpectedStatusError, WFSProbeError
from wfsprobe.core.handler.capabilities import FeatureEnumerator, decode_capabilities
from wfsprobe.core.handler.collection import CollectionFetcher
from wfsprobe.core.handler.injection import VERSION_OFFSET, InjectionOracle
from wfsprobe.core.handler.request_wfs import TransportConfig, WFSRequestHandler
from wfsprobe.core.logging.log import Logger
from wfsprobe.core.models import (
    CapabilitiesDocument,
    CQLCandidate,
    FeatureTypeReport,
    ProbeReport,
)
from wfsprobe.core.util.storage import CollectionStore
from wfsprobe.core.util.util import Util


class Controller:
    def __init__(self, target: str,
                 proxy: Optional[str] = None,
                 insecure: bool = False,
                 max_features: int = 10,
                 output_dir: str = "output",
                 property_name: str = "name",
                 offset: int = VERSION_OFFSET,
                 pattern: Optional[Pattern] = None,
                 candidates: Optional[Sequence[CQLCandidate]] = None,
                 timeout: float = 30.0,
                 max_duration: Optional[float] = None,
                 requester: Optional[WFSRequestHandler] = None,
                 store: Optional[CollectionStore] = None):
        """
        컨트롤러 초기화
        Args:
            target: GeoServer 기본 URL (예: https://maps.example.com)
            proxy: HTTP(S) 프록시 URL
            insecure: TLS 인증서 검증 비활성화
            max_features: feature type별 샘플 개수
            output_dir: 결과 저장 폴더
            property_name: payload에 사용할 속성 이름
            offset: 오류 줄에서 version 값이 시작하는 위치
            pattern: offset 대신 사용할 정규식 ('value' group)
            candidates: 시도할 CQL 함수 목록 (기본: enabled 항목)
            timeout: 요청 타임아웃 (초)
            max_duration: 전체 실행 제한 시간 (초), feature type 사이에서 확인
        """
        self.target = Util.normalize_url(target)
        if not Util.is_valid_url(self.target):
            raise ValueError(f"invalid target URL: {target}")
        if isinstance(max_features, bool) or not isinstance(max_features, int) or max_features <= 0:
            raise ValueError(f"max_features must be a positive integer, got {max_features!r}")

        self.max_features = max_features
        self.max_duration = max_duration
        self.logger = Logger()

        self._owns_requester = requester is None
        self.requester = requester or WFSRequestHandler(
            self.target,
            TransportConfig(verify_tls=not insecure, proxy=proxy, timeout=timeout),
        )
        self.store = store if store is not None else CollectionStore(output_dir)
        self.fetcher = CollectionFetcher(self.requester, self.store)
        self.oracle = InjectionOracle(
            self.requester,
            candidates=candidates,
            property_name=property_name,
            offset=offset,
            pattern=pattern,
        )

    def run(self) -> ProbeReport:
        """Capabilities 조회 후 feature type별로 수집 + injection probe"""
        report = ProbeReport(target=self.target)
        try:
            document = self._load_capabilities()
            report.capabilities = document
            self._print_capabilities(document)

            print("\n\033[94m[*] Trying to obtain the database collections\033[0m")
            started = time.monotonic()
            for type_name in FeatureEnumerator(document):
                if self._expired(started):
                    self.logger.warning(f"Max duration exceeded, skipping {type_name}")
                    report.features.append(FeatureTypeReport(
                        type_name=type_name, skipped=True,
                        skip_reason="max duration exceeded"))
                    continue
                feature_report = self._process_feature_type(type_name)
                report.features.append(feature_report)
                self._print_feature_result(feature_report)
        finally:
            if self._owns_requester:
                self.requester.close()
        return report

    def _expired(self, started: float) -> bool:
        return (self.max_duration is not None
                and time.monotonic() - started > self.max_duration)

    def _load_capabilities(self) -> CapabilitiesDocument:
        try:
            body = self.requester.get_capabilities()
            document = decode_capabilities(body)
        except WFSProbeError as e:
            self.logger.error(f"GetCapabilities failed - {self.target}: {e}")
            raise

        if document.service_exception and not document.feature_types:
            self.logger.warning(
                f"Service exception instead of capabilities: "
                f"{document.service_exception.text.strip()}"
            )
        return document

    def _process_feature_type(self, type_name: str) -> FeatureTypeReport:
        feature_report = FeatureTypeReport(type_name=type_name)
        if not type_name:
            self.logger.warning("Feature type without a name, skipped")
            feature_report.skipped = True
            feature_report.skip_reason = "empty feature type name"
            return feature_report

        # 수집 실패와 무관하게 probe는 계속 진행
        try:
            feature_report.fetch = self.fetcher.fetch(type_name, self.max_features)
        except (WFSProbeError, ValueError) as e:
            feature_report.fetch_error = self._describe_error(e)

        try:
            feature_report.extraction = self.oracle.probe(type_name)
        except Exception as e:
            self.logger.error(f"Injection probe error - {type_name}: {str(e)}")
            feature_report.probe_error = self._describe_error(e)
        finally:
            feature_report.attempts = list(self.oracle.attempts)

        return feature_report

    @staticmethod
    def _describe_error(error: Exception) -> str:
        if isinstance(error, UnexpectedStatusError):
            return f"unexpected status code: {error.status_code}"
        if isinstance(error, DecodeError):
            return f"decode error: {error}"
        return f"{type(error).__name__}: {error}"

    def _print_capabilities(self, document: CapabilitiesDocument) -> None:
        """Capabilities 정보 출력"""
        self.logger.info(f"Schema Location: {document.schema_location}")
        self.logger.info(f"Service Name: {document.service.name}")
        self.logger.info(f"Service Online Resource: {document.service.online_resource}")

        print(f"\n\033[92m[+] Target: {self.target}\033[0m")
        print(f"Schema Location: {document.schema_location}")
        print(f"Service Name: {document.service.name}")
        print(f"Service Title: {document.service.title}")
        print(f"Service Online Resource: {document.service.online_resource}")
        if document.get_resource:
            print(f"GET Resource: {document.get_resource}")
        print(f"Feature Types: {len(document.feature_types)}")
        for feature_type in document.feature_types:
            self.logger.info(f"Database Name: {feature_type.name}")
            print(f"  - {feature_type.name or '(unnamed)'}")

    def _print_feature_result(self, feature_report: FeatureTypeReport) -> None:
        """feature type 하나의 결과 출력"""
        print(f"\n\033[94m[*] {feature_report.type_name or '(unnamed)'}\033[0m")
        if feature_report.skipped:
            print(f"    Skipped: {feature_report.skip_reason}")
            print("-" * 66)
            return

        if feature_report.fetch:
            print(f"    Records: {len(feature_report.fetch.records)}")
            if feature_report.fetch.output_path:
                print(f"    Saved: {feature_report.fetch.output_path}")
        else:
            print(f"    \033[91mFetch failed: {feature_report.fetch_error}\033[0m")

        for attempt in feature_report.attempts:
            detail = f" ({attempt.detail})" if attempt.detail else ""
            print(f"    Candidate: {attempt.candidate.name} -> {attempt.outcome.value}{detail}")

        if feature_report.extraction:
            print(f"    \033[92mDatabase Version: {feature_report.extraction.fragment}\033[0m")
        elif feature_report.probe_error:
            print(f"    \033[91mProbe failed: {feature_report.probe_error}\033[0m")
        else:
            print("    Database Version: not leaked")
        print("-" * 66)
