import argparse
import re

from wfsprobe.core.handler.injection import VERSION_OFFSET
from wfsprobe.core.util.util import Util


class Parser:
    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="wfsprobe",
            description="wfsprobe - GeoServer WFS catalog & CQL_FILTER injection probe"
        )
        self._add_arguments()

    def _add_arguments(self):
        self.parser.add_argument(
            "url",
            help="대상 GeoServer URL (예: https://maps.example.com)"
        )
        self.parser.add_argument(
            "proxy_url",
            help="HTTP(S) 프록시 URL (선택)",
            nargs="?",
            default=None
        )
        self.parser.add_argument(
            "-x", "--proxy",
            help="HTTP(S) 프록시 URL (위치 인자 대신 사용)",
            default=None
        )
        self.parser.add_argument(
            "-k", "--insecure",
            help="TLS 인증서 검증 비활성화 (self-signed 대상)",
            action="store_true"
        )
        self.parser.add_argument(
            "-n", "--max-features",
            help="feature type별 수집할 최대 개수 (기본: 10)",
            type=int,
            default=10
        )
        self.parser.add_argument(
            "-o", "--output",
            help="결과 저장 폴더 (기본: output)",
            default="output"
        )
        self.parser.add_argument(
            "-c", "--candidates",
            help="시도할 CQL 함수 (쉼표로 구분, 기본: strStartsWith,strEndsWith,strContains)",
            type=str
        )
        self.parser.add_argument(
            "--property",
            help="payload에 사용할 속성 이름 (기본: name)",
            default="name"
        )
        self.parser.add_argument(
            "--offset",
            help=f"오류 줄에서 version 값이 시작하는 위치 (기본: {VERSION_OFFSET})",
            type=int,
            default=VERSION_OFFSET
        )
        self.parser.add_argument(
            "--pattern",
            help="offset 대신 사용할 정규식 ('value' named group 필요)",
            type=str
        )
        self.parser.add_argument(
            "-t", "--timeout",
            help="요청 타임아웃 초 (기본: 30)",
            type=float,
            default=30.0
        )
        self.parser.add_argument(
            "--max-duration",
            help="전체 실행 제한 시간 초",
            type=float
        )
        self.parser.add_argument(
            "--log-dir",
            help="INFO/ERROR 로그 파일 폴더",
            default=None
        )
        self.parser.add_argument(
            "-v", "--verbose",
            help="상세 출력 활성화",
            action="store_true"
        )

    def parse_args(self, argv=None):
        args = self.parser.parse_args(argv)
        if args.proxy and args.proxy_url:
            self.parser.error("프록시는 위치 인자와 --proxy 중 하나만 사용할 수 있습니다.")
        args.proxy = args.proxy or args.proxy_url

        if not Util.is_valid_url(Util.normalize_url(args.url)):
            self.parser.error(f"잘못된 URL: {args.url}")
        if args.proxy and not Util.is_valid_url(args.proxy):
            self.parser.error(f"잘못된 프록시 URL: {args.proxy}")
        if args.max_features <= 0:
            self.parser.error("--max-features는 양의 정수여야 합니다.")
        if args.offset < 0:
            self.parser.error("--offset은 0 이상이어야 합니다.")
        if args.timeout <= 0:
            self.parser.error("--timeout은 0보다 커야 합니다.")

        if args.candidates:
            args.candidates = [c.strip() for c in args.candidates.split(',') if c.strip()]
        if args.pattern:
            try:
                args.pattern = re.compile(args.pattern)
            except re.error as e:
                self.parser.error(f"잘못된 정규식: {e}")
            if "value" not in args.pattern.groupindex:
                self.parser.error("--pattern에는 (?P<value>...) group이 필요합니다.")
        return args
