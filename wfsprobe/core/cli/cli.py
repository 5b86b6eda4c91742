import sys
from dataclasses import replace
from typing import List, Optional

from .parser import Parser
from ..controller.controller import Controller
from ..handler.cql_functions import find_candidate
from ..logging.log import Logger
from ..models import CQLCandidate, ProbeReport


class CLI:
    def __init__(self):
        self.parser = Parser()
        self.logger = None

    def run(self, argv=None) -> ProbeReport:
        args = self.parser.parse_args(argv)
        Logger.configure(log_dir=args.log_dir, verbose=args.verbose)
        self.logger = Logger()
        self.print_banner()
        try:
            controller = Controller(
                target=args.url,
                proxy=args.proxy,
                insecure=args.insecure,
                max_features=args.max_features,
                output_dir=args.output,
                property_name=args.property,
                offset=args.offset,
                pattern=args.pattern,
                candidates=self._resolve_candidates(args.candidates),
                timeout=args.timeout,
                max_duration=args.max_duration,
            )
            results = controller.run()
            self.print_results(results)
            return results
        except Exception as e:
            self.logger.error(f"CLI 실행 중 오류 발생: {str(e)}")
            print(f"\n\033[91m[!] {e}\033[0m")
            sys.exit(1)

    @staticmethod
    def _resolve_candidates(names: Optional[List[str]]) -> Optional[List[CQLCandidate]]:
        if not names:
            return None
        return [replace(find_candidate(name), enabled=True) for name in names]

    @staticmethod
    def print_banner():
        """wfsprobe 로고와 버전 정보를 출력합니다"""
        banner = """
        \033[94m
        wfsprobe - GeoServer WFS Probe
        \033[0m
        \033[93m[ WFS catalog / feature sampling / CQL_FILTER version leak ]\033[0m
        \033[93m[ Note: Use responsibly and only on authorized targets ]\033[0m
        """
        print(banner)

    def print_results(self, results: ProbeReport):
        """결과를 출력합니다"""
        print("\n\033[92m[+] Summary:\033[0m")
        if not results.features:
            print("\033[91m[!] No feature types found.\033[0m")
            return

        for feature in results.features:
            if feature.skipped:
                status = f"skipped ({feature.skip_reason})"
            elif feature.fetch:
                status = f"{len(feature.fetch.records)} records"
            else:
                status = f"fetch failed ({feature.fetch_error})"
            version = feature.extraction.fragment if feature.extraction else "-"
            print(f"  - {feature.type_name or '(unnamed)'}: {status} | version: {version}")

        if not results.extractions:
            print("\n\033[91m[!] Database version not leaked.\033[0m")


def main():
    CLI().run()


if __name__ == "__main__":
    main()
