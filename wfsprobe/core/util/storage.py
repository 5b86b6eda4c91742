import json
import os
import re
from typing import Any, Dict, List

from wfsprobe.core.logging.log import Logger


class CollectionStore:
    """
    feature collection 저장소
    - 경로: {output_dir}/databases/{host}/{type_name}.json
    - 들여쓰기(2칸) JSON 배열로 저장
    """

    def __init__(self, output_dir: str = "output"):
        self.output_dir = output_dir
        self.logger = Logger()

    @staticmethod
    def _safe_name(type_name: str) -> str:
        # 서버가 준 이름이 경로를 벗어나지 않도록
        return re.sub(r'[\\/]', '_', type_name).lstrip('.') or '_'

    def path_for(self, host: str, type_name: str) -> str:
        return os.path.join(
            self.output_dir, "databases", self._safe_name(host),
            f"{self._safe_name(type_name)}.json"
        )

    def save(self, host: str, type_name: str, records: List[Dict[str, Any]]) -> str:
        output_file = self.path_for(host, type_name)
        os.makedirs(os.path.dirname(output_file), exist_ok=True)
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
        self.logger.info(f"Data saved to {output_file}")
        return output_file
