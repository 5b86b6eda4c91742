import logging
import os
from typing import List, Optional

LOGGER_NAME = "wfsprobe"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Logger:
    # CLI에서 설정하면 INFO/ERROR 파일 핸들러가 한 번만 설치됨
    log_dir: Optional[str] = None
    verbose: bool = False
    _configured: bool = False
    _handlers: List[logging.Handler] = []

    def __init__(self, name: str = LOGGER_NAME):
        self._logger = logging.getLogger(name)
        self.setup_logging()

    @classmethod
    def configure(cls, log_dir: Optional[str] = None, verbose: bool = False) -> None:
        cls.log_dir = log_dir
        cls.verbose = verbose
        cls._configured = False

    @classmethod
    def _remove_handlers(cls, root_logger: logging.Logger) -> None:
        # 이전 configure()에서 설치한 핸들러 제거
        for handler in cls._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        cls._handlers = []

    @classmethod
    def setup_logging(cls):
        if cls._configured:
            return
        cls._configured = True

        root_logger = logging.getLogger(LOGGER_NAME)
        root_logger.setLevel(logging.DEBUG if cls.verbose else logging.INFO)
        cls._remove_handlers(root_logger)

        formatter = logging.Formatter(LOG_FORMAT)

        if cls.log_dir:
            # INFO 로그 설정
            info_log_dir = os.path.join(cls.log_dir, "INFO")
            os.makedirs(info_log_dir, exist_ok=True)
            info_handler = logging.FileHandler(
                os.path.join(info_log_dir, "INFO_logging.log")
            )
            info_handler.setLevel(logging.INFO)
            info_handler.setFormatter(formatter)

            # ERROR 로그 설정
            error_log_dir = os.path.join(cls.log_dir, "ERROR")
            os.makedirs(error_log_dir, exist_ok=True)
            error_handler = logging.FileHandler(
                os.path.join(error_log_dir, "ERROR_logging.log")
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(formatter)

            cls._handlers.extend([info_handler, error_handler])

        if cls.verbose:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.DEBUG)
            console_handler.setFormatter(formatter)
            cls._handlers.append(console_handler)

        for handler in cls._handlers:
            root_logger.addHandler(handler)

    def info(self, message: str):
        self._logger.info(message)

    def error(self, message: str):
        self._logger.error(message)

    def warning(self, message: str):
        self._logger.warning(message)

    def debug(self, message: str):
        self._logger.debug(message)
