"""
Structured logging for Search Cache
구조화된 로깅 시스템

라이브러리로 임포트되므로 루트 로거는 건드리지 않고 "search_cache" 네임스페이스에만
핸들러를 붙입니다. 첫 get_logger() 호출 시 환경 변수 기준으로 한 번 설정되며,
호스트 애플리케이션은 configure_logging()으로 직접 설정할 수 있습니다.

환경 변수:
- LOG_LEVEL: 로그 레벨 (기본 INFO, NODE_ENV=production이면 WARNING)
- LOG_FORMAT: "json"이면 JSON 렌더러, 그 외 콘솔 렌더러
- LOG_FILE: 지정 시 파일 핸들러 추가 (production 제외)
"""

import logging
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, cast

import structlog
from structlog.stdlib import LoggerFactory

ROOT_LOGGER_NAME = "search_cache"

# 한국 시간대 (KST = UTC+9)
KST = timezone(timedelta(hours=9))

_configured = False


def add_kst_timestamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """KST 타임스탬프 추가"""
    event_dict["timestamp"] = datetime.now(KST).isoformat()
    return event_dict


def add_service_context(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """서비스/프로세스 정보 추가"""
    event_dict.setdefault("service", "search-cache")
    event_dict["environment"] = os.getenv("NODE_ENV", "development")
    event_dict["pid"] = os.getpid()
    return event_dict


def _resolve_level(level: str | None) -> int:
    if level is None:
        is_production = os.getenv("NODE_ENV", "development") == "production"
        level = os.getenv("LOG_LEVEL", "WARNING" if is_production else "INFO")
    return getattr(logging, level.upper(), logging.INFO)


def _build_processors(json_format: bool) -> list[Any]:
    renderer = (
        structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_kst_timestamp,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_service_context,
        renderer,
    ]


def configure_logging(
    level: str | None = None,
    json_format: bool | None = None,
    log_file: str | Path | None = None,
) -> None:
    """
    search_cache 로거 설정 (재호출 시 핸들러를 교체)

    Args:
        level: 로그 레벨 이름 (None이면 LOG_LEVEL / NODE_ENV 기준)
        json_format: JSON 출력 여부 (None이면 LOG_FORMAT 기준)
        log_file: 파일 로그 경로 (None이면 LOG_FILE 기준)
    """
    global _configured

    if json_format is None:
        json_format = os.getenv("LOG_FORMAT", "console").lower() == "json"
    if log_file is None:
        log_file = os.getenv("LOG_FILE") or None

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.addHandler(logging.StreamHandler(sys.stdout))
    if log_file is not None and os.getenv("NODE_ENV") != "production":
        path = Path(log_file)
        path.parent.mkdir(exist_ok=True, parents=True)
        root.addHandler(logging.FileHandler(path))

    for handler in root.handlers:
        handler.setFormatter(logging.Formatter("%(message)s"))
    root.setLevel(_resolve_level(level))
    root.propagate = False

    structlog.configure(
        processors=_build_processors(json_format),
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """
    구조화된 로거 반환

    호스트 애플리케이션이 이미 structlog를 설정했다면 그 설정을 그대로 사용합니다.
    기본 설정이 필요하면 configure_logging()을 명시적으로 호출하세요.

    Args:
        name: 로거 이름 (보통 __name__, search_cache 하위 모듈)
    """
    global _configured
    if not _configured:
        if structlog.is_configured():
            _configured = True
        else:
            configure_logging()
    return cast(structlog.BoundLogger, structlog.get_logger(name or ROOT_LOGGER_NAME))
