"""로깅 설정 (콘솔 + 로테이션 파일)"""

import glob
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

KEEP_SESSIONS = 5


def setup_logging(
    log_file: str = "logs/wp-search.log",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """콘솔/파일 로깅 설정

    - 콘솔: 간단한 형식 (CLI 출력과 섞이지 않도록 기본 WARNING)
    - 파일: 상세 형식, 실행마다 타임스탬프 파일 생성, 최근 5개만 유지, 10MB마다 로테이션

    Returns:
        이번 세션의 로그 파일 경로
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # 오래된 세션 로그 정리
    existing_logs = sorted(glob.glob(str(log_path.parent / f"{log_path.stem}_*.log")), reverse=True)
    for old_log in existing_logs[KEEP_SESSIONS - 1 :]:
        try:
            Path(old_log).unlink()
        except OSError as e:
            print(f"로그 파일 삭제 실패: {old_log} ({e})", file=sys.stderr)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    session_log = log_path.parent / f"{log_path.stem}_{timestamp}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    file_handler = RotatingFileHandler(
        session_log,
        mode="a",
        maxBytes=10 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    # 서드파티 로거 소음 줄이기
    for name in ("uvicorn.access", "httpx", "httpcore", "chromadb"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"로깅 설정: console={logging.getLevelName(console_level)}, file={session_log}")
    return session_log
