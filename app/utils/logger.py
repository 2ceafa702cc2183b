"""
로깅 유틸리티

애플리케이션 전반에서 사용할 로거를 설정합니다.
main.py에서 logging.config.dictConfig(build_logging_config(...))로 한 번 적용됩니다.
"""
from typing import Any, Dict


def build_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """
    uvicorn access 로그와 app.* 로거 설정
    level: app 로거 레벨 (LOG_LEVEL)
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": '%(levelprefix)s %(asctime)s :: %(client_addr)s "%(request_line)s" %(status_code)s',
                "use_colors": True,
            },
            "default": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": "%(levelprefix)s %(asctime)s - %(name)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "access": {
                "formatter": "access",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
            "app": {"handlers": ["default"], "level": level.upper(), "propagate": False},
        },
    }
