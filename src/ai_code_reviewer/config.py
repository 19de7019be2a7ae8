"""
Configuration Management

시스템 설정 관리
"""

import os
import logging
from dataclasses import dataclass, field, replace
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Dict, Any, Tuple

import yaml

from .exceptions import ConfigurationError


API_KEY_ENV = "LAAS_API_KEY"

DEFAULT_BASE_URL = "https://api-laas.wanted.co.kr/api/preset"
DEFAULT_PROJECT_ID = "AI-CODE-REVIEW"
DEFAULT_PRESET_HASH = "code-review"
DEFAULT_FILE_EXTENSIONS: Tuple[str, ...] = (".ts", ".tsx")

VALID_LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class LaaSConfig:
    """LaaS 리뷰 서비스 설정"""
    api_key: Optional[str] = None
    project_id: str = DEFAULT_PROJECT_ID
    preset_hash: str = DEFAULT_PRESET_HASH
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 60.0


@dataclass(frozen=True)
class ReviewConfig:
    """리뷰 대상 및 실행 설정"""
    file_extensions: Tuple[str, ...] = DEFAULT_FILE_EXTENSIONS
    max_concurrency: Optional[int] = None  # None = 제한 없음
    preview_length: int = 100


@dataclass(frozen=True)
class LoggingConfig:
    """로깅 설정"""
    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass(frozen=True)
class AppConfig:
    """전체 애플리케이션 설정"""
    laas: LaaSConfig = field(default_factory=LaaSConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드

        API 키와 로깅 설정만 환경 변수에서 읽는다. 프로젝트 ID, 프리셋 해시,
        확장자 목록은 기본값을 사용한다.
        """
        debug = os.getenv("DEBUG", "false").lower() == "true"
        return cls(
            laas=LaaSConfig(api_key=os.getenv(API_KEY_ENV)),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "DEBUG" if debug else "WARNING"),
                file_path=os.getenv("LOG_FILE"),
            ),
            debug=debug,
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드 (API 키가 없으면 환경 변수 사용)"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            try:
                config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {config_path}")

        for section in ('laas', 'review', 'logging'):
            if not isinstance(config_data.get(section) or {}, dict):
                raise ConfigurationError(f"Section '{section}' in {config_path} must be a mapping")

        env = cls.from_env()
        laas_data = dict(config_data.get('laas') or {})
        laas_data.setdefault('api_key', env.laas.api_key)
        review_data = dict(config_data.get('review') or {})
        if 'file_extensions' in review_data:
            extensions = review_data['file_extensions'] or ()
            if isinstance(extensions, str):
                extensions = (extensions,)
            elif isinstance(extensions, list):
                extensions = tuple(extensions)
            review_data['file_extensions'] = extensions
        logging_data = dict(config_data.get('logging') or {})

        try:
            return cls(
                laas=LaaSConfig(**laas_data),
                review=ReviewConfig(**review_data),
                logging=replace(env.logging, **logging_data),
                debug=config_data.get('debug', env.debug),
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e

    def with_overrides(self, **kwargs) -> "AppConfig":
        """'section.field' 형태의 키로 일부 값을 바꾼 새 설정 반환"""
        sections: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}

        for key, value in kwargs.items():
            if value is None:
                continue
            if '.' in key:
                section, name = key.split('.', 1)
                sections.setdefault(section, {})[name] = value
            else:
                top_level[key] = value

        for section, values in sections.items():
            top_level[section] = replace(getattr(self, section), **values)

        return replace(self, **top_level)

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # API 키 필수 확인
        if not isinstance(self.laas.api_key, str) or not self.laas.api_key.strip():
            errors.append(f"{API_KEY_ENV} is required")

        for name in ('project_id', 'preset_hash', 'base_url'):
            if not isinstance(getattr(self.laas, name), str):
                errors.append(f"{name} must be a string")

        if not self.laas.project_id:
            errors.append("Project id must not be empty")

        if not self.laas.preset_hash:
            errors.append("Preset hash must not be empty")

        if not _is_number(self.laas.timeout_seconds):
            errors.append(f"Timeout must be a number, got {self.laas.timeout_seconds!r}")
        elif self.laas.timeout_seconds <= 0:
            errors.append("Timeout must be positive")

        # 확장자 목록 검증
        extensions = self.review.file_extensions
        if not isinstance(extensions, tuple) or any(not isinstance(ext, str) for ext in extensions):
            errors.append(f"File extensions must be a list of strings, got {extensions!r}")
        elif not extensions:
            errors.append("At least one file extension is required")
        elif any(not ext for ext in extensions):
            errors.append("File extensions must not be empty")

        max_concurrency = self.review.max_concurrency
        if max_concurrency is not None:
            if not _is_integer(max_concurrency):
                errors.append(f"Max concurrency must be an integer, got {max_concurrency!r}")
            elif max_concurrency <= 0:
                errors.append("Max concurrency must be positive")

        if not _is_integer(self.review.preview_length) or self.review.preview_length < 0:
            errors.append(f"Preview length must be a non-negative integer, got {self.review.preview_length!r}")

        if not isinstance(self.logging.level, str) or self.logging.level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log level: {self.logging.level}")

        for name in ('max_file_size', 'backup_count'):
            if not _is_integer(getattr(self.logging, name)):
                errors.append(f"logging.{name} must be an integer")

        if not isinstance(self.debug, bool):
            errors.append(f"debug must be true or false, got {self.debug!r}")

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'laas': {
                'project_id': self.laas.project_id,
                'preset_hash': self.laas.preset_hash,
                'base_url': self.laas.base_url,
                'timeout_seconds': self.laas.timeout_seconds,
                # 보안상 API 키는 제외
            },
            'review': {
                'file_extensions': list(self.review.file_extensions),
                'max_concurrency': self.review.max_concurrency,
                'preview_length': self.review.preview_length,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


class ConfigValidator:
    """Fail-fast gate run before any git or network access."""

    def __init__(self, config: AppConfig):
        self.config = config

    def validate(self) -> AppConfig:
        """
        Validate the configuration.

        Returns:
            The same configuration, for chaining

        Raises:
            ConfigurationError: If the API key is missing or any setting is invalid
        """
        self.config.validate()
        return self.config


def setup_logging(config: AppConfig) -> None:
    """로깅 설정"""
    logging_config = config.logging
    logging.basicConfig(
        level=getattr(logging, logging_config.level.upper()),
        format=logging_config.format,
    )

    # 파일 로깅이 설정된 경우 로테이션 설정
    if logging_config.file_path:
        handler = RotatingFileHandler(
            logging_config.file_path,
            maxBytes=logging_config.max_file_size,
            backupCount=logging_config.backup_count,
        )
        handler.setFormatter(logging.Formatter(logging_config.format))

        # 루트 로거에 핸들러 추가
        logging.getLogger().addHandler(handler)
