"""S3 Signed Uploader パッケージ"""
from .core import (
    SignedUploader,
    ParallelUploadExecutor,
    UploadResult,
    BotocoreTransport,
    HttpResponse,
    UploaderError,
    ConfigurationError,
    TransportError,
    UploadRejected,
)
from .models.config import Config, LoggingConfig, UploaderConfig
from .utils.logger import LoggerManager


def from_config_file(config_path: str = "config.json") -> SignedUploader:
    """設定ファイルからロガーとアップローダーを作成"""
    config = Config.from_file(config_path)

    logger = LoggerManager.setup(config.logging)
    logger.info("S3 Signed Uploader initialized")

    return SignedUploader(config.s3)


__all__ = [
    'SignedUploader',
    'ParallelUploadExecutor',
    'UploadResult',
    'BotocoreTransport',
    'HttpResponse',
    'UploaderError',
    'ConfigurationError',
    'TransportError',
    'UploadRejected',
    'Config',
    'LoggingConfig',
    'UploaderConfig',
    'LoggerManager',
    'from_config_file',
]
