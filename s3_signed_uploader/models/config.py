"""設定管理用のデータクラス"""
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlsplit
import json
import os

from ..core.errors import ConfigurationError
from ..core.signer import derive_region

DEFAULT_ENDPOINT = "s3.eu-west-2.amazonaws.com"


def normalize_endpoint(endpoint: str) -> str:
    """エンドポイントを https://host の形に正規化"""
    if not endpoint or not endpoint.strip():
        raise ConfigurationError("endpoint cannot be empty")

    endpoint = endpoint.strip()
    if "://" not in endpoint:
        endpoint = f"https://{endpoint}"

    parts = urlsplit(endpoint)
    if parts.scheme.lower() != "https":
        raise ConfigurationError(
            f"Unsupported endpoint scheme: {parts.scheme}. Only https is supported"
        )
    if not parts.hostname:
        raise ConfigurationError(f"Invalid endpoint: {endpoint}")
    if parts.username is not None or parts.password is not None:
        raise ConfigurationError("Invalid endpoint: credentials must not be embedded in the URL")
    if parts.path.strip("/") or parts.query or parts.fragment:
        raise ConfigurationError(
            f"Invalid endpoint: {endpoint}. Expected scheme and host only"
        )
    return f"https://{parts.netloc.lower()}"


@dataclass
class LoggingConfig:
    """ロギング設定"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass(frozen=True)
class UploaderConfig:
    """アップロード先の設定（生成後は変更しない）"""
    access_key_id: str = field(repr=False)
    secret_access_key: str = field(repr=False)
    bucket_name: str
    endpoint: str = DEFAULT_ENDPOINT
    region: Optional[str] = None

    def __post_init__(self):
        """設定のバリデーションとエンドポイントの正規化"""
        if not self.access_key_id or not self.secret_access_key:
            raise ConfigurationError("access_key_id and secret_access_key are required")

        if not self.bucket_name or not self.bucket_name.strip():
            raise ConfigurationError("bucket_name cannot be empty")

        # frozen なので object.__setattr__ で書き換える
        object.__setattr__(self, "endpoint", normalize_endpoint(self.endpoint))

    @property
    def host(self) -> str:
        """Hostヘッダーに使うホスト名（ポート付き）"""
        return urlsplit(self.endpoint).netloc

    @property
    def signing_region(self) -> str:
        """署名に使うリージョン（明示されていなければホスト名から推定）"""
        return self.region or derive_region(self.host)


@dataclass
class Config:
    """メイン設定クラス"""
    logging: LoggingConfig
    s3: UploaderConfig

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """設定ファイルから読み込み"""
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file {config_path} not found.")

        try:
            with open(config_path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except json.JSONDecodeError as e:
            raise ValueError(f"Error decoding JSON from {config_path}: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """辞書から設定を作成"""
        if "s3" not in data:
            raise ConfigurationError("Missing 's3' section in configuration")

        try:
            logging_config = LoggingConfig(**data.get("logging", {}))
            s3_config = UploaderConfig(**data["s3"])
        except TypeError as e:
            # 未知のキーや必須キーの欠落
            raise ConfigurationError(f"Error loading configuration: {e}") from e

        return cls(logging=logging_config, s3=s3_config)
