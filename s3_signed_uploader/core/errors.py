"""アップローダーの例外クラス"""
from typing import Optional


class UploaderError(Exception):
    """アップローダーの基底例外"""


class ConfigurationError(UploaderError, ValueError):
    """エンドポイントや認証情報の設定が不正"""


class TransportError(UploaderError):
    """HTTP送信そのものに失敗（接続拒否、DNS、タイムアウト、TLS）"""

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original


class UploadRejected(UploaderError):
    """S3が200以外のステータスを返した"""

    def __init__(self, status_code: int, body: bytes = b""):
        super().__init__(f"Failed to upload to S3, status code: {status_code}")
        self.status_code = status_code
        self.body = body
