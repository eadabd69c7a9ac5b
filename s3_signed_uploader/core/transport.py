"""HTTP送信（botocoreのHTTPセッションを利用）"""
from dataclasses import dataclass
from typing import Dict, Optional, Protocol
from urllib.parse import urlsplit

from botocore.awsrequest import AWSRequest
from botocore.exceptions import BotoCoreError
from botocore.httpsession import URLLib3Session

from .errors import ConfigurationError, TransportError
from ..utils.logger import LoggerManager


@dataclass
class HttpResponse:
    """HTTPレスポンス"""
    status_code: int
    body: bytes = b""


class Transport(Protocol):
    """アップローダーが使うHTTP送信のインターフェース"""

    def send(
        self, method: str, url: str, headers: Dict[str, str], body: Optional[bytes]
    ) -> HttpResponse:
        ...


def with_content_length(headers: Dict[str, str], body: Optional[bytes]) -> Dict[str, str]:
    """Content-Length が無ければ本文の長さ（無ければ "0"）を補ったコピーを返す"""
    headers = dict(headers)
    if not any(name.lower() == "content-length" for name in headers):
        headers["Content-Length"] = str(len(body)) if body else "0"
    return headers


class BotocoreTransport:
    """botocore の URLLib3Session で送信するデフォルト実装"""

    def __init__(self, timeout: float = 60, verify: bool = True, max_pool_connections: int = 10):
        self.logger = LoggerManager.get_logger()
        self._session = URLLib3Session(
            verify=verify,
            timeout=timeout,
            max_pool_connections=max_pool_connections,
        )

    def send(
        self, method: str, url: str, headers: Dict[str, str], body: Optional[bytes]
    ) -> HttpResponse:
        scheme = urlsplit(url).scheme.lower()
        if scheme not in ("http", "https"):
            raise ConfigurationError(f"Unsupported protocol: {scheme}")

        request = AWSRequest(
            method=method,
            url=url,
            headers=with_content_length(headers, body),
            data=body or b"",
        )
        try:
            response = self._session.send(request.prepare())
        except BotoCoreError as e:
            self.logger.error(f"HTTP {method} {url} failed: {e}")
            raise TransportError(f"HTTP {method} {url} failed: {e}", original=e) from e

        return HttpResponse(status_code=response.status_code, body=response.content or b"")

    def close(self):
        """コネクションプールを解放"""
        self._session.close()

    def __enter__(self) -> "BotocoreTransport":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
