"""テスト共通のフィクスチャ"""
import threading

import pytest

from s3_signed_uploader.core.transport import HttpResponse
from s3_signed_uploader.models.config import UploaderConfig
from s3_signed_uploader.utils.logger import LoggerManager


class FakeTransport:
    """送信内容を記録するだけのトランスポート"""

    def __init__(self, status_code=200, error=None, status_by_key=None):
        self.status_code = status_code
        self.error = error
        self.status_by_key = status_by_key or {}
        self.calls = []
        self._lock = threading.Lock()

    def send(self, method, url, headers, body):
        with self._lock:
            self.calls.append({"method": method, "url": url, "headers": dict(headers), "body": body})
        if self.error is not None:
            raise self.error
        for suffix, status in self.status_by_key.items():
            if url.endswith(suffix):
                return HttpResponse(status_code=status, body=b"<Error/>")
        return HttpResponse(status_code=self.status_code)


@pytest.fixture
def uploader_config():
    return UploaderConfig(
        access_key_id="AKIDEXAMPLE",
        secret_access_key="wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
        bucket_name="mybucket",
        endpoint="s3.eu-west-2.amazonaws.com",
    )


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    LoggerManager.reset()
