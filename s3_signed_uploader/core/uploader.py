"""S3への署名付きPUTアップロード"""
import os
from typing import Optional, Tuple, List
from dataclasses import dataclass
from concurrent.futures import ThreadPoolExecutor, as_completed

from ..models.config import UploaderConfig
from ..utils.logger import LoggerManager
from ..utils.file_utils import DEFAULT_CONTENT_TYPE, get_file_info, read_file
from .errors import TransportError, UploadRejected
from .signer import SigV4Signer, SignedRequest, hash_payload, uri_encode
from .transport import BotocoreTransport, Transport

DEFAULT_ACL = "public-read"


@dataclass
class UploadResult:
    """アップロード結果"""
    key: str
    success: bool
    error: Optional[str] = None
    status_code: Optional[int] = None


class SignedUploader:
    """SigV4で署名したPUTリクエストで単一オブジェクトをアップロード

    1回の upload() につき、ハッシュ・タイムスタンプ・署名を毎回計算し直し、
    トランスポートを1回だけ呼ぶ。インスタンスは状態を持たないので
    複数スレッドから共有してよい。
    """

    def __init__(
        self,
        config: UploaderConfig,
        transport: Optional[Transport] = None,
        preserve_slashes: bool = True,
    ):
        self.config = config
        self.transport = transport if transport is not None else BotocoreTransport()
        # True: "a/b.txt" -> /bucket/a/b.txt（フォルダ扱い）
        # False: "a/b.txt" -> /bucket/a%2Fb.txt
        self.preserve_slashes = preserve_slashes
        self.logger = LoggerManager.get_logger()
        self._signer = SigV4Signer(
            config.access_key_id,
            config.secret_access_key,
            region=config.signing_region,
            service="s3",
        )

    def object_path(self, key: str) -> str:
        """/bucket/key 形式のパス（パーセントエンコード済み）"""
        bucket = uri_encode(self.config.bucket_name)
        return f"/{bucket}/{uri_encode(key, preserve_slash=self.preserve_slashes)}"

    def sign_upload(
        self,
        path: str,
        content: bytes,
        acl: str = DEFAULT_ACL,
        content_type: str = DEFAULT_CONTENT_TYPE,
        timestamp: Optional[str] = None,
    ) -> SignedRequest:
        """PUTリクエストの署名を計算"""
        payload_hash = hash_payload(content)
        headers = {
            "X-Amz-Acl": acl,
            "X-Amz-Content-Sha256": payload_hash,
            "Content-Length": str(len(content)),
            "Content-Type": content_type,
        }
        return self._signer.sign(
            "PUT", self.config.host, path, headers, payload_hash, timestamp=timestamp
        )

    def upload(
        self,
        key: str,
        content: Optional[bytes],
        acl: str = DEFAULT_ACL,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> None:
        """オブジェクトをアップロード

        Args:
            key: オブジェクトキー（preserve_slashes が True ならスラッシュはフォルダになる）
            content: アップロードする内容（None は空として扱う）
            acl: X-Amz-Acl の値
            content_type: Content-Type の値

        Raises:
            UploadRejected: ステータスコードが200以外
            TransportError: 接続・DNS・タイムアウト・TLSの失敗
        """
        if not key:
            raise ValueError("key cannot be empty")
        content = bytes(content) if content else b""

        path = self.object_path(key)
        url = f"{self.config.endpoint}{path}"
        signed = self.sign_upload(path, content, acl, content_type)

        self.logger.debug(f"PUT {url} ({len(content)} bytes, acl={acl})")
        try:
            response = self.transport.send("PUT", url, signed.headers(), content)
        except TransportError as e:
            self.logger.error(f"Transport error uploading {self.config.bucket_name}/{key}: {e}")
            raise
        except OSError as e:
            self.logger.error(f"Transport error uploading {self.config.bucket_name}/{key}: {e}")
            raise TransportError(f"HTTP PUT {url} failed: {e}", original=e) from e

        if response.status_code != 200:
            self.logger.error(
                f"Upload of {self.config.bucket_name}/{key} rejected with status {response.status_code}"
            )
            raise UploadRejected(response.status_code, response.body)

        self.logger.info(f"Successfully uploaded {len(content)} bytes to {self.config.bucket_name}/{key}")

    def upload_file(
        self,
        file_path: str,
        key: Optional[str] = None,
        acl: str = DEFAULT_ACL,
        content_type: Optional[str] = None,
    ) -> None:
        """ローカルファイルをアップロード（キー省略時はファイル名）"""
        file_info = get_file_info(file_path)
        self.upload(
            key or file_info.name,
            read_file(file_info.path),
            acl=acl,
            content_type=content_type or file_info.content_type,
        )


class ParallelUploadExecutor:
    """並列アップロード実行（1つのアップローダーを複数スレッドで共有）"""

    def __init__(self, uploader: SignedUploader, max_workers: int = 2):
        self.uploader = uploader
        self.max_workers = max_workers
        self.logger = LoggerManager.get_logger()

    def _upload_one(self, key: str, content: bytes, acl: str, content_type: str) -> UploadResult:
        try:
            self.uploader.upload(key, content, acl=acl, content_type=content_type)
        except UploadRejected as e:
            return UploadResult(key, success=False, error=str(e), status_code=e.status_code)
        except Exception as e:
            self.logger.error(f"Upload task exception for {key!r}: {e}")
            return UploadResult(key, success=False, error=str(e))
        return UploadResult(key, success=True, status_code=200)

    def upload_all(
        self,
        items: List[Tuple[str, bytes]],
        acl: str = DEFAULT_ACL,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> List[UploadResult]:
        """(key, content) のリストを並列でアップロードし、結果を入力順で返す"""
        self.logger.info(
            f"Starting parallel upload of {len(items)} objects with {self.max_workers} workers"
        )
        results: List[Optional[UploadResult]] = [None] * len(items)

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            future_to_index = {
                pool.submit(self._upload_one, key, content, acl, content_type): i
                for i, (key, content) in enumerate(items)
            }
            for future in as_completed(future_to_index):
                results[future_to_index[future]] = future.result()

        return results

    def upload_files(self, file_paths: List[str], key_prefix: str = "") -> Tuple[int, int]:
        """ローカルファイルを並列でアップロード

        Returns:
            (成功数, 失敗数) のタプル
        """
        successful = 0
        failed = 0

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            future_to_path = {
                pool.submit(
                    self.uploader.upload_file, path, key_prefix + os.path.basename(path)
                ): path
                for path in file_paths
            }
            for future in as_completed(future_to_path):
                path = future_to_path[future]
                try:
                    future.result()
                    successful += 1
                except Exception as e:
                    self.logger.error(f"Upload task failed for {path}: {e}")
                    failed += 1

        self.logger.info(f"Parallel upload completed: {successful} successful, {failed} failed")
        return successful, failed
