"""AWS Signature Version 4 署名"""
import hashlib
import hmac
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

ALGORITHM = "AWS4-HMAC-SHA256"
DEFAULT_REGION = "us-east-1"
EMPTY_PAYLOAD_HASH = hashlib.sha256(b"").hexdigest()

# RFC 3986 の非予約文字
_UNRESERVED = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.~"
)

# s3.eu-west-2.amazonaws.com / bucket.s3.eu-west-2.amazonaws.com /
# s3-eu-west-1.amazonaws.com / s3.dualstack.eu-west-1.amazonaws.com
_S3_HOST_PATTERN = re.compile(
    r"(?:^|\.)s3(?:[.-]dualstack)?[.-](?P<region>[a-z]{2}(?:-[a-z]+)+-\d+)"
    r"\.amazonaws\.com(?:\.cn)?$"
)
_WHITESPACE = re.compile(r"\s+")


def uri_encode(value: str, preserve_slash: bool = False) -> str:
    """非予約文字以外をUTF-8バイト単位で %XX（大文字）にエンコード"""
    result = []
    for ch in value:
        if ch in _UNRESERVED or (preserve_slash and ch == "/"):
            result.append(ch)
        else:
            result.extend(f"%{byte:02X}" for byte in ch.encode("utf-8"))
    return "".join(result)


def hash_payload(content: Optional[bytes]) -> str:
    """ペイロードのSHA-256（16進小文字）。空ならば空文字列のハッシュ"""
    if not content:
        return EMPTY_PAYLOAD_HASH
    return hashlib.sha256(content).hexdigest()


def amz_timestamp(now: Optional[datetime] = None) -> str:
    """X-Amz-Date 形式（YYYYMMDDTHHMMSSZ）のUTCタイムスタンプ"""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def derive_region(host: str, default: str = DEFAULT_REGION) -> str:
    """エンドポイントのホスト名からリージョンを推定"""
    hostname = host.split(":", 1)[0].lower()
    match = _S3_HOST_PATTERN.search(hostname)
    if match:
        return match.group("region")
    return default


def _hmac_sha256(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


@dataclass(frozen=True)
class SignedRequest:
    """署名済みリクエスト（アップロードごとに生成し、キャッシュしない）"""
    authorization: str
    amz_date: str
    host: str
    payload_hash: str
    signed_headers: str
    canonical_request: str
    string_to_sign: str
    source_headers: Tuple[Tuple[str, str], ...] = ()

    @property
    def date_stamp(self) -> str:
        return self.amz_date[:8]

    def headers(self) -> Dict[str, str]:
        """送信用ヘッダー一式"""
        headers = dict(self.source_headers)
        headers["Authorization"] = self.authorization
        headers["X-Amz-Date"] = self.amz_date
        headers["Host"] = self.host
        return headers


class SigV4Signer:
    """SigV4署名の計算

    canonical request -> string to sign -> signing key -> signature
    の順に計算する。インスタンスは不変で、複数スレッドから共有してよい。
    """

    def __init__(
        self,
        access_key_id: str,
        secret_access_key: str,
        region: str = DEFAULT_REGION,
        service: str = "s3",
    ):
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self.region = region
        self.service = service

    def __repr__(self) -> str:
        return f"SigV4Signer(region={self.region!r}, service={self.service!r})"

    def credential_scope(self, date_stamp: str) -> str:
        return f"{date_stamp}/{self.region}/{self.service}/aws4_request"

    def signing_key(self, date_stamp: str) -> bytes:
        k_date = _hmac_sha256(("AWS4" + self._secret_access_key).encode("utf-8"), date_stamp)
        k_region = _hmac_sha256(k_date, self.region)
        k_service = _hmac_sha256(k_region, self.service)
        return _hmac_sha256(k_service, "aws4_request")

    @staticmethod
    def canonical_headers(headers: Dict[str, str]) -> Tuple[str, str]:
        """(canonical headers, signed headers) を返す"""
        normalized: Dict[str, str] = {}
        for name, value in headers.items():
            key = name.strip().lower()
            value = _WHITESPACE.sub(" ", str(value).strip())
            if key in normalized:
                normalized[key] = f"{normalized[key]},{value}"
            else:
                normalized[key] = value
        names = sorted(normalized)
        canonical = "".join(f"{name}:{normalized[name]}\n" for name in names)
        return canonical, ";".join(names)

    def sign(
        self,
        method: str,
        host: str,
        path: str,
        headers: Dict[str, str],
        payload_hash: str,
        timestamp: Optional[str] = None,
    ) -> SignedRequest:
        """リクエストに署名する

        Args:
            method: HTTPメソッド
            host: Hostヘッダーの値
            path: エンコード済みのパス（S3なので二重エンコードしない）
            headers: 署名対象のヘッダー（Host と X-Amz-Date は自動で追加）
            payload_hash: X-Amz-Content-Sha256 の値
            timestamp: YYYYMMDDTHHMMSSZ。省略時は現在時刻
        """
        amz_date = timestamp or amz_timestamp()
        date_stamp = amz_date[:8]

        to_sign = {
            name: value
            for name, value in headers.items()
            if name.lower() not in ("host", "x-amz-date", "authorization")
        }
        to_sign["Host"] = host
        to_sign["X-Amz-Date"] = amz_date
        canonical_headers, signed_headers = self.canonical_headers(to_sign)

        canonical_request = "\n".join([
            method.upper(),
            path or "/",
            "",  # 単一PUTなのでクエリ文字列は無い
            canonical_headers,
            signed_headers,
            payload_hash,
        ])

        scope = self.credential_scope(date_stamp)
        string_to_sign = "\n".join([
            ALGORITHM,
            amz_date,
            scope,
            hashlib.sha256(canonical_request.encode("utf-8")).hexdigest(),
        ])
        signature = hmac.new(
            self.signing_key(date_stamp), string_to_sign.encode("utf-8"), hashlib.sha256
        ).hexdigest()

        authorization = (
            f"{ALGORITHM} Credential={self._access_key_id}/{scope}, "
            f"SignedHeaders={signed_headers}, Signature={signature}"
        )
        return SignedRequest(
            authorization=authorization,
            amz_date=amz_date,
            host=host,
            payload_hash=payload_hash,
            signed_headers=signed_headers,
            canonical_request=canonical_request,
            string_to_sign=string_to_sign,
            source_headers=tuple(
                (name, value) for name, value in to_sign.items()
                if name not in ("Host", "X-Amz-Date")
            ),
        )
