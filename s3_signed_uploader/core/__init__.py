"""S3 Signed Uploader コアモジュール"""
from .errors import UploaderError, ConfigurationError, TransportError, UploadRejected
from .signer import SigV4Signer, SignedRequest
from .transport import BotocoreTransport, HttpResponse, Transport
from .uploader import SignedUploader, ParallelUploadExecutor, UploadResult

__all__ = [
    'UploaderError',
    'ConfigurationError',
    'TransportError',
    'UploadRejected',
    'SigV4Signer',
    'SignedRequest',
    'BotocoreTransport',
    'HttpResponse',
    'Transport',
    'SignedUploader',
    'ParallelUploadExecutor',
    'UploadResult',
]
