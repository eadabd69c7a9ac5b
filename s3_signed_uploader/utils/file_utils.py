"""ファイル操作関連のユーティリティ"""
import mimetypes
import os
from dataclasses import dataclass

DEFAULT_CONTENT_TYPE = "binary/octet-stream"


@dataclass
class FileInfo:
    """ファイル情報"""
    path: str
    size: int
    content_type: str

    @property
    def name(self) -> str:
        return os.path.basename(self.path)


def guess_content_type(file_path: str) -> str:
    """拡張子からMIMEタイプを推定（不明ならば binary/octet-stream）"""
    content_type, _ = mimetypes.guess_type(file_path)
    return content_type or DEFAULT_CONTENT_TYPE


def get_file_info(file_path: str) -> FileInfo:
    """単一ファイルの情報を取得"""
    if not os.path.isfile(file_path):
        raise ValueError(f"Not a file: {file_path}")

    return FileInfo(
        path=file_path,
        size=os.path.getsize(file_path),
        content_type=guess_content_type(file_path),
    )


def read_file(file_path: str) -> bytes:
    """ファイルの内容をバイト列で読み込み"""
    with open(file_path, "rb") as file:
        return file.read()
