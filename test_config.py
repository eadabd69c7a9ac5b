"""設定クラスのテスト"""
import dataclasses
import json

import pytest

from s3_signed_uploader.core.errors import ConfigurationError
from s3_signed_uploader.models.config import (
    DEFAULT_ENDPOINT,
    Config,
    UploaderConfig,
    normalize_endpoint,
)


def make_config(**overrides):
    values = {
        "access_key_id": "AKIDEXAMPLE",
        "secret_access_key": "secret",
        "bucket_name": "mybucket",
    }
    values.update(overrides)
    return UploaderConfig(**values)


def test_endpoint_without_scheme_is_normalized():
    config = make_config(endpoint="s3.eu-west-2.amazonaws.com")
    assert config.endpoint == "https://s3.eu-west-2.amazonaws.com"
    assert config.host == "s3.eu-west-2.amazonaws.com"
    assert config.signing_region == "eu-west-2"


def test_default_endpoint():
    config = make_config()
    assert config.endpoint == f"https://{DEFAULT_ENDPOINT}"
    assert config.signing_region == "eu-west-2"


@pytest.mark.parametrize("endpoint,expected", [
    ("https://s3.eu-west-2.amazonaws.com", "https://s3.eu-west-2.amazonaws.com"),
    ("https://s3.eu-west-2.amazonaws.com/", "https://s3.eu-west-2.amazonaws.com"),
    ("HTTPS://S3.Example.COM", "https://s3.example.com"),
    ("  minio.local:9000 ", "https://minio.local:9000"),
])
def test_normalize_endpoint(endpoint, expected):
    assert normalize_endpoint(endpoint) == expected


@pytest.mark.parametrize("endpoint", [
    "http://s3.eu-west-2.amazonaws.com",
    "ftp://s3.eu-west-2.amazonaws.com",
    "https://s3.eu-west-2.amazonaws.com/prefix",
    "https://",
    "",
    "https://user:pw@s3.eu-west-2.amazonaws.com",
    "user@s3.eu-west-2.amazonaws.com",
])
def test_invalid_endpoint(endpoint):
    with pytest.raises(ConfigurationError):
        make_config(endpoint=endpoint)


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        make_config(endpoint="ftp://example.com")


@pytest.mark.parametrize("field,value", [
    ("access_key_id", ""),
    ("secret_access_key", ""),
    ("bucket_name", "  "),
])
def test_required_fields(field, value):
    with pytest.raises(ConfigurationError):
        make_config(**{field: value})


def test_config_is_immutable():
    config = make_config()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.bucket_name = "other"


def test_secrets_hidden_from_repr():
    config = make_config(secret_access_key="supersecret")
    assert "supersecret" not in repr(config)
    assert "AKIDEXAMPLE" not in repr(config)
    assert "mybucket" in repr(config)


def test_config_loading(tmp_path):
    """設定ファイルの読み込み"""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "logging": {"level": "DEBUG", "file": str(tmp_path / "logs" / "uploader.log")},
        "s3": {
            "endpoint": "s3.us-west-2.amazonaws.com",
            "access_key_id": "AKIDEXAMPLE",
            "secret_access_key": "secret",
            "bucket_name": "mybucket",
        },
    }), encoding="utf-8")

    config = Config.from_file(str(path))

    assert config.logging.level == "DEBUG"
    assert config.logging.format == "%(asctime)s - %(levelname)s - %(message)s"
    assert config.s3.endpoint == "https://s3.us-west-2.amazonaws.com"
    assert config.s3.signing_region == "us-west-2"
    assert config.s3.region is None


def test_config_file_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.from_file(str(tmp_path / "missing.json"))


def test_config_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        Config.from_file(str(path))


def test_config_missing_section():
    with pytest.raises(ConfigurationError):
        Config.from_dict({"logging": {}})


def test_config_unknown_key():
    with pytest.raises(ConfigurationError):
        Config.from_dict({"s3": {"bucket_name": "b", "access_key_id": "a",
                                 "secret_access_key": "s", "acl": "private"}})


def test_from_config_file(tmp_path):
    from s3_signed_uploader import SignedUploader, from_config_file

    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "logging": {"level": "WARNING"},
        "s3": {
            "access_key_id": "AKIDEXAMPLE",
            "secret_access_key": "secret",
            "bucket_name": "mybucket",
            "region": "eu-central-1",
        },
    }), encoding="utf-8")

    uploader = from_config_file(str(path))

    assert isinstance(uploader, SignedUploader)
    assert uploader.config.bucket_name == "mybucket"
    assert uploader.config.signing_region == "eu-central-1"
    uploader.transport.close()
