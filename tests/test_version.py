"""
Tests for the version module of the ArbWallet SDK.
"""
import importlib
import re
from importlib import metadata as importlib_metadata
from unittest.mock import mock_open, patch

import arbwallet_sdk
from arbwallet_sdk import __version__


def _raise(exc):
    def _fn(*args, **kwargs):
        raise exc
    return _fn


def test_version_format():
    """Test that the version string follows semantic versioning"""
    assert re.match(r'^\d+\.\d+\.\d+$', __version__), "Version should follow semantic versioning"
    assert arbwallet_sdk.__version__ == __version__


@patch('importlib.metadata.version')
@patch('pathlib.Path.open', new_callable=mock_open, read_data=b'[project]\nversion = "1.2.3"\n')
def test_version_from_file(mock_open_file, mock_metadata_version):
    """When metadata lookup fails, pyproject.toml is read"""
    mock_metadata_version.side_effect = importlib_metadata.PackageNotFoundError
    import arbwallet_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "1.2.3"


@patch('importlib.metadata.version')
def test_version_from_metadata(mock_metadata_version):
    """When metadata lookup succeeds, version comes from metadata"""
    mock_metadata_version.return_value = "2.3.4"
    import arbwallet_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "2.3.4"


def test_version_file_not_found(monkeypatch):
    """If pyproject.toml is missing, fallback to default"""
    monkeypatch.setattr(importlib_metadata, 'version', _raise(importlib_metadata.PackageNotFoundError()))
    monkeypatch.setattr('pathlib.Path.open', _raise(FileNotFoundError()))
    import arbwallet_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "0.1.0"


def test_version_key_error(monkeypatch):
    """If TOML exists but has no version key, fallback to default"""
    monkeypatch.setattr(importlib_metadata, 'version', _raise(importlib_metadata.PackageNotFoundError()))
    monkeypatch.setattr('pathlib.Path.open', mock_open(read_data=b'[project]\nname = "arbwallet-sdk"\n'))
    import arbwallet_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "0.1.0"


def test_version_malformed_toml(monkeypatch):
    """If pyproject.toml cannot be parsed, fallback to default"""
    monkeypatch.setattr(importlib_metadata, 'version', _raise(importlib_metadata.PackageNotFoundError()))
    monkeypatch.setattr('pathlib.Path.open', mock_open(read_data=b'[project\nversion = '))
    import arbwallet_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "0.1.0"


def test_version_info_tuple():
    """The numeric tuple mirrors the version string"""
    import arbwallet_sdk.version as vmod
    importlib.reload(vmod)
    assert ".".join(str(p) for p in vmod.__version_info__) == vmod.__version__
