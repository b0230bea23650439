"""
Tests for network configuration and logging setup
"""

import io
import logging

import pytest

from pdp_auth.config import (
    WARM_STORAGE_DOMAIN_NAME,
    WARM_STORAGE_DOMAIN_VERSION,
    MetadataKeys,
    NetworkConfig,
)
from pdp_auth.exceptions import ConfigurationError, UnsupportedNetworkError
from pdp_auth.logging_config import get_logger, setup_logging


def test_chain_ids():
    """Test chain IDs for known Filecoin networks"""
    assert NetworkConfig.get_chain_id(NetworkConfig.FILECOIN_MAINNET) == 314
    assert NetworkConfig.get_chain_id(NetworkConfig.FILECOIN_CALIBRATION) == 314159
    assert NetworkConfig.get_chain_id(NetworkConfig.FILECOIN_DEVNET) == 31337


def test_unsupported_network():
    """Test unknown networks raise UnsupportedNetworkError"""
    with pytest.raises(UnsupportedNetworkError):
        NetworkConfig.get_chain_id("eip155:1")
    with pytest.raises(ConfigurationError):
        NetworkConfig.get_warm_storage_address(NetworkConfig.FILECOIN_DEVNET)


def test_warm_storage_addresses():
    """Test WarmStorage deployments are known for mainnet and calibration"""
    assert NetworkConfig.get_warm_storage_address("filecoin:calibration").startswith("0x")
    assert len(NetworkConfig.get_warm_storage_address("filecoin:mainnet")) == 42


def test_network_for_chain_id():
    """Test reverse lookup by chain ID"""
    assert NetworkConfig.get_network_for_chain_id(314159) == "filecoin:calibration"
    with pytest.raises(UnsupportedNetworkError):
        NetworkConfig.get_network_for_chain_id(1)


def test_domain_constants_and_metadata_keys():
    """Test domain constants and well-known metadata keys"""
    assert WARM_STORAGE_DOMAIN_NAME == "FilecoinWarmStorageService"
    assert WARM_STORAGE_DOMAIN_VERSION == "1"
    assert MetadataKeys.WITH_CDN == "withCDN"
    assert MetadataKeys.WITH_IPFS_INDEXING == "withIPFSIndexing"
    assert MetadataKeys.IPFS_ROOT_CID == "ipfsRootCID"


def test_setup_logging_routes_package_logs():
    """Test setup_logging writes pdp_auth records to the given stream"""
    stream = io.StringIO()
    setup_logging("debug", stream=stream)
    setup_logging(logging.DEBUG, stream=stream)

    package_logger = logging.getLogger("pdp_auth")
    assert len(package_logger.handlers) == 1

    get_logger("pdp_auth.test").debug("hello from test")
    output = stream.getvalue()
    assert "hello from test" in output
    assert "DEBUG" in output
    assert "pdp_auth.test" in output


def test_setup_logging_unknown_level():
    """Test unknown level names are rejected"""
    with pytest.raises(ValueError):
        setup_logging("chatty")
