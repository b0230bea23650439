"""
PDP Network Configuration
Centralized configuration for chain IDs, WarmStorage addresses and EIP-712 domain settings
"""

from typing import Dict

from pdp_auth.exceptions import UnsupportedNetworkError

# EIP-712 domain name/version expected by FilecoinWarmStorageService
WARM_STORAGE_DOMAIN_NAME = "FilecoinWarmStorageService"
WARM_STORAGE_DOMAIN_VERSION = "1"


class MetadataKeys:
    """Well-known metadata keys understood by WarmStorage and storage providers"""

    # Data set metadata: request CDN service; value is always ""
    WITH_CDN = "withCDN"
    # Data set metadata: request IPNI indexing of all pieces; value is always ""
    WITH_IPFS_INDEXING = "withIPFSIndexing"
    # Piece metadata: advisory root CID of an IPLD DAG inside the piece
    IPFS_ROOT_CID = "ipfsRootCID"


class NetworkConfig:
    """Network configuration for WarmStorage contract addresses and chain IDs"""

    FILECOIN_MAINNET = "filecoin:mainnet"
    FILECOIN_CALIBRATION = "filecoin:calibration"
    FILECOIN_DEVNET = "filecoin:devnet"

    CHAIN_IDS: Dict[str, int] = {
        "filecoin:mainnet": 314,
        "filecoin:calibration": 314159,
        "filecoin:devnet": 31337,
    }

    # FilecoinWarmStorageService contract addresses (EIP-712 verifying contract)
    WARM_STORAGE_ADDRESSES: Dict[str, str] = {
        "filecoin:mainnet": "0x81DFD9813aDd354f03704F31419b0c6268d46232",
        "filecoin:calibration": "0xD3De778C05f89e1240ef70100Fb0d9e5b2eFD258",
    }

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        """Get chain ID for network

        Args:
            network: Network identifier (e.g., "filecoin:calibration")

        Returns:
            Chain ID as integer

        Raises:
            UnsupportedNetworkError: If network is not supported
        """
        chain_id = cls.CHAIN_IDS.get(network)
        if chain_id is None:
            raise UnsupportedNetworkError(f"Unsupported network: {network}")
        return chain_id

    @classmethod
    def get_warm_storage_address(cls, network: str) -> str:
        """Get FilecoinWarmStorageService contract address for network

        Raises:
            UnsupportedNetworkError: If no deployment is known for network
        """
        address = cls.WARM_STORAGE_ADDRESSES.get(network)
        if address is None:
            raise UnsupportedNetworkError(f"No WarmStorage deployment for network: {network}")
        return address

    @classmethod
    def get_network_for_chain_id(cls, chain_id: int) -> str:
        """Reverse lookup of a network identifier by chain ID"""
        for network, known_id in cls.CHAIN_IDS.items():
            if known_id == chain_id:
                return network
        raise UnsupportedNetworkError(f"Unsupported chain ID: {chain_id}")
