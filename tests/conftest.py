"""
Pytest configuration and test fixtures
"""

import json
import re

import pytest
from eth_account import Account
from eth_utils import to_hex

ARRAY_TYPE = re.compile(r"^(.*)\[\d*\]$")


@pytest.fixture
def mock_evm_private_key():
    """Deterministic EVM private key used for pinned signature vectors"""
    return "0x1234567890123456789012345678901234567890123456789012345678901234"


@pytest.fixture
def signer_address():
    """Address derived from mock_evm_private_key"""
    return "0x2e988A386a799F506693793c6A5AF6B54dfAaBfB"


@pytest.fixture
def warm_storage_address():
    """WarmStorage address on a local devnet"""
    return "0x5615dEB798BB3E4dFa0139dFa1b3D433Cc23b72f"


@pytest.fixture
def devnet_chain_id():
    return 31337


@pytest.fixture
def payee_address():
    return "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


@pytest.fixture
def piece_cids():
    """Two valid PieceCIDv2 strings"""
    return [
        "bafkzcibcauan42av3szurbbscwuu3zjssvfwbpsvbjf6y3tukvlgl2nf5rha6pa",
        "bafkzcibcpybwiktap34inmaex4wbs6cghlq5i2j2yd2bb2zndn5ep7ralzphkdy",
    ]


@pytest.fixture
def piece_cid_bytes():
    """Binary form of piece_cids"""
    return [
        bytes.fromhex(
            "01559120220500de6815dcb348843215a94de532954b60be550a4bec6e74555665e9a5ec4e0f3c"
        ),
        bytes.fromhex(
            "01559120227e03642a607ef886b004bf2c1978463ae1d4693ac0f410eb2d1b7a47fe205e5e750f"
        ),
    ]


def _from_display(types, field_type, value):
    """Undo wallet display formatting so eth_account can hash the message"""
    array_match = ARRAY_TYPE.match(field_type)
    if array_match:
        return [_from_display(types, array_match.group(1), item) for item in value]
    if field_type in types:
        return {
            field["name"]: _from_display(types, field["type"], value[field["name"]])
            for field in types[field_type]
        }
    if field_type.startswith(("uint", "int")):
        return int(value)
    if field_type.startswith("bytes"):
        return bytes.fromhex(value[2:])
    return value


class FakeWalletProvider:
    """EIP-1193 style provider that signs eth_signTypedData_v4 with a local key"""

    def __init__(self, private_key, reject_code=None):
        self._account = Account.from_key(private_key)
        self.reject_code = reject_code
        self.requests = []

    def request(self, method, params):
        self.requests.append((method, params))
        if method != "eth_signTypedData_v4":
            return {"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": method}}
        if self.reject_code is not None:
            return {
                "jsonrpc": "2.0",
                "id": 1,
                "error": {"code": self.reject_code, "message": "User denied"},
            }

        address, payload_json = params
        assert address.lower() == self._account.address.lower()
        payload = json.loads(payload_json)
        payload["message"] = _from_display(
            payload["types"], payload["primaryType"], payload["message"]
        )
        signed = Account.sign_typed_data(self._account.key, full_message=payload)
        return {"jsonrpc": "2.0", "id": 1, "result": to_hex(signed.signature)}


class FakeBrowserSigner:
    """Signer handle shaped like an ethers JsonRpcSigner backed by a wallet"""

    def __init__(self, provider, address):
        self.provider = provider
        self.address = address


@pytest.fixture
def fake_wallet_provider(mock_evm_private_key):
    return FakeWalletProvider(mock_evm_private_key)


@pytest.fixture
def fake_browser_signer(fake_wallet_provider, signer_address):
    return FakeBrowserSigner(fake_wallet_provider, signer_address)
