"""
Tests for extraData ABI codecs
"""

import pytest

from pdp_auth.exceptions import EncodingFailure
from pdp_auth.extra_data import (
    decode_add_pieces_extra_data,
    decode_create_and_add_extra_data,
    decode_create_data_set_extra_data,
    decode_signature_extra_data,
    encode_add_pieces_extra_data,
    encode_create_and_add_extra_data,
    encode_create_data_set_extra_data,
    encode_delete_data_set_extra_data,
    encode_schedule_piece_removals_extra_data,
    encode_signature_extra_data,
)
from pdp_auth.types import AuthSignature, MetadataEntry

SIGNATURE = (
    "0x94e366bd2f9bfc933a87575126715bccf128b77d9c6937e194023e13b54272eb"
    "7a74b7e6e26acf4341d9c56e141ff7ba154c37ea03e9c35b126fff1efe1a0c831c"
)


def word(value: int) -> str:
    return value.to_bytes(32, "big").hex()


def padded(data: bytes) -> str:
    return (data + b"\x00" * (-len(data) % 32)).hex()


def dynamic_bytes(data: bytes) -> str:
    return word(len(data)) + padded(data)


SIGNATURE_BYTES = bytes.fromhex(SIGNATURE[2:])


def test_signature_only_layout():
    """Test (bytes signature) layout byte for byte"""
    expected = "0x" + word(0x20) + dynamic_bytes(SIGNATURE_BYTES)
    assert encode_signature_extra_data(SIGNATURE) == expected
    assert encode_delete_data_set_extra_data(SIGNATURE_BYTES) == expected
    assert encode_schedule_piece_removals_extra_data(SIGNATURE[2:]) == expected


def test_signature_only_accepts_auth_signature():
    """Test AuthSignature results can be passed straight through"""
    auth_sig = AuthSignature(signature=SIGNATURE, v=28, r="0x", s="0x", signedData="0x")
    encoded = encode_signature_extra_data(auth_sig)
    assert decode_signature_extra_data(encoded).signature == SIGNATURE


def test_create_data_set_layout(payee_address):
    """Test DataSetCreateData layout: payer, id, keys, values, signature"""
    encoded = encode_create_data_set_extra_data(
        payee_address.lower(),
        12345,
        [{"key": "title", "value": "TestDataSet"}],
        SIGNATURE,
    )

    payer_word = "00" * 12 + payee_address[2:].lower()
    expected = (
        "0x"
        + payer_word
        + word(12345)
        + word(0xA0)
        + word(0x120)
        + word(0x1A0)
        # metadataKeys
        + word(1)
        + word(0x20)
        + dynamic_bytes(b"title")
        # metadataValues
        + word(1)
        + word(0x20)
        + dynamic_bytes(b"TestDataSet")
        + dynamic_bytes(SIGNATURE_BYTES)
    )
    assert encoded == expected

    decoded = decode_create_data_set_extra_data(encoded)
    assert decoded.payer == payee_address
    assert decoded.client_data_set_id == 12345
    assert decoded.metadata == [MetadataEntry(key="title", value="TestDataSet")]
    assert decoded.signature == SIGNATURE


def test_create_data_set_empty_metadata(payee_address):
    """Test empty metadata encodes as two empty string arrays"""
    encoded = encode_create_data_set_extra_data(payee_address, 1, None, SIGNATURE)
    decoded = decode_create_data_set_extra_data(encoded)
    assert decoded.metadata == []
    assert decoded.client_data_set_id == 1


def test_create_data_set_preserves_metadata_order(payee_address):
    """Test metadata keys and values keep caller order"""
    metadata = [
        MetadataEntry(key="withCDN", value=""),
        MetadataEntry(key="b", value="2"),
        MetadataEntry(key="a", value="1"),
    ]
    encoded = encode_create_data_set_extra_data(payee_address, 7, metadata, SIGNATURE)
    assert decode_create_data_set_extra_data(encoded).metadata == metadata


def test_create_data_set_invalid_payer():
    """Test invalid payer address is rejected"""
    with pytest.raises(EncodingFailure):
        encode_create_data_set_extra_data("0xnotanaddress", 1, [], SIGNATURE)


def test_create_data_set_negative_id(payee_address):
    """Test ids outside uint256 fail to encode"""
    with pytest.raises(EncodingFailure):
        encode_create_data_set_extra_data(payee_address, -1, [], SIGNATURE)


def test_add_pieces_layout_without_metadata():
    """Test addPieces layout with one empty metadata array per piece"""
    encoded = encode_add_pieces_extra_data(SIGNATURE, [[], []])

    empty_nested = word(2) + word(0x40) + word(0x60) + word(0) + word(0)
    expected = (
        "0x"
        + word(0x60)
        + word(0xE0)
        + word(0x180)
        + dynamic_bytes(SIGNATURE_BYTES)
        + empty_nested
        + empty_nested
    )
    assert encoded == expected


def test_add_pieces_roundtrip_with_metadata():
    """Test per-piece metadata survives decoding, including empty entries"""
    metadata = [
        [MetadataEntry(key="ipfsRootCID", value="bafyroot")],
        [],
        [{"key": "a", "value": "1"}, {"key": "b", "value": ""}],
    ]
    decoded = decode_add_pieces_extra_data(encode_add_pieces_extra_data(SIGNATURE, metadata))

    assert decoded.signature == SIGNATURE
    assert decoded.metadata == [
        [MetadataEntry(key="ipfsRootCID", value="bafyroot")],
        [],
        [MetadataEntry(key="a", value="1"), MetadataEntry(key="b", value="")],
    ]


def test_add_pieces_rejects_bad_metadata_entry():
    """Test malformed metadata entries are rejected"""
    with pytest.raises(EncodingFailure):
        encode_add_pieces_extra_data(SIGNATURE, [["title"]])


def test_create_and_add_roundtrip(payee_address):
    """Test combined extraData wraps both encodings as bytes"""
    create = encode_create_data_set_extra_data(
        payee_address, 42, [MetadataEntry(key="withCDN", value="")], SIGNATURE
    )
    add = encode_add_pieces_extra_data(SIGNATURE, [[]])

    combined = encode_create_and_add_extra_data(create, add)
    decoded = decode_create_and_add_extra_data(combined)

    assert decoded.create.client_data_set_id == 42
    assert decoded.create.metadata == [MetadataEntry(key="withCDN", value="")]
    assert decoded.add.metadata == [[]]
    assert decoded.add.signature == SIGNATURE


def test_decode_garbage():
    """Test undecodable data raises EncodingFailure"""
    with pytest.raises(EncodingFailure):
        decode_signature_extra_data("0x1234")
    with pytest.raises(EncodingFailure):
        decode_create_data_set_extra_data(b"")
    with pytest.raises(EncodingFailure):
        decode_add_pieces_extra_data("0xnothex")


def test_invalid_signature_hex():
    """Test non-hex signatures are rejected before encoding"""
    with pytest.raises(EncodingFailure):
        encode_signature_extra_data("0xzz")
