from hashlib import sha256
from typing import Union

from eth_typing import HexStr, Address, ChecksumAddress
from eth_utils import remove_0x_prefix

DEFAULT_GAS_PER_PUBDATA_LIMIT = 50000
MAX_PRIORITY_FEE_PER_GAS = 100_000_000
# Bytecode length is stored as a 2-byte word count in its hash
MAX_BYTECODE_WORDS = 2**16
BYTECODE_HASH_VERSION = b"\x01\x00"


def int_to_bytes(x: int) -> bytes:
    """Minimal big-endian encoding, ``0`` becomes ``b""``."""
    return x.to_bytes((x.bit_length() + 7) // 8, byteorder="big")


def to_bytes(data: Union[bytes, HexStr]) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    return bytes.fromhex(remove_0x_prefix(data))


def encode_address(addr: Union[Address, ChecksumAddress, str]) -> bytes:
    # An empty address stands for contract creation and encodes to nothing
    if not addr:
        return b""
    return to_bytes(addr)


def hash_byte_code(bytecode: bytes) -> bytes:
    """zkSync versioned bytecode hash: version, word count, then the tail of sha256."""
    words, remainder = divmod(len(bytecode), 32)
    if remainder != 0:
        raise ValueError("Bytecode length in bytes must be divisible by 32")
    if words >= MAX_BYTECODE_WORDS:
        raise OverflowError(f"Bytecode length must be less than {MAX_BYTECODE_WORDS} words")
    if words % 2 == 0:
        raise ValueError("Bytecode length in 32-byte words must be odd")
    return BYTECODE_HASH_VERSION + words.to_bytes(2, byteorder="big") + sha256(bytecode).digest()[4:]


def pad_front_bytes(bs: bytes, needed_length: int) -> bytes:
    return bs.rjust(needed_length, b"\0")
