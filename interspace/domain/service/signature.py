"""Delegation authorization digest and signer recovery.

The authorization message is keccak256 over the packed encoding

    0x05 || uint256(chain_id) || address (20 bytes) || uint256(nonce)

and is signed with secp256k1 ECDSA as (r, s, y_parity). Sign-in challenges
are plain EIP-191 personal messages. Uses pycryptodome
for keccak and coincurve for public key recovery; no key material is
ever held here.
"""

import logfire
from coincurve import PublicKey
from Crypto.Hash import keccak

from interspace.domain.model.delegation import AuthorizationData, DelegationSignature
from interspace.domain.value import EthAddress

AUTHORIZATION_MAGIC = b"\x05"
_UINT256_MAX = 2**256 - 1


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest (the pre-standard SHA-3 variant used by Ethereum)."""
    return keccak.new(digest_bits=256, data=data).digest()


def _uint256(value: int) -> bytes:
    """Big-endian 32-byte encoding."""
    if value < 0 or value > _UINT256_MAX:
        raise ValueError(f"Value does not fit in uint256: {value}")
    return value.to_bytes(32, "big")


def authorization_digest(chain_id: int, address: EthAddress, nonce: int) -> bytes:
    """Digest the linked EOA signs to authorize a delegation.

    Args:
        chain_id: Chain the authorization is valid on
        address: Session wallet receiving the delegation
        nonce: Authority nonce

    Returns:
        32-byte digest
    """
    return keccak256(
        AUTHORIZATION_MAGIC + _uint256(chain_id) + address.to_bytes() + _uint256(nonce)
    )


def authorization_message(data: AuthorizationData) -> str:
    """Hex form of the digest handed to clients for signing."""
    return "0x" + authorization_digest(data.chain_id, data.address, data.nonce).hex()


def public_key_to_address(public_key: PublicKey) -> EthAddress:
    """Derive the address controlled by a secp256k1 public key."""
    uncompressed = public_key.format(compressed=False)[1:]
    return EthAddress("0x" + keccak256(uncompressed)[-20:].hex())


def recover_signer(digest: bytes, signature: DelegationSignature) -> EthAddress:
    """Recover the address that produced signature over digest.

    Raises:
        Exception: coincurve errors for signatures that cannot be parsed
            or recovered
    """
    public_key = PublicKey.from_signature_and_message(
        signature.to_bytes(), digest, hasher=None
    )
    return public_key_to_address(public_key)


def verify_authorization_signature(
    expected_signer: EthAddress,
    data: AuthorizationData,
    signature: DelegationSignature,
) -> bool:
    """Check that signature over data recovers to expected_signer.

    Address comparison is case-insensitive (EthAddress is lower-cased).

    Returns:
        True if the signature is valid for expected_signer
    """
    try:
        digest = authorization_digest(data.chain_id, data.address, data.nonce)
        recovered = recover_signer(digest, signature)
    except Exception as e:
        logfire.warn("Failed to recover delegation signer", error=str(e))
        return False

    if recovered != expected_signer:
        logfire.warn(
            "Delegation signer mismatch",
            expected=expected_signer.root,
            recovered=recovered.root,
        )
        return False
    return True


def checksum_address(address: EthAddress) -> str:
    """EIP-55 mixed-case form of an address."""
    hex_address = address.root[2:]
    digest = keccak256(hex_address.encode()).hex()
    return "0x" + "".join(
        c.upper() if int(digest[i], 16) >= 8 else c for i, c in enumerate(hex_address)
    )


PERSONAL_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"


def personal_message_digest(message: str) -> bytes:
    """EIP-191 digest wallets produce for personal_sign."""
    data = message.encode("utf-8")
    return keccak256(PERSONAL_MESSAGE_PREFIX + str(len(data)).encode() + data)


def recover_message_signer(message: str, signature: str) -> EthAddress:
    """Recover the signer of a 65-byte personal_sign signature.

    The trailing v byte may be 0/1 or 27/28.

    Raises:
        ValueError: If the signature is not 65 bytes of hex
    """
    text = signature[2:] if signature.lower().startswith("0x") else signature
    raw = bytes.fromhex(text)
    if len(raw) != 65:
        raise ValueError("Signature must be 65 bytes")
    v = raw[64] - 27 if raw[64] >= 27 else raw[64]
    if v not in (0, 1):
        raise ValueError(f"Invalid recovery id: {raw[64]}")

    public_key = PublicKey.from_signature_and_message(
        raw[:64] + bytes([v]), personal_message_digest(message), hasher=None
    )
    return public_key_to_address(public_key)


def verify_message_signature(
    expected_signer: EthAddress, message: str, signature: str
) -> bool:
    """Check that a personal_sign signature recovers to expected_signer."""
    try:
        recovered = recover_message_signer(message, signature)
    except Exception as e:
        logfire.warn("Failed to recover message signer", error=str(e))
        return False

    if recovered != expected_signer:
        logfire.warn(
            "Message signer mismatch",
            expected=expected_signer.root,
            recovered=recovered.root,
        )
        return False
    return True
