#!/usr/bin/env python3
"""Basic usage example for bencodec.

This example demonstrates:
1. Defining a record with Pydantic
2. Encoding to canonical bencode
3. Decoding to generic values and back to a Pydantic model
4. Calculating encoded sizes
5. Handling strict-decoding errors
"""

from __future__ import annotations

from typing import ClassVar, List, Optional

from bencodec import (
    BaseRecord,
    BencodeField,
    BoundedInt,
    DecodeError,
    decode,
    decode_into,
    encode,
    encoded_size,
    field_sizes,
)


# Define a record class
class PeerInfo(BaseRecord):
    """Tracker peer entry.

    Fields are sorted by wire name so the encoding is canonical.
    """

    ip: str
    peer_id: bytes = BencodeField("peer id")
    port: int = BoundedInt(ge=0, le=65535)
    flags: List[str] = BencodeField(",omitempty", default_factory=list)

    bencode_sorted_fields: ClassVar[bool] = True
    bencode_max_bytes: ClassVar[Optional[int]] = 128


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("bencodec Basic Usage Example")
    print("=" * 60)
    print()

    # Create a record instance
    print("1. Creating a peer record...")
    peer = PeerInfo(ip="10.0.0.1", peer_id=b"-XX0001-abcdefghijkl", port=6881)

    print(f"   IP: {peer.ip}")
    print(f"   Peer ID: {peer.peer_id!r}")
    print(f"   Port: {peer.port}")
    print()

    # Analyze field sizes
    print("2. Analyzing field sizes...")
    sizes = field_sizes(peer)
    for field_name, size in sizes.items():
        print(f"   {field_name}: {size} bytes")
    print(f"   Total: {encoded_size(peer)} bytes (including d/e)")
    print()

    # Encode the record
    print("3. Encoding to bencode...")
    encoded_data = encode(peer)
    print(f"   Encoded: {encoded_data!r}")
    print()

    # Decode the record
    print("4. Decoding...")
    print(f"   Generic: {decode(encoded_data)!r}")
    decoded_peer = decode_into(encoded_data, PeerInfo)
    print(f"   Typed:   {decoded_peer!r}")
    print()

    # Verify round-trip
    print("5. Verifying round-trip...")
    if decoded_peer == peer:
        print("   ✓ Round-trip successful! Records match.")
    else:
        print("   ✗ Round-trip failed! Records don't match.")
    print()

    # Strict decoding
    print("6. Rejecting non-canonical input...")
    for bad in (b"i01e", b"d1:bi1e1:ai2ee", b"4:spa"):
        try:
            decode(bad)
        except DecodeError as e:
            print(f"   {bad!r:20} -> {e.code}: {e}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
