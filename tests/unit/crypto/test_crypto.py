"""
Copyright (c) 2019-2020, the Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details
"""

from bitscript.crypto import crypto
from bitscript.util.encode import ByteArray


class TestCrypto:
    def test_hashes(self):
        assert crypto.sha256(b"") == ByteArray(
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )
        assert crypto.ripemd160(b"") == ByteArray(
            "9c1185a5c5e9fc54612808977ee8f548b2258d31"
        )
        assert crypto.doubleHashH(b"hello") == ByteArray(
            "9595c9df90075148eb06860365df33584b75bff782a510c6cd4883a419833d50"
        )

    def test_hash160(self):
        pubkey = ByteArray(
            "0250863ad64a87ae8a2fe83c1af1a8403cb53f53e486d8511dad8a04887e5b2352"
        )
        h = crypto.hash160(pubkey)
        assert len(h) == crypto.RIPEMD160_SIZE
        assert h == ByteArray("f54a5851e9372b87810a8e60cdd2e7cfd80b6e31")
        assert h == crypto.ripemd160(crypto.sha256(pubkey))

    def test_checksum(self):
        assert crypto.checksum(b"hello") == bytes.fromhex("9595c9df")
