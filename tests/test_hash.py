"""Hash utility tests."""

from grove.core.hash import hash_object, hash_file, is_hex_hash

EMPTY_BLOB = 'e69de29bb2d1d6434b8b29ae775ad8c2e48c5391'


def test_hash_object_known_value():
    """SHA-1 of the raw bytes, hex encoded."""
    assert hash_object(b'') == 'da39a3ee5e6b4b0d3255bfef95601890afd80709'


def test_hash_object_length():
    assert len(hash_object(b'abc')) == 40


def test_hash_file_includes_blob_header(tmp_path):
    """hash_file gives the blob id, matching Git for the same content."""
    path = tmp_path / 'empty'
    path.write_bytes(b'')
    assert hash_file(path) == EMPTY_BLOB


def test_hash_file_hello(tmp_path):
    path = tmp_path / 'hello'
    path.write_bytes(b'hello\n')
    assert hash_file(path) == 'ce013625030ba8dba906f756967f9e9ca394464a'


def test_is_hex_hash():
    assert is_hex_hash('a' * 40)
    assert not is_hex_hash('A' * 40)
    assert not is_hex_hash('a' * 39)
    assert not is_hex_hash('g' * 40)
    assert is_hex_hash('abcd', min_length=4)
    assert not is_hex_hash('abc', min_length=4)
    assert not is_hex_hash(None)
