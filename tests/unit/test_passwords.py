from trucktrack.auth.passwords import hash_password, verify_password


def test_hash_password_is_salted():
    first = hash_password("s3cret-pass", iterations=1_000)
    second = hash_password("s3cret-pass", iterations=1_000)

    assert first != second
    assert first.startswith("$pbkdf2-sha256$1000$")


def test_verify_password_round_trip():
    encoded = hash_password("s3cret-pass", iterations=1_000)

    assert verify_password("s3cret-pass", encoded)
    assert not verify_password("wrong-pass", encoded)


def test_verify_password_rejects_missing_or_foreign_hashes():
    assert not verify_password("anything", None)
    assert not verify_password("anything", "md5$abc")
    assert not verify_password("anything", "bcrypt$10$salt$digest")
