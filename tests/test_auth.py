from services.auth import check_password, create_token, hash_password, verify_token


def test_password_roundtrip():
    salt, digest = hash_password("secret123")
    assert check_password("secret123", salt, digest)
    assert not check_password("secret124", salt, digest)


def test_salt_is_random():
    assert hash_password("same")[1] != hash_password("same")[1]


def test_token_carries_user_id():
    assert verify_token(create_token("u-42")) == "u-42"
