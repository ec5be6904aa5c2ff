"""
Unit tests for microblog.security and the token helpers in microblog.auth
"""
from datetime import timedelta

from fastapi import Request, Response

from microblog.security import hash_password, verify_password, password_needs_rehash, pwd_ctx
from microblog.models.users import User
from microblog.auth import (
    generate_remember_token,
    hash_token,
    set_remember_cookie,
    clear_remember_cookie,
    remember_token_from,
    access_token_for,
    read_access_token,
    user_id_from_access_token,
    REMEMBER_COOKIE_MAX_AGE,
)


class TestHashPassword:

    def test_returns_argon2_digest(self):
        result = hash_password('mypassword')
        assert isinstance(result, str)
        assert result.startswith('$argon2')

    def test_different_salts_per_call(self):
        """Each hash should use a new salt, so hashes differ."""
        assert hash_password('same') != hash_password('same')

    def test_hash_not_equal_to_plain(self):
        assert hash_password('secret123') != 'secret123'


class TestVerifyPassword:

    def test_matching_password_returns_true(self):
        digest = hash_password('correct')
        assert verify_password('correct', digest) is True

    def test_wrong_password_returns_false(self):
        digest = hash_password('correct')
        assert verify_password('wrong', digest) is False

    def test_garbage_digest_is_a_mismatch(self):
        assert verify_password('correct', 'not-a-digest') is False

    def test_missing_digest_is_a_mismatch(self):
        assert verify_password('correct', None) is False


class TestRehash:

    def test_fresh_digest_is_current(self):
        assert password_needs_rehash(hash_password('foobar')) is False

    def test_context_knows_bcrypt_as_deprecated(self):
        assert 'bcrypt' in pwd_ctx.schemes()
        assert pwd_ctx.default_scheme() == 'argon2'


class TestTokens:

    def test_remember_tokens_are_random(self):
        assert generate_remember_token() != generate_remember_token()

    def test_hash_token_is_stable_sha256(self):
        assert hash_token('abc') == hash_token('abc')
        assert len(hash_token('abc')) == 64

    def test_access_token_names_the_user(self):
        token = access_token_for(User(id=7, email='user@example.com'))
        claims = read_access_token(token)
        assert claims['sub'] == '7'
        assert claims['email'] == 'user@example.com'
        assert claims['exp'] > claims['iat']
        assert user_id_from_access_token(token) == 7

    def test_expired_access_token(self):
        token = access_token_for(User(id=7, email='user@example.com'), lifetime=timedelta(seconds=-1))
        assert read_access_token(token) is None
        assert user_id_from_access_token(token) is None

    def test_tampered_access_token(self):
        token = access_token_for(User(id=7, email='user@example.com'))
        assert user_id_from_access_token(token[:-5] + 'xxxxx') is None
        assert user_id_from_access_token('nonsense') is None


class TestRememberCookie:

    def test_set_cookie_is_http_only(self):
        response = Response()
        set_remember_cookie(response, 'abc123')
        header = response.headers['set-cookie']
        assert header.startswith('remember_token=abc123;')
        assert 'HttpOnly' in header
        assert f'Max-Age={REMEMBER_COOKIE_MAX_AGE}' in header
        assert 'samesite=lax' in header.lower()

    def test_clear_cookie_expires_it(self):
        response = Response()
        clear_remember_cookie(response)
        header = response.headers['set-cookie']
        assert header.startswith('remember_token=""') or header.startswith('remember_token=;')
        assert 'Max-Age=0' in header

    def test_token_read_from_request_cookie(self):
        request = Request({'type': 'http', 'headers': [(b'cookie', b'remember_token=abc123')]})
        assert remember_token_from(request) == 'abc123'

    def test_missing_cookie_reads_as_none(self):
        assert remember_token_from(Request({'type': 'http', 'headers': []})) is None
        empty = Request({'type': 'http', 'headers': [(b'cookie', b'remember_token=')]})
        assert remember_token_from(empty) is None
