"""Unit tests for JWTTokenService."""

import os
import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from jose import jwt

from domain.model.errors import ConfigurationError
from services.token_service import JWT_ALGORITHM, JWTTokenService

SECRET = 'test-secret-key'


class TestConstruction(unittest.TestCase):
    """Signing key must be present before any token is issued."""

    def test_missing_secret_raises(self):
        """An absent signing key is a configuration error."""
        with self.assertRaises(ConfigurationError):
            JWTTokenService(None)

    def test_empty_secret_raises(self):
        """An empty signing key is a configuration error."""
        with self.assertRaises(ConfigurationError):
            JWTTokenService('')

    def test_non_positive_expiry_raises(self):
        """Zero or negative lifetimes are rejected."""
        with self.assertRaises(ConfigurationError):
            JWTTokenService(SECRET, expires_in=timedelta(0))

    @patch.dict(os.environ, {'JWT_SECRET': SECRET}, clear=True)
    def test_from_env_without_expiry(self):
        """JWT_SECRET alone gives tokens with no expiry."""
        service = JWTTokenService.from_env()

        self.assertIsNone(service.expires_in)

    @patch.dict(os.environ, {'JWT_SECRET': SECRET, 'JWT_EXPIRATION_DAYS': '7'}, clear=True)
    def test_from_env_with_expiry(self):
        """JWT_EXPIRATION_DAYS sets the token lifetime."""
        service = JWTTokenService.from_env()

        self.assertEqual(service.expires_in, timedelta(days=7))

    @patch.dict(os.environ, {}, clear=True)
    def test_from_env_missing_secret_raises(self):
        """from_env() fails when JWT_SECRET is unset."""
        with self.assertRaises(ConfigurationError):
            JWTTokenService.from_env()

    @patch.dict(os.environ, {'JWT_SECRET': SECRET, 'JWT_EXPIRATION_DAYS': 'week'}, clear=True)
    def test_from_env_bad_expiry_raises(self):
        """A non-numeric JWT_EXPIRATION_DAYS is a configuration error."""
        with self.assertRaises(ConfigurationError):
            JWTTokenService.from_env()


class TestIssueAndVerify(unittest.TestCase):

    def setUp(self):
        self.service = JWTTokenService(SECRET)

    def test_verify_returns_issued_subject(self):
        """verify() returns the subject issue() was given."""
        token = self.service.issue('user-123')

        self.assertTrue(token)
        self.assertEqual(self.service.verify(token), 'user-123')

    def test_token_claims_without_expiry(self):
        """Without a lifetime only sub and iat are set."""
        claims = jwt.get_unverified_claims(self.service.issue('user-123'))

        self.assertEqual(claims['sub'], 'user-123')
        self.assertIn('iat', claims)
        self.assertNotIn('exp', claims)

    def test_token_claims_with_expiry(self):
        """With a lifetime exp is set after iat."""
        service = JWTTokenService(SECRET, expires_in=timedelta(hours=1))
        claims = jwt.get_unverified_claims(service.issue('user-123'))

        self.assertEqual(claims['exp'] - claims['iat'], 3600)
        self.assertEqual(service.verify(service.issue('user-123')), 'user-123')

    def test_wrong_key_is_invalid(self):
        """Tokens signed with another key are rejected."""
        token = JWTTokenService('another-secret').issue('user-123')

        self.assertIsNone(self.service.verify(token))

    def test_tampered_payload_is_invalid(self):
        """Editing the payload breaks the signature."""
        token = self.service.issue('user-123')
        forged = jwt.encode({'sub': 'admin'}, 'guess', algorithm=JWT_ALGORITHM)
        header, _, signature = token.split('.')
        tampered = '.'.join([header, forged.split('.')[1], signature])

        self.assertIsNone(self.service.verify(tampered))

    def test_malformed_token_is_invalid(self):
        """Garbage input is rejected, not raised."""
        self.assertIsNone(self.service.verify('not-a-token'))
        self.assertIsNone(self.service.verify(''))
        self.assertIsNone(self.service.verify('a.b.c'))

    def test_expired_token_is_invalid(self):
        """Tokens past exp are rejected."""
        past = datetime.now(timezone.utc) - timedelta(minutes=5)
        token = jwt.encode({'sub': 'user-123', 'exp': past}, SECRET, algorithm=JWT_ALGORITHM)

        self.assertIsNone(self.service.verify(token))

    def test_token_without_subject_is_invalid(self):
        """A signed token with no sub claim is rejected."""
        token = jwt.encode({'user': {'id': 'user-123'}}, SECRET, algorithm=JWT_ALGORITHM)

        self.assertIsNone(self.service.verify(token))

    def test_unsigned_token_is_invalid(self):
        """alg=none tokens are rejected."""
        header = 'eyJhbGciOiJub25lIiwidHlwIjoiSldUIn0'
        payload = 'eyJzdWIiOiJ1c2VyLTEyMyJ9'

        self.assertIsNone(self.service.verify(f'{header}.{payload}.'))


if __name__ == '__main__':
    unittest.main()
