import os
import sys
import unittest
from urllib.parse import parse_qs, urlparse

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
if THIS_DIR not in sys.path:
    sys.path.insert(0, THIS_DIR)

from fakes import FakeSpotifyGateway
from tracksync.config import Settings
from tracksync.errors import UpstreamAuthError
from tracksync.spotify_client import DEFAULT_SCOPES, SpotifyGateway
from tracksync.tokens import TokenManager, preview_token


SETTINGS = Settings(
    client_id="example-client-id",
    client_secret="example-secret",
    redirect_uri="http://localhost:3000/callback",
)


class TestAuthorizationUrl(unittest.TestCase):
    def test_url_has_required_query_parameters(self):
        tokens = TokenManager(SpotifyGateway(SETTINGS))
        url = tokens.build_authorization_url()

        parsed = urlparse(url)
        self.assertEqual(parsed.netloc, "accounts.spotify.com")
        self.assertEqual(parsed.path, "/authorize")
        qs = parse_qs(parsed.query)
        self.assertEqual(qs["response_type"], ["code"])
        self.assertEqual(qs["client_id"], ["example-client-id"])
        self.assertEqual(qs["redirect_uri"], ["http://localhost:3000/callback"])
        self.assertEqual(set(qs["scope"][0].split()), set(DEFAULT_SCOPES))

    def test_url_is_deterministic(self):
        tokens = TokenManager(SpotifyGateway(SETTINGS))
        self.assertEqual(tokens.build_authorization_url(), tokens.build_authorization_url())


class TestCodeExchange(unittest.TestCase):
    def test_success_overwrites_refresh_token(self):
        gateway = FakeSpotifyGateway(refresh_token="new-refresh")
        tokens = TokenManager(gateway, refresh_token="old-refresh")

        self.assertEqual(tokens.exchange_code_for_refresh_token("AAA"), "new-refresh")
        self.assertEqual(tokens.refresh_token, "new-refresh")
        self.assertEqual(gateway.calls, [("exchange_code", "AAA")])

    def test_failed_exchange_keeps_previous_token(self):
        gateway = FakeSpotifyGateway()
        gateway.fail_exchange = True
        tokens = TokenManager(gateway, refresh_token="old-refresh")

        with self.assertRaises(UpstreamAuthError):
            tokens.exchange_code_for_refresh_token("AAA")
        self.assertEqual(tokens.refresh_token, "old-refresh")

    def test_response_without_refresh_token_is_an_error(self):
        gateway = FakeSpotifyGateway(refresh_token=None)
        tokens = TokenManager(gateway, refresh_token="old-refresh")

        with self.assertRaises(UpstreamAuthError):
            tokens.exchange_code_for_refresh_token("AAA")
        self.assertEqual(tokens.refresh_token, "old-refresh")


class TestAccessToken(unittest.TestCase):
    def test_no_refresh_token_fails_without_calling_upstream(self):
        gateway = FakeSpotifyGateway()
        tokens = TokenManager(gateway)

        self.assertFalse(tokens.is_authenticated)
        with self.assertRaises(UpstreamAuthError):
            tokens.get_access_token()
        self.assertEqual(gateway.calls, [])

    def test_every_call_trades_the_refresh_token(self):
        gateway = FakeSpotifyGateway()
        tokens = TokenManager(gateway, refresh_token="rt")

        first = tokens.get_access_token()
        second = tokens.get_access_token()
        self.assertNotEqual(first, second)
        self.assertEqual(gateway.calls, [("refresh_access_token", "rt"), ("refresh_access_token", "rt")])

    def test_rejected_refresh_keeps_token(self):
        gateway = FakeSpotifyGateway()
        gateway.fail_refresh = True
        tokens = TokenManager(gateway, refresh_token="rt")

        with self.assertRaises(UpstreamAuthError):
            tokens.get_access_token()
        self.assertTrue(tokens.is_authenticated)


class TestDisplayToken(unittest.TestCase):
    def test_preview(self):
        self.assertEqual(preview_token("abcdefghijklmnop"), "abcdefghij...")
        self.assertEqual(preview_token(""), "Not available")
        self.assertEqual(preview_token(None), "Not available")

    def test_reveal(self):
        tokens = TokenManager(FakeSpotifyGateway(), refresh_token="abcdefghijklmnop")
        self.assertEqual(tokens.display_token(reveal=True), "abcdefghijklmnop")
        self.assertEqual(tokens.display_token(), "abcdefghij...")

    def test_reveal_without_token(self):
        tokens = TokenManager(FakeSpotifyGateway())
        self.assertEqual(tokens.display_token(reveal=True), "Not available")


if __name__ == "__main__":
    unittest.main()
