"""Tests for the authentication headers in sipgrammar.headers.auth."""

import pytest

from sipgrammar.common import Extension
from sipgrammar.errors import ParseError
from sipgrammar.headers import (
    Algorithm,
    AlgorithmKind,
    AuthenticationInfoHeader,
    AuthorizationHeader,
    AuthParam,
    CNonce,
    DigestChallenge,
    DigestCredentials,
    DigestUri,
    Domain,
    NextNonce,
    Nonce,
    NonceCount,
    Opaque,
    OtherChallenge,
    OtherCredentials,
    ProxyAuthenticateHeader,
    ProxyAuthorizationHeader,
    Qop,
    QopOptions,
    QopValue,
    Realm,
    ResponseAuth,
    ResponseDigest,
    Stale,
    Username,
    WWWAuthenticateHeader,
    parse_header,
)


class TestChallenge:
    def test_digest(self) -> None:
        header = parse_header(
            'WWW-Authenticate: Digest realm="atlanta.com", domain="sip:boxesbybob.com /sub", '
            'qop="auth,auth-int", nonce="f84f1cec41e6cbe5aea9c8e88d359", opaque="", '
            "stale=FALSE, algorithm=MD5"
        )
        assert isinstance(header, WWWAuthenticateHeader)
        challenge = header.challenge
        assert isinstance(challenge, DigestChallenge)
        assert challenge.scheme == "Digest"
        assert challenge.params == (
            Realm("atlanta.com"),
            Domain(("sip:boxesbybob.com", "/sub")),
            QopOptions((QopValue.AUTH, QopValue.AUTH_INT)),
            Nonce("f84f1cec41e6cbe5aea9c8e88d359"),
            Opaque(""),
            Stale(False),
            Algorithm(AlgorithmKind.MD5),
        )
        assert challenge.get(Realm) == Realm("atlanta.com")
        assert challenge.get(NextNonce) is None

    def test_unknown_param_kept(self) -> None:
        header = parse_header('Proxy-Authenticate: Digest realm="a", charset="UTF-8", qopx=1')
        assert isinstance(header, ProxyAuthenticateHeader)
        assert header.challenge == DigestChallenge(
            (Realm("a"), AuthParam("charset", '"UTF-8"'), AuthParam("qopx", "1"))
        )

    def test_unknown_algorithm(self) -> None:
        header = parse_header("WWW-Authenticate: Digest algorithm=SHA-256")
        assert isinstance(header, WWWAuthenticateHeader)
        assert header.challenge == DigestChallenge((Algorithm(Extension("SHA-256")),))

    def test_qop_option_extension(self) -> None:
        header = parse_header('WWW-Authenticate: Digest qop="auth,auth-conf"')
        assert isinstance(header, WWWAuthenticateHeader)
        assert header.challenge == DigestChallenge(
            (QopOptions((QopValue.AUTH, Extension("auth-conf"))),)
        )

    def test_other_scheme(self) -> None:
        header = parse_header('WWW-Authenticate: Bearer realm="x", scope=y')
        assert isinstance(header, WWWAuthenticateHeader)
        assert header.challenge == OtherChallenge(
            "Bearer", (AuthParam("realm", '"x"'), AuthParam("scope", "y"))
        )

    def test_scheme_needs_params(self) -> None:
        with pytest.raises(ParseError):
            parse_header("WWW-Authenticate: Digest")


class TestCredentials:
    def test_digest_response(self) -> None:
        header = parse_header(
            'Authorization: Digest username="bob", realm="biloxi.com", '
            'nonce="dcd98b7102dd2f0e8b11d0f600bfb0c093", uri="sip:bob@biloxi.com", '
            "qop=auth, nc=00000001, cnonce=\"0a4f113b\", "
            'response="6629fae49393a05397450978507c4ef1", opaque="5ccc069c403ebaf9f0171e9517f40e41"'
        )
        assert isinstance(header, AuthorizationHeader)
        credentials = header.credentials
        assert isinstance(credentials, DigestCredentials)
        assert credentials.params == (
            Username("bob"),
            Realm("biloxi.com"),
            Nonce("dcd98b7102dd2f0e8b11d0f600bfb0c093"),
            DigestUri("sip:bob@biloxi.com"),
            Qop(QopValue.AUTH),
            NonceCount("00000001"),
            CNonce("0a4f113b"),
            ResponseDigest("6629fae49393a05397450978507c4ef1"),
            Opaque("5ccc069c403ebaf9f0171e9517f40e41"),
        )
        assert credentials.get(Username) == Username("bob")

    def test_qop_auth_int_is_not_prefix_matched(self) -> None:
        header = parse_header('Authorization: Digest qop=auth-int, username="a"')
        assert isinstance(header, AuthorizationHeader)
        assert header.credentials == DigestCredentials((Qop(QopValue.AUTH_INT), Username("a")))

    def test_digest_uri_forms(self) -> None:
        header = parse_header('Proxy-Authorization: Digest uri="*", username="a"')
        assert isinstance(header, ProxyAuthorizationHeader)
        assert header.credentials == DigestCredentials((DigestUri("*"), Username("a")))

    def test_malformed_response_digest_falls_back(self) -> None:
        header = parse_header('Authorization: Digest response="ABC"')
        assert isinstance(header, AuthorizationHeader)
        assert header.credentials == DigestCredentials((AuthParam("response", '"ABC"'),))

    def test_scheme_case_insensitive(self) -> None:
        header = parse_header('Authorization: digest username="a"')
        assert isinstance(header, AuthorizationHeader)
        assert header.credentials == DigestCredentials((Username("a"),))

    def test_other_scheme(self) -> None:
        header = parse_header("Authorization: Basic token=QWxhZGRpbg")
        assert isinstance(header, AuthorizationHeader)
        assert header.credentials == OtherCredentials("Basic", (AuthParam("token", "QWxhZGRpbg"),))


class TestAuthenticationInfo:
    def test_params(self) -> None:
        header = parse_header(
            'Authentication-Info: nextnonce="47364c23432d2e131a5fb210812c", qop=auth, '
            'rspauth="0abc", cnonce="0a4f113b", nc=00000001'
        )
        assert header == AuthenticationInfoHeader(
            (
                NextNonce("47364c23432d2e131a5fb210812c"),
                Qop(QopValue.AUTH),
                ResponseAuth("0abc"),
                CNonce("0a4f113b"),
                NonceCount("00000001"),
            )
        )

    def test_unknown_param_rejected(self) -> None:
        with pytest.raises(ParseError):
            parse_header('Authentication-Info: realm="x"')
