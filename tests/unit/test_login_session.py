"""Tests for the LoginSession login flow."""
import aiohttp
import pytest
from storelogin.core.api import LoginSession, APIErrorCodes, StoreAPIError
from storelogin.core.captcha import ArkosePublicKey
from storelogin.core.exceptions import (
    CaptchaSolverMissingError,
    CsrfTokenMissingError,
    LoginAttemptsExceededError,
    MFASecretMissingError,
    MissingSidError,
)

EMAIL = 'player@example.com'
PASSWORD = 'hunter2'
TOTP_SECRET = 'JBSWY3DPEHPK3PXP'


@pytest.fixture
def totp_generator():
    return lambda secret: '123456'


@pytest.fixture
def session(http_client, captcha_solver, totp_generator):
    return LoginSession(
        http_client,
        EMAIL,
        captcha_solver=captcha_solver,
        totp_generator=totp_generator
    )


class TestGetCsrf:
    """Test suite for CSRF negotiation."""

    @pytest.mark.asyncio
    async def test_returns_xsrf_cookie(self, session, csrf_ok):
        assert await session.get_csrf() == 'abc'

    @pytest.mark.asyncio
    async def test_missing_cookie_raises(self, session, router, endpoints, make_response):
        router.add('GET', endpoints.csrf, make_response(cookies={'other': 'x'}))

        with pytest.raises(CsrfTokenMissingError):
            await session.get_csrf()


class TestLogin:
    """Test suite for the credential login decision loop."""

    @pytest.mark.asyncio
    async def test_success_on_first_post(self, session, http_client, csrf_ok, endpoints, make_response, calls_to):
        csrf_ok.add('POST', endpoints.login, make_response({}))

        await session.login(EMAIL, PASSWORD)

        assert len(calls_to(http_client.get, endpoints.csrf)) == 1
        posts = calls_to(http_client.post, endpoints.login)
        assert len(posts) == 1
        assert posts[0].kwargs['headers'] == {'x-xsrf-token': 'abc'}
        assert posts[0].kwargs['json_body'] == {
            'email': EMAIL,
            'password': PASSWORD,
            'captcha': '',
            'rememberMe': True,
        }
        assert http_client.get.call_count == 1
        assert http_client.post.call_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize('attempt', [6, 7, 50])
    async def test_attempt_limit_rejected_without_post(self, session, http_client, attempt):
        with pytest.raises(LoginAttemptsExceededError) as exc_info:
            await session.login(EMAIL, PASSWORD, attempt=attempt)

        assert exc_info.value.attempt == attempt
        http_client.post.assert_not_called()
        http_client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_last_allowed_attempt_still_posts(self, session, http_client, csrf_ok, endpoints, make_response):
        csrf_ok.add('POST', endpoints.login, make_response({}))

        await session.login(EMAIL, PASSWORD, attempt=5)

        assert http_client.post.call_count == 1

    @pytest.mark.asyncio
    async def test_captcha_invalid_solves_and_retries(
        self, session, http_client, captcha_solver, csrf_ok, endpoints,
        make_response, portal_error, calls_to
    ):
        csrf_ok.add(
            'POST', endpoints.login,
            portal_error(APIErrorCodes.CAPTCHA_INVALID),
            make_response({})
        )

        await session.login(EMAIL, PASSWORD, blob='arkose-blob')

        captcha_solver.solve.assert_awaited_once_with(ArkosePublicKey.LOGIN.value, 'arkose-blob')
        posts = calls_to(http_client.post, endpoints.login)
        assert len(posts) == 2
        assert posts[0].kwargs['json_body']['captcha'] == ''
        assert posts[1].kwargs['json_body']['captcha'] == 'solved-token'
        # Every attempt uses a fresh CSRF token
        assert len(calls_to(http_client.get, endpoints.csrf)) == 2

    @pytest.mark.asyncio
    async def test_captcha_solved_once_per_occurrence(
        self, session, http_client, captcha_solver, csrf_ok, endpoints,
        make_response, portal_error
    ):
        captcha_solver.solve.side_effect = ['token-1', 'token-2']
        csrf_ok.add(
            'POST', endpoints.login,
            portal_error(APIErrorCodes.CAPTCHA_INVALID),
            portal_error(APIErrorCodes.CAPTCHA_INVALID),
            make_response({})
        )

        await session.login(EMAIL, PASSWORD)

        assert captcha_solver.solve.await_count == 2
        assert http_client.post.call_args.kwargs['json_body']['captcha'] == 'token-2'

    @pytest.mark.asyncio
    async def test_captcha_without_solver_raises(self, http_client, csrf_ok, endpoints, portal_error):
        csrf_ok.add('POST', endpoints.login, portal_error(APIErrorCodes.CAPTCHA_INVALID))
        session = LoginSession(http_client, EMAIL)

        with pytest.raises(CaptchaSolverMissingError):
            await session.login(EMAIL, PASSWORD)

    @pytest.mark.asyncio
    async def test_session_invalidated_retries_with_same_inputs(
        self, session, http_client, captcha_solver, csrf_ok, endpoints,
        make_response, portal_error, calls_to
    ):
        csrf_ok.add(
            'POST', endpoints.login,
            portal_error('errors.com.epicgames.accountportal.session_invalidated'),
            make_response({})
        )

        await session.login(EMAIL, PASSWORD, captcha='prior-token')

        posts = calls_to(http_client.post, endpoints.login)
        assert len(posts) == 2
        assert posts[0].kwargs['json_body'] == posts[1].kwargs['json_body']
        assert posts[1].kwargs['json_body']['captcha'] == 'prior-token'
        captcha_solver.solve.assert_not_called()

    @pytest.mark.asyncio
    async def test_session_invalidated_bounded_across_chain(
        self, session, http_client, csrf_ok, endpoints, portal_error
    ):
        csrf_ok.add('POST', endpoints.login, portal_error('session_invalidated'))

        with pytest.raises(LoginAttemptsExceededError):
            await session.login(EMAIL, PASSWORD)

        # Attempts 0 through 5 are sent, the 6th retry is refused
        assert http_client.post.call_count == 6

    @pytest.mark.asyncio
    async def test_retry_bound_counts_from_given_attempt(
        self, session, http_client, csrf_ok, endpoints, portal_error
    ):
        csrf_ok.add('POST', endpoints.login, portal_error('session_invalidated'))

        with pytest.raises(LoginAttemptsExceededError):
            await session.login(EMAIL, PASSWORD, attempt=4)

        assert http_client.post.call_count == 2

    @pytest.mark.asyncio
    async def test_repeated_captcha_is_bounded(
        self, session, http_client, captcha_solver, csrf_ok, endpoints, portal_error
    ):
        csrf_ok.add('POST', endpoints.login, portal_error(APIErrorCodes.CAPTCHA_INVALID))

        with pytest.raises(LoginAttemptsExceededError):
            await session.login(EMAIL, PASSWORD)

        assert http_client.post.call_count == 6
        assert captcha_solver.solve.await_count == 6

    @pytest.mark.asyncio
    async def test_mfa_required_performs_mfa_once(
        self, session, http_client, csrf_ok, endpoints, make_response, portal_error, calls_to
    ):
        csrf_ok.add('POST', endpoints.login, portal_error(APIErrorCodes.MFA_REQUIRED))
        csrf_ok.add('POST', endpoints.mfa, make_response({}))

        await session.login(EMAIL, PASSWORD, totp=TOTP_SECRET)

        assert len(calls_to(http_client.post, endpoints.login)) == 1
        mfa_posts = calls_to(http_client.post, endpoints.mfa)
        assert len(mfa_posts) == 1
        assert mfa_posts[0].kwargs['json_body'] == {
            'code': '123456',
            'method': 'authenticator',
            'rememberDevice': True,
        }
        assert mfa_posts[0].kwargs['headers'] == {'x-xsrf-token': 'abc'}

    @pytest.mark.asyncio
    async def test_mfa_failure_propagates_without_retry(
        self, session, http_client, csrf_ok, endpoints, portal_error, calls_to
    ):
        mfa_error = portal_error('errors.com.epicgames.common.two_factor_authentication.code_invalid')
        csrf_ok.add('POST', endpoints.login, portal_error(APIErrorCodes.MFA_REQUIRED))
        csrf_ok.add('POST', endpoints.mfa, mfa_error)

        with pytest.raises(StoreAPIError) as exc_info:
            await session.login(EMAIL, PASSWORD, totp=TOTP_SECRET)

        assert exc_info.value is mfa_error
        assert len(calls_to(http_client.post, endpoints.login)) == 1

    @pytest.mark.asyncio
    async def test_mfa_required_without_secret(
        self, session, http_client, csrf_ok, endpoints, portal_error, calls_to
    ):
        csrf_ok.add('POST', endpoints.login, portal_error(APIErrorCodes.MFA_REQUIRED))

        with pytest.raises(MFASecretMissingError):
            await session.login(EMAIL, PASSWORD)

        assert calls_to(http_client.post, endpoints.mfa) == []

    @pytest.mark.asyncio
    async def test_unknown_error_code_is_rethrown_unchanged(
        self, session, http_client, captcha_solver, csrf_ok, endpoints, portal_error
    ):
        error = portal_error('errors.com.epicgames.accountportal.invalid_account_credentials')
        csrf_ok.add('POST', endpoints.login, error)

        with pytest.raises(StoreAPIError) as exc_info:
            await session.login(EMAIL, PASSWORD)

        assert exc_info.value is error
        assert http_client.post.call_count == 1
        captcha_solver.solve.assert_not_called()

    @pytest.mark.asyncio
    async def test_error_without_code_is_rethrown(self, session, http_client, csrf_ok, endpoints):
        error = StoreAPIError(502, '<html>Bad gateway</html>', endpoints.login)
        csrf_ok.add('POST', endpoints.login, error)

        with pytest.raises(StoreAPIError) as exc_info:
            await session.login(EMAIL, PASSWORD)

        assert exc_info.value is error
        assert http_client.post.call_count == 1

    @pytest.mark.asyncio
    async def test_network_error_is_rethrown(self, session, http_client, csrf_ok, endpoints):
        csrf_ok.add('POST', endpoints.login, aiohttp.ClientConnectionError('connection reset'))

        with pytest.raises(aiohttp.ClientConnectionError):
            await session.login(EMAIL, PASSWORD)

        assert http_client.post.call_count == 1


class TestLoginMFA:
    """Test suite for the second factor step."""

    @pytest.mark.asyncio
    async def test_missing_secret_makes_no_requests(self, session, http_client):
        with pytest.raises(MFASecretMissingError):
            await session.login_mfa(None)

        http_client.get.assert_not_called()
        http_client.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_secret_makes_no_requests(self, session, http_client):
        with pytest.raises(MFASecretMissingError):
            await session.login_mfa('')

        http_client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_uses_totp_generator(self, http_client, csrf_ok, endpoints, make_response):
        seen = []

        def totp(secret):
            seen.append(secret)
            return '654321'

        csrf_ok.add('POST', endpoints.mfa, make_response({}))
        session = LoginSession(http_client, EMAIL, totp_generator=totp)

        await session.login_mfa(TOTP_SECRET)

        assert seen == [TOTP_SECRET]
        assert http_client.post.call_args.kwargs['json_body']['code'] == '654321'


class TestSendVerify:
    """Test suite for email verification."""

    @pytest.mark.asyncio
    async def test_posts_code_with_csrf(self, session, http_client, csrf_ok, endpoints, make_response):
        csrf_ok.add('POST', endpoints.email_verify, make_response(None))

        await session.send_verify('987654')

        http_client.post.assert_awaited_once_with(
            endpoints.email_verify,
            json_body={'verificationCode': '987654'},
            headers={'x-xsrf-token': 'abc'}
        )


class TestRefreshAndSid:
    """Test suite for the SID exchange."""

    @pytest.mark.asyncio
    async def test_missing_sid_returns_false(self, session, http_client, csrf_ok, endpoints, make_response, calls_to):
        csrf_ok.add('GET', endpoints.redirect, make_response({'redirectUrl': 'x', 'sid': None}))

        assert await session.refresh_and_sid(False) is False
        assert calls_to(http_client.get, endpoints.set_sid) == []
        assert calls_to(http_client.get, endpoints.store_homepage) == []

    @pytest.mark.asyncio
    async def test_missing_sid_raises_when_required(self, session, csrf_ok, endpoints, make_response):
        csrf_ok.add('GET', endpoints.redirect, make_response({'sid': None}))

        with pytest.raises(MissingSidError):
            await session.refresh_and_sid(True)

    @pytest.mark.asyncio
    async def test_sid_exchanged_and_store_token_fetched(
        self, session, http_client, config, csrf_ok, endpoints, make_response, calls_to
    ):
        csrf_ok.add('GET', endpoints.redirect, make_response({'sid': 'sid-123'}))
        csrf_ok.add('GET', endpoints.set_sid, make_response(None))
        csrf_ok.add('GET', endpoints.store_homepage, make_response('<html></html>'))

        assert await session.refresh_and_sid(True) is True

        redirect_call = calls_to(http_client.get, endpoints.redirect)[0]
        assert redirect_call.kwargs['params'] == {
            'clientId': config.client_id,
            'redirectUrl': endpoints.store_homepage,
        }
        assert redirect_call.kwargs['headers'] == {'x-xsrf-token': 'abc'}
        assert calls_to(http_client.get, endpoints.set_sid)[0].kwargs['params'] == {'sid': 'sid-123'}
        assert calls_to(http_client.get, endpoints.store_homepage)[0].kwargs['text'] is True


class TestFullLogin:
    """Test suite for the orchestrated login."""

    @pytest.mark.asyncio
    async def test_reuses_existing_session(self, session, http_client, csrf_ok, endpoints, make_response, calls_to):
        csrf_ok.add('GET', endpoints.redirect, make_response({'sid': 'sid-123'}))
        csrf_ok.add('GET', endpoints.set_sid, make_response(None))
        csrf_ok.add('GET', endpoints.store_homepage, make_response(''))

        await session.full_login(EMAIL, PASSWORD, TOTP_SECRET)

        assert calls_to(http_client.get, endpoints.reputation) == []
        http_client.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_fresh_login_sequence(
        self, session, http_client, captcha_solver, csrf_ok, endpoints,
        make_response, portal_error, calls_to
    ):
        csrf_ok.add(
            'GET', endpoints.redirect,
            make_response({'sid': None}),
            make_response({'sid': 'sid-456'})
        )
        csrf_ok.add('GET', endpoints.reputation, make_response({
            'verdict': 'challenge',
            'arkose_data': {'blob': 'blob-from-reputation'},
        }))
        csrf_ok.add(
            'POST', endpoints.login,
            portal_error(APIErrorCodes.CAPTCHA_INVALID),
            make_response({})
        )
        csrf_ok.add('GET', endpoints.set_sid, make_response(None))
        csrf_ok.add('GET', endpoints.store_homepage, make_response(''))

        await session.full_login(EMAIL, PASSWORD, TOTP_SECRET)

        captcha_solver.solve.assert_awaited_once_with(ArkosePublicKey.LOGIN.value, 'blob-from-reputation')
        assert len(calls_to(http_client.get, endpoints.redirect)) == 2
        assert len(calls_to(http_client.post, endpoints.login)) == 2
        assert calls_to(http_client.get, endpoints.set_sid)[0].kwargs['params'] == {'sid': 'sid-456'}

    @pytest.mark.asyncio
    async def test_fresh_login_without_sid_fails(
        self, session, csrf_ok, endpoints, make_response
    ):
        csrf_ok.add('GET', endpoints.redirect, make_response({'sid': None}))
        csrf_ok.add('GET', endpoints.reputation, make_response({'arkose_data': {'blob': 'b'}}))
        csrf_ok.add('POST', endpoints.login, make_response({}))

        with pytest.raises(MissingSidError):
            await session.full_login(EMAIL, PASSWORD)


class TestGetReputation:
    """Test suite for reputation parsing."""

    @pytest.mark.asyncio
    async def test_parses_blob(self, session, router, endpoints, make_response):
        router.add('GET', endpoints.reputation, make_response({
            'verdict': 'allow',
            'arkose_data': {'blob': 'abc123'},
        }))

        reputation = await session.get_reputation()

        assert reputation.verdict == 'allow'
        assert reputation.blob == 'abc123'

    @pytest.mark.asyncio
    async def test_missing_arkose_data(self, session, router, endpoints, make_response):
        router.add('GET', endpoints.reputation, make_response({'verdict': 'allow'}))

        reputation = await session.get_reputation()

        assert reputation.blob is None
        assert reputation.raw == {'verdict': 'allow'}
