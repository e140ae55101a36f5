"""
Two-step login execution.

The executor moves through an explicit set of states:

    AWAITING_INITIAL_FETCH -> AWAITING_SUBMISSION -> COMPLETE
                 |                     |
                 +------> FAILED <-----+

Step one loads the login page to collect cookies and the form. Step two
submits the mapped credentials. Network I/O happens only in those two steps;
form analysis, mapping and success classification run synchronously between
them. A failure in step one aborts the attempt.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional

import httpx

from autologin.config import Config
from autologin.constants import (
    FORM_CONTENT_TYPE,
    LOGIN_SUCCESS_MESSAGE,
    LOGIN_UNCERTAIN_MESSAGE,
    SERVER_ERROR_STATUS,
)
from autologin.credential_mapper import CredentialMapper
from autologin.errors import UpstreamTransportError
from autologin.form_analyzer import FormAnalyzer
from autologin.models import Credentials, LoginForm, LoginResult, Session
from autologin.resource_extractor import ResourceExtractor, extract_body_text, extract_title
from autologin.session_store import SessionStore
from autologin.success_classifier import is_login_successful
from autologin.transport import (
    browser_headers,
    describe_error,
    final_url_of,
    get_set_cookies,
    open_client,
    origin_of,
)

logger = logging.getLogger(__name__)


class LoginState(str, Enum):
    """Progress of a single login attempt."""

    AWAITING_INITIAL_FETCH = "awaiting_initial_fetch"
    AWAITING_SUBMISSION = "awaiting_submission"
    COMPLETE = "complete"
    FAILED = "failed"


class LoginExecutor:
    """Logs into a site by fetching its login page and submitting the form.

    One executor handles one attempt; create a new instance per login.
    """

    def __init__(
        self,
        store: SessionStore,
        config: Optional[Config] = None,
        analyzer: Optional[FormAnalyzer] = None,
        mapper: Optional[CredentialMapper] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            store: Session store receiving the resulting session
            config: Timeouts, redirect bound and user agent
            analyzer: Login form locator
            mapper: Credential-to-field mapper
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.store = store
        self.config = config or Config()
        self.analyzer = analyzer or FormAnalyzer()
        self.mapper = mapper or CredentialMapper()
        self.extractor = ResourceExtractor()
        self.transport = transport

        self.state = LoginState.AWAITING_INITIAL_FETCH
        self.history: List[LoginState] = [self.state]
        self.error: Optional[UpstreamTransportError] = None

    def _transition(self, state: LoginState) -> None:
        logger.debug(f"Login state: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def _fail(self, error: UpstreamTransportError) -> UpstreamTransportError:
        self.error = error
        self._transition(LoginState.FAILED)
        return error

    async def execute(
        self,
        url: str,
        credentials: Credentials,
        overrides: Optional[Dict[str, str]] = None,
    ) -> LoginResult:
        """Run the full login attempt.

        Args:
            url: Login page URL
            credentials: Identifier and secret to submit
            overrides: Explicit field mapping replacing detection when non-empty

        Returns:
            LoginResult carrying the stored session and the success estimate

        Raises:
            UpstreamTransportError: If either network step fails
            RuntimeError: If the executor was already used
        """
        if self.state is not LoginState.AWAITING_INITIAL_FETCH:
            raise RuntimeError(f"Login executor already used (state: {self.state.value})")

        logger.info(f"Attempting login to: {url}")

        page_html, initial_cookies = await self._fetch_login_page(url)

        form = self.analyzer.analyze(page_html, url)
        self.mapper.suggest(form.fields, credentials)
        payload = self.mapper.map(form.fields, credentials, overrides)
        self._transition(LoginState.AWAITING_SUBMISSION)

        response = await self._submit(url, form, payload, initial_cookies)

        session = Session(
            source_url=url,
            cookies=get_set_cookies(response) or initial_cookies,
            final_url=final_url_of(response, form.action_url),
            response_headers=dict(response.headers),
        )
        self.store.put(session)

        html = response.text
        soup = self.extractor.parse(html)
        title = extract_title(soup)
        success = is_login_successful(extract_body_text(soup), title)

        self._transition(LoginState.COMPLETE)
        logger.info(
            f"Login to {url} finished with status {response.status_code}, "
            f"success={success}, session={session.id}"
        )

        return LoginResult(
            success=success,
            session=session,
            form=form,
            title=title,
            html=html,
            message=LOGIN_SUCCESS_MESSAGE if success else LOGIN_UNCERTAIN_MESSAGE,
        )

    async def _fetch_login_page(self, url: str) -> tuple[str, List[str]]:
        """Step one: load the login page. Any non-2xx status aborts the attempt."""
        try:
            async with open_client(
                self.config.fetch_timeout, self.config.max_redirects, self.transport
            ) as client:
                response = await client.get(url, headers=browser_headers(self.config.user_agent))
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Login page fetch failed for {url}: {describe_error(e)}")
            status = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
            raise self._fail(
                UpstreamTransportError(
                    "Login failed", details=describe_error(e), url=url, status_code=status
                )
            ) from e

        return response.text, get_set_cookies(response)

    async def _submit(
        self,
        url: str,
        form: LoginForm,
        payload: Dict[str, str],
        cookies: List[str],
    ) -> httpx.Response:
        """Step two: submit the form. Statuses below 500 are returned for inspection."""
        headers = browser_headers(self.config.user_agent)
        headers.update({
            "Content-Type": FORM_CONTENT_TYPE,
            "Origin": origin_of(url),
            "Referer": url,
        })

        logger.info(f"Submitting {form.method} {form.action_url} with fields {list(payload)}")

        request_kwargs = {"headers": headers}
        if form.method == "GET":
            request_kwargs["params"] = payload
        else:
            request_kwargs["data"] = payload

        try:
            async with open_client(
                self.config.submit_timeout,
                self.config.max_redirects,
                self.transport,
                cookies=cookies,
                cookie_url=form.action_url,
            ) as client:
                response = await client.request(form.method, form.action_url, **request_kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Login submission failed for {form.action_url}: {describe_error(e)}")
            raise self._fail(
                UpstreamTransportError("Login failed", details=describe_error(e), url=form.action_url)
            ) from e

        if response.status_code >= SERVER_ERROR_STATUS:
            logger.error(f"Login submission to {form.action_url} returned {response.status_code}")
            raise self._fail(
                UpstreamTransportError(
                    "Login failed",
                    details=f"Request failed with status code {response.status_code}",
                    url=form.action_url,
                    status_code=response.status_code,
                )
            )

        return response
