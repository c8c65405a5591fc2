"""Google account authorization and HTTP transport setup."""

import logging
from pathlib import Path

import google_auth_httplib2
import httplib2
from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from .config import TransportOptions
from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/drive.readonly"]


def build_http(transport: TransportOptions) -> httplib2.Http:
    """Create the HTTP client for one run from its transport options."""
    kwargs = {
        "timeout": transport.timeout,
        "disable_ssl_certificate_validation": transport.bypass_tls_verification,
    }
    if transport.proxy_url:
        kwargs["proxy_info"] = httplib2.proxy_info_from_url(transport.proxy_url)

    if transport.bypass_tls_verification:
        logger.warning("TLS certificate validation is disabled for this run")

    return httplib2.Http(**kwargs)


def load_credentials(token_file: str | Path, http: httplib2.Http) -> Credentials:
    """
    Load stored user credentials, refreshing them if needed.

    Args:
        token_file: Authorized-user JSON written by ``run_oauth_flow``
        http: Transport used for the token refresh

    Returns:
        Valid credentials

    Raises:
        AuthenticationError: If the token is missing, unreadable or rejected
    """
    path = Path(token_file)
    if not path.exists():
        raise AuthenticationError(
            f"No token found at {path}. Run 'gdoc-backup auth' first."
        )

    try:
        creds = Credentials.from_authorized_user_file(str(path), SCOPES)
    except ValueError as e:
        raise AuthenticationError(f"Token file {path} is invalid: {e}") from e

    if creds.valid:
        return creds

    if not creds.refresh_token:
        raise AuthenticationError(
            f"Token in {path} has expired and cannot be refreshed. Run 'gdoc-backup auth'."
        )

    logger.info("Refreshing expired credentials")
    try:
        creds.refresh(google_auth_httplib2.Request(http))
    except RefreshError as e:
        raise AuthenticationError(f"Token refresh rejected: {e}") from e

    path.write_text(creds.to_json(), encoding="utf-8")
    return creds


def run_oauth_flow(credentials_file: str | Path, token_file: str | Path) -> Credentials:
    """
    Run the browser-based consent flow and store the resulting token.

    Args:
        credentials_file: OAuth client secrets JSON (Desktop app)
        token_file: Where to write the authorized-user token

    Returns:
        The new credentials
    """
    secrets = Path(credentials_file)
    if not secrets.exists():
        raise AuthenticationError(
            f"Client credentials not found at {secrets}. Download a Desktop OAuth "
            "client JSON from https://console.cloud.google.com/apis/credentials"
        )

    flow = InstalledAppFlow.from_client_secrets_file(str(secrets), SCOPES)
    creds = flow.run_local_server(port=0)

    Path(token_file).write_text(creds.to_json(), encoding="utf-8")
    logger.info("Saved token to %s", token_file)
    return creds
