"""Heuristic website login with session reuse and resource extraction."""

__version__ = "0.1.0"

from autologin.form_analyzer import FormAnalyzer
from autologin.credential_mapper import (
    CLASSIFICATION_RULES,
    ClassificationRule,
    CredentialMapper,
    classify_field,
)
from autologin.success_classifier import is_login_successful, success_indicators
from autologin.session_store import SessionStore, new_session_id
from autologin.login_executor import LoginExecutor, LoginState
from autologin.protected_fetcher import ProtectedFetcher, resolve_target
from autologin.resource_extractor import ResourceExtractor
from autologin.models import (
    FormField,
    LoginForm,
    Credentials,
    Session,
    FormDescriptor,
    PageResources,
    ProtectedDocument,
    LoginResult,
)
from autologin.errors import (
    AutoLoginError,
    ValidationError,
    SessionError,
    UpstreamTransportError,
    DownloadError,
)
from autologin.config import Config

__all__ = [
    # Core
    "FormAnalyzer",
    "CredentialMapper",
    "ClassificationRule",
    "CLASSIFICATION_RULES",
    "classify_field",
    "is_login_successful",
    "success_indicators",
    "SessionStore",
    "new_session_id",
    "LoginExecutor",
    "LoginState",
    "ProtectedFetcher",
    "resolve_target",
    "ResourceExtractor",
    # Models
    "FormField",
    "LoginForm",
    "Credentials",
    "Session",
    "FormDescriptor",
    "PageResources",
    "ProtectedDocument",
    "LoginResult",
    # Errors
    "AutoLoginError",
    "ValidationError",
    "SessionError",
    "UpstreamTransportError",
    "DownloadError",
    "Config",
]
