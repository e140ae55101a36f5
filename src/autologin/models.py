"""Data models for login automation."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from autologin.constants import DEFAULT_LOGIN_METHOD, ELLIPSIS, RESPONSE_PREVIEW_LENGTH


@dataclass
class FormField:
    """A named input captured from a login form."""

    name: str
    field_type: Optional[str] = None
    original_value: str = ""
    suggested_value: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.field_type,
            "originalValue": self.original_value,
            "suggestedValue": self.suggested_value,
        }


@dataclass
class LoginForm:
    """The login form located on a page.

    ``action_url`` is always absolute. ``raw_action`` keeps the attribute as
    written in the page (or the page URL when the form had none).
    """

    action_url: str
    method: str = DEFAULT_LOGIN_METHOD
    fields: list[FormField] = field(default_factory=list)
    raw_action: Optional[str] = None

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.raw_action if self.raw_action is not None else self.action_url,
            "method": self.method,
            "inputs": {f.name: f.to_dict() for f in self.fields},
        }


@dataclass
class Credentials:
    """Caller-supplied login values. Never interpreted beyond substitution."""

    identifier: str
    secret: str

    def __repr__(self) -> str:
        return f"Credentials(identifier={self.identifier!r}, secret='***')"


@dataclass
class Session:
    """Cookies and final location captured after a login attempt."""

    source_url: str
    final_url: str
    cookies: list[str] = field(default_factory=list)
    response_headers: dict[str, str] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)
    id: Optional[str] = None


@dataclass
class FormDescriptor:
    """A form found on a protected page, reported as-is."""

    action: Optional[str]
    method: str
    inputs: list[dict[str, Optional[str]]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "method": self.method,
            "inputs": [dict(i) for i in self.inputs],
        }


@dataclass
class PageResources:
    """Categorized resources referenced by a fetched document."""

    scripts: list[str] = field(default_factory=list)
    inline_scripts: list[str] = field(default_factory=list)
    styles: list[str] = field(default_factory=list)
    forms: list[FormDescriptor] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "scripts": list(self.scripts),
            "inlineScripts": list(self.inline_scripts),
            "styles": list(self.styles),
            "forms": [f.to_dict() for f in self.forms],
            "images": list(self.images),
            "links": list(self.links),
        }


@dataclass
class ProtectedDocument:
    """A page fetched with a stored session's cookies."""

    url: str
    status_code: int
    html: str
    title: str = ""
    resources: PageResources = field(default_factory=PageResources)

    @property
    def full_size(self) -> int:
        return len(self.html)


@dataclass
class LoginResult:
    """Outcome of a complete login attempt."""

    success: bool
    session: Session
    form: LoginForm
    title: str
    html: str
    message: str

    @property
    def response_preview(self) -> str:
        preview = self.html[:RESPONSE_PREVIEW_LENGTH]
        if len(self.html) > RESPONSE_PREVIEW_LENGTH:
            preview += ELLIPSIS
        return preview

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "sessionId": self.session.id,
            "message": self.message,
            "finalUrl": self.session.final_url,
            "title": self.title,
            "cookies": list(self.session.cookies),
            "detectedForm": self.form.to_dict(),
            "responsePreview": self.response_preview,
        }
