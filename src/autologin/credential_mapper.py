"""
Credential-to-field mapping for detected login forms.

Each field name is matched, lower-cased, against an ordered list of rules.
The first matching rule decides the submitted value. Order matters: a field
named ``user_csrf_token`` is treated as the identifier field because the
identifier rule comes first. Names mentioning ``pass`` are never identifier
fields, so ``user_password`` carries the secret.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from autologin.models import Credentials, FormField

logger = logging.getLogger(__name__)


Predicate = Callable[[str], bool]
ValueSelector = Callable[[FormField, Credentials], str]


def _contains_any(*needles: str, unless: tuple = ()) -> Predicate:
    def predicate(name: str) -> bool:
        if any(excluded in name for excluded in unless):
            return False
        return any(needle in name for needle in needles)
    return predicate


@dataclass(frozen=True)
class ClassificationRule:
    """A (predicate, value selector) pair applied to a lower-cased field name."""

    role: str  # identifier, secret, token
    matches: Predicate
    select: ValueSelector


# Evaluated in order; first match wins
CLASSIFICATION_RULES: List[ClassificationRule] = [
    ClassificationRule(
        role="identifier",
        # user_password, login_pass: the secret rule takes these
        matches=_contains_any("email", "user", "login", unless=("pass",)),
        select=lambda f, creds: creds.identifier,
    ),
    ClassificationRule(
        role="secret",
        matches=_contains_any("pass"),
        select=lambda f, creds: creds.secret,
    ),
    ClassificationRule(
        role="token",
        matches=_contains_any("csrf", "token"),
        select=lambda f, creds: f.original_value,
    ),
]


def classify_field(
    name: str, rules: Optional[List[ClassificationRule]] = None
) -> Optional[ClassificationRule]:
    """Return the first rule matching a field name, or None."""
    lowered = name.lower()
    for rule in (CLASSIFICATION_RULES if rules is None else rules):
        if rule.matches(lowered):
            return rule
    return None


def _fallback_value(field: FormField) -> str:
    return field.suggested_value if field.suggested_value != "" else field.original_value


class CredentialMapper:
    """Turns form fields and credentials into a submission payload."""

    def __init__(self, rules: Optional[List[ClassificationRule]] = None):
        self.rules = rules if rules is not None else CLASSIFICATION_RULES

    def _classify(self, name: str) -> Optional[ClassificationRule]:
        return classify_field(name, self.rules)

    def suggest(self, fields: List[FormField], credentials: Credentials) -> List[FormField]:
        """Record each field's classified value as its ``suggested_value``.

        Fields matching no rule keep an empty suggestion.

        Returns:
            The same field list, annotated in place
        """
        for field in fields:
            rule = self._classify(field.name)
            if rule is not None:
                field.suggested_value = rule.select(field, credentials)
        return fields

    def map(
        self,
        fields: List[FormField],
        credentials: Credentials,
        overrides: Optional[Dict[str, str]] = None,
    ) -> Dict[str, str]:
        """Build the submission payload.

        Args:
            fields: Form fields in document order
            credentials: Identifier and secret to substitute
            overrides: Explicit field-name to value mapping. When non-empty it
                is used verbatim and no heuristics run.

        Returns:
            Ordered mapping of field name to submitted value
        """
        if overrides:
            logger.info(f"Using {len(overrides)} caller-supplied fields, skipping detection")
            return dict(overrides)

        payload: Dict[str, str] = {}
        for field in fields:
            rule = self._classify(field.name)
            if rule is not None:
                payload[field.name] = rule.select(field, credentials)
            else:
                payload[field.name] = _fallback_value(field)

        logger.debug(f"Login data: {mask_payload(payload, credentials)}")
        return payload


def mask_payload(payload: Dict[str, str], credentials: Credentials) -> Dict[str, str]:
    """Copy of a payload with the secret replaced, safe to log."""
    return {
        key: ("***" if credentials.secret and value == credentials.secret else value)
        for key, value in payload.items()
    }
