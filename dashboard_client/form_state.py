"""
Contact form validation state.

The form owns a single ContactFormState and hands each field its own
accessors, so fields never reach for shared state on their own.
"""

import re
from typing import Callable, Dict, List, NamedTuple, Optional

from .api import APIError, SubmissionsAPI

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


class Rule(NamedTuple):
    test: Callable[[str], bool]
    message: str


def required(label: str) -> Rule:
    return Rule(lambda value: bool(value.strip()), f"{label} is required")


def max_length(limit: int) -> Rule:
    return Rule(lambda value: len(value) <= limit, f"Must be {limit} characters or fewer")


def email_format() -> Rule:
    return Rule(lambda value: not value or bool(EMAIL_RE.match(value.strip())),
                "Please enter a valid email address")


CONTACT_RULES: Dict[str, List[Rule]] = {
    'name': [required('Name'), max_length(100)],
    'email': [required('Email'), email_format(), max_length(100)],
    'subject': [required('Subject'), max_length(200)],
    'message': [required('Message'), max_length(2000)],
}


class FieldAccessors(NamedTuple):
    get_value: Callable[[], str]
    set_value: Callable[[str], None]
    get_errors: Callable[[], List[str]]
    mark_touched: Callable[[], None]
    is_touched: Callable[[], bool]


class ContactFormState:
    """
    Values, errors and touched flags for the contact form.

    Errors are recomputed on every change; `validate()` checks the whole
    form before submit.
    """

    def __init__(self, rules: Optional[Dict[str, List[Rule]]] = None):
        self.rules = rules or CONTACT_RULES
        self.values = {name: '' for name in self.rules}
        self.errors = {name: [] for name in self.rules}
        self.touched = {name: False for name in self.rules}
        self.submitting = False

    def field_accessors(self, name: str) -> FieldAccessors:
        if name not in self.rules:
            raise KeyError(f"Unknown field: {name}")
        return FieldAccessors(
            get_value=lambda: self.values[name],
            set_value=lambda value: self.set_value(name, value),
            get_errors=lambda: list(self.errors[name]),
            mark_touched=lambda: self.mark_touched(name),
            is_touched=lambda: self.touched[name],
        )

    def set_value(self, name: str, value: str):
        self.values[name] = value
        self.errors[name] = self.validate_field(name)

    def mark_touched(self, name: str):
        self.touched[name] = True

    def validate_field(self, name: str) -> List[str]:
        value = self.values[name]
        return [rule.message for rule in self.rules[name] if not rule.test(value)]

    def validate(self) -> bool:
        """Validate every field and mark all of them touched."""
        for name in self.rules:
            self.errors[name] = self.validate_field(name)
            self.touched[name] = True
        return not any(self.errors.values())

    @property
    def first_invalid_field(self) -> Optional[str]:
        return next((name for name in self.rules if self.errors[name]), None)

    def payload(self) -> Dict[str, str]:
        return {name: value.strip() for name, value in self.values.items()}

    def submit(self, api: SubmissionsAPI) -> bool:
        """
        Post the form when it is valid. Server-side field errors are copied
        back onto the matching fields; other API errors propagate.
        """
        if self.submitting or not self.validate():
            return False

        self.submitting = True
        try:
            api.submit_contact(self.payload())
        except APIError as e:
            if e.status_code == 400 and e.fields:
                for name, messages in e.fields.items():
                    if name in self.errors:
                        self.errors[name] = [str(m) for m in messages]
                return False
            raise
        finally:
            self.submitting = False

        return True
