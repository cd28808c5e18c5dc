"""
Login and registration policy helpers.

Small pieces of the login/registration flow that depend only on the
configured login type, registration type and password policy. Rendering
the forms and storing users belong to the host.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from .config import RouterSettings
from .routing.context import RequestContext

_USER_RE = re.compile(r"[^a-z0-9 _.\-@]", re.IGNORECASE)

PASSWORD_NOTICE = (
    "If you have already set your own password, you may disregard this email "
    "and use the password you have already set."
)


@dataclass(frozen=True)
class FormError:
    code: str
    message: str


def sanitize_user(username: str) -> str:
    username = re.sub(r"<[^>]*>", "", username or "")
    username = _USER_RE.sub("", username)
    return re.sub(r"\s+", " ", username).strip()


def username_label(action: Optional[str], settings: RouterSettings) -> str:
    if action == "register":
        return "Username"
    if settings.is_username_login_type():
        return "Username"
    if settings.is_email_login_type():
        return "Email"
    return "Username or Email Address"


def validate_new_user_password(form: Mapping[str, Any], settings: RouterSettings) -> List[FormError]:
    errors: List[FormError] = []
    if not settings.allow_user_passwords:
        return errors

    pass1 = form.get("user_pass1") or ""
    pass2 = form.get("user_pass2") or ""
    if not pass1 or not pass2:
        errors.append(FormError("empty_password", "Please enter a password."))
    elif "\\" in pass1:
        errors.append(FormError("password_backslash", 'Passwords may not contain the character "\\".'))
    elif pass1 != pass2:
        errors.append(FormError("password_mismatch", "Please enter the same password in both password fields."))
    return errors


def resolve_user_login(sanitized_login: str, context: RequestContext, settings: RouterSettings) -> str:
    """Use the email address as the login for email-type registration."""
    if not (settings.is_email_registration_type() and context.is_post_request):
        return sanitized_login

    user_login = context.get_request_value("user_login", "post")
    user_email = context.get_request_value("user_email", "post")
    if user_email and sanitize_user(user_login) == sanitized_login:
        return sanitize_user(user_email)
    return sanitized_login


def enforce_login_type(user: Any, settings: RouterSettings) -> Any:
    """An email-only login with no matching user is an invalid email."""
    if settings.is_email_login_type() and user is None:
        return FormError("invalid_email", "Invalid email address.")
    return user


def new_user_password(context: RequestContext, settings: RouterSettings) -> Optional[str]:
    """The password the user picked at registration, when that is allowed."""
    if not settings.allow_user_passwords:
        return None
    return context.get_request_value("user_pass1", "post") or None


def add_password_notice(email: Dict[str, str], settings: RouterSettings) -> Dict[str, str]:
    """Tell users who picked their own password that the set-password link is optional."""
    if settings.allow_user_passwords:
        email = dict(email)
        email["message"] += "\r\n" + PASSWORD_NOTICE
    return email


def new_user_notification_email(
    user_login: str,
    user_email: str,
    password_url: str,
    settings: RouterSettings,
) -> Dict[str, str]:
    email = {
        "to": user_email,
        "subject": "Login Details",
        "message": (
            f"Username: {user_login}\r\n\r\n"
            "To set your password, visit the following address:\r\n\r\n"
            f"{password_url}\r\n"
        ),
    }
    return add_password_notice(email, settings)


@dataclass
class FormResult:
    """Outcome of a submitted login, registration or activation form."""

    action: str
    errors: List[FormError] = field(default_factory=list)
    user_login: Optional[str] = None
    user_email: Optional[str] = None
    password: Optional[str] = None
    notification: Optional[Dict[str, str]] = None
    auto_login: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors


def process_login(context: RequestContext, settings: RouterSettings, **kwargs: Any) -> FormResult:
    result = FormResult("login")
    login = str(context.get_request_value("log", "post") or "").strip()
    if not login:
        result.errors.append(FormError("empty_username", "The username field is empty."))
        return result

    # Checking the password is the host's job; only the identifier shape is known here
    user = login if "@" in login or not settings.is_email_login_type() else None
    outcome = enforce_login_type(user, settings)
    if isinstance(outcome, FormError):
        result.errors.append(outcome)
    else:
        result.user_login = login
    return result


def process_registration(
    context: RequestContext,
    settings: RouterSettings,
    password_url: str = "",
    **kwargs: Any,
) -> FormResult:
    result = FormResult("register")
    user_email = str(context.get_request_value("user_email", "post") or "").strip()
    sanitized = sanitize_user(str(context.get_request_value("user_login", "post") or ""))
    user_login = resolve_user_login(sanitized, context, settings)

    if not user_login:
        result.errors.append(FormError("empty_username", "Please enter a username."))
    if not user_email:
        result.errors.append(FormError("empty_email", "Please type your email address."))
    result.errors.extend(validate_new_user_password(context.form, settings))

    result.user_login = user_login or None
    result.user_email = user_email or None
    if result.ok:
        result.password = new_user_password(context, settings)
        result.notification = new_user_notification_email(user_login, user_email, password_url, settings)
        result.auto_login = settings.allow_auto_login
    return result


def process_activation(context: RequestContext, settings: RouterSettings, **kwargs: Any) -> FormResult:
    result = FormResult("activate")
    if not context.get_request_value("key"):
        result.errors.append(FormError("empty_key", "Please enter your activation key."))
        return result

    user_login = sanitize_user(str(context.get_request_value("user_login", "post") or ""))
    result.user_login = user_login or None
    result.auto_login = settings.allow_auto_login and bool(user_login)
    return result


FORM_PROCESSORS: Dict[str, Callable[..., FormResult]] = {
    "login": process_login,
    "register": process_registration,
    "activate": process_activation,
}


def process_form(
    action: str,
    context: RequestContext,
    settings: RouterSettings,
    password_url: str = "",
) -> Optional[FormResult]:
    """Run the form handling for a POST to `action`; None when there is none."""
    processor = FORM_PROCESSORS.get(action)
    if processor is None or not context.is_post_request:
        return None
    return processor(context, settings, password_url=password_url)
