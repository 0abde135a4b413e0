"""Identity module: sessions, credentials, membership."""

from .credentials import Credentials
from .handles import generate_handle, is_valid_handle
from .mailer import IMailer, LogMailer, SMTPMailer, mailer_from_env
from .resolver import IdentityResolver, IIdentityResolver, MembershipRole

__all__ = [
    "Credentials",
    "generate_handle",
    "is_valid_handle",
    "IMailer",
    "LogMailer",
    "SMTPMailer",
    "mailer_from_env",
    "IdentityResolver",
    "IIdentityResolver",
    "MembershipRole",
]
