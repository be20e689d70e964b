"""
String-format rules: email, regex, alpha, alpha_num, url, ip, uuid, json.

Values are checked in their string form. json only accepts actual strings,
since any other Python value is already decoded data.
"""

import ipaddress
import json
import re
import uuid
from urllib.parse import urlparse

from email_validator import EmailNotValidError, validate_email

from .base import ValidationRule

_UUID = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")
_URL_SCHEMES = {"http", "https", "ftp", "ftps"}


class EmailRule(ValidationRule):
    """Address syntax only, checked with email-validator; no DNS lookups."""

    name = "email"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        try:
            validate_email(str(value), check_deliverability=False)
        except EmailNotValidError:
            return self.message("email", field_name)
        return None


class RegexRule(ValidationRule):
    """
    The whole value must match the pattern.

    Usage: regex:^[A-Z]{3}-\\d+$

    Everything after the first ':' is the pattern, so patterns may contain
    colons. Patterns containing '|' must be given in list form.
    """

    name = "regex"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        if not parameter:
            raise self.config_error("requires a pattern (e.g., 'regex:^[a-z]+$')")
        try:
            pattern = re.compile(parameter)
        except re.error as e:
            raise self.config_error(f"pattern is invalid: {parameter!r} ({e})") from e
        if not pattern.fullmatch(str(value)):
            return self.message("regex", field_name)
        return None


class AlphaRule(ValidationRule):
    name = "alpha"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        if not str(value).isalpha():
            return self.message("alpha", field_name)
        return None


class AlphaNumRule(ValidationRule):
    name = "alpha_num"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        if not str(value).isalnum():
            return self.message("alpha_num", field_name)
        return None


class UrlRule(ValidationRule):
    """Absolute http(s)/ftp(s) URL with a host."""

    name = "url"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        text = str(value)
        try:
            parsed = urlparse(text)
        except ValueError:
            return self.message("url", field_name)
        if parsed.scheme.lower() not in _URL_SCHEMES or not parsed.netloc or " " in text:
            return self.message("url", field_name)
        return None


class IpRule(ValidationRule):
    """
    IPv4 or IPv6 address.

    Usage: ip, ip:v4, ip:v6
    """

    name = "ip"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        version = (parameter or "").strip().lower()
        if version not in ("", "v4", "v6"):
            raise self.config_error(f"parameter must be 'v4' or 'v6': {parameter!r}")

        key = f"ip.{version}" if version else "ip"
        try:
            address = ipaddress.ip_address(str(value))
        except ValueError:
            return self.message(key, field_name)
        if version and address.version != int(version[1]):
            return self.message(key, field_name)
        return None


class UuidRule(ValidationRule):
    """Canonical 8-4-4-4-12 hex form, any version."""

    name = "uuid"

    def validate(self, field_name, value, parameter, context=None):
        if value is None or isinstance(value, uuid.UUID):
            return None
        if not _UUID.fullmatch(str(value)):
            return self.message("uuid", field_name)
        return None


class JsonRule(ValidationRule):
    name = "json"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        if not isinstance(value, (str, bytes, bytearray)):
            return self.message("json", field_name)
        try:
            json.loads(value)
        except ValueError:
            return self.message("json", field_name)
        return None
