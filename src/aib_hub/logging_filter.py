"""
Logging Filter for PII Redaction
Redacts emails, phone numbers, tokens and passwords before records are written
"""
import hashlib
import logging
import re


class PIIRedactionFilter(logging.Filter):
    """
    Logging filter that redacts PII and secrets from log messages

    Redacts:
    - Email addresses (sign-up, invitations, contact messages)
    - Phone and WhatsApp numbers
    - Bearer tokens and JWTs
    - Passwords
    """

    EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')
    # +91 98765 43210, 9876543210, 98765-43210
    PHONE_PATTERN = re.compile(r'(?<![\w/])\+?\d[\d\s-]{8,}\d\b')

    TOKEN_PATTERNS = [
        re.compile(r'(bearer\s+)([A-Za-z0-9_\-\.]{20,})', re.IGNORECASE),
        re.compile(r'((?:access[_-]?)?token["\']?\s*[:=]\s*["\']?)([A-Za-z0-9_\-\.]{20,})', re.IGNORECASE),
        re.compile(r'(eyJ[A-Za-z0-9_\-]+\.)([A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+)'),
    ]

    PASSWORD_PATTERNS = [
        re.compile(r'(password|passwd|pwd)(["\']?\s*[:=]\s*["\']?)([^\s"\',]{4,})', re.IGNORECASE),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Rewrite the record in place; records are never dropped"""
        if isinstance(record.msg, str):
            record.msg = self.redact_pii(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self.redact_pii(v) if isinstance(v, str) else v
                               for k, v in record.args.items()}
            else:
                record.args = tuple(self.redact_pii(arg) if isinstance(arg, str) else arg
                                    for arg in record.args)

        return True

    def redact_pii(self, text: str) -> str:
        if not text:
            return text

        redacted = self.EMAIL_PATTERN.sub(self._redact_email, text)

        for pattern in self.TOKEN_PATTERNS:
            redacted = pattern.sub(r'\1***REDACTED***', redacted)

        for pattern in self.PASSWORD_PATTERNS:
            redacted = pattern.sub(r'\1\2***REDACTED***', redacted)

        redacted = self.PHONE_PATTERN.sub('XXXXXXXXXX', redacted)
        return redacted

    def _redact_email(self, match: re.Match) -> str:
        """Keep the first two characters and the domain, plus a short hash to correlate lines"""
        email = match.group(0)
        local, domain = email.split('@', 1)
        if len(local) <= 2:
            return f'**@{domain}'

        email_hash = hashlib.sha256(email.lower().encode()).hexdigest()[:6]
        return f'{local[:2]}***{email_hash}@{domain}'


def setup_pii_redaction(handler: logging.Handler) -> None:
    """Attach the filter to a handler once"""
    if any(isinstance(existing, PIIRedactionFilter) for existing in handler.filters):
        return
    handler.addFilter(PIIRedactionFilter())
