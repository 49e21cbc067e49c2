"""
Per-recipient personalization of compiled email HTML.

Placeholders:
    {{name}}             - recipient name, "Subscriber" when missing
    {{email}}            - recipient email address
    {{unsubscribe_url}}  - link to the unsubscribe handler for this recipient

Substitution happens in a single pass, so a value containing a placeholder
is never expanded again.
"""

import re
from urllib.parse import quote

from fenix.modules.templates.sanitizer import escape_html

DEFAULT_NAME = 'Subscriber'

_PLACEHOLDER_RE = re.compile(r'\{\{(name|email|unsubscribe_url)\}\}')


def build_unsubscribe_url(base_url, email):
    """<base_url>/unsubscribe?email=<percent-encoded email>"""
    base = (base_url or '').rstrip('/')
    return f"{base}/unsubscribe?email={quote(email or '', safe='')}"


def _value(recipient, key):
    if isinstance(recipient, dict):
        return recipient.get(key)
    return getattr(recipient, key, None)


def personalize(html, recipient, base_url=None, unsubscribe_url=None):
    """Fill recipient placeholders in a compiled document.

    recipient is a dict (or object) with 'email' and optional 'name'.
    An explicit unsubscribe_url wins over one built from base_url.
    """
    if not html:
        return html or ''

    email = _value(recipient, 'email') or ''
    name = _value(recipient, 'name') or DEFAULT_NAME
    if unsubscribe_url is None:
        unsubscribe_url = build_unsubscribe_url(base_url, email)

    values = {
        'name': escape_html(name),
        'email': escape_html(email),
        'unsubscribe_url': escape_html(unsubscribe_url),
    }
    return _PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], html)
