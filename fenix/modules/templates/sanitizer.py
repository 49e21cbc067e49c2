"""
Escaping helpers for the email compiler.

Two levels of trust:
    sanitize_html - rich text written in the editor. It is meant to be HTML, so
                    only known-dangerous constructs are removed and ordinary
                    formatting (b, i, lists, inline styles) passes through.
    escape_html   - everything else (alt text, button labels, names,
                    addresses, titles). Never HTML.
"""

import re

_HTML_ESCAPES = {
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#039;',
}
_HTML_ESCAPE_RE = re.compile(r'[&<>"\']')

_SCRIPT_BLOCK_RE = re.compile(r'<script\b[^>]*>.*?</script\s*>', re.IGNORECASE | re.DOTALL)
_SCRIPT_TAG_RE = re.compile(r'</?script\b[^>]*>?', re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(
    r'''(?:\s+|(?<=[/"']))on[a-z]+\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]+)''',
    re.IGNORECASE,
)
_JS_URL_ATTR_RE = re.compile(
    r'''\b(href|src)\s*=\s*(?:"\s*javascript:[^"]*"|'\s*javascript:[^']*'|javascript:[^\s>]*)''',
    re.IGNORECASE,
)
_CSS_EXPRESSION_RE = re.compile(r'expression\s*\([^)]*\)?', re.IGNORECASE)
_UNSAFE_SCHEME_RE = re.compile(r'^\s*(javascript|vbscript|data):', re.IGNORECASE)


def escape_html(value):
    """Entity-escape &, <, >, " and ' in a plain-text value"""
    if value is None:
        return ''
    return _HTML_ESCAPE_RE.sub(lambda m: _HTML_ESCAPES[m.group(0)], str(value))


def sanitize_html(value):
    """Strip scripts, inline event handlers, javascript: URLs and CSS expressions"""
    if value is None:
        return ''
    html = str(value)
    # Removing one construct can splice another together, so repeat until stable
    previous = None
    while html != previous:
        previous = html
        html = _SCRIPT_BLOCK_RE.sub('', html)
        html = _SCRIPT_TAG_RE.sub('', html)
        html = _EVENT_HANDLER_RE.sub('', html)
        html = _JS_URL_ATTR_RE.sub(lambda m: f'{m.group(1)}="#"', html)
        html = _CSS_EXPRESSION_RE.sub('', html)
    return html


def safe_url(value, default='#'):
    """Escape a URL for an attribute, replacing script/data schemes with the default.

    Template placeholders such as {{unsubscribe_url}} pass through unchanged.
    """
    if not value or not isinstance(value, str):
        return default
    if _UNSAFE_SCHEME_RE.match(value):
        return default
    return escape_html(value.strip())


def css_value(value, default=''):
    """Make a user-supplied value safe to place inside a style attribute"""
    if value is None or value == '':
        return default
    cleaned = _CSS_EXPRESSION_RE.sub('', str(value))
    cleaned = re.sub(r'[;{}<>"\'\\]', '', cleaned)
    cleaned = re.sub(r'javascript:', '', cleaned, flags=re.IGNORECASE).strip()
    return cleaned or default
