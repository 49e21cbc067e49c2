"""Per-recipient placeholder substitution."""

from fenix.modules.campaigns.dispatch import preview_blocks
from fenix.modules.campaigns.personalize import personalize, build_unsubscribe_url
from fenix.modules.templates import blocks as b

BASE = "https://fenixbrokers.com"


def test_substitutes_all_placeholders():
    html = "<p>Hi {{name}} ({{email}})</p><a href=\"{{unsubscribe_url}}\">u</a>"
    out = personalize(html, {"name": "Ana", "email": "ana@shop.es"}, base_url=BASE)
    assert out == ('<p>Hi Ana (ana@shop.es)</p>'
                   '<a href="https://fenixbrokers.com/unsubscribe?email=ana%40shop.es">u</a>')


def test_missing_name_falls_back_to_subscriber():
    out = personalize("Dear {{name}},", {"email": "x@y.com", "name": None})
    assert out == "Dear Subscriber,"
    assert personalize("Dear {{name}},", {"email": "x@y.com", "name": ""}) == "Dear Subscriber,"


def test_values_are_escaped_once():
    out = personalize("{{name}}", {"email": "a@b.com", "name": "<b>Tom & Co</b>"})
    assert out == "&lt;b&gt;Tom &amp; Co&lt;/b&gt;"


def test_no_cross_substitution():
    """A name that looks like a placeholder is not expanded again."""
    out = personalize("{{name}} / {{email}}", {"email": "a@b.com", "name": "{{email}}"}, base_url=BASE)
    assert out == "{{email}} / a@b.com"


def test_other_braces_untouched():
    html = "<style>a {color: red}</style>{{ name }} {{company}}"
    assert personalize(html, {"email": "a@b.com", "name": "Ana"}) == html


def test_explicit_unsubscribe_url_wins():
    out = personalize("{{unsubscribe_url}}", {"email": "a@b.com"}, base_url=BASE, unsubscribe_url="#")
    assert out == "#"


def test_unsubscribe_url_encoding():
    assert build_unsubscribe_url(BASE + "/", "a+b@c.com") == \
        "https://fenixbrokers.com/unsubscribe?email=a%2Bb%40c.com"


def test_recipient_object_supported():
    class Recipient:
        name = "Luis"
        email = "luis@shop.es"

    assert personalize("{{name}}", Recipient()) == "Luis"


def test_preview_uses_sample_recipient():
    html = preview_blocks([b.heading("Hola {{name}}"), b.text("Sent to {{email}}")], "Welcome", year=2024)
    assert "Hola John Doe" in html
    assert "Sent to john@example.com" in html
    assert 'href="#"' in html
    assert "{{" not in html
