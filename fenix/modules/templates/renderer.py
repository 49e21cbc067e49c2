"""
Email Renderer
==============

Compiles a template's block list into a complete HTML email.

Layout is table-based with inline styles, an MSO (Outlook) conditional
wrapper fixed at 600px, a dark-mode media query and a mobile breakpoint.
Output depends only on the arguments: the same blocks, title, year and
brand always produce the same string.

Rich-text 'content' goes through sanitize_html; every other user string is
escaped with escape_html. The footer carries a literal {{unsubscribe_url}}
placeholder which is resolved per recipient at send time.
"""

import logging
from collections import namedtuple
from datetime import datetime

from .sanitizer import escape_html, sanitize_html, safe_url, css_value

logger = logging.getLogger(__name__)

DEFAULT_BRAND = {
    'name': 'Fenix Brokers',
    'tagline': 'Premium Wholesale Cosmetics & Fragrances',
    'website_url': 'https://fenixbrokers.com',
}

DEFAULT_FONT = 'Arial, sans-serif'
DEFAULT_TEXT_COLOR = '#1a1a1a'
DEFAULT_BUTTON_COLOR = '#00bed6'
DEFAULT_BUTTON_TEXT_COLOR = '#ffffff'
DEFAULT_DIVIDER_COLOR = '#e5e5e5'
DEFAULT_PRODUCT_BG = '#f9fafb'
DEFAULT_FOOTER_BG = '#1a1a1a'
DEFAULT_FOOTER_TEXT = '#a3a3a3'
DEFAULT_HEADER_BG = '#00bed6'
DEFAULT_HEADER_GRADIENT = 'linear-gradient(135deg, #00bed6 0%, #0077b6 100%)'
HEADING_SIZES = {1: '28px', 2: '24px', 3: '20px'}

EMAIL_WIDTH = 600
CONTENT_WIDTH = 540

# (top level, inside a section or column lane)
PADDING_DEFAULTS = {
    'heading': ('20px 30px 10px 30px', '10px 0 6px 0'),
    'text': ('10px 30px', '6px 0'),
    'image': ('15px 30px', '8px 0'),
    'button': ('20px 30px', '12px 0'),
    'divider': ('20px 30px', '12px 0'),
    'product': ('15px 30px', '8px 0'),
    'logo': ('20px 30px', '10px 0'),
    'social': ('15px 30px', '10px 0'),
    'footer': ('30px 30px', '20px 0'),
    'section': ('20px 30px', '20px 30px'),
    'columns': ('15px 22px', '15px 22px'),
}

_ICON_BASE = 'https://img.icons8.com/ios-filled/50/ffffff'

SOCIAL_ICONS = {
    'facebook': {'label': 'Facebook', 'color': '#1877f2', 'icon': f'{_ICON_BASE}/facebook-new.png'},
    'instagram': {'label': 'Instagram', 'color': '#e4405f', 'icon': f'{_ICON_BASE}/instagram-new.png'},
    'linkedin': {'label': 'LinkedIn', 'color': '#0a66c2', 'icon': f'{_ICON_BASE}/linkedin.png'},
    'twitter': {'label': 'X', 'color': '#000000', 'icon': f'{_ICON_BASE}/twitterx.png'},
    'youtube': {'label': 'YouTube', 'color': '#ff0000', 'icon': f'{_ICON_BASE}/youtube-play.png'},
    'tiktok': {'label': 'TikTok', 'color': '#010101', 'icon': f'{_ICON_BASE}/tiktok.png'},
}
FALLBACK_SOCIAL_ICON = {'label': 'Link', 'color': '#6b7280', 'icon': f'{_ICON_BASE}/external-link.png'}

RenderContext = namedtuple('RenderContext', ['width', 'nested', 'year', 'brand'])


# ===================
# FIELD HELPERS
# ===================

def _field(block, key, default=None):
    value = block.get(key)
    if value is None or value == '':
        return default
    return value


def _px(value, default):
    """Turn 16, '16' or '16px' into a CSS length"""
    if value is None or value == '' or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return f'{value:g}px'
    value = str(value).strip()
    try:
        return f'{float(value):g}px'
    except ValueError:
        return css_value(value, default)


def _percent(value, default):
    """Width percentage for image/logo, clamped to 1-100"""
    if value is None or value == '' or isinstance(value, bool):
        return default
    try:
        pct = float(str(value).strip().rstrip('%').replace('px', ''))
    except ValueError:
        return default
    return int(max(1, min(100, pct)))


def _align(block, default='left'):
    value = block.get('textAlign')
    return value if value in ('left', 'center', 'right') else default


def _weight(block, default='normal'):
    value = block.get('fontWeight')
    return value if value in ('normal', 'bold') else default


def _level(block):
    try:
        level = int(block.get('level') or 1)
    except (TypeError, ValueError):
        return 1
    return level if level in HEADING_SIZES else 1


def _font(block):
    return css_value(block.get('fontFamily'), DEFAULT_FONT)


def _expand_shorthand(value):
    parts = value.split()
    if len(parts) == 1:
        return parts * 4
    if len(parts) == 2:
        return [parts[0], parts[1], parts[0], parts[1]]
    if len(parts) == 3:
        return [parts[0], parts[1], parts[2], parts[1]]
    return parts[:4]


def _padding(block, ctx):
    """Uniform 'padding' or per-side paddingTop/Right/Bottom/Left over the type default"""
    top_level, nested = PADDING_DEFAULTS.get(block.get('type'), ('0', '0'))
    sides = _expand_shorthand(nested if ctx.nested else top_level)
    if _field(block, 'padding') is not None:
        uniform = _px(block['padding'], None)
        if uniform:
            sides = _expand_shorthand(uniform)
    for index, key in enumerate(('paddingTop', 'paddingRight', 'paddingBottom', 'paddingLeft')):
        sides[index] = _px(block.get(key), sides[index])
    return ' '.join(sides)


def _background(block, default=None):
    color = css_value(block.get('backgroundColor'), default or '')
    return f' background-color: {color};' if color else ''


def _row(inner, style, align=None, css_class=None):
    attrs = f' class="{css_class}"' if css_class else ''
    if align:
        attrs += f' align="{align}"'
    return f'''
          <tr>
            <td{attrs} style="{style}">
              {inner}
            </td>
          </tr>'''


def _rich_text(content):
    html = sanitize_html(content)
    if '<' not in html:
        html = html.replace('\n', '<br />')
    return html


def _plain_lines(value):
    return escape_html(value).replace('\n', '<br />')


# ===================
# BLOCK RENDERERS
# ===================

def _render_heading(block, ctx):
    level = _level(block)
    size = _px(block.get('fontSize'), HEADING_SIZES[level])
    color = css_value(block.get('textColor'), DEFAULT_TEXT_COLOR)
    align = _align(block)
    inner = (
        f'<h{level} class="text-dark" style="margin: 0; font-family: {_font(block)}; font-size: {size}; '
        f'font-weight: {_weight(block, "bold")}; color: {color}; line-height: 1.3; text-align: {align};">'
        f'{_rich_text(block.get("content", ""))}</h{level}>'
    )
    return _row(inner, f'padding: {_padding(block, ctx)};{_background(block)}')


def _render_text(block, ctx):
    size = _px(block.get('fontSize'), '16px')
    color = css_value(block.get('textColor'), DEFAULT_TEXT_COLOR)
    inner = (
        f'<div class="text-dark" style="margin: 0; font-family: {_font(block)}; font-size: {size}; '
        f'font-weight: {_weight(block)}; color: {color}; line-height: 1.6; text-align: {_align(block)};">'
        f'{_rich_text(block.get("content", ""))}</div>'
    )
    return _row(inner, f'padding: {_padding(block, ctx)};{_background(block)}')


def _render_image(block, ctx):
    src = safe_url(block.get('src'), '')
    if not src:
        return ''
    pct = _percent(block.get('fontSize'), 100)
    width = max(1, round(ctx.width * pct / 100))
    radius = _px(block.get('borderRadius'), '8px')
    align = _align(block, 'center')
    alt = escape_html(block.get('alt', ''))
    inner = f'''<!--[if mso]>
              <v:rect xmlns:v="urn:schemas-microsoft-com:vml" fill="true" stroke="false" style="width:{width}px;">
              <v:fill type="frame" src="{src}" />
              </v:rect>
              <![endif]-->
              <!--[if !mso]><!-->
              <img src="{src}" alt="{alt}" width="{width}" style="display: inline-block; width: {pct}%; max-width: {width}px; height: auto; border: 0; border-radius: {radius};" />
              <!--<![endif]-->'''
    return _row(inner, f'padding: {_padding(block, ctx)};{_background(block)}', align=align)


def _render_button(block, ctx):
    label = escape_html(_field(block, 'buttonText', 'Click Here'))
    url = safe_url(block.get('buttonUrl'))
    color = css_value(block.get('buttonColor'), DEFAULT_BUTTON_COLOR)
    text_color = css_value(block.get('buttonTextColor'), DEFAULT_BUTTON_TEXT_COLOR)
    radius = _px(block.get('borderRadius'), '6px')
    size = _px(block.get('fontSize'), '16px')
    weight = _weight(block, 'bold')
    font = _font(block)
    inner = f'''<!--[if mso]>
              <v:roundrect xmlns:v="urn:schemas-microsoft-com:vml" xmlns:w="urn:schemas-microsoft-com:office:word" href="{url}" style="height:48px;v-text-anchor:middle;width:220px;" arcsize="10%" strokecolor="{color}" fillcolor="{color}">
                <w:anchorlock/>
                <center style="color:{text_color};font-family:{font};font-size:{size};font-weight:{weight};">{label}</center>
              </v:roundrect>
              <![endif]-->
              <!--[if !mso]><!-->
              <a href="{url}" target="_blank" style="display: inline-block; background-color: {color}; color: {text_color}; font-family: {font}; font-size: {size}; font-weight: {weight}; text-decoration: none; padding: 14px 32px; border-radius: {radius}; mso-padding-alt: 0;">{label}</a>
              <!--<![endif]-->'''
    return _row(inner, f'padding: {_padding(block, ctx)};{_background(block)}', align=_align(block, 'center'))


def _render_divider(block, ctx):
    color = css_value(block.get('borderColor'), DEFAULT_DIVIDER_COLOR)
    inner = f'''<table border="0" cellpadding="0" cellspacing="0" width="100%" role="presentation">
                <tr>
                  <td style="border-top: 1px solid {color}; font-size: 0; line-height: 0;">&nbsp;</td>
                </tr>
              </table>'''
    return _row(inner, f'padding: {_padding(block, ctx)};{_background(block)}')


def _render_spacer(block, ctx):
    height = _px(block.get('height'), '30px')
    return f'''
          <tr>
            <td style="height: {height}; font-size: 0; line-height: 0;{_background(block)}">&nbsp;</td>
          </tr>'''


def _render_product(block, ctx):
    name = escape_html(block.get('content', ''))
    url = safe_url(block.get('buttonUrl'))
    link_label = escape_html(_field(block, 'buttonText', 'View Product →'))
    link_color = css_value(block.get('buttonColor'), DEFAULT_BUTTON_COLOR)
    text_color = css_value(block.get('textColor'), DEFAULT_TEXT_COLOR)
    radius = _px(block.get('borderRadius'), '8px')
    bg = css_value(block.get('backgroundColor'), DEFAULT_PRODUCT_BG)
    font = _font(block)
    src = safe_url(block.get('src'), '')

    image_cell = ''
    if src:
        alt = escape_html(_field(block, 'alt', block.get('content') or 'Product'))
        image_cell = f'''
                  <td width="120" valign="top" style="padding: 15px;">
                    <img src="{src}" alt="{alt}" width="100" style="display: block; width: 100px; height: auto; border: 0; border-radius: 6px;" />
                  </td>'''

    price_html = ''
    if _field(block, 'price') is not None:
        price_html = (
            f'<p style="margin: 0 0 8px 0; font-family: {font}; font-size: 14px; color: {text_color};">'
            f'{escape_html(block["price"])}</p>'
        )

    inner = f'''<table border="0" cellpadding="0" cellspacing="0" width="100%" role="presentation" class="email-content" style="background-color: {bg}; border-radius: {radius};">
                <tr>{image_cell}
                  <td valign="top" style="padding: 15px;">
                    <p class="text-dark" style="margin: 0 0 8px 0; font-family: {font}; font-size: {_px(block.get('fontSize'), '16px')}; font-weight: {_weight(block, 'bold')}; color: {text_color};">{name}</p>
                    {price_html}<a href="{url}" target="_blank" style="font-family: {font}; font-size: 14px; color: {link_color}; text-decoration: none;">{link_label}</a>
                  </td>
                </tr>
              </table>'''
    return _row(inner, f'padding: {_padding(block, ctx)};')


def _render_logo(block, ctx):
    src = safe_url(block.get('src'), '')
    if not src:
        return ''
    pct = _percent(block.get('fontSize'), 40)
    width = max(1, round(ctx.width * pct / 100))
    alt = escape_html(_field(block, 'alt', ctx.brand.get('name', '')))
    img = f'<img src="{src}" alt="{alt}" width="{width}" style="display: inline-block; width: {width}px; max-width: 100%; height: auto; border: 0;" />'
    if _field(block, 'buttonUrl'):
        img = f'<a href="{safe_url(block["buttonUrl"])}" target="_blank" style="text-decoration: none;">{img}</a>'
    return _row(img, f'padding: {_padding(block, ctx)};{_background(block)}', align=_align(block, 'center'))


def social_icon(link):
    """Brand colour, icon URL and label for a social link; unknown platforms get the neutral icon"""
    platform = link.get('platform')
    if platform in SOCIAL_ICONS:
        return SOCIAL_ICONS[platform]
    icon = dict(FALLBACK_SOCIAL_ICON)
    if link.get('iconUrl'):
        icon['icon'] = safe_url(link['iconUrl'], FALLBACK_SOCIAL_ICON['icon'])
    return icon


def _social_row(links, align):
    cells = []
    for link in links or []:
        if not isinstance(link, dict) or not link.get('url'):
            continue
        icon = social_icon(link)
        cells.append(f'''
                  <td style="padding: 0 6px;">
                    <a href="{safe_url(link['url'])}" target="_blank" style="display: inline-block; width: 36px; height: 36px; border-radius: 50%; background-color: {icon['color']}; text-align: center; line-height: 36px; text-decoration: none;">
                      <img src="{icon['icon']}" alt="{escape_html(icon['label'])}" width="18" height="18" style="display: inline-block; width: 18px; height: 18px; border: 0; vertical-align: middle;" />
                    </a>
                  </td>''')
    if not cells:
        return ''
    return f'''<table border="0" cellpadding="0" cellspacing="0" role="presentation" align="{align}">
                <tr>{''.join(cells)}
                </tr>
              </table>'''


def _render_social(block, ctx):
    align = _align(block, 'center')
    icons = _social_row(block.get('socialLinks'), align)
    if not icons:
        return ''
    return _row(icons, f'padding: {_padding(block, ctx)};{_background(block)}', align=align)


def _render_footer(block, ctx):
    bg = css_value(block.get('backgroundColor'), DEFAULT_FOOTER_BG)
    color = css_value(block.get('textColor'), DEFAULT_FOOTER_TEXT)
    align = _align(block, 'center')
    font = _font(block)
    company = escape_html(_field(block, 'companyName', ctx.brand.get('name', '')))
    unsubscribe_text = escape_html(_field(block, 'unsubscribeText', 'Unsubscribe'))

    parts = []
    icons = _social_row(block.get('socialLinks'), align)
    if icons:
        parts.append(f'<div style="padding-bottom: 15px;">{icons}</div>')
    parts.append(
        f'<p class="text-muted" style="margin: 0 0 10px 0; font-family: {font}; font-size: 14px; color: {color};">'
        f'&copy; {ctx.year} {company}. All rights reserved.</p>'
    )
    if _field(block, 'address'):
        parts.append(
            f'<p class="text-muted" style="margin: 0 0 10px 0; font-family: {font}; font-size: 12px; color: {color};">'
            f'{_plain_lines(block["address"])}</p>'
        )
    links = f'<a href="{{{{unsubscribe_url}}}}" style="font-family: {font}; font-size: 12px; color: {color}; text-decoration: underline;">{unsubscribe_text}</a>'
    website = ctx.brand.get('website_url')
    if website:
        links += (
            f'<span style="color: {color};"> | </span>'
            f'<a href="{safe_url(website)}" style="font-family: {font}; font-size: 12px; color: {color}; text-decoration: underline;">Visit Website</a>'
        )
    parts.append(f'<p style="margin: 0; font-family: {font}; font-size: 12px; color: {color};">{links}</p>')

    inner = '\n              '.join(parts)
    return _row(inner, f'padding: {_padding(block, ctx)}; background-color: {bg}; text-align: {align};', align=align)


def _render_section(block, ctx):
    children = block.get('children')
    inner_ctx = ctx._replace(nested=True)
    rows = render_blocks(children if isinstance(children, list) else [], inner_ctx, NESTED_RENDERERS)
    radius = _px(block.get('borderRadius'), '0')
    border = css_value(block.get('borderColor'))
    border_css = f' border: 1px solid {border};' if border else ''
    inner = f'''<table border="0" cellpadding="0" cellspacing="0" width="100%" role="presentation">{rows}
              </table>'''
    style = f'padding: {_padding(block, ctx)};{_background(block)} border-radius: {radius};{border_css}'
    return _row(inner, style, css_class='mobile-padding')


def _render_columns(block, ctx):
    lanes = block.get('columns')
    if not isinstance(lanes, list) or not lanes:
        return ''
    count = len(lanes)
    pct = f'{round(100 / count, 2):g}'
    lane_ctx = ctx._replace(nested=True, width=max(1, ctx.width // count - 16))

    cells = []
    for lane in lanes:
        rows = render_blocks(lane if isinstance(lane, list) else [], lane_ctx, NESTED_RENDERERS)
        cells.append(f'''
                  <td class="stack-column" width="{pct}%" valign="top" style="width: {pct}%; padding: 0 8px; vertical-align: top;">
                    <table border="0" cellpadding="0" cellspacing="0" width="100%" role="presentation">{rows}
                    </table>
                  </td>''')

    inner = f'''<table border="0" cellpadding="0" cellspacing="0" width="100%" role="presentation">
                <tr>{''.join(cells)}
                </tr>
              </table>'''
    return _row(inner, f'padding: {_padding(block, ctx)};{_background(block)}', css_class='mobile-padding')


NESTED_RENDERERS = {
    'heading': _render_heading,
    'text': _render_text,
    'image': _render_image,
    'button': _render_button,
    'divider': _render_divider,
    'spacer': _render_spacer,
    'product': _render_product,
    'logo': _render_logo,
    'social': _render_social,
    'footer': _render_footer,
}

BLOCK_RENDERERS = dict(NESTED_RENDERERS, section=_render_section, columns=_render_columns)


def render_blocks(blocks, ctx, renderers=BLOCK_RENDERERS):
    """Render a block list with the given dispatch table. Unknown types render nothing."""
    html = []
    for block in blocks or []:
        if not isinstance(block, dict):
            continue
        renderer = renderers.get(block.get('type'))
        if renderer is None:
            continue
        try:
            html.append(renderer(block, ctx))
        except Exception as e:
            logger.warning(f"Skipping {block.get('type')} block {block.get('id')}: {e}")
    return ''.join(html)


def _render_header(ctx):
    """Brand name and tagline banner above the blocks"""
    name = escape_html(ctx.brand.get('name', ''))
    tagline = escape_html(ctx.brand.get('tagline') or '')
    rows = f'''<tr>
                  <td align="center">
                    <span style="font-family: {DEFAULT_FONT}; font-size: 28px; font-weight: 700; color: #ffffff; letter-spacing: -0.5px;">{name}</span>
                  </td>
                </tr>'''
    if tagline:
        rows += f'''
                <tr>
                  <td align="center" style="padding-top: 8px;">
                    <span style="font-family: {DEFAULT_FONT}; font-size: 14px; color: #ffffff;">{tagline}</span>
                  </td>
                </tr>'''
    inner = f'''<!--[if mso]>
              <table role="presentation" border="0" cellspacing="0" cellpadding="0">
              <tr>
              <td style="background-color: {DEFAULT_HEADER_BG}; padding: 30px;">
              <![endif]-->
              <table border="0" cellpadding="0" cellspacing="0" role="presentation">
                {rows}
              </table>
              <!--[if mso]>
              </td>
              </tr>
              </table>
              <![endif]-->'''
    return _row(
        inner,
        f'padding: 30px 30px 20px 30px; background-color: {DEFAULT_HEADER_BG}; background: {DEFAULT_HEADER_GRADIENT};',
        align='center',
        css_class='email-header',
    )


def _has_footer(blocks):
    """True when a footer block appears anywhere, including inside containers"""
    for block in blocks or []:
        if not isinstance(block, dict):
            continue
        if block.get('type') == 'footer':
            return True
        if block.get('type') == 'section' and isinstance(block.get('children'), list):
            if _has_footer(block['children']):
                return True
        if block.get('type') == 'columns' and isinstance(block.get('columns'), list):
            if any(isinstance(lane, list) and _has_footer(lane) for lane in block['columns']):
                return True
    return False


# ===================
# DOCUMENT
# ===================

def render_email_html(blocks, title, year=None, brand=None):
    """Compile a block list into a complete, Outlook-compatible HTML email.

    Args:
        blocks: list of block dicts (see blocks.py)
        title: template name, used for <title> and the hidden preheader
        year: copyright year in the footer (defaults to the current year)
        brand: dict with name/tagline/website_url (defaults to DEFAULT_BRAND)

    Returns:
        Complete HTML document string. Never raises for malformed blocks.
    """
    the_brand = dict(DEFAULT_BRAND)
    the_brand.update(brand or {})
    ctx = RenderContext(
        width=CONTENT_WIDTH,
        nested=False,
        year=year if year is not None else datetime.now().year,
        brand=the_brand,
    )
    if not isinstance(blocks, list):
        blocks = []

    block_html = _render_header(ctx) + render_blocks(blocks, ctx)
    if not _has_footer(blocks):
        block_html += _render_footer({'type': 'footer'}, ctx)

    safe_title = escape_html(title or '')
    preheader = f"{safe_title} - {escape_html(the_brand['name'])} Newsletter"

    return f'''<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:v="urn:schemas-microsoft-com:vml" xmlns:o="urn:schemas-microsoft-com:office:office">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <meta http-equiv="X-UA-Compatible" content="IE=edge">
  <meta name="x-apple-disable-message-reformatting">
  <title>{safe_title}</title>
  <!--[if mso]>
  <noscript>
    <xml>
      <o:OfficeDocumentSettings>
        <o:AllowPNG/>
        <o:PixelsPerInch>96</o:PixelsPerInch>
      </o:OfficeDocumentSettings>
    </xml>
  </noscript>
  <style>
    table {{border-collapse: collapse;}}
    .spacer {{mso-line-height-rule: exactly;}}
  </style>
  <![endif]-->
  <style type="text/css">
    body, table, td, p, a, li, blockquote {{
      -webkit-text-size-adjust: 100%;
      -ms-text-size-adjust: 100%;
    }}
    body {{
      margin: 0 !important;
      padding: 0 !important;
      width: 100% !important;
    }}
    table {{
      border-collapse: collapse !important;
    }}
    img {{
      border: 0;
      height: auto;
      line-height: 100%;
      outline: none;
      text-decoration: none;
      -ms-interpolation-mode: bicubic;
    }}
    @media (prefers-color-scheme: dark) {{
      .email-bg {{ background-color: #1a1a1a !important; }}
      .email-content {{ background-color: #262626 !important; }}
      .text-dark {{ color: #f5f5f5 !important; }}
      .text-muted {{ color: #a3a3a3 !important; }}
    }}
    @media only screen and (max-width: {EMAIL_WIDTH}px) {{
      .email-container {{
        width: 100% !important;
        max-width: 100% !important;
      }}
      .mobile-padding {{
        padding-left: 20px !important;
        padding-right: 20px !important;
      }}
      .stack-column {{
        display: block !important;
        width: 100% !important;
        max-width: 100% !important;
        padding: 0 0 12px 0 !important;
      }}
    }}
  </style>
</head>
<body style="margin: 0; padding: 0; background-color: #f5f5f5;" class="email-bg">
  <div style="display: none; font-size: 1px; color: #f5f5f5; line-height: 1px; max-height: 0px; max-width: 0px; opacity: 0; overflow: hidden;">
    {preheader}
  </div>
  <table border="0" cellpadding="0" cellspacing="0" width="100%" role="presentation" style="background-color: #f5f5f5;" class="email-bg">
    <tr>
      <td align="center" style="padding: 40px 10px;">
        <!--[if mso]>
        <table role="presentation" border="0" cellspacing="0" cellpadding="0" width="{EMAIL_WIDTH}" align="center">
        <tr>
        <td>
        <![endif]-->
        <table border="0" cellpadding="0" cellspacing="0" width="{EMAIL_WIDTH}" role="presentation" class="email-container email-content" style="max-width: {EMAIL_WIDTH}px; width: 100%; background-color: #ffffff; border-radius: 12px; overflow: hidden;">
          {block_html}
        </table>
        <!--[if mso]>
        </td>
        </tr>
        </table>
        <![endif]-->
      </td>
    </tr>
  </table>
</body>
</html>'''
