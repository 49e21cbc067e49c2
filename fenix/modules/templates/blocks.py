"""
Email Blocks
============

Schema for the email document tree edited in the template builder.

A template's content is a JSON list of blocks. Each block is a plain dict
keyed on 'type'; the editor may add fields this module does not know about
and they are carried through load/save untouched.

Containers:
    section -> {'children': [block, ...]}
    columns -> {'columns': [[block, ...], [block, ...], ...]}

Containers hold exactly one level of nesting: a section's children and the
lanes of a columns block never contain another section or columns block.
"""

import copy
import json
import logging
import uuid

logger = logging.getLogger(__name__)

BLOCK_TYPES = (
    'heading', 'text', 'image', 'button', 'divider', 'spacer',
    'product', 'columns', 'logo', 'social', 'footer', 'section',
)
CONTAINER_TYPES = frozenset({'section', 'columns'})
NESTABLE_TYPES = frozenset(BLOCK_TYPES) - CONTAINER_TYPES

SOCIAL_PLATFORMS = ('facebook', 'instagram', 'linkedin', 'twitter', 'youtube', 'tiktok', 'custom')
TEXT_ALIGNMENTS = ('left', 'center', 'right')
FONT_WEIGHTS = ('normal', 'bold')
HEADING_LEVELS = (1, 2, 3)

# Styling attributes shared by every block type
STYLE_FIELDS = (
    'backgroundColor', 'textColor', 'textAlign', 'fontWeight', 'fontSize',
    'borderRadius', 'padding', 'paddingTop', 'paddingRight', 'paddingBottom',
    'paddingLeft', 'fontFamily', 'borderColor',
)


def new_block_id():
    return uuid.uuid4().hex[:7]


def is_container(block):
    return isinstance(block, dict) and block.get('type') in CONTAINER_TYPES


def is_nestable(block):
    """True when the block may live inside a section or a column lane"""
    return isinstance(block, dict) and block.get('type') in NESTABLE_TYPES


def _make(block_type, style, **fields):
    unknown_style = set(style) - set(STYLE_FIELDS)
    if unknown_style:
        raise ValueError(f"Unknown style field(s) for {block_type}: {', '.join(sorted(unknown_style))}")
    if 'textAlign' in style and style['textAlign'] not in TEXT_ALIGNMENTS:
        raise ValueError(f"textAlign must be one of {TEXT_ALIGNMENTS}")
    if 'fontWeight' in style and style['fontWeight'] not in FONT_WEIGHTS:
        raise ValueError(f"fontWeight must be one of {FONT_WEIGHTS}")

    block = {'id': new_block_id(), 'type': block_type}
    block.update({k: v for k, v in fields.items() if v is not None})
    block.update(style)
    return block


# ===================
# CONSTRUCTORS
# ===================

def heading(content, level=1, **style):
    if level not in HEADING_LEVELS:
        raise ValueError(f"Heading level must be one of {HEADING_LEVELS}, got {level!r}")
    return _make('heading', style, content=content, level=level)


def text(content, **style):
    return _make('text', style, content=content)


def image(src, alt='', **style):
    return _make('image', style, src=src, alt=alt)


def button(button_text, button_url='#', button_color=None, button_text_color=None, **style):
    return _make(
        'button', style,
        buttonText=button_text, buttonUrl=button_url,
        buttonColor=button_color, buttonTextColor=button_text_color,
    )


def divider(**style):
    return _make('divider', style)


def spacer(height=None, **style):
    return _make('spacer', style, height=height)


def product(name, src=None, url='#', alt=None, button_text=None, **style):
    return _make('product', style, content=name, src=src, buttonUrl=url, alt=alt, buttonText=button_text)


def logo(src, alt='', url=None, **style):
    return _make('logo', style, src=src, alt=alt, buttonUrl=url)


def social_link(platform, url, icon_url=None):
    if platform not in SOCIAL_PLATFORMS:
        raise ValueError(f"Unknown social platform: {platform!r}")
    link = {'platform': platform, 'url': url}
    if icon_url:
        link['iconUrl'] = icon_url
    return link


def social(links, **style):
    return _make('social', style, socialLinks=list(links))


def footer(company_name=None, address=None, unsubscribe_text=None, links=None, **style):
    return _make(
        'footer', style,
        companyName=company_name, address=address,
        unsubscribeText=unsubscribe_text,
        socialLinks=list(links) if links else None,
    )


def section(children, **style):
    children = list(children)
    for child in children:
        if not is_nestable(child):
            raise ValueError(f"A section cannot contain a {child.get('type') if isinstance(child, dict) else child!r} block")
    return _make('section', style, children=children)


def columns(lanes, **style):
    lanes = [list(lane) for lane in lanes]
    if not lanes:
        raise ValueError("A columns block needs at least one lane")
    for lane in lanes:
        for child in lane:
            if not is_nestable(child):
                raise ValueError(f"A column cannot contain a {child.get('type') if isinstance(child, dict) else child!r} block")
    return _make('columns', style, columns=lanes)


# ===================
# VALIDATION
# ===================

def find_nesting_errors(blocks):
    """List human-readable problems with container nesting.

    The compiler drops offending blocks on its own; this is for editors and
    imports that want to warn before saving.
    """
    problems = []
    for index, block in enumerate(blocks or []):
        if not isinstance(block, dict):
            problems.append(f"Block {index} is not an object")
            continue
        if not block.get('type'):
            problems.append(f"Block {index} has no type")
        if block.get('type') == 'section':
            for child_index, child in enumerate(block.get('children') or []):
                if not is_nestable(child):
                    problems.append(f"Section {index} child {child_index} cannot be nested")
        elif block.get('type') == 'columns':
            for lane_index, lane in enumerate(block.get('columns') or []):
                for child_index, child in enumerate(lane or []):
                    if not is_nestable(child):
                        problems.append(f"Columns {index} lane {lane_index} item {child_index} cannot be nested")
    return problems


# ===================
# SERIALIZATION
# ===================

def serialize_blocks(blocks):
    """Encode a block list for storage. Unknown fields are kept."""
    return json.dumps(list(blocks or []), ensure_ascii=False)


def deserialize_blocks(raw):
    """Decode stored block JSON, returning [] for anything unusable"""
    if raw is None or raw == '':
        return []
    if isinstance(raw, list):
        return copy.deepcopy(raw)
    try:
        blocks = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"Could not decode template blocks: {e}")
        return []
    if not isinstance(blocks, list):
        logger.error(f"Template blocks must be a list, got {type(blocks).__name__}")
        return []
    return blocks
