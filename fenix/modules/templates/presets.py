"""
Template Presets
================

Starter documents offered when creating a new template. Every call builds
fresh blocks (new ids) so editing a template never mutates a preset.
"""

from . import blocks as b

PRESET_CATEGORIES = ('promotional', 'newsletter', 'announcement', 'welcome')

_CATALOG_URL = 'https://fenixbrokers.com/catalog'


def _product_announcement():
    return [
        b.heading('New Arrivals Are Here! ✨', level=1),
        b.text('Discover our latest collection of premium cosmetics and fragrances, '
               'carefully curated for wholesale partners.'),
        b.image('https://images.unsplash.com/photo-1596462502278-27bfdc403348?w=600',
                alt='New cosmetics collection'),
        b.spacer(),
        b.heading('Featured Products', level=2),
        b.product('Luxury Perfume Set',
                  src='https://images.unsplash.com/photo-1541643600914-78b084683601?w=200'),
        b.product('Premium Skincare Bundle',
                  src='https://images.unsplash.com/photo-1556228720-195a672e8a03?w=200'),
        b.spacer(),
        b.button('View Full Catalog', _CATALOG_URL),
        b.divider(),
        b.text('Questions? Reply to this email or contact us at sales@fenixbrokers.com'),
    ]


def _monthly_newsletter():
    return [
        b.heading('Fenix Brokers Monthly', level=1),
        b.text('Your monthly digest of beauty industry trends, new products, and exclusive '
               'deals for our wholesale partners.'),
        b.divider(),
        b.heading('📰 Industry News', level=2),
        b.text('The beauty industry continues to see strong growth in clean beauty products. '
               'Our new organic skincare line is now available for pre-order.'),
        b.button('Read More', '#'),
        b.spacer(),
        b.heading('🌟 Top Sellers This Month', level=2),
        b.product('Rose Gold Palette',
                  src='https://images.unsplash.com/photo-1512496015851-a90fb38ba796?w=200'),
        b.product('Vitamin C Serum',
                  src='https://images.unsplash.com/photo-1620916566398-39f1143ab7be?w=200'),
        b.divider(),
        b.heading('💡 Pro Tip', level=2),
        b.text('Bundle complementary products to increase average order value. Our skincare '
               'sets have a 40% higher conversion rate than individual items.'),
    ]


def _sale_event():
    return [
        b.heading('🔥 FLASH SALE', level=1, textAlign='center'),
        b.heading('Up to 40% Off Wholesale Prices', level=2, textAlign='center'),
        b.text('For 48 hours only, enjoy exclusive discounts on our best-selling cosmetics and '
               'fragrances. Stock up and maximize your margins!'),
        b.image('https://images.unsplash.com/photo-1522335789203-aabd1fc54bc9?w=600', alt='Sale banner'),
        b.button('Shop the Sale →', 'https://fenixbrokers.com/sale'),
        b.spacer(),
        b.heading('Best Deals', level=2),
        b.product('Designer Fragrance Collection - 35% OFF',
                  src='https://images.unsplash.com/photo-1594035910387-fea47794261f?w=200'),
        b.product('Makeup Essentials Kit - 40% OFF',
                  src='https://images.unsplash.com/photo-1596704017254-9b121068fb31?w=200'),
        b.divider(),
        b.text('⏰ Offer ends in 48 hours. Use code <strong>FLASH40</strong> at checkout.'),
    ]


def _welcome_email():
    return [
        b.heading('Welcome to Fenix Brokers, {{name}}! 🎉', level=1),
        b.text("We're thrilled to have you as a wholesale partner. You now have access to premium "
               "cosmetics and fragrances at the best wholesale prices."),
        b.image('https://images.unsplash.com/photo-1487412947147-5cebf100ffc2?w=600', alt='Welcome'),
        b.spacer(),
        b.heading('Getting Started', level=2),
        b.text("Here's how to make the most of your partnership:"),
        b.text('✅ Browse our catalog of 500+ products\n'
               '✅ Request quotes for bulk orders\n'
               '✅ Get dedicated support from our team'),
        b.button('Browse Catalog', _CATALOG_URL),
        b.divider(),
        b.heading('Need Help?', level=2),
        b.text('Our team is here for you. Reply to this email or contact support@fenixbrokers.com '
               'for any questions.'),
    ]


def _product_showcase():
    socials = [
        b.social_link('instagram', 'https://instagram.com/fenixbrokers'),
        b.social_link('facebook', 'https://facebook.com/fenixbrokers'),
        b.social_link('linkedin', 'https://linkedin.com/company/fenixbrokers'),
    ]
    return [
        b.logo('https://fenixbrokers.com/logo.png', alt='Fenix Brokers', url='https://fenixbrokers.com'),
        b.section([
            b.heading('This Season’s Best Sellers', level=2, textColor='#ffffff', textAlign='center'),
            b.text('Hand-picked by our buyers for fast turnover.', textColor='#ffffff', textAlign='center'),
        ], backgroundColor='#111827', borderRadius=8),
        b.columns([
            [
                b.image('https://images.unsplash.com/photo-1541643600914-78b084683601?w=300', alt='Perfume'),
                b.text('<strong>Eau de Parfum</strong>', textAlign='center'),
            ],
            [
                b.image('https://images.unsplash.com/photo-1556228720-195a672e8a03?w=300', alt='Skincare'),
                b.text('<strong>Skincare Bundle</strong>', textAlign='center'),
            ],
            [
                b.image('https://images.unsplash.com/photo-1512496015851-a90fb38ba796?w=300', alt='Palette'),
                b.text('<strong>Rose Gold Palette</strong>', textAlign='center'),
            ],
        ]),
        b.button('Request a Quote', _CATALOG_URL),
        b.footer(
            company_name='Fenix Brokers',
            address='Calle Mayor 1\n28013 Madrid, Spain',
            links=socials,
        ),
    ]


def _blank():
    return [
        b.heading('Your Newsletter Title', level=1),
        b.text('Start writing your content here...'),
    ]


_PRESETS = (
    ('product-announcement', 'Product Announcement',
     'Showcase new products with hero image and featured items', 'promotional', _product_announcement),
    ('monthly-newsletter', 'Monthly Newsletter',
     'Regular updates with articles, tips, and product highlights', 'newsletter', _monthly_newsletter),
    ('sale-event', 'Sale Event',
     'Bold promotional email for sales and special offers', 'promotional', _sale_event),
    ('welcome-email', 'Welcome Email',
     'Warm introduction for new wholesale partners', 'welcome', _welcome_email),
    ('product-showcase', 'Product Showcase',
     'Logo, highlighted section, three-column product grid and social footer', 'announcement', _product_showcase),
    ('blank', 'Blank Template',
     'Start from scratch with a clean canvas', 'newsletter', _blank),
)


def _build(preset):
    preset_id, name, description, category, factory = preset
    return {
        'id': preset_id,
        'name': name,
        'description': description,
        'thumbnail': f'/templates/{preset_id}.png',
        'category': category,
        'blocks': factory(),
    }


def get_presets():
    return [_build(p) for p in _PRESETS]


def get_preset_by_id(preset_id):
    for preset in _PRESETS:
        if preset[0] == preset_id:
            return _build(preset)
    return None


def get_presets_by_category(category):
    return [_build(p) for p in _PRESETS if p[3] == category]
