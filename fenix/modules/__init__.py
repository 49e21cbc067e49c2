"""
Fenix Modules
=============

Flask blueprint modules for the Fenix Brokers admin and storefront APIs.
"""

__all__ = ['campaigns', 'email', 'inquiries', 'subscribers', 'templates']
