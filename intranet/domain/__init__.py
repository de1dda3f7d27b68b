"""
Domain layer for the intranet sync service.

This layer contains business entities, value objects, and canonical
enumerations shared by the CMS and the WooCommerce storefronts.
"""
