"""
Módulo de acceso a los sistemas externos de registro.

Este módulo proporciona acceso al CMS (Strapi) y a las tiendas WooCommerce
con separación clara de responsabilidades:

- StrapiClient: Cliente REST del CMS con registros aplanados
- WooCommerceRegistry: Un cliente por tienda configurada
- cms: Repositorios por colección del CMS
"""

from intranet.db.strapi_client import StrapiClient, flatten_entity
from intranet.db.woocommerce_clients import WooCommerceClient, WooCommerceRegistry

__all__ = [
    "StrapiClient",
    "flatten_entity",
    "WooCommerceClient",
    "WooCommerceRegistry",
]
