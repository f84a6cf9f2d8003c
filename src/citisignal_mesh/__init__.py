"""
Citisignal API Mesh gateway.

This package merges three upstream GraphQL services into one storefront
schema:
- Commerce Core (categories, carts, product variants)
- Catalog Service (product views, price ranges, facets)
- Live Search (ranked full-text results and suggestions)

Public API (stable surface under construction):
- config.load_config, config.load_env, config.MESH_CONFIG
- schema.create_schema, schema.execute, schema.result_to_dict
- sources.SourceClient, sources.create_context, sources.gather
- mapping.attribute_code_to_url_key, mapping.url_key_to_attribute_code
- filters.build_catalog_filters, filters.build_live_search_filters, filters.build_sort
- transform.transform_product_to_card, transform.transform_product_detail
- cart.transform_cart_to_semantic, navigation.build_header_nav, navigation.build_breadcrumbs
- build.build_all, build.generate_mesh_config, deploy.deploy
"""

from . import attributes, cart, facets, filters, images, mapping, navigation, normalize, prices, transform  # re-export modules

__all__ = [
    "attributes",
    "cart",
    "facets",
    "filters",
    "images",
    "mapping",
    "navigation",
    "normalize",
    "prices",
    "transform",
]
