"""Upstream operation documents.

Selection sets use the upstream (unprefixed) type names; the source client
re-prefixes ``__typename`` in responses so resolvers see mesh type names.
"""

from __future__ import annotations
from typing import Dict, Optional


# Variable types per upstream root field
VARIABLE_TYPES: Dict[str, Dict[str, str]] = {
    "productSearch": {
        "phrase": "String!",
        "filter": "[SearchClauseInput!]",
        "page_size": "Int",
        "current_page": "Int",
        "sort": "[ProductSearchSortInput!]",
    },
    "categoryList": {"filters": "CategoryFilterInput"},
    "products": {"filter": "ProductAttributeFilterInput"},
    "cart": {"cart_id": "String!"},
    "createEmptyCart": {},
    "addSimpleProductsToCart": {"input": "AddSimpleProductsToCartInput"},
    "addConfigurableProductsToCart": {"input": "AddConfigurableProductsToCartInput"},
    "updateCartItems": {"input": "UpdateCartItemsInput"},
    "removeItemFromCart": {"input": "RemoveItemFromCartInput"},
}


def build_operation(
    operation: str,
    name: str,
    field: str,
    variables: Dict,
    selection_set: Optional[str] = None,
) -> str:
    types = VARIABLE_TYPES.get(field)
    if types is None:
        raise ValueError(f"Unknown upstream field: {field}")
    unknown = [k for k in variables if k not in types]
    if unknown:
        raise ValueError(f"Unknown arguments for {field}: {', '.join(unknown)}")

    definitions = ", ".join(f"${k}: {types[k]}" for k in variables)
    arguments = ", ".join(f"{k}: ${k}" for k in variables)
    head = f"{operation} {name}({definitions})" if definitions else f"{operation} {name}"
    call = f"{field}({arguments})" if arguments else field
    body = f" {selection_set.strip()}" if selection_set else ""
    return f"{head} {{ {call}{body} }}"


PRODUCT_VIEW_FIELDS = """
    __typename
    id name sku urlKey inStock
    images(roles: ["small_image"]) { url label }
    attributes { name value }
    ... on SimpleProductView {
      price {
        regular { amount { value } }
        final { amount { value } }
      }
    }
    ... on ComplexProductView {
      priceRange {
        minimum {
          regular { amount { value } }
          final { amount { value } }
        }
      }
      options {
        id
        title
        values {
          ... on ProductViewOptionValueSwatch { title value }
        }
      }
    }
"""

PAGE_INFO_FIELDS = "page_info { current_page page_size total_pages }"

FACET_FIELDS = """
  facets {
    attribute
    title
    type
    buckets {
      ... on ScalarBucket { title count }
      ... on RangeBucket { title count }
    }
  }
"""

PRODUCT_LIST = f"""{{
  items {{
    productView {{ {PRODUCT_VIEW_FIELDS} }}
  }}
  total_count
  {PAGE_INFO_FIELDS}
}}"""

PRODUCT_LIST_WITH_FACETS = f"""{{
  items {{
    productView {{ {PRODUCT_VIEW_FIELDS} }}
  }}
  total_count
  {PAGE_INFO_FIELDS}
  {FACET_FIELDS}
}}"""

SEARCH_RANKING = f"""{{
  items {{
    product {{ sku }}
    productView {{ sku }}
  }}
  total_count
  {PAGE_INFO_FIELDS}
}}"""

FACETS_ONLY = f"{{ {FACET_FIELDS} }}"

SEARCH_SUGGESTIONS = """{
  items {
    product {
      sku
      name
      small_image { url }
    }
    productView {
      id
      sku
      name
      urlKey
      inStock
      ... on SimpleProductView {
        price {
          final { amount { value } }
          regular { amount { value } }
        }
      }
      images { url }
    }
  }
}"""

PRODUCT_DETAIL = """{
  items {
    productView {
      __typename
      id name sku urlKey inStock
      description shortDescription
      images(roles: ["small_image"]) { url label }
      attributes { name label value }
      ... on SimpleProductView {
        price {
          regular { amount { value } }
          final { amount { value } }
        }
      }
      ... on ComplexProductView {
        priceRange {
          minimum {
            regular { amount { value } }
            final { amount { value } }
          }
        }
        options {
          id
          title
          values {
            ... on ProductViewOptionValueSwatch { title value }
          }
        }
      }
    }
  }
}"""

# Full selection for the Catalog_productSearch passthrough; the gateway schema
# resolves whatever subset the client asked for.
CATALOG_PASSTHROUGH = """{
  total_count
  page_info { current_page page_size total_pages }
  facets {
    attribute
    title
    type
    buckets {
      __typename
      ... on ScalarBucket { id title count }
      ... on RangeBucket { title count from to }
    }
  }
  items {
    productView {
      __typename
      id name sku urlKey inStock
      description shortDescription
      images { url label roles }
      attributes { name label value }
      ... on SimpleProductView {
        price {
          regular { amount { value currency } }
          final { amount { value currency } }
        }
      }
      ... on ComplexProductView {
        priceRange {
          minimum {
            regular { amount { value currency } }
            final { amount { value currency } }
          }
          maximum {
            regular { amount { value currency } }
            final { amount { value currency } }
          }
        }
        options {
          id
          title
          required
          multi
          values {
            __typename
            id
            title
            inStock
            ... on ProductViewOptionValueSwatch { type value }
          }
        }
      }
    }
  }
}"""

COMMERCE_VARIANTS = """{
  items {
    sku
    ... on ConfigurableProduct {
      variants {
        product {
          sku
          name
          price_range {
            minimum_price {
              regular_price { value }
              final_price { value }
            }
          }
          image { url label }
          stock_status
        }
        attributes {
          code
          label
          value_index
        }
      }
    }
  }
}"""

_CATEGORY_FIELDS = """
  id
  uid
  name
  url_path
  url_key
  include_in_menu
  is_active
  level
  position
  product_count
"""

CATEGORY_TREE = f"""{{
  {_CATEGORY_FIELDS}
  children {{
    {_CATEGORY_FIELDS}
    children {{
      {_CATEGORY_FIELDS}
    }}
  }}
}}"""

CATEGORY_BREADCRUMBS = """{
  id
  uid
  name
  url_path
  level
  breadcrumbs {
    category_id
    category_name
    category_url_path
    category_level
  }
}"""

CATEGORY_DETAILS = """{
  id name url_path description meta_title meta_description
  breadcrumbs {
    category_id
    category_name
    category_url_path
  }
}"""

CART_ID = "{ id }"

CART_DETAILS = """{
  id
  total_quantity
  items {
    id
    product {
      id
      sku
      name
      thumbnail { url }
      media_gallery { url label role }
      price_range {
        minimum_price { final_price { value } }
      }
    }
    quantity
    prices {
      row_total { value currency }
      price { value currency }
    }
    ... on ConfigurableCartItem {
      configurable_options {
        option_label
        value_label
        attribute_code
      }
    }
  }
  prices {
    grand_total { value currency }
    subtotal_excluding_tax { value currency }
  }
}"""

CART_MUTATION_RESULT = """{
  cart {
    id
    items { id quantity }
  }
}"""
