"""
GROQ queries for the content store.

Translatable fields are projected as ``{"en": en, "nl": nl}`` so every
record arrives with both locales at once.
"""

TRANSLATABLE = '"en": en, "nl": nl'

IMAGE = "asset->{_id, url}, alt"

SEO = f"""seo {{
    metaTitle {{ {TRANSLATABLE} }},
    metaDescription {{ {TRANSLATABLE} }}
  }}"""

PRODUCT_FIELDS = f"""
    _id,
    productName {{ {TRANSLATABLE} }},
    slug,
    productImages[] {{ {IMAGE} }},
    description {{ {TRANSLATABLE} }},
    category-> {{
      categoryName {{ {TRANSLATABLE} }},
      slug
    }},
    itemNumber,
    price,
    isAvailable
"""

CATEGORY_FIELDS = f"""
    _id,
    categoryName {{ {TRANSLATABLE} }},
    slug,
    description {{ {TRANSLATABLE} }},
    categoryImage {{ {IMAGE} }}
"""

HOME_PAGE_QUERY = f"""
  *[_type == "homePage"][0] {{
    _id,
    _type,
    title,
    heroSlides[] {{
      backgroundImage {{ {IMAGE} }},
      mobileImage {{ {IMAGE} }},
      heading {{ {TRANSLATABLE} }},
      bodyText {{ {TRANSLATABLE} }},
      buttonText {{ {TRANSLATABLE} }},
      buttonLink
    }},
    welcomeHeading {{ {TRANSLATABLE} }},
    welcomeBody {{ {TRANSLATABLE} }},
    trustBadges[] {{
      icon,
      text {{ {TRANSLATABLE} }},
      description {{ {TRANSLATABLE} }}
    }},
    storeSection {{
      storeImage {{ {IMAGE} }},
      address,
      timings,
      contactInfo
    }},
    {SEO}
  }}
"""

ABOUT_PAGE_QUERY = f"""
  *[_type == "aboutPage"][0] {{
    _id,
    _type,
    title,
    heading {{ {TRANSLATABLE} }},
    introduction {{ {TRANSLATABLE} }},
    heroImage {{ {IMAGE} }},
    storyHeading {{ {TRANSLATABLE} }},
    storyContent {{ {TRANSLATABLE} }},
    valuesHeading {{ {TRANSLATABLE} }},
    valuesSubheading {{ {TRANSLATABLE} }},
    valuesList[] {{
      valueTitle {{ {TRANSLATABLE} }},
      valueDescription {{ {TRANSLATABLE} }}
    }},
    impactHeading {{ {TRANSLATABLE} }},
    impactSubheading {{ {TRANSLATABLE} }},
    impactList[] {{
      impactStatistic,
      impactLabel {{ {TRANSLATABLE} }}
    }},
    offerHeading {{ {TRANSLATABLE} }},
    offerImage {{ {IMAGE} }},
    offerList[] {{ {TRANSLATABLE} }},
    visitHeading {{ {TRANSLATABLE} }},
    visitText {{ {TRANSLATABLE} }},
    {SEO}
  }}
"""

STORE_SETTINGS_QUERY = f"""
  *[_type == "storeSettings"][0] {{
    _id,
    _type,
    title,
    address {{ {TRANSLATABLE} }},
    timings {{ {TRANSLATABLE} }},
    phoneMain,
    phoneSecondary,
    email,
    storeImage {{ {IMAGE} }}
  }}
"""

ALL_CATEGORIES_QUERY = f"""
  *[_type == "category"] | order(categoryName.en asc) {{
    {CATEGORY_FIELDS},
    "productCount": count(*[_type == "product" && references(^._id)])
  }}
"""

CATEGORY_BY_SLUG_QUERY = f"""
  *[_type == "category" && slug.current == $slug][0] {{
    {CATEGORY_FIELDS},
    {SEO}
  }}
"""

CATEGORY_SLUG_BY_ID_QUERY = """
  *[_type == "category" && _id == $id][0].slug.current
"""

ALL_PRODUCTS_QUERY = f"""
  *[_type == "product"] | order(itemNumber asc) {{
    {PRODUCT_FIELDS}
  }}
"""

PRODUCTS_BY_CATEGORY_QUERY = f"""
  *[_type == "product" && category->slug.current == $categorySlug] | order(itemNumber asc) {{
    {PRODUCT_FIELDS}
  }}
"""

PRODUCT_BY_SLUG_QUERY = f"""
  *[_type == "product" && slug.current == $slug][0] {{
    {PRODUCT_FIELDS},
    {SEO}
  }}
"""

SEARCH_MATCH = """
    productName.en match $searchTerm + "*" ||
    productName.nl match $searchTerm + "*" ||
    description.en match $searchTerm + "*" ||
    description.nl match $searchTerm + "*"
"""

SEARCH_PRODUCTS_QUERY = f"""
  *[_type == "product" && ({SEARCH_MATCH})] | order(_score desc, itemNumber asc) [0...$limit] {{
    {PRODUCT_FIELDS}
  }}
"""

SEARCH_COUNT_QUERY = f"""
  count(*[_type == "product" && ({SEARCH_MATCH})])
"""

SITEMAP_QUERY = """
  {
    "categories": *[_type == "category"].slug.current,
    "products": *[_type == "product"] {
      "slug": slug.current,
      "category": category->slug.current
    }
  }
"""
