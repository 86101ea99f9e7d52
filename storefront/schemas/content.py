"""
Typed records for the documents served by the content store.

Every text field the shop editors translate arrives as an ``{en, nl}``
object; field names follow the content store (``productName``,
``itemNumber``) and are exposed under snake_case attributes.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.core.enums import SUPPORTED_LOCALES


class ContentSchema(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )


class TranslatableText(ContentSchema):
    en: Optional[str] = None
    nl: Optional[str] = None

    def get(self, locale: str) -> str:
        """Requested locale first, then the first locale that has text"""
        value = getattr(self, locale, None) if locale in SUPPORTED_LOCALES else None
        if value:
            return value
        for fallback in SUPPORTED_LOCALES:
            value = getattr(self, fallback)
            if value:
                return value
        return ""

    def has(self, locale: str) -> bool:
        return bool(getattr(self, locale, None))


class TranslatableRichText(ContentSchema):
    en: List[Dict[str, Any]] = Field(default_factory=list)
    nl: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator('en', 'nl', mode='before')
    @classmethod
    def none_to_list(cls, v):
        return v or []

    def paragraphs(self, locale: str) -> List[str]:
        blocks = getattr(self, locale, None) if locale in SUPPORTED_LOCALES else None
        if not blocks:
            blocks = next((getattr(self, l) for l in SUPPORTED_LOCALES if getattr(self, l)), [])
        return blocks_to_paragraphs(blocks)


def blocks_to_paragraphs(blocks: List[Dict[str, Any]]) -> List[str]:
    """Flatten Portable Text blocks into plain paragraphs"""
    paragraphs = []
    for block in blocks or []:
        if block.get("_type", "block") != "block":
            continue
        text = "".join(child.get("text", "") for child in block.get("children", []) or [])
        if text.strip():
            paragraphs.append(text)
    return paragraphs


class Slug(ContentSchema):
    current: str


class ImageAsset(ContentSchema):
    id: Optional[str] = Field(default=None, alias="_id")
    url: Optional[str] = None


class SanityImage(ContentSchema):
    asset: Optional[ImageAsset] = None
    alt: Optional[str] = None

    @property
    def url(self) -> Optional[str]:
        return self.asset.url if self.asset else None

    def sized(self, width: int, height: Optional[int] = None) -> Optional[str]:
        """Image CDN URL cropped to the given size"""
        if not self.url:
            return None
        params = f"w={width}" + (f"&h={height}&fit=crop" if height else "") + "&auto=format"
        return f"{self.url}?{params}"


class Seo(ContentSchema):
    meta_title: Optional[TranslatableText] = Field(default=None, alias="metaTitle")
    meta_description: Optional[TranslatableText] = Field(default=None, alias="metaDescription")


class CategoryRef(ContentSchema):
    """Category as embedded in a product (dereferenced)"""
    category_name: TranslatableText = Field(default_factory=TranslatableText, alias="categoryName")
    slug: Optional[Slug] = None


class Category(ContentSchema):
    id: str = Field(alias="_id")
    category_name: TranslatableText = Field(alias="categoryName")
    slug: Slug
    description: Optional[TranslatableText] = None
    category_image: Optional[SanityImage] = Field(default=None, alias="categoryImage")
    product_count: Optional[int] = Field(default=None, alias="productCount")
    seo: Optional[Seo] = None


class Product(ContentSchema):
    id: str = Field(alias="_id")
    product_name: TranslatableText = Field(alias="productName")
    slug: Slug
    product_images: List[SanityImage] = Field(default_factory=list, alias="productImages")
    description: Optional[TranslatableText] = None
    category: Optional[CategoryRef] = None
    item_number: str = Field(default="", alias="itemNumber")
    price: Optional[Decimal] = Field(default=None, ge=0)
    is_available: bool = Field(default=True, alias="isAvailable")
    seo: Optional[Seo] = None

    @field_validator('product_images', mode='before')
    @classmethod
    def none_to_list(cls, v):
        return v or []

    @field_validator('is_available', mode='before')
    @classmethod
    def default_available(cls, v):
        return True if v is None else v

    @field_validator('item_number', mode='before')
    @classmethod
    def item_number_to_str(cls, v):
        return "" if v is None else str(v)

    @property
    def category_slug(self) -> Optional[str]:
        if self.category and self.category.slug:
            return self.category.slug.current
        return None

    @property
    def path_segment(self) -> str:
        """Route segment the product page lives under"""
        return self.category_slug or "products"

    @property
    def main_image(self) -> Optional[SanityImage]:
        return self.product_images[0] if self.product_images else None


class HeroSlide(ContentSchema):
    background_image: Optional[SanityImage] = Field(default=None, alias="backgroundImage")
    mobile_image: Optional[SanityImage] = Field(default=None, alias="mobileImage")
    heading: TranslatableText = Field(default_factory=TranslatableText)
    body_text: TranslatableText = Field(default_factory=TranslatableText, alias="bodyText")
    button_text: TranslatableText = Field(default_factory=TranslatableText, alias="buttonText")
    button_link: Optional[str] = Field(default=None, alias="buttonLink")


class TrustBadge(ContentSchema):
    icon: Optional[str] = None
    text: TranslatableText = Field(default_factory=TranslatableText)
    description: Optional[TranslatableText] = None


class StoreSection(ContentSchema):
    store_image: Optional[SanityImage] = Field(default=None, alias="storeImage")
    address: Optional[str] = None
    timings: Optional[str] = None
    contact_info: Optional[str] = Field(default=None, alias="contactInfo")


class HomePage(ContentSchema):
    id: str = Field(alias="_id")
    title: Optional[str] = None
    hero_slides: List[HeroSlide] = Field(default_factory=list, alias="heroSlides")
    welcome_heading: TranslatableText = Field(default_factory=TranslatableText, alias="welcomeHeading")
    welcome_body: TranslatableRichText = Field(default_factory=TranslatableRichText, alias="welcomeBody")
    trust_badges: List[TrustBadge] = Field(default_factory=list, alias="trustBadges")
    store_section: Optional[StoreSection] = Field(default=None, alias="storeSection")
    seo: Optional[Seo] = None

    @field_validator('hero_slides', 'trust_badges', mode='before')
    @classmethod
    def none_to_list(cls, v):
        return v or []


class AboutValue(ContentSchema):
    value_title: TranslatableText = Field(default_factory=TranslatableText, alias="valueTitle")
    value_description: TranslatableText = Field(default_factory=TranslatableText, alias="valueDescription")


class AboutImpact(ContentSchema):
    impact_statistic: str = Field(default="", alias="impactStatistic")
    impact_label: TranslatableText = Field(default_factory=TranslatableText, alias="impactLabel")


class AboutPage(ContentSchema):
    id: str = Field(alias="_id")
    title: Optional[str] = None
    heading: TranslatableText = Field(default_factory=TranslatableText)
    introduction: TranslatableText = Field(default_factory=TranslatableText)
    hero_image: Optional[SanityImage] = Field(default=None, alias="heroImage")
    story_heading: TranslatableText = Field(default_factory=TranslatableText, alias="storyHeading")
    story_content: TranslatableRichText = Field(default_factory=TranslatableRichText, alias="storyContent")
    values_heading: TranslatableText = Field(default_factory=TranslatableText, alias="valuesHeading")
    values_subheading: TranslatableText = Field(default_factory=TranslatableText, alias="valuesSubheading")
    values_list: List[AboutValue] = Field(default_factory=list, alias="valuesList")
    impact_heading: TranslatableText = Field(default_factory=TranslatableText, alias="impactHeading")
    impact_subheading: TranslatableText = Field(default_factory=TranslatableText, alias="impactSubheading")
    impact_list: List[AboutImpact] = Field(default_factory=list, alias="impactList")
    offer_heading: TranslatableText = Field(default_factory=TranslatableText, alias="offerHeading")
    offer_image: Optional[SanityImage] = Field(default=None, alias="offerImage")
    offer_list: List[TranslatableText] = Field(default_factory=list, alias="offerList")
    visit_heading: TranslatableText = Field(default_factory=TranslatableText, alias="visitHeading")
    visit_text: TranslatableText = Field(default_factory=TranslatableText, alias="visitText")
    seo: Optional[Seo] = None

    @field_validator('values_list', 'impact_list', 'offer_list', mode='before')
    @classmethod
    def none_to_list(cls, v):
        return v or []


class StoreSettings(ContentSchema):
    id: str = Field(alias="_id")
    title: Optional[str] = None
    address: TranslatableText = Field(default_factory=TranslatableText)
    timings: TranslatableText = Field(default_factory=TranslatableText)
    phone_main: Optional[str] = Field(default=None, alias="phoneMain")
    phone_secondary: Optional[str] = Field(default=None, alias="phoneSecondary")
    email: Optional[str] = None
    store_image: Optional[SanityImage] = Field(default=None, alias="storeImage")
