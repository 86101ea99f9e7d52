"""
Rows consumed by the catalog listing / search pipeline.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.schemas.content import CategoryRef, Product, SanityImage, TranslatableText


class CatalogEntry(BaseModel):
    """
    Immutable snapshot of one product as shown in a listing.

    ``sort_key`` is the item number and gives the default catalog order;
    a missing ``price`` means price on request.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: TranslatableText
    description: Optional[TranslatableText] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    sort_key: str = ""
    category: Optional[CategoryRef] = None
    slug: Optional[str] = None
    image: Optional[SanityImage] = None
    is_available: bool = True

    @classmethod
    def from_product(cls, product: Product) -> "CatalogEntry":
        return cls(
            id=product.id,
            name=product.product_name,
            description=product.description,
            price=product.price,
            sort_key=product.item_number,
            category=product.category,
            slug=product.slug.current,
            image=product.main_image,
            is_available=product.is_available,
        )

    @property
    def category_slug(self) -> Optional[str]:
        if self.category and self.category.slug:
            return self.category.slug.current
        return None

    def href(self, lang: str) -> str:
        return f"/{lang}/{self.category_slug or 'products'}/{self.slug}"

    def to_json(self, lang: str) -> dict:
        """Flat, single-locale payload used by the search APIs"""
        return {
            "id": self.id,
            "name": self.name.get(lang),
            "description": self.description.get(lang) if self.description else "",
            "price": float(self.price) if self.price is not None else None,
            "itemNumber": self.sort_key,
            "category": self.category.category_name.get(lang) if self.category else None,
            "categorySlug": self.category_slug,
            "url": self.href(lang),
            "image": self.image.sized(400, 400) if self.image else None,
            "isAvailable": self.is_available,
        }
