import json
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Optional

from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from storefront.core.enums import SUPPORTED_LOCALES
from storefront.core.i18n import translate


def format_price(value: Optional[Decimal], lang: str = "en") -> str:
    """``€ 12,50`` for Dutch, ``€12.50`` for English; empty when there is no price"""
    if value is None:
        return ""
    amount = f"{Decimal(value):,.2f}"
    if lang == "nl":
        amount = amount.replace(",", "_").replace(".", ",").replace("_", ".")
        return f"€ {amount}"
    return f"€{amount}"


def json_ld(data) -> Markup:
    """Serialize structured data for a <script type="application/ld+json"> tag"""
    text = json.dumps(data, ensure_ascii=False).replace("</", "<\\/")
    return Markup(text)


# Initialize templates once
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
templates.env.globals["now"] = lambda: datetime.now(timezone.utc)
templates.env.globals["t"] = translate
templates.env.globals["locales"] = SUPPORTED_LOCALES
templates.env.filters["price"] = format_price
templates.env.filters["json_ld"] = json_ld
