"""
WhatsApp enquiry links. The shop takes orders by chat, so every product
page and the contact page link here instead of to a checkout.
"""

import re
from typing import Dict, List, Optional
from urllib.parse import quote

from storefront.core.enums import DEFAULT_LOCALE

MESSAGES = {
    "general": {
        "en": "Hello! I'm interested in your cultural products. Could you help me?",
        "nl": "Hallo! Ik ben geïnteresseerd in jullie culturele producten. Kunnen jullie me helpen?",
    },
    "product": {
        "en": "Hello! I'm interested in the product: {product}. Could you provide more information?",
        "nl": "Hallo! Ik ben geïnteresseerd in het product: {product}. Kunnen jullie meer informatie geven?",
    },
    "store": {
        "en": "Hello! I'd like to visit your store. What are your opening hours?",
        "nl": "Hallo! Ik zou graag jullie winkel bezoeken. Wat zijn jullie openingstijden?",
    },
    "custom": {
        "en": "Hello! I have a question about...",
        "nl": "Hallo! Ik heb een vraag over...",
    },
}

LABELS = {
    "general": {"en": "General Inquiry", "nl": "Algemene Vraag"},
    "product": {"en": "Ask about this product", "nl": "Vraag over dit product"},
    "store": {"en": "Store Visit", "nl": "Winkelbezoek"},
    "custom": {"en": "Other Question", "nl": "Andere Vraag"},
}


def whatsapp_url(phone_number: str, message: str = "") -> str:
    digits = re.sub(r"\D", "", phone_number or "")
    url = f"https://wa.me/{digits}"
    if message:
        url += f"?text={quote(message, safe='')}"
    return url


def message(kind: str, lang: str, product_name: Optional[str] = None) -> str:
    texts = MESSAGES[kind]
    text = texts.get(lang, texts[DEFAULT_LOCALE])
    return text.format(product=product_name or "")


def quick_messages(phone_number: str, lang: str, product_name: Optional[str] = None) -> List[Dict[str, str]]:
    """Links for the enquiry menu; the product entry only appears on product pages"""
    kinds = ["general"] + (["product"] if product_name else []) + ["store", "custom"]
    return [
        {
            "kind": kind,
            "label": LABELS[kind].get(lang, LABELS[kind][DEFAULT_LOCALE]),
            "url": whatsapp_url(phone_number, message(kind, lang, product_name)),
        }
        for kind in kinds
    ]
