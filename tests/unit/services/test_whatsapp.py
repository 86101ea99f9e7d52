# tests/unit/services/test_whatsapp.py
from storefront.services.whatsapp import message, quick_messages, whatsapp_url


def test_url_keeps_only_digits():
    assert whatsapp_url("+31 (6) 1234-5678") == "https://wa.me/31612345678"


def test_url_encodes_message():
    url = whatsapp_url("+31612345678", "Hello! Price of ring & bell?")

    assert url == "https://wa.me/31612345678?text=Hello%21%20Price%20of%20ring%20%26%20bell%3F"


def test_product_message_is_localized():
    assert "Silver Ring" in message("product", "en", "Silver Ring")
    assert message("product", "nl", "Zilveren Ring").startswith("Hallo!")


def test_unknown_locale_falls_back_to_english():
    assert message("general", "fr") == message("general", "en")


def test_quick_messages_without_product():
    kinds = [m["kind"] for m in quick_messages("+31612345678", "en")]

    assert kinds == ["general", "store", "custom"]


def test_quick_messages_on_product_page():
    links = quick_messages("+31612345678", "nl", product_name="Zilveren Ring")

    assert [m["kind"] for m in links] == ["general", "product", "store", "custom"]
    assert links[1]["label"] == "Vraag over dit product"
    assert "Zilveren%20Ring" in links[1]["url"]
