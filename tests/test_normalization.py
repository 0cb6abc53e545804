import uuid

from statuspage.utils import parse_uuid, slugify


def test_slugify():
    assert slugify("Acme Corp.") == "acme-corp"
    assert slugify("Café  Crème_Co") == "cafe-creme-co"


def test_parse_uuid():
    value = uuid.uuid4()
    assert parse_uuid(str(value)) == value
    assert parse_uuid("abc") is None
    assert parse_uuid("") is None
