import pytest

from storefront.core.exceptions import NotFound
from storefront.services.catalog import CatalogService


@pytest.fixture(name="catalog")
def catalog_fixture(session):
    return CatalogService(session)


class TestSearch:
    def test_matches_name_and_description(self, catalog, session, make_item):
        headphones = make_item(name="Wireless Headphones")
        charger = make_item(name="USB-C Charger")
        charger.description = "Fast charging for wireless earbuds"
        session.add(charger)
        session.commit()
        make_item(name="Margherita Pizza")

        assert [item.id for item in catalog.search("WIRELESS")] == [headphones.id, charger.id]

    def test_skips_inactive_items(self, catalog, make_item):
        make_item(name="Retired Speaker", is_active=False)
        assert catalog.search("speaker") == []


class TestStock:
    def test_decrement_only_when_enough_left(self, catalog, session, make_item):
        item = make_item(stock_quantity=3)
        assert catalog.decrement_stock(item.id, 2) is True
        assert catalog.decrement_stock(item.id, 2) is False
        session.commit()
        assert catalog.lookup(item.id).available_stock == 1

    def test_inactive_item_is_not_found(self, catalog, make_item):
        item = make_item(is_active=False)
        assert catalog.lookup(item.id).exists is False
        with pytest.raises(NotFound):
            catalog.get_item(item.id)
