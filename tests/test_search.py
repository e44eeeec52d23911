from mercado_jaci.models import Product
from mercado_jaci.services import admin_search, list_categories, storefront_search


def test_list_categories_distinct_sorted_non_empty():
    products = [
        Product(id=str(i), name=f'P{i}', price=1.0, category=c)
        for i, c in enumerate(['Bebidas', '', 'hortifruti', 'Bebidas', '  ', ' Bebidas '])
    ]
    assert list_categories(products) == ['Bebidas', 'hortifruti']


def test_admin_search_matches_tags_and_description(products):
    assert [p.name for p in admin_search(products, 'lata')] == ['Cerveja']
    assert [p.name for p in admin_search(products, 'CENTRO')] == ['Tomate']
    assert admin_search(products, '') == products


def test_admin_search_spans_concatenated_fields(products):
    # "Arroz Mercearia" solo existe en el texto concatenado
    assert [p.name for p in admin_search(products, 'arroz mercearia')] == ['Arroz']


def test_storefront_search_ignores_description(products):
    assert storefront_search(products, 'centro') == []
    assert [p.name for p in storefront_search(products, 'lata')] == ['Cerveja']
    assert [p.name for p in storefront_search(products, 'bebidas')] == ['Cerveja']


def test_storefront_category_filter_is_exact(products):
    assert [p.name for p in storefront_search(products, '', 'Bebidas')] == ['Cerveja']
    assert storefront_search(products, '', 'bebidas') == []
    assert storefront_search(products, 'arroz', 'Bebidas') == []


def test_results_keep_catalog_order(products):
    names = [p.name for p in storefront_search(products, 'a')]
    assert names == ['Arroz', 'Cerveja', 'Tomate']
    assert storefront_search(products, None) == products
