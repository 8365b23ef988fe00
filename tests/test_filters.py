from decimal import Decimal

import pytest

from furniture_app.models.ad import Condition
from furniture_app.search.filters import (
    AdFilters,
    GenericFilters,
    Pageable,
    SortDirection,
    UserFilters,
    parse_sort_direction,
)


@pytest.mark.parametrize("raw, expected", [
    ("asc", SortDirection.ASC),
    ("DESC", SortDirection.DESC),
    (" desc ", SortDirection.DESC),
    ("sideways", SortDirection.ASC),
    ("", SortDirection.ASC),
    (None, SortDirection.ASC),
])
def test_parse_sort_direction(raw, expected):
    assert parse_sort_direction(raw) is expected


def test_defaults_when_nothing_given():
    f = GenericFilters()
    assert f.get_pageable() == Pageable(page=0, size=10, sort_by="id", direction=SortDirection.ASC)


def test_out_of_range_paging_falls_back():
    f = GenericFilters(page=-3, page_size=0, sort_by="   ")
    assert f.get_page() == 0
    assert f.get_page_size() == 10
    assert f.get_sort_by() == "id"


def test_pageable_offset():
    f = GenericFilters(page=2, page_size=5, sort_by="price", sort_direction="desc")
    p = f.get_pageable()
    assert p.offset == 10
    assert p.sort_by == "price"
    assert p.direction is SortDirection.DESC


def test_ad_filters_accept_camel_case():
    f = AdFilters.model_validate({
        "categoryName": "Chairs",
        "minPrice": "10.50",
        "isAvailable": True,
        "myAds": True,
        "pageSize": 3,
        "condition": "good",
    })
    assert f.category_name == "Chairs"
    assert f.min_price == Decimal("10.50")
    assert f.is_available is True
    assert f.my_ads is True
    assert f.get_page_size() == 3
    assert f.condition is Condition.GOOD


def test_blank_condition_means_no_filter():
    assert AdFilters.model_validate({"condition": " "}).condition is None


def test_user_filters():
    f = UserFilters.model_validate({"email": "a@b.gr", "isActive": False})
    assert f.email == "a@b.gr"
    assert f.is_active is False
