import pytest

from app.services.query_builder import (
    DEFAULT_SORT,
    TEXT_SCORE,
    build_product_query,
    build_search_query,
    build_text_filter,
    normalize_page,
)


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 1), ("", 1), ("0", 1), ("-1", 1), ("abc", 1), ("3", 3), ("2abc", 2), (" 4", 4)],
)
def test_normalize_page(raw, expected):
    assert normalize_page(raw) == expected


def test_text_filter_uses_text_index():
    assert build_text_filter("shirt", True) == {"$text": {"$search": "shirt"}}


def test_text_filter_regex_fallback_is_not_escaped():
    assert build_text_filter("sh.rt", False) == {
        "$or": [
            {"name": {"$regex": "sh.rt", "$options": "i"}},
            {"description": {"$regex": "sh.rt", "$options": "i"}},
        ]
    }
    assert build_text_filter(None, False) == {}


def test_pipeline_structure():
    spec = build_product_query(None, "shoes", "price_asc", 3, 8, True)
    stages = [next(iter(stage)) for stage in spec.pipeline]
    assert stages == ["$match", "$lookup", "$match", "$project", "$sort", "$skip", "$limit"]
    assert spec.pipeline[0] == {"$match": {}}
    assert spec.pipeline[1]["$lookup"] == {
        "from": "categories",
        "localField": "categoryIds",
        "foreignField": "_id",
        "as": "categories",
    }
    assert spec.pipeline[2] == {"$match": {"categories": {"$elemMatch": {"slug": "shoes"}}}}
    assert spec.pipeline[4] == {"$sort": {"price": 1, "_id": 1}}
    assert spec.pipeline[5] == {"$skip": 16}
    assert spec.pipeline[6] == {"$limit": 8}
    assert spec.skip == 16


def test_count_pipeline_shares_filter():
    spec = build_product_query("shirt", "t-shirts", None, 2, 8, True)
    assert spec.count_pipeline[:3] == spec.pipeline[:3]
    assert spec.count_pipeline[-1] == {"$count": "total"}
    assert not any("$sort" in stage or "$skip" in stage for stage in spec.count_pipeline)


@pytest.mark.parametrize(
    "sort, expected",
    [
        ("price_asc", {"price": 1, "_id": 1}),
        ("price_desc", {"price": -1, "_id": 1}),
        ("name_asc", {"name": 1, "_id": 1}),
        ("name_desc", {"name": -1, "_id": 1}),
        (None, DEFAULT_SORT),
        ("default", DEFAULT_SORT),
        ("bogus", DEFAULT_SORT),
    ],
)
def test_sort_mapping(sort, expected):
    spec = build_product_query(None, None, sort, 1, 8, True)
    assert spec.pipeline[4] == {"$sort": expected}
    assert not spec.ranked


def test_text_search_sorts_by_relevance():
    spec = build_product_query("shirt", None, None, 1, 8, True)
    assert spec.ranked
    assert spec.pipeline[0] == {"$match": {"$text": {"$search": "shirt"}}}
    assert spec.pipeline[3]["$project"]["score"] == TEXT_SCORE
    assert spec.pipeline[4] == {"$sort": {"score": TEXT_SCORE}}


def test_default_key_ranks_text_search():
    spec = build_product_query("shirt", None, "default", 1, 8, True)
    assert spec.ranked
    assert spec.pipeline[4] == {"$sort": {"score": TEXT_SCORE}}


def test_explicit_sort_wins_over_relevance():
    spec = build_product_query("shirt", None, "price_desc", 1, 8, True)
    assert not spec.ranked
    assert spec.pipeline[4] == {"$sort": {"price": -1, "_id": 1}}


def test_regex_search_keeps_default_sort():
    spec = build_product_query("shirt", None, None, 1, 8, False)
    assert "$or" in spec.pipeline[0]["$match"]
    assert spec.pipeline[4] == {"$sort": DEFAULT_SORT}


def test_search_query():
    ranked = build_search_query("shirt", 2, 8, True)
    assert ranked.filter == {"$text": {"$search": "shirt"}}
    assert ranked.sort == [("score", TEXT_SCORE)]
    assert ranked.projection == {"score": TEXT_SCORE}
    assert (ranked.skip, ranked.limit) == (8, 8)

    fallback = build_search_query("shirt", 0, 8, False)
    assert fallback.sort == [("name", 1), ("_id", 1)]
    assert fallback.projection is None
    assert fallback.page == 1 and fallback.skip == 0
