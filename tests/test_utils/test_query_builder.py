"""Unit tests for the /search query builder."""
from tracemoe.models.api_schemas import SearchOptions
from tracemoe.utils.query_builder import build_query

MEDIA_URL = "https://images.plurk.com/32B15UXxymfSMwKGTObY5e.jpg"


def test_nothing_to_send_is_empty():
    assert build_query(SearchOptions(), None) == ""
    assert build_query() == ""


def test_false_flags_are_not_sent():
    options = SearchOptions(should_cut_black_borders=False, should_include_extra_anilist_info=False)
    assert build_query(options) == ""


def test_media_url_only():
    assert build_query(None, MEDIA_URL) == f"?url={MEDIA_URL}"


def test_cut_borders_is_a_bare_flag():
    query = build_query(SearchOptions(should_cut_black_borders=True))
    assert query == "?cutBorders"
    assert "=" not in query


def test_anilist_id_is_stringified():
    assert build_query(SearchOptions(anilist_id=21034)) == "?anilistID=21034"
    assert build_query(SearchOptions(anilist_id="21034")) == "?anilistID=21034"


def test_anilist_info_is_a_bare_flag():
    assert build_query(SearchOptions(should_include_extra_anilist_info=True)) == "?anilistInfo"


def test_fixed_parameter_order():
    options = SearchOptions(
        should_include_extra_anilist_info=True,
        anilist_id=21034,
        should_cut_black_borders=True,
    )
    assert build_query(options, MEDIA_URL) == (
        f"?url={MEDIA_URL}&cutBorders&anilistID=21034&anilistInfo"
    )
