"""Unit tests for avatar extraction - pure functions, no browser."""

import json

import pytest

from pfproxy.core.extractor import (
    AVATAR_KEYS,
    clean_avatar_url,
    extract_from_state,
    find_avatar,
    normalize_url,
    parse_state,
)

LARGE = "https://p16.cdn/avatar-large.jpeg"
MEDIUM = "https://p16.cdn/avatar-medium.jpeg"
THUMB = "https://p16.cdn/avatar-thumb.jpeg"


class TestFindAvatar:
    """Breadth-first search over the state tree."""

    def test_finds_nested_field(self):
        state = {"__DEFAULT_SCOPE__": {"webapp.user-detail": {"userInfo": {"user": {"avatarLarger": LARGE}}}}}
        assert find_avatar(state) == LARGE

    def test_shallower_match_wins_regardless_of_key(self):
        state = {
            "deep": {"deeper": {"avatarLarger": LARGE}},
            "avatarThumb": THUMB,
        }
        assert find_avatar(state) == THUMB

    def test_equal_depth_first_key_wins(self):
        state = {"user": {"avatarMedium": MEDIUM, "avatarLarger": LARGE}}
        assert find_avatar(state) == MEDIUM

    def test_equal_depth_earlier_sibling_wins(self):
        state = {
            "a": {"avatarThumb": THUMB},
            "b": {"avatarLarger": LARGE},
        }
        assert find_avatar(state) == THUMB

    def test_searches_inside_lists(self):
        state = {"users": [{"name": "x"}, {"avatarLarger": LARGE}]}
        assert find_avatar(state) == LARGE

    def test_rejects_short_values(self):
        state = {"avatarLarger": "short", "nested": {"avatarThumb": THUMB}}
        assert find_avatar(state) == THUMB

    def test_ten_character_value_rejected(self):
        assert find_avatar({"avatarLarger": "x" * 10}) is None

    def test_eleven_character_value_accepted(self):
        assert find_avatar({"avatarLarger": "x" * 11}) == "x" * 11

    def test_rejects_non_string_values(self):
        state = {"avatarLarger": {"url": LARGE}, "avatarThumb": 12345678901}
        assert find_avatar(state) is None

    def test_ignores_other_keys(self):
        state = {"avatar": LARGE, "coverLarger": LARGE}
        assert find_avatar(state) is None

    @pytest.mark.parametrize("state", [None, 42, "avatarLarger", [], {}])
    def test_scalars_and_empty_containers(self, state):
        assert find_avatar(state) is None

    def test_known_keys(self):
        assert AVATAR_KEYS == ("avatarLarger", "avatarMedium", "avatarThumb")


class TestStateParsing:
    """Structured-state strategy end to end."""

    def test_parse_valid_json(self):
        assert parse_state('{"a": 1}') == {"a": 1}

    @pytest.mark.parametrize("text", [None, "", "{not json", "<html>"])
    def test_unusable_text_returns_none(self, text):
        assert parse_state(text) is None
        assert extract_from_state(text) is None

    def test_extract_from_state(self):
        text = json.dumps({"user": {"avatarLarger": LARGE}})
        assert extract_from_state(text) == LARGE

    def test_extract_from_state_without_avatar(self):
        assert extract_from_state(json.dumps({"user": {"nickname": "x"}})) is None


class TestUrlCleanup:
    """Post-processing shared by both strategies."""

    def test_unescapes_and_adds_scheme(self):
        raw = "//p16.cdn\\u002Fimg\\u002Fa.jpeg?x=1\\u0026y=2"
        assert clean_avatar_url(raw) == "https://p16.cdn/img/a.jpeg?x=1&y=2"

    def test_unescapes_backslash_slash(self):
        raw = "https:\\/\\/p16.cdn\\/a.jpeg"
        assert clean_avatar_url(raw) == "https://p16.cdn/a.jpeg"

    def test_no_escape_sequences_remain(self):
        raw = "\\/\\/p16.cdn\\u002Fa\\u002Fb.jpeg?s=1\\u0026t=2"
        cleaned = clean_avatar_url(raw)
        assert cleaned.startswith("https://")
        assert "\\" not in cleaned

    def test_absolute_url_untouched(self):
        assert clean_avatar_url(LARGE) == LARGE

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_returns_none(self, raw):
        assert clean_avatar_url(raw) is None

    def test_normalize_strips_whitespace(self):
        assert normalize_url("  //host/a.png ") == "https://host/a.png"
