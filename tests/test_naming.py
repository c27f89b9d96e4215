"""
Unit and property tests for source field name resolution.
"""

from hypothesis import given, strategies as st

from sqlcmapper.utils.naming import resolve_source_field, to_snake_case


class TestToSnakeCase:
    """Tests for to_snake_case."""

    def test_camel_case(self):
        assert to_snake_case("UserId") == "user_id"
        assert to_snake_case("createdAt") == "created_at"

    def test_leading_capital_gets_no_underscore(self):
        assert to_snake_case("Name") == "name"

    def test_acronyms_split_per_letter(self):
        assert to_snake_case("ID") == "i_d"
        assert to_snake_case("UserID") == "user_i_d"

    def test_snake_case_unchanged(self):
        assert to_snake_case("user_id") == "user_id"

    def test_empty(self):
        assert to_snake_case("") == ""

    def test_non_ascii_letters_untouched(self):
        assert to_snake_case("ÄpfelCount") == "Äpfel_count"

    @given(st.text(alphabet=st.characters(exclude_categories=("Lu", "Cs")), max_size=30))
    def test_identity_without_uppercase(self, name):
        """Names with no uppercase letters map to themselves."""
        assert to_snake_case(name) == name

    @given(st.text(alphabet="abcXYZ_1", max_size=30))
    def test_output_has_no_ascii_uppercase(self, name):
        result = to_snake_case(name)
        assert not any("A" <= ch <= "Z" for ch in result)
        assert to_snake_case(result) == result


class TestResolveSourceField:
    """Tests for resolve_source_field."""

    def test_exact_match(self):
        assert resolve_source_field({"Name": "a"}, "Name") == (True, "a")

    def test_source_camel_case_matches_snake_expected(self):
        assert resolve_source_field({"UserId": 7}, "user_id") == (True, 7)

    def test_snake_source_matches_camel_expected(self):
        """A target named UserId resolves a source field named user_id."""
        assert resolve_source_field({"user_id": 7}, "UserId") == (True, 7)

    def test_exact_match_wins(self):
        fields = {"UserId": 1, "user_id": 2}
        assert resolve_source_field(fields, "user_id") == (True, 2)
        assert resolve_source_field(fields, "UserId") == (True, 1)

    def test_first_converted_match_in_source_order(self):
        fields = {"userId": 1, "UserId": 2}
        assert resolve_source_field(fields, "user_id") == (True, 1)

    def test_missing(self):
        assert resolve_source_field({"name": "a"}, "email") == (False, None)

    def test_found_none_value(self):
        assert resolve_source_field({"email": None}, "email") == (True, None)
