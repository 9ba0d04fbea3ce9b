from datetime import date

from locallibrary.validators import (
    AUTHOR_RULES,
    BOOK_RULES,
    BOOKINSTANCE_RULES,
    GENRE_RULES,
    FieldRules,
    document_id,
    escape,
    max_length,
    min_length,
    trim,
    validate,
)


def test_valid_author_is_trimmed():
    result = validate({"first_name": "  Isaac ", "family_name": "Asimov"}, AUTHOR_RULES)
    assert result.is_valid
    assert result.values["first_name"] == "Isaac"
    assert result.values["family_name"] == "Asimov"
    assert result.values["date_of_birth"] is None
    assert result.values["date_of_death"] is None


def test_all_fields_are_checked():
    result = validate({"first_name": "", "family_name": ""}, AUTHOR_RULES)
    assert [e.field for e in result.errors] == ["first_name", "family_name"]
    assert result.messages("first_name") == ["First name must be specified."]
    assert result.messages("family_name") == ["Family name must be specified."]


def test_first_failing_rule_message_is_kept():
    # Empty also fails the alphanumeric check; only the first message is reported.
    result = validate({"first_name": "   ", "family_name": "Smith"}, AUTHOR_RULES)
    assert result.messages("first_name") == ["First name must be specified."]


def test_value_is_escaped_even_when_invalid():
    result = validate({"first_name": " <b>Jo</b> ", "family_name": "Smith"}, AUTHOR_RULES)
    assert result.values["first_name"] == "&lt;b&gt;Jo&lt;/b&gt;"
    assert result.messages("first_name") == ["First name has non-alphanumeric characters."]


def test_optional_dates():
    result = validate({
        "first_name": "Isaac",
        "family_name": "Asimov",
        "date_of_birth": "1920-01-02",
        "date_of_death": "",
    }, AUTHOR_RULES)
    assert result.is_valid
    assert result.values["date_of_birth"] == date(1920, 1, 2)
    assert result.values["date_of_death"] is None


def test_invalid_date():
    result = validate({
        "first_name": "Isaac",
        "family_name": "Asimov",
        "date_of_birth": "second of january",
    }, AUTHOR_RULES)
    assert result.messages("date_of_birth") == ["Invalid date of birth"]
    assert result.values["date_of_birth"] is None


AUTHOR_ID = "0123456789abcdef01234567"


def test_book_genre_is_always_a_list():
    base = {"title": "T", "author": AUTHOR_ID, "summary": "S", "isbn": "1"}
    assert validate(base, BOOK_RULES).values["genre"] == []
    assert validate({**base, "genre": "abc"}, BOOK_RULES).values["genre"] == ["abc"]
    assert validate({**base, "genre": ["a", "b"]}, BOOK_RULES).values["genre"] == ["a", "b"]


def test_book_empty_isbn():
    result = validate({"title": "T", "author": AUTHOR_ID, "summary": "S", "isbn": "  "}, BOOK_RULES)
    assert [e.field for e in result.errors] == ["isbn"]
    assert result.errors[0].message == "ISBN must not be empty."


def test_genre_name_length_bounds():
    assert validate({"name": "ab"}, GENRE_RULES).messages("name") == [
        "Genre name must contain at least 3 characters"
    ]
    assert validate({"name": "x" * 101}, GENRE_RULES).messages("name") == [
        "Genre name must not exceed 100 characters"
    ]
    assert validate({"name": " Poetry "}, GENRE_RULES).values["name"] == "Poetry"


def test_bookinstance_rules():
    result = validate({"book": "", "imprint": "", "status": " Loaned ", "due_back": "nope"}, BOOKINSTANCE_RULES)
    assert [e.field for e in result.errors] == ["book", "imprint", "due_back"]
    assert result.values["status"] == "Loaned"


def test_custom_rule_table():
    table = (FieldRules("code", (trim(), min_length(2, "too short"), max_length(4, "too long"), escape())),)
    assert validate({"code": " a&b "}, table).values["code"] == "a&amp;b"
    assert validate({"code": "abcdef"}, table).messages("code") == ["too long"]


def test_document_id_rule_lowercases_valid_ids():
    table = (FieldRules("author", (trim(), document_id("Bad author"))),)
    result = validate({"author": " 0123456789ABCDEF01234567 "}, table)
    assert result.is_valid
    assert result.values["author"] == "0123456789abcdef01234567"


def test_book_references_must_be_document_ids():
    result = validate({"title": "T", "author": "ben-bova", "summary": "s", "isbn": "1",
                       "genre": ["0123456789abcdef01234567", "scifi"]}, BOOK_RULES)
    assert [e.field for e in result.errors] == ["author", "genre"]
    assert result.values["author"] == "ben-bova"
    assert result.values["genre"] == ["0123456789abcdef01234567", "scifi"]


def test_empty_book_reference_reports_required_message_only():
    result = validate({"book": "", "imprint": "Tor"}, BOOKINSTANCE_RULES)
    assert result.messages("book") == ["Book must be specified"]
