import pytest

from curator.config import ValidationRules
from curator.errors import ArtifactValidationError
from curator.validation import Validator, clean_text, split_frontmatter

HEADER = (
    "---\n"
    'title: "Faster checkout pages"\n'
    'date: "2026-10-19"\n'
    'description: "How one store cut checkout load time in half"\n'
    'status: "draft"\n'
    "---\n"
)


def doc(words: int, header: str = HEADER) -> str:
    return header + "\n" + " ".join(["word"] * words) + "\n"


@pytest.fixture
def validator():
    return Validator(ValidationRules(min_words=100, max_words=2000))


@pytest.mark.parametrize(
    "words,valid",
    [(99, False), (100, True), (101, True), (1999, True), (2000, True), (2001, False)],
)
def test_word_bounds_are_inclusive(validator, words, valid):
    verdict = validator.validate(doc(words))
    assert verdict.is_valid is valid
    assert verdict.word_count == words


def test_social_bounds():
    social = Validator(ValidationRules(min_words=5, max_words=300))
    assert social.validate(doc(5)).is_valid
    assert not social.validate(doc(4)).is_valid
    assert not social.validate(doc(301)).is_valid


def test_missing_frontmatter_is_an_error(validator):
    verdict = validator.validate(" ".join(["word"] * 150))
    assert not verdict.is_valid
    assert any("front-matter" in e for e in verdict.errors)


def test_unclosed_frontmatter_is_an_error(validator):
    verdict = validator.validate('---\ntitle: "x"\n' + " ".join(["word"] * 150))
    assert any("front-matter" in e for e in verdict.errors)


@pytest.mark.parametrize(
    "header",
    [
        "---\ntitle: [unclosed\n---\n",
        "---\n- just\n- a list\n---\n",
        "---\n---\n",
    ],
)
def test_malformed_frontmatter_is_an_error(validator, header):
    verdict = validator.validate(doc(150, header=header))
    assert not verdict.is_valid
    assert any("front-matter" in e.lower() for e in verdict.errors)


def test_impossible_date_is_malformed_frontmatter(validator):
    header = '---\ntitle: "T"\ndate: 2026-02-30\nstatus: draft\n---\n'
    verdict = validator.validate(doc(150, header=header))
    assert not verdict.is_valid
    assert any(e.startswith("Malformed front-matter") for e in verdict.errors)


@pytest.mark.parametrize("glyph", ["\U0001F680", "☀", "✅"])
def test_emoji_is_an_error(validator, glyph):
    verdict = validator.validate(doc(150) + f"Launch day {glyph}\n")
    assert "Contains emojis" in verdict.errors


@pytest.mark.parametrize("glyph", ["“", "”", "‘", "’", "…", "—", "–", "•"])
def test_typographic_punctuation_is_an_error(validator, glyph):
    verdict = validator.validate(doc(150) + f"quote {glyph} here\n")
    assert not verdict.is_valid
    assert any(glyph in e for e in verdict.errors)


def test_banned_phrases_are_warnings_only(validator):
    verdict = validator.validate(doc(150) + "We leverage a Game-Changer stack.\n")
    assert verdict.is_valid
    assert any("leverage" in w and "game-changer" in w for w in verdict.warnings)


def test_long_title_and_description_are_warnings(validator):
    header = (
        "---\n"
        f'title: "{"t" * 61}"\n'
        f'description: "{"d" * 156}"\n'
        'status: "draft"\n'
        "---\n"
    )
    verdict = validator.validate(doc(150, header=header))
    assert verdict.is_valid
    assert any("Title too long" in w for w in verdict.warnings)
    assert any("Description too long" in w for w in verdict.warnings)


def test_title_at_limit_has_no_warning(validator):
    header = f'---\ntitle: "{"t" * 60}"\nstatus: draft\n---\n'
    assert validator.validate(doc(150, header=header)).warnings == []


@pytest.mark.parametrize("status_line", ["", "status: pending\n"])
def test_missing_or_unknown_status_is_a_warning(validator, status_line):
    header = f'---\ntitle: "Ok"\n{status_line}---\n'
    verdict = validator.validate(doc(150, header=header))
    assert verdict.is_valid
    assert any("status" in w for w in verdict.warnings)


def test_clean_document_passes(validator):
    verdict = validator.validate(doc(150))
    assert verdict.is_valid
    assert verdict.errors == []
    assert verdict.warnings == []


def test_raise_for_errors(validator):
    validator.validate(doc(150)).raise_for_errors("ok")

    with pytest.raises(ArtifactValidationError) as exc_info:
        validator.validate(doc(10)).raise_for_errors("short-post")
    assert exc_info.value.slug == "short-post"
    assert exc_info.value.category == "validation"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("“Quoted” and ‘single’", "\"Quoted\" and 'single'"),
        ("Wait… what", "Wait... what"),
        ("fast—really fast", "fast - really fast"),
        ("fast — really", "fast - really"),
        ("2019–2024", "2019-2024"),
        ("• first point", "- first point"),
        ("Launch \U0001F680 today", "Launch today"),
        ("Done ✅\n", "Done\n"),
        ("Love it ❤️", "Love it"),
        ("great \U0001F600 \U0001F600 news", "great news"),
        ("ship it \U0001F680 \u2705 \U0001F389", "ship it"),
    ],
)
def test_clean_replacements(raw, expected):
    assert clean_text(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "plain text",
        "a — b—c —d",
        "\U0001F680\U0001F680 start",
        "a \U0001F600 \U0001F600 b",
        "mixed “quotes” … • – ☀ end",
        HEADER + "— leading dash\n",
    ],
)
def test_clean_is_idempotent(raw):
    once = clean_text(raw)
    assert clean_text(once) == once


def test_cleaned_text_has_no_glyph_errors(validator):
    dirty = doc(150) + "“Great” — results… \U0001F680\n"
    cleaned = validator.clean(dirty)
    assert validator.validate(cleaned).is_valid


def test_split_frontmatter():
    meta, body = split_frontmatter(HEADER + "\nBody text\n")
    assert "title:" in meta
    assert body.strip() == "Body text"
    assert split_frontmatter("no header") == (None, "no header")


def test_validate_file_and_directory(tmp_path, validator):
    (tmp_path / "good.mdx").write_text(doc(150))
    (tmp_path / "bad.md").write_text(doc(3))
    (tmp_path / "notes.txt").write_text("ignored")

    verdicts = validator.validate_directory(tmp_path)
    assert [v.path.split("/")[-1] for v in verdicts] == ["bad.md", "good.mdx"]
    assert [v.is_valid for v in verdicts] == [False, True]

    missing = validator.validate_file(tmp_path / "missing.mdx")
    assert missing.errors == ["File not found"]
