import pytest

from passvault.core.strength import REQUIREMENTS, StrengthCategory, category_for, evaluate


def test_empty_string_is_weak():
    report = evaluate("")
    assert report.category is StrengthCategory.WEAK
    assert not any(report.checks.values())
    assert report.failed == list(REQUIREMENTS)


@pytest.mark.parametrize(
    "candidate, expected",
    [
        ("abc", StrengthCategory.WEAK),
        ("abcdefgh", StrengthCategory.WEAK),
        ("Abcdefgh", StrengthCategory.FAIR),
        ("Abcdefg1", StrengthCategory.GOOD),
        ("Abcdef1!", StrengthCategory.STRONG),
        ("aB1!", StrengthCategory.GOOD),
    ],
)
def test_categories(candidate, expected):
    assert evaluate(candidate).category is expected


def test_checks_keep_requirement_order():
    report = evaluate("short")
    assert list(report.checks) == ["has_length", "has_upper", "has_lower", "has_number", "has_special"]
    assert report.checks["has_lower"] is True
    assert report.checks["has_length"] is False


def test_space_counts_as_special():
    assert evaluate("a b").checks["has_special"] is True


def test_evaluate_is_deterministic():
    assert evaluate("Hello World 42") == evaluate("Hello World 42")


def test_category_is_monotonic_in_satisfied_count():
    categories = [category_for(n) for n in range(6)]
    assert categories == sorted(categories)
    assert categories[-1] is StrengthCategory.STRONG
    assert str(StrengthCategory.STRONG) == "Strong"


def test_explanation_has_one_line_per_requirement():
    explanation = evaluate("abcdefgh").explanation
    assert explanation == [
        ("At least 8 characters", True),
        ("Contains an uppercase letter", False),
        ("Contains a lowercase letter", True),
        ("Contains a number", False),
        ("Contains a special character", False),
    ]
