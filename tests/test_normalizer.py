from __future__ import annotations

from github_resume.normalizer import normalize_text


def test_empty_and_missing_text():
    assert normalize_text(None) == ""
    assert normalize_text("") == ""
    assert normalize_text("   \r\n  ") == ""


def test_spaced_out_domain_is_rejoined():
    assert normalize_text("github . com /  octocat") == "github.com/octocat"


def test_line_wrapped_url_is_rejoined():
    text = "Portfolio: https://github\r\n.com/\r\noctocat/Hello-World"

    assert normalize_text(text) == "Portfolio: https://github.com/octocat/Hello-World"


def test_domain_without_slash():
    assert normalize_text("GitHub .\ncom") == "github.com"


def test_zero_width_characters_are_removed():
    text = "github.com/octo\u200bcat and git\ufeffhub.com/x"

    assert normalize_text(text) == "github.com/octocat and github.com/x"


def test_spaces_around_separators_and_runs_are_collapsed():
    text = "owner /  repo\t\tand   more .  text"

    assert normalize_text(text) == "owner/repo and more.text"


def test_line_breaks_away_from_github_are_kept():
    assert normalize_text("Jane Doe\r\nEngineer\rBerlin") == "Jane Doe\nEngineer\nBerlin"
