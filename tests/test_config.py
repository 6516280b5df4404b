"""Unit tests for config.py and CLI defaults"""

import pytest

from postgen.cli import build_parser
from postgen.config import ConfigError, load_config


def test_load_config_missing_file_is_empty(tmp_path):
    assert load_config(tmp_path / "site.toml") == {}


def test_load_config_toml(tmp_path):
    path = tmp_path / "site.toml"
    path.write_text('site_name = "notes"\nrelated_limit = 5\ncategories = ["a", "b"]\n', encoding="utf-8")
    assert load_config(path) == {"site_name": "notes", "related_limit": 5, "categories": ["a", "b"]}


def test_load_config_yaml(tmp_path):
    path = tmp_path / "site.yaml"
    path.write_text("site_url: https://example.com\nhighlight: false\n", encoding="utf-8")
    assert load_config(path) == {"site_url": "https://example.com", "highlight": False}


def test_load_config_empty_yaml(tmp_path):
    path = tmp_path / "site.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == {}


def test_load_config_json(tmp_path):
    path = tmp_path / "site.json"
    path.write_text('{"output": "public"}', encoding="utf-8")
    assert load_config(path) == {"output": "public"}


@pytest.mark.parametrize("name,text", [
    ("site.toml", "site_name = "),
    ("site.yaml", "a: [unclosed"),
    ("site.json", "{oops"),
    ("site.json", "[1, 2]"),
])
def test_load_config_invalid(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_parser_defaults():
    args = build_parser({}).parse_args([])
    assert args.posts == "posts"
    assert args.index == "posts.json"
    assert args.output == "dist"
    assert args.categories == ["research", "technical", "personal"]
    assert args.related_limit == 3
    assert args.reading_wpm == 220
    assert args.highlight is True
    assert args.markdown_extensions == []


def test_parser_uses_config_and_cli_overrides():
    config = {"site_name": "from config", "categories": "a, b", "highlight": "no", "related_limit": "4"}
    args = build_parser(config).parse_args(["--related-limit", "2", "--markdown-extensions", "tables,toc"])
    assert args.site_name == "from config"
    assert args.categories == ["a", "b"]
    assert args.highlight is False
    assert args.related_limit == 2
    assert args.markdown_extensions == ["tables", "toc"]
