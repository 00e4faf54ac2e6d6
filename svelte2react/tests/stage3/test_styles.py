# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Style pass: class rules -> css-tagged declarations and the class alias map.
"""

from __future__ import annotations

import pytest

from svelte2react.core.errors import UnsupportedError
from svelte2react.options import ConvertOptions
from svelte2react.script.printer import print_statement
from svelte2react.splitter import StyleBlock
from svelte2react.stage3.styles import StyleSyntaxError, convert_styles, parse_stylesheet


def printed(code: str, **kwargs):
	result = convert_styles([StyleBlock(code=code)], **kwargs)
	return result, [print_statement(s) for s in result.statements]


def test_parse_rules_and_normalize_values():
	(rule,) = parse_stylesheet(".a {\n  color: red;\n  margin :  0   auto\n}")
	assert rule.selector == ".a"
	assert [d.text() for d in rule.declarations] == ["color: red", "margin: 0 auto"]
	assert rule.loc.line == 1


def test_one_declaration_per_class():
	result, out = printed(".title { color: red; }")
	assert result.alias_map == {"title": "selector$title"}
	assert result.uses_css
	assert out == ["const selector$title = css`\n  color: red\n`;"]


def test_rules_for_the_same_class_merge_without_duplicates():
	result, out = printed(".a { color: red; }\n.b { margin: 0 }\n.a { color: red; padding: 1px }")
	assert list(result.alias_map) == ["a", "b"]
	assert out[0] == "const selector$a = css`\n  color: red;\n  padding: 1px\n`;"
	assert out[1] == "const selector$b = css`\n  margin: 0\n`;"


def test_hyphenated_class_gets_a_safe_identifier():
	result, _ = printed(".my-btn { color: blue }")
	assert result.alias_map == {"my-btn": "selector$my_2d_btn"}


def test_comments_are_ignored():
	_, out = printed("/* header */\n.a { /* inline */ color: red; }")
	assert out == ["const selector$a = css`\n  color: red\n`;"]


def test_no_styles_means_no_css_import():
	result = convert_styles([])
	assert not result.uses_css and result.alias_map == {}


@pytest.mark.parametrize("selector", ["div", ".a .b", ".a:hover", "#id", ".a, .b"])
def test_only_single_class_selectors(selector):
	with pytest.raises(UnsupportedError, match="only support single class selector"):
		convert_styles([StyleBlock(code=f"{selector} {{ color: red }}")])


def test_at_rules_are_rejected_with_their_line():
	with pytest.raises(UnsupportedError, match=r"\(found @media\)") as info:
		parse_stylesheet("/* a\nb */\n@media print { .a { color: red } }")
	assert info.value.span.line == 3


def test_quoted_values_may_hold_semicolons_and_at_signs():
	(rule,) = parse_stylesheet(
		'.a { background: url("data:image/png;base64,AA"); content: ";"; font-family: "a@b  c" }'
	)
	assert [d.text() for d in rule.declarations] == [
		'background: url("data:image/png;base64,AA")',
		'content: ";"',
		'font-family: "a@b  c"',
	]


def test_malformed_stylesheet():
	with pytest.raises(StyleSyntaxError, match="malformed stylesheet"):
		parse_stylesheet(".a { color red }")


def test_non_css_lang_is_parsed_with_a_warning():
	warnings: list = []
	result = convert_styles([StyleBlock(code=".a { color: red }", lang="scss")], ConvertOptions(warn=warnings.append))
	assert result.alias_map == {"a": "selector$a"}
	assert warnings == ['style lang="scss" is parsed as plain CSS']
