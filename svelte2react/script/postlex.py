# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Post-lexers for the script grammar.

The grammar stays close to LR-style precedence layering; everything that in
JS/TS depends on surrounding tokens is decided here, before parsing:

  - `<`/`>` around call type arguments (`createEventDispatcher<{...}>()`),
  - `(` opening arrow-function parameters,
  - `{` opening a statement block vs an object literal / type literal,
  - `function` in statement position vs expression position,
  - reserved words used as member names (`promise.catch`) or object keys,
  - automatic statement terminators on newlines.

Each stage is a small class with a `process(stream)` generator in the shape
lark expects; `ScriptPostLex` chains them.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from lark import Token

KEYWORDS = {
	"LET",
	"CONST",
	"VAR",
	"_FUNCTION",
	"_RETURN",
	"_IF",
	"_ELSE",
	"_FOR",
	"_WHILE",
	"_DO",
	"_BREAK",
	"_CONTINUE",
	"_NEW",
	"_TRY",
	"_CATCH",
	"_FINALLY",
	"_THROW",
	"_SWITCH",
	"_CASE",
	"_IMPORT",
	"_EXPORT",
	"_INTERFACE",
	"_EXTENDS",
	"DEFAULT",
	"TYPEOF",
	"VOID",
	"DELETE",
	"AWAIT",
	"IN",
	"INSTANCEOF",
	"TRUE",
	"FALSE",
	"NULL",
	"THIS",
	"OF",
	"FROM",
	"AS",
	"TYPE",
	"ASYNC",
	"KEYOF",
}

# Keywords the grammar also accepts as plain identifiers.
CONTEXTUAL_KEYWORDS = {"OF", "FROM", "AS", "TYPE", "ASYNC", "KEYOF"}

IDENT_LIKE = {"NAME"} | CONTEXTUAL_KEYWORDS

_OPENERS = {"_LPAR": "_RPAR", "_LSQB": "_RSQB", "_LBRACE": "_RBRACE"}
_CLOSERS = {"_RPAR", "_RSQB", "_RBRACE"}


def _next_significant(tokens: List[Token], start: int) -> Optional[int]:
	i = start
	while i < len(tokens):
		if tokens[i].type != "NEWLINE":
			return i
		i += 1
	return None


def _retag(tok: Token, ttype: str) -> Token:
	return Token.new_borrow_pos(ttype, tok.value, tok)


class TypeArgInserter:
	"""
	Retag `<...>` after a name as call type arguments (`TYPE_LT`/`TYPE_GT`).

	Only commits when the angle group is balanced, contains nothing but
	type-ish tokens, and is immediately followed by `(`. Everything else
	stays a comparison, so `i < n` and `a < b && c > d` are untouched.
	"""

	ALLOWED = {
		"NAME",
		"_DOT",
		"_COMMA",
		"LESSTHAN",
		"MORETHAN",
		"_LBRACE",
		"_RBRACE",
		"_COLON",
		"_SEMI",
		"NEWLINE",
		"_LSQB",
		"_RSQB",
		"_LPAR",
		"_RPAR",
		"_ARROW",
		"VBAR",
		"AMP",
		"STRING",
		"NUMBER",
		"QMARK",
		"MINUS",
		"_ELLIPSIS",
		"VOID",
		"NULL",
		"TRUE",
		"FALSE",
		"TYPEOF",
		"KEYOF",
		"THIS",
	} | CONTEXTUAL_KEYWORDS

	def process(self, stream: Iterable[Token]) -> Iterator[Token]:
		tokens = list(stream)
		i = 0
		while i < len(tokens) - 1:
			if tokens[i].type in IDENT_LIKE and tokens[i + 1].type == "LESSTHAN":
				close = self._match_angle(tokens, i + 1)
				if close is not None:
					after = _next_significant(tokens, close + 1)
					if after is not None and tokens[after].type == "_LPAR":
						for j in range(i + 1, close + 1):
							if tokens[j].type == "LESSTHAN":
								tokens[j] = _retag(tokens[j], "TYPE_LT")
							elif tokens[j].type == "MORETHAN":
								tokens[j] = _retag(tokens[j], "TYPE_GT")
						i = close + 1
						continue
			i += 1
		return iter(tokens)

	def _match_angle(self, tokens: List[Token], start: int) -> Optional[int]:
		depth = 0
		brackets = 0
		for j in range(start, len(tokens)):
			tt = tokens[j].type
			if tt not in self.ALLOWED:
				return None
			if tt in _OPENERS:
				brackets += 1
			elif tt in _CLOSERS:
				brackets -= 1
				if brackets < 0:
					return None
			elif tt == "LESSTHAN":
				depth += 1
			elif tt == "MORETHAN" and brackets == 0:
				depth -= 1
				if depth == 0:
					return j
		return None


class ArrowParenMarker:
	"""
	Retag `(` as `_ARROW_LPAR` when it opens arrow-function parameters.

	That is the case when the matching `)` is followed by `=>`, or by a
	return type annotation `: T =>` (not after a `?`, where the colon belongs
	to a conditional expression).
	"""

	_TYPE_STOP = {"_SEMI", "_COMMA", "EQ", "NEWLINE", "_RPAR", "_RSQB", "_RBRACE"}

	def process(self, stream: Iterable[Token]) -> Iterator[Token]:
		tokens = list(stream)
		matches = self._match_brackets(tokens)
		for i, tok in enumerate(tokens):
			if tok.type != "_LPAR" or i not in matches:
				continue
			close = matches[i]
			after = _next_significant(tokens, close + 1)
			if after is None:
				continue
			if tokens[after].type == "_ARROW":
				tokens[i] = _retag(tok, "_ARROW_LPAR")
			elif tokens[after].type == "_COLON" and not self._after_qmark(tokens, i):
				if self._return_type_then_arrow(tokens, after + 1):
					tokens[i] = _retag(tok, "_ARROW_LPAR")
		return iter(tokens)

	def _after_qmark(self, tokens: List[Token], index: int) -> bool:
		j = index - 1
		while j >= 0 and tokens[j].type == "NEWLINE":
			j -= 1
		return j >= 0 and tokens[j].type == "QMARK"

	def _return_type_then_arrow(self, tokens: List[Token], start: int) -> bool:
		depth = 0
		for j in range(start, len(tokens)):
			tt = tokens[j].type
			if depth == 0:
				if tt == "_ARROW":
					return True
				if tt in self._TYPE_STOP:
					return False
			if tt in _OPENERS or tt == "LESSTHAN":
				depth += 1
			elif tt in _CLOSERS or tt == "MORETHAN":
				depth -= 1
				if depth < 0:
					return False
		return False

	@staticmethod
	def _match_brackets(tokens: List[Token]) -> dict[int, int]:
		matches: dict[int, int] = {}
		stack: list[int] = []
		for i, tok in enumerate(tokens):
			if tok.type in _OPENERS:
				stack.append(i)
			elif tok.type in _CLOSERS and stack:
				matches[stack.pop()] = i
		return matches


class StatementShaper:
	"""
	Classify braces and `function`, rename keyword member names, and insert
	statement terminators.

	Terminators follow a simplified form of JS automatic semicolon insertion:
	a newline ends the statement when the previous token can end one, the
	next token cannot continue it, and the innermost open bracket is a
	statement block (or there is none, outside expression mode). A terminator
	is also inserted before a block-closing `}` and at end of input.
	"""

	TERMINABLE = {
		"NAME",
		"NUMBER",
		"STRING",
		"TEMPLATE",
		"TRUE",
		"FALSE",
		"NULL",
		"THIS",
		"VOID",
		"_RPAR",
		"_RSQB",
		"_RBRACE",
		"MORETHAN",
		"TYPE_GT",
		"INC",
		"DEC",
		"_RETURN",
		"_BREAK",
		"_CONTINUE",
	} | CONTEXTUAL_KEYWORDS

	CONTINUATION = {
		"_DOT",
		"QDOT",
		"_ARROW",
		"EQ",
		"ASSIGN_OP",
		"QMARK",
		"QQ",
		"OROR",
		"ANDAND",
		"VBAR",
		"CARET",
		"AMP",
		"EQEQ",
		"EQEQEQ",
		"NOTEQ",
		"NOTEQEQ",
		"LTE",
		"GTE",
		"LESSTHAN",
		"MORETHAN",
		"LSHIFT",
		"PLUS",
		"MINUS",
		"STAR",
		"SLASH",
		"PERCENT",
		"STARSTAR",
		"_COMMA",
		"_COLON",
		"_SEMI",
		"_RPAR",
		"_RSQB",
		"_LPAR",
		"_LSQB",
		"TEMPLATE",
		"_ELSE",
		"_CATCH",
		"_FINALLY",
		"_EXTENDS",
		"AS",
		"IN",
		"INSTANCEOF",
		"TYPE_GT",
	}

	# Restricted productions: a newline right after these always terminates.
	RESTRICTED = {"_RETURN", "_BREAK", "_CONTINUE"}

	BLOCK_AFTER = {"_SEMI", "_BLOCK_LBRACE", "_ARROW", "_ELSE", "_TRY", "_FINALLY", "_DO", "_CATCH", "_RPAR"}

	HEADER_KEYWORDS = {"_IF", "_FOR", "_WHILE", "_SWITCH", "_CATCH"}

	def __init__(self, expression_mode: bool = False) -> None:
		self.expression_mode = expression_mode

	def process(self, stream: Iterable[Token]) -> Iterator[Token]:
		tokens = list(stream)
		out: list[Token] = []
		# Parallel to `out`: per-token facts ("block" for a `}` closing a
		# block, "label" for a statement-label or case colon, "header" for a
		# `)` closing an if/for/while/switch/catch/function header).
		marks: list[Optional[str]] = []
		# Open brackets: (kind, header flag) where kind is paren/bracket/block/object.
		stack: list[tuple[str, bool]] = []
		fn_pending: list[int] = []
		iface_pending: list[int] = []
		case_pending: list[list[int]] = []
		pending_newline = False

		def prev_index(skip: int = 0) -> Optional[int]:
			idx = len(out) - 1 - skip
			return idx if idx >= 0 else None

		def emit(tok: Token, mark: Optional[str] = None) -> None:
			out.append(tok)
			marks.append(mark)

		def at_statement_start(idx: Optional[int]) -> bool:
			if idx is None:
				return not self.expression_mode
			tt = out[idx].type
			if tt in {"_SEMI", "_BLOCK_LBRACE"}:
				return True
			return marks[idx] in {"block", "label"}

		def innermost() -> Optional[str]:
			return stack[-1][0] if stack else None

		def terminator_allowed() -> bool:
			kind = innermost()
			if kind == "block":
				return True
			return kind is None and not self.expression_mode

		def can_terminate(idx: Optional[int]) -> bool:
			if idx is None:
				return False
			if marks[idx] == "header":
				return False
			return out[idx].type in self.TERMINABLE

		def insert_terminator(like: Token) -> None:
			emit(Token.new_borrow_pos("_SEMI", ";", like))

		for i, tok in enumerate(tokens):
			tt = tok.type
			if tt == "NEWLINE":
				pending_newline = True
				continue

			prev = prev_index()
			prev_type = out[prev].type if prev is not None else None

			# Reserved words as names: `x.default`, `{ if: 1 }`.
			if tt in KEYWORDS and tt not in CONTEXTUAL_KEYWORDS:
				if prev_type in {"_DOT", "QDOT"}:
					tok = _retag(tok, "NAME")
					tt = "NAME"
				elif innermost() == "object" and prev_type in {"_LBRACE", "_COMMA"}:
					nxt = _next_significant(tokens, i + 1)
					if nxt is not None and tokens[nxt].type in {"_COLON", "QMARK"}:
						tok = _retag(tok, "NAME")
						tt = "NAME"

			if pending_newline:
				pending_newline = False
				if terminator_allowed() and can_terminate(prev):
					# `else` continues an `if` only right after its block.
					continues = tt in self.CONTINUATION and not (tt == "_ELSE" and prev_type != "_RBRACE")
					if prev_type in self.RESTRICTED or not continues:
						insert_terminator(tok)
						prev = prev_index()
						prev_type = out[prev].type if prev is not None else None

			if tt == "_RBRACE":
				kind = innermost()
				if kind == "block" and can_terminate(prev):
					insert_terminator(tok)
				if stack:
					stack.pop()
				emit(tok, "block" if kind == "block" else None)
				continue

			if tt == "_LBRACE":
				depth = len(stack)
				if iface_pending and iface_pending[-1] == depth:
					# Interface bodies are type literals; the grammar takes either brace.
					iface_pending.pop()
					stack.append(("block", False))
					emit(_retag(tok, "_BLOCK_LBRACE"))
				elif self._opens_block(marks, prev, prev_type, depth, fn_pending):
					if fn_pending and fn_pending[-1] == depth:
						fn_pending.pop()
					stack.append(("block", False))
					emit(_retag(tok, "_BLOCK_LBRACE"))
				else:
					stack.append(("object", False))
					emit(tok)
				continue

			if tt in {"_LPAR", "_ARROW_LPAR"}:
				header = prev_type in self.HEADER_KEYWORDS or (
					tt == "_LPAR" and bool(fn_pending) and fn_pending[-1] == len(stack)
				)
				stack.append(("paren", header))
				emit(tok)
				continue

			if tt == "_LSQB":
				stack.append(("bracket", False))
				emit(tok)
				continue

			if tt in {"_RPAR", "_RSQB"}:
				header = False
				if stack:
					_, header = stack.pop()
				emit(tok, "header" if header else None)
				continue

			if tt == "_FUNCTION":
				start_idx = prev
				if prev_type == "ASYNC":
					start_idx = prev_index(1)
				start_type = out[start_idx].type if start_idx is not None else None
				if not (at_statement_start(start_idx) or start_type in {"_EXPORT", "DEFAULT"}):
					tok = _retag(tok, "_FUNCTION_EXPR")
				fn_pending.append(len(stack))
				emit(tok)
				continue

			if tt == "_INTERFACE":
				iface_pending.append(len(stack))
				emit(tok)
				continue

			if tt == "_CASE":
				case_pending.append([len(stack), 0])
				emit(tok)
				continue

			if tt == "QMARK" and case_pending and case_pending[-1][0] == len(stack):
				case_pending[-1][1] += 1
				emit(tok)
				continue

			if tt == "_COLON":
				mark = None
				if prev_type == "DEFAULT" and innermost() == "block":
					mark = "label"
				elif case_pending and case_pending[-1][0] == len(stack):
					if case_pending[-1][1]:
						case_pending[-1][1] -= 1
					else:
						case_pending.pop()
						mark = "label"
				elif prev_type in IDENT_LIKE and at_statement_start(prev_index(1)):
					mark = "label"
				emit(tok, mark)
				continue

			emit(tok)

		if not self.expression_mode and can_terminate(prev_index()):
			last = out[-1]
			emit(Token.new_borrow_pos("_SEMI", ";", last))

		return iter(out)

	def _opens_block(self, marks, prev, prev_type, depth, fn_pending) -> bool:
		if prev is None:
			return not self.expression_mode
		if fn_pending and fn_pending[-1] == depth and prev_type != "_COLON":
			return True
		if prev_type == "_RBRACE":
			return marks[prev] == "block"
		if prev_type == "_COLON":
			return marks[prev] == "label"
		return prev_type in self.BLOCK_AFTER


class ScriptPostLex:
	"""Combined post-lexer: type args, arrow parens, then statement shaping."""

	# Newlines are not referenced by the grammar; ask lark to keep them so
	# terminator insertion can see them.
	always_accept = ("NEWLINE",)

	def __init__(self, expression_mode: bool = False) -> None:
		self._type_args = TypeArgInserter()
		self._arrows = ArrowParenMarker()
		self._shaper = StatementShaper(expression_mode=expression_mode)

	def process(self, stream):
		return self._shaper.process(self._arrows.process(self._type_args.process(stream)))


__all__ = ["ArrowParenMarker", "ScriptPostLex", "StatementShaper", "TypeArgInserter"]
