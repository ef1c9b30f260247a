from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

"""Render numeric cells with their Excel number format.

対応する書式:
- ゼロ埋め (`00000`), 桁区切り (`#,##0`), 小数桁 (`0.00`, `0.0#`)
- パーセント (`0%`, `0.00%`)
- 指数 (`0.00E+00`)
- 引用符付きリテラル / `\\x` エスケープ / `[Red]` 等のブラケットは除去
- `;` 区切りの負数・ゼロ用セクション

解釈できない書式 (分数など) は None を返し、呼び出し側が General 表示にする。
"""

__all__ = [
    "GENERAL_FORMATS",
    "render_number",
]

GENERAL_FORMATS = frozenset({"", "general", "@"})

_DIGIT_CHARS = "0#?"
_CODE_CHARS = _DIGIT_CHARS + ".,"
_EXPONENT = re.compile(r"^(?P<mantissa>[0#?.,]+)[Ee](?P<sign>[+-])(?P<digits>[0#]+)$")


def _pick_section(fmt: str, value: float) -> tuple[str, bool]:
    """Return (section, emit_minus) for ``value``."""
    sections = fmt.split(";")
    if value < 0 and len(sections) >= 2 and sections[1]:
        return sections[1], False
    if value == 0 and len(sections) >= 3 and sections[2]:
        return sections[2], False
    return sections[0], value < 0


def _tokenize(section: str) -> tuple[list[tuple[bool, str]], int]:
    """Split a section into (is_code, char) tokens; also count unquoted ``%``."""
    tokens: list[tuple[bool, str]] = []
    percents = 0
    i = 0
    while i < len(section):
        ch = section[i]
        if ch == '"':
            end = section.find('"', i + 1)
            end = len(section) if end == -1 else end
            tokens.extend((False, c) for c in section[i + 1:end])
            i = end + 1
            continue
        if ch == "\\" and i + 1 < len(section):
            tokens.append((False, section[i + 1]))
            i += 2
            continue
        if ch == "[":
            end = section.find("]", i)
            i = len(section) if end == -1 else end + 1
            continue
        if ch == "_":
            # 幅合わせ用の空白
            tokens.append((False, " "))
            i += 2
            continue
        if ch == "*":
            i += 2
            continue
        if ch == "%":
            percents += 1
        if ch in "Ee" and i + 1 < len(section) and section[i + 1] in "+-":
            tokens.append((True, ch))
            tokens.append((True, section[i + 1]))
            i += 2
            continue
        tokens.append((ch in _CODE_CHARS, ch))
        i += 1
    return tokens, percents


def _group_thousands(digits: str) -> str:
    head = len(digits) % 3 or 3
    parts = [digits[:head]] + [digits[i:i + 3] for i in range(head, len(digits), 3)]
    return ",".join(parts)


def _round(value: float, places: int) -> Decimal:
    # Excel は四捨五入 (half away from zero)
    return Decimal(repr(value)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def _render_fixed(value: float, code: str) -> str:
    int_code, dot, frac_code = code.partition(".")
    scale = len(int_code) - len(int_code.rstrip(","))
    int_code = int_code.rstrip(",")
    grouping = "," in int_code
    frac_code = frac_code.replace(",", "")
    max_places = sum(c in _DIGIT_CHARS for c in frac_code)
    min_places = len(frac_code) - len(frac_code.lstrip("0"))
    min_digits = int_code.count("0")

    text = format(_round(value / 1000**scale, max_places), "f")
    int_text, _, frac_text = text.partition(".")
    if len(frac_text) > min_places:
        frac_text = frac_text[:min_places] + frac_text[min_places:].rstrip("0")
    if int_text == "0" and min_digits == 0:
        int_text = ""
    int_text = int_text.zfill(min_digits)
    if grouping and int_text:
        int_text = _group_thousands(int_text)
    return f"{int_text}.{frac_text}" if dot else int_text


def _render_exponent(value: float, mantissa: str, sign: str, digits: str) -> str:
    _, _, frac_code = mantissa.partition(".")
    places = sum(c in _DIGIT_CHARS for c in frac_code)
    text = f"{value:.{places}E}"
    mant, _, exp = text.partition("E")
    exponent = int(exp)
    if exponent < 0:
        exp_sign = "-"
    else:
        exp_sign = "+" if sign == "+" else ""
    return f"{mant}E{exp_sign}{str(abs(exponent)).zfill(len(digits))}"


def render_number(value: int | float, fmt: str) -> str | None:
    """Return the display text of ``value`` under ``fmt``, or None if unsupported."""
    if fmt.strip().lower() in GENERAL_FORMATS:
        return None
    section, minus = _pick_section(fmt, value)
    if section.strip().lower() in GENERAL_FORMATS:
        return None
    tokens, percents = _tokenize(section)
    code_positions = [i for i, (is_code, _) in enumerate(tokens) if is_code]
    if not code_positions:
        # リテラルのみのセクション (例: ゼロを "-" で表示)
        return "".join(ch for _, ch in tokens)
    if not any(is_code and ch in _DIGIT_CHARS for is_code, ch in tokens):
        return None
    first, last = code_positions[0], code_positions[-1]
    if any(not is_code for is_code, _ in tokens[first:last + 1]):
        return None
    prefix = "".join(ch for _, ch in tokens[:first])
    suffix = "".join(ch for _, ch in tokens[last + 1:])
    code = "".join(ch for _, ch in tokens[first:last + 1])

    magnitude = abs(value) * 100**percents
    exponent = _EXPONENT.match(code)
    if exponent:
        body = _render_exponent(magnitude, exponent["mantissa"], exponent["sign"], exponent["digits"])
    elif any(ch in "Ee+-" for ch in code):
        return None
    else:
        body = _render_fixed(magnitude, code)
    sign = "-" if minus and body.strip("0.,") else ""
    return f"{sign}{prefix}{body}{suffix}"
