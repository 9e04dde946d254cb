"""Field decoder: one decoding rule per Unihan field identifier.

Rules are registered once at import time in :data:`FIELD_RULES`. Each rule
receives a single (already split) item and returns its decoded value; the
dispatcher maps rules over delimited lists except for the fields named in
:data:`ARITY_SENSITIVE_FIELDS`, which must see the whole list at once.
Fields without a registered rule keep their raw items.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable

from unihan_pipeline.codepoint import decode_codepoint
from unihan_pipeline.decoding.captures import normalize_captures
from unihan_pipeline.decoding.context import DecodeContext
from unihan_pipeline.decoding.mandarin import decode_reading, decode_readings
from unihan_pipeline.errors import CantoneseNotFoundError, FieldDecodeError, MalformedLineError
from unihan_pipeline.models import FieldSchema

FieldRule = Callable[[str, str, DecodeContext], Any]

FIELD_RULES: dict[str, FieldRule] = {}
ARITY_SENSITIVE_FIELDS = frozenset({"kTotalStrokes"})


def register(*field_names: str) -> Callable[[FieldRule], FieldRule]:
    """Register ``rule`` as the decoder for every name in ``field_names``."""

    def decorator(rule: FieldRule) -> FieldRule:
        for name in field_names:
            FIELD_RULES[name] = rule
        return rule

    return decorator


def split_value(schema: FieldSchema, raw_value: str) -> str | list[str]:
    """Split a raw value on the schema delimiter; undelimited fields stay scalar."""

    if schema.delimiter is None:
        return raw_value
    return raw_value.split(schema.delimiter)


def decode_field(field_name: str, value: str | list[str], context: DecodeContext) -> Any:
    """Decode one (possibly split) field value.

    Args:
        field_name: Unihan field identifier such as ``kRSUnicode``.
        value: Raw string, or list of strings when the schema declares a
            delimiter.
        context: Decoding tables and singleton-unwrapping policy.

    Returns:
        The decoded value. Unregistered fields keep their raw items, with
        the same singleton unwrapping as registered ones.

    Raises:
        FieldDecodeError: If a value does not match its field's micro-grammar.
    """

    rule = FIELD_RULES.get(field_name, _passthrough)
    if isinstance(value, list) and field_name not in ARITY_SENSITIVE_FIELDS:
        decoded = [rule(field_name, item, context) for item in value]
        if len(decoded) == 1 and context.unwrap_singletons:
            return decoded[0]
        return decoded
    return rule(field_name, value, context)


def _fullmatch(field_name: str, pattern: re.Pattern[str], value: str) -> re.Match[str]:
    match = pattern.fullmatch(value)
    if match is None:
        raise FieldDecodeError(field_name, value, f"does not match {pattern.pattern!r}")
    return match


DECIMAL_RE = re.compile(r"[0-9]+")


def _is_decimal(value: str) -> bool:
    return DECIMAL_RE.fullmatch(value) is not None


def _codepoint(field_name: str, value: str) -> int:
    try:
        return decode_codepoint(value)
    except MalformedLineError as exc:
        raise FieldDecodeError(field_name, value, "invalid codepoint") from exc


def pattern_rule(pattern: str, *field_names: str) -> FieldRule:
    """Register a composite rule whose named captures become the decoded map."""

    compiled = re.compile(pattern)

    def rule(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
        match = _fullmatch(field_name, compiled, value)
        return normalize_captures(match.groupdict(), context.cantonese)

    return register(*field_names)(rule)


@register(
    "kCangjie",
    "kDefinition",
    "kFanqie",
    "kJapanese",
    "kJapaneseKun",
    "kJapaneseOn",
    "kKorean",
    "kKoreanName",
    "kMojiJoho",
    "kUnihanCore2020",
    "kVietnamese",
    "kZhuang",
)
def _passthrough(field_name: str, value: str, context: DecodeContext) -> str:
    return value


@register(
    "kAccountingNumeric",
    "kFrequency",
    "kGradeLevel",
    "kHKGlyph",
    "kKoreanEducationHanja",
    "kLau",
    "kMainlandTelegraph",
    "kNelson",
    "kOtherNumeric",
    "kPrimaryNumeric",
    "kTaiwanTelegraph",
    "kVietnameseNumeric",
    "kZhuangNumeric",
)
def _decimal(field_name: str, value: str, context: DecodeContext) -> int:
    if not _is_decimal(value):
        raise FieldDecodeError(field_name, value, "expected a decimal integer")
    return int(value)


HEX_RE = re.compile(r"[0-9A-Fa-f]+")


@register("kBigFive", "kCCCII", "kEACC", "kHKSCS", "kIBMJapan", "kJa", "kKPS0", "kKPS1")
def _hexadecimal(field_name: str, value: str, context: DecodeContext) -> int:
    return int(_fullmatch(field_name, HEX_RE, value).group(0), 16)


pattern_rule(
    r"(?P<row>\d{2})(?P<cell>\d{2})",
    "kGB0", "kGB1", "kGB3", "kGB5", "kGB7", "kGB8",
    "kJis0", "kJis1", "kKSC0", "kKSC1", "kPseudoGB1",
)
pattern_rule(
    r"(?P<volume>[1-8])(?P<page>\d{4})\.(?P<position>\d{2})(?P<virtual>\d)",
    "kHanYu",
    "kIRGHanyuDaZidian",
)
pattern_rule(
    r"(?P<page>\d{4})\.(?P<position>\d{2})(?P<virtual>\d)",
    "kDaeJaweon",
    "kIRGDaeJaweon",
    "kIRGKangXi",
    "kKangXi",
)
pattern_rule(
    r"(?P<page>\d{1,4})\.(?P<position>\d{2})",
    "kCheungBauerIndex",
    "kFennIndex",
    "kSBGY",
    "kSMSZD2003Index",
)
pattern_rule(r"(?P<page>\d{1,4})\.(?P<row>\d)(?P<position>\d{2})", "kCihaiT")
pattern_rule(r"(?P<index>\d{1,4})(?:\.(?P<subindex>\d{1,2}))?", "kCowles")
pattern_rule(
    r"(?P<supplement>H)?(?P<index>\d{3,5})(?P<prime>'{0,2})",
    "kIRGDaiKanwaZiten",
    "kMorohashi",
)
pattern_rule(r"(?P<set>\d{4})(?P<letter>[a-vx-z])(?P<prime>'*)", "kGSR")
pattern_rule(r"(?P<phonetic>\d+)(?P<variant>a?)(?P<frequency>[A-KP*])", "kFenn")
pattern_rule(r"(?P<priority>[ABC])(?P<sources>[GHJKMPT]{1,7})", "kIICore")
pattern_rule(r"(?P<set>\d{3}):(?P<index>\d{3})", "kXerox")
pattern_rule(r"(?P<year>\d{4}):(?P<index>\d{1,4})", "kTGH")
pattern_rule(r"(?P<plane>[12]),(?P<row>\d{2}),(?P<cell>\d{1,2})", "kJIS0213")
pattern_rule(r"(?P<strokes>\d{1,3}):(?P<sources>[BHJKMPSUGTV]+)", "kAlternateTotalStrokes")
pattern_rule(
    r"(?P<radical>\d{1,3})(?P<simplified_radical>'{0,3})\.(?P<strokes>-?\d{1,2})",
    "kRSUnicode",
)
pattern_rule(
    r"(?P<radical>\d{1,3})\.(?P<strokes>-?\d{1,2})",
    "kRSJapanese",
    "kRSKangXi",
    "kRSKanWa",
    "kRSKorean",
)
pattern_rule(
    r"(?P<type>[CV])\+(?P<cid>\d{1,5})\+(?P<radical>\d{1,3})"
    r"\.(?P<radical_strokes>\d{1,2})\.(?P<strokes>\d{1,2})",
    "kRSAdobe_Japan1_6",
)
pattern_rule(
    r"(?P<radical>[⼀-⿕])\[(?P<hex_codepoint>U\+2F[0-9A-D][0-9A-F])\]"
    r":(?P<volume>[1-8])(?P<page>\d{4})\.(?P<position>\d{2})(?P<virtual>\d)",
    "kHDZRadBreak",
)
pattern_rule(
    r"(?P<year>\d{4})(?::(?P<hex_codepoint>U\+[0-9A-F]{4,5}))?",
    "kJinmeiyoKanji",
)
pattern_rule(r"(?P<frequent>\*?)(?P<reading>\S+)", "kTang")
pattern_rule(
    r"(?P<radical>\d{3})/(?P<strokes>\d{2});(?P<cangjie>[A-Z]*);(?P<jyutpings>[a-z1-6\[\]/,]+)",
    "kCheungBauer",
)


FOUR_CORNER_RE = re.compile(r"(?P<code>\d{4})(?:\.(?P<supplementary>\d))?")


@register("kFourCornerCode")
def _four_corner(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    match = _fullmatch(field_name, FOUR_CORNER_RE, value)
    decoded: dict[str, Any] = {"code": match.group("code")}
    if match.group("supplementary") is not None:
        decoded["supplementary"] = int(match.group("supplementary"))
    return decoded


@register(
    "kIRG_GSource",
    "kIRG_HSource",
    "kIRG_JSource",
    "kIRG_KPSource",
    "kIRG_KSource",
    "kIRG_MSource",
    "kIRG_SSource",
    "kIRG_TSource",
    "kIRG_UKSource",
    "kIRG_USource",
    "kIRG_VSource",
)
def _irg_source(field_name: str, value: str, context: DecodeContext) -> dict[str, str]:
    source, separator, mapping = value.partition("-")
    if not source or (separator and not mapping):
        raise FieldDecodeError(field_name, value, "expected SOURCE or SOURCE-MAPPING")
    decoded = {"source": source}
    if separator:
        decoded["mapping"] = mapping
    return decoded


CNS_RE = re.compile(r"(?P<plane>[0-9A-F])-(?P<code>[0-9A-F]{4})")


@register("kCNS1986", "kCNS1992")
def _cns(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    match = _fullmatch(field_name, CNS_RE, value)
    return {"plane": match.group("plane"), "code": int(match.group("code"), 16)}


HANGUL_RE = re.compile(r"(?P<hangul>[가-힣]+):(?P<sources>[0ENX]{1,3})")


@register("kHangul")
def _hangul(field_name: str, value: str, context: DecodeContext) -> dict[str, str]:
    match = _fullmatch(field_name, HANGUL_RE, value)
    return {"hangul": match.group("hangul"), "sources": match.group("sources")}


@register(
    "kCompatibilityVariant",
    "kSimplifiedVariant",
    "kSpoofingVariant",
    "kTraditionalVariant",
)
def _variant_codepoint(field_name: str, value: str, context: DecodeContext) -> int:
    return _codepoint(field_name, value)


VARIANT_SOURCE_RE = re.compile(r"(?P<source>k[A-Za-z0-9_]+)(?::(?P<relationships>[A-Z]+))?")


@register("kSemanticVariant", "kSpecializedSemanticVariant", "kZVariant")
def _variant_with_sources(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    codepoint, separator, sources = value.partition("<")
    decoded: dict[str, Any] = {"codepoint": _codepoint(field_name, codepoint)}
    if not separator:
        return decoded

    entries: list[dict[str, str]] = []
    for item in sources.split(","):
        match = _fullmatch(field_name, VARIANT_SOURCE_RE, item)
        entry = {"source": match.group("source")}
        if match.group("relationships"):
            entry["relationships"] = match.group("relationships")
        entries.append(entry)
    decoded["sources"] = entries
    return decoded


@register("kJoyoKanji")
def _joyo_kanji(field_name: str, value: str, context: DecodeContext) -> int | dict[str, int]:
    if value.startswith("U+"):
        return {"codepoint": _codepoint(field_name, value)}
    return _decimal(field_name, value, context)


STRANGE_RE = re.compile(r"(?P<code>[A-Z])(?::(?P<argument>.+))?")
STRANGE_CATEGORIES = {
    "A": "asymmetric",
    "B": "bopomofo",
    "C": "cursive",
    "F": "fully_reflective",
    "H": "hangul",
    "I": "incomplete",
    "K": "katakana",
    "M": "mirrored",
    "O": "odd_component",
    "R": "rotated",
    "S": "stroke_heavy",
    "U": "unusual_arrangement",
}
STRANGE_CODEPOINT_REQUIRED = frozenset("BHIK")
STRANGE_CODEPOINT_OPTIONAL = frozenset("MR")


@register("kStrange")
def _strange(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    match = _fullmatch(field_name, STRANGE_RE, value)
    code, argument = match.group("code"), match.group("argument")
    if code not in STRANGE_CATEGORIES:
        raise FieldDecodeError(field_name, value, f"unknown category code {code!r}")

    decoded: dict[str, Any] = {"category": STRANGE_CATEGORIES[code]}
    if code == "S":
        if argument is None or not _is_decimal(argument):
            raise FieldDecodeError(field_name, value, "stroke-heavy entry needs a stroke count")
        decoded["strokes"] = int(argument)
    elif code in STRANGE_CODEPOINT_REQUIRED or (argument and code in STRANGE_CODEPOINT_OPTIONAL):
        if argument is None:
            raise FieldDecodeError(field_name, value, f"category {code!r} needs a codepoint")
        decoded["codepoint"] = _codepoint(field_name, argument)
    elif argument is not None:
        raise FieldDecodeError(field_name, value, f"category {code!r} takes no argument")
    return decoded


PHONETIC_RE = re.compile(r"(?P<phonetic>\d{1,4})(?P<subclass>[A-Dx]?)(?P<implicit>\*?)")
KARLGREN_RE = re.compile(r"(?P<index>\d{1,4})(?P<suffix>[A*]?)")
MEYER_WEMPE_RE = re.compile(r"(?P<index>\d{1,4})(?P<suffix>[a-t*]?)")
MATTHEWS_RE = re.compile(r"(?P<index>\d{1,4})(?P<suffix>a|\.5)?")


@register("kPhonetic")
def _phonetic(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    match = _fullmatch(field_name, PHONETIC_RE, value)
    decoded: dict[str, Any] = {"phonetic": int(match.group("phonetic"))}
    if match.group("subclass"):
        decoded["subclass"] = match.group("subclass")
    decoded["implicit"] = match.group("implicit") == "*"
    return decoded


def _index_with_suffix(
    field_name: str,
    value: str,
    pattern: re.Pattern[str],
    dropped: Iterable[str] = (),
) -> dict[str, Any]:
    match = _fullmatch(field_name, pattern, value)
    suffix = match.group("suffix") or ""
    decoded: dict[str, Any] = {"index": int(match.group("index"))}
    if suffix and suffix != "*" and suffix not in dropped:
        decoded["subsidiary"] = suffix
    decoded["error"] = suffix == "*"
    return decoded


@register("kKarlgren")
def _karlgren(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    return _index_with_suffix(field_name, value, KARLGREN_RE)


@register("kMeyerWempe")
def _meyer_wempe(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    return _index_with_suffix(field_name, value, MEYER_WEMPE_RE)


@register("kMatthews")
def _matthews(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    decoded = _index_with_suffix(field_name, value, MATTHEWS_RE, dropped=(".5",))
    del decoded["error"]
    return decoded


@register("kTotalStrokes")
def _total_strokes(field_name: str, value: str | list[str], context: DecodeContext) -> dict[str, int]:
    items = value if isinstance(value, list) else value.split()
    if not items or not all(_is_decimal(item) for item in items):
        raise FieldDecodeError(field_name, " ".join(items), "expected stroke counts")
    counts = [int(item) for item in items]
    if len(counts) == 1:
        return {"Hans": counts[0], "Hant": counts[0]}
    if len(counts) == 2:
        return {"Hans": counts[0], "Hant": counts[1]}
    raise FieldDecodeError(field_name, " ".join(items), "expected one or two stroke counts")


@register("kCantonese")
def _cantonese(field_name: str, value: str, context: DecodeContext) -> Any:
    try:
        return context.cantonese.lookup(value)
    except CantoneseNotFoundError as exc:
        raise FieldDecodeError(field_name, value, str(exc)) from exc


@register("kMandarin")
def _mandarin(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    return decode_reading(value)


HANYU_PINLU_RE = re.compile(r"(?P<reading>[^()]+)\((?P<frequency>\d+)\)")


@register("kHanyuPinlu")
def _hanyu_pinlu(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    match = _fullmatch(field_name, HANYU_PINLU_RE, value)
    return {
        "reading": decode_reading(match.group("reading")),
        "frequency": int(match.group("frequency")),
    }


HANYU_LOCATION_RE = re.compile(
    r"(?P<volume>[1-8])(?P<page>\d{4})\.(?P<position>\d{2})(?P<virtual>\d)"
)
XHC_LOCATION_RE = re.compile(r"(?P<page>\d{4})\.(?P<position>\d{3})(?P<substituted>\*?)")
TGHZ_LOCATION_RE = re.compile(r"(?P<page>\d{3})\.(?P<position>\d{3})")


def _locations_and_readings(
    field_name: str,
    value: str,
    location_re: re.Pattern[str],
    context: DecodeContext,
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    locations, separator, readings = value.partition(":")
    if not separator or not locations or not readings:
        raise FieldDecodeError(field_name, value, "expected LOCATIONS:READINGS")
    decoded_locations = [
        normalize_captures(_fullmatch(field_name, location_re, item).groupdict(), context.cantonese)
        for item in locations.split(",")
    ]
    return decoded_locations, decode_readings(readings)


@register("kHanyuPinyin")
def _hanyu_pinyin(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    locations, readings = _locations_and_readings(field_name, value, HANYU_LOCATION_RE, context)
    return {"locations": locations, "readings": readings}


@register("kXHC1983")
def _xhc1983(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    locations, readings = _locations_and_readings(field_name, value, XHC_LOCATION_RE, context)
    return {"locations": locations, "readings": readings}


@register("kTGHZ2013")
def _tghz2013(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    locations, readings = _locations_and_readings(field_name, value, TGHZ_LOCATION_RE, context)
    return {"locations": locations, "readings": readings}


SMSZD_READINGS_RE = re.compile(r"(?P<mandarin>[^粵]+)粵(?P<jyutpings>[a-z1-6,]+)")


@register("kSMSZD2003Readings")
def _smszd2003_readings(field_name: str, value: str, context: DecodeContext) -> dict[str, Any]:
    match = _fullmatch(field_name, SMSZD_READINGS_RE, value)
    decoded = normalize_captures(match.groupdict(), context.cantonese)
    decoded["mandarin"] = decode_readings(match.group("mandarin"))
    return decoded
