"""Tests for mask resolution — extractor + generator + resolver + mask map."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from dataset_masker import MaskMap, MaskResolver, Pending, Resolved, Token, extract_tokens
from dataset_masker import resolver as resolver_module
from dataset_masker.errors import UnresolvedTokenError
from dataset_masker.extractor import DEFAULT_MIN_LENGTH, split_value
from dataset_masker.generator import (
    SHORT_CAPACITY,
    MaskGenerator,
    integer_mask,
    is_integer,
    short_mask,
)
from dataset_masker.resolver import ResolverConfig


# ── Extractor ────────────────────────────────────────────────────────

def test_split_keeps_plain_value_whole():
    assert split_value("x") == ["x"]
    assert split_value("Alice Smith") == ["Alice Smith"]


def test_split_on_markup_characters():
    assert split_value("Tom & Jerry") == ["Tom ", " Jerry"]
    assert split_value("O'Neil") == ["Neil"]


def test_split_drops_short_pieces():
    assert split_value("a<b") == []
    assert split_value('"ab"') == []


def test_split_on_line_breaks():
    assert split_value("Ann\nBell") == ["Ann", "Bell"]
    assert split_value("Carol\r\nDe") == ["Carol"]


def test_extract_deduplicates():
    tokens = extract_tokens(["Alice", "Alice", "<Alice>"])
    assert list(tokens) == ["Alice"]
    assert tokens["Alice"].fragments == (Pending("Alice"),)


def test_extract_skips_blank_values():
    tokens = extract_tokens(["", None, "Bob"])
    assert list(tokens) == ["Bob"]


def test_extract_converts_non_strings():
    tokens = extract_tokens([1234, "1234"])
    assert list(tokens) == ["1234"]


def test_extract_idempotent():
    values = ["Alice", "Tom & Jerry", "x", "<b>Bold</b>", "Alice"]
    assert set(extract_tokens(values)) == set(extract_tokens(values))


# ── Token ────────────────────────────────────────────────────────────

def test_token_substitute_every_occurrence():
    token = Token.new("abcab").substitute("ab", "X")
    assert token.fragments == (Resolved("X"), Pending("c"), Resolved("X"))
    assert token.text == "XcX"
    assert not token.resolved


def test_token_substitute_skips_resolved_fragments():
    token = Token("abab", (Resolved("ab"), Pending("ab")))
    out = token.substitute("ab", "Z")
    assert out.fragments == (Resolved("ab"), Resolved("Z"))
    assert out.resolved


def test_token_substitute_without_match_returns_same_token():
    token = Token.new("Alice")
    assert token.substitute("Bob", "X") is token


# ── Generator ────────────────────────────────────────────────────────

def test_integer_mask_format():
    assert integer_mask(1003) == "77100377"
    assert integer_mask(5, delimiter=9) == "959"


def test_is_integer():
    assert is_integer("123")
    assert is_integer("-7")
    assert not is_integer("12a")
    assert not is_integer("1.5")
    assert not is_integer("")


def test_generator_seeded_mask():
    gen = MaskGenerator({"A": "JX"})
    assert gen.generate("Alice") == "JX1000M"
    assert gen.generate("Bob") == "1001M"
    assert gen.counter == 1002


def test_generator_integer_and_short_paths():
    gen = MaskGenerator()
    assert gen.generate("12") == "77100077"
    assert gen.generate("ab") == short_mask(1001)
    assert gen.generate("12", integers=False) == short_mask(1002)


def test_generator_default_threshold_matches_extractor():
    gen = MaskGenerator()
    assert gen.generate("x" * DEFAULT_MIN_LENGTH) == short_mask(1000)
    assert gen.generate("x" * (DEFAULT_MIN_LENGTH + 1)) == "1001M"


def test_short_mask_known_value():
    # 1000 = 19 * 52 + 12 → letters "M", "T"; bucket 0 → "-"
    assert short_mask(1000) == "-MT-"


def test_short_mask_bounded_and_distinct():
    masks = [short_mask(c) for c in range(10000)]
    assert all(len(m) == 4 for m in masks)
    assert len(set(masks)) == 10000


def test_short_mask_overflow_is_distinct():
    inside = short_mask(SHORT_CAPACITY - 1)
    past = [short_mask(SHORT_CAPACITY + i) for i in range(100)]
    assert len(inside) == 4
    assert all(len(m) >= 5 and m.startswith("|") and m.endswith("|") for m in past)
    assert len(set(past)) == 100


def test_short_mask_rejects_negative():
    with pytest.raises(ValueError):
        short_mask(-1)


# ── Resolver ─────────────────────────────────────────────────────────

def test_resolve_nested_token_embeds_shorter_mask():
    masks = MaskResolver().resolve(["AliceSmith", "Alice"], {"A": "JX"})
    assert masks["Alice"] == "JX1000M"
    assert masks["AliceSmith"] == "JX1000M1001M"


def test_resolve_contained_in_middle():
    masks = MaskResolver().resolve(["Bob", "xBobyBobz"])
    bob = masks["Bob"]
    assert bob == "1000M"
    assert masks["xBobyBobz"] == (
        short_mask(1001) + bob + short_mask(1002) + bob + short_mask(1003)
    )


def test_resolve_integer_token_is_masked_whole():
    masks = MaskResolver().resolve(["1234", "12"])
    assert masks["12"] == "77100077"
    assert masks["1234"] == "77100177"


def test_resolve_integer_cascades_into_text():
    masks = MaskResolver().resolve(["12", "Room 12"])
    assert masks["Room 12"].endswith(masks["12"])


def test_resolve_totality_and_no_literal_left():
    values = ["Ann", "Anna", "Annabel", "Bel", "Tom & Jerry", "x", "42", "Jerry"]
    tokens = extract_tokens(values)
    masks = MaskResolver().resolve(tokens, {"A": "QQ", "T": "ZT"})
    assert set(masks) == set(tokens)
    assert len(masks) == len(tokens)
    words = [t for t in tokens if len(t) > 2 and not t.isdigit()]
    for mask in masks.values():
        assert mask
        assert not any(word in mask for word in words)


def test_resolve_containment_preserved():
    values = ["Smith", "Jane Smith", "Smithson", "Dr. Jane Smith"]
    masks = MaskResolver().resolve(values, {"S": "KP", "J": "LM"})
    smith = masks["Smith"]
    for longer in ("Jane Smith", "Smithson", "Dr. Jane Smith"):
        assert smith in masks[longer]
    assert masks["Smithson"].startswith(smith)
    assert masks["Jane Smith"].endswith(smith)


def test_resolve_generic_masks_unique():
    values = [f"customer-{name}" for name in ("anna", "boris", "chen", "dora", "emil")]
    masks = MaskResolver().resolve(values)
    assert len(set(masks.values())) == len(values)


def test_resolve_is_repeatable():
    values = ["Alice", "AliceSmith", "Bob", "7", "x"]
    resolver = MaskResolver()
    assert resolver.resolve(values, {"A": "Z"}).dump() == resolver.resolve(values, {"A": "Z"}).dump()


def test_resolve_counter_start_from_config():
    masks = MaskResolver(ResolverConfig(counter_start=5000)).resolve(["Alice"])
    assert masks["Alice"] == "5000M"


def test_resolve_leftover_pending_text_raises(monkeypatch):
    monkeypatch.setattr(resolver_module, "_mask_fragments", lambda token, gen: token)
    with pytest.raises(UnresolvedTokenError) as exc_info:
        MaskResolver().resolve(["Alice"])
    assert exc_info.value.tokens == ["Alice"]


# ── Mask map ─────────────────────────────────────────────────────────

def test_mask_map_lookups():
    m = MaskMap({"AliceSmith": "Y2", "Alice": "X1"})
    assert list(m) == ["Alice", "AliceSmith"]
    assert m.lookup_token("Alice") == "X1"
    assert m.lookup_token("Bob") is None
    assert m.size == len(m) == 2


def test_audit_file_sorted_by_length(tmp_path):
    masks = MaskResolver().resolve(["Annabel", "Ann", "Bo"])
    path = masks.write_audit(tmp_path / "audit.txt")
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [line.split(": ")[0] for line in lines] == ["Bo", "Ann", "Annabel"]
    assert lines[1] == f"Ann: {masks['Ann']}"


def test_audit_file_reloads(tmp_path):
    masks = MaskResolver().resolve(["Alice", "key: value", "12"])
    path = masks.write_audit(tmp_path / "audit.txt")
    assert MaskMap.load_audit(path).dump() == masks.dump()


def test_audit_file_reloads_multiline_cell(tmp_path):
    masks = MaskResolver().resolve(["Ann\nBell", "Alice"])
    assert set(masks) == {"Ann", "Bell", "Alice"}
    path = masks.write_audit(tmp_path / "audit.txt")
    assert MaskMap.load_audit(path).dump() == masks.dump()
