"""
Tests for the card and champion catalog.

Tests:
- Built-in entries
- Keyword classification of text-only entries
- Deck validation and opponent deck generation
"""

import random

import pytest

from ..catalog import (
    CARDS,
    CHAMPIONS,
    DECK_SIZE,
    CardType,
    CatalogError,
    DeckValidationError,
    EffectKind,
    Realm,
    build_deck,
    card_from_dict,
    champion_from_dict,
    classify_ability_text,
    classify_card_text,
    generate_opponent_deck,
    get_card_by_id,
    get_champion_by_id,
    pick_opponent_champion,
    validate_deck,
)


class TestBuiltInCatalog:
    """Tests for the fixed catalog."""

    def test_fifteen_cards_four_champions(self):
        assert len(CARDS) == 15
        assert len(CHAMPIONS) == 4
        assert len({c.id for c in CARDS}) == 15

    def test_effects_match_card_text(self):
        for card in CARDS:
            assert classify_card_text(card.card_type, card.value, card.description) == card.effects, card.id
            assert card.cost >= 0

    def test_lower_case_spells_do_nothing(self):
        for card_id in ("n2", "f1", "i3"):
            assert get_card_by_id(card_id).effects == ()

    def test_card_lookup(self):
        fireball = get_card_by_id("f1")
        assert fireball.name == "Fireball"
        assert fireball.cost == 3
        assert fireball.amount(EffectKind.DAMAGE) == 0
        assert get_card_by_id("f2").amount(EffectKind.DAMAGE) == 8
        assert get_card_by_id("missing") is None

    def test_champion_abilities(self):
        assert get_champion_by_id("c1").ability.effect.kind == EffectKind.DAMAGE
        assert get_champion_by_id("c2").ability.effect.kind == EffectKind.SHIELD
        assert get_champion_by_id("c3").ability.effect.kind == EffectKind.DRAW
        assert get_champion_by_id("c4").ability.effect.kind == EffectKind.HEAL
        assert get_champion_by_id("c3").ability.cost == 4

    def test_recharge_is_free_mana(self):
        recharge = get_card_by_id("t3")
        assert recharge.cost == 0
        assert recharge.amount(EffectKind.MANA_GAIN) == 2

    def test_defensive_flags(self):
        assert get_card_by_id("n3").is_defensive
        assert get_card_by_id("g3").is_healing
        assert not get_card_by_id("n2").is_defensive
        assert not get_card_by_id("f1").is_defensive


class TestKeywordClassifier:
    """Tests for text-only card and ability entries."""

    def test_attack_deals_value(self):
        effects = classify_card_text(CardType.ATTACK, 3, "Deal 3 damage.")
        assert [(e.kind, e.amount) for e in effects] == [(EffectKind.DAMAGE, 3)]

    def test_spell_dmg_case_insensitive(self):
        effects = classify_card_text(CardType.SPELL, 4, "Deal 4 DMG to all enemies.")
        assert effects[0].kind == EffectKind.DAMAGE

    def test_spell_keywords_case_sensitive(self):
        assert classify_card_text(CardType.SPELL, 5, "Gain 5 Shield.")[0].kind == EffectKind.SHIELD
        assert classify_card_text(CardType.SPELL, 5, "gain 5 shield.") == ()
        assert classify_card_text(CardType.SPELL, 2, "Gain 2 Mana.")[0].kind == EffectKind.MANA_GAIN

    def test_weapon_atk(self):
        effects = classify_card_text(CardType.WEAPON, 5, "Equip: +5 Atk power.")
        assert effects[0].kind == EffectKind.DAMAGE
        assert effects[0].amount == 5

    def test_ability_archetypes(self):
        assert classify_ability_text("Inferno").kind == EffectKind.DAMAGE
        assert classify_ability_text("Glacial Wall").amount == 4
        assert classify_ability_text("Mystery", "Heal 3 Health.").kind == EffectKind.HEAL
        assert classify_ability_text("Overclock").amount == 2

    def test_unknown_ability_raises(self):
        with pytest.raises(CatalogError):
            classify_ability_text("Nothing", "does nothing")


class TestCatalogFromDict:
    """Tests for loading entries from plain dicts."""

    def test_card_without_effects_is_classified(self):
        card = card_from_dict({
            "id": "x1", "name": "Heal Up", "cost": 2, "type": "Spell",
            "value": 4, "description": "Heal 4 health.", "realm": "Forest Realm",
        })
        assert card.realm == Realm.FOREST
        assert card.amount(EffectKind.HEAL) == 4

    def test_card_round_trip(self):
        card = get_card_by_id("g3")
        assert card_from_dict(card.to_dict()) == card

    def test_bad_card_raises(self):
        with pytest.raises(CatalogError):
            card_from_dict({"id": "x", "name": "X", "cost": 1, "type": "Trap", "value": 1, "realm": "Fire Realm"})
        with pytest.raises(CatalogError):
            card_from_dict({"id": "x", "name": "X", "cost": -1, "type": "Spell", "value": 1, "realm": "Fire Realm"})

    def test_champion_accepts_max_health_alias(self):
        data = get_champion_by_id("c4").to_dict()
        data["maxHealth"] = data.pop("max_health")
        del data["ability"]["effect"]
        champion = champion_from_dict(data)
        assert champion.max_health == 40
        assert champion.ability.effect.kind == EffectKind.HEAL


class TestDeckRules:
    """Tests for deck validation and opponent setup."""

    def test_valid_deck(self, deck_ids):
        assert validate_deck(deck_ids) == []
        assert len(build_deck(deck_ids)) == DECK_SIZE

    def test_wrong_size(self):
        errors = validate_deck(["n1", "n2"])
        assert any("exactly 8" in e for e in errors)

    def test_duplicates_and_unknown(self):
        errors = validate_deck(["n1", "n1", "n2", "n3", "f1", "f2", "f3", "zz"])
        assert "Duplicate card: n1" in errors
        assert "Unknown card: zz" in errors

    def test_build_deck_raises(self):
        with pytest.raises(DeckValidationError) as exc:
            build_deck(["n1"])
        assert exc.value.errors

    def test_opponent_champion_differs(self):
        rng = random.Random(1)
        for _ in range(20):
            assert pick_opponent_champion("c1", rng).id != "c1"

    def test_opponent_deck_is_distinct(self):
        rng = random.Random(7)
        for champion in CHAMPIONS:
            deck = generate_opponent_deck(champion, rng)
            assert len(deck) == DECK_SIZE
            assert len({c.id for c in deck}) == DECK_SIZE
