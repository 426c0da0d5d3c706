"""
Pytest fixtures shared across all test modules.
"""
import pytest

from pwl_dc_adjuster.adjustment.host import InMemoryWorld, RecordingNotifier


# ---------------------------------------------------------------------------
# Document source factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_item():
    """Factory for item document sources (level + description)."""

    def _make(name="Item", level=None, description=None, type_="spell"):
        system = {}
        if level is not None:
            system["level"] = {"value": level}
        if description is not None:
            system["description"] = {"value": description}
        return {"name": name, "type": type_, "system": system}

    return _make


@pytest.fixture
def hazard_source():
    """A level 4 hazard with every adjustable field populated (reflex save off)."""
    return {
        "name": "Poisoned Dart Gallery",
        "type": "hazard",
        "system": {
            "details": {
                "level": {"value": 4},
                "disable": (
                    "<p>@Check[type:thievery|dc:21] to disable each dart launcher "
                    "or @Check[type:athletics|dc:24|traits:action:force-open] to jam it.</p>"
                ),
            },
            "attributes": {
                "ac": {"value": 18},
                "stealth": {"value": 25},
            },
            "saves": {
                "fortitude": {"value": 12},
                "reflex": {"value": 0},
                "will": {"value": 8},
            },
        },
        "items": [
            {"name": "Dart", "type": "melee", "system": {"bonus": {"value": 14}}},
            {"name": "Reset", "type": "action", "system": {"bonus": {"value": 5}}},
            {"name": "Inert", "type": "melee", "system": {"bonus": {"value": 0}}},
        ],
    }


# ---------------------------------------------------------------------------
# Host collaborators
# ---------------------------------------------------------------------------

class FakeConfirmer:
    """Confirmer returning a fixed answer and remembering what it was shown."""

    def __init__(self, answer=True):
        self.answer = answer
        self.calls = []

    async def confirm(self, title, content):
        self.calls.append((title, content))
        return self.answer


@pytest.fixture
def make_confirmer():
    return FakeConfirmer


@pytest.fixture
def confirmer():
    return FakeConfirmer(answer=True)


@pytest.fixture
def declining_confirmer():
    return FakeConfirmer(answer=False)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def sample_world_dict(make_item):
    """Two actors with embedded items plus world items; three need adjustment."""
    return {
        "actors": [
            {
                "name": "Valeros",
                "type": "character",
                "items": [
                    make_item("Fireball", 3, "<p>@Check[type:reflex|dc:22|basic]</p>"),
                    make_item("Longsword", 0, "A sword."),
                ],
            },
            {
                "name": "Goblin Warchanter",
                "type": "npc",
                "items": [
                    make_item("Already Flat", 5, "@Check[type:will|dc:18]"),
                ],
            },
        ],
        "items": [
            make_item("Potion of Resistance", 6, "@Check[type:fortitude|dc:25] or @Check[type:will|dc:22]"),
            make_item("Rope", None, "Just rope."),
            make_item("Scroll of Heal", 2, "@Check[type:fortitude|dc:21]"),
        ],
    }


@pytest.fixture
def sample_world(sample_world_dict):
    return InMemoryWorld.from_dict(sample_world_dict)
