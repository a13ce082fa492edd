"""
Tests for card probing through the DRM class directory.
"""

from unittest.mock import patch

from prime_offload.sysfs import get_system_cards, read_card


class TestReadCard:
    """Tests for reading a single cardN directory"""

    def test_id_is_lowercase_without_prefix_or_newline(self, fake_drm):
        path = fake_drm.add_card(0, "0x10DE", "0x1F9D")
        card = read_card(str(path), 0)
        assert card.id == "10de:1f9d"
        assert card.path == str(path)
        assert card.index == 0
        assert card.edp is False

    def test_missing_attributes_read_as_empty(self, fake_drm):
        path = fake_drm.add_entry("card3")
        card = read_card(str(path), 3)
        assert card.id == ":"

    def test_vendor_and_device_helpers(self, fake_drm):
        path = fake_drm.add_card(0, "0x1002", "0x7340")
        card = read_card(str(path), 0)
        assert card.vendor_id == "1002"
        assert card.device_id == "7340"


class TestGetSystemCards:
    """Tests for enumerating all cards"""

    def test_laptop_layout(self, laptop_drm):
        cards, id_index = get_system_cards(laptop_drm.path)
        assert [c.id for c in cards] == ["8086:9a49", "10de:1f9d"]
        assert cards[0].edp is True
        assert cards[1].edp is False
        assert set(id_index) == {"8086:9a49", "10de:1f9d"}
        assert id_index["10de:1f9d"] is cards[1]

    def test_ignores_unrelated_entries(self, fake_drm):
        fake_drm.add_card(0, "0x8086", "0x9a49")
        fake_drm.add_entry("renderD128")
        fake_drm.add_entry("card0-HDMI-A-1")
        fake_drm.add_entry("version")
        cards, _ = get_system_cards(fake_drm.path)
        assert len(cards) == 1
        assert cards[0].edp is False

    def test_cards_ordered_by_number(self, fake_drm):
        fake_drm.add_card(10, "0x1002", "0x73bf")
        fake_drm.add_card(2, "0x10de", "0x2204")
        fake_drm.add_card(1, "0x8086", "0x9a49")
        cards, _ = get_system_cards(fake_drm.path)
        assert [c.index for c in cards] == [1, 2, 10]

    def test_edp_marks_card_from_captured_number(self, fake_drm):
        # Regression: the eDP entry must mark card1, not card0
        fake_drm.add_card(0, "0x10de", "0x1f9d")
        fake_drm.add_card(1, "0x8086", "0x9a49")
        fake_drm.add_edp(1, connector=1)
        cards, _ = get_system_cards(fake_drm.path)
        assert cards[0].edp is False
        assert cards[1].edp is True
        assert cards[1].index == 1

    def test_edp_without_card_is_ignored(self, fake_drm):
        fake_drm.add_card(0, "0x8086", "0x9a49")
        fake_drm.add_edp(4)
        cards, _ = get_system_cards(fake_drm.path)
        assert len(cards) == 1
        assert cards[0].edp is False

    def test_duplicate_ids_keep_last_card(self, fake_drm):
        fake_drm.add_card(0, "0x1002", "0x73bf")
        fake_drm.add_card(1, "0x1002", "0x73bf")
        cards, id_index = get_system_cards(fake_drm.path)
        assert len(cards) == 2
        assert id_index["1002:73bf"] is cards[1]

    def test_missing_directory_yields_no_cards(self, tmp_path):
        cards, id_index = get_system_cards(str(tmp_path / "nope"))
        assert cards == []
        assert id_index == {}

    def test_read_errors_are_absorbed(self, laptop_drm):
        with patch("builtins.open", side_effect=PermissionError("denied")):
            cards, _ = get_system_cards(laptop_drm.path)
        assert [c.id for c in cards] == [":", ":"]

    def test_fresh_records_each_call(self, laptop_drm):
        first, _ = get_system_cards(laptop_drm.path)
        second, _ = get_system_cards(laptop_drm.path)
        assert first[0] is not second[0]
        assert first[0] == second[0]


class TestCardDriver:
    """Tests for resolving the bound driver"""

    def test_nvidia_driver(self, laptop_drm):
        cards, _ = get_system_cards(laptop_drm.path)
        assert cards[0].driver == "i915"
        assert cards[1].driver == "nvidia"

    def test_unbound_card(self, fake_drm):
        fake_drm.add_card(0, "0x8086", "0x9a49", driver=None)
        cards, _ = get_system_cards(fake_drm.path)
        assert cards[0].driver == "driver"

    def test_to_dict(self, laptop_drm):
        cards, _ = get_system_cards(laptop_drm.path)
        data = cards[1].to_dict()
        assert data == {
            "index": 1,
            "id": "10de:1f9d",
            "edp": False,
            "driver": "nvidia",
            "path": cards[1].path,
        }
