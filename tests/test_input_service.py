import pytest

from endless_dungeon.services.input_service import KeyState, button_direction, swipe_direction


def test_key_press_maps_arrows():
    keys = KeyState()
    assert keys.press("ArrowLeft") == "left"
    assert keys.press("ArrowUp") == "up"
    assert keys.press("ArrowRight") == "right"
    assert keys.press("ArrowDown") == "down"


def test_held_key_does_not_repeat():
    keys = KeyState()
    assert keys.press("ArrowRight") == "right"
    assert keys.press("ArrowRight") is None
    keys.release("ArrowRight")
    assert keys.press("ArrowRight") == "right"


def test_non_arrow_keys_ignored():
    keys = KeyState()
    assert keys.press("KeyW") is None
    assert keys.press("Space") is None
    assert keys.pressed == set()


def test_only_arrow_keys_are_tracked():
    keys = KeyState()
    for i in range(100):
        keys.press(f"Key{i}")
    keys.press("ArrowUp")
    assert keys.pressed == {"ArrowUp"}


def test_clear_forgets_held_keys():
    keys = KeyState()
    keys.press("ArrowDown")
    keys.clear()
    assert keys.press("ArrowDown") == "down"


@pytest.mark.parametrize(
    "start,end,expected",
    [
        ((200, 100), (100, 110), "left"),
        ((100, 100), (200, 90), "right"),
        ((100, 200), (110, 100), "up"),
        ((100, 100), (90, 200), "down"),
        ((100, 100), (120, 110), None),
        ((100, 100), (130, 100), None),
        ((100, 100), (131, 100), "right"),
        # equal axes resolve vertically
        ((100, 100), (160, 160), "down"),
        ((160, 160), (100, 100), "up"),
    ],
)
def test_swipe_direction(start, end, expected):
    assert swipe_direction(start, end) == expected


def test_swipe_custom_threshold():
    assert swipe_direction((0, 0), (0, 15), min_distance=10) == "down"
    assert swipe_direction((0, 0), (0, 15), min_distance=20) is None


@pytest.mark.parametrize("value,expected", [("left", "left"), ("down", "down"), ("north", None), ("", None)])
def test_button_direction(value, expected):
    assert button_direction(value) == expected
