from dataclasses import dataclass

COMPACT = "compact"
STANDARD = "standard"

MOBILE_BREAKPOINT = 768  # window width (px) below which a tall window is compact
REBUILD_THRESHOLD = 4  # tile size delta (px) that forces a new maze on resize
MAX_VIEWPORT_PIXELS = 100_000  # browser metrics are capped here before any sizing maths

# Standard canvas framing
MAX_CANVAS_WIDTH = 1050
STANDARD_ASPECT = 0.67
FALLBACK_ASPECT = 1.5
# Compact canvas framing
COMPACT_HEIGHT_SHARE = 0.6
COMPACT_ASPECT = 0.85


@dataclass(frozen=True)
class LayoutProfile:
    target_cols: int
    target_rows: int
    min_tile: int
    max_tile: int
    min_cols: int
    min_rows: int


PROFILES = {
    COMPACT: LayoutProfile(target_cols=15, target_rows=13, min_tile=20, max_tile=40, min_cols=15, min_rows=11),
    STANDARD: LayoutProfile(target_cols=33, target_rows=23, min_tile=16, max_tile=48, min_cols=21, min_rows=15),
}


def get_profile(layout_mode: str) -> LayoutProfile:
    try:
        return PROFILES[layout_mode]
    except KeyError:
        raise ValueError(f"unknown layout mode: {layout_mode!r}") from None


__all__ = [
    "COMPACT",
    "STANDARD",
    "MOBILE_BREAKPOINT",
    "REBUILD_THRESHOLD",
    "LayoutProfile",
    "PROFILES",
    "get_profile",
]
