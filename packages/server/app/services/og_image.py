"""
Social preview (Open Graph) card rendering for Snap Apps.

Cards are 1200x630 PNGs drawn with Pillow. Each Snap App type has a theme
(label, accent colour, emoji); unknown types fall back to the smart-card theme.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageColor, ImageDraw, ImageFont

from app.models.snap_app import SnapApp
from snapbrief_shared.schemas.common import SnapAppType
from snapbrief_shared.schemas.snap_apps import SNAP_APP_TYPE_METADATA

CARD_WIDTH = 1200
CARD_HEIGHT = 630
PADDING = 60

BACKGROUND = (10, 10, 15)
WHITE = (255, 255, 255)
MUTED = (160, 160, 170)
BRAND_COLORS = ("#00D4FF", "#8B5CF6")

# Emoji glyphs in colour fonts are only available at this strike size.
_EMOJI_STRIKE_SIZE = 109

_FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
]

_TYPE_EMOJIS = {
    SnapAppType.PRICE_COMPARISON: "📊",
    SnapAppType.PRODUCT_GALLERY: "🛒",
    SnapAppType.ARTICLE: "📄",
    SnapAppType.MAP_VIEW: "🗺️",
    SnapAppType.AVAILABILITY: "📅",
    SnapAppType.CODE_BLOCK: "💻",
    SnapAppType.DATA_TABLE: "📋",
    SnapAppType.SMART_CARD: "✨",
}


@dataclass(frozen=True)
class CardTheme:
    label: str
    color: str
    emoji: str
    description: str


def _build_themes() -> dict[str, CardTheme]:
    themes = {}
    for type_, meta in SNAP_APP_TYPE_METADATA.items():
        themes[type_.value] = CardTheme(
            label=meta.label,
            color=meta.color,
            emoji=_TYPE_EMOJIS.get(type_, "✨"),
            description=meta.description,
        )
    return themes


THEMES = _build_themes()
DEFAULT_THEME = THEMES[SnapAppType.SMART_CARD.value]


def theme_for(type_tag: str) -> CardTheme:
    """Theme for a Snap App type tag; unknown tags get the default theme."""
    return THEMES.get(type_tag, DEFAULT_THEME)


# ---------------------------------------------------------------------------
# Drawing helpers
# ---------------------------------------------------------------------------


def _pick_font(size: int, font_path: Optional[str] = None) -> ImageFont.ImageFont:
    candidates = ([font_path] if font_path else []) + _FONT_CANDIDATES
    for path in candidates:
        try:
            return ImageFont.truetype(path, size=size)
        except OSError:
            pass
    return ImageFont.load_default(size=size)


def _wrap_text(
    draw: ImageDraw.ImageDraw, text: str, font: ImageFont.ImageFont, max_width: int
) -> list[str]:
    """Greedy word wrap by rendered pixel width."""
    lines: list[str] = []
    current: list[str] = []
    for word in text.split():
        trial = " ".join(current + [word])
        if draw.textlength(trial, font=font) <= max_width or not current:
            current.append(word)
        else:
            lines.append(" ".join(current))
            current = [word]
    if current:
        lines.append(" ".join(current))
    return lines


def _tint(color: tuple[int, int, int], alpha: float) -> tuple[int, int, int]:
    """Blend `color` over the card background."""
    return tuple(int(b + (c - b) * alpha) for c, b in zip(color, BACKGROUND))


def _new_card() -> tuple[Image.Image, ImageDraw.ImageDraw]:
    img = Image.new("RGB", (CARD_WIDTH, CARD_HEIGHT), BACKGROUND)
    return img, ImageDraw.Draw(img)


def _to_png(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG", optimize=True)
    return buf.getvalue()


def _paste_emoji(
    img: Image.Image, emoji: str, box: tuple[int, int, int, int], emoji_font_path: str
) -> bool:
    """Draw a colour emoji scaled into `box`. Returns False if the font can't."""
    try:
        font = ImageFont.truetype(emoji_font_path, size=_EMOJI_STRIKE_SIZE)
    except OSError:
        return False
    glyph = Image.new("RGBA", (_EMOJI_STRIKE_SIZE * 2, _EMOJI_STRIKE_SIZE * 2), (0, 0, 0, 0))
    ImageDraw.Draw(glyph).text((0, 0), emoji, font=font, embedded_color=True)
    bbox = glyph.getbbox()
    if bbox is None:
        return False
    glyph = glyph.crop(bbox)
    x0, y0, x1, y1 = box
    glyph.thumbnail((x1 - x0, y1 - y0))
    offset = (
        x0 + (x1 - x0 - glyph.width) // 2,
        y0 + (y1 - y0 - glyph.height) // 2,
    )
    img.paste(glyph, offset, glyph)
    return True


def _draw_centered(draw: ImageDraw.ImageDraw, y: int, text: str, font, fill) -> None:
    width = draw.textlength(text, font=font)
    draw.text(((CARD_WIDTH - width) / 2, y), text, font=font, fill=fill)


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------


def render_snap_app_card(
    snap_app: SnapApp,
    font_path: Optional[str] = None,
    emoji_font_path: Optional[str] = None,
) -> bytes:
    theme = theme_for(snap_app.type)
    accent = ImageColor.getrgb(theme.color)
    img, draw = _new_card()

    # Top accent bar
    draw.rectangle([0, 0, CARD_WIDTH, 6], fill=accent)

    # Header: badge + type label
    badge = (PADDING, PADDING, PADDING + 80, PADDING + 80)
    draw.rounded_rectangle(badge, radius=20, fill=_tint(accent, 0.2))
    if not (emoji_font_path and _paste_emoji(img, theme.emoji, badge, emoji_font_path)):
        initial_font = _pick_font(44, font_path)
        draw.text(
            ((badge[0] + badge[2]) / 2, (badge[1] + badge[3]) / 2),
            theme.label[:1],
            font=initial_font,
            fill=accent,
            anchor="mm",
        )
    label_font = _pick_font(20, font_path)
    draw.text(
        (badge[2] + 20, PADDING + 28),
        snap_app.type.replace("_", " ").upper(),
        font=label_font,
        fill=accent,
    )

    # Title (at most three lines) and optional subtitle
    title_font = _pick_font(64, font_path)
    y = PADDING + 130
    for line in _wrap_text(draw, snap_app.title, title_font, int(CARD_WIDTH * 0.9) - PADDING)[:3]:
        draw.text((PADDING, y), line, font=title_font, fill=WHITE)
        y += 74
    if snap_app.subtitle:
        subtitle_font = _pick_font(28, font_path)
        lines = _wrap_text(draw, snap_app.subtitle, subtitle_font, int(CARD_WIDTH * 0.8) - PADDING)
        for line in lines[:2]:
            draw.text((PADDING, y + 10), line, font=subtitle_font, fill=MUTED)
            y += 36

    # Footer: brand mark and counters
    footer_y = CARD_HEIGHT - PADDING - 40
    mark = (PADDING, footer_y, PADDING + 40, footer_y + 40)
    draw.rounded_rectangle(mark, radius=10, fill=ImageColor.getrgb(BRAND_COLORS[0]))
    draw.text(
        ((mark[0] + mark[2]) / 2, (mark[1] + mark[3]) / 2),
        "M",
        font=_pick_font(20, font_path),
        fill=WHITE,
        anchor="mm",
    )
    footer_font = _pick_font(24, font_path)
    draw.text((mark[2] + 12, footer_y + 6), "Mino Snap App", font=footer_font, fill=MUTED)

    counters = f"{snap_app.view_count:,} views    {snap_app.share_count:,} shares"
    counter_font = _pick_font(20, font_path)
    width = draw.textlength(counters, font=counter_font)
    draw.text((CARD_WIDTH - PADDING - width, footer_y + 10), counters, font=counter_font, fill=MUTED)

    return _to_png(img)


def render_not_found_card(font_path: Optional[str] = None) -> bytes:
    img, draw = _new_card()
    _draw_centered(draw, CARD_HEIGHT // 2 - 24, "Snap App Not Found", _pick_font(48, font_path), WHITE)
    return _to_png(img)


def render_fallback_card(font_path: Optional[str] = None) -> bytes:
    img, draw = _new_card()
    _draw_centered(
        draw,
        CARD_HEIGHT // 2 - 24,
        "Mino Snap Apps",
        _pick_font(48, font_path),
        ImageColor.getrgb(BRAND_COLORS[0]),
    )
    return _to_png(img)
