# letterbox/services/render_service.py
"""
스트로크 오버레이 렌더링 (Pillow)

스트로크를 (type, strokeId) 묶음으로 나눠 처음 등장한 순서대로 그린다.
- brush: 묶음 전체를 잇는 둥근 선 하나 (굵기/색은 첫 스트로크 기준)
- fingerprint: 점마다 0.6×size 원 + 옅은 외곽선, 불투명도 0.6~0.9
- lip: 점마다 기본 원 + 옅어지는 링 2개 + 하이라이트 원, 불투명도 0.5~0.9
- text 및 알 수 없는 type 은 무시

불투명도 난수는 시드가 있는 생성기를 쓰므로 같은 편지는 항상 같은 픽셀이 나온다.
"""

import io
import math
import random
from typing import Dict, Iterable, List, Optional, Tuple

from PIL import Image, ImageColor, ImageDraw

from letterbox.schemas.letter_schemas import STROKE_COORDINATE_LIMIT
from letterbox.utils.logger import logger

RENDERED_TYPES = ("brush", "fingerprint", "lip")

RGB = Tuple[int, int, int]


def _drawable(stroke: Dict) -> Optional[Dict]:
    """좌표/굵기를 float 로 맞춘 사본, 유한하지 않거나 범위 밖이면 None"""
    try:
        x, y, size = float(stroke["x"]), float(stroke["y"]), float(stroke["size"])
    except (KeyError, TypeError, ValueError):
        return None
    if not all(math.isfinite(v) for v in (x, y, size)):
        return None
    if abs(x) > STROKE_COORDINATE_LIMIT or abs(y) > STROKE_COORDINATE_LIMIT or size < 0:
        return None
    return {**stroke, "x": x, "y": y, "size": size}


def group_strokes(strokes: Iterable[Dict]) -> List[List[Dict]]:
    """(type, strokeId) 기준 묶음, 처음 등장한 순서 유지"""
    groups: Dict[Tuple[str, str], List[Dict]] = {}
    skipped = 0
    for stroke in strokes:
        stroke_type = stroke.get("type")
        if stroke_type not in RENDERED_TYPES:
            continue
        drawable = _drawable(stroke)
        if drawable is None:
            skipped += 1
            continue
        key = (stroke_type, stroke.get("strokeId") or "default")
        groups.setdefault(key, []).append(drawable)
    if skipped:
        logger.warning(f"좌표/굵기가 잘못된 스트로크 {skipped}개 건너뜀")
    return list(groups.values())


def _parse_color(color) -> Optional[RGB]:
    try:
        return ImageColor.getrgb(color)[:3]
    except (ValueError, AttributeError, TypeError):
        return None


def _alpha(value: float) -> int:
    return max(0, min(255, int(round(value * 255))))


def _composite_disc(
    canvas: Image.Image,
    cx: float,
    cy: float,
    radius: float,
    rgb: RGB,
    opacity: float,
    outline_only: bool = False,
):
    """반투명 원을 캔버스에 합성 (원을 감싸는 영역만 따로 그려서 합친다)"""
    if radius <= 0:
        return
    # 캔버스를 충분히 덮는 크기 이상은 의미가 없다
    radius = min(radius, max(canvas.size) * 2)

    pad = 2
    left = max(0, int(cx - radius) - pad)
    top = max(0, int(cy - radius) - pad)
    right = min(canvas.width, int(cx + radius) + pad + 1)
    bottom = min(canvas.height, int(cy + radius) + pad + 1)
    if left >= right or top >= bottom:
        return

    patch = Image.new("RGBA", (right - left, bottom - top), (0, 0, 0, 0))
    draw = ImageDraw.Draw(patch)
    box = [cx - radius - left, cy - radius - top, cx + radius - left, cy + radius - top]
    color = rgb + (_alpha(opacity),)
    if outline_only:
        draw.ellipse(box, outline=color, width=1)
    else:
        draw.ellipse(box, fill=color)
    canvas.alpha_composite(patch, dest=(left, top))


def _draw_brush(canvas: Image.Image, group: List[Dict], rgb: RGB):
    width = max(1, min(int(round(group[0]["size"])), max(canvas.size)))
    points = [(stroke["x"], stroke["y"]) for stroke in group]
    radius = width / 2

    draw = ImageDraw.Draw(canvas)
    color = rgb + (255,)
    if len(points) > 1:
        draw.line(points, fill=color, width=width, joint="curve")
    # 둥근 끝 처리
    for x, y in (points[0], points[-1]):
        draw.ellipse([x - radius, y - radius, x + radius, y + radius], fill=color)


def _draw_fingerprint(canvas: Image.Image, group: List[Dict], rng: random.Random):
    for stroke in group:
        rgb = _parse_color(stroke.get("color"))
        if rgb is None:
            continue
        opacity = 0.6 + rng.random() * 0.3
        radius = stroke["size"] * 0.6
        _composite_disc(canvas, stroke["x"], stroke["y"], radius, rgb, opacity)
        _composite_disc(canvas, stroke["x"], stroke["y"], radius, rgb, opacity * 0.5, outline_only=True)


def _draw_lip(canvas: Image.Image, group: List[Dict], rng: random.Random):
    for stroke in group:
        rgb = _parse_color(stroke.get("color"))
        if rgb is None:
            continue
        opacity = 0.5 + rng.random() * 0.4
        x, y, size = stroke["x"], stroke["y"], stroke["size"]

        _composite_disc(canvas, x, y, size * 0.8, rgb, opacity)
        for layer in (1, 2):
            _composite_disc(canvas, x, y, size * (0.8 + layer * 0.2), rgb, opacity * (0.3 / layer))
        _composite_disc(canvas, x - size * 0.2, y - size * 0.2, size * 0.3, rgb, opacity * 0.8)


def render_strokes(
    strokes: Iterable[Dict],
    width: int,
    height: int,
    seed=None,
    background: Optional[str] = None,
) -> Image.Image:
    """스트로크 목록 → RGBA 이미지"""
    fill = (0, 0, 0, 0)
    if background:
        rgb = _parse_color(background)
        if rgb is None:
            logger.warning(f"배경 색상 해석 실패, 투명 배경 사용: {background!r}")
        else:
            fill = rgb + (255,)

    canvas = Image.new("RGBA", (width, height), fill)
    rng = random.Random(seed)

    for group in group_strokes(strokes):
        first = group[0]
        rgb = _parse_color(first.get("color"))
        if rgb is None:
            logger.warning(f"스트로크 색상 해석 실패, 묶음 건너뜀: {first.get('color')!r}")
            continue

        if first["type"] == "fingerprint":
            _draw_fingerprint(canvas, group, rng)
        elif first["type"] == "lip":
            _draw_lip(canvas, group, rng)
        else:
            _draw_brush(canvas, group, rgb)

    return canvas


def render_png(
    strokes: Iterable[Dict],
    width: int,
    height: int,
    seed=None,
    background: Optional[str] = None,
) -> bytes:
    image = render_strokes(strokes, width, height, seed=seed, background=background)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
