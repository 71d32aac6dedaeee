import io

from PIL import Image

from letterbox.services.render_service import group_strokes, render_png, render_strokes


def _stroke(x, y, type="brush", color="#ff0000", size=6, **extra):
    return {"x": x, "y": y, "size": size, "color": color, "type": type, **extra}


def _alpha_bbox(image):
    return image.getchannel("A").getbbox()


def test_group_strokes_keeps_first_seen_order():
    strokes = [
        _stroke(1, 1, strokeId="a"),
        _stroke(2, 2, type="lip"),
        _stroke(3, 3, strokeId="a"),
        _stroke(4, 4, type="text"),
        _stroke(5, 5, type="sparkle"),
        _stroke(6, 6, strokeId="b"),
    ]

    groups = group_strokes(strokes)

    assert [[s["x"] for s in group] for group in groups] == [[1, 3], [2], [6]]


def test_empty_stroke_list_renders_transparent_canvas():
    image = render_strokes([], 40, 30)

    assert image.size == (40, 30)
    assert _alpha_bbox(image) is None


def test_brush_group_draws_connected_path():
    image = render_strokes([_stroke(10, 10, strokeId="s"), _stroke(90, 10, strokeId="s")], 100, 40)

    assert image.getpixel((50, 10)) == (255, 0, 0, 255)
    assert image.getpixel((50, 30))[3] == 0


def test_fingerprint_opacity_stays_in_range():
    image = render_strokes([_stroke(50, 50, type="fingerprint", color="#0000ff", size=10)], 100, 100, seed="x")

    red, green, blue, alpha = image.getpixel((50, 50))
    assert 153 <= alpha <= 230
    assert blue >= 250 and red <= 5


def test_lip_print_covers_outer_rings():
    image = render_strokes([_stroke(50, 50, type="lip", color="#e11d48", size=10)], 100, 100, seed=1)

    # 가장 바깥 링 반지름 = 1.2 × size
    left, top, right, bottom = _alpha_bbox(image)
    assert left <= 39 and right >= 61
    assert top <= 39 and bottom >= 61


def test_same_seed_renders_identical_pixels():
    strokes = [_stroke(20 + i, 30, type="fingerprint") for i in range(10)]
    strokes += [_stroke(60, 60 + i, type="lip", color="pink") for i in range(5)]

    assert render_png(strokes, 120, 120, seed="letter-1") == render_png(strokes, 120, 120, seed="letter-1")


def test_text_and_unparseable_colors_are_skipped():
    strokes = [_stroke(10, 10, type="text"), _stroke(20, 20, color="not-a-color")]

    assert _alpha_bbox(render_strokes(strokes, 50, 50)) is None


def test_oversized_strokes_are_clamped_to_canvas():
    strokes = [
        _stroke(20, 20, size=1e20, strokeId="huge"),
        _stroke(30, 30, type="fingerprint", size=1e20),
        _stroke(30, 30, type="lip", size=1e20),
    ]

    image = render_strokes(strokes, 50, 40, seed="big")

    assert image.size == (50, 40)
    assert _alpha_bbox(image) is not None
    assert image.getpixel((20, 20))[3] == 255


def test_non_numeric_or_out_of_range_strokes_are_skipped():
    strokes = [
        _stroke("left", 10),
        _stroke(float("nan"), 10),
        _stroke(10, 10, size=float("inf")),
        _stroke(1e9, 10, type="fingerprint"),
        {"x": 10, "type": "lip", "color": "#000000"},
    ]

    assert group_strokes(strokes) == []
    assert _alpha_bbox(render_strokes(strokes, 50, 50)) is None


def test_numeric_strings_from_stored_rows_still_render():
    image = render_strokes([_stroke("25", "25", size="10")], 50, 50)

    assert image.getpixel((25, 25)) == (255, 0, 0, 255)


def test_paper_background_fills_canvas():
    image = render_strokes([], 10, 10, background="#FEFEFE")

    assert image.getpixel((0, 0)) == (254, 254, 254, 255)


async def test_overlay_endpoint_returns_png(client, send_letter):
    body = await send_letter(brushStrokes=[
        _stroke(10, 10, strokeId="s", id="1", timestamp=1),
        _stroke(80, 80, strokeId="s", id="2", timestamp=2),
        _stroke(40, 60, type="fingerprint", id="3", timestamp=3),
    ])
    url = f"/api/letters/{body['letterId']}/overlay.png"

    first = await client.get(url, params={"width": 100, "height": 120})
    second = await client.get(url, params={"width": 100, "height": 120})

    assert first.status_code == 200
    assert first.headers["content-type"] == "image/png"
    assert Image.open(io.BytesIO(first.content)).size == (100, 120)
    assert first.content == second.content


async def test_overlay_endpoint_paper_mode(client, send_letter):
    body = await send_letter(letterColor="#FFF8DC")

    response = await client.get(
        f"/api/letters/{body['letterId']}/overlay.png", params={"width": 8, "height": 8, "paper": "true"}
    )

    image = Image.open(io.BytesIO(response.content)).convert("RGBA")
    assert image.getpixel((0, 0)) == (255, 248, 220, 255)


async def test_overlay_for_unknown_letter_is_404(client):
    response = await client.get("/api/letters/missing/overlay.png")

    assert response.status_code == 404
    assert response.json() == {"error": "Letter not found"}


async def test_overlay_rejects_out_of_range_size(client, send_letter):
    body = await send_letter()

    response = await client.get(f"/api/letters/{body['letterId']}/overlay.png", params={"width": 0})

    assert response.status_code == 400
