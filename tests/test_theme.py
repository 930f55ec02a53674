import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from school_portal.core.notify import Notifier
from school_portal.routers import theme as theme_router
from school_portal.theme.context import ThemeContext
from school_portal.theme.palette import DEFAULT_PRIMARY_COLOR, mix_colors


@pytest.fixture
def theme():
    return ThemeContext("#336699")


@pytest.fixture
def client(theme):
    app = FastAPI()
    app.state.theme = theme
    app.include_router(theme_router.router)
    return TestClient(app)


def test_changes_bump_version_and_notify_listeners(theme):
    seen = []
    unsubscribe = theme.subscribe(lambda ctx: seen.append(ctx.primary_color))

    theme.set_primary_color("#ABC")
    theme.set_color_scheme("dark")
    unsubscribe()
    theme.set_primary_color("#123456")

    assert seen == ["#aabbcc", "#aabbcc"]
    assert theme.version == 3
    assert theme.is_dark


def test_invalid_values(theme):
    assert theme.set_primary_color("blue") == DEFAULT_PRIMARY_COLOR
    with pytest.raises(ValueError):
        theme.set_color_scheme("sepia")


def test_from_settings():
    class FakeSettings:
        THEME_PRIMARY_COLOR = "#112233"
        THEME_COLOR_SCHEME = "dark"

    ctx = ThemeContext.from_settings(FakeSettings())

    assert ctx.primary_color == "#112233"
    assert ctx.colors()["background"] == "#1a1b1e"


def test_notifier_uses_theme_colours(theme):
    toasts = []
    notifier = Notifier(theme=theme, sink=toasts.append)

    notifier.success("Saved")
    notifier.error("Failed", title="Oops")

    assert toasts[0].color == mix_colors("#336699", "#4caf50", 0.3)
    assert toasts[1].title == "Oops"
    assert toasts[1].color == theme.semantic_colors()["error"]
    assert list(notifier.history) == toasts


def test_notifier_without_theme_uses_fallbacks():
    toast = Notifier().warning("Slow")

    assert toast.color == "#ff9800"
    assert toast.level == "warning"


def test_get_theme(client):
    response = client.get("/theme")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["primary_color"] == "#336699"
    assert data["color_scheme"] == "light"
    assert len(data["shades"]) == 10
    assert set(data["semantic"]) == {"success", "error", "warning", "info"}


def test_get_stylesheet(client):
    response = client.get("/theme/stylesheet.css")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/css")
    assert "--theme-primary: #336699;" in response.text


def test_update_theme(client, theme):
    response = client.put("/theme", json={"primary_color": "#00AA00", "color_scheme": "dark"})

    assert response.status_code == 200
    assert response.json()["data"]["primary_color"] == "#00aa00"
    assert theme.is_dark
    assert theme.version == 2


def test_update_theme_rejects_malformed_colour(client, theme):
    response = client.put("/theme", json={"primary_color": "#12"})

    assert response.status_code == 422
    assert theme.version == 0


def test_theme_routes_need_a_theme():
    app = FastAPI()
    app.include_router(theme_router.router)

    response = TestClient(app).get("/theme")

    assert response.status_code == 503
