import pytest

from conftest import FakeSession
from drishti.shared.domain.context.session.models import User
from drishti.shared.domain.navigation.router import View, ViewRouter, can_enter, resolve

ADMIN = User(username="ops", role="admin")
CITIZEN = User(username="ravi", role="citizen")


@pytest.mark.parametrize(
    "user, expected",
    [
        (None, View.LOGIN),
        (CITIZEN, View.LOGIN),
        (ADMIN, View.ADMIN),
    ],
)
def test_admin_gate(user, expected):
    router = ViewRouter(FakeSession(user))

    assert router.navigate("admin") == expected
    assert router.current == expected


@pytest.mark.parametrize("name", ["map", "analysis", "news", "gov", "login", "initiatives", "simulator", "report", "home"])
def test_ungated_views_are_entered_directly(name):
    session = FakeSession()
    router = ViewRouter(session)

    assert router.navigate(name) == View(name)
    assert session.lookups == 0


@pytest.mark.parametrize("name", ["", "settings", "ADMIN-PANEL", None])
def test_unknown_names_fall_back_to_home(name):
    router = ViewRouter(FakeSession(), initial="map")

    assert router.navigate(name) == View.HOME


def test_names_are_case_insensitive():
    assert View.parse(" Map ") == View.MAP


def test_session_is_read_on_every_admin_request():
    session = FakeSession(ADMIN)
    router = ViewRouter(session)

    assert router.navigate("admin") == View.ADMIN
    session.user = None
    assert router.navigate("admin") == View.LOGIN
    assert session.lookups == 2


def test_initial_view_cannot_skip_the_gate():
    assert ViewRouter(FakeSession(ADMIN), initial="admin").current == View.HOME
    assert ViewRouter(FakeSession(), initial="report").current == View.REPORT


def test_pure_helpers():
    assert can_enter(View.MAP, None)
    assert not can_enter(View.ADMIN, CITIZEN)
    assert resolve("admin", ADMIN) == View.ADMIN
    assert resolve("admin", None) == View.LOGIN
    assert resolve("nowhere", None) == View.HOME
