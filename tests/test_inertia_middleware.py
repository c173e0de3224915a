"""Tests for the page protocol middleware."""

from kida import DictLoader, Environment

from pagewire.app import App
from pagewire.config import AppConfig
from pagewire.errors import ValidationError
from pagewire.http.request import Request
from pagewire.http.response import Redirect
from pagewire.inertia import flash, share, share_once
from pagewire.inertia.middleware import SERVER_ERROR_MESSAGE, InertiaMiddleware
from pagewire.inertia.redirect import redirect_back_with_errors
from pagewire.inertia.returns import Page
from pagewire.middleware.sessions import SessionConfig, SessionMiddleware
from pagewire.testing import TestClient, assert_inertia_page, assert_location

ROOT = "<html><body>{{ page_root(page) }}</body></html>"


def _app(version: object = "1", *, sessions: bool = True) -> App:
    app = App(
        AppConfig(version=version),  # type: ignore[arg-type]
        kida_env=Environment(loader=DictLoader({"app.html": ROOT})),
    )
    if sessions:
        app.add_middleware(SessionMiddleware(SessionConfig(secret_key="test-secret")))
    app.add_middleware(InertiaMiddleware())
    return app


class TestVersionCheck:
    async def test_mismatch_forces_reload(self) -> None:
        app = _app("v2")
        calls: list[str] = []

        @app.route("/users")
        def users():
            calls.append("users")
            return Page("Users/Index")

        async with TestClient(app) as client:
            response = await client.inertia("/users?page=2", version="v1")

        assert_location(response, "/users?page=2")
        assert response.header("Vary") == "X-Inertia"
        assert calls == []

    async def test_matching_version_passes(self) -> None:
        app = _app("v2")

        @app.route("/users")
        def users():
            return Page("Users/Index")

        async with TestClient(app) as client:
            response = await client.inertia("/users", version="v2")

        page = assert_inertia_page(response, "Users/Index")
        assert page["version"] == "v2"

    async def test_missing_client_version_is_not_a_mismatch(self) -> None:
        app = _app("v2")

        @app.route("/users")
        def users():
            return Page("Users/Index")

        async with TestClient(app) as client:
            response = await client.inertia("/users")

        assert response.status == 200

    async def test_only_get_is_checked(self) -> None:
        app = _app("v2")

        @app.route("/users", methods=["POST"])
        def create():
            return Redirect("/users")

        async with TestClient(app) as client:
            response = await client.inertia("/users", method="POST", version="v1")

        assert response.status == 302

    async def test_plain_requests_are_not_checked(self) -> None:
        app = _app("v2")

        @app.route("/users")
        def users():
            return Page("Users/Index")

        async with TestClient(app) as client:
            response = await client.get("/users", headers={"X-Inertia-Version": "v1"})

        assert response.status == 200
        assert "data-page" in response.text

    async def test_callable_version(self) -> None:
        current = {"value": "a"}
        app = _app(lambda: current["value"])

        @app.route("/")
        def home():
            return Page("Home")

        async with TestClient(app) as client:
            assert (await client.inertia("/", version="a")).status == 200
            current["value"] = "b"
            assert (await client.inertia("/", version="a")).status == 409

    async def test_middleware_version_override(self) -> None:
        app = App(kida_env=Environment(loader=DictLoader({"app.html": ROOT})))
        app.add_middleware(InertiaMiddleware(version="pinned"))

        @app.route("/")
        def home():
            return Page("Home")

        async with TestClient(app) as client:
            response = await client.inertia("/", version="1")

        assert response.status == 409


class TestVary:
    async def test_vary_on_json(self) -> None:
        app = _app()

        @app.route("/")
        def home():
            return Page("Home")

        async with TestClient(app) as client:
            response = await client.inertia("/")

        assert response.header("Vary") == "Accept, X-Inertia"

    async def test_vary_on_html(self) -> None:
        app = _app()

        @app.route("/")
        def home():
            return Page("Home")

        async with TestClient(app) as client:
            response = await client.get("/")

        assert response.header("Vary") == "X-Inertia"


class TestFlashSharing:
    async def test_flash_reaches_next_page_once(self) -> None:
        app = _app()

        @app.route("/users", methods=["POST"])
        def create():
            flash("success", "User created")
            return Redirect("/users")

        @app.route("/users")
        def index():
            return Page("Users/Index", {"users": []})

        async with TestClient(app) as client:
            created = await client.inertia("/users", method="POST")
            assert created.status == 302
            after = assert_inertia_page(await client.inertia("/users"))
            again = assert_inertia_page(await client.inertia("/users"))

        assert after["props"]["flash"] == {"success": "User created"}
        assert again["props"]["flash"] == {}

    async def test_flash_on_full_page_load(self) -> None:
        app = _app()

        @app.route("/go", methods=["POST"])
        def go():
            flash("notice", "Hello")
            return Redirect("/")

        @app.route("/")
        def home():
            return Page("Home")

        async with TestClient(app) as client:
            await client.post("/go")
            response = await client.get("/")

        assert "Hello" in response.text

    async def test_shared_flash_survives_partial_reload(self) -> None:
        app = _app()

        @app.route("/")
        def home():
            return Page("Home", {"a": 1, "b": 2})

        async with TestClient(app) as client:
            response = await client.inertia("/", component="Home", only=["a"])

        page = assert_inertia_page(response)
        assert page["props"] == {"flash": {}, "errors": {}, "a": 1}


class TestErrorSharing:
    async def test_errors_default_to_empty(self) -> None:
        app = _app(sessions=False)

        @app.route("/")
        def home():
            return Page("Home")

        async with TestClient(app) as client:
            page = assert_inertia_page(await client.inertia("/"))

        assert page["props"] == {"errors": {}}

    async def test_validation_errors_round_trip(self) -> None:
        app = _app()

        @app.route("/signup")
        def form():
            return Page("Auth/Signup")

        @app.route("/signup", methods=["POST"])
        def submit(request: Request):
            return redirect_back_with_errors(request, {"email": ["Required"]})

        async with TestClient(app) as client:
            submitted = await client.inertia(
                "/signup", method="POST", headers={"Referer": "/signup"}
            )
            assert submitted.status == 303
            assert submitted.header("Location") == "/signup"
            assert submitted.header("X-Inertia-Location") == "/signup"

            page = assert_inertia_page(await client.inertia("/signup"))
            assert page["props"]["errors"] == {"email": "Required"}

            page = assert_inertia_page(await client.inertia("/signup"))
            assert page["props"]["errors"] == {}

    async def test_named_error_bag(self) -> None:
        app = _app()

        @app.route("/login")
        def form():
            return Page("Auth/Login")

        @app.route("/login", methods=["POST"])
        def submit(request: Request):
            return redirect_back_with_errors(request, {"password": "Wrong"})

        bag = {"X-Inertia-Error-Bag": "login", "Referer": "/login"}
        async with TestClient(app) as client:
            await client.inertia("/login", method="POST", headers=bag)
            page = assert_inertia_page(await client.inertia("/login", headers=bag))

        assert page["props"]["errors"] == {"login": {"password": "Wrong"}}

    async def test_middleware_shares_before_handler(self) -> None:
        app = _app()

        async def auth(request, next):
            share("auth", {"user": "alice"})
            return await next(request)

        app.add_middleware(auth)

        @app.route("/")
        def home():
            return Page("Home")

        async with TestClient(app) as client:
            page = assert_inertia_page(await client.inertia("/"))

        assert page["props"]["auth"] == {"user": "alice"}


class TestEncodedPaths:
    async def test_reload_location_keeps_encoding(self) -> None:
        app = _app("2")

        @app.route("/files/{name}")
        def show(name: str):
            return Page("Files/Show", {"name": name})

        async with TestClient(app) as client:
            response = await client.inertia("/files/a%3Fb?x=1", version="1")

        assert_location(response, "/files/a%3Fb?x=1")

    async def test_non_ascii_path_gets_a_409(self) -> None:
        app = _app("2")

        @app.route("/{city}")
        def city(city: str):
            return Page("City")

        scope = {
            "type": "http",
            "method": "GET",
            "path": "/東京",
            "raw_path": b"/%E6%9D%B1%E4%BA%AC",
            "query_string": b"",
            "headers": [(b"x-inertia", b"true"), (b"x-inertia-version", b"1")],
        }
        sent: list[dict] = []

        async def receive():
            return {"type": "http.request", "body": b"", "more_body": False}

        async def send(message):
            sent.append(message)

        await app(scope, receive, send)

        assert sent[0]["status"] == 409
        assert (b"x-inertia-location", b"/%E6%9D%B1%E4%BA%AC") in sent[0]["headers"]


class TestServerErrors:
    def _failing_app(self, *, debug: bool = False, sessions: bool = True) -> App:
        app = App(
            AppConfig(debug=debug),
            kida_env=Environment(loader=DictLoader({"app.html": ROOT})),
        )
        if sessions:
            app.add_middleware(SessionMiddleware(SessionConfig(secret_key="test-secret")))
        app.add_middleware(InertiaMiddleware())

        @app.route("/")
        def home():
            return Page("Home")

        @app.route("/reports")
        def reports():
            raise RuntimeError("db down")

        return app

    async def test_protocol_request_goes_back_with_flash(self) -> None:
        app = self._failing_app()

        async with TestClient(app) as client:
            response = await client.inertia("/reports", headers={"Referer": "/"})
            assert response.status == 303
            assert response.header("X-Inertia-Location") == "/"

            page = assert_inertia_page(await client.inertia("/"))

        assert page["props"]["flash"] == {"error": SERVER_ERROR_MESSAGE}

    async def test_debug_mode_shows_error_page(self) -> None:
        app = self._failing_app(debug=True)

        async with TestClient(app) as client:
            response = await client.inertia("/reports")

        assert response.status == 500
        assert "db down" in response.text

    async def test_plain_request_is_a_500(self) -> None:
        app = self._failing_app()

        async with TestClient(app) as client:
            response = await client.get("/reports")

        assert response.status == 500

    async def test_without_sessions_is_a_500(self) -> None:
        app = self._failing_app(sessions=False)

        async with TestClient(app) as client:
            response = await client.inertia("/reports")

        assert response.status == 500

    async def test_http_errors_pass_through(self) -> None:
        app = self._failing_app()

        async with TestClient(app) as client:
            response = await client.inertia("/missing")

        assert response.status == 404


class TestValidationError:
    async def test_raised_errors_go_back_to_the_form(self) -> None:
        app = _app()

        @app.route("/signup")
        def form():
            return Page("Auth/Signup")

        @app.route("/signup", methods=["POST"])
        def submit():
            raise ValidationError({"email": ["Required"]})

        async with TestClient(app) as client:
            submitted = await client.inertia(
                "/signup", method="POST", headers={"Referer": "/signup"}
            )
            page = assert_inertia_page(await client.inertia("/signup"))

        assert submitted.status == 303
        assert submitted.header("Location") == "/signup"
        assert page["props"]["errors"] == {"email": "Required"}

    async def test_named_bag(self) -> None:
        app = _app()

        @app.route("/login")
        def form():
            return Page("Auth/Login")

        @app.route("/login", methods=["POST"])
        def submit():
            raise ValidationError({"password": "Wrong"}, bag="login")

        async with TestClient(app) as client:
            await client.inertia("/login", method="POST", headers={"Referer": "/login"})
            page = assert_inertia_page(
                await client.inertia("/login", headers={"X-Inertia-Error-Bag": "login"})
            )

        assert page["props"]["errors"] == {"login": {"password": "Wrong"}}


class TestShareOnce:
    async def test_skipped_when_client_holds_it(self) -> None:
        app = _app()

        async def permissions(request, next):
            share_once("permissions", lambda: ["edit"])
            return await next(request)

        app.add_middleware(permissions)

        @app.route("/")
        def home():
            return Page("Home")

        async with TestClient(app) as client:
            first = assert_inertia_page(await client.inertia("/"))
            second = assert_inertia_page(
                await client.inertia("/", headers={"X-Inertia-Except-Once-Props": "permissions"})
            )

        assert first["props"]["permissions"] == ["edit"]
        assert first["onceProps"] == {"permissions": {"prop": "permissions", "expiresAt": None}}
        assert "permissions" not in second["props"]
