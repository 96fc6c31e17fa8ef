"""End-to-end usage against FastAPI handlers, one app per scenario."""

from typing import Any

from fastapi import FastAPI, Request
from pydantic import BaseModel

import htest


class Res(BaseModel):
    q: str = ""
    i: int = 0


def test_client_full_example() -> None:
    app = FastAPI()

    @app.get("/test")
    async def handler(q: str = "") -> Res:
        return Res(i=5, q=q)

    r = (
        htest.new(app)
        .query("q", "v")
        .get("/test")
        .expect_code(200)
        .json(Res)
    )

    assert r.i == 5
    assert r.q == "v"


def test_path_with_query() -> None:
    app = FastAPI()

    @app.get("/test")
    async def handler() -> Res:
        return Res(i=5)

    res = htest.new(app).query("a", "2").query("b", "3").get("/test?a=1")

    assert res.request.request_uri == "/test?a=1&a=2&b=3"


def test_form() -> None:
    app = FastAPI()

    @app.post("/")
    async def handler(request: Request) -> Res:
        form = await request.form()
        return Res(q=str(form.get("q")))

    res = htest.new(app).form("q", "form-value").post("/").expect_code(200)

    assert res.json(Res).q == "form-value", res.body_string()


def test_form_last_write_wins() -> None:
    app = FastAPI()

    @app.post("/")
    async def handler(request: Request) -> dict[str, Any]:
        form = await request.form()
        return {"q": form.getlist("q")}

    res = htest.new(app).form("q", "v1").form("q", "v2").post("/").expect_code(200)

    assert res.request.body == b"q=v2"
    assert res.json() == {"q": ["v2"]}


def test_json() -> None:
    app = FastAPI()

    @app.post("/")
    async def handler(request: Request) -> Any:
        return await request.json()

    class Body(BaseModel):
        hello: int
        world: int

    r = (
        htest.new(app)
        .body_json({"hello": 1, "world": 2})
        .post("/")
        .expect_code(200)
        .json(Body)
    )

    assert r.hello == 1
    assert r.world == 2


def test_cookies_round_trip() -> None:
    app = FastAPI()

    @app.get("/whoami")
    async def whoami(request: Request) -> dict[str, str]:
        return {"user": request.cookies.get("user", "")}

    @app.post("/logout")
    async def logout() -> dict[str, bool]:
        return {"ok": True}

    assert htest.new(app).cookie("user", "alice").get("/whoami").json() == {"user": "alice"}
    assert htest.new(app).post("/logout").cookies() == []
