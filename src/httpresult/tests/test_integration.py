"""End-to-end tests: starlette endpoints returning results, httpx client reading them."""

from __future__ import annotations

import datetime as dt
from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from pydantic import BaseModel
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from httpresult import Error, HttpResult, ProblemDetails, Result
from httpresult.client import execute, get, post


class WeatherForecast(BaseModel):
    date: dt.date
    temperature_c: int
    summary: str | None = None


SUMMARIES = ["Freezing", "Bracing", "Chilly", "Cool", "Mild"]


def forecasts() -> list[WeatherForecast]:
    start = dt.date(2024, 1, 1)
    return [
        WeatherForecast(date=start + dt.timedelta(days=i), temperature_c=-5 + 6 * i, summary=SUMMARIES[i])
        for i in range(5)
    ]


# ─── Endpoints ───────────────────────────────────────────────────────


async def result_weather(request: Request) -> Response:
    return HttpResult[list[WeatherForecast]]().with_value(forecasts()).get_response()


async def result_error(request: Request) -> Response:
    return Result().with_error(Error().with_message("THIS IS ERROR").with_code("ERROR_CODE_123")).get_response()


async def unauthorized(request: Request) -> Response:
    return (
        HttpResult()
        .with_status_code(401)
        .with_http_response_header_append("WWW-Authenticate", "Bearer1", "Bearer2")
        .get_response()
    )


def check_token() -> HttpResult[str]:
    return HttpResult[str]().with_status_code(
        401, ProblemDetails(title="Unauthorized", detail="Token expired", type="https://tools.ietf.org/html/rfc7235#section-3.1"),
    )


async def cascade(request: Request) -> Response:
    result = HttpResult[list[WeatherForecast]]()
    if not result.success(check_token()):
        return result.get_response()
    return result.with_value(forecasts()).get_response()


async def custom_detail_error(request: Request) -> Response:
    error = Error(message="Quota exceeded", code="QUOTA", detail={"limit": 10, "window": "1m"})
    return HttpResult().with_error(error).with_status_code(429).get_response()


async def echo(request: Request) -> Response:
    body = await request.json()
    return HttpResult[WeatherForecast]().with_value(WeatherForecast.model_validate(body)).with_status_code(201).get_response()


async def plain_json(request: Request) -> Response:
    return Response('{"date": "2024-02-02", "temperature_c": 3}', media_type="application/json")


app = Starlette(routes=[
    Route("/resultweather", result_weather),
    Route("/resulterror", result_error),
    Route("/httpresulterror_unauthorized", unauthorized),
    Route("/httpresulterror_cascade", cascade),
    Route("/httpresulterror_custom_detail_error", custom_detail_error),
    Route("/echo", echo, methods=["POST"]),
    Route("/plain", plain_json),
])


@pytest_asyncio.fixture
async def client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as c:
        yield c


# ═════════════════════════════════════════════════════════════════════════════
# Scenarios
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_weather_envelope(client: httpx.AsyncClient) -> None:
    raw = await client.get("/resultweather")
    body = raw.json()
    assert set(body) == {"value", "hasValue", "errors", "isSuccess", "statusCode"}
    assert body["errors"] == [] and body["isSuccess"] is True

    result = await get(client, "/resultweather", value_type=list[WeatherForecast])
    assert result.is_success
    assert result.has_value
    assert result.status_code == 200
    assert result.value == forecasts()


@pytest.mark.asyncio
async def test_plain_result_error(client: httpx.AsyncClient) -> None:
    result = await get(client, "/resulterror", value_type=list[WeatherForecast])

    assert result.is_error
    assert result.error.code == "ERROR_CODE_123"
    assert result.error.message == "THIS IS ERROR"
    assert result.status_code == 200


@pytest.mark.asyncio
async def test_unauthorized_with_multi_value_header(client: httpx.AsyncClient) -> None:
    result = await get(client, "/httpresulterror_unauthorized")

    assert result.status_code == 401
    assert result.get_response_header("WWW-Authenticate") == ["Bearer1", "Bearer2"]
    assert result.http_error.status_code == 401
    assert result.error.message == "StatusCode: 401"


@pytest.mark.asyncio
async def test_cascaded_problem_details(client: httpx.AsyncClient) -> None:
    result = await get(client, "/httpresulterror_cascade", value_type=list[WeatherForecast])

    assert result.status_code == 401
    assert not result.has_value
    err = result.http_error
    assert err.status_code == 401
    assert err.code == "UNAUTHORIZED"
    assert err.problem_details.title == "Unauthorized"
    assert err.problem_details.detail == "Token expired"


@pytest.mark.asyncio
async def test_custom_detail_error(client: httpx.AsyncClient) -> None:
    result = await get(client, "/httpresulterror_custom_detail_error")

    assert result.status_code == 429
    assert result.error.code == "QUOTA"
    assert result.error.detail == {"limit": 10, "window": "1m"}


@pytest.mark.asyncio
async def test_value_round_trip(client: httpx.AsyncClient) -> None:
    sent = WeatherForecast(date=dt.date(2024, 3, 3), temperature_c=9, summary="Mild")
    result = await post(client, "/echo", value=sent, value_type=WeatherForecast)

    assert result.status_code == 201
    assert result.value == sent


@pytest.mark.asyncio
async def test_plain_body_from_server(client: httpx.AsyncClient) -> None:
    result = await execute(client, "GET", "/plain", value_type=WeatherForecast)
    assert result.value == WeatherForecast(date=dt.date(2024, 2, 2), temperature_c=3)


@pytest.mark.asyncio
async def test_client_side_cascade(client: httpx.AsyncClient) -> None:
    outer = HttpResult[list[WeatherForecast]]()

    assert outer.success(await get(client, "/resultweather", value_type=list[WeatherForecast]))
    assert len(outer.value) == 5
    assert not outer.success(await get(client, "/httpresulterror_unauthorized", value_type=list[WeatherForecast]))

    assert outer.status_code == 401
    assert outer.get_response_header("www-authenticate") == ["Bearer1", "Bearer2"]
    assert len(outer.transactions) == 2
