import asyncio
from datetime import date

import httpx

from conftest import ESPN, make_config

from fixture_feed.adapters.espn import Absent, Fetched, SourceFetcher, events_of, refs


def _run(api, coro_factory, **cfg):
    async def go():
        async with api.client() as client:
            return await coro_factory(SourceFetcher(client, make_config(**cfg)))

    return asyncio.run(go())


def test_scoreboard_success_passes_compact_date(api):
    api.add(ESPN + "/site/bra.1/scoreboard", {"events": []}, params={"dates": "20250615"})
    out = _run(api, lambda f: f.scoreboard("bra.1", date(2025, 6, 15)))
    assert isinstance(out, Fetched)
    assert out.payload == {"events": []}


def test_non_success_status_is_absent(api):
    api.add(ESPN + "/site/bra.1/scoreboard", {"message": "down"}, status=503)
    out = _run(api, lambda f: f.scoreboard("bra.1", date(2025, 6, 15)))
    assert isinstance(out, Absent)
    assert out.reason == "status:503"


def test_transport_failure_is_absent(api):
    api.add(ESPN + "/site/bra.1/scoreboard", error=httpx.ConnectError)
    out = _run(api, lambda f: f.scoreboard("bra.1", date(2025, 6, 15)))
    assert isinstance(out, Absent)
    assert out.reason == "transport:ConnectError"


def test_unparseable_body_is_absent(api):
    api.add(ESPN + "/site/bra.1/scoreboard", text="<html>oops</html>")
    out = _run(api, lambda f: f.scoreboard("bra.1", date(2025, 6, 15)))
    assert isinstance(out, Absent)
    assert out.reason.startswith("parse:")


def test_non_object_payload_is_absent(api):
    api.add(ESPN + "/site/bra.1/scoreboard", [1, 2, 3])
    out = _run(api, lambda f: f.scoreboard("bra.1", date(2025, 6, 15)))
    assert isinstance(out, Absent)


def test_team_events_date_range(api):
    api.add(
        ESPN + "/core/teams/205/events",
        {"items": [{"$ref": ESPN + "/core/events/1"}]},
        params={"startDate": "2025-06-15", "endDate": "2025-06-22"},
    )
    out = _run(api, lambda f: f.team_events(205, date(2025, 6, 15), date(2025, 6, 22)))
    assert refs(out.payload) == [ESPN + "/core/events/1"]


def test_transport_errors_retried_when_configured(api):
    calls = {"n": 0}

    def flaky(request):
        calls["n"] += 1
        if calls["n"] == 1:
            raise httpx.ReadTimeout("slow", request=request)
        return httpx.Response(200, json={"ok": True})

    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(flaky)) as client:
            fetcher = SourceFetcher(client, make_config(http={"attempts": 2}))
            return await fetcher.get_json(ESPN + "/anything")

    out = asyncio.run(go())
    assert isinstance(out, Fetched)
    assert calls["n"] == 2


def test_payload_helpers_tolerate_bad_shapes():
    assert refs({"items": [{"$ref": "a"}, {"nope": 1}, "x"]}) == ["a"]
    assert refs({}) == []
    assert events_of({"events": [{"id": 1}, None]}) == [{"id": 1}]
    assert events_of({"events": "x"}) == []
