"""Tests for the lookup pipeline and the session state machine."""

import threading

import httpx
import pytest

from ngr_lookup.exceptions import ConnectionFailed, Offline, PostcodeNotFound
from ngr_lookup.lookup import LookupSession, LookupState, SessionSnapshot, lookup_postcode
from ngr_lookup.models import CALCULATION_ERROR, PostcodeLookup
from ngr_lookup.resolver import PostcodeResolver

# ── lookup_postcode ──────────────────────────────────────────────


class TestLookupPostcode:
    def test_success(self, resolver):
        result = lookup_postcode("SW1A 1AA", resolver)
        assert isinstance(result, PostcodeLookup)
        assert result.postcode == "SW1A 1AA"
        assert result.ngr_formatted == "TQ 29090 79645"
        assert result.eastings == 529090
        assert result.northings == 179645
        assert result.converted is True

    def test_service_latlon_passed_through(self, resolver):
        result = lookup_postcode("SW1A 1AA", resolver)
        assert result.latitude == 51.501009
        assert result.longitude == -0.141588

    def test_geo_latlon_from_grid_not_service(self, resolver, service):
        # Skew the service lat/lon; the converted values must not follow it
        service.records["SW1A1AA"] = dict(service.records["SW1A1AA"], latitude=0.0, longitude=0.0)
        result = lookup_postcode("SW1A 1AA", resolver)
        assert result.geo_lat == 51.501009
        assert result.geo_lon == -0.141588
        assert result.latitude == 0.0

    def test_missing_grid_coordinates_degrade(self, resolver):
        result = lookup_postcode("JE2 4WD", resolver)
        assert result.ngr_formatted == CALCULATION_ERROR
        assert result.geo_lat is None
        assert result.geo_lon is None
        assert result.latitude == 49.188327
        assert result.converted is False

    def test_out_of_range_grid_keeps_eastings(self, resolver, service):
        service.records["XX11XX"] = {
            "postcode": "XX1 1XX",
            "eastings": 9999999,
            "northings": 100,
            "latitude": 50.0,
            "longitude": -1.0,
        }
        result = lookup_postcode("XX1 1XX", resolver)
        assert result.ngr_formatted == CALCULATION_ERROR
        assert result.eastings == 9999999
        assert result.northings == 100

    def test_string_grid_values(self, resolver, service):
        service.records["SW1A1AA"] = dict(service.records["SW1A1AA"], eastings="529090", northings="179645")
        assert lookup_postcode("SW1A 1AA", resolver).ngr_formatted == "TQ 29090 79645"

    def test_lookup_failures_propagate(self, resolver, service):
        with pytest.raises(PostcodeNotFound):
            lookup_postcode("ZZ99 9ZZ", resolver)
        service.fail_with(httpx.ConnectError)
        with pytest.raises(ConnectionFailed):
            lookup_postcode("SW1A 1AA", resolver)

    def test_to_dict_keys(self, resolver):
        d = lookup_postcode("SW1A 1AA", resolver).to_dict()
        assert set(d) == {
            "postcode",
            "eastings",
            "northings",
            "ngrFormatted",
            "geoLat",
            "geoLon",
            "latitude",
            "longitude",
        }


# ── LookupSession ────────────────────────────────────────────────


class TestLookupSession:
    def test_starts_idle(self, resolver):
        snap = LookupSession(resolver).snapshot
        assert snap == SessionSnapshot()
        assert snap.state is LookupState.IDLE
        assert snap.result is None

    def test_success(self, resolver):
        session = LookupSession(resolver)
        snap = session.submit("SW1A 1AA")
        assert snap.state is LookupState.SUCCESS
        assert snap.query == "SW1A 1AA"
        assert snap.result.ngr_formatted == "TQ 29090 79645"
        assert snap.message is None

    def test_loading_entered_and_left_once(self, resolver):
        seen = []
        session = LookupSession(resolver, on_change=seen.append)
        session.submit("SW1A 1AA")
        assert [s.state for s in seen] == [LookupState.LOADING, LookupState.SUCCESS]
        assert seen[0].loading is True
        assert seen[0].result is None

    def test_conversion_failure_is_still_success(self, resolver):
        seen = []
        session = LookupSession(resolver, on_change=seen.append)
        snap = session.submit("JE2 4WD")
        assert snap.state is LookupState.SUCCESS
        assert snap.result.ngr_formatted == CALCULATION_ERROR
        assert [s.state for s in seen] == [LookupState.LOADING, LookupState.SUCCESS]

    def test_not_found(self, resolver):
        snap = LookupSession(resolver).submit("ZZ99 9ZZ")
        assert snap.state is LookupState.NOT_FOUND
        assert snap.message == "Postcode not found"
        assert snap.result is None

    def test_connection_error_clears_prior_result(self, resolver, service):
        session = LookupSession(resolver)
        session.submit("SW1A 1AA")
        service.fail_with(httpx.ConnectError)
        snap = session.submit("EH1 1RE")
        assert snap.state is LookupState.CONNECTION_ERROR
        assert snap.message == "Connection error"
        assert snap.result is None

    def test_offline(self, offline_resolver, service):
        service.fail_with(httpx.ConnectError)
        snap = LookupSession(offline_resolver).submit("SW1A 1AA")
        assert snap.state is LookupState.OFFLINE
        assert "offline" in snap.message

    def test_new_submission_clears_error(self, resolver):
        session = LookupSession(resolver)
        session.submit("ZZ99 9ZZ")
        snap = session.submit("EH1 1RE")
        assert snap.state is LookupState.SUCCESS
        assert snap.message is None

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_submission_ignored(self, resolver, service, blank):
        seen = []
        session = LookupSession(resolver, on_change=seen.append)
        before = session.submit("SW1A 1AA")
        seen.clear()
        assert session.submit(blank) == before
        assert seen == []
        assert len(service.requests) == 1

    def test_reset(self, resolver):
        session = LookupSession(resolver)
        session.submit("SW1A 1AA")
        session.reset()
        assert session.snapshot.state is LookupState.IDLE

    def test_stale_settle_dropped(self, resolver):
        session = LookupSession(resolver)
        first = session._begin("SW1A 1AA")
        second = session._begin("EH1 1RE")
        session._settle(first, LookupState.NOT_FOUND, message="Postcode not found")
        assert session.snapshot.state is LookupState.LOADING
        session._settle(second, LookupState.NOT_FOUND, message="Postcode not found")
        assert session.snapshot.state is LookupState.NOT_FOUND
        assert session.snapshot.query == "EH1 1RE"

    def test_unexpected_error_leaves_loading(self):
        def handler(request):
            raise RuntimeError("bug")

        http = httpx.Client(transport=httpx.MockTransport(handler))
        session = LookupSession(PostcodeResolver(client=http))
        with pytest.raises(RuntimeError):
            session.submit("SW1A 1AA")
        assert session.snapshot.state is LookupState.CONNECTION_ERROR

    def test_default_resolver_can_go_offline(self, no_network):
        snap = LookupSession().submit("SW1A 1AA")
        assert snap.state is LookupState.OFFLINE
        assert snap.message == Offline.message


class TestLookupSessionConcurrency:
    def test_latest_submission_wins(self, service):
        """A slow first response must not overwrite a faster second one."""
        entered = threading.Event()
        release = threading.Event()

        def handler(request):
            if request.url.path.endswith("ZZ999ZZ"):
                entered.set()
                release.wait(timeout=5)
            return service(request)

        http = httpx.Client(transport=httpx.MockTransport(handler))
        session = LookupSession(PostcodeResolver(client=http))

        slow = threading.Thread(target=session.submit, args=("ZZ99 9ZZ",))
        slow.start()
        assert entered.wait(timeout=5)

        fast = session.submit("SW1A 1AA")
        assert fast.state is LookupState.SUCCESS

        release.set()
        slow.join(timeout=5)
        assert not slow.is_alive()

        snap = session.snapshot
        assert snap.state is LookupState.SUCCESS
        assert snap.result.postcode == "SW1A 1AA"
        http.close()
