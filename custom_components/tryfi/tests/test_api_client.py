"""
Tests for TryFiApi: lazy login, pet list assembly and the location cache
fallback used when a location fetch fails.
"""

from __future__ import annotations

import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from custom_components.tryfi.api import TryFiApi
from custom_components.tryfi.api.errors import (
    MalformedResponseError,
    RemoteError,
    RequestTimeoutError,
    TransientRemoteError,
)
from custom_components.tryfi.models import NEUTRAL_LOCATION, PetLocation, Session

from .test_common import HOME, OUTSIDE, make_raw_pet
from .test_requests import FakeResponse

CLIENT = "custom_components.tryfi.api.client"
FETCH_LOCATION = f"{CLIENT}.location.fetch_pet_location"


def _make_api() -> TryFiApi:
    http = MagicMock()
    http.closed = False
    http.close = AsyncMock()
    return TryFiApi("user@example.com", "secret", http=http)


class TestFetchLocation(unittest.IsolatedAsyncioTestCase):

    async def test_success_updates_cache(self):
        api = _make_api()

        with patch(FETCH_LOCATION, new=AsyncMock(return_value=HOME)):
            result = await api.fetch_location("pet-1")

        self.assertEqual(result, HOME)
        self.assertEqual(api.locations.get("pet-1"), HOME)

    async def test_failure_after_success_returns_cached_location(self):
        api = _make_api()

        with patch(FETCH_LOCATION, new=AsyncMock(side_effect=[HOME, RemoteError("boom")])):
            await api.fetch_location("pet-1")
            result = await api.fetch_location("pet-1")

        self.assertEqual(result, HOME)
        self.assertNotEqual(result, NEUTRAL_LOCATION)

    async def test_failure_without_history_returns_neutral_location(self):
        api = _make_api()

        with patch(FETCH_LOCATION, new=AsyncMock(side_effect=RemoteError("boom"))):
            result = await api.fetch_location("pet-1")

        self.assertEqual(result, PetLocation(latitude=0.0, longitude=0.0))
        self.assertIsNone(result.place_name)
        self.assertIsNone(result.area_name)
        self.assertNotIn("pet-1", api.locations)

    async def test_failure_does_not_overwrite_cache(self):
        api = _make_api()
        api.locations.store("pet-1", OUTSIDE)

        with patch(FETCH_LOCATION, new=AsyncMock(side_effect=MalformedResponseError("no activity"))):
            await api.fetch_location("pet-1")

        self.assertEqual(api.locations.get("pet-1"), OUTSIDE)

    async def test_timeout_and_busy_server_log_at_debug(self):
        for error in (RequestTimeoutError("slow"), TransientRemoteError("busy", status=503)):
            with self.subTest(error=type(error).__name__):
                api = _make_api()
                with patch(FETCH_LOCATION, new=AsyncMock(side_effect=error)):
                    with self.assertLogs(CLIENT, level="DEBUG") as logs:
                        await api.fetch_location("pet-1")
                self.assertTrue(all(record.levelname == "DEBUG" for record in logs.records))

    async def test_other_failures_log_warning(self):
        api = _make_api()

        with patch(FETCH_LOCATION, new=AsyncMock(side_effect=MalformedResponseError("no activity"))):
            with self.assertLogs(CLIENT, level="WARNING"):
                await api.fetch_location("pet-1")

    async def test_badly_encoded_error_page_returns_cached_location(self):
        api = _make_api()
        yard = PetLocation(latitude=1.0, longitude=2.0, place_name="Yard")
        api.locations.store("pet-1", yard)
        api._http.request = MagicMock(return_value=FakeResponse(
            status=500, content_type="text/html", text=b"<html>\xff\xfe broken</html>"
        ))

        with self.assertLogs(CLIENT, level="WARNING"):
            result = await api.fetch_location("pet-1")

        self.assertEqual(result, yard)
        self.assertEqual(api.locations.get("pet-1"), yard)

    async def test_forget_pet_drops_cache_entry(self):
        api = _make_api()
        api.locations.store("pet-1", HOME)

        api.forget_pet("pet-1")

        self.assertNotIn("pet-1", api.locations)


class TestListDevices(unittest.IsolatedAsyncioTestCase):

    async def test_logs_in_lazily_once(self):
        api = _make_api()
        session = Session(user_id="u1", session_id="s1")

        with patch(f"{CLIENT}.auth.login", new=AsyncMock(return_value=session)) as mock_login, \
                patch(f"{CLIENT}.pets.fetch_raw_pets", new=AsyncMock(return_value=[make_raw_pet("a")])), \
                patch(FETCH_LOCATION, new=AsyncMock(return_value=HOME)):
            await api.list_devices()
            await api.list_devices()

        mock_login.assert_awaited_once()
        self.assertEqual(api.session, session)

    async def test_returns_pets_with_locations(self):
        api = _make_api()
        locations = {"a": HOME, "b": OUTSIDE}

        async def fake_location(http, pet_id):
            return locations[pet_id]

        with patch(f"{CLIENT}.auth.login", new=AsyncMock(return_value=Session("u1", "s1"))), \
                patch(f"{CLIENT}.pets.fetch_raw_pets",
                      new=AsyncMock(return_value=[make_raw_pet("a"), make_raw_pet("b")])), \
                patch(FETCH_LOCATION, new=fake_location):
            result = await api.list_devices()

        self.assertEqual([pet.pet_id for pet in result], ["a", "b"])
        self.assertEqual(result[0].location, HOME)
        self.assertEqual(result[1].location, OUTSIDE)

    async def test_list_failure_propagates(self):
        api = _make_api()

        with patch(f"{CLIENT}.auth.login", new=AsyncMock(return_value=Session("u1", "s1"))), \
                patch(f"{CLIENT}.pets.fetch_raw_pets",
                      new=AsyncMock(side_effect=TransientRemoteError("busy", status=503))):
            with self.assertRaises(TransientRemoteError):
                await api.list_devices()


class TestSessionAndWrites(unittest.IsolatedAsyncioTestCase):

    async def test_login_replaces_session_and_clears_cookies(self):
        api = _make_api()
        first, second = Session("u1", "s1"), Session("u1", "s2")

        with patch(f"{CLIENT}.auth.login", new=AsyncMock(side_effect=[first, second])):
            await api.login()
            await api.login()

        self.assertEqual(api.session, second)
        self.assertEqual(api._http.cookie_jar.clear.call_count, 2)

    async def test_set_light_sends_module_id(self):
        api = _make_api()

        with patch(f"{CLIENT}.auth.login", new=AsyncMock(return_value=Session("u1", "s1"))), \
                patch(f"{CLIENT}.commands.set_led", new=AsyncMock()) as mock_led:
            await api.set_light("module-a", True)

        self.assertEqual(mock_led.call_args.args[1:], ("module-a", True))

    async def test_set_lost_mode_error_propagates(self):
        api = _make_api()

        with patch(f"{CLIENT}.auth.login", new=AsyncMock(return_value=Session("u1", "s1"))), \
                patch(f"{CLIENT}.commands.set_mode", new=AsyncMock(side_effect=RemoteError("denied"))):
            with self.assertRaises(RemoteError):
                await api.set_lost_mode("module-a", True)

    async def test_close_does_not_close_borrowed_session(self):
        api = _make_api()
        http = api._http

        await api.close()

        http.close.assert_not_awaited()
