import unittest

import aiohttp

from fakes import FakeContext, FakeResponse, FakeSession, RecordingClient
from rankbot.cogs.ranks import handle_rlrank, handle_valrank, require_choice, require_option
from rankbot.lib.extension_context import InvocationState
from rankbot.stats_tracker import (
    DecodeError, NetworkError, OptionMissing, Platform, PlayerNotFound, Region, RocketLeagueQuery, StatsClient,
    ValorantQuery
)

ROCKET_LEAGUE_RANKS = {
    "displayName": "Foo",
    "rankings": [{
        "playlist": "ranked_duos",
        "rankName": "Diamond",
        "divisionName": "II",
        "mmr": 900,
        "deltaUp": 5,
        "deltaDown": 5,
    }],
}

VALORANT_RANK = {
    "name": "Bar",
    "tag": "EUW",
    "currentTierPatched": "Gold 2",
    "elo": 1234,
    "mmrChangeLastGame": 12,
}


class TestOptionValidation(unittest.TestCase):

    def test_require_option_strips(self):
        self.assertEqual(require_option("username", "  Foo "), "Foo")

    def test_require_option_missing(self):
        for value in (None, "", "   "):
            with self.subTest(value=value):
                with self.assertRaises(OptionMissing) as cm:
                    require_option("username", value)
                self.assertEqual(cm.exception.option, "username")

    def test_require_choice(self):
        self.assertIs(require_choice("platform", "xbl", Platform), Platform.XBOX)
        self.assertIs(require_choice("region", "kr", Region), Region.KR)

    def test_require_choice_rejects_unknown_value(self):
        with self.assertRaises(OptionMissing):
            require_choice("platform", "switch", Platform)


class TestRlRank(unittest.IsolatedAsyncioTestCase):

    async def test_success(self):
        actx = FakeContext()
        client = RecordingClient(actx, result=ROCKET_LEAGUE_RANKS)

        output = await handle_rlrank(actx, client, "Foo", "steam")

        self.assertEqual(actx.events, ["defer", "fetch", "edit"])
        self.assertEqual(client.queries, [RocketLeagueQuery(platform=Platform.STEAM, username="Foo")])
        self.assertEqual(actx.outputs, [output])
        self.assertEqual(output.title, "Ranks for Foo")
        self.assertEqual(output.description, "Ranked Duos: Diamond II (900)")
        self.assertIs(actx.invocation_state, InvocationState.COMPLETED)

    async def test_fetch_error_becomes_failure_output(self):
        for error in (NetworkError("down"), DecodeError("bad"), PlayerNotFound("nobody")):
            with self.subTest(error=type(error).__name__):
                actx = FakeContext()
                output = await handle_rlrank(actx, RecordingClient(actx, error=error), "Foo", "epic")
                self.assertEqual(actx.events, ["defer", "fetch", "edit"])
                self.assertEqual(output.title, "Failed to get rank for Foo")
                self.assertIsNone(output.description)
                self.assertIsNone(output.colour)

    async def test_missing_option_skips_fetch(self):
        actx = FakeContext()
        client = RecordingClient(actx, result=ROCKET_LEAGUE_RANKS)

        output = await handle_rlrank(actx, client, "Foo", None)

        self.assertEqual(actx.events, ["defer", "edit"])
        self.assertEqual(client.queries, [])
        self.assertEqual(output.title, "Failed to get rank for Foo")

    async def test_unexpected_error_still_edits(self):
        actx = FakeContext()
        client = RecordingClient(actx, result={"displayName": "Foo"})

        output = await handle_rlrank(actx, client, "Foo", "psn")

        self.assertEqual(len(actx.outputs), 1)
        self.assertEqual(output.title, "Failed to get rank for Foo")

    async def test_network_failure_through_real_client(self):
        actx = FakeContext()
        session = FakeSession(error=aiohttp.ClientConnectionError("unreachable"))
        client = StatsClient(session, "https://rl.example", "https://val.example")

        output = await handle_rlrank(actx, client, "Foo", "steam")

        self.assertEqual(output.title, "Failed to get rank for Foo")
        self.assertEqual(actx.events, ["defer", "edit"])


class TestValRank(unittest.IsolatedAsyncioTestCase):

    async def test_success_colour_from_tier(self):
        actx = FakeContext()
        client = RecordingClient(actx, result=VALORANT_RANK)

        output = await handle_valrank(actx, client, "Bar", "EUW", "eu")

        self.assertEqual(actx.events, ["defer", "fetch", "edit"])
        self.assertEqual(client.queries, [ValorantQuery(region=Region.EU, username="Bar", tag="EUW")])
        self.assertEqual(output.title, "Rank for Bar#EUW")
        self.assertEqual(output.description, "Rank: Gold 2\nELO: 1234\nMMR Last Game: 12")
        self.assertEqual(output.colour, 0xdd9623)

    async def test_unknown_player_from_api(self):
        actx = FakeContext()
        session = FakeSession(FakeResponse(payload={"data": {"name": "", "tag": "", "current_data": {}}}))
        client = StatsClient(session, "https://rl.example", "https://val.example")

        output = await handle_valrank(actx, client, "Ghost", "000", "na")

        self.assertEqual(session.calls[0].url, "https://val.example/na/Ghost/000")
        self.assertEqual(output.title, "Failed to get ranks for Ghost#000")
        self.assertEqual(actx.outputs, [output])

    async def test_missing_tag(self):
        actx = FakeContext()
        client = RecordingClient(actx, result=VALORANT_RANK)

        output = await handle_valrank(actx, client, "Bar", "", "eu")

        self.assertEqual(client.queries, [])
        self.assertEqual(output.title, "Failed to get ranks for Bar#?")

    async def test_network_failure(self):
        actx = FakeContext()
        output = await handle_valrank(actx, RecordingClient(actx, error=NetworkError("down")), "Bar", "EUW", "ap")
        self.assertEqual(output.title, "Failed to get ranks for Bar#EUW")
        self.assertEqual(len(actx.outputs), 1)


if __name__ == '__main__':
    unittest.main()
