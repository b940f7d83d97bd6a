import unittest

from action1_mcp.api.models import PaginationConfig, PaginationStyle
from action1_mcp.api.paginate import Paginator, paginate

from fake_api import FakeApiTestCase, Reply


class TestCursorPagination(FakeApiTestCase):

    async def test_iterates_through_cursors(self):
        self.api.add(
            "GET", "/things",
            Reply(json={"items": [1, 2], "next_page": "abc"}),
            Reply(json={"items": [3], "next_page": None}),
        )
        got = []
        async for chunk in paginate(self.make_client(), "/things", {"limit": 2}):
            got.extend(chunk)

        self.assertEqual(got, [1, 2, 3])
        first, second = self.api.requests
        self.assertEqual(first.query, {"limit": ["2"]})
        self.assertEqual(second.query, {"limit": ["2"], "next_page": ["abc"]})

    async def test_falls_back_to_other_cursor_fields(self):
        self.api.add(
            "GET", "/things",
            Reply(json={"data": ["a"], "nextPage": "p2"}),
            Reply(json={"data": ["b"], "cursor": "p3"}),
            Reply(json={"data": ["c"]}),
        )
        batches = [b async for b in Paginator(self.make_client(), "/things")]
        self.assertEqual(batches, [["a"], ["b"], ["c"]])
        self.assertEqual(self.api.requests[2].query, {"next_page": ["p3"]})

    async def test_seeds_cursor_from_params(self):
        self.api.add("GET", "/things", Reply(json={"items": [9]}))
        items = await Paginator(self.make_client(), "/things", {"next_page": "start"}).collect()
        self.assertEqual(items, [9])
        self.assertEqual(self.api.requests[0].query, {"next_page": ["start"]})

    async def test_fetch_next_returns_none_after_end(self):
        self.api.add("GET", "/things", Reply(json=[1]))
        paginator = Paginator(self.make_client(), "/things")
        self.assertEqual(await paginator.fetch_next(), [1])
        self.assertIsNone(await paginator.fetch_next())
        self.assertTrue(paginator.done)
        self.assertEqual(len(self.api.requests), 1)

    async def test_independent_paginators_keep_their_own_cursor(self):
        self.api.add(
            "GET", "/things",
            Reply(json={"items": [1], "next_page": "x"}),
            Reply(json={"items": [2]}),
        )
        client = self.make_client()
        one = Paginator(client, "/things")
        two = Paginator(client, "/things", {"next_page": "seed"})
        await one.fetch_next()
        await two.fetch_next()
        self.assertEqual(one.cursor, "x")
        self.assertIsNone(two.cursor)

    async def test_collect_limit_stops_early(self):
        self.api.add(
            "GET", "/things",
            Reply(json={"items": [1, 2], "next_page": "p2"}),
            Reply(json={"items": [3, 4]}),
        )
        self.assertEqual(await Paginator(self.make_client(), "/things").collect(limit=1), [1])
        self.assertEqual(len(self.api.requests), 1)


class TestPagePagination(FakeApiTestCase):

    def setUp(self):
        self.spec = self.with_spec(pagination=PaginationConfig(style=PaginationStyle.PAGE))

    async def test_stops_when_batch_is_short(self):
        self.api.add(
            "GET", "/things",
            Reply(json={"items": [1, 2]}),
            Reply(json={"items": [3]}),
        )
        items = await Paginator(self.make_client(), "/things", {"per_page": 2}).collect()
        self.assertEqual(items, [1, 2, 3])
        self.assertEqual(
            [r.query for r in self.api.requests],
            [{"per_page": ["2"], "page": ["1"]}, {"per_page": ["2"], "page": ["2"]}],
        )

    async def test_stops_on_empty_batch(self):
        self.api.add(
            "GET", "/things",
            Reply(json=[1, 2]),
            Reply(json=[]),
        )
        batches = [b async for b in Paginator(self.make_client(), "/things", {"per_page": 2})]
        self.assertEqual(batches, [[1, 2]])
        self.assertEqual(len(self.api.requests), 2)

    async def test_defaults_and_custom_param_names(self):
        config = PaginationConfig(style=PaginationStyle.PAGE, page_param="p", per_page_param="size")
        self.api.add("GET", "/things", Reply(json={"items": []}))
        await Paginator(self.make_client(), "/things", {"p": 3}, pagination=config).collect()
        self.assertEqual(self.api.requests[0].query, {"p": ["3"], "size": ["50"]})


class TestLinkPagination(FakeApiTestCase):

    def setUp(self):
        self.spec = self.with_spec(pagination=PaginationConfig(style=PaginationStyle.LINK))

    async def test_follows_absolute_next_links(self):
        self.api.add("GET", "/things", Reply(json={"items": [1], "next": f"{self.base_url}/things-page-2"}))
        self.api.add("GET", "/things-page-2", Reply(json={"items": [2], "next": None}))

        items = await Paginator(self.make_client(), "/things", {"q": "x"}).collect()

        self.assertEqual(items, [1, 2])
        self.assertEqual([r.path for r in self.api.requests], ["/things", "/things-page-2"])
        self.assertEqual(self.api.requests[0].query, {"q": ["x"]})
        self.assertEqual(self.api.requests[1].query, {})

    async def test_configured_next_field(self):
        config = PaginationConfig(style=PaginationStyle.LINK, next_field="next_url")
        self.api.add("GET", "/things", Reply(json={"items": [1], "next_url": f"{self.base_url}/more"}))
        self.api.add("GET", "/more", Reply(json={"items": [2]}))
        items = await Paginator(self.make_client(), "/things", pagination=config).collect()
        self.assertEqual(items, [1, 2])


class TestNoPagination(FakeApiTestCase):

    def setUp(self):
        self.spec = self.with_spec(pagination=PaginationConfig(style=PaginationStyle.NONE))

    async def test_single_fetch(self):
        self.api.add("GET", "/things", Reply(json={"items": [1, 2], "next_page": "ignored"}))
        batches = [b async for b in paginate(self.make_client(), "/things")]
        self.assertEqual(batches, [[1, 2]])
        self.assertEqual(len(self.api.requests), 1)


if __name__ == '__main__':
    unittest.main()
