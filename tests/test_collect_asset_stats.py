import asyncio
import io
import json

from collateral_reader.app.application.services.collectors.collect_asset_stats import (
    collect_asset_stats,
)
from collateral_reader.app.application.services.collectors.collector_chain import CollectorChain
from collateral_reader.app.domain.entities import Asset, AssetStats
from collateral_reader.app.domain.errors import ProviderError
from collateral_reader.app.infrastructure.adapters.sinks.json_lines_sink import (
    JsonLinesAssetStatsSink,
)

from .test_collector_chain import StubProvider

DOT = Asset(address="2", chain="interlay", symbol="DOT", name="DOT")
USDC = Asset(address="0x" + "a0" * 20, chain="1", symbol="USDC", name="USD Coin", decimals=6)


class RecordingSink:
    def __init__(self, fail_on=()):
        self.records = []
        self._fail_on = set(fail_on)

    async def submit(self, *, family, stats):
        if stats.asset in self._fail_on:
            raise RuntimeError("ledger unavailable")
        self.records.append((family, stats))


class TestCollectAssetStats:
    def test_collects_every_family_in_order(self):
        native = CollectorChain(
            family="native",
            providers=[StubProvider("interlay", assets=[DOT], locked=10, issued=5, minted="IBTC")],
        )
        multichain = CollectorChain(
            family="multichain",
            providers=[StubProvider("multichain", assets=[USDC], locked=100, issued=50, minted="USDC")],
        )
        sink = RecordingSink()

        collected = asyncio.run(collect_asset_stats(collectors=[native, multichain], sink=sink))

        assert collected == [
            AssetStats(asset="DOT", locked=10, issued=5, minted_asset=b"IBTC"),
            AssetStats(asset="USDC", locked=100, issued=50, minted_asset=b"USDC"),
        ]
        assert [family for family, _ in sink.records] == ["native", "multichain"]

    def test_failing_providers_yield_defaults(self):
        chain = CollectorChain(
            family="native",
            providers=[
                StubProvider(
                    "interlay",
                    assets=[DOT],
                    locked=ProviderError("down"),
                    issued=ProviderError("down"),
                    minted=ProviderError("down"),
                )
            ],
        )

        collected = asyncio.run(collect_asset_stats(collectors=[chain], sink=RecordingSink()))

        assert collected == [AssetStats(asset="DOT", locked=0, issued=0, minted_asset=b"")]

    def test_sink_failure_does_not_stop_the_run(self):
        chain = CollectorChain(
            family="multichain",
            providers=[StubProvider("multichain", assets=[DOT, USDC], locked=1, issued=1, minted="X")],
        )
        sink = RecordingSink(fail_on={"DOT"})

        collected = asyncio.run(collect_asset_stats(collectors=[chain], sink=sink))

        assert len(collected) == 2
        assert [stats.asset for _, stats in sink.records] == ["USDC"]


class TestJsonLinesSink:
    def test_writes_one_line_per_record(self):
        stream = io.StringIO()
        sink = JsonLinesAssetStatsSink(stream)

        asyncio.run(
            sink.submit(
                family="native",
                stats=AssetStats(asset="DOT", locked=10, issued=5, minted_asset=b"IBTC"),
            )
        )

        assert json.loads(stream.getvalue()) == {
            "family": "native",
            "asset": "DOT",
            "locked": 10,
            "issued": 5,
            "minted_asset": "IBTC",
        }
