#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging

from tabview.pivot import (
    AppState,
    ColumnMetadata,
    ColumnType,
    HTTPQueryEngine,
    PivotRequester,
    Schema,
    StateRef,
    ViewParams,
    ViewState,
)
from tabview.pivot.models import set_view_params, set_viewport


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Quickstart for PivotRequester against a query service")
    p.add_argument("url", nargs="?", default="http://localhost:8080")
    p.add_argument("table", nargs="?", default="sales")
    p.add_argument("pivots", nargs="*", default=["region"])
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO)

    schema = Schema(
        columns=("region", "city", "sales"),
        column_metadata={
            "region": ColumnMetadata(type=ColumnType.TEXT, display_name="Region"),
            "city": ColumnMetadata(type=ColumnType.TEXT, display_name="City"),
            "sales": ColumnMetadata(type=ColumnType.REAL, display_name="Sales"),
        },
    )

    async with HTTPQueryEngine(args.url) as engine:
        store = StateRef(
            AppState(
                connection=engine,
                base_query=args.table,
                base_schema=schema,
                view_state=ViewState(view_params=ViewParams(), viewport_top=0, viewport_bottom=40),
            )
        )

        def on_change(ref: StateRef) -> None:
            vs = ref.get_value().view_state
            if vs.data_view is not None:
                print(
                    f"v{ref.version} rows={vs.data_view.total_row_count} "
                    f"window=[{vs.data_view.offset}, {vs.data_view.offset + vs.data_view.item_count}) "
                    f"viewport={vs.viewport} loading={vs.loading.value}"
                )

        store.on("change", on_change)
        store.on("error", lambda err: print(f"ERROR {type(err).__name__}: {err}"))

        requester = PivotRequester()
        requester.initialize(store)
        await requester.join()

        # Pivot, expand the first group, then scroll.
        store.update(lambda st: set_view_params(st, st.view_state.view_params.with_pivots(args.pivots)))
        await requester.join()

        first = store.get_value().view_state.data_view
        group = next((r for r in first.rows if r["_depth"] == 1), None) if first else None
        if group is not None:
            path = [group["_path0"]]
            store.update(lambda st: set_view_params(st, st.view_state.view_params.open_path(path)))
            await requester.join()

        store.update(lambda st: set_viewport(st, 300, 340))
        await requester.join()
        requester.close()


if __name__ == "__main__":
    asyncio.run(main())
