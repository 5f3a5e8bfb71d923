#!/usr/bin/env python3
"""X-Ray showcase: a traced competitor-selection pipeline, runs standalone.

Demonstrates:
  - Configuring a process-wide store with configure(store=...)
  - Recording LLM, search, filter and rank steps with inputs, outputs and reasoning
  - Candidate evaluations, filters and selection flags
  - Finishing a trace with a result, and failing one
  - Listing, inspecting and annotating persisted traces

Usage:
  python examples/showcase_xray.py
  xray --dir <printed directory> list
"""

import asyncio
from pathlib import Path
from tempfile import mkdtemp

from xray_core import LocalTraceStore, StepType, configure, trace

# ---------------------------------------------------------------------------
# Fake catalogue
# ---------------------------------------------------------------------------

PRODUCT = {"title": "Stainless Steel Water Bottle 32oz Insulated", "price": 29.99, "rating": 4.2}

CATALOGUE = [
    {"id": "B01", "title": "HydroFlask 32oz Wide Mouth", "price": 44.99, "rating": 4.5, "reviews": 8932},
    {"id": "B02", "title": "Yeti Rambler 26oz", "price": 34.99, "rating": 4.4, "reviews": 5621},
    {"id": "B03", "title": "Generic Water Bottle", "price": 8.99, "rating": 3.2, "reviews": 45},
    {"id": "B04", "title": "Bottle Cleaning Brush Set", "price": 12.99, "rating": 4.6, "reviews": 3421},
    {"id": "B05", "title": "Iron Flask 32oz", "price": 27.95, "rating": 4.6, "reviews": 12003},
]

MIN_RATING = 3.8
MIN_REVIEWS = 100
MAX_PRICE_RATIO = 2.0


def _evaluate(item: dict) -> list[dict]:
    price_limit = PRODUCT["price"] * MAX_PRICE_RATIO
    return [
        {
            "id": "rating",
            "label": "Minimum rating",
            "passed": item["rating"] >= MIN_RATING,
            "detail": f"{item['rating']} vs {MIN_RATING}",
            "value": item["rating"],
        },
        {
            "id": "reviews",
            "label": "Minimum reviews",
            "passed": item["reviews"] >= MIN_REVIEWS,
            "detail": f"{item['reviews']} vs {MIN_REVIEWS}",
            "value": item["reviews"],
        },
        {
            "id": "price",
            "label": "Price range",
            "passed": item["price"] <= price_limit,
            "detail": f"${item['price']} vs ${price_limit:.2f}",
            "value": item["price"],
        },
    ]


# ---------------------------------------------------------------------------
# Traced pipeline
# ---------------------------------------------------------------------------


async def select_competitor(product: dict, catalogue: list[dict]) -> None:
    """Run the pipeline, recording every decision in a trace."""
    t = trace("Competitor Selection", f"Find a benchmark competitor for {product['title']}")
    t.metadata({"source": "showcase"})

    keywords = ["stainless steel water bottle", "insulated bottle 32oz"]
    (
        t.step("Keyword Generation", StepType.LLM)
        .input({"title": product["title"]}, description="Seller product")
        .output({"keywords": keywords})
        .reasoning("Extracted material, capacity and insulation from the title")
        .metadata({"model": "demo-llm"})
        .end()
    )

    t.step("Candidate Search", StepType.SEARCH).input({"keywords": keywords}).output(
        {"total": len(catalogue), "ids": [c["id"] for c in catalogue]}
    ).end()

    step = t.step("Apply Filters", StepType.FILTER).input({"count": len(catalogue)})
    step.filters(
        [
            {"name": "min_rating", "rule": f"rating >= {MIN_RATING}", "value": MIN_RATING},
            {"name": "min_reviews", "rule": f"reviews >= {MIN_REVIEWS}", "value": MIN_REVIEWS},
            {"name": "price_range", "rule": f"price <= {MAX_PRICE_RATIO}x reference"},
        ]
    )
    evaluated = []
    for item in catalogue:
        evaluations = _evaluate(item)
        qualified = all(e["passed"] for e in evaluations)
        evaluated.append(
            {
                "id": item["id"],
                "label": item["title"],
                "metrics": {"price": item["price"], "rating": item["rating"], "reviews": item["reviews"]},
                "evaluations": evaluations,
                "qualified": qualified,
            }
        )
    qualified_items = [c for c in evaluated if c["qualified"]]
    step.candidates(evaluated).output({"qualified": len(qualified_items)}).end()

    if not qualified_items:
        await t.fail("No candidates passed the filters")
        return

    # Accessories slip through keyword search and filters; relevance ranking drops them
    relevant = [c for c in qualified_items if "brush" not in c["label"].lower()]
    best = max(relevant, key=lambda c: c["metrics"]["reviews"])
    ranked = [{**c, "selected": c["id"] == best["id"]} for c in qualified_items]
    (
        t.step("Rank and Select", StepType.RANK)
        .input({"count": len(qualified_items)})
        .candidates(ranked)
        .output({"selected": best["id"]})
        .reasoning(f"{best['label']} is the most reviewed relevant product; accessories excluded")
        .end()
    )

    await t.end({"success": True, "summary": f"Selected {best['label']}", "data": {"id": best["id"]}})


async def run_demo(base_path: Path) -> None:
    store = LocalTraceStore(base_path)
    configure(store=store)

    await select_competitor(PRODUCT, CATALOGUE)
    await select_competitor(PRODUCT, [c for c in CATALOGUE if c["rating"] < MIN_RATING])

    print("\n=== Persisted traces ===\n")
    items = await store.list()
    for item in items:
        print(f"{item.id}  {item.status:<9}  {item.steps_count} steps  {item.name}")

    latest = await store.get(items[0].id)
    assert latest is not None
    print(f"\nLatest trace: {latest.status}, {len(latest.steps)} steps")
    for recorded in latest.steps:
        picked = ", ".join(c.label for c in recorded.selected_candidates) or "-"
        print(f"  [{recorded.type}] {recorded.name} ({recorded.duration}ms) selected: {picked}")

    annotated = await store.update(items[0].id, {"metadata": {"reviewed": True}})
    assert annotated is not None
    print(f"\nAnnotated {annotated.id}: {annotated.metadata}")


def main() -> None:
    base_path = Path(mkdtemp(prefix="xray-showcase-"))
    asyncio.run(run_demo(base_path))
    print(f"\nTraces written to {base_path}")


if __name__ == "__main__":
    main()
