import pytest

from expense_core.models import HighestCategory


async def test_scenario_food_and_transport(store, aggregator):
    await store.create("Food", 10)
    await store.create("Transport", 5)
    await store.create("Food", 20)

    assert await aggregator.grouped_totals() == {"Food": 30.0, "Transport": 5.0}
    assert await aggregator.total_sum() == 35.0
    assert await aggregator.highest_category() == HighestCategory("Food", 30.0)


async def test_empty_store_views(aggregator):
    assert await aggregator.grouped_totals() == {}
    assert await aggregator.total_sum() == 0
    assert await aggregator.highest_category() == HighestCategory(None, 0.0)


@pytest.mark.parametrize(
    "entries",
    [
        [("Food", 1.25), ("Rent", 700), ("Food", 3.5), ("Fun", 0.75)],
        [("Only", 42)],
        [("A", 1), ("B", 2), ("C", 3), ("A", 4), ("B", 5)],
    ],
)
async def test_grouped_totals_sum_to_total(store, aggregator, entries):
    for category, amount in entries:
        await store.create(category, amount)

    grouped = await aggregator.grouped_totals()

    assert sum(grouped.values()) == pytest.approx(await aggregator.total_sum())
    assert set(grouped) == {category for category, _ in entries}


async def test_highest_matches_maximum_of_grouped_totals(store, aggregator):
    for category, amount in [("Food", 10), ("Rent", 50), ("Food", 45), ("Fun", 5)]:
        await store.create(category, amount)

    grouped = await aggregator.grouped_totals()
    highest = await aggregator.highest_category()

    assert highest == HighestCategory("Food", 55.0)
    assert highest.amount == max(grouped.values())


async def test_highest_tie_picks_alphabetically_first_category(store, aggregator):
    await store.create("Transport", 15)
    await store.create("Books", 15)
    await store.create("Coffee", 4)

    assert await aggregator.highest_category() == HighestCategory("Books", 15.0)


async def test_views_reflect_deletions(store, aggregator):
    food = await store.create("Food", 10)
    await store.create("Transport", 5)

    await store.delete_by_id(food.id)

    assert await aggregator.grouped_totals() == {"Transport": 5.0}
    assert "Food" not in await aggregator.grouped_totals()

    await store.delete_all()

    assert await store.list() == []
    assert await aggregator.total_sum() == 0
    assert await aggregator.highest_category() == HighestCategory(None, 0.0)
