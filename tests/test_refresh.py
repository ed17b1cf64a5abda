import asyncio
import threading

from storefront.store import ContentStore


def new_offer(number):
    return {'title': f'Offer {number}', 'description': '', 'image_url': '', 'valid_until': '2031-01-01'}


def test_push_strategy_coalesces_a_burst_into_one_refresh(empty_backend, run):
    async def scenario():
        store = ContentStore(empty_backend, strategy='push', change_debounce=0.05)
        await store.start()
        listener = store.refresher
        for number in range(5):
            await empty_backend.insert('offers', [new_offer(number)])
        await asyncio.sleep(0.3)
        await store.close()
        return store, listener

    store, listener = run(scenario())

    assert listener.notifications == 5
    assert listener.refreshes == 1
    assert [offer['title'] for offer in store.offers] == [f'Offer {number}' for number in range(5)]


def test_push_strategy_holds_one_subscription(empty_backend, run):
    async def scenario():
        store = ContentStore(empty_backend, strategy='push', change_debounce=0.01)
        await store.start()
        await store.start()
        during = len(empty_backend._feed)
        await store.close()
        return during, len(empty_backend._feed)

    assert run(scenario()) == (1, 0)


def test_untracked_table_does_not_trigger_refresh(empty_backend, run):
    async def scenario():
        store = ContentStore(empty_backend, strategy='push', change_debounce=0.01)
        await store.start()
        await store.add_contact_message({'name': 'Eve', 'email': 'eve@example.com', 'message': 'Hi'})
        listener = store.refresher
        await asyncio.sleep(0.1)
        await store.close()
        return listener

    listener = run(scenario())

    assert listener.notifications == 0
    assert listener.refreshes == 0


def test_notification_from_another_thread(empty_backend, run):
    async def scenario():
        store = ContentStore(empty_backend, strategy='push', change_debounce=0.01)
        await store.start()
        listener = store.refresher
        empty_backend.tables['chefs'].append({'id': 1, 'name': 'Marco', 'title': 'Pastry Chef', 'bio': '', 'image_url': ''})
        worker = threading.Thread(target=listener.notify)
        worker.start()
        worker.join()
        await asyncio.sleep(0.2)
        await store.close()
        return store, listener

    store, listener = run(scenario())

    assert listener.refreshes == 1
    assert store.chefs[0]['name'] == 'Marco'


def test_change_during_refresh_schedules_one_more(empty_backend, run):
    async def scenario():
        store = ContentStore(empty_backend, strategy='push', change_debounce=0.01)
        await store.start()
        listener = store.refresher
        fetch = store.fetch_data

        async def slow_fetch():
            await asyncio.sleep(0.1)
            return await fetch()

        store.fetch_data = slow_fetch
        await empty_backend.insert('offers', [new_offer(1)])
        await asyncio.sleep(0.05)
        await empty_backend.insert('offers', [new_offer(2)])
        await empty_backend.insert('offers', [new_offer(3)])
        await asyncio.sleep(0.5)
        await store.close()
        return store, listener

    store, listener = run(scenario())

    assert listener.refreshes == 2
    assert len(store.offers) == 3


def test_poll_strategy_refreshes_periodically(empty_backend, run):
    async def scenario():
        store = ContentStore(empty_backend, strategy='poll', poll_interval=0.05)
        await store.start()
        # Written behind the change feed's back, only a poll can see it
        empty_backend.tables['faqs'].append({'id': 1, 'question': 'Dogs allowed?', 'answer': 'On the terrace.'})
        await asyncio.sleep(0.2)
        await store.close()
        return store

    store = run(scenario())

    assert store.faqs == [{'id': 1, 'question': 'Dogs allowed?', 'answer': 'On the terrace.'}]


def test_manual_strategy_does_not_subscribe(empty_backend, run):
    async def scenario():
        store = ContentStore(empty_backend, strategy='manual')
        await store.start()
        subscribed = len(empty_backend._feed)
        await empty_backend.insert('faqs', [{'question': 'Q', 'answer': 'A'}])
        await store.close()
        return store, subscribed

    store, subscribed = run(scenario())

    assert subscribed == 0
    assert store.loaded
    assert store.faqs == []


def test_start_runs_first_refresh(backend, run):
    async def scenario():
        store = ContentStore(backend, strategy='push', change_debounce=0.01)
        await store.start()
        await store.close()
        return store

    store = run(scenario())

    assert store.loaded
    assert len(store.menu_items) == 3
