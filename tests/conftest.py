import asyncio
from datetime import date, datetime, timezone

import pytest
from django.apps import apps

from storefront.backends.locmem import LocMemBackend
from storefront.exceptions import BackendError
from storefront.runtime import StoreRuntime
from storefront.store import ContentStore

ADMIN_EMAIL = 'admin@tavola.test'
ADMIN_PASSWORD = 'correct-horse'
ASSET_BASE = 'https://tavola.supabase.co/storage/v1/object/public/restaurant-assets'


class FlakyBackend(LocMemBackend):
    """LocMemBackend whose reads of some tables fail"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.failing = set()

    async def select(self, table, columns=None, order_by=None, descending=False):
        if table in self.failing:
            raise BackendError(f"connection reset while reading {table}")
        return await super().select(table, columns=columns, order_by=order_by, descending=descending)

    async def select_single(self, table):
        if table in self.failing:
            raise BackendError(f"connection reset while reading {table}")
        return await super().select_single(table)


def seed_rows():
    return {
        'menu_categories': [{'name': 'Starters'}, {'name': 'Mains'}, {'name': 'Desserts'}],
        'menu_items': [
            {'name': 'Bruschetta', 'description': 'Grilled bread, tomato', 'price': '7.50',
             'image_url': f'{ASSET_BASE}/menu-images/bruschetta.jpg', 'category': 'Starters', 'is_highlighted': False},
            {'name': 'Osso Buco', 'description': 'Braised veal shank', 'price': '24.00',
             'image_url': f'{ASSET_BASE}/menu-images/osso-buco.jpg', 'category': 'Mains', 'is_highlighted': True},
            {'name': 'Tiramisu', 'description': 'Coffee, mascarpone', 'price': '8.00',
             'image_url': '', 'category': 'Desserts', 'is_highlighted': True},
        ],
        'offers': [
            {'title': 'Lunch set', 'description': 'Two courses', 'image_url': f'{ASSET_BASE}/offer-images/lunch.jpg',
             'valid_until': date(2030, 1, 1)},
        ],
        'faqs': [
            {'question': 'Do you take walk-ins?', 'answer': 'Yes, when tables are free.'},
        ],
        'reviews': [
            {'name': 'Ana', 'rating': 5, 'comment': 'Superb', 'review_date': date(2024, 5, 1),
             'status': 'approved', 'dish_name': 'Osso Buco'},
            {'name': 'Ben', 'rating': 4, 'comment': 'Lovely', 'review_date': date(2024, 6, 1),
             'status': 'approved', 'dish_name': None},
            {'name': 'Cy', 'rating': 2, 'comment': 'Slow service', 'review_date': date(2024, 7, 1),
             'status': 'pending', 'dish_name': None},
        ],
        'gallery_images': [
            {'src': f'{ASSET_BASE}/gallery-images/room.jpg', 'alt': 'Dining room', 'category': 'Ambiance'},
            {'src': f'{ASSET_BASE}/gallery-images/pasta.jpg', 'alt': 'Pasta', 'category': 'Food'},
        ],
        'chefs': [
            {'name': 'Giulia Rossi', 'title': 'Head Chef', 'bio': 'Trained in Bologna',
             'image_url': f'{ASSET_BASE}/chef-images/giulia.jpg'},
        ],
        'reservations': [
            {'name': 'Old', 'phone': '111', 'date': date(2024, 1, 1), 'time': '19:00', 'guests': 2,
             'status': 'Confirmed', 'created_at': datetime(2024, 1, 1, tzinfo=timezone.utc)},
            {'name': 'New', 'phone': '222', 'date': date(2024, 2, 1), 'time': '20:00', 'guests': 4,
             'status': 'Pending', 'created_at': datetime(2024, 2, 1, tzinfo=timezone.utc)},
        ],
    }


@pytest.fixture
def backend():
    return FlakyBackend(users={ADMIN_EMAIL: ADMIN_PASSWORD}, seed=seed_rows())


@pytest.fixture
def empty_backend():
    return FlakyBackend(users={ADMIN_EMAIL: ADMIN_PASSWORD})


@pytest.fixture
def run():
    """Run a store scenario to completion on a fresh event loop"""
    return asyncio.run


@pytest.fixture
def runtime(backend, monkeypatch):
    """The storefront app's runtime, hosting a manual-sync store over the in-memory backend"""
    runtime = StoreRuntime(lambda: ContentStore(backend, strategy='manual'))
    monkeypatch.setattr(apps.get_app_config('storefront'), 'runtime', runtime)
    runtime.run(runtime.store.session.wait_resolved())
    yield runtime
    runtime.shutdown()
