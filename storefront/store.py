"""
The content store: an in-memory mirror of the restaurant's content tables.

``fetch_data`` replaces every collection wholesale from the backend; each
collection is read independently, so one failed read keeps the previous
value of that collection only. Mutations write through to the backend and
only touch local state once the backend confirmed the write. They never
raise: every mutation returns a ``MutationResult``.
"""
import asyncio
import logging
from collections import namedtuple

from django.core.exceptions import ImproperlyConfigured
from rest_framework.exceptions import ValidationError

from . import assets, defaults, serializers
from .backends import get_backend
from .conf import store_settings
from .exceptions import BackendError
from .refresh import ChangeFeedListener, PeriodicRefresher
from .results import MutationResult, RefreshReport, UploadResult
from .session import SessionManager
from .signals import store_refreshed

logger = logging.getLogger(__name__)

PUSH = 'push'
POLL = 'poll'
MANUAL = 'manual'
STRATEGIES = (PUSH, POLL, MANUAL)

Collection = namedtuple(
    'Collection',
    ['name', 'table', 'order_by', 'descending', 'single', 'column'],
    defaults=(None, False, False, None),
)

COLLECTIONS = (
    Collection('menu_items', 'menu_items'),
    Collection('contact_info', 'contact_info', single=True),
    Collection('about_info', 'about_info', single=True),
    Collection('offers', 'offers'),
    Collection('faqs', 'faqs'),
    Collection('reviews', 'reviews', order_by='review_date', descending=True),
    Collection('gallery_images', 'gallery_images'),
    Collection('chef_special', 'chef_special', single=True),
    Collection('menu_categories', 'menu_categories', column='name'),
    Collection('chefs', 'chefs'),
    Collection('reservations', 'reservations', order_by='created_at', descending=True),
)

PENDING = 'Pending'


class ContentStore:
    def __init__(self, backend, strategy=None, poll_interval=None, change_debounce=None):
        config = store_settings()
        self.backend = backend
        self.strategy = strategy or config['SYNC_STRATEGY']
        if self.strategy not in STRATEGIES:
            raise ImproperlyConfigured(
                f"Unknown sync strategy {self.strategy!r}, expected one of {', '.join(STRATEGIES)}"
            )
        self.poll_interval = poll_interval if poll_interval is not None else config['POLL_INTERVAL']
        self.change_debounce = change_debounce if change_debounce is not None else config['CHANGE_DEBOUNCE']

        self.menu_items = []
        self.offers = []
        self.faqs = []
        self.reviews = []
        self.gallery_images = []
        self.chefs = []
        self.reservations = []
        self.menu_categories = []
        self.contact_info = defaults.initial(defaults.CONTACT_INFO)
        self.about_info = defaults.initial(defaults.ABOUT_INFO)
        self.chef_special = defaults.initial(defaults.CHEF_SPECIAL)
        self.loaded = False

        self.session = SessionManager(backend.auth)
        self.refresher = None
        self._started = False

    # =============== LIFECYCLE ===============

    async def start(self):
        """
        Resolve the session, attach the sync strategy and run the first refresh.

        The strategy is attached before the first fetch so that changes landing
        during it are not missed. Calling start again is a no-op.
        """
        if self._started:
            return
        self._started = True
        self.session.start()
        if self.strategy == PUSH:
            self.refresher = ChangeFeedListener(self, debounce=self.change_debounce)
        elif self.strategy == POLL:
            self.refresher = PeriodicRefresher(self, interval=self.poll_interval)
        if self.refresher is not None:
            await self.refresher.start()
        logger.info(f"Content store started with {self.strategy} sync")
        await self.fetch_data()

    async def close(self):
        if self.refresher is not None:
            await self.refresher.stop()
            self.refresher = None
        self.session.close()
        self._started = False
        logger.info("Content store closed")

    # =============== REFRESH ===============

    async def _read(self, collection):
        if collection.single:
            return await self.backend.select_single(collection.table)
        if collection.column:
            rows = await self.backend.select(collection.table, columns=[collection.column])
            return [row[collection.column] for row in rows]
        return await self.backend.select(
            collection.table, order_by=collection.order_by, descending=collection.descending
        )

    async def fetch_data(self):
        results = await asyncio.gather(
            *(self._read(collection) for collection in COLLECTIONS), return_exceptions=True
        )
        report = RefreshReport()
        for collection, result in zip(COLLECTIONS, results):
            if isinstance(result, BaseException):
                logger.error(f"Error fetching {collection.name}: {result}")
                report.failed.append(collection.name)
                continue
            setattr(self, collection.name, result)
            report.refreshed.append(collection.name)
        self.loaded = True
        if report.failed:
            logger.warning(f"Content refresh incomplete, kept previous {', '.join(report.failed)}")
        store_refreshed.send_robust(sender=self.__class__, store=self, report=report)
        return report

    # =============== LOCAL STATE ===============

    def find(self, name, record_id):
        for row in getattr(self, name):
            if row.get('id') == record_id:
                return row
        return None

    def _upsert(self, name, rows):
        # Rebuilt, never mutated, so readers holding the old list are unaffected
        updated = {row['id']: row for row in rows}
        collection = [updated.pop(row['id'], row) for row in getattr(self, name)]
        collection.extend(updated.values())
        setattr(self, name, collection)

    def _discard(self, name, record_id):
        setattr(self, name, [row for row in getattr(self, name) if row.get('id') != record_id])

    # =============== WRITE HELPERS ===============

    @staticmethod
    def _validate(serializer_class, data, many=False):
        serializer = serializer_class(data=data, many=many)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    @staticmethod
    def _failure(action, exc):
        if isinstance(exc, ValidationError):
            logger.warning(f"Rejected {action}: {exc.detail}")
            return MutationResult.failure("Invalid data", details=exc.detail)
        logger.error(f"Error {action}: {exc}")
        return MutationResult.failure(exc)

    async def _add(self, name, serializer_class, record, refresh=False):
        try:
            values = self._validate(serializer_class, record)
            rows = await self.backend.insert(name, [dict(values)])
        except (ValidationError, BackendError) as exc:
            return self._failure(f"adding to {name}", exc)
        if refresh:
            await self.fetch_data()
        else:
            self._upsert(name, rows)
        return MutationResult.success(rows[0] if rows else None)

    async def _update(self, name, serializer_class, record, image_field=None, check=None):
        record_id = record.get('id')
        if record_id is None:
            return MutationResult.failure(f"Cannot update {name} without an id")
        previous = self.find(name, record_id)
        try:
            values = self._validate(serializer_class, record)
            if check is not None:
                check(previous, values)
            rows = await self.backend.update(name, dict(values), {'id': record_id})
        except (ValidationError, BackendError) as exc:
            return self._failure(f"updating {name} {record_id}", exc)
        if not rows:
            logger.error(f"Error updating {name} {record_id}: no such row")
            return MutationResult.failure(f"No {name} row with id {record_id}")
        self._upsert(name, rows)
        if image_field and previous:
            await self._drop_replaced_image(previous.get(image_field), rows[0].get(image_field))
        return MutationResult.success(rows[0])

    async def _delete(self, name, record_id, image_url=None):
        if image_url:
            # Best effort, a failed asset delete never blocks the record delete
            await self.delete_image(image_url)
        try:
            await self.backend.delete(name, {'id': record_id})
        except BackendError as exc:
            return self._failure(f"deleting {name} {record_id}", exc)
        self._discard(name, record_id)
        return MutationResult.success()

    async def _update_singleton(self, name, serializer_class, values, image_field=None):
        previous = getattr(self, name)
        try:
            values = self._validate(serializer_class, values)
            rows = await self.backend.update(name, dict(values), {'id': defaults.SINGLETON_ID})
        except (ValidationError, BackendError) as exc:
            return self._failure(f"updating {name}", exc)
        if not rows:
            logger.error(f"Error updating {name}: row {defaults.SINGLETON_ID} does not exist")
            return MutationResult.failure(f"{name} row {defaults.SINGLETON_ID} does not exist")
        setattr(self, name, rows[0])
        if image_field:
            await self._drop_replaced_image(previous.get(image_field), rows[0].get(image_field))
        return MutationResult.success(rows[0])

    async def _drop_replaced_image(self, old_url, new_url):
        if old_url and old_url != new_url:
            await self.delete_image(old_url)

    # =============== MENU ===============

    async def add_menu_item(self, item):
        return await self._add('menu_items', serializers.MenuItemSerializer, item)

    async def update_menu_item(self, item):
        return await self._update('menu_items', serializers.MenuItemSerializer, item, image_field='image_url')

    async def delete_menu_item(self, item):
        return await self._delete('menu_items', item['id'], item.get('image_url'))

    async def add_menu_category(self, name):
        try:
            name = self._validate(serializers.MenuCategorySerializer, {'name': name})['name']
            await self.backend.insert('menu_categories', [{'name': name}])
        except (ValidationError, BackendError) as exc:
            return self._failure("adding menu category", exc)
        if name not in self.menu_categories:
            self.menu_categories = self.menu_categories + [name]
        return MutationResult.success(name)

    async def delete_menu_category(self, name):
        """Menu items keep their category name, nothing cascades"""
        try:
            await self.backend.delete('menu_categories', {'name': name})
        except BackendError as exc:
            return self._failure(f"deleting menu category {name}", exc)
        self.menu_categories = [category for category in self.menu_categories if category != name]
        return MutationResult.success(name)

    async def update_chef_special(self, special):
        return await self._update_singleton(
            'chef_special', serializers.ChefSpecialSerializer, special, image_field='image_url'
        )

    # =============== SITE CONTENT ===============

    async def add_offer(self, offer):
        return await self._add('offers', serializers.OfferSerializer, offer)

    async def update_offer(self, offer):
        return await self._update('offers', serializers.OfferSerializer, offer, image_field='image_url')

    async def delete_offer(self, offer):
        return await self._delete('offers', offer['id'], offer.get('image_url'))

    async def add_chef(self, chef):
        return await self._add('chefs', serializers.ChefSerializer, chef)

    async def update_chef(self, chef):
        return await self._update('chefs', serializers.ChefSerializer, chef, image_field='image_url')

    async def delete_chef(self, chef):
        return await self._delete('chefs', chef['id'], chef.get('image_url'))

    async def add_gallery_image(self, image):
        return await self._add('gallery_images', serializers.GalleryImageSerializer, image)

    async def update_gallery_image(self, image):
        return await self._update('gallery_images', serializers.GalleryImageSerializer, image, image_field='src')

    async def delete_gallery_image(self, image):
        return await self._delete('gallery_images', image['id'], image.get('src'))

    async def update_faqs(self, faqs):
        """
        Replace every FAQ with the given list.

        Existing rows are deleted and the list is inserted without its ids, so
        every FAQ comes back with a fresh id. Two admins saving at once lose
        each other's edits.
        """
        try:
            values = self._validate(serializers.FAQSerializer, list(faqs), many=True)
        except ValidationError as exc:
            return self._failure("updating faqs", exc)
        try:
            await self.backend.delete('faqs')
        except BackendError as exc:
            return self._failure("clearing faqs", exc)
        self.faqs = []
        if not values:
            return MutationResult.success([])
        try:
            rows = await self.backend.insert('faqs', [dict(value) for value in values])
        except BackendError as exc:
            return self._failure("inserting faqs", exc)
        self.faqs = rows
        return MutationResult.success(rows)

    async def update_contact_info(self, info):
        return await self._update_singleton('contact_info', serializers.ContactInfoSerializer, info)

    async def update_about_info(self, info):
        return await self._update_singleton('about_info', serializers.AboutInfoSerializer, info)

    # =============== GUEST INPUT ===============

    async def add_review(self, review):
        """Public submission, held as pending until approved"""
        return await self._add(
            'reviews', serializers.ReviewSerializer, dict(review, status='pending'), refresh=True
        )

    async def update_review(self, review):
        return await self._update('reviews', serializers.ReviewSerializer, review)

    async def delete_review(self, review_id):
        return await self._delete('reviews', review_id)

    async def add_reservation(self, reservation):
        return await self._add(
            'reservations', serializers.ReservationSerializer, dict(reservation, status=PENDING), refresh=True
        )

    async def update_reservation(self, reservation):
        return await self._update(
            'reservations', serializers.ReservationSerializer, reservation, check=_check_reservation_status
        )

    async def delete_reservation(self, reservation_id):
        return await self._delete('reservations', reservation_id)

    async def add_contact_message(self, message):
        try:
            values = self._validate(serializers.ContactMessageSerializer, message)
            await self.backend.insert('contact_messages', [dict(values)])
        except (ValidationError, BackendError) as exc:
            return self._failure("sending contact message", exc)
        return MutationResult.success()

    # =============== ASSETS ===============

    async def upload_image(self, file, folder):
        if folder not in assets.ASSET_FOLDERS:
            return UploadResult(None, f"Unknown asset folder: {folder}")
        return await assets.upload_image(self.backend.storage, file, folder)

    async def delete_image(self, url):
        return await assets.delete_image(self.backend.storage, url, self.backend.bucket)

    # =============== READ HELPERS ===============

    def menu_by_category(self, search=None):
        """Items grouped by listed category name, in category order, empty groups left out"""
        items = self.menu_items
        if search:
            needle = search.lower()
            items = [
                item for item in items
                if needle in item.get('name', '').lower() or needle in item.get('description', '').lower()
            ]
        grouped = {category: [] for category in self.menu_categories}
        for item in items:
            # Items of a deleted category stay in the table but leave the menu
            if item.get('category') in grouped:
                grouped[item['category']].append(item)
        return {category: rows for category, rows in grouped.items() if rows}

    def highlighted_items(self, limit=2):
        highlighted = [item for item in self.menu_items if item.get('is_highlighted')]
        return (highlighted or self.menu_items)[:limit]

    def approved_reviews(self):
        return [review for review in self.reviews if review.get('status') == 'approved']

    def pending_reviews_count(self):
        return sum(1 for review in self.reviews if review.get('status') == 'pending')

    def dashboard_stats(self):
        return {
            'menu_items': len(self.menu_items),
            'pending_reviews': self.pending_reviews_count(),
            'offers': len(self.offers),
            'menu_categories': len(self.menu_categories),
            'pending_reservations': sum(1 for row in self.reservations if row.get('status') == PENDING),
            'items_per_category': {
                category: sum(1 for item in self.menu_items if item.get('category') == category)
                for category in self.menu_categories
            },
        }

    def snapshot(self):
        """Every collection, as served to the public site"""
        return {collection.name: getattr(self, collection.name) for collection in COLLECTIONS}


def _check_reservation_status(previous, values):
    if previous is None:
        return
    if previous.get('status') != PENDING and values.get('status') == PENDING:
        raise ValidationError({'status': [f"A {previous['status']} reservation cannot go back to Pending."]})


def build_store(backend=None, **options):
    """A content store over the configured backend"""
    if backend is None:
        backend = get_backend()
    return ContentStore(backend, **options)
