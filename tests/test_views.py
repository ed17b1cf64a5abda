import asyncio

import pytest
from django.apps import apps
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from storefront.backends.locmem import LocMemBackend
from storefront.runtime import StoreRuntime
from storefront.store import ContentStore

from .conftest import ADMIN_EMAIL, ADMIN_PASSWORD, ASSET_BASE


@pytest.fixture
def client(runtime):
    return APIClient()


@pytest.fixture
def admin_client(client):
    response = client.post('/api/admin/login/', {'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD}, format='json')
    assert response.status_code == 200
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
    return client


# =============== PUBLIC SITE ===============

def test_menu_grouped_by_category(client):
    response = client.get('/api/menu/')

    assert response.status_code == 200
    assert response.data['categories'] == ['Starters', 'Mains', 'Desserts']
    mains = response.data['items']['Mains']
    assert mains[0]['name'] == 'Osso Buco'
    assert mains[0]['price'] == '24.00'
    assert '/render/image/' in mains[0]['thumbnail_url']


def test_menu_search(client):
    response = client.get('/api/menu/', {'search': 'veal'})

    assert response.data['categories'] == ['Mains']


def test_menu_hides_items_of_deleted_category(admin_client, client):
    assert admin_client.delete('/api/admin/categories/Mains/').status_code == 204

    response = client.get('/api/menu/')

    assert response.data['categories'] == ['Starters', 'Desserts']
    assert 'Mains' not in response.data['items']


def test_highlights_and_chef_special(client):
    response = client.get('/api/menu/highlights/')

    assert [item['name'] for item in response.data['highlighted']] == ['Osso Buco', 'Tiramisu']
    # No image yet, the placeholder stands in
    assert response.data['highlighted'][1]['thumbnail_url'].startswith('https://placehold.co/')
    assert response.data['chef_special']['id'] == 1


def test_gallery_filter(client):
    response = client.get('/api/gallery/', {'category': 'Food'})

    assert [image['alt'] for image in response.data] == ['Pasta']
    assert 'width=600' in response.data[0]['thumbnail_url']
    assert len(client.get('/api/gallery/').data) == 2


def test_public_reviews_are_approved_only(client):
    response = client.get('/api/reviews/')

    assert [review['name'] for review in response.data] == ['Ben', 'Ana']


def test_public_lists(client):
    assert len(client.get('/api/offers/').data) == 1
    assert client.get('/api/faqs/').data[0]['question'] == 'Do you take walk-ins?'
    assert client.get('/api/chefs/').data[0]['name'] == 'Giulia Rossi'
    info = client.get('/api/info/').data
    assert set(info) == {'contact_info', 'about_info'}


def test_status(client):
    response = client.get('/api/status/')

    assert response.data == {'loaded': True, 'sync_strategy': 'manual', 'session': 'unauthenticated'}


def test_reservation_request(client, runtime):
    response = client.post('/api/reservations/', {
        'name': 'Jane', 'phone': '555', 'date': '2025-01-01', 'time': '19:00', 'guests': 2,
    }, format='json')

    assert response.status_code == 201
    assert response.data == {'success': True}
    jane = runtime.store.reservations[0]
    assert (jane['name'], jane['status']) == ('Jane', 'Pending')


def test_invalid_reservation_request(client):
    response = client.post('/api/reservations/', {'name': 'Jane', 'guests': 2}, format='json')

    assert response.status_code == 400
    assert response.data['success'] is False
    assert {'phone', 'date', 'time'} <= set(response.data['details'])


def test_review_submission_waits_for_approval(client, runtime):
    response = client.post('/api/reviews/', {'name': 'Dee', 'rating': 5, 'comment': 'Perfect'}, format='json')

    assert response.status_code == 201
    assert runtime.store.pending_reviews_count() == 2
    assert 'Dee' not in [review['name'] for review in client.get('/api/reviews/').data]


def test_contact_message(client, backend):
    response = client.post('/api/contact/', {'name': 'Eve', 'email': 'eve@example.com', 'message': 'Hi'}, format='json')

    assert response.status_code == 201
    assert backend.tables['contact_messages'][0]['name'] == 'Eve'


# =============== ADMIN SESSION ===============

def test_login_with_wrong_password(client):
    response = client.post('/api/admin/login/', {'email': ADMIN_EMAIL, 'password': 'nope'}, format='json')

    assert response.status_code == 400
    assert response.data['message'] == 'Invalid login credentials'


def test_session_state(admin_client):
    response = admin_client.get('/api/admin/session/')

    assert response.data == {'state': 'authenticated', 'email': ADMIN_EMAIL}


def test_admin_requires_token(client):
    response = client.get('/api/admin/dashboard/')

    assert response.status_code == 401
    assert response.data['message'] == 'Authentication required'


def test_admin_rejects_unknown_token(client):
    client.credentials(HTTP_AUTHORIZATION='Bearer not-the-token')

    assert client.get('/api/admin/dashboard/').status_code == 401


def test_logout_invalidates_token(admin_client):
    assert admin_client.post('/api/admin/logout/').status_code == 200

    assert admin_client.get('/api/admin/dashboard/').status_code == 401


def test_session_refresh(admin_client):
    response = admin_client.post('/api/admin/session/refresh/')

    assert response.status_code == 200
    admin_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
    assert admin_client.get('/api/admin/dashboard/').status_code == 200


class UnresolvedBackend(LocMemBackend):
    def __init__(self):
        super().__init__()

        async def never():
            await asyncio.sleep(3600)

        self.auth.get_session = never


def test_admin_answers_503_while_session_resolves(monkeypatch):
    runtime = StoreRuntime(lambda: ContentStore(UnresolvedBackend(), strategy='manual'))
    monkeypatch.setattr(apps.get_app_config('storefront'), 'runtime', runtime)
    try:
        client = APIClient()
        response = client.get('/api/admin/dashboard/')
        session = client.get('/api/admin/session/')
    finally:
        runtime.shutdown()

    assert response.status_code == 503
    assert response.data['message'] == 'Verifying session'
    assert session.data['state'] == 'resolving'


# =============== ADMIN CONTENT ===============

def test_dashboard(admin_client):
    response = admin_client.get('/api/admin/dashboard/')

    assert response.status_code == 200
    assert response.data['pending_reviews'] == 1
    assert response.data['items_per_category'] == {'Starters': 1, 'Mains': 1, 'Desserts': 1}


def test_menu_item_crud(admin_client, backend):
    created = admin_client.post('/api/admin/menu-items/', {
        'name': 'Panna Cotta', 'price': '7.00', 'category': 'Desserts',
    }, format='json')
    assert created.status_code == 201
    item_id = created.data['id']

    updated = admin_client.put(f'/api/admin/menu-items/{item_id}/', {
        'name': 'Panna Cotta', 'price': '7.50', 'category': 'Desserts', 'is_highlighted': True,
    }, format='json')
    assert updated.status_code == 200
    assert updated.data['price'] == '7.50'

    assert admin_client.get(f'/api/admin/menu-items/{item_id}/').data['is_highlighted'] is True
    assert admin_client.delete(f'/api/admin/menu-items/{item_id}/').status_code == 204
    assert admin_client.get(f'/api/admin/menu-items/{item_id}/').status_code == 404
    assert len(backend.tables['menu_items']) == 3


def test_invalid_menu_item(admin_client):
    response = admin_client.post('/api/admin/menu-items/', {'name': 'No price'}, format='json')

    assert response.status_code == 400
    assert 'price' in response.data['details']


def test_delete_offer_removes_its_image(admin_client, backend):
    backend.storage.objects['offer-images/lunch.jpg'] = b'jpeg'
    offer_id = backend.tables['offers'][0]['id']

    assert admin_client.delete(f'/api/admin/offers/{offer_id}/').status_code == 204
    assert backend.storage.objects == {}


def test_approve_review(admin_client, client):
    pending = [review for review in admin_client.get('/api/admin/reviews/').data if review['status'] == 'pending'][0]

    response = admin_client.patch(f"/api/admin/reviews/{pending['id']}/", {'status': 'approved'}, format='json')

    assert response.status_code == 200
    assert 'Cy' in [review['name'] for review in admin_client.get('/api/reviews/').data]


def test_reservation_status_cannot_return_to_pending(admin_client, backend):
    confirmed = next(row for row in backend.tables['reservations'] if row['status'] == 'Confirmed')

    response = admin_client.patch(f"/api/admin/reservations/{confirmed['id']}/", {'status': 'Pending'}, format='json')

    assert response.status_code == 400
    assert 'status' in response.data['details']


def test_delete_reservation(admin_client, backend):
    reservation_id = backend.tables['reservations'][0]['id']

    assert admin_client.delete(f'/api/admin/reservations/{reservation_id}/').status_code == 204
    assert len(backend.tables['reservations']) == 1


def test_categories(admin_client, runtime):
    assert admin_client.post('/api/admin/categories/', {'name': 'Drinks'}, format='json').status_code == 201
    assert admin_client.get('/api/admin/categories/').data[-1] == 'Drinks'
    assert admin_client.post('/api/admin/categories/', {'name': 'Drinks'}, format='json').status_code == 400
    assert admin_client.delete('/api/admin/categories/Drinks/').status_code == 204
    assert admin_client.delete('/api/admin/categories/Drinks/').status_code == 404
    assert 'Drinks' not in runtime.store.menu_categories


def test_category_body_must_be_an_object(admin_client, runtime):
    response = admin_client.post('/api/admin/categories/', [{'name': 'Drinks'}], format='json')

    assert response.status_code == 400
    assert response.data['message'] == 'Validation error'
    assert 'Drinks' not in runtime.store.menu_categories


def test_replace_faqs(admin_client, backend):
    response = admin_client.put('/api/admin/faqs/', [
        {'question': 'Parking?', 'answer': 'Street only.'},
        {'question': 'Gluten free?', 'answer': 'Ask your server.'},
    ], format='json')

    assert response.status_code == 200
    assert [faq['question'] for faq in response.data] == ['Parking?', 'Gluten free?']
    assert len(backend.tables['faqs']) == 2


def test_update_singletons(admin_client, runtime):
    response = admin_client.put('/api/admin/about-info/', {
        'story': 'Since 1987', 'why_us': ['Fresh pasta', 'Local wine'],
    }, format='json')
    assert response.status_code == 200
    assert runtime.store.about_info['why_us'] == ['Fresh pasta', 'Local wine']

    response = admin_client.put('/api/admin/chef-special/', {'name': 'Lasagne', 'price': '18.00'}, format='json')
    assert response.data['name'] == 'Lasagne'

    response = admin_client.put('/api/admin/contact-info/', {'email': 'not-an-email'}, format='json')
    assert response.status_code == 400


def test_upload(admin_client, backend):
    photo = SimpleUploadedFile('dish.png', b'\x89PNG fake', content_type='image/png')

    response = admin_client.post('/api/admin/uploads/', {'file': photo, 'folder': 'menu-images'}, format='multipart')

    assert response.status_code == 201
    assert response.data['url'].startswith(f'{ASSET_BASE}/menu-images/')
    assert response.data['url'].endswith('.png')
    assert len(backend.storage.objects) == 1


def test_upload_to_unknown_folder(admin_client):
    photo = SimpleUploadedFile('dish.png', b'\x89PNG fake', content_type='image/png')

    response = admin_client.post('/api/admin/uploads/', {'file': photo, 'folder': 'avatars'}, format='multipart')

    assert response.status_code == 400


def test_manual_refresh(admin_client, backend, runtime):
    backend.tables['chefs'] = []

    response = admin_client.post('/api/admin/refresh/')

    assert response.status_code == 200
    assert response.data['failed'] == []
    assert runtime.store.chefs == []
