from collections.abc import Mapping

from rest_framework import status, permissions
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.exceptions import NotFound, ParseError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from .authentication import get_runtime
from .permissions import IsStoreAdmin
from .serializers import (
    AboutInfoSerializer, ChefDisplaySerializer, ChefSerializer, ChefSpecialDisplaySerializer,
    ChefSpecialSerializer, ContactInfoSerializer, ContactMessageSerializer, FAQSerializer,
    GalleryImageDisplaySerializer, GalleryImageSerializer, LoginSerializer, MenuCategorySerializer,
    MenuItemDisplaySerializer, MenuItemSerializer, OfferDisplaySerializer, OfferSerializer,
    ReservationSerializer, ReviewSerializer, UploadSerializer,
)


def payload(request):
    """Request body as a plain dict, form data included"""
    data = request.data
    if not isinstance(data, Mapping):
        raise ParseError("Expected a JSON object.")
    return data.dict() if hasattr(data, 'dict') else dict(data)


class StoreContextMixin:
    """Mixin to hand views the content store and run its coroutines"""

    def get_runtime(self):
        return get_runtime()

    @property
    def store(self):
        return self.get_runtime().store

    def run(self, coroutine):
        return self.get_runtime().run(coroutine)

    def mutation_response(self, result, serializer_class=None, success_status=status.HTTP_200_OK):
        if not result:
            return Response({
                'error': True,
                'message': result.error,
                'details': result.details or {},
                'status_code': 400
            }, status=status.HTTP_400_BAD_REQUEST)
        data = result.data
        if serializer_class is not None and data is not None:
            data = serializer_class(data, many=isinstance(data, list)).data
        return Response(data, status=success_status)


# =============== PUBLIC SITE ===============

class MenuView(StoreContextMixin, APIView):
    """Menu items grouped by category"""
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('search', openapi.IN_QUERY, description="Match dish name or description", type=openapi.TYPE_STRING),
        ]
    )
    def get(self, request):
        grouped = self.store.menu_by_category(search=request.query_params.get('search'))
        return Response({
            'categories': list(grouped),
            'items': {
                category: MenuItemDisplaySerializer(items, many=True).data
                for category, items in grouped.items()
            },
        })


class MenuHighlightsView(StoreContextMixin, APIView):
    """Highlighted dishes and the chef's special for the home page"""
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        store = self.store
        return Response({
            'highlighted': MenuItemDisplaySerializer(store.highlighted_items(), many=True).data,
            'chef_special': ChefSpecialDisplaySerializer(store.chef_special).data,
        })


class OfferListView(StoreContextMixin, APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response(OfferDisplaySerializer(self.store.offers, many=True).data)


class GalleryView(StoreContextMixin, APIView):
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('category', openapi.IN_QUERY, description="Food or Ambiance", type=openapi.TYPE_STRING),
        ]
    )
    def get(self, request):
        images = self.store.gallery_images
        category = request.query_params.get('category')
        if category and category != 'All':
            images = [image for image in images if image.get('category') == category]
        return Response(GalleryImageDisplaySerializer(images, many=True).data)


class ReviewListCreateView(StoreContextMixin, APIView):
    """
    get: Approved reviews, newest first
    post: Submit a review, published once approved
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response(ReviewSerializer(self.store.approved_reviews(), many=True).data)

    @swagger_auto_schema(request_body=ReviewSerializer, responses={201: 'Submitted', 400: 'Bad Request'})
    def post(self, request):
        result = self.run(self.store.add_review(payload(request)))
        return guest_response(result)


class FAQListView(StoreContextMixin, APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response(FAQSerializer(self.store.faqs, many=True).data)


class ChefListView(StoreContextMixin, APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response(ChefDisplaySerializer(self.store.chefs, many=True).data)


class InfoView(StoreContextMixin, APIView):
    """Contact details, opening hours and the about page"""
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        store = self.store
        return Response({
            'contact_info': ContactInfoSerializer(store.contact_info).data,
            'about_info': AboutInfoSerializer(store.about_info).data,
        })


class StatusView(StoreContextMixin, APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        store = self.store
        return Response({
            'loaded': store.loaded,
            'sync_strategy': store.strategy,
            'session': store.session.state,
        })


class ReservationCreateView(StoreContextMixin, APIView):
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(request_body=ReservationSerializer, responses={201: 'Requested', 400: 'Bad Request'})
    def post(self, request):
        result = self.run(self.store.add_reservation(payload(request)))
        return guest_response(result)


class ContactMessageCreateView(StoreContextMixin, APIView):
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(request_body=ContactMessageSerializer, responses={201: 'Sent', 400: 'Bad Request'})
    def post(self, request):
        result = self.run(self.store.add_contact_message(payload(request)))
        return guest_response(result)


def guest_response(result):
    if result:
        return Response({'success': True}, status=status.HTTP_201_CREATED)
    return Response({
        'success': False,
        'message': result.error,
        'details': result.details or {},
    }, status=status.HTTP_400_BAD_REQUEST)


# =============== ADMIN SESSION ===============

class LoginView(StoreContextMixin, APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @swagger_auto_schema(
        request_body=LoginSerializer,
        responses={
            200: openapi.Schema(
                type=openapi.TYPE_OBJECT,
                properties={
                    'access': openapi.Schema(type=openapi.TYPE_STRING),
                    'refresh': openapi.Schema(type=openapi.TYPE_STRING),
                    'expires_at': openapi.Schema(type=openapi.TYPE_STRING, format=openapi.FORMAT_DATETIME),
                    'email': openapi.Schema(type=openapi.TYPE_STRING),
                }
            ),
            400: 'Invalid login credentials'
        }
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.run(self.store.session.sign_in(**serializer.validated_data))
        if not result:
            return self.mutation_response(result)
        session = result.data
        return Response({
            'access': session.access_token,
            'refresh': session.refresh_token,
            'expires_at': session.expires_at,
            'email': session.email,
        })


class LogoutView(StoreContextMixin, APIView):
    permission_classes = [IsStoreAdmin]

    def post(self, request):
        return self.mutation_response(self.run(self.store.session.sign_out()))


class SessionView(StoreContextMixin, APIView):
    """Where the admin console stands: resolving, authenticated or unauthenticated"""
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        session = self.store.session
        return Response({
            'state': session.state,
            'email': session.session.email if session.session else None,
        })


class SessionRefreshView(StoreContextMixin, APIView):
    permission_classes = [IsStoreAdmin]

    def post(self, request):
        result = self.run(self.store.session.refresh())
        if not result:
            return self.mutation_response(result)
        return Response({'access': result.data.access_token, 'expires_at': result.data.expires_at})


# =============== ADMIN CONTENT ===============

class AdminCollectionView(StoreContextMixin, APIView):
    """
    get: All records of a collection
    post: Add a record
    """
    permission_classes = [IsStoreAdmin]
    collection = None
    serializer_class = None
    add_method = None

    def get(self, request):
        return Response(self.serializer_class(getattr(self.store, self.collection), many=True).data)

    def post(self, request):
        result = self.run(getattr(self.store, self.add_method)(payload(request)))
        return self.mutation_response(result, self.serializer_class, status.HTTP_201_CREATED)


class AdminRecordView(StoreContextMixin, APIView):
    """
    get: One record
    put: Replace a record
    patch: Change some fields of a record
    delete: Delete a record and the image it owns
    """
    permission_classes = [IsStoreAdmin]
    collection = None
    serializer_class = None
    update_method = None
    delete_method = None
    delete_by_id = False

    def get_record(self, pk):
        record = self.store.find(self.collection, pk)
        if record is None:
            raise NotFound(f"No {self.collection} record with id {pk}.")
        return record

    def get(self, request, pk):
        return Response(self.serializer_class(self.get_record(pk)).data)

    def put(self, request, pk):
        self.get_record(pk)
        return self.update(dict(payload(request), id=pk))

    def patch(self, request, pk):
        record = self.get_record(pk)
        return self.update({**record, **payload(request), 'id': pk})

    def update(self, record):
        result = self.run(getattr(self.store, self.update_method)(record))
        return self.mutation_response(result, self.serializer_class)

    def delete(self, request, pk):
        record = self.get_record(pk)
        target = pk if self.delete_by_id else record
        result = self.run(getattr(self.store, self.delete_method)(target))
        if not result:
            return self.mutation_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminMenuItemListView(AdminCollectionView):
    collection = 'menu_items'
    serializer_class = MenuItemSerializer
    add_method = 'add_menu_item'


class AdminMenuItemDetailView(AdminRecordView):
    collection = 'menu_items'
    serializer_class = MenuItemSerializer
    update_method = 'update_menu_item'
    delete_method = 'delete_menu_item'


class AdminOfferListView(AdminCollectionView):
    collection = 'offers'
    serializer_class = OfferSerializer
    add_method = 'add_offer'


class AdminOfferDetailView(AdminRecordView):
    collection = 'offers'
    serializer_class = OfferSerializer
    update_method = 'update_offer'
    delete_method = 'delete_offer'


class AdminChefListView(AdminCollectionView):
    collection = 'chefs'
    serializer_class = ChefSerializer
    add_method = 'add_chef'


class AdminChefDetailView(AdminRecordView):
    collection = 'chefs'
    serializer_class = ChefSerializer
    update_method = 'update_chef'
    delete_method = 'delete_chef'


class AdminGalleryListView(AdminCollectionView):
    collection = 'gallery_images'
    serializer_class = GalleryImageSerializer
    add_method = 'add_gallery_image'


class AdminGalleryDetailView(AdminRecordView):
    collection = 'gallery_images'
    serializer_class = GalleryImageSerializer
    update_method = 'update_gallery_image'
    delete_method = 'delete_gallery_image'


class AdminReviewListView(AdminCollectionView):
    collection = 'reviews'
    serializer_class = ReviewSerializer
    http_method_names = ['get', 'head', 'options']


class AdminReviewDetailView(AdminRecordView):
    collection = 'reviews'
    serializer_class = ReviewSerializer
    update_method = 'update_review'
    delete_method = 'delete_review'
    delete_by_id = True


class AdminReservationListView(AdminCollectionView):
    collection = 'reservations'
    serializer_class = ReservationSerializer
    http_method_names = ['get', 'head', 'options']


class AdminReservationDetailView(AdminRecordView):
    collection = 'reservations'
    serializer_class = ReservationSerializer
    update_method = 'update_reservation'
    delete_method = 'delete_reservation'
    delete_by_id = True


class AdminCategoryListView(StoreContextMixin, APIView):
    permission_classes = [IsStoreAdmin]

    def get(self, request):
        return Response(self.store.menu_categories)

    @swagger_auto_schema(request_body=MenuCategorySerializer, responses={201: 'Created', 400: 'Bad Request'})
    def post(self, request):
        result = self.run(self.store.add_menu_category(payload(request).get('name', '')))
        return self.mutation_response(result, success_status=status.HTTP_201_CREATED)


class AdminCategoryDetailView(StoreContextMixin, APIView):
    permission_classes = [IsStoreAdmin]

    def delete(self, request, name):
        if name not in self.store.menu_categories:
            raise NotFound(f"No menu category named {name}.")
        result = self.run(self.store.delete_menu_category(name))
        if not result:
            return self.mutation_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminFAQView(StoreContextMixin, APIView):
    """
    get: All FAQs
    put: Replace every FAQ with the given list
    """
    permission_classes = [IsStoreAdmin]

    def get(self, request):
        return Response(FAQSerializer(self.store.faqs, many=True).data)

    @swagger_auto_schema(request_body=FAQSerializer(many=True), responses={200: FAQSerializer(many=True)})
    def put(self, request):
        faqs = request.data if isinstance(request.data, list) else payload(request).get('faqs', [])
        result = self.run(self.store.update_faqs(faqs))
        return self.mutation_response(result, FAQSerializer)


class AdminSingletonView(StoreContextMixin, APIView):
    permission_classes = [IsStoreAdmin]
    attribute = None
    serializer_class = None
    update_method = None

    def get(self, request):
        return Response(self.serializer_class(getattr(self.store, self.attribute)).data)

    def put(self, request):
        result = self.run(getattr(self.store, self.update_method)(payload(request)))
        return self.mutation_response(result, self.serializer_class)


class AdminContactInfoView(AdminSingletonView):
    attribute = 'contact_info'
    serializer_class = ContactInfoSerializer
    update_method = 'update_contact_info'


class AdminAboutInfoView(AdminSingletonView):
    attribute = 'about_info'
    serializer_class = AboutInfoSerializer
    update_method = 'update_about_info'


class AdminChefSpecialView(AdminSingletonView):
    attribute = 'chef_special'
    serializer_class = ChefSpecialSerializer
    update_method = 'update_chef_special'


class AdminUploadView(StoreContextMixin, APIView):
    """Store an image under one of the asset folders and return its public URL"""
    permission_classes = [IsStoreAdmin]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @swagger_auto_schema(request_body=UploadSerializer, responses={201: 'Uploaded', 400: 'Upload failed'})
    def post(self, request):
        serializer = UploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        upload = self.run(self.store.upload_image(**serializer.validated_data))
        if not upload.ok:
            return Response({
                'error': True,
                'message': upload.error,
                'details': {},
                'status_code': 400
            }, status=status.HTTP_400_BAD_REQUEST)
        return Response({'url': upload.url}, status=status.HTTP_201_CREATED)


class AdminRefreshView(StoreContextMixin, APIView):
    """Run a full refresh now"""
    permission_classes = [IsStoreAdmin]

    def post(self, request):
        report = self.run(self.store.fetch_data())
        return Response(report.as_dict())


class AdminDashboardView(StoreContextMixin, APIView):
    permission_classes = [IsStoreAdmin]

    def get(self, request):
        return Response(self.store.dashboard_stats())
