from django.urls import path
from . import views


urlpatterns = [
    # Public site
    path('menu/', views.MenuView.as_view(), name='menu'),
    path('menu/highlights/', views.MenuHighlightsView.as_view(), name='menu-highlights'),
    path('offers/', views.OfferListView.as_view(), name='offer-list'),
    path('gallery/', views.GalleryView.as_view(), name='gallery'),
    path('reviews/', views.ReviewListCreateView.as_view(), name='review-list-create'),
    path('faqs/', views.FAQListView.as_view(), name='faq-list'),
    path('chefs/', views.ChefListView.as_view(), name='chef-list'),
    path('info/', views.InfoView.as_view(), name='info'),
    path('status/', views.StatusView.as_view(), name='status'),
    path('reservations/', views.ReservationCreateView.as_view(), name='reservation-create'),
    path('contact/', views.ContactMessageCreateView.as_view(), name='contact-message-create'),

    # Admin session
    path('admin/login/', views.LoginView.as_view(), name='admin-login'),
    path('admin/logout/', views.LogoutView.as_view(), name='admin-logout'),
    path('admin/session/', views.SessionView.as_view(), name='admin-session'),
    path('admin/session/refresh/', views.SessionRefreshView.as_view(), name='admin-session-refresh'),

    # Admin content
    path('admin/menu-items/', views.AdminMenuItemListView.as_view(), name='admin-menu-item-list'),
    path('admin/menu-items/<int:pk>/', views.AdminMenuItemDetailView.as_view(), name='admin-menu-item-detail'),
    path('admin/offers/', views.AdminOfferListView.as_view(), name='admin-offer-list'),
    path('admin/offers/<int:pk>/', views.AdminOfferDetailView.as_view(), name='admin-offer-detail'),
    path('admin/chefs/', views.AdminChefListView.as_view(), name='admin-chef-list'),
    path('admin/chefs/<int:pk>/', views.AdminChefDetailView.as_view(), name='admin-chef-detail'),
    path('admin/gallery/', views.AdminGalleryListView.as_view(), name='admin-gallery-list'),
    path('admin/gallery/<int:pk>/', views.AdminGalleryDetailView.as_view(), name='admin-gallery-detail'),
    path('admin/reviews/', views.AdminReviewListView.as_view(), name='admin-review-list'),
    path('admin/reviews/<int:pk>/', views.AdminReviewDetailView.as_view(), name='admin-review-detail'),
    path('admin/reservations/', views.AdminReservationListView.as_view(), name='admin-reservation-list'),
    path('admin/reservations/<int:pk>/', views.AdminReservationDetailView.as_view(), name='admin-reservation-detail'),
    path('admin/categories/', views.AdminCategoryListView.as_view(), name='admin-category-list'),
    path('admin/categories/<str:name>/', views.AdminCategoryDetailView.as_view(), name='admin-category-detail'),
    path('admin/faqs/', views.AdminFAQView.as_view(), name='admin-faqs'),
    path('admin/contact-info/', views.AdminContactInfoView.as_view(), name='admin-contact-info'),
    path('admin/about-info/', views.AdminAboutInfoView.as_view(), name='admin-about-info'),
    path('admin/chef-special/', views.AdminChefSpecialView.as_view(), name='admin-chef-special'),
    path('admin/uploads/', views.AdminUploadView.as_view(), name='admin-upload'),
    path('admin/refresh/', views.AdminRefreshView.as_view(), name='admin-refresh'),
    path('admin/dashboard/', views.AdminDashboardView.as_view(), name='admin-dashboard'),
]
