from django.contrib import admin

from .models import (
    AboutInfo, Chef, ChefSpecial, ContactInfo, ContactMessage, FAQ,
    GalleryImage, MenuCategory, MenuItem, Offer, Reservation, Review,
)


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'price', 'is_highlighted']
    list_filter = ['category', 'is_highlighted']
    search_fields = ['name', 'description']


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ['name', 'rating', 'review_date', 'status', 'dish_name']
    list_filter = ['status', 'rating']


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'date', 'time', 'guests', 'status', 'created_at']
    list_filter = ['status', 'date']


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'created_at']
    readonly_fields = ['created_at']


admin.site.register([MenuCategory, Offer, FAQ, GalleryImage, Chef, ContactInfo, AboutInfo, ChefSpecial])
