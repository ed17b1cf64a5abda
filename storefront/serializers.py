from datetime import date

from rest_framework import serializers

from .conf import store_settings
from .images import get_transformed_image_url

# Rows are plain dicts held by the content store, so these are plain
# serializers: validating a payload never touches the database.

REVIEW_STATUSES = ['pending', 'approved']
RESERVATION_STATUSES = ['Pending', 'Confirmed', 'Cancelled']
GALLERY_CATEGORIES = ['Food', 'Ambiance']


# =============== MENU ===============

class MenuItemSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(allow_blank=True, default='')
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    image_url = serializers.URLField(max_length=500, allow_blank=True, default='')
    category = serializers.CharField(max_length=100)
    is_highlighted = serializers.BooleanField(default=False)


class MenuCategorySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)

    def validate_name(self, value):
        """Category names are compared as entered, minus surrounding space"""
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Category name cannot be blank.")
        return value


class ChefSpecialSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(max_length=255, allow_blank=True, default='')
    description = serializers.CharField(allow_blank=True, default='')
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, default=0)
    image_url = serializers.URLField(max_length=500, allow_blank=True, default='')


# =============== SITE CONTENT ===============

class OfferSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(allow_blank=True, default='')
    image_url = serializers.URLField(max_length=500, allow_blank=True, default='')
    valid_until = serializers.DateField()


class FAQSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    question = serializers.CharField(max_length=500)
    answer = serializers.CharField()


class GalleryImageSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    src = serializers.URLField(max_length=500)
    alt = serializers.CharField(max_length=255, allow_blank=True, default='')
    category = serializers.ChoiceField(choices=GALLERY_CATEGORIES)


class ChefSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(max_length=255)
    title = serializers.CharField(max_length=255)
    bio = serializers.CharField(allow_blank=True, default='')
    image_url = serializers.URLField(max_length=500, allow_blank=True, default='')


class OpeningHoursSerializer(serializers.Serializer):
    day = serializers.CharField(max_length=100)
    hours = serializers.CharField(max_length=100)


class SocialsSerializer(serializers.Serializer):
    facebook = serializers.CharField(allow_blank=True, default='')
    instagram = serializers.CharField(allow_blank=True, default='')
    twitter = serializers.CharField(allow_blank=True, default='')


class ContactInfoSerializer(serializers.Serializer):
    phone = serializers.CharField(max_length=50, allow_blank=True, default='')
    email = serializers.EmailField(allow_blank=True, default='')
    whatsapp = serializers.CharField(max_length=50, allow_blank=True, default='')
    address = serializers.CharField(allow_blank=True, default='')
    map_url = serializers.URLField(max_length=1000, allow_blank=True, default='')
    opening_hours = OpeningHoursSerializer(many=True, default=list)
    socials = SocialsSerializer(default=dict)


class AboutInfoSerializer(serializers.Serializer):
    story = serializers.CharField(allow_blank=True, default='')
    mission = serializers.CharField(allow_blank=True, default='')
    vision = serializers.CharField(allow_blank=True, default='')
    why_us = serializers.ListField(child=serializers.CharField(), default=list)
    culinary_philosophy = serializers.CharField(allow_blank=True, default='')


# =============== GUEST INPUT ===============

class ReviewSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(max_length=255)
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField()
    review_date = serializers.DateField(default=date.today)
    status = serializers.ChoiceField(choices=REVIEW_STATUSES, default='pending')
    dish_name = serializers.CharField(max_length=255, allow_null=True, allow_blank=True, default=None)


class ReservationSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(max_length=255)
    phone = serializers.CharField(max_length=50)
    date = serializers.DateField()
    time = serializers.TimeField()
    guests = serializers.IntegerField(min_value=1)
    status = serializers.ChoiceField(choices=RESERVATION_STATUSES, default='Pending')
    created_at = serializers.DateTimeField(read_only=True)


class ContactMessageSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    message = serializers.CharField()


# =============== ADMIN ===============

class LoginSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})


class UploadSerializer(serializers.Serializer):
    file = serializers.FileField()
    folder = serializers.CharField()


# =============== DISPLAY ===============

class ThumbnailMixin(serializers.Serializer):
    """Adds a resized rendition of the record's image for list pages"""
    thumbnail_url = serializers.SerializerMethodField()

    image_field = 'image_url'
    thumbnail_width = 400

    def get_thumbnail_url(self, obj):
        return get_transformed_image_url(
            obj.get(self.image_field),
            width=self.context.get('thumbnail_width', self.thumbnail_width),
            host=store_settings()['IMAGE_HOST'],
        )


class MenuItemDisplaySerializer(ThumbnailMixin, MenuItemSerializer):
    pass


class OfferDisplaySerializer(ThumbnailMixin, OfferSerializer):
    pass


class ChefDisplaySerializer(ThumbnailMixin, ChefSerializer):
    pass


class GalleryImageDisplaySerializer(ThumbnailMixin, GalleryImageSerializer):
    image_field = 'src'
    thumbnail_width = 600


class ChefSpecialDisplaySerializer(ThumbnailMixin, ChefSpecialSerializer):
    pass
