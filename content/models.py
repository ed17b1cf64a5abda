from datetime import date

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


# Fixed key of the one row held by each singleton table
SINGLETON_ID = 1


# =============== MENU ===============

class MenuCategory(models.Model):
    name = models.CharField(max_length=100, unique=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'menu_categories'
        ordering = ['id']
        verbose_name_plural = "Menu Categories"


class MenuItem(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    image_url = models.URLField(max_length=500, blank=True)
    # Plain category name, deliberately not a foreign key to MenuCategory
    category = models.CharField(max_length=100)
    is_highlighted = models.BooleanField(default=False)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'menu_items'
        ordering = ['id']


class ChefSpecial(models.Model):
    """Dish of the day, a single row"""
    name = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    image_url = models.URLField(max_length=500, blank=True)

    def __str__(self):
        return self.name or "Chef special"

    class Meta:
        db_table = 'chef_special'
        verbose_name_plural = "Chef Special"


# =============== SITE CONTENT ===============

class Offer(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    image_url = models.URLField(max_length=500, blank=True)
    valid_until = models.DateField()

    def __str__(self):
        return self.title

    class Meta:
        db_table = 'offers'
        ordering = ['id']


class FAQ(models.Model):
    question = models.CharField(max_length=500)
    answer = models.TextField()

    def __str__(self):
        return self.question

    class Meta:
        db_table = 'faqs'
        ordering = ['id']
        verbose_name = "FAQ"
        verbose_name_plural = "FAQs"


class GalleryImage(models.Model):
    CATEGORY_CHOICES = [
        ("Food", "Food"),
        ("Ambiance", "Ambiance"),
    ]
    src = models.URLField(max_length=500)
    alt = models.CharField(max_length=255, blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)

    def __str__(self):
        return self.alt or self.src

    class Meta:
        db_table = 'gallery_images'
        ordering = ['id']


class Chef(models.Model):
    name = models.CharField(max_length=255)
    title = models.CharField(max_length=255)
    bio = models.TextField(blank=True)
    image_url = models.URLField(max_length=500, blank=True)

    def __str__(self):
        return f"{self.name} ({self.title})"

    class Meta:
        db_table = 'chefs'
        ordering = ['id']


class ContactInfo(models.Model):
    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)
    whatsapp = models.CharField(max_length=50, blank=True)
    address = models.TextField(blank=True)
    map_url = models.URLField(max_length=1000, blank=True)
    # [{"day": "Mon - Fri", "hours": "12:00 - 23:00"}, ...]
    opening_hours = models.JSONField(default=list, blank=True)
    # {"facebook": "", "instagram": "", "twitter": ""}
    socials = models.JSONField(default=dict, blank=True)

    def __str__(self):
        return "Contact info"

    class Meta:
        db_table = 'contact_info'
        verbose_name_plural = "Contact Info"


class AboutInfo(models.Model):
    story = models.TextField(blank=True)
    mission = models.TextField(blank=True)
    vision = models.TextField(blank=True)
    why_us = models.JSONField(default=list, blank=True)
    culinary_philosophy = models.TextField(blank=True)

    def __str__(self):
        return "About info"

    class Meta:
        db_table = 'about_info'
        verbose_name_plural = "About Info"


# =============== GUEST INPUT ===============

class Review(models.Model):
    STATUS_CHOICES = (
        ("pending", "pending"),
        ("approved", "approved"),
    )
    name = models.CharField(max_length=255)
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField()
    review_date = models.DateField(default=date.today)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")
    dish_name = models.CharField(max_length=255, null=True, blank=True)

    def __str__(self):
        return f"{self.name} - {self.rating}/5 ({self.status})"

    class Meta:
        db_table = 'reviews'
        ordering = ['-review_date']


class Reservation(models.Model):
    STATUS_CHOICES = (
        ("Pending", "Pending"),
        ("Confirmed", "Confirmed"),
        ("Cancelled", "Cancelled"),
    )
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=50)
    date = models.DateField()
    time = models.TimeField()
    guests = models.PositiveSmallIntegerField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="Pending")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.name} - {self.date} {self.time} ({self.guests} guests)"

    class Meta:
        db_table = 'reservations'
        ordering = ['-created_at']


class ContactMessage(models.Model):
    name = models.CharField(max_length=255)
    email = models.EmailField()
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Message from {self.name}"

    class Meta:
        db_table = 'contact_messages'
        ordering = ['-created_at']
