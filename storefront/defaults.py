"""
Initial values of the store before the first refresh lands.

Collections start empty; singletons start as blank rows so consumers can
render them without null checks.
"""
from copy import deepcopy

SINGLETON_ID = 1

CONTACT_INFO = {
    'phone': '',
    'email': '',
    'whatsapp': '',
    'address': '',
    'map_url': '',
    'opening_hours': [],
    'socials': {'facebook': '', 'instagram': '', 'twitter': ''},
}

ABOUT_INFO = {
    'story': '',
    'mission': '',
    'vision': '',
    'why_us': [],
    'culinary_philosophy': '',
}

CHEF_SPECIAL = {
    'id': SINGLETON_ID,
    'name': '',
    'description': '',
    'price': 0,
    'image_url': '',
}


def initial(value):
    return deepcopy(value)
