"""
Static classifier tables: profile types, business categories, listing types
and social platforms.

Each table is keyed by a closed string enum. Lookups accept any string (or
None) and fall back to a documented default instead of raising, so display
code never has to null-check a classifier.
"""

from enum import Enum
from typing import Dict, List, Optional

from lokalfinds.api.v1.schemas.classifier import (
    CategoryInfo,
    ListingTypeInfo,
    ProfileTab,
    ProfileTypeInfo,
    SocialPlatformInfo,
)


class ProfileTypeId(str, Enum):
    STORE = "store"
    SERVICE_PROVIDER = "service-provider"
    FREELANCER = "freelancer"
    PRODUCER = "producer"
    HOME_SELLER = "home-seller"
    STUDENT = "student"
    INFORMAL_WORKER = "informal-worker"
    EVENTS_VENUE = "events-venue"
    REAL_ESTATE = "real-estate"


class ListingTypeId(str, Enum):
    PRODUCT = "product"
    SERVICE = "service"
    SUPPLY = "supply"
    PORTFOLIO = "portfolio"
    BOOKING = "booking"
    LABOR = "labor"


class SocialPlatformId(str, Enum):
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    TWITTER = "twitter"
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    LINKEDIN = "linkedin"
    WHATSAPP = "whatsapp"
    TELEGRAM = "telegram"
    VIBER = "viber"
    SHOPEE = "shopee"
    LAZADA = "lazada"
    LINK = "link"


# Business profile types
PROFILE_TYPES: Dict[ProfileTypeId, ProfileTypeInfo] = {
    ProfileTypeId.STORE: ProfileTypeInfo(
        id="store",
        name="Store/Reseller",
        description="Businesses with a physical or online storefront that primarily sell tangible goods.",
        icon="storefront",
        can_have=["products", "services"],
        color="#3498db",
    ),
    ProfileTypeId.SERVICE_PROVIDER: ProfileTypeInfo(
        id="service-provider",
        name="Service Provider",
        description="Professionals and businesses offering skilled labor or expertise.",
        icon="construct",
        can_have=["services", "bookings"],
        color="#e74c3c",
    ),
    ProfileTypeId.FREELANCER: ProfileTypeInfo(
        id="freelancer",
        name="Freelancer",
        description="Independent professionals offering project-based work or specialized skills.",
        icon="laptop",
        can_have=["services", "portfolio"],
        color="#9b59b6",
    ),
    ProfileTypeId.PRODUCER: ProfileTypeInfo(
        id="producer",
        name="Producer/Manufacturer",
        description="Businesses that create or manufacture their own products from raw materials.",
        icon="hammer",
        can_have=["products", "supplies"],
        color="#f39c12",
    ),
    ProfileTypeId.HOME_SELLER: ProfileTypeInfo(
        id="home-seller",
        name="Home-Based Seller",
        description="Entrepreneurs running their business from home without a formal storefront.",
        icon="home",
        can_have=["products", "services"],
        color="#27ae60",
    ),
    ProfileTypeId.STUDENT: ProfileTypeInfo(
        id="student",
        name="Student/Hobbyist",
        description="Students or hobbyists earning from their skills and passion projects.",
        icon="school",
        can_have=["services", "products", "portfolio"],
        color="#16a085",
    ),
    ProfileTypeId.INFORMAL_WORKER: ProfileTypeInfo(
        id="informal-worker",
        name="Informal Worker",
        description="Individuals offering on-demand services, daily gigs, or flexible labor.",
        icon="person",
        can_have=["services", "labor"],
        color="#34495e",
    ),
    ProfileTypeId.EVENTS_VENUE: ProfileTypeInfo(
        id="events-venue",
        name="Events & Venues",
        description="Businesses that host or organize events, and event equipment rentals.",
        icon="megaphone",
        can_have=["bookings", "services", "portfolio"],
        color="#008080",
    ),
    ProfileTypeId.REAL_ESTATE: ProfileTypeInfo(
        id="real-estate",
        name="Real Estate & Rentals",
        description="Property owners, agents, or managers offering spaces for rent.",
        icon="key",
        can_have=["bookings", "portfolio", "services"],
        color="#795548",
    ),
}

UNKNOWN_PROFILE_TYPE = ProfileTypeInfo(
    id="unknown",
    name="Unknown Type",
    description="",
    icon="business",
    can_have=[],
    color="#95a5a6",
)


# Listing types (what can be offered)
LISTING_TYPES: Dict[ListingTypeId, ListingTypeInfo] = {
    ListingTypeId.PRODUCT: ListingTypeInfo(
        id="product",
        name="Product",
        description="Physical items for sale",
        icon="cube",
        fields=["name", "price", "description", "images", "inStock", "category"],
    ),
    ListingTypeId.SERVICE: ListingTypeInfo(
        id="service",
        name="Service",
        description="Services and skilled work",
        icon="construct",
        fields=["name", "price", "description", "duration", "location", "category"],
    ),
    ListingTypeId.SUPPLY: ListingTypeInfo(
        id="supply",
        name="Supply/Wholesale",
        description="Bulk supplies for other businesses",
        icon="layers",
        fields=["name", "price", "description", "minimumOrder", "availability"],
    ),
    ListingTypeId.PORTFOLIO: ListingTypeInfo(
        id="portfolio",
        name="Portfolio Item",
        description="Showcase of previous work",
        icon="images",
        fields=["title", "description", "images", "category", "completedDate"],
    ),
    ListingTypeId.BOOKING: ListingTypeInfo(
        id="booking",
        name="Bookable Service",
        description="Time-slot based services",
        icon="calendar",
        fields=["name", "price", "duration", "availability", "location"],
    ),
    ListingTypeId.LABOR: ListingTypeInfo(
        id="labor",
        name="Labor/Gig Work",
        description="Physical work and temporary jobs",
        icon="fitness",
        fields=["name", "rate", "description", "availability", "location"],
    ),
}


def _category(id: str, name: str, icon: str, types: List[str]) -> CategoryInfo:
    return CategoryInfo(id=id, name=name, icon=icon, types=types)


# Business categories, in display order. "other" must stay last: it is the default.
BUSINESS_CATEGORIES: List[CategoryInfo] = [
    # Retail & products
    _category("sari-sari", "Sari-sari Store", "storefront", ["store", "home-seller"]),
    _category("food-restaurant", "Food & Restaurant", "restaurant", ["store", "home-seller"]),
    _category("groceries", "Groceries & Fresh Food", "leaf", ["store", "producer", "home-seller"]),
    _category("clothing", "Clothing & Fashion", "shirt", ["store", "home-seller", "student"]),
    _category("electronics", "Electronics & Gadgets", "phone-portrait", ["store", "freelancer"]),
    _category("pharmacy", "Health & Pharmacy", "medical", ["store"]),
    _category("hardware", "Hardware & Tools", "hammer", ["store", "producer"]),
    _category("beauty-products", "Beauty & Cosmetics", "color-palette", ["store", "home-seller"]),
    _category("books-education", "Books & Educational", "library", ["store", "student"]),
    _category("handicrafts", "Handicrafts & Art", "brush", ["home-seller", "student", "producer"]),
    # Services & repairs
    _category("beauty-salon", "Beauty & Personal Care", "cut", ["service-provider", "freelancer"]),
    _category("repair-tech", "Tech Repair & IT", "laptop", ["service-provider", "freelancer", "student"]),
    _category("repair-appliance", "Appliance & Electronics Repair", "construct", ["service-provider", "informal-worker"]),
    _category("automotive", "Automotive & Transport", "car", ["service-provider", "informal-worker"]),
    _category("construction", "Construction & Renovation", "hammer", ["service-provider", "informal-worker"]),
    _category("cleaning", "Cleaning & Maintenance", "home", ["service-provider", "informal-worker"]),
    _category("laundry", "Laundry & Garment Care", "shirt", ["service-provider", "home-seller"]),
    _category("delivery", "Delivery & Transport", "bicycle", ["service-provider", "informal-worker"]),
    # Professional services
    _category("education", "Education & Tutoring", "school", ["freelancer", "student", "service-provider"]),
    _category("creative", "Creative & Design", "color-palette", ["freelancer", "student"]),
    _category("photography", "Photography & Video", "camera", ["freelancer", "student"]),
    _category("writing", "Writing & Translation", "create", ["freelancer", "student"]),
    _category("accounting", "Accounting & Legal", "calculator", ["freelancer", "service-provider"]),
    _category("health-wellness", "Health & Wellness", "fitness", ["service-provider", "freelancer"]),
    _category("events", "Events & Entertainment", "musical-notes", ["service-provider", "freelancer"]),
    # Production & supply
    _category("manufacturing", "Manufacturing & Production", "cog", ["producer"]),
    _category("agriculture", "Agriculture & Farming", "leaf", ["producer", "home-seller"]),
    _category("food-production", "Food Production & Catering", "restaurant", ["producer", "home-seller"]),
    _category("wholesale", "Wholesale & Supply", "layers", ["producer", "store"]),
    # Specialized
    _category("pet-services", "Pet Care & Services", "paw", ["service-provider", "freelancer"]),
    _category("childcare", "Childcare & Babysitting", "heart", ["service-provider", "informal-worker"]),
    _category("digital", "Digital Services", "globe", ["freelancer", "student"]),
    _category(
        "other",
        "Other Services",
        "business",
        ["store", "service-provider", "freelancer", "producer", "home-seller", "student", "informal-worker"],
    ),
]

_CATEGORIES_BY_ID: Dict[str, CategoryInfo] = {c.id: c for c in BUSINESS_CATEGORIES}
DEFAULT_CATEGORY = _CATEGORIES_BY_ID["other"]


SOCIAL_PLATFORMS: Dict[SocialPlatformId, SocialPlatformInfo] = {
    SocialPlatformId.FACEBOOK: SocialPlatformInfo(id="facebook", icon="logo-facebook", color="#1877F2"),
    SocialPlatformId.INSTAGRAM: SocialPlatformInfo(id="instagram", icon="logo-instagram", color="#E4405F"),
    SocialPlatformId.TWITTER: SocialPlatformInfo(id="twitter", icon="logo-twitter", color="#1DA1F2"),
    SocialPlatformId.YOUTUBE: SocialPlatformInfo(id="youtube", icon="logo-youtube", color="#FF0000"),
    SocialPlatformId.TIKTOK: SocialPlatformInfo(id="tiktok", icon="logo-tiktok", color="#000000"),
    SocialPlatformId.LINKEDIN: SocialPlatformInfo(id="linkedin", icon="logo-linkedin", color="#0A66C2"),
    SocialPlatformId.WHATSAPP: SocialPlatformInfo(id="whatsapp", icon="logo-whatsapp", color="#25D366"),
    SocialPlatformId.TELEGRAM: SocialPlatformInfo(id="telegram", icon="send", color="#0088CC"),
    SocialPlatformId.VIBER: SocialPlatformInfo(id="viber", icon="call", color="#665CAC"),
    SocialPlatformId.SHOPEE: SocialPlatformInfo(id="shopee", icon="storefront", color="#FF5722"),
    SocialPlatformId.LAZADA: SocialPlatformInfo(id="lazada", icon="bag", color="#0F146D"),
    SocialPlatformId.LINK: SocialPlatformInfo(id="link", icon="link", color="#6B7280"),
}
DEFAULT_SOCIAL_PLATFORM = SOCIAL_PLATFORMS[SocialPlatformId.LINK]

# Listing sections a profile can have, mapped to details-screen tabs
TAB_LABELS: Dict[str, str] = {
    "products": "Products",
    "services": "Services",
    "bookings": "Bookings",
    "portfolio": "Portfolio",
    "labor": "Labor",
}


def _as_enum(enum_cls, value: Optional[str]):
    try:
        return enum_cls(value)
    except ValueError:
        return None


def get_profile_type_info(type_id: Optional[str]) -> ProfileTypeInfo:
    """Profile type record, or the "Unknown Type" default for missing/unknown ids."""
    key = _as_enum(ProfileTypeId, type_id)
    if key is None:
        return UNKNOWN_PROFILE_TYPE
    return PROFILE_TYPES[key]


def get_category_info(category_id: Optional[str]) -> CategoryInfo:
    """Category record, defaulting to the "other" category."""
    return _CATEGORIES_BY_ID.get(category_id or "", DEFAULT_CATEGORY)


def get_listing_type_info(type_id: Optional[str]) -> ListingTypeInfo:
    key = _as_enum(ListingTypeId, type_id)
    return LISTING_TYPES[key or ListingTypeId.PRODUCT]


def get_social_platform_info(platform: Optional[str]) -> SocialPlatformInfo:
    """Icon and color for a social platform; unknown platforms get the generic link style."""
    key = _as_enum(SocialPlatformId, platform)
    if key is None:
        return DEFAULT_SOCIAL_PLATFORM
    return SOCIAL_PLATFORMS[key]


def get_categories_for_profile_type(type_id: Optional[str]) -> List[CategoryInfo]:
    return [c for c in BUSINESS_CATEGORIES if type_id in c.types]


def get_profile_types_for_category(category_id: Optional[str]) -> List[ProfileTypeInfo]:
    category = get_category_info(category_id)
    return [t for t in PROFILE_TYPES.values() if t.id in category.types]


def get_listing_types_for_profile(type_id: Optional[str]) -> List[ListingTypeInfo]:
    """
    Listing types a profile type may offer.

    can_have uses plural section names ("products", "supplies"), listing type
    ids are singular.
    """
    profile_type = get_profile_type_info(type_id)
    singular = {_singular(section) for section in profile_type.can_have}
    return [lt for lt in LISTING_TYPES.values() if lt.id in singular]


def _singular(section: str) -> str:
    if section.endswith("ies"):
        return section[:-3] + "y"
    if section.endswith("s"):
        return section[:-1]
    return section


def search_categories(term: Optional[str]) -> List[CategoryInfo]:
    """Case-insensitive match on category name or id; empty term returns everything."""
    if not term:
        return list(BUSINESS_CATEGORIES)
    needle = term.lower()
    return [
        c for c in BUSINESS_CATEGORIES
        if needle in c.name.lower() or needle in c.id.lower()
    ]


def get_tabs_for_profile(type_id: Optional[str]) -> List[ProfileTab]:
    """Details tab first, then one tab per listing section the profile type supports."""
    tabs = [ProfileTab(key="details", label="Details")]
    for section in get_profile_type_info(type_id).can_have:
        label = TAB_LABELS.get(section)
        if label:
            tabs.append(ProfileTab(key=section, label=label))
    return tabs


def normalize_social_url(url: str) -> str:
    """Prefix https:// when the owner entered a bare domain."""
    url = url.strip()
    if not url or url.startswith("http"):
        return url
    return f"https://{url}"
