"""
Static catalog snapshot served when the database is unavailable.

Prices are stored in cents, review ratings range 1..5.
"""

CATEGORIES = [
    {"id": "1", "name": "Beauty & Spa"},
    {"id": "2", "name": "Home Services"},
    {"id": "3", "name": "Auto Care"},
    {"id": "4", "name": "Photography"},
    {"id": "5", "name": "Fitness"},
    {"id": "6", "name": "Tutoring"},
    {"id": "7", "name": "Repairs"},
]

VENDORS = [
    {"id": "ven_stylehub", "display_name": "StyleHub Studio", "city": "New York", "region": "NY"},
    {"id": "ven_cleanpro", "display_name": "CleanPro Services", "city": "New York", "region": "NY"},
    {"id": "ven_autoshine", "display_name": "AutoShine Garage", "city": "Brooklyn", "region": "NY"},
    {"id": "ven_lensart", "display_name": "LensArt Studio", "city": "Queens", "region": "NY"},
    {"id": "ven_fitlife", "display_name": "FitLife Gym", "city": "New York", "region": "NY"},
    {"id": "ven_brightminds", "display_name": "BrightMinds Academy", "city": "Jersey City", "region": "NJ"},
]

SERVICES = [
    {
        "id": "1",
        "title": "Premium Haircut & Styling",
        "description": "Professional haircut and styling tailored to your look.",
        "price_cents": 4500,
        "duration_minutes": 45,
        "category_id": "1",
        "vendor_id": "ven_stylehub",
        "image_url": "/placeholder.svg",
        "active": True,
    },
    {
        "id": "2",
        "title": "Deep House Cleaning",
        "description": "Whole-home deep cleaning by vetted professionals.",
        "price_cents": 12000,
        "duration_minutes": 180,
        "category_id": "2",
        "vendor_id": "ven_cleanpro",
        "image_url": "/placeholder.svg",
        "active": True,
    },
    {
        "id": "3",
        "title": "Full Car Detailing",
        "description": "Interior and exterior detailing for a showroom finish.",
        "price_cents": 8900,
        "duration_minutes": 120,
        "category_id": "3",
        "vendor_id": "ven_autoshine",
        "image_url": "/placeholder.svg",
        "active": True,
    },
    {
        "id": "4",
        "title": "Portrait Photography",
        "description": "Studio-quality portraits with retouching included.",
        "price_cents": 15000,
        "duration_minutes": 60,
        "category_id": "4",
        "vendor_id": "ven_lensart",
        "image_url": "/placeholder.svg",
        "active": True,
    },
    {
        "id": "5",
        "title": "Personal Training Session",
        "description": "1:1 training session personalized to your goals.",
        "price_cents": 6000,
        "duration_minutes": 60,
        "category_id": "5",
        "vendor_id": "ven_fitlife",
        "image_url": "/placeholder.svg",
        "active": True,
    },
    {
        "id": "6",
        "title": "Math Tutoring",
        "description": "Private math tutoring from middle school to college.",
        "price_cents": 3500,
        "duration_minutes": 60,
        "category_id": "6",
        "vendor_id": "ven_brightminds",
        "image_url": "/placeholder.svg",
        "active": True,
    },
]

REVIEWS = [
    {"id": "rev_1", "service_id": "1", "rating": 5, "comment": "Loved it."},
    {"id": "rev_2", "service_id": "1", "rating": 5, "comment": "Great stylist."},
    {"id": "rev_3", "service_id": "1", "rating": 4, "comment": "Solid experience."},
    {"id": "rev_4", "service_id": "2", "rating": 5, "comment": "House spotless."},
    {"id": "rev_5", "service_id": "2", "rating": 4, "comment": "Very good."},
    {"id": "rev_6", "service_id": "3", "rating": 5, "comment": "Car looks new."},
    {"id": "rev_7", "service_id": "3", "rating": 4, "comment": "Nice work."},
    {"id": "rev_8", "service_id": "4", "rating": 5, "comment": "Amazing shots."},
    {"id": "rev_9", "service_id": "4", "rating": 5, "comment": "Highly recommend."},
    {"id": "rev_10", "service_id": "5", "rating": 4, "comment": "Tough but worth it."},
    {"id": "rev_11", "service_id": "6", "rating": 5, "comment": "Clear explanations."},
]
