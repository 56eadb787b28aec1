"""
In-memory sample data shared by the lessons.

Loaded once at import and never persisted. Lessons that "modify" people
work on their own PeopleStore copy (see people.py), so these tuples stay
exactly as written here.
"""

_IMAGE_BASE = "https://www.course-api.com/images/store"


PRODUCTS = (
    {
        "id": 1,
        "name": "albany sofa",
        "image": f"{_IMAGE_BASE}/product-1.jpeg",
        "price": 39.95,
        "desc": "I'm baby direct trade farm-to-table hell of, YOLO readymade raw denim venmo whatever organic gluten-free kitsch schlitz irony af flexitarian.",
    },
    {
        "id": 2,
        "name": "entertainment center",
        "image": f"{_IMAGE_BASE}/product-2.jpeg",
        "price": 29.98,
        "desc": "Fixie slow-carb green juice, selvage ugh jianbing beard affogato. Iceland chia cronut, pour-over knausgaard ethical everyday carry.",
    },
    {
        "id": 3,
        "name": "albany sectional",
        "image": f"{_IMAGE_BASE}/product-3.jpeg",
        "price": 10.99,
        "desc": "Post-ironic portland shabby chic echo park, banjo fashion axe cornhole. Raclette taxidermy hammock vice asymmetrical.",
    },
    {
        "id": 4,
        "name": "leather sofa",
        "image": f"{_IMAGE_BASE}/product-4.jpeg",
        "price": 9.99,
        "desc": "Kombucha chartreuse gastropub, vaporware tumeric fingerstache mlkshk helvetica letterpress pabst drinking vinegar.",
    },
    {
        "id": 5,
        "name": "wooden chair",
        "image": f"{_IMAGE_BASE}/product-5.jpeg",
        "price": 14.5,
        "desc": "Cloud bread single-origin coffee tote bag, meditation hot chicken roof party ramps glossier.",
    },
    {
        "id": 6,
        "name": "wooden table",
        "image": f"{_IMAGE_BASE}/product-6.jpeg",
        "price": 49.0,
        "desc": "Pinterest lumbersexual yr everyday carry, intelligentsia narwhal tattooed vexillologist.",
    },
)


PEOPLE = (
    {"id": 1, "name": "john"},
    {"id": 2, "name": "peter"},
    {"id": 3, "name": "susan"},
    {"id": 4, "name": "anna"},
    {"id": 5, "name": "emma"},
)
